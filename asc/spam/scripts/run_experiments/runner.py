import logging
import os
from typing import Callable, List, Optional, Tuple

from asc.shared.classification import ClassificationModel, MethodEvaluation
from asc.shared.classification.persistence import build_model_filename, load_model, save_model
from asc.shared.experiments import (
    DatasetPartitioner,
    LabeledDataset,
    MetricsAggregator,
    OutlierResampler,
    OutlierTest,
    SeededRandomSource,
    create_outlier_test,
)
from asc.spam.dataset.loader import (
    ARFF_FILE_NAME,
    create_empty_pattern_dataset,
    load_dataset,
    save_dataset_arff,
    save_dataset_csv,
)
from asc.spam.dataset.metadata import DataSetMetadata
from .config import ExperimentConfig, MethodConfig
from .report_manager import ReportManager
from .results import ConfigurationResult
from .summary import SummaryFormatter


logger = logging.getLogger(__name__)

DatasetLoader = Callable[[str], Tuple[LabeledDataset, int]]
ClassifierBuilder = Callable[[MethodConfig], ClassificationModel]

TRAINING_SET_FILE_NAME = "training.csv"
TESTING_SET_FILE_NAME = "testing.csv"


class ExperimentRunner:
    """
    Runs every (method, dataset) configuration of an experiment.

    For each configuration the runner resets a fresh seed source and
    aggregation window, then executes the scheduled number of runs: partition,
    train, test, record. Once the scheduled runs are exhausted the outlier
    resampler may discard runs; each discarded run is replaced by one more run
    and the check repeats when the replacements are done.

    Errors are not caught here: a failing configuration aborts the experiment.
    """

    def __init__(
        self,
        config: ExperimentConfig,
        sink: Callable[[str], None] = print,
        dataset_loader: DatasetLoader = load_dataset,
        classifier_builder: Optional[ClassifierBuilder] = None,
        outlier_test: Optional[OutlierTest] = None,
        report_manager: Optional[ReportManager] = None,
    ):
        """
        Args:
            config: Experiment configuration
            sink: Receives every header and summary line
            dataset_loader: Maps a dataset folder to (dataset, number of total features)
            classifier_builder: Creates the untrained base classifier of a method
            outlier_test: Test used by the resampler; built from the config when None
            report_manager: CSV report; built from config.output_report_path when None
        """
        self.config = config
        self.sink = sink
        self.dataset_loader = dataset_loader
        self.classifier_builder = classifier_builder or (lambda method: method.build_classifier(config.random_state))
        self.outlier_test = outlier_test or create_outlier_test(config.outlier_method, config.outlier_threshold)
        if report_manager is None and config.output_report_path is not None:
            report_manager = ReportManager(config.output_report_path)
        self.report_manager = report_manager
        self.formatter = SummaryFormatter(format_durations=config.format_durations)
        self.partitioner = DatasetPartitioner()

    def run(self) -> List[ConfigurationResult]:
        """Run all configurations, method by method"""
        datasets = self.config.get_datasets()
        results = []

        for method in self.config.methods:
            method_log_handler = self._attach_method_log(method)
            try:
                self.sink(self.formatter.header())
                for metadata in datasets:
                    results.append(self.run_configuration(method, metadata))
            finally:
                self._detach_method_log(method_log_handler)

        return results

    def run_configuration(self, method: MethodConfig, metadata: DataSetMetadata) -> ConfigurationResult:
        """Run one (method, dataset) configuration to completion"""
        config = self.config
        folder = metadata.folder
        logger.info(f"Starting configuration: method={method.name}, dataset={folder}")

        dataset, number_of_total_features = self.dataset_loader(folder)
        if len(dataset) == 0:
            raise ValueError(f"Dataset is empty: {folder}")

        if config.save_arff:
            save_dataset_arff(dataset, os.path.join(folder, ARFF_FILE_NAME))

        empty_set = None
        if config.include_empty:
            empty_set = create_empty_pattern_dataset(
                dataset.n_features, metadata.empty_ham_count, metadata.empty_spam_count
            )

        # each configuration owns its seed source, aggregation window and resampler
        random_source = SeededRandomSource()
        random_source.reset()
        aggregator = MetricsAggregator()
        aggregator.reset()
        resampler = OutlierResampler(self.outlier_test, max_rounds=config.max_outlier_rounds)

        base_classifier = self.classifier_builder(method)
        evaluation = MethodEvaluation(metadata.name, method.name, metadata.statistics_method)
        evaluation.number_of_total_features = number_of_total_features
        evaluation.number_of_actual_features = dataset.n_features

        result = ConfigurationResult(
            method_name=method.name,
            dataset_name=metadata.name,
            dataset_folder=folder,
            statistics_method=metadata.statistics_method,
            features_summary=evaluation.features_summary,
        )

        remaining_runs = config.number_of_runs
        while remaining_runs > 0:
            self._execute_run(method, folder, dataset, empty_set, random_source, base_classifier, evaluation)
            result.runs_executed += 1
            remaining_runs -= 1

            if not config.skip_test:
                aggregator.record(evaluation)
                self.sink(self.formatter.run_line(evaluation, aggregator.last_values()))

                if config.remove_outliers and remaining_runs == 0:
                    removed = resampler.detect_and_remove(aggregator)
                    if removed > 0:
                        logger.info(f"Scheduling {removed} replacement run(s) for {method.name} on {folder}")
                    remaining_runs += removed
                    result.runs_removed += removed

        if result.runs_executed > 0 and not config.skip_test:
            result.statistics = aggregator.mean_and_std()
            self.sink(self.formatter.aggregate_line(evaluation, result.statistics))
            if self.report_manager is not None:
                self.report_manager.append_result(result)

        logger.info(
            f"Finished configuration: method={method.name}, dataset={folder}, "
            f"runs={result.runs_executed}, removed={result.runs_removed}"
        )
        return result

    def _execute_run(
        self,
        method: MethodConfig,
        folder: str,
        dataset: LabeledDataset,
        empty_set: Optional[LabeledDataset],
        random_source: SeededRandomSource,
        base_classifier: ClassificationModel,
        evaluation: MethodEvaluation,
    ) -> None:
        config = self.config

        random = random_source.next()
        seed = random_source.seed
        training_set, testing_set = self.partitioner.partition(dataset, random, method.split_percent)
        if empty_set is not None:
            testing_set = self.partitioner.append_supplement(testing_set, empty_set)
        logger.debug(
            f"Run with seed {seed}: {len(training_set)} training / {len(testing_set)} testing instances"
        )

        if config.save_sets:
            save_dataset_csv(training_set, os.path.join(folder, TRAINING_SET_FILE_NAME))
            save_dataset_csv(testing_set, os.path.join(folder, TESTING_SET_FILE_NAME))

        model_filename = build_model_filename(folder, method.name, method.split_percent, seed)
        if config.skip_train:
            classifier = load_model(model_filename)
        else:
            classifier = base_classifier.clone()
        evaluation.set_classifier(classifier)

        if not config.skip_train:
            evaluation.train(training_set)

        if not config.skip_test:
            evaluation.test(testing_set)

        if config.save_model:
            save_model(classifier, model_filename)

    def _attach_method_log(self, method: MethodConfig) -> Optional[logging.Handler]:
        if self.config.log_dir is None:
            return None
        os.makedirs(self.config.log_dir, exist_ok=True)
        handler = logging.FileHandler(os.path.join(self.config.log_dir, f"{method.name}.log"))
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
        logging.getLogger().addHandler(handler)
        return handler

    def _detach_method_log(self, handler: Optional[logging.Handler]) -> None:
        if handler is None:
            return
        logging.getLogger().removeHandler(handler)
        handler.close()
