import os
from typing import List

import numpy as np
import pandas as pd
import pytest
from sklearn.dummy import DummyClassifier

from asc.shared.classification import ClassificationConfig, ClassificationModel
from asc.shared.classification.persistence import build_model_filename, load_model
from asc.shared.experiments import ALL_METRICS, LabeledDataset, OutlierTest
from asc.spam.dataset.metadata import DataSetMetadata
from asc.spam.scripts.run_experiments.config import ExperimentConfig, MethodConfig
from asc.spam.scripts.run_experiments.runner import ExperimentRunner

SPAM_PRECISION_COLUMN = 6
FIRST_SEEDS = [3, 5, 7, 11, 13]


class SpamEverythingModel(ClassificationModel):
    """Labels every message as spam, so spam precision is the spam share of the testing set"""

    def _build_estimator(self):
        return DummyClassifier(strategy="constant", constant=1)


class NeverFlag(OutlierTest):
    def flag(self, values):
        return []


class FlagOnce(OutlierTest):
    """Flags one run index the first time it is asked, nothing afterwards"""

    def __init__(self, run_index: int):
        self.run_index = run_index
        self.flagged = False

    def flag(self, values):
        if self.flagged:
            return []
        self.flagged = True
        return [self.run_index]


class FlagInRounds(OutlierTest):
    """Flags one run index in each of the first `rounds` detection rounds, one round asking once per metric"""

    def __init__(self, run_index: int, rounds: int):
        self.run_index = run_index
        self.rounds = rounds
        self.calls = 0

    def flag(self, values):
        round_index = self.calls // len(ALL_METRICS)
        self.calls += 1
        return [self.run_index] if round_index < self.rounds else []


def make_dataset(n_instances: int = 40) -> LabeledDataset:
    features = np.column_stack([np.arange(n_instances, dtype=float), np.zeros(n_instances)])
    return LabeledDataset(features=features, labels=np.arange(n_instances) % 2, name="toy")


def make_config(tmp_path, folders=("64",), **overrides) -> ExperimentConfig:
    datasets = []
    for name in folders:
        folder = tmp_path / "TREC" / "CHI2" / name
        folder.mkdir(parents=True, exist_ok=True)
        datasets.append(DataSetMetadata(folder=str(folder), empty_ham_count=2, empty_spam_count=3))

    config = ExperimentConfig(
        datasets=datasets,
        methods=[MethodConfig(name="SpamAll", algorithm="naive_bayes")],
        number_of_runs=5,
        remove_outliers=True,
    )
    return config.with_overrides(**overrides)


def make_runner(config: ExperimentConfig, lines: List[str], outlier_test: OutlierTest = None) -> ExperimentRunner:
    return ExperimentRunner(
        config,
        sink=lines.append,
        dataset_loader=lambda folder: (make_dataset(), 1000),
        classifier_builder=lambda method: SpamEverythingModel(ClassificationConfig()),
        outlier_test=outlier_test or NeverFlag(),
    )


def split_lines(lines: List[str]):
    header, body = lines[0], lines[1:]
    run_lines = [line for line in body if "±" not in line]
    aggregate_lines = [line for line in body if "±" in line]
    return header, run_lines, aggregate_lines


def spam_precision(line: str) -> float:
    return float(line.split("\t")[SPAM_PRECISION_COLUMN])


class TestExperimentRunner:
    def test_runs_scheduled_count_without_outliers(self, tmp_path):
        lines = []
        results = make_runner(make_config(tmp_path), lines).run()

        header, run_lines, aggregate_lines = split_lines(lines)
        assert header.startswith("Timestamp\tData Set\tStatistics Method\tNumber of Features\tMethod")
        assert len(run_lines) == 5
        assert len(aggregate_lines) == 1

        result = results[0]
        assert result.runs_executed == 5
        assert result.runs_removed == 0
        values = [spam_precision(line) for line in run_lines]
        mean, std = result.statistics["spam_precision"]
        assert mean == pytest.approx(np.mean(values))
        assert std == pytest.approx(np.std(values, ddof=1))

    def test_summary_line_columns(self, tmp_path):
        lines = []
        make_runner(make_config(tmp_path), lines).run()
        _, run_lines, _ = split_lines(lines)
        columns = run_lines[0].split("\t")
        assert columns[1].endswith("TREC/CHI2/64")
        assert columns[2] == "CHI2"
        assert columns[3] == "1000->2"
        assert columns[4] == "SpamAll"
        assert len(columns) == 15

    def test_outlier_run_is_replaced(self, tmp_path):
        lines = []
        results = make_runner(make_config(tmp_path), lines, outlier_test=FlagOnce(2)).run()

        _, run_lines, aggregate_lines = split_lines(lines)
        assert len(run_lines) == 6
        assert len(aggregate_lines) == 1

        result = results[0]
        assert result.runs_executed == 6
        assert result.runs_removed == 1
        assert result.runs_retained == 5

        values = [spam_precision(line) for line in run_lines]
        kept = values[:2] + values[3:]
        mean, std = result.statistics["spam_precision"]
        assert mean == pytest.approx(np.mean(kept))
        assert std == pytest.approx(np.std(kept, ddof=1))

    def test_replacement_run_can_be_removed_again(self, tmp_path):
        lines = []
        results = make_runner(make_config(tmp_path), lines, outlier_test=FlagInRounds(2, rounds=2)).run()

        _, run_lines, _ = split_lines(lines)
        assert len(run_lines) == 7

        result = results[0]
        assert result.runs_executed == 7
        assert result.runs_removed == 2
        assert result.runs_retained == 5

        values = [spam_precision(line) for line in run_lines]
        kept = values[:2] + values[4:]
        mean, _ = result.statistics["spam_precision"]
        assert mean == pytest.approx(np.mean(kept))

    def test_outlier_rounds_are_capped(self, tmp_path):
        lines = []
        config = make_config(tmp_path, max_outlier_rounds=1)
        results = make_runner(config, lines, outlier_test=FlagInRounds(2, rounds=100)).run()

        _, run_lines, _ = split_lines(lines)
        assert len(run_lines) == 6

        result = results[0]
        assert result.runs_executed == 6
        assert result.runs_removed == 1
        assert result.runs_retained == 5

    def test_outlier_removal_disabled(self, tmp_path):
        lines = []
        results = make_runner(make_config(tmp_path, remove_outliers=False), lines, outlier_test=FlagOnce(2)).run()
        assert results[0].runs_executed == 5
        assert results[0].runs_removed == 0

    def test_skip_test_trains_without_summaries(self, tmp_path):
        lines = []
        config = make_config(tmp_path, skip_test=True, save_model=True)
        results = make_runner(config, lines).run()

        assert len(lines) == 1
        assert results[0].runs_executed == 5
        assert results[0].statistics == {}

        folder = config.datasets[0].folder
        for seed in FIRST_SEEDS:
            model = load_model(build_model_filename(folder, "SpamAll", 0.5, seed))
            assert model.is_fitted

    def test_skip_train_reuses_saved_models(self, tmp_path):
        make_runner(make_config(tmp_path, skip_test=True, save_model=True), []).run()

        lines = []
        results = make_runner(make_config(tmp_path, skip_train=True), lines).run()
        _, run_lines, _ = split_lines(lines)
        assert len(run_lines) == 5
        assert results[0].runs_executed == 5

    def test_skip_train_without_saved_model_fails(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            make_runner(make_config(tmp_path, skip_train=True), []).run()

    def test_every_configuration_restarts_seeds(self, tmp_path):
        lines = []
        results = make_runner(make_config(tmp_path, folders=("64", "128")), lines).run()

        assert len(results) == 2
        for metric in ["spam_precision", "ham_precision", "spam_recall", "ham_recall"]:
            assert results[0].statistics[metric] == results[1].statistics[metric]
        # header once per method
        assert sum(line.startswith("Timestamp") for line in lines) == 1

    def test_empty_patterns_are_added_to_testing_set(self, tmp_path):
        config = make_config(tmp_path, include_empty=True, save_sets=True, number_of_runs=1)
        make_runner(config, []).run()

        folder = config.datasets[0].folder
        training = pd.read_csv(os.path.join(folder, "training.csv"))
        testing = pd.read_csv(os.path.join(folder, "testing.csv"))
        assert len(training) == 20
        assert len(testing) == 25
        assert (testing["class"].tail(5) == ["HAM", "HAM", "SPAM", "SPAM", "SPAM"]).all()

    def test_zero_runs(self, tmp_path):
        lines = []
        results = make_runner(make_config(tmp_path, number_of_runs=0), lines).run()
        assert len(lines) == 1
        assert results[0].runs_executed == 0

    def test_report_rows(self, tmp_path):
        report_path = str(tmp_path / "report.csv")
        config = make_config(tmp_path, folders=("64", "128"), output_report_path=report_path)
        runner = make_runner(config, [])
        runner.run()

        summary = runner.report_manager.get_report_summary()
        assert summary["total_configurations"] == 2
        assert summary["methods_tested"] == ["SpamAll"]
        assert summary["total_runs_executed"] == 10

    def test_method_log_file(self, tmp_path):
        log_dir = str(tmp_path / "logs")
        make_runner(make_config(tmp_path, log_dir=log_dir), []).run()
        assert os.path.exists(os.path.join(log_dir, "SpamAll.log"))

    def test_empty_dataset_fails(self, tmp_path):
        runner = ExperimentRunner(
            make_config(tmp_path),
            sink=[].append,
            dataset_loader=lambda folder: (make_dataset(0), 0),
            classifier_builder=lambda method: SpamEverythingModel(ClassificationConfig()),
        )
        with pytest.raises(ValueError):
            runner.run()
