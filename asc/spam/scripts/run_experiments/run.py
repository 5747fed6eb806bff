#!/usr/bin/env python3
"""
Repeated Train/Test Experiments for Anti-Spam Datasets

This script evaluates classification methods on ham/spam datasets by repeating
randomized train/test partitions. Every (method, dataset) configuration starts
from the same seed sequence, so all methods see identical partitions.

The script supports:
- Multiple named methods, each with an algorithm, hyperparameters and split
- Datasets given inline or through a metadata file ('folder,empty_ham,empty_spam')
- Empty-pattern messages appended to every testing set
- Outlier removal with replacement runs
- Saving datasets as ARFF, partitions as CSV and trained models per seed
- Reusing saved models instead of training (--skip-train)

Usage:
    python run.py --config path/to/config.yaml [--verbose]

Example config structure:
    metadata_path: "datasets.txt"

    methods:
      - name: "NB"
        algorithm: naive_bayes
      - name: "RF"
        algorithm: random_forest
        split_percent: 0.66
        hyperparameters:
          n_estimators: 200

    number_of_runs: 10
    remove_outliers: true
    output_report_path: "results/experiments.csv"
    log_dir: "results/logs"
"""

import logging
import os
import sys
import traceback
from typing import Optional

import click

from asc.spam.scripts.run_experiments.config import ExperimentConfig
from asc.spam.scripts.run_experiments.runner import ExperimentRunner


def setup_logging(verbose: bool = False, log_dir: Optional[str] = None) -> None:
    """
    Setup logging configuration

    The root logger passes everything; only the console handler is limited to
    INFO unless verbose, so verbose.log and the per-method logs keep DEBUG records.
    """
    format_str = "%(asctime)s - %(levelname)s - %(message)s"

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    handlers = [console_handler]
    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(log_dir, "verbose.log"))
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    logging.basicConfig(level=logging.DEBUG, format=format_str, handlers=handlers, force=True)


@click.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    required=True,
    help="Path to YAML configuration file",
)
@click.option("--runs", "-n", type=click.IntRange(min=0), default=None, help="Number of runs per configuration")
@click.option(
    "--metadata",
    "-m",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    default=None,
    help="Dataset metadata file, one 'folder,empty_ham,empty_spam' per line",
)
@click.option("--skip-train", is_flag=True, default=None, help="Load saved models instead of training")
@click.option("--skip-test", is_flag=True, default=None, help="Do not test the classifiers")
@click.option("--include-empty", is_flag=True, default=None, help="Append empty-pattern messages to testing sets")
@click.option("--no-outlier-removal", is_flag=True, default=False, help="Keep every run, even outliers")
@click.option("--save-arff", is_flag=True, default=None, help="Save every dataset as data.arff in its folder")
@click.option("--save-model", is_flag=True, default=None, help="Save the trained model of every run")
@click.option("--save-sets", is_flag=True, default=None, help="Save the partitions of every run as CSV")
@click.option("--report", "-r", type=click.Path(dir_okay=False), default=None, help="Path to CSV report file")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def main(
    config: str,
    runs: Optional[int],
    metadata: Optional[str],
    skip_train: Optional[bool],
    skip_test: Optional[bool],
    include_empty: Optional[bool],
    no_outlier_removal: bool,
    save_arff: Optional[bool],
    save_model: Optional[bool],
    save_sets: Optional[bool],
    report: Optional[str],
    verbose: bool,
):
    """
    Run repeated train/test experiments on anti-spam datasets.

    Options given on the command line override the YAML configuration.

    Examples:

        python run.py --config config.yaml

        python run.py --config config.yaml --runs 5 --include-empty --verbose
    """
    try:
        config_obj = ExperimentConfig.from_yaml(config)
        config_obj = config_obj.with_overrides(
            number_of_runs=runs,
            metadata_path=os.path.abspath(metadata) if metadata else None,
            skip_train=skip_train,
            skip_test=skip_test,
            include_empty=include_empty,
            remove_outliers=False if no_outlier_removal else None,
            save_arff=save_arff,
            save_model=save_model,
            save_sets=save_sets,
            output_report_path=os.path.abspath(report) if report else None,
        )
    except Exception as e:
        setup_logging(verbose)
        logging.error(f"Fatal error: {str(e)}")
        logging.debug(f"Traceback: {traceback.format_exc()}")
        sys.exit(1)

    setup_logging(verbose, config_obj.log_dir)
    logger = logging.getLogger(__name__)

    try:
        logger.info(f"Loaded configuration from: {config}")
        config_obj.validate()

        logger.info("Configuration:")
        for key, value in config_obj.describe().items():
            logger.info(f"  {key}: {value}")

        runner = ExperimentRunner(config_obj)
        results = runner.run()

        logger.info("=" * 60)
        logger.info("EXPERIMENTS COMPLETED")
        logger.info("=" * 60)
        logger.info(f"Configurations: {len(results)}")
        logger.info(f"Runs executed: {sum(result.runs_executed for result in results)}")
        logger.info(f"Runs removed as outliers: {sum(result.runs_removed for result in results)}")

        if runner.report_manager is not None:
            report_summary = runner.report_manager.get_report_summary()
            logger.info(f"Methods in report: {report_summary['methods_tested']}")
            logger.info(f"Datasets in report: {report_summary['datasets_tested']}")
            logger.info(f"Results saved to: {config_obj.output_report_path}")

            best_results = runner.report_manager.get_best_results(metric="spam_recall", top_k=3)
            if best_results is not None and len(best_results) > 0:
                logger.info("Top 3 results by spam recall:")
                for i, (_, row) in enumerate(best_results.iterrows(), 1):
                    logger.info(f"  {i}. {row['method']} on {row['dataset']} - {row['spam_recall_mean']:.2f}")

    except Exception as e:
        logger.error(f"Fatal error: {str(e)}")
        logger.debug(f"Traceback: {traceback.format_exc()}")
        sys.exit(1)


if __name__ == "__main__":
    main()
