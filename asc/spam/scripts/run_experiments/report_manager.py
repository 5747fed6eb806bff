import os
import csv
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from asc.shared.experiments.metrics import ALL_METRICS
from .results import ConfigurationResult


class ReportManager:
    """Appends one CSV row of aggregated statistics per finished configuration"""

    def __init__(self, report_path: str, metric_names: List[str] = None):
        """
        Initialize report manager.

        Args:
            report_path: Path to CSV report file
            metric_names: Metrics to report, defaults to all tracked metrics
        """
        self.report_path = report_path
        self.metric_names = list(metric_names) if metric_names is not None else list(ALL_METRICS)
        self._ensure_report_directory()

    def _ensure_report_directory(self) -> None:
        """Ensure the directory for the report file exists"""
        report_dir = os.path.dirname(self.report_path)
        if report_dir and not os.path.exists(report_dir):
            os.makedirs(report_dir)

    def get_column_names(self) -> List[str]:
        base_columns = [
            "timestamp",
            "dataset",
            "dataset_folder",
            "statistics_method",
            "number_of_features",
            "method",
            "runs_executed",
            "runs_removed",
            "runs_retained",
        ]
        metric_columns = []
        for name in self.metric_names:
            metric_columns.extend([f"{name}_mean", f"{name}_std"])
        return base_columns + metric_columns

    def append_result(self, result: ConfigurationResult) -> None:
        """Append a configuration result to the CSV report"""
        row = self._create_result_row(result)
        file_exists = os.path.exists(self.report_path)

        with open(self.report_path, "a", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=self.get_column_names())
            if not file_exists:
                writer.writeheader()
            writer.writerow(row)

    def _create_result_row(self, result: ConfigurationResult) -> Dict[str, Any]:
        row = {
            "timestamp": datetime.now().isoformat(),
            "dataset": result.dataset_name,
            "dataset_folder": result.dataset_folder,
            "statistics_method": result.statistics_method,
            "number_of_features": result.features_summary,
            "method": result.method_name,
            "runs_executed": result.runs_executed,
            "runs_removed": result.runs_removed,
            "runs_retained": result.runs_retained,
        }
        for name in self.metric_names:
            mean, std = result.statistics.get(name, (None, None))
            row[f"{name}_mean"] = mean
            row[f"{name}_std"] = std
        return row

    def load_results_dataframe(self) -> Optional[pd.DataFrame]:
        """
        Load the complete report as a pandas DataFrame.

        Returns:
            DataFrame with all results, or None if the report does not exist
        """
        if not os.path.exists(self.report_path):
            return None

        try:
            return pd.read_csv(self.report_path)
        except Exception as e:
            raise ValueError(f"Failed to load results: {str(e)}")

    def get_report_summary(self) -> Dict[str, Any]:
        """
        Get summary statistics from the current report.

        Returns:
            Dictionary with report summary statistics
        """
        df = self.load_results_dataframe()
        if df is None or len(df) == 0:
            return {
                "total_configurations": 0,
                "methods_tested": [],
                "datasets_tested": [],
                "total_runs_executed": 0,
                "total_runs_removed": 0,
            }

        return {
            "total_configurations": len(df),
            "methods_tested": df["method"].unique().tolist(),
            "datasets_tested": df["dataset"].unique().tolist(),
            "total_runs_executed": int(df["runs_executed"].sum()),
            "total_runs_removed": int(df["runs_removed"].sum()),
        }

    def get_best_results(self, metric: str = "spam_recall", top_k: int = 10) -> Optional[pd.DataFrame]:
        """
        Get top-k configurations by the mean of a metric.

        Raises:
            ValueError: If the metric is not part of the report
        """
        df = self.load_results_dataframe()
        if df is None or len(df) == 0:
            return None

        column = f"{metric}_mean"
        if column not in df.columns:
            raise ValueError(f"Metric '{metric}' not found in results")

        return df.sort_values(column, ascending=False, na_position="last").head(top_k)
