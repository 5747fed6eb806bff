from datetime import datetime
from typing import Dict, List, Optional, Tuple

from asc.shared.classification.method_evaluation import MethodEvaluation
from asc.shared.experiments.metrics import ALL_METRICS, TIME_METRICS

TIMESTAMP_FORMAT = "%d/%m/%y %H:%M:%S"

METRIC_TITLES = {
    "ham_precision": "Ham Precision",
    "spam_precision": "Spam Precision",
    "ham_recall": "Ham Recall",
    "spam_recall": "Spam Recall",
    "ham_area_under_prc": "Ham Area Under PRC",
    "spam_area_under_prc": "Spam Area Under PRC",
    "ham_area_under_roc": "Ham Area Under ROC",
    "spam_area_under_roc": "Spam Area Under ROC",
    "train_time": "Train Time",
    "test_time": "Test Time",
}


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """dd/mm/yy HH:MM:SS.mmm TZ in local time"""
    moment = (moment or datetime.now()).astimezone()
    millis = moment.microsecond // 1000
    return f"{moment.strftime(TIMESTAMP_FORMAT)}.{millis:03d} {moment.strftime('%Z')}".rstrip()


def format_duration(millis: float) -> str:
    """Milliseconds as H:MM:SS.mmm"""
    total = int(max(millis, 0.0))
    hours, rest = divmod(total, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, ms = divmod(rest, 1000)
    return f"{hours}:{minutes:02d}:{seconds:02d}.{ms:03d}"


class SummaryFormatter:
    """Builds the tab separated header and result lines of an experiment"""

    def __init__(self, metric_names: List[str] = None, format_durations: bool = True):
        self.metric_names = list(metric_names) if metric_names is not None else list(ALL_METRICS)
        self.format_durations = format_durations

    def header(self) -> str:
        columns = ["Timestamp", "Data Set", "Statistics Method", "Number of Features", "Method"]
        columns.extend(METRIC_TITLES.get(name, name) for name in self.metric_names)
        return "\t".join(columns)

    def run_line(self, evaluation: MethodEvaluation, last_values: Dict[str, float]) -> str:
        """Line with the latest value of every metric"""
        cells = [self._format_value(name, last_values[name]) for name in self.metric_names]
        return self._line(evaluation, cells)

    def aggregate_line(self, evaluation: MethodEvaluation, statistics: Dict[str, Tuple[float, float]]) -> str:
        """Line with mean ± standard deviation of every metric"""
        cells = []
        for name in self.metric_names:
            mean, std = statistics[name]
            cells.append(f"{self._format_value(name, mean)} ± {self._format_value(name, std)}")
        return self._line(evaluation, cells)

    def _line(self, evaluation: MethodEvaluation, cells: List[str]) -> str:
        columns = [
            format_timestamp(),
            evaluation.dataset_name,
            evaluation.statistics_method,
            evaluation.features_summary,
            evaluation.method_name,
        ]
        return "\t".join(columns + cells)

    def _format_value(self, metric_name: str, value: float) -> str:
        if self.format_durations and metric_name in TIME_METRICS:
            return format_duration(value)
        return f"{value:.2f}"
