import logging
from collections import OrderedDict
from typing import Dict, List, Mapping, Tuple, Union

import numpy as np

from asc.shared.classification.evaluation import ClassificationEvaluator
from asc.shared.classification.method_evaluation import MethodEvaluation


logger = logging.getLogger(__name__)

TRAIN_TIME = "train_time"
TEST_TIME = "test_time"
TIME_METRICS = (TRAIN_TIME, TEST_TIME)

# Report order of every tracked metric
ALL_METRICS: List[str] = ClassificationEvaluator.get_metric_names() + [TRAIN_TIME, TEST_TIME]


class MetricsAggregator:
    """
    Aggregation window of per-run metric samples for one (method, dataset) configuration.

    Each metric keeps its own ordered list of samples; the position in the list
    is the run index. Samples are only added by record() and only removed by
    remove_sample_at(), so metrics stay aligned as long as removals are applied
    to every metric at the same index.
    """

    def __init__(self, metric_names: List[str] = None):
        self.metric_names = list(metric_names) if metric_names is not None else list(ALL_METRICS)
        self._samples: "OrderedDict[str, List[float]]" = OrderedDict()
        self.reset()

    def reset(self) -> None:
        """Clear all samples, ready for a new configuration"""
        self._samples = OrderedDict((name, []) for name in self.metric_names)

    def record(self, run_result: Union[MethodEvaluation, Mapping[str, float]]) -> None:
        """
        Append one sample per metric from a finished run.

        Args:
            run_result: Evaluated MethodEvaluation or a mapping from metric name to value

        Raises:
            ValueError: If a tracked metric is missing from the run result
        """
        values = run_result.metrics() if isinstance(run_result, MethodEvaluation) else run_result

        missing = [name for name in self.metric_names if name not in values]
        if missing:
            raise ValueError(f"Run result is missing metrics: {missing}")

        for name in self.metric_names:
            self._samples[name].append(float(values[name]))

    def values(self, metric_name: str) -> List[float]:
        """Copy of the retained samples of one metric, in run order"""
        self._check_metric(metric_name)
        return list(self._samples[metric_name])

    def last_values(self) -> Dict[str, float]:
        """
        Most recently appended sample of every metric

        Raises:
            ValueError: If any metric has no samples
        """
        self._check_not_empty()
        return OrderedDict((name, samples[-1]) for name, samples in self._samples.items())

    def mean_and_std(self) -> Dict[str, Tuple[float, float]]:
        """
        Arithmetic mean and sample standard deviation of every metric

        A single sample has a standard deviation of 0.

        Raises:
            ValueError: If any metric has no samples
        """
        self._check_not_empty()
        stats = OrderedDict()
        for name, samples in self._samples.items():
            values = np.asarray(samples, dtype=float)
            std = float(np.std(values, ddof=1)) if len(values) > 1 else 0.0
            stats[name] = (float(np.mean(values)), std)
        return stats

    def remove_sample_at(self, metric_name: str, run_index: int) -> float:
        """
        Delete exactly one sample from one metric. Other metrics are untouched.

        Returns:
            The removed value

        Raises:
            ValueError: If the metric is unknown
            IndexError: If run_index is out of range for that metric
        """
        self._check_metric(metric_name)
        samples = self._samples[metric_name]
        if not 0 <= run_index < len(samples):
            raise IndexError(f"Run index {run_index} out of range for metric {metric_name} ({len(samples)} samples)")
        return samples.pop(run_index)

    def sample_counts(self) -> Dict[str, int]:
        return OrderedDict((name, len(samples)) for name, samples in self._samples.items())

    @property
    def n_runs(self) -> int:
        """Number of retained runs, taken from the shortest metric"""
        return min(len(samples) for samples in self._samples.values()) if self._samples else 0

    def is_empty(self) -> bool:
        return self.n_runs == 0

    def _check_metric(self, metric_name: str) -> None:
        if metric_name not in self._samples:
            raise ValueError(f"Unknown metric: {metric_name}. Available: {self.metric_names}")

    def _check_not_empty(self) -> None:
        empty = [name for name, samples in self._samples.items() if not samples]
        if empty or not self._samples:
            raise ValueError(f"Aggregation window has no samples for metrics: {empty}")
