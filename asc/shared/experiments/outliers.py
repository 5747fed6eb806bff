import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

import numpy as np

from .metrics import MetricsAggregator


logger = logging.getLogger(__name__)


class OutlierTest(ABC):
    """Statistical test flagging outlying positions in one metric's samples"""

    @abstractmethod
    def flag(self, values: Sequence[float]) -> List[int]:
        """
        Args:
            values: Samples of one metric in run order

        Returns:
            Sorted positions considered outliers
        """
        pass


class ZScoreOutlierTest(OutlierTest):
    """Flags samples more than `threshold` sample standard deviations away from the mean"""

    def __init__(self, threshold: float = 2.0, min_samples: int = 3):
        if threshold <= 0:
            raise ValueError(f"Threshold must be positive, got {threshold}")
        self.threshold = threshold
        self.min_samples = min_samples

    def flag(self, values: Sequence[float]) -> List[int]:
        values = np.asarray(values, dtype=float)
        finite = np.isfinite(values)
        if finite.sum() < self.min_samples:
            return []

        mean = np.mean(values[finite])
        std = np.std(values[finite], ddof=1)
        if std == 0:
            return []

        deviation = np.abs(values - mean)
        return [int(i) for i in np.where(finite & (deviation > self.threshold * std))[0]]


class IQROutlierTest(OutlierTest):
    """Flags samples outside the Tukey fences [Q1 - factor * IQR, Q3 + factor * IQR]"""

    def __init__(self, factor: float = 1.5, min_samples: int = 4):
        if factor <= 0:
            raise ValueError(f"Factor must be positive, got {factor}")
        self.factor = factor
        self.min_samples = min_samples

    def flag(self, values: Sequence[float]) -> List[int]:
        values = np.asarray(values, dtype=float)
        finite = np.isfinite(values)
        if finite.sum() < self.min_samples:
            return []

        q1, q3 = np.percentile(values[finite], [25, 75])
        iqr = q3 - q1
        if iqr == 0:
            return []

        lower = q1 - self.factor * iqr
        upper = q3 + self.factor * iqr
        return [int(i) for i in np.where(finite & ((values < lower) | (values > upper)))[0]]


def create_outlier_test(method: str = "zscore", threshold: Optional[float] = None) -> OutlierTest:
    """
    Create an outlier test by name.

    Args:
        method: "zscore" or "iqr"
        threshold: Standard deviations for zscore, fence factor for iqr; method default when None

    Raises:
        ValueError: If the method is unknown
    """
    method = method.lower()
    if method == "zscore":
        return ZScoreOutlierTest() if threshold is None else ZScoreOutlierTest(threshold)
    if method == "iqr":
        return IQROutlierTest() if threshold is None else IQROutlierTest(threshold)
    raise ValueError(f"Unknown outlier method: {method}. Available: ['zscore', 'iqr']")


class OutlierResampler:
    """
    Discards outlier runs from an aggregation window.

    A run flagged for any metric is removed from every metric so the metrics
    stay aligned by run position. The caller schedules one replacement run per
    removed run and calls detect_and_remove again once they are done.
    """

    def __init__(self, outlier_test: Optional[OutlierTest] = None, max_rounds: Optional[int] = None):
        self.outlier_test = outlier_test or ZScoreOutlierTest()
        self.max_rounds = max_rounds
        self.rounds = 0
        self.total_removed = 0

    def reset(self) -> None:
        self.rounds = 0
        self.total_removed = 0

    def detect(self, aggregator: MetricsAggregator) -> Dict[str, List[int]]:
        """
        Outlier report: flagged run indices per metric (metrics without outliers are omitted)
        """
        report = {}
        for name in aggregator.metric_names:
            flagged = self.outlier_test.flag(aggregator.values(name))
            if flagged:
                report[name] = flagged
        return report

    def detect_and_remove(self, aggregator: MetricsAggregator) -> int:
        """
        Remove every run flagged by any metric from all metrics.

        Returns:
            Number of removed runs
        """
        if self.max_rounds is not None and self.rounds >= self.max_rounds:
            logger.warning(f"Outlier removal limit of {self.max_rounds} rounds reached, keeping current runs")
            return 0
        self.rounds += 1

        report = self.detect(aggregator)
        flagged_runs = sorted({index for indices in report.values() for index in indices}, reverse=True)
        if not flagged_runs:
            logger.debug("No outlier runs detected")
            return 0

        for metric_name, indices in report.items():
            logger.debug(f"Outliers in {metric_name} at runs {indices}")

        for run_index in flagged_runs:
            for name in aggregator.metric_names:
                aggregator.remove_sample_at(name, run_index)

        self.total_removed += len(flagged_runs)
        logger.info(f"Removed {len(flagged_runs)} outlier run(s) at positions {sorted(flagged_runs)}")
        return len(flagged_runs)
