"""Repeated randomized train/test experiments: seeds, partitions, metric aggregation and outlier resampling"""

from .dataset import LabeledDataset
from .random_source import SeededRandomSource, next_prime
from .partitioner import DatasetPartitioner
from .metrics import MetricsAggregator, ALL_METRICS, TIME_METRICS
from .outliers import OutlierResampler, OutlierTest, ZScoreOutlierTest, IQROutlierTest, create_outlier_test

__all__ = [
    'LabeledDataset',
    'SeededRandomSource',
    'next_prime',
    'DatasetPartitioner',
    'MetricsAggregator',
    'ALL_METRICS',
    'TIME_METRICS',
    'OutlierResampler',
    'OutlierTest',
    'ZScoreOutlierTest',
    'IQROutlierTest',
    'create_outlier_test',
]
