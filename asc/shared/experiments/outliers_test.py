import pytest
from asc.shared.experiments.metrics import MetricsAggregator
from asc.shared.experiments.outliers import (
    IQROutlierTest,
    OutlierResampler,
    ZScoreOutlierTest,
    create_outlier_test,
)


def make_aggregator(samples: dict) -> MetricsAggregator:
    aggregator = MetricsAggregator(list(samples))
    n_runs = len(next(iter(samples.values())))
    for i in range(n_runs):
        aggregator.record({name: values[i] for name, values in samples.items()})
    return aggregator


class TestZScoreOutlierTest:
    def test_flags_far_value(self):
        values = [1.0] * 9 + [10.0]
        assert ZScoreOutlierTest(threshold=2.0).flag(values) == [9]

    def test_constant_values_are_never_flagged(self):
        assert ZScoreOutlierTest().flag([0.5] * 10) == []

    def test_too_few_samples(self):
        assert ZScoreOutlierTest(threshold=0.1).flag([1.0, 100.0]) == []

    def test_nan_values_are_ignored(self):
        values = [1.0] * 9 + [10.0, float("nan")]
        assert ZScoreOutlierTest().flag(values) == [9]

    def test_invalid_threshold(self):
        with pytest.raises(ValueError):
            ZScoreOutlierTest(threshold=0)


class TestIQROutlierTest:
    def test_flags_outside_fences(self):
        values = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 100.0]
        assert IQROutlierTest().flag(values) == [7]

    def test_uniform_spread_is_kept(self):
        assert IQROutlierTest().flag([1.0, 2.0, 3.0, 4.0, 5.0]) == []


class TestCreateOutlierTest:
    def test_known_methods(self):
        assert isinstance(create_outlier_test("zscore"), ZScoreOutlierTest)
        assert isinstance(create_outlier_test("IQR", 3.0), IQROutlierTest)
        assert create_outlier_test("zscore", 3.0).threshold == 3.0

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            create_outlier_test("grubbs")


class TestOutlierResampler:
    def test_detect_reports_per_metric(self):
        aggregator = make_aggregator({"a": [1.0] * 9 + [10.0], "b": [2.0] * 10})
        report = OutlierResampler(ZScoreOutlierTest()).detect(aggregator)
        assert report == {"a": [9]}

    def test_removes_union_of_flagged_runs_from_all_metrics(self):
        aggregator = make_aggregator(
            {
                "a": [1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 9.0, 1.0],
                "b": [5.0, 5.0, -9.0, 5.0, 5.0, 5.0, 5.0, 5.0, 5.0, 5.0],
            }
        )
        removed = OutlierResampler(ZScoreOutlierTest()).detect_and_remove(aggregator)
        assert removed == 2
        assert aggregator.sample_counts() == {"a": 8, "b": 8}
        assert aggregator.values("a") == [1.0] * 8
        assert aggregator.values("b") == [5.0] * 8

    def test_idempotent_at_fixed_point(self):
        aggregator = make_aggregator({"a": [1.0, 2.0, 1.5, 1.2, 1.8]})
        resampler = OutlierResampler(ZScoreOutlierTest())
        assert resampler.detect_and_remove(aggregator) == 0
        assert resampler.detect_and_remove(aggregator) == 0
        assert aggregator.values("a") == [1.0, 2.0, 1.5, 1.2, 1.8]

    def test_max_rounds_stops_removal(self):
        aggregator = make_aggregator({"a": [1.0] * 9 + [10.0]})
        resampler = OutlierResampler(ZScoreOutlierTest(), max_rounds=0)
        assert resampler.detect_and_remove(aggregator) == 0
        assert aggregator.n_runs == 10

    def test_counts_rounds_and_removals(self):
        aggregator = make_aggregator({"a": [1.0] * 9 + [10.0]})
        resampler = OutlierResampler(ZScoreOutlierTest())
        resampler.detect_and_remove(aggregator)
        resampler.detect_and_remove(aggregator)
        assert resampler.rounds == 2
        assert resampler.total_removed == 1
        resampler.reset()
        assert resampler.rounds == 0
