import numpy as np
import pytest
from asc.shared.experiments.dataset import LabeledDataset
from asc.shared.experiments.partitioner import DatasetPartitioner, training_size
from asc.shared.experiments.random_source import SeededRandomSource


def make_dataset(n_instances: int, n_features: int = 3) -> LabeledDataset:
    # first feature holds the instance id so partitions can be traced back
    features = np.zeros((n_instances, n_features))
    features[:, 0] = np.arange(n_instances)
    labels = np.arange(n_instances) % 2
    return LabeledDataset(features=features, labels=labels, name="toy")


def ids(dataset: LabeledDataset) -> list:
    return [int(v) for v in dataset.features[:, 0]]


class TestTrainingSize:
    def test_exact(self):
        assert training_size(10, 0.5) == 5

    def test_rounds_half_up(self):
        assert training_size(5, 0.5) == 3
        assert training_size(3, 0.5) == 2

    def test_rounds_down_below_half(self):
        assert training_size(10, 0.66) == 7
        assert training_size(10, 0.62) == 6


class TestDatasetPartitioner:
    def test_ten_instances_split_in_half_for_every_seed(self):
        dataset = make_dataset(10)
        source = SeededRandomSource()
        source.reset()
        for _ in range(10):
            train, test = DatasetPartitioner.partition(dataset, source.next(), 0.5)
            assert len(train) == 5
            assert len(test) == 5

    def test_partitions_are_disjoint_and_exhaustive(self):
        dataset = make_dataset(23)
        train, test = DatasetPartitioner.partition(dataset, 7, 0.66)
        assert set(ids(train)).isdisjoint(ids(test))
        assert sorted(ids(train) + ids(test)) == list(range(23))

    def test_labels_follow_their_instances(self):
        dataset = make_dataset(12)
        train, test = DatasetPartitioner.partition(dataset, 3, 0.5)
        for part in (train, test):
            np.testing.assert_array_equal(part.labels, np.array(ids(part)) % 2)

    def test_same_seed_same_partition(self):
        dataset = make_dataset(30)
        train_a, test_a = DatasetPartitioner.partition(dataset, 11, 0.5)
        train_b, test_b = DatasetPartitioner.partition(dataset, np.random.default_rng(11), 0.5)
        assert ids(train_a) == ids(train_b)
        assert ids(test_a) == ids(test_b)

    def test_input_dataset_is_not_modified(self):
        dataset = make_dataset(15)
        before = dataset.features.copy()
        train, _ = DatasetPartitioner.partition(dataset, 5, 0.5)
        train.features[:] = -1
        np.testing.assert_array_equal(dataset.features, before)

    @pytest.mark.parametrize("fraction", [0.0, 1.0, -0.1, 1.5])
    def test_invalid_fraction(self, fraction):
        with pytest.raises(ValueError):
            DatasetPartitioner.partition(make_dataset(10), 3, fraction)

    def test_append_supplement_extends_testing_set_only(self):
        dataset = make_dataset(10)
        supplement = LabeledDataset(features=np.full((2, 3), 99.0), labels=np.array([0, 1]))
        train, test = DatasetPartitioner.partition(dataset, 3, 0.5)
        extended = DatasetPartitioner.append_supplement(test, supplement)
        assert len(extended) == 7
        assert ids(extended)[-2:] == [99, 99]
        assert len(train) == 5
        assert len(test) == 5

    def test_append_supplement_feature_mismatch(self):
        supplement = LabeledDataset(features=np.zeros((1, 4)), labels=np.array([0]))
        with pytest.raises(ValueError):
            DatasetPartitioner.append_supplement(make_dataset(4), supplement)
