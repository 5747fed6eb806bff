import math
from typing import Tuple, Union

import numpy as np

from .dataset import LabeledDataset


def training_size(n_instances: int, train_fraction: float) -> int:
    """Number of training instances, train_fraction * n rounded half up"""
    return int(math.floor(n_instances * train_fraction + 0.5))


class DatasetPartitioner:
    """Shuffles a dataset and splits it into a training prefix and testing suffix"""

    @staticmethod
    def partition(
        dataset: LabeledDataset,
        random: Union[np.random.Generator, int],
        train_fraction: float,
    ) -> Tuple[LabeledDataset, LabeledDataset]:
        """
        Shuffle the whole dataset and split it at train_fraction.

        The input dataset is never modified; both partitions are new datasets.

        Args:
            dataset: Dataset to partition
            random: Seeded generator, or an integer seed to create one from
            train_fraction: Share of instances used for training, in (0, 1)

        Returns:
            Tuple of (training_set, testing_set)

        Raises:
            ValueError: If train_fraction is outside (0, 1)
        """
        if not 0.0 < train_fraction < 1.0:
            raise ValueError(f"Train fraction must be between 0 and 1 (exclusive), got {train_fraction}")

        rng = random if isinstance(random, np.random.Generator) else np.random.default_rng(random)

        n_instances = len(dataset)
        order = rng.permutation(n_instances)
        n_train = training_size(n_instances, train_fraction)

        return dataset.subset(order[:n_train]), dataset.subset(order[n_train:])

    @staticmethod
    def append_supplement(testing_set: LabeledDataset, supplement: LabeledDataset) -> LabeledDataset:
        """
        Append a fixed auxiliary dataset (e.g. empty patterns) to a testing partition.

        Raises:
            ValueError: If the feature counts differ
        """
        return testing_set.concat(supplement)
