from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np


@dataclass(eq=False)
class LabeledDataset:
    """
    Ordered sequence of labeled feature vectors.

    features has shape (n_instances, n_features); labels has shape
    (n_instances,) and holds integer class indices. Every vector has the same
    feature length by construction of the 2D array.
    """

    features: np.ndarray
    labels: np.ndarray
    name: str = ""
    feature_names: Optional[List[str]] = None

    def __post_init__(self):
        self.features = np.asarray(self.features, dtype=np.float64)
        self.labels = np.asarray(self.labels, dtype=int)

        if self.features.ndim == 1 and self.features.size == 0:
            self.features = self.features.reshape(0, 0)
        if self.features.ndim != 2:
            raise ValueError(f"Features must be 2D, got shape {self.features.shape}")
        if self.labels.ndim != 1:
            raise ValueError(f"Labels must be 1D, got shape {self.labels.shape}")
        if self.features.shape[0] != self.labels.shape[0]:
            raise ValueError(
                f"Features and labels instance count mismatch: {self.features.shape[0]} vs {self.labels.shape[0]}"
            )
        if self.feature_names is None:
            self.feature_names = [f"x{i}" for i in range(self.features.shape[1])]
        elif len(self.feature_names) != self.features.shape[1]:
            raise ValueError(
                f"Got {len(self.feature_names)} feature names for {self.features.shape[1]} features"
            )

    def __len__(self) -> int:
        return self.features.shape[0]

    @property
    def n_features(self) -> int:
        return self.features.shape[1]

    def subset(self, indices: np.ndarray) -> "LabeledDataset":
        """Copy of the instances at the given positions, in that order"""
        indices = np.asarray(indices, dtype=int)
        return LabeledDataset(
            features=self.features[indices].copy(),
            labels=self.labels[indices].copy(),
            name=self.name,
            feature_names=list(self.feature_names),
        )

    def concat(self, other: "LabeledDataset") -> "LabeledDataset":
        """New dataset with other's instances appended after this one's"""
        if other.n_features != self.n_features:
            raise ValueError(f"Feature count mismatch: {self.n_features} vs {other.n_features}")
        return LabeledDataset(
            features=np.vstack([self.features, other.features]),
            labels=np.concatenate([self.labels, other.labels]),
            name=self.name,
            feature_names=list(self.feature_names),
        )

    def get_label_distribution(self) -> Dict[int, int]:
        values, counts = np.unique(self.labels, return_counts=True)
        return {int(v): int(c) for v, c in zip(values, counts)}
