from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import numpy as np
from pydantic.dataclasses import dataclass


@dataclass
class ClassificationConfig:
    """Base configuration for classification models"""

    random_state: int = 42


class ClassificationModel(ABC):
    """Abstract base class for binary ham/spam classification models"""

    def __init__(self, config: ClassificationConfig):
        self.config = config
        self._is_fitted = False
        self._model = None
        self._n_classes = None

    def _validate_labels(self, labels: np.ndarray) -> np.ndarray:
        """
        Validate labels before fitting

        Args:
            labels: Input labels

        Returns:
            Validated 1D labels array
        """
        if not isinstance(labels, np.ndarray):
            labels = np.array(labels)

        if labels.ndim != 1:
            raise ValueError(f"Labels must be a 1D array, got {labels.ndim}D")

        self._n_classes = len(np.unique(labels))
        return labels

    def _check_fitted(self) -> None:
        if not self._is_fitted:
            raise ValueError("Model must be fitted before making predictions")

    @abstractmethod
    def _build_estimator(self) -> Any:
        """Create the unfitted underlying estimator from the config"""
        pass

    def fit(self, features: np.ndarray, labels: np.ndarray) -> "ClassificationModel":
        """
        Fit the classification model to the features and labels

        Args:
            features: Input features of shape (n_samples, n_features)
            labels: Target labels of shape (n_samples,)

        Returns:
            Self for method chaining
        """
        labels = self._validate_labels(labels)
        self._model = self._build_estimator()
        self._model.fit(features, labels)
        self._is_fitted = True
        return self

    def predict(self, features: np.ndarray) -> np.ndarray:
        """
        Predict labels for the features

        Args:
            features: Input features of shape (n_samples, n_features)

        Returns:
            Predicted labels of shape (n_samples,)
        """
        self._check_fitted()
        return self._model.predict(features)

    def predict_proba(self, features: np.ndarray) -> np.ndarray:
        """
        Predict class probabilities for the features

        Columns follow the sorted class labels seen during fitting. When only
        one class was present in the training data a second all-zero column is
        added so the result is always of shape (n_samples, 2).

        Args:
            features: Input features of shape (n_samples, n_features)

        Returns:
            Class probabilities of shape (n_samples, 2)
        """
        self._check_fitted()
        proba = self._model.predict_proba(features)
        if proba.shape[1] == 2:
            return proba

        full = np.zeros((features.shape[0], 2))
        seen_class = int(self._model.classes_[0])
        full[:, seen_class] = proba[:, 0]
        return full

    def clone(self) -> "ClassificationModel":
        """Return an unfitted copy of this model with the same configuration"""
        return self.__class__(self.config)

    @property
    def is_fitted(self) -> bool:
        """Check if the model has been fitted"""
        return self._is_fitted

    @property
    def n_classes(self) -> Optional[int]:
        """Get number of classes seen during fitting"""
        return self._n_classes

    @property
    def name(self) -> str:
        """Short algorithm name, used in model file names"""
        return self.__class__.__name__.replace("Model", "")

    def __getstate__(self) -> Dict[str, Any]:
        """Support for pickle serialization"""
        return self.__dict__.copy()

    def __setstate__(self, state: Dict[str, Any]) -> None:
        """Support for pickle deserialization"""
        self.__dict__.update(state)
