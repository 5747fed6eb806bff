import logging
import time
from typing import TYPE_CHECKING, Dict, Optional

import numpy as np

from .base import ClassificationModel
from .evaluation import ClassificationEvaluator

if TYPE_CHECKING:
    from asc.shared.experiments.dataset import LabeledDataset


logger = logging.getLogger(__name__)


class MethodEvaluation:
    """
    Per-run bundle of a classifier, its latest evaluation and the identity of
    the (method, dataset) configuration it belongs to.

    The runner keeps one instance per configuration and swaps the classifier
    in before every run; train and test timings are measured in milliseconds.
    """

    def __init__(self, dataset_name: str, method_name: str, statistics_method: str = ""):
        self.dataset_name = dataset_name
        self.method_name = method_name
        self.statistics_method = statistics_method
        self.classifier: Optional[ClassificationModel] = None
        self.number_of_total_features = 0
        self.number_of_actual_features = 0
        self.train_time = 0.0
        self.test_time = 0.0
        self.evaluation: Dict[str, float] = {}

    def set_classifier(self, classifier: ClassificationModel) -> None:
        """Attach the classifier for the next run and drop the previous evaluation"""
        self.classifier = classifier
        self.evaluation = {}
        self.train_time = 0.0
        self.test_time = 0.0

    def train(self, training_set: "LabeledDataset") -> None:
        """
        Fit the attached classifier on the training partition.

        Raises:
            ValueError: If no classifier is attached
            RuntimeError: If fitting fails
        """
        if self.classifier is None:
            raise ValueError("No classifier attached to evaluation")

        logger.debug(f"Training {self.method_name} on {len(training_set)} instances")
        start_time = time.perf_counter()
        try:
            self.classifier.fit(training_set.features, training_set.labels)
        except Exception as e:
            raise RuntimeError(f"Training failed for {self.method_name}: {str(e)}") from e
        self.train_time = (time.perf_counter() - start_time) * 1000.0

    def test(self, testing_set: "LabeledDataset") -> Dict[str, float]:
        """
        Evaluate the attached classifier on the testing partition.

        Returns:
            Dictionary of per-class evaluation metrics

        Raises:
            ValueError: If no classifier is attached or it is not fitted
            RuntimeError: If prediction fails
        """
        if self.classifier is None:
            raise ValueError("No classifier attached to evaluation")

        logger.debug(f"Testing {self.method_name} on {len(testing_set)} instances")
        start_time = time.perf_counter()
        try:
            y_pred = self.classifier.predict(testing_set.features)
            y_score = self.classifier.predict_proba(testing_set.features)
        except ValueError:
            raise
        except Exception as e:
            raise RuntimeError(f"Testing failed for {self.method_name}: {str(e)}") from e
        self.test_time = (time.perf_counter() - start_time) * 1000.0

        self.evaluation = ClassificationEvaluator.evaluate_binary(
            testing_set.labels, np.asarray(y_pred), np.asarray(y_score)
        )
        return self.evaluation

    def metrics(self) -> Dict[str, float]:
        """
        All metrics of the latest run, including train and test times

        Raises:
            ValueError: If the classifier has not been tested yet
        """
        if not self.evaluation:
            raise ValueError("Classifier has not been evaluated yet")

        metrics = dict(self.evaluation)
        metrics["train_time"] = self.train_time
        metrics["test_time"] = self.test_time
        return metrics

    @property
    def features_summary(self) -> str:
        return f"{self.number_of_total_features}->{self.number_of_actual_features}"
