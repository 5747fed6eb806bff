"""Evaluation metrics for binary ham/spam classification"""

from typing import Dict, List, Optional
import numpy as np
from sklearn.metrics import (
    precision_score,
    recall_score,
    average_precision_score,
    roc_auc_score,
    confusion_matrix,
)

# Class indices used throughout the project
HAM = 0
SPAM = 1
CLASS_NAMES = {HAM: "ham", SPAM: "spam"}


class ClassificationEvaluator:
    """Stateless evaluation of binary classifiers, reported per class"""

    @staticmethod
    def get_metric_names() -> List[str]:
        """
        Get the names of all metrics computed by evaluate_binary, in report order

        Returns:
            List of metric names
        """
        return [
            "ham_precision",
            "spam_precision",
            "ham_recall",
            "spam_recall",
            "ham_area_under_prc",
            "spam_area_under_prc",
            "ham_area_under_roc",
            "spam_area_under_roc",
        ]

    @staticmethod
    def evaluate_binary(
        y_true: np.ndarray, y_pred: np.ndarray, y_score: Optional[np.ndarray] = None
    ) -> Dict[str, float]:
        """
        Compute per-class precision, recall, area under the precision-recall curve
        and area under the ROC curve.

        Args:
            y_true: True labels (0 = ham, 1 = spam)
            y_pred: Predicted labels
            y_score: Class probabilities of shape (n_samples, 2). When omitted the
                hard predictions are used as scores.

        Returns:
            Dictionary keyed by the names from get_metric_names
        """
        y_true = np.asarray(y_true).astype(int)
        y_pred = np.asarray(y_pred).astype(int)
        if y_true.shape != y_pred.shape:
            raise ValueError(f"Shape mismatch: y_true {y_true.shape} vs y_pred {y_pred.shape}")
        if y_true.shape[0] == 0:
            raise ValueError("Empty label arrays")

        if y_score is None:
            y_score = np.column_stack([1 - y_pred, y_pred]).astype(float)

        metrics = {}
        for label, class_name in CLASS_NAMES.items():
            metrics[f"{class_name}_precision"] = float(
                precision_score(y_true, y_pred, pos_label=label, zero_division=0)
            )
            metrics[f"{class_name}_recall"] = float(recall_score(y_true, y_pred, pos_label=label, zero_division=0))
            metrics[f"{class_name}_area_under_prc"] = ClassificationEvaluator._area_under_prc(
                y_true == label, y_score[:, label]
            )
            metrics[f"{class_name}_area_under_roc"] = ClassificationEvaluator._area_under_roc(
                y_true == label, y_score[:, label]
            )

        return {name: metrics[name] for name in ClassificationEvaluator.get_metric_names()}

    @staticmethod
    def confusion(y_true: np.ndarray, y_pred: np.ndarray) -> np.ndarray:
        """Confusion matrix with rows/columns ordered ham, spam"""
        return confusion_matrix(y_true, y_pred, labels=[HAM, SPAM])

    @staticmethod
    def _area_under_prc(is_positive: np.ndarray, scores: np.ndarray) -> float:
        # undefined without any positive sample
        if not np.any(is_positive):
            return float("nan")
        return float(average_precision_score(is_positive.astype(int), scores))

    @staticmethod
    def _area_under_roc(is_positive: np.ndarray, scores: np.ndarray) -> float:
        # undefined unless both classes are present
        if np.all(is_positive) or not np.any(is_positive):
            return float("nan")
        return float(roc_auc_score(is_positive.astype(int), scores))
