from pydantic.dataclasses import dataclass
from pydantic import Field
from sklearn.naive_bayes import GaussianNB

from ..base import ClassificationModel, ClassificationConfig


@dataclass
class NaiveBayesConfig(ClassificationConfig):
    """Configuration for Gaussian Naive Bayes classifier"""
    var_smoothing: float = Field(1e-9, description="Portion of the largest variance added to variances for stability")


class NaiveBayesModel(ClassificationModel):
    """Gaussian Naive Bayes classifier"""

    def __init__(self, config: NaiveBayesConfig):
        super().__init__(config)
        self.config: NaiveBayesConfig = config

    def _build_estimator(self) -> GaussianNB:
        return GaussianNB(var_smoothing=self.config.var_smoothing)
