from pydantic.dataclasses import dataclass
from pydantic import Field
from sklearn.linear_model import LogisticRegression

from ..base import ClassificationModel, ClassificationConfig


@dataclass
class LogisticRegressionConfig(ClassificationConfig):
    """Configuration for Logistic Regression classifier"""
    C: float = Field(1.0, description="Inverse of regularization strength")
    solver: str = Field("lbfgs", description="Optimization algorithm")
    max_iter: int = Field(1000, description="Maximum number of solver iterations")


class LogisticRegressionModel(ClassificationModel):
    """Logistic Regression classifier"""

    def __init__(self, config: LogisticRegressionConfig):
        super().__init__(config)
        self.config: LogisticRegressionConfig = config

    def _build_estimator(self) -> LogisticRegression:
        return LogisticRegression(
            C=self.config.C,
            solver=self.config.solver,
            max_iter=self.config.max_iter,
            random_state=self.config.random_state,
        )
