from typing import List
from pydantic.dataclasses import dataclass
from pydantic import Field
from sklearn.neural_network import MLPClassifier

from ..base import ClassificationModel, ClassificationConfig


@dataclass
class MLPConfig(ClassificationConfig):
    """Configuration for Multilayer Perceptron classifier"""
    hidden_layer_sizes: List[int] = Field(default_factory=lambda: [100], description="Neurons per hidden layer")
    activation: str = Field("relu", description="Activation function for the hidden layers")
    learning_rate_init: float = Field(0.001, description="Initial learning rate")
    max_iter: int = Field(200, description="Maximum number of training epochs")
    early_stopping: bool = Field(False, description="Whether to stop when validation score stops improving")


class MLPModel(ClassificationModel):
    """Multilayer Perceptron classifier"""

    def __init__(self, config: MLPConfig):
        super().__init__(config)
        self.config: MLPConfig = config

    def _build_estimator(self) -> MLPClassifier:
        return MLPClassifier(
            hidden_layer_sizes=tuple(self.config.hidden_layer_sizes),
            activation=self.config.activation,
            learning_rate_init=self.config.learning_rate_init,
            max_iter=self.config.max_iter,
            early_stopping=self.config.early_stopping,
            random_state=self.config.random_state,
        )
