from typing import Optional
from pydantic.dataclasses import dataclass
from pydantic import Field
from sklearn.tree import DecisionTreeClassifier

from ..base import ClassificationModel, ClassificationConfig


@dataclass
class DecisionTreeConfig(ClassificationConfig):
    """
    Configuration for a pruned C4.5-style decision tree.

    Defaults follow the usual C4.5 setup: information gain splits, at least two
    messages per leaf and cost-complexity pruning instead of a fixed depth.
    """
    criterion: str = Field("entropy", description="Split quality measure: entropy (information gain) or gini")
    max_depth: Optional[int] = Field(None, description="Maximum depth of the tree, unlimited when None")
    min_samples_leaf: int = Field(2, description="Minimum number of messages in a leaf")
    ccp_alpha: float = Field(0.0, description="Cost-complexity pruning strength, no pruning at 0")
    class_weight: Optional[str] = Field(None, description="'balanced' to weight ham and spam by inverse frequency")


class DecisionTreeModel(ClassificationModel):
    """C4.5-style decision tree over the message feature vectors"""

    def __init__(self, config: DecisionTreeConfig):
        super().__init__(config)
        self.config: DecisionTreeConfig = config

    def _build_estimator(self) -> DecisionTreeClassifier:
        config = self.config
        return DecisionTreeClassifier(
            criterion=config.criterion,
            max_depth=config.max_depth,
            min_samples_leaf=config.min_samples_leaf,
            ccp_alpha=config.ccp_alpha,
            class_weight=config.class_weight,
            random_state=config.random_state,
        )
