from typing import Optional
from pydantic.dataclasses import dataclass
from pydantic import Field
from sklearn.ensemble import RandomForestClassifier

from ..base import ClassificationModel, ClassificationConfig


@dataclass
class RandomForestConfig(ClassificationConfig):
    """Configuration for a Breiman random forest of unpruned trees"""
    n_estimators: int = Field(100, description="Number of trees in the forest")
    max_features: str = Field("log2", description="Features tried per split: log2, sqrt or a fraction")
    max_depth: Optional[int] = Field(None, description="Maximum depth of each tree, unlimited when None")
    min_samples_leaf: int = Field(1, description="Minimum number of messages in a leaf")
    class_weight: Optional[str] = Field(None, description="'balanced' or 'balanced_subsample' to reweight classes")
    oob_score: bool = Field(False, description="Estimate accuracy on the out-of-bag messages")
    n_jobs: Optional[int] = Field(None, description="Number of jobs to run in parallel")


class RandomForestModel(ClassificationModel):
    """Random forest over the message feature vectors"""

    def __init__(self, config: RandomForestConfig):
        super().__init__(config)
        self.config: RandomForestConfig = config

    def _build_estimator(self) -> RandomForestClassifier:
        config = self.config
        return RandomForestClassifier(
            n_estimators=config.n_estimators,
            max_features=config.max_features,
            max_depth=config.max_depth,
            min_samples_leaf=config.min_samples_leaf,
            class_weight=config.class_weight,
            oob_score=config.oob_score,
            n_jobs=config.n_jobs,
            random_state=config.random_state,
        )
