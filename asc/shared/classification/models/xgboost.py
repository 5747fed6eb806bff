from typing import Optional
from pydantic.dataclasses import dataclass
from pydantic import Field
import xgboost as xgb

from ..base import ClassificationModel, ClassificationConfig


@dataclass
class XGBoostConfig(ClassificationConfig):
    """Configuration for gradient boosted trees on the ham/spam problem"""
    n_estimators: int = Field(100, description="Number of boosting rounds")
    max_depth: int = Field(6, description="Maximum depth of each tree")
    learning_rate: float = Field(0.3, description="Shrinkage applied to every boosting round")
    subsample: float = Field(1.0, description="Share of training messages sampled per round")
    colsample_bytree: float = Field(1.0, description="Share of features sampled per tree")
    scale_pos_weight: Optional[float] = Field(None, description="Weight of spam relative to ham")
    tree_method: str = Field("hist", description="Tree construction algorithm")
    n_jobs: Optional[int] = Field(1, description="Number of parallel threads")


class XGBoostModel(ClassificationModel):
    """Gradient boosted trees with a logistic objective, spam being the positive class"""

    def __init__(self, config: XGBoostConfig):
        super().__init__(config)
        self.config: XGBoostConfig = config

    def _build_estimator(self) -> xgb.XGBClassifier:
        config = self.config
        return xgb.XGBClassifier(
            objective="binary:logistic",
            eval_metric="aucpr",
            n_estimators=config.n_estimators,
            max_depth=config.max_depth,
            learning_rate=config.learning_rate,
            subsample=config.subsample,
            colsample_bytree=config.colsample_bytree,
            scale_pos_weight=config.scale_pos_weight,
            tree_method=config.tree_method,
            n_jobs=config.n_jobs,
            random_state=config.random_state,
        )
