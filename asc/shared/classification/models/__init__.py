"""Classification models package"""

from .decision_tree import DecisionTreeModel, DecisionTreeConfig
from .random_forest import RandomForestModel, RandomForestConfig
from .xgboost import XGBoostModel, XGBoostConfig
from .naive_bayes import NaiveBayesModel, NaiveBayesConfig
from .logistic_regression import LogisticRegressionModel, LogisticRegressionConfig
from .mlp import MLPModel, MLPConfig

__all__ = [
    'DecisionTreeModel',
    'DecisionTreeConfig',
    'RandomForestModel',
    'RandomForestConfig',
    'XGBoostModel',
    'XGBoostConfig',
    'NaiveBayesModel',
    'NaiveBayesConfig',
    'LogisticRegressionModel',
    'LogisticRegressionConfig',
    'MLPModel',
    'MLPConfig',
]
