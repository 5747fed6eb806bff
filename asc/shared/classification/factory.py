from typing import Any, Dict, Tuple, Type, Union

from .base import ClassificationModel, ClassificationConfig
from .models import (
    DecisionTreeModel,
    DecisionTreeConfig,
    RandomForestModel,
    RandomForestConfig,
    XGBoostModel,
    XGBoostConfig,
    NaiveBayesModel,
    NaiveBayesConfig,
    LogisticRegressionModel,
    LogisticRegressionConfig,
    MLPModel,
    MLPConfig,
)


class ClassificationFactory:
    """Creates classifiers by algorithm name, accepting the short aliases used in method configs"""

    _registry: Dict[str, Tuple[Type[ClassificationModel], Type[ClassificationConfig]]] = {
        "decision_tree": (DecisionTreeModel, DecisionTreeConfig),
        "random_forest": (RandomForestModel, RandomForestConfig),
        "xgboost": (XGBoostModel, XGBoostConfig),
        "naive_bayes": (NaiveBayesModel, NaiveBayesConfig),
        "logistic_regression": (LogisticRegressionModel, LogisticRegressionConfig),
        "mlp": (MLPModel, MLPConfig),
    }

    _aliases: Dict[str, str] = {
        "dt": "decision_tree",
        "rf": "random_forest",
        "xgb": "xgboost",
        "nb": "naive_bayes",
        "lr": "logistic_regression",
    }

    @classmethod
    def _resolve(cls, model_name: str) -> str:
        """
        Canonical registry name of an algorithm name or alias

        Raises:
            ValueError: If the name is unknown
        """
        name = model_name.lower().replace("-", "_")
        name = cls._aliases.get(name, name)
        if name not in cls._registry:
            raise ValueError(f"Unknown model: {model_name}. Available: {sorted(cls.get_available_models())}")
        return name

    @classmethod
    def create(cls, model_name: str, config: Union[Dict[str, Any], ClassificationConfig]) -> ClassificationModel:
        """
        Create classification model instance

        Args:
            model_name: Algorithm name or alias
            config: Configuration dictionary or config object

        Returns:
            Configured, unfitted classification model

        Raises:
            ValueError: If the model name is unknown or the config has the wrong type
        """
        model_class, config_class = cls._registry[cls._resolve(model_name)]

        if isinstance(config, dict):
            config = config_class(**config)
        elif not isinstance(config, ClassificationConfig):
            raise ValueError(f"Config must be dict or ClassificationConfig, got {type(config)}")

        return model_class(config)

    @classmethod
    def create_with_defaults(cls, model_name: str, **kwargs) -> ClassificationModel:
        """Create a model from its default config with the given fields overridden"""
        return cls.create(model_name, dict(kwargs))

    @classmethod
    def get_available_models(cls) -> Dict[str, Type[ClassificationModel]]:
        """Model classes by name, aliases included"""
        models = {name: entry[0] for name, entry in cls._registry.items()}
        models.update({alias: cls._registry[name][0] for alias, name in cls._aliases.items()})
        return models

    @classmethod
    def is_available(cls, model_name: str) -> bool:
        try:
            cls._resolve(model_name)
        except ValueError:
            return False
        return True

    @classmethod
    def get_model_config_class(cls, model_name: str) -> Type[ClassificationConfig]:
        return cls._registry[cls._resolve(model_name)][1]
