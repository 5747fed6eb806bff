"""Classification module for binary ham/spam classification"""

from .base import ClassificationModel, ClassificationConfig
from .factory import ClassificationFactory
from .evaluation import ClassificationEvaluator, HAM, SPAM
from .method_evaluation import MethodEvaluation
from .persistence import save_model, load_model, build_model_filename

__all__ = [
    'ClassificationModel',
    'ClassificationConfig',
    'ClassificationFactory',
    'ClassificationEvaluator',
    'MethodEvaluation',
    'HAM',
    'SPAM',
    'save_model',
    'load_model',
    'build_model_filename',
]
