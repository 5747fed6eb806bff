import logging
import os
import pickle

from .base import ClassificationModel


logger = logging.getLogger(__name__)


def build_model_filename(folder: str, algorithm_name: str, split_percent: float, seed: int) -> str:
    """
    Build the file name a trained classifier is persisted under.

    Example: ``<folder>/RandomForest_TRAIN=50_TEST=50_SEED=3.model``
    """
    train_percent = int(round(100 * split_percent))
    test_percent = 100 - train_percent
    filename = f"{algorithm_name}_TRAIN={train_percent}_TEST={test_percent}_SEED={seed}.model"
    return os.path.join(folder, filename)


def save_model(model: ClassificationModel, file_path: str) -> None:
    """Pickle a classifier to file_path"""
    logger.debug(f"Saving model to file [{file_path}]")
    with open(file_path, "wb") as fp:
        pickle.dump(model, fp, pickle.HIGHEST_PROTOCOL)


def load_model(file_path: str) -> ClassificationModel:
    """
    Load a pickled classifier.

    Raises:
        FileNotFoundError: If the model file does not exist
        ValueError: If the file does not contain a classifier
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Model file does not exist: {file_path}")

    logger.debug(f"Loading model from file [{file_path}]")
    with open(file_path, "rb") as fp:
        model = pickle.load(fp)

    if not isinstance(model, ClassificationModel):
        raise ValueError(f"File does not contain a classification model: {file_path}")
    return model
