import logging
import os
from typing import Optional, Tuple

import arff
import numpy as np
import pandas as pd

from asc.shared.experiments.dataset import LabeledDataset
from .message_type import MessageType


logger = logging.getLogger(__name__)

ARFF_FILE_NAME = "data.arff"
CLASS_COLUMN = "class"

# Raw files: big-endian int32 instance count, int32 feature count, then float64 values row by row
_RAW_HEADER_DTYPE = np.dtype(">i4")
_RAW_VALUE_DTYPE = np.dtype(">f8")


def load_raw_file(file_path: str, message_type: MessageType) -> LabeledDataset:
    """
    Load one class worth of feature vectors from a raw binary file.

    Incomplete trailing vectors are ignored.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the header is truncated
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Raw data file does not exist: {file_path}")

    logger.debug(f"Reading [{message_type.file_name}] data from file [{file_path}]")
    with open(file_path, "rb") as fp:
        header = np.frombuffer(fp.read(2 * _RAW_HEADER_DTYPE.itemsize), dtype=_RAW_HEADER_DTYPE)
        if header.shape[0] != 2:
            raise ValueError(f"Raw data file has a truncated header: {file_path}")
        declared_instances, n_features = int(header[0]), int(header[1])
        values = np.frombuffer(fp.read(), dtype=_RAW_VALUE_DTYPE)

    if n_features <= 0:
        raise ValueError(f"Raw data file declares {n_features} features: {file_path}")

    n_instances = values.shape[0] // n_features
    if n_instances != declared_instances:
        logger.warning(f"File [{file_path}] declares {declared_instances} instances but holds {n_instances}")

    features = values[: n_instances * n_features].reshape(n_instances, n_features).astype(np.float64)
    labels = np.full(n_instances, message_type.value, dtype=int)
    return LabeledDataset(features=features, labels=labels, name=os.path.basename(file_path))


def save_raw_file(dataset: LabeledDataset, file_path: str) -> None:
    """Write a dataset's feature vectors in the raw binary format (labels are not stored)"""
    with open(file_path, "wb") as fp:
        fp.write(np.array([len(dataset), dataset.n_features], dtype=_RAW_HEADER_DTYPE).tobytes())
        fp.write(dataset.features.astype(_RAW_VALUE_DTYPE).tobytes())


def match_cardinalities(first: LabeledDataset, second: LabeledDataset) -> Tuple[LabeledDataset, LabeledDataset]:
    """Truncate the bigger dataset so both hold the same number of instances"""
    size = min(len(first), len(second))
    if len(first) != len(second):
        logger.debug(f"Matching cardinalities {len(first)} and {len(second)} to {size}")
    return first.subset(np.arange(size)), second.subset(np.arange(size))


def merge_datasets(first: LabeledDataset, second: LabeledDataset, name: Optional[str] = None) -> LabeledDataset:
    """
    Concatenate two datasets, first's instances before second's.

    Raises:
        ValueError: If the feature counts differ
    """
    merged = first.concat(second)
    merged.name = name if name is not None else first.name
    return merged


def create_empty_pattern_dataset(n_features: int, n_ham: int, n_spam: int) -> LabeledDataset:
    """All-zero feature vectors, n_ham labeled ham followed by n_spam labeled spam"""
    logger.debug(f"Creating empty data set with [{n_features}] features, [{n_ham}] ham and [{n_spam}] spam instances")
    labels = np.concatenate(
        [np.full(n_ham, MessageType.HAM.value, dtype=int), np.full(n_spam, MessageType.SPAM.value, dtype=int)]
    )
    return LabeledDataset(features=np.zeros((n_ham + n_spam, n_features)), labels=labels, name="empty")


def load_dataset(folder: str) -> Tuple[LabeledDataset, int]:
    """
    Load the dataset of a folder.

    A cached ``data.arff`` takes precedence; the total feature count is then
    read from the folder name (e.g. ``.../CHI2/64``). Otherwise the raw ``ham``
    and ``spam`` files are loaded, truncated to equal size and merged.

    Returns:
        Tuple of (dataset, number of total features)

    Raises:
        FileNotFoundError: If the folder or its data files do not exist
    """
    if not os.path.isdir(folder):
        raise FileNotFoundError(f"Dataset folder does not exist: {folder}")

    arff_path = os.path.join(folder, ARFF_FILE_NAME)
    if os.path.exists(arff_path):
        dataset = load_dataset_arff(arff_path)
        try:
            n_total_features = int(os.path.basename(os.path.normpath(folder)))
        except ValueError:
            n_total_features = dataset.n_features
        dataset.name = folder
        return dataset, n_total_features

    ham = load_raw_file(os.path.join(folder, MessageType.HAM.file_name), MessageType.HAM)
    spam = load_raw_file(os.path.join(folder, MessageType.SPAM.file_name), MessageType.SPAM)
    ham, spam = match_cardinalities(ham, spam)
    dataset = merge_datasets(ham, spam, name=folder)
    return dataset, dataset.n_features


def save_dataset_csv(dataset: LabeledDataset, file_path: str) -> None:
    """Save a dataset to CSV with one column per feature plus a class column"""
    logger.debug(f"Saving data set to file [{file_path}]")
    df = pd.DataFrame(dataset.features, columns=dataset.feature_names)
    df[CLASS_COLUMN] = [MessageType(label).name for label in dataset.labels]
    df.to_csv(file_path, index=False)


def load_dataset_csv(file_path: str) -> LabeledDataset:
    """Load a dataset written by save_dataset_csv"""
    df = pd.read_csv(file_path)
    if CLASS_COLUMN not in df.columns:
        raise ValueError(f"CSV file must have a '{CLASS_COLUMN}' column: {file_path}")
    feature_names = [col for col in df.columns if col != CLASS_COLUMN]
    labels = np.array([MessageType.from_name(value).value for value in df[CLASS_COLUMN]], dtype=int)
    return LabeledDataset(
        features=df[feature_names].to_numpy(dtype=np.float64),
        labels=labels,
        name=os.path.basename(file_path),
        feature_names=feature_names,
    )


def save_dataset_arff(dataset: LabeledDataset, file_path: str, relation: Optional[str] = None) -> None:
    """Save a dataset as ARFF with numeric attributes and a nominal {HAM,SPAM} class"""
    logger.debug(f"Saving data set to file [{file_path}]")
    attributes = [(name, "NUMERIC") for name in dataset.feature_names]
    attributes.append((CLASS_COLUMN, [m.name for m in MessageType]))
    data = [
        [float(v) for v in row] + [MessageType(label).name] for row, label in zip(dataset.features, dataset.labels)
    ]

    with open(file_path, "w") as f:
        arff.dump({"relation": relation or dataset.name or "data", "attributes": attributes, "data": data}, f)


def load_dataset_arff(file_path: str) -> LabeledDataset:
    """
    Load an ARFF dataset with numeric features and a nominal ham/spam class attribute.

    Raises:
        ValueError: If the file has no class attribute
    """
    logger.debug(f"Reading data set from file [{file_path}]")
    with open(file_path) as f:
        content = arff.load(f)

    names = [name for name, _ in content["attributes"]]
    if CLASS_COLUMN not in names:
        raise ValueError(f"ARFF file must have a '{CLASS_COLUMN}' attribute: {file_path}")

    class_index = names.index(CLASS_COLUMN)
    feature_indices = [i for i in range(len(names)) if i != class_index]
    rows = content["data"]
    features = np.array([[row[i] for i in feature_indices] for row in rows], dtype=np.float64)
    labels = np.array([MessageType.from_name(row[class_index]).value for row in rows], dtype=int)
    return LabeledDataset(
        features=features.reshape(len(rows), len(feature_indices)),
        labels=labels,
        name=content["relation"],
        feature_names=[names[i] for i in feature_indices],
    )
