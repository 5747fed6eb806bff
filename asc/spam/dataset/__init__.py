from .message_type import MessageType
from .metadata import DataSetMetadata, load_dataset_metadata, parse_metadata_line, shorten_folder_name
from .loader import (
    load_dataset,
    load_raw_file,
    save_raw_file,
    merge_datasets,
    match_cardinalities,
    create_empty_pattern_dataset,
    save_dataset_csv,
    load_dataset_csv,
    save_dataset_arff,
    load_dataset_arff,
)

__all__ = [
    "MessageType",
    "DataSetMetadata",
    "load_dataset_metadata",
    "parse_metadata_line",
    "shorten_folder_name",
    "load_dataset",
    "load_raw_file",
    "save_raw_file",
    "merge_datasets",
    "match_cardinalities",
    "create_empty_pattern_dataset",
    "save_dataset_csv",
    "load_dataset_csv",
    "save_dataset_arff",
    "load_dataset_arff",
]
