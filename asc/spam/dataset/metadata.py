import logging
import os
from typing import List

from pydantic.dataclasses import dataclass


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataSetMetadata:
    """A dataset folder plus the number of empty ham/spam patterns added to its test sets"""

    folder: str
    empty_ham_count: int = 0
    empty_spam_count: int = 0

    def __post_init__(self):
        if self.empty_ham_count < 0 or self.empty_spam_count < 0:
            raise ValueError(f"Empty pattern counts must not be negative for {self.folder}")

    @property
    def name(self) -> str:
        return shorten_folder_name(self.folder)

    @property
    def statistics_method(self) -> str:
        """Feature-selection statistic of the folder, taken from its parent directory name"""
        parent = os.path.dirname(os.path.normpath(self.folder))
        return os.path.basename(parent)

    def validate(self) -> None:
        if not os.path.isdir(self.folder):
            raise FileNotFoundError(f"Dataset folder does not exist: {self.folder}")


def shorten_folder_name(folder: str, levels: int = 3) -> str:
    """Last `levels` path components of a folder, e.g. TREC/CHI2/64"""
    parts = [part for part in os.path.normpath(folder).split(os.sep) if part]
    return "/".join(parts[-levels:])


def parse_metadata_line(line: str) -> DataSetMetadata:
    """
    Parse a ``folder,empty_ham_count,empty_spam_count`` line.

    Raises:
        ValueError: If the line is malformed
    """
    parts = [part.strip() for part in line.split(",")]
    if len(parts) != 3 or not parts[0]:
        raise ValueError(f"Malformed metadata line, expected 'folder,empty_ham,empty_spam': {line!r}")

    folder = parts[0]
    if folder.startswith("~"):
        folder = os.path.expanduser(folder)

    try:
        empty_ham, empty_spam = int(parts[1]), int(parts[2])
    except ValueError:
        raise ValueError(f"Malformed metadata line, empty counts must be integers: {line!r}")

    return DataSetMetadata(folder=folder, empty_ham_count=empty_ham, empty_spam_count=empty_spam)


def load_dataset_metadata(file_path: str) -> List[DataSetMetadata]:
    """
    Load dataset descriptors from a metadata file.

    Empty lines and lines starting with '#' are skipped; file order is kept and
    repeated descriptors are dropped.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If any line is malformed
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Metadata file does not exist: {file_path}")

    metadata: List[DataSetMetadata] = []
    with open(file_path, "r") as f:
        for line_number, line in enumerate(f, 1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                entry = parse_metadata_line(line)
            except ValueError as e:
                raise ValueError(f"{file_path}:{line_number}: {e}")
            if entry not in metadata:
                metadata.append(entry)

    logger.debug(f"Loaded {len(metadata)} dataset descriptors from {file_path}")
    return metadata
