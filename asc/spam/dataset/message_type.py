from enum import Enum

from asc.shared.classification.evaluation import HAM, SPAM


class MessageType(Enum):
    """Class of a message, valued by its label index"""

    HAM = HAM
    SPAM = SPAM

    @property
    def file_name(self) -> str:
        """Name of the raw data file holding this class inside a dataset folder"""
        return self.name.lower()

    @classmethod
    def from_name(cls, name: str) -> "MessageType":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown message type: {name}. Available: {[m.name for m in cls]}")
