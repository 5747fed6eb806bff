import dataclasses
import os
from typing import Any, Dict, List, Optional

import yaml
from pydantic.dataclasses import dataclass

from asc.shared.classification import ClassificationFactory, ClassificationModel
from asc.shared.experiments.outliers import create_outlier_test
from asc.spam.dataset.metadata import DataSetMetadata, load_dataset_metadata


@dataclass(frozen=True)
class MethodConfig:
    """A named classification method: algorithm, hyperparameters and train/test split"""

    name: str
    algorithm: str
    split_percent: float = 0.5
    hyperparameters: Dict[str, Any] = None

    def __post_init__(self):
        if self.hyperparameters is None:
            object.__setattr__(self, "hyperparameters", {})
        if not 0.0 < self.split_percent < 1.0:
            raise ValueError(f"Split percent of method '{self.name}' must be between 0 and 1, got {self.split_percent}")

    def build_classifier(self, random_state: int) -> ClassificationModel:
        """Create the untrained base classifier of this method"""
        params = dict(self.hyperparameters)
        params.setdefault("random_state", random_state)
        return ClassificationFactory.create_with_defaults(self.algorithm, **params)

    def validate(self) -> None:
        if not ClassificationFactory.is_available(self.algorithm):
            available = list(ClassificationFactory.get_available_models().keys())
            raise ValueError(f"Unknown algorithm '{self.algorithm}' for method '{self.name}'. Available: {available}")


@dataclass(frozen=True)
class ExperimentConfig:
    """Configuration of a repeated train/test experiment over methods and datasets"""

    # Datasets: inline descriptors and/or a metadata file with one 'folder,empty_ham,empty_spam' per line
    datasets: List[DataSetMetadata] = None
    metadata_path: Optional[str] = None

    # Methods to evaluate, in order
    methods: List[MethodConfig] = None

    # Run settings
    number_of_runs: int = 10
    skip_train: bool = False
    skip_test: bool = False
    include_empty: bool = False
    random_state: int = 42

    # Outlier removal
    remove_outliers: bool = True
    outlier_method: str = "zscore"
    outlier_threshold: float = 2.0
    max_outlier_rounds: Optional[int] = None

    # Persistence
    save_arff: bool = False
    save_model: bool = False
    save_sets: bool = False

    # Output
    format_durations: bool = True
    output_report_path: Optional[str] = None
    log_dir: Optional[str] = None

    def __post_init__(self):
        if self.datasets is None:
            object.__setattr__(self, "datasets", [])
        if self.methods is None:
            object.__setattr__(self, "methods", [])

    @classmethod
    def from_yaml(cls, config_file: str) -> "ExperimentConfig":
        """Load configuration from YAML file"""
        if not os.path.exists(config_file):
            raise ValueError(f"Config file does not exist: {config_file}")

        with open(config_file, "r") as f:
            config_dict = yaml.safe_load(f) or {}

        return cls.from_dict(config_dict, base_dir=os.path.dirname(os.path.abspath(config_file)))

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any], base_dir: Optional[str] = None) -> "ExperimentConfig":
        """
        Build a configuration from a plain dictionary.

        Relative paths are resolved against base_dir when given.
        """

        def resolve(path: Optional[str]) -> Optional[str]:
            if path is None:
                return None
            path = os.path.expanduser(path)
            if base_dir is not None and not os.path.isabs(path):
                path = os.path.join(base_dir, path)
            return os.path.abspath(path)

        # Parse methods
        methods = []
        for method_dict in config_dict.get("methods", []):
            if "algorithm" not in method_dict:
                raise ValueError(f"Method entry missing required 'algorithm': {method_dict}")
            methods.append(
                MethodConfig(
                    name=method_dict.get("name", method_dict["algorithm"]),
                    algorithm=method_dict["algorithm"],
                    split_percent=method_dict.get("split_percent", 0.5),
                    hyperparameters=method_dict.get("hyperparameters", {}),
                )
            )

        # Parse inline datasets
        datasets = []
        for dataset_dict in config_dict.get("datasets", []):
            if "folder" not in dataset_dict:
                raise ValueError(f"Dataset entry missing required 'folder': {dataset_dict}")
            datasets.append(
                DataSetMetadata(
                    folder=resolve(dataset_dict["folder"]),
                    empty_ham_count=dataset_dict.get("empty_ham_count", 0),
                    empty_spam_count=dataset_dict.get("empty_spam_count", 0),
                )
            )

        return cls(
            datasets=datasets,
            metadata_path=resolve(config_dict.get("metadata_path")),
            methods=methods,
            number_of_runs=config_dict.get("number_of_runs", 10),
            skip_train=config_dict.get("skip_train", False),
            skip_test=config_dict.get("skip_test", False),
            include_empty=config_dict.get("include_empty", False),
            random_state=config_dict.get("random_state", 42),
            remove_outliers=config_dict.get("remove_outliers", True),
            outlier_method=config_dict.get("outlier_method", "zscore"),
            outlier_threshold=config_dict.get("outlier_threshold", 2.0),
            max_outlier_rounds=config_dict.get("max_outlier_rounds"),
            save_arff=config_dict.get("save_arff", False),
            save_model=config_dict.get("save_model", False),
            save_sets=config_dict.get("save_sets", False),
            format_durations=config_dict.get("format_durations", True),
            output_report_path=resolve(config_dict.get("output_report_path")),
            log_dir=resolve(config_dict.get("log_dir")),
        )

    def with_overrides(self, **overrides: Any) -> "ExperimentConfig":
        """New configuration with the given fields replaced; None values are ignored"""
        overrides = {key: value for key, value in overrides.items() if value is not None}
        unknown = set(overrides) - {field.name for field in dataclasses.fields(self)}
        if unknown:
            raise ValueError(f"Unknown configuration fields: {sorted(unknown)}")
        return dataclasses.replace(self, **overrides)

    def get_datasets(self) -> List[DataSetMetadata]:
        """Inline datasets followed by those of the metadata file, without repeats"""
        datasets = list(self.datasets)
        if self.metadata_path is not None:
            for entry in load_dataset_metadata(self.metadata_path):
                if entry not in datasets:
                    datasets.append(entry)
        return datasets

    def validate(self) -> None:
        """
        Validate configuration

        Raises:
            ValueError: If a setting is invalid
            FileNotFoundError: If the metadata file or a dataset folder does not exist
        """
        if self.number_of_runs < 0:
            raise ValueError(f"number_of_runs must not be negative, got {self.number_of_runs}")

        if not self.methods:
            raise ValueError("No methods configured")
        method_names = [method.name for method in self.methods]
        if len(method_names) != len(set(method_names)):
            raise ValueError("Method names must be unique")
        for method in self.methods:
            method.validate()

        datasets = self.get_datasets()
        if not datasets:
            raise ValueError("No datasets configured")
        for dataset in datasets:
            dataset.validate()

        # Raises on unknown method or invalid threshold
        create_outlier_test(self.outlier_method, self.outlier_threshold)

        if self.max_outlier_rounds is not None and self.max_outlier_rounds < 0:
            raise ValueError("max_outlier_rounds must not be negative")

        if self.output_report_path is not None:
            output_dir = os.path.dirname(self.output_report_path)
            if output_dir and not os.path.exists(output_dir):
                raise ValueError(f"Output directory does not exist: {output_dir}")

    def describe(self) -> Dict[str, Any]:
        """Flat summary of the run settings for logging"""
        return {
            "methods": [method.name for method in self.methods],
            "number_of_runs": self.number_of_runs,
            "skip_train": self.skip_train,
            "skip_test": self.skip_test,
            "include_empty": self.include_empty,
            "remove_outliers": self.remove_outliers,
            "outlier_method": self.outlier_method,
            "outlier_threshold": self.outlier_threshold,
            "save_arff": self.save_arff,
            "save_model": self.save_model,
            "save_sets": self.save_sets,
        }
