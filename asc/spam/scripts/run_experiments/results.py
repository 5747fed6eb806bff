from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass
class ConfigurationResult:
    """Outcome of one (method, dataset) configuration"""

    method_name: str
    dataset_name: str
    dataset_folder: str
    statistics_method: str
    features_summary: str
    runs_executed: int = 0
    runs_removed: int = 0
    # metric name -> (mean, sample standard deviation); empty when testing was skipped
    statistics: Dict[str, Tuple[float, float]] = field(default_factory=dict)

    @property
    def runs_retained(self) -> int:
        return self.runs_executed - self.runs_removed
