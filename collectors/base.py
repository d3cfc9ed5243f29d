"""Base collector class and interfaces"""
from abc import ABC, abstractmethod
from typing import List, Optional
from metrics.models import MetricValue


class CollectionError(Exception):
    """A collection cycle failed; none of its samples may be used"""

    def __init__(self, message: str, metric_name: Optional[str] = None):
        super().__init__(message)
        self.metric_name = metric_name


class BaseCollector(ABC):
    """Base class for all metric collectors"""

    def __init__(self, config=None, name: str = "", help_text: str = ""):
        self.config = config
        self._name = name
        self._help_text = help_text

    @abstractmethod
    def collect(self) -> List[MetricValue]:
        """Collect metrics and return list of MetricValue objects"""
        pass

    @property
    def name(self) -> str:
        """Collector name for identification"""
        return self._name

    @property
    def help_text(self) -> str:
        """Help text describing what this collector does"""
        return self._help_text or f"{self.name} metrics collector"

    def to_float(self, value, metric_name: str) -> float:
        """Convert a database value to float, raising CollectionError if it is not numeric"""
        if value is None:
            raise CollectionError(f"{metric_name}: query returned NULL", metric_name)
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise CollectionError(f"{metric_name}: non-numeric value {value!r}", metric_name) from e
