"""Metric data models"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional
from enum import Enum


class MetricType(Enum):
    """Prometheus metric types"""
    COUNTER = "counter"
    GAUGE = "gauge"


@dataclass(frozen=True)
class MetricDefinition:
    """A declared metric: identity, help text, kind and optional label dimension"""
    name: str
    help_text: str
    metric_type: MetricType = MetricType.GAUGE
    label_name: Optional[str] = None
    namespace: str = ""

    @property
    def fq_name(self) -> str:
        """Fully qualified metric name as exposed to Prometheus"""
        if self.namespace:
            return f"{self.namespace}_{self.name}"
        return self.name

    @property
    def is_grouped(self) -> bool:
        return self.label_name is not None


@dataclass(frozen=True)
class MetricQuery:
    """Binds a metric definition to the SQL that produces its samples.

    Scalar queries return a single row whose first column is the value.
    Grouped queries return ``(label, value)`` rows; ``label_transform`` is
    applied to each raw label before it is used.
    """
    definition: MetricDefinition
    sql: str
    params: Dict[str, Any] = field(default_factory=dict)
    requires_woocommerce: bool = False
    label_transform: Optional[Callable[[str], str]] = None

    @property
    def grouped(self) -> bool:
        return self.definition.is_grouped


@dataclass(frozen=True)
class MetricValue:
    """Represents a single sample produced by one collection cycle"""
    definition: MetricDefinition
    value: float
    label_value: Optional[str] = None

    @property
    def name(self) -> str:
        return self.definition.fq_name
