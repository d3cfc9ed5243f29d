"""Prometheus exposition for collected WordPress metrics"""
from typing import Dict, Iterator, List
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric
from metrics.models import MetricDefinition, MetricType, MetricValue
from logging_config import get_logger


logger = get_logger(__name__)


def build_family(definition: MetricDefinition) -> Metric:
    """Create an empty metric family for a definition"""
    labels = [definition.label_name] if definition.is_grouped else None
    if definition.metric_type == MetricType.COUNTER:
        return CounterMetricFamily(definition.fq_name, definition.help_text, labels=labels)
    return GaugeMetricFamily(definition.fq_name, definition.help_text, labels=labels)


class PrometheusExporter:
    """prometheus_client custom collector wrapping a describe/collect collector.

    Registered in a private CollectorRegistry with auto_describe so that
    describe() is what Prometheus registration validates against; collect()
    runs one full collection cycle per call.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, collector):
        self.collector = collector
        self.registry = CollectorRegistry(auto_describe=True)
        self.registry.register(self)

    def describe(self) -> Iterator[Metric]:
        """Yield one empty family per declared metric"""
        for definition in self.collector.describe():
            yield build_family(definition)

    def collect(self) -> Iterator[Metric]:
        """Run a collection cycle and yield families that produced samples"""
        metrics = self.collector.collect()
        return iter(self.to_families(metrics))

    def to_families(self, metrics: List[MetricValue]) -> List[Metric]:
        """Group samples into metric families in declaration order.

        Metrics without samples are omitted, so a skipped or empty metric is
        absent from the exposition rather than reported as zero.
        """
        declared = self.collector.describe()
        families: Dict[MetricDefinition, Metric] = {}

        for metric in metrics:
            if metric.definition not in declared:
                raise ValueError(f"Sample for undeclared metric: {metric.name}")
            family = families.get(metric.definition)
            if family is None:
                family = families[metric.definition] = build_family(metric.definition)
            label_values = [metric.label_value] if metric.definition.is_grouped else []
            family.add_metric(label_values, metric.value)

        return [families[definition] for definition in declared if definition in families]

    def render(self) -> bytes:
        """Collect and encode in the Prometheus text exposition format"""
        return generate_latest(self.registry)
