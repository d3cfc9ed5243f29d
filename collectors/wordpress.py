"""WordPress database metrics collector"""
import time
from typing import Dict, List, Optional
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from .base import BaseCollector, CollectionError
from metrics.models import MetricDefinition, MetricQuery, MetricValue
from metrics.registry import MetricsRegistry
from logging_config import get_logger, log_metrics_collection
from utils.database import create_database_engine


logger = get_logger(__name__)


class WordPressCollector(BaseCollector):
    """Run the WordPress metric queries against the database on every scrape"""

    def __init__(self, config=None, registry: Optional[MetricsRegistry] = None, engine=None):
        super().__init__(config, "wordpress", "WordPress and WooCommerce database metrics")
        self.registry = registry or MetricsRegistry(config)
        self.engine = engine or create_database_engine(config)

    def describe(self):
        """Every metric this collector can emit"""
        return self.registry.describe()

    def active_queries(self) -> List[MetricQuery]:
        """Queries executed in one cycle, honoring the WooCommerce skip flag"""
        skip_woocommerce = getattr(self.config, "skip_woocommerce", False)
        return [
            query for query in self.registry.queries()
            if not (query.requires_woocommerce and skip_woocommerce)
        ]

    def collect(self) -> List[MetricValue]:
        """Collect metrics.

        Either every query succeeds and all samples are returned, or a
        CollectionError is raised and nothing is returned.
        """
        start_time = time.time()
        metrics = []

        # Drivers may fail the login with non-DBAPI errors (e.g. missing auth plugin support)
        try:
            conn = self.engine.connect()
        except (SQLAlchemyError, RuntimeError, OSError) as e:
            raise CollectionError(f"database connection failed: {e}") from e

        try:
            with conn:
                for query in self.active_queries():
                    metrics.extend(self._run_query(conn, query))
        except SQLAlchemyError as e:
            raise CollectionError(f"database error: {e}") from e

        log_metrics_collection(logger, len(metrics), time.time() - start_time)
        return metrics

    def _run_query(self, conn, query: MetricQuery) -> List[MetricValue]:
        definition = query.definition
        logger.debug("Running metric query", metric=definition.fq_name, event_type="metric_query")
        try:
            rows = conn.execute(text(query.sql), query.params).all()
        except SQLAlchemyError as e:
            raise CollectionError(f"{definition.fq_name}: query failed: {e}", definition.fq_name) from e

        if query.grouped:
            return self._grouped_samples(query, rows)
        return [self._scalar_sample(definition, rows)]

    def _scalar_sample(self, definition: MetricDefinition, rows) -> MetricValue:
        if not rows:
            raise CollectionError(f"{definition.fq_name}: query returned no rows", definition.fq_name)
        value = self.to_float(rows[0][0], definition.fq_name)
        return MetricValue(definition=definition, value=value)

    def _grouped_samples(self, query: MetricQuery, rows) -> List[MetricValue]:
        definition = query.definition

        # Rebuilt every cycle so labels missing from this result never linger
        values: Dict[str, float] = {}
        for row in rows:
            label, raw_value = row[0], row[1]
            if label is None:
                raise CollectionError(f"{definition.fq_name}: query returned NULL label", definition.fq_name)
            label = label.decode("utf-8") if isinstance(label, bytes) else str(label)
            if query.label_transform is not None:
                label = query.label_transform(label)
            values[label] = self.to_float(raw_value, definition.fq_name)

        return [
            MetricValue(definition=definition, value=value, label_value=label)
            for label, value in values.items()
        ]

    def cleanup(self):
        """Release pooled database connections"""
        self.engine.dispose()
