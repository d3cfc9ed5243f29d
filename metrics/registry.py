"""Metric catalog: WordPress metric definitions and the SQL behind them"""
from typing import Dict, Tuple
from .models import MetricDefinition, MetricQuery, MetricType
from logging_config import get_logger


logger = get_logger(__name__)

# WooCommerce stores order statuses as "wc-<status>"
ORDER_STATUS_PREFIX_LENGTH = 3

CUSTOMER_CAPABILITY_MARKER = "%customer%"


def strip_order_status_prefix(status: str) -> str:
    """Drop the fixed-length "wc-" marker from an order status"""
    return status[ORDER_STATUS_PREFIX_LENGTH:]


class MetricsRegistry:
    """Fixed catalog of metrics, each bound to exactly one SQL query.

    The catalog is built once from configuration and never changes; the
    table prefix is substituted into the SQL text as given by the operator.
    """

    def __init__(self, config):
        self.config = config
        self._queries: Tuple[MetricQuery, ...] = tuple(self._build_queries())
        self._by_name: Dict[str, MetricQuery] = {
            query.definition.name: query for query in self._queries
        }
        logger.debug(
            "Metric catalog built",
            metrics=[query.definition.fq_name for query in self._queries],
            table_prefix=config.table_prefix,
            event_type="registry_init"
        )

    def _definition(self, name: str, help_text: str, label_name: str = None) -> MetricDefinition:
        return MetricDefinition(
            name=name,
            help_text=help_text,
            metric_type=MetricType.GAUGE,
            label_name=label_name,
            namespace=self.config.metrics_namespace,
        )

    def _build_queries(self):
        p = self.config.table_prefix

        yield MetricQuery(
            self._definition("users_total", "Shows the number of registered users in the WordPress site"),
            f"select count(*) as value from {p}users",
        )
        yield MetricQuery(
            self._definition("customers_total", "Shows the number of customers in the WordPress site"),
            f"select count(*) as value from {p}users "
            f"inner join {p}usermeta on {p}users.ID = {p}usermeta.user_id "
            f"where {p}usermeta.meta_key = :meta_key and {p}usermeta.meta_value like :capability",
            # Keyed by table prefix; a fixed wp_capabilities would miss customers on other prefixes
            params={"meta_key": f"{p}capabilities", "capability": CUSTOMER_CAPABILITY_MARKER},
        )
        yield MetricQuery(
            self._definition("comments_total", "Shows the number of total comments in the WordPress site", "type"),
            f"select COALESCE(NULLIF(comment_type, ''), 'comment') as label, count(*) as value "
            f"from {p}comments group by comment_type",
        )
        yield MetricQuery(
            self._definition("posts_total", "Shows the number of total posts in the WordPress site", "type"),
            f"select post_status as label, count(*) as value from {p}posts "
            f"where post_type = 'post' group by post_status",
        )
        yield MetricQuery(
            self._definition("user_sessions_total", "Shows the number of sessions in the WordPress site"),
            f"select count(*) as value from {p}woocommerce_sessions",
            requires_woocommerce=True,
        )
        yield MetricQuery(
            self._definition("webhooks_total", "Shows the number of webhooks in the WordPress site", "status"),
            f"select post_status as label, count(*) as value from {p}posts "
            f"where post_type = 'scheduled-action' group by post_status",
        )
        yield MetricQuery(
            self._definition("option_autoload_total", "Shows the number of options with autoload"),
            f"select count(*) as value from {p}options where autoload = 'yes'",
        )
        yield MetricQuery(
            self._definition("option_autoload_bytes", "Shows the size in bytes of options with autoload"),
            f"select COALESCE(ROUND(SUM(LENGTH(option_value))), 0) as value "
            f"from {p}options where autoload = 'yes'",
        )
        yield MetricQuery(
            self._definition("database_size_bytes", "Shows the size in bytes of the wordpress's database"),
            "select COALESCE(ROUND(SUM(data_length + index_length)), 0) as value "
            "from information_schema.tables where table_schema = :schema",
            params={"schema": self.config.db_name},
        )
        yield MetricQuery(
            self._definition("posts_type_total", "Shows the number of total posts type in the WordPress site", "type"),
            f"select post_type as label, count(*) as value from {p}posts group by post_type",
        )
        yield MetricQuery(
            self._definition("order_type_total", "Shows the number of total orders type in WooCommerce", "type"),
            f"select post_status as label, count(*) as value from {p}posts "
            f"where post_type = 'shop_order' group by post_status",
            label_transform=strip_order_status_prefix,
        )

    def describe(self) -> Tuple[MetricDefinition, ...]:
        """All declared metrics, independent of data and feature flags"""
        return tuple(query.definition for query in self._queries)

    def queries(self) -> Tuple[MetricQuery, ...]:
        """Queries in execution order"""
        return self._queries

    def get_query(self, name: str) -> MetricQuery:
        """Get query by short metric name"""
        return self._by_name[name]

    def get_definition(self, name: str) -> MetricDefinition:
        """Get definition by short metric name"""
        return self._by_name[name].definition

    def list_metrics(self):
        """List fully qualified names of all declared metrics"""
        return [definition.fq_name for definition in self.describe()]
