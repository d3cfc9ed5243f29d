"""FastAPI server setup and routes"""
import time
from typing import Optional
from fastapi import FastAPI, Response
from config import Config
from collectors.base import CollectionError
from collectors.wordpress import WordPressCollector
from metrics.exporters.prometheus import PrometheusExporter
from logging_config import get_logger, log_error
from middleware.request_logging import RequestLoggingMiddleware


logger = get_logger(__name__)

METRICS_PATH = "/metrics"


class MetricsServer:
    """FastAPI server exposing WordPress metrics on demand"""

    def __init__(self, config: Config, collector: Optional[WordPressCollector] = None):
        self.config = config
        self.app = FastAPI(
            title="WordPress Metrics Exporter",
            version=config.service_version,
            docs_url=None,
            redoc_url=None,
            openapi_url=None
        )
        self.collector = collector or WordPressCollector(config)
        self.exporter = PrometheusExporter(self.collector)

        self._setup_middleware()
        self._setup_routes()
        self._setup_events()

    def _setup_middleware(self):
        if self.config.enable_request_logging:
            self.app.add_middleware(RequestLoggingMiddleware)

    def _setup_routes(self):
        """Setup FastAPI routes"""

        # Sync route: FastAPI runs it in the threadpool, one connection per scrape
        @self.app.get(METRICS_PATH, response_class=Response)
        def get_metrics():
            """Run a collection cycle and serve it in Prometheus format"""
            start_time = time.time()
            try:
                content = self.exporter.render()
            except CollectionError as e:
                log_error(logger, e, {
                    "component": "metrics_collection",
                    "metric": e.metric_name,
                    "collection_time_seconds": round(time.time() - start_time, 3),
                })
                return Response(
                    f"# Metrics collection failed: {e}\n",
                    status_code=503,
                    media_type="text/plain"
                )
            return Response(content, media_type=self.exporter.content_type)

    def _setup_events(self):
        """Setup FastAPI startup/shutdown events"""

        @self.app.on_event("startup")
        async def startup_event():
            logger.info(
                "Application startup initiated",
                service_name=self.config.service_name,
                service_version=self.config.service_version,
                metrics=self.collector.registry.list_metrics(),
                skip_woocommerce=self.config.skip_woocommerce,
                event_type="server_startup"
            )

        @self.app.on_event("shutdown")
        async def shutdown_event():
            logger.info("Shutting down metrics exporter", event_type="server_shutdown")
            self.collector.cleanup()

    def get_app(self) -> FastAPI:
        """Get the FastAPI application"""
        return self.app
