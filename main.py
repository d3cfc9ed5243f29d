#!/usr/bin/env python3
"""Main entry point for WordPress Metrics Exporter"""
import argparse
import sys
from typing import Any, Dict, List, Optional
import uvicorn
from pydantic import ValidationError
from config import Config
from app.server import MetricsServer
from logging_config import setup_structured_logging, get_logger, log_server_startup, log_error


# Fields that must be given, with the flag that supplies them
REQUIRED_FLAGS = {
    "db_name": "-db=dbname",
    "db_user": "-user=username",
}

TRUE_VALUES = {"1", "t", "true", "y", "yes"}
FALSE_VALUES = {"0", "f", "false", "n", "no"}


def parse_bool(value: str) -> bool:
    """Parse a boolean flag value"""
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    """Command line flags; single and double dash forms are both accepted"""
    parser = argparse.ArgumentParser(
        prog="wordpress-exporter",
        description="Prometheus exporter for WordPress database metrics",
    )
    parser.add_argument("-host", "--host", dest="db_host", help="Hostname or Address for DB server (default 127.0.0.1)")
    parser.add_argument("-port", "--port", dest="db_port", help="DB server port (default 3306)")
    parser.add_argument("-db", "--db", dest="db_name", help="DB name")
    parser.add_argument("-user", "--user", dest="db_user", help="DB user for connection")
    parser.add_argument("-pass", "--pass", dest="db_password", help="DB password for connection")
    parser.add_argument("-tableprefix", "--tableprefix", dest="table_prefix", help="Table prefix for WordPress tables (default wp_)")
    parser.add_argument(
        "-skipwoocommerce", "--skipwoocommerce",
        dest="skip_woocommerce",
        type=parse_bool,
        nargs="?",
        const=True,
        help="Skip WooCommerce metrics"
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> Dict[str, Any]:
    """Parse flags into Config overrides; unset flags fall back to the environment"""
    args = build_parser().parse_args(argv)
    return {key: value for key, value in vars(args).items() if value is not None}


def describe_validation_error(error: ValidationError) -> List[str]:
    """Turn a configuration ValidationError into operator-facing messages"""
    messages = []
    for item in error.errors():
        field = item["loc"][0] if item["loc"] else ""
        if field in REQUIRED_FLAGS:
            messages.append(f"flag {REQUIRED_FLAGS[field]} required!")
        else:
            messages.append(f"invalid configuration for {field}: {item['msg']}")
    return messages


def load_config(argv: Optional[List[str]] = None) -> Config:
    """Load configuration from flags and environment"""
    return Config(**parse_args(argv))


def main(argv: Optional[List[str]] = None):
    """Main application entry point"""
    try:
        config = load_config(argv)
    except ValidationError as e:
        for message in describe_validation_error(e):
            print(message, file=sys.stderr)
        sys.exit(1)

    try:
        setup_structured_logging(config)
        logger = get_logger(__name__)
        log_server_startup(logger, config)

        server = MetricsServer(config)
        app = server.get_app()

        uvicorn.run(
            app,
            host=config.metrics_host,
            port=config.metrics_port,
            log_config=None  # We handle logging ourselves
        )

    except Exception as e:
        logger = get_logger(__name__)
        log_error(logger, e, {"component": "main", "phase": "startup"})
        sys.exit(1)


if __name__ == '__main__':
    main()
