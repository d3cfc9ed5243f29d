"""Configuration management for WordPress Metrics Exporter"""
from pathlib import Path
from typing import Optional, Literal
from pydantic import Field, validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


DATABASE_DRIVER = "mysql+pymysql"


class Config(BaseSettings):
    """Configuration class with Pydantic validation and environment-based settings"""

    # Database connection
    db_host: str = Field(default="127.0.0.1", description="Hostname or address of the DB server")
    db_port: int = Field(default=3306, ge=1, le=65535, description="DB server port")
    db_name: str = Field(..., description="WordPress database name (required)")
    db_user: str = Field(..., description="DB user for connection (required)")
    db_password: str = Field(default="", description="DB password for connection")

    # WordPress schema
    table_prefix: str = Field(default="wp_", description="Table prefix for WordPress tables")
    skip_woocommerce: bool = Field(default=False, description="Skip WooCommerce session metrics")
    metrics_namespace: str = Field(default="wordpress", description="Namespace prepended to every metric name")

    # Server settings
    metrics_port: int = Field(default=9850, ge=1, le=65535, description="Metrics server port")
    metrics_host: str = Field(default="0.0.0.0", description="Metrics server host")
    enable_request_logging: bool = Field(default=True, description="Enable HTTP request logging")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", description="Log level")
    log_file: Optional[Path] = Field(default=None, description="Log file path (stdout only when unset)")

    # Service settings
    service_name: str = Field(default="wordpress-metrics-exporter", description="Service name")
    service_version: str = Field(default="1.0.0", description="Service version")

    class Config:
        env_prefix = ""
        case_sensitive = False

    @validator('db_name', 'db_user')
    def validate_required(cls, v):
        """Reject empty database name and user"""
        if not v:
            raise ValueError("must not be empty")
        return v

    @validator('log_level', pre=True)
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v

    @validator('log_file')
    def ensure_parent_directories(cls, v):
        """Ensure parent directory exists for the log file"""
        if isinstance(v, Path):
            v.parent.mkdir(parents=True, exist_ok=True)
        return v

    def get_database_url(self) -> URL:
        """Build the SQLAlchemy URL for the WordPress database"""
        return URL.create(
            DATABASE_DRIVER,
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )

    def get_dsn_for_logging(self) -> str:
        """Database URL with the password masked"""
        return self.get_database_url().render_as_string(hide_password=True)
