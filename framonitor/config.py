"""
Configuration module for FRA Monitor.
"""

import os
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from framonitor.model import ConfigError


class ExtractionConfig(BaseModel):
    """
    Configuration for the AI extraction service.
    """

    model: str = "gemini-2.5-flash"  # Generative model name
    api_key_env: str = "GEMINI_API_KEY"  # Environment variable holding the API key
    temperature: float = 0.0  # Sampling temperature
    max_upload_mb: int = 10  # Largest accepted PDF upload
    header_date_fallback: bool = True  # Read the report date from the PDF when the model omits it

    @property
    def api_key(self) -> Optional[str]:
        """API key taken from the environment."""
        return os.environ.get(self.api_key_env)

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


class MongoDBConfig(BaseModel):
    """
    Configuration for the MongoDB document store.
    """

    uri: str = "mongodb://localhost:27017"  # MongoDB connection URI
    database: str = "fra_monitor"  # Database name
    records_collection: str = "fra_records"  # FRA statistics records
    holders_collection: str = "patta_holders"  # Patta holder registry
    errors_collection: str = "fra_ingest_errors"  # Dead-letter collection
    timeout_ms: int = 5000  # Server selection timeout


class DashboardConfig(BaseModel):
    """
    Configuration for dashboard views.
    """

    top_n: int = 10  # Number of states in the ranking charts
    default_state: str = "all"
    default_year: str = "all"
    default_month: str = "all"


class ServerConfig(BaseModel):
    """
    Configuration for the HTTP server.
    """

    host: str = "127.0.0.1"
    port: int = 8000
    ui_port: int = 7860  # Port for the gradio dashboard


class OutputConfig(BaseModel):
    """
    Configuration for record exports.
    """

    json_path: Optional[str] = "./out/fra_records.json"  # JSON output path
    csv_path: Optional[str] = "./out/fra_records.csv"  # CSV output path
    ndjson_path: Optional[str] = None  # NDJSON output path (disabled by default)
    pretty_json: bool = True  # Whether to pretty-print JSON


class LoggingConfig(BaseModel):
    """
    Configuration for logging.
    """

    level: str = "INFO"  # Logging level (DEBUG/INFO/WARN/ERROR)


class Config(BaseModel):
    """
    Main configuration.
    """

    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    mongodb: MongoDBConfig = Field(default_factory=MongoDBConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: Optional[str] = None) -> Config:
    """
    Load configuration from a file.

    Args:
        path: Path to the configuration file

    Returns:
        Configuration object
    """
    if path:
        if not os.path.exists(path):
            raise ConfigError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            if path.endswith(".yaml") or path.endswith(".yml"):
                config_dict = yaml.safe_load(f)
            elif path.endswith(".json"):
                import json

                config_dict = json.load(f)
            else:
                raise ConfigError(f"Unsupported configuration file format: {path}")

        return Config(**(config_dict or {}))
    else:
        # Try to load from default locations
        default_locations = [
            "./config.yaml",
            "./config.yml",
            "./config.json",
            os.path.expanduser("~/.config/framonitor/config.yaml"),
        ]

        for loc in default_locations:
            if os.path.exists(loc):
                return load_config(loc)

        return Config()
