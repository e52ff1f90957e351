"""
Configuration management for form-cli.

Loads from environment variables and .env file.
"""

import os
import shutil
from dataclasses import dataclass

from dotenv import load_dotenv

from .shell.http import DEFAULT_PREFIX_SERVICE


@dataclass
class Config:
    """Application configuration"""
    prefix_service: str = DEFAULT_PREFIX_SERVICE
    eye_path: str = "eye"
    http_timeout: float = 30.0
    # Used for HttpRequest policies that declare no method
    default_method: str = "POST"
    default_content_type: str = "text/n3"
    log_level: str = "INFO"


def load_config() -> Config:
    """Load configuration from environment."""
    load_dotenv()

    return Config(
        prefix_service=os.getenv("FORM_CLI_PREFIX_SERVICE", DEFAULT_PREFIX_SERVICE),
        eye_path=os.getenv("FORM_CLI_EYE_PATH", "eye"),
        http_timeout=float(os.getenv("FORM_CLI_HTTP_TIMEOUT", "30")),
        default_method=os.getenv("FORM_CLI_DEFAULT_METHOD", "POST"),
        default_content_type=os.getenv("FORM_CLI_CONTENT_TYPE", "text/n3"),
        log_level=os.getenv("FORM_CLI_LOG_LEVEL", "INFO"),
    )


def validate_config(config: Config) -> list[str]:
    """
    Validate configuration.
    Returns list of warning messages (empty if all OK).
    """
    warnings = []

    if shutil.which(config.eye_path) is None:
        warnings.append(
            f"Reasoner executable '{config.eye_path}' not found. Set FORM_CLI_EYE_PATH; "
            "conversion rules and submission policies will not work without it."
        )

    if config.http_timeout <= 0:
        warnings.append(f"HTTP timeout {config.http_timeout} must be positive")

    if "{prefix}" not in config.prefix_service:
        warnings.append(
            f"Prefix service URL '{config.prefix_service}' has no {{prefix}} placeholder"
        )

    return warnings
