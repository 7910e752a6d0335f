"""Configuration management for the code model builder.

Loads environment variables (optionally from a .env file) and provides
centralized config access.

Environment variables:
    CODEQUALITY_MODULE_TYPE     (default: <Module>)
    CODEQUALITY_NO_NAMESPACE    (default: -)
    CODEQUALITY_MAX_WORKERS     (default: 1)
    CODEQUALITY_LOG_LEVEL       (default: WARNING)
"""

import os
from dataclasses import dataclass
from typing import Optional

import dotenv

from .errors import ConfigurationError


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class BuilderConfig:
    """
    Settings for one model build.

    Attributes:
        module_type_name: Name of the compiler-generated pseudo-type to skip
        no_namespace: Namespace name used for types declared without one
        max_workers: Worker threads for the usage stage (1 = inline)
        log_level: Level for the package logger
    """
    module_type_name: str = "<Module>"
    no_namespace: str = "-"
    max_workers: int = 1
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "BuilderConfig":
        """
        Build a config from environment variables.

        Args:
            load_env_file: Load a .env file from the working directory first

        Returns:
            Validated BuilderConfig

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        if load_env_file:
            dotenv.load_dotenv(dotenv.find_dotenv(usecwd=True))

        workers = os.getenv("CODEQUALITY_MAX_WORKERS", "1")
        try:
            max_workers = int(workers)
        except ValueError as e:
            raise ConfigurationError(
                f"CODEQUALITY_MAX_WORKERS must be an integer, got '{workers}'"
            ) from e

        config = cls(
            module_type_name=os.getenv("CODEQUALITY_MODULE_TYPE", "<Module>"),
            no_namespace=os.getenv("CODEQUALITY_NO_NAMESPACE", "-"),
            max_workers=max_workers,
            log_level=os.getenv("CODEQUALITY_LOG_LEVEL", "WARNING").upper(),
        )
        config.validate()
        return config

    def validate(self) -> bool:
        """Validate settings.

        Raises:
            ConfigurationError: On the first invalid setting
        """
        if not self.no_namespace:
            raise ConfigurationError("no_namespace sentinel must not be empty")
        if self.max_workers < 1:
            raise ConfigurationError(
                f"max_workers must be >= 1, got {self.max_workers}"
            )
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(f"Unknown log level: '{self.log_level}'")
        return True


# Singleton instance
_config: Optional[BuilderConfig] = None


def get_config() -> BuilderConfig:
    """Get or create singleton BuilderConfig instance.

    Returns:
        BuilderConfig instance
    """
    global _config
    if _config is None:
        _config = BuilderConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() re-reads the environment."""
    global _config
    _config = None
