"""
Configuration module for CodeLens MCP Server.

Provides centralized configuration management with support for:
- Environment variables
- Default values
- Path resolution
- Logging configuration
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file at project root
# config.py is in mcp-server-python/, so .env is in parent directory
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=_env_path)

DEFAULT_BACKEND_URL = "http://127.0.0.1:8000"


def _parse_int(env_var: str, default: int) -> int:
    """Parse an integer value from an environment variable."""
    value = os.getenv(env_var)
    if value is None or not value.strip():
        return default
    return int(value)


def _parse_float(env_var: str, default: float) -> float:
    """Parse a float value from an environment variable."""
    value = os.getenv(env_var)
    if value is None or not value.strip():
        return default
    return float(value)


class Config:
    """
    Configuration class for MCP server settings.

    Supports configuration via environment variables (and .env file) with sensible defaults.
    The log file path is resolved relative to the repository root.
    """

    def __init__(self):
        """Initialize configuration from environment variables and defaults."""
        # Repository root detection
        self._repo_root = self._find_repo_root()

        # Remote analysis service
        # An explicitly empty CODELENS_BACKEND_URL is kept empty so the
        # controller can surface it as a failed submission.
        self.backend_url = os.getenv("CODELENS_BACKEND_URL", DEFAULT_BACKEND_URL).strip()
        self.api_key = os.getenv("CODELENS_API_KEY", "")
        self.request_timeout_seconds = _parse_float("CODELENS_REQUEST_TIMEOUT_SECONDS", 30.0)

        # Polling schedule
        self.poll_max_attempts = _parse_int("CODELENS_POLL_MAX_ATTEMPTS", 40)
        self.poll_interval_seconds = _parse_float("CODELENS_POLL_INTERVAL_SECONDS", 3.0)

        # Logging configuration
        self.log_level = os.getenv("CODELENS_LOG_LEVEL", "INFO").upper()
        self.log_file = self._resolve_log_path()

        # Server configuration
        self.server_name = os.getenv("CODELENS_SERVER_NAME", "codelens-mcp-server")

    def _find_repo_root(self) -> Path:
        """
        Find the repository root directory.

        Looks for the parent directory containing the mcp-server-python folder.

        Returns:
            Path to repository root
        """
        current_file = Path(__file__).resolve()
        # config.py is in mcp-server-python/, so parent is repo root
        return current_file.parent.parent

    def _resolve_log_path(self) -> Optional[Path]:
        """
        Resolve the log file path from environment.

        If CODELENS_LOG_FILE is set, logs will be written to that file.
        Otherwise, logs go to stderr only.

        Returns:
            Path to log file, or None for stderr-only logging
        """
        log_env = os.getenv("CODELENS_LOG_FILE")
        if not log_env:
            return None

        log_path = Path(log_env)
        if log_path.is_absolute():
            return log_path
        else:
            # Relative to repo root
            return self._repo_root / log_path

    def setup_logging(self):
        """
        Configure logging based on configuration settings.

        Sets up logging to stderr and optionally to a file. Stdout is left
        alone because the stdio MCP transport owns it.
        Log level is controlled by CODELENS_LOG_LEVEL.
        """
        numeric_level = getattr(logging, self.log_level, logging.INFO)

        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )

        root_logger = logging.getLogger()
        root_logger.setLevel(numeric_level)

        # Remove existing handlers to avoid duplicates
        root_logger.handlers.clear()

        stderr_handler = logging.StreamHandler()
        stderr_handler.setLevel(numeric_level)
        stderr_handler.setFormatter(formatter)
        root_logger.addHandler(stderr_handler)

        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(self.log_file)
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

            logging.info(f"Logging to file: {self.log_file}")

        # httpx logs every request at INFO; keep it out of the poll loop output
        logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))

        logging.info(f"Log level set to: {self.log_level}")
        logging.info(f"Backend URL: {self.backend_url or '<not configured>'}")

    def validate(self) -> list[str]:
        """
        Validate configuration and return any warnings.

        Returns:
            List of warning messages (empty if all valid)
        """
        warnings = []

        if not self.backend_url:
            warnings.append(
                "CODELENS_BACKEND_URL is empty. "
                "The server will start but every submission will fail until it is set."
            )

        if not self.api_key:
            warnings.append("CODELENS_API_KEY is empty; requests will carry an empty x-api-key header.")

        if self.poll_max_attempts < 1:
            warnings.append(
                f"CODELENS_POLL_MAX_ATTEMPTS must be positive (got {self.poll_max_attempts}); "
                "jobs will time out without polling."
            )

        if self.poll_interval_seconds < 0:
            warnings.append(
                f"CODELENS_POLL_INTERVAL_SECONDS is negative ({self.poll_interval_seconds}); "
                "polls will not be delayed."
            )

        # Check if log file directory is writable (if configured)
        if self.log_file:
            log_dir = self.log_file.parent
            if not log_dir.exists():
                try:
                    log_dir.mkdir(parents=True, exist_ok=True)
                except Exception as e:
                    warnings.append(f"Cannot create log directory {log_dir}: {e}")
            elif not os.access(log_dir, os.W_OK):
                warnings.append(f"Log directory not writable: {log_dir}")

        return warnings


# Global configuration instance
config = Config()


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Global Config instance
    """
    return config
