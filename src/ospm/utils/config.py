"""Configuration management for the OSPM client.

Reads configuration from config.env file or environment variables.
"""

import os
from pathlib import Path
from typing import Optional

_TRUE_VALUES = ("true", "1", "yes", "on")


class ClientConfig:
    """Configuration manager for client settings."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to .env file (default: config.env in project root)
        """
        self._load_env(config_file)

    def _load_env(self, config_file: Optional[str]):
        """Load environment variables from file."""
        if config_file is None:
            # Look for config.env in project root
            project_root = Path(__file__).parent.parent.parent.parent
            config_file = project_root / "config.env"

        config_path = Path(config_file)
        if config_path.exists():
            with open(config_path) as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith('#') and '=' in line:
                        key, value = line.split('=', 1)
                        key = key.strip()
                        value = value.strip()
                        # Don't override existing env vars
                        if key not in os.environ:
                            os.environ[key] = value

    @staticmethod
    def _flag(name: str, default: str) -> bool:
        return os.getenv(name, default).lower() in _TRUE_VALUES

    @property
    def oracle_base_url(self) -> str:
        """Get base URL of the Oracle API."""
        return os.getenv("ORACLE_BASE_URL", "http://localhost:3000/api")

    @property
    def oracle_timeout(self) -> float:
        """Get Oracle request timeout in seconds."""
        return float(os.getenv("ORACLE_TIMEOUT", "10.0"))

    @property
    def lmsr_tolerance(self) -> float:
        """Get relative tolerance of the spend -> shares solve."""
        return float(os.getenv("LMSR_TOLERANCE", "1e-9"))

    @property
    def lmsr_max_iterations(self) -> int:
        return int(os.getenv("LMSR_MAX_ITERATIONS", "200"))

    @property
    def display_decimals(self) -> int:
        """Get decimal places for probabilities and quantities."""
        return int(os.getenv("DISPLAY_DECIMALS", "1"))

    @property
    def default_spend(self) -> str:
        return os.getenv("DEFAULT_SPEND", "10")

    @property
    def enable_logging(self) -> bool:
        """Get whether trade logging is enabled."""
        return self._flag("ENABLE_LOGGING", "true")

    @property
    def save_logs_csv(self) -> bool:
        return self._flag("SAVE_LOGS_CSV", "true")

    @property
    def save_logs_json(self) -> bool:
        return self._flag("SAVE_LOGS_JSON", "true")

    @property
    def log_dir(self) -> Path:
        """Get log directory path."""
        return Path(os.getenv("LOG_DIR", "trade_logs"))

    @property
    def log_level(self) -> str:
        return os.getenv("LOG_LEVEL", "INFO").upper()


def create_client_from_config(config: Optional[ClientConfig] = None):
    """
    Create an Oracle client based on configuration.

    Args:
        config: Configuration object (default: loads from config.env)

    Returns:
        OracleClient pointed at ORACLE_BASE_URL

    Example:
        >>> config = ClientConfig()
        >>> client = create_client_from_config(config)
        >>> page = client.get_markets(status="open")
    """
    if config is None:
        config = ClientConfig()

    from ..oracle import OracleClient

    return OracleClient(config.oracle_base_url, timeout=config.oracle_timeout)
