"""Utility modules for the OSPM client."""

from .config import ClientConfig, create_client_from_config

__all__ = [
    "ClientConfig",
    "create_client_from_config",
]
