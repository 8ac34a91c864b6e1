"""
Connectors load raw secret values from external sources.
"""

from .env_connector import EnvConnector
from .in_memory import InMemoryConnector
from .google_connector import GoogleSecretManagerConnector

__all__ = [
    'EnvConnector',
    'InMemoryConnector',
    'GoogleSecretManagerConnector',
]
