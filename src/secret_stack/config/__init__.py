"""
Configuration, logging and error model for secret-stack.
"""

from .exceptions import ConfigException
from .models import ProjectConfig, ConflictConfig, GenerateConfig, SecretConfig

__all__ = [
    'ConfigException',
    'ProjectConfig',
    'ConflictConfig',
    'GenerateConfig',
    'SecretConfig',
]
