"""
Secrets management for Kubernetes manifest generation.

Connectors load raw values, providers render Kubernetes Secrets and their
workload references, and a SecretManager binds secret names to both.
"""

from .interface import BaseConnector, BaseProvider
from .models import (
    InjectionStrategy,
    PreparedEffect,
    ProviderInjection,
    SecretEntry,
)
from .connectors import EnvConnector, InMemoryConnector, GoogleSecretManagerConnector
from .providers import (
    OpaqueSecretProvider,
    CustomTypeSecretProvider,
    BasicAuthSecretProvider,
    TlsSecretProvider,
    SshAuthSecretProvider,
    DockerConfigSecretProvider,
)
from .manager import SecretManager
from .registry import build_secret_manager, create_connector, create_provider
from .orchestrator import SecretsOrchestrator
from .injection import SecretInjectionBuilder, SecretsInjectionContext

__all__ = [
    # Interface
    'BaseConnector',
    'BaseProvider',

    # Models
    'InjectionStrategy',
    'PreparedEffect',
    'ProviderInjection',
    'SecretEntry',

    # Connectors
    'EnvConnector',
    'InMemoryConnector',
    'GoogleSecretManagerConnector',

    # Providers
    'OpaqueSecretProvider',
    'CustomTypeSecretProvider',
    'BasicAuthSecretProvider',
    'TlsSecretProvider',
    'SshAuthSecretProvider',
    'DockerConfigSecretProvider',

    # Registry and orchestration
    'SecretManager',
    'build_secret_manager',
    'create_connector',
    'create_provider',
    'SecretsOrchestrator',
    'SecretInjectionBuilder',
    'SecretsInjectionContext',
]
