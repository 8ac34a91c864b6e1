"""
secret-stack: Kubernetes manifest generation with pluggable secret management.
"""

__version__ = '0.1.0'

from invoke import Collection

from .config.exceptions import ConfigException
from .manifests import Stack, simple_app_template, namespace_template
from .secrets import (
    SecretManager,
    EnvConnector,
    InMemoryConnector,
    GoogleSecretManagerConnector,
    OpaqueSecretProvider,
    CustomTypeSecretProvider,
    BasicAuthSecretProvider,
    TlsSecretProvider,
    SshAuthSecretProvider,
    DockerConfigSecretProvider,
    SecretsOrchestrator,
    build_secret_manager,
)

# Create namespace and collect tasks from each submodule
namespace = Collection()

from .tasks import generate as generate_tasks, secrets as secrets_tasks

for task_name, task in Collection.from_module(generate_tasks).tasks.items():
    namespace.add_task(task)

# Add secrets as a nested namespace
namespace.add_collection(Collection.from_module(secrets_tasks), name='secrets')

__all__ = [
    'ConfigException',
    'Stack',
    'simple_app_template',
    'namespace_template',
    'SecretManager',
    'EnvConnector',
    'InMemoryConnector',
    'GoogleSecretManagerConnector',
    'OpaqueSecretProvider',
    'CustomTypeSecretProvider',
    'BasicAuthSecretProvider',
    'TlsSecretProvider',
    'SshAuthSecretProvider',
    'DockerConfigSecretProvider',
    'SecretsOrchestrator',
    'build_secret_manager',
    'namespace',
]
