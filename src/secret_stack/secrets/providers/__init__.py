"""
Providers render Kubernetes Secret manifests and their workload references.
"""

from .opaque import OpaqueSecretProvider
from .custom_type import CustomTypeSecretProvider
from .keyed import BasicAuthSecretProvider, TlsSecretProvider, SshAuthSecretProvider
from .docker_config import DockerConfigSecretProvider

__all__ = [
    'OpaqueSecretProvider',
    'CustomTypeSecretProvider',
    'BasicAuthSecretProvider',
    'TlsSecretProvider',
    'SshAuthSecretProvider',
    'DockerConfigSecretProvider',
]
