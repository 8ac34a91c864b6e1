"""
Providers for the built-in Kubernetes Secret types with a fixed set of keys.
"""

import logging
from typing import Any, Dict, List, Optional

from ..interface import BaseProvider
from ..models import PreparedEffect, ProviderInjection, SecretValue
from ..secret_utils import require_fields, require_mapping
from .payloads import check_key_allowed, env_or_env_from_payload, keyed_env_entry

logger = logging.getLogger(__name__)


class KeyedSecretProvider(BaseProvider):
    """Base for Secret types whose data keys are defined by Kubernetes.

    Subclasses declare `fields`, a mapping of value field -> Secret data key,
    and which of those fields are required.
    """

    supported_strategies = ['env', 'envFrom']
    fields: Dict[str, str] = {}
    required: List[str] = []

    def __init__(self, name: str, namespace: Optional[str] = None):
        super().__init__(name, namespace)
        self.allowed_keys = list(self.fields.values())

    def _normalize(self, secret_name: str, value: SecretValue) -> Dict[str, Any]:
        return dict(require_mapping(value, self.__class__.__name__, secret_name))

    def prepare(self, secret_name: str, value: SecretValue) -> List[PreparedEffect]:
        mapping = self._normalize(secret_name, value)
        require_fields(mapping, self.required, self.__class__.__name__, secret_name)
        unknown = [k for k in mapping if k not in self.fields]
        if unknown:
            check_key_allowed(self._label(), unknown[0], list(self.fields), secret_name)
        data = {self.fields[f]: mapping[f] for f in self.fields if mapping.get(f) not in (None, '')}
        return [self._effect(secret_name, data)]

    def get_injection_payload(self, injections: List[ProviderInjection]) -> Any:
        return env_or_env_from_payload(
            self, injections,
            lambda injection: keyed_env_entry(self._label(), self.name, self.allowed_keys, injection)
        )


class BasicAuthSecretProvider(KeyedSecretProvider):
    """kubernetes.io/basic-auth with username and password."""

    secret_type = 'kubernetes.io/basic-auth'
    fields = {'username': 'username', 'password': 'password'}
    required = ['username', 'password']

    @property
    def provider_type(self) -> str:
        return 'basic-auth'


class TlsSecretProvider(KeyedSecretProvider):
    """kubernetes.io/tls from a certificate and private key."""

    secret_type = 'kubernetes.io/tls'
    fields = {'cert': 'tls.crt', 'key': 'tls.key'}
    required = ['cert', 'key']

    @property
    def provider_type(self) -> str:
        return 'tls'


class SshAuthSecretProvider(KeyedSecretProvider):
    """kubernetes.io/ssh-auth; a raw string value is taken as the private key."""

    secret_type = 'kubernetes.io/ssh-auth'
    fields = {'ssh-privatekey': 'ssh-privatekey', 'known_hosts': 'known_hosts'}
    required = ['ssh-privatekey']

    @property
    def provider_type(self) -> str:
        return 'ssh-auth'

    def _normalize(self, secret_name: str, value: SecretValue) -> Dict[str, Any]:
        if isinstance(value, str):
            return {'ssh-privatekey': value}
        return super()._normalize(secret_name, value)
