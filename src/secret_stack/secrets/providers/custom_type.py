"""
Custom type Secret provider.

Renders Kubernetes Secrets with a user-defined `type:` field (for example
`vendor.com/custom`) and injects individual keys as container environment
variables. An optional allow-list restricts which keys the Secret may carry.

Example:
    provider = CustomTypeSecretProvider(
        name='api-token-secret',
        secret_type='vendor.com/custom',
        allowed_keys=['api_key', 'dataset'],
    )
"""

import logging
from typing import Any, List, Optional

from ...config.exceptions import ProviderConfigException
from ..interface import BaseProvider
from ..models import PreparedEffect, ProviderInjection, SecretValue
from ..secret_utils import require_mapping
from .payloads import check_key_allowed, env_or_env_from_payload, keyed_env_entry

logger = logging.getLogger(__name__)


class CustomTypeSecretProvider(BaseProvider):
    """Provider for Secrets with an arbitrary `type:`."""

    supported_strategies = ['env', 'envFrom']

    def __init__(self, name: str, secret_type: Optional[str] = None, namespace: Optional[str] = None,
                 allowed_keys: Optional[List[str]] = None):
        super().__init__(name, namespace)
        if not secret_type or not str(secret_type).strip():
            raise ProviderConfigException(
                f"{self._label()} secret_type is required",
                provider=self.__class__.__name__
            )
        self.secret_type = secret_type
        self.allowed_keys = list(allowed_keys) if allowed_keys is not None else None

    @property
    def provider_type(self) -> str:
        return 'custom'

    def prepare(self, secret_name: str, value: SecretValue) -> List[PreparedEffect]:
        data = require_mapping(value, self.__class__.__name__, secret_name)
        for key in data:
            check_key_allowed(self._label(), key, self.allowed_keys, secret_name)
        logger.debug(f"Prepared {self.secret_type} Secret '{self.name}' with keys {sorted(data)}")
        return [self._effect(secret_name, data)]

    def get_injection_payload(self, injections: List[ProviderInjection]) -> Any:
        return env_or_env_from_payload(
            self, injections,
            lambda injection: keyed_env_entry(self._label(), self.name, self.allowed_keys, injection)
        )
