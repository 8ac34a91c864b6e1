"""
SecretManager: registry of connectors, providers and the secrets that bind them.
"""

import logging
from collections import OrderedDict
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..config.exceptions import (
    DuplicateSecretException,
    UnknownConnectorException,
    UnknownProviderException,
    UnknownSecretException,
)
from .interface import BaseConnector, BaseProvider
from .models import PreparedEffect, SecretEntry, SecretValue
from .secret_utils import validate_secret_name

logger = logging.getLogger(__name__)


class SecretManager:
    """Associates secret names with the connector that loads them and the
    provider that renders them.

    Example:
        manager = (
            SecretManager()
            .add_connector('env', EnvConnector())
            .add_provider('api_token', CustomTypeSecretProvider(
                name='api-token-secret', secret_type='vendor.com/custom'))
            .add_secret('VENDOR_API')
        )
    """

    def __init__(self):
        self._connectors: Dict[str, BaseConnector] = OrderedDict()
        self._providers: Dict[str, BaseProvider] = OrderedDict()
        self._secrets: Dict[str, SecretEntry] = OrderedDict()
        self._default_connector: Optional[str] = None
        self._default_provider: Optional[str] = None

    # Registration

    def add_connector(self, name: str, connector: BaseConnector) -> 'SecretManager':
        if name in self._connectors:
            raise DuplicateSecretException(f"Connector '{name}' is already registered")
        self._connectors[name] = connector
        logger.debug(f"Registered connector '{name}' ({connector.connector_type})")
        return self

    def add_provider(self, name: str, provider: BaseProvider) -> 'SecretManager':
        if name in self._providers:
            raise DuplicateSecretException(f"Provider '{name}' is already registered")
        self._providers[name] = provider
        logger.debug(f"Registered provider '{name}' ({provider.provider_type})")
        return self

    def set_default_connector(self, name: str) -> 'SecretManager':
        if name not in self._connectors:
            raise UnknownConnectorException(
                f"Cannot set default connector: '{name}' is not registered",
                available=list(self._connectors)
            )
        self._default_connector = name
        return self

    def set_default_provider(self, name: str) -> 'SecretManager':
        if name not in self._providers:
            raise UnknownProviderException(
                f"Cannot set default provider: '{name}' is not registered",
                available=list(self._providers)
            )
        self._default_provider = name
        return self

    def add_secret(self, secret: Union[str, SecretEntry, dict], connector: Optional[str] = None,
                   provider: Optional[str] = None) -> 'SecretManager':
        if isinstance(secret, SecretEntry):
            entry = secret
        elif isinstance(secret, dict):
            entry = SecretEntry(**secret)
        else:
            entry = SecretEntry(name=secret, connector=connector, provider=provider)

        validate_secret_name(entry.name)
        if entry.name in self._secrets:
            raise DuplicateSecretException(
                f"Secret '{entry.name}' is already registered",
                secret_name=entry.name
            )
        self._secrets[entry.name] = entry
        return self

    # Lookup

    def get_secrets(self) -> Dict[str, SecretEntry]:
        return dict(self._secrets)

    def get_connectors(self) -> Dict[str, BaseConnector]:
        return dict(self._connectors)

    def get_providers(self) -> Dict[str, BaseProvider]:
        return dict(self._providers)

    def has_secret(self, name: str) -> bool:
        return name in self._secrets

    def resolve_connector_name(self, name: Optional[str] = None) -> str:
        """Explicit name, else the configured default, else the only connector."""
        if name is not None:
            if name not in self._connectors:
                raise UnknownConnectorException(
                    f"Connector '{name}' is not registered",
                    available=list(self._connectors)
                )
            return name
        if self._default_connector is not None:
            return self._default_connector
        if len(self._connectors) == 1:
            return next(iter(self._connectors))
        if not self._connectors:
            raise UnknownConnectorException("No connectors registered")
        raise UnknownConnectorException(
            "Multiple connectors registered but no default connector set",
            available=list(self._connectors)
        )

    def resolve_provider_name(self, name: Optional[str] = None) -> str:
        """Explicit name, else the configured default, else the only provider."""
        if name is not None:
            if name not in self._providers:
                raise UnknownProviderException(
                    f"Provider '{name}' is not registered",
                    available=list(self._providers)
                )
            return name
        if self._default_provider is not None:
            return self._default_provider
        if len(self._providers) == 1:
            return next(iter(self._providers))
        if not self._providers:
            raise UnknownProviderException("No providers registered")
        raise UnknownProviderException(
            "Multiple providers registered but no default provider set",
            available=list(self._providers)
        )

    def resolve_connector(self, name: Optional[str] = None) -> BaseConnector:
        return self._connectors[self.resolve_connector_name(name)]

    def resolve_provider(self, name: Optional[str] = None) -> BaseProvider:
        return self._providers[self.resolve_provider_name(name)]

    def _entry(self, secret_name: str) -> SecretEntry:
        if secret_name not in self._secrets:
            raise UnknownSecretException(
                f"Secret '{secret_name}' is not registered in the secret manager",
                secret_name=secret_name
            )
        return self._secrets[secret_name]

    def provider_name_for_secret(self, secret_name: str) -> str:
        return self.resolve_provider_name(self._entry(secret_name).provider)

    def provider_for_secret(self, secret_name: str) -> BaseProvider:
        return self._providers[self.provider_name_for_secret(secret_name)]

    def connector_name_for_secret(self, secret_name: str) -> str:
        return self.resolve_connector_name(self._entry(secret_name).connector)

    def connector_for_secret(self, secret_name: str) -> BaseConnector:
        return self._connectors[self.connector_name_for_secret(secret_name)]

    # Operations

    def validate(self) -> None:
        """Check that the registry is usable and every secret resolves.

        Raises:
            UnknownConnectorException / UnknownProviderException
        """
        if not self._connectors:
            raise UnknownConnectorException("No connectors registered")
        if not self._providers:
            raise UnknownProviderException("No providers registered")
        for name in self._secrets:
            self.connector_name_for_secret(name)
            self.provider_name_for_secret(name)

    def set_working_dir(self, path, override: bool = True) -> None:
        """Point every connector at a directory for file-based sources.

        Args:
            path: Directory, usually the one holding the project config
            override: When False, connectors with their own working dir keep it;
                a relative one is resolved against `path`.
        """
        for connector in self._connectors.values():
            if override or connector.working_dir is None:
                connector.set_working_dir(path)
            elif not connector.working_dir.is_absolute():
                connector.set_working_dir(Path(path) / connector.working_dir)

    def load_secrets(self) -> Dict[str, SecretValue]:
        """Load every registered secret, calling each connector once."""
        self.validate()
        by_connector: Dict[str, List[str]] = OrderedDict()
        for name in self._secrets:
            by_connector.setdefault(self.connector_name_for_secret(name), []).append(name)

        for connector_name, names in by_connector.items():
            logger.debug(f"Loading {len(names)} secret(s) via connector '{connector_name}'")
            self._connectors[connector_name].load(names)

        values: Dict[str, SecretValue] = OrderedDict()
        for name in self._secrets:
            values[name] = self.connector_for_secret(name).get(name)
        return values

    def prepare(self) -> List[PreparedEffect]:
        """Load values and render each secret through its provider."""
        values = self.load_secrets()
        effects: List[PreparedEffect] = []
        for name, value in values.items():
            provider_name = self.provider_name_for_secret(name)
            for effect in self._providers[provider_name].prepare(name, value):
                # registry name, not the Secret's metadata name
                effects.append(effect.model_copy(update={'provider_name': provider_name}))
        logger.debug(f"Prepared {len(effects)} effect(s) from {len(values)} secret(s)")
        return effects
