"""
Abstract interfaces for secret connectors and providers.

A connector loads raw secret values from a source. A provider turns values
into Kubernetes Secret manifests and knows how to reference them from a
workload.
"""

import base64
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..config.exceptions import ProviderConfigException
from .models import InjectionStrategy, PreparedEffect, ProviderInjection, SecretValue

DEFAULT_NAMESPACE = 'default'


class BaseConnector(ABC):
    """Abstract base class for secret value sources."""

    def __init__(self):
        self.working_dir: Optional[Path] = None

    @abstractmethod
    def load(self, names: List[str]) -> None:
        """Load the raw values of the given secrets.

        Args:
            names: Secret names to load

        Raises:
            MissingSecretValueException: If a value cannot be found
            InvalidSecretNameException: If a name is not a valid identifier
        """
        pass

    @abstractmethod
    def get(self, name: str) -> SecretValue:
        """Return a previously loaded value.

        Raises:
            SecretNotLoadedException: If load() has not been called for the name
        """
        pass

    def set_working_dir(self, path) -> None:
        """Directory relative to which file-based sources are resolved."""
        self.working_dir = Path(path) if path is not None else None

    @property
    @abstractmethod
    def connector_type(self) -> str:
        """Return the type of connector (e.g., 'env', 'google')."""
        pass


class BaseProvider(ABC):
    """Abstract base class for Kubernetes Secret providers."""

    secret_type: str = 'Opaque'
    target_kind: str = 'Deployment'
    supported_strategies: List[str] = ['env']
    allowed_keys: Optional[List[str]] = None

    def __init__(self, name: str, namespace: Optional[str] = None):
        if not name:
            raise ProviderConfigException(
                f"[{self.__class__.__name__}] name is required",
                provider=self.__class__.__name__
            )
        self.name = name
        self.namespace = namespace or DEFAULT_NAMESPACE

    @abstractmethod
    def prepare(self, secret_name: str, value: SecretValue) -> List[PreparedEffect]:
        """Render the manifests needed for one secret value."""
        pass

    @abstractmethod
    def get_injection_payload(self, injections: List[ProviderInjection]) -> Any:
        """Build the value placed at the target path for a group of injections."""
        pass

    @property
    @abstractmethod
    def provider_type(self) -> str:
        """Return the registry type name of this provider."""
        pass

    def get_target_path(self, strategy: InjectionStrategy) -> str:
        """Path inside the target resource that receives the injection payload."""
        if strategy.kind == 'env':
            return f"spec.template.spec.containers[{strategy.container_index}].env"
        if strategy.kind == 'envFrom':
            return f"spec.template.spec.containers[{strategy.container_index}].envFrom"
        if strategy.kind == 'imagePullSecret':
            return "spec.template.spec.imagePullSecrets"
        raise ValueError(f"Unknown injection strategy: {strategy.kind}")

    def default_strategy(self) -> str:
        return self.supported_strategies[0]

    def supports(self, kind: str) -> bool:
        return kind in self.supported_strategies

    def _effect(self, secret_name: str, data: Mapping[str, Any]) -> PreparedEffect:
        return PreparedEffect(
            provider_name=self.name,
            secret_name=secret_name,
            value=build_secret_manifest(self.name, self.namespace, self.secret_type, encode_data(data))
        )

    def _label(self) -> str:
        return f"[{self.__class__.__name__}]"

    def __repr__(self):
        return f"{self.__class__.__name__}(name={self.name!r}, namespace={self.namespace!r})"


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def encode_data(data: Mapping[str, Any]) -> Dict[str, str]:
    """Base64-encode every value of a mapping for a Secret's data field."""
    return {
        key: base64.b64encode(_stringify(value).encode('utf-8')).decode('ascii')
        for key, value in data.items()
    }


def build_secret_manifest(name: str, namespace: str, secret_type: str,
                          data: Dict[str, str]) -> Dict[str, Any]:
    """Kubernetes Secret manifest in the field order kubectl prints it."""
    return {
        'apiVersion': 'v1',
        'kind': 'Secret',
        'metadata': {
            'name': name,
            'namespace': namespace or DEFAULT_NAMESPACE,
        },
        'type': secret_type,
        'data': data,
    }
