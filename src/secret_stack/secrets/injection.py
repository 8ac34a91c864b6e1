"""
Secret injection builders.

Used inside `Stack.use_secrets(manager, configure)` to describe how secrets
reach a workload:

    def configure(c):
        c.secrets('VENDOR_API').for_name('VENDOR_API_KEY').inject('env', key='api_key')
        c.secrets('VENDOR_API').for_name('VENDOR_DATASET').inject('env', key='dataset')

Builders are resolved into ProviderInjection directives when the stack is built.
"""

import logging
from typing import List, Optional

from ..config.exceptions import ResourceNotFoundException, UnsupportedStrategyException
from .manager import SecretManager
from .models import InjectionStrategy, ProviderInjection

logger = logging.getLogger(__name__)


class SecretInjectionBuilder:
    """Fluent description of how one secret is injected."""

    def __init__(self, context: 'SecretsInjectionContext', secret_name: str):
        self._context = context
        self.secret_name = secret_name
        self.target_name: Optional[str] = None
        self.resource_id: Optional[str] = None
        self._strategies: List[dict] = []

    def for_name(self, target_name: str) -> 'SecretInjectionBuilder':
        """Name of the environment variable inside the container."""
        self.target_name = target_name
        return self

    def into_resource(self, resource_id: str) -> 'SecretInjectionBuilder':
        """Inject into a specific stack resource instead of the default one."""
        self.resource_id = resource_id
        return self

    def inject(self, kind: Optional[str] = None, container_index: int = 0,
               key: Optional[str] = None, prefix: Optional[str] = None) -> 'SecretInjectionBuilder':
        """Record an injection strategy.

        Args:
            kind: 'env', 'envFrom' or 'imagePullSecret'; defaults to the provider's first strategy
            container_index: Container to inject into
            key: Secret data key to read (env)
            prefix: Variable prefix (envFrom)
        """
        self._strategies.append({
            'kind': kind,
            'container_index': container_index,
            'key': key,
            'prefix': prefix,
        })
        return self

    def resolve(self) -> List[ProviderInjection]:
        manager = self._context.manager
        provider_name = manager.provider_name_for_secret(self.secret_name)
        provider = manager.resolve_provider(provider_name)

        strategies = self._strategies or [{'kind': None, 'container_index': 0, 'key': None, 'prefix': None}]
        resource_id = self._context.resolve_resource_id(self.resource_id, provider.target_kind, self.secret_name)

        injections = []
        for options in strategies:
            kind = options['kind'] or provider.default_strategy()
            if not provider.supports(kind):
                raise UnsupportedStrategyException(
                    f"[{provider.__class__.__name__}] Strategy '{kind}' is not supported for secret "
                    f"'{self.secret_name}'. Supported: {', '.join(provider.supported_strategies)}",
                    provider=provider.__class__.__name__,
                    secret_name=self.secret_name,
                    supported=list(provider.supported_strategies)
                )
            strategy = InjectionStrategy(**{**options, 'kind': kind})
            injections.append(ProviderInjection(
                provider_id=f"{self._context.manager_id}:{provider_name}",
                provider=provider,
                resource_id=resource_id,
                path=provider.get_target_path(strategy),
                secret_name=self.secret_name,
                target_name=self.target_name,
                strategy=strategy
            ))
        return injections


class SecretsInjectionContext:
    """Collects injection builders for one secret manager within a stack."""

    def __init__(self, resources, manager: SecretManager, manager_id: str = 'default'):
        self._resources = resources
        self.manager = manager
        self.manager_id = manager_id
        self.default_resource_id: Optional[str] = None
        self._builders: List[SecretInjectionBuilder] = []

    def secrets(self, secret_name: str) -> SecretInjectionBuilder:
        builder = SecretInjectionBuilder(self, secret_name)
        self._builders.append(builder)
        return builder

    def set_default_resource(self, resource_id: str) -> None:
        self.default_resource_id = resource_id

    def resolve_resource_id(self, explicit: Optional[str], target_kind: str, secret_name: str) -> str:
        resource_id = explicit or self.default_resource_id
        if resource_id is not None:
            if not self._resources.has(resource_id):
                raise ResourceNotFoundException(
                    f"Resource '{resource_id}' not found for injection of secret '{secret_name}'",
                    resource_id=resource_id,
                    secret_name=secret_name
                )
            return resource_id

        resource_id = self._resources.find_first_by_kind(target_kind)
        if resource_id is None:
            raise ResourceNotFoundException(
                f"No resource of kind '{target_kind}' found for injection of secret '{secret_name}'",
                secret_name=secret_name
            )
        return resource_id

    def resolve_injections(self) -> List[ProviderInjection]:
        injections: List[ProviderInjection] = []
        for builder in self._builders:
            injections.extend(builder.resolve())
        logger.debug(f"Resolved {len(injections)} injection(s) for manager '{self.manager_id}'")
        return injections
