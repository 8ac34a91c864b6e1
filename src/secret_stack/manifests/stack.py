"""
Stacks: named groups of Kubernetes resources, with secret injection.
"""

import copy
import logging
from collections import OrderedDict
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config.exceptions import ResourceNotFoundException
from ..secrets.injection import SecretsInjectionContext
from ..secrets.manager import SecretManager
from ..secrets.models import ProviderInjection
from .paths import deep_merge, get_path, set_path

logger = logging.getLogger(__name__)


class ResourceComposer:
    """Ordered resource_id -> manifest mapping that injections write into."""

    def __init__(self):
        self._resources: Dict[str, Dict[str, Any]] = OrderedDict()

    def add(self, resource_id: str, manifest: Dict[str, Any]) -> None:
        if resource_id in self._resources:
            raise ValueError(f"Resource '{resource_id}' already exists")
        self._resources[resource_id] = copy.deepcopy(manifest)

    def has(self, resource_id: str) -> bool:
        return resource_id in self._resources

    def get(self, resource_id: str) -> Dict[str, Any]:
        if resource_id not in self._resources:
            raise ResourceNotFoundException(f"Resource '{resource_id}' not found", resource_id=resource_id)
        return self._resources[resource_id]

    def ids(self) -> List[str]:
        return list(self._resources)

    def find_first_by_kind(self, kind: str) -> Optional[str]:
        for resource_id, manifest in self._resources.items():
            if manifest.get('kind') == kind:
                return resource_id
        return None

    def override(self, resource_id: str, partial: Dict[str, Any]) -> None:
        self._resources[resource_id] = deep_merge(self.get(resource_id), partial)

    def inject(self, resource_id: str, path: str, value: Any) -> None:
        """Write a payload into a resource.

        Lists extend the existing list (entries with the same `name` replace
        the old ones), dicts merge, anything else is set.
        """
        manifest = self.get(resource_id)
        existing = get_path(manifest, path)

        if isinstance(value, list) and isinstance(existing, list):
            names = {item.get('name') for item in value if isinstance(item, dict) and 'name' in item}
            kept = [item for item in existing
                    if not (isinstance(item, dict) and item.get('name') in names)]
            value = kept + value
        elif isinstance(value, dict) and isinstance(existing, dict):
            value = deep_merge(existing, value)

        try:
            set_path(manifest, path, value)
        except IndexError as e:
            raise ResourceNotFoundException(
                f"Cannot inject into '{resource_id}' at '{path}': {e}",
                resource_id=resource_id
            ) from e

    def build(self) -> Dict[str, Dict[str, Any]]:
        return copy.deepcopy(self._resources)


class Stack:
    """A named set of resources that can receive secrets from managers."""

    def __init__(self, name: str, resources: Optional[Dict[str, Dict[str, Any]]] = None):
        self.name = name
        self._base = ResourceComposer()
        self._overrides: List[Tuple[str, Dict[str, Any]]] = []
        self._contexts: List[SecretsInjectionContext] = []
        for resource_id, manifest in (resources or {}).items():
            self._base.add(resource_id, manifest)

    @classmethod
    def from_template(cls, template: Callable[..., Dict[str, Dict[str, Any]]], data: Dict[str, Any],
                      name: Optional[str] = None) -> 'Stack':
        """Create a stack from a template function and its input data."""
        resources = template(**data)
        stack_name = name or data.get('name') or template.__name__
        return cls(stack_name, resources)

    def add_resource(self, resource_id: str, manifest: Dict[str, Any]) -> 'Stack':
        self._base.add(resource_id, manifest)
        return self

    def override(self, overrides: Dict[str, Dict[str, Any]]) -> 'Stack':
        """Deep-merge partial manifests into resources at build time."""
        for resource_id, partial in overrides.items():
            self._overrides.append((resource_id, partial))
        return self

    def use_secrets(self, manager: SecretManager,
                    configure: Callable[[SecretsInjectionContext], Any],
                    manager_id: Optional[str] = None) -> 'Stack':
        """Register injections from a secret manager.

        Args:
            manager: Manager whose secrets are injected
            configure: Called with an injection context to declare injections
            manager_id: Name used to group provider payloads; defaults to position
        """
        context = SecretsInjectionContext(self._base, manager, manager_id or f"manager{len(self._contexts)}")
        configure(context)
        self._contexts.append(context)
        return self

    def get_secret_managers(self) -> List[SecretManager]:
        return [context.manager for context in self._contexts]

    @property
    def resource_ids(self) -> List[str]:
        return self._base.ids()

    def build(self) -> Dict[str, Dict[str, Any]]:
        """Render all resources with overrides and secret injections applied."""
        composer = ResourceComposer()
        for resource_id, manifest in self._base.build().items():
            composer.add(resource_id, manifest)
        for resource_id, partial in self._overrides:
            composer.override(resource_id, partial)

        groups: Dict[Tuple[str, str, str], List[ProviderInjection]] = OrderedDict()
        for context in self._contexts:
            for injection in context.resolve_injections():
                group_key = (injection.provider_id, injection.resource_id, injection.path)
                groups.setdefault(group_key, []).append(injection)

        for (provider_id, resource_id, path), injections in groups.items():
            payload = injections[0].provider.get_injection_payload(injections)
            composer.inject(resource_id, path, payload)
            logger.debug(f"Injected {len(injections)} secret(s) from {provider_id} into {resource_id} at {path}")

        return composer.build()
