"""
Secrets orchestration across one or more secret managers.

Loads and validates every secret, collects the Secret manifests providers
want to exist, and merges manifests that target the same Kubernetes object
according to the configured conflict strategies.
"""

import copy
import logging
from collections import OrderedDict
from typing import Dict, List, Optional

from ..config.exceptions import SecretConflictException
from ..config.models import ConflictConfig
from .interface import DEFAULT_NAMESPACE
from .manager import SecretManager
from .models import PreparedEffect, SecretValue

logger = logging.getLogger(__name__)


def effect_identifier(effect: PreparedEffect) -> str:
    """Kubernetes identity of a Secret manifest: <namespace>/<name>."""
    metadata = effect.value.get('metadata', {})
    return f"{metadata.get('namespace', DEFAULT_NAMESPACE)}/{metadata.get('name')}"


def _origin(effect: PreparedEffect) -> str:
    return f"{effect.manager_name or 'default'}/{effect.provider_name} (secret {effect.secret_name})"


def conflict_level(existing: PreparedEffect, incoming: PreparedEffect) -> str:
    """Classify a collision between two effects on the same Secret."""
    if existing.manager_name != incoming.manager_name:
        return 'cross_manager'
    if existing.provider_name != incoming.provider_name:
        return 'cross_provider'
    return 'intra_provider'


class SecretsOrchestrator:
    """Validates, merges and applies secrets from a set of managers."""

    def __init__(self, managers: Dict[str, SecretManager], conflict: Optional[ConflictConfig] = None):
        self.managers = OrderedDict(managers)
        self.conflict = conflict or ConflictConfig()

    def validate(self) -> Dict[str, Dict[str, SecretValue]]:
        """Load every secret of every manager.

        Returns:
            manager name -> secret name -> value
        """
        loaded: Dict[str, Dict[str, SecretValue]] = OrderedDict()
        for name, manager in self.managers.items():
            logger.debug(f"Validating secret manager '{name}'")
            loaded[name] = manager.load_secrets()
        logger.info(f"Validated {sum(len(v) for v in loaded.values())} secret(s) "
                    f"across {len(loaded)} manager(s)")
        return loaded

    def prepare_effects(self) -> List[PreparedEffect]:
        effects: List[PreparedEffect] = []
        for name, manager in self.managers.items():
            for effect in manager.prepare():
                effects.append(effect.model_copy(update={'manager_name': name}))
        return effects

    def _resolve(self, existing: PreparedEffect, incoming: PreparedEffect) -> PreparedEffect:
        identifier = effect_identifier(incoming)
        level = conflict_level(existing, incoming)
        strategy = self.conflict.strategy_for(level)
        origins = [_origin(existing), _origin(incoming)]

        if strategy == 'error':
            raise SecretConflictException(
                f"Secret '{identifier}' is produced by both {origins[0]} and {origins[1]}",
                identifier=identifier,
                level=level,
                origins=origins
            )

        if strategy == 'overwrite':
            logger.warning(f"Secret '{identifier}' from {origins[0]} overwritten by {origins[1]}")
            return incoming

        # autoMerge
        existing_type = existing.value.get('type')
        incoming_type = incoming.value.get('type')
        if existing_type != incoming_type:
            raise SecretConflictException(
                f"Cannot merge Secret '{identifier}': type '{existing_type}' from {origins[0]} "
                f"differs from type '{incoming_type}' from {origins[1]}",
                identifier=identifier,
                level=level,
                origins=origins
            )

        merged_data = dict(existing.value.get('data') or {})
        for key, value in (incoming.value.get('data') or {}).items():
            if key in merged_data and merged_data[key] != value:
                raise SecretConflictException(
                    f"Cannot merge Secret '{identifier}': key '{key}' has different values "
                    f"in {origins[0]} and {origins[1]}",
                    identifier=identifier,
                    level=level,
                    origins=origins
                )
            merged_data[key] = value

        merged_value = copy.deepcopy(existing.value)
        merged_value['data'] = {key: merged_data[key] for key in sorted(merged_data)}
        logger.debug(f"Merged Secret '{identifier}' ({level}), {len(merged_data)} key(s)")
        return existing.model_copy(update={'value': merged_value})

    def merge(self, effects: List[PreparedEffect]) -> List[Dict]:
        """Collapse effects that target the same Secret into one manifest each.

        Raises:
            SecretConflictException: When a collision's strategy is `error`, or
                `autoMerge` finds incompatible content
        """
        merged: Dict[str, PreparedEffect] = OrderedDict()
        for effect in effects:
            identifier = effect_identifier(effect)
            if identifier in merged:
                merged[identifier] = self._resolve(merged[identifier], effect)
            else:
                merged[identifier] = effect
        return [copy.deepcopy(effect.value) for effect in merged.values()]

    def build_manifests(self) -> List[Dict]:
        return self.merge(self.prepare_effects())

    def apply(self, kubectl=None, dry_run: bool = False) -> List[Dict]:
        """Build merged Secret manifests and apply them with kubectl.

        Args:
            kubectl: KubectlClient used when not a dry run
            dry_run: Only build the manifests

        Returns:
            The merged manifests
        """
        manifests = self.build_manifests()
        if dry_run or kubectl is None:
            logger.info(f"Prepared {len(manifests)} Secret manifest(s) (not applied)")
            return manifests

        for manifest in manifests:
            kubectl.apply(manifest)
        logger.info(f"Applied {len(manifests)} Secret manifest(s)")
        return manifests
