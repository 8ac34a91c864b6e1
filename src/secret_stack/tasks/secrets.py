"""Secrets management tasks.

Simple task definitions that handle configuration errors with built-in guidance,
delegate to the orchestrator, and print JSON responses."""

import logging
import sys
from pathlib import Path
from typing import Dict, Tuple

from invoke import task

from secret_stack.config.exceptions import ConfigException
from secret_stack.config.loading import load_project_config, resolve_secret_managers
from secret_stack.config.logging import bootstrap_logging
from secret_stack.config.models import ProjectConfig
from secret_stack.manifests.render import to_multi_document_yaml
from secret_stack.secrets.kubectl import KubectlClient
from secret_stack.secrets.models import (
    ApplySecretsResponse,
    ErrorInfo,
    ListSecretsResponse,
    SecretEntryInfo,
    SecretManifestInfo,
    SecretsMetaResponse,
    ValidatedSecretInfo,
    ValidateSecretsResponse,
)
from secret_stack.secrets.orchestrator import SecretsOrchestrator

logger = logging.getLogger(__name__)

COMMON_HELP = {
    'config': 'Path to secret-stack.yaml (default: search the current directory)',
    'debug': 'Enable debug logging',
}


def _handle_config_error(e: ConfigException):
    """Handle configuration errors with built-in guidance."""
    print(e.guidance, file=sys.stderr)
    sys.exit(1)


def _print_response(response):
    print(response.model_dump_json(indent=2, exclude_none=True))
    if not response.meta.success:
        sys.exit(1)


def _error_meta(operation: str, e: ConfigException) -> SecretsMetaResponse:
    return SecretsMetaResponse(
        success=False,
        operation=operation,
        error=ErrorInfo(code=(e.error_type or 'config_error').upper(), message=str(e))
    )


def _load(config: str, debug: bool) -> Tuple[ProjectConfig, Dict]:
    bootstrap_logging('DEBUG' if debug else None)
    try:
        project = load_project_config(config)
        managers = resolve_secret_managers(project)
    except ConfigException as e:
        _handle_config_error(e)
    return project, managers


def _entries(managers: Dict):
    for manager_name, manager in managers.items():
        for secret_name in manager.get_secrets():
            yield SecretEntryInfo(
                name=secret_name,
                manager=manager_name,
                connector=manager.connector_name_for_secret(secret_name),
                provider=manager.provider_name_for_secret(secret_name)
            )


@task(name='list', help=COMMON_HELP)
def list_secrets(ctx, config=None, debug=False):
    """
    List registered secrets and where they come from.

    Examples:
        secret-stack secrets.list
        secret-stack secrets.list --config=deploy/secret-stack.yaml
    """
    _, managers = _load(config, debug)
    try:
        entries = list(_entries(managers))
    except ConfigException as e:
        _print_response(ListSecretsResponse(meta=_error_meta('list', e)))
        return

    _print_response(ListSecretsResponse(
        meta=SecretsMetaResponse(success=True, operation='list'),
        secrets=entries
    ))


@task(help=COMMON_HELP)
def validate(ctx, config=None, debug=False):
    """
    Load every secret through its connector and check it.

    Values are never printed; each secret is reported with its keys and a hash.

    Examples:
        secret-stack secrets.validate
        SECRET_STACK_CONFIG=deploy/secret-stack.yaml secret-stack secrets.validate
    """
    project, managers = _load(config, debug)
    orchestrator = SecretsOrchestrator(managers, project.secret.conflict)

    try:
        loaded = orchestrator.validate()
        entries = list(_entries(managers))
    except ConfigException as e:
        logger.debug(f"Validation failed: {e}")
        _print_response(ValidateSecretsResponse(meta=_error_meta('validate', e)))
        return

    secrets = [ValidatedSecretInfo.create(entry, loaded[entry.manager][entry.name]) for entry in entries]
    _print_response(ValidateSecretsResponse(
        meta=SecretsMetaResponse(success=True, operation='validate'),
        secrets=secrets
    ))


@task(help={
    **COMMON_HELP,
    'dry_run': 'Print the Secret manifests instead of applying them',
    'output_dir': 'Write the Secret manifests to <dir>/secrets.yml instead of applying them',
    'context': 'kubectl context to apply against',
})
def apply(ctx, dry_run=False, output_dir=None, context=None, config=None, debug=False):
    """
    Build Secret manifests from all managers and apply them with kubectl.

    Examples:
        secret-stack secrets.apply --dry-run
        secret-stack secrets.apply --output-dir=output
        secret-stack secrets.apply --context=kind-dev
    """
    project, managers = _load(config, debug)
    orchestrator = SecretsOrchestrator(managers, project.secret.conflict)

    try:
        if dry_run or output_dir:
            manifests = orchestrator.apply(dry_run=True)
        else:
            manifests = orchestrator.apply(KubectlClient(context=context))
    except ConfigException as e:
        print(e.guidance, file=sys.stderr)
        _print_response(ApplySecretsResponse(meta=_error_meta('apply', e), count=0))
        return

    if dry_run:
        sys.stdout.write(to_multi_document_yaml(manifests))
        return

    if output_dir:
        target = Path(output_dir) / 'secrets.yml'
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(to_multi_document_yaml(manifests))
        logger.info(f"Wrote {target}")

    _print_response(ApplySecretsResponse(
        meta=SecretsMetaResponse(success=True, operation='apply'),
        manifests=[SecretManifestInfo.from_manifest(m) for m in manifests],
        count=len(manifests)
    ))
