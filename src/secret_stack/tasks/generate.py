"""Manifest generation task."""

import logging
import sys

from invoke import task

from secret_stack.config.exceptions import ConfigException
from secret_stack.config.loading import load_project_config, resolve_stacks
from secret_stack.config.logging import bootstrap_logging
from secret_stack.manifests.render import render_stacks, write_output

logger = logging.getLogger(__name__)


@task(help={
    'config': 'Path to secret-stack.yaml (default: search the current directory)',
    'output_dir': 'Output directory (default: generate.output_dir from config)',
    'mode': 'Output mode: stack, resource, flat or stdout',
    'stdout': 'Print all manifests to stdout instead of writing files',
    'debug': 'Enable debug logging',
})
def generate(ctx, config=None, output_dir=None, mode=None, stdout=False, debug=False):
    """
    Build every stack and write its Kubernetes manifests as YAML.

    Examples:
        secret-stack generate
        secret-stack generate --mode=resource --output-dir=dist
        secret-stack generate --stdout | kubectl apply -f -
    """
    bootstrap_logging('DEBUG' if debug else None)

    try:
        project = load_project_config(config)
        stacks = resolve_stacks(project)
        output_mode = 'stdout' if stdout else (mode or project.generate.output_mode)
        files = render_stacks(stacks, output_mode)
    except ConfigException as e:
        print(e.guidance, file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)

    if not stacks:
        print("📭 No stacks configured", file=sys.stderr)
        return

    target_dir = output_dir or str(project.base_dir / project.generate.output_dir)
    written = write_output(files, target_dir, clean=project.generate.clean_output_dir and output_mode != 'stdout')

    if output_mode != 'stdout':
        print(f"✅ Generated {len(written)} file(s) from {len(stacks)} stack(s) in {target_dir}", file=sys.stderr)
