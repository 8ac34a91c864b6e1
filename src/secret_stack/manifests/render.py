"""
YAML rendering and output for built stacks.
"""

import logging
import shutil
import sys
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, Iterable, List

import yaml

logger = logging.getLogger(__name__)

STDOUT = '-'


def to_yaml(manifest: Dict[str, Any]) -> str:
    return yaml.safe_dump(manifest, sort_keys=False, default_flow_style=False)


def to_multi_document_yaml(manifests: Iterable[Dict[str, Any]]) -> str:
    """Join manifests into one YAML stream separated by `---`."""
    return ''.join(f"---\n{to_yaml(m)}" for m in manifests)


def render_stacks(stacks: Dict[str, Any], mode: str = 'stack') -> Dict[str, str]:
    """Build every stack and lay its YAML out according to the output mode.

    Args:
        stacks: stack name -> Stack
        mode: 'stack' (one file per stack), 'resource' (one file per resource),
            'flat' (single file) or 'stdout'

    Returns:
        relative file path (or '-') -> YAML text
    """
    built = OrderedDict((name, stack.build()) for name, stack in stacks.items())
    files: Dict[str, str] = OrderedDict()

    if mode == 'stack':
        for name, resources in built.items():
            files[f"{name}.yml"] = to_multi_document_yaml(resources.values())
    elif mode == 'resource':
        for name, resources in built.items():
            for resource_id, manifest in resources.items():
                files[f"{name}/{manifest.get('kind', 'Resource')}_{resource_id}.yml"] = to_yaml(manifest)
    elif mode in ('flat', 'stdout'):
        all_manifests = [m for resources in built.values() for m in resources.values()]
        key = 'stacks.yml' if mode == 'flat' else STDOUT
        files[key] = to_multi_document_yaml(all_manifests)
    else:
        raise ValueError(f"Unknown output mode: {mode}")

    logger.debug(f"Rendered {len(built)} stack(s) into {len(files)} output(s) ({mode} mode)")
    return files


def write_output(files: Dict[str, str], output_dir, clean: bool = False) -> List[str]:
    """Write rendered files below output_dir; the '-' entry goes to stdout.

    Returns:
        Written paths (and '-' when printed)
    """
    output_path = Path(output_dir)
    if clean and output_path.exists():
        shutil.rmtree(output_path)

    written: List[str] = []
    for relative, content in files.items():
        if relative == STDOUT:
            sys.stdout.write(content)
            written.append(STDOUT)
            continue
        target = output_path / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
        written.append(str(target))
        logger.info(f"Wrote {target}")
    return written
