"""
Manifest composition and rendering.
"""

from .paths import parse_path, get_path, set_path, deep_merge
from .render import to_yaml, to_multi_document_yaml, render_stacks, write_output
from .stack import ResourceComposer, Stack
from .templates import simple_app_template, namespace_template

__all__ = [
    'parse_path',
    'get_path',
    'set_path',
    'deep_merge',
    'to_yaml',
    'to_multi_document_yaml',
    'render_stacks',
    'write_output',
    'ResourceComposer',
    'Stack',
    'simple_app_template',
    'namespace_template',
]
