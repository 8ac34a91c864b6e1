"""Stacks for the custom type secret example."""

from secret_stack import Stack, simple_app_template
from secret_stack.config.loading import get_secret_manager


def _inject_vendor_api(c):
    c.secrets('VENDOR_API').for_name('VENDOR_API_KEY').inject('env', key='api_key')
    c.secrets('VENDOR_API').for_name('VENDOR_DATASET').inject('env', key='dataset')


def stacks():
    manager = get_secret_manager()
    app = Stack.from_template(simple_app_template, {
        'name': 'my-app',
        'image': 'nginx',
        'namespace': 'default',
    })
    app.use_secrets(manager, _inject_vendor_api)
    return {'app': app}
