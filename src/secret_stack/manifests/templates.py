"""Stack templates for common workloads."""

from typing import Any, Dict, List, Optional


def simple_app_template(name: str, image: str, namespace: str = 'default', replicas: int = 1,
                        port: int = 80, env: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Dict[str, Any]]:
    """Deployment plus ClusterIP Service for a single-container app."""
    labels = {'app': name}
    container: Dict[str, Any] = {
        'name': name,
        'image': image,
        'ports': [{'containerPort': port}],
    }
    if env:
        container['env'] = list(env)

    return {
        'deployment': {
            'apiVersion': 'apps/v1',
            'kind': 'Deployment',
            'metadata': {'name': name, 'namespace': namespace},
            'spec': {
                'replicas': replicas,
                'selector': {'matchLabels': dict(labels)},
                'template': {
                    'metadata': {'labels': dict(labels)},
                    'spec': {'containers': [container]},
                },
            },
        },
        'service': {
            'apiVersion': 'v1',
            'kind': 'Service',
            'metadata': {'name': name, 'namespace': namespace},
            'spec': {
                'selector': dict(labels),
                'type': 'ClusterIP',
                'ports': [{'port': port, 'targetPort': port}],
            },
        },
    }


def namespace_template(name: str) -> Dict[str, Dict[str, Any]]:
    return {
        'namespace': {
            'apiVersion': 'v1',
            'kind': 'Namespace',
            'metadata': {'name': name},
        }
    }
