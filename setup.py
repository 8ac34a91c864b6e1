from setuptools import setup, find_packages
setup(
    name='secret-stack',
    version='0.1.0',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    include_package_data=True,
    package_data={
        'secret_stack': [
            'secrets/*.yaml',
        ],
    },
    description='Kubernetes manifest generation with pluggable secret connectors and providers.',
    python_requires='>=3.8',
    install_requires=[
        'invoke>=2.0.0',
        'pyyaml>=6.0',
        'pydantic>=2.0.0',
        'python-dotenv>=1.0.0',
        'google-cloud-secret-manager>=2.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'secret-stack = secret_stack.cli:main',
        ],
    },
)
