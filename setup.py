from setuptools import setup, find_packages

setup(
    name='kubearmctl',
    version='0.1.0',
    packages=find_packages(exclude=['kubearmctl.tests']),
    include_package_data=True,
    install_requires=[
        'typer[all]',
        'requests',
        'python-dotenv',
        'pydantic',
        'pyyaml',
        'kubernetes',
        'docker',
        'urllib3',
        'rich',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'kubearmctl=kubearmctl.cli:main'
        ]
    },
    author='Your Name',
    description='Node installer and cluster admin CLI for Kubernetes on ARM boards',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: POSIX :: Linux',
    ],
    python_requires='>=3.8',
)
