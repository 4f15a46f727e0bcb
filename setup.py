from setuptools import setup, find_packages

setup(
    name='kubesetup',
    version='0.1.0',
    packages=find_packages(exclude=['kubesetup.tests']),
    include_package_data=True,
    install_requires=[
        'typer[all]',
        'kubernetes',
        'python-dotenv',
        'requests',
        'pyyaml',
        'jsonschema',
        'urllib3',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'kubesetup=kubesetup.cli:run'
        ]
    },
    author='Your Name',
    description='Fail-fast provisioning of a single-node kubeadm cluster on Ubuntu 22.04',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: POSIX :: Linux',
    ],
    python_requires='>=3.8',
)
