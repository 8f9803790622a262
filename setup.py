from setuptools import setup, find_packages

setup(
    name='blockbucket',
    version='1.0.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    entry_points={
        'console_scripts': [
            'blockbucket=blockbucket.cli.bucket_cli:main',
        ],
    },
    extras_require={
        'test': ['pytest'],
    },
    python_requires='>=3.7',
)
