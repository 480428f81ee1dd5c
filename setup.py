from setuptools import setup, find_packages

setup(
    name="batch_insert",
    version="0.1.0",
    packages=find_packages(include=["batch_insert", "batch_insert.*"]),
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=[
        'click>=8.1',
        'polars>=1.0',
        'rich>=13.0',
        'sqlalchemy>=2.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'batch-insert=batch_insert.cli.commands:cli',
        ],
    },
)
