"""Setup file for backwards compatibility with older pip versions."""

from setuptools import setup, find_packages

setup(
    name="persisted-query-signer",
    version="0.1.0",
    description="CLI tool to sign generated GraphQL request descriptors for persisted query validation",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "typer>=0.9.0",
        "rich>=13.0.0",
        "pydantic>=2.0.0",
        "tree-sitter>=0.22.0",
        "tree-sitter-language-pack>=0.2.0,<1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "persisted-query-signer=persisted_query_signer.cli:app",
        ],
    },
)
