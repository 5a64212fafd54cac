"""Persisted Query Signer - sign generated GraphQL request descriptors."""

__version__ = "0.1.0"
