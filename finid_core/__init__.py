"""
FinID Core Package
==================
Trust and access-control registries for financial identity.

Provides:
- IdentityRegistry: trusted sources, submitted user information, verification status
- CredentialRegistry: authorized issuers and the credentials they issue
- ConsentRegistry: per (user, data type, recipient) consent grants
- Pluggable local storage interface (SQLite default)
"""

from finid_core.clock import HeightClock, ManualClock
from finid_core.consent import ConsentRegistry
from finid_core.credentials import CredentialRegistry
from finid_core.errors import Forbidden, NotFound, RegistryError, Result, Unauthorized
from finid_core.factory import registry_factory
from finid_core.identity import IdentityRegistry

__all__ = [
    "HeightClock",
    "ManualClock",
    "IdentityRegistry",
    "CredentialRegistry",
    "ConsentRegistry",
    "RegistryError",
    "Unauthorized",
    "Forbidden",
    "NotFound",
    "Result",
    "registry_factory",
]
