from __future__ import annotations
from typing import Optional
from finid_core.clock import HeightClock
from finid_core.consent import ConsentRegistry
from finid_core.credentials import CredentialRegistry
from finid_core.governance import Registry
from finid_core.identity import IdentityRegistry
from finid_core.storage import StorageProvider, load_storage_provider

REGISTRIES = {
    "identity": IdentityRegistry,
    "credential": CredentialRegistry,
    "consent": ConsentRegistry,
}


def registry_factory(kind: str, admin: str, clock: HeightClock,
                     storage: Optional[StorageProvider] = None) -> Registry:
    """
    kind:
      - "identity"   → IdentityRegistry
      - "credential" → CredentialRegistry
      - "consent"    → ConsentRegistry

    Storage defaults to load_storage_provider() (FINID_STORAGE_PROVIDER / FINID_DB_PATH).
    """
    try:
        cls = REGISTRIES[kind]
    except KeyError:
        raise ValueError(f"Unknown registry kind: {kind}") from None
    return cls(admin=admin, clock=clock, storage=storage or load_storage_provider())
