from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional
from finid_core.constants import ERR_UNAUTHORIZED, ERR_NOT_FOUND, ERR_FORBIDDEN


class RegistryError(Exception):
    code: int = 0
    name: str = "error"


class Unauthorized(RegistryError):
    code = ERR_UNAUTHORIZED
    name = "unauthorized"


class Forbidden(Unauthorized):
    """Known principal or source that is not currently permitted to act."""
    code = ERR_FORBIDDEN
    name = "forbidden"


class NotFound(RegistryError):
    code = ERR_NOT_FOUND
    name = "not_found"


@dataclass(frozen=True)
class Result:
    """
    Two-variant outcome of a mutating registry operation.

    Success may carry a value; failure carries the RegistryError that
    rejected the call. Nothing was written when ok is False.
    """
    ok: bool
    value: Any = None
    error: Optional[RegistryError] = None

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: RegistryError) -> "Result":
        return cls(ok=False, error=error)

    @property
    def code(self) -> Optional[int]:
        return self.error.code if self.error else None

    def unwrap(self) -> Any:
        if self.error:
            raise self.error
        return self.value
