"""
Actor -- who is performing an operation.

Authentication lives outside the kernel; the caller hands over an already
resolved identity.  The only authorization question the kernel asks is
"is this actor an administrator".
"""

from dataclasses import dataclass
from uuid import UUID

from stock_kernel.exceptions import PermissionDeniedError


@dataclass(frozen=True)
class Actor:
    """An authenticated user acting on the ledgers."""

    id: UUID
    name: str
    is_admin: bool = False

    def require_admin(self, operation: str) -> None:
        """Raise PermissionDeniedError unless this actor is an administrator."""
        if not self.is_admin:
            raise PermissionDeniedError(self.id, operation)
