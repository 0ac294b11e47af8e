"""
Catalog Domain Models.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True)
class Product:
    """A purchasable product."""
    id: UUID
    name: str
    supplier: str
    unit_cost: Decimal
    unit_type: str  # e.g. "box", "unit", "pack"
    created_at: datetime
    updated_at: datetime
