"""
Catalog Module Service (``stock_modules.catalog.service``).

Responsibility
--------------
Create, edit, delete and look up products.

Invariants enforced
-------------------
* name, supplier and unit type are non-blank; unit cost is >= 0.
* Deleting a product never cascades: orders, entries and stock items keep
  the name/supplier/cost they copied when they referenced it.
* Each mutating method owns its transaction (``store.transaction()``).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from decimal import Decimal
from uuid import UUID, uuid4

from stock_kernel.domain.actor import Actor
from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.exceptions import ProductNotFoundError
from stock_kernel.logging_config import get_logger
from stock_kernel.store import Store
from stock_modules._service_helpers import require, require_amount, require_text
from stock_modules.catalog.models import Product

logger = get_logger("modules.catalog.service")


class CatalogService:
    """Product catalog."""

    def __init__(
        self,
        store: Store,
        clock: Clock | None = None,
        id_factory: Callable[[], UUID] = uuid4,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._new_id = id_factory

    def list_products(self) -> list[Product]:
        return self._store.products.list()

    def get_product(self, product_id: UUID) -> Product:
        return require(self._store.products, product_id, ProductNotFoundError)

    def create_product(
        self,
        *,
        name: str | None = None,
        supplier: str | None = None,
        unit_cost: Decimal | str | int | None = None,
        unit_type: str | None = None,
        actor: Actor,
    ) -> Product:
        now = self._clock.now()
        product = Product(
            id=self._new_id(),
            name=require_text("name", name),
            supplier=require_text("supplier", supplier),
            unit_cost=require_amount("unit_cost", unit_cost),
            unit_type=require_text("unit_type", unit_type),
            created_at=now,
            updated_at=now,
        )
        with self._store.transaction():
            self._store.products.put(product)

        logger.info("catalog_product_created", extra={
            "product_id": str(product.id),
            "product_name": product.name,
            "unit_cost": str(product.unit_cost),
            "actor_id": str(actor.id),
        })
        return product

    def update_product(
        self,
        product_id: UUID,
        *,
        actor: Actor,
        name: str | None = None,
        supplier: str | None = None,
        unit_cost: Decimal | str | int | None = None,
        unit_type: str | None = None,
    ) -> Product:
        """Partial update; fields left as None keep their current value."""
        changes: dict = {}
        if name is not None:
            changes["name"] = require_text("name", name)
        if supplier is not None:
            changes["supplier"] = require_text("supplier", supplier)
        if unit_cost is not None:
            changes["unit_cost"] = require_amount("unit_cost", unit_cost)
        if unit_type is not None:
            changes["unit_type"] = require_text("unit_type", unit_type)

        with self._store.transaction():
            current = self.get_product(product_id)
            product = replace(current, updated_at=self._clock.now(), **changes)
            self._store.products.put(product)

        logger.info("catalog_product_updated", extra={
            "product_id": str(product_id),
            "changed_fields": sorted(changes),
            "actor_id": str(actor.id),
        })
        return product

    def delete_product(self, product_id: UUID, *, actor: Actor) -> None:
        with self._store.transaction():
            product = self.get_product(product_id)
            self._store.products.delete(product.id)

        logger.info("catalog_product_deleted", extra={
            "product_id": str(product_id),
            "actor_id": str(actor.id),
        })
