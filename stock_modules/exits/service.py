"""
Exit Ledger Service (``stock_modules.exits.service``).

Responsibility
--------------
Consume specific stock items, confirm exits, edit their metadata and
delete them with restock.

Invariants enforced
-------------------
* Every id of a new exit must name an ``available`` stock item; the whole
  set flips to ``exited`` (with ``exit_id``/``exit_date``) or none does.
* A stock item belongs to at most one live exit.
* Deleting an exit returns every one of its units to ``available`` in the
  same transaction that removes the exit.
* Updates touch ``exit_date`` and ``observation`` only.  A new exit date is
  propagated to the consumed units.

Failure modes
-------------
* ``ValidationError`` -- empty or duplicated item list.
* ``StockItemUnavailableError`` -- unknown or already exited units.
* ``StockExitNotFoundError``
* ``ExitAlreadyConfirmedError`` -- double confirm under the ``error`` policy.
* ``PermissionDeniedError`` -- confirm by a non-admin actor.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import date
from typing import Any
from uuid import UUID, uuid4

from stock_config import DoubleConfirmPolicy, StockConfig, get_active_config
from stock_engines.exits import group_exit_items
from stock_kernel.domain.actor import Actor
from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.exceptions import (
    ExitAlreadyConfirmedError,
    StockExitNotFoundError,
    StockItemUnavailableError,
    ValidationError,
)
from stock_kernel.logging_config import get_logger
from stock_kernel.store import Store
from stock_modules._service_helpers import as_uuid, require, require_date
from stock_modules.exits.models import StockExit
from stock_modules.exits.workflows import EXIT_WORKFLOW

logger = get_logger("modules.exits.service")


class ExitService:
    """Exit ledger."""

    def __init__(
        self,
        store: Store,
        clock: Clock | None = None,
        config: StockConfig | None = None,
        id_factory: Callable[[], UUID] = uuid4,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()
        self._new_id = id_factory

    def list_stock_exits(self) -> list[StockExit]:
        return self._store.stock_exits.list()

    def get_stock_exit(self, exit_id: UUID) -> StockExit:
        return require(self._store.stock_exits, exit_id, StockExitNotFoundError)

    # =========================================================================
    # Create
    # =========================================================================

    def create_stock_exit(
        self,
        *,
        stock_item_ids: Sequence[UUID | str] | None = None,
        exit_date: date | str | None = None,
        observation: str | None = None,
        actor: Actor,
    ) -> StockExit:
        """Consume the given units.  Nothing changes unless all are available."""
        if not stock_item_ids:
            raise ValidationError("stock_item_ids", "an exit needs at least one stock item")
        ids = tuple(as_uuid("stock_item_ids", value) for value in stock_item_ids)
        if len(set(ids)) != len(ids):
            raise ValidationError("stock_item_ids", "contains duplicates")
        when = require_date("exit_date", exit_date)

        logger.info("stock_exit_create_started", extra={
            "stock_item_count": len(ids),
            "exit_date": when,
        })

        with self._store.transaction():
            units = []
            missing: list[str] = []
            unavailable: list[str] = []
            for item_id in ids:
                unit = self._store.stock_items.get(item_id)
                if unit is None:
                    missing.append(str(item_id))
                elif not unit.is_available:
                    unavailable.append(str(item_id))
                else:
                    units.append(unit)
            if missing:
                raise StockItemUnavailableError(missing, reason="not found")
            if unavailable:
                raise StockItemUnavailableError(unavailable, reason="already exited")

            stock_exit = StockExit(
                id=self._new_id(),
                exit_date=when,
                observation=(observation or "").strip(),
                created_by=actor.id,
                created_by_name=actor.name,
                created_at=self._clock.now(),
                stock_item_ids=ids,
                items=group_exit_items(units),
            )
            self._store.stock_items.put_all(
                unit.exited(stock_exit.id, when) for unit in units
            )
            self._store.stock_exits.put(stock_exit)

        logger.info("stock_exit_created", extra={
            "stock_exit_id": str(stock_exit.id),
            "quantity": stock_exit.quantity,
            "total_cost": str(stock_exit.total_cost),
            "product_count": len(stock_exit.items),
        })
        return stock_exit

    # =========================================================================
    # Confirm / update / delete
    # =========================================================================

    def confirm_stock_exit(self, exit_id: UUID, *, actor: Actor) -> StockExit:
        """Admin sign-off.  A second confirm follows ``double_confirm_policy``."""
        actor.require_admin("confirm_stock_exit")
        logger.info("stock_exit_confirm_started", extra={"stock_exit_id": str(exit_id)})

        with self._store.transaction():
            current = self.get_stock_exit(exit_id)
            if current.is_confirmed:
                if self._config.double_confirm_policy == DoubleConfirmPolicy.IGNORE:
                    logger.info("stock_exit_already_confirmed", extra={
                        "stock_exit_id": str(exit_id),
                        "confirmed_by": current.confirmed_by_name,
                    })
                    return current
                raise ExitAlreadyConfirmedError(current.id, current.confirmed_by_name)

            EXIT_WORKFLOW.transition(current.id, current.status, "confirm")
            stock_exit = current.confirmed(actor, self._clock.now())
            self._store.stock_exits.put(stock_exit)

        logger.info("stock_exit_confirmed", extra={
            "stock_exit_id": str(exit_id),
            "confirmed_by": actor.name,
        })
        return stock_exit

    def update_stock_exit(
        self,
        exit_id: UUID,
        *,
        actor: Actor,
        exit_date: date | str | None = None,
        observation: str | None = None,
    ) -> StockExit:
        """Edit exit metadata.  Item membership never changes."""
        changes: dict[str, Any] = {}
        if exit_date is not None:
            changes["exit_date"] = require_date("exit_date", exit_date)
        if observation is not None:
            changes["observation"] = observation.strip()

        logger.info("stock_exit_update_started", extra={
            "stock_exit_id": str(exit_id),
            "changed_fields": sorted(changes),
        })

        with self._store.transaction():
            current = self.get_stock_exit(exit_id)
            EXIT_WORKFLOW.transition(current.id, current.status, "update")
            stock_exit = replace(current, **changes)
            self._store.stock_exits.put(stock_exit)
            if "exit_date" in changes:
                self._store.stock_items.put_all(
                    unit.exited(stock_exit.id, stock_exit.exit_date)
                    for unit in self._consumed_units(stock_exit)
                )

        logger.info("stock_exit_updated", extra={
            "stock_exit_id": str(exit_id),
            "actor_id": str(actor.id),
        })
        return stock_exit

    def delete_stock_exit(self, exit_id: UUID, *, actor: Actor) -> None:
        """Remove the exit and put its units back in stock."""
        logger.info("stock_exit_delete_started", extra={"stock_exit_id": str(exit_id)})

        with self._store.transaction():
            stock_exit = self.get_stock_exit(exit_id)
            units = self._consumed_units(stock_exit)
            self._store.stock_items.put_all(unit.returned() for unit in units)
            self._store.stock_exits.delete(stock_exit.id)

        logger.info("stock_exit_deleted", extra={
            "stock_exit_id": str(exit_id),
            "restocked": len(units),
            "actor_id": str(actor.id),
        })

    def _consumed_units(self, stock_exit: StockExit) -> list:
        units = []
        for item_id in stock_exit.stock_item_ids:
            unit = self._store.stock_items.get(item_id)
            if unit is not None and unit.exit_id == stock_exit.id:
                units.append(unit)
        return units
