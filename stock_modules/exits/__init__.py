"""
Exit Ledger Module (``stock_modules.exits``).

Responsibility
--------------
Stock exits: records of specific stock items leaving inventory, with admin
confirmation, metadata edits and delete-with-restock.

Architecture position
---------------------
**Modules layer** -- DTOs, the confirmation workflow, ORM persistence and
the ``ExitService`` facade.  Per-product grouping comes from
``stock_engines.exits``.

Invariants enforced
-------------------
* Units flip between ``available`` and ``exited`` atomically per exit.
* A unit belongs to at most one live exit.
"""

from stock_modules.exits.models import ExitStatus, StockExit, StockExitItem
from stock_modules.exits.workflows import EXIT_WORKFLOW

__all__ = [
    "ExitStatus",
    "StockExit",
    "StockExitItem",
    "EXIT_WORKFLOW",
]
