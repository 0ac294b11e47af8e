"""
Stock Modules.

Thin orchestration layers over the Stock Kernel and Engines.
Each module contains:
- Domain models (the nouns)
- ORM persistence models (for the SQLAlchemy-backed store)
- A service facade that owns the transaction boundary
- Workflows (state machines) where the records have a lifecycle

Modules:
- Catalog: Products
- Orders: Purchase orders and per-item approval
- Entries: Goods received against approved orders, stock explosion
- Exits: Stock leaving inventory, confirmation, delete-with-restock
- Payments: Installments derived from entries
- Reporting: Dashboard and stock report projections

Actual calculation lives in the engines.
"""
