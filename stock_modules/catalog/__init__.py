"""
Catalog Module (``stock_modules.catalog``).

Owns Product records: name, supplier, unit cost and unit type.  Orders and
entries copy what they need from a product at the time they reference it,
so editing or deleting a product never changes historical records.
"""

from stock_modules.catalog.models import Product
from stock_modules.catalog.service import CatalogService

__all__ = ["Product", "CatalogService"]
