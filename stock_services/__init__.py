"""
stock_services -- outer operation surface over the ledgers.

``StockGateway`` wires the module services over one store and returns
``OperationResult`` envelopes instead of raising typed kernel errors.
"""

from stock_services.gateway import StockGateway
from stock_services.results import OperationResult

__all__ = [
    "OperationResult",
    "StockGateway",
]
