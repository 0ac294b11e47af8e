"""
Stock Kernel

The lowest layer of the inventory and purchasing system:
- Typed errors with machine-readable codes
- Structured JSON logging
- Injectable clock and actor identity
- Repository/store abstraction with all-or-nothing transactions
"""

__version__ = "0.1.0"
