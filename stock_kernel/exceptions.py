"""
Typed Exception Hierarchy for the Stock Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

The outer layer shows ``error``/``message`` verbatim to the end user and
decides how to react by error kind.  Parsing message strings for that is
fragile, so:
  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        entries.create_stock_entry(...)
    except OverReceiptError as e:
        log.warning(f"only {e.remaining} left on item {e.order_item_id}")
        api_response(code=e.code, remaining=e.remaining)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    StockKernelError (base)
    |
    +-- NotFoundError
    |   +-- ProductNotFoundError
    |   +-- OrderNotFoundError
    |   +-- OrderItemNotFoundError
    |   +-- StockEntryNotFoundError
    |   +-- StockExitNotFoundError
    |   +-- InstallmentNotFoundError
    |
    +-- ValidationError
    |
    +-- OverReceiptError
    |
    +-- ConflictError
    |   +-- DuplicateOrderNumberError
    |   +-- InvalidStatusTransitionError
    |   +-- StockItemUnavailableError
    |   +-- ExitAlreadyConfirmedError
    |   +-- ReceivedQuantityConflictError
    |   +-- InstallmentAlreadyPaidError
    |
    +-- PermissionDeniedError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                        | When Raised
-------------|-----------------------------|--------------------------------------
Not found    | NOT_FOUND                   | Unknown id reference
Validation   | VALIDATION_ERROR            | Empty lists, bad quantities, blanks
Receipt      | OVER_RECEIPT                | Entry exceeds remaining order quantity
Conflict     | CONFLICT                    | Entity not in the required state
             | DUPLICATE_ORDER_NUMBER      | Order number already used
             | INVALID_STATUS_TRANSITION   | e.g. approving a non-pending item
             | STOCK_ITEM_UNAVAILABLE      | Exiting a unit that is not available
             | EXIT_ALREADY_CONFIRMED      | Confirming an exit twice
             | RECEIVED_QUANTITY_CONFLICT  | Shrinking an item below received qty
             | INSTALLMENT_ALREADY_PAID    | Paying an installment twice
Permission   | PERMISSION_DENIED           | Admin-only operation, non-admin actor
Config       | CONFIGURATION_ERROR         | Unknown or ill-typed config key

===============================================================================
DESIGN DECISIONS
===============================================================================

1. Inherit from Exception, not ValueError.  Domain errors are catchable as a
   group and never mix with programming errors.
2. ``code`` is a class attribute so it is available without instantiation.
3. Every compound operation aborts without partial state when one of these
   is raised; the owning service rolls its transaction back.
"""

from decimal import Decimal


class StockKernelError(Exception):
    """
    Base exception for all stock kernel errors.

    All subclasses must have a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "STOCK_KERNEL_ERROR"


# Not-found exceptions


class NotFoundError(StockKernelError):
    """An id reference does not resolve to a stored record."""

    code: str = "NOT_FOUND"
    entity: str = "record"

    def __init__(self, entity_id: object, entity: str | None = None):
        self.entity_id = str(entity_id)
        if entity is not None:
            self.entity = entity
        super().__init__(f"{self.entity.capitalize()} not found: {entity_id}")


class ProductNotFoundError(NotFoundError):
    entity = "product"


class OrderNotFoundError(NotFoundError):
    entity = "order"


class OrderItemNotFoundError(NotFoundError):
    """Order item id does not belong to the given order."""

    entity = "order item"

    def __init__(self, order_id: object, item_id: object):
        self.order_id = str(order_id)
        self.entity_id = str(item_id)
        StockKernelError.__init__(
            self, f"Order item {item_id} not found on order {order_id}"
        )


class StockEntryNotFoundError(NotFoundError):
    entity = "stock entry"


class StockExitNotFoundError(NotFoundError):
    entity = "stock exit"


class InstallmentNotFoundError(NotFoundError):
    entity = "installment"


# Validation


class ValidationError(StockKernelError):
    """Malformed input: empty lists, out-of-range quantities, blank fields."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


# Receipt caps


class OverReceiptError(StockKernelError):
    """
    Requested entry quantity exceeds what remains to be received.

    remaining = ordered - previously received.
    """

    code: str = "OVER_RECEIPT"

    def __init__(
        self,
        order_item_id: object,
        ordered: int,
        received: int,
        requested: int,
    ):
        self.order_item_id = str(order_item_id)
        self.ordered = ordered
        self.received = received
        self.requested = requested
        self.remaining = ordered - received
        super().__init__(
            f"Order item {order_item_id}: requested {requested} but only "
            f"{self.remaining} of {ordered} remain to be received"
        )


# Conflicts


class ConflictError(StockKernelError):
    """Operating on an entity that is not in the required state."""

    code: str = "CONFLICT"


class DuplicateOrderNumberError(ConflictError):
    code: str = "DUPLICATE_ORDER_NUMBER"

    def __init__(self, order_number: str):
        self.order_number = order_number
        super().__init__(f"Order number already in use: {order_number}")


class InvalidStatusTransitionError(ConflictError):
    """A lifecycle transition is not allowed from the current status."""

    code: str = "INVALID_STATUS_TRANSITION"

    def __init__(self, entity_id: object, current_status: str, action: str):
        self.entity_id = str(entity_id)
        self.current_status = current_status
        self.action = action
        super().__init__(
            f"Cannot {action} {entity_id}: status is {current_status}"
        )


class StockItemUnavailableError(ConflictError):
    code: str = "STOCK_ITEM_UNAVAILABLE"

    def __init__(self, stock_item_ids: list[str], reason: str = "not available"):
        self.stock_item_ids = stock_item_ids
        self.reason = reason
        super().__init__(
            f"Stock items {reason}: {', '.join(stock_item_ids)}"
        )


class ExitAlreadyConfirmedError(ConflictError):
    code: str = "EXIT_ALREADY_CONFIRMED"

    def __init__(self, exit_id: object, confirmed_by: str | None):
        self.exit_id = str(exit_id)
        self.confirmed_by = confirmed_by
        super().__init__(f"Stock exit {exit_id} already confirmed by {confirmed_by}")


class ReceivedQuantityConflictError(ConflictError):
    """
    An order edit would leave an item below what was already received.

    Raised when an item with received stock is removed, re-pointed to a
    different product, shrunk below its received quantity or rejected.
    """

    code: str = "RECEIVED_QUANTITY_CONFLICT"

    def __init__(self, order_item_id: object, received: int, requested: int):
        self.order_item_id = str(order_item_id)
        self.received = received
        self.requested = requested
        super().__init__(
            f"Order item {order_item_id} already has {received} units received; "
            f"cannot set quantity to {requested}"
        )


class InstallmentAlreadyPaidError(ConflictError):
    code: str = "INSTALLMENT_ALREADY_PAID"

    def __init__(self, installment_id: object, value: Decimal):
        self.installment_id = str(installment_id)
        self.value = value
        super().__init__(f"Installment {installment_id} already paid")


# Permissions


class PermissionDeniedError(StockKernelError):
    """A non-admin actor attempted an admin-only operation."""

    code: str = "PERMISSION_DENIED"

    def __init__(self, actor_id: object, operation: str):
        self.actor_id = str(actor_id)
        self.operation = operation
        super().__init__(f"Operation {operation} requires an administrator")


# Configuration


class ConfigurationError(StockKernelError):
    code: str = "CONFIGURATION_ERROR"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid configuration {key}: {reason}")
