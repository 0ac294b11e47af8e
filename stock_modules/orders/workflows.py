"""
Order Workflows.

State machine for order item approval.  Order status has no workflow of its
own: it is derived from the item statuses.
"""

from stock_kernel.domain.workflow import Guard, Transition, Workflow
from stock_kernel.logging_config import get_logger

logger = get_logger("modules.orders.workflows")


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

NOTHING_RECEIVED = Guard(
    name="nothing_received",
    description="No stock has been entered against the item",
)


# -----------------------------------------------------------------------------
# Order Item Workflow
# -----------------------------------------------------------------------------

ORDER_ITEM_WORKFLOW = Workflow(
    name="order_item",
    description="Per-item purchase approval",
    initial_state="pending",
    states=(
        "pending",
        "approved",
        "rejected",
    ),
    transitions=(
        # Item-level decisions act only on pending items
        Transition("pending", "approved", action="approve"),
        Transition("pending", "rejected", action="reject", guard=NOTHING_RECEIVED),
        # Order-level decisions overwrite every item
        Transition("pending", "approved", action="approve_all"),
        Transition("rejected", "approved", action="approve_all"),
        Transition("approved", "approved", action="approve_all"),
        Transition("pending", "rejected", action="reject_all", guard=NOTHING_RECEIVED),
        Transition("approved", "rejected", action="reject_all", guard=NOTHING_RECEIVED),
        Transition("rejected", "rejected", action="reject_all"),
        # Non-admin edits send every item back to the queue
        Transition("pending", "pending", action="resubmit"),
        Transition("approved", "pending", action="resubmit"),
        Transition("rejected", "pending", action="resubmit"),
    ),
)

logger.info(
    "orders_item_workflow_registered",
    extra={
        "workflow_name": ORDER_ITEM_WORKFLOW.name,
        "state_count": len(ORDER_ITEM_WORKFLOW.states),
        "transition_count": len(ORDER_ITEM_WORKFLOW.transitions),
        "initial_state": ORDER_ITEM_WORKFLOW.initial_state,
    },
)
