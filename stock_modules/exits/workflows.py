"""
Stock Exit Workflows.

An exit is recorded unconfirmed and confirmed once by an administrator.
Deleting an exit is allowed from either state and restocks its units.
"""

from stock_kernel.domain.workflow import Transition, Workflow
from stock_kernel.logging_config import get_logger

logger = get_logger("modules.exits.workflows")


EXIT_WORKFLOW = Workflow(
    name="stock_exit",
    description="Stock exit confirmation",
    initial_state="unconfirmed",
    states=(
        "unconfirmed",
        "confirmed",
    ),
    transitions=(
        Transition("unconfirmed", "confirmed", action="confirm"),
        # Metadata edits never change the state
        Transition("unconfirmed", "unconfirmed", action="update"),
        Transition("confirmed", "confirmed", action="update"),
    ),
)

logger.info(
    "exits_workflow_registered",
    extra={
        "workflow_name": EXIT_WORKFLOW.name,
        "state_count": len(EXIT_WORKFLOW.states),
        "transition_count": len(EXIT_WORKFLOW.transitions),
        "initial_state": EXIT_WORKFLOW.initial_state,
    },
)
