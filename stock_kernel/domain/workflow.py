"""
Canonical workflow types (``stock_kernel.domain.workflow``).

Responsibility
--------------
Pure value objects for record lifecycles.  Every module declares its state
machines with these types and services ask the workflow whether an action
is allowed instead of hard-coding status checks.

Invariants enforced
-------------------
* Transitions reference only states in ``Workflow.states``.
* ``initial_state`` is a member of ``states``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stock_kernel.exceptions import InvalidStatusTransitionError


@dataclass(frozen=True)
class Guard:
    """A condition that must hold before a transition fires.

    Descriptive only; the owning service evaluates it.
    """
    name: str
    description: str


@dataclass(frozen=True)
class Transition:
    """A valid state transition."""
    from_state: str
    to_state: str
    action: str
    guard: Guard | None = None


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for a record lifecycle."""
    name: str
    description: str
    initial_state: str
    states: tuple[str, ...]
    transitions: tuple[Transition, ...]

    def __post_init__(self) -> None:
        if self.initial_state not in self.states:
            raise ValueError(f"{self.name}: initial state {self.initial_state} not in states")
        for t in self.transitions:
            if t.from_state not in self.states or t.to_state not in self.states:
                raise ValueError(f"{self.name}: transition {t} references unknown state")

    def find(self, from_state: str | Enum, action: str) -> Transition | None:
        from_state = _state(from_state)
        for t in self.transitions:
            if t.from_state == from_state and t.action == action:
                return t
        return None

    def transition(self, entity_id: object, from_state: str | Enum, action: str) -> Transition:
        """The transition for ``action`` from ``from_state``.

        Raises:
            InvalidStatusTransitionError: If the workflow has no such transition.
        """
        found = self.find(from_state, action)
        if found is None:
            raise InvalidStatusTransitionError(entity_id, _state(from_state), action)
        return found

    @property
    def actions(self) -> frozenset[str]:
        return frozenset(t.action for t in self.transitions)


def _state(value: str | Enum) -> str:
    return value.value if isinstance(value, Enum) else value
