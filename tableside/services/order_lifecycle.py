"""Order status state machine.

    pending -> preparing -> ready -> delivered

The dashboard only ever offers the next step, but the write API historically
accepted any recognized label. ``OrderLifecycle`` supports both behaviours:
``permissive`` (any label, any time) and ``strict`` (one step forward only).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from tableside.core.errors import InvalidTransitionError, ValidationError

PENDING = "pending"
PREPARING = "preparing"
READY = "ready"
DELIVERED = "delivered"

ORDER_STATUSES = (PENDING, PREPARING, READY, DELIVERED)
INITIAL_STATUS = PENDING
TERMINAL_STATUSES = frozenset({DELIVERED})

POLICY_PERMISSIVE = "permissive"
POLICY_STRICT = "strict"
POLICIES = (POLICY_PERMISSIVE, POLICY_STRICT)


def normalize_status(status: str | None) -> str:
    return (status or "").strip().lower()


def parse_status(status: str | None) -> str:
    normalized = normalize_status(status)
    if not normalized:
        raise ValidationError("Status is required")
    if normalized not in ORDER_STATUSES:
        raise ValidationError(
            f"Unknown status '{status}'. Expected one of: {', '.join(ORDER_STATUSES)}"
        )
    return normalized


def next_status(status: str) -> Optional[str]:
    current = normalize_status(status)
    if current not in ORDER_STATUSES or current in TERMINAL_STATUSES:
        return None
    return ORDER_STATUSES[ORDER_STATUSES.index(current) + 1]


def is_terminal(status: str) -> bool:
    return normalize_status(status) in TERMINAL_STATUSES


@dataclass(frozen=True)
class OrderLifecycle:
    policy: str = POLICY_PERMISSIVE

    def __post_init__(self) -> None:
        if self.policy not in POLICIES:
            raise ValueError(f"unknown order status policy: {self.policy}")

    @property
    def strict(self) -> bool:
        return self.policy == POLICY_STRICT

    def transition(self, current: str, requested: str | None) -> str:
        """Validate a status change and return the normalized target status."""
        target = parse_status(requested)
        current_normalized = normalize_status(current)
        if target == current_normalized or not self.strict:
            return target

        expected = next_status(current_normalized)
        if expected is None:
            raise InvalidTransitionError(f"Order is already {current_normalized}")
        if target != expected:
            raise InvalidTransitionError(
                f"Cannot move order from {current_normalized} to {target}; next status is {expected}"
            )
        return target
