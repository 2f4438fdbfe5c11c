"""
Reconciliation result types.

A duel reference starts UNKNOWN and is resolved to exactly one trusted state
per reconciliation; results are immutable and never cached between calls.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..models.accounts import DuelSnapshot


class ReconcileState(str, Enum):
    """Trust state of a curve's duel reference."""
    UNKNOWN = "unknown"
    TRUSTED_ACTIVE = "trusted_active"
    TRUSTED_INACTIVE = "trusted_inactive"


class ReconcileSource(str, Enum):
    """What the reconciliation decision was based on."""
    NO_DUEL = "no_duel"
    CACHE = "cache"
    FETCHED = "fetched"
    FAIL_OPEN = "fail_open"


@dataclass(frozen=True)
class Reconciliation:
    """Outcome of reconciling one curve's duel reference."""
    state: ReconcileState
    source: ReconcileSource
    duel_address: Optional[bytes] = None         # set only when trusted active
    duel: Optional[DuelSnapshot] = None          # set when the duel account was read

    @property
    def is_active(self) -> bool:
        return self.state == ReconcileState.TRUSTED_ACTIVE
