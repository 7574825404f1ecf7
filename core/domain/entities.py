from dataclasses import dataclass
from typing import Optional
from enum import Enum


class WorkflowState(Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    LOADING_BALANCE = "loading_balance"
    BALANCE_KNOWN = "balance_known"
    BUILDING_TX = "building_tx"
    AWAITING_SIGNATURE = "awaiting_signature"
    SUBMITTING = "submitting"
    SETTLING = "settling"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (WorkflowState.DONE, WorkflowState.FAILED)


@dataclass(frozen=True)
class WorkflowRun:
    """State of one workflow run, replaced (never mutated) on each transition."""
    generation: int
    state: WorkflowState = WorkflowState.IDLE
    address: Optional[str] = None
    balance: Optional[str] = None
    recipient: Optional[str] = None
    tx_xdr: Optional[str] = None
    tx_hash: Optional[str] = None
    error_kind: Optional[str] = None
    error_message: Optional[str] = None
