"""Workflow states and the pure transition function between them.

    IDLE -> CONNECTING -> CONNECTED -> LOADING_BALANCE -> BALANCE_KNOWN
         -> BUILDING_TX -> AWAITING_SIGNATURE -> SUBMITTING -> SETTLING -> DONE

FAILED is reachable from every non-terminal state. A new run always starts
from IDLE with the next generation number.
"""
from dataclasses import dataclass, replace
from typing import Union

from core.domain.entities import WorkflowRun, WorkflowState
from core.domain.exceptions import InvalidTransition

S = WorkflowState


@dataclass(frozen=True)
class ConnectRequested:
    pass


@dataclass(frozen=True)
class AddressObtained:
    address: str


@dataclass(frozen=True)
class BalanceRequested:
    address: str


@dataclass(frozen=True)
class BalanceLoaded:
    amount: str


@dataclass(frozen=True)
class PaymentRequested:
    sender: str
    recipient: str


@dataclass(frozen=True)
class TxBuilt:
    xdr: str


@dataclass(frozen=True)
class TxSigned:
    pass


@dataclass(frozen=True)
class TxSubmitted:
    tx_hash: str


@dataclass(frozen=True)
class SettleCompleted:
    amount: str


@dataclass(frozen=True)
class StepFailed:
    kind: str
    message: str


Event = Union[ConnectRequested, AddressObtained, BalanceRequested, BalanceLoaded, PaymentRequested,
              TxBuilt, TxSigned, TxSubmitted, SettleCompleted, StepFailed]

# event type -> (allowed source states, target state)
TRANSITIONS = {
    ConnectRequested: ((S.IDLE,), S.CONNECTING),
    AddressObtained: ((S.CONNECTING,), S.CONNECTED),
    BalanceRequested: ((S.IDLE, S.CONNECTED), S.LOADING_BALANCE),
    BalanceLoaded: ((S.LOADING_BALANCE,), S.BALANCE_KNOWN),
    PaymentRequested: ((S.IDLE, S.BALANCE_KNOWN), S.BUILDING_TX),
    TxBuilt: ((S.BUILDING_TX,), S.AWAITING_SIGNATURE),
    TxSigned: ((S.AWAITING_SIGNATURE,), S.SUBMITTING),
    TxSubmitted: ((S.SUBMITTING,), S.SETTLING),
    SettleCompleted: ((S.SETTLING,), S.DONE),
}


def new_run(generation: int) -> WorkflowRun:
    return WorkflowRun(generation=generation)


def transition(run: WorkflowRun, event: Event) -> WorkflowRun:
    if isinstance(event, StepFailed):
        if run.state.is_terminal:
            raise InvalidTransition(f"{run.state.value} is terminal, cannot fail")
        # a built transaction is never reused after a failure
        return replace(run, state=S.FAILED, tx_xdr=None,
                       error_kind=event.kind, error_message=event.message)

    sources, target = TRANSITIONS[type(event)]
    if run.state not in sources:
        raise InvalidTransition(f"{type(event).__name__} not allowed in state {run.state.value}")

    if isinstance(event, AddressObtained):
        return replace(run, state=target, address=event.address)
    if isinstance(event, BalanceRequested):
        return replace(run, state=target, address=event.address)
    if isinstance(event, (BalanceLoaded, SettleCompleted)):
        return replace(run, state=target, balance=event.amount)
    if isinstance(event, PaymentRequested):
        return replace(run, state=target, address=event.sender, recipient=event.recipient)
    if isinstance(event, TxBuilt):
        return replace(run, state=target, tx_xdr=event.xdr)
    if isinstance(event, TxSubmitted):
        return replace(run, state=target, tx_xdr=None, tx_hash=event.tx_hash)
    return replace(run, state=target)
