from dataclasses import dataclass, field
from typing import Optional, Tuple

from core.constants import NATIVE_ASSET_TYPE, UNFUNDED_BALANCE


@dataclass(frozen=True)
class Balance:
    asset_type: str
    balance: str
    asset_code: Optional[str] = None
    asset_issuer: Optional[str] = None

    @property
    def is_native(self) -> bool:
        return self.asset_type == NATIVE_ASSET_TYPE


@dataclass(frozen=True)
class AccountState:
    """Snapshot of one account load. Never cached between operations."""
    account_id: str
    sequence: int
    balances: Tuple[Balance, ...] = ()

    def native_balance(self) -> Optional[str]:
        for b in self.balances:
            if b.is_native:
                return b.balance
        return None


@dataclass(frozen=True)
class UnsignedTransaction:
    xdr: str
    network_passphrase: str
    source: str
    destination: str
    amount: str
    sequence: int
    fee: int
    max_time: int

    def to_xdr(self) -> str:
        return self.xdr

    @classmethod
    def from_xdr(cls, xdr: str, network_passphrase: str) -> "UnsignedTransaction":
        """Parse an unsigned single-payment envelope back into its fields."""
        from stellar_sdk import TransactionEnvelope

        envelope = TransactionEnvelope.from_xdr(xdr, network_passphrase=network_passphrase)
        tx = envelope.transaction
        op = tx.operations[0]
        return cls(
            xdr=envelope.to_xdr(),
            network_passphrase=network_passphrase,
            source=tx.source.account_id,
            destination=op.destination.account_id,
            amount=str(op.amount),
            sequence=tx.sequence,
            fee=tx.fee,
            max_time=tx.preconditions.time_bounds.max_time,
        )


@dataclass(frozen=True)
class SignedEnvelope:
    """Signed transaction XDR as returned by the agent, passed through as is."""
    xdr: str
    network_passphrase: str


@dataclass(frozen=True)
class SubmissionResult:
    successful: bool
    hash: Optional[str] = None
    extras: Optional[dict] = None
    message: Optional[str] = None

    @property
    def result_codes(self):
        if self.extras:
            return self.extras.get("result_codes")
        return None

    @classmethod
    def success(cls, tx_hash: str) -> "SubmissionResult":
        return cls(successful=True, hash=tx_hash)

    @classmethod
    def failure(cls, extras: Optional[dict] = None, message: Optional[str] = None,
                tx_hash: Optional[str] = None) -> "SubmissionResult":
        return cls(successful=False, hash=tx_hash, extras=extras, message=message)


# Workflow outcomes exposed to the presentation shell

@dataclass(frozen=True)
class Connected:
    address: str


@dataclass(frozen=True)
class BalanceKnown:
    address: str
    amount: str
    generation: int = 0

    @property
    def is_funded(self) -> bool:
        return self.amount != UNFUNDED_BALANCE


@dataclass(frozen=True)
class PaymentSucceeded:
    hash: str


@dataclass(frozen=True)
class Failed:
    kind: str
    message: str
    hint: Optional[str] = field(default=None, compare=False)
