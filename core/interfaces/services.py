from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

from core.domain.value_objects import (
    AccountState,
    SignedEnvelope,
    SubmissionResult,
    UnsignedTransaction,
)


class ILedgerClient(ABC):
    @abstractmethod
    async def load_account(self, address: str) -> AccountState:
        """
        Load sequence number and balances of an account.
        Raises AccountNotFound when the ledger has no such account and
        NetworkError for every other failure.
        """
        pass

    @abstractmethod
    async def submit_envelope(self, envelope: SignedEnvelope) -> SubmissionResult:
        """Submit a signed transaction envelope."""
        pass

    @abstractmethod
    def build_payment(self, account: AccountState, destination: str, amount: str) -> UnsignedTransaction:
        """Build an unsigned single native payment from a freshly loaded account."""
        pass


class IWalletAgent(ABC):
    """Raw protocol of an external signing agent.

    Answers are plain dicts; an ``error`` key is authoritative even when the
    other keys are filled.
    """

    @abstractmethod
    async def is_available(self) -> bool:
        pass

    @abstractmethod
    async def request_access(self) -> Dict[str, Any]:
        """Returns {'address': ...} or {'error': ...}."""
        pass

    @abstractmethod
    async def sign(self, xdr: str, network_passphrase: str) -> Dict[str, Any]:
        """Returns {'signed_xdr': ...} or {'error': ...}."""
        pass


class IWalletConnector(ABC):
    @abstractmethod
    async def check_availability(self) -> bool:
        """Check the agent is present. Must not prompt the user."""
        pass

    @abstractmethod
    async def request_connection(self) -> str:
        """Ask the agent for the user's public address."""
        pass

    @abstractmethod
    async def request_signature(self, unsigned_xdr: str, network_passphrase: str) -> SignedEnvelope:
        """Ask the agent to sign a transaction payload."""
        pass
