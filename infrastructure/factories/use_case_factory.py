"""Use Case Factory Interface and Implementations.

Provides dependency injection for use cases in the presentation shell.
"""
from abc import ABC, abstractmethod
from typing import Optional

from core.constants import PAYMENT_AMOUNT, SETTLE_DELAY
from core.interfaces.services import ILedgerClient, IWalletConnector


class IUseCaseFactory(ABC):
    """Abstract Factory for creating Use Cases with dependencies injected."""

    @abstractmethod
    def create_connect_wallet(self):
        """Create ConnectWallet use case."""
        pass

    @abstractmethod
    def create_get_native_balance(self):
        """Create GetNativeBalance use case."""
        pass

    @abstractmethod
    def create_send_payment(self):
        """Create SendPayment use case."""
        pass

    @abstractmethod
    def create_transaction_workflow(self, on_outcome=None):
        """Create TransactionWorkflow."""
        pass


class UseCaseFactory(IUseCaseFactory):
    """
    Factory for creating Use Cases with pre-configured dependencies.

    Usage in the shell:
        workflow = app_context.use_case_factory.create_transaction_workflow(on_outcome=render)
        outcome = await workflow.connect()
    """

    def __init__(self, ledger_client: ILedgerClient, wallet_connector: IWalletConnector,
                 settle_delay: Optional[float] = None, payment_amount: Optional[str] = None):
        self.ledger_client = ledger_client
        self.wallet_connector = wallet_connector
        self.settle_delay = SETTLE_DELAY if settle_delay is None else settle_delay
        self.payment_amount = payment_amount or PAYMENT_AMOUNT

    def create_connect_wallet(self):
        from core.use_cases.wallet.connect_wallet import ConnectWallet
        return ConnectWallet(self.wallet_connector)

    def create_get_native_balance(self):
        from core.use_cases.wallet.get_balance import GetNativeBalance
        return GetNativeBalance(self.ledger_client)

    def create_send_payment(self):
        from core.use_cases.payment.send_payment import SendPayment
        return SendPayment(self.ledger_client, self.wallet_connector)

    def create_transaction_workflow(self, on_outcome=None):
        from core.use_cases.workflow.transaction_workflow import TransactionWorkflow
        return TransactionWorkflow(
            self.ledger_client,
            self.wallet_connector,
            settle_delay=self.settle_delay,
            payment_amount=self.payment_amount,
            on_outcome=on_outcome,
        )
