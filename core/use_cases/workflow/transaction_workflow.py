import asyncio
from typing import Callable, List, Optional, Set, Tuple, Union

from loguru import logger

from core.constants import PAYMENT_AMOUNT, SETTLE_DELAY, UNKNOWN_STEP_ERROR
from core.domain.entities import WorkflowRun, WorkflowState
from core.domain.exceptions import NetworkError, WalletError
from core.domain.value_objects import BalanceKnown, Connected, Failed, PaymentSucceeded
from core.interfaces.services import ILedgerClient, IWalletConnector
from core.use_cases.payment.send_payment import SendPayment
from core.use_cases.wallet.connect_wallet import ConnectWallet
from core.use_cases.wallet.get_balance import GetNativeBalance
from core.use_cases.workflow.state_machine import (
    AddressObtained,
    BalanceLoaded,
    BalanceRequested,
    ConnectRequested,
    Event,
    PaymentRequested,
    SettleCompleted,
    StepFailed,
    TxBuilt,
    TxSigned,
    TxSubmitted,
    new_run,
    transition,
)

Outcome = Union[Connected, BalanceKnown, PaymentSucceeded, Failed]


class TransactionWorkflow:
    """
    Connect / balance / pay operations for the presentation shell.

    Every call starts a new run with the next generation number and returns
    exactly one outcome. Outcomes are also passed to ``on_outcome``, which
    is how the shell learns about the balance re-check done after a payment.
    That late result is dropped when a newer run has started meanwhile.

    The workflow does not guard against overlapping calls; the shell keeps
    a busy flag for that.
    """

    def __init__(
        self,
        ledger_client: ILedgerClient,
        wallet_connector: IWalletConnector,
        settle_delay: float = SETTLE_DELAY,
        payment_amount: str = PAYMENT_AMOUNT,
        on_outcome: Optional[Callable[[Outcome], None]] = None,
    ):
        self.connect_wallet = ConnectWallet(wallet_connector)
        self.get_balance = GetNativeBalance(ledger_client)
        self.send_payment = SendPayment(ledger_client, wallet_connector)
        self.settle_delay = settle_delay
        self.payment_amount = payment_amount
        self.on_outcome = on_outcome

        self._generation = 0
        self.current_run: WorkflowRun = new_run(0)
        self.transitions: List[Tuple[int, WorkflowState]] = []
        self._settle_tasks: Set[asyncio.Task] = set()

    @property
    def generation(self) -> int:
        return self._generation

    def _start_run(self) -> WorkflowRun:
        self._generation += 1
        self.current_run = new_run(self._generation)
        self.transitions.append((self._generation, self.current_run.state))
        return self.current_run

    def _apply(self, run: WorkflowRun, event: Event) -> WorkflowRun:
        run = transition(run, event)
        self.transitions.append((run.generation, run.state))
        if run.generation == self._generation:
            self.current_run = run
        return run

    def _is_current(self, run: WorkflowRun) -> bool:
        return run.generation == self._generation

    def _publish(self, run: WorkflowRun, outcome: Outcome) -> Outcome:
        if self.on_outcome is not None and self._is_current(run):
            try:
                self.on_outcome(outcome)
            except Exception as ex:
                logger.exception(["on_outcome listener failed", run.generation, ex])
        return outcome

    def _fail(self, run: WorkflowRun, ex: Exception, step: str = "transaction submission") -> Tuple[WorkflowRun, Failed]:
        if isinstance(ex, WalletError):
            outcome = Failed(ex.kind, ex.message, getattr(ex, 'hint', None))
            logger.error(["workflow failed", run.generation, run.state.value, ex.kind, ex.message])
        else:
            logger.exception(["workflow unknown error", run.generation, run.state.value, ex])
            outcome = Failed(NetworkError.kind, UNKNOWN_STEP_ERROR.format(step=step))
        run = self._apply(run, StepFailed(outcome.kind, outcome.message))
        self._publish(run, outcome)
        return run, outcome

    async def _load_balance(self, run: WorkflowRun, address: str) -> Tuple[WorkflowRun, Outcome]:
        run = self._apply(run, BalanceRequested(address))
        try:
            amount = await self.get_balance.execute(address)
        except Exception as ex:
            return self._fail(run, ex, "balance refresh")
        run = self._apply(run, BalanceLoaded(amount))
        return run, self._publish(run, BalanceKnown(address, amount, run.generation))

    async def connect(self) -> Outcome:
        """Connect the wallet and load its balance. Returns BalanceKnown or Failed."""
        run = self._start_run()
        run = self._apply(run, ConnectRequested())
        try:
            address = await self.connect_wallet.execute()
        except Exception as ex:
            return self._fail(run, ex, "wallet connection")[1]
        run = self._apply(run, AddressObtained(address))
        self._publish(run, Connected(address))
        return (await self._load_balance(run, address))[1]

    async def refresh_balance(self, address: str) -> Outcome:
        run = self._start_run()
        return (await self._load_balance(run, address))[1]

    async def pay(self, sender: str, recipient: str, amount: Optional[str] = None) -> Outcome:
        """
        Send a native payment. Returns PaymentSucceeded as soon as Horizon
        accepts the transaction; the balance re-check runs afterwards.
        """
        amount = amount or self.payment_amount
        run = self._start_run()
        try:
            recipient = self.send_payment.validate(recipient, amount)
        except WalletError as ex:
            return self._fail(run, ex)[1]

        run = self._apply(run, PaymentRequested(sender, recipient))
        try:
            account = await self.send_payment.load_sender(sender)
            transaction = self.send_payment.build(account, recipient, amount)
            run = self._apply(run, TxBuilt(transaction.to_xdr()))

            envelope = await self.send_payment.sign(transaction)
            run = self._apply(run, TxSigned())

            tx_hash = await self.send_payment.submit(envelope)
        except Exception as ex:
            return self._fail(run, ex)[1]

        run = self._apply(run, TxSubmitted(tx_hash))
        self._schedule_settle(run, sender)
        return self._publish(run, PaymentSucceeded(tx_hash))

    def _schedule_settle(self, run: WorkflowRun, address: str):
        task = asyncio.create_task(self._settle(run, address))
        self._settle_tasks.add(task)
        task.add_done_callback(self._settle_tasks.discard)

    async def _settle(self, run: WorkflowRun, address: str) -> Optional[Outcome]:
        # one re-check after ledger close, not polling
        await asyncio.sleep(self.settle_delay)
        try:
            amount = await self.get_balance.execute(address)
        except Exception as ex:
            return self._fail(run, ex, "balance refresh")[1]
        run = self._apply(run, SettleCompleted(amount))
        if not self._is_current(run):
            logger.info(["stale balance refresh dropped", run.generation, self._generation])
            return None
        return self._publish(run, BalanceKnown(address, amount, run.generation))

    async def wait_settled(self):
        if self._settle_tasks:
            await asyncio.gather(*self._settle_tasks)

    async def close(self):
        for task in list(self._settle_tasks):
            task.cancel()
        await asyncio.gather(*self._settle_tasks, return_exceptions=True)
