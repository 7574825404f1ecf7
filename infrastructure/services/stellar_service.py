import asyncio
from typing import Any, Dict

import aiohttp
from loguru import logger
from stellar_sdk import Account, AiohttpClient, Asset, ServerAsync, TransactionBuilder, TransactionEnvelope
from stellar_sdk.exceptions import BaseHorizonError, NotFoundError
from stellar_sdk.exceptions import ConnectionError as HorizonConnectionError

from core.constants import BASE_FEE, TESTNET_HORIZON_URL, TESTNET_PASSPHRASE, TX_TIMEOUT
from core.domain.exceptions import AccountNotFound, NetworkError
from core.domain.value_objects import (
    AccountState,
    Balance,
    SignedEnvelope,
    SubmissionResult,
    UnsignedTransaction,
)
from core.interfaces.services import ILedgerClient

TRANSPORT_ERRORS = (HorizonConnectionError, aiohttp.ClientError, asyncio.TimeoutError)


class HorizonLedgerClient(ILedgerClient):
    """Ledger access over a Horizon endpoint.

    Configured once at startup; nothing on the instance changes afterwards.
    A fresh HTTP session is opened per call.
    """

    def __init__(self, horizon_url: str = TESTNET_HORIZON_URL,
                 network_passphrase: str = TESTNET_PASSPHRASE,
                 base_fee: int = BASE_FEE, tx_timeout: int = TX_TIMEOUT):
        self._horizon_url = horizon_url
        self._network_passphrase = network_passphrase
        self._base_fee = base_fee
        self._tx_timeout = tx_timeout

    @property
    def horizon_url(self) -> str:
        return self._horizon_url

    @property
    def network_passphrase(self) -> str:
        return self._network_passphrase

    async def load_account(self, address: str) -> AccountState:
        try:
            async with ServerAsync(horizon_url=self._horizon_url, client=AiohttpClient()) as server:
                account_resp = await server.accounts().account_id(address).call()
        except NotFoundError:
            raise AccountNotFound(f"Account {address} not found")
        except BaseHorizonError as ex:
            logger.info(["load_account", address, ex.status, ex.title])
            raise NetworkError(f"{ex.title or 'Horizon error'}, error {ex.status}", extras=ex.extras)
        except TRANSPORT_ERRORS as ex:
            logger.info(["load_account", address, ex])
            raise NetworkError(str(ex) or type(ex).__name__)
        except ValueError as ex:
            logger.error(["load_account bad response", address, ex])
            raise NetworkError(f"Unexpected Horizon response: {ex}")

        try:
            return parse_account(account_resp)
        except (KeyError, TypeError, ValueError) as ex:
            logger.error(["load_account bad response", address, ex])
            raise NetworkError(f"Unexpected account response: {ex}")

    def build_payment(self, account: AccountState, destination: str, amount: str) -> UnsignedTransaction:
        source = Account(account.account_id, account.sequence)
        envelope = (
            TransactionBuilder(
                source_account=source,
                network_passphrase=self._network_passphrase,
                base_fee=self._base_fee,
            )
            .append_payment_op(destination=destination, asset=Asset.native(), amount=amount)
            .set_timeout(self._tx_timeout)
            .build()
        )
        tx = envelope.transaction
        return UnsignedTransaction(
            xdr=envelope.to_xdr(),
            network_passphrase=self._network_passphrase,
            source=account.account_id,
            destination=destination,
            amount=amount,
            sequence=tx.sequence,
            fee=tx.fee,
            max_time=tx.preconditions.time_bounds.max_time,
        )

    async def submit_envelope(self, envelope: SignedEnvelope) -> SubmissionResult:
        try:
            TransactionEnvelope.from_xdr(envelope.xdr, network_passphrase=envelope.network_passphrase)
        except Exception as ex:
            logger.info(["submit bad envelope", ex])
            return SubmissionResult.failure(message=f"Invalid signed transaction: {ex}")

        # the agent payload is posted as is
        try:
            async with ServerAsync(horizon_url=self._horizon_url, client=AiohttpClient()) as server:
                response = await server.submit_transaction(envelope.xdr, skip_memo_required_check=True)
        except BaseHorizonError as ex:
            logger.info(["submit BaseHorizonError", ex.status, ex.extras])
            return SubmissionResult.failure(extras=ex.extras, message=f"{ex.title or 'Horizon error'}, error {ex.status}")
        except TRANSPORT_ERRORS as ex:
            logger.info(["submit transport error", ex])
            raise NetworkError(str(ex) or type(ex).__name__)
        except ValueError as ex:
            logger.error(["submit bad response", ex])
            raise NetworkError(f"Unexpected Horizon response: {ex}")

        return parse_submit_response(response)


def parse_account(account_resp: Dict[str, Any]) -> AccountState:
    balances = tuple(
        Balance(
            asset_type=b['asset_type'],
            balance=b['balance'],
            asset_code=b.get('asset_code'),
            asset_issuer=b.get('asset_issuer'),
        )
        for b in account_resp.get('balances', [])
    )
    return AccountState(
        account_id=account_resp['account_id'],
        sequence=int(account_resp['sequence']),
        balances=balances,
    )


def parse_submit_response(response: Dict[str, Any]) -> SubmissionResult:
    if response.get('successful'):
        return SubmissionResult.success(response['hash'])
    return SubmissionResult.failure(extras=response.get('extras'), tx_hash=response.get('hash'))
