from decimal import Decimal
from typing import Optional
import random
import socket

import pytest
from aiohttp import web
from stellar_sdk import Keypair, Network, TransactionEnvelope

from core.interfaces.services import IWalletAgent

TESTNET = Network.TESTNET_NETWORK_PASSPHRASE

# Default test data for Horizon responses
DEFAULT_TEST_ACCOUNT = "GDLTH4KKMA4R2JGKA7XKI5DLHJBUT42D5RHVK6SS6YHZZLHVLCWJAYXI"
RECIPIENT_ACCOUNT = "GACKTN5DAZGWXRWB2WLM6OPBDHAMT6SJNGLJZPQMEZBUR4JUGBX2UK7V"


def get_free_port(start_port=8000, end_port=9000, retries=10):
    """
    Finds a free port in the specified range.
    Tries random ports and attempts to bind to them.
    """
    for _ in range(retries):
        port = random.randint(start_port, end_port)
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.bind(('127.0.0.1', port))
            sock.close()
            return port
        except OSError:
            continue
    raise RuntimeError(f"Could not find a free port in range {start_port}-{end_port} after {retries} attempts")


@pytest.fixture(scope="function")
def horizon_server_config():
    port = get_free_port()
    return {"host": "127.0.0.1", "port": port, "url": f"http://127.0.0.1:{port}"}


@pytest.fixture(scope="function")
def agent_server_config():
    port = get_free_port(9001, 9999)
    return {"host": "127.0.0.1", "port": port, "url": f"http://127.0.0.1:{port}"}


class ScriptedWalletAgent(IWalletAgent):
    """Agent double: answers are configured per test, every call is recorded."""

    def __init__(self, keypair: Optional[Keypair] = None):
        self.keypair = keypair or Keypair.random()
        self.available = True
        self.access_response = {"address": self.keypair.public_key}
        self.sign_error = None
        self.sign_response = None
        self.calls = []

    async def is_available(self):
        self.calls.append(("is_available",))
        return self.available

    async def request_access(self):
        self.calls.append(("request_access",))
        return self.access_response

    async def sign(self, xdr, network_passphrase):
        self.calls.append(("sign", xdr, network_passphrase))
        if self.sign_response is not None:
            return self.sign_response
        if self.sign_error:
            return {"error": self.sign_error}
        envelope = TransactionEnvelope.from_xdr(xdr, network_passphrase=network_passphrase)
        envelope.sign(self.keypair)
        return {"signed_xdr": envelope.to_xdr()}


@pytest.fixture
def wallet_agent():
    return ScriptedWalletAgent()


@pytest.fixture
async def mock_horizon(horizon_server_config):
    """
    Starts a local mock Stellar Horizon server.

    Usage in tests:
        async def test_something(mock_horizon, horizon_server_config):
            mock_horizon.set_account("GXXX", balances=[{"asset_type": "native", "balance": "100.0000000"}])
            client = HorizonLedgerClient(horizon_url=horizon_server_config["url"], network_passphrase=TESTNET)
            ...
            assert len(mock_horizon.get_requests("accounts")) == 1

    A successful submit applies the payment: the source native balance
    drops by amount plus fee and its sequence moves to the tx sequence.
    """
    routes = web.RouteTableDef()

    class HorizonMockState:
        def __init__(self):
            self.requests = []
            self.accounts = {}  # account_id -> account data
            self.not_found_accounts = set()  # accounts that should return 404
            self.account_error_status = None
            self.account_raw_body = None  # served with 200 instead of account JSON
            self.transaction_raw_body = None
            self.transaction_response = {"successful": True, "hash": "abc123"}
            self.transaction_status = 200
            self.submitted = []

        def set_account(self, account_id: str, balances: Optional[list] = None, sequence: str = "123456789"):
            """Configure account response."""
            self.not_found_accounts.discard(account_id)
            self.accounts[account_id] = {
                "id": account_id,
                "account_id": account_id,
                "sequence": sequence,
                "balances": balances if balances is not None else [
                    {"asset_type": "native", "balance": "100.0000000"}
                ],
                "signers": [
                    {"key": account_id, "weight": 1, "type": "ed25519_public_key"}
                ],
                "thresholds": {"low_threshold": 0, "med_threshold": 0, "high_threshold": 0},
                "data": {},
                "flags": {"auth_required": False, "auth_revocable": False, "auth_immutable": False},
                "paging_token": account_id
            }

        def set_not_found(self, account_id: str):
            """Force account to return 404."""
            self.not_found_accounts.add(account_id)
            self.accounts.pop(account_id, None)

        def set_transaction_response(self, successful: bool = True, hash: str = "abc123",
                                     result_codes: Optional[dict] = None, extras: Optional[dict] = None,
                                     status: Optional[int] = None):
            """Configure transaction submit response. Failures are answered with 400 by default."""
            if successful:
                self.transaction_response = {"successful": True, "hash": hash, "ledger": 12345}
                self.transaction_status = status or 200
                return
            self.transaction_response = {
                "type": "https://stellar.org/horizon-errors/transaction_failed",
                "title": "Transaction Failed",
                "status": status or 400,
                "detail": "The transaction failed when submitted to the stellar network.",
            }
            if result_codes is not None:
                self.transaction_response["extras"] = {"result_codes": result_codes}
            elif extras is not None:
                self.transaction_response["extras"] = extras
            self.transaction_status = status or 400

        def get_requests(self, endpoint: Optional[str] = None):
            """Get received requests, optionally filtered by endpoint."""
            if endpoint:
                return [r for r in self.requests if r["endpoint"] == endpoint]
            return self.requests

        def apply_payment(self, xdr: str):
            envelope = TransactionEnvelope.from_xdr(xdr, network_passphrase=TESTNET)
            tx = envelope.transaction
            source = self.accounts.get(tx.source.account_id)
            if source is None:
                return
            spent = Decimal(tx.fee) / Decimal(10 ** 7)
            for op in tx.operations:
                spent += Decimal(str(op.amount))
            for balance in source["balances"]:
                if balance["asset_type"] == "native":
                    balance["balance"] = f"{Decimal(balance['balance']) - spent:.7f}"
            source["sequence"] = str(tx.sequence)

    state = HorizonMockState()
    state.set_account(DEFAULT_TEST_ACCOUNT)

    @routes.get("/accounts/{account_id}")
    async def get_account(request):
        account_id = request.match_info['account_id']
        state.requests.append({
            "endpoint": "accounts",
            "method": "GET",
            "account_id": account_id,
        })

        if state.account_error_status:
            return web.Response(text="upstream failure", status=state.account_error_status)
        if state.account_raw_body is not None:
            return web.Response(text=state.account_raw_body, content_type="text/html")

        if account_id in state.not_found_accounts or account_id not in state.accounts:
            return web.json_response({
                "type": "https://stellar.org/horizon-errors/not_found",
                "title": "Resource Missing",
                "status": 404,
                "detail": "The resource at the url requested was not found."
            }, status=404)

        return web.json_response(state.accounts[account_id])

    @routes.post("/transactions")
    async def submit_transaction(request):
        data = await request.post()
        state.requests.append({
            "endpoint": "transactions",
            "method": "POST",
            "data": dict(data)
        })
        state.submitted.append(data.get("tx"))
        if state.transaction_raw_body is not None:
            return web.Response(text=state.transaction_raw_body, content_type="text/html")

        if state.transaction_status < 300 and state.transaction_response.get("successful"):
            state.apply_payment(data.get("tx"))
        return web.json_response(state.transaction_response, status=state.transaction_status)

    app = web.Application()
    app.add_routes(routes)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, horizon_server_config["host"], horizon_server_config["port"])
    await site.start()

    yield state

    await runner.cleanup()
