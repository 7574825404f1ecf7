from core.constants import TESTNET_HORIZON_URL, TESTNET_PASSPHRASE
from core.use_cases.workflow.transaction_workflow import TransactionWorkflow
from infrastructure.services.app_context import AppContext
from infrastructure.services.stellar_service import HorizonLedgerClient
from infrastructure.services.wallet_agents import HttpWalletAgent
from infrastructure.services.wallet_connector import AgentWalletConnector, UnavailableWalletConnector
from other.config_reader import Settings


def test_settings_defaults_to_testnet(monkeypatch):
    monkeypatch.delenv("HORIZON_URL", raising=False)
    settings = Settings(_env_file=None)

    assert settings.horizon_url == TESTNET_HORIZON_URL
    assert settings.network_passphrase == TESTNET_PASSPHRASE
    assert settings.base_fee == 100
    assert settings.tx_timeout == 30
    assert settings.settle_delay == 4.0


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("HORIZON_URL", "http://localhost:8000")
    monkeypatch.setenv("WALLET_AGENT_URL", "http://localhost:9000")

    settings = Settings(_env_file=None)

    assert settings.horizon_url == "http://localhost:8000"
    assert settings.wallet_agent_url == "http://localhost:9000"


def test_app_context_without_agent():
    ctx = AppContext.from_settings(Settings(_env_file=None, horizon_url="http://localhost:8000"))

    assert isinstance(ctx.ledger_client, HorizonLedgerClient)
    assert ctx.ledger_client.horizon_url == "http://localhost:8000"
    assert isinstance(ctx.wallet_connector, UnavailableWalletConnector)


def test_app_context_with_http_agent():
    ctx = AppContext.from_settings(Settings(_env_file=None, wallet_agent_url="http://localhost:9000/"))

    assert isinstance(ctx.wallet_connector, AgentWalletConnector)
    assert isinstance(ctx.wallet_connector.agent, HttpWalletAgent)
    assert ctx.wallet_connector.agent.base_url == "http://localhost:9000"


def test_factory_builds_workflow_on_shared_client():
    ctx = AppContext.from_settings(Settings(_env_file=None, settle_delay=0.5, payment_amount="2"))

    workflow = ctx.use_case_factory.create_transaction_workflow()

    assert isinstance(workflow, TransactionWorkflow)
    assert workflow.settle_delay == 0.5
    assert workflow.payment_amount == "2"
    assert workflow.get_balance.ledger_client is ctx.ledger_client
    assert ctx.use_case_factory.create_send_payment().ledger_client is ctx.ledger_client
    assert ctx.use_case_factory.create_connect_wallet().wallet_connector is ctx.wallet_connector
