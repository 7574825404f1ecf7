from typing import Optional

from core.interfaces.services import ILedgerClient, IWalletConnector
from infrastructure.factories.use_case_factory import IUseCaseFactory, UseCaseFactory


class AppContext:
    """
    Application-wide context container.
    Built once at startup; the ledger client and connector are read-only afterwards.
    """
    def __init__(
        self,
        ledger_client: ILedgerClient,
        wallet_connector: IWalletConnector,
        use_case_factory: Optional[IUseCaseFactory] = None,
        settle_delay: Optional[float] = None,
        payment_amount: Optional[str] = None,
    ):
        self.ledger_client = ledger_client
        self.wallet_connector = wallet_connector
        self.use_case_factory = use_case_factory or UseCaseFactory(
            ledger_client, wallet_connector, settle_delay=settle_delay, payment_amount=payment_amount)

    @classmethod
    def from_settings(cls, settings=None) -> "AppContext":
        from infrastructure.services.stellar_service import HorizonLedgerClient
        from infrastructure.services.wallet_agents import HttpWalletAgent
        from infrastructure.services.wallet_connector import AgentWalletConnector, UnavailableWalletConnector

        if settings is None:
            from other.config_reader import config as settings

        ledger_client = HorizonLedgerClient(
            horizon_url=settings.horizon_url,
            network_passphrase=settings.network_passphrase,
            base_fee=settings.base_fee,
            tx_timeout=settings.tx_timeout,
        )
        if settings.wallet_agent_url:
            wallet_connector = AgentWalletConnector(HttpWalletAgent(settings.wallet_agent_url))
        else:
            wallet_connector = UnavailableWalletConnector()
        return cls(ledger_client, wallet_connector,
                   settle_delay=settings.settle_delay, payment_amount=settings.payment_amount)
