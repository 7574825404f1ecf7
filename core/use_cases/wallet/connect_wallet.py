from loguru import logger

from core.interfaces.services import IWalletConnector


class ConnectWallet:
    def __init__(self, wallet_connector: IWalletConnector):
        self.wallet_connector = wallet_connector

    async def execute(self) -> str:
        """
        Ask the signing agent for the user's address.
        WalletUnavailable / AccessDenied propagate with their message intact.
        """
        address = await self.wallet_connector.request_connection()
        logger.info(["wallet connected", address])
        return address
