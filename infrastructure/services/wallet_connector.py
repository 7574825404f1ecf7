from loguru import logger
from stellar_sdk import StrKey

from core.domain.exceptions import AccessDenied, SigningDeclined, WalletUnavailable
from core.domain.value_objects import SignedEnvelope
from core.interfaces.services import IWalletAgent, IWalletConnector

WALLET_UNAVAILABLE_MSG = "Wallet is not available. Please install or start a Stellar signing wallet."
ACCESS_FAILED_MSG = "Failed to connect to wallet."


class AgentWalletConnector(IWalletConnector):
    """Connector over an external signing agent. Never retries: a decline ends the call."""

    def __init__(self, agent: IWalletAgent):
        self.agent = agent

    async def check_availability(self) -> bool:
        return await self.agent.is_available()

    async def request_connection(self) -> str:
        if not await self.agent.is_available():
            raise WalletUnavailable(WALLET_UNAVAILABLE_MSG)

        access = await self.agent.request_access() or {}
        error = access.get('error')
        if error:
            logger.info(["request_access error", error])
            raise AccessDenied(str(error))

        address = access.get('address')
        if not address or not StrKey.is_valid_ed25519_public_key(address):
            logger.info(["request_access bad address", address])
            raise AccessDenied(ACCESS_FAILED_MSG)
        return address

    async def request_signature(self, unsigned_xdr: str, network_passphrase: str) -> SignedEnvelope:
        response = await self.agent.sign(unsigned_xdr, network_passphrase) or {}
        error = response.get('error')
        signed_xdr = response.get('signed_xdr')
        if error or not signed_xdr:
            logger.info(["sign declined", error])
            raise SigningDeclined(f"User declined or signing failed: {error or 'empty signature'}")
        return SignedEnvelope(xdr=signed_xdr, network_passphrase=network_passphrase)


class UnavailableWalletConnector(IWalletConnector):
    """Connector for hosts without any signing agent."""

    async def check_availability(self) -> bool:
        return False

    async def request_connection(self) -> str:
        raise WalletUnavailable(WALLET_UNAVAILABLE_MSG)

    async def request_signature(self, unsigned_xdr: str, network_passphrase: str) -> SignedEnvelope:
        raise WalletUnavailable(WALLET_UNAVAILABLE_MSG)
