from loguru import logger

from core.constants import UNFUNDED_BALANCE, ZERO_BALANCE
from core.domain.exceptions import AccountNotFound, NetworkError
from core.interfaces.services import ILedgerClient


class GetNativeBalance:
    def __init__(self, ledger_client: ILedgerClient):
        self.ledger_client = ledger_client

    async def execute(self, address: str) -> str:
        """
        Native balance of the account as Horizon formats it.

        An account missing on the ledger is not an error here: it yields the
        "not funded" sentinel. An account without a native entry yields zero.
        """
        try:
            account = await self.ledger_client.load_account(address)
        except AccountNotFound:
            logger.info(["balance: account not funded", address])
            return UNFUNDED_BALANCE
        except NetworkError as ex:
            raise NetworkError(f"Network error fetching balance: {ex.message or 'Unknown error'}",
                               extras=ex.extras)

        native = account.native_balance()
        return native if native is not None else ZERO_BALANCE
