from loguru import logger
from stellar_sdk import StrKey
from stellar_sdk.exceptions import SdkError

from core.constants import PAYMENT_AMOUNT, SENDER_NOT_LOADED, SUBMIT_FAILED
from core.domain.exceptions import AccountNotFound, NetworkError, SubmissionRejected, ValidationError
from core.domain.value_objects import AccountState, SignedEnvelope, UnsignedTransaction
from core.interfaces.services import ILedgerClient, IWalletConnector
from other.stellar_error_codes import format_submission_error, get_stellar_error_message


class SendPayment:
    """Native payment: load sender, build, sign with the agent, submit.

    The steps are exposed separately so the workflow can record a state
    between each round-trip; ``execute`` chains them.
    """

    def __init__(self, ledger_client: ILedgerClient, wallet_connector: IWalletConnector):
        self.ledger_client = ledger_client
        self.wallet_connector = wallet_connector

    @staticmethod
    def validate(recipient: str, amount: str = PAYMENT_AMOUNT):
        if not recipient or not recipient.strip():
            raise ValidationError("Recipient public key is required")
        recipient = recipient.strip()
        if not (StrKey.is_valid_ed25519_public_key(recipient) or StrKey.is_valid_med25519_public_key(recipient)):
            raise ValidationError("Recipient public key is invalid")
        try:
            if float(amount) <= 0:
                raise ValidationError("Amount must be positive")
        except (TypeError, ValueError):
            raise ValidationError("Amount must be a number")
        return recipient

    async def load_sender(self, sender: str) -> AccountState:
        try:
            return await self.ledger_client.load_account(sender)
        except AccountNotFound as ex:
            raise AccountNotFound(f"{SENDER_NOT_LOADED} ({ex.message})") from ex
        except NetworkError as ex:
            raise NetworkError(f"{SENDER_NOT_LOADED} ({ex.message})", extras=ex.extras) from ex

    def build(self, account: AccountState, recipient: str, amount: str) -> UnsignedTransaction:
        try:
            tx = self.ledger_client.build_payment(account, recipient, amount)
        except (SdkError, ValueError) as ex:
            raise ValidationError(f"Cannot build payment: {ex}")
        logger.info(["built payment", tx.source, tx.destination, tx.amount, tx.sequence])
        return tx

    async def sign(self, transaction: UnsignedTransaction) -> SignedEnvelope:
        return await self.wallet_connector.request_signature(transaction.to_xdr(), transaction.network_passphrase)

    async def submit(self, envelope: SignedEnvelope) -> str:
        result = await self.ledger_client.submit_envelope(envelope)
        if result.successful:
            logger.info(["payment submitted", result.hash])
            return result.hash

        message = format_submission_error(result.extras, result.message or SUBMIT_FAILED)
        result_codes = result.result_codes if isinstance(result.result_codes, dict) else None
        hint = get_stellar_error_message(result_codes) if result_codes else None
        logger.info(["payment rejected", message, hint])
        raise SubmissionRejected(message, result_codes=result_codes, hint=hint)

    async def execute(self, sender: str, recipient: str, amount: str = PAYMENT_AMOUNT) -> str:
        recipient = self.validate(recipient, amount)
        account = await self.load_sender(sender)
        transaction = self.build(account, recipient, amount)
        envelope = await self.sign(transaction)
        return await self.submit(envelope)
