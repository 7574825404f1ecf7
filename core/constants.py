"""Fixed transaction parameters and display sentinels."""

from stellar_sdk import Network

TESTNET_HORIZON_URL = "https://horizon-testnet.stellar.org"
TESTNET_PASSPHRASE = Network.TESTNET_NETWORK_PASSPHRASE

# standard base fee (stroops)
BASE_FEE = 100
PAYMENT_AMOUNT = "1"
# validity window of a built transaction, seconds
TX_TIMEOUT = 30
# wait before re-checking the balance after a successful submit, seconds
SETTLE_DELAY = 4.0

NATIVE_ASSET_TYPE = "native"
ZERO_BALANCE = "0.0000000"
UNFUNDED_BALANCE = "Account not funded on Testnet"

UNKNOWN_STEP_ERROR = "An unknown error occurred during {step}."
UNKNOWN_SUBMIT_ERROR = UNKNOWN_STEP_ERROR.format(step="transaction submission")
SUBMIT_FAILED = "Transaction failed during submission."
SENDER_NOT_LOADED = "Failed to load sender account. Make sure it is funded."
