# Mapping of Stellar Horizon error codes to human-readable English messages
import json
from typing import Optional

from core.constants import UNKNOWN_SUBMIT_ERROR

TRANSACTION_ERROR_CODES = {
    "tx_failed": "Transaction failed (error in one of the operations)",
    "tx_bad_auth": "Too few valid signatures or wrong network",
    "tx_bad_seq": "Bad transaction sequence number",
    "tx_insufficient_balance": "Insufficient balance to pay fee",
    "tx_insufficient_fee": "Fee is too small",
    "tx_no_source_account": "Source account not found",
    "tx_bad_auth_extra": "Unused signatures attached to transaction",
    "tx_internal_error": "Internal Horizon error",
    "tx_too_late": "Transaction is too late (time bounds)",
    "tx_too_early": "Transaction is not yet valid (time bounds)",
    "tx_missing_operation": "No operations in transaction",
}

OPERATION_ERROR_CODES = {
    "op_underfunded": "Insufficient funds for the operation",
    "op_no_destination": "Destination account not found",
    "op_no_source_account": "Source account not found",
    "op_malformed": "Malformed operation",
    "op_bad_auth": "Too few valid signatures or wrong network",
    "op_low_reserve": "Not enough XLM to meet the minimum reserve",
    "op_line_full": "Destination balance limit exceeded",
    "op_src_not_authorized": "Source account not authorized",
    "op_not_authorized": "Destination not authorized",
}


def get_stellar_error_message(result_codes: dict) -> str:
    """
    Returns a human-readable error message for result_codes from Horizon.
    """
    tx_code = result_codes.get("transaction")
    if tx_code and tx_code in TRANSACTION_ERROR_CODES:
        tx_msg = TRANSACTION_ERROR_CODES[tx_code]
    elif tx_code:
        tx_msg = f"Transaction code: {tx_code}"
    else:
        tx_msg = None

    # the first operation error wins over the transaction code
    op_codes = result_codes.get("operations")
    if op_codes:
        op_code = op_codes[0]
        if op_code in OPERATION_ERROR_CODES:
            return OPERATION_ERROR_CODES[op_code]
        return f"Operation code: {op_code}"

    if tx_msg:
        return tx_msg

    return "Unknown Stellar error"


def format_submission_error(extras: Optional[dict], fallback: Optional[str] = None) -> str:
    """
    Short message for a rejected submission, first match wins:
    result codes, then the raw extras, then the fallback text.
    """
    if extras:
        result_codes = extras.get("result_codes")
        if isinstance(result_codes, dict) and result_codes.get("transaction") \
                and isinstance(result_codes.get("operations", []), list):
            tx_code = result_codes["transaction"]
            op_codes = result_codes.get("operations")
            ops = ", ".join(op_codes) if op_codes else "none"
            return f"Horizon Error: tx={tx_code}, ops=[{ops}]."
        return f"Horizon Error: {json.dumps(extras, separators=(',', ':'))}"
    return fallback or UNKNOWN_SUBMIT_ERROR
