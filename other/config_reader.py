import os
from typing import Optional
from environs import Env
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.constants import (
    TESTNET_HORIZON_URL,
    TESTNET_PASSPHRASE,
    BASE_FEE,
    PAYMENT_AMOUNT,
    TX_TIMEOUT,
    SETTLE_DELAY,
)

start_path = os.path.dirname(os.path.dirname(__file__))
dotenv_path = os.path.join(start_path, '.env')
env = Env()
env.read_env(dotenv_path, recurse=False)


class Settings(BaseSettings):
    horizon_url: str = TESTNET_HORIZON_URL
    network_passphrase: str = TESTNET_PASSPHRASE
    base_fee: int = BASE_FEE
    payment_amount: str = PAYMENT_AMOUNT
    tx_timeout: int = TX_TIMEOUT
    settle_delay: float = SETTLE_DELAY

    # remote signing agent; no agent is used when empty
    wallet_agent_url: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )


config = Settings()
