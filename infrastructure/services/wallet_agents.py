"""Signing agents usable behind AgentWalletConnector.

KeypairWalletAgent holds a secret key in-process (development, scripts, tests).
HttpWalletAgent talks to a signing agent running as a separate service.
"""
import asyncio
from typing import Any, Dict, Optional

import aiohttp
from loguru import logger
from stellar_sdk import Keypair, TransactionEnvelope
from stellar_sdk.exceptions import SdkError

from core.interfaces.services import IWalletAgent


class KeypairWalletAgent(IWalletAgent):
    def __init__(self, secret: str, approve: bool = True):
        self._keypair = Keypair.from_secret(secret)
        # approve=False behaves like a user pressing "reject"
        self.approve = approve

    async def is_available(self) -> bool:
        return True

    async def request_access(self) -> Dict[str, Any]:
        if not self.approve:
            return {'error': 'User declined access'}
        return {'address': self._keypair.public_key}

    async def sign(self, xdr: str, network_passphrase: str) -> Dict[str, Any]:
        if not self.approve:
            return {'error': 'User declined'}
        try:
            transaction = TransactionEnvelope.from_xdr(xdr, network_passphrase=network_passphrase)
        except (SdkError, ValueError) as ex:
            return {'error': f'Bad transaction: {ex}'}
        transaction.sign(self._keypair)
        return {'signed_xdr': transaction.to_xdr()}


class HttpWalletAgent(IWalletAgent):
    """
    Remote agent with a small JSON API:

    GET  /status  -> {"available": true}
    POST /access  -> {"address": "G..."} or {"error": "..."}
    POST /sign    {"xdr": ..., "network_passphrase": ...} -> {"signed_xdr": ...} or {"error": "..."}
    """

    def __init__(self, base_url: str, timeout: float = 120):
        self.base_url = base_url.rstrip('/')
        # access and sign wait for the user to answer a prompt
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def _call(self, method: str, path: str, payload: Optional[dict] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.request(method, url, json=payload) as resp:
                data = await resp.json(content_type=None)
                if not isinstance(data, dict):
                    return {'error': f'Unexpected agent response: {resp.status}'}
                if resp.status >= 400 and not data.get('error'):
                    data['error'] = f'Agent error {resp.status}'
                return data

    async def is_available(self) -> bool:
        try:
            data = await self._call('GET', '/status')
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as ex:
            logger.info(["wallet agent unreachable", self.base_url, ex])
            return False
        return bool(data.get('available')) and not data.get('error')

    async def request_access(self) -> Dict[str, Any]:
        try:
            return await self._call('POST', '/access')
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as ex:
            logger.info(["wallet agent access failed", ex])
            return {'error': f'Wallet agent request failed: {ex}'}

    async def sign(self, xdr: str, network_passphrase: str) -> Dict[str, Any]:
        try:
            return await self._call('POST', '/sign', {'xdr': xdr, 'network_passphrase': network_passphrase})
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as ex:
            logger.info(["wallet agent sign failed", ex])
            return {'error': f'Wallet agent request failed: {ex}'}
