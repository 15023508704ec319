"""
Nonce Manager
Sequential nonce allocation for the deployer account
"""

import asyncio
from typing import Optional
from web3 import Web3
from loguru import logger


class NonceManager:
    """
    Hands out nonces for one sending address
    Each allocation is followed by a confirmed receipt before the next one
    """

    def __init__(self, w3: Web3, address: str):
        """
        Initialize Nonce Manager

        Args:
            w3: Web3 instance
            address: Sending address
        """
        self.w3 = w3
        self.address = Web3.to_checksum_address(address)

        self.current_nonce: Optional[int] = None
        self.pending_nonces = set()
        self.lock = asyncio.Lock()

    def _sync_nonce(self):
        """Sync nonce with blockchain (confirmed + pending)"""
        self.current_nonce = self.w3.eth.get_transaction_count(self.address, 'pending')
        logger.debug(f"Nonce synced for {self.address}: {self.current_nonce}")

    async def get_nonce(self) -> int:
        """
        Get next available nonce

        Returns:
            Next nonce to use
        """
        async with self.lock:
            if self.current_nonce is None:
                self._sync_nonce()

            nonce = self.current_nonce
            self.current_nonce += 1
            self.pending_nonces.add(nonce)

            logger.debug(f"Allocated nonce: {nonce}")
            return nonce

    async def confirm_nonce(self, nonce: int):
        """Mark a nonce as mined"""
        async with self.lock:
            self.pending_nonces.discard(nonce)

    async def reset_nonce(self):
        """Drop local state and resync from the chain (after a failed send)"""
        async with self.lock:
            self._sync_nonce()
            self.pending_nonces.clear()
            logger.warning(f"Nonce reset to: {self.current_nonce}")
