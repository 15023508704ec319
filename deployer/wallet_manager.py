"""
Wallet Manager
Resolves the deployer account and sends its transactions
"""

from typing import Dict, List, Optional
from decimal import Decimal
from web3 import Web3
from eth_account import Account
from loguru import logger

from blockchain.errors import ConfigurationError


class WalletManager:
    """
    The deployer account for one run

    Two signing modes:
    - Local key: first configured private key, signed locally, sent raw
    - Node account: first unlocked account of the node (local dev chains)
    """

    def __init__(self, w3: Web3, private_keys: Optional[List[str]] = None):
        """
        Initialize wallet manager

        Args:
            w3: Web3 instance
            private_keys: Ordered key list; empty/None means use node accounts

        Raises:
            ConfigurationError: no usable account
        """
        self.w3 = w3
        self.account = None

        if private_keys:
            try:
                self.account = Account.from_key(private_keys[0])
            except Exception as e:
                raise ConfigurationError("Invalid deployer private key (first entry of the key list)") from e

            self.address = self.account.address
        else:
            node_accounts = w3.eth.accounts

            if not node_accounts:
                raise ConfigurationError("Node exposes no accounts and no private keys are set")

            self.address = Web3.to_checksum_address(node_accounts[0])

        logger.info(f"Deployer wallet: {self.address} ({self.signing_mode})")

    @property
    def signing_mode(self) -> str:
        return 'local key' if self.account is not None else 'node account'

    def send_transaction(self, transaction: Dict) -> str:
        """
        Sign (if needed) and broadcast a transaction

        Args:
            transaction: Fully populated transaction dict

        Returns:
            0x-prefixed transaction hash
        """
        if self.account is not None:
            signed_tx = self.account.sign_transaction(transaction)
            tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        else:
            tx_hash = self.w3.eth.send_transaction(transaction)

        return Web3.to_hex(tx_hash)

    def get_balance(self) -> int:
        """Native balance in wei"""
        return self.w3.eth.get_balance(self.address)

    def get_balance_eth(self) -> Decimal:
        return Decimal(str(Web3.from_wei(self.get_balance(), 'ether')))
