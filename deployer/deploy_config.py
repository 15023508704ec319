"""
Deploy Configuration
Contract, recipient and amounts for a deployment run
"""

import os
import json
from decimal import Decimal, InvalidOperation
from typing import Dict, Mapping, Optional
from web3 import Web3
from loguru import logger
from dotenv import load_dotenv

from blockchain.errors import ConfigurationError

load_dotenv()

# Environment variables that override file values
ENV_OVERRIDES = {
    'RECIPIENT_ADDRESS': 'recipient_address',
    'FUND_AMOUNT_ETH': 'fund_amount_eth',
}


def parse_amount(value, field: str) -> Decimal:
    """
    Parse a positive ether amount

    Raises:
        ConfigurationError: not a number, or not strictly positive
    """
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ConfigurationError(f"{field} is not a number: {value!r}")

    if not amount.is_finite() or amount <= 0:
        raise ConfigurationError(f"{field} must be positive, got {value!r}")

    return amount


def validate_address(address: Optional[str], field: str) -> str:
    """
    Check an address and return its checksummed form

    Mixed-case input must carry a valid EIP-55 checksum.

    Raises:
        ConfigurationError: malformed address
    """
    if not address or not Web3.is_address(address):
        raise ConfigurationError(f"{field} is not a valid address: {address!r}")

    hex_digits = address[2:] if address[:2].lower() == '0x' else address
    is_mixed_case = hex_digits != hex_digits.lower() and hex_digits != hex_digits.upper()

    if is_mixed_case and not Web3.is_checksum_address(address):
        raise ConfigurationError(f"{field} has an invalid EIP-55 checksum: {address!r}")

    return Web3.to_checksum_address(address)


class DeployConfig:
    """
    Validated deployment parameters
    """

    def __init__(self, data: Dict):
        self.contract_name = data.get('contract_name', 'MainPay')
        self.artifact_path = data.get('artifact_path')
        self.contract_source = data.get('contract_source')

        self.recipient_address = validate_address(data.get('recipient_address'), 'recipient_address')
        self.fund_amount_eth = parse_amount(data.get('fund_amount_eth', '0.01'), 'fund_amount_eth')
        self.transfer_amount_eth = parse_amount(
            data.get('transfer_amount_eth', '0.0001'),
            'transfer_amount_eth'
        )

        self.confirmation_timeout = int(data.get('confirmation_timeout', 300))
        self.gas_settings = data.get('gas_settings', {})

    @property
    def fund_amount_wei(self) -> int:
        return Web3.to_wei(self.fund_amount_eth, 'ether')

    @property
    def transfer_amount_wei(self) -> int:
        return Web3.to_wei(self.transfer_amount_eth, 'ether')

    @classmethod
    def load(
        cls,
        path: str = "config/deploy_config.json",
        env: Optional[Mapping[str, str]] = None
    ) -> 'DeployConfig':
        """
        Load deploy configuration from JSON and apply environment overrides

        Args:
            path: JSON config path
            env: Environment mapping (None = os.environ)
        """
        env = os.environ if env is None else env

        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"Deploy config not found: {path}")

        for env_name, field in ENV_OVERRIDES.items():
            if env.get(env_name):
                logger.debug(f"{field} overridden by {env_name}")
                data[field] = env[env_name]

        return cls(data)
