"""
Gas Calculator
Gas limits and fee fields for deployment transactions
"""

from typing import Dict
from web3 import Web3
from loguru import logger


class GasCalculator:
    """
    Fills gas limit and fee fields on outgoing transactions
    Uses EIP-1559 fees when the chain reports a base fee, legacy gasPrice otherwise
    """

    def __init__(self, w3: Web3, config: Dict):
        """
        Initialize Gas Calculator

        Args:
            w3: Web3 instance
            config: Deploy configuration (reads 'gas_settings')
        """
        self.w3 = w3

        gas_settings = config.get('gas_settings', {})
        self.gas_limit_buffer = gas_settings.get('gas_limit_buffer', 1.2)
        self.priority_fee_gwei = gas_settings.get('priority_fee_gwei', 1.5)

        logger.debug(
            f"Gas Calculator initialized - buffer x{self.gas_limit_buffer}, "
            f"tip {self.priority_fee_gwei} gwei"
        )

    async def estimate_gas_limit(self, transaction: Dict) -> int:
        """
        Estimate gas for a transaction and apply the safety buffer

        Estimation errors (including reverts) propagate to the caller.

        Args:
            transaction: Transaction dict (without 'gas')

        Returns:
            Buffered gas limit
        """
        estimate = self.w3.eth.estimate_gas(transaction)
        return self.apply_buffer(estimate)

    def apply_buffer(self, estimate: int) -> int:
        """Scale a raw gas estimate by the configured buffer"""
        gas_limit = int(estimate * self.gas_limit_buffer)

        logger.debug(f"Gas estimate: {estimate} -> limit {gas_limit}")
        return gas_limit

    async def get_fee_params(self) -> Dict[str, int]:
        """
        Get fee fields for the next transaction

        Returns:
            {'maxFeePerGas', 'maxPriorityFeePerGas'} or {'gasPrice'}
        """
        latest_block = self.w3.eth.get_block('latest')
        base_fee_wei = latest_block.get('baseFeePerGas')

        if base_fee_wei is None:
            gas_price = self.w3.eth.gas_price
            logger.debug(f"Legacy gas price: {Web3.from_wei(gas_price, 'gwei')} gwei")
            return {'gasPrice': int(gas_price)}

        priority_fee_wei = Web3.to_wei(self.priority_fee_gwei, 'gwei')

        # Max fee = base fee * 2 + tip
        max_fee_wei = (base_fee_wei * 2) + priority_fee_wei

        return {
            'maxFeePerGas': int(max_fee_wei),
            'maxPriorityFeePerGas': int(priority_fee_wei)
        }

    @staticmethod
    def max_cost_wei(transaction: Dict) -> int:
        """Upper bound on the fee a transaction can burn"""
        per_gas = transaction.get('maxFeePerGas', transaction.get('gasPrice', 0))
        return transaction.get('gas', 0) * per_gas
