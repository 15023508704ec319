"""
Transaction Builder
Constructs deployment, funding and contract-call transactions
"""

from typing import Dict
from web3 import Web3
from loguru import logger

from utils.gas_calculator import GasCalculator
from .nonce_manager import NonceManager


class TransactionBuilder:
    """
    Builds fully populated transactions (nonce, chain id, gas, fees)
    for a single sender
    """

    def __init__(
        self,
        w3: Web3,
        gas_calculator: GasCalculator,
        nonce_manager: NonceManager,
        chain_id: int
    ):
        """
        Initialize Transaction Builder

        Args:
            w3: Web3 instance
            gas_calculator: Gas limit and fee source
            nonce_manager: Nonce source for the sender
            chain_id: Chain id stamped on every transaction
        """
        self.w3 = w3
        self.gas_calculator = gas_calculator
        self.nonce_manager = nonce_manager
        self.chain_id = chain_id

    async def _common_fields(self, sender: str, gas_limit: int) -> Dict:
        fees = await self.gas_calculator.get_fee_params()
        nonce = await self.nonce_manager.get_nonce()

        return {
            'from': sender,
            'nonce': nonce,
            'gas': gas_limit,
            'chainId': self.chain_id,
            **fees
        }

    async def build_deploy_tx(self, contract_factory, sender: str) -> Dict:
        """
        Build a constructor transaction (no constructor arguments)

        Args:
            contract_factory: w3.eth.contract(abi=..., bytecode=...)
            sender: Deployer address

        Returns:
            Transaction dict
        """
        constructor = contract_factory.constructor()

        estimate = constructor.estimate_gas({'from': sender})
        gas_limit = self.gas_calculator.apply_buffer(estimate)

        tx = constructor.build_transaction(await self._common_fields(sender, gas_limit))

        logger.debug(f"Deploy tx built: nonce {tx['nonce']}, gas {tx['gas']}")
        return tx

    async def build_value_transfer(self, sender: str, to: str, value_wei: int) -> Dict:
        """
        Build a plain native-currency transfer

        Args:
            sender: Sending address
            to: Recipient (account or contract)
            value_wei: Amount in wei

        Returns:
            Transaction dict
        """
        to = Web3.to_checksum_address(to)

        gas_limit = await self.gas_calculator.estimate_gas_limit({
            'from': sender,
            'to': to,
            'value': value_wei
        })

        tx = await self._common_fields(sender, gas_limit)
        tx.update({'to': to, 'value': value_wei})

        logger.debug(f"Transfer tx built: {value_wei} wei -> {to}")
        return tx

    async def build_function_tx(self, contract_function, sender: str, value_wei: int = 0) -> Dict:
        """
        Build a state-changing contract call

        Args:
            contract_function: Bound call, e.g. contract.functions.transferToEmployee(addr)
            sender: Caller address
            value_wei: Native currency attached to the call

        Returns:
            Transaction dict
        """
        estimate = contract_function.estimate_gas({'from': sender, 'value': value_wei})
        gas_limit = self.gas_calculator.apply_buffer(estimate)

        fields = await self._common_fields(sender, gas_limit)
        fields['value'] = value_wei

        tx = contract_function.build_transaction(fields)

        logger.debug(f"Call tx built: {contract_function.fn_name}, nonce {tx['nonce']}")
        return tx
