"""
Contract Manager
Deploys the MainPay contract, funds it and invokes its payout method
"""

import os
import json
from typing import Dict, List, Optional, Tuple
from web3 import Web3
from loguru import logger

from utils.gas_calculator import GasCalculator
from .compiler import compile_contract
from .errors import ConfigurationError, InsufficientBalanceError, TransactionFailedError
from .transaction_builder import TransactionBuilder


class ContractManager:
    """
    Manages the contract lifecycle for one deployment run
    Every send waits for its receipt before returning
    """

    def __init__(
        self,
        w3: Web3,
        tx_builder: TransactionBuilder,
        contract_name: str = "MainPay",
        artifact_path: Optional[str] = None,
        source_path: Optional[str] = None,
        solc_version: Optional[str] = None,
        confirmation_timeout: int = 300
    ):
        """
        Initialize Contract Manager

        Args:
            w3: Web3 instance
            tx_builder: Transaction builder bound to the deployer
            contract_name: Contract to deploy
            artifact_path: Hardhat artifact JSON (abi + bytecode)
            source_path: Solidity source, compiled when the artifact is missing
            solc_version: Pinned compiler version
            confirmation_timeout: Seconds to wait for each receipt
        """
        self.w3 = w3
        self.tx_builder = tx_builder
        self.contract_name = contract_name
        self.artifact_path = artifact_path or (
            f"artifacts/contracts/{contract_name}.sol/{contract_name}.json"
        )
        self.source_path = source_path or f"contracts/{contract_name}.sol"
        self.solc_version = solc_version
        self.confirmation_timeout = confirmation_timeout

        self.abi: Optional[List[Dict]] = None
        self.bytecode: Optional[str] = None

    def load_contract_interface(self) -> Tuple[List[Dict], str]:
        """
        Load ABI and bytecode, compiling from source if no artifact exists

        Returns:
            (abi, bytecode)
        """
        if self.abi is not None:
            return self.abi, self.bytecode

        if os.path.exists(self.artifact_path):
            with open(self.artifact_path, 'r') as f:
                contract_json = json.load(f)

            abi = contract_json['abi']
            bytecode = contract_json['bytecode']
            logger.debug(f"Loaded {self.contract_name} artifact: {self.artifact_path}")

        elif self.solc_version and os.path.exists(self.source_path):
            abi, bytecode = compile_contract(self.source_path, self.contract_name, self.solc_version)

        else:
            raise ConfigurationError(
                f"No artifact at {self.artifact_path} and no source to compile for {self.contract_name}"
            )

        if not bytecode or bytecode == '0x':
            raise ConfigurationError(f"{self.contract_name} has empty bytecode (abstract contract?)")

        self.abi, self.bytecode = abi, bytecode
        return abi, bytecode

    def get_contract(self, address: str):
        """Bind the ABI to a deployed address"""
        abi, _ = self.load_contract_interface()
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    def get_payout_amount(self, address: str) -> int:
        """Amount in wei the contract pays per transferToEmployee call"""
        return self.get_contract(address).functions.SALARY().call()

    async def _send_and_confirm(self, transaction: Dict, wallet, label: str) -> Dict:
        """
        Broadcast a transaction and block until it is mined

        Raises:
            TransactionFailedError: receipt status is not 1
        """
        nonce_manager = self.tx_builder.nonce_manager

        try:
            tx_hash = wallet.send_transaction(transaction)
        except Exception as e:
            logger.error(f"{label} rejected by node: {e}")
            await nonce_manager.reset_nonce()
            raise

        logger.info(f"{label} transaction sent: {tx_hash}")
        logger.debug("Waiting for confirmation...")

        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.confirmation_timeout)
        await nonce_manager.confirm_nonce(transaction['nonce'])

        if receipt['status'] != 1:
            raise TransactionFailedError(f"{label} reverted (tx {tx_hash})", tx_hash=tx_hash)

        logger.debug(f"{label} mined in block {receipt['blockNumber']}, gas used {receipt['gasUsed']}")
        return receipt

    async def deploy(self, wallet) -> Tuple[str, str]:
        """
        Deploy a fresh contract instance (no constructor arguments)

        Args:
            wallet: Deployer WalletManager

        Returns:
            (contract_address, tx_hash)
        """
        abi, bytecode = self.load_contract_interface()
        factory = self.w3.eth.contract(abi=abi, bytecode=bytecode)

        logger.info(f"Deploying {self.contract_name}...")
        tx = await self.tx_builder.build_deploy_tx(factory, wallet.address)

        receipt = await self._send_and_confirm(tx, wallet, f"{self.contract_name} deployment")

        contract_address = receipt['contractAddress']
        if not contract_address:
            raise TransactionFailedError(
                f"{self.contract_name} deployment produced no contract address",
                tx_hash=Web3.to_hex(receipt['transactionHash'])
            )

        return contract_address, Web3.to_hex(receipt['transactionHash'])

    async def fund(self, wallet, contract_address: str, amount_wei: int) -> str:
        """
        Send native currency from the deployer to the contract

        Args:
            wallet: Deployer WalletManager
            contract_address: Deployed contract
            amount_wei: Funding amount

        Returns:
            Transaction hash
        """
        tx = await self.tx_builder.build_value_transfer(wallet.address, contract_address, amount_wei)

        required = amount_wei + GasCalculator.max_cost_wei(tx)
        balance = wallet.get_balance()

        if balance < required:
            await self.tx_builder.nonce_manager.reset_nonce()
            raise InsufficientBalanceError(
                f"Deployer balance {Web3.from_wei(balance, 'ether')} ETH is below "
                f"the {Web3.from_wei(required, 'ether')} ETH needed to fund {contract_address}"
            )

        receipt = await self._send_and_confirm(tx, wallet, "Funding")
        return Web3.to_hex(receipt['transactionHash'])

    async def transfer_to_employee(self, wallet, contract_address: str, employee: str) -> str:
        """
        Invoke transferToEmployee(employee) as the deployer

        Args:
            wallet: Deployer WalletManager
            contract_address: Deployed contract
            employee: Payout recipient

        Returns:
            Transaction hash
        """
        contract = self.get_contract(contract_address)
        call = contract.functions.transferToEmployee(Web3.to_checksum_address(employee))

        tx = await self.tx_builder.build_function_tx(call, wallet.address)

        receipt = await self._send_and_confirm(tx, wallet, "transferToEmployee")
        return Web3.to_hex(receipt['transactionHash'])
