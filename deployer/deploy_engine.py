"""
Deployment Engine - Core run logic
Deploys the contract, funds it and pays the employee, in strict order
"""

from typing import Mapping, Optional
from loguru import logger
from web3 import Web3

from blockchain.contract_manager import ContractManager
from blockchain.errors import ConfigurationError
from blockchain.network_config import NetworkSettings
from blockchain.nonce_manager import NonceManager
from blockchain.transaction_builder import TransactionBuilder
from utils.gas_calculator import GasCalculator
from utils.rpc_manager import RPCManager

from .deploy_config import DeployConfig
from .wallet_manager import WalletManager

# Run states (forward only, 'failed' reachable from any of them)
NOT_STARTED = 'not_started'
DEPLOYED = 'deployed'
FUNDED = 'funded'
TRANSFERRED = 'transferred'
DONE = 'done'
FAILED = 'failed'


class DeploymentResult:
    """Outcome of a successful run"""

    def __init__(self, network: str, deployer: str, contract_address: str,
                 deploy_tx: str, fund_tx: str, transfer_tx: str):
        self.network = network
        self.deployer = deployer
        self.contract_address = contract_address
        self.deploy_tx = deploy_tx
        self.fund_tx = fund_tx
        self.transfer_tx = transfer_tx

    def to_dict(self):
        return {
            'network': self.network,
            'deployer': self.deployer,
            'contract_address': self.contract_address,
            'deploy_tx': self.deploy_tx,
            'fund_tx': self.fund_tx,
            'transfer_tx': self.transfer_tx
        }


class DeploymentRunner:
    """
    One deployment run against one network

    Steps run in order and the first failure aborts the rest:
    resolve deployer -> deploy -> fund -> transferToEmployee
    """

    def __init__(
        self,
        deploy_config: DeployConfig,
        network: NetworkSettings,
        solc_version: Optional[str] = None,
        rpc_manager: Optional[RPCManager] = None,
        contract_manager: Optional[ContractManager] = None,
        env: Optional[Mapping[str, str]] = None
    ):
        """
        Initialize the runner

        Args:
            deploy_config: Validated deploy parameters
            network: Selected network
            solc_version: Compiler version used when compiling from source
            rpc_manager: Connection to the network (built from `network` if None)
            contract_manager: Contract operations (built after connecting if None)
            env: Environment for keys and URL placeholders (None = os.environ)
        """
        self.config = deploy_config
        self.network = network
        self.solc_version = solc_version
        self.env = env
        self.rpc_manager = rpc_manager
        self.contract_manager = contract_manager

        self.state = NOT_STARTED
        self.wallet: Optional[WalletManager] = None
        self.contract_address: Optional[str] = None
        self.payout_wei: Optional[int] = None

    def _build_contract_manager(self, w3: Web3) -> ContractManager:
        gas_calculator = GasCalculator(w3, {'gas_settings': self.config.gas_settings})
        nonce_manager = NonceManager(w3, self.wallet.address)
        tx_builder = TransactionBuilder(w3, gas_calculator, nonce_manager, w3.eth.chain_id)

        return ContractManager(
            w3,
            tx_builder,
            contract_name=self.config.contract_name,
            artifact_path=self.config.artifact_path,
            source_path=self.config.contract_source,
            solc_version=self.solc_version,
            confirmation_timeout=self.config.confirmation_timeout
        )

    async def _resolve_deployer(self):
        # Keys are checked before any RPC traffic
        private_keys = self.network.resolve_accounts(self.env)

        if self.rpc_manager is None:
            self.rpc_manager = RPCManager(self.network, self.env)

        w3 = self.rpc_manager.get_web3()
        self.wallet = WalletManager(w3, private_keys)

        logger.info(f"Deploying contracts with the account: {self.wallet.address}")
        logger.info(f"Account balance: {self.wallet.get_balance_eth()} ETH")

        if self.contract_manager is None:
            self.contract_manager = self._build_contract_manager(w3)

    async def _deploy(self) -> str:
        address, tx_hash = await self.contract_manager.deploy(self.wallet)

        self.contract_address = address
        self.state = DEPLOYED

        logger.success(f"{self.config.contract_name} contract deployed to: {address}")
        return tx_hash

    def _verify_payout(self):
        payout_wei = self.contract_manager.get_payout_amount(self.contract_address)

        if payout_wei != self.config.transfer_amount_wei:
            raise ConfigurationError(
                f"transfer_amount_eth is {self.config.transfer_amount_eth} ETH but "
                f"{self.config.contract_name} pays {Web3.from_wei(payout_wei, 'ether')} ETH per transfer"
            )

        self.payout_wei = payout_wei

    async def _fund(self) -> str:
        tx_hash = await self.contract_manager.fund(
            self.wallet,
            self.contract_address,
            self.config.fund_amount_wei
        )
        self.state = FUNDED

        logger.success(
            f"{self.config.contract_name} contract funded with {self.config.fund_amount_eth} ETH"
        )
        return tx_hash

    async def _transfer(self) -> str:
        tx_hash = await self.contract_manager.transfer_to_employee(
            self.wallet,
            self.contract_address,
            self.config.recipient_address
        )
        self.state = TRANSFERRED

        logger.success(
            f"Transferred {Web3.from_wei(self.payout_wei, 'ether')} ETH to {self.config.recipient_address}"
        )
        return tx_hash

    async def run(self) -> DeploymentResult:
        """
        Execute the full run

        Returns:
            DeploymentResult with the new contract address and tx hashes

        Raises:
            Whatever the failing step raised; state is left at 'failed'
        """
        if self.state != NOT_STARTED:
            raise RuntimeError(f"Runner already used (state: {self.state})")

        logger.info(f"Starting deployment on {self.network.name}")

        try:
            await self._resolve_deployer()
            deploy_tx = await self._deploy()
            self._verify_payout()
            fund_tx = await self._fund()
            transfer_tx = await self._transfer()
        except Exception as e:
            logger.error(f"Deployment aborted after state '{self.state}': {e}")
            self.state = FAILED
            raise

        self.state = DONE

        return DeploymentResult(
            network=self.network.key,
            deployer=self.wallet.address,
            contract_address=self.contract_address,
            deploy_tx=deploy_tx,
            fund_tx=fund_tx,
            transfer_tx=transfer_tx
        )
