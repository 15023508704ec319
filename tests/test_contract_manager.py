"""
Unit Tests for the Contract Manager
"""

import json
from unittest.mock import AsyncMock, Mock, patch
import pytest
from web3 import Web3

from blockchain.contract_manager import ContractManager
from blockchain.errors import ConfigurationError, InsufficientBalanceError, TransactionFailedError

from conftest import CONTRACT, DEPLOYER, RECIPIENT

ABI = [{
    "inputs": [{"name": "employee", "type": "address"}],
    "name": "transferToEmployee",
    "outputs": [],
    "stateMutability": "nonpayable",
    "type": "function"
}]


def make_receipt(status=1, contract_address=None, tx_byte=b'\x01'):
    return {
        'status': status,
        'contractAddress': contract_address,
        'transactionHash': tx_byte * 32,
        'blockNumber': 1,
        'gasUsed': 21000
    }


@pytest.fixture
def artifact(tmp_path):
    path = tmp_path / 'MainPay.json'
    path.write_text(json.dumps({'abi': ABI, 'bytecode': '0x6080604052'}))
    return str(path)


@pytest.fixture
def w3():
    w3 = Mock()
    w3.eth.wait_for_transaction_receipt.return_value = make_receipt(contract_address=CONTRACT)
    return w3


@pytest.fixture
def tx_builder():
    builder = Mock()
    builder.build_deploy_tx = AsyncMock(return_value={'nonce': 0, 'gas': 300000, 'maxFeePerGas': 10})
    builder.build_value_transfer = AsyncMock(return_value={'nonce': 1, 'gas': 21000, 'maxFeePerGas': 10})
    builder.build_function_tx = AsyncMock(return_value={'nonce': 2, 'gas': 60000, 'maxFeePerGas': 10})
    builder.nonce_manager = Mock(confirm_nonce=AsyncMock(), reset_nonce=AsyncMock())
    return builder


@pytest.fixture
def wallet():
    wallet = Mock(address=DEPLOYER)
    wallet.send_transaction.return_value = '0x' + '01' * 32
    wallet.get_balance.return_value = 10**18
    return wallet


@pytest.fixture
def manager(w3, tx_builder, artifact):
    return ContractManager(w3, tx_builder, artifact_path=artifact, confirmation_timeout=30)


class TestContractInterface:

    def test_loads_hardhat_artifact(self, manager):
        abi, bytecode = manager.load_contract_interface()

        assert abi == ABI
        assert bytecode == '0x6080604052'

    def test_missing_artifact_and_source(self, w3, tx_builder, tmp_path):
        manager = ContractManager(
            w3, tx_builder,
            artifact_path=str(tmp_path / 'missing.json'),
            source_path=str(tmp_path / 'missing.sol'),
            solc_version='0.8.27'
        )

        with pytest.raises(ConfigurationError):
            manager.load_contract_interface()

    def test_compiles_source_when_no_artifact(self, w3, tx_builder, tmp_path):
        source = tmp_path / 'MainPay.sol'
        source.write_text('contract MainPay {}')
        manager = ContractManager(
            w3, tx_builder,
            artifact_path=str(tmp_path / 'missing.json'),
            source_path=str(source),
            solc_version='0.8.27'
        )

        with patch('blockchain.contract_manager.compile_contract', return_value=(ABI, '0x60')) as compile_mock:
            assert manager.load_contract_interface() == (ABI, '0x60')
            manager.load_contract_interface()

        compile_mock.assert_called_once_with(str(source), 'MainPay', '0.8.27')

    def test_empty_bytecode_rejected(self, w3, tx_builder, tmp_path):
        path = tmp_path / 'Abstract.json'
        path.write_text(json.dumps({'abi': [], 'bytecode': '0x'}))
        manager = ContractManager(w3, tx_builder, artifact_path=str(path))

        with pytest.raises(ConfigurationError, match='empty bytecode'):
            manager.load_contract_interface()


class TestDeploy:

    @pytest.mark.asyncio
    async def test_deploy_waits_for_receipt(self, manager, w3, wallet, tx_builder):
        address, tx_hash = await manager.deploy(wallet)

        assert address == CONTRACT
        assert tx_hash == '0x' + '01' * 32
        w3.eth.contract.assert_called_once_with(abi=ABI, bytecode='0x6080604052')
        w3.eth.wait_for_transaction_receipt.assert_called_once_with('0x' + '01' * 32, timeout=30)
        tx_builder.nonce_manager.confirm_nonce.assert_awaited_once_with(0)

    @pytest.mark.asyncio
    async def test_reverted_deploy_raises(self, manager, w3, wallet):
        w3.eth.wait_for_transaction_receipt.return_value = make_receipt(status=0)

        with pytest.raises(TransactionFailedError) as exc_info:
            await manager.deploy(wallet)

        assert exc_info.value.tx_hash == '0x' + '01' * 32

    @pytest.mark.asyncio
    async def test_rejected_send_resets_nonce(self, manager, w3, wallet, tx_builder):
        wallet.send_transaction.side_effect = ValueError('nonce too low')

        with pytest.raises(ValueError, match='nonce too low'):
            await manager.deploy(wallet)

        tx_builder.nonce_manager.reset_nonce.assert_awaited_once()
        w3.eth.wait_for_transaction_receipt.assert_not_called()


class TestFunding:

    @pytest.mark.asyncio
    async def test_fund_sends_value(self, manager, wallet, tx_builder):
        await manager.fund(wallet, CONTRACT, 10**16)

        tx_builder.build_value_transfer.assert_awaited_once_with(DEPLOYER, CONTRACT, 10**16)
        wallet.send_transaction.assert_called_once()

    @pytest.mark.asyncio
    async def test_insufficient_balance(self, manager, wallet, tx_builder):
        wallet.get_balance.return_value = 10**15

        with pytest.raises(InsufficientBalanceError):
            await manager.fund(wallet, CONTRACT, 10**16)

        wallet.send_transaction.assert_not_called()
        tx_builder.nonce_manager.reset_nonce.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_balance_must_cover_gas(self, manager, wallet):
        # value fits but value + 21000 * 10 wei of gas does not
        wallet.get_balance.return_value = 10**16 + 1000

        with pytest.raises(InsufficientBalanceError):
            await manager.fund(wallet, CONTRACT, 10**16)


class TestTransferToEmployee:

    @pytest.mark.asyncio
    async def test_invokes_contract_method(self, manager, w3, wallet, tx_builder):
        w3.eth.wait_for_transaction_receipt.return_value = make_receipt(tx_byte=b'\x03')
        contract = w3.eth.contract.return_value

        tx_hash = await manager.transfer_to_employee(wallet, CONTRACT, RECIPIENT)

        assert tx_hash == '0x' + '03' * 32
        w3.eth.contract.assert_called_once_with(address=Web3.to_checksum_address(CONTRACT), abi=ABI)
        contract.functions.transferToEmployee.assert_called_once_with(Web3.to_checksum_address(RECIPIENT))
        tx_builder.build_function_tx.assert_awaited_once_with(
            contract.functions.transferToEmployee.return_value, DEPLOYER
        )

    @pytest.mark.asyncio
    async def test_contract_revert(self, manager, w3, wallet):
        w3.eth.wait_for_transaction_receipt.return_value = make_receipt(status=0)

        with pytest.raises(TransactionFailedError, match='transferToEmployee'):
            await manager.transfer_to_employee(wallet, CONTRACT, RECIPIENT)


class TestPayoutAmount:

    def test_reads_salary_from_contract(self, manager, w3):
        contract = w3.eth.contract.return_value
        contract.functions.SALARY.return_value.call.return_value = 10**14

        assert manager.get_payout_amount(CONTRACT) == 10**14
        w3.eth.contract.assert_called_once_with(address=Web3.to_checksum_address(CONTRACT), abi=ABI)
