"""
Entry Point Tests
Exit codes and console output of deploy.py
"""

import sys
import json
import pytest
from unittest.mock import Mock, AsyncMock
from loguru import logger

import deploy
from blockchain.account_manager import AccountManager
from blockchain.contract_manager import ContractManager
from deployer.exceptions import IdentityResolutionError, ConfirmationError
from deployer.models import DeployedContract, Signer
from deployer.orchestrator import DeploymentOrchestrator
from utils.rpc_manager import RPCManager

SIGNER_ADDRESS = '0xAAA0000000000000000000000000000000000001'
CONTRACT_ADDRESS = '0xCCC0000000000000000000000000000000000002'


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / 'deploy_config.json'
    path.write_text(json.dumps({'logging': {'level': 'INFO', 'log_file': None}}))
    return str(path)


def make_orchestrator(signers, confirmation_error=None):
    pending = DeployedContract('TimedCrowdfunding', '0x' + '11' * 32, SIGNER_ADDRESS)

    account_provider = Mock()
    account_provider.get_signers = AsyncMock(return_value=signers)

    factory = Mock()
    factory.deploy = AsyncMock(return_value=pending)
    factory_provider = Mock()
    factory_provider.get_contract_factory = AsyncMock(return_value=factory)

    network_provider = Mock()
    if confirmation_error:
        network_provider.wait_for_confirmation = AsyncMock(side_effect=confirmation_error)
    else:
        network_provider.wait_for_confirmation = AsyncMock(
            return_value=pending.confirm(CONTRACT_ADDRESS, block_number=1, gas_used=1)
        )

    return DeploymentOrchestrator(
        account_provider, factory_provider, network_provider, 'TimedCrowdfunding'
    )


class TestMain:
    """Test exit codes"""

    @pytest.mark.asyncio
    async def test_success_exit_code(self, monkeypatch, capsys, config_path):
        orchestrator = make_orchestrator([Signer(address=SIGNER_ADDRESS)])
        monkeypatch.setattr(deploy, 'build_orchestrator', lambda config: orchestrator)

        exit_code = await deploy.main(config_path)

        out = capsys.readouterr().out
        assert exit_code == 0
        assert SIGNER_ADDRESS in out
        assert out.index(SIGNER_ADDRESS) < out.index(CONTRACT_ADDRESS)

    @pytest.mark.asyncio
    async def test_no_signer_exit_code(self, monkeypatch, capsys, config_path):
        orchestrator = make_orchestrator([])
        monkeypatch.setattr(deploy, 'build_orchestrator', lambda config: orchestrator)

        exit_code = await deploy.main(config_path)

        captured = capsys.readouterr()
        assert exit_code == 1
        assert IdentityResolutionError.__name__ in captured.err
        assert CONTRACT_ADDRESS not in captured.out

    @pytest.mark.asyncio
    async def test_confirmation_timeout_exit_code(self, monkeypatch, capsys, config_path):
        orchestrator = make_orchestrator(
            [Signer(address=SIGNER_ADDRESS)],
            confirmation_error=ConfirmationError("not mined within 120 seconds")
        )
        monkeypatch.setattr(deploy, 'build_orchestrator', lambda config: orchestrator)

        exit_code = await deploy.main(config_path)

        captured = capsys.readouterr()
        assert exit_code == 1
        assert "not mined" in captured.err
        assert CONTRACT_ADDRESS not in captured.out

    @pytest.mark.asyncio
    async def test_missing_config_exit_code(self, tmp_path):
        assert await deploy.main(str(tmp_path / 'missing.json')) == 1


class TestConsoleOutput:
    """Full stack over a mocked node"""

    NODE_ACCOUNT = '0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266'
    DEPLOYED_ADDRESS = '0x5FbDB2315678afecb367f032d93F642f64180aa3'

    @pytest.fixture
    def w3(self):
        w3 = Mock()
        w3.eth.accounts = [self.NODE_ACCOUNT]
        w3.eth.get_transaction_count.return_value = 0

        constructor = w3.eth.contract.return_value.constructor.return_value
        constructor.estimate_gas.return_value = 900000
        constructor.build_transaction.side_effect = lambda tx: dict(tx, data='0x6080604052')

        w3.eth.send_transaction.return_value = bytes.fromhex('22' * 32)
        w3.eth.wait_for_transaction_receipt.return_value = {
            'status': 1,
            'blockNumber': 1,
            'blockHash': '0xaa',
            'contractAddress': self.DEPLOYED_ADDRESS,
            'gasUsed': 750000
        }
        return w3

    @pytest.fixture
    def stack_config_path(self, tmp_path):
        contract_dir = tmp_path / 'artifacts' / 'contracts' / 'TimedCrowdfunding.sol'
        contract_dir.mkdir(parents=True)
        (contract_dir / 'TimedCrowdfunding.json').write_text(json.dumps({
            'contractName': 'TimedCrowdfunding',
            'abi': [],
            'bytecode': '0x6080604052'
        }))

        path = tmp_path / 'deploy_config.json'
        path.write_text(json.dumps({
            'contract': {'artifacts_dir': str(tmp_path / 'artifacts')},
            'network': {'chain_id': 31337},
            'confirmation': {'poll_latency': 0},
            'logging': {'level': 'INFO', 'log_file': None}
        }))
        return str(path)

    @pytest.mark.asyncio
    async def test_success_prints_exactly_two_lines(self, monkeypatch, capsys, w3, stack_config_path):
        monkeypatch.setattr(deploy, 'RPCManager', lambda config: RPCManager(config, w3=w3))

        exit_code = await deploy.main(stack_config_path)

        lines = capsys.readouterr().out.splitlines()
        assert exit_code == 0
        assert len(lines) == 2
        assert self.NODE_ACCOUNT in lines[0]
        assert self.DEPLOYED_ADDRESS in lines[1]


class TestBuildOrchestrator:
    """Test collaborator wiring"""

    def test_wiring(self, config):
        config['contract']['name'] = 'TimedCrowdfunding'
        config['contract']['constructor_args'] = [3600]

        orchestrator = deploy.build_orchestrator(config)

        assert isinstance(orchestrator.account_provider, AccountManager)
        assert isinstance(orchestrator.factory_provider, ContractManager)
        assert isinstance(orchestrator.network_provider, RPCManager)
        assert orchestrator.contract_name == 'TimedCrowdfunding'
        assert orchestrator.constructor_args == (3600,)
