"""
Contract Manager
Resolves compiled artifacts and hands out contract factories
"""

import os
import json
from typing import Dict, List
from web3 import Web3
from loguru import logger

from deployer.exceptions import ArtifactResolutionError
from deployer.models import Signer
from .contract_factory import ContractFactory

BUILD_INFO_DIR = 'build-info'


class ContractManager:
    """
    Loads Hardhat-style artifacts (artifacts/<source>.sol/<Name>.json)
    and builds factories bound to a signer
    """

    def __init__(self, w3: Web3, config: Dict, tx_builder, rpc_manager):
        """
        Initialize Contract Manager

        Args:
            w3: Web3 instance
            config: Deployment configuration
            tx_builder: TransactionBuilder for creation transactions
            rpc_manager: RPCManager for submission
        """
        self.w3 = w3
        self.artifacts_dir = config['contract']['artifacts_dir']
        self.tx_builder = tx_builder
        self.rpc_manager = rpc_manager

    async def get_contract_factory(self, contract_name: str, signer: Signer) -> ContractFactory:
        """
        Get factory for a contract bound to a signer

        Args:
            contract_name: Contract name, or fully qualified
                "contracts/Foo.sol:Foo"
            signer: Signer the factory deploys with

        Returns:
            ContractFactory instance
        """
        artifact = self.load_artifact(contract_name)

        try:
            contract = self.w3.eth.contract(abi=artifact['abi'], bytecode=artifact['bytecode'])
        except Exception as e:
            raise ArtifactResolutionError(f"Invalid interface for {contract_name}: {e}") from e

        return ContractFactory(
            contract_name=artifact['contractName'],
            contract=contract,
            signer=signer,
            tx_builder=self.tx_builder,
            rpc_manager=self.rpc_manager
        )

    def load_artifact(self, contract_name: str) -> Dict:
        """
        Load and validate the compiled artifact of a contract

        Returns:
            Dict with contractName, abi and bytecode
        """
        path = self.find_artifact(contract_name)

        try:
            with open(path, 'r') as f:
                contract_json = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ArtifactResolutionError(f"Cannot read artifact {path}: {e}") from e

        abi = contract_json.get('abi')
        bytecode = contract_json.get('bytecode')

        # Foundry artifacts nest the bytecode
        if isinstance(bytecode, dict):
            bytecode = bytecode.get('object')

        if not isinstance(abi, list):
            raise ArtifactResolutionError(f"Artifact {path} has no ABI")

        if not bytecode or bytecode in ('0x', '0x0'):
            raise ArtifactResolutionError(
                f"Artifact {path} has no bytecode (abstract contract or interface?)"
            )

        logger.debug(f"Loaded artifact: {path}")

        return {
            'contractName': contract_json.get('contractName') or contract_name.split(':')[-1],
            'abi': abi,
            'bytecode': bytecode if bytecode.startswith('0x') else f"0x{bytecode}"
        }

    def find_artifact(self, contract_name: str) -> str:
        """
        Locate the artifact file for a contract

        Returns:
            Path to the artifact JSON
        """
        if not os.path.isdir(self.artifacts_dir):
            raise ArtifactResolutionError(
                f"Artifacts directory not found: {self.artifacts_dir} (compile the contracts first)"
            )

        if ':' in contract_name:
            source, name = contract_name.rsplit(':', 1)
            path = os.path.join(self.artifacts_dir, source, f"{name}.json")

            if not os.path.isfile(path):
                raise ArtifactResolutionError(f"Contract artifact not found: {path}")
            return path

        matches = self._search_artifacts(contract_name)

        if not matches:
            raise ArtifactResolutionError(
                f"Contract artifact not found for {contract_name} in {self.artifacts_dir}"
            )

        if len(matches) > 1:
            raise ArtifactResolutionError(
                f"Multiple artifacts for {contract_name}, use a fully qualified name: "
                + ', '.join(matches)
            )

        return matches[0]

    def _search_artifacts(self, contract_name: str) -> List[str]:
        """Walk the artifacts dir for <contract_name>.json"""
        filename = f"{contract_name}.json"
        matches = []

        for root, dirs, files in os.walk(self.artifacts_dir):
            dirs[:] = [d for d in dirs if d != BUILD_INFO_DIR]

            if filename in files:
                matches.append(os.path.join(root, filename))

        return sorted(matches)
