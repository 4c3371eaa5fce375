"""
Contract Factory
Compiled contract bound to a signer, issues creation transactions
"""

from loguru import logger

from deployer.models import DeployedContract, Signer


class ContractFactory:
    """
    Creates new on-chain instances of one compiled contract
    """

    def __init__(self, contract_name: str, contract, signer: Signer, tx_builder, rpc_manager):
        """
        Initialize Contract Factory

        Args:
            contract_name: Contract name
            contract: Web3 contract class built from the artifact
            signer: Signer the factory is bound to
            tx_builder: TransactionBuilder instance
            rpc_manager: RPCManager used to submit
        """
        self.contract_name = contract_name
        self.contract = contract
        self.signer = signer
        self.tx_builder = tx_builder
        self.rpc_manager = rpc_manager

    async def deploy(self, *constructor_args) -> DeployedContract:
        """
        Submit a deployment transaction

        Returns once the node accepted the transaction, not once it is mined.

        Returns:
            Pending contract handle
        """
        logger.debug(f"Building {self.contract_name} deployment transaction...")
        transaction = await self.tx_builder.build_deployment_tx(
            self.contract,
            self.signer,
            constructor_args
        )

        logger.debug("Sending deployment transaction...")
        tx_hash = await self.rpc_manager.submit_transaction(transaction, self.signer)

        logger.debug(f"Transaction sent: {tx_hash}")

        return DeployedContract(
            contract_name=self.contract_name,
            tx_hash=tx_hash,
            deployer=self.signer.address
        )
