"""
Transaction Builder
Constructs contract creation transactions
"""

import asyncio
from typing import Dict, Sequence
from web3 import Web3
from loguru import logger

from deployer.exceptions import SubmissionError
from deployer.models import Signer


def apply_gas_buffer(gas_estimate: int, gas_buffer: float) -> int:
    """
    Pad a gas estimate

    Args:
        gas_estimate: Estimated gas units
        gas_buffer: Multiplier (1.2 = 20% buffer), values below 1 are ignored

    Returns:
        Gas limit, never below the estimate
    """
    return max(int(gas_estimate), int(gas_estimate * gas_buffer))


class TransactionBuilder:
    """
    Builds deployment transactions for a contract constructor
    """

    def __init__(self, w3: Web3, config: Dict):
        """
        Initialize Transaction Builder

        Args:
            w3: Web3 instance
            config: Deployment configuration
        """
        self.w3 = w3
        self.gas_buffer = config['transaction']['gas_buffer']
        self.default_gas_limit = config['transaction']['default_gas_limit']
        self.chain_id = config['network'].get('chain_id')

    async def build_deployment_tx(
        self,
        contract,
        signer: Signer,
        constructor_args: Sequence = ()
    ) -> Dict:
        """
        Build the creation transaction for a contract

        Args:
            contract: Web3 contract class (abi + bytecode)
            signer: Deploying signer
            constructor_args: Constructor arguments

        Returns:
            Transaction dict (fee fields filled in by web3)
        """
        try:
            return await asyncio.to_thread(self._build, contract, signer, tuple(constructor_args))
        except Exception as e:
            raise SubmissionError(f"Could not build deployment transaction: {e}") from e

    def _build(self, contract, signer: Signer, constructor_args: tuple) -> Dict:
        constructor = contract.constructor(*constructor_args)

        nonce = self.w3.eth.get_transaction_count(signer.address, 'pending')
        chain_id = self.chain_id or self.w3.eth.chain_id
        gas_limit = self._estimate_gas_limit(constructor, signer)

        logger.debug(f"Gas limit: {gas_limit}")
        logger.debug(f"Nonce: {nonce}, chain id: {chain_id}")

        return constructor.build_transaction({
            'from': signer.address,
            'nonce': nonce,
            'gas': gas_limit,
            'chainId': chain_id
        })

    def _estimate_gas_limit(self, constructor, signer: Signer) -> int:
        """Estimate gas with buffer, falling back to the configured default"""
        try:
            gas_estimate = constructor.estimate_gas({'from': signer.address})
        except Exception as e:
            logger.warning(f"Gas estimation failed: {e}, using default")
            return self.default_gas_limit

        return apply_gas_buffer(gas_estimate, self.gas_buffer)
