"""
RPC Manager
Owns the node connection, submits transactions and awaits their confirmation
"""

import time
import asyncio
from typing import Dict, Optional
from web3 import Web3
from web3.exceptions import TimeExhausted, TransactionNotFound
from loguru import logger

from deployer.exceptions import SubmissionError, ConfirmationError
from deployer.models import DeployedContract, Signer
from .config_loader import get_rpc_url


class RPCManager:
    """
    Network/transaction provider for a single RPC endpoint

    Confirmation policy: wait for the receipt, then until the receipt block
    is `confirmations` deep. Everything must happen within timeout_seconds.
    """

    def __init__(self, config: Dict, w3: Optional[Web3] = None):
        """
        Initialize RPC Manager

        Args:
            config: Deployment configuration
            w3: Existing Web3 instance (None = connect to the configured RPC)
        """
        network = config['network']
        confirmation = config['confirmation']

        self.network_name = network['name']
        self.timeout = confirmation['timeout_seconds']
        self.poll_latency = confirmation['poll_latency']
        self.confirmations = max(1, int(confirmation['confirmations']))

        if w3 is None:
            w3 = Web3(Web3.HTTPProvider(
                get_rpc_url(config),
                request_kwargs={'timeout': network['request_timeout']}
            ))
        self.w3 = w3

        logger.debug(f"RPC Manager initialized for network: {self.network_name}")

    def get_web3(self) -> Web3:
        """Get Web3 instance"""
        return self.w3

    def is_healthy(self) -> bool:
        """Check if the node is reachable"""
        try:
            return self.w3.is_connected()
        except Exception:
            return False

    async def submit_transaction(self, transaction: Dict, signer: Signer) -> str:
        """
        Submit a transaction to the node

        Args:
            transaction: Built transaction dict
            signer: Signer authorizing it

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        try:
            if signer.is_local:
                signed_tx = signer.account.sign_transaction(transaction)
                tx_hash = await asyncio.to_thread(
                    self.w3.eth.send_raw_transaction,
                    signed_tx.raw_transaction
                )
            else:
                tx_hash = await asyncio.to_thread(self.w3.eth.send_transaction, transaction)
        except Exception as e:
            raise SubmissionError(f"Deployment transaction rejected: {e}") from e

        return Web3.to_hex(tx_hash)

    async def wait_for_confirmation(self, pending: DeployedContract) -> DeployedContract:
        """
        Wait until a pending deployment is confirmed

        Args:
            pending: Pending contract handle

        Returns:
            Confirmed contract handle
        """
        deadline = time.monotonic() + self.timeout
        tx_hash = pending.tx_hash

        logger.debug("Waiting for confirmation...")

        try:
            receipt = await asyncio.to_thread(
                self.w3.eth.wait_for_transaction_receipt,
                tx_hash,
                timeout=self.timeout,
                poll_latency=self.poll_latency
            )
        except TimeExhausted as e:
            raise ConfirmationError(
                f"Transaction {tx_hash} not mined within {self.timeout} seconds"
            ) from e
        except Exception as e:
            raise ConfirmationError(f"Error waiting for {tx_hash}: {e}") from e

        self._check_receipt(tx_hash, receipt)

        if self.confirmations > 1:
            receipt = await self._wait_for_depth(tx_hash, receipt, deadline)

        contract = pending.confirm(
            address=Web3.to_checksum_address(receipt['contractAddress']),
            block_number=receipt['blockNumber'],
            gas_used=receipt['gasUsed']
        )

        logger.debug(f"Confirmed in block {contract.block_number} (gas used: {contract.gas_used})")
        return contract

    def _check_receipt(self, tx_hash: str, receipt):
        """Reject reverted or address-less creation receipts"""
        if receipt['status'] != 1:
            raise ConfirmationError(
                f"Deployment transaction {tx_hash} reverted in block {receipt['blockNumber']}"
            )

        if not receipt.get('contractAddress'):
            raise ConfirmationError(f"Receipt for {tx_hash} has no contract address")

    async def _wait_for_depth(self, tx_hash: str, receipt, deadline: float):
        """
        Wait until the receipt block has enough confirmations

        Re-reads the receipt once deep enough, so a reorg that dropped or
        reverted the transaction is reported instead of a stale address.
        """
        while True:
            try:
                current_block = await asyncio.to_thread(lambda: self.w3.eth.block_number)
            except Exception as e:
                raise ConfirmationError(f"Error reading block number for {tx_hash}: {e}") from e

            depth = current_block - receipt['blockNumber'] + 1

            if depth >= self.confirmations:
                try:
                    latest = await asyncio.to_thread(self.w3.eth.get_transaction_receipt, tx_hash)
                except TransactionNotFound as e:
                    raise ConfirmationError(f"Transaction {tx_hash} dropped after reorg") from e

                self._check_receipt(tx_hash, latest)

                if latest['blockHash'] == receipt['blockHash']:
                    return latest

                logger.warning(f"Transaction {tx_hash} re-included in block {latest['blockNumber']}")
                receipt = latest
                continue

            if time.monotonic() >= deadline:
                raise ConfirmationError(
                    f"Transaction {tx_hash} reached {depth}/{self.confirmations} "
                    f"confirmations within {self.timeout} seconds"
                )

            logger.debug(f"Confirmations: {depth}/{self.confirmations}")
            await asyncio.sleep(self.poll_latency)
