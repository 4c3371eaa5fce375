"""
Deployment Data Model
Transient entities that live for a single deployment run
"""

from dataclasses import dataclass, replace
from typing import Any, Optional

PENDING = 'pending'
CONFIRMED = 'confirmed'


@dataclass(frozen=True)
class Signer:
    """
    Identity able to authorize transactions

    Local signers carry an eth_account account and sign transactions
    themselves. Node-managed signers (account is None) are unlocked on the
    node and signed there.
    """
    address: str
    account: Optional[Any] = None

    @property
    def is_local(self) -> bool:
        return self.account is not None


@dataclass(frozen=True)
class DeployedContract:
    """Handle of a contract creation transaction"""
    contract_name: str
    tx_hash: str
    deployer: str
    status: str = PENDING
    address: Optional[str] = None
    block_number: Optional[int] = None
    gas_used: Optional[int] = None

    @property
    def is_confirmed(self) -> bool:
        return self.status == CONFIRMED

    def confirm(self, address: str, block_number: int, gas_used: int) -> 'DeployedContract':
        """
        Build the confirmed handle for this pending deployment

        Args:
            address: Contract address from the transaction receipt
            block_number: Block that included the transaction
            gas_used: Gas consumed by the creation transaction

        Returns:
            New confirmed handle (the pending handle is left untouched)
        """
        return replace(
            self,
            status=CONFIRMED,
            address=address,
            block_number=block_number,
            gas_used=gas_used
        )
