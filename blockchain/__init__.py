"""
Blockchain Interaction Package
Handles signer resolution, contract artifacts and deployment transactions
"""

from .account_manager import AccountManager
from .contract_manager import ContractManager
from .contract_factory import ContractFactory
from .transaction_builder import TransactionBuilder

__all__ = ['AccountManager', 'ContractManager', 'ContractFactory', 'TransactionBuilder']
