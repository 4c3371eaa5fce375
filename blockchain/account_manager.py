"""
Account Manager
Resolves the signer accounts available for deployment
"""

import os
import asyncio
from typing import Dict, List
from web3 import Web3
from eth_account import Account
from loguru import logger
from dotenv import load_dotenv

from deployer.exceptions import IdentityResolutionError
from deployer.models import Signer

load_dotenv()

Account.enable_unaudited_hdwallet_features()

DERIVATION_PATH = "m/44'/60'/0'/0/{index}"


class AccountManager:
    """
    Resolves signers in priority order:
    - Private keys from env (comma-separated)
    - Accounts derived from an env mnemonic
    - Unlocked accounts managed by the node (local dev chains)
    """

    def __init__(self, w3: Web3, config: Dict):
        """
        Initialize Account Manager

        Args:
            w3: Web3 instance
            config: Deployment configuration
        """
        self.w3 = w3
        self.accounts_config = config['accounts']

    async def get_signers(self) -> List[Signer]:
        """
        Get available signers

        Returns:
            Ordered list of signers, may be empty
        """
        signers = self._load_private_key_signers()

        if not signers:
            signers = self._load_mnemonic_signers()

        if not signers and self.accounts_config.get('use_node_accounts', True):
            signers = await self._load_node_signers()

        logger.debug(f"Resolved {len(signers)} signer(s)")
        return signers

    def _load_private_key_signers(self) -> List[Signer]:
        """Load local signers from private keys"""
        raw_keys = os.getenv(self.accounts_config['private_keys_env'], '')
        keys = [key.strip() for key in raw_keys.split(',') if key.strip()]

        signers = []
        for index, key in enumerate(keys):
            try:
                account = Account.from_key(key)
            except Exception as e:
                # never log key material
                raise IdentityResolutionError(
                    f"Invalid private key #{index} in {self.accounts_config['private_keys_env']}"
                ) from e

            signers.append(Signer(address=account.address, account=account))

        return signers

    def _load_mnemonic_signers(self) -> List[Signer]:
        """Derive local signers from a mnemonic phrase"""
        phrase = os.getenv(self.accounts_config['mnemonic_env'], '').strip()

        if not phrase:
            return []

        count = int(self.accounts_config.get('mnemonic_count', 1))

        signers = []
        for index in range(count):
            try:
                account = Account.from_mnemonic(
                    phrase,
                    account_path=DERIVATION_PATH.format(index=index)
                )
            except Exception as e:
                raise IdentityResolutionError(
                    f"Invalid mnemonic in {self.accounts_config['mnemonic_env']}"
                ) from e

            signers.append(Signer(address=account.address, account=account))

        return signers

    async def _load_node_signers(self) -> List[Signer]:
        """Load unlocked accounts from the node"""
        try:
            addresses = await asyncio.to_thread(lambda: self.w3.eth.accounts)
        except Exception as e:
            raise IdentityResolutionError(f"Could not fetch node accounts: {e}") from e

        return [
            Signer(address=Web3.to_checksum_address(address))
            for address in addresses
        ]
