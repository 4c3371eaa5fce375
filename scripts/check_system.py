"""
System Check Script
Verifies configuration, node connection, artifact and signer before deploying
Run: python -m scripts.check_system
"""

import sys
import asyncio
from typing import Dict
from loguru import logger

from blockchain.account_manager import AccountManager
from blockchain.contract_manager import ContractManager
from deployer.exceptions import DeploymentError
from utils.config_loader import load_config, get_rpc_url
from utils.rpc_manager import RPCManager


def check_rpc_connection(config: Dict, rpc_manager: RPCManager) -> bool:
    """Check RPC endpoint connection"""
    logger.info("Checking RPC connection...")

    if not rpc_manager.is_healthy():
        logger.error(f"  ✗ Cannot reach {get_rpc_url(config)}")
        return False

    try:
        block = rpc_manager.get_web3().eth.block_number
    except Exception as e:
        logger.error(f"  ✗ {e}")
        return False

    logger.success(f"  ✓ Connected to {rpc_manager.network_name} (Block: {block})")
    return True


def check_contract_artifact(config: Dict, rpc_manager: RPCManager) -> bool:
    """Check the contract artifact resolves"""
    logger.info("Checking contract artifact...")

    contract_name = config['contract']['name']
    contract_manager = ContractManager(rpc_manager.get_web3(), config, None, rpc_manager)

    try:
        path = contract_manager.find_artifact(contract_name)
        contract_manager.load_artifact(contract_name)
    except DeploymentError as e:
        logger.error(f"  ✗ {e}")
        logger.info("  Run 'npx hardhat compile' first")
        return False

    logger.success(f"  ✓ {contract_name}: {path}")
    return True


def check_signer(config: Dict, rpc_manager: RPCManager) -> bool:
    """Check a deployer account resolves and report its balance"""
    logger.info("Checking deployer account...")

    w3 = rpc_manager.get_web3()

    try:
        signers = asyncio.run(AccountManager(w3, config).get_signers())
    except DeploymentError as e:
        logger.error(f"  ✗ {e}")
        return False

    if not signers:
        logger.error("  ✗ No signer available")
        logger.info("  Set DEPLOYER_PRIVATE_KEYS or DEPLOYER_MNEMONIC in .env")
        return False

    deployer = signers[0]

    try:
        balance = w3.from_wei(w3.eth.get_balance(deployer.address), 'ether')
        logger.success(f"  ✓ Deployer: {deployer.address} ({balance:.4f} ETH)")
    except Exception as e:
        logger.warning(f"  ⚠ Deployer {deployer.address}, balance unavailable: {e}")

    return True


CHECKS = [
    ("RPC Connection", check_rpc_connection),
    ("Contract Artifact", check_contract_artifact),
    ("Deployer Account", check_signer)
]


def run_checks(config: Dict, rpc_manager: RPCManager) -> int:
    """
    Run all checks

    Returns:
        Exit code (0 = all passed)
    """
    results = []

    for name, check_func in CHECKS:
        try:
            result = check_func(config, rpc_manager)
        except Exception as e:
            logger.error(f"Error in {name}: {e}")
            result = False
        results.append((name, result))

    passed = sum(1 for _, result in results if result)

    logger.info("=" * 70)
    for name, result in results:
        status = "✓ PASS" if result else "✗ FAIL"
        logger.info(f"  {status}: {name}")
    logger.info(f"Total: {passed}/{len(results)} checks passed")

    if passed == len(results):
        logger.success("✅ Ready to deploy: python deploy.py")
        return 0

    logger.error("❌ Not ready to deploy - fix issues above")
    return 1


def main() -> int:
    """Run deployment preflight checks"""
    logger.info("=" * 70)
    logger.info("Deployment System Check")
    logger.info("=" * 70)

    try:
        config = load_config()
    except DeploymentError as e:
        logger.error(f"✗ Configuration: {e}")
        return 1

    return run_checks(config, RPCManager(config))


if __name__ == "__main__":
    sys.exit(main())
