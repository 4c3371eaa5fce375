"""
Contract Deployment - Main Entry Point
Deploys the configured contract once and exits 0 on success, 1 on failure
"""

import asyncio
import sys
from typing import Dict, Optional
from loguru import logger

from blockchain.account_manager import AccountManager
from blockchain.contract_manager import ContractManager
from blockchain.transaction_builder import TransactionBuilder
from deployer.orchestrator import DeploymentOrchestrator
from utils.config_loader import load_config
from utils.rpc_manager import RPCManager

CONSOLE_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


def configure_logging(logging_config: Optional[Dict] = None):
    """Progress to stdout, errors to stderr, optional rotating log file"""
    logging_config = logging_config or {}
    level = logging_config.get('level', 'INFO')

    logger.remove()
    logger.add(
        sys.stdout,
        format=CONSOLE_FORMAT,
        level=level,
        filter=lambda record: record["level"].no < logger.level("ERROR").no
    )
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level="ERROR"
    )

    if logging_config.get('log_file'):
        logger.add(
            logging_config['log_file'],
            rotation=logging_config.get('rotation', '1 day'),
            retention=logging_config.get('retention', '7 days'),
            format=FILE_FORMAT,
            level="DEBUG"
        )


def build_orchestrator(config: Dict) -> DeploymentOrchestrator:
    """Wire the web3-backed collaborators into an orchestrator"""
    rpc_manager = RPCManager(config)
    w3 = rpc_manager.get_web3()

    tx_builder = TransactionBuilder(w3, config)

    return DeploymentOrchestrator(
        account_provider=AccountManager(w3, config),
        factory_provider=ContractManager(w3, config, tx_builder, rpc_manager),
        network_provider=rpc_manager,
        contract_name=config['contract']['name'],
        constructor_args=config['contract'].get('constructor_args', [])
    )


async def main(config_path: Optional[str] = None) -> int:
    """
    Run one deployment

    Returns:
        Process exit code
    """
    try:
        config = load_config(config_path)
        configure_logging(config.get('logging'))

        orchestrator = build_orchestrator(config)
        await orchestrator.run()

    except Exception as e:
        logger.opt(exception=e).error(f"Deployment failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
