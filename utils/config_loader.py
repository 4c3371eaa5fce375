"""
Config Loader
Loads deploy_config.json and applies environment overrides from .env
"""

import os
import json
import copy
from typing import Dict, Optional
from loguru import logger
from dotenv import load_dotenv

from deployer.exceptions import ConfigurationError

load_dotenv()

DEFAULT_CONFIG_PATH = "config/deploy_config.json"

DEFAULT_CONFIG = {
    'contract': {
        'name': 'TimedCrowdfunding',
        'artifacts_dir': 'artifacts',
        'constructor_args': []
    },
    'network': {
        'name': 'localhost',
        'rpc_url_env': 'RPC_URL',
        'default_rpc_url': 'http://127.0.0.1:8545',
        'chain_id': None,
        'request_timeout': 30
    },
    'accounts': {
        'private_keys_env': 'DEPLOYER_PRIVATE_KEYS',
        'mnemonic_env': 'DEPLOYER_MNEMONIC',
        'mnemonic_count': 1,
        'use_node_accounts': True
    },
    'transaction': {
        'gas_buffer': 1.2,
        'default_gas_limit': 3000000
    },
    'confirmation': {
        'timeout_seconds': 120,
        'poll_latency': 0.5,
        'confirmations': 1
    },
    'logging': {
        'level': 'INFO',
        'log_file': None,
        'rotation': '1 day',
        'retention': '7 days'
    }
}

# env var -> (section, key, cast)
ENV_OVERRIDES = {
    'CONTRACT_NAME': ('contract', 'name', str),
    'ARTIFACTS_DIR': ('contract', 'artifacts_dir', str),
    'CHAIN_ID': ('network', 'chain_id', int),
    'CONFIRMATION_TIMEOUT': ('confirmation', 'timeout_seconds', float),
    'CONFIRMATIONS': ('confirmation', 'confirmations', int),
    'LOG_LEVEL': ('logging', 'level', str)
}


def load_config(config_path: Optional[str] = None) -> Dict:
    """
    Load deployment configuration

    Args:
        config_path: Path to JSON config (None = config/deploy_config.json,
            skipped silently if that default file does not exist)

    Returns:
        Config dict with defaults, file values and env overrides merged
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    path = config_path or DEFAULT_CONFIG_PATH

    if os.path.exists(path):
        try:
            with open(path, 'r') as f:
                file_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read config {path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Config {path} must contain a JSON object")

        _merge(config, file_config)
        logger.debug(f"Loaded config from {path}")
    elif config_path:
        raise ConfigurationError(f"Config file not found: {config_path}")

    _apply_env_overrides(config)

    return config


def get_rpc_url(config: Dict) -> str:
    """Resolve the RPC endpoint from the env var named in config"""
    network = config['network']
    return os.getenv(network['rpc_url_env']) or network['default_rpc_url']


def _merge(base: Dict, override: Dict):
    """Recursively merge override into base"""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value


def _apply_env_overrides(config: Dict):
    """Apply environment variable overrides"""
    for env_name, (section, key, cast) in ENV_OVERRIDES.items():
        raw = os.getenv(env_name)

        if raw is None or raw == '':
            continue

        try:
            config[section][key] = cast(raw)
        except ValueError as e:
            raise ConfigurationError(f"Invalid value for {env_name}: {raw!r}") from e

        logger.debug(f"Config override from {env_name}: {section}.{key}")
