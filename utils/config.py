"""
Deployment Configuration
Loads config/deploy_config.json and applies environment overrides
"""

import os
import copy
import json
from typing import Dict, Optional
from loguru import logger
from dotenv import load_dotenv

from blockchain.exceptions import ConfigurationError

load_dotenv()

DEFAULT_CONFIG_PATH = "config/deploy_config.json"

DEFAULT_CONFIG = {
    'contract_name': 'HelloWorld',
    'constructor_args': [],
    'network': 'localhost',
    'networks': {
        'localhost': {
            'rpc_url_env': 'LOCALHOST_RPC_URL',
            'default_rpc_url': 'http://127.0.0.1:8545',
            'chain_id': 31337
        }
    },
    'contracts_dir': 'contracts',
    'artifacts_dir': 'artifacts',
    'solc_version': '0.8.20',
    'confirmation_timeout': 120,
    'gas_buffer': 1.2,
    'default_gas_limit': 3000000
}


def _merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge override into a copy of base"""
    merged = copy.deepcopy(base)

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value

    return merged


def load_config(config_path: Optional[str] = None) -> Dict:
    """
    Load deployment configuration

    The file at DEFAULT_CONFIG_PATH is optional. A path given explicitly
    (argument or DEPLOY_CONFIG) must exist.

    Args:
        config_path: Path to JSON config file

    Returns:
        Configuration dict
    """
    explicit = config_path is not None or bool(os.getenv('DEPLOY_CONFIG'))
    path = config_path or os.getenv('DEPLOY_CONFIG') or DEFAULT_CONFIG_PATH

    file_config = {}

    if os.path.exists(path):
        try:
            with open(path, 'r') as f:
                file_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(f"{path} must contain a JSON object")

        logger.debug(f"Loaded config from {path}")
    elif explicit:
        raise ConfigurationError(f"Config file not found: {path}")

    config = _merge(DEFAULT_CONFIG, file_config)

    # Environment overrides
    if os.getenv('DEPLOY_NETWORK'):
        config['network'] = os.getenv('DEPLOY_NETWORK')
    if os.getenv('DEPLOY_CONTRACT'):
        config['contract_name'] = os.getenv('DEPLOY_CONTRACT')

    if config['network'] not in config['networks']:
        raise ConfigurationError(
            f"Unknown network '{config['network']}' "
            f"(configured: {', '.join(sorted(config['networks']))})"
        )

    if not isinstance(config['constructor_args'], list):
        raise ConfigurationError("constructor_args must be a list")

    return config
