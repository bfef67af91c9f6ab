"""
Deployment Setup Check
Verifies configuration, connection and deployer funds before deploying
"""

import os
import sys
from web3 import Web3
from eth_account import Account
from loguru import logger
from dotenv import load_dotenv

from blockchain.artifacts import ArtifactStore
from blockchain.exceptions import DeploymentError
from utils.config import load_config
from utils.rpc_manager import RPCManager

load_dotenv()

MIN_BALANCE_ETH = 0.01


def check_environment_variables(config):
    """Check deployer key is set and valid"""
    logger.info("Checking environment variables...")

    private_key = os.getenv('DEPLOYER_PRIVATE_KEY')

    if not private_key:
        logger.error("  ✗ DEPLOYER_PRIVATE_KEY not set")
        return False

    try:
        address = Account.from_key(private_key).address
    except ValueError as e:
        logger.error(f"  ✗ DEPLOYER_PRIVATE_KEY invalid: {e}")
        return False

    logger.success(f"  ✓ Deployer: {address}")
    return True


def check_rpc_connection(config):
    """Check the configured network answers with the expected chain id"""
    logger.info(f"Checking RPC connection ({config['network']})...")

    rpc_url = RPCManager(config).rpc_url
    w3 = Web3(Web3.HTTPProvider(rpc_url))

    if not w3.is_connected():
        logger.error(f"  ✗ Cannot connect to {rpc_url}")
        return False

    chain_id = w3.eth.chain_id
    expected = config['networks'][config['network']].get('chain_id')

    if expected is not None and chain_id != expected:
        logger.error(f"  ✗ Chain id {chain_id}, expected {expected}")
        return False

    logger.success(f"  ✓ Connected (chain id {chain_id}, block {w3.eth.block_number})")
    return True


def check_deployer_balance(config):
    """Check the deployer can pay for gas"""
    logger.info("Checking deployer balance...")

    private_key = os.getenv('DEPLOYER_PRIVATE_KEY')
    if not private_key:
        logger.warning("  No deployer key - skipping balance check")
        return False

    w3 = Web3(Web3.HTTPProvider(RPCManager(config).rpc_url))
    address = Account.from_key(private_key).address
    balance = w3.from_wei(w3.eth.get_balance(address), 'ether')

    logger.info(f"  Balance: {balance:.4f} ETH")

    if balance < MIN_BALANCE_ETH:
        logger.error(f"  ✗ Balance low (need at least {MIN_BALANCE_ETH} ETH)")
        return False

    logger.success("  ✓ Balance sufficient")
    return True


def check_contract_artifacts(config):
    """Check the contract to deploy is compiled or compilable"""
    logger.info(f"Checking artifacts for {config['contract_name']}...")

    store = ArtifactStore(
        config['contracts_dir'],
        config['artifacts_dir'],
        config['solc_version']
    )

    if store.needs_compile():
        logger.warning("  Sources changed since last compile (will compile on deploy)")
        return True

    try:
        artifact = store.load(config['contract_name'])
    except DeploymentError as e:
        logger.error(f"  ✗ {e}")
        return False

    logger.success(f"  ✓ {artifact.name} ({artifact.path})")
    return True


def main():
    """Run all setup checks"""
    logger.info("=" * 70)
    logger.info("Deployment Setup Check")
    logger.info("=" * 70)

    try:
        config = load_config()
    except DeploymentError as e:
        logger.error(f"Configuration invalid: {e}")
        return 1

    checks = [
        ("Environment Variables", check_environment_variables),
        ("RPC Connection", check_rpc_connection),
        ("Deployer Balance", check_deployer_balance),
        ("Contract Artifacts", check_contract_artifacts)
    ]

    results = []

    for name, check_func in checks:
        logger.info("")
        try:
            result = check_func(config)
            results.append((name, result))
        except Exception as e:
            logger.error(f"Error in {name}: {e}")
            results.append((name, False))

    # Summary
    logger.info("")
    logger.info("=" * 70)
    logger.info("Summary")
    logger.info("=" * 70)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for name, result in results:
        status = "✓ PASS" if result else "✗ FAIL"
        logger.info(f"  {status}: {name}")

    logger.info("")
    logger.info(f"Total: {passed}/{total} checks passed")

    if passed == total:
        logger.success("✅ Ready to deploy: python deploy.py")
        return 0

    logger.error("❌ Setup not ready - fix issues above")
    return 1


if __name__ == "__main__":
    sys.exit(main())
