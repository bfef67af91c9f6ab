"""
Contract Deployment - Main Entry Point
Compiles and deploys the configured contract, then prints its address
"""

import asyncio
import sys
from loguru import logger

from blockchain.artifacts import ArtifactStore
from blockchain.contract_factory import Web3ContractFactoryProvider
from blockchain.transaction_builder import TransactionBuilder
from deployer.orchestrator import DeploymentOrchestrator
from deployer.wallet_manager import WalletManager
from utils.config import load_config
from utils.rpc_manager import RPCManager


def configure_logging():
    """stderr at INFO, rotating file at DEBUG; stdout stays reserved for status lines"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level="INFO"
    )
    logger.add(
        "data/logs/deploy.log",
        rotation="1 day",
        retention="7 days",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
        level="DEBUG"
    )


async def build_provider(config, rpc_manager: RPCManager) -> Web3ContractFactoryProvider:
    """Wire the Web3-backed contract factory provider from configuration"""
    w3 = await rpc_manager.connect()
    wallet_manager = WalletManager()

    balance = await wallet_manager.get_balance(w3)
    logger.info(f"Deployer balance: {balance} ETH")

    artifact_store = ArtifactStore(
        config['contracts_dir'],
        config['artifacts_dir'],
        config['solc_version']
    )
    tx_builder = TransactionBuilder(
        w3,
        gas_buffer=config['gas_buffer'],
        default_gas_limit=config['default_gas_limit']
    )

    return Web3ContractFactoryProvider(
        w3,
        artifact_store,
        wallet_manager,
        tx_builder,
        confirmation_timeout=config['confirmation_timeout']
    )


class NetworkContractFactoryProvider:
    """
    Connects, loads the deployer wallet and builds the Web3 provider on the
    first factory request, after the orchestrator has announced the deployment
    """

    def __init__(self, config, rpc_manager: RPCManager):
        self.config = config
        self.rpc_manager = rpc_manager
        self.provider = None

    async def get_contract_factory(self, name: str):
        if self.provider is None:
            self.provider = await build_provider(self.config, self.rpc_manager)

        return await self.provider.get_contract_factory(name)


async def main(config_path: str = None) -> int:
    """
    Run one deployment

    Returns:
        Process exit code
    """
    rpc_manager = None

    try:
        config = load_config(config_path)
        rpc_manager = RPCManager(config)

        orchestrator = DeploymentOrchestrator(
            NetworkContractFactoryProvider(config, rpc_manager),
            contract_name=config['contract_name'],
            constructor_args=config['constructor_args']
        )
        return await orchestrator.run()

    except Exception as e:
        logger.opt(exception=e).error(f"Deployment configuration invalid: {e}")
        return 1

    finally:
        if rpc_manager is not None:
            await rpc_manager.disconnect()


def cli():
    configure_logging()
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
