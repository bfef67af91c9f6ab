"""
RPC Manager
Resolves the target network and opens an async Web3 connection to it
"""

import os
from typing import Dict, Optional
from web3 import AsyncWeb3
from loguru import logger
from dotenv import load_dotenv

from blockchain.exceptions import ConfigurationError, DeploymentError

load_dotenv()


class RPCManager:
    """
    Network connection management

    Each configured network names the environment variable holding its
    RPC URL and, optionally, a fallback URL and the expected chain id.
    """

    def __init__(self, config: Dict, network: Optional[str] = None):
        """
        Initialize RPC Manager

        Args:
            config: Deployment configuration
            network: Network name (None = config['network'])
        """
        self.network_name = network or config['network']

        if self.network_name not in config['networks']:
            raise ConfigurationError(f"Unknown network '{self.network_name}'")

        self.network = config['networks'][self.network_name]
        self.rpc_url = self._resolve_rpc_url()
        self.w3 = None

        logger.info(f"RPC Manager initialized for network: {self.network_name}")

    def _resolve_rpc_url(self) -> str:
        """Get RPC URL from environment, falling back to the configured default"""
        env_name = self.network.get('rpc_url_env')
        rpc_url = os.getenv(env_name) if env_name else None

        if not rpc_url:
            rpc_url = self.network.get('default_rpc_url')

        if not rpc_url:
            raise ConfigurationError(
                f"No RPC URL for network '{self.network_name}' - set {env_name}"
            )

        return rpc_url

    async def connect(self) -> AsyncWeb3:
        """
        Open the connection and verify the chain id

        Returns:
            AsyncWeb3 instance
        """
        if self.w3 is not None:
            return self.w3

        w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(self.rpc_url))

        try:
            if not await w3.is_connected():
                raise DeploymentError(f"Failed to connect to {self.network_name} at {self.rpc_url}")

            expected_chain_id = self.network.get('chain_id')
            chain_id = await w3.eth.chain_id

            if expected_chain_id is not None and chain_id != expected_chain_id:
                raise DeploymentError(
                    f"Chain id mismatch on {self.network_name}: "
                    f"expected {expected_chain_id}, node reports {chain_id}"
                )
        except Exception:
            await w3.provider.disconnect()
            raise

        logger.success(f"Connected to {self.network_name} (chain id {chain_id})")

        self.w3 = w3
        return w3

    async def disconnect(self):
        """Close the provider's HTTP session"""
        if self.w3 is None:
            return

        await self.w3.provider.disconnect()
        self.w3 = None
        logger.debug(f"Disconnected from {self.network_name}")
