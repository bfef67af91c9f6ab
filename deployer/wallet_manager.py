"""
Wallet Manager
Loads the deployer account and signs its transactions
"""

import os
from typing import Dict
from decimal import Decimal
from web3 import AsyncWeb3
from eth_account import Account
from loguru import logger
from dotenv import load_dotenv

from blockchain.exceptions import ConfigurationError

load_dotenv()


class WalletManager:
    """
    Holds the deployer account read from DEPLOYER_PRIVATE_KEY
    """

    def __init__(self, private_key: str = None):
        """
        Initialize wallet manager

        Args:
            private_key: Hex private key (None = read DEPLOYER_PRIVATE_KEY)
        """
        private_key = private_key or os.getenv('DEPLOYER_PRIVATE_KEY')

        if not private_key:
            raise ConfigurationError("DEPLOYER_PRIVATE_KEY must be set in .env")

        try:
            self.account = Account.from_key(private_key)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(f"Invalid DEPLOYER_PRIVATE_KEY: {e}") from e

        self.address = self.account.address

        logger.info(f"Deployer wallet: {self.address}")

    def sign_transaction(self, transaction: Dict):
        """
        Sign a transaction with the deployer key

        Args:
            transaction: Transaction dict

        Returns:
            Signed transaction
        """
        try:
            return self.account.sign_transaction(transaction)
        except Exception as e:
            logger.error(f"Error signing transaction: {e}")
            raise

    async def get_balance(self, w3: AsyncWeb3) -> Decimal:
        """Deployer balance in ether"""
        balance_wei = await w3.eth.get_balance(self.address)
        return w3.from_wei(balance_wei, 'ether')
