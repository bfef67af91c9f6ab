"""
Deployment Orchestrator
Resolves a contract factory, deploys, waits for confirmation and reports
the address
"""

import sys
from typing import Sequence, TextIO
from loguru import logger

from blockchain.contract_factory import ContractFactoryProvider


class DeploymentOrchestrator:
    """
    Single-shot deployment of one named contract

    States: not_started -> deploying -> confirmed | failed
    """

    NOT_STARTED = 'not_started'
    DEPLOYING = 'deploying'
    CONFIRMED = 'confirmed'
    FAILED = 'failed'

    def __init__(
        self,
        provider: ContractFactoryProvider,
        contract_name: str = 'HelloWorld',
        constructor_args: Sequence = (),
        out: TextIO = None
    ):
        """
        Initialize orchestrator

        Args:
            provider: Contract factory provider
            contract_name: Name of the compiled contract to deploy
            constructor_args: Arguments passed to the contract constructor
            out: Stream for status lines (None = sys.stdout at call time)
        """
        self.provider = provider
        self.contract_name = contract_name
        self.constructor_args = tuple(constructor_args)
        self.out = out
        self.state = self.NOT_STARTED

    def _print(self, message: str):
        print(message, file=self.out or sys.stdout, flush=True)

    async def deploy(self) -> str:
        """
        Deploy the contract once

        Returns:
            Address of the deployed contract
        """
        self.state = self.DEPLOYING

        try:
            self._print("Compiling...")
            self._print(f"Deploying {self.contract_name} contract...")

            factory = await self.provider.get_contract_factory(self.contract_name)
            deployment = await factory.deploy(*self.constructor_args)
            await deployment.wait_for_deployment()
            address = deployment.address
        except Exception:
            self.state = self.FAILED
            raise

        self.state = self.CONFIRMED
        self._print(f"{self.contract_name} deployed to: {address}")
        return address

    async def run(self) -> int:
        """
        Deploy and map the outcome to a process exit code

        Returns:
            0 on success, 1 on any failure
        """
        try:
            await self.deploy()
        except Exception as e:
            logger.opt(exception=e).error(f"Deployment of {self.contract_name} failed: {e}")
            return 1

        return 0
