"""
Contract Factory
Resolves compiled contracts by name and deploys new instances of them

The orchestrator only depends on the Protocol classes below; the Web3*
classes are the implementation used against a live node.
"""

import asyncio
from typing import Optional, Protocol
from web3 import AsyncWeb3
from web3.exceptions import TimeExhausted, Web3Exception
from loguru import logger

from .artifacts import ArtifactStore, ContractArtifact
from .exceptions import DeploymentError
from .transaction_builder import TransactionBuilder


class Deployment(Protocol):
    address: str

    async def wait_for_deployment(self) -> 'Deployment': ...


class ContractFactory(Protocol):
    async def deploy(self, *args) -> Deployment: ...


class ContractFactoryProvider(Protocol):
    async def get_contract_factory(self, name: str) -> ContractFactory: ...


class DeploymentHandle:
    """
    A requested contract deployment

    Lifecycle: pending -> confirmed | failed. The address is only
    available once confirmed.
    """

    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    FAILED = 'failed'

    def __init__(
        self,
        w3: AsyncWeb3,
        contract_name: str,
        tx_hash: bytes,
        timeout: float = 120
    ):
        self.w3 = w3
        self.contract_name = contract_name
        self.tx_hash = tx_hash
        self.timeout = timeout
        self.status = self.PENDING
        self.receipt = None
        self._address: Optional[str] = None

    @property
    def address(self) -> str:
        if self.status != self.CONFIRMED:
            raise DeploymentError(
                f"{self.contract_name} deployment is {self.status}, address not assigned"
            )
        return self._address

    async def wait_for_deployment(self) -> 'DeploymentHandle':
        """
        Wait until the creation transaction is mined

        Returns:
            self, confirmed

        Raises:
            DeploymentError: Timeout, RPC failure or reverted transaction
        """
        if self.status == self.CONFIRMED:
            return self

        logger.info(f"Waiting for confirmation of {self.w3.to_hex(self.tx_hash)}...")

        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(
                self.tx_hash,
                timeout=self.timeout
            )
        except (TimeExhausted, asyncio.TimeoutError) as e:
            self.status = self.FAILED
            raise DeploymentError(
                f"{self.contract_name} deployment not confirmed within {self.timeout}s"
            ) from e
        except (Web3Exception, ValueError) as e:
            self.status = self.FAILED
            raise DeploymentError(f"Error waiting for receipt: {e}") from e

        self.receipt = receipt

        if receipt['status'] != 1 or not receipt.get('contractAddress'):
            self.status = self.FAILED
            raise DeploymentError(
                f"{self.contract_name} deployment reverted (tx {self.w3.to_hex(self.tx_hash)})"
            )

        self._address = receipt['contractAddress']
        self.status = self.CONFIRMED

        logger.success(f"{self.contract_name} confirmed in block {receipt['blockNumber']}")
        logger.info(f"Gas used: {receipt['gasUsed']}")
        return self


class Web3ContractFactory:
    """
    Deploys instances of one compiled contract
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        artifact: ContractArtifact,
        wallet_manager,
        tx_builder: TransactionBuilder,
        confirmation_timeout: float = 120
    ):
        self.w3 = w3
        self.artifact = artifact
        self.wallet_manager = wallet_manager
        self.tx_builder = tx_builder
        self.confirmation_timeout = confirmation_timeout
        self.contract = w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)

    async def deploy(self, *args) -> DeploymentHandle:
        """
        Sign and submit the creation transaction

        Args:
            *args: Constructor arguments

        Returns:
            Pending deployment handle
        """
        try:
            tx = await self.tx_builder.build_deployment_tx(
                self.contract,
                self.wallet_manager.address,
                args
            )
            signed_tx = self.wallet_manager.sign_transaction(tx)
            tx_hash = await self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        except DeploymentError:
            raise
        except (Web3Exception, ValueError) as e:
            raise DeploymentError(f"Error deploying {self.artifact.name}: {e}") from e

        logger.info(f"Transaction sent: {self.w3.to_hex(tx_hash)}")

        return DeploymentHandle(
            self.w3,
            self.artifact.name,
            tx_hash,
            timeout=self.confirmation_timeout
        )


class Web3ContractFactoryProvider:
    """
    Resolves contract factories from the artifact store, compiling first
    when sources changed
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        artifact_store: ArtifactStore,
        wallet_manager,
        tx_builder: TransactionBuilder = None,
        confirmation_timeout: float = 120
    ):
        self.w3 = w3
        self.artifact_store = artifact_store
        self.wallet_manager = wallet_manager
        self.tx_builder = tx_builder or TransactionBuilder(w3)
        self.confirmation_timeout = confirmation_timeout

    async def get_contract_factory(self, name: str) -> Web3ContractFactory:
        """
        Get factory for a compiled contract

        Raises:
            ContractNotFoundError: Contract is not compiled
        """
        # solc is a blocking subprocess call
        await asyncio.to_thread(self.artifact_store.compile)

        artifact = self.artifact_store.load(name)
        logger.debug(f"Resolved {name} from {artifact.path}")

        return Web3ContractFactory(
            self.w3,
            artifact,
            self.wallet_manager,
            self.tx_builder,
            confirmation_timeout=self.confirmation_timeout
        )
