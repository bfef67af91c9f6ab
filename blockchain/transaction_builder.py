"""
Transaction Builder
Constructs contract creation transactions
"""

from typing import Dict, Sequence
from web3 import AsyncWeb3
from loguru import logger


class TransactionBuilder:
    """
    Builds deployment transactions: nonce, gas limit, fee fields and chain id
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        gas_buffer: float = 1.2,
        default_gas_limit: int = 3000000
    ):
        """
        Initialize Transaction Builder

        Args:
            w3: AsyncWeb3 instance
            gas_buffer: Multiplier applied to the gas estimate
            default_gas_limit: Gas limit used when estimation fails
        """
        self.w3 = w3
        self.gas_buffer = gas_buffer
        self.default_gas_limit = default_gas_limit

    async def build_deployment_tx(
        self,
        contract,
        sender: str,
        constructor_args: Sequence = ()
    ) -> Dict:
        """
        Build transaction for contract creation

        Args:
            contract: Web3 contract class (abi + bytecode)
            sender: Deployer address
            constructor_args: Constructor arguments

        Returns:
            Transaction dict ready for signing
        """
        constructor = contract.constructor(*constructor_args)

        nonce = await self.w3.eth.get_transaction_count(sender, 'pending')
        chain_id = await self.w3.eth.chain_id
        gas_limit = await self._estimate_gas(constructor, sender)
        fees = await self._get_fee_fields()

        tx = await constructor.build_transaction({
            'from': sender,
            'nonce': nonce,
            'gas': gas_limit,
            'chainId': chain_id,
            **fees
        })

        max_price = fees.get('maxFeePerGas', fees.get('gasPrice', 0))
        cost = self.w3.from_wei(gas_limit * max_price, 'ether')

        logger.info(f"Gas limit: {gas_limit}")
        logger.info(f"Estimated max deployment cost: {cost} ETH")

        return tx

    async def _estimate_gas(self, constructor, sender: str) -> int:
        try:
            estimate = await constructor.estimate_gas({'from': sender})
            return int(estimate * self.gas_buffer)
        except Exception as e:
            logger.warning(f"Gas estimation failed: {e}, using default")
            return self.default_gas_limit

    async def _get_fee_fields(self) -> Dict:
        """EIP-1559 fee fields when the chain has a base fee, legacy gasPrice otherwise"""
        block = await self.w3.eth.get_block('latest')
        base_fee = block.get('baseFeePerGas')

        if base_fee is None:
            gas_price = await self.w3.eth.gas_price
            logger.info(f"Gas price: {self.w3.from_wei(gas_price, 'gwei')} gwei")
            return {'gasPrice': gas_price}

        tip = await self.w3.eth.max_priority_fee
        max_fee = base_fee * 2 + tip

        logger.info(
            f"Base fee: {self.w3.from_wei(base_fee, 'gwei')} gwei, "
            f"tip: {self.w3.from_wei(tip, 'gwei')} gwei"
        )
        return {
            'maxFeePerGas': max_fee,
            'maxPriorityFeePerGas': tip
        }
