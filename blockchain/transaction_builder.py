"""
Transaction Builder
Constructs, signs and submits contract-creation transactions
"""

from typing import Dict
from web3 import AsyncWeb3
from loguru import logger

from .errors import TransactionError

DEFAULT_DEPLOY_GAS = 3000000


class TransactionBuilder:
    """
    Builds deployment transactions for a signer
    """

    def __init__(self, w3: AsyncWeb3, chain_id: int, gas_buffer: float = 1.2):
        """
        Initialize Transaction Builder

        Args:
            w3: AsyncWeb3 instance
            chain_id: Chain id stamped on every transaction
            gas_buffer: Multiplier applied to the gas estimate
        """
        self.w3 = w3
        self.chain_id = chain_id
        self.gas_buffer = gas_buffer

    async def build_deploy_tx(self, contract, signer, constructor_args=()) -> Dict:
        """
        Build a contract-creation transaction

        Args:
            contract: Web3 contract class bound to abi + bytecode
            signer: Signer that pays for the deployment
            constructor_args: Constructor arguments

        Returns:
            Transaction dict
        """
        constructor = contract.constructor(*constructor_args)

        try:
            gas_estimate = await constructor.estimate_gas({'from': signer.address})
            gas_limit = int(gas_estimate * self.gas_buffer)
        except Exception as e:
            logger.warning(f"Gas estimation failed: {e}, using default")
            gas_limit = DEFAULT_DEPLOY_GAS

        try:
            nonce = await self.w3.eth.get_transaction_count(signer.address, 'pending')
            gas_price = await self.w3.eth.gas_price

            tx = await constructor.build_transaction({
                'from': signer.address,
                'nonce': nonce,
                'gas': gas_limit,
                'gasPrice': gas_price,
                'chainId': self.chain_id
            })
        except Exception as e:
            raise TransactionError(f"Could not build deployment transaction: {e}")

        logger.info(f"Gas limit: {gas_limit}")
        logger.info(f"Gas price: {AsyncWeb3.from_wei(gas_price, 'gwei')} gwei")

        return tx

    async def send(self, tx: Dict, signer) -> str:
        """
        Sign (when the key is local) and submit a transaction

        Args:
            tx: Transaction dict
            signer: Signer authorizing the transaction

        Returns:
            Transaction hash as 0x-prefixed hex
        """
        try:
            if signer.is_local:
                signed_tx = signer.account.sign_transaction(tx)
                tx_hash = await self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
            else:
                tx_hash = await self.w3.eth.send_transaction(tx)
        except Exception as e:
            raise TransactionError(f"Deployment transaction rejected: {e}")

        tx_hash = AsyncWeb3.to_hex(tx_hash)
        logger.info(f"Transaction sent: {tx_hash}")
        return tx_hash
