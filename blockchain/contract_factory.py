"""
Contract Factory
Loads compiled Hardhat artifacts and deploys contract instances
"""

import os
import glob
import json
from typing import Dict, List, Optional
from web3 import AsyncWeb3
from web3.exceptions import TimeExhausted
from loguru import logger

from .errors import (
    ArtifactNotFoundError,
    ConfirmationTimeoutError,
    QueryError,
    RevertError,
    TransactionError
)
from .transaction_builder import TransactionBuilder


class ArtifactLoader:
    """
    Reads compiled contract artifacts (abi + bytecode) from a Hardhat
    artifacts directory
    """

    def __init__(self, artifacts_dir: str = 'artifacts'):
        self.artifacts_dir = artifacts_dir

    def artifact_path(self, contract_name: str) -> str:
        """Conventional Hardhat path: contracts/<Name>.sol/<Name>.json"""
        return os.path.join(
            self.artifacts_dir,
            'contracts',
            f"{contract_name}.sol",
            f"{contract_name}.json"
        )

    def _find_artifact(self, contract_name: str) -> Optional[str]:
        path = self.artifact_path(contract_name)
        if os.path.exists(path):
            return path

        # Contract declared in a differently named source file
        pattern = os.path.join(self.artifacts_dir, 'contracts', '**', f"{contract_name}.json")
        matches = sorted(glob.glob(pattern, recursive=True))
        return matches[0] if matches else None

    def load(self, contract_name: str) -> Dict:
        """
        Load a compiled artifact

        Args:
            contract_name: Contract name as declared in Solidity

        Returns:
            Dict with 'abi' and 'bytecode'
        """
        path = self._find_artifact(contract_name)

        if path is None:
            raise ArtifactNotFoundError(
                f"Contract artifact not found: {self.artifact_path(contract_name)} "
                f"(run 'npx hardhat compile' first)"
            )

        try:
            with open(path, 'r') as f:
                contract_json = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ArtifactNotFoundError(f"Could not read artifact {path}: {e}")

        abi = contract_json.get('abi')
        bytecode = contract_json.get('bytecode')

        if not abi or not bytecode or bytecode == '0x':
            raise ArtifactNotFoundError(f"Artifact {path} has no abi or bytecode")

        logger.debug(f"Loaded artifact {path}")
        return {'abi': abi, 'bytecode': bytecode}


class DeployedContract:
    """
    Handle to a contract whose creation transaction has been submitted
    """

    def __init__(self, w3: AsyncWeb3, abi: List[Dict], tx_hash: str, timeout: float = 120):
        """
        Initialize Deployed Contract

        Args:
            w3: AsyncWeb3 instance
            abi: Contract ABI
            tx_hash: Creation transaction hash
            timeout: Seconds to wait for the receipt
        """
        self.w3 = w3
        self.abi = abi
        self.deployment_transaction = tx_hash
        self.timeout = timeout
        self.address = None
        self.receipt = None
        self._contract = None

    async def wait_for_deployment(self) -> 'DeployedContract':
        """Block until the creation transaction is mined"""
        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(
                self.deployment_transaction,
                timeout=self.timeout
            )
        except TimeExhausted:
            raise ConfirmationTimeoutError(
                f"Transaction {self.deployment_transaction} not mined within {self.timeout}s"
            )
        except Exception as e:
            raise QueryError(
                f"Error waiting for transaction {self.deployment_transaction}: {e}",
                step='confirm'
            )

        if receipt['status'] != 1:
            raise RevertError(
                f"Deployment reverted: {self.deployment_transaction}",
                tx_hash=self.deployment_transaction
            )

        self.receipt = receipt
        self.address = receipt['contractAddress']
        self._contract = self.w3.eth.contract(address=self.address, abi=self.abi)

        logger.debug(f"Gas used: {receipt['gasUsed']}")
        return self

    async def get_address(self) -> str:
        if self.address is None:
            raise TransactionError("Contract address unknown until the deployment is confirmed")
        return self.address

    async def _call(self, function_name: str):
        if self._contract is None:
            raise QueryError(f"Cannot call {function_name}() before deployment is confirmed")

        try:
            return await self._contract.functions[function_name]().call()
        except Exception as e:
            raise QueryError(f"{function_name}() call failed: {e}", step='verify')

    async def owner(self) -> str:
        """Contract owner"""
        return await self._call('owner')

    async def product_counter(self) -> int:
        """Number of products registered"""
        return await self._call('productCounter')


class ContractFactory:
    """
    Deploys instances of one compiled contract from a signer
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        abi: List[Dict],
        bytecode: str,
        signer,
        builder: TransactionBuilder,
        confirmation_timeout: float = 120
    ):
        self.w3 = w3
        self.abi = abi
        self.bytecode = bytecode
        self.signer = signer
        self.builder = builder
        self.confirmation_timeout = confirmation_timeout

    @classmethod
    def from_artifact(
        cls,
        loader: ArtifactLoader,
        contract_name: str,
        w3: AsyncWeb3,
        signer,
        builder: TransactionBuilder,
        confirmation_timeout: float = 120
    ) -> 'ContractFactory':
        artifact = loader.load(contract_name)
        return cls(
            w3,
            artifact['abi'],
            artifact['bytecode'],
            signer,
            builder,
            confirmation_timeout=confirmation_timeout
        )

    async def deploy(self, *constructor_args) -> DeployedContract:
        """
        Submit the creation transaction

        Returns:
            DeployedContract (not yet confirmed)
        """
        contract = self.w3.eth.contract(abi=self.abi, bytecode=self.bytecode)

        logger.info("Building deployment transaction...")
        tx = await self.builder.build_deploy_tx(contract, self.signer, constructor_args)

        logger.info("Sending deployment transaction...")
        tx_hash = await self.builder.send(tx, self.signer)

        return DeployedContract(self.w3, self.abi, tx_hash, timeout=self.confirmation_timeout)
