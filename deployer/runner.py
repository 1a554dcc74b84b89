"""
Deployment Runner
Deploys SupplyChainTracker and smoke-tests the new instance
"""

from typing import Callable, Optional
from web3 import AsyncWeb3
from loguru import logger

from blockchain.errors import DeploymentError
from blockchain.network_provider import NetworkProvider
from blockchain.contract_factory import ArtifactLoader, ContractFactory
from blockchain.transaction_builder import TransactionBuilder
from .config import DeployerConfig, NetworkConfig, CONTRACT_NAME
from .models import DeploymentOutcome, DeploymentResult, utc_timestamp
from .record_store import DeploymentRecordStore


class DeploymentRunner:
    """
    Runs one deployment as a linear sequence of network calls.
    Any failure ends the run; nothing is retried or rolled back.
    """

    def __init__(
        self,
        provider,
        factory_loader: Callable,
        network: NetworkConfig,
        contract_name: str = CONTRACT_NAME,
        record_store: Optional[DeploymentRecordStore] = None
    ):
        """
        Initialize Deployment Runner

        Args:
            provider: Network provider (get_signer, get_balance, format_ether)
            factory_loader: Callable (contract_name, signer) -> contract factory
            network: Target network details
            contract_name: Compiled contract to deploy
            record_store: Optional store the result is saved to
        """
        self.provider = provider
        self.factory_loader = factory_loader
        self.network = network
        self.contract_name = contract_name
        self.record_store = record_store

    async def run(self) -> DeploymentOutcome:
        """
        Execute the deployment

        Returns:
            DeploymentOutcome carrying the result or the error that stopped the run
        """
        step = 'connect'

        try:
            logger.info(f"Deploying {self.contract_name} to {self.network.display_name}...")

            signer = await self.provider.get_signer()
            logger.info(f"Deploying contracts with the account: {signer.address}")

            step = 'balance'
            balance = await self.provider.get_balance(signer.address)
            logger.info(
                f"Account balance: {self.provider.format_ether(balance)} {self.network.currency_symbol}"
            )

            step = 'artifact'
            factory = self.factory_loader(self.contract_name, signer)

            step = 'deploy'
            logger.info(f"Deploying {self.contract_name} contract...")
            contract = await factory.deploy()

            step = 'confirm'
            logger.info("Waiting for confirmation...")
            await contract.wait_for_deployment()

            contract_address = await contract.get_address()
            logger.success(f"{self.contract_name} deployed to: {contract_address}")

            explorer_link = self.network.address_url(contract_address)
            if explorer_link:
                logger.info(f"Explorer: {explorer_link}")

            step = 'verify'
            logger.info("Verifying deployment...")
            owner = await contract.owner()
            logger.info(f"Contract owner: {owner}")
            logger.info(f"Product counter: {await contract.product_counter()}")

            if str(owner).lower() != signer.address.lower():
                logger.warning(f"Contract owner {owner} differs from deployer {signer.address}")

            result = DeploymentResult(
                network=self.network.name,
                contract_address=contract_address,
                deployer_address=signer.address,
                transaction_hash=contract.deployment_transaction,
                timestamp=utc_timestamp()
            )

        except DeploymentError as e:
            logger.error(f"Deployment failed at step '{e.step}': {e!r}")
            return DeploymentOutcome.failure(e)

        except Exception as e:
            error = DeploymentError(f"Unexpected error: {e}", step=step)
            error.__cause__ = e
            logger.opt(exception=e).error(f"Deployment failed at step '{step}': {e!r}")
            return DeploymentOutcome.failure(error)

        self._log_summary(result)

        if self.record_store is not None:
            self.record_store.save(result)

        logger.success("Deployment completed successfully!")
        logger.info(f"Save this contract address for future interactions: {result.contract_address}")

        return DeploymentOutcome.success(result)

    def _log_summary(self, result: DeploymentResult):
        logger.info("=== Deployment Summary ===")
        logger.info(f"Network: {self.network.display_name}")
        logger.info(f"Contract Address: {result.contract_address}")
        logger.info(f"Deployer Address: {result.deployer_address}")
        logger.info(f"Transaction Hash: {result.transaction_hash}")


def create_runner(config: DeployerConfig, w3: Optional[AsyncWeb3] = None) -> DeploymentRunner:
    """
    Wire the web3-backed collaborators for a configuration

    Args:
        config: Loaded deployer configuration
        w3: Pre-built AsyncWeb3 instance (None = HTTP provider for the network)

    Returns:
        DeploymentRunner ready to run
    """
    network = config.network
    provider = NetworkProvider(
        network.rpc_url,
        chain_id=network.chain_id,
        private_key=config.private_key,
        w3=w3
    )
    loader = ArtifactLoader(config.artifacts_dir)
    builder = TransactionBuilder(provider.w3, network.chain_id, gas_buffer=config.gas_buffer)

    def factory_loader(contract_name, signer):
        return ContractFactory.from_artifact(
            loader,
            contract_name,
            provider.w3,
            signer,
            builder,
            confirmation_timeout=config.confirmation_timeout
        )

    record_store = DeploymentRecordStore(config.output_file) if config.output_file else None

    return DeploymentRunner(
        provider,
        factory_loader,
        network,
        contract_name=config.contract_name,
        record_store=record_store
    )
