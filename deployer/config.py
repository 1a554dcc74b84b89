"""
Deployer Configuration
Loads network definitions from config/networks.json and runtime settings from .env
"""

import os
import json
from dataclasses import dataclass
from typing import Dict, Optional
from loguru import logger
from dotenv import load_dotenv

from blockchain.errors import ConfigurationError

load_dotenv()

DEFAULT_CONFIG_PATH = 'config/networks.json'
CONTRACT_NAME = 'SupplyChainTracker'


@dataclass(frozen=True)
class NetworkConfig:
    """Connection details for a single EVM network"""
    name: str
    display_name: str
    rpc_url: str
    chain_id: int
    currency_symbol: str
    explorer_url: Optional[str] = None

    def address_url(self, address: str) -> Optional[str]:
        if not self.explorer_url:
            return None
        return f"{self.explorer_url.rstrip('/')}/address/{address}"


@dataclass(frozen=True)
class DeployerConfig:
    """Settings for a deployment run"""
    network: NetworkConfig
    contract_name: str = CONTRACT_NAME
    artifacts_dir: str = 'artifacts'
    private_key: Optional[str] = None
    confirmation_timeout: float = 120.0
    gas_buffer: float = 1.2
    output_file: Optional[str] = None

    @classmethod
    def load(
        cls,
        config_path: str = DEFAULT_CONFIG_PATH,
        env: Optional[Dict[str, str]] = None
    ) -> 'DeployerConfig':
        """
        Build configuration from the networks file and environment

        Args:
            config_path: Path to networks JSON file
            env: Environment mapping (defaults to os.environ)

        Returns:
            DeployerConfig instance
        """
        env = os.environ if env is None else env

        try:
            with open(config_path, 'r') as f:
                raw = json.load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"Network config not found: {config_path}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid network config {config_path}: {e}")

        network_name = env.get('DEPLOY_NETWORK') or raw.get('default_network', 'core_testnet2')
        network = load_network(raw, network_name, env)

        try:
            confirmation_timeout = float(env.get('CONFIRMATION_TIMEOUT') or 120)
            gas_buffer = float(env.get('GAS_BUFFER') or 1.2)
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}")

        if gas_buffer < 1.0:
            raise ConfigurationError(f"GAS_BUFFER must be >= 1.0, got {gas_buffer}")

        config = cls(
            network=network,
            artifacts_dir=env.get('ARTIFACTS_DIR') or 'artifacts',
            private_key=env.get('DEPLOYER_PRIVATE_KEY') or None,
            confirmation_timeout=confirmation_timeout,
            gas_buffer=gas_buffer,
            output_file=env.get('DEPLOYMENT_OUTPUT_FILE') or None
        )

        logger.debug(f"Loaded config for network {network.name} (chain {network.chain_id})")
        return config


def load_network(raw: Dict, network_name: str, env: Dict[str, str]) -> NetworkConfig:
    """Resolve one network entry, applying its RPC URL override from env"""
    networks = raw.get('networks', {})

    if network_name not in networks:
        raise ConfigurationError(
            f"Unknown network '{network_name}' (available: {', '.join(sorted(networks))})"
        )

    entry = networks[network_name]
    rpc_url = env.get(entry.get('rpc_url_env', '')) or entry.get('rpc_url')

    if not rpc_url:
        raise ConfigurationError(f"No RPC URL configured for network '{network_name}'")

    return NetworkConfig(
        name=network_name,
        display_name=entry.get('name', network_name),
        rpc_url=rpc_url,
        chain_id=int(entry['chain_id']),
        currency_symbol=entry.get('currency_symbol', 'ETH'),
        explorer_url=entry.get('explorer_url')
    )
