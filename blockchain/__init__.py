"""
Blockchain Interaction Package
Handles network connection, contract artifacts and deployment transactions
"""

from .network_provider import NetworkProvider, Signer
from .contract_factory import ArtifactLoader, ContractFactory, DeployedContract
from .transaction_builder import TransactionBuilder
from .errors import (
    DeploymentError,
    ConfigurationError,
    ProviderConnectionError,
    QueryError,
    ArtifactNotFoundError,
    TransactionError,
    ConfirmationTimeoutError,
    RevertError
)

__all__ = [
    'NetworkProvider',
    'Signer',
    'ArtifactLoader',
    'ContractFactory',
    'DeployedContract',
    'TransactionBuilder',
    'DeploymentError',
    'ConfigurationError',
    'ProviderConnectionError',
    'QueryError',
    'ArtifactNotFoundError',
    'TransactionError',
    'ConfirmationTimeoutError',
    'RevertError'
]
