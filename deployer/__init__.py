"""
Deployer Package
Runs and records SupplyChainTracker deployments
"""

from .config import DeployerConfig, NetworkConfig
from .models import DeploymentResult, DeploymentOutcome
from .record_store import DeploymentRecordStore
from .runner import DeploymentRunner, create_runner

__all__ = [
    'DeployerConfig',
    'NetworkConfig',
    'DeploymentResult',
    'DeploymentOutcome',
    'DeploymentRecordStore',
    'DeploymentRunner',
    'create_runner'
]
