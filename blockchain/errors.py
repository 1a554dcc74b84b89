"""
Deployment Errors
Error taxonomy raised by the blockchain layer and handled by the runner
"""

from typing import Optional


class DeploymentError(Exception):
    """Base class for every failure of a deployment run"""

    step = 'deployment'

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        if step:
            self.step = step


class ConfigurationError(DeploymentError):
    """Missing or invalid network / runner configuration"""

    step = 'configuration'


class ProviderConnectionError(DeploymentError):
    """RPC endpoint unreachable or no signer available"""

    step = 'connect'


class QueryError(DeploymentError):
    """Read-only RPC call failed"""

    step = 'query'


class ArtifactNotFoundError(DeploymentError):
    """Compiled contract artifact is missing or incomplete"""

    step = 'artifact'


class TransactionError(DeploymentError):
    """Deployment transaction could not be built or submitted"""

    step = 'deploy'


class ConfirmationTimeoutError(DeploymentError):
    """Transaction was not mined within the confirmation timeout"""

    step = 'confirm'


class RevertError(DeploymentError):
    """Transaction was mined but reverted (receipt status 0)"""

    step = 'confirm'

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        super().__init__(message)
        self.tx_hash = tx_hash
