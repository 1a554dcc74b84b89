"""
Deployment Models
Immutable records produced by a deployment run
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional

from blockchain.errors import DeploymentError


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision"""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass(frozen=True)
class DeploymentResult:
    """Summary of a confirmed contract deployment"""
    network: str
    contract_address: str
    deployer_address: str
    transaction_hash: str
    timestamp: str

    def to_dict(self) -> Dict[str, str]:
        return {
            'network': self.network,
            'contractAddress': self.contract_address,
            'deployer': self.deployer_address,
            'deploymentHash': self.transaction_hash,
            'timestamp': self.timestamp
        }


@dataclass(frozen=True)
class DeploymentOutcome:
    """
    Tagged result of a run: exactly one of `result` or `error` is set.
    Only the process entry point turns this into an exit code.
    """
    result: Optional[DeploymentResult] = None
    error: Optional[DeploymentError] = None

    def __post_init__(self):
        if (self.result is None) == (self.error is None):
            raise ValueError("DeploymentOutcome needs exactly one of result or error")

    @classmethod
    def success(cls, result: DeploymentResult) -> 'DeploymentOutcome':
        return cls(result=result)

    @classmethod
    def failure(cls, error: DeploymentError) -> 'DeploymentOutcome':
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.result is not None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1
