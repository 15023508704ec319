"""
Deployment Errors
Exception hierarchy raised by the deployment run
"""

from typing import Optional


class DeploymentError(Exception):
    """Base class for all deployment failures"""


class ConfigurationError(DeploymentError, ValueError):
    """Invalid or missing configuration (network, accounts, addresses, amounts)"""


class NetworkConnectionError(DeploymentError):
    """RPC endpoint could not be reached"""


class TransactionFailedError(DeploymentError):
    """A mined transaction reverted (receipt status 0)"""

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        super().__init__(message)
        self.tx_hash = tx_hash


class InsufficientBalanceError(DeploymentError):
    """Sender cannot cover value plus maximum gas cost"""
