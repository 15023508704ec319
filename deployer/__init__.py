"""
Deployment Package
Run engine, deploy configuration and deployer wallet
"""

from .deploy_config import DeployConfig
from .deploy_engine import DeploymentResult, DeploymentRunner
from .wallet_manager import WalletManager

__all__ = ['DeployConfig', 'DeploymentResult', 'DeploymentRunner', 'WalletManager']
