"""
Deployer Core Package
Handles deployment orchestration and the deployer wallet
"""

from .orchestrator import DeploymentOrchestrator
from .wallet_manager import WalletManager

__all__ = ['DeploymentOrchestrator', 'WalletManager']
