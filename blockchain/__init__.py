"""
Blockchain Interaction Package
Handles compilation artifacts, contract factories and transaction building
"""

from .artifacts import ArtifactStore, ContractArtifact
from .contract_factory import DeploymentHandle, Web3ContractFactory, Web3ContractFactoryProvider
from .exceptions import CompilationError, ConfigurationError, ContractNotFoundError, DeploymentError
from .transaction_builder import TransactionBuilder

__all__ = [
    'ArtifactStore',
    'ContractArtifact',
    'DeploymentHandle',
    'Web3ContractFactory',
    'Web3ContractFactoryProvider',
    'CompilationError',
    'ConfigurationError',
    'ContractNotFoundError',
    'DeploymentError',
    'TransactionBuilder'
]
