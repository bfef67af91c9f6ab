"""
Deployment Exceptions
Every failure surfaced by a deployment derives from DeploymentError
"""


class DeploymentError(Exception):
    """Deployment could not be completed"""


class ContractNotFoundError(DeploymentError):
    """No compiled artifact exists for the requested contract name"""

    def __init__(self, contract_name: str):
        self.contract_name = contract_name
        super().__init__(f'Artifact for contract "{contract_name}" not found.')


class CompilationError(DeploymentError):
    """Solidity compiler reported errors"""


class ConfigurationError(DeploymentError):
    """Missing or invalid deployment configuration"""
