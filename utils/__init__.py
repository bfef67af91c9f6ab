"""
Utilities Package
Configuration loading and RPC connection management
"""

from .config import load_config
from .rpc_manager import RPCManager

__all__ = [
    'load_config',
    'RPCManager'
]
