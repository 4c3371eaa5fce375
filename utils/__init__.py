"""
Utilities Package
Configuration loading and RPC connection management
"""

from .config_loader import load_config, get_rpc_url
from .rpc_manager import RPCManager

__all__ = ['load_config', 'get_rpc_url', 'RPCManager']
