"""
Adapters - Colaboradores externos (registro de seguradoras)
"""

from cipherscore_core.adapters.registry import RequesterRegistry, RegisteredRequester

__all__ = ['RequesterRegistry', 'RegisteredRequester']
