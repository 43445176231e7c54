"""
Access - Capabilities e mediação de leitura do score
"""

from cipherscore_core.access.capability import CapabilityManager

__all__ = ['CapabilityManager']
