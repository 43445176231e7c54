"""
Models - Modelos de dados do sistema
"""

from cipherscore_core.models.record import (
    ATTRIBUTE_NAMES,
    PLAINTEXT_BOUNDS,
    RecordKey,
    EncryptedAttributes,
    EncryptedHealthRecord,
    check_plaintext_bounds,
    ordered_values,
)

__all__ = [
    'ATTRIBUTE_NAMES',
    'PLAINTEXT_BOUNDS',
    'RecordKey',
    'EncryptedAttributes',
    'EncryptedHealthRecord',
    'check_plaintext_bounds',
    'ordered_values',
]
