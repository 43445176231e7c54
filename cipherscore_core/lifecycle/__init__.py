"""
Lifecycle - Máquina de estados dos registros
"""

from cipherscore_core.lifecycle.state_machine import (
    RecordLifecycle,
    RecordState,
    VALID_TRANSITIONS,
)

__all__ = ['RecordLifecycle', 'RecordState', 'VALID_TRANSITIONS']
