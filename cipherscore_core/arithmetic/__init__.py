"""
Arithmetic - Interface do motor homomórfico e motor simulado
"""

from cipherscore_core.arithmetic.base import (
    Ciphertext,
    HomomorphicArithmetic,
    ArithmeticEngineError,
    ProofRejected,
    UnknownCiphertext,
    DecryptionDenied,
)
from cipherscore_core.arithmetic.simulated import SimulatedArithmetic

__all__ = [
    'Ciphertext',
    'HomomorphicArithmetic',
    'ArithmeticEngineError',
    'ProofRejected',
    'UnknownCiphertext',
    'DecryptionDenied',
    'SimulatedArithmetic',
]
