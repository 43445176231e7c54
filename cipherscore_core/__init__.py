"""
CipherScore Core - Score de risco de saúde sobre dados criptografados

O score é calculado apenas com operações homomórficas (soma, multiplicação,
comparação escalar e select sem desvio). Ninguém vê os atributos em claro,
e a seguradora só lê o score depois que o titular concede permissão.

Uso básico:
    from cipherscore_core import RiskScoreService, SimulatedArithmetic

    service = RiskScoreService(engine=SimulatedArithmetic())
    service.register_requester("insurer-1", "Acme Seguros")
"""

__version__ = "0.1.0"

from cipherscore_core.config import CipherScoreConfig
from cipherscore_core.errors import (
    CipherScoreError,
    ValidationError,
    StateError,
    AuthorizationError,
)
from cipherscore_core.arithmetic import Ciphertext, HomomorphicArithmetic, SimulatedArithmetic
from cipherscore_core.models.record import EncryptedHealthRecord, RecordKey, ATTRIBUTE_NAMES
from cipherscore_core.scoring import WeightConfig, ScoringFactors, ScoringPipeline, ScoringResult
from cipherscore_core.access import CapabilityManager
from cipherscore_core.lifecycle import RecordLifecycle, RecordState
from cipherscore_core.adapters import RequesterRegistry
from cipherscore_core.storage import EncryptedRecordStore, EventLogger
from cipherscore_core.service import RiskScoreService

__all__ = [
    'CipherScoreConfig',
    'CipherScoreError',
    'ValidationError',
    'StateError',
    'AuthorizationError',
    'Ciphertext',
    'HomomorphicArithmetic',
    'SimulatedArithmetic',
    'EncryptedHealthRecord',
    'RecordKey',
    'ATTRIBUTE_NAMES',
    'WeightConfig',
    'ScoringFactors',
    'ScoringPipeline',
    'ScoringResult',
    'CapabilityManager',
    'RecordLifecycle',
    'RecordState',
    'RequesterRegistry',
    'EncryptedRecordStore',
    'EventLogger',
    'RiskScoreService',
]
