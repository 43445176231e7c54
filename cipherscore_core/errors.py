"""
================================================================================
                CIPHERSCORE CORE - Error Taxonomy (errors.py)
================================================================================
Classificação de todos os erros que o núcleo pode levantar.

CATEGORIAS:
1. Validation    - entrada rejeitada antes de qualquer escrita
2. State         - ordem do ciclo de vida violada
3. Authorization - leitura negada pelo CapabilityManager

Nenhum erro é "recuperável" internamente: o núcleo nunca tenta de novo.
Corrigir e reenviar é responsabilidade de quem chamou.
================================================================================
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Categorias de erro"""
    VALIDATION = "VALIDATION"
    STATE = "STATE"
    AUTHORIZATION = "AUTHORIZATION"
    CONFIGURATION = "CONFIGURATION"


class CipherScoreError(Exception):
    """
    Erro base do CipherScore.

    Attributes:
        message: Mensagem legível
        subject_id: Titular dos dados envolvido (se houver)
        requester_id: Seguradora envolvida (se houver)
        details: Dados adicionais para log
    """

    category: ErrorCategory = ErrorCategory.VALIDATION
    default_message = "CipherScore error"

    def __init__(
        self,
        message: Optional[str] = None,
        subject_id: Optional[str] = None,
        requester_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        self.subject_id = subject_id
        self.requester_id = requester_id
        self.details = details or {}
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        """Converte para dicionário JSON-serializável"""
        return {
            'code': self.code,
            'category': self.category.value,
            'message': self.message,
            'subject_id': self.subject_id,
            'requester_id': self.requester_id,
            'details': self.details,
        }


# ============================================================================
#                          VALIDATION
# ============================================================================

class ValidationError(CipherScoreError):
    category = ErrorCategory.VALIDATION
    default_message = "Invalid input"


class UnregisteredRequester(ValidationError):
    default_message = "Insurance company not registered"


class InvalidProof(ValidationError):
    default_message = "Input proof could not be verified"


class MalformedSubmission(ValidationError):
    default_message = "Submission must carry exactly twelve encrypted attributes"


class AttributeOutOfRange(ValidationError):
    default_message = "Attribute outside accepted plaintext bounds"


class RegistrationError(ValidationError):
    default_message = "Requester registration rejected"


# ============================================================================
#                          STATE
# ============================================================================

class StateError(CipherScoreError):
    category = ErrorCategory.STATE
    default_message = "Invalid lifecycle transition"


class AlreadySubmitted(StateError):
    default_message = "Data already submitted"


class NoDataSubmitted(StateError):
    default_message = "No health data submitted"


class AlreadyComputed(StateError):
    default_message = "Score already computed"


class ScoreNotComputed(StateError):
    default_message = "Risk score not computed"


# ============================================================================
#                          AUTHORIZATION
# ============================================================================

class AuthorizationError(CipherScoreError):
    category = ErrorCategory.AUTHORIZATION
    default_message = "Not authorized"


class NotAuthorized(AuthorizationError):
    default_message = "Not authorized to access risk score"


# ============================================================================
#                          CONFIGURATION
# ============================================================================

class ConfigurationError(CipherScoreError):
    category = ErrorCategory.CONFIGURATION
    default_message = "Invalid configuration"
