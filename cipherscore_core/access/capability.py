"""
================================================================================
          CIPHERSCORE CORE - Capability Manager (access/capability.py)
================================================================================
Controla quem pode obter um handle utilizável do score de um titular.

Duas camadas precisam ficar em sincronia:
- a tabela booleana de capabilities (deste módulo)
- a ACL do motor homomórfico (mark_usable_by)
Só o booleano não basta: sem a ACL o handle é inerte para a seguradora.

Assimetria intencional:
- grant exige score calculado
- revoke é incondicional (revogar o que nunca foi concedido é no-op)
================================================================================
"""

from typing import Dict, Optional

from cipherscore_core.arithmetic.base import Ciphertext, HomomorphicArithmetic
from cipherscore_core.errors import NotAuthorized, ScoreNotComputed
from cipherscore_core.logger import get_logger
from cipherscore_core.models.record import RecordKey
from cipherscore_core.storage import event_logger as events
from cipherscore_core.storage.event_logger import EventLogger
from cipherscore_core.storage.record_store import EncryptedRecordStore


logger = get_logger('cipherscore.access')


class CapabilityManager:
    """
    Tabela de capabilities por RecordKey e mediação de leitura.
    """

    def __init__(
        self,
        store: EncryptedRecordStore,
        engine: HomomorphicArithmetic,
        event_logger: Optional[EventLogger] = None,
    ):
        self.store = store
        self.engine = engine
        self.event_logger = event_logger
        self._grants: Dict[RecordKey, bool] = {}

        # Estatísticas
        self.access_granted_count = 0
        self.access_denied_count = 0

    def has_permission(self, subject_id: str, requester_id: str) -> bool:
        return self._grants.get(RecordKey(subject_id, requester_id), False)

    # ========================================================================
    #                    GRANT / REVOKE
    # ========================================================================

    def grant(self, subject_id: str, requester_id: str):
        """
        Concede à seguradora acesso ao score do titular.

        Raises:
            ScoreNotComputed: ainda não existe score para o par
        """
        key = RecordKey(subject_id, requester_id)
        record = self.store.get(key)
        if record is None or not record.computed:
            raise ScoreNotComputed(subject_id=subject_id, requester_id=requester_id)

        self.engine.mark_usable_by(record.score, requester_id)
        self._grants[key] = True

        logger.info('capability_granted', subject_id=subject_id, requester_id=requester_id)
        if self.event_logger is not None:
            self.event_logger.log_event(
                events.RISK_SCORE_SENT,
                subject_id=subject_id,
                requester_id=requester_id,
                score_handle=record.score.handle,
            )

    def revoke(self, subject_id: str, requester_id: str):
        """Remove a capability. Sem pré-condições."""
        key = RecordKey(subject_id, requester_id)
        had_grant = self._grants.pop(key, False)

        logger.info(
            'capability_revoked',
            subject_id=subject_id,
            requester_id=requester_id,
            had_grant=had_grant,
        )
        if self.event_logger is not None:
            self.event_logger.log_event(
                events.PERMISSION_REVOKED,
                subject_id=subject_id,
                requester_id=requester_id,
                had_grant=had_grant,
            )

    # ========================================================================
    #                    LEITURA
    # ========================================================================

    def access(self, caller_id: str, subject_id: str, requester_id: str) -> Ciphertext:
        """
        Retorna o handle do score se o caller puder lê-lo.

        Pode ler:
        - o próprio titular (sempre, após o cálculo)
        - a seguradora do par, enquanto a capability estiver ativa

        Raises:
            ScoreNotComputed: score ainda não calculado
            NotAuthorized: caller sem permissão
        """
        key = RecordKey(subject_id, requester_id)
        record = self.store.get(key)
        if record is None or not record.computed:
            raise ScoreNotComputed(subject_id=subject_id, requester_id=requester_id)

        if caller_id == subject_id:
            self.access_granted_count += 1
            return record.score

        if caller_id == requester_id and self._grants.get(key, False):
            self.access_granted_count += 1
            return record.score

        self.access_denied_count += 1
        logger.warning(
            'access_denied',
            caller_id=caller_id,
            subject_id=subject_id,
            requester_id=requester_id,
        )
        if self.event_logger is not None:
            self.event_logger.log_security_event(events.ACCESS_DENIED, {
                'caller_id': caller_id,
                'subject_id': subject_id,
                'requester_id': requester_id,
            })
        raise NotAuthorized(subject_id=subject_id, requester_id=requester_id,
                            details={'caller_id': caller_id})

    def get_stats(self) -> Dict:
        return {
            'active_grants': sum(1 for v in self._grants.values() if v),
            'access_granted': self.access_granted_count,
            'access_denied': self.access_denied_count,
        }
