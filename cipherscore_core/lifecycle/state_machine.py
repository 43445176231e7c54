"""
CipherScore - Record Lifecycle State Machine.

============================================================
PURPOSE
============================================================
Governa a ordem válida das chamadas por par (titular, seguradora).

STATE MACHINE:

    NOT_SUBMITTED ──submit──► SUBMITTED ──compute──► COMPUTED

INVARIANTS:
- Sem transições para trás, sem remoção
- Toda verificação acontece antes de qualquer escrita
- compute é permissionless: qualquer caller pode disparar
- Permissões (grant/revoke) não mudam o estado do registro

============================================================
"""

from enum import Enum
from typing import Dict, Optional, Sequence, Set

from cipherscore_core.adapters.registry import RequesterRegistry
from cipherscore_core.arithmetic.base import HomomorphicArithmetic, ProofRejected
from cipherscore_core.errors import (
    AlreadySubmitted,
    InvalidProof,
    MalformedSubmission,
    UnregisteredRequester,
)
from cipherscore_core.logger import get_logger
from cipherscore_core.models.record import (
    ATTRIBUTE_NAMES,
    EncryptedAttributes,
    EncryptedHealthRecord,
    RecordKey,
)
from cipherscore_core.scoring.pipeline import ScoringPipeline, ScoringResult
from cipherscore_core.storage import event_logger as events
from cipherscore_core.storage.event_logger import EventLogger
from cipherscore_core.storage.record_store import EncryptedRecordStore


logger = get_logger('cipherscore.lifecycle')


class RecordState(Enum):
    """Estados do ciclo de vida de um registro"""
    NOT_SUBMITTED = "not_submitted"
    SUBMITTED = "submitted"
    COMPUTED = "computed"


VALID_TRANSITIONS: Dict[RecordState, Set[RecordState]] = {
    RecordState.NOT_SUBMITTED: {RecordState.SUBMITTED},
    RecordState.SUBMITTED: {RecordState.COMPUTED},
    # Terminal
    RecordState.COMPUTED: set(),
}


def can_transition(from_state: RecordState, to_state: RecordState) -> bool:
    return to_state in VALID_TRANSITIONS[from_state]


def state_of_record(record: Optional[EncryptedHealthRecord]) -> RecordState:
    if record is None or not record.submitted:
        return RecordState.NOT_SUBMITTED
    if record.computed:
        return RecordState.COMPUTED
    return RecordState.SUBMITTED


class RecordLifecycle:
    """
    Aplica as transições submit e compute sobre o EncryptedRecordStore.
    """

    def __init__(
        self,
        registry: RequesterRegistry,
        engine: HomomorphicArithmetic,
        store: EncryptedRecordStore,
        pipeline: ScoringPipeline,
        event_logger: Optional[EventLogger] = None,
    ):
        self.registry = registry
        self.engine = engine
        self.store = store
        self.pipeline = pipeline
        self.event_logger = event_logger

    def state_of(self, subject_id: str, requester_id: str) -> RecordState:
        return state_of_record(self.store.get(RecordKey(subject_id, requester_id)))

    # ========================================================================
    #                    NOT_SUBMITTED → SUBMITTED
    # ========================================================================

    def submit(
        self,
        subject_id: str,
        requester_id: str,
        raw_ciphertexts: Sequence[bytes],
        proof: bytes,
    ) -> EncryptedHealthRecord:
        """
        Submete os doze atributos criptografados.

        Raises:
            UnregisteredRequester: seguradora não registrada
            AlreadySubmitted: já existe registro para o par
            MalformedSubmission: quantidade errada de ciphertexts
            InvalidProof: prova rejeitada pelo motor
        """
        key = RecordKey(subject_id, requester_id)

        self._require_registered(key)
        self._require_can_submit(key)

        if len(raw_ciphertexts) != len(ATTRIBUTE_NAMES):
            raise MalformedSubmission(
                subject_id=subject_id,
                requester_id=requester_id,
                details={'received': len(raw_ciphertexts), 'expected': len(ATTRIBUTE_NAMES)},
            )

        try:
            imported = self.engine.verify_and_import(raw_ciphertexts, proof, subject_id)
        except ProofRejected as e:
            raise InvalidProof(str(e), subject_id=subject_id, requester_id=requester_id) from e

        # Atributos + score zero gravados juntos
        record = EncryptedHealthRecord(
            key=key,
            attributes=EncryptedAttributes.from_sequence(imported),
            score=self.engine.trivial_encrypt(0),
        )
        self.store.insert(record)

        logger.info('record_submitted', subject_id=subject_id, requester_id=requester_id)
        self._emit(events.HEALTH_DATA_SUBMITTED, record, submitted_at=record.submitted_at)
        return record

    # ========================================================================
    #                    SUBMITTED → COMPUTED
    # ========================================================================

    def compute(self, caller_id: str, subject_id: str, requester_id: str) -> ScoringResult:
        """
        Calcula o score de um registro submetido.

        Qualquer caller pode disparar; a autorização fica na leitura.

        Raises:
            UnregisteredRequester: seguradora não registrada
            NoDataSubmitted: nada submetido para o par
            AlreadyComputed: score já calculado
        """
        key = RecordKey(subject_id, requester_id)
        self._require_registered(key)

        record = self.store.get(key)
        result = self.pipeline.compute_score(record)

        # O núcleo precisa reexpor o score depois; o titular precisa descriptografar
        self.engine.mark_usable_by_self(result.score)
        self.engine.mark_usable_by(result.score, subject_id)

        record.finalize_score(result.score)

        logger.info(
            'risk_score_computed',
            subject_id=subject_id,
            requester_id=requester_id,
            caller_id=caller_id,
            operations=result.operations_count,
        )
        self._emit(
            events.RISK_SCORE_COMPUTED,
            record,
            caller_id=caller_id,
            score_handle=result.score.handle,
            computed_at=record.computed_at,
        )
        return result

    # ========================================================================
    #                    GUARDAS
    # ========================================================================

    def _require_registered(self, key: RecordKey):
        if not self.registry.is_registered(key.requester_id):
            logger.warning('requester_not_registered', requester_id=key.requester_id)
            raise UnregisteredRequester(subject_id=key.subject_id, requester_id=key.requester_id)

    def _require_can_submit(self, key: RecordKey):
        current = state_of_record(self.store.get(key))
        if not can_transition(current, RecordState.SUBMITTED):
            raise AlreadySubmitted(
                subject_id=key.subject_id,
                requester_id=key.requester_id,
                details={'state': current.value},
            )

    def _emit(self, event_type: str, record: EncryptedHealthRecord, **details):
        if self.event_logger is not None:
            self.event_logger.log_event(
                event_type,
                subject_id=record.subject_id,
                requester_id=record.requester_id,
                **details
            )
