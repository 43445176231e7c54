"""
================================================================================
              CIPHERSCORE CORE - Risk Score Service (service.py)
================================================================================
Fachada que liga registro, motor, store, pipeline, ciclo de vida e
capabilities. É o ponto de entrada para quem usa o núcleo.

Cada chamada de escrita roda sob o lock da sua chave: chaves diferentes
não se coordenam, a mesma chave é serializada.
================================================================================
"""

from typing import Dict, Optional, Sequence

from cipherscore_core.access.capability import CapabilityManager
from cipherscore_core.adapters.registry import RegisteredRequester, RequesterRegistry
from cipherscore_core.arithmetic.base import Ciphertext, HomomorphicArithmetic
from cipherscore_core.lifecycle.state_machine import RecordLifecycle, RecordState
from cipherscore_core.logger import get_logger
from cipherscore_core.models.record import RecordKey
from cipherscore_core.scoring.pipeline import ScoringPipeline, ScoringResult
from cipherscore_core.scoring.weights import WeightConfig
from cipherscore_core.storage import event_logger as events
from cipherscore_core.storage.event_logger import EventLogger
from cipherscore_core.storage.record_store import EncryptedRecordStore


logger = get_logger('cipherscore.service')


class RiskScoreService:
    """
    Serviço de score de risco sobre dados criptografados.

    Uso básico:
        service = RiskScoreService(engine=SimulatedArithmetic())
        service.register_requester("insurer-1", "Acme Seguros")
        service.submit_health_data("alice", "insurer-1", raw, proof)
        service.compute_risk_score("anyone", "alice", "insurer-1")
        service.grant_permission("alice", "insurer-1")
        handle = service.get_risk_score("insurer-1", "alice", "insurer-1")
    """

    def __init__(
        self,
        engine: HomomorphicArithmetic,
        registry: Optional[RequesterRegistry] = None,
        weights: Optional[WeightConfig] = None,
        event_logger: Optional[EventLogger] = None,
    ):
        self.engine = engine
        self.registry = registry or RequesterRegistry()
        self.event_logger = event_logger

        self.store = EncryptedRecordStore()
        self.pipeline = ScoringPipeline(engine, weights)
        self.lifecycle = RecordLifecycle(
            self.registry, engine, self.store, self.pipeline, event_logger
        )
        self.capabilities = CapabilityManager(self.store, engine, event_logger)

    # ========================================================================
    #                    REGISTRO (colaborador)
    # ========================================================================

    def register_requester(self, identity: str, name: str) -> RegisteredRequester:
        requester = self.registry.register(identity, name)
        logger.info('requester_registered', requester_id=identity, name=requester.name)
        if self.event_logger is not None:
            self.event_logger.log_event(
                events.INSURANCE_COMPANY_REGISTERED,
                requester_id=identity,
                name=requester.name,
            )
        return requester

    # ========================================================================
    #                    ESCRITA
    # ========================================================================

    def submit_health_data(
        self,
        caller_id: str,
        requester_id: str,
        raw_ciphertexts: Sequence[bytes],
        proof: bytes,
    ):
        """O caller é o titular dos dados."""
        with self.store.lock(RecordKey(caller_id, requester_id)):
            return self.lifecycle.submit(caller_id, requester_id, raw_ciphertexts, proof)

    def compute_risk_score(self, caller_id: str, subject_id: str, requester_id: str) -> ScoringResult:
        """Permissionless: caller_id só é registrado em log."""
        with self.store.lock(RecordKey(subject_id, requester_id)):
            return self.lifecycle.compute(caller_id, subject_id, requester_id)

    def grant_permission(self, caller_id: str, requester_id: str):
        """O caller (titular) concede à seguradora acesso ao seu score."""
        with self.store.lock(RecordKey(caller_id, requester_id)):
            self.capabilities.grant(caller_id, requester_id)

    def revoke_permission(self, caller_id: str, requester_id: str):
        with self.store.lock(RecordKey(caller_id, requester_id)):
            self.capabilities.revoke(caller_id, requester_id)

    # ========================================================================
    #                    LEITURA
    # ========================================================================

    def get_risk_score(self, caller_id: str, subject_id: str, requester_id: str) -> Ciphertext:
        return self.capabilities.access(caller_id, subject_id, requester_id)

    def is_health_data_submitted(self, subject_id: str, requester_id: str) -> bool:
        return self.lifecycle.state_of(subject_id, requester_id) is not RecordState.NOT_SUBMITTED

    def is_risk_score_computed(self, subject_id: str, requester_id: str) -> bool:
        return self.lifecycle.state_of(subject_id, requester_id) is RecordState.COMPUTED

    def has_permission(self, subject_id: str, requester_id: str) -> bool:
        return self.capabilities.has_permission(subject_id, requester_id)

    def state_of(self, subject_id: str, requester_id: str) -> RecordState:
        return self.lifecycle.state_of(subject_id, requester_id)

    def get_stats(self) -> Dict:
        """Estatísticas agregadas do serviço"""
        states = {state.value: 0 for state in RecordState}
        for record in self.store:
            states[self.lifecycle.state_of(*record.key).value] += 1

        stats = {
            'records': len(self.store),
            'records_by_state': states,
            'registered_requesters': len(self.registry.list_all()),
            'pipeline': self.pipeline.get_stats(),
            'capabilities': self.capabilities.get_stats(),
        }
        if self.event_logger is not None:
            stats['events'] = self.event_logger.get_stats()
        return stats
