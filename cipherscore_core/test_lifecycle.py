"""
Testes do ciclo de vida: submit -> compute, com as guardas de cada transição.
"""

import dataclasses

import pytest

from cipherscore_core.scenarios import HEALTHY, HIGH_RISK, INSURER_X, INSURER_Y, OUTSIDER, SUBJECT_A, SUBJECT_B
from cipherscore_core.errors import (
    AlreadyComputed,
    AlreadySubmitted,
    ErrorCategory,
    InvalidProof,
    MalformedSubmission,
    NoDataSubmitted,
    UnregisteredRequester,
)
from cipherscore_core.lifecycle.state_machine import VALID_TRANSITIONS, RecordState, can_transition
from cipherscore_core.models.record import RecordKey


# ============================================================================
#                          SUBMIT
# ============================================================================

def test_submit_stores_record_with_zero_score(service, submit, engine):
    record = submit()

    assert record.key == RecordKey(SUBJECT_A, INSURER_X)
    assert record.submitted and not record.computed
    assert engine.reveal(record.score) == 0
    assert service.is_health_data_submitted(SUBJECT_A, INSURER_X)
    assert not service.is_risk_score_computed(SUBJECT_A, INSURER_X)
    assert service.state_of(SUBJECT_A, INSURER_X) is RecordState.SUBMITTED


def test_submitted_attributes_belong_to_subject(submit, engine):
    record = submit()
    for _, ct in record.attributes.items():
        assert engine.is_usable_by(ct, SUBJECT_A)
        assert not engine.is_usable_by(ct, INSURER_X)


def test_submit_twice_is_rejected_and_keeps_first_record(service, submit, engine):
    first = submit(values=HEALTHY)

    with pytest.raises(AlreadySubmitted) as exc:
        submit(values=HIGH_RISK)

    assert exc.value.category is ErrorCategory.STATE
    assert service.store.get(RecordKey(SUBJECT_A, INSURER_X)) is first
    assert engine.reveal(first.attributes.age) == HEALTHY[0]


def test_submit_to_unregistered_requester_fails(service, submit):
    with pytest.raises(UnregisteredRequester):
        submit(requester=OUTSIDER)
    assert not service.is_health_data_submitted(SUBJECT_A, OUTSIDER)


def test_submit_with_wrong_proof_leaves_no_record(service, encrypt):
    raw, proof = encrypt(HEALTHY, SUBJECT_A)
    tampered = bytes(b ^ 0xFF for b in proof)

    with pytest.raises(InvalidProof):
        service.submit_health_data(SUBJECT_A, INSURER_X, raw, tampered)
    assert service.state_of(SUBJECT_A, INSURER_X) is RecordState.NOT_SUBMITTED

    # A prova correta ainda é aceita depois da rejeição
    service.submit_health_data(SUBJECT_A, INSURER_X, raw, proof)
    assert service.is_health_data_submitted(SUBJECT_A, INSURER_X)


def test_proof_is_bound_to_the_subject(service, encrypt):
    raw, proof = encrypt(HEALTHY, SUBJECT_A)

    with pytest.raises(InvalidProof):
        service.submit_health_data(SUBJECT_B, INSURER_X, raw, proof)
    assert not service.is_health_data_submitted(SUBJECT_B, INSURER_X)


def test_submit_with_wrong_attribute_count_fails(service, encrypt):
    raw, proof = encrypt(HEALTHY, SUBJECT_A)

    with pytest.raises(MalformedSubmission) as exc:
        service.submit_health_data(SUBJECT_A, INSURER_X, raw[:11], proof)

    assert exc.value.details == {'received': 11, 'expected': 12}
    assert len(service.store) == 0


def test_same_subject_can_submit_to_each_requester(service, submit):
    submit(SUBJECT_A, INSURER_X)
    submit(SUBJECT_A, INSURER_Y)

    assert len(service.store) == 2
    assert len(service.store.records_for_subject(SUBJECT_A)) == 2


def test_same_payload_can_be_sent_to_each_requester(service, encrypt, engine):
    raw, proof = encrypt(HIGH_RISK, SUBJECT_A)

    first = service.submit_health_data(SUBJECT_A, INSURER_X, raw, proof)
    second = service.submit_health_data(SUBJECT_A, INSURER_Y, raw, proof)

    # Mesmos valores, handles independentes por par
    assert first.attributes.age != second.attributes.age
    assert engine.reveal(second.attributes.age) == HIGH_RISK[0]

    score_x = service.compute_risk_score(SUBJECT_A, SUBJECT_A, INSURER_X)
    score_y = service.compute_risk_score(SUBJECT_A, SUBJECT_A, INSURER_Y)
    assert engine.reveal(score_x.score) == engine.reveal(score_y.score) == 320


def test_attributes_are_frozen(submit, engine):
    record = submit()
    with pytest.raises(dataclasses.FrozenInstanceError):
        record.attributes.age = engine.trivial_encrypt(1)


# ============================================================================
#                          COMPUTE
# ============================================================================

def test_compute_without_submission_fails(service):
    with pytest.raises(NoDataSubmitted):
        service.compute_risk_score(SUBJECT_A, SUBJECT_A, INSURER_X)
    assert service.state_of(SUBJECT_A, INSURER_X) is RecordState.NOT_SUBMITTED


def test_compute_for_unregistered_requester_fails(service):
    with pytest.raises(UnregisteredRequester):
        service.compute_risk_score(SUBJECT_A, SUBJECT_A, OUTSIDER)


def test_compute_is_permissionless(service, submit, engine):
    submit(values=HIGH_RISK)

    result = service.compute_risk_score(OUTSIDER, SUBJECT_A, INSURER_X)

    assert engine.reveal(result.score) == 320
    assert service.is_risk_score_computed(SUBJECT_A, INSURER_X)
    assert service.state_of(SUBJECT_A, INSURER_X) is RecordState.COMPUTED


def test_compute_twice_fails_and_keeps_first_score(service, computed):
    result = computed()

    with pytest.raises(AlreadyComputed):
        service.compute_risk_score(SUBJECT_A, SUBJECT_A, INSURER_X)

    record = service.store.get(RecordKey(SUBJECT_A, INSURER_X))
    assert record.score == result.score


def test_computed_score_is_usable_by_core_and_subject_only(service, computed, engine):
    result = computed()

    assert engine.is_usable_by(result.score, engine.core_identity)
    assert engine.is_usable_by(result.score, SUBJECT_A)
    assert not engine.is_usable_by(result.score, INSURER_X)
    assert not service.has_permission(SUBJECT_A, INSURER_X)


def test_records_are_scored_independently(service, submit, engine):
    submit(SUBJECT_A, INSURER_X, HEALTHY)
    submit(SUBJECT_B, INSURER_X, HIGH_RISK)

    score_b = service.compute_risk_score(SUBJECT_B, SUBJECT_B, INSURER_X)

    assert engine.reveal(score_b.score) == 320
    assert service.state_of(SUBJECT_A, INSURER_X) is RecordState.SUBMITTED


# ============================================================================
#                          MÁQUINA DE ESTADOS
# ============================================================================

def test_lifecycle_only_moves_forward():
    assert can_transition(RecordState.NOT_SUBMITTED, RecordState.SUBMITTED)
    assert can_transition(RecordState.SUBMITTED, RecordState.COMPUTED)
    assert not can_transition(RecordState.SUBMITTED, RecordState.NOT_SUBMITTED)
    assert not can_transition(RecordState.NOT_SUBMITTED, RecordState.COMPUTED)
    assert VALID_TRANSITIONS[RecordState.COMPUTED] == set()
