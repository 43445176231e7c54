"""
Testes da fachada RiskScoreService: registro, eventos, concorrência e
validação dos atributos em plaintext.
"""

import threading

import pytest

from cipherscore_core.arithmetic.simulated import SimulatedArithmetic
from cipherscore_core.scenarios import (
    HEALTHY,
    HIGH_RISK,
    INSURER_X,
    OUTSIDER,
    SUBJECT_A,
    SUBJECT_B,
    as_attributes,
)
from cipherscore_core.errors import (
    AlreadySubmitted,
    AttributeOutOfRange,
    ErrorCategory,
    MalformedSubmission,
    NoDataSubmitted,
    NotAuthorized,
    RegistrationError,
    UnregisteredRequester,
)
from cipherscore_core.models.record import ATTRIBUTE_NAMES, RecordKey, check_plaintext_bounds, ordered_values
from cipherscore_core.service import RiskScoreService
from cipherscore_core.storage import event_logger as events
from cipherscore_core.storage.event_logger import EventLogger


# ============================================================================
#                          REGISTRO DE SEGURADORAS
# ============================================================================

def test_register_requires_name(service):
    with pytest.raises(RegistrationError) as exc:
        service.register_requester('insurer-z', '   ')
    assert exc.value.message == "Company name required"
    assert not service.registry.is_registered('insurer-z')


def test_register_twice_fails(service):
    with pytest.raises(RegistrationError) as exc:
        service.register_requester(INSURER_X, 'Another Name')
    assert exc.value.message == "Company already registered"
    assert service.registry.get(INSURER_X).name == 'Insurer X'


# ============================================================================
#                          VALIDAÇÃO NO CLIENTE
# ============================================================================

def test_plaintext_bounds_accept_scenarios():
    checked = check_plaintext_bounds(as_attributes(HIGH_RISK))
    assert list(checked) == list(ATTRIBUTE_NAMES)
    assert ordered_values(checked)[0] == 150  # height primeiro na submissão


@pytest.mark.parametrize('name, value', [
    ('age', 0),
    ('age', 121),
    ('gender', 2),
    ('pulse', 500),
    ('blood_sugar', 10),
])
def test_plaintext_bounds_reject_out_of_range(name, value):
    values = as_attributes(HEALTHY)
    values[name] = value
    with pytest.raises(AttributeOutOfRange) as exc:
        check_plaintext_bounds(values)
    assert exc.value.details['attribute'] == name


def test_plaintext_bounds_reject_missing_and_unknown():
    values = as_attributes(HEALTHY)
    del values['pulse']
    values['bmi'] = 22
    with pytest.raises(MalformedSubmission) as exc:
        check_plaintext_bounds(values)
    assert exc.value.details == {'missing': ['pulse'], 'unknown': ['bmi']}


# ============================================================================
#                          EVENTOS
# ============================================================================

@pytest.fixture
def event_log(tmp_path):
    logger = EventLogger(log_dir=str(tmp_path / 'logs'))
    yield logger
    logger.close()


@pytest.fixture
def logged_service(event_log):
    engine = SimulatedArithmetic(core_identity='core')
    svc = RiskScoreService(engine=engine, event_logger=event_log)
    svc.register_requester(INSURER_X, 'Insurer X')
    return svc


def submit_to(svc, subject, values=HEALTHY):
    raw, proof = svc.engine.encrypt_inputs(ordered_values(as_attributes(values)), owner=subject)
    return svc.submit_health_data(subject, INSURER_X, raw, proof)


def test_lifecycle_emits_domain_events(logged_service, event_log):
    submit_to(logged_service, SUBJECT_A)
    result = logged_service.compute_risk_score(OUTSIDER, SUBJECT_A, INSURER_X)
    logged_service.grant_permission(SUBJECT_A, INSURER_X)
    logged_service.revoke_permission(SUBJECT_A, INSURER_X)

    stats = event_log.get_stats()
    assert stats['events_by_type'] == {
        events.INSURANCE_COMPANY_REGISTERED: 1,
        events.HEALTH_DATA_SUBMITTED: 1,
        events.RISK_SCORE_COMPUTED: 1,
        events.RISK_SCORE_SENT: 1,
        events.PERMISSION_REVOKED: 1,
    }

    computed = event_log.search_logs(event_type=events.RISK_SCORE_COMPUTED)
    assert len(computed) == 1
    assert computed[0]['subject_id'] == SUBJECT_A
    assert computed[0]['requester_id'] == INSURER_X
    assert computed[0]['details']['caller_id'] == OUTSIDER
    assert computed[0]['details']['score_handle'] == result.score.handle


def test_events_never_carry_plaintext(logged_service, event_log):
    submit_to(logged_service, SUBJECT_A, HIGH_RISK)
    logged_service.compute_risk_score(SUBJECT_A, SUBJECT_A, INSURER_X)

    for entry in event_log.search_logs():
        assert 'score' not in entry.get('details', {})
        assert 320 not in entry.get('details', {}).values()


def test_denied_access_goes_to_security_log(logged_service, event_log):
    submit_to(logged_service, SUBJECT_A)
    logged_service.compute_risk_score(SUBJECT_A, SUBJECT_A, INSURER_X)

    with pytest.raises(NotAuthorized):
        logged_service.get_risk_score(OUTSIDER, SUBJECT_A, INSURER_X)

    denied = event_log.search_logs(event_type=events.ACCESS_DENIED, security=True)
    assert len(denied) == 1
    assert denied[0]['details']['caller_id'] == OUTSIDER
    assert event_log.get_stats()['security_events'] == 1


def test_search_logs_filters_by_subject(logged_service, event_log):
    submit_to(logged_service, SUBJECT_A)
    submit_to(logged_service, SUBJECT_B)

    entries = event_log.search_logs(event_type=events.HEALTH_DATA_SUBMITTED, subject_id=SUBJECT_B)

    assert [e['subject_id'] for e in entries] == [SUBJECT_B]


# ============================================================================
#                          CONCORRÊNCIA E ESTATÍSTICAS
# ============================================================================

def test_concurrent_submissions_for_same_pair(service, encrypt):
    payloads = [encrypt(HEALTHY, SUBJECT_A) for _ in range(8)]
    outcomes = []
    barrier = threading.Barrier(len(payloads))

    def worker(raw, proof):
        barrier.wait()
        try:
            service.submit_health_data(SUBJECT_A, INSURER_X, raw, proof)
            outcomes.append('ok')
        except AlreadySubmitted:
            outcomes.append('rejected')

    threads = [threading.Thread(target=worker, args=p) for p in payloads]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count('ok') == 1
    assert outcomes.count('rejected') == 7
    assert service.store.active_locks() == 0
    assert len(service.store) == 1


def test_unknown_keys_do_not_accumulate_locks(service, computed):
    computed(SUBJECT_A, INSURER_X)

    for i in range(500):
        with pytest.raises(UnregisteredRequester):
            service.compute_risk_score(OUTSIDER, f'nobody-{i}', 'not-registered')
        with pytest.raises(NoDataSubmitted):
            service.compute_risk_score(OUTSIDER, f'nobody-{i}', INSURER_X)
        service.revoke_permission(f'ghost-{i}', INSURER_X)

    assert service.store.active_locks() == 0
    assert len(service.store) == 1


def test_key_lock_is_released_when_the_block_fails(service):
    key = RecordKey(SUBJECT_A, INSURER_X)

    with pytest.raises(RuntimeError):
        with service.store.lock(key):
            assert service.store.active_locks() == 1
            raise RuntimeError('boom')

    assert service.store.active_locks() == 0
    with service.store.lock(key):
        pass


def test_service_stats(service, computed, submit):
    computed(SUBJECT_A, INSURER_X)
    submit(SUBJECT_B, INSURER_X)
    service.grant_permission(SUBJECT_A, INSURER_X)

    stats = service.get_stats()

    assert stats['records'] == 2
    assert stats['records_by_state'] == {'not_submitted': 0, 'submitted': 1, 'computed': 1}
    assert stats['registered_requesters'] == 2
    assert stats['pipeline']['total_scores_computed'] == 1
    assert stats['capabilities']['active_grants'] == 1
    assert 'events' not in stats


def test_error_serialization():
    error = NotAuthorized(subject_id=SUBJECT_A, requester_id=INSURER_X, details={'caller_id': OUTSIDER})
    assert error.to_dict() == {
        'code': 'NotAuthorized',
        'category': ErrorCategory.AUTHORIZATION.value,
        'message': "Not authorized to access risk score",
        'subject_id': SUBJECT_A,
        'requester_id': INSURER_X,
        'details': {'caller_id': OUTSIDER},
    }
