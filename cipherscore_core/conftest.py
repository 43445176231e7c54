"""
Fixtures compartilhadas dos testes do CipherScore Core.
"""

import pytest
import structlog

from cipherscore_core.arithmetic.simulated import SimulatedArithmetic
from cipherscore_core.models.record import EncryptedAttributes, ordered_values
from cipherscore_core.service import RiskScoreService
from cipherscore_core.scenarios import HEALTHY, INSURER_X, INSURER_Y, SUBJECT_A, as_attributes


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def engine():
    return SimulatedArithmetic(core_identity='core')


@pytest.fixture
def encrypt(engine):
    """encrypt(values, owner) -> (raw, proof)"""
    def _encrypt(values, owner=SUBJECT_A):
        return engine.encrypt_inputs(ordered_values(as_attributes(values)), owner=owner)
    return _encrypt


@pytest.fixture
def encrypted_attributes(engine, encrypt):
    """Atributos criptografados prontos para o pipeline (sem passar pelo serviço)"""
    def _attrs(values, owner=SUBJECT_A):
        raw, proof = encrypt(values, owner)
        return EncryptedAttributes.from_sequence(engine.verify_and_import(raw, proof, owner))
    return _attrs


@pytest.fixture
def service(engine):
    svc = RiskScoreService(engine=engine)
    svc.register_requester(INSURER_X, 'Insurer X')
    svc.register_requester(INSURER_Y, 'Insurer Y')
    return svc


@pytest.fixture
def submit(service, encrypt):
    def _submit(subject=SUBJECT_A, requester=INSURER_X, values=HEALTHY):
        raw, proof = encrypt(values, subject)
        return service.submit_health_data(subject, requester, raw, proof)
    return _submit


@pytest.fixture
def computed(service, submit):
    """Registro (alice, insurer-x) submetido e calculado"""
    def _computed(subject=SUBJECT_A, requester=INSURER_X, values=HEALTHY):
        submit(subject, requester, values)
        return service.compute_risk_score(subject, subject, requester)
    return _computed
