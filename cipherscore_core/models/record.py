"""
================================================================================
            CIPHERSCORE CORE - Health Record Model (models/record.py)
================================================================================
Modelo do registro de saúde criptografado.
Um registro por par (titular, seguradora), nunca removido.
================================================================================
"""

import time
from dataclasses import dataclass, field, fields
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from cipherscore_core.arithmetic.base import Ciphertext
from cipherscore_core.errors import AlreadyComputed, AttributeOutOfRange, MalformedSubmission


# Ordem dos doze ciphertexts brutos numa submissão
ATTRIBUTE_NAMES: Tuple[str, ...] = (
    'height',
    'weight',
    'systolic',
    'diastolic',
    'hdl',
    'ldl',
    'triglycerides',
    'total_cholesterol',
    'blood_sugar',
    'pulse',
    'age',
    'gender',
)

# Limites em plaintext (validados pelo cliente ANTES de criptografar)
PLAINTEXT_BOUNDS: Dict[str, Tuple[int, int]] = {
    'height': (50, 250),             # cm
    'weight': (20, 300),             # kg
    'systolic': (70, 250),           # mmHg
    'diastolic': (40, 150),          # mmHg
    'hdl': (10, 150),                # mg/dL
    'ldl': (30, 300),                # mg/dL
    'triglycerides': (30, 1000),     # mg/dL
    'total_cholesterol': (100, 500), # mg/dL
    'blood_sugar': (50, 400),        # mg/dL
    'pulse': (30, 200),              # bpm
    'age': (1, 120),                 # anos
    'gender': (0, 1),                # 0 = feminino, 1 = masculino
}


class RecordKey(NamedTuple):
    """Chave composta (titular, seguradora)"""
    subject_id: str
    requester_id: str


def check_plaintext_bounds(values: Mapping[str, int]) -> Dict[str, int]:
    """
    Valida os valores em plaintext antes da criptografia (lado do cliente).

    Args:
        values: nome do atributo -> valor

    Returns:
        Dict com os doze valores como int

    Raises:
        MalformedSubmission: atributo ausente ou desconhecido
        AttributeOutOfRange: valor fora dos limites
    """
    missing = [name for name in ATTRIBUTE_NAMES if name not in values]
    unknown = [name for name in values if name not in PLAINTEXT_BOUNDS]
    if missing or unknown:
        raise MalformedSubmission(details={'missing': missing, 'unknown': unknown})

    checked = {}
    for name in ATTRIBUTE_NAMES:
        value = int(values[name])
        low, high = PLAINTEXT_BOUNDS[name]
        if not low <= value <= high:
            raise AttributeOutOfRange(
                f"{name}={value} outside [{low}, {high}]",
                details={'attribute': name, 'value': value, 'bounds': [low, high]},
            )
        checked[name] = value
    return checked


def ordered_values(values: Mapping[str, int]) -> List[int]:
    """Valores na ordem de submissão (ATTRIBUTE_NAMES)"""
    return [values[name] for name in ATTRIBUTE_NAMES]


@dataclass(frozen=True)
class EncryptedAttributes:
    """Os doze atributos criptografados. Imutáveis após a criação."""
    height: Ciphertext
    weight: Ciphertext
    systolic: Ciphertext
    diastolic: Ciphertext
    hdl: Ciphertext
    ldl: Ciphertext
    triglycerides: Ciphertext
    total_cholesterol: Ciphertext
    blood_sugar: Ciphertext
    pulse: Ciphertext
    age: Ciphertext
    gender: Ciphertext

    @classmethod
    def from_sequence(cls, ciphertexts: Sequence[Ciphertext]) -> "EncryptedAttributes":
        if len(ciphertexts) != len(ATTRIBUTE_NAMES):
            raise MalformedSubmission(details={'received': len(ciphertexts)})
        return cls(**dict(zip(ATTRIBUTE_NAMES, ciphertexts)))

    def items(self) -> Iterable[Tuple[str, Ciphertext]]:
        for f in fields(self):
            yield f.name, getattr(self, f.name)


@dataclass
class EncryptedHealthRecord:
    """
    Registro de saúde criptografado de um par (titular, seguradora).

    Attributes:
        key: RecordKey do par
        attributes: Doze atributos (write-once)
        score: Score criptografado (zero até o cálculo)
        submitted: Dados submetidos
        computed: Score calculado (false -> true uma única vez)
        submitted_at: Timestamp Unix da submissão
        computed_at: Timestamp Unix do cálculo
    """
    key: RecordKey
    attributes: EncryptedAttributes
    score: Ciphertext
    submitted: bool = True
    computed: bool = False
    submitted_at: float = field(default_factory=time.time)
    computed_at: Optional[float] = None

    @property
    def subject_id(self) -> str:
        return self.key.subject_id

    @property
    def requester_id(self) -> str:
        return self.key.requester_id

    def finalize_score(self, score: Ciphertext):
        """Grava o score final. Só pode acontecer uma vez."""
        if self.computed:
            raise AlreadyComputed(subject_id=self.subject_id, requester_id=self.requester_id)
        self.score = score
        self.computed = True
        self.computed_at = time.time()

    def to_dict(self) -> Dict:
        """Resumo JSON-serializável (apenas handles, nunca valores)"""
        return {
            'subject_id': self.subject_id,
            'requester_id': self.requester_id,
            'submitted': self.submitted,
            'computed': self.computed,
            'score_handle': self.score.handle,
            'submitted_at': self.submitted_at,
            'computed_at': self.computed_at,
        }
