"""
================================================================================
          CIPHERSCORE CORE - Scoring Pipeline (scoring/pipeline.py)
================================================================================
Pipeline principal de cálculo do score criptografado.
Soma homomórfica das contribuições independentes de cada fator.
================================================================================
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from cipherscore_core.arithmetic.base import Ciphertext, HomomorphicArithmetic
from cipherscore_core.errors import AlreadyComputed, NoDataSubmitted
from cipherscore_core.logger import get_logger
from cipherscore_core.models.record import EncryptedAttributes, EncryptedHealthRecord
from cipherscore_core.scoring.factors import FactorResult, ScoringFactors
from cipherscore_core.scoring.weights import WeightConfig


logger = get_logger('cipherscore.scoring')


@dataclass
class ScoringResult:
    """
    Resultado do pipeline.

    Attributes:
        score: Score final criptografado
        factor_names: Fatores na ordem em que foram somados
        contributions: Handle da contribuição de cada fator
        operations_count: Número de operações homomórficas emitidas
        processing_time_ms: Tempo de processamento em milissegundos
    """
    score: Ciphertext
    factor_names: List[str] = field(default_factory=list)
    contributions: Dict[str, Ciphertext] = field(default_factory=dict)
    operations_count: int = 0
    processing_time_ms: float = 0.0

    def to_dict(self) -> Dict:
        """Converte para dicionário JSON-serializável"""
        return {
            'score_handle': self.score.handle,
            'factor_names': self.factor_names,
            'operations_count': self.operations_count,
            'processing_time_ms': round(self.processing_time_ms, 2),
        }


class _CountingEngine:
    """Proxy que conta as chamadas feitas ao motor durante um cálculo"""

    def __init__(self, engine: HomomorphicArithmetic):
        self._engine = engine
        self.count = 0

    def __getattr__(self, name):
        attr = getattr(self._engine, name)
        if not callable(attr):
            return attr

        def counted(*args, **kwargs):
            self.count += 1
            return attr(*args, **kwargs)

        return counted


class ScoringPipeline:
    """
    Pipeline que combina todos os fatores de risco.

    Workflow:
    1. Verifica as pré-condições do registro (submetido, ainda não calculado)
    2. Calcula a contribuição de cada fator (ScoringFactors)
    3. Soma tudo, na ordem de config.factor_order
    4. Retorna ScoringResult (sem alterar o registro)

    A soma é comutativa e associativa: qualquer factor_order dá o mesmo score.
    """

    def __init__(self, engine: HomomorphicArithmetic, config: Optional[WeightConfig] = None):
        self.engine = engine
        self.config = config or WeightConfig()

        # Estatísticas (para monitoramento)
        self.total_scores_computed = 0
        self.total_processing_time_ms = 0.0

    def compute_score(self, record: Optional[EncryptedHealthRecord]) -> ScoringResult:
        """
        Calcula o score de um registro submetido.

        Raises:
            NoDataSubmitted: registro inexistente ou não submetido
            AlreadyComputed: score já calculado
        """
        if record is None or not record.submitted:
            raise NoDataSubmitted()
        if record.computed:
            raise AlreadyComputed(subject_id=record.subject_id, requester_id=record.requester_id)

        result = self.evaluate(record.attributes)

        logger.debug(
            'score_evaluated',
            subject_id=record.subject_id,
            requester_id=record.requester_id,
            operations=result.operations_count,
            processing_time_ms=round(result.processing_time_ms, 2),
        )
        return result

    def evaluate(self, attrs: EncryptedAttributes) -> ScoringResult:
        """
        Função pura de scoring sobre os doze atributos criptografados.
        """
        start_time = time.perf_counter()

        engine = _CountingEngine(self.engine)
        factors = ScoringFactors(engine, self.config)

        results: List[FactorResult] = [
            factors.calculate(name, attrs) for name in self.config.factor_order
        ]

        total = results[0].contribution
        for factor in results[1:]:
            total = engine.add(total, factor.contribution)

        result = ScoringResult(
            score=total,
            factor_names=[f.name for f in results],
            contributions={f.name: f.contribution for f in results},
            operations_count=engine.count,
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
        )

        self._update_stats(result.processing_time_ms)
        return result

    def _update_stats(self, processing_time_ms: float):
        self.total_scores_computed += 1
        self.total_processing_time_ms += processing_time_ms

    def get_stats(self) -> Dict:
        """Retorna estatísticas do pipeline"""
        avg_time = (self.total_processing_time_ms / self.total_scores_computed
                    if self.total_scores_computed > 0 else 0)

        return {
            'total_scores_computed': self.total_scores_computed,
            'total_processing_time_ms': round(self.total_processing_time_ms, 2),
            'avg_processing_time_ms': round(avg_time, 2),
            'config': self.config.to_dict(),
        }
