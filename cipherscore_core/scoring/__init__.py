"""
Scoring - Pipeline de pontuação de risco sobre dados criptografados
"""

from cipherscore_core.scoring.weights import WeightConfig
from cipherscore_core.scoring.factors import ScoringFactors, FactorResult
from cipherscore_core.scoring.pipeline import ScoringPipeline, ScoringResult

__all__ = [
    'WeightConfig',
    'ScoringFactors',
    'FactorResult',
    'ScoringPipeline',
    'ScoringResult',
]
