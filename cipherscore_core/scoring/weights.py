"""
================================================================================
          CIPHERSCORE CORE - Weight Configuration (scoring/weights.py)
================================================================================
Limiares e contribuições de cada fator de risco.

Todos os limiares são PÚBLICOS: são comparados contra ciphertexts como
constantes (comparação escalar). Só os atributos e o score são secretos.
================================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, List

from cipherscore_core.config import CipherScoreConfig
from cipherscore_core.errors import ConfigurationError


SCORING_MODES = ("threshold", "bmi")
COMPARISON_MODES = ("scalar", "encrypted")

THRESHOLD_FACTORS = [
    'age',
    'gender',
    'weight',
    'height',
    'blood_pressure',
    'cholesterol',
    'triglycerides',
    'total_cholesterol',
    'blood_sugar',
    'pulse',
]

# No modo IMC, peso e altura são substituídos por um único fator
BMI_FACTORS = [
    'age',
    'gender',
    'body_mass',
    'blood_pressure',
    'cholesterol',
    'triglycerides',
    'total_cholesterol',
    'blood_sugar',
    'pulse',
]


@dataclass
class WeightConfig:
    """
    Configuração centralizada do scoring.

    Estrutura:
    1. Modo (threshold / bmi) e granularidade das comparações
    2. Ordem de soma dos fatores (não altera o resultado)
    3. Multiplicadores lineares
    4. Limiares e contribuições de cada degrau
    """

    scoring_mode: str = field(default_factory=lambda: CipherScoreConfig.SCORING_MODE)
    comparison_mode: str = field(default_factory=lambda: CipherScoreConfig.COMPARISON_MODE)
    factor_order: List[str] = None

    def __post_init__(self):
        if self.scoring_mode not in SCORING_MODES:
            raise ConfigurationError(f"unknown scoring mode: {self.scoring_mode}")
        if self.comparison_mode not in COMPARISON_MODES:
            raise ConfigurationError(f"unknown comparison mode: {self.comparison_mode}")

        expected = self.default_factors()
        if self.factor_order is None:
            self.factor_order = list(expected)
        elif sorted(self.factor_order) != sorted(expected):
            raise ConfigurationError(
                "factor_order must be a permutation of the active factors",
                details={'expected': expected, 'received': list(self.factor_order)},
            )

    def default_factors(self) -> List[str]:
        return list(BMI_FACTORS if self.scoring_mode == "bmi" else THRESHOLD_FACTORS)

    # ========================================================================
    #                    FATORES LINEARES
    # ========================================================================

    AGE_MULTIPLIER = 2          # idade × 2
    GENDER_MULTIPLIER = 10      # gênero (0/1) × 10

    # ========================================================================
    #                    PESO / ALTURA (modo threshold)
    # ========================================================================

    WEIGHT_HIGH_THRESHOLD = 90      # kg
    WEIGHT_HIGH = 20
    WEIGHT_MEDIUM_THRESHOLD = 75    # kg
    WEIGHT_MEDIUM = 10

    HEIGHT_LOW_THRESHOLD = 160      # cm (estritamente menor)
    HEIGHT_LOW = 5

    # ========================================================================
    #                    IMC (modo bmi)
    # ========================================================================
    # IMC = peso * 10000 / altura²  →  comparado sem divisão:
    #   peso * 10000 > limiar * altura²

    BMI_SCALE = 10000
    BMI_OBESE_THRESHOLD = 30
    BMI_OBESE = 20
    BMI_OVERWEIGHT_THRESHOLD = 25
    BMI_OVERWEIGHT = 10

    # ========================================================================
    #                    PRESSÃO ARTERIAL
    # ========================================================================

    SYSTOLIC_THRESHOLD = 140
    DIASTOLIC_THRESHOLD = 90
    BLOOD_PRESSURE_HIGH = 15    # sistólica > 140 OU diastólica > 90

    # ========================================================================
    #                    COLESTEROL
    # ========================================================================

    LDL_THRESHOLD = 160
    LDL_HIGH = 10
    HDL_THRESHOLD = 40          # estritamente menor
    HDL_LOW = 10

    TRIGLYCERIDES_THRESHOLD = 200
    TRIGLYCERIDES_HIGH = 8

    TOTAL_CHOLESTEROL_THRESHOLD = 240
    TOTAL_CHOLESTEROL_HIGH = 12

    # ========================================================================
    #                    GLICEMIA
    # ========================================================================

    BLOOD_SUGAR_DIABETIC_THRESHOLD = 126
    BLOOD_SUGAR_DIABETIC = 25
    BLOOD_SUGAR_PREDIABETIC_THRESHOLD = 100
    BLOOD_SUGAR_PREDIABETIC = 10

    # ========================================================================
    #                    PULSO
    # ========================================================================

    PULSE_HIGH_THRESHOLD = 100
    PULSE_HIGH = 5
    PULSE_LOW_THRESHOLD = 50    # estritamente menor
    PULSE_LOW = 3

    def to_dict(self) -> Dict:
        return {
            'scoring_mode': self.scoring_mode,
            'comparison_mode': self.comparison_mode,
            'factor_order': list(self.factor_order),
        }
