"""
================================================================================
            CIPHERSCORE CORE - Scoring Factors (scoring/factors.py)
================================================================================
Cálculo individualizado de cada fator de risco, sobre dados criptografados.

REGRA DE OURO: nenhum `if` depende de um valor criptografado.
Cada degrau calcula os dois resultados possíveis e escolhe via select():

    select(predicado, valor_se_verdadeiro, valor_se_falso)

Assim a sequência de operações é idêntica para qualquer entrada.
================================================================================
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from cipherscore_core.arithmetic.base import Ciphertext, HomomorphicArithmetic
from cipherscore_core.models.record import EncryptedAttributes

if TYPE_CHECKING:
    from cipherscore_core.scoring.weights import WeightConfig


@dataclass
class FactorResult:
    """Contribuição (criptografada) de um fator"""
    name: str
    contribution: Ciphertext
    rule: str


class ScoringFactors:
    """
    Calcula a contribuição de cada fator de risco.

    Cada método recebe os atributos criptografados e retorna um
    FactorResult com:
    - name: nome do fator
    - contribution: ciphertext com os pontos do fator
    - rule: descrição textual da regra (pública)
    """

    def __init__(self, engine: HomomorphicArithmetic, config: "WeightConfig"):
        self.engine = engine
        self.config = config

    def calculate(self, name: str, attrs: EncryptedAttributes) -> FactorResult:
        """Calcula um fator pelo nome (ex: 'blood_pressure')"""
        method: Callable[[EncryptedAttributes], FactorResult] = getattr(self, f"calculate_{name}", None)
        if method is None:
            raise KeyError(f"unknown factor: {name}")
        return method(attrs)

    # ========================================================================
    #                    PRIMITIVAS
    # ========================================================================

    def _const(self, value: int) -> Ciphertext:
        return self.engine.trivial_encrypt(value)

    def _gt(self, value: Ciphertext, threshold: int) -> Ciphertext:
        if self.config.comparison_mode == "encrypted":
            return self.engine.gt(value, self._const(threshold))
        return self.engine.gt_scalar(value, threshold)

    def _lt(self, value: Ciphertext, threshold: int) -> Ciphertext:
        if self.config.comparison_mode == "encrypted":
            return self.engine.lt(value, self._const(threshold))
        return self.engine.lt_scalar(value, threshold)

    def _step(self, predicate: Ciphertext, points: int) -> Ciphertext:
        """points se predicado, senão 0"""
        return self.engine.select(predicate, self._const(points), self._const(0))

    def _two_tier(self, high: Ciphertext, high_points: int, medium: Ciphertext, medium_points: int) -> Ciphertext:
        """high_points se high, senão medium_points se medium, senão 0"""
        inner = self._step(medium, medium_points)
        return self.engine.select(high, self._const(high_points), inner)

    # ========================================================================
    #                    FATORES LINEARES
    # ========================================================================

    def calculate_age(self, attrs: EncryptedAttributes) -> FactorResult:
        c = self.config
        return FactorResult(
            name='age',
            contribution=self.engine.mul_scalar(attrs.age, c.AGE_MULTIPLIER),
            rule=f"age x {c.AGE_MULTIPLIER}",
        )

    def calculate_gender(self, attrs: EncryptedAttributes) -> FactorResult:
        c = self.config
        return FactorResult(
            name='gender',
            contribution=self.engine.mul_scalar(attrs.gender, c.GENDER_MULTIPLIER),
            rule=f"gender x {c.GENDER_MULTIPLIER}",
        )

    # ========================================================================
    #                    COMPOSIÇÃO CORPORAL
    # ========================================================================

    def calculate_weight(self, attrs: EncryptedAttributes) -> FactorResult:
        c = self.config
        contribution = self._two_tier(
            self._gt(attrs.weight, c.WEIGHT_HIGH_THRESHOLD), c.WEIGHT_HIGH,
            self._gt(attrs.weight, c.WEIGHT_MEDIUM_THRESHOLD), c.WEIGHT_MEDIUM,
        )
        return FactorResult(
            name='weight',
            contribution=contribution,
            rule=(f"+{c.WEIGHT_HIGH} if weight > {c.WEIGHT_HIGH_THRESHOLD}, "
                  f"else +{c.WEIGHT_MEDIUM} if weight > {c.WEIGHT_MEDIUM_THRESHOLD}"),
        )

    def calculate_height(self, attrs: EncryptedAttributes) -> FactorResult:
        c = self.config
        return FactorResult(
            name='height',
            contribution=self._step(self._lt(attrs.height, c.HEIGHT_LOW_THRESHOLD), c.HEIGHT_LOW),
            rule=f"+{c.HEIGHT_LOW} if height < {c.HEIGHT_LOW_THRESHOLD}",
        )

    def calculate_body_mass(self, attrs: EncryptedAttributes) -> FactorResult:
        """
        IMC sem divisão homomórfica.

        peso * 10000 > limiar * altura²  ⇔  IMC > limiar
        Os dois lados são criptografados, então a comparação é gt() entre
        ciphertexts, independente de comparison_mode.
        """
        c = self.config
        e = self.engine
        scaled_weight = e.mul_scalar(attrs.weight, c.BMI_SCALE)
        height_sq = e.mul(attrs.height, attrs.height)

        obese = e.gt(scaled_weight, e.mul_scalar(height_sq, c.BMI_OBESE_THRESHOLD))
        overweight = e.gt(scaled_weight, e.mul_scalar(height_sq, c.BMI_OVERWEIGHT_THRESHOLD))

        return FactorResult(
            name='body_mass',
            contribution=self._two_tier(obese, c.BMI_OBESE, overweight, c.BMI_OVERWEIGHT),
            rule=(f"+{c.BMI_OBESE} if BMI > {c.BMI_OBESE_THRESHOLD}, "
                  f"else +{c.BMI_OVERWEIGHT} if BMI > {c.BMI_OVERWEIGHT_THRESHOLD}"),
        )

    # ========================================================================
    #                    CARDIOVASCULAR
    # ========================================================================

    def calculate_blood_pressure(self, attrs: EncryptedAttributes) -> FactorResult:
        c = self.config
        hypertensive = self.engine.bool_or(
            self._gt(attrs.systolic, c.SYSTOLIC_THRESHOLD),
            self._gt(attrs.diastolic, c.DIASTOLIC_THRESHOLD),
        )
        return FactorResult(
            name='blood_pressure',
            contribution=self._step(hypertensive, c.BLOOD_PRESSURE_HIGH),
            rule=(f"+{c.BLOOD_PRESSURE_HIGH} if systolic > {c.SYSTOLIC_THRESHOLD} "
                  f"or diastolic > {c.DIASTOLIC_THRESHOLD}"),
        )

    def calculate_cholesterol(self, attrs: EncryptedAttributes) -> FactorResult:
        c = self.config
        # LDL alto e HDL baixo somam de forma independente
        ldl = self._step(self._gt(attrs.ldl, c.LDL_THRESHOLD), c.LDL_HIGH)
        hdl = self._step(self._lt(attrs.hdl, c.HDL_THRESHOLD), c.HDL_LOW)
        return FactorResult(
            name='cholesterol',
            contribution=self.engine.add(ldl, hdl),
            rule=(f"+{c.LDL_HIGH} if LDL > {c.LDL_THRESHOLD}, "
                  f"+{c.HDL_LOW} if HDL < {c.HDL_THRESHOLD}"),
        )

    def calculate_triglycerides(self, attrs: EncryptedAttributes) -> FactorResult:
        c = self.config
        return FactorResult(
            name='triglycerides',
            contribution=self._step(
                self._gt(attrs.triglycerides, c.TRIGLYCERIDES_THRESHOLD), c.TRIGLYCERIDES_HIGH
            ),
            rule=f"+{c.TRIGLYCERIDES_HIGH} if triglycerides > {c.TRIGLYCERIDES_THRESHOLD}",
        )

    def calculate_total_cholesterol(self, attrs: EncryptedAttributes) -> FactorResult:
        c = self.config
        return FactorResult(
            name='total_cholesterol',
            contribution=self._step(
                self._gt(attrs.total_cholesterol, c.TOTAL_CHOLESTEROL_THRESHOLD), c.TOTAL_CHOLESTEROL_HIGH
            ),
            rule=f"+{c.TOTAL_CHOLESTEROL_HIGH} if total cholesterol > {c.TOTAL_CHOLESTEROL_THRESHOLD}",
        )

    # ========================================================================
    #                    METABÓLICO
    # ========================================================================

    def calculate_blood_sugar(self, attrs: EncryptedAttributes) -> FactorResult:
        c = self.config
        contribution = self._two_tier(
            self._gt(attrs.blood_sugar, c.BLOOD_SUGAR_DIABETIC_THRESHOLD), c.BLOOD_SUGAR_DIABETIC,
            self._gt(attrs.blood_sugar, c.BLOOD_SUGAR_PREDIABETIC_THRESHOLD), c.BLOOD_SUGAR_PREDIABETIC,
        )
        return FactorResult(
            name='blood_sugar',
            contribution=contribution,
            rule=(f"+{c.BLOOD_SUGAR_DIABETIC} if blood sugar > {c.BLOOD_SUGAR_DIABETIC_THRESHOLD}, "
                  f"else +{c.BLOOD_SUGAR_PREDIABETIC} if > {c.BLOOD_SUGAR_PREDIABETIC_THRESHOLD}"),
        )

    def calculate_pulse(self, attrs: EncryptedAttributes) -> FactorResult:
        c = self.config
        # Taquicardia e bradicardia são independentes
        high = self._step(self._gt(attrs.pulse, c.PULSE_HIGH_THRESHOLD), c.PULSE_HIGH)
        low = self._step(self._lt(attrs.pulse, c.PULSE_LOW_THRESHOLD), c.PULSE_LOW)
        return FactorResult(
            name='pulse',
            contribution=self.engine.add(high, low),
            rule=(f"+{c.PULSE_HIGH} if pulse > {c.PULSE_HIGH_THRESHOLD}, "
                  f"+{c.PULSE_LOW} if pulse < {c.PULSE_LOW_THRESHOLD}"),
        )

