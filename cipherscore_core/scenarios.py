"""
Cenários de referência e identidades usados pelos testes.

reference_score() recalcula o score em plaintext, com as mesmas regras do
modo threshold, para comparar com o resultado homomórfico.
"""

# Ordem usada nos cenários: age, gender, weight, height, systolic, diastolic,
# LDL, HDL, triglycerides, totalChol, bloodSugar, pulse
SCENARIO_ORDER = (
    'age', 'gender', 'weight', 'height', 'systolic', 'diastolic',
    'ldl', 'hdl', 'triglycerides', 'total_cholesterol', 'blood_sugar', 'pulse',
)

HEALTHY = (30, 1, 70, 175, 120, 80, 100, 50, 150, 200, 90, 70)
HIGH_RISK = (100, 1, 95, 150, 150, 95, 170, 35, 250, 250, 130, 110)

SUBJECT_A = 'alice'
SUBJECT_B = 'bob'
INSURER_X = 'insurer-x'
INSURER_Y = 'insurer-y'
OUTSIDER = 'outsider'


def as_attributes(values):
    """Tupla na ordem dos cenários -> dict nome -> valor"""
    return dict(zip(SCENARIO_ORDER, values))


def reference_score(values):
    """Score esperado calculado em plaintext (modo threshold)."""
    v = as_attributes(values)
    score = v['age'] * 2 + v['gender'] * 10
    score += 20 if v['weight'] > 90 else 10 if v['weight'] > 75 else 0
    score += 5 if v['height'] < 160 else 0
    score += 15 if v['systolic'] > 140 or v['diastolic'] > 90 else 0
    score += 10 if v['ldl'] > 160 else 0
    score += 10 if v['hdl'] < 40 else 0
    score += 8 if v['triglycerides'] > 200 else 0
    score += 12 if v['total_cholesterol'] > 240 else 0
    score += 25 if v['blood_sugar'] > 126 else 10 if v['blood_sugar'] > 100 else 0
    score += 5 if v['pulse'] > 100 else 0
    score += 3 if v['pulse'] < 50 else 0
    return score

