"""
CipherScore - Comando: demo
Percorre o ciclo de vida completo com titular, seguradora autorizada e
seguradora sem permissão.
"""

import click
from rich import box
from rich.console import Console
from rich.table import Table

from cipherscore_core.arithmetic.simulated import SimulatedArithmetic
from cipherscore_core.config import CipherScoreConfig
from cipherscore_core.errors import CipherScoreError
from cipherscore_core.models.record import check_plaintext_bounds, ordered_values
from cipherscore_core.service import RiskScoreService

console = Console()

DEMO_ATTRIBUTES = {
    'age': 100,
    'gender': 1,
    'weight': 95,
    'height': 150,
    'systolic': 150,
    'diastolic': 95,
    'ldl': 170,
    'hdl': 35,
    'triglycerides': 250,
    'total_cholesterol': 250,
    'blood_sugar': 130,
    'pulse': 110,
}


def run_demo():
    """
    Executa o roteiro e retorna a lista de passos (ação, ator, resultado).
    """
    engine = SimulatedArithmetic(core_identity=CipherScoreConfig.CORE_IDENTITY)
    service = RiskScoreService(engine=engine)

    subject, insurer, other = 'alice', 'acme-insurance', 'other-insurance'
    steps = []

    def step(action, actor, fn):
        try:
            outcome = fn()
            steps.append((action, actor, 'ok', outcome))
        except CipherScoreError as e:
            steps.append((action, actor, e.code, e.message))

    step('register', insurer, lambda: service.register_requester(insurer, 'Acme Insurance').name)
    step('register', other, lambda: service.register_requester(other, 'Other Insurance').name)

    raw, proof = engine.encrypt_inputs(ordered_values(check_plaintext_bounds(DEMO_ATTRIBUTES)), owner=subject)

    step('compute', other, lambda: service.compute_risk_score(other, subject, insurer))
    step('submit', subject, lambda: service.submit_health_data(subject, insurer, raw, proof).key)
    step('submit', subject, lambda: service.submit_health_data(subject, insurer, raw, proof).key)
    step('compute', other, lambda: f"{service.compute_risk_score(other, subject, insurer).operations_count} ops")
    step('read', insurer, lambda: service.get_risk_score(insurer, subject, insurer))
    step('grant', subject, lambda: service.grant_permission(subject, insurer) or 'granted')
    step('read', insurer, lambda: engine.decrypt(service.get_risk_score(insurer, subject, insurer), insurer))
    step('read', other, lambda: service.get_risk_score(other, subject, insurer))
    step('revoke', subject, lambda: service.revoke_permission(subject, insurer) or 'revoked')
    step('read', insurer, lambda: service.get_risk_score(insurer, subject, insurer))
    step('read', subject, lambda: engine.decrypt(service.get_risk_score(subject, subject, insurer), subject))

    return steps


@click.command(name='demo')
def demo_cmd():
    """
    Demonstra submit → compute → grant → revoke com três identidades.

    Exemplo:

      cipherscore demo
    """
    table = Table(
        title="🔐 CipherScore - Ciclo de Vida",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Ação", style="cyan")
    table.add_column("Ator", style="yellow")
    table.add_column("Status")
    table.add_column("Resultado")

    for i, (action, actor, status, outcome) in enumerate(run_demo(), start=1):
        style = "green" if status == 'ok' else "red"
        table.add_row(str(i), action, actor, f"[{style}]{status}[/{style}]", str(outcome))

    console.print(table)
