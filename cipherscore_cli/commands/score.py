"""
CipherScore - Comando: score
Calcula o score de risco de um conjunto de atributos, de ponta a ponta,
usando o motor simulado.
"""

import json
from pathlib import Path

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cipherscore_core.arithmetic.simulated import SimulatedArithmetic
from cipherscore_core.config import CipherScoreConfig
from cipherscore_core.errors import CipherScoreError
from cipherscore_core.logger import get_logger, log_context
from cipherscore_core.models.record import check_plaintext_bounds, ordered_values
from cipherscore_core.scoring.weights import COMPARISON_MODES, SCORING_MODES, WeightConfig
from cipherscore_core.service import RiskScoreService
from cipherscore_core.storage.event_logger import EventLogger

console = Console()

# Ordem dos argumentos na linha de comando
CLI_ATTRIBUTE_ORDER = (
    'age',
    'gender',
    'weight',
    'height',
    'systolic',
    'diastolic',
    'ldl',
    'hdl',
    'triglycerides',
    'total_cholesterol',
    'blood_sugar',
    'pulse',
)

SUBJECT_ID = 'subject'
REQUESTER_ID = 'insurer'


def run_scoring(values, weights, event_logger=None):
    """
    Executa o fluxo completo (registro, submissão, cálculo, permissão) e
    devolve o resultado já descriptografado pela seguradora.

    Args:
        values: nome do atributo -> valor em plaintext
        weights: WeightConfig
        event_logger: EventLogger opcional

    Returns:
        dict com score, contribuição por fator e metadados
    """
    checked = check_plaintext_bounds(values)

    engine = SimulatedArithmetic(core_identity=CipherScoreConfig.CORE_IDENTITY)
    service = RiskScoreService(engine=engine, weights=weights, event_logger=event_logger)
    service.register_requester(REQUESTER_ID, 'CLI Insurance')

    raw, proof = engine.encrypt_inputs(ordered_values(checked), owner=SUBJECT_ID)
    service.submit_health_data(SUBJECT_ID, REQUESTER_ID, raw, proof)
    result = service.compute_risk_score(SUBJECT_ID, SUBJECT_ID, REQUESTER_ID)
    service.grant_permission(SUBJECT_ID, REQUESTER_ID)

    handle = service.get_risk_score(REQUESTER_ID, SUBJECT_ID, REQUESTER_ID)

    return {
        'score': engine.decrypt(handle, REQUESTER_ID),
        # Contribuições internas: só o harness (chave conhecida) as lê
        'factors': {name: engine.reveal(ct) for name, ct in result.contributions.items()},
        'operations_count': result.operations_count,
        'processing_time_ms': round(result.processing_time_ms, 2),
        'config': weights.to_dict(),
    }


@click.command(name='score')
@click.argument('values', nargs=12, type=int)
@click.option(
    '--mode', '-m',
    type=click.Choice(SCORING_MODES),
    default=CipherScoreConfig.SCORING_MODE,
    help='threshold (peso/altura) ou bmi (IMC homomórfico)'
)
@click.option(
    '--comparison', '-c',
    type=click.Choice(COMPARISON_MODES),
    default=CipherScoreConfig.COMPARISON_MODE,
    help='scalar (limiares públicos) ou encrypted (limiares criptografados)'
)
@click.option(
    '--output', '-o',
    type=click.Path(),
    help='Salva resultado em arquivo JSON'
)
@click.option(
    '--format',
    type=click.Choice(['json', 'table', 'both']),
    default='table',
    help='Formato de saída (padrão: table)'
)
@click.pass_context
def score_cmd(ctx, values, mode, comparison, output, format):
    """
    Calcula o score de risco de doze atributos.

    VALUES, nesta ordem: age gender weight height systolic diastolic
    ldl hdl triglycerides total_cholesterol blood_sugar pulse

    Exemplos:

      cipherscore score 30 1 70 175 120 80 100 50 150 200 90 70

      cipherscore score 100 1 95 150 150 95 170 35 250 250 130 110 --format json

      cipherscore score 45 0 88 170 130 85 120 45 180 220 95 72 --mode bmi
    """
    logger = get_logger('cipherscore.cli')
    attributes = dict(zip(CLI_ATTRIBUTE_ORDER, values))

    event_logger = None
    if CipherScoreConfig.EVENT_LOG_ENABLED:
        event_logger = EventLogger(
            log_dir=CipherScoreConfig.LOG_DIR,
            max_bytes=CipherScoreConfig.LOG_MAX_BYTES,
            backup_count=CipherScoreConfig.LOG_BACKUP_COUNT,
        )

    try:
        with log_context(command='score'):
            weights = WeightConfig(scoring_mode=mode, comparison_mode=comparison)
            result = run_scoring(attributes, weights, event_logger)
    except CipherScoreError as e:
        logger.error('score_failed', **e.to_dict())
        console.print(f"[red]❌ {e.code}:[/red] {e.message}")
        raise click.Abort()
    finally:
        if event_logger is not None:
            event_logger.close()

    if format in ['table', 'both']:
        display_score_table(result, quiet=ctx.obj.get('quiet'))

    if format in ['json', 'both']:
        click.echo(json.dumps(result, indent=2))

    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(result, f, indent=2, ensure_ascii=False)
        console.print(f"[green]✓[/green] Resultado salvo em: {output_path}")


def display_score_table(result: dict, quiet: bool = False):
    """Exibe o score e a contribuição de cada fator."""
    table = Table(
        title="📊 Contribuição por Fator",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
        caption=f"Score total: {result['score']}",
    )
    table.add_column("Fator", style="cyan")
    table.add_column("Pontos", justify="right", style="yellow")

    for name, points in result['factors'].items():
        table.add_row(name, str(points))

    console.print(table)

    if not quiet:
        config = result['config']
        console.print(Panel.fit(
            f"Score: [bold yellow]{result['score']}[/bold yellow]\n"
            f"Modo: [cyan]{config['scoring_mode']}[/cyan] | "
            f"Comparação: [cyan]{config['comparison_mode']}[/cyan]\n"
            f"Operações homomórficas: [cyan]{result['operations_count']}[/cyan]",
            title="🔐 CipherScore",
            border_style="cyan",
        ))
