"""
================================================================================
                TESTE DE INTEGRAÇÃO: CLI + Core
================================================================================
Roda os comandos da CLI de ponta a ponta sobre o motor simulado.

Workflow:
1. Invoca `cipherscore score` com os cenários de referência
2. Confere o score descriptografado pela seguradora
3. Percorre o roteiro do `cipherscore demo`
================================================================================
"""

import json

import pytest
from click.testing import CliRunner

from cipherscore_cli.cli import cli
from cipherscore_cli.commands.demo import run_demo
from cipherscore_cli.commands.score import CLI_ATTRIBUTE_ORDER, run_scoring
from cipherscore_core.scenarios import HEALTHY, HIGH_RISK, SCENARIO_ORDER, as_attributes
from cipherscore_core.scoring.weights import WeightConfig


@pytest.fixture
def runner():
    return CliRunner()


def invoke_score(runner, values, *options):
    args = ['--quiet', 'score', *map(str, values), '--format', 'json', *options]
    return runner.invoke(cli, args)


def test_cli_argument_order_matches_scenarios():
    assert CLI_ATTRIBUTE_ORDER == SCENARIO_ORDER


@pytest.mark.parametrize('values, expected', [
    (HEALTHY, 70),
    (HIGH_RISK, 320),
])
def test_score_command_json(runner, values, expected):
    result = invoke_score(runner, values)

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload['score'] == expected
    assert sum(payload['factors'].values()) == expected
    assert payload['config']['scoring_mode'] == 'threshold'


def test_score_command_bmi_mode(runner):
    result = invoke_score(runner, HIGH_RISK, '--mode', 'bmi')

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload['score'] == 315
    assert 'body_mass' in payload['factors']
    assert 'weight' not in payload['factors']


def test_score_command_encrypted_comparison(runner):
    result = invoke_score(runner, HIGH_RISK, '--comparison', 'encrypted')

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)['score'] == 320


def test_score_command_writes_output_file(runner, tmp_path):
    target = tmp_path / 'out' / 'score.json'

    result = runner.invoke(cli, ['--quiet', 'score', *map(str, HEALTHY), '--output', str(target)])

    assert result.exit_code == 0, result.output
    assert json.loads(target.read_text(encoding='utf-8'))['score'] == 70


def test_score_command_rejects_out_of_range_values(runner):
    values = list(HEALTHY)
    values[SCENARIO_ORDER.index('age')] = 0

    result = invoke_score(runner, values)

    assert result.exit_code != 0
    assert 'AttributeOutOfRange' in result.output


def test_score_command_needs_twelve_values(runner):
    result = runner.invoke(cli, ['score', *map(str, HEALTHY[:11])])
    assert result.exit_code == 2


def test_run_scoring_reports_every_factor():
    weights = WeightConfig(scoring_mode='threshold', comparison_mode='scalar')
    result = run_scoring(as_attributes(HIGH_RISK), weights)

    assert result['score'] == 320
    assert list(result['factors']) == list(weights.factor_order)
    assert result['operations_count'] > 0


def test_demo_walkthrough():
    steps = run_demo()
    statuses = [status for _, _, status, _ in steps]

    assert statuses == [
        'ok',                 # register
        'ok',                 # register
        'NoDataSubmitted',    # compute antes do submit
        'ok',                 # submit
        'AlreadySubmitted',   # submit repetido
        'ok',                 # compute por terceiro
        'NotAuthorized',      # leitura sem grant
        'ok',                 # grant
        'ok',                 # leitura com grant
        'NotAuthorized',      # outra seguradora
        'ok',                 # revoke
        'NotAuthorized',      # leitura após revoke
        'ok',                 # titular lê
    ]
    assert steps[8][3] == 320
    assert steps[12][3] == 320


def test_demo_command(runner):
    result = runner.invoke(cli, ['--quiet', 'demo'])
    assert result.exit_code == 0, result.output


def test_config_command(runner):
    result = runner.invoke(cli, ['--quiet', 'config'])

    assert result.exit_code == 0, result.output
    summary = json.loads(result.output)
    assert summary['system']['name'] == 'CipherScore'
    assert summary['scoring']['mode'] in ('threshold', 'bmi')
