"""
CipherScore - Comando: config
Mostra a configuração efetiva (variáveis CIPHERSCORE_* aplicadas).
"""

import json

import click

from cipherscore_core.config import CipherScoreConfig


@click.command(name='config')
def config_cmd():
    """Exibe a configuração atual em JSON."""
    click.echo(json.dumps(CipherScoreConfig.get_config_summary(), indent=2))
