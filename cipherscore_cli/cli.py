"""
CipherScore - CLI Principal
Entry point para todos os comandos do CipherScore.
"""

import sys

import click

from cipherscore_cli.commands import config_cmd, demo, score
from cipherscore_core.config import CipherScoreConfig
from cipherscore_core.logger import get_logger, setup_logger

CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=CipherScoreConfig.VERSION, prog_name='CipherScore')
@click.option(
    '--verbose', '-v',
    is_flag=True,
    help='Ativa modo verbose (DEBUG logs)'
)
@click.option(
    '--quiet', '-q',
    is_flag=True,
    help='Modo silencioso (apenas erros)'
)
@click.pass_context
def cli(ctx, verbose, quiet):
    """
    🔐 CipherScore - Score de risco sobre dados de saúde criptografados

    Exemplos de uso:

      cipherscore score 30 1 70 175 120 80 100 50 150 200 90 70

      cipherscore demo

      cipherscore config

    Use 'cipherscore COMANDO --help' para ver opções de cada comando.
    """
    if quiet:
        log_level = 'ERROR'
    elif verbose:
        log_level = 'DEBUG'
    else:
        log_level = CipherScoreConfig.LOG_LEVEL

    setup_logger(name='cipherscore', level=log_level, json_format=CipherScoreConfig.LOG_JSON)

    ctx.ensure_object(dict)
    ctx.obj['log_level'] = log_level
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet


# ============================================
# Registra comandos
# ============================================

cli.add_command(score.score_cmd)
cli.add_command(demo.demo_cmd)
cli.add_command(config_cmd.config_cmd)


def main():
    """Entry point principal."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        click.echo('\n\n⚠️  Operação cancelada pelo usuário.', err=True)
        sys.exit(130)
    except Exception as e:
        logger = get_logger()
        logger.error('cli_unexpected_error', error=str(e), exc_info=True)
        click.echo(f'\n❌ Erro inesperado: {e}', err=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
