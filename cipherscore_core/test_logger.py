"""
Testes do logging estruturado (mascaramento e cor do nível).
"""

import io
import json

from colorama import Fore, Style

from cipherscore_core.logger import REDACTED, get_logger, level_colorizer, log_context, redact_plaintext, setup_logger


class _Terminal(io.StringIO):
    def isatty(self):
        return True


def test_redact_plaintext_masks_sensitive_keys():
    event = redact_plaintext(None, 'info', {'event': 'x', 'value': 130, 'subject_id': 'alice'})
    assert event == {'event': 'x', 'value': REDACTED, 'subject_id': 'alice'}


def test_level_is_colored_once_on_a_terminal():
    colorize = level_colorizer(_Terminal())
    event = colorize(None, 'warning', {'event': 'x', 'level': 'warning'})
    assert event['level'] == f"{Fore.YELLOW}warning{Style.RESET_ALL}"
    assert event['level'].count('\x1b[') == 2


def test_level_stays_plain_off_a_terminal():
    colorize = level_colorizer(io.StringIO())
    assert colorize(None, 'info', {'level': 'info'}) == {'level': 'info'}


def test_json_logs_carry_context_and_never_plaintext(capsys):
    setup_logger(level='INFO', json_format=True)
    logger = get_logger('cipherscore.test')

    with log_context(command='score'):
        logger.info('record_submitted', subject_id='alice', values=[175, 70])
    logger.debug('hidden_event')

    lines = [line for line in capsys.readouterr().err.splitlines() if line.strip()]
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry['event'] == 'record_submitted'
    assert entry['command'] == 'score'
    assert entry['level'] == 'info'
    assert entry['values'] == REDACTED
