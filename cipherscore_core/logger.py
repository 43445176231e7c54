"""
CipherScore - Structured Logging
Logs operacionais do núcleo e da CLI via structlog.

Os eventos carregam só identidades, handles e contadores. Qualquer chave que
possa conter um valor de saúde em claro é mascarada antes da renderização.
"""

import sys
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import structlog
from colorama import Fore, Style, init as colorama_init

colorama_init()


LEVEL_STYLES = {
    'debug': Fore.CYAN,
    'info': Fore.GREEN,
    'warning': Fore.YELLOW,
    'error': Fore.RED,
    'critical': Fore.RED + Style.BRIGHT,
}

# Chaves que nunca saem em claro
REDACTED_KEYS = frozenset({'value', 'values', 'plaintext', 'attributes', 'score_value'})
REDACTED = '<redacted>'


# ============================================
# Processors
# ============================================

def redact_plaintext(logger, method_name, event_dict):
    """Mascara chaves que poderiam vazar atributos ou scores em claro."""
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def level_colorizer(stream):
    """
    Processor que pinta o nível com colorama quando `stream` é um terminal.

    Único ponto de cor da saída de console: o ConsoleRenderer roda sem cores.
    """
    enabled = stream.isatty()

    def colorize_level(logger, method_name, event_dict):
        level = event_dict.get('level', method_name)
        if enabled:
            color = LEVEL_STYLES.get(level, Fore.WHITE)
            event_dict['level'] = f"{color}{level}{Style.RESET_ALL}"
        return event_dict

    return colorize_level


# ============================================
# Setup
# ============================================

def setup_logger(
    name: str = 'cipherscore',
    level: str = 'INFO',
    log_file: Optional[Path] = None,
    json_format: bool = False
):
    """
    Configura o structlog sobre o logging da stdlib e retorna um logger.

    Args:
        name: Nome do logger
        level: DEBUG, INFO, WARNING, ERROR ou CRITICAL
        log_file: Arquivo adicional de log (opcional)
        json_format: JSON por linha em vez do formato de console
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(format="%(message)s", level=log_level, handlers=handlers, force=True)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt='iso', utc=True),
        redact_plaintext,
        structlog.processors.format_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(level_colorizer(sys.stderr))
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    return structlog.get_logger(name)


def get_logger(name: str = 'cipherscore', **context):
    """Logger lazy; usa a configuração vigente no momento de cada chamada."""
    logger = structlog.get_logger(name)
    return logger.bind(**context) if context else logger


@contextmanager
def log_context(**context):
    """
    Anexa contexto (ex: command, subject_id) a todos os logs do bloco.

    Exemplo:
        with log_context(command='score'):
            logger.info('score_started')
    """
    with structlog.contextvars.bound_contextvars(**context):
        yield
