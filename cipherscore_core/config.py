"""
================================================================================
                CIPHERSCORE CORE - Global Configuration (config.py)
================================================================================
Configuração global do CipherScore.
Centraliza todas as configurações em um único lugar.
================================================================================
"""

import os
from pathlib import Path


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class CipherScoreConfig:
    """
    Configuração global do CipherScore.

    Todas as configurações do sistema em um único lugar.
    Pode ser sobrescrita por variáveis de ambiente CIPHERSCORE_*.
    """

    # ========================================================================
    #                          CONFIGURAÇÕES GERAIS
    # ========================================================================

    SYSTEM_NAME = "CipherScore"
    VERSION = "0.1.0"

    ROOT_DIR = Path(__file__).parent

    # Identidade do núcleo perante a ACL do motor homomórfico
    CORE_IDENTITY = os.getenv("CIPHERSCORE_CORE_IDENTITY", "cipherscore-core")

    # ========================================================================
    #                          LOGGING
    # ========================================================================

    LOG_DIR = os.getenv("CIPHERSCORE_LOG_DIR", "logs")

    # Tamanho máximo de cada arquivo de log (em bytes)
    LOG_MAX_BYTES = int(os.getenv("CIPHERSCORE_LOG_MAX_BYTES", 10 * 1024 * 1024))  # 10MB

    LOG_BACKUP_COUNT = int(os.getenv("CIPHERSCORE_LOG_BACKUP_COUNT", 5))

    LOG_CONSOLE = _env_flag("CIPHERSCORE_LOG_CONSOLE", "true")

    # Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    LOG_LEVEL = os.getenv("CIPHERSCORE_LOG_LEVEL", "INFO")

    # Logs operacionais em JSON em vez do formato legível
    LOG_JSON = _env_flag("CIPHERSCORE_LOG_JSON", "false")

    # Eventos de domínio (HealthDataSubmitted, RiskScoreComputed, ...)
    EVENT_LOG_ENABLED = _env_flag("CIPHERSCORE_EVENT_LOG", "false")

    # ========================================================================
    #                          SCORING
    # ========================================================================

    # "threshold" (peso/altura em degraus) ou "bmi" (IMC homomórfico)
    SCORING_MODE = os.getenv("CIPHERSCORE_SCORING_MODE", "threshold")

    # "scalar" (ciphertext vs constante pública) ou "encrypted" (limiares criptografados)
    COMPARISON_MODE = os.getenv("CIPHERSCORE_COMPARISON_MODE", "scalar")

    # ========================================================================
    #                          MÉTODOS AUXILIARES
    # ========================================================================

    @classmethod
    def get_config_summary(cls) -> dict:
        """Retorna um resumo das configurações"""
        return {
            'system': {
                'name': cls.SYSTEM_NAME,
                'version': cls.VERSION,
                'core_identity': cls.CORE_IDENTITY,
            },
            'logging': {
                'directory': cls.LOG_DIR,
                'max_bytes': cls.LOG_MAX_BYTES,
                'backup_count': cls.LOG_BACKUP_COUNT,
                'console_enabled': cls.LOG_CONSOLE,
                'level': cls.LOG_LEVEL,
                'json': cls.LOG_JSON,
                'event_log_enabled': cls.EVENT_LOG_ENABLED,
            },
            'scoring': {
                'mode': cls.SCORING_MODE,
                'comparison': cls.COMPARISON_MODE,
            },
        }
