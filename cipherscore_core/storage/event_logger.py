"""
================================================================================
           CIPHERSCORE CORE - Event Logger (storage/event_logger.py)
================================================================================
Log estruturado dos eventos de domínio do CipherScore.
Registra submissões, cálculos, permissões e acessos negados.

Nunca loga valores: apenas identidades, handles e timestamps.
================================================================================
"""

import json
import logging
import time
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional


# Eventos de domínio
HEALTH_DATA_SUBMITTED = "HealthDataSubmitted"
RISK_SCORE_COMPUTED = "RiskScoreComputed"
RISK_SCORE_SENT = "RiskScoreSent"
PERMISSION_REVOKED = "PermissionRevoked"
INSURANCE_COMPANY_REGISTERED = "InsuranceCompanyRegistered"
ACCESS_DENIED = "AccessDenied"


class EventLogger:
    """
    Logger especializado para eventos de domínio.

    Features:
    - Logs estruturados em JSON (uma linha por evento)
    - Rotação automática de arquivos
    - security.log separado para acessos negados
    - Contadores por tipo de evento
    """

    def __init__(
        self,
        log_dir: str = "logs",
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        enable_console: bool = False
    ):
        """
        Args:
            log_dir: Diretório para salvar logs
            max_bytes: Tamanho máximo de cada arquivo de log
            backup_count: Número de backups a manter
            enable_console: Se True, também loga no console
        """
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.event_logger = self._setup_logger(
            'cipherscore.events',
            self.log_dir / 'events.log',
            max_bytes,
            backup_count
        )

        self.security_logger = self._setup_logger(
            'cipherscore.security',
            self.log_dir / 'security.log',
            max_bytes,
            backup_count
        )

        self.enable_console = enable_console
        if enable_console:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.INFO)
            console_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            self.event_logger.addHandler(console_handler)
            self.security_logger.addHandler(console_handler)

        self.stats = {
            'total_events_logged': 0,
            'events_by_type': {},
            'security_events': 0,
            'start_time': time.time(),
        }

    def _setup_logger(
        self,
        name: str,
        log_file: Path,
        max_bytes: int,
        backup_count: int
    ) -> logging.Logger:
        """Configura um logger com rotação de arquivos"""
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)

        # Fecha handlers de uma instância anterior (evita duplicação)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

        handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        handler.setFormatter(logging.Formatter('%(message)s'))

        logger.addHandler(handler)
        logger.propagate = False

        return logger

    def log_event(
        self,
        event_type: str,
        subject_id: Optional[str] = None,
        requester_id: Optional[str] = None,
        **details: Any
    ):
        """
        Loga um evento de domínio.

        Args:
            event_type: Nome do evento (ex: RISK_SCORE_COMPUTED)
            subject_id: Titular dos dados
            requester_id: Seguradora
            **details: Dados adicionais (handles, timestamps)
        """
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'subject_id': subject_id,
            'requester_id': requester_id,
        }
        if details:
            log_entry['details'] = details

        self.event_logger.info(json.dumps(log_entry, ensure_ascii=False))

        self.stats['total_events_logged'] += 1
        self.stats['events_by_type'][event_type] = \
            self.stats['events_by_type'].get(event_type, 0) + 1

    def log_security_event(self, event_type: str, details: Dict[str, Any]):
        """
        Loga evento de segurança (ex: ACCESS_DENIED).
        """
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'details': details,
        }

        self.security_logger.warning(json.dumps(log_entry, ensure_ascii=False))
        self.stats['security_events'] += 1

    def get_stats(self) -> Dict[str, Any]:
        """Retorna estatísticas de logging"""
        uptime_seconds = time.time() - self.stats['start_time']

        return {
            'total_events_logged': self.stats['total_events_logged'],
            'events_by_type': dict(self.stats['events_by_type']),
            'security_events': self.stats['security_events'],
            'uptime_seconds': round(uptime_seconds, 2),
            'log_directory': str(self.log_dir),
        }

    def search_logs(
        self,
        event_type: Optional[str] = None,
        subject_id: Optional[str] = None,
        limit: int = 100,
        security: bool = False
    ) -> list:
        """
        Busca logs por critérios.

        Args:
            event_type: Filtrar por tipo de evento
            subject_id: Filtrar por titular (ignorado em security.log)
            limit: Número máximo de resultados
            security: Busca em security.log em vez de events.log
        """
        results = []
        log_file = self.log_dir / ('security.log' if security else 'events.log')

        if not log_file.exists():
            return results

        for handler in self.event_logger.handlers + self.security_logger.handlers:
            handler.flush()

        with open(log_file, 'r', encoding='utf-8') as f:
            for line in f:
                if len(results) >= limit:
                    break

                try:
                    entry = json.loads(line.strip())
                except json.JSONDecodeError:
                    continue

                if event_type and entry.get('event_type') != event_type:
                    continue

                if subject_id and not security and entry.get('subject_id') != subject_id:
                    continue

                results.append(entry)

        return results

    def close(self):
        for logger in (self.event_logger, self.security_logger):
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
