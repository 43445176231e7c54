"""
Storage - Registros criptografados e log de eventos
"""

from cipherscore_core.storage.record_store import EncryptedRecordStore
from cipherscore_core.storage.event_logger import EventLogger

__all__ = ['EncryptedRecordStore', 'EventLogger']
