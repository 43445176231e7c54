"""
================================================================================
        CIPHERSCORE CORE - Encrypted Record Store (storage/record_store.py)
================================================================================
Armazenamento em memória dos registros criptografados, indexado por
RecordKey(subject_id, requester_id).

No máximo um registro por par, para sempre. Registros nunca são removidos.
================================================================================
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from cipherscore_core.errors import AlreadySubmitted
from cipherscore_core.models.record import EncryptedHealthRecord, RecordKey


class _KeyLock:
    """Lock de uma chave e quantas threads o seguram ou aguardam"""

    def __init__(self):
        self.lock = threading.Lock()
        self.holders = 0


class EncryptedRecordStore:
    """
    Store de EncryptedHealthRecord.

    Também fornece um lock por chave: chaves diferentes nunca se bloqueiam.
    """

    def __init__(self):
        self._records: Dict[RecordKey, EncryptedHealthRecord] = {}
        self._locks: Dict[RecordKey, _KeyLock] = {}
        self._locks_guard = threading.Lock()

    def get(self, key: RecordKey) -> Optional[EncryptedHealthRecord]:
        return self._records.get(key)

    def contains(self, key: RecordKey) -> bool:
        return key in self._records

    def insert(self, record: EncryptedHealthRecord):
        """
        Insere um registro novo.

        Raises:
            AlreadySubmitted: já existe registro para a chave
        """
        if record.key in self._records:
            raise AlreadySubmitted(subject_id=record.subject_id, requester_id=record.requester_id)
        self._records[record.key] = record

    def keys(self) -> List[RecordKey]:
        return list(self._records)

    def records_for_subject(self, subject_id: str) -> List[EncryptedHealthRecord]:
        return [r for k, r in self._records.items() if k.subject_id == subject_id]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[EncryptedHealthRecord]:
        return iter(list(self._records.values()))

    # ========================================================================
    #                    EXCLUSÃO MÚTUA POR CHAVE
    # ========================================================================

    @contextmanager
    def lock(self, key: RecordKey):
        """
        Serializa operações de escrita sobre uma mesma chave.

        A entrada da chave só existe enquanto alguém segura ou espera o lock,
        então chaves inventadas não acumulam locks.
        """
        with self._locks_guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _KeyLock()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._locks[key]

    def active_locks(self) -> int:
        """Número de chaves com lock em uso ou em espera"""
        with self._locks_guard:
            return len(self._locks)
