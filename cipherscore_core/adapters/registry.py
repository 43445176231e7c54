"""
================================================================================
         CIPHERSCORE CORE - Requester Registry (adapters/registry.py)
================================================================================
Registro de seguradoras (colaborador externo).

O núcleo só LÊ o predicado is_registered(). Esta implementação em memória
existe para que o sistema rode de ponta a ponta em testes e na CLI.
================================================================================
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from cipherscore_core.errors import RegistrationError


@dataclass
class RegisteredRequester:
    """Seguradora registrada"""
    identity: str
    name: str
    registered_at: float = field(default_factory=time.time)

    def to_dict(self) -> Dict:
        return {
            'identity': self.identity,
            'name': self.name,
            'registered_at': self.registered_at,
        }


class RequesterRegistry:
    """Registro em memória de seguradoras"""

    def __init__(self):
        self._requesters: Dict[str, RegisteredRequester] = {}

    def register(self, identity: str, name: str) -> RegisteredRequester:
        """
        Registra uma seguradora.

        Raises:
            RegistrationError: nome vazio ou seguradora já registrada
        """
        if not name or not name.strip():
            raise RegistrationError("Company name required", requester_id=identity)
        if identity in self._requesters:
            raise RegistrationError("Company already registered", requester_id=identity)

        requester = RegisteredRequester(identity=identity, name=name.strip())
        self._requesters[identity] = requester
        return requester

    def is_registered(self, identity: str) -> bool:
        return identity in self._requesters

    def get(self, identity: str) -> Optional[RegisteredRequester]:
        return self._requesters.get(identity)

    def list_all(self) -> List[RegisteredRequester]:
        return list(self._requesters.values())
