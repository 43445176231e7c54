"""
================================================================================
     CIPHERSCORE CORE - Simulated Arithmetic Engine (arithmetic/simulated.py)
================================================================================
Motor homomórfico em memória para testes, CLI e demonstrações.

NÃO é criptografia. Os plaintexts ficam numa tabela privada indexada por
handles aleatórios, e o motor aplica a mesma ACL que um motor real aplicaria.
A "prova" de entrada é um HMAC sobre o material bruto, o que basta para
exercitar o caminho de rejeição do núcleo.

Também mantém um log de operações: é o que permite verificar que o pipeline
emite exatamente a mesma sequência de operações para qualquer entrada.
================================================================================
"""

import hashlib
import hmac
import secrets
from typing import Dict, List, Optional, Sequence, Set, Tuple

from cipherscore_core.arithmetic.base import (
    EBOOL,
    EUINT32,
    Ciphertext,
    DecryptionDenied,
    HomomorphicArithmetic,
    ProofRejected,
    UnknownCiphertext,
)


# euint32: aritmética modular
UINT32_MODULUS = 2 ** 32


class SimulatedArithmetic(HomomorphicArithmetic):
    """
    Implementação em memória de HomomorphicArithmetic.

    Uso:
        engine = SimulatedArithmetic()
        raw, proof = engine.encrypt_inputs([175, 70, ...], owner="alice")
        cts = engine.verify_and_import(raw, proof, owner="alice")
    """

    def __init__(self, core_identity: str = "cipherscore-core", secret: Optional[bytes] = None):
        self._core_identity = core_identity
        self._secret = secret or secrets.token_bytes(32)

        # handle -> plaintext
        self._plaintexts: Dict[str, int] = {}
        # handle -> identidades autorizadas
        self._acl: Dict[str, Set[str]] = {}
        # material bruto do cliente -> plaintext (reimportável)
        self._client_blobs: Dict[bytes, int] = {}

        # Log de operações (nome da operação, na ordem emitida)
        self.operations: List[str] = []

    @property
    def core_identity(self) -> str:
        return self._core_identity

    # ========================================================================
    #                    LADO DO CLIENTE
    # ========================================================================

    def encrypt_inputs(self, values: Sequence[int], owner: str) -> Tuple[List[bytes], bytes]:
        """
        Criptografa valores no lado do cliente.

        Returns:
            (lista de ciphertexts brutos, prova que os amarra ao owner)
        """
        raw = []
        for value in values:
            blob = secrets.token_bytes(32)
            self._client_blobs[blob] = int(value) % UINT32_MODULUS
            raw.append(blob)
        return raw, self._sign(raw, owner)

    def _sign(self, raw: Sequence[bytes], owner: str) -> bytes:
        mac = hmac.new(self._secret, owner.encode('utf-8'), hashlib.sha256)
        for blob in raw:
            mac.update(blob)
        return mac.digest()

    # ========================================================================
    #                    IMPORTAÇÃO E CONSTANTES
    # ========================================================================

    def verify_and_import(self, raw_ciphertexts, proof, owner):
        raw_ciphertexts = list(raw_ciphertexts)
        expected = self._sign(raw_ciphertexts, owner)
        if not isinstance(proof, (bytes, bytearray)) or not hmac.compare_digest(expected, bytes(proof)):
            raise ProofRejected("proof does not match submitted ciphertexts")

        missing = [blob for blob in raw_ciphertexts if blob not in self._client_blobs]
        if missing:
            raise ProofRejected(f"{len(missing)} ciphertext(s) unknown to the engine")

        imported = []
        for blob in raw_ciphertexts:
            ct = self._new(self._client_blobs[blob], EUINT32)
            self._acl[ct.handle].add(owner)
            imported.append(ct)

        self.operations.append('verify_and_import')
        return imported

    def trivial_encrypt(self, value):
        self.operations.append('trivial_encrypt')
        return self._new(int(value) % UINT32_MODULUS, EUINT32)

    # ========================================================================
    #                    ARITMÉTICA
    # ========================================================================

    def add(self, a, b):
        return self._binary('add', a, b, lambda x, y: (x + y) % UINT32_MODULUS, EUINT32)

    def mul(self, a, b):
        return self._binary('mul', a, b, lambda x, y: (x * y) % UINT32_MODULUS, EUINT32)

    def mul_scalar(self, a, k):
        self.operations.append('mul_scalar')
        return self._new((self._value(a) * k) % UINT32_MODULUS, EUINT32)

    # ========================================================================
    #                    COMPARAÇÕES E LÓGICA
    # ========================================================================

    def gt_scalar(self, a, k):
        self.operations.append('gt_scalar')
        return self._new(int(self._value(a) > k), EBOOL)

    def lt_scalar(self, a, k):
        self.operations.append('lt_scalar')
        return self._new(int(self._value(a) < k), EBOOL)

    def gt(self, a, b):
        return self._binary('gt', a, b, lambda x, y: int(x > y), EBOOL)

    def lt(self, a, b):
        return self._binary('lt', a, b, lambda x, y: int(x < y), EBOOL)

    def bool_or(self, p, q):
        self._require_kind(p, EBOOL)
        self._require_kind(q, EBOOL)
        return self._binary('bool_or', p, q, lambda x, y: x | y, EBOOL)

    def select(self, predicate, if_true, if_false):
        self._require_kind(predicate, EBOOL)
        self.operations.append('select')
        # Os dois operandos são lidos sempre; a escolha é aritmética.
        flag = self._value(predicate)
        t = self._value(if_true)
        f = self._value(if_false)
        return self._new(flag * t + (1 - flag) * f, if_true.kind)

    # ========================================================================
    #                    ACL DO MOTOR
    # ========================================================================

    def mark_usable_by_self(self, ciphertext):
        self.mark_usable_by(ciphertext, self._core_identity)

    def mark_usable_by(self, ciphertext, identity):
        self._value(ciphertext)
        self._acl[ciphertext.handle].add(identity)

    def is_usable_by(self, ciphertext, identity):
        return identity in self._acl.get(ciphertext.handle, set())

    # ========================================================================
    #                    DESCRIPTOGRAFIA (harness)
    # ========================================================================

    def decrypt(self, ciphertext: Ciphertext, identity: str) -> int:
        """
        Descriptografa respeitando a ACL do motor.

        Raises:
            DecryptionDenied: identidade não marcada como utilizadora
        """
        if not self.is_usable_by(ciphertext, identity):
            raise DecryptionDenied(f"{identity} may not decrypt {ciphertext!r}")
        return self._value(ciphertext)

    def reveal(self, ciphertext: Ciphertext) -> int:
        """Leitura com a chave conhecida do harness. Ignora a ACL."""
        return self._value(ciphertext)

    def reset_operations(self):
        self.operations.clear()

    # ========================================================================
    #                    INTERNOS
    # ========================================================================

    def _new(self, value: int, kind: str) -> Ciphertext:
        ct = Ciphertext(handle="0x" + secrets.token_hex(32), kind=kind)
        self._plaintexts[ct.handle] = value
        self._acl[ct.handle] = set()
        return ct

    def _value(self, ciphertext: Ciphertext) -> int:
        try:
            return self._plaintexts[ciphertext.handle]
        except KeyError:
            raise UnknownCiphertext(f"unknown handle {ciphertext.handle}") from None

    def _binary(self, name, a, b, fn, kind) -> Ciphertext:
        self.operations.append(name)
        return self._new(fn(self._value(a), self._value(b)), kind)

    @staticmethod
    def _require_kind(ciphertext: Ciphertext, kind: str):
        if ciphertext.kind != kind:
            raise TypeError(f"expected {kind}, got {ciphertext.kind}")
