"""
================================================================================
        CIPHERSCORE CORE - Homomorphic Arithmetic (arithmetic/base.py)
================================================================================
Interface do motor de aritmética homomórfica (colaborador externo).

O núcleo só enxerga handles opacos (Ciphertext). Toda operação é pura e
devolve um handle novo; nenhum plaintext aparece dentro do núcleo.
A implementação real (FHE + verificação de provas) fica fora deste projeto.
================================================================================
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence


# Tipos de ciphertext suportados
EUINT32 = "euint32"
EBOOL = "ebool"


@dataclass(frozen=True)
class Ciphertext:
    """
    Handle opaco para um inteiro (ou booleano) criptografado.

    Attributes:
        handle: Identificador do ciphertext no motor (hex)
        kind: euint32 ou ebool
    """
    handle: str
    kind: str = EUINT32

    def __repr__(self) -> str:
        return f"Ciphertext({self.kind}:{self.handle[:12]}...)"


class ArithmeticEngineError(Exception):
    """Erro levantado pelo próprio motor homomórfico"""


class ProofRejected(ArithmeticEngineError):
    """A prova que acompanha o material criptografado não confere"""


class UnknownCiphertext(ArithmeticEngineError):
    """Handle que o motor não conhece"""


class DecryptionDenied(ArithmeticEngineError):
    """Identidade sem permissão na ACL do motor para este ciphertext"""


class HomomorphicArithmetic(ABC):
    """
    Operações válidas sobre valores criptografados.

    Comparações com sufixo _scalar comparam um ciphertext contra uma
    constante pública (mais baratas que gt/lt entre dois ciphertexts).
    O motor mantém a sua própria ACL: um handle só é utilizável por quem
    foi marcado via mark_usable_by / mark_usable_by_self.
    """

    @property
    @abstractmethod
    def core_identity(self) -> str:
        """Identidade do próprio núcleo perante a ACL do motor"""

    # ========================================================================
    #                    IMPORTAÇÃO E CONSTANTES
    # ========================================================================

    @abstractmethod
    def verify_and_import(
        self,
        raw_ciphertexts: Sequence[bytes],
        proof: bytes,
        owner: str,
    ) -> List[Ciphertext]:
        """
        Verifica a prova zero-knowledge e importa o material externo.

        Raises:
            ProofRejected: prova inválida ou material desconhecido
        """

    @abstractmethod
    def trivial_encrypt(self, value: int) -> Ciphertext:
        """Criptografa uma constante pública (ex: zero inicial do score)"""

    # ========================================================================
    #                    ARITMÉTICA
    # ========================================================================

    @abstractmethod
    def add(self, a: Ciphertext, b: Ciphertext) -> Ciphertext:
        ...

    @abstractmethod
    def mul(self, a: Ciphertext, b: Ciphertext) -> Ciphertext:
        ...

    @abstractmethod
    def mul_scalar(self, a: Ciphertext, k: int) -> Ciphertext:
        ...

    # ========================================================================
    #                    COMPARAÇÕES E LÓGICA
    # ========================================================================

    @abstractmethod
    def gt_scalar(self, a: Ciphertext, k: int) -> Ciphertext:
        ...

    @abstractmethod
    def lt_scalar(self, a: Ciphertext, k: int) -> Ciphertext:
        ...

    @abstractmethod
    def gt(self, a: Ciphertext, b: Ciphertext) -> Ciphertext:
        ...

    @abstractmethod
    def lt(self, a: Ciphertext, b: Ciphertext) -> Ciphertext:
        ...

    @abstractmethod
    def bool_or(self, p: Ciphertext, q: Ciphertext) -> Ciphertext:
        ...

    @abstractmethod
    def select(self, predicate: Ciphertext, if_true: Ciphertext, if_false: Ciphertext) -> Ciphertext:
        """
        Multiplexador sem desvio: devolve um dos dois operandos conforme o
        booleano criptografado, sem diferença observável entre os ramos.
        """

    # ========================================================================
    #                    ACL DO MOTOR
    # ========================================================================

    @abstractmethod
    def mark_usable_by_self(self, ciphertext: Ciphertext) -> None:
        ...

    @abstractmethod
    def mark_usable_by(self, ciphertext: Ciphertext, identity: str) -> None:
        ...

    @abstractmethod
    def is_usable_by(self, ciphertext: Ciphertext, identity: str) -> bool:
        ...
