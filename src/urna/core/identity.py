# Identity Module
# AUTO-DOC-INDEX
#
# ES: Índice rápido
#   1) Propósito del módulo
#   2) Componentes principales
#   3) Puntos de extensión
#
# EN: Quick index
#   1) Module purpose
#   2) Main components
#   3) Extension points
#
# Secciones / Sections:
#   - Configuración / Configuration
#   - Lógica principal / Core logic
#   - Integraciones / Integrations

"""Puerta de identidad: propietario único y operaciones administrativas.

La identidad del llamador siempre llega como argumento explícito desde la
capa de transporte; este módulo nunca lee estado global.

English:
    Identity gate: single owner and admin-only operations.

    The caller identity always arrives as an explicit argument from the
    transport layer; this module never reads ambient global state.
"""

from __future__ import annotations

from typing import Any, FrozenSet, Iterable, Optional

from .errors import ErrorKind, LedgerRejection

ZERO_ADDRESS = "0x" + "0" * 40
DEFAULT_NULL_IDENTITIES: FrozenSet[str] = frozenset({ZERO_ADDRESS})


def is_utf8_encodable(value: str) -> bool:
    """False para cadenas con sustitutos sueltos. / False for strings with lone surrogates."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def normalize_identity(identity: Any) -> Optional[str]:
    """Devuelve la identidad sin espacios o None si no es una cadena útil.

    English: Return the stripped identity, or None when it is not a usable string.
    """
    if not isinstance(identity, str):
        return None
    cleaned = identity.strip()
    if not cleaned or not is_utf8_encodable(cleaned):
        return None
    return cleaned


class IdentityGate:
    """Guarda el propietario y valida identidades.

    English: Holds the owner and validates identities.
    """

    def __init__(self, owner: str, null_identities: Iterable[str] = DEFAULT_NULL_IDENTITIES):
        self._null_identities = frozenset(
            value.strip().lower() for value in null_identities if isinstance(value, str)
        )
        normalized = self._validated(owner)
        if normalized is None:
            raise ValueError(f"Invalid ledger owner: {owner!r}")
        self._owner = normalized

    @property
    def owner(self) -> str:
        return self._owner

    def _validated(self, identity: Any) -> Optional[str]:
        normalized = normalize_identity(identity)
        if normalized is None or normalized.lower() in self._null_identities:
            return None
        return normalized

    def validate_identity(self, identity: Any, *, role: str = "identity") -> str:
        """Valida una identidad destino o lanza ``INVALID_IDENTITY``.

        English: Validate a target identity or raise ``INVALID_IDENTITY``.
        """
        normalized = self._validated(identity)
        if normalized is None:
            raise LedgerRejection(ErrorKind.INVALID_IDENTITY, f"Invalid {role}: {identity!r}")
        return normalized

    def is_owner(self, caller: Any) -> bool:
        return normalize_identity(caller) == self._owner

    def require_owner(self, caller: Any) -> None:
        if not self.is_owner(caller):
            raise LedgerRejection(ErrorKind.UNAUTHORIZED, "Only owner")

    def check_transfer(self, caller: Any, new_owner: Any) -> str:
        """Valida una transferencia y devuelve el nuevo propietario normalizado.

        English: Validate a transfer and return the normalized new owner.
        """
        self.require_owner(caller)
        normalized = self.validate_identity(new_owner, role="new owner")
        if normalized == self._owner:
            raise LedgerRejection(ErrorKind.INVALID_IDENTITY, "New owner must differ from the current owner")
        return normalized

    def apply_transfer(self, new_owner: str) -> str:
        previous = self._owner
        self._owner = new_owner
        return previous
