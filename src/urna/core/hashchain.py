# Hashchain Module
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

"""Funciones para encadenar hashes de eventos del libro electoral.

Cada enlace se calcula sobre ``tag | prev:<len>:<hash> | body:<len>:<json>``;
los prefijos de longitud impiden que dos pares (hash previo, cuerpo)
distintos produzcan los mismos bytes.

English:
    Helpers to chain ledger event hashes together.

    Each link is computed over ``tag | prev:<len>:<hash> | body:<len>:<json>``;
    the length prefixes keep two different (previous hash, body) pairs from
    producing the same bytes.
"""

from __future__ import annotations

import hashlib
import json
import logging
import re
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

GENESIS_HASH = ""
CHAIN_DOMAIN_TAG = b"urna-eventlog-v1"

_HEX_DIGEST = re.compile(r"^[0-9a-f]{64}$")


def canonical_json(data: Mapping[str, Any]) -> str:
    """Serializa un mapa a JSON canónico (claves ordenadas, sin espacios).

    English: Serialize a mapping to canonical JSON (sorted keys, no spaces).
    """
    return json.dumps(dict(data), sort_keys=True, ensure_ascii=False, separators=(",", ":"))


def _frame(label: bytes, data: bytes) -> bytes:
    return label + b":" + str(len(data)).encode("ascii") + b":" + data


def _link_material(canonical: str, previous_hash: Optional[str]) -> bytes:
    previous = (previous_hash or GENESIS_HASH).strip().lower()
    if previous and not _HEX_DIGEST.match(previous):
        # verify_chain reports the mismatch; here we only leave a trace.
        logger.warning("hashchain_previous_hash_invalid value=%s", previous)
    return b"|".join(
        (
            CHAIN_DOMAIN_TAG,
            _frame(b"prev", previous.encode("utf-8")),
            _frame(b"body", canonical.encode("utf-8")),
        )
    )


def compute_hash(canonical: str, previous_hash: Optional[str] = None) -> str:
    """Calcula el hash SHA-256 de un evento canónico.

    Si se pasa un hash previo, lo concatena para mantener la cadena.

    Args:
        canonical (str): Evento en JSON canónico.
        previous_hash (Optional[str]): Hash anterior; vacío o ``None`` en el
            primer evento.

    Returns:
        str: Hash SHA-256 en hexadecimal.

    English:
        Computes the SHA-256 hash for a canonical event.

        If a previous hash is provided, it is included to keep the chain.

    Args:
        canonical (str): Event in canonical JSON.
        previous_hash (Optional[str]): Previous hash; empty or ``None`` for
            the first event.

    Returns:
        str: Hex SHA-256 digest.
    """
    return hashlib.sha256(_link_material(canonical, previous_hash)).hexdigest()
