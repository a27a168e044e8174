#   Init   Module
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

"""Urna: libro electoral autoritativo y verificable.

English:
    Urna: authoritative, tamper-evident election ledger.
"""

from .core.errors import ErrorKind, LedgerError, LedgerResult
from .core.events import EventKind, LedgerEvent
from .core.models import (
    Candidate,
    ElectionPhase,
    ElectionResults,
    ElectionStatus,
    MyVote,
    VoterRecord,
    Winner,
)
from .core.voters import BatchAuthorization
from .ledger import ElectionLedger

__version__ = "0.1.0"

__all__ = [
    "BatchAuthorization",
    "Candidate",
    "ElectionLedger",
    "ElectionPhase",
    "ElectionResults",
    "ElectionStatus",
    "ErrorKind",
    "EventKind",
    "LedgerError",
    "LedgerEvent",
    "LedgerResult",
    "MyVote",
    "VoterRecord",
    "Winner",
]
