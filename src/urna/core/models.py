"""
======================== ÍNDICE / INDEX ========================
1. Descripción general / Overview
2. Componentes principales / Main components
3. Notas de mantenimiento / Maintenance notes

======================== ESPAÑOL ========================
Archivo: `src/urna/core/models.py`.
Este módulo forma parte de Urna y está documentado para facilitar
la navegación, mantenimiento y auditoría técnica.

Componentes detectados:
  - ElectionPhase
  - Candidate
  - VoterRecord
  - MyVote
  - ElectionStatus
  - ElectionResults
  - Winner

Notas:
- Mantener esta cabecera sincronizada con cambios estructurales del archivo.
- Priorizar claridad operativa y trazabilidad del comportamiento.

======================== ENGLISH ========================
File: `src/urna/core/models.py`.
This module is part of Urna and is documented to improve
navigation, maintenance, and technical auditability.

Detected components:
  - ElectionPhase
  - Candidate
  - VoterRecord
  - MyVote
  - ElectionStatus
  - ElectionResults
  - Winner

Notes:
- Keep this header in sync with structural changes in the file.
- Prioritize operational clarity and behavior traceability.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple


class ElectionPhase(IntEnum):
    """Etapa del ciclo de vida de la elección.

    English: Lifecycle stage of the election.
    """

    NOT_STARTED = 0
    ACTIVE = 1
    ENDED = 2

    @property
    def label(self) -> str:
        return _PHASE_LABELS[self]


_PHASE_LABELS = {
    ElectionPhase.NOT_STARTED: "NotStarted",
    ElectionPhase.ACTIVE: "Active",
    ElectionPhase.ENDED: "Ended",
}


@dataclass(frozen=True)
class Candidate:
    """Candidato registrado en el libro electoral.

    Attributes:
        id (int): Identificador secuencial a partir de 1.
        name (str): Nombre del candidato.
        party (str): Partido del candidato.
        description (str): Descripción pública.
        vote_count (int): Votos recibidos.

    English:
        Candidate registered in the election ledger.

    Attributes:
        id (int): Sequential identifier starting at 1.
        name (str): Candidate name.
        party (str): Candidate party.
        description (str): Public description.
        vote_count (int): Votes received.
    """

    id: int
    name: str
    party: str
    description: str
    vote_count: int = 0


@dataclass(frozen=True)
class VoterRecord:
    """Estado de autorización y voto de una identidad.

    English: Authorization and vote status of one identity.
    """

    is_registered: bool = False
    has_voted: bool = False
    voted_candidate_id: int = 0
    timestamp: int = 0


@dataclass(frozen=True)
class MyVote:
    """Vista del propio voto para el votante que consulta.

    English: Own-vote view for the calling voter.
    """

    has_voted: bool
    candidate_id: int
    name: str
    party: str
    timestamp: int


@dataclass(frozen=True)
class ElectionStatus:
    phase: ElectionPhase
    candidate_count: int
    total_votes: int
    voter_count: int


@dataclass(frozen=True)
class ElectionResults:
    """Recuento final por candidato, en orden ascendente de ID.

    English: Final per-candidate tally, in ascending ID order.
    """

    candidate_ids: Tuple[int, ...]
    vote_counts: Tuple[int, ...]
    total_votes: int


@dataclass(frozen=True)
class Winner:
    """Ganador resuelto; ``id == 0`` indica que no hay ganador.

    English: Resolved winner; ``id == 0`` means there is no winner.
    """

    id: int
    name: str
    party: str
    vote_count: int

    @property
    def is_sentinel(self) -> bool:
        return self.id == 0


NO_WINNER = Winner(id=0, name="", party="", vote_count=0)
