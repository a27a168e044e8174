"""Resolución determinista de resultados y ganador tras el cierre.

English:
    Deterministic results and winner resolution after the election ends.
"""

from __future__ import annotations

from typing import Sequence

from .models import NO_WINNER, Candidate, ElectionResults, Winner


def compute_results(candidates: Sequence[Candidate]) -> ElectionResults:
    ordered = sorted(candidates, key=lambda candidate: candidate.id)
    return ElectionResults(
        candidate_ids=tuple(candidate.id for candidate in ordered),
        vote_counts=tuple(candidate.vote_count for candidate in ordered),
        total_votes=sum(candidate.vote_count for candidate in ordered),
    )


def resolve_winner(candidates: Sequence[Candidate]) -> Winner:
    """Primer candidato con el máximo de votos en orden ascendente de ID.

    Un empate se resuelve a favor del ID más bajo. Sin candidatos o sin
    votos se devuelve el centinela ``NO_WINNER`` (``id == 0``).

    English:
        First candidate holding the maximum vote count in ascending ID order.

        Ties go to the lowest ID. With no candidates or no votes the
        ``NO_WINNER`` sentinel (``id == 0``) is returned.
    """
    best = None
    max_votes = 0
    for candidate in sorted(candidates, key=lambda item: item.id):
        if candidate.vote_count > max_votes:
            max_votes = candidate.vote_count
            best = candidate

    if best is None:
        return NO_WINNER
    return Winner(id=best.id, name=best.name, party=best.party, vote_count=best.vote_count)
