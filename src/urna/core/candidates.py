"""Registro de candidatos append-only con IDs secuenciales.

English:
    Append-only candidate registry with sequential IDs.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, List, Tuple

from .errors import ErrorKind, LedgerRejection
from .identity import is_utf8_encodable
from .models import Candidate


def _clean_text(field_name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise LedgerRejection(ErrorKind.INVALID_INPUT, f"{field_name} must be a string")
    cleaned = value.strip()
    if not cleaned:
        raise LedgerRejection(ErrorKind.INVALID_INPUT, f"{field_name} cannot be empty")
    if not is_utf8_encodable(cleaned):
        raise LedgerRejection(ErrorKind.INVALID_INPUT, f"{field_name} is not valid UTF-8 text")
    return cleaned


class CandidateRegistry:
    """Lista indexada de candidatos; nunca se borran ni se reutilizan IDs.

    English: Indexed candidate list; IDs are never deleted nor reused.
    """

    def __init__(self) -> None:
        self._candidates: List[Candidate] = []

    def __len__(self) -> int:
        return len(self._candidates)

    @property
    def next_id(self) -> int:
        return len(self._candidates) + 1

    def check_registration(self, name: Any, party: Any, description: Any) -> Tuple[str, str, str]:
        """Normaliza los campos o lanza ``INVALID_INPUT``.

        English: Normalize the fields or raise ``INVALID_INPUT``.
        """
        return (
            _clean_text("name", name),
            _clean_text("party", party),
            _clean_text("description", description),
        )

    def add(self, name: str, party: str, description: str) -> Candidate:
        candidate = Candidate(id=self.next_id, name=name, party=party, description=description)
        self._candidates.append(candidate)
        return candidate

    def is_valid_id(self, candidate_id: Any) -> bool:
        if isinstance(candidate_id, bool) or not isinstance(candidate_id, int):
            return False
        return 1 <= candidate_id <= len(self._candidates)

    def require(self, candidate_id: Any) -> Candidate:
        if not self.is_valid_id(candidate_id):
            raise LedgerRejection(ErrorKind.INVALID_CANDIDATE, "Invalid candidate")
        return self._candidates[candidate_id - 1]

    def record_vote(self, candidate_id: int) -> Candidate:
        index = candidate_id - 1
        current = self._candidates[index]
        updated = replace(current, vote_count=current.vote_count + 1)
        self._candidates[index] = updated
        return updated

    def ids(self) -> List[int]:
        return [candidate.id for candidate in self._candidates]

    def all(self) -> List[Candidate]:
        return list(self._candidates)

    def total_votes(self) -> int:
        return sum(candidate.vote_count for candidate in self._candidates)
