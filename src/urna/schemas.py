# Schemas Module
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

"""Esquemas Pydantic para escenarios electorales y registros exportados.

Pydantic schemas for election scenarios and exported event logs.
"""

from __future__ import annotations

import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .core.events import EVENT_FIELDS, EventKind, LedgerEvent


class CandidateInput(BaseModel):
    """Datos de alta de un candidato.

    English: Candidate registration data.
    """

    name: str = Field(min_length=1)
    party: str = Field(min_length=1)
    description: str = Field(min_length=1)

    @field_validator("name", "party", "description")
    @classmethod
    def strip_text(cls, value: str) -> str:
        """Normaliza texto eliminando espacios y valida no vacío.

        English:
            Normalize text by trimming whitespace and validate non-empty.
        """
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Field cannot be empty")
        return cleaned


class VoteInput(BaseModel):
    voter: str = Field(min_length=1)
    candidate_id: int = Field(ge=1)


class ElectionScenario(BaseModel):
    """Guion completo de una elección para ejecutar contra el libro.

    English: Full election script to run against the ledger.
    """

    owner: str = Field(min_length=1)
    election_id: Optional[str] = None
    candidates: List[CandidateInput] = Field(default_factory=list)
    voters: List[str] = Field(default_factory=list)
    votes: List[VoteInput] = Field(default_factory=list)
    start: bool = True
    end: bool = True

    @model_validator(mode="after")
    def end_requires_start(self) -> "ElectionScenario":
        """end=True requires start=True."""
        if self.end and not self.start:
            raise ValueError("A scenario cannot end an election it never starts")
        return self


class EventSchema(BaseModel):
    """Entrada exportada del registro de eventos.

    English: Exported event log entry.
    """

    sequence: int = Field(ge=0)
    kind: EventKind
    payload: Dict[str, Any] = Field(default_factory=dict)
    previous_hash: str = ""
    hash: str = Field(min_length=64, max_length=64)

    @model_validator(mode="after")
    def payload_matches_kind(self) -> "EventSchema":
        """payload keys must match the fields of ``kind``."""
        expected = set(EVENT_FIELDS[self.kind])
        if set(self.payload) != expected:
            raise ValueError(
                f"{self.kind.value} payload must have fields {sorted(expected)}, got {sorted(self.payload)}"
            )
        return self

    def to_event(self) -> LedgerEvent:
        return LedgerEvent(
            sequence=self.sequence,
            kind=self.kind,
            payload=MappingProxyType(dict(self.payload)),
            previous_hash=self.previous_hash,
            hash=self.hash,
        )


class EventLogSchema(BaseModel):
    """Registro exportado completo. / Full exported log."""

    election_id: Optional[str] = None
    head_hash: str = ""
    events: List[EventSchema] = Field(default_factory=list)


def _parse_payload(data: dict | bytes | str) -> Dict[str, Any]:
    """Parsea payload dict, bytes o str a dict JSON.

    English: Parse dict, bytes or str payload into JSON dict.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ValueError("Payload is not valid UTF-8") from exc
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise ValueError("Payload is not valid JSON") from exc
    if isinstance(data, dict):
        return data
    raise ValueError("Payload must be a JSON object")


def export_event_log(
    events: List[LedgerEvent],
    election_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Serializa entradas del registro a un dict JSON-compatible.

    English: Serialize log entries to a JSON-compatible dict.
    """
    head_hash = events[-1].hash if events else ""
    return {
        "election_id": election_id,
        "head_hash": head_hash,
        "events": [event.to_dict() for event in events],
    }


def load_event_log(data: dict | bytes | str) -> EventLogSchema:
    """Valida un registro exportado; lanza ``ValueError`` en fallo.

    English: Validate an exported log; raises ``ValueError`` on failure.
    """
    payload = _parse_payload(data)
    try:
        return EventLogSchema.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Event log validation failed: {exc}") from exc


def _load_structured_file(path: Path) -> Dict[str, Any]:
    """Carga un mapa YAML/JSON o lanza un error orientado al usuario.

    English: Load a YAML/JSON mapping or raise a user-facing error.
    """
    if not path.exists():
        raise FileNotFoundError(f"Missing {path.as_posix()}")
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return _parse_payload(text)
    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"{path.name} has YAML syntax errors") from exc
    if not isinstance(raw, dict):
        raise ValueError(f"{path.name} must be a YAML mapping")
    return raw


def load_scenario(path: Path) -> ElectionScenario:
    """Carga y valida un escenario electoral desde YAML o JSON.

    English: Load and validate an election scenario from YAML or JSON.
    """
    raw = _load_structured_file(path)
    try:
        return ElectionScenario.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid scenario {path.name}: {exc}") from exc
