"""
======================== ÍNDICE / INDEX ========================
1. Descripción general / Overview
2. Componentes principales / Main components
3. Notas de mantenimiento / Maintenance notes

======================== ESPAÑOL ========================
Archivo: `src/urna/cli.py`.
Este módulo forma parte de Urna y está documentado para facilitar
la navegación, mantenimiento y auditoría técnica.

Componentes detectados:
  - main
  - run
  - verify
  - replay

Notas:
- La salida de datos va a stdout en JSON; los logs van a stderr.

======================== ENGLISH ========================
File: `src/urna/cli.py`.
This module is part of Urna and is documented to improve
navigation, maintenance, and technical auditability.

Detected components:
  - main
  - run
  - verify
  - replay

Notes:
- Data output goes to stdout as JSON; logs go to stderr.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from .config import LedgerSettings, load_config
from .core.events import verify_chain
from .ledger import ElectionLedger
from .logging import setup_logging
from .pipeline import run_scenario
from .replay import replay_events
from .schemas import EventLogSchema, export_event_log, load_event_log, load_scenario

app = typer.Typer(help="Urna election ledger CLI")


def _status_payload(ledger: ElectionLedger) -> Dict[str, Any]:
    status = ledger.get_election_status()
    payload: Dict[str, Any] = {
        "election_id": ledger.election_id,
        "owner": ledger.owner,
        "phase": status.phase.label,
        "candidate_count": status.candidate_count,
        "total_votes": status.total_votes,
        "voter_count": status.voter_count,
        "head_hash": ledger.head_hash,
    }
    results = ledger.get_results()
    if results.ok:
        payload["results"] = {
            "candidate_ids": list(results.value.candidate_ids),
            "vote_counts": list(results.value.vote_counts),
            "total_votes": results.value.total_votes,
        }
        winner = ledger.get_winner().value
        payload["winner"] = {
            "id": winner.id,
            "name": winner.name,
            "party": winner.party,
            "vote_count": winner.vote_count,
        }
    return payload


def _echo_json(payload: Dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def _read_events(events_file: Path) -> EventLogSchema:
    try:
        return load_event_log(events_file.read_bytes())
    except (OSError, ValueError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2) from exc


@app.callback()
def main(ctx: typer.Context) -> None:
    """Interfaz de línea de comandos de Urna.

    English: Urna command line interface.
    """
    try:
        settings = load_config()
    except ValueError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    ctx.obj = settings
    setup_logging(settings.LOG_LEVEL, settings.STORAGE_PATH, json_logs=settings.LOG_JSON)


@app.command()
def run(
    ctx: typer.Context,
    scenario_file: Path = typer.Argument(..., help="YAML/JSON election scenario."),
    events_out: Optional[Path] = typer.Option(None, "--events-out", help="Write the exported event log here."),
) -> None:
    """Ejecuta un escenario e imprime estado y resultados. / Run a scenario and print status and results."""
    try:
        scenario = load_scenario(scenario_file)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    settings: LedgerSettings = ctx.obj
    report = run_scenario(scenario, null_identities=settings.NULL_IDENTITIES)
    payload = _status_payload(report.ledger)
    payload["rejections"] = [
        {"step": rejection.step, "kind": rejection.error.kind.value, "message": rejection.error.message}
        for rejection in report.rejections
    ]
    if events_out is not None:
        exported = export_event_log(report.ledger.events_since(0), election_id=report.ledger.election_id)
        events_out.write_text(json.dumps(exported, ensure_ascii=False, indent=2), encoding="utf-8")
    _echo_json(payload)


@app.command()
def verify(events_file: Path = typer.Argument(..., help="Exported event log (JSON).")) -> None:
    """Verifica la cadena de hashes de un registro exportado. / Verify an exported log's hash chain."""
    log = _read_events(events_file)
    result = verify_chain(event.to_event() for event in log.events)
    head_matches = not log.head_hash or log.head_hash == result.head_hash
    _echo_json(
        {
            "valid": result.valid and head_matches,
            "total_links": result.total_links,
            "verified_links": result.verified_links,
            "broken_at": result.broken_at,
            "errors": result.errors if head_matches else result.errors + ["head_hash_mismatch"],
            "head_hash": result.head_hash,
        }
    )
    if not (result.valid and head_matches):
        raise typer.Exit(code=1)


@app.command()
def replay(
    ctx: typer.Context,
    events_file: Path = typer.Argument(..., help="Exported event log (JSON)."),
    owner: str = typer.Option(..., "--owner", help="Initial owner of the ledger."),
) -> None:
    """Reconstruye el libro desde un registro exportado. / Rebuild the ledger from an exported log."""
    log = _read_events(events_file)
    settings: LedgerSettings = ctx.obj
    try:
        ledger = replay_events(
            owner,
            [event.to_event() for event in log.events],
            null_identities=settings.NULL_IDENTITIES,
            election_id=log.election_id,
        )
    except ValueError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    _echo_json(_status_payload(ledger))


if __name__ == "__main__":
    app()
