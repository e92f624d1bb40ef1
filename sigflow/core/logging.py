"""Logging setup for sigflow.

Issuer and verifier steps run inside ``session_scope`` so every record they
emit names the party, its session and the step. Records logged by the
controller between steps carry no party.
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

_PARTY_FIELDS = ("session_id", "role", "operation")


class Party(Protocol):
    """Anything that takes part in the exchange: an issuer or a verifier session."""

    session_id: str
    role: str


@dataclass(frozen=True, slots=True)
class StepContext:
    session_id: str
    role: str
    operation: str


_ACTIVE_STEP: contextvars.ContextVar[StepContext | None] = contextvars.ContextVar(
    "sigflow_active_step",
    default=None,
)


def active_step() -> StepContext | None:
    return _ACTIVE_STEP.get()


@contextmanager
def session_scope(party: Party, operation: str) -> Iterator[StepContext]:
    """Tag records logged inside the block with ``party`` and ``operation``."""
    step = StepContext(session_id=party.session_id, role=party.role, operation=operation)
    token = _ACTIVE_STEP.set(step)
    try:
        yield step
    finally:
        _ACTIVE_STEP.reset(token)


class PartyFilter(logging.Filter):
    """Copy the active step onto each record; fields are None between steps."""

    def filter(self, record: logging.LogRecord) -> bool:
        step = _ACTIVE_STEP.get()
        for name in _PARTY_FIELDS:
            setattr(record, name, None if step is None else getattr(step, name))
        return True


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object | None] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in _PARTY_FIELDS:
            payload[name] = getattr(record, name, None)
        if record.exc_info is not None:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def setup_logging(level: int | str = logging.INFO, json_output: bool = False) -> None:
    """Replace the root handlers with one stderr handler tagged by party."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    # stdout is reserved for command output
    handler = logging.StreamHandler(stream=sys.stderr)
    if json_output:
        formatter: logging.Formatter = _JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s [%(role)s:%(operation)s %(session_id)s] %(message)s",
        )
    handler.setFormatter(formatter)
    handler.addFilter(PartyFilter())
    root_logger.addHandler(handler)


__all__ = [
    "Party",
    "PartyFilter",
    "StepContext",
    "active_step",
    "session_scope",
    "setup_logging",
]
