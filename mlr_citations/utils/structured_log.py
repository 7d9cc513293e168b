"""Structured logging for a machine-parseable audit trail of evidence lookups."""

from __future__ import annotations

import json
from pathlib import Path
from typing import IO, Any

import structlog
from structlog.processors import JSONRenderer
from structlog.typing import Processor

AUDIT_LOG_NAME = "audit.jsonl"

_configured = False
_audit_path: Path | None = None
_logger: structlog.BoundLogger | None = None
_file_handle: IO[str] | None = None


def configure_audit_logging(log_dir: str) -> Path:
    """Write JSON lines to {log_dir}/audit.jsonl and return that path.

    Repeat calls with the same directory are no-ops; a different directory
    closes the current file and switches to the new one.
    """
    global _configured, _logger, _file_handle, _audit_path
    audit_path = Path(log_dir) / AUDIT_LOG_NAME
    if _configured:
        if audit_path == _audit_path:
            return audit_path
        reset_audit_logging()
    audit_path.parent.mkdir(parents=True, exist_ok=True)
    _file_handle = open(audit_path, "a", encoding="utf-8")
    file_handle = _file_handle

    def _file_logger_factory(*args: Any, **kwargs: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file_handle)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        JSONRenderer(),
    ]
    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=_file_logger_factory,
        cache_logger_on_first_use=False,
    )
    _configured = True
    _audit_path = audit_path
    _logger = structlog.get_logger()
    return audit_path


def reset_audit_logging() -> None:
    """Close the audit file and return to the unconfigured state."""
    global _configured, _logger, _file_handle, _audit_path
    if _file_handle is not None:
        _file_handle.close()
    _file_handle = None
    _logger = None
    _audit_path = None
    _configured = False
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


def bind_request(brand_id: str | None, command: str) -> None:
    """Bind brand and command so every audit line carries them."""
    structlog.contextvars.bind_contextvars(brand_id=brand_id, command=command)


def log_store_call(
    source: str,
    status: str,
    *,
    records: int | None = None,
    latency_ms: int | None = None,
    error: str | None = None,
) -> None:
    """Log one evidence store round-trip."""
    payload: dict[str, Any] = {"source": source, "status": status}
    if records is not None:
        payload["records"] = records
    if latency_ms is not None:
        payload["latency_ms"] = latency_ms
    if error is not None:
        payload["error"] = error
    if _logger is not None:
        _logger.info("store_call", **payload)


def log_citation_result(
    claims: int,
    references: int,
    unresolved: list[str],
    *,
    fail_open: bool = False,
) -> None:
    """Log the outcome of one citation processing pass."""
    if _logger is not None:
        _logger.info(
            "citation_result",
            claims=claims,
            references=references,
            unresolved=unresolved,
            fail_open=fail_open,
        )


def log_validation_result(valid: bool, **issues: list[str]) -> None:
    if _logger is not None:
        _logger.info("citation_validation", valid=valid, **issues)


def load_audit_events(path: str) -> list[dict[str, Any]]:
    """Read an audit.jsonl file. Skips lines that fail to parse."""
    events: list[dict[str, Any]] = []
    audit_path = Path(path)
    if not audit_path.exists():
        return events
    for line in audit_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            entry = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(entry, dict):
            events.append(entry)
    return events
