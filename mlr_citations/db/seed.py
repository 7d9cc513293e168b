"""Load an evidence catalog file (YAML or JSON) into the store."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from mlr_citations.db.repositories import EvidenceRepository
from mlr_citations.models import ClaimRecord, ReferenceRecord, SafetyStatementRecord

logger = logging.getLogger(__name__)


@dataclass
class SeedCounts:
    claims: int = 0
    references: int = 0
    safety_statements: int = 0


def read_catalog(path: str) -> dict:
    resolved = Path(path)
    if not resolved.exists():
        raise FileNotFoundError(f"Missing catalog file: {path}")
    text = resolved.read_text(encoding="utf-8")
    if resolved.suffix.lower() == ".json":
        loaded = json.loads(text)
    else:
        loaded = yaml.safe_load(text) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Expected object at root of catalog file: {path}")
    return loaded


async def seed_from_file(
    repo: EvidenceRepository,
    path: str,
    brand_id: str | None = None,
) -> SeedCounts:
    """Upsert references, claims and safety statements from a catalog file.

    A top-level ``brand_id`` in the file (or the brand_id argument) is applied
    to claims and statements that do not carry their own.
    """
    catalog = read_catalog(path)
    default_brand = brand_id or catalog.get("brand_id")
    counts = SeedCounts()

    # References first so claims never point at ids the store has not seen.
    for item in catalog.get("references") or []:
        await repo.register_reference(ReferenceRecord.model_validate(item))
        counts.references += 1

    for item in catalog.get("claims") or []:
        data = dict(item)
        data.setdefault("brand_id", default_brand)
        await repo.register_claim(ClaimRecord.model_validate(data))
        counts.claims += 1

    for item in catalog.get("safety_statements") or []:
        data = dict(item)
        data.setdefault("brand_id", default_brand)
        await repo.register_safety_statement(SafetyStatementRecord.model_validate(data))
        counts.safety_statements += 1

    logger.info(
        "Seeded %d claims, %d references, %d safety statements from %s",
        counts.claims,
        counts.references,
        counts.safety_statements,
        path,
    )
    return counts
