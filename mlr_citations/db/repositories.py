"""Typed repository over the SQLite evidence catalog."""

from __future__ import annotations

import json
from typing import Any, List, Optional, Sequence, Tuple

import aiosqlite
from pydantic import ValidationError

from mlr_citations.exceptions import StoreQueryError
from mlr_citations.models import ClaimRecord, ReferenceRecord, SafetyStatementRecord

_SEVERITY_ORDER_SQL = """
    CASE severity
        WHEN 'critical' THEN 0
        WHEN 'high' THEN 1
        WHEN 'medium' THEN 2
        ELSE 3
    END
"""


def _json_list(raw: Any) -> List[str]:
    if raw is None or raw == "":
        return []
    if isinstance(raw, str):
        loaded = json.loads(raw)
        return [str(item) for item in loaded] if isinstance(loaded, list) else []
    return [str(item) for item in raw]


def _placeholders(values: Sequence[Any]) -> str:
    return ", ".join("?" for _ in values)


def _row_to_claim(row: Tuple[Any, ...]) -> ClaimRecord:
    """Convert a clinical_claims row to ClaimRecord."""
    return ClaimRecord(
        id=str(row[0]),
        brand_id=str(row[1]) if row[1] is not None else None,
        display_id=str(row[2]),
        text=row[3],
        linked_reference_ids=_json_list(row[4]),
        expiration_date=row[5] or None,
        approval_scope=_json_list(row[6]),
    )


def _row_to_reference(row: Tuple[Any, ...]) -> ReferenceRecord:
    return ReferenceRecord(
        id=str(row[0]),
        display_id=row[1],
        formatted_citation=row[2],
        raw_text=row[3],
        authors=_json_list(row[4]),
        title=row[5],
        journal=row[6],
        year=row[7],
        doi=row[8],
    )


def _row_to_statement(row: Tuple[Any, ...]) -> SafetyStatementRecord:
    return SafetyStatementRecord(
        id=str(row[0]),
        brand_id=str(row[1]),
        text=str(row[2]),
        statement_type=str(row[3]),
        severity=str(row[4]),
        fda_required=bool(row[5]),
    )


_CLAIM_COLUMNS = (
    "id, brand_id, claim_id_display, claim_text, linked_references, expiration_date, approval_scope"
)


class EvidenceRepository:
    """aiosqlite implementation of the EvidenceStore protocol."""

    def __init__(self, db: aiosqlite.Connection):
        self.db = db

    async def _fetchall(self, sql: str, params: Sequence[Any]) -> list:
        try:
            cursor = await self.db.execute(sql, tuple(params))
            return list(await cursor.fetchall())
        except aiosqlite.Error as exc:
            raise StoreQueryError(f"Evidence query failed: {exc}") from exc

    async def find_claims_by_display_ids(
        self, brand_id: str, display_ids: Sequence[str]
    ) -> List[ClaimRecord]:
        if not display_ids:
            return []
        rows = await self._fetchall(
            f"""
            SELECT {_CLAIM_COLUMNS}
            FROM clinical_claims
            WHERE brand_id = ? AND claim_id_display IN ({_placeholders(display_ids)})
            """,
            [brand_id, *display_ids],
        )
        return self._convert(rows, _row_to_claim)

    async def find_references_by_ids(self, reference_ids: Sequence[str]) -> List[ReferenceRecord]:
        if not reference_ids:
            return []
        rows = await self._fetchall(
            f"""
            SELECT id, reference_id_display, formatted_citation, reference_text,
                   authors, title, journal, publication_year, doi
            FROM clinical_references
            WHERE id IN ({_placeholders(reference_ids)})
            """,
            list(reference_ids),
        )
        return self._convert(rows, _row_to_reference)

    async def find_claims_by_ids(self, claim_ids: Sequence[str]) -> List[ClaimRecord]:
        if not claim_ids:
            return []
        rows = await self._fetchall(
            f"SELECT {_CLAIM_COLUMNS} FROM clinical_claims WHERE id IN ({_placeholders(claim_ids)})",
            list(claim_ids),
        )
        return self._convert(rows, _row_to_claim)

    async def find_safety_statements_by_brand(
        self,
        brand_id: str,
        statement_types: Optional[Sequence[str]] = None,
    ) -> List[SafetyStatementRecord]:
        sql = """
            SELECT id, brand_id, statement_text, statement_type, severity, fda_required
            FROM safety_statements
            WHERE brand_id = ?
        """
        params: list[Any] = [brand_id]
        if statement_types:
            sql += f" AND statement_type IN ({_placeholders(statement_types)})"
            params.extend(statement_types)
        sql += f" ORDER BY {_SEVERITY_ORDER_SQL}, id"
        rows = await self._fetchall(sql, params)
        return self._convert(rows, _row_to_statement)

    @staticmethod
    def _convert(rows: list, converter) -> list:
        try:
            return [converter(row) for row in rows]
        except (ValidationError, ValueError) as exc:
            raise StoreQueryError(f"Malformed evidence row: {exc}") from exc

    async def register_claim(self, claim: ClaimRecord) -> None:
        if not claim.brand_id:
            raise ValueError(f"Claim {claim.display_id} has no brand_id")
        await self.db.execute(
            """
            INSERT INTO clinical_claims (
                id, brand_id, claim_id_display, claim_text, linked_references,
                expiration_date, approval_scope
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                brand_id=excluded.brand_id,
                claim_id_display=excluded.claim_id_display,
                claim_text=excluded.claim_text,
                linked_references=excluded.linked_references,
                expiration_date=excluded.expiration_date,
                approval_scope=excluded.approval_scope
            """,
            (
                claim.id,
                claim.brand_id,
                claim.display_id,
                claim.text,
                json.dumps(claim.linked_reference_ids),
                claim.expiration_date.isoformat() if claim.expiration_date else None,
                json.dumps(claim.approval_scope),
            ),
        )
        await self.db.commit()

    async def register_reference(self, reference: ReferenceRecord) -> None:
        await self.db.execute(
            """
            INSERT INTO clinical_references (
                id, reference_id_display, formatted_citation, reference_text,
                authors, title, journal, publication_year, doi
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                reference_id_display=excluded.reference_id_display,
                formatted_citation=excluded.formatted_citation,
                reference_text=excluded.reference_text,
                authors=excluded.authors,
                title=excluded.title,
                journal=excluded.journal,
                publication_year=excluded.publication_year,
                doi=excluded.doi
            """,
            (
                reference.id,
                reference.display_id,
                reference.formatted_citation,
                reference.raw_text,
                json.dumps(reference.authors),
                reference.title,
                reference.journal,
                reference.year,
                reference.doi,
            ),
        )
        await self.db.commit()

    async def register_safety_statement(self, statement: SafetyStatementRecord) -> None:
        if not statement.brand_id:
            raise ValueError(f"Safety statement {statement.id} has no brand_id")
        await self.db.execute(
            """
            INSERT INTO safety_statements (
                id, brand_id, statement_text, statement_type, severity, fda_required
            ) VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                brand_id=excluded.brand_id,
                statement_text=excluded.statement_text,
                statement_type=excluded.statement_type,
                severity=excluded.severity,
                fda_required=excluded.fda_required
            """,
            (
                statement.id,
                statement.brand_id,
                statement.text,
                statement.statement_type,
                statement.severity,
                1 if statement.fda_required else 0,
            ),
        )
        await self.db.commit()

    async def count_claims(self, brand_id: str) -> int:
        rows = await self._fetchall(
            "SELECT COUNT(*) FROM clinical_claims WHERE brand_id = ?", [brand_id]
        )
        return int(rows[0][0]) if rows else 0
