"""CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mlr_citations.citation import (
    CitationProcessor,
    CitationValidator,
    calculate_citation_coverage,
    format_references_section,
)
from mlr_citations.claims.detection import CLAIM_CATEGORY_LABELS, SAFETY_TYPE_LABELS, analyze_content
from mlr_citations.config.loader import load_settings
from mlr_citations.db.database import get_db
from mlr_citations.db.repositories import EvidenceRepository
from mlr_citations.db.seed import seed_from_file
from mlr_citations.exceptions import EvidenceStoreError
from mlr_citations.models import (
    CitationCoverage,
    CitationStyle,
    CitationValidationResult,
    ProcessedContent,
    SafetyRequirementsReport,
    SettingsConfig,
    StatementFilter,
)
from mlr_citations.safety.requirements import SafetyRequirementsChecker, filter_statements
from mlr_citations.utils.logging_config import LogLevel, setup_logging
from mlr_citations.utils.structured_log import bind_request, configure_audit_logging


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    resolved = Path(path)
    if not resolved.exists():
        raise FileNotFoundError(f"Missing input file: {path}")
    return resolved.read_text(encoding="utf-8")


def _resolve_brand(args: argparse.Namespace, settings: SettingsConfig) -> str:
    brand_id = getattr(args, "brand", None) or settings.default_brand_id
    if not brand_id:
        raise ValueError("No brand given: pass --brand or set default_brand_id / MLR_BRAND_ID")
    return brand_id


def _print_processed(console: Console, processed: ProcessedContent) -> None:
    table = Table(title="Claims Cited")
    table.add_column("#", style="cyan", no_wrap=True)
    table.add_column("Claim", style="white", no_wrap=True)
    table.add_column("Text", style="white")
    table.add_column("References", style="magenta")
    for usage in processed.claims_used:
        table.add_row(
            str(usage.citation_number),
            usage.claim_display_id,
            usage.claim_text,
            ", ".join(usage.linked_references) or "-",
        )
    console.print(table)
    section = format_references_section(processed.references_used)
    if section:
        console.print("[bold]References[/]")
        console.print(section, markup=False)


def _print_validation(console: Console, result: CitationValidationResult) -> None:
    if result.valid:
        console.print("[green]Citation validation:[/] PASSED")
        return
    console.print("[red]Citation validation:[/] FAILED")
    for label, ids in (
        ("Expired", result.expired_claims),
        ("Out of scope", result.scope_mismatches),
        ("No references", result.missing_references),
    ):
        if ids:
            console.print(f"  [yellow]{label}:[/] {', '.join(ids)}")


def _print_safety(console: Console, report: SafetyRequirementsReport, view: StatementFilter) -> None:
    if report.error:
        console.print(f"[red]Error:[/] could not load safety statements ({report.error})")
        return
    detected = ", ".join(CLAIM_CATEGORY_LABELS[t] for t in report.analysis.detected_types)
    console.print(f"[dim]Detected claims:[/] {detected or 'none'} ({report.analysis.confidence}%)")
    table = Table(title="Safety Requirements")
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Severity", no_wrap=True)
    table.add_column("Required", no_wrap=True)
    table.add_column("Present", no_wrap=True)
    table.add_column("Statement", style="white")
    for check in filter_statements(report.checks, view):
        stmt = check.statement
        table.add_row(
            SAFETY_TYPE_LABELS.get(stmt.statement_type, stmt.statement_type),
            stmt.severity,
            "yes" if check.is_required else "no",
            "[green]yes[/]" if check.is_present else ("[red]no[/]" if check.is_required else "no"),
            stmt.text,
        )
    console.print(table)
    summary = report.summary
    console.print(
        f"{summary.missing} missing required, {summary.present}/{len(report.checks)} present"
    )


async def _run_seed(args: argparse.Namespace, settings: SettingsConfig, console: Console) -> int:
    brand_id = args.brand or settings.default_brand_id
    async with get_db(settings.database_path) as db:
        repo = EvidenceRepository(db)
        counts = await seed_from_file(repo, args.catalog, brand_id=args.brand)
        stored = await repo.count_claims(brand_id) if brand_id else None
    console.print(
        f"[green]Seeded:[/] {counts.claims} claims, {counts.references} references, "
        f"{counts.safety_statements} safety statements"
    )
    if stored is not None:
        console.print(f"[dim]{stored} claims stored for brand {brand_id}[/]")
    return 0


async def _run_process(args: argparse.Namespace, settings: SettingsConfig, console: Console) -> int:
    brand_id = _resolve_brand(args, settings)
    content = _read_input(args.input)
    async with get_db(settings.database_path) as db:
        processor = CitationProcessor(EvidenceRepository(db), citation_style=args.style)
        processed = await processor.process_content(content, brand_id)
    if args.output:
        Path(args.output).write_text(processed.content, encoding="utf-8")
        console.print(f"[dim]Annotated content written to[/] {args.output}")
    else:
        console.print(processed.content, markup=False)
    _print_processed(console, processed)
    return 0


async def _run_validate(args: argparse.Namespace, settings: SettingsConfig, console: Console) -> int:
    brand_id = _resolve_brand(args, settings)
    content = _read_input(args.input)
    asset_type = args.asset_type or settings.validation.default_asset_type
    audience = args.audience or settings.validation.default_audience
    async with get_db(settings.database_path) as db:
        repo = EvidenceRepository(db)
        processed = await CitationProcessor(repo).process_content(content, brand_id)
        result = await CitationValidator(repo).validate_citations(
            processed.claims_used, asset_type, audience
        )
    _print_processed(console, processed)
    _print_validation(console, result)
    return 1 if (not result.valid and settings.validation.block_on_invalid) else 0


async def _run_safety(args: argparse.Namespace, settings: SettingsConfig, console: Console) -> int:
    brand_id = _resolve_brand(args, settings)
    content = _read_input(args.input)
    async with get_db(settings.database_path) as db:
        report = await SafetyRequirementsChecker(EvidenceRepository(db)).evaluate(brand_id, content)
    _print_safety(console, report, StatementFilter(args.filter))
    if report.error:
        return 2
    return 1 if report.summary.missing else 0


def _print_coverage(console: Console, coverage: CitationCoverage) -> None:
    console.print(
        f"[dim]Citation coverage:[/] {coverage.coverage:g}% "
        f"(compliance score {coverage.compliance_score:g})"
    )
    if coverage.needs:
        table = Table(title="Citation Needs")
        table.add_column("Priority", no_wrap=True)
        table.add_column("Type", style="cyan", no_wrap=True)
        table.add_column("Phrase", style="white")
        table.add_column("Evidence", no_wrap=True)
        table.add_column("Cited", no_wrap=True)
        for need in coverage.needs:
            table.add_row(
                need.priority.value,
                need.claim_type,
                need.claim_text,
                "/".join(need.required_evidence_levels),
                "[green]yes[/]" if need.is_covered else "[red]no[/]",
            )
        console.print(table)
    for issue in coverage.reference_issues:
        console.print(f"  [yellow]Reference issue:[/] {escape(issue)}")


def _run_analyze(args: argparse.Namespace, console: Console) -> int:
    content = _read_input(args.input)
    analysis = analyze_content(content)
    table = Table(title=f"Claim Analysis (confidence {analysis.confidence}%)")
    table.add_column("Category", style="cyan", no_wrap=True)
    table.add_column("Matched phrases", style="white")
    for match in analysis.matches:
        table.add_row(CLAIM_CATEGORY_LABELS[match.type], ", ".join(match.phrases))
    console.print(table)
    _print_coverage(console, calculate_citation_coverage(content))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mlr-citations")
    parser.add_argument("--settings", default="config/settings.yaml")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging on the console")
    sub = parser.add_subparsers(dest="command")

    seed = sub.add_parser("seed", help="Load a claims/references/safety catalog into the store")
    seed.add_argument("--catalog", required=True)
    seed.add_argument("--brand", help="Brand applied to entries without one")

    process = sub.add_parser("process", help="Replace claim markers with numbered citations")
    process.add_argument("--brand")
    process.add_argument("--input", required=True, help="Content file, or - for stdin")
    process.add_argument("--output")
    process.add_argument(
        "--style",
        default=CitationStyle.AMA.value,
        choices=[s.value for s in CitationStyle],
        help="Format for references stored without a formatted citation",
    )

    validate = sub.add_parser("validate", help="Process content and validate the claims it cites")
    validate.add_argument("--brand")
    validate.add_argument("--input", required=True)
    validate.add_argument("--asset-type")
    validate.add_argument("--audience")

    safety = sub.add_parser("safety", help="Check content for required safety statements")
    safety.add_argument("--brand")
    safety.add_argument("--input", required=True)
    safety.add_argument(
        "--filter",
        default=StatementFilter.ALL.value,
        choices=[f.value for f in StatementFilter],
    )

    analyze = sub.add_parser("analyze", help="Detect claim categories and citation coverage")
    analyze.add_argument("--input", required=True)

    return parser


def _load_settings(path: str) -> SettingsConfig:
    return load_settings(path if Path(path).exists() else None)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 2

    console = Console()
    try:
        settings = _load_settings(args.settings)
        setup_logging(
            level=LogLevel(settings.logging.level),
            log_file=settings.logging.log_file,
            verbose=args.verbose,
        )
        if settings.logging.audit_log_dir:
            configure_audit_logging(settings.logging.audit_log_dir)
        bind_request(getattr(args, "brand", None) or settings.default_brand_id, args.command)

        if args.command == "analyze":
            return _run_analyze(args, console)
        handlers = {
            "seed": _run_seed,
            "process": _run_process,
            "validate": _run_validate,
            "safety": _run_safety,
        }
        return asyncio.run(handlers[args.command](args, settings, console))
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]Error:[/] {exc}")
        return 2
    except EvidenceStoreError as exc:
        console.print(f"[red]Evidence store error:[/] {exc}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
