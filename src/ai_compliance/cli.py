"""
Command line interface for the AI compliance engine.

Usage:
    ai-compliance systems add --name "Support Chatbot" --purpose "Customer support"
    ai-compliance systems list
    ai-compliance assess eu --system "Support Chatbot" --answers eu.yaml --assessor jane.doe
    ai-compliance coverage --system "Support Chatbot"
    ai-compliance export --output inventory.csv
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ._types import DeploymentStatus, Framework, ImplementationLevel, FRAMEWORK_LABELS, format_risk_tier
from .config import EngineConfig, load_config
from .errors import ComplianceEngineError, SystemNotFoundError
from .assessment_db import AssessmentDatabase, AISystem
from .crypto import Ed25519Signer, ensure_signing_key
from .export import filter_systems, write_systems_csv
from .frameworks.framework_service import FrameworkService
from .utils import setup_logging, load_answer_sheet

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai-compliance",
        description="Multi-framework AI risk classification (EU AI Act, UK principles, NIST AI RMF)"
    )
    parser.add_argument("--db", help="SQLite database path (overrides AI_COMPLIANCE_DB_PATH)")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")

    commands = parser.add_subparsers(dest="command", required=True)

    # systems
    systems = commands.add_parser("systems", help="Manage the AI system inventory")
    systems_commands = systems.add_subparsers(dest="systems_command", required=True)

    add = systems_commands.add_parser("add", help="Inventory a new AI system")
    add.add_argument("--name", required=True, help="Unique system name")
    add.add_argument("--purpose", default="", help="What the system is used for")
    add.add_argument("--owner", default="", help="Business owner")
    add.add_argument("--technical-owner", default="", help="Technical owner")
    add.add_argument("--model-type", default="", help="AI model type, e.g. LLM")
    add.add_argument(
        "--status",
        default=DeploymentStatus.DEVELOPMENT.value,
        choices=[s.value for s in DeploymentStatus],
        help="Deployment status"
    )
    add.add_argument("--vendor", default="", help="Vendor or provider")
    add.add_argument("--data-source", action="append", default=[], help="Data source (repeatable)")
    add.add_argument("--modified-by", default="", help="Who is recording the system")

    systems_commands.add_parser("list", help="List inventoried systems")

    # assess
    assess = commands.add_parser("assess", help="Assess a system from an answer sheet")
    assess.add_argument("framework", choices=["eu", "uk", "nist"])
    assess.add_argument("--system", required=True, help="System ID or name")
    assess.add_argument("--answers", required=True, type=Path, help="YAML or JSON answer sheet")
    assess.add_argument("--assessor", required=True, help="Name of the assessor")
    assess.add_argument("--notes", default=None, help="Free-text notes")

    # coverage
    coverage = commands.add_parser("coverage", help="Show latest result per framework")
    coverage.add_argument("--system", required=True, help="System ID or name")

    # distribution
    commands.add_parser("distribution", help="Count systems per EU risk tier")

    # export
    export = commands.add_parser("export", help="Export the inventory as CSV")
    export.add_argument("--output", required=True, type=Path, help="CSV file to write")
    export.add_argument("--risk", default=None, help="Only systems with this risk classification")
    export.add_argument("--status", default=None, help="Only systems with this deployment status")
    export.add_argument("--search", default=None, help="Substring match on name, purpose and owners")

    return parser


def resolve_config(args: argparse.Namespace) -> EngineConfig:
    """Environment configuration with command line overrides applied."""
    config = load_config()
    if args.db:
        config.db_path = Path(args.db)
    if args.log_level:
        config.log_level = args.log_level
    return config


def create_service(config: EngineConfig) -> FrameworkService:
    signer = None
    if config.sign_assessments:
        generated, public_key = ensure_signing_key(config.signing_key_file)
        if generated:
            logger.info(f"Assessment signing public key: {public_key}")
        signer = Ed25519Signer(config.signing_key_file)
    return FrameworkService(AssessmentDatabase(str(config.db_path)), signer=signer)


def resolve_system(db: AssessmentDatabase, ref: str) -> AISystem:
    """Look a system up by ID, then by name."""
    system = db.get_system(ref) or db.get_system_by_name(ref)
    if system is None:
        raise SystemNotFoundError(f"AI system '{ref}' not found")
    return system


# =============================================================================
# Command handlers
# =============================================================================

def cmd_systems(service: FrameworkService, args: argparse.Namespace) -> int:
    db = service.store
    if args.systems_command == "add":
        system = db.create_system(
            system_name=args.name,
            modified_by=args.modified_by,
            system_purpose=args.purpose,
            business_owner=args.owner,
            technical_owner=args.technical_owner,
            ai_model_type=args.model_type,
            deployment_status=args.status,
            vendor_provider=args.vendor,
            data_sources=args.data_source,
        )
        print(system.system_id)
        return 0

    systems = db.list_systems()
    if not systems:
        print("No AI systems inventoried")
        return 0
    for system in systems:
        print(f"{system.system_id}  {system.system_name}  [{format_risk_tier(system.risk_classification)}]")
    return 0


def cmd_assess(service: FrameworkService, args: argparse.Namespace) -> int:
    system = resolve_system(service.store, args.system)
    sheet = load_answer_sheet(args.answers)

    if args.framework == "eu":
        record = service.assess_eu(system.system_id, sheet, args.assessor, notes=args.notes)
        print(f"Risk tier: {record.risk_tier}")
        if record.verdict.prohibited_trigger:
            print(f"Triggered by: {record.verdict.prohibited_trigger}")
        for requirement in record.verdict.compliance_requirements:
            print(f"  requirement: {requirement}")
        for obligation in record.verdict.transparency_obligations:
            print(f"  obligation: {obligation}")

    elif args.framework == "uk":
        sector = sheet.pop("sector_specific_requirements", None)
        record = service.assess_uk(
            system.system_id, sheet, args.assessor,
            notes=args.notes, sector_specific_requirements=sector,
        )
        print(f"Overall compliance: {record.overall_compliance_score:.1f}%")
        for principle_id, score in record.verdict.principle_scores.items():
            level = ImplementationLevel(record.verdict.principle_levels[principle_id])
            print(f"  {principle_id}: {score:.1f}% ({level.value})")
        for gap in record.verdict.gaps:
            print(f"  gap: {gap}")

    else:
        characteristics = sheet.pop("trustworthy_characteristics", None)
        record = service.assess_nist(
            system.system_id, sheet, args.assessor,
            notes=args.notes, trustworthy_characteristics=characteristics,
        )
        print(f"Overall maturity: {record.maturity_level} ({record.verdict.overall_score:.2f})")
        for function_id, score in record.verdict.function_scores.items():
            print(f"  {function_id}: {score:.2f}")
        for recommendation in record.verdict.recommendations:
            print(f"  recommendation: {recommendation}")

    print(f"Assessment ID: {record.assessment_id}")
    return 0


def cmd_coverage(service: FrameworkService, args: argparse.Namespace) -> int:
    system = resolve_system(service.store, args.system)
    summary = service.coverage(system.system_id)

    print(f"{system.system_name} ({format_risk_tier(system.risk_classification)})")
    for entry in summary.frameworks:
        status = entry.headline if entry.present else "not assessed"
        print(f"  {FRAMEWORK_LABELS[Framework(entry.framework)]}: {status}")
    print(f"Cross-framework ready: {'yes' if summary.cross_framework_ready else 'no'}")
    if summary.summary:
        print(summary.summary)
    return 0


def cmd_distribution(service: FrameworkService, args: argparse.Namespace) -> int:
    distribution = service.risk_distribution()
    print(f"Total systems: {distribution.total_systems}")
    print(f"EU assessments: {distribution.total_assessments}")
    for tier, count in distribution.counts.items():
        print(f"  {format_risk_tier(tier)}: {count}")
    return 0


def cmd_export(service: FrameworkService, args: argparse.Namespace) -> int:
    systems = filter_systems(
        service.store.list_systems(),
        risk=args.risk,
        status=args.status,
        search=args.search,
    )
    with open(args.output, "w", newline="") as f:
        count = write_systems_csv(systems, f)
    print(f"Exported {count} systems to {args.output}")
    return 0


COMMANDS = {
    "systems": cmd_systems,
    "assess": cmd_assess,
    "coverage": cmd_coverage,
    "distribution": cmd_distribution,
    "export": cmd_export,
}


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(args)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    setup_logging(config.log_level)

    try:
        service = create_service(config)
        return COMMANDS[args.command](service, args)
    except ComplianceEngineError as e:
        logger.debug(f"{type(e).__name__}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
