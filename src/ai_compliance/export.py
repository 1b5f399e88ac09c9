"""
CSV export of the AI system inventory.
"""

import csv
import io
from datetime import datetime
from typing import Iterable, List, Optional, TextIO

from ._types import format_enum_value, format_risk_tier
from .assessment_db import AISystem

CSV_FIELDNAMES = [
    "System ID",
    "System Name",
    "System Purpose",
    "Business Owner",
    "Technical Owner",
    "AI Model Type",
    "Deployment Status",
    "Data Sources",
    "Vendor/Provider",
    "Risk Classification",
    "Date Added",
    "Last Modified",
    "Modified By",
]


def _format_timestamp(value: str) -> str:
    if not value:
        return ""
    try:
        return datetime.fromisoformat(value).strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return value


def system_to_row(system: AISystem) -> dict:
    """Flatten a system into display values keyed by CSV header."""
    return {
        "System ID": system.system_id,
        "System Name": system.system_name,
        "System Purpose": system.system_purpose,
        "Business Owner": system.business_owner,
        "Technical Owner": system.technical_owner,
        "AI Model Type": format_enum_value(system.ai_model_type) if system.ai_model_type else "",
        "Deployment Status": format_enum_value(system.deployment_status),
        "Data Sources": "; ".join(system.data_sources),
        "Vendor/Provider": system.vendor_provider,
        "Risk Classification": format_risk_tier(system.risk_classification),
        "Date Added": _format_timestamp(system.date_added),
        "Last Modified": _format_timestamp(system.last_modified),
        "Modified By": system.modified_by,
    }


def filter_systems(
    systems: Iterable[AISystem],
    risk: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> List[AISystem]:
    """
    Apply the inventory filters used by the export.

    search is a case-insensitive substring match on name, purpose and owners.
    """
    needle = search.lower() if search else None
    result = []
    for system in systems:
        if risk and system.risk_classification != risk:
            continue
        if status and system.deployment_status != status:
            continue
        if needle and not any(
            needle in (value or "").lower()
            for value in (
                system.system_name,
                system.system_purpose,
                system.business_owner,
                system.technical_owner,
            )
        ):
            continue
        result.append(system)
    return result


def write_systems_csv(systems: Iterable[AISystem], output: TextIO) -> int:
    """
    Write the inventory as CSV.

    Returns:
        Number of data rows written
    """
    writer = csv.DictWriter(output, fieldnames=CSV_FIELDNAMES, extrasaction="ignore")
    writer.writeheader()
    count = 0
    for system in systems:
        writer.writerow(system_to_row(system))
        count += 1
    return count


def generate_csv(systems: Iterable[AISystem]) -> str:
    """Render the inventory CSV into a string."""
    output = io.StringIO()
    write_systems_csv(systems, output)
    return output.getvalue()
