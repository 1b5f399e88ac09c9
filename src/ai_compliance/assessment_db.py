"""
Assessment Database for the AI system inventory.

Holds two tables:
- systems: the inventoried AI systems and their current EU risk classification
- assessments: append-only framework assessments (one row per scoring event)

Assessment rows are never updated. The latest row per (framework, system)
is authoritative; the EU save path updates the owning system's
risk_classification inside the same transaction as the insert.
"""

import sqlite3
import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, List, Dict, Any, Iterator, Protocol

from ._types import Framework, RiskTier, DeploymentStatus, now_utc, generate_id
from .errors import PersistenceError, SystemNotFoundError, DuplicateSystemNameError
from .frameworks.schema import AssessmentRecord, EUAssessment, ASSESSMENT_MODELS

logger = logging.getLogger(__name__)


# Columns callers may change through update_system()
UPDATABLE_SYSTEM_FIELDS = {
    "system_name",
    "system_purpose",
    "business_owner",
    "technical_owner",
    "ai_model_type",
    "deployment_status",
    "vendor_provider",
    "data_sources",
}


@dataclass
class AISystem:
    """Represents an inventoried AI system."""
    system_id: str
    system_name: str
    system_purpose: str = ""
    business_owner: str = ""
    technical_owner: str = ""
    ai_model_type: str = ""
    deployment_status: str = DeploymentStatus.DEVELOPMENT.value
    vendor_provider: str = ""
    data_sources: List[str] = field(default_factory=list)
    risk_classification: str = RiskTier.NOT_YET_ASSESSED.value
    date_added: str = ""
    last_modified: str = ""
    modified_by: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class AssessmentStore(Protocol):
    """Record store the assessment service depends on."""

    def create(self, assessment: AssessmentRecord) -> str:
        ...

    def find_latest(self, framework: Framework, system_id: str) -> Optional[AssessmentRecord]:
        ...

    def update_system_classification(self, system_id: str, tier: RiskTier, modified_by: str) -> None:
        ...


class AssessmentDatabase:
    """
    SQLite-based store for AI systems and their assessments.

    Features:
    - Unique system names
    - Append-only assessment log, payload stored as JSON
    - Atomic EU save (assessment insert + classification update)
    - Every sqlite3 failure surfaces as PersistenceError
    """

    def __init__(self, db_path: str = "ai_compliance.db"):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection; commit on success, roll back on any error."""
        try:
            conn = sqlite3.connect(self.db_path, timeout=30)
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot open database {self.db_path}: {e}") from e

        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise PersistenceError(f"Database error: {e}") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self):
        """Initialize database schema."""
        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL")

            conn.execute("""
                CREATE TABLE IF NOT EXISTS systems (
                    system_id TEXT PRIMARY KEY,
                    system_name TEXT NOT NULL UNIQUE,
                    system_purpose TEXT NOT NULL DEFAULT '',
                    business_owner TEXT NOT NULL DEFAULT '',
                    technical_owner TEXT NOT NULL DEFAULT '',
                    ai_model_type TEXT NOT NULL DEFAULT '',
                    deployment_status TEXT NOT NULL,
                    vendor_provider TEXT NOT NULL DEFAULT '',
                    data_sources TEXT NOT NULL DEFAULT '[]',
                    risk_classification TEXT NOT NULL,
                    date_added TEXT NOT NULL,
                    last_modified TEXT NOT NULL,
                    modified_by TEXT NOT NULL DEFAULT ''
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS assessments (
                    assessment_id TEXT PRIMARY KEY,
                    system_id TEXT NOT NULL,
                    framework TEXT NOT NULL,
                    assessment_date TEXT NOT NULL,
                    assessed_by TEXT NOT NULL,
                    catalog_version TEXT NOT NULL,
                    payload TEXT NOT NULL,
                    FOREIGN KEY (system_id) REFERENCES systems(system_id)
                )
            """)

            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_assessments_latest "
                "ON assessments(framework, system_id, assessment_date)"
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_systems_risk ON systems(risk_classification)")

    # =========================================================================
    # Systems
    # =========================================================================

    def _row_to_system(self, row: sqlite3.Row) -> AISystem:
        data = dict(row)
        data["data_sources"] = json.loads(data["data_sources"] or "[]")
        return AISystem(**data)

    def create_system(
        self,
        system_name: str,
        modified_by: str = "",
        system_purpose: str = "",
        business_owner: str = "",
        technical_owner: str = "",
        ai_model_type: str = "",
        deployment_status: DeploymentStatus = DeploymentStatus.DEVELOPMENT,
        vendor_provider: str = "",
        data_sources: Optional[List[str]] = None,
    ) -> AISystem:
        """
        Inventory a new AI system with risk_classification NOT_YET_ASSESSED.

        Raises:
            DuplicateSystemNameError: If the name is already in use
        """
        now = now_utc().isoformat()
        system = AISystem(
            system_id=generate_id(),
            system_name=system_name,
            system_purpose=system_purpose,
            business_owner=business_owner,
            technical_owner=technical_owner,
            ai_model_type=ai_model_type,
            deployment_status=DeploymentStatus(deployment_status).value,
            vendor_provider=vendor_provider,
            data_sources=list(data_sources or []),
            date_added=now,
            last_modified=now,
            modified_by=modified_by,
        )

        with self._connect() as conn:
            try:
                conn.execute("""
                    INSERT INTO systems (
                        system_id, system_name, system_purpose, business_owner,
                        technical_owner, ai_model_type, deployment_status,
                        vendor_provider, data_sources, risk_classification,
                        date_added, last_modified, modified_by
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    system.system_id, system.system_name, system.system_purpose,
                    system.business_owner, system.technical_owner, system.ai_model_type,
                    system.deployment_status, system.vendor_provider,
                    json.dumps(system.data_sources), system.risk_classification,
                    system.date_added, system.last_modified, system.modified_by
                ))
            except sqlite3.IntegrityError:
                raise DuplicateSystemNameError(f"AI system '{system_name}' already exists")

        logger.info(f"Inventoried AI system {system.system_name} ({system.system_id})")
        return system

    def get_system(self, system_id: str) -> Optional[AISystem]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM systems WHERE system_id = ?", (system_id,)
            ).fetchone()
        return self._row_to_system(row) if row else None

    def get_system_by_name(self, system_name: str) -> Optional[AISystem]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM systems WHERE system_name = ?", (system_name,)
            ).fetchone()
        return self._row_to_system(row) if row else None

    def require_system(self, system_id: str) -> AISystem:
        """Get a system or raise SystemNotFoundError."""
        system = self.get_system(system_id)
        if system is None:
            raise SystemNotFoundError(f"AI system {system_id} not found")
        return system

    def list_systems(self) -> List[AISystem]:
        """All systems, alphabetical by name."""
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM systems ORDER BY system_name").fetchall()
        return [self._row_to_system(row) for row in rows]

    def update_system(self, system_id: str, modified_by: str, **changes: Any) -> AISystem:
        """
        Update descriptive inventory fields.

        risk_classification is not updatable here; it only changes through
        an EU assessment.

        Raises:
            ValueError: If an unknown or protected field is passed
            SystemNotFoundError: If the system does not exist
            DuplicateSystemNameError: If renamed onto an existing name
        """
        unknown = set(changes) - UPDATABLE_SYSTEM_FIELDS
        if unknown:
            raise ValueError(f"Cannot update system fields: {sorted(unknown)}")

        values = dict(changes)
        if "data_sources" in values:
            values["data_sources"] = json.dumps(list(values["data_sources"] or []))
        if "deployment_status" in values:
            values["deployment_status"] = DeploymentStatus(values["deployment_status"]).value
        values["last_modified"] = now_utc().isoformat()
        values["modified_by"] = modified_by

        # Column names come from the whitelist above
        assignments = ", ".join(f"{column} = ?" for column in values)

        with self._connect() as conn:
            try:
                cursor = conn.execute(
                    f"UPDATE systems SET {assignments} WHERE system_id = ?",
                    (*values.values(), system_id)
                )
            except sqlite3.IntegrityError:
                raise DuplicateSystemNameError(
                    f"AI system '{changes.get('system_name')}' already exists"
                )
            if cursor.rowcount == 0:
                raise SystemNotFoundError(f"AI system {system_id} not found")

        return self.require_system(system_id)

    def delete_system(self, system_id: str) -> None:
        """
        Remove a system and its assessments.

        Raises:
            SystemNotFoundError: If the system does not exist
        """
        with self._connect() as conn:
            conn.execute("DELETE FROM assessments WHERE system_id = ?", (system_id,))
            cursor = conn.execute("DELETE FROM systems WHERE system_id = ?", (system_id,))
            if cursor.rowcount == 0:
                raise SystemNotFoundError(f"AI system {system_id} not found")

        logger.info(f"Deleted AI system {system_id}")

    def count_systems_by_classification(self) -> Dict[str, int]:
        """Number of systems per risk_classification value present."""
        with self._connect() as conn:
            rows = conn.execute("""
                SELECT risk_classification, COUNT(*) AS count
                FROM systems
                GROUP BY risk_classification
            """).fetchall()
        return {row["risk_classification"]: row["count"] for row in rows}

    # =========================================================================
    # Assessments
    # =========================================================================

    def _insert_assessment(self, conn: sqlite3.Connection, assessment: AssessmentRecord) -> None:
        exists = conn.execute(
            "SELECT 1 FROM systems WHERE system_id = ?", (assessment.system_id,)
        ).fetchone()
        if not exists:
            raise SystemNotFoundError(f"AI system {assessment.system_id} not found")

        conn.execute("""
            INSERT INTO assessments (
                assessment_id, system_id, framework, assessment_date,
                assessed_by, catalog_version, payload
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
        """, (
            assessment.assessment_id,
            assessment.system_id,
            Framework(assessment.framework).value,
            assessment.assessment_date.isoformat(),
            assessment.assessed_by,
            assessment.catalog_version,
            assessment.model_dump_json(),
        ))

    def _update_classification(
        self,
        conn: sqlite3.Connection,
        system_id: str,
        tier: RiskTier,
        modified_by: str
    ) -> None:
        cursor = conn.execute("""
            UPDATE systems SET
                risk_classification = ?,
                modified_by = ?,
                last_modified = ?
            WHERE system_id = ?
        """, (RiskTier(tier).value, modified_by, now_utc().isoformat(), system_id))
        if cursor.rowcount == 0:
            raise SystemNotFoundError(f"AI system {system_id} not found")

    def create(self, assessment: AssessmentRecord) -> str:
        """
        Append an assessment record.

        Returns:
            The assessment_id

        Raises:
            SystemNotFoundError: If the owning system does not exist
            PersistenceError: On any database failure
        """
        with self._connect() as conn:
            self._insert_assessment(conn, assessment)
        logger.debug(f"Stored {assessment.framework} assessment {assessment.assessment_id}")
        return assessment.assessment_id

    def update_system_classification(self, system_id: str, tier: RiskTier, modified_by: str) -> None:
        with self._connect() as conn:
            self._update_classification(conn, system_id, tier, modified_by)

    def save_eu_assessment(self, assessment: EUAssessment) -> str:
        """
        Store an EU assessment and set the system's risk_classification.

        Both writes share one transaction: either the record exists and the
        system carries its tier, or neither change is visible.
        """
        with self._connect() as conn:
            self._update_classification(
                conn, assessment.system_id, assessment.risk_tier, assessment.assessed_by
            )
            self._insert_assessment(conn, assessment)

        logger.info(
            f"System {assessment.system_id} classified {assessment.risk_tier} "
            f"by {assessment.assessed_by}"
        )
        return assessment.assessment_id

    def _row_to_assessment(self, row: sqlite3.Row) -> AssessmentRecord:
        model = ASSESSMENT_MODELS[Framework(row["framework"])]
        return model.model_validate_json(row["payload"])

    def find_latest(self, framework: Framework, system_id: str) -> Optional[AssessmentRecord]:
        """Most recent assessment of a system under one framework, if any."""
        with self._connect() as conn:
            row = conn.execute("""
                SELECT framework, payload FROM assessments
                WHERE framework = ? AND system_id = ?
                ORDER BY assessment_date DESC, rowid DESC
                LIMIT 1
            """, (Framework(framework).value, system_id)).fetchone()
        return self._row_to_assessment(row) if row else None

    def get_assessment(self, assessment_id: str) -> Optional[AssessmentRecord]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT framework, payload FROM assessments WHERE assessment_id = ?",
                (assessment_id,)
            ).fetchone()
        return self._row_to_assessment(row) if row else None

    def list_assessments(
        self,
        framework: Optional[Framework] = None,
        system_id: Optional[str] = None,
    ) -> List[AssessmentRecord]:
        """Assessments newest first, optionally filtered by framework and system."""
        query = "SELECT framework, payload FROM assessments WHERE 1=1"
        params: List[Any] = []
        if framework is not None:
            query += " AND framework = ?"
            params.append(Framework(framework).value)
        if system_id is not None:
            query += " AND system_id = ?"
            params.append(system_id)
        query += " ORDER BY assessment_date DESC, rowid DESC"

        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_assessment(row) for row in rows]

    def count_assessments(self, framework: Optional[Framework] = None) -> int:
        with self._connect() as conn:
            if framework is None:
                row = conn.execute("SELECT COUNT(*) FROM assessments").fetchone()
            else:
                row = conn.execute(
                    "SELECT COUNT(*) FROM assessments WHERE framework = ?",
                    (Framework(framework).value,)
                ).fetchone()
        return row[0]
