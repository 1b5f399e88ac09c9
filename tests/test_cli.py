"""
Tests for the ai-compliance command line interface.
"""

import csv
import json

import pytest
import yaml

from ai_compliance.cli import main
from ai_compliance.assessment_db import AssessmentDatabase
from ai_compliance.utils import load_answer_sheet


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    for name in (
        "AI_COMPLIANCE_DB_PATH",
        "AI_COMPLIANCE_LOG_LEVEL",
        "AI_COMPLIANCE_SIGNING_KEY_FILE",
        "AI_COMPLIANCE_SIGN_ASSESSMENTS",
    ):
        monkeypatch.delenv(name, raising=False)
    return str(tmp_path / "inventory.db")


@pytest.fixture
def chatbot(db_path):
    assert main(["--db", db_path, "systems", "add", "--name", "Support Chatbot",
                 "--purpose", "Customer support", "--data-source", "CRM",
                 "--data-source", "Tickets", "--modified-by", "jane"]) == 0
    return AssessmentDatabase(db_path).get_system_by_name("Support Chatbot")


class TestSystemsCommands:

    def test_add_and_list(self, db_path, chatbot, capsys):
        assert chatbot.data_sources == ["CRM", "Tickets"]
        capsys.readouterr()

        assert main(["--db", db_path, "systems", "list"]) == 0

        out = capsys.readouterr().out
        assert "Support Chatbot" in out
        assert "[Not Yet Assessed]" in out

    def test_duplicate_name_fails(self, db_path, chatbot, capsys):
        assert main(["--db", db_path, "systems", "add", "--name", "Support Chatbot"]) == 1
        assert "already exists" in capsys.readouterr().err

    def test_empty_inventory(self, db_path, capsys):
        assert main(["--db", db_path, "systems", "list"]) == 0
        assert "No AI systems inventoried" in capsys.readouterr().out


class TestAssessCommands:

    def test_assess_eu_from_yaml(self, db_path, chatbot, tmp_path, capsys):
        sheet = tmp_path / "eu.yaml"
        sheet.write_text(yaml.safe_dump({
            "prohibited": {"subliminal": False},
            "high_risk_categories": ["ESSENTIAL_SERVICES"],
        }))

        assert main(["--db", db_path, "assess", "eu", "--system", "Support Chatbot",
                     "--answers", str(sheet), "--assessor", "jane"]) == 0

        assert "Risk tier: HIGH_RISK" in capsys.readouterr().out
        stored = AssessmentDatabase(db_path).get_system(chatbot.system_id)
        assert stored.risk_classification == "HIGH_RISK"

    def test_assess_uk_from_json(self, db_path, chatbot, tmp_path, capsys):
        sheet = tmp_path / "uk.json"
        sheet.write_text(json.dumps({
            "fairness": {"q1": "FULLY_ADDRESSED", "q2": "PARTIALLY_ADDRESSED"},
            "sector_specific_requirements": ["ICO guidance"],
        }))

        assert main(["--db", db_path, "assess", "uk", "--system", chatbot.system_id,
                     "--answers", str(sheet), "--assessor", "jane"]) == 0

        out = capsys.readouterr().out
        assert "Overall compliance: 6.0%" in out
        assert "fairness: 30.0% (NOT_ADDRESSED)" in out

    def test_assess_nist(self, db_path, chatbot, tmp_path, capsys):
        sheet = tmp_path / "nist.yaml"
        sheet.write_text(yaml.safe_dump({
            "govern": {"q1": 4, "q2": 4, "q3": 4, "q4": 4},
            "map": {"q1": 4, "q2": 4, "q3": 4, "q4": 4},
            "measure": {"q1": 4, "q2": 4, "q3": 4, "q4": 4},
            "manage": {"q1": 4, "q2": 4, "q3": 4, "q4": 4},
        }))

        assert main(["--db", db_path, "assess", "nist", "--system", "Support Chatbot",
                     "--answers", str(sheet), "--assessor", "jane"]) == 0

        assert "Overall maturity: MANAGED (4.00)" in capsys.readouterr().out

    def test_blank_assessor_fails(self, db_path, chatbot, tmp_path, capsys):
        sheet = tmp_path / "eu.yaml"
        sheet.write_text("{}")

        assert main(["--db", db_path, "assess", "eu", "--system", "Support Chatbot",
                     "--answers", str(sheet), "--assessor", " "]) == 1
        assert "Assessor name is required" in capsys.readouterr().err

    def test_unknown_system_fails(self, db_path, tmp_path, capsys):
        sheet = tmp_path / "eu.yaml"
        sheet.write_text("{}")

        assert main(["--db", db_path, "assess", "eu", "--system", "Nope",
                     "--answers", str(sheet), "--assessor", "jane"]) == 1
        assert "not found" in capsys.readouterr().err

    def test_invalid_nist_value_fails(self, db_path, chatbot, tmp_path):
        sheet = tmp_path / "nist.yaml"
        sheet.write_text(yaml.safe_dump({"govern": {"q1": 7}}))

        assert main(["--db", db_path, "assess", "nist", "--system", "Support Chatbot",
                     "--answers", str(sheet), "--assessor", "jane"]) == 1

    def test_list_section_fails_cleanly(self, db_path, chatbot, tmp_path, capsys):
        sheet = tmp_path / "uk.yaml"
        sheet.write_text("fairness: [FULLY_ADDRESSED]\n")

        assert main(["--db", db_path, "assess", "uk", "--system", "Support Chatbot",
                     "--answers", str(sheet), "--assessor", "jane"]) == 1
        assert "must be a mapping" in capsys.readouterr().err

    def test_misspelled_eu_section_fails(self, db_path, chatbot, tmp_path):
        sheet = tmp_path / "eu.yaml"
        sheet.write_text(yaml.safe_dump({"prohibted": {"subliminal": True}}))

        assert main(["--db", db_path, "assess", "eu", "--system", "Support Chatbot",
                     "--answers", str(sheet), "--assessor", "jane"]) == 1
        stored = AssessmentDatabase(db_path).get_system(chatbot.system_id)
        assert stored.risk_classification == "NOT_YET_ASSESSED"


class TestReportingCommands:

    def test_coverage(self, db_path, chatbot, tmp_path, capsys):
        sheet = tmp_path / "eu.yaml"
        sheet.write_text(yaml.safe_dump({"limited_risk": {"human_interaction": True}}))
        main(["--db", db_path, "assess", "eu", "--system", "Support Chatbot",
              "--answers", str(sheet), "--assessor", "jane"])
        capsys.readouterr()

        assert main(["--db", db_path, "coverage", "--system", "Support Chatbot"]) == 0

        out = capsys.readouterr().out
        assert "EU AI Act: LIMITED_RISK" in out
        assert "UK AI Regulation: not assessed" in out
        assert "Cross-framework ready: no" in out

    def test_distribution(self, db_path, chatbot, capsys):
        capsys.readouterr()
        assert main(["--db", db_path, "distribution"]) == 0

        out = capsys.readouterr().out
        assert "Total systems: 1" in out
        assert "Not Yet Assessed: 1" in out

    def test_export(self, db_path, chatbot, tmp_path):
        output = tmp_path / "inventory.csv"

        assert main(["--db", db_path, "export", "--output", str(output)]) == 0

        with open(output, newline="") as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 1
        assert rows[0]["System Name"] == "Support Chatbot"
        assert rows[0]["Data Sources"] == "CRM; Tickets"
        assert rows[0]["Risk Classification"] == "Not Yet Assessed"

    def test_bad_log_level(self, db_path, capsys):
        assert main(["--db", db_path, "--log-level", "LOUD", "systems", "list"]) == 2
        assert "Configuration error" in capsys.readouterr().err


class TestLoadAnswerSheet:

    def test_empty_file(self, tmp_path):
        sheet = tmp_path / "empty.yaml"
        sheet.write_text("")
        assert load_answer_sheet(sheet) == {}

    def test_non_mapping_rejected(self, tmp_path):
        sheet = tmp_path / "list.yaml"
        sheet.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_answer_sheet(sheet)
