"""Tests for the command line front end."""

import io
import json
import sys

import pytest

from archreview import cli
from archreview.logging import configure_logging
from archreview.validators import validate
from conftest import java


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    monkeypatch.delenv("ARCHREVIEW_POLICY_PATH", raising=False)
    cli.get_settings.cache_clear()
    yield
    cli.get_settings.cache_clear()


def _write(path, text: str):
    path.write_text(text, encoding="utf-8")
    return path


class TestValidateCommand:
    def test_clean_file_exits_zero(self, tmp_path, capsys, normal_source) -> None:
        target = _write(tmp_path / "NormalService.java", normal_source)
        assert cli.main(["validate", str(target)]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["files"][0]["findings"] == []
        assert output["report"]["decision"] == "APPROVE"

    def test_critical_findings_exit_one(self, tmp_path, capsys) -> None:
        target = _write(tmp_path / "UserDao.java", java("""
            public class UserDao {
                void find(String userId) {
                    String sql = "SELECT name FROM users WHERE id = '" + userId + "'";
                }
            }
        """))
        assert cli.main(["validate", str(target)]) == 1

        output = json.loads(capsys.readouterr().out)
        [finding] = output["files"][0]["findings"]
        assert finding["ruleId"] == "ARCH_SECURITY"
        assert finding["severity"] == "CRITICAL"
        assert finding["lineNumber"] == 3
        assert output["report"]["decision"] == "REJECT"

    def test_directories_and_policy_groups(self, tmp_path, capsys, normal_source) -> None:
        src = tmp_path / "src"
        src.mkdir()
        _write(src / "NormalService.java", normal_source)
        _write(src / "NormalServiceTest.java", normal_source)
        (src / ".hidden").mkdir()
        _write(src / ".hidden" / "Skipped.java", normal_source)
        policy = _write(tmp_path / "policy.json", json.dumps({
            "review": {"patterns": {"customPatterns": {"services": ["*Service.java"]}}},
        }))

        assert cli.main(["validate", str(src), "--policy", str(policy), "--workers", "2"]) == 0

        files = json.loads(capsys.readouterr().out)["files"]
        assert [f["fileName"].rsplit("/", 1)[-1] for f in files] == [
            "NormalService.java",
            "NormalServiceTest.java",
        ]
        assert files[0]["groups"] == ["services"]
        assert files[1]["groups"] == []

    def test_member_team_applies(self, tmp_path, capsys, long_method_source) -> None:
        target = _write(tmp_path / "Reports.java", long_method_source)
        policy = _write(tmp_path / "policy.json", json.dumps({
            "teams": {"core": {"members": ["dana"], "customThresholds": {"maxMethodLength": 10}}},
        }))

        cli.main(["validate", str(target), "--policy", str(policy), "--member", "dana"])

        findings = json.loads(capsys.readouterr().out)["files"][0]["findings"]
        assert any("exceeds 10 lines" in f["description"] for f in findings)

    def test_policy_path_from_environment(self, tmp_path, capsys, monkeypatch, field_injection_source) -> None:
        target = _write(tmp_path / "UserService.java", field_injection_source)
        policy = _write(tmp_path / "policy.json", json.dumps({"rules": {"enableSolid": False}}))
        monkeypatch.setenv("ARCHREVIEW_POLICY_PATH", str(policy))
        cli.get_settings.cache_clear()

        cli.main(["validate", str(target)])

        findings = json.loads(capsys.readouterr().out)["files"][0]["findings"]
        assert all(f["type"] != "DEPENDENCY_INJECTION" for f in findings)

    def test_bad_policy_is_a_usage_error(self, tmp_path, normal_source) -> None:
        target = _write(tmp_path / "NormalService.java", normal_source)
        policy = _write(tmp_path / "policy.json", json.dumps({"thresholds": {"maxParameters": -1}}))
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["validate", str(target), "--policy", str(policy)])
        assert exc_info.value.code == 2


class TestCheckPolicyCommand:
    def test_valid_policy_summary(self, tmp_path, capsys) -> None:
        policy = _write(tmp_path / "policy.json", json.dumps({
            "rules": {
                "disabled": ["ARCH_CACHING"],
                "severity": {"ARCH_SECURITY": "critical"},
            },
            "teams": {"web": {}, "api": {}},
        }))
        assert cli.main(["check-policy", str(policy)]) == 0

        summary = json.loads(capsys.readouterr().out)
        assert summary["status"] == "valid"
        assert summary["disabledRules"] == ["ARCH_CACHING"]
        assert summary["severityOverrides"] == {"ARCH_SECURITY": "CRITICAL"}
        assert summary["teams"] == ["api", "web"]

    def test_unknown_rule_id_fails(self, tmp_path, capsys) -> None:
        policy = _write(tmp_path / "policy.json", json.dumps({"rules": {"disabled": ["ARCH_NOPE"]}}))
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["check-policy", str(policy)])
        assert exc_info.value.code == 2
        assert "rules.disabled" in capsys.readouterr().err

    def test_missing_file_fails(self, tmp_path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["check-policy", str(tmp_path / "missing.json")])
        assert exc_info.value.code == 2


class TestRulesCommand:
    def test_lists_rule_table(self, capsys) -> None:
        assert cli.main(["rules"]) == 0

        rules = json.loads(capsys.readouterr().out)
        by_key = {rule["key"]: rule for rule in rules}
        assert by_key["deep_nesting"]["structural"] is True
        assert by_key["duplicate_block"]["optIn"] is True
        assert by_key["sql_injection"]["ruleId"] == "ARCH_SECURITY"


class TestLogging:
    def test_log_lines_go_to_stderr(self, tmp_path, capsys, normal_source) -> None:
        target = _write(tmp_path / "NormalService.java", normal_source)
        cli.main(["validate", str(target)])

        captured = capsys.readouterr()
        assert "review_complete" in captured.err
        assert "review_complete" not in captured.out
        json.loads(captured.out)

    def test_validation_survives_a_closed_log_stream(self, monkeypatch, field_injection_source) -> None:
        stream = io.StringIO()
        with monkeypatch.context() as patch:
            patch.setattr(sys, "stderr", stream)
            configure_logging("info")
        stream.close()

        findings = validate("UserService.java", field_injection_source)
        assert any(f.rule_id == "ARCH_DEPENDENCY_INJECTION" for f in findings)
