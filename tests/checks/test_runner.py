from __future__ import annotations

from pathlib import Path

import pytest

from helpers import doc_from_text, make_config
from postlint.checks.model import CheckStatus
from postlint.checks.registry import get_check
from postlint.checks.runner import run_checks, select_checks
from postlint.core.errors import ScriptError
from postlint.core.exit_codes import ERR_CONFIG, ERR_USAGE

GOOD = "---\ntitle: Good\ndate: 2019-05-03\ntags: [numpy]\n---\nBody\n"


def _ids(checks: list) -> set[str]:
    return {check.check_id for check in checks}


def test_select_defaults(tmp_path: Path) -> None:
    ids = _ids(select_checks(make_config(tmp_path)))
    assert "frontmatter.present" in ids
    assert "frontmatter.known_fields" not in ids
    assert "content.no_drafts" not in ids


def test_config_enable_disable_and_forbid_drafts(tmp_path: Path) -> None:
    config = make_config(tmp_path, enable=["frontmatter.known_fields"], disable=["collection.*"])
    ids = _ids(select_checks(config, forbid_drafts=True))
    assert {"frontmatter.known_fields", "content.no_drafts"} <= ids
    assert not any(check_id.startswith("collection.") for check_id in ids)
    assert "content.no_drafts" in _ids(select_checks(make_config(tmp_path, forbid_drafts=True)))


def test_explicit_select_overrides_config_and_skip_applies_last(tmp_path: Path) -> None:
    config = make_config(tmp_path, disable=["frontmatter.present"])
    ids = _ids(select_checks(config, select=["frontmatter.*"], skip=["frontmatter.schema"]))
    assert "frontmatter.present" in ids
    assert "frontmatter.known_fields" in ids
    assert "frontmatter.schema" not in ids
    assert all(check_id.startswith("frontmatter.") for check_id in ids)


def test_unknown_ids(tmp_path: Path) -> None:
    with pytest.raises(ScriptError) as usage:
        select_checks(make_config(tmp_path), select=["frontmatter.nope"])
    assert usage.value.code == ERR_USAGE
    with pytest.raises(ScriptError) as config:
        select_checks(make_config(tmp_path, enable=["content.nope"]))
    assert config.value.code == ERR_CONFIG


def test_run_checks_statuses_and_summary(tmp_path: Path) -> None:
    config = make_config(tmp_path)
    docs = [doc_from_text(GOOD, "good.md"), doc_from_text("Body only\n", "bare.md")]
    checks = [get_check("frontmatter.present"), get_check("frontmatter.title_type"), get_check("content.body_nonempty")]
    report = run_checks(docs, checks, config)  # type: ignore[arg-type]
    statuses = {result.id: result.status for result in report.results}
    assert statuses == {
        "frontmatter.present": CheckStatus.FAIL,
        "frontmatter.title_type": CheckStatus.PASS,
        "content.body_nonempty": CheckStatus.PASS,
    }
    assert report.status is CheckStatus.FAIL
    assert report.summary["failed"] == 1
    assert report.summary["passed"] == 2
    assert report.summary["documents"] == 2
    assert report.summary["violations"] == 1
    assert report.paths == ("bare.md", "good.md")
    assert [item.path for item in report.violations] == ["bare.md"]


def test_checks_skip_unparsed_documents(tmp_path: Path) -> None:
    docs = [doc_from_text("---\ntitle: open\n", "broken.md")]
    checks = [get_check("frontmatter.parses"), get_check("frontmatter.required_fields"), get_check("content.body_nonempty")]
    report = run_checks(docs, checks, make_config(tmp_path))  # type: ignore[arg-type]
    statuses = {result.id: result.status for result in report.results}
    assert statuses["frontmatter.parses"] is CheckStatus.FAIL
    assert statuses["frontmatter.required_fields"] is CheckStatus.SKIP
    assert statuses["content.body_nonempty"] is CheckStatus.SKIP
    assert len(report.violations) == 1


def test_warnings_pass_unless_strict(tmp_path: Path) -> None:
    docs = [doc_from_text("---\ntitle: x\ndate: 2019-01-01\nmystery: 1\n---\nBody\n", "a.md")]
    checks = [get_check("frontmatter.known_fields")]
    relaxed = run_checks(docs, checks, make_config(tmp_path))  # type: ignore[arg-type]
    assert relaxed.results[0].status is CheckStatus.WARN
    assert relaxed.status is CheckStatus.PASS
    strict = run_checks(docs, checks, make_config(tmp_path), strict=True)  # type: ignore[arg-type]
    assert strict.results[0].status is CheckStatus.FAIL
    assert strict.status is CheckStatus.FAIL
    assert run_checks(docs, checks, make_config(tmp_path, strict=True)).strict is True  # type: ignore[arg-type]


def test_fail_fast_stops_after_first_failure(tmp_path: Path) -> None:
    docs = [doc_from_text("Body only\n", "bare.md")]
    checks = [get_check("frontmatter.present"), get_check("content.body_nonempty")]
    report = run_checks(docs, checks, make_config(tmp_path), fail_fast=True)  # type: ignore[arg-type]
    assert [result.id for result in report.results] == ["frontmatter.present"]
    assert report.summary["total"] == 1


def test_collection_checks_run_once_over_all_documents(tmp_path: Path) -> None:
    docs = [doc_from_text(GOOD, "a.md"), doc_from_text(GOOD, "b.md")]
    report = run_checks(docs, [get_check("collection.duplicate_titles")], make_config(tmp_path))  # type: ignore[list-item]
    assert [item.path for item in report.violations] == ["a.md", "b.md"]
    assert run_checks([], [get_check("collection.duplicate_titles")], make_config(tmp_path)).results[0].status is CheckStatus.SKIP  # type: ignore[list-item]
