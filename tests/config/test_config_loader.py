from __future__ import annotations

from pathlib import Path

import pytest

from helpers import write
from postlint.config.loader import DEFAULTS, LintConfig, env_overrides, find_config_file, load_config
from postlint.core.errors import ScriptError
from postlint.core.exit_codes import ERR_CONFIG


def test_defaults_without_config_file(tmp_path: Path) -> None:
    config = load_config(tmp_path, env={})
    assert config.source == "defaults"
    assert config.base_dir == tmp_path.resolve()
    assert config.required_fields == ("title", "date")
    assert config.include == tuple(DEFAULTS["include"])
    assert config.content_roots() == [tmp_path.resolve()]
    assert config.schema is None


def test_postlint_toml_is_found_from_a_subdirectory(tmp_path: Path) -> None:
    write(tmp_path, "postlint.toml", 'content_dirs = ["content"]\nallowed_layouts = ["post", "note"]\n')
    nested = tmp_path / "content" / "posts"
    nested.mkdir(parents=True)
    config = load_config(nested, env={})
    assert config.source == str((tmp_path / "postlint.toml").resolve())
    assert config.allowed_layouts == ("post", "note")
    assert config.content_roots() == [(tmp_path / "content").resolve()]


def test_pyproject_table_is_used_only_when_present(tmp_path: Path) -> None:
    write(tmp_path, "pyproject.toml", '[project]\nname = "blog"\n')
    assert find_config_file(tmp_path) != (tmp_path / "pyproject.toml").resolve()
    write(tmp_path, "pyproject.toml", '[project]\nname = "blog"\n\n[tool.postlint]\nstrict = true\n')
    assert find_config_file(tmp_path) == (tmp_path / "pyproject.toml").resolve()
    assert load_config(tmp_path, env={}).strict is True


def test_explicit_config_is_layered_over_discovery(tmp_path: Path) -> None:
    write(tmp_path, "postlint.toml", 'strict = true\ncontent_dirs = ["content"]\nrequired_fields = ["title", "date"]\n')
    write(tmp_path, "ci/lint.toml", 'required_fields = ["title"]\n')
    config = load_config(tmp_path, "ci/lint.toml", env={})
    assert config.strict is True
    assert config.required_fields == ("title",)
    assert config.base_dir == (tmp_path / "ci").resolve()
    assert config.content_roots() == [(tmp_path / "content").resolve()]
    assert config.source == f"{(tmp_path / 'postlint.toml').resolve()}+{tmp_path / 'ci' / 'lint.toml'}"


def test_explicit_config_paths_resolve_from_its_own_directory(tmp_path: Path) -> None:
    write(tmp_path, "postlint.toml", 'content_dirs = ["content"]\n')
    write(tmp_path, "ci/lint.toml", 'content_dirs = ["site"]\n')
    config = load_config(tmp_path, "ci/lint.toml", env={})
    assert config.content_roots() == [(tmp_path / "ci" / "site").resolve()]


def test_config_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = write(tmp_path, "elsewhere.toml", "forbid_drafts = true\n")
    monkeypatch.setenv("POSTLINT_CONFIG", str(path))
    config = load_config(tmp_path)
    assert config.forbid_drafts is True
    assert config.source == str(path)


def test_environment_overrides_file_values(tmp_path: Path) -> None:
    write(tmp_path, "postlint.toml", 'required_fields = ["title", "date", "tags"]\n')
    config = load_config(tmp_path, env={"REQUIRED_FIELDS": "title, layout", "STRICT": "on"})
    assert config.required_fields == ("title", "layout")
    assert config.strict is True
    assert config.source.endswith("+env")


def test_env_overrides_coercion() -> None:
    assert env_overrides({"forbid-drafts": "no", "schema": " fm.json ", "exclude": "drafts/*,,_*"}) == {
        "forbid_drafts": False,
        "schema": "fm.json",
        "exclude": ["drafts/*", "_*"],
    }


@pytest.mark.parametrize("env", [{"BOGUS": "1"}, {"STRICT": "sometimes"}, {"9LIVES": "x"}])
def test_env_overrides_reject_bad_entries(env: dict[str, str]) -> None:
    with pytest.raises(ScriptError) as exc:
        env_overrides(env)
    assert exc.value.code == ERR_CONFIG


@pytest.mark.parametrize(
    ("body", "needle"),
    [
        ("bogus = 1\n", "bogus"),
        ('strict = "yes"\n', "strict"),
        ('include = []\n', "include"),
        ('enable = ["Not An Id"]\n', "enable"),
    ],
)
def test_invalid_config_values_raise_config_error(tmp_path: Path, body: str, needle: str) -> None:
    write(tmp_path, "postlint.toml", body)
    with pytest.raises(ScriptError) as exc:
        load_config(tmp_path, env={})
    assert exc.value.code == ERR_CONFIG
    assert needle in str(exc.value)


def test_unreadable_config_files(tmp_path: Path) -> None:
    write(tmp_path, "broken.toml", "strict = \n")
    with pytest.raises(ScriptError) as bad:
        load_config(tmp_path, "broken.toml", env={})
    with pytest.raises(ScriptError) as missing:
        load_config(tmp_path, "missing.toml", env={})
    assert bad.value.code == missing.value.code == ERR_CONFIG


def test_schema_path_is_resolved_against_config_dir(tmp_path: Path) -> None:
    config = LintConfig.from_mapping({"schema": "schemas/fm.json"}, base_dir=tmp_path)
    assert config.schema == (tmp_path / "schemas" / "fm.json").resolve()
    assert config.as_dict()["schema"] == str(config.schema)
