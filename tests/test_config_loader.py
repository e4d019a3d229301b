# tests/test_config_loader.py
from __future__ import annotations

import json
from pathlib import Path

import pytest

from projectforge.config.env import load_credentials
from projectforge.config.loader import find_settings_file, load_settings
from projectforge.config.types import ConfigError, Settings, UnsupportedConfigFormatError
from projectforge.executor.types import Severity


# -------------------------
# Helpers
# -------------------------


def write_text(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def write_json(path: Path, obj: object) -> Path:
    path.write_text(json.dumps(obj), encoding="utf-8")
    return path


# -------------------------
# Basic file/path errors
# -------------------------


def test_missing_explicit_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "missing.yaml")


def test_path_is_dir_raises_config_error(tmp_path: Path) -> None:
    d = tmp_path / "dir"
    d.mkdir()
    with pytest.raises(ConfigError):
        load_settings(d)


def test_unsupported_extension_raises_unsupported_format(tmp_path: Path) -> None:
    p = write_text(tmp_path / "config.txt", "aws_region: us-east-2")
    with pytest.raises(UnsupportedConfigFormatError):
        load_settings(p)


def test_no_default_file_gives_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    assert find_settings_file() is None
    assert load_settings() == Settings()


def test_default_file_is_discovered(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    write_text(tmp_path / "projectforge.yml", "github_owner: octocat\n")
    monkeypatch.chdir(tmp_path)

    assert load_settings().github_owner == "octocat"


# -------------------------
# Parse errors are wrapped
# -------------------------


def test_invalid_yaml_is_wrapped_as_config_error(tmp_path: Path) -> None:
    p = write_text(tmp_path / "config.yaml", "severity: [\n")  # invalid
    with pytest.raises(ConfigError):
        load_settings(p)


def test_invalid_toml_is_wrapped_as_config_error(tmp_path: Path) -> None:
    p = write_text(tmp_path / "config.toml", "severity = {")  # invalid
    with pytest.raises(ConfigError):
        load_settings(p)


def test_invalid_json_is_wrapped_as_config_error(tmp_path: Path) -> None:
    p = write_text(tmp_path / "config.json", '{"aws_region": ')  # invalid
    with pytest.raises(ConfigError):
        load_settings(p)


# -------------------------
# Shape validation
# -------------------------


@pytest.mark.parametrize(
    "ext, content",
    [
        (".yaml", "[]\n"),
        (".json", "[]"),
        (".json", "null"),
    ],
)
def test_top_level_not_mapping_raises(tmp_path: Path, ext: str, content: str) -> None:
    p = write_text(tmp_path / f"config{ext}", content)
    with pytest.raises(ConfigError):
        load_settings(p)


def test_empty_yaml_is_default_settings(tmp_path: Path) -> None:
    p = write_text(tmp_path / "config.yaml", "")
    assert load_settings(p) == Settings()


def test_unknown_key_raises(tmp_path: Path) -> None:
    p = write_text(tmp_path / "config.yaml", "tasks: {}\n")
    with pytest.raises(ConfigError):
        load_settings(p)


@pytest.mark.parametrize(
    "content",
    [
        "github_owner: 123\n",
        'github_owner: "   "\n',
        "aws_region: []\n",
    ],
)
def test_string_fields_validated(tmp_path: Path, content: str) -> None:
    p = write_text(tmp_path / "config.yaml", content)
    with pytest.raises(ConfigError):
        load_settings(p)


@pytest.mark.parametrize(
    "content",
    [
        "database_port: five\n",
        "database_port: true\n",
        "database_port: 70000\n",
        "poll_delay: -1\n",
        "poll_delay: 0\n",
        "poll_timeout: soon\n",
    ],
)
def test_numeric_fields_validated(tmp_path: Path, content: str) -> None:
    p = write_text(tmp_path / "config.yaml", content)
    with pytest.raises(ConfigError):
        load_settings(p)


# -------------------------
# Successful loads
# -------------------------


def test_yaml_settings_loaded(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "projectforge.yml",
        "github_owner: ' octocat '\n"
        "aws_region: eu-west-1\n"
        "terraform_organization: acme\n"
        "database_port: 6543\n"
        "poll_delay: 5\n"
        "poll_timeout: 120.5\n",
    )

    settings = load_settings(p)

    assert settings.github_owner == "octocat"
    assert settings.aws_region == "eu-west-1"
    assert settings.terraform_organization == "acme"
    assert settings.database_port == 6543
    assert settings.poll_delay == 5.0
    assert settings.poll_timeout == 120.5


def test_null_poll_timeout_means_unbounded(tmp_path: Path) -> None:
    p = write_text(tmp_path / "config.yaml", "poll_timeout: null\n")
    assert load_settings(p).poll_timeout is None


def test_toml_settings_loaded(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "config.toml",
        'author = "Ada"\n\n[severity]\n"Git push" = "advisory"\n',
    )

    settings = load_settings(p)

    assert settings.author == "Ada"
    assert settings.severity == {"Git push": Severity.ADVISORY}


def test_json_severity_overrides(tmp_path: Path) -> None:
    p = write_json(
        tmp_path / "config.json",
        {"severity": {"Add GitHub secrets": "FATAL", "Wait for CI": "advisory"}},
    )

    settings = load_settings(p)

    assert settings.severity_for("Add GitHub secrets", Severity.ADVISORY) is Severity.FATAL
    assert settings.severity_for("Wait for CI", Severity.FATAL) is Severity.ADVISORY
    assert settings.severity_for("Git init", Severity.FATAL) is Severity.FATAL


@pytest.mark.parametrize(
    "severity",
    [
        ["Git push"],
        {"Git push": "ignore"},
        {"Git push": 1},
        {"  ": "advisory"},
    ],
)
def test_bad_severity_raises(tmp_path: Path, severity: object) -> None:
    p = write_json(tmp_path / "config.json", {"severity": severity})
    with pytest.raises(ConfigError):
        load_settings(p)


# -------------------------
# Credentials
# -------------------------


def test_credentials_from_mapping_treat_blank_as_unset() -> None:
    creds = load_credentials(
        {
            "GITHUB_TOKEN": "ghp_123",
            "NPM_TOKEN": "   ",
            "TERRAFORM_ORGANIZATION_TOKEN": "org",
            "TERRAFORM_USER_TOKEN": "user",
        }
    )

    assert creds.github_token == "ghp_123"
    assert creds.npm_token is None
    assert creds.has_terraform
    assert not creds.has_database_master


def test_credentials_from_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_MASTER_USER", "admin")
    monkeypatch.setenv("DATABASE_MASTER_PASSWORD", "secret")

    creds = load_credentials(dotenv=False)

    assert creds.has_database_master
