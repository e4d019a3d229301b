"""The ordered task catalogue for scaffolding a project."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from projectforge.config.types import Settings
from projectforge.executor.types import Severity, Task

from . import aws, database, files, github, terraform, vcs

if TYPE_CHECKING:
    from .context import RunContext


def _library(ctx: RunContext) -> bool:
    return not ctx.options.app


def _application(ctx: RunContext) -> bool:
    return ctx.options.app


def _no_github(ctx: RunContext) -> bool:
    return not ctx.credentials.github_token


def _no_aws(ctx: RunContext) -> bool:
    return _library(ctx) or not ctx.clients.has_aws()


def _no_database(ctx: RunContext) -> bool:
    return _library(ctx) or not ctx.credentials.has_database_master


def _no_terraform(ctx: RunContext) -> bool:
    return (
        _library(ctx)
        or not ctx.credentials.has_terraform
        or not ctx.terraform_organization
    )


def _no_owner(ctx: RunContext) -> bool:
    return not ctx.github_owner


def _owner_known(ctx: RunContext) -> bool:
    return _no_github(ctx) or bool(ctx.github_owner)


def _no_ci(ctx: RunContext) -> bool:
    return _library(ctx) or _no_github(ctx)


def _no_release(ctx: RunContext) -> bool:
    # npm's postversion hook pushes, so a release needs the remote.
    return _application(ctx) or _no_github(ctx)


WRITE_TITLES = (
    "Write package.json",
    "Write README",
    "Write LICENSE",
    "Write linter config",
    "Write source scaffolding",
    "Write CI workflows",
    "Write Terraform config",
    "Write environment file",
)

_DIR = ("Create project directory",)
_PROVISION = ("Create GitHub repository", "Create IAM user", "Create database")


TASKS = (
    Task("Validate package name", files.validate_package_name, skip=_application),
    Task("Check domain ownership", aws.ensure_domain, skip=_library),
    Task("Resolve GitHub owner", github.resolve_owner, skip=_owner_known),
    Task(
        "Create project directory",
        files.create_directory,
        deps=("Validate package name", "Check domain ownership", "Resolve GitHub owner"),
    ),
    Task("Write package.json", files.write_package_json, deps=_DIR),
    Task("Write README", files.write_readme, deps=_DIR),
    Task("Write LICENSE", files.write_license, deps=_DIR),
    Task("Write linter config", files.write_linter_config, deps=_DIR),
    Task("Write source scaffolding", files.write_source_scaffolding, deps=_DIR),
    Task("Write CI workflows", files.write_workflows, deps=_DIR),
    Task("Write Terraform config", files.write_terraform_config, skip=_library, deps=_DIR),
    Task("Write environment file", files.write_env_file, skip=_library, deps=_DIR),
    Task(
        "Install dependencies",
        vcs.install_dependencies,
        deps=("Write package.json",),
    ),
    Task("Create IAM user", aws.create_iam_user, skip=_no_aws),
    Task("Create database", database.create_database, skip=_no_database),
    Task("Git init", vcs.git_init, deps=_DIR),
    Task(
        "Git add",
        vcs.git_add,
        deps=("Git init", "Install dependencies") + WRITE_TITLES,
    ),
    Task("Git commit", vcs.git_commit, deps=("Git add",)),
    Task("Create GitHub repository", github.create_repository, skip=_no_github),
    Task(
        "Git remote",
        vcs.git_remote,
        skip=_no_owner,
        deps=("Git init", "Create GitHub repository"),
    ),
    Task(
        "Add GitHub secrets",
        github.add_secrets,
        skip=_no_github,
        deps=_PROVISION,
        severity=Severity.ADVISORY,
    ),
    Task(
        "Create Terraform workspace",
        terraform.create_workspace,
        skip=_no_terraform,
        deps=_PROVISION,
    ),
    Task(
        "Git push",
        vcs.git_push,
        skip=_no_github,
        deps=("Git commit", "Git remote", "Add GitHub secrets"),
    ),
    Task("Wait for CI", github.wait_for_ci, skip=_no_ci, deps=("Git push",)),
    Task(
        "Apply Terraform",
        terraform.apply,
        skip=_no_terraform,
        deps=("Create Terraform workspace", "Git push"),
    ),
    Task("Bump version", vcs.bump_version, skip=_no_release, deps=("Git push",)),
)


def build_tasks(settings: Optional[Settings] = None) -> list[Task]:
    """Return the catalogue with configured severity overrides applied."""
    if settings is None:
        return list(TASKS)
    return [
        task.with_severity(settings.severity_for(task.title, task.severity))
        for task in TASKS
    ]
