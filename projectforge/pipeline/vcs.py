"""Git and npm command tasks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from . import templates

if TYPE_CHECKING:
    from .context import RunContext

COMMIT_MESSAGE = "Initial commit from projectforge"


def install_dependencies(ctx: RunContext) -> None:
    if ctx.options.app:
        ctx.run("npm", "install")
        return

    dev = list(templates.LIBRARY_DEV_DEPENDENCIES)
    if ctx.options.react:
        dev += templates.REACT_DEV_DEPENDENCIES
    ctx.run("npm", "install", "--save-dev", *dev)
    if ctx.options.react:
        ctx.run("npm", "install", "--save", *templates.REACT_DEPENDENCIES)


def git_init(ctx: RunContext) -> None:
    ctx.run("git", "init", "--initial-branch=main")


def git_add(ctx: RunContext) -> None:
    ctx.run("git", "add", "-A")


def git_commit(ctx: RunContext) -> None:
    ctx.run("git", "commit", "-m", COMMIT_MESSAGE)


def git_remote(ctx: RunContext) -> None:
    owner = ctx.require_github_owner()
    ctx.run(
        "git", "remote", "add", "origin", f"https://github.com/{owner}/{ctx.repo_name}.git"
    )


def git_push(ctx: RunContext) -> None:
    ctx.run("git", "push", "-u", "origin", "main")


def bump_version(ctx: RunContext) -> None:
    ctx.run("npm", "version", "minor")
