"""Tasks that create the project directory and write its files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from . import templates
from .errors import ValidationError
from .naming import check_package_name, display_name

if TYPE_CHECKING:
    from .context import RunContext

logger = logging.getLogger(__name__)


def write_file(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.debug("wrote %s", path)
    return path


def validate_package_name(ctx: RunContext) -> None:
    check = check_package_name(ctx.name)
    if check.valid_for_new_packages:
        return
    raise ValidationError(
        f'Could not create a project called "{ctx.name}" because of npm naming restrictions:',
        check.errors + check.warnings,
    )


def create_directory(ctx: RunContext) -> None:
    if ctx.root.exists():
        raise FileExistsError(f"{ctx.root} already exists")
    ctx.root.mkdir(parents=True)
    logger.info("Created %s", ctx.root)


def write_package_json(ctx: RunContext) -> None:
    if ctx.options.app:
        manifest = templates.app_package_json(
            ctx.name,
            owner=ctx.github_owner,
            author=ctx.settings.author,
            license=ctx.settings.license,
        )
    else:
        manifest = templates.library_package_json(
            ctx.name,
            react=ctx.options.react,
            author=ctx.settings.author,
            license=ctx.settings.license,
        )
    write_file(ctx.root, "package.json", templates.to_json(manifest))


def write_readme(ctx: RunContext) -> None:
    write_file(ctx.root, "README.md", templates.render(templates.README, name=ctx.name))


def write_license(ctx: RunContext) -> None:
    holder = ctx.settings.author or ctx.github_owner or ctx.name
    write_file(ctx.root, "LICENSE", templates.license_text(ctx.settings.license, holder))


def write_linter_config(ctx: RunContext) -> None:
    if ctx.options.app:
        write_file(ctx.root, ".eslintrc.json", templates.to_json(templates.ESLINT))
    else:
        write_file(
            ctx.root, "tslint.json", templates.to_json(templates.tslint(ctx.options.react))
        )
    write_file(ctx.root, ".prettierrc", templates.to_json(templates.PRETTIER))


def write_source_scaffolding(ctx: RunContext) -> None:
    write_file(ctx.root, ".gitignore", templates.GITIGNORE)

    if ctx.options.app:
        title = display_name(ctx.name)
        write_file(
            ctx.root, "app/root.tsx", templates.render(templates.APP_ROOT, display_name=title)
        )
        for route, component, page_title in (
            ("privacy-policy", "PrivacyPolicy", "Privacy Policy"),
            ("terms-of-use", "TermsOfUse", "Terms of Use"),
        ):
            write_file(
                ctx.root,
                f"app/routes/{route}.tsx",
                templates.render(
                    templates.APP_LEGAL_PAGE,
                    component=component,
                    title=page_title,
                    display_name=title,
                ),
            )
        return

    write_file(ctx.root, "tsconfig.json", templates.to_json(templates.TSCONFIG))
    write_file(ctx.root, "jestconfig.json", templates.to_json(templates.JESTCONFIG))
    write_file(
        ctx.root, "src/index.ts", templates.render(templates.LIBRARY_INDEX, name=ctx.name)
    )
    write_file(
        ctx.root,
        "tests/index.test.ts",
        templates.render(templates.LIBRARY_TEST, name=ctx.name),
    )


def write_workflows(ctx: RunContext) -> None:
    if not ctx.options.app:
        write_file(
            ctx.root,
            ".github/workflows/main.yaml",
            templates.render(templates.LIBRARY_WORKFLOW),
        )
        return

    values = dict(
        domain=ctx.name,
        region=ctx.settings.aws_region,
        database=ctx.database_name,
        database_host=ctx.credentials.database_host or ctx.settings.database_host,
        database_port=ctx.settings.database_port,
    )
    write_file(
        ctx.root,
        ".github/workflows/main.yaml",
        templates.render(templates.APP_WORKFLOW, **values),
    )
    write_file(
        ctx.root,
        ".github/workflows/migrations.yaml",
        templates.render(templates.MIGRATIONS_WORKFLOW, **values),
    )


def write_terraform_config(ctx: RunContext) -> None:
    write_file(
        ctx.root,
        "main.tf",
        templates.render(
            templates.MAIN_TF,
            organization=ctx.terraform_organization or "",
            workspace=ctx.slug,
            region=ctx.settings.aws_region,
            owner=ctx.github_owner or "",
            domain=ctx.name,
        ),
    )


def write_env_file(ctx: RunContext) -> None:
    write_file(
        ctx.root,
        ".env",
        templates.render(
            templates.ENV_FILE,
            user=ctx.credentials.local_database_user or "postgres",
            password=ctx.credentials.local_database_password or "",
            database=ctx.database_name,
            port=ctx.settings.database_port,
        ),
    )
