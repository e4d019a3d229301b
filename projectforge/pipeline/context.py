from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import boto3
import psycopg2

from projectforge.config.types import Credentials, Settings

from .errors import ValidationError
from .github import GitHubClient
from .naming import identifier, is_domain_name, slugify
from .shell import CommandRunner
from .terraform import TerraformClient

# Route 53 Domains only exists in us-east-1.
DOMAINS_REGION = "us-east-1"


@dataclass
class Options:
    react: bool = False
    app: bool = False


class Clients:
    """Builds SDK clients from settings and credentials, once per run."""

    def __init__(self, settings: Settings, credentials: Credentials):
        self.settings = settings
        self.credentials = credentials
        self._cache: dict[str, Any] = {}

    def _session(self) -> boto3.session.Session:
        if "session" not in self._cache:
            self._cache["session"] = boto3.session.Session(
                profile_name=self.credentials.aws_profile or self.settings.aws_profile,
                region_name=self.settings.aws_region,
            )
        return self._cache["session"]

    def has_aws(self) -> bool:
        return self._session().get_credentials() is not None

    def aws(self, service: str) -> Any:
        key = f"aws:{service}"
        if key not in self._cache:
            region = DOMAINS_REGION if service == "route53domains" else None
            self._cache[key] = self._session().client(service, region_name=region)
        return self._cache[key]

    def github(self) -> GitHubClient:
        if "github" not in self._cache:
            if not self.credentials.github_token:
                raise ValidationError("GITHUB_TOKEN is not set")
            self._cache["github"] = GitHubClient(self.credentials.github_token)
        return self._cache["github"]

    def terraform(self, *, user: bool = False) -> TerraformClient:
        # Organization tokens can manage workspaces but can't queue runs.
        key = "terraform:user" if user else "terraform"
        token = (
            self.credentials.terraform_user_token
            if user
            else self.credentials.terraform_organization_token
        )
        if key not in self._cache:
            if not token:
                raise ValidationError("Terraform Cloud token is not set")
            self._cache[key] = TerraformClient(token)
        return self._cache[key]

    def database(self) -> Any:
        return psycopg2.connect(
            host=self.credentials.database_host or self.settings.database_host,
            port=self.settings.database_port,
            user=self.credentials.database_master_user,
            password=self.credentials.database_master_password,
            dbname="postgres",
        )

    def close(self) -> None:
        for key in ("github", "terraform", "terraform:user"):
            client = self._cache.pop(key, None)
            if client is not None:
                client.close()


@dataclass
class RunContext:
    """State shared by the tasks of one run.

    Tasks hand data to later tasks through ``secrets`` and ``github_owner``
    rather than through the process environment or working directory.
    """

    name: str
    options: Options
    root: Path
    settings: Settings
    credentials: Credentials
    runner: CommandRunner
    clients: Any
    github_owner: Optional[str] = None
    aws_credentials_path: Path = field(
        default_factory=lambda: Path.home() / ".aws" / "credentials"
    )
    secrets: dict[str, str] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        name: str,
        *,
        react: bool = False,
        app: bool = False,
        base_dir: str | Path | None = None,
        settings: Optional[Settings] = None,
        credentials: Optional[Credentials] = None,
        runner: Optional[CommandRunner] = None,
        clients: Any = None,
    ) -> RunContext:
        settings = settings or Settings()
        credentials = credentials or Credentials()
        base = Path(base_dir) if base_dir is not None else Path.cwd()
        return cls(
            name=name,
            options=Options(react=react, app=app or is_domain_name(name)),
            root=(base / name.split("/")[-1]).resolve(),
            settings=settings,
            credentials=credentials,
            runner=runner or CommandRunner(),
            clients=clients or Clients(settings, credentials),
            github_owner=credentials.github_owner or settings.github_owner,
        )

    @property
    def repo_name(self) -> str:
        return self.name.split("/")[-1]

    @property
    def slug(self) -> str:
        return slugify(self.repo_name)

    @property
    def database_name(self) -> str:
        return identifier(self.repo_name)

    @property
    def terraform_organization(self) -> Optional[str]:
        return self.settings.terraform_organization

    def run(self, *args: str) -> str:
        return self.runner.run(args, cwd=self.root)

    def require_github_owner(self) -> str:
        if not self.github_owner:
            raise ValidationError(
                "GitHub owner unknown: set GITHUB_OWNER or run 'Create GitHub repository'"
            )
        return self.github_owner

    def require_terraform_organization(self) -> str:
        if not self.terraform_organization:
            raise ValidationError("terraform_organization is not configured")
        return self.terraform_organization
