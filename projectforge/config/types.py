from dataclasses import dataclass, field

from projectforge.executor.types import Severity


@dataclass
class Settings:
    github_owner: str | None = None
    aws_region: str = "us-east-1"
    aws_profile: str | None = None
    terraform_organization: str | None = None
    database_host: str = "localhost"
    database_port: int = 5432
    author: str | None = None
    license: str = "MIT"
    poll_delay: float = 30.0
    poll_timeout: float | None = 3600.0
    severity: dict[str, Severity] = field(default_factory=dict)

    def severity_for(self, title: str, default: Severity) -> Severity:
        return self.severity.get(title, default)


@dataclass
class Credentials:
    npm_token: str | None = None
    github_token: str | None = None
    github_owner: str | None = None
    aws_profile: str | None = None
    terraform_organization_token: str | None = None
    terraform_user_token: str | None = None
    contact_detail: str | None = None
    database_host: str | None = None
    database_master_user: str | None = None
    database_master_password: str | None = None
    local_database_user: str | None = None
    local_database_password: str | None = None

    @property
    def has_terraform(self) -> bool:
        return bool(self.terraform_organization_token and self.terraform_user_token)

    @property
    def has_database_master(self) -> bool:
        return bool(self.database_master_user and self.database_master_password)


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
