from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from botocore.exceptions import ClientError

from projectforge.config.types import Credentials, Settings
from projectforge.pipeline.context import RunContext
from projectforge.pipeline.errors import CommandError


class FakeRunner:
    """Records commands instead of running them."""

    def __init__(
        self,
        fail_on: tuple[str, ...] | None = None,
        outputs: dict[tuple[str, ...], str] | None = None,
    ) -> None:
        self.commands: list[tuple[tuple[str, ...], Path | None]] = []
        self.fail_on = fail_on
        self.outputs = outputs or {}

    def run(self, args, *, cwd=None, env=None) -> str:
        args = tuple(args)
        self.commands.append((args, Path(cwd) if cwd else None))
        if self.fail_on is not None and args[: len(self.fail_on)] == self.fail_on:
            raise CommandError(args, 1, "simulated failure")
        return self.outputs.get(args, "")

    @property
    def argv(self) -> list[tuple[str, ...]]:
        return [args for args, _ in self.commands]


class FakePaginator:
    def __init__(self, pages: list[dict]) -> None:
        self.pages = pages

    def paginate(self, **kwargs: Any):
        return iter(self.pages)


class FakeRoute53Domains:
    def __init__(
        self,
        owned: list[str] | None = None,
        availability: str = "AVAILABLE",
        statuses: list[str] | None = None,
    ) -> None:
        self.owned = owned or []
        self.availability = availability
        self.statuses = list(statuses or ["SUCCESSFUL"])
        self.registered: list[dict] = []
        self.operation_checks = 0

    def get_paginator(self, name: str) -> FakePaginator:
        assert name == "list_domains"
        return FakePaginator([{"Domains": [{"DomainName": d} for d in self.owned]}])

    def check_domain_availability(self, DomainName: str) -> dict:
        return {"Availability": self.availability}

    def register_domain(self, **kwargs: Any) -> dict:
        self.registered.append(kwargs)
        return {"OperationId": "op-1"}

    def get_operation_detail(self, OperationId: str) -> dict:
        self.operation_checks += 1
        return {"OperationId": OperationId, "Status": self.statuses.pop(0)}


class FakeIAM:
    def __init__(self, existing: bool = False) -> None:
        self.existing = existing
        self.users: list[str] = []

    def create_user(self, UserName: str) -> dict:
        if self.existing:
            raise ClientError(
                {"Error": {"Code": "EntityAlreadyExists", "Message": "exists"}},
                "CreateUser",
            )
        self.users.append(UserName)
        return {"User": {"UserName": UserName}}

    def create_access_key(self, UserName: str) -> dict:
        return {
            "AccessKey": {
                "UserName": UserName,
                "AccessKeyId": "AKIAFAKE",
                "SecretAccessKey": "fake-secret",
            }
        }


class FakeCursor:
    def __init__(self, log: list) -> None:
        self.log = log

    def __enter__(self) -> FakeCursor:
        return self

    def __exit__(self, *exc: object) -> None:
        return None

    def execute(self, query: Any, params: Any = None) -> None:
        self.log.append((query, params))


class FakeConnection:
    def __init__(self) -> None:
        self.autocommit = False
        self.closed = False
        self.executed: list = []

    def cursor(self) -> FakeCursor:
        return FakeCursor(self.executed)

    def close(self) -> None:
        self.closed = True


class FakeClients:
    """Stands in for ``Clients``; unset collaborators fail loudly."""

    def __init__(
        self,
        *,
        aws: bool = False,
        route53domains: Any = None,
        iam: Any = None,
        github: Any = None,
        terraform: Any = None,
        database: Any = None,
    ) -> None:
        self._has_aws = aws
        self.services = {"route53domains": route53domains, "iam": iam}
        self._github = github
        self._terraform = terraform
        self._database = database

    def has_aws(self) -> bool:
        return self._has_aws

    def aws(self, service: str) -> Any:
        client = self.services.get(service)
        if client is None:
            raise AssertionError(f"unexpected AWS client: {service}")
        return client

    def github(self) -> Any:
        if self._github is None:
            raise AssertionError("unexpected GitHub client")
        return self._github

    def terraform(self, *, user: bool = False) -> Any:
        if self._terraform is None:
            raise AssertionError("unexpected Terraform client")
        return self._terraform

    def database(self) -> Any:
        if self._database is None:
            raise AssertionError("unexpected database connection")
        return self._database


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_ctx(tmp_path: Path, runner: FakeRunner):
    def make(
        name: str = "my-lib",
        *,
        react: bool = False,
        app: bool = False,
        settings: Settings | None = None,
        credentials: Credentials | None = None,
        clients: Any = None,
    ) -> RunContext:
        ctx = RunContext.create(
            name,
            react=react,
            app=app,
            base_dir=tmp_path,
            settings=settings or Settings(poll_delay=0.0, poll_timeout=None),
            credentials=credentials,
            runner=runner,
            clients=clients or FakeClients(),
        )
        ctx.aws_credentials_path = tmp_path / ".aws" / "credentials"
        return ctx

    return make
