"""Terraform Cloud workspace provisioning."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Optional

import httpx

from projectforge.executor.poll import classify_by, poll_until_terminal

from .errors import ServiceError

if TYPE_CHECKING:
    from .context import RunContext

logger = logging.getLogger(__name__)

APPLIED = {"applied", "planned_and_finished"}
ERRORED = {"errored", "discarded", "canceled", "force_canceled"}


class TerraformClient:
    """Terraform Cloud API v2 client.

    Docs: https://developer.hashicorp.com/terraform/cloud-docs/api-docs
    """

    BASE_URL = "https://app.terraform.io/api/v2"

    def __init__(self, token: str, *, client: Optional[httpx.Client] = None):
        self._client = client or httpx.Client(base_url=self.BASE_URL, timeout=30.0)
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/vnd.api+json",
        }

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> dict:
        try:
            response = self._client.request(
                method, path, headers=self._headers, **kwargs
            )
            response.raise_for_status()
        except httpx.TimeoutException:
            raise ServiceError("Terraform Cloud", f"{method} {path} timed out")
        except httpx.HTTPStatusError as e:
            raise ServiceError("Terraform Cloud", e) from e
        except httpx.RequestError as e:
            raise ServiceError("Terraform Cloud", f"network error: {e}") from e
        return response.json() if response.content else {}

    def oauth_token_id(self, organization: str) -> Optional[str]:
        clients = self._request(
            "GET", f"/organizations/{organization}/oauth-clients"
        ).get("data", [])
        for oauth_client in clients:
            tokens = (
                oauth_client.get("relationships", {})
                .get("oauth-tokens", {})
                .get("data", [])
            )
            if tokens:
                return tokens[0]["id"]
        return None

    def create_workspace(
        self,
        organization: str,
        name: str,
        *,
        repository: Optional[str] = None,
        oauth_token_id: Optional[str] = None,
    ) -> str:
        attributes: dict[str, Any] = {"name": name, "auto-apply": True}
        if repository and oauth_token_id:
            attributes["vcs-repo"] = {
                "identifier": repository,
                "oauth-token-id": oauth_token_id,
                "branch": "main",
            }
        body = {"data": {"type": "workspaces", "attributes": attributes}}
        created = self._request(
            "POST", f"/organizations/{organization}/workspaces", json=body
        )
        return created["data"]["id"]

    def workspace_id(self, organization: str, name: str) -> str:
        found = self._request(
            "GET", f"/organizations/{organization}/workspaces/{name}"
        )
        return found["data"]["id"]

    def create_variable(
        self, workspace_id: str, key: str, value: str, *, sensitive: bool = True
    ) -> None:
        body = {
            "data": {
                "type": "vars",
                "attributes": {
                    "key": key,
                    "value": value,
                    "category": "terraform",
                    "sensitive": sensitive,
                },
            }
        }
        self._request("POST", f"/workspaces/{workspace_id}/vars", json=body)

    def create_run(self, workspace_id: str, message: str) -> str:
        body = {
            "data": {
                "type": "runs",
                "attributes": {"message": message},
                "relationships": {
                    "workspace": {"data": {"type": "workspaces", "id": workspace_id}}
                },
            }
        }
        return self._request("POST", "/runs", json=body)["data"]["id"]

    def run_status(self, run_id: str) -> str:
        return self._request("GET", f"/runs/{run_id}")["data"]["attributes"]["status"]


def workspace_variables(ctx: RunContext) -> dict[str, str]:
    wanted = {
        "aws_access_token": ctx.secrets.get("aws_access_key_id"),
        "aws_secret_token": ctx.secrets.get("aws_secret_access_key"),
        "database_password": ctx.secrets.get("database_password"),
        "github_token": ctx.credentials.github_token,
    }
    return {key: value for key, value in wanted.items() if value}


def create_workspace(ctx: RunContext) -> None:
    organization = ctx.require_terraform_organization()
    terraform = ctx.clients.terraform()

    repository = None
    oauth_token_id = None
    if ctx.github_owner:
        repository = f"{ctx.github_owner}/{ctx.repo_name}"
        oauth_token_id = terraform.oauth_token_id(organization)
        if oauth_token_id is None:
            logger.warning(
                "No VCS connection in %s, workspace won't track %s",
                organization,
                repository,
            )

    workspace_id = terraform.create_workspace(
        organization,
        ctx.slug,
        repository=repository,
        oauth_token_id=oauth_token_id,
    )
    ctx.secrets["terraform_workspace_id"] = workspace_id
    logger.info("Created workspace %s/%s", organization, ctx.slug)

    for key, value in workspace_variables(ctx).items():
        terraform.create_variable(workspace_id, key, value)


async def apply(ctx: RunContext) -> None:
    organization = ctx.require_terraform_organization()
    terraform = ctx.clients.terraform(user=True)

    workspace_id = ctx.secrets.get("terraform_workspace_id")
    if workspace_id is None:
        workspace_id = terraform.workspace_id(organization, ctx.slug)

    run_id = terraform.create_run(workspace_id, "Initial apply from projectforge")
    status = await poll_until_terminal(
        lambda: asyncio.to_thread(terraform.run_status, run_id),
        classify_by(APPLIED, ERRORED),
        delay=ctx.settings.poll_delay,
        timeout=ctx.settings.poll_timeout,
    )
    logger.info("Terraform run %s finished: %s", run_id, status)
