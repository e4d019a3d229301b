"""GitHub REST client and the tasks that use it."""

from __future__ import annotations

import asyncio
import logging
from base64 import b64encode
from typing import TYPE_CHECKING, Any, Optional

import httpx
from nacl import encoding, public

from projectforge.executor.poll import PollOutcome, poll_until_terminal

from .errors import ServiceError

if TYPE_CHECKING:
    from .context import RunContext

logger = logging.getLogger(__name__)


class GitHubClient:
    """Minimal GitHub API client.

    Docs: https://docs.github.com/en/rest
    """

    BASE_URL = "https://api.github.com"

    def __init__(self, token: str, *, client: Optional[httpx.Client] = None):
        self._client = client or httpx.Client(base_url=self.BASE_URL, timeout=30.0)
        self._headers = {
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github+json",
        }

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(
                method, path, headers=self._headers, **kwargs
            )
            response.raise_for_status()
        except httpx.TimeoutException:
            raise ServiceError("GitHub", f"{method} {path} timed out")
        except httpx.HTTPStatusError as e:
            raise ServiceError("GitHub", e) from e
        except httpx.RequestError as e:
            raise ServiceError("GitHub", f"network error: {e}") from e
        return response

    def create_repository(self, name: str, *, private: bool = False) -> Optional[str]:
        """Create a repository for the authenticated user.

        Returns the owner login, or None when the repository already exists.
        """
        try:
            response = self._client.post(
                "/user/repos",
                headers=self._headers,
                json={"name": name, "private": private},
            )
        except httpx.RequestError as e:
            raise ServiceError("GitHub", f"network error: {e}") from e

        # 422 is how GitHub reports "name already exists on this account".
        if response.status_code == 422:
            return None
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ServiceError("GitHub", e) from e
        return response.json()["owner"]["login"]

    def authenticated_login(self) -> str:
        return self._request("GET", "/user").json()["login"]

    def public_key(self, owner: str, repo: str) -> dict:
        return self._request(
            "GET", f"/repos/{owner}/{repo}/actions/secrets/public-key"
        ).json()

    def put_secret(self, owner: str, repo: str, name: str, value: str) -> None:
        key = self.public_key(owner, repo)
        self._request(
            "PUT",
            f"/repos/{owner}/{repo}/actions/secrets/{name}",
            json={
                "encrypted_value": encrypt_secret(key["key"], value),
                "key_id": key["key_id"],
            },
        )

    def latest_workflow_run(
        self, owner: str, repo: str, *, head_sha: Optional[str] = None
    ) -> Optional[dict]:
        params: dict[str, Any] = {"per_page": 1}
        if head_sha:
            params["head_sha"] = head_sha
        runs = self._request(
            "GET", f"/repos/{owner}/{repo}/actions/runs", params=params
        ).json()
        workflow_runs = runs.get("workflow_runs") or []
        return workflow_runs[0] if workflow_runs else None


def encrypt_secret(public_key_b64: str, value: str) -> str:
    """Seal ``value`` for the repository public key, as Actions expects."""
    key = public.PublicKey(public_key_b64.encode("utf-8"), encoder=encoding.Base64Encoder)
    sealed = public.SealedBox(key).encrypt(value.encode("utf-8"))
    return b64encode(sealed).decode("utf-8")


def classify_workflow_run(run: Optional[dict]) -> PollOutcome:
    if not run or run.get("status") != "completed":
        return PollOutcome.PENDING
    if run.get("conclusion") == "success":
        return PollOutcome.SUCCEEDED
    return PollOutcome.FAILED


def resolve_owner(ctx: RunContext) -> None:
    ctx.github_owner = ctx.clients.github().authenticated_login()
    logger.info("Repositories will be created under %s", ctx.github_owner)


def create_repository(ctx: RunContext) -> None:
    github = ctx.clients.github()
    owner = github.create_repository(ctx.repo_name)
    if owner is None:
        logger.warning("Repository %s already exists, reusing it", ctx.repo_name)
        if ctx.github_owner is None:
            ctx.github_owner = github.authenticated_login()
        return
    ctx.github_owner = owner
    logger.info("Created repository %s/%s", owner, ctx.repo_name)


def repository_secrets(ctx: RunContext) -> dict[str, str]:
    if ctx.options.app:
        wanted = {
            "DEPLOY_AWS_ACCESS_KEY": ctx.secrets.get("aws_access_key_id"),
            "DEPLOY_AWS_ACCESS_SECRET": ctx.secrets.get("aws_secret_access_key"),
            "DATABASE_PASSWORD": ctx.secrets.get("database_password"),
            "TERRAFORM_USER_TOKEN": ctx.credentials.terraform_user_token,
        }
    else:
        wanted = {"NPM_TOKEN": ctx.credentials.npm_token}
    return {name: value for name, value in wanted.items() if value}


def add_secrets(ctx: RunContext) -> None:
    values = repository_secrets(ctx)
    if not values:
        logger.warning("No secrets available for %s, skipping upload", ctx.repo_name)
        return

    github = ctx.clients.github()
    owner = ctx.require_github_owner()
    for name, value in values.items():
        logger.info("Adding %s secret", name)
        github.put_secret(owner, ctx.repo_name, name, value)


async def wait_for_ci(ctx: RunContext) -> None:
    github = ctx.clients.github()
    owner = ctx.require_github_owner()
    # A reused repository has runs from earlier pushes.
    head_sha = ctx.run("git", "rev-parse", "HEAD").strip()
    run = await poll_until_terminal(
        lambda: asyncio.to_thread(
            github.latest_workflow_run, owner, ctx.repo_name, head_sha=head_sha
        ),
        classify_workflow_run,
        delay=ctx.settings.poll_delay,
        timeout=ctx.settings.poll_timeout,
    )
    logger.info("Workflow run finished: %s", run.get("html_url", run.get("id")))
