"""Route 53 domain registration and IAM provisioning."""

from __future__ import annotations

import asyncio
import configparser
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from projectforge.executor.poll import classify_by, poll_until_terminal

from .errors import ValidationError, service_errors

if TYPE_CHECKING:
    from .context import RunContext

logger = logging.getLogger(__name__)

CONTACT_FIELDS = (
    "FirstName",
    "LastName",
    "ContactType",
    "AddressLine1",
    "City",
    "CountryCode",
    "ZipCode",
    "PhoneNumber",
    "Email",
)

_operation_status = classify_by({"SUCCESSFUL"}, {"ERROR", "FAILED"})


def parse_contact(raw: str | None) -> dict[str, Any]:
    if not raw:
        raise ValidationError("CONTACT_DETAIL is required to purchase a domain")

    try:
        contact = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"CONTACT_DETAIL is not valid JSON: {exc}") from exc

    if not isinstance(contact, dict):
        raise ValidationError("CONTACT_DETAIL must be a JSON object")

    missing = [f"missing {name}" for name in CONTACT_FIELDS if not contact.get(name)]
    if missing:
        raise ValidationError("CONTACT_DETAIL is incomplete:", missing)

    return contact


def owns_domain(client: Any, domain: str) -> bool:
    for page in client.get_paginator("list_domains").paginate():
        for summary in page.get("Domains", []):
            if summary["DomainName"] == domain:
                return True
    return False


async def ensure_domain(ctx: RunContext) -> None:
    domain = ctx.name
    client = ctx.clients.aws("route53domains")

    with service_errors("Route 53", ClientError, BotoCoreError):
        if await asyncio.to_thread(owns_domain, client, domain):
            logger.info("Domain %s is already registered to this account", domain)
            return

        checked = await asyncio.to_thread(
            client.check_domain_availability, DomainName=domain
        )
        availability = checked["Availability"]

    if availability != "AVAILABLE":
        raise ValidationError(f"Domain {domain} can't be purchased: {availability}")

    contact = parse_contact(ctx.credentials.contact_detail)

    with service_errors("Route 53", ClientError, BotoCoreError):
        registration = await asyncio.to_thread(
            client.register_domain,
            DomainName=domain,
            DurationInYears=1,
            AutoRenew=True,
            AdminContact=contact,
            RegistrantContact=contact,
            TechContact=contact,
            PrivacyProtectAdminContact=True,
            PrivacyProtectRegistrantContact=True,
            PrivacyProtectTechContact=True,
        )
        operation_id = registration["OperationId"]
        logger.info("Registering %s (operation %s)", domain, operation_id)

        await poll_until_terminal(
            lambda: asyncio.to_thread(
                client.get_operation_detail, OperationId=operation_id
            ),
            lambda detail: _operation_status(detail["Status"]),
            delay=ctx.settings.poll_delay,
            timeout=ctx.settings.poll_timeout,
        )

    logger.info("Domain %s registered", domain)


def append_credentials(path: Path, profile: str, key_id: str, secret: str) -> None:
    parser = configparser.ConfigParser()
    if path.exists():
        parser.read(path, encoding="utf-8")
    parser[profile] = {
        "aws_access_key_id": key_id,
        "aws_secret_access_key": secret,
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        parser.write(fh)


def create_iam_user(ctx: RunContext) -> None:
    iam = ctx.clients.aws("iam")
    user_name = ctx.slug

    with service_errors("IAM", ClientError, BotoCoreError):
        try:
            iam.create_user(UserName=user_name)
            logger.info("Created IAM user %s", user_name)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") != "EntityAlreadyExists":
                raise
            logger.warning("IAM user %s already exists", user_name)

        key = iam.create_access_key(UserName=user_name)["AccessKey"]

    ctx.secrets["aws_access_key_id"] = key["AccessKeyId"]
    ctx.secrets["aws_secret_access_key"] = key["SecretAccessKey"]

    append_credentials(
        ctx.aws_credentials_path,
        user_name,
        key["AccessKeyId"],
        key["SecretAccessKey"],
    )
    logger.info("Stored access key for %s in %s", user_name, ctx.aws_credentials_path)
