"""Credentials read from the process environment."""

import os
from typing import Mapping

from dotenv import load_dotenv

from .types import Credentials

ENV_VARS = {
    "npm_token": "NPM_TOKEN",
    "github_token": "GITHUB_TOKEN",
    "github_owner": "GITHUB_OWNER",
    "aws_profile": "AWS_PROFILE",
    "terraform_organization_token": "TERRAFORM_ORGANIZATION_TOKEN",
    "terraform_user_token": "TERRAFORM_USER_TOKEN",
    "contact_detail": "CONTACT_DETAIL",
    "database_host": "DATABASE_HOST",
    "database_master_user": "DATABASE_MASTER_USER",
    "database_master_password": "DATABASE_MASTER_PASSWORD",
    "local_database_user": "LOCAL_DATABASE_USER",
    "local_database_password": "LOCAL_DATABASE_PASSWORD",
}


def load_credentials(
    environ: Mapping[str, str] | None = None, *, dotenv: bool = True
) -> Credentials:
    """Collect credentials, treating blank values as unset.

    When reading the real environment a ``.env`` file is loaded first; it
    never overrides variables that are already set.
    """
    if environ is None:
        if dotenv:
            load_dotenv()
        environ = os.environ

    values = {}
    for attr, var in ENV_VARS.items():
        value = (environ.get(var) or "").strip()
        values[attr] = value or None

    return Credentials(**values)
