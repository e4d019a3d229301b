"""Database and role creation on the shared server."""

from __future__ import annotations

import logging
import secrets
from typing import TYPE_CHECKING

import psycopg2
from psycopg2 import sql

from .errors import service_errors

if TYPE_CHECKING:
    from .context import RunContext

logger = logging.getLogger(__name__)


def generate_password(length: int = 24) -> str:
    return secrets.token_urlsafe(length)


def create_database(ctx: RunContext) -> None:
    name = ctx.database_name
    password = generate_password()

    with service_errors("Database", psycopg2.Error):
        conn = ctx.clients.database()
        try:
            # CREATE DATABASE can't run inside a transaction block.
            conn.autocommit = True
            with conn.cursor() as cursor:
                cursor.execute(
                    sql.SQL("CREATE DATABASE {}").format(sql.Identifier(name))
                )
                cursor.execute(
                    sql.SQL("CREATE USER {} WITH PASSWORD %s").format(
                        sql.Identifier(name)
                    ),
                    [password],
                )
                cursor.execute(
                    sql.SQL("GRANT ALL PRIVILEGES ON DATABASE {} TO {}").format(
                        sql.Identifier(name), sql.Identifier(name)
                    )
                )
        finally:
            conn.close()

    ctx.secrets["database_password"] = password
    logger.info("Created database and user %s", name)
