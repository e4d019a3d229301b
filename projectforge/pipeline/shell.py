import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Mapping, Sequence

from .errors import CommandError

logger = logging.getLogger(__name__)


class CommandRunner:
    """Runs external commands, raising ``CommandError`` on non-zero exit."""

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: str | Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> str:
        logger.info("$ %s", shlex.join(args))
        result = subprocess.run(
            list(args),
            cwd=cwd or None,
            env={**os.environ, **env} if env else None,
            capture_output=True,
            text=True,
        )

        if result.returncode != 0:
            raise CommandError(args, result.returncode, result.stderr)

        if result.stdout:
            logger.debug(result.stdout.rstrip())
        return result.stdout
