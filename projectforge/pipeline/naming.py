"""Package and domain name rules."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

MAX_LENGTH = 214

BLACKLIST = {"node_modules", "favicon.ico"}

# Node.js builtin modules; npm refuses new packages with these names.
CORE_MODULES = {
    "assert", "async_hooks", "buffer", "child_process", "cluster", "console",
    "constants", "crypto", "dgram", "diagnostics_channel", "dns", "domain",
    "events", "fs", "http", "http2", "https", "inspector", "module", "net",
    "os", "path", "perf_hooks", "process", "punycode", "querystring",
    "readline", "repl", "stream", "string_decoder", "sys", "timers", "tls",
    "trace_events", "tty", "url", "util", "v8", "vm", "wasi",
    "worker_threads", "zlib",
}

_URL_SAFE = re.compile(r"^[A-Za-z0-9\-_.!~*'()]+$")
_SCOPED = re.compile(r"^(?:@([^/]+?)/)?([^/]+?)$")
_SPECIAL = re.compile(r"[~'!()*]")
_NON_IDENTIFIER = re.compile(r"[^a-z0-9]+")


@dataclass
class NameCheck:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid_for_new_packages(self) -> bool:
        return not self.errors and not self.warnings


def check_package_name(name: str) -> NameCheck:
    check = NameCheck()

    if len(name) == 0:
        check.errors.append("name length must be greater than zero")
        return check

    if name.startswith("."):
        check.errors.append("name cannot start with a period")
    if name.startswith("_"):
        check.errors.append("name cannot start with an underscore")
    if name.strip() != name:
        check.errors.append("name cannot contain leading or trailing spaces")
    if name.lower() in BLACKLIST:
        check.errors.append(f"{name} is a blacklisted name")

    if name.lower() in CORE_MODULES:
        check.warnings.append(f"{name} is a core module name")
    if len(name) > MAX_LENGTH:
        check.warnings.append(
            f"name can no longer contain more than {MAX_LENGTH} characters"
        )
    if name.lower() != name:
        check.warnings.append("name can no longer contain capital letters")
    if _SPECIAL.search(name.split("/")[-1]):
        check.warnings.append(
            "name can no longer contain special characters (\"~'!()*\")"
        )

    if not _URL_SAFE.match(name):
        scoped = _SCOPED.match(name)
        if not (
            scoped
            and scoped.group(1)
            and _URL_SAFE.match(scoped.group(1))
            and _URL_SAFE.match(scoped.group(2))
        ):
            check.errors.append("name can only contain URL-friendly characters")

    return check


def is_domain_name(name: str) -> bool:
    return "." in name


def slugify(name: str) -> str:
    """Lowercase, dash-separated form usable for repos, users and workspaces."""
    return _NON_IDENTIFIER.sub("-", name.lower()).strip("-")


def identifier(name: str) -> str:
    """Underscore form usable as a SQL database or role name."""
    return _NON_IDENTIFIER.sub("_", name.lower()).strip("_")


def display_name(name: str) -> str:
    base = name.split("/")[-1].split(".")[0]
    return " ".join(part.capitalize() for part in re.split(r"[-_]+", base) if part)
