from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Mapping

from projectforge.config import ConfigError, load_credentials, load_settings
from projectforge.executor import Executor, RunResult
from projectforge.graph import GraphError, TaskGraph
from projectforge.pipeline import Clients, CommandRunner, RunContext, build_tasks

from .args import build_parser
from .report import ConsoleReporter

LOG_FORMAT = "%(levelname)-8s %(name)s:%(lineno)d - %(message)s"

logger = logging.getLogger(__name__)


def run_cli(
    argv: list[str] | None = None,
    *,
    runner: CommandRunner | None = None,
    clients: Any = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.INFO,
            format=LOG_FORMAT,
        )

        if args.list:
            return cmd_list(args)
        if args.graph:
            return cmd_graph(args)
        if not args.name:
            parser.error("the name argument is required")
        return cmd_run(args, runner=runner, clients=clients, environ=environ)

    except (ConfigError, GraphError) as exc:
        print(str(exc), file=sys.stderr)
        return 2

    except KeyboardInterrupt:
        return 130


def main() -> None:
    sys.exit(run_cli())


def cmd_run(
    args: argparse.Namespace,
    *,
    runner: CommandRunner | None = None,
    clients: Any = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    settings = load_settings(args.config)
    credentials = load_credentials(environ)
    tasks = build_tasks(settings)
    graph = TaskGraph.from_tasks(tasks)

    owned = None
    if clients is None:
        owned = clients = Clients(settings, credentials)

    ctx = RunContext.create(
        args.name,
        react=args.react,
        app=args.app,
        settings=settings,
        credentials=credentials,
        runner=runner,
        clients=clients,
    )
    mode = "application" if ctx.options.app else "library"
    print(f"Creating {mode} {ctx.name} in {ctx.root}")

    reporter = ConsoleReporter()
    executor = Executor(tasks, graph, notify=reporter)
    try:
        rr = _run_with(args, executor, ctx)
    finally:
        if owned is not None:
            owned.close()

    reporter.summary(rr)
    if not rr.ok:
        print(f"Run failed at '{rr.failed[0]}': {rr.message}", file=sys.stderr)
        return 1
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    graph = TaskGraph.from_tasks(build_tasks(load_settings(args.config)))
    for title in graph.topo_order():
        print(title)
    return 0


def cmd_graph(args: argparse.Namespace) -> int:
    graph = TaskGraph.from_tasks(build_tasks(load_settings(args.config)))
    for title in graph.topo_order():
        deps = ", ".join(graph.deps_of(title))
        print(f"{title}: {deps}".rstrip())
    return 0


def _run_with(args: argparse.Namespace, executor: Executor, ctx: RunContext) -> RunResult:
    if args.task:
        logger.info("Running single task '%s'", args.task)
        return executor.run_single(args.task, ctx)
    if args.through:
        return executor.run_through(args.through, ctx)
    return executor.run_all(ctx)
