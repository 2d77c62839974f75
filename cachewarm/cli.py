"""CLI entrypoint for cachewarm."""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path

from .config import ConfigError, WarmConfig, load_config
from .logging import configure_logging
from .pipeline import Pipeline
from .process import FailurePolicy, ProcessFailedError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cachewarm",
        description=(
            "Clone a source repository, write an import manifest for its files "
            "and pre-fetch every dependency into the local cache."
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .cachewarm.yml file or its directory (defaults to the current directory).",
    )
    parser.add_argument("--repo-url", help="Repository to clone.")
    parser.add_argument("--repo-dir", help="Directory to clone into.")
    parser.add_argument(
        "--glob",
        dest="files_glob",
        help="Pattern selecting files inside the clone, relative to its root.",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="PREFIX",
        help="Path prefix to skip; repeat to give several (replaces the configured list).",
    )
    parser.add_argument("--deps-file", help="Where to write the import manifest.")
    parser.add_argument("--deps-url", help="Base URL prepended to every import.")
    parser.add_argument("--cache-tool", help="Executable used to warm the cache.")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for each external command before aborting.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Stop when git or the cache tool exits with a non-zero status.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Clone and write the manifest without running the cache tool.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    return parser


def _build_config(args: argparse.Namespace) -> WarmConfig:
    config = load_config(args.config if args.config is not None else Path.cwd())
    return config.with_overrides(
        repo_url=args.repo_url,
        repo_dir=args.repo_dir,
        files_glob=args.files_glob,
        exclude=args.exclude,
        deps_file=args.deps_file,
        deps_url=args.deps_url,
        cache_tool=args.cache_tool,
        timeout=args.timeout,
        failure_policy=FailurePolicy.RAISE if args.strict else None,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for cachewarm."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = _build_config(args)
    except ConfigError as exc:
        parser.exit(1, f"cachewarm: {exc}\n")

    try:
        report = Pipeline(config).run(dry_run=bool(args.dry_run))
    except (ProcessFailedError, subprocess.TimeoutExpired) as exc:
        parser.exit(1, f"cachewarm failed: {exc}\n")
    except OSError as exc:
        parser.exit(1, f"cachewarm failed: {exc}\nRun with --verbose for more details.\n")

    if report.returncode:
        parser.exit(report.returncode)


if __name__ == "__main__":
    main(sys.argv[1:])
