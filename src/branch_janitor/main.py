import argparse
import asyncio
import logging
import math
import sys
import traceback

from dotenv import load_dotenv

from .branch_reaper import delete_branches
from .config import GitHubSettings, ReaperSettings
from .errors import LoadError
from .project_config import ProjectConfig, load_and_set_config
from .schemas import BranchDeletionOptions, ReapSummary
from .tools.github_session import GitHubSession

DESCRIPTION = """Clean up test branches.

When a test fails, there may be a branch and a pull request left active on the
test repository. This tool deletes the old branches, which makes GitHub close
the pull request. Branches last updated more than two days ago are cleaned up.

The owner and repository name must be specified. The cleanup criteria can be
overridden using the --hours or --minutes options. These are used primarily
for testing."""


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def _finite_float(value: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise argparse.ArgumentTypeError(f"{value!r} is not a finite number")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="branch-janitor",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-o", "--owner", required=True, help="owner of the test repository")
    parser.add_argument("-r", "--repo", required=True, help="name of the test repository")
    parser.add_argument(
        "-H",
        "--hours",
        type=_finite_float,
        default=None,
        help="how old a branch is before expiring, in hours",
    )
    parser.add_argument(
        "-m",
        "--minutes",
        type=_finite_float,
        default=None,
        help="how old a branch is before expiring, in minutes. --hours has priority.",
    )
    parser.add_argument("--dry-run", action="store_true", help="do not delete the refs (useful for debugging)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    parser.add_argument("extra", nargs="*", help=argparse.SUPPRESS)
    return parser


def options_from_args(args: argparse.Namespace) -> BranchDeletionOptions:
    if args.hours is not None:
        return BranchDeletionOptions(dry_run=args.dry_run, hours=args.hours)
    if args.minutes is not None:
        return BranchDeletionOptions(dry_run=args.dry_run, minutes=args.minutes)
    return BranchDeletionOptions(dry_run=args.dry_run)


def _print_summary(summary: ReapSummary) -> None:
    print("### Summary")
    print(f"- repository: {summary.owner}/{summary.repo}")
    print(f"- cutoff: {summary.cutoff.isoformat()}")
    print(f"- dry_run: {summary.dry_run}")
    print(f"- branches_scanned: {summary.branches_scanned}")
    print(f"- stale_test_branches: {len(summary.candidates)}")
    if summary.dry_run:
        print(f"- would_delete: {len(summary.would_delete)}")
    else:
        print(f"- deleted: {len(summary.deleted)}")
        print(f"- failed: {len(summary.failed)}")

    for candidate in summary.candidates:
        prs = ", ".join(f"#{n}" for n in candidate.pull_requests) or "-"
        print(f"  - {candidate.name} (last updated {candidate.last_updated.isoformat()}, pull requests: {prs})")
    for result in summary.failed:
        print(f"  ! {result.branch}: {result.error}")


async def reap(args: argparse.Namespace) -> ReapSummary:
    """Authenticate for the repository and reap its stale test branches."""
    session = GitHubSession(args.owner, args.repo, GitHubSettings())
    client = await session.authenticate(args.owner)
    return await delete_branches(client, args.owner, args.repo, options_from_args(args), ReaperSettings())


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    # Positionals split by options land in the leftovers rather than in extra.
    args, leftover = parser.parse_known_args(argv)
    if args.extra or leftover:
        parser.print_help()
        return 0

    # Load environment variables before instantiating settings
    load_dotenv()
    _setup_logging(args.verbose)

    try:
        summary = asyncio.run(reap(args))
    except Exception as e:
        print(f"Caught error {e}:\n{traceback.format_exc()}")
        return 1

    _print_summary(summary)
    return 0


def _print_config(config: ProjectConfig) -> None:
    print(f"- repo: {config.repo.owner}/{config.repo.name} (base {config.repo.base_owner}, host {config.repo.host})")
    print(f"- monitored owners: {', '.join(config.repo.owners) or '-'}")
    print(f"- mail repo: {config.mailrepo.owner}/{config.mailrepo.name}@{config.mailrepo.branch}")
    print(f"- app: {config.app.name} (id {config.app.app_id}, installation {config.app.installation_id})")
    print(f"- max commits: {config.lint.max_commits}")
    if config.project is not None:
        print(f"- patches to: {config.project.to} (base {config.project.branch})")


def check_config(argv: list[str] | None = None) -> int:
    """Load a project configuration file and print what it describes."""
    parser = argparse.ArgumentParser(
        prog="branch-janitor-config",
        description="Load and check a project configuration (.json document or .py module exporting 'config').",
    )
    parser.add_argument("path", help="configuration file")
    args = parser.parse_args(argv)

    _setup_logging(False)
    try:
        config = load_and_set_config(args.path)
    except LoadError as e:
        print(f"Caught error {e}", file=sys.stderr)
        return 1

    _print_config(config)
    return 0


def run():
    sys.exit(main())


def run_check_config():
    sys.exit(check_config())


if __name__ == "__main__":
    run()
