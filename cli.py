"""
CLI entry point for props-bot. Wires the pipeline: ingest -> aggregate -> reconcile -> render,
then prints the result, writes it to a file or posts it as a pull request comment.
"""

import argparse
import json
import logging
import os
import sys
from typing import Optional

from ingest.errors import PropsError
from ingest.github import GitHubClient
from ingest.wporg import DirectoryClient, LOOKUP_URL
from pipeline import collect_props
from report.renderer import render, render_comment, COMMENT_MARKER

logger = logging.getLogger("props_bot")


def _configure_logging(level_name: str):
    level = getattr(logging, (level_name or "INFO").upper(), None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


def _pr_number_from_event(path: str) -> Optional[int]:
    """Read the pull request number from a GitHub Actions event payload file."""
    if not path:
        return None
    try:
        with open(path, "r", encoding="utf-8") as fh:
            event = json.load(fh)
    except (OSError, ValueError) as e:
        logger.warning("Failed to read event payload %s: %s", path, e)
        return None
    number = (event.get("pull_request") or {}).get("number") if isinstance(event, dict) else None
    return int(number) if number else None


def _split_users(raw: str) -> list:
    return [u.strip() for u in (raw or "").split(",") if u.strip()]


def _resolve_settings(args, parser):
    """Resolve settings from CLI args or environment variables and attach them to args.
    Calls parser.error() if anything required is missing.
    """
    args.github_token = args.github_token or os.getenv("GITHUB_TOKEN")
    repository = args.repo or os.getenv("GITHUB_REPOSITORY", "")
    pr_number = args.pr or _pr_number_from_event(os.getenv("GITHUB_EVENT_PATH", ""))

    missing = []
    if not args.github_token:
        missing.append("github token (CLI flag --github-token or env GITHUB_TOKEN)")
    if "/" not in repository:
        missing.append("repository (CLI flag --repo owner/name or env GITHUB_REPOSITORY)")
    if not pr_number:
        missing.append("pull request number (CLI flag --pr or a pull_request event in GITHUB_EVENT_PATH)")
    if missing:
        parser.error("Missing required settings: " + ", ".join(missing))

    args.owner, args.repo_name = repository.split("/", 1)
    args.pr = int(pr_number)
    args.skip_user = list(args.skip_user or []) + _split_users(os.getenv("PROPS_SKIPPED_USERS", ""))
    args.directory_url = args.directory_url or os.getenv("PROPS_DIRECTORY_URL") or LOOKUP_URL
    args.github_api_url = args.github_api_url or os.getenv("GITHUB_API_URL") or "https://api.github.com"


def write_output(rendered: str, args):
    """Write output to file or stdout."""
    if args.out_file:
        out_dir = os.path.dirname(args.out_file)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        with open(args.out_file, "w", encoding="utf-8") as f:
            f.write(rendered)
        print(f"Wrote props to {args.out_file}")
    else:
        print(rendered)


def run(args) -> int:
    """Execute the pipeline for the resolved settings and return the process exit code."""
    github = GitHubClient(args.github_token, base_url=args.github_api_url)
    directory = DirectoryClient(args.directory_url)

    result = collect_props(github, directory, args.owner, args.repo_name, args.pr, skipped_users=args.skip_user)
    if result is None:
        # No contributors were gathered; nothing to report.
        return 0

    write_output(render(result.context, fmt=args.output), args)
    if args.comment:
        github.upsert_comment(args.owner, args.repo_name, args.pr, render_comment(result.context), COMMENT_MARKER)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Collect props for a pull request and map contributors to WordPress.org accounts")
    parser.add_argument("--repo", type=str, default="", help="Repository as owner/name (defaults to env GITHUB_REPOSITORY)")
    parser.add_argument("--pr", type=int, default=None, help="Pull request number (defaults to the GITHUB_EVENT_PATH payload)")
    parser.add_argument("--github-token", type=str, help="GitHub API token (or set GITHUB_TOKEN env var)")
    parser.add_argument("--github-api-url", type=str, default="", help="GitHub API base URL (or set GITHUB_API_URL env var)")
    parser.add_argument("--directory-url", type=str, default="", help="WordPress.org lookup endpoint (or set PROPS_DIRECTORY_URL env var)")
    parser.add_argument("--skip-user", action="append", default=[], help="Login to exclude from props; may be repeated (PROPS_SKIPPED_USERS adds more)")
    parser.add_argument("--output", type=str, choices=("text", "json", "comment"), default="text", help="Output format")
    parser.add_argument("--out-file", type=str, default="", help="Write output to this file instead of stdout")
    parser.add_argument("--comment", action="store_true", help="Create or update the props comment on the pull request")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (or set PROPS_LOG_LEVEL env var, default INFO)")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level or os.getenv("PROPS_LOG_LEVEL", "INFO"))
    _resolve_settings(args, parser)

    try:
        return run(args)
    except PropsError as e:
        logger.error("Failed to collect props: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
