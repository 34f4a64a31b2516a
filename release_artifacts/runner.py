"""
Release artifact runner.

Entry point that waits for the CI run of the release commit and stages its
build artifacts into the release output directory.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from release_artifacts.config import Settings, load_settings
from release_artifacts.exceptions import ConfigurationError
from release_artifacts.github_client import GitHubActionsClient
from release_artifacts.observability import get_logger, setup_telemetry
from release_artifacts.orchestrator import ReleaseArtifactPipeline

logger = get_logger(__name__)


def setup_cli(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="prepare-release-artifacts",
        description="Wait for the CI run of a commit and stage its release artifacts",
    )
    parser.add_argument(
        "--package",
        type=str,
        default=None,
        help="Stage only this package file (default: all release packages)",
    )
    parser.add_argument(
        "--commit",
        type=str,
        default=None,
        help="Commit whose CI run to use (default: CI_COMMIT_SHA)",
    )
    parser.add_argument(
        "--workflow",
        type=str,
        default=None,
        help="Workflow display name (default: WORKFLOW_NAME or 'Continuous Integration')",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory receiving the staged files (default: OUTPUT_DIR or dist)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for the run to complete (default: WORKFLOW_TIMEOUT_SECONDS or 900)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Log level (default: INFO)",
    )
    return parser.parse_args(argv)


async def prepare_release_artifacts(
    settings: Settings, package: Optional[str] = None
) -> List[Path]:
    """Run the pipeline with a client built from settings."""
    async with GitHubActionsClient(
        settings.token,
        api_url=settings.github_api_url,
        timeout=settings.http_timeout_seconds,
    ) as client:
        pipeline = ReleaseArtifactPipeline(settings, client)
        return await pipeline.run(package)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit status."""
    args = setup_cli(argv)
    setup_telemetry(args.log_level)

    try:
        settings = load_settings(
            ci_commit_sha=args.commit,
            workflow_name=args.workflow,
            output_dir=args.output_dir,
            workflow_timeout_seconds=args.timeout,
        )
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    if settings.trace_console:
        setup_telemetry(args.log_level, console_spans=True)

    try:
        staged = asyncio.run(prepare_release_artifacts(settings, args.package))
    except Exception as e:
        logger.exception(f"Failed to prepare release artifacts: {e}")
        return 1

    logger.info(f"Successfully prepared {len(staged)} artifact file(s):")
    for path in staged:
        logger.info(f"  - {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
