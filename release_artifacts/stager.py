"""
Artifact staging.

Writes a downloaded artifact archive to a scratch file, extracts it with an
external tool into a scratch directory, checks the expected files came out,
and moves them into the output directory. Scratch entries live in the working
directory and are removed whether staging succeeds or not.
"""

import fnmatch
import re
import shutil
import subprocess
import uuid
from pathlib import Path
from typing import List, Optional, Sequence

from release_artifacts.config import DEFAULT_EXTRACT_COMMAND
from release_artifacts.exceptions import ExtractionError, ExtractionVerificationError
from release_artifacts.models import ArtifactPayload, ArtifactRequest
from release_artifacts.observability import get_logger, trace_span

logger = get_logger(__name__)

SCRATCH_PREFIX = ".release-artifact-"


def _scratch_stem(artifact_name: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]", "_", artifact_name)


def _scratch_pattern(stem: str) -> re.Pattern:
    return re.compile(rf"^{re.escape(SCRATCH_PREFIX + stem)}-[0-9a-f]{{32}}\.(zip|d)$")


def _remove_scratch(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def sweep_stale_scratch(work_dir: Path, artifact_name: str) -> int:
    """
    Remove scratch entries an interrupted earlier run left for artifact_name.

    Returns:
        Number of entries removed
    """
    pattern = _scratch_pattern(_scratch_stem(artifact_name))
    removed = 0
    for entry in work_dir.iterdir():
        if pattern.match(entry.name):
            logger.warning(f"Removing stale scratch entry {entry.name}")
            _remove_scratch(entry)
            removed += 1
    return removed


def run_extractor(command_template: Sequence[str], archive: Path, destination: Path) -> None:
    """
    Run the external extraction tool on archive.

    {archive} and {destination} in the command template are replaced with
    absolute paths. The tool runs inside destination.

    Raises:
        ExtractionError: If the tool cannot be started or exits non-zero
    """
    archive = archive.resolve()
    destination = destination.resolve()
    command = [
        part.replace("{archive}", str(archive)).replace("{destination}", str(destination))
        for part in command_template
    ]

    logger.debug(f"Running {' '.join(command)}")
    try:
        result = subprocess.run(command, cwd=destination, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise ExtractionError(f"Extraction tool not found: {command[0]}") from e

    if result.returncode != 0:
        raise ExtractionError(
            f"{command[0]} exited with status {result.returncode} "
            f"while extracting {archive.name}: {result.stderr.strip()}"
        )


def _select_outputs(
    artifact_name: str, request: ArtifactRequest, extract_dir: Path
) -> List[Path]:
    if request.expected_files:
        missing = []
        for name in request.expected_files:
            if Path(name).name != name or not (extract_dir / name).exists():
                missing.append(name)
        if missing:
            raise ExtractionVerificationError(
                f"Target file {', '.join(missing)} was not found after extracting {artifact_name}"
            )
        return [extract_dir / name for name in request.expected_files]

    matches = sorted(
        entry
        for entry in extract_dir.iterdir()
        if fnmatch.fnmatch(entry.name, request.pattern)
    )
    if not matches:
        raise ExtractionVerificationError(
            f"No files matching {request.pattern} found after extracting {artifact_name}"
        )
    return matches


def _relocate(item: Path, output_dir: Path) -> Path:
    destination = output_dir / item.name
    if destination.exists() or destination.is_symlink():
        logger.warning(f"Replacing existing {destination}")
        _remove_scratch(destination)
    shutil.move(str(item), str(destination))
    return destination


@trace_span
def stage_artifact(
    payload: ArtifactPayload,
    request: ArtifactRequest,
    output_dir: Path,
    work_dir: Optional[Path] = None,
    extract_command: Optional[Sequence[str]] = None,
) -> List[Path]:
    """
    Extract an artifact archive and move its release files into output_dir.

    Args:
        payload: Downloaded zip archive
        request: Which extracted files to keep
        output_dir: Final release directory, created if missing
        work_dir: Scratch location (defaults to the current directory)
        extract_command: Extraction tool argument template

    Returns:
        Paths of the staged files under output_dir

    Raises:
        ExtractionError: If the extraction tool fails
        ExtractionVerificationError: If the expected files are not extracted
    """
    work_dir = Path(work_dir) if work_dir is not None else Path.cwd()
    output_dir = Path(output_dir)
    stem = _scratch_stem(payload.name)

    sweep_stale_scratch(work_dir, payload.name)

    token = uuid.uuid4().hex
    archive_path = work_dir / f"{SCRATCH_PREFIX}{stem}-{token}.zip"
    extract_dir = work_dir / f"{SCRATCH_PREFIX}{stem}-{token}.d"

    try:
        logger.info(f"Writing {payload.name} ({payload.size} bytes) to {archive_path.name}")
        with open(archive_path, "xb") as f:
            f.write(payload.data)

        extract_dir.mkdir()
        run_extractor(extract_command or DEFAULT_EXTRACT_COMMAND, archive_path, extract_dir)

        selected = _select_outputs(payload.name, request, extract_dir)

        output_dir.mkdir(parents=True, exist_ok=True)
        staged = [_relocate(item, output_dir) for item in selected]
    finally:
        _remove_scratch(extract_dir)
        _remove_scratch(archive_path)

    for path in staged:
        logger.info(f"Staged {path}")
    return staged
