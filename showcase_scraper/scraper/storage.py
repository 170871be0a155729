"""Export utilities for scraped projects.

Successful projects go to a CSV file with a fixed column order; permanent
failures go to a JSON array so they can be inspected or re-scraped.
"""

import csv
import json
from pathlib import Path
from typing import Iterable, Optional

from pydantic import ValidationError

from showcase_scraper.utils import OutputConfig, get_logger, log_exception

from .exceptions import ExportError
from .models import FailureRecord, ProcessingResult, ProjectRecord

logger = get_logger(__name__)


CSV_FIELDS = [
    'name', 'url', 'event', 'description', 'howItsMade',
    'technologies', 'github', 'twitter', 'website', 'discord',
    'sponsors', 'lastUpdated',
]

LIST_SEPARATOR = ', '


def project_to_row(project: ProjectRecord) -> dict[str, str]:
    """Flatten a project into a CSV row keyed by ``CSV_FIELDS``."""
    return {
        'name': project.name,
        'url': project.url,
        'event': project.event,
        'description': project.description,
        'howItsMade': project.how_its_made,
        'technologies': LIST_SEPARATOR.join(project.technologies),
        'github': project.github,
        'twitter': project.twitter,
        'website': project.website,
        'discord': project.discord,
        'sponsors': LIST_SEPARATOR.join(project.sponsors),
        'lastUpdated': project.last_updated.isoformat(),
    }


def export_projects_to_csv(projects: Iterable[ProjectRecord], output_file: Path) -> Path:
    """Write projects to a CSV file (header always included).

    Args:
        projects: Projects to export
        output_file: Path to output CSV file

    Returns:
        Path written

    Raises:
        ExportError: If the file cannot be written
    """
    output_file = Path(output_file)
    count = 0
    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        with open(output_file, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            writer.writeheader()
            for project in projects:
                writer.writerow(project_to_row(project))
                count += 1
    except OSError as e:
        raise ExportError(f"Failed to write CSV: {e}", path=str(output_file)) from e

    logger.info(f"Saved {count} projects to {output_file}")
    return output_file


def export_failures_to_json(failures: list[FailureRecord], output_file: Path) -> Optional[Path]:
    """Write failures to a JSON array; nothing is written for an empty list.

    Args:
        failures: Failed projects
        output_file: Path to output JSON file

    Returns:
        Path written, or None when there was nothing to write

    Raises:
        ExportError: If the file cannot be written
    """
    if not failures:
        return None

    output_file = Path(output_file)
    data = [failure.model_dump(mode='json') for failure in failures]
    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise ExportError(f"Failed to write failures JSON: {e}", path=str(output_file)) from e

    logger.warning(f"{len(failures)} projects failed (saved to {output_file})")
    return output_file


def save_results(result: ProcessingResult, output: OutputConfig) -> dict[str, Optional[Path]]:
    """Export successes and failures; each export is attempted independently.

    Export errors are logged rather than raised, so a CSV failure never
    prevents the failure report from being written and vice versa.

    Args:
        result: Outcome of a batch run
        output: Destination paths

    Returns:
        Mapping with keys ``csv`` and ``failures`` to the written paths
        (None for an export that failed or was skipped)
    """
    written: dict[str, Optional[Path]] = {'csv': None, 'failures': None}

    try:
        written['csv'] = export_projects_to_csv(result.successes, Path(output.csv_path))
    except ExportError as e:
        log_exception(logger, "saving projects CSV", e)

    try:
        written['failures'] = export_failures_to_json(result.failures, Path(output.failed_json_path))
    except ExportError as e:
        log_exception(logger, "saving failed projects", e)

    return written


def load_failures(input_file: Path) -> list[FailureRecord]:
    """Load failures written by a previous run.

    Args:
        input_file: Path to a failures JSON file

    Returns:
        FailureRecord list in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the content is not a list of failure records
    """
    input_file = Path(input_file)
    if not input_file.exists():
        raise FileNotFoundError(f"Failures file not found: {input_file}")

    with open(input_file, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array in {input_file}")

    try:
        failures = [FailureRecord.model_validate(entry) for entry in data]
    except ValidationError as e:
        raise ValueError(f"Invalid failure record in {input_file}: {e}") from e

    logger.info(f"Loaded {len(failures)} failed projects from {input_file}")
    return failures
