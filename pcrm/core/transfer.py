"""
FILE: pcrm/core/transfer.py
PURPOSE: JSON (de)serialization of the task list, export and import files
EXPORTS:
  - tasks_to_json(tasks, indent) -> str
  - parse_tasks_json(text, source) -> List[Task]
  - export_filename(today) -> str
  - export_tasks(tasks, destination, today) -> Path
  - read_import_file(path) -> List[Task]
DEPENDENCIES:
  - json, pathlib, datetime (stdlib)
  - pcrm.core.models (Task)
  - pcrm.core.exceptions (ParseFailure)
NOTES:
  - Persisted record, export file and import file share one format:
    a JSON array of task objects
  - Anything that is not an array of objects raises ParseFailure
  - Field values are taken as-is (no category/status validation)
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .constants import EXPORT_PREFIX
from .exceptions import ParseFailure
from .models import Task

logger = logging.getLogger(__name__)


def tasks_to_json(tasks: Iterable[Task], indent: Optional[int] = None) -> str:
    """
    Serialize tasks to a JSON array string.

    Args:
        tasks: Tasks to serialize, in list order
        indent: Pretty-print indent (None = compact, as persisted)
    """
    return json.dumps(
        [task.to_dict() for task in tasks],
        indent=indent,
        ensure_ascii=False,
    )


def parse_tasks_json(text: str, source: str = "input") -> List[Task]:
    """
    Parse a JSON array of task objects.

    Args:
        text: Raw JSON text
        source: Where the text came from (used in error messages)

    Returns:
        List of Task objects in array order

    Raises:
        ParseFailure: Malformed JSON, a non-array document, or an array
                      element that is not a task object
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise ParseFailure(source, f"malformed JSON ({e})") from e

    if not isinstance(data, list):
        raise ParseFailure(source, f"expected a JSON array, got {type(data).__name__}")

    try:
        return [Task.from_dict(item) for item in data]
    except (TypeError, ValueError) as e:
        raise ParseFailure(source, str(e)) from e


def export_filename(today: Optional[date] = None) -> str:
    """Return the export file name for `today`, e.g. personal-crm-tasks-2024-06-01.json."""
    today = today or date.today()
    return f"{EXPORT_PREFIX}-{today.isoformat()}.json"


def export_tasks(
    tasks: Iterable[Task],
    destination: Union[str, Path, None] = None,
    today: Optional[date] = None,
) -> Path:
    """
    Write all tasks to a pretty-printed JSON file.

    Args:
        tasks: Tasks to export
        destination: Target file, or a directory to place the dated file in
                     (None = current directory)
        today: Date used in the default file name

    Returns:
        Path of the written file
    """
    target = Path(destination).expanduser() if destination is not None else Path.cwd()
    if target.is_dir():
        target = target / export_filename(today)
    target.parent.mkdir(parents=True, exist_ok=True)

    tasks = list(tasks)
    target.write_text(tasks_to_json(tasks, indent=2), encoding="utf-8")
    logger.info("Exported %d task(s) to %s", len(tasks), target)
    return target


def read_import_file(path: Union[str, Path]) -> List[Task]:
    """
    Read and parse an import file.

    Raises:
        ParseFailure: If the file cannot be read or does not hold a task array
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseFailure(str(path), f"cannot read file ({e})") from e
    return parse_tasks_json(text, source=str(path))
