import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from src.rules.models import QueryAssignments


class AssignmentConfigError(ValueError):
    """Raised when the query assignment configuration cannot be used."""


def _strip_yaml_fence(content: str) -> str:
    """Return the first ```yaml fenced block, or the whole text if none."""
    yaml_lines = []
    in_block = False
    found_block = False

    for line in content.splitlines():
        s_line = line.strip()
        if s_line.startswith("```yaml"):
            in_block = True
            found_block = True
            continue
        if in_block and s_line.startswith("```"):
            break
        if in_block:
            yaml_lines.append(line)

    return "\n".join(yaml_lines) if found_block else content


def _validate(data: object, source: str) -> QueryAssignments:
    if data is None:
        return QueryAssignments()
    try:
        return QueryAssignments.model_validate(data)
    except ValidationError as e:
        raise AssignmentConfigError(f"Query assignments in {source} are invalid:\n{e}") from e


def parse_assignments_json(text: str) -> QueryAssignments:
    """
    Parse the inline JSON form (the MA_QUERY_ASSIGNMENTS variable).
    An empty string means no assignments.
    """
    if not text.strip():
        return QueryAssignments()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise AssignmentConfigError(
            f"failed to parse MA_QUERY_ASSIGNMENTS as the expected JSON: {e}"
        ) from e
    return _validate(data, "MA_QUERY_ASSIGNMENTS")


def load_assignments_file(path: Path) -> QueryAssignments:
    """
    Load query assignments from a YAML (or JSON) file.
    Raises FileNotFoundError if file missing.
    Raises AssignmentConfigError if syntax or schema invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Query assignments file not found at: {path}")

    with open(path) as f:
        content = f.read()

    try:
        data = yaml.safe_load(_strip_yaml_fence(content))
    except yaml.YAMLError as e:
        raise AssignmentConfigError(f"Invalid YAML syntax in {path}: {e}") from e

    return _validate(data, str(path))
