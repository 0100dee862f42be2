"""Load extraction strategies from a YAML pattern file."""

import re
from pathlib import Path

import yaml

from sshwatch.extractors.regex_extractor import RegexExtractor

FIELDS = ("address", "principal")
_REQUIRED_FIELDS = ("id", "pattern")


def load_extractors(path: str | Path) -> dict[str, list[RegexExtractor]]:
    """Parse *path* and return {field: [RegexExtractor, ...]} in file order.

    Only the fields present in the file appear in the result; callers keep
    their built-in list for the others.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Pattern file not found: {path}")

    with open(path) as f:
        document = yaml.safe_load(f) or {}

    if not isinstance(document, dict):
        raise ValueError(f"{path.name}: top level must be a mapping")

    result = {}
    for field, definitions in document.items():
        if field not in FIELDS:
            raise ValueError(f"{path.name}: unknown field '{field}'")
        if not isinstance(definitions, list) or not definitions:
            raise ValueError(f"{path.name}: '{field}' must be a non-empty list")
        result[field] = [
            RegexExtractor(_validate(path, field, d)) for d in definitions
        ]
    return result


def _validate(path: Path, field: str, definition) -> dict:
    if not isinstance(definition, dict):
        raise ValueError(f"{path.name}: {field} entries must be mappings")

    for key in _REQUIRED_FIELDS:
        if key not in definition:
            raise ValueError(f"{path.name}: {field} entry missing required field '{key}'")

    try:
        compiled = re.compile(definition["pattern"])
    except re.error as e:
        raise ValueError(f"{path.name}: {definition['id']}: invalid pattern ({e})") from e
    if compiled.groups != 1:
        raise ValueError(
            f"{path.name}: {definition['id']}: pattern must have exactly one capture group"
        )

    return {**definition, "field": field}
