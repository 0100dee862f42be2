"""Extraction strategy defined in YAML instead of a Python class.

Implements the same interface as the Extractor base class so the
classifier works without changes.  A definition looks like:

    - id: dropbear_from
      pattern: "from (\\d+\\.\\d+\\.\\d+\\.\\d+):\\d+"
      description: dropbear puts the port after a colon

The ``field`` is filled in by the loader from the section the definition
appears under (``address:`` or ``principal:``).
"""

import re

from sshwatch.extractors import Extractor


class RegexExtractor(Extractor):
    """An extraction strategy parsed from a YAML pattern definition."""

    def __init__(self, definition: dict):
        self.id = definition["id"]
        self.field = definition["field"]
        self.pattern = definition["pattern"]
        self.description = definition.get("description", "")
        self._compiled = re.compile(self.pattern)

    def __repr__(self):
        return f"RegexExtractor(id={self.id!r}, field={self.field!r})"
