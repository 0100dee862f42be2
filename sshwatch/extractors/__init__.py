# Extraction strategies as small Python classes, tried in a fixed order.
#
# Each strategy pulls one field (an address or a principal) out of a raw
# auth log line. The classifier walks the list for a field and takes the
# first strategy that matches, so ordering is part of the contract: the
# more specific pattern goes first. Keeping one class per pattern means
# each one can be tested on its own and a site can swap in its own list
# (see loader.py) without touching the classifier.

import re

IPV4 = r"(\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})"


class Extractor:
    """Base extraction strategy. Subclass and set ``pattern``, or override extract()."""

    id: str
    field: str  # address | principal
    description: str = ""
    pattern: str

    _compiled: re.Pattern | None = None

    def extract(self, line: str) -> str | None:
        """Return the first capture group of the pattern, or None."""
        if self._compiled is None:
            self._compiled = re.compile(self.pattern)
        m = self._compiled.search(line)
        if m is None:
            return None
        return m.group(1)


from sshwatch.extractors.address import FromClause, BeforePort, ForAddress, AfterUser
from sshwatch.extractors.principal import ForUser, UserWord, ForWord

ADDRESS_EXTRACTORS = [FromClause(), BeforePort(), ForAddress(), AfterUser()]
PRINCIPAL_EXTRACTORS = [ForUser(), UserWord(), ForWord()]
