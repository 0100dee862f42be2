"""Line classifier — raw auth log text to a structured Event.

Pure function, no state: safe to call from any thread.  Address and
principal are pulled out by walking an ordered list of extraction
strategies (see sshwatch.extractors); the outcome is decided by the
literal sshd success marker.
"""

from dataclasses import dataclass

from sshwatch.extractors import ADDRESS_EXTRACTORS, PRINCIPAL_EXTRACTORS, Extractor

ACCEPTED = "accepted"
OTHER_ACTIVITY = "other-activity"

UNKNOWN_PRINCIPAL = "unknown"

# Case-sensitive on purpose: sshd writes "Accepted password/publickey for".
ACCEPTED_MARKER = "Accepted"


@dataclass(frozen=True)
class Event:
    line: str
    address: str | None
    principal: str
    outcome: str

    @property
    def accepted(self) -> bool:
        return self.outcome == ACCEPTED


def first_match(line: str, extractors: list[Extractor]) -> str | None:
    """Try each strategy in order; first non-None result wins."""
    for extractor in extractors:
        value = extractor.extract(line)
        if value is not None:
            return value
    return None


def classify(line: str,
             address_extractors: list[Extractor] | None = None,
             principal_extractors: list[Extractor] | None = None) -> Event:
    address = first_match(line, address_extractors or ADDRESS_EXTRACTORS)
    principal = first_match(line, principal_extractors or PRINCIPAL_EXTRACTORS)
    outcome = ACCEPTED if ACCEPTED_MARKER in line else OTHER_ACTIVITY
    return Event(
        line=line,
        address=address,
        principal=principal or UNKNOWN_PRINCIPAL,
        outcome=outcome,
    )
