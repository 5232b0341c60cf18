"""Advisory domain model."""
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field

from src.errors import RecordError


# Version of the upstream row contract validated by Advisory.from_api_dict.
# Bump when the provider changes the shape of a row.
ADVISORY_SCHEMA_VERSION = 1

# Required fields and the Python types they must carry in a provider row.
REQUIRED_FIELDS = {
    'advisoryid': int,
    'summary': str,
    'details': str,
    'advisorystarttime': str,
}


@dataclass
class ParsedWindow:
    """One day/time window extracted from an advisory's details text."""

    label: str
    start_date: str
    end_date: str
    start_time: str
    end_time: str

    @property
    def start_datetime(self) -> str:
        return f"{self.start_date}T{self.start_time}"

    @property
    def end_datetime(self) -> str:
        return f"{self.end_date}T{self.end_time}"

    def to_dict(self) -> Dict[str, str]:
        """Serialize using the stored document's camelCase keys."""
        return {
            'label': self.label,
            'startDate': self.start_date,
            'endDate': self.end_date,
            'startTime': self.start_time,
            'endTime': self.end_time,
            'startDatetime': self.start_datetime,
            'endDatetime': self.end_datetime,
        }

    def __repr__(self) -> str:
        return f"<ParsedWindow {self.label!r} {self.start_datetime} -> {self.end_datetime}>"


@dataclass
class Advisory:
    """A validated advisory row as published by the upstream provider."""

    advisory_id: int
    summary: str
    details: str
    advisory_start_time: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api_dict(cls, data: Dict[str, Any]) -> 'Advisory':
        """
        Validate a provider row against the advisory contract.

        Args:
            data: Raw row from the provider's ``rows`` list

        Returns:
            Advisory instance

        Raises:
            RecordError: if the row does not satisfy the contract
        """
        if not isinstance(data, dict):
            raise RecordError(None, f"Advisory row is not an object: {type(data).__name__}")

        advisory_id = data.get('advisoryid')
        # bool is an int subclass, reject it explicitly
        if not isinstance(advisory_id, int) or isinstance(advisory_id, bool):
            raise RecordError(None, f"Advisory row has invalid advisoryid: {advisory_id!r}")

        values = {}
        for name, expected in REQUIRED_FIELDS.items():
            value = data.get(name)
            if name == 'details' and value is None:
                value = ''
            if not isinstance(value, expected):
                raise RecordError(
                    advisory_id,
                    f"Advisory {advisory_id} field '{name}' expected "
                    f"{expected.__name__}, got {type(value).__name__}"
                )
            values[name] = value

        return cls(
            advisory_id=advisory_id,
            summary=values['summary'],
            details=values['details'],
            advisory_start_time=values['advisorystarttime'],
            raw=dict(data),
        )

    @property
    def reference_year(self) -> int:
        """
        Calendar year (UTC) of the advisory start time.

        Used as the year for every window in the details text, including
        windows that actually fall in the adjacent year.
        """
        started = self._parse_timestamp(self.advisory_start_time)
        if started is None:
            raise RecordError(
                self.advisory_id,
                f"Advisory {self.advisory_id} has unparseable advisorystarttime: "
                f"{self.advisory_start_time!r}"
            )
        return started.year

    @staticmethod
    def _parse_timestamp(value: str) -> Optional[datetime]:
        """
        Parse an ISO-like timestamp.

        Accepted examples: "2024-06-01T00:00:00Z", "2024-06-01 00:00:00",
        "2024-06-01T00:00:00.000+00:00", "2024-06-01T00:00:00.5+0000",
        "2024-06-01". Relies on the Python 3.11 fromisoformat grammar.
        """
        text = value.strip()
        if not text:
            return None
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed


@dataclass
class EnrichedAdvisory:
    """An advisory plus the windows parsed from its details, in source order."""

    advisory: Advisory
    parsed_details: List[ParsedWindow] = field(default_factory=list)

    @property
    def advisory_id(self) -> int:
        return self.advisory.advisory_id

    def to_document(self) -> Dict[str, Any]:
        """Build the stored document: the provider row plus ``parsedDetails``."""
        document = dict(self.advisory.raw)
        document['parsedDetails'] = [window.to_dict() for window in self.parsed_details]
        return document

    def __repr__(self) -> str:
        return f"<EnrichedAdvisory {self.advisory_id} windows={len(self.parsed_details)}>"
