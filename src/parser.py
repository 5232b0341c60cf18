"""Parser module for advisory detail text."""
import re
from typing import Dict, Iterator, List, Optional, Tuple
import logging

from src.errors import ParseError, ParseErrorKind
from src.models.advisory import Advisory, EnrichedAdvisory, ParsedWindow

logger = logging.getLogger(__name__)


MONTHS = {
    'JAN': 1, 'FEB': 2, 'MAR': 3, 'APR': 4, 'MAY': 5, 'JUN': 6,
    'JUL': 7, 'AUG': 8, 'SEP': 9, 'OCT': 10, 'NOV': 11, 'DEC': 12,
}

# label, date fragment, time fragment
# e.g. "Fire Launch Day (2) 3/5 JAN 1200Z-1430Z" or "Backup 3 JAN/5 FEB 0000Z-0600Z"
WINDOW_PATTERN = re.compile(
    r'\b(\w+(?: Launch Day)?(?: \(\d+\))?) '
    r'(\d+/\d+ \w+|\d+ \w+/\d+ \w+) '
    r'(\d{4}Z-\d{4}Z)'
)


def month_number(abbrev: str) -> int:
    """
    Map a three-letter month abbreviation (any case) to 1-12.

    Raises:
        ParseError: UNKNOWN_MONTH if the abbreviation is not recognised
    """
    month = MONTHS.get(abbrev.strip().upper())
    if month is None:
        raise ParseError(ParseErrorKind.UNKNOWN_MONTH, f"Invalid month abbreviation: {abbrev}")
    return month


def _format_date(year: int, month: int, day: str) -> str:
    return f"{year}-{month:02d}-{day.zfill(2)}"


def _split_day_month(side: str, fragment: str) -> Tuple[str, str]:
    pieces = side.split()
    if len(pieces) != 2:
        raise ParseError(
            ParseErrorKind.MALFORMED_DATE_PART,
            f"Invalid date part format: {fragment}"
        )
    return pieces[0], pieces[1]


def parse_date_range(fragment: str, year: int) -> Tuple[str, str]:
    """
    Parse a date fragment into (start, end) ``YYYY-MM-DD`` strings.

    Two shapes are accepted:
        "3 JAN/5 FEB" - each side carries its own month
        "3/5 JAN"     - the first day takes the second side's month

    Raises:
        ParseError: MALFORMED_DATE_PART on any structural problem or unknown month
    """
    parts = [p.strip() for p in fragment.split('/')]
    if len(parts) != 2:
        raise ParseError(
            ParseErrorKind.MALFORMED_DATE_PART,
            f"Invalid date part format: {fragment}"
        )

    first, second = parts
    try:
        if ' ' in first:
            day1, mon1 = _split_day_month(first, fragment)
            day2, mon2 = _split_day_month(second, fragment)
            start_date = _format_date(year, month_number(mon1), day1)
            end_date = _format_date(year, month_number(mon2), day2)
        else:
            day2, mon = _split_day_month(second, fragment)
            month = month_number(mon)
            start_date = _format_date(year, month, first)
            end_date = _format_date(year, month, day2)
    except ParseError as e:
        if e.kind is ParseErrorKind.MALFORMED_DATE_PART:
            raise
        raise ParseError(
            ParseErrorKind.MALFORMED_DATE_PART,
            f"Failed to parse date part: {fragment}, error: {e}"
        ) from e

    return start_date, end_date


def parse_time_range(fragment: str) -> Tuple[str, str]:
    """
    Parse "HHMM-HHMM" (optionally "HHMMZ-HHMMZ") into ``HH:MM:00Z`` strings.

    The digits are not validated; "Z" is appended literally, no conversion.

    Raises:
        ParseError: MALFORMED_TIME_PART if either side is too short
    """
    parts = fragment.strip().split('-')
    if len(parts) != 2:
        raise ParseError(
            ParseErrorKind.MALFORMED_TIME_PART,
            f"Invalid time part format: {fragment}"
        )

    times = []
    for part in parts:
        part = part.strip().rstrip('Zz')
        if len(part) < 4:
            raise ParseError(
                ParseErrorKind.MALFORMED_TIME_PART,
                f"Failed to parse time part: {fragment}"
            )
        times.append(f"{part[0:2]}:{part[2:4]}:00Z")

    return times[0], times[1]


def iter_window_matches(details: str) -> Iterator[re.Match]:
    """Lazily yield raw window matches, left to right, non-overlapping."""
    return WINDOW_PATTERN.finditer(details or '')


def _convert_match(match: re.Match, year: int) -> Optional[ParsedWindow]:
    """Convert one raw match, or log and return None when it does not parse."""
    label, date_part, time_part = match.groups()
    try:
        start_date, end_date = parse_date_range(date_part, year)
        start_time, end_time = parse_time_range(time_part)
    except ParseError as e:
        logger.warning(f"Skipping detail entry '{match.group(0)}' ({e.kind.value}): {e}")
        return None

    return ParsedWindow(
        label=label,
        start_date=start_date,
        end_date=end_date,
        start_time=start_time,
        end_time=end_time,
    )


def parse_details(details: str, year: int) -> List[ParsedWindow]:
    """
    Extract every well-formed window from an advisory's details text.

    Args:
        details: Free-text details field
        year: Reference year applied to every window

    Returns:
        Parsed windows in order of appearance; malformed windows are omitted
    """
    converted = (_convert_match(match, year) for match in iter_window_matches(details))
    return [window for window in converted if window is not None]


class AdvisoryParser:
    """Turns validated provider rows into enriched advisories."""

    def parse_advisory(self, advisory_data: Dict) -> EnrichedAdvisory:
        """
        Validate a provider row and parse its detail windows.

        Args:
            advisory_data: Raw advisory row from the provider

        Returns:
            EnrichedAdvisory with windows in source order

        Raises:
            RecordError: if the row violates the advisory contract
        """
        advisory = Advisory.from_api_dict(advisory_data)
        year = advisory.reference_year
        windows = parse_details(advisory.details, year)

        logger.debug(
            f"Advisory {advisory.advisory_id}: {len(windows)} window(s) "
            f"parsed with reference year {year}"
        )
        return EnrichedAdvisory(advisory=advisory, parsed_details=windows)
