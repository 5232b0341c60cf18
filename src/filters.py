"""Relevance filtering for upstream advisories."""
from typing import Any, Dict, Iterable, List


def is_relevant(summary: Any, keywords: Iterable[str]) -> bool:
    """Return ``True`` when ``summary`` contains any keyword, ignoring case.

    Non-string summaries (missing or null in the provider row) are never
    relevant.
    """
    if not isinstance(summary, str):
        return False
    summary_lower = summary.lower()
    return any(keyword.lower() in summary_lower for keyword in keywords if keyword)


def filter_relevant(rows: Iterable[Dict[str, Any]], keywords: Iterable[str]) -> List[Dict[str, Any]]:
    """Keep the rows whose ``summary`` names one of ``keywords``, in order."""
    keywords = list(keywords)
    return [
        row for row in rows
        if isinstance(row, dict) and is_relevant(row.get('summary'), keywords)
    ]
