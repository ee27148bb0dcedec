from datetime import UTC, datetime


def now() -> datetime:
    return datetime.now(UTC)


def timestamp_ms(value: datetime) -> int:
    """Milliseconds since epoch, used to build collision-resistant object paths."""
    return int(value.timestamp() * 1000)


def clean_search_term(search: str | None) -> str | None:
    """Strip a search term; blank terms count as absent."""
    if search is None:
        return None
    search = search.strip()
    return search or None
