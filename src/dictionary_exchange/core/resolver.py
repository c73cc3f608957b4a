"""Conflict resolution between stored and imported translation values."""


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def should_accept(existing: str | None, incoming: str, override: bool) -> bool:
    """
    Decide whether an imported value replaces the stored translation.

    Decision Matrix:
    - No stored translation → accept
    - Stored translation empty or whitespace → accept
    - Stored value equals incoming value → reject (always a no-op)
    - Stored value differs → accept only when ``override`` is enabled

    Args:
        existing: Stored value, or None when the item has no translation
        incoming: Non-blank value read from the CSV file
        override: Whether differing non-empty values may be replaced

    Returns:
        bool: True if the change should be applied
    """
    if _is_blank(existing):
        return True
    if existing == incoming:
        return False
    return override


class ConflictResolver:
    """Binds the override policy of one import pass to ``should_accept``."""

    def __init__(self, override: bool = False) -> None:
        self.override = override

    def accepts(self, existing: str | None, incoming: str) -> bool:
        return should_accept(existing, incoming, self.override)
