"""Change records produced by an import pass."""

from collections.abc import Iterator
from dataclasses import dataclass, field

from ..utils.exceptions import InvalidOptionsError


@dataclass(frozen=True)
class ChangeRecord:
    """
    One proposed or applied translation change.

    Attributes:
        item_key: Key of the dictionary item
        culture_name: Culture name of the language column
        old_value: Value before this import pass touched the cell ("" if none)
        new_value: Value read from the CSV file
    """

    item_key: str
    culture_name: str
    old_value: str
    new_value: str

    def to_dict(self) -> dict[str, str]:
        """
        Serialize for API responses.

        Returns:
            dict: Record with camelCase keys
        """
        return {
            "itemKey": self.item_key,
            "cultureName": self.culture_name,
            "oldValue": self.old_value,
            "newValue": self.new_value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> "ChangeRecord":
        """Rebuild a record from its API representation."""
        return cls(
            item_key=data["itemKey"],
            culture_name=data["cultureName"],
            old_value=data.get("oldValue") or "",
            new_value=data["newValue"],
        )

    def __str__(self) -> str:
        return f"{self.item_key} [{self.culture_name}]: {self.old_value!r} -> {self.new_value!r}"


@dataclass
class ChangeSet:
    """
    Ordered, append-only sequence of changes from one import pass.

    Records are kept in discovery order: row by row, and within a row in
    header column order.
    """

    records: list[ChangeRecord] = field(default_factory=list)

    def append(self, record: ChangeRecord) -> None:
        self.records.append(record)

    def __iter__(self) -> Iterator[ChangeRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __getitem__(self, index: int) -> ChangeRecord:
        return self.records[index]

    @property
    def has_changes(self) -> bool:
        """
        Check if the pass produced any change.

        Returns:
            bool: True if at least one record exists, False otherwise.
        """
        return len(self.records) > 0

    def item_keys(self) -> list[str]:
        """Keys of changed items, in first-change order without repeats."""
        return list(dict.fromkeys(record.item_key for record in self.records))

    def to_list(self) -> list[dict[str, str]]:
        return [record.to_dict() for record in self.records]

    @classmethod
    def from_list(cls, data: list[dict[str, str]]) -> "ChangeSet":
        """
        Rebuild a change set from client-supplied records.

        Raises:
            InvalidOptionsError: If a record is not a mapping or lacks a field
        """
        records = []
        for index, entry in enumerate(data):
            try:
                records.append(ChangeRecord.from_dict(entry))
            except (KeyError, TypeError, AttributeError) as e:
                raise InvalidOptionsError(
                    f"expected[{index}]: malformed change record ({e!r})", original_error=e
                ) from e
        return cls(records)

    def get_summary(self) -> str:
        """
        Get a human-readable summary of the change set.

        Returns:
            str: Summary with change and item counts.
        """
        if not self.records:
            return "No changes"
        return f"{len(self.records)} changes across {len(self.item_keys())} items"
