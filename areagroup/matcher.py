from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from areagroup.errors import ConfigurationError
from areagroup.schemas import NormalizedRecord


SEARCH_FIELDS = ("FirstName", "LastName", "Gender", "PhoneNumber", "ID", "EyeColor")


@dataclass(frozen=True)
class SearchCriteria:
    """Required substrings per canonical field; every pair must be found."""

    terms: Mapping[str, tuple[str, ...]]

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str | Sequence[str]] | None) -> "SearchCriteria":
        frozen: dict[str, tuple[str, ...]] = {}
        for field_name, values in (mapping or {}).items():
            if field_name not in SEARCH_FIELDS:
                raise ConfigurationError(f"Invalid field filter: {field_name}")
            if isinstance(values, str):
                values = [values]
            frozen[field_name] = tuple(values)
        return cls(terms=MappingProxyType(frozen))

    def pairs(self) -> list[tuple[str, str]]:
        return [(field_name, value) for field_name, values in self.terms.items() for value in values]

    def to_dict(self) -> dict[str, list[str]]:
        return {field_name: list(values) for field_name, values in self.terms.items()}


def matches(record: NormalizedRecord, criteria: SearchCriteria) -> bool:
    for field_name, value in criteria.pairs():
        actual = record.get(field_name)
        if actual is None or value not in actual:
            return False
    return True
