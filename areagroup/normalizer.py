from collections.abc import Callable, Mapping
import json

from areagroup.schemas import ConversionWarning, NormalizedRecord
from areagroup.validators import is_valid_gender, is_valid_id, is_valid_name, is_valid_phone_number


# Matched against the raw column label, before spaces are removed.
FIELD_VALIDATORS: dict[str, tuple[Callable[[str], bool], str]] = {
    "ID": (is_valid_id, "ID"),
    "First Name": (is_valid_name, "first name"),
    "Last Name": (is_valid_name, "last name"),
    "Gender": (is_valid_gender, "gender"),
    "Phone Number": (is_valid_phone_number, "phone number format"),
}


def raw_record_text(raw: Mapping[str, str | None]) -> str:
    return json.dumps(dict(raw), separators=(",", ":"), ensure_ascii=False)


def normalize_key(key: str) -> str:
    return key.replace(" ", "", 1)


def normalize_value(value: str) -> str:
    return value.replace("\n", "", 1)


def check_field(key: str, value: str | None, raw: Mapping[str, str | None], row_index: int | None = None) -> ConversionWarning | None:
    if not value:
        return ConversionWarning("missing", f"{key} not set: {raw_record_text(raw)}", row_index)

    validator = FIELD_VALIDATORS.get(key)
    if validator is None:
        return None
    is_valid, label = validator
    if is_valid(value):
        return None
    return ConversionWarning("invalid", f"Unexpected {label}: {raw_record_text(raw)}", row_index)


def normalize_record(
    raw: Mapping[str, str | None],
    *,
    row_index: int | None = None,
) -> tuple[NormalizedRecord, list[ConversionWarning]]:
    record: NormalizedRecord = {}
    warnings: list[ConversionWarning] = []

    for key, value in raw.items():
        warning = check_field(key, value, raw, row_index)
        if warning is not None:
            warnings.append(warning)
        # Absent cells stay absent so criteria on them fail instead of matching "".
        if value is None:
            continue
        record[normalize_key(key)] = normalize_value(value)

    return record, warnings
