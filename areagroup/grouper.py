from areagroup.schemas import ConversionWarning, NormalizedRecord, OutputTree
from areagroup.validators import format_phone_number, is_valid_phone_number


NO_AREA_CODE = "NoAreaCode"


def area_code_for(phone_number: str) -> str:
    formatted = format_phone_number(phone_number)
    # Window ends one short of the last digit; only its first 3 characters are used.
    window = formatted[len(formatted) - 10 : len(formatted) - 1]
    return window[:3]


def group_key_for(record: NormalizedRecord) -> str:
    phone_number = record.get("PhoneNumber")
    if phone_number and is_valid_phone_number(phone_number):
        return f"AreaCode_{area_code_for(phone_number)}"
    return NO_AREA_CODE


def record_key_for(record: NormalizedRecord) -> str:
    return f"User_{record.get('ID', '')}"


def add_record(tree: OutputTree, record: NormalizedRecord, *, row_index: int | None = None) -> ConversionWarning | None:
    group = tree.setdefault(group_key_for(record), {})
    record_key = record_key_for(record)

    if record_key in group:
        # First record stored under a key wins.
        return ConversionWarning(
            "duplicate",
            f"Duplicate ID found: {record.get('ID', '')}. (Record will not be output.)",
            row_index,
        )

    group[record_key] = dict(record)
    return None


def count_records(tree: OutputTree) -> int:
    return sum(len(group) for group in tree.values())
