"""Explicit per-kind field setters used to apply merge field selections.

Keys are matched case- and underscore-insensitively, so ``firstName``,
``first_name`` and ``FIRSTNAME`` all reach the same column. Anything that is
not a known field lands in the record's ``custom_fields`` map.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from crm_dedupe.duplicates.errors import InvalidMergeRequestError
from crm_dedupe.duplicates.kinds import EntityKind, MergeableRecord

FieldSetter = Callable[[MergeableRecord, Any], None]


def normalize_field_key(key: str) -> str:
    return key.replace("_", "").replace("-", "").strip().lower()


def _coerce_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


def _text(attribute: str, *, required: bool = False) -> FieldSetter:
    def setter(record: MergeableRecord, value: Any) -> None:
        text = _coerce_text(value)
        if text is None and required:
            text = ""
        setattr(record, attribute, text)

    return setter


def _reference_id(attribute: str) -> FieldSetter:
    def setter(record: MergeableRecord, value: Any) -> None:
        if value is None or (isinstance(value, str) and not value.strip()):
            setattr(record, attribute, None)
            return
        if isinstance(value, bool):
            raise InvalidMergeRequestError(f"Field '{attribute}' expects an integer id.")
        try:
            setattr(record, attribute, int(value))
        except (TypeError, ValueError) as exc:
            raise InvalidMergeRequestError(f"Field '{attribute}' expects an integer id.") from exc

    return setter


def _setters(
    text_fields: tuple[str, ...],
    *,
    required: tuple[str, ...] = (),
    reference_fields: tuple[str, ...] = (),
) -> dict[str, FieldSetter]:
    table: dict[str, FieldSetter] = {}
    for name in text_fields:
        table[normalize_field_key(name)] = _text(name, required=name in required)
    for name in reference_fields:
        table[normalize_field_key(name)] = _reference_id(name)
    return table


_SHARED_TEXT_FIELDS = (
    "phone",
    "email",
    "address",
    "city",
    "state",
    "country",
    "postal_code",
    "description",
    "owner_id",
)

FIELD_SETTERS: dict[EntityKind, dict[str, FieldSetter]] = {
    EntityKind.CONTACT: _setters(
        ("first_name", "last_name", "mobile_phone", "job_title", "department", *_SHARED_TEXT_FIELDS),
        required=("first_name", "last_name"),
        reference_fields=("company_id",),
    ),
    EntityKind.COMPANY: _setters(
        ("name", "industry", "website", "size", *_SHARED_TEXT_FIELDS),
        required=("name",),
    ),
}


def apply_field_selections(
    kind: EntityKind,
    record: MergeableRecord,
    selections: Mapping[str, Any],
) -> list[str]:
    """Assign each chosen value onto `record`; returns the keys stored as custom fields."""

    setters = FIELD_SETTERS[kind]
    custom_keys: list[str] = []
    custom_fields = dict(record.custom_fields or {})
    for key, value in selections.items():
        setter = setters.get(normalize_field_key(key))
        if setter is None:
            custom_fields[key] = value
            custom_keys.append(key)
            continue
        setter(record, value)
    if custom_keys:
        # Reassign so the JSON column is flagged dirty.
        record.custom_fields = custom_fields
    return custom_keys
