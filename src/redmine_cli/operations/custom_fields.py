"""Parsing of ``KEY=VALUE`` custom field assignments."""

from __future__ import annotations

from redmine_cli.redmine.errors import RedmineValidationError
from redmine_cli.redmine.models import CustomField, CustomFieldEntry, CustomFieldValue


def parse_assignment(assignment: str) -> tuple[str, str]:
    key, sep, value = assignment.partition("=")
    key = key.strip()
    if not sep or not key:
        raise RedmineValidationError(
            f"Invalid custom field '{assignment}': expected format KEY=VALUE"
        )
    return key, value


def resolve_custom_fields(
    assignments: list[str], known: list[CustomField] | None
) -> list[CustomFieldEntry]:
    """Map ``KEY=VALUE`` strings to id-addressed entries.

    A numeric KEY is taken as the field id. Any other KEY is matched by exact
    name against ``known``, the custom fields an existing issue carries. Values
    of multi-value fields are split on commas.
    """
    by_name = {field.name: field for field in known or []}
    entries: list[CustomFieldEntry] = []
    for assignment in assignments:
        key, raw = parse_assignment(assignment)
        field = None
        if key.isdigit():
            field_id = int(key)
            field = next((f for f in known or [] if f.id == field_id), None)
        elif known is None:
            raise RedmineValidationError(
                f"Custom field '{key}' must be given by numeric id when creating an issue"
            )
        elif key in by_name:
            field = by_name[key]
            field_id = field.id
        else:
            available = ", ".join(sorted(by_name)) or "none"
            raise RedmineValidationError(
                f"Unknown custom field '{key}' (available: {available})"
            )
        entries.append(CustomFieldEntry(id=field_id, value=_coerce(raw, field)))
    return entries


def _coerce(raw: str, field: CustomField | None) -> CustomFieldValue:
    if field is not None and field.multiple:
        return [part.strip() for part in raw.split(",") if part.strip()]
    return raw
