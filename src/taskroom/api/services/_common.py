"""Helpers shared by the API services."""

from typing import Any

from pydantic import BaseModel


def supplied_fields(update: BaseModel) -> dict[str, Any]:
    """Fields of a merge-patch request that should overwrite stored values.

    A value counts as supplied only when it is neither None nor an empty
    string; everything else keeps the stored value.

    Args:
        update: Parsed update request

    Returns:
        Mapping of field name to new value
    """
    changes: dict[str, Any] = {}
    for name, value in update.model_dump().items():
        if value is None or value == "":
            continue
        changes[name] = getattr(value, "value", value)
    return changes
