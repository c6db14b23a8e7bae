# app/utils/changes.py

from typing import Any


def collect_changes(current: Any, updates: dict) -> list[str]:
    """Human-readable "field: 'old' → 'new'" lines for the activity log."""
    changes: list[str] = []
    for field, new_value in updates.items():
        old_value = getattr(current, field)
        if new_value != old_value:
            changes.append(f"{field}: '{old_value}' → '{new_value}'")
    return changes
