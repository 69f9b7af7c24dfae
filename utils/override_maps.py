"""Pure helpers for per-language override maps.

Every helper returns a *new* map and never mutates its input, so the writer
can stage a complete change before committing it. All of them enforce the
absent-vs-empty invariant: a language entry with nothing in it is removed,
and a map with no languages left is returned as ``None``.
"""
from collections.abc import Mapping
from typing import Any

from models.language_settings import LanguageSettings


def is_empty_value(value: Any) -> bool:
    """True for values that mean "clear this override" (None or the empty string).

    0 and False are real values and are never treated as empty.
    """
    if value is None:
        return True
    return isinstance(value, str) and value == ""


def normalize_settings_map(
    overrides: Mapping[str, LanguageSettings] | None,
) -> dict[str, LanguageSettings] | None:
    if not overrides:
        return None
    cleaned = {lang: s for lang, s in overrides.items() if s is not None and not s.is_empty()}
    return cleaned or None


def normalize_text_map(overrides: Mapping[str, str | None] | None) -> dict[str, str] | None:
    if not overrides:
        return None
    cleaned = {lang: text for lang, text in overrides.items() if not is_empty_value(text)}
    return cleaned or None


def update_settings_map(
    overrides: Mapping[str, LanguageSettings] | None,
    language: str,
    updates: Mapping[str, Any],
) -> dict[str, LanguageSettings] | None:
    """Apply field updates to one language entry of a settings override map.

    Empty values delete the field. The merged entry is validated as a whole,
    so a bad value raises before anything is returned.
    """
    current = overrides.get(language) if overrides else None
    merged: dict[str, Any] = current.present() if current is not None else {}
    for key, value in updates.items():
        if is_empty_value(value):
            merged.pop(key, None)
        else:
            merged[key] = value

    updated = dict(overrides or {})
    if merged:
        updated[language] = LanguageSettings.model_validate(merged)
    else:
        updated.pop(language, None)
    return normalize_settings_map(updated)


def update_text_map(
    overrides: Mapping[str, str] | None,
    language: str,
    text: str | None,
) -> dict[str, str] | None:
    updated = dict(overrides or {})
    if is_empty_value(text):
        updated.pop(language, None)
    else:
        if not isinstance(text, str):
            raise TypeError(f"text override for {language!r} must be a string, got {type(text).__name__}")
        updated[language] = text
    return normalize_text_map(updated)


def drop_language(
    overrides: Mapping[str, LanguageSettings] | None,
    language: str,
) -> dict[str, LanguageSettings] | None:
    """Remove a language entry entirely (the "disable override" toggle)."""
    updated = dict(overrides or {})
    updated.pop(language, None)
    return normalize_settings_map(updated)
