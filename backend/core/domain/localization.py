"""Localized text fields.

A localized field is a mapping of language code to string. ``en`` is
mandatory and is the fallback for any other language.
"""
import json
from typing import Any, Mapping, Optional

FALLBACK_LANGUAGE = "en"

LocalizedText = dict[str, str]


def get_localized_content(field: Optional[Mapping[str, str]], lang: str = FALLBACK_LANGUAGE) -> str:
    """Return the text for *lang*, falling back to English, then to an empty string."""
    if not field:
        return ""
    return field.get(lang) or field.get(FALLBACK_LANGUAGE) or ""


def parse_localized(value: Any) -> LocalizedText:
    """Coerce a stored or submitted value into a localized map.

    Accepts a mapping, a JSON-encoded mapping, or a bare string (treated as
    English). Empty values are dropped.
    """
    if value is None:
        return {}
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return {}
        try:
            decoded = json.loads(stripped)
        except json.JSONDecodeError:
            return {FALLBACK_LANGUAGE: value}
        if isinstance(decoded, dict):
            value = decoded
        elif isinstance(decoded, str):
            return {FALLBACK_LANGUAGE: decoded}
        else:
            return {FALLBACK_LANGUAGE: value}
    if not isinstance(value, Mapping):
        raise TypeError(f"Localized value must be a mapping or string, got {type(value).__name__}")
    return {
        str(lang): str(text)
        for lang, text in value.items()
        if text is not None and str(text).strip()
    }


def has_required_language(field: Mapping[str, str]) -> bool:
    return bool(field.get(FALLBACK_LANGUAGE, "").strip())


def restrict_languages(field: Mapping[str, str], languages: list[str]) -> LocalizedText:
    """Drop entries for languages the platform does not publish in."""
    return {lang: text for lang, text in field.items() if lang in languages}
