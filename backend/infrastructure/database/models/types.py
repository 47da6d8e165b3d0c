"""
Custom column types.
"""

import json
from typing import Any, Optional

from sqlalchemy import Text
from sqlalchemy.types import TypeDecorator

from core.domain.localization import LocalizedText, parse_localized


class LocalizedJSON(TypeDecorator):
    """Localized text stored as a JSON-encoded object in a text column.

    Values are always ``dict[str, str]`` in Python. Rows written before the
    JSON encoding existed hold a bare string and load as ``{"en": value}``.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect) -> Optional[str]:
        if value is None:
            return None
        return json.dumps(parse_localized(value), ensure_ascii=False)

    def process_result_value(self, value: Optional[str], dialect) -> Optional[LocalizedText]:
        if value is None:
            return None
        return parse_localized(value)
