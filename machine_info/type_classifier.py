import re
from typing import Any, Optional

from .config import MergeSettings

_INTEGER = re.compile(r'[+-]?\d+')
_INT64_MIN, _INT64_MAX = -2 ** 63, 2 ** 63 - 1


def classify_machine_type(machine_type: Optional[str], oem: Optional[str],
                          settings: Optional[MergeSettings] = None) -> str:
    """Map a raw type code to its display type; unknown codes become ''."""
    settings = settings or MergeSettings()
    if not machine_type:
        return ''
    if machine_type == settings.non_oem_machine_type:
        return oem if oem else machine_type
    if machine_type in settings.product_line_types:
        return machine_type
    return ''


def validate_machine_id(raw_id: Any) -> str:
    """Return the canonical 64-bit integer form of an id, or '' for zero/garbage."""
    if raw_id is None:
        return ''
    text = str(raw_id).strip()
    if not _INTEGER.fullmatch(text):
        return ''
    number = int(text)
    if number == 0 or not _INT64_MIN <= number <= _INT64_MAX:
        return ''
    return str(number)
