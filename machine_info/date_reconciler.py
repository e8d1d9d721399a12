"""
Date Reconciler

Resolves the authoritative "last known" timestamp of a machine from its GPS
update time and its SMR update time. Either candidate may arrive as text, as
an already-parsed datetime (pandas hands back Timestamps), or not at all.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Optional

import dateutil.parser
import pandas as pd

logger = logging.getLogger(__name__)


class DateMode(Enum):
    """
    How a reconciled date is handed back to the caller.

    The record merger only uses COMPARE (distributor view). The trunk view
    never compares its two timestamps, so it validates them directly with
    validate_date_string. STRING serves callers outside the merger that want
    the winning timestamp as a date string.
    """
    COMPARE = 'compare'  # the chosen original input, as compared
    STRING = 'string'    # the chosen input, validated into a date string


@dataclass(frozen=True)
class DateCandidate:
    """Tagged date input: parsed, text, or absent."""
    kind: str
    raw: Any = None

    PARSED = 'parsed'
    TEXT = 'text'
    ABSENT = 'absent'

    @classmethod
    def of(cls, raw: Any) -> 'DateCandidate':
        if _is_missing(raw):
            return cls(cls.ABSENT)
        if isinstance(raw, (datetime, date)):
            return cls(cls.PARSED, raw)
        return cls(cls.TEXT, raw)

    @property
    def present(self) -> bool:
        return self.kind != self.ABSENT

    def comparable(self) -> Optional[datetime]:
        """Return a datetime for comparison, or None when it cannot be parsed."""
        if self.kind == self.PARSED:
            if isinstance(self.raw, datetime):
                return self.raw
            return datetime.combine(self.raw, time())
        if self.kind == self.TEXT:
            return parse_date(self.raw)
        return None


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a textual date, returning None instead of raising."""
    if not isinstance(value, str):
        return None
    try:
        return dateutil.parser.parse(value)
    except (ValueError, OverflowError) as e:
        logger.debug(f"Unparsable date {value!r}: {e}")
        return None


def validate_date_string(value: Any) -> Optional[str]:
    """
    Return the input unchanged if it is a valid date string, else None.

    Pre-parsed datetimes are rendered in ISO format.
    """
    candidate = DateCandidate.of(value)
    if candidate.kind == DateCandidate.PARSED:
        return candidate.raw.isoformat()
    if candidate.kind == DateCandidate.TEXT and parse_date(candidate.raw) is not None:
        return candidate.raw
    return None


def _present_or_none(value: Any) -> Any:
    return value if DateCandidate.of(value).present else None


def latest_date(gps_uptime: Any, smr_uptime: Any, mode: DateMode = DateMode.COMPARE) -> Any:
    """
    Pick the most current of the GPS and SMR update times.

    GPS wins only when it is strictly newer than SMR. When one side fails to
    parse, the other side's original input is returned. Any fault while
    parsing or comparing yields None rather than an error.

    Args:
        gps_uptime: GPS update time (text, datetime, or None)
        smr_uptime: SMR update time (text, datetime, or None)
        mode: COMPARE returns the chosen original input, STRING validates it
            into a date string

    Returns:
        The chosen date in the requested representation, or None
    """
    try:
        gps = DateCandidate.of(gps_uptime)
        smr = DateCandidate.of(smr_uptime)

        if gps.present and smr.present:
            gps_date = gps.comparable()
            smr_date = smr.comparable()
            if gps_date is not None and smr_date is not None and gps_date > smr_date:
                chosen = gps_uptime
            elif gps_date is None:
                chosen = _present_or_none(smr_uptime)
            elif smr_date is None:
                chosen = _present_or_none(gps_uptime)
            else:
                chosen = _present_or_none(smr_uptime)
        elif gps.present:
            chosen = gps_uptime
        else:
            chosen = _present_or_none(smr_uptime)
    except (TypeError, ValueError, OverflowError) as e:
        # Mixed naive/aware datetimes land here.
        logger.debug(f"Could not reconcile dates {gps_uptime!r} / {smr_uptime!r}: {e}")
        return None

    if mode is DateMode.STRING:
        return validate_date_string(chosen)
    return chosen
