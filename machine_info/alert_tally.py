from typing import Iterable, Optional

from .models import AlertRecord

CROSS_BORDER_IN = 'Cross Border In'
CROSS_BORDER_OUT = 'Cross Border Out'
CONTRACT_TERMINATION = 'Contract Termination'
PM_JOB = 'PM Job'
ABNORMALITY = 'Abnormality'
GENERAL = 'General'
ENGINE_OV_BY_FUEL = 'Engine OV By Fuel'
UC_REPLACEMENT = 'UC Replacement'


def _normalize(alert_type: Optional[str]) -> str:
    return (alert_type or '').strip().lower()


def count_alerts(alerts: Optional[Iterable[AlertRecord]], alert_type: str) -> int:
    """Count alerts whose trimmed, case-folded type equals alert_type."""
    if not alerts:
        return 0
    target = _normalize(alert_type)
    return sum(1 for alert in alerts if _normalize(alert.alert_type) == target)
