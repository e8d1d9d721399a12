from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from ..models import MachineSource, TelemetrySample


class BaseSourceAdapter(ABC):
    """Abstract base class for upstream machine master schemas."""

    #: View mode this adapter serves.
    view: str = ''
    #: Territory category whose rows populate the ownership display.
    territory_category: str = ''

    @abstractmethod
    def normalize(self, raw: Mapping[str, Any]) -> MachineSource:
        """Map a raw source document onto the common intermediate record."""
        pass

    @abstractmethod
    def resolve_smr_uptime(self, telemetry: TelemetrySample) -> Any:
        """Pick the SMR timestamp reported for a telemetry sample."""
        pass


def first_or_none(items) -> Optional[Any]:
    return items[0] if items else None
