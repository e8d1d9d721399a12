from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Set


def _text(value: Any) -> Optional[str]:
    """Coerce a raw document value to text, keeping None as None."""
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _category(value: Any) -> str:
    return '' if value is None else str(value).strip()


@dataclass(frozen=True)
class TelemetrySample:
    """Latest telemetry reading for one machine."""
    gps_uptime: Any = None
    smr_uptime: Any = None
    smr: Optional[str] = None
    smr_source: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    etl_machine_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TelemetrySample':
        # Timestamps stay untyped so pre-parsed datetimes survive the trip.
        return cls(
            gps_uptime=data.get('gpsUpTime'),
            smr_uptime=data.get('smrUpTime'),
            smr=_text(data.get('smr')),
            smr_source=_text(data.get('smrSource')),
            latitude=_text(data.get('lat')),
            longitude=_text(data.get('lon')),
            etl_machine_id=_text(data.get('etlMachineId')),
        )


@dataclass(frozen=True)
class TerritoryAssignment:
    """One row of a categorized territory ownership hierarchy."""
    category_id: str
    territory_name: Optional[str] = None
    territory_owner: Optional[str] = None
    group_name: Optional[str] = None
    group_owner: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TerritoryAssignment':
        return cls(
            category_id=_category(data.get('catId')),
            territory_name=_text(data.get('territoryName')),
            territory_owner=_text(data.get('territoryOwner')),
            group_name=_text(data.get('groupName')),
            group_owner=_text(data.get('groupOwner')),
        )


@dataclass(frozen=True)
class PersonnelAssignment:
    """A person assigned to a machine under a category (PSSR is category 3)."""
    category_id: str
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'PersonnelAssignment':
        return cls(category_id=_category(data.get('catId')), name=_text(data.get('name')))


@dataclass(frozen=True)
class AlertRecord:
    """A machine alert; only the type takes part in reconciliation."""
    alert_type: Optional[str]
    payload: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'AlertRecord':
        payload = {key: value for key, value in data.items() if key != 'alertType'}
        return cls(alert_type=_text(data.get('alertType')), payload=payload or None)


@dataclass(frozen=True)
class BillingAddress:
    """Customer billing address returned by the billing lookup."""
    street1: Optional[str] = None
    street2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None

    def format_location(self) -> str:
        parts = [self.street1, ' ', self.street2, ', ', self.city, ', ',
                 self.state, ', ', self.zip_code, ', ', self.country]
        return ''.join(part or '' for part in parts)


@dataclass(frozen=True)
class PermissionScope:
    """
    Organization ids a caller may see unmasked, one set per field group.

    A set of None means the scope could not be retrieved; it masks exactly
    like an empty set.
    """
    customer_name_org_ids: Optional[Set[str]] = None
    personal_info_org_ids: Optional[Set[str]] = None
    map_org_ids: Optional[Set[str]] = None

    @classmethod
    def empty(cls) -> 'PermissionScope':
        return cls()


@dataclass(frozen=True)
class MachineSource:
    """Common intermediate record both source shapes normalize into."""
    machine_type: Optional[str] = None
    oem: Optional[str] = None
    full_model: Optional[str] = None
    serial: Optional[str] = None
    pin_number: Optional[str] = None
    category_name: Optional[str] = None
    distributor: Optional[str] = None
    organization_id: Optional[str] = None
    location_db_name: Optional[str] = None
    area1: Optional[str] = None
    area2: Optional[str] = None
    customer_name: Optional[str] = None
    customer_location: Optional[str] = None
    build_location: Optional[str] = None
    build_date: Optional[str] = None
    engine_model: Optional[str] = None
    sale_type: Optional[str] = None
    invoiced_to_distributor_date: Optional[str] = None
    first_in_dirt_date: Optional[str] = None
    final_delivery_date: Optional[str] = None


def parse_list(raw_items: Optional[List[Mapping[str, Any]]], record_type):
    """Build typed records from a raw list, keeping None as None."""
    if raw_items is None:
        return None
    return [record_type.from_dict(item) for item in raw_items if item is not None]
