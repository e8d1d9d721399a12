from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional


@dataclass(frozen=True)
class MachineInfo:
    """
    Canonical reconciled record for one machine.

    Instances are built fresh per request and only ever replaced, never
    mutated, so a masked record cannot be un-masked downstream.
    """
    machine_type: str = ''
    full_model: Optional[str] = None
    serial: Optional[str] = None
    pin_number: Optional[str] = None
    machine_category_name: Optional[str] = None

    distributor: Optional[str] = None
    customer_name: Optional[str] = None
    customer_location: Optional[str] = None
    location_db_name: Optional[str] = None
    area1: Optional[str] = None
    area2: Optional[str] = None
    pssr_name: Optional[str] = None

    territory_name: str = ''
    territory_owner: str = ''
    territory_group_name: str = ''
    territory_group_owner: str = ''

    smr: Decimal = Decimal('0.0')
    smr_uptime: Any = ''
    smr_source: Optional[str] = ''
    latitude: float = 0.0
    longitude: float = 0.0
    etl_machine_id: str = ''
    gps_uptime: Optional[str] = ''

    build_location: Optional[str] = None
    build_date: Optional[str] = None
    engine_model: Optional[str] = None
    sale_type: Optional[str] = None
    invoiced_to_distributor_date: Optional[str] = None
    fid_date: Optional[str] = None
    final_delivery_date: Optional[str] = None

    cross_border_in: int = 0
    cross_border_out: int = 0
    contract_termination: int = 0
    maintenance_alert: int = 0
    error_code_alert: int = 0
    general: int = 0
    engine_ov_alert: int = 0
    undercarriage_alert: int = 0
    # Reserved category, always reported as zero.
    komatsu_care_alert: int = 0


@dataclass(frozen=True)
class MachineGridRow:
    """One summarized row of the bulk machine grid."""
    machine_type: Optional[str] = None
    customer_name: Optional[str] = None
    full_model: Optional[str] = None
    serial_number: Optional[str] = None
    smr: str = ''
    warranty_expiration: Any = None
    first_in_dirt: Any = None
    delivery_date: Any = None
    machine_status: Optional[str] = None
    org_name: Optional[str] = None
    area1: Optional[str] = None
    area2: Optional[str] = None
    location_distributor: Optional[str] = None
    last_communication_date: Any = None
    territory_owner: str = ''
    territory_group_owner: str = ''
    pssr_name: Optional[str] = None
    branch: Optional[str] = None
