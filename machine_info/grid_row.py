from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Optional

from .config import MergeSettings
from .date_reconciler import latest_date
from .models import MachineGridRow, TerritoryAssignment, parse_list
from .record_merger import parse_decimal
from .territory_resolver import GROUP_TRACK, OWNER_TRACK, resolve_track

GRID_TERRITORY_CATEGORY = '3'


def format_smr(smr: Any) -> str:
    """Render SMR hours as "1,234.5"; absent or zero renders as ''."""
    if smr is None:
        return ''
    value = parse_decimal('smr', smr)
    if value == 0:
        return ''
    rounded = value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    return f"{rounded:,.2f}".rstrip('0').rstrip('.')


def summarize_grid_row(row: Mapping[str, Any], settings: Optional[MergeSettings] = None) -> MachineGridRow:
    """Map one bulk grid row onto a MachineGridRow."""
    settings = settings or MergeSettings()
    territory = parse_list(row.get('territory'), TerritoryAssignment)
    label = settings.general_label

    territory_owner = resolve_track(territory, GRID_TERRITORY_CATEGORY, OWNER_TRACK, label)
    pssr_name = '' if territory_owner == label else row.get('pssrName')

    return MachineGridRow(
        machine_type=row.get('machineType'),
        customer_name=row.get('customerName'),
        full_model=row.get('fullModel'),
        serial_number=row.get('serialNumber'),
        smr=format_smr(row.get('smr')),
        warranty_expiration=row.get('warrantyExpiration'),
        first_in_dirt=row.get('firstInDirt'),
        delivery_date=row.get('deliveryDate'),
        machine_status=row.get('machineStatus'),
        org_name=row.get('orgName'),
        area1=row.get('area1'),
        area2=row.get('area2'),
        location_distributor=row.get('locationDistributor'),
        last_communication_date=latest_date(row.get('gpsUpTime'), row.get('smrUpTime')),
        territory_owner=territory_owner,
        territory_group_owner=resolve_track(territory, GRID_TERRITORY_CATEGORY, GROUP_TRACK, label),
        pssr_name=pssr_name,
        branch=row.get('branch'),
    )
