"""
Record Merger

Composes one canonical MachineInfo from a source document (in either view's
shape), its telemetry sample, alerts, territory and personnel rows, then
applies the permission mask.

Each call handles exactly one machine and holds no state between calls, so
callers may fan merges out across threads freely.
"""

import logging
import math
from decimal import Decimal, InvalidOperation
from typing import Any, List, Mapping, Optional

from . import alert_tally
from .adapters import BaseSourceAdapter, DistributorSourceAdapter, TrunkSourceAdapter
from .adapters.distributor_adapter import BillingLookup
from .config import MergeSettings
from .date_reconciler import validate_date_string
from .exceptions import MalformedInputError, UnsupportedViewError
from .models import (
    AlertRecord,
    MachineInfo,
    PermissionScope,
    PersonnelAssignment,
    TelemetrySample,
    TerritoryAssignment,
)
from .permission_mask import apply_permission_mask
from .territory_resolver import resolve_territory
from .type_classifier import classify_machine_type, validate_machine_id

logger = logging.getLogger(__name__)

PSSR_CATEGORY = '3'

ALERT_FIELDS = {
    'cross_border_in': alert_tally.CROSS_BORDER_IN,
    'cross_border_out': alert_tally.CROSS_BORDER_OUT,
    'contract_termination': alert_tally.CONTRACT_TERMINATION,
    'maintenance_alert': alert_tally.PM_JOB,
    'error_code_alert': alert_tally.ABNORMALITY,
    'general': alert_tally.GENERAL,
    'engine_ov_alert': alert_tally.ENGINE_OV_BY_FUEL,
    'undercarriage_alert': alert_tally.UC_REPLACEMENT,
}


def create_source_adapter(view: str, billing_lookup: Optional[BillingLookup] = None) -> BaseSourceAdapter:
    """Create the source adapter for a view mode."""
    view_key = (view or '').strip().lower()
    if view_key == DistributorSourceAdapter.view:
        return DistributorSourceAdapter(billing_lookup)
    elif view_key == TrunkSourceAdapter.view:
        return TrunkSourceAdapter()
    else:
        raise UnsupportedViewError(f"Unsupported view: {view}")


def _numeric_text(field_name: str, raw_value: Any) -> str:
    # Digit-group underscores are not valid numeric input.
    text = str(raw_value).strip()
    if '_' in text:
        raise MalformedInputError(field_name, raw_value)
    return text


def parse_decimal(field_name: str, raw_value: Optional[str]) -> Decimal:
    if raw_value is None:
        return Decimal('0.0')
    text = _numeric_text(field_name, raw_value)
    try:
        value = Decimal(text)
    except InvalidOperation as e:
        raise MalformedInputError(field_name, raw_value) from e
    if not value.is_finite():
        raise MalformedInputError(field_name, raw_value)
    return value


def parse_float(field_name: str, raw_value: Optional[str]) -> float:
    if raw_value is None:
        return 0.0
    text = _numeric_text(field_name, raw_value)
    try:
        value = float(text)
    except (TypeError, ValueError) as e:
        raise MalformedInputError(field_name, raw_value) from e
    if not math.isfinite(value):
        raise MalformedInputError(field_name, raw_value)
    return value


def _lifecycle_date(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return validate_date_string(value)


def find_pssr_name(personnel_rows: Optional[List[PersonnelAssignment]]) -> Optional[str]:
    for person in personnel_rows or ():
        if person.category_id == PSSR_CATEGORY:
            return person.name
    return None


class RecordMerger:
    """Merges source records into canonical MachineInfo entities."""

    def __init__(self, settings: Optional[MergeSettings] = None):
        self.settings = settings or MergeSettings()

    def merge(self, adapter: BaseSourceAdapter, source_record: Mapping[str, Any],
              telemetry: Optional[List[TelemetrySample]] = None,
              alerts: Optional[List[AlertRecord]] = None,
              territory_rows: Optional[List[TerritoryAssignment]] = None,
              personnel_rows: Optional[List[PersonnelAssignment]] = None) -> MachineInfo:
        """
        Build the unmasked canonical record for one machine.

        Only the first telemetry sample is considered.

        Raises:
            MalformedInputError: If SMR, latitude or longitude text is not numeric
        """
        source = adapter.normalize(source_record)
        territory = resolve_territory(territory_rows, adapter.territory_category, self.settings)

        fields = {
            'machine_type': classify_machine_type(source.machine_type, source.oem, self.settings),
            'full_model': source.full_model,
            'serial': source.serial,
            'pin_number': source.pin_number,
            'machine_category_name': source.category_name,
            'distributor': source.distributor,
            'customer_name': source.customer_name,
            'customer_location': source.customer_location,
            'location_db_name': source.location_db_name,
            'area1': source.area1,
            'area2': source.area2,
            'pssr_name': find_pssr_name(personnel_rows),
            'territory_name': territory.territory_name,
            'territory_owner': territory.owner,
            'territory_group_name': territory.group_name,
            'territory_group_owner': territory.group_owner,
            'build_location': source.build_location,
            'build_date': _lifecycle_date(source.build_date),
            'engine_model': source.engine_model,
            'sale_type': source.sale_type,
            'invoiced_to_distributor_date': _lifecycle_date(source.invoiced_to_distributor_date),
            'fid_date': _lifecycle_date(source.first_in_dirt_date),
            'final_delivery_date': _lifecycle_date(source.final_delivery_date),
            'komatsu_care_alert': 0,
        }

        sample = telemetry[0] if telemetry else None
        if sample is not None:
            fields.update({
                'smr': parse_decimal('smr', sample.smr),
                'smr_uptime': adapter.resolve_smr_uptime(sample),
                'smr_source': sample.smr_source,
                'latitude': parse_float('latitude', sample.latitude),
                'longitude': parse_float('longitude', sample.longitude),
                'etl_machine_id': validate_machine_id(sample.etl_machine_id),
                'gps_uptime': validate_date_string(sample.gps_uptime),
            })

        for field_name, alert_type in ALERT_FIELDS.items():
            fields[field_name] = alert_tally.count_alerts(alerts, alert_type)

        logger.debug(f"Merged {adapter.view} record {source.full_model}/{source.serial}")
        return MachineInfo(**fields)


def reconcile(source_record: Mapping[str, Any],
              telemetry: Optional[List[TelemetrySample]],
              alerts: Optional[List[AlertRecord]],
              territory_rows: Optional[List[TerritoryAssignment]],
              personnel_rows: Optional[List[PersonnelAssignment]],
              view: str,
              permission_scope: Optional[PermissionScope],
              organization_id: Any = None,
              billing_lookup: Optional[BillingLookup] = None,
              settings: Optional[MergeSettings] = None) -> MachineInfo:
    """
    Reconcile one machine into its canonical, permission-masked record.

    Args:
        source_record: Raw master document in the view's shape
        telemetry: Telemetry samples; only the first is used
        alerts: Alert records
        territory_rows: Territory assignments, in received order
        personnel_rows: Personnel assignments
        view: "distributor" or "trunk"
        permission_scope: Caller's scope; None masks every gated field
        organization_id: Owning organization; defaults to the record's own
        billing_lookup: Billing address lookup used by the distributor view
        settings: Merge settings

    Returns:
        MachineInfo: Masked canonical record

    Raises:
        UnsupportedViewError: If view is not a known view mode
        MalformedInputError: If a numeric telemetry field is malformed
    """
    adapter = create_source_adapter(view, billing_lookup)
    merger = RecordMerger(settings)
    info = merger.merge(adapter, source_record, telemetry, alerts, territory_rows, personnel_rows)

    if organization_id is None:
        organization_id = source_record.get('kgpOrgId')
    return apply_permission_mask(permission_scope, organization_id, info, merger.settings)
