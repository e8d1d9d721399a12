from typing import Any, Mapping

from ..date_reconciler import validate_date_string
from ..models import MachineSource, TelemetrySample
from .base_source_adapter import BaseSourceAdapter


class TrunkSourceAdapter(BaseSourceAdapter):
    """Adapter for the trunk serial master schema (customer fields copied as-is)."""

    view = 'trunk'
    territory_category = '2'

    def normalize(self, raw: Mapping[str, Any]) -> MachineSource:
        return MachineSource(
            machine_type=raw.get('machineType'),
            oem=raw.get('oem'),
            full_model=raw.get('salesModel'),
            serial=raw.get('sN'),
            pin_number=raw.get('pinNumber'),
            category_name=raw.get('productType'),
            distributor=raw.get('organizationName'),
            organization_id=raw.get('kgpOrgId'),
            location_db_name=raw.get('locationDbName'),
            area1=raw.get('area1'),
            area2=raw.get('area2'),
            customer_name=raw.get('customerName'),
            customer_location=raw.get('customerAddress'),
            build_location=raw.get('buildLocation'),
            build_date=raw.get('buildDate'),
            engine_model=raw.get('engineModel'),
            sale_type=raw.get('salesType'),
            invoiced_to_distributor_date=raw.get('invoicedToDistributorDate'),
            first_in_dirt_date=raw.get('firstInDirtDate'),
            final_delivery_date=raw.get('finalDeliveryDate'),
        )

    def resolve_smr_uptime(self, telemetry: TelemetrySample) -> Any:
        # No GPS comparison here: a valid SMR time wins, GPS is only a fallback.
        smr_uptime = validate_date_string(telemetry.smr_uptime)
        if smr_uptime is not None:
            return smr_uptime
        return validate_date_string(telemetry.gps_uptime)
