import logging
from typing import Any, Callable, Mapping, Optional

from ..date_reconciler import DateMode, latest_date
from ..models import BillingAddress, MachineSource, TelemetrySample
from .base_source_adapter import BaseSourceAdapter, first_or_none

logger = logging.getLogger(__name__)

BillingLookup = Callable[[str, str], Optional[BillingAddress]]


class DistributorSourceAdapter(BaseSourceAdapter):
    """
    Adapter for the distributor machine master schema.

    Customer names come from a localized name list; the customer location is
    looked up from billing data keyed by organization and account number.
    """

    view = 'distributor'
    territory_category = '3'

    def __init__(self, billing_lookup: Optional[BillingLookup] = None):
        self.billing_lookup = billing_lookup

    def normalize(self, raw: Mapping[str, Any]) -> MachineSource:
        localized_name = first_or_none(raw.get('customerNameML')) or {}
        organization_id = raw.get('kgpOrgId')

        return MachineSource(
            machine_type=raw.get('machineType'),
            oem=raw.get('oem'),
            full_model=raw.get('trModel'),
            serial=raw.get('sN'),
            pin_number=raw.get('pin'),
            category_name=raw.get('productType'),
            distributor=raw.get('kgpOrgName'),
            organization_id=organization_id,
            location_db_name=raw.get('locationDbName'),
            area1=raw.get('area1'),
            area2=raw.get('area2'),
            customer_name=localized_name.get('name') or '',
            customer_location=self._customer_location(organization_id, localized_name.get('accNo')),
            build_location=raw.get('buildLocationDMM'),
            build_date=raw.get('buildDateDMM'),
            engine_model=raw.get('engineModel'),
            sale_type=raw.get('salesType'),
            invoiced_to_distributor_date=raw.get('invoicedToDistributorDateDMM'),
            first_in_dirt_date=raw.get('firstInDirtDateDMM'),
            final_delivery_date=raw.get('finalDeliveryDate'),
        )

    def _customer_location(self, organization_id: Any, account_number: Any) -> Optional[str]:
        org_text = '' if organization_id is None else str(organization_id).strip()
        if org_text in ('', '0') or not account_number or self.billing_lookup is None:
            return None

        address = self.billing_lookup(org_text, str(account_number))
        if address is None or not address.street1:
            logger.debug(f"No billing address for org {org_text}, account {account_number}")
            return None
        return address.format_location()

    def resolve_smr_uptime(self, telemetry: TelemetrySample) -> Any:
        return latest_date(telemetry.gps_uptime, telemetry.smr_uptime, DateMode.COMPARE)
