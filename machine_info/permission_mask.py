"""
Permission Mask

Redacts customer, personnel and map fields of a reconciled record when the
caller's permission scope does not cover the record's organization.
"""

import dataclasses
import logging
from typing import Any, Iterable, Optional

from .config import MergeSettings
from .models import MachineInfo, PermissionScope

logger = logging.getLogger(__name__)

VISIBLE_SUFFIX_LENGTH = 3


def mask_text(value: Optional[str], sentinel: str = '***') -> str:
    """
    Mask all but the last three characters of a value.

    Empty values and values shorter than three characters collapse to the
    sentinel. The sentinel itself passes through unchanged.

    Example:
        "Johnson Excavating" -> "***************ing"
    """
    if value == sentinel:
        return value
    if not value or len(value) < VISIBLE_SUFFIX_LENGTH:
        return sentinel
    return value[-VISIBLE_SUFFIX_LENGTH:].rjust(len(value), '*')


def is_in_scope(org_ids: Optional[Iterable[Any]], organization_id: Any) -> bool:
    """Case-insensitive membership check; a missing scope or org id is never in scope."""
    if not org_ids or organization_id is None:
        return False
    target = str(organization_id).strip().lower()
    return any(str(org_id).strip().lower() == target for org_id in org_ids)


def apply_permission_mask(scope: Optional[PermissionScope], organization_id: Any,
                          info: MachineInfo,
                          settings: Optional[MergeSettings] = None) -> MachineInfo:
    """
    Return a copy of info redacted according to scope.

    Args:
        scope: Caller's permission scope; None masks everything
        organization_id: Organization that owns the record
        info: Reconciled, unmasked record
        settings: Merge settings providing the mask sentinel

    Returns:
        MachineInfo: Masked copy (the input is left untouched)
    """
    settings = settings or MergeSettings()
    scope = scope or PermissionScope.empty()
    changes = {}

    if not is_in_scope(scope.customer_name_org_ids, organization_id):
        changes['customer_name'] = mask_text(info.customer_name, settings.mask_sentinel)

    if not is_in_scope(scope.personal_info_org_ids, organization_id):
        changes['pssr_name'] = mask_text(info.pssr_name, settings.mask_sentinel)

    if not is_in_scope(scope.map_org_ids, organization_id):
        changes['latitude'] = 0.0
        changes['longitude'] = 0.0

    if changes:
        logger.debug(f"Masked {sorted(changes)} for organization {organization_id}")
    return dataclasses.replace(info, **changes)
