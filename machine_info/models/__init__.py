from .machine_info import MachineGridRow, MachineInfo
from .source_records import (
    AlertRecord,
    BillingAddress,
    MachineSource,
    PermissionScope,
    PersonnelAssignment,
    TelemetrySample,
    TerritoryAssignment,
    parse_list,
)

__all__ = [
    'AlertRecord',
    'BillingAddress',
    'MachineGridRow',
    'MachineInfo',
    'MachineSource',
    'PermissionScope',
    'PersonnelAssignment',
    'TelemetrySample',
    'TerritoryAssignment',
    'parse_list',
]
