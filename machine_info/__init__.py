from .config import MergeSettings, ReconcileConfig
from .models import MachineGridRow, MachineInfo, PermissionScope
from .record_merger import RecordMerger, reconcile

__all__ = [
    'MachineGridRow',
    'MachineInfo',
    'MergeSettings',
    'PermissionScope',
    'RecordMerger',
    'ReconcileConfig',
    'reconcile',
]
