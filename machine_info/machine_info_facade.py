import dataclasses
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from database.adapters.base_store_adapter import BaseMachineStoreAdapter
from database.adapters.postgres_adapter import create_machine_store_adapter

from .config import MergeSettings, ReconcileConfig
from .models import (
    AlertRecord,
    MachineInfo,
    PersonnelAssignment,
    TelemetrySample,
    TerritoryAssignment,
    parse_list,
)
from .record_merger import create_source_adapter, reconcile

logger = logging.getLogger(__name__)


class MachineInfoFacade:
    """High-level facade: fetch, reconcile and mask machine records."""

    def __init__(self, store: BaseMachineStoreAdapter, settings: Optional[MergeSettings] = None,
                 max_workers: int = 4):
        """
        Initialize the facade.

        Args:
            store: Adapter providing machine documents, billing and permission data
            settings: Optional merge settings. If None, loads from environment.
            max_workers: Default worker count for batch reconciliation
        """
        self.store = store
        self.settings = settings or ReconcileConfig.get_settings()
        self.max_workers = max_workers

    def get_machine_info(self, full_model: str, serial: str, view: str, user_email: str,
                         organization_id: Optional[str] = None) -> Optional[MachineInfo]:
        """
        Get the reconciled, permission-masked record for one machine.

        Args:
            full_model: Machine model
            serial: Machine serial number
            view: "distributor" or "trunk"
            user_email: Caller whose permission scope gates masking
            organization_id: Distributor organization (distributor view only)

        Returns:
            MachineInfo, or None when the store has no such machine
        """
        # Fail on an unknown view before touching the store.
        create_source_adapter(view)

        scope = self.store.fetch_permission_scope(view, user_email)
        document = self.store.fetch_machine_document(view, full_model, serial, organization_id)
        if document is None:
            return None

        return reconcile(
            document,
            telemetry=parse_list(document.get('telemetry'), TelemetrySample),
            alerts=parse_list(document.get('machineAlerts'), AlertRecord),
            territory_rows=parse_list(document.get('territory'), TerritoryAssignment),
            personnel_rows=parse_list(document.get('pic'), PersonnelAssignment),
            view=view,
            permission_scope=scope,
            organization_id=document.get('kgpOrgId'),
            billing_lookup=self.store.fetch_billing_address,
            settings=self.settings,
        )

    def get_machine_infos(self, keys: Iterable[Sequence[str]], view: str, user_email: str,
                          max_workers: Optional[int] = None) -> List[Optional[MachineInfo]]:
        """
        Reconcile many machines concurrently.

        Args:
            keys: (full_model, serial) or (full_model, serial, organization_id) tuples
            view: View mode shared by every key
            user_email: Caller whose permission scope gates masking
            max_workers: Thread count; defaults to the facade's max_workers

        Returns:
            Results in the same order as keys (None for machines not found)
        """
        keys = list(keys)
        workers = max_workers or self.max_workers
        logger.info(f"Reconciling {len(keys)} {view} machines with {workers} workers")

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self.get_machine_info, key[0], key[1], view, user_email,
                                key[2] if len(key) > 2 else None)
                for key in keys
            ]
            return [future.result() for future in futures]

    @staticmethod
    def to_dataframe(infos: Iterable[Optional[MachineInfo]]) -> pd.DataFrame:
        """Flatten reconciled records into a DataFrame, skipping missing machines."""
        rows = [dataclasses.asdict(info) for info in infos if info is not None]
        columns = [field.name for field in dataclasses.fields(MachineInfo)]
        return pd.DataFrame(rows, columns=columns)


def create_machine_info_facade() -> MachineInfoFacade:
    """Create the facade backed by the configured machine store."""
    config = ReconcileConfig.get_database_config()
    return MachineInfoFacade(
        store=create_machine_store_adapter(),
        settings=ReconcileConfig.get_settings(),
        max_workers=config['max_workers'],
    )
