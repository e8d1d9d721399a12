"""
Tests for PostgresMachineStoreAdapter against an on-disk SQLite database.
"""

import json

import pandas as pd
import pytest
from sqlalchemy import create_engine, text

from database.adapters.postgres_adapter import (
    CUSTOMER_MASTER_TABLE,
    DISTRIBUTOR_MACHINE_TABLE,
    PERMISSION_SCOPE_TABLE,
    TRUNK_SERIAL_TABLE,
    PostgresMachineStoreAdapter,
    clean_nan,
)
from machine_info.config import MergeSettings
from machine_info.exceptions import MachineStoreError, UnsupportedViewError
from machine_info.machine_info_facade import MachineInfoFacade

LIST_COLUMNS = ["telemetry", "machineAlerts", "territory", "pic", "customerNameML"]


def to_row(document):
    row = dict(document)
    for column in LIST_COLUMNS:
        if column in row:
            row[column] = json.dumps(row[column]) if row[column] is not None else None
    return row


@pytest.fixture
def engine(tmp_path, distributor_document, trunk_document):
    engine = create_engine(f"sqlite:///{tmp_path / 'machines.db'}")

    pd.DataFrame([to_row(distributor_document)]).to_sql(DISTRIBUTOR_MACHINE_TABLE, engine, index=False)
    pd.DataFrame([to_row(trunk_document)]).to_sql(TRUNK_SERIAL_TABLE, engine, index=False)
    pd.DataFrame([{
        "orgid": "1001", "accno": "C-778", "billingaddress1": "400 Lake St",
        "billingaddress2": None, "billingcity": "Chicago", "billingstate": "IL",
        "billingzip": "60601", "billingcountry": "US",
    }]).to_sql(CUSTOMER_MASTER_TABLE, engine, index=False)
    pd.DataFrame([
        {"user_email": "Analyst@Example.com", "view_name": "distributor", "scope_type": "customer_name", "org_id": "1001"},
        {"user_email": "analyst@example.com", "view_name": "distributor", "scope_type": "map", "org_id": "1001"},
        {"user_email": "analyst@example.com", "view_name": "trunk", "scope_type": "personal_info", "org_id": "2002"},
        {"user_email": "other@example.com", "view_name": "distributor", "scope_type": "map", "org_id": "9999"},
    ]).to_sql(PERMISSION_SCOPE_TABLE, engine, index=False)

    yield engine
    engine.dispose()


@pytest.fixture
def adapter(engine):
    return PostgresMachineStoreAdapter(engine=engine)


class TestPostgresMachineStoreAdapter:
    """Tests for PostgresMachineStoreAdapter."""

    def test_requires_url_or_engine(self):
        with pytest.raises(ValueError):
            PostgresMachineStoreAdapter()

    def test_fetch_distributor_document(self, adapter):
        document = adapter.fetch_machine_document("distributor", "PC210LC-11", "A12345", "1001")

        assert document["kgpOrgId"] == "1001"
        assert document["oem"] is None
        assert document["customerNameML"] == [{"name": "Johnson Excavating", "accNo": "C-778"}]
        assert [row["catId"] for row in document["territory"]] == ["3", "2"]
        assert document["telemetry"][0]["smr"] == "1200.5"

    def test_distributor_lookup_is_org_scoped(self, adapter):
        assert adapter.fetch_machine_document("distributor", "PC210LC-11", "A12345", "2002") is None

    def test_fetch_trunk_document(self, adapter):
        document = adapter.fetch_machine_document("trunk", "D61PXi-24", "B5001")

        assert document["customerName"] == "Gulf Coast Paving"
        assert document["machineAlerts"] is None
        assert document["pic"] is None

    def test_unknown_view(self, adapter):
        with pytest.raises(UnsupportedViewError):
            adapter.fetch_machine_document("regional", "D61PXi-24", "B5001")

    def test_fetch_billing_address(self, adapter):
        address = adapter.fetch_billing_address("1001", "C-778")

        assert address.street1 == "400 Lake St"
        assert address.street2 is None
        assert address.format_location() == "400 Lake St , Chicago, IL, 60601, US"

    def test_fetch_billing_address_missing(self, adapter):
        assert adapter.fetch_billing_address("1001", "NOPE") is None

    def test_fetch_permission_scope(self, adapter):
        scope = adapter.fetch_permission_scope("distributor", "analyst@example.com")

        assert scope.customer_name_org_ids == {"1001"}
        assert scope.map_org_ids == {"1001"}
        assert scope.personal_info_org_ids == set()

    def test_permission_lookup_failure_fails_closed(self, adapter, engine):
        with engine.begin() as conn:
            conn.execute(text(f"DROP TABLE {PERMISSION_SCOPE_TABLE}"))

        scope = adapter.fetch_permission_scope("distributor", "analyst@example.com")

        assert scope.customer_name_org_ids is None
        assert scope.personal_info_org_ids is None
        assert scope.map_org_ids is None

    def test_missing_scope_table_masks_facade_output(self, adapter, engine):
        with engine.begin() as conn:
            conn.execute(text(f"DROP TABLE {PERMISSION_SCOPE_TABLE}"))
        facade = MachineInfoFacade(adapter, settings=MergeSettings())

        info = facade.get_machine_info("PC210LC-11", "A12345", "distributor", "analyst@example.com", "1001")

        assert info.customer_name == "***************ing"
        assert info.latitude == 0.0
        assert info.longitude == 0.0

    def test_query_failure_raises_store_error(self, adapter):
        with pytest.raises(MachineStoreError):
            adapter.query_to_dataframe("SELECT * FROM missing_table")

    def test_clean_nan(self):
        assert clean_nan({"a": float("nan"), "b": [1, None, float("nan")]}) == {"a": None, "b": [1, None, None]}


class TestFacadeWithStore:
    """Reconciliation through the facade against the SQLite store."""

    def test_distributor_view(self, adapter):
        facade = MachineInfoFacade(adapter, settings=MergeSettings())

        info = facade.get_machine_info("PC210LC-11", "A12345", "distributor", "analyst@example.com", "1001")

        assert info.customer_name == "Johnson Excavating"
        assert info.customer_location == "400 Lake St , Chicago, IL, 60601, US"
        assert info.pssr_name == "********les"
        assert info.latitude == 41.8781
        assert info.smr_uptime == "2024-02-01"

    def test_trunk_view(self, adapter):
        facade = MachineInfoFacade(adapter, settings=MergeSettings())

        info = facade.get_machine_info("D61PXi-24", "B5001", "trunk", "analyst@example.com")

        assert info.customer_name == "**************ing"
        assert info.pssr_name is None
        assert info.latitude == 0.0
        assert info.territory_owner == "Gulf-Lee"
