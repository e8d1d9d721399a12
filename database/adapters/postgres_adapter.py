"""
PostgreSQL adapter for the machine master stores.

This adapter provides a clean interface to the tables machine reconciliation
reads from: the two machine masters (one per view), the distributor customer
billing master, and the permission scope table.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

import pandas as pd
from sqlalchemy import Engine, create_engine, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool

from machine_info.config import ReconcileConfig
from machine_info.exceptions import MachineStoreError, UnsupportedViewError
from machine_info.models import BillingAddress, PermissionScope

from .base_store_adapter import BaseMachineStoreAdapter

logger = logging.getLogger(__name__)

DISTRIBUTOR_MACHINE_TABLE = 'distributor_machine_master'
TRUNK_SERIAL_TABLE = 'trunk_serial_master'
CUSTOMER_MASTER_TABLE = 'distributor_customer_master'
PERMISSION_SCOPE_TABLE = 'permission_scopes'

# Columns stored as JSON text and decoded on read.
JSON_LIST_COLUMNS = ['telemetry', 'machineAlerts', 'territory', 'pic', 'customerNameML']

SCOPE_CUSTOMER_NAME = 'customer_name'
SCOPE_PERSONAL_INFO = 'personal_info'
SCOPE_MAP = 'map'

MACHINE_QUERIES = {
    'distributor': f"""
        SELECT * FROM {DISTRIBUTOR_MACHINE_TABLE}
        WHERE "trModel" = :full_model AND "sN" = :serial AND "kgpOrgId" = :organization_id
    """,
    'trunk': f"""
        SELECT * FROM {TRUNK_SERIAL_TABLE}
        WHERE "salesModel" = :full_model AND "sN" = :serial
    """,
}


def clean_nan(obj):
    """
    Recursively replace pandas NaN/NaT values with None.
    """
    if isinstance(obj, dict):
        return {k: clean_nan(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [clean_nan(item) for item in obj]
    elif pd.isna(obj):
        return None
    else:
        return obj


def _decode_json_list(value: Any) -> Optional[List[Any]]:
    if isinstance(value, list):
        return value
    if isinstance(value, str) and value:
        return json.loads(value)
    return None


class PostgresMachineStoreAdapter(BaseMachineStoreAdapter):
    """
    PostgreSQL adapter for machine master lookups.

    This adapter handles all direct database interactions needed to
    reconcile a machine; it performs no reconciliation itself.
    """

    def __init__(self, database_url: Optional[str] = None, pool_size: int = 5,
                 max_overflow: int = 10, engine: Optional[Engine] = None):
        """
        Initialize the connection with connection pooling.

        Args:
            database_url (str): PostgreSQL connection string
            pool_size (int): Number of connections to maintain in the pool
            max_overflow (int): Maximum overflow connections beyond pool_size
            engine (Engine, optional): Pre-built engine, used instead of database_url
        """
        if engine is None and not database_url:
            raise ValueError("database_url or engine is required")

        self.database_url = database_url
        self.engine = engine or self._create_engine(database_url, pool_size, max_overflow)

        # Test the connection immediately to catch configuration errors early
        self._test_connection()

        logger.info(f"Machine store adapter initialized with pool size {pool_size}")

    def _create_engine(self, database_url: str, pool_size: int, max_overflow: int) -> Engine:
        """
        Create SQLAlchemy engine sized for concurrent per-machine lookups.
        """
        return create_engine(
            database_url,
            poolclass=QueuePool,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,  # Validates connections before use
            pool_recycle=3600,   # Recycle connections every hour
            echo=os.getenv('ENABLE_SQL_LOGGING', 'false').lower() == 'true'
        )

    def _test_connection(self) -> None:
        """
        Test database connectivity and verify the expected tables exist.
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))

            tables = set(inspect(self.engine).get_table_names())
            expected_tables = {DISTRIBUTOR_MACHINE_TABLE, TRUNK_SERIAL_TABLE,
                               CUSTOMER_MASTER_TABLE, PERMISSION_SCOPE_TABLE}
            missing = expected_tables - tables
            if missing:
                logger.warning(f"Missing tables: {sorted(missing)}")
            else:
                logger.info("All machine store tables found")

        except SQLAlchemyError as e:
            logger.error(f"Database connection test failed: {e}")
            raise ConnectionError(f"Cannot connect to machine store: {e}")

    # =========================================================================
    # QUERY OPERATIONS
    # =========================================================================

    def query_to_dataframe(self, query: str, params: Optional[Dict] = None) -> pd.DataFrame:
        """
        Execute a SQL query and return results as a pandas DataFrame.

        Args:
            query (str): SQL query to execute
            params (Dict, optional): Query parameters for safe parameter binding

        Returns:
            pd.DataFrame: Query results

        Raises:
            MachineStoreError: If the query fails
        """
        try:
            df = pd.read_sql_query(
                sql=text(query),
                con=self.engine,
                params=params or {}
            )
            logger.debug(f"Query returned {len(df)} rows")
            return df

        except (SQLAlchemyError, pd.errors.DatabaseError) as e:
            logger.error(f"Query failed: {e}")
            raise MachineStoreError(f"Machine store query failed: {e}") from e

    def fetch_machine_document(self, view: str, full_model: str, serial: str,
                               organization_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Get the source document for one machine in the view's shape.

        JSON list columns (telemetry, alerts, territory, personnel, localized
        customer names) are decoded, keeping their stored order.

        Returns:
            Dict or None: The first matching document, None when absent
        """
        view_key = (view or '').strip().lower()
        query = MACHINE_QUERIES.get(view_key)
        if query is None:
            raise UnsupportedViewError(f"Unsupported view: {view}")

        params = {'full_model': full_model, 'serial': serial}
        if view_key == 'distributor':
            params['organization_id'] = organization_id

        df = self.query_to_dataframe(query, params)
        if df.empty:
            logger.info(f"No {view_key} record for {full_model}/{serial}")
            return None
        if len(df) > 1:
            logger.warning(f"{len(df)} {view_key} records for {full_model}/{serial}; using the first")

        document = clean_nan(df.iloc[0].to_dict())
        for column in JSON_LIST_COLUMNS:
            if column in document:
                try:
                    document[column] = _decode_json_list(document[column])
                except json.JSONDecodeError as e:
                    raise MachineStoreError(f"Invalid JSON in column {column}: {e}") from e
        return document

    def fetch_billing_address(self, organization_id: str, account_number: str) -> Optional[BillingAddress]:
        """
        Get the billing address for a distributor customer account.
        """
        query = f"""
            SELECT billingaddress1, billingaddress2, billingcity, billingstate,
                   billingzip, billingcountry
            FROM {CUSTOMER_MASTER_TABLE}
            WHERE orgid = :organization_id AND accno = :account_number
        """
        df = self.query_to_dataframe(query, {
            'organization_id': str(organization_id),
            'account_number': account_number
        })
        if df.empty:
            return None

        row = clean_nan(df.iloc[0].to_dict())
        return BillingAddress(
            street1=row.get('billingaddress1'),
            street2=row.get('billingaddress2'),
            city=row.get('billingcity'),
            state=row.get('billingstate'),
            zip_code=row.get('billingzip'),
            country=row.get('billingcountry'),
        )

    def fetch_permission_scope(self, view: str, user_email: str) -> PermissionScope:
        """
        Get the organization ids a user may see unmasked for a view.

        Lookup failures degrade to an empty scope so every gated field is
        masked rather than exposed.
        """
        query = f"""
            SELECT scope_type, org_id
            FROM {PERMISSION_SCOPE_TABLE}
            WHERE LOWER(user_email) = LOWER(:user_email) AND LOWER(view_name) = LOWER(:view)
        """
        try:
            df = self.query_to_dataframe(query, {'user_email': user_email, 'view': view})
        except MachineStoreError as e:
            logger.warning(f"Permission lookup failed for {user_email}, masking all fields: {e}")
            return PermissionScope.empty()

        scopes = {SCOPE_CUSTOMER_NAME: set(), SCOPE_PERSONAL_INFO: set(), SCOPE_MAP: set()}
        for record in df.to_dict('records'):
            scope_type = str(record['scope_type']).strip().lower()
            if scope_type in scopes and not pd.isna(record['org_id']):
                scopes[scope_type].add(str(record['org_id']))

        return PermissionScope(
            customer_name_org_ids=scopes[SCOPE_CUSTOMER_NAME],
            personal_info_org_ids=scopes[SCOPE_PERSONAL_INFO],
            map_org_ids=scopes[SCOPE_MAP],
        )

    def close(self) -> None:
        """
        Close the database connection pool.
        """
        if self.engine:
            self.engine.dispose()
            logger.info("Machine store adapter closed")


# Convenience function for easy initialization from environment
def create_machine_store_adapter() -> PostgresMachineStoreAdapter:
    """
    Create the machine store adapter using environment configuration.
    """
    config = ReconcileConfig.get_database_config()
    return PostgresMachineStoreAdapter(
        database_url=config['database_url'],
        pool_size=config['pool_size'],
        max_overflow=config['max_overflow']
    )
