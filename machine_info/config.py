import os
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from dotenv import load_dotenv

from .exceptions import ConfigurationError

load_dotenv()


@dataclass(frozen=True)
class MergeSettings:
    """Immutable lookup table shared by the merger, resolver and mask."""
    mask_sentinel: str = '***'
    general_label: str = 'General'
    non_oem_machine_type: str = 'Non-Komatsu'
    product_line_types: Tuple[str, ...] = ('Komtrax', 'Non-Komtrax', 'KPlus')


class ReconcileConfig:
    """Centralized reconciliation configuration management."""

    @staticmethod
    def get_settings() -> MergeSettings:
        """Get merge settings from environment variables."""
        defaults = MergeSettings()
        product_lines = os.getenv('PRODUCT_LINE_TYPES')
        if product_lines:
            product_line_types = tuple(
                value.strip() for value in product_lines.split(',') if value.strip()
            )
        else:
            product_line_types = defaults.product_line_types

        return MergeSettings(
            mask_sentinel=os.getenv('MASK_SENTINEL', defaults.mask_sentinel),
            general_label=os.getenv('GENERAL_TERRITORY_LABEL', defaults.general_label),
            non_oem_machine_type=os.getenv('NON_OEM_MACHINE_TYPE', defaults.non_oem_machine_type),
            product_line_types=product_line_types,
        )

    @staticmethod
    def get_database_config() -> Dict[str, Any]:
        """Get machine store connection settings from environment variables."""
        database_url = os.getenv('DATABASE_URL')
        if not database_url:
            raise ConfigurationError("DATABASE_URL environment variable is required")

        return {
            'database_url': database_url,
            'pool_size': _int_setting('DB_POOL_SIZE', '5'),
            'max_overflow': _int_setting('DB_MAX_OVERFLOW', '10'),
            'max_workers': _int_setting('RECONCILE_MAX_WORKERS', '4'),
        }


def _int_setting(name: str, default: str) -> int:
    raw_value = os.getenv(name, default)
    try:
        return int(raw_value)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid {name} value: expected integer, got '{raw_value}'"
        ) from e
