from .base_source_adapter import BaseSourceAdapter
from .distributor_adapter import DistributorSourceAdapter
from .trunk_adapter import TrunkSourceAdapter

__all__ = ['BaseSourceAdapter', 'DistributorSourceAdapter', 'TrunkSourceAdapter']
