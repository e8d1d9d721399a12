from .base_store_adapter import BaseMachineStoreAdapter
from .postgres_adapter import PostgresMachineStoreAdapter, create_machine_store_adapter

__all__ = ['BaseMachineStoreAdapter', 'PostgresMachineStoreAdapter', 'create_machine_store_adapter']
