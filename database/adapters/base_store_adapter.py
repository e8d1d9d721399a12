from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from machine_info.models import BillingAddress, PermissionScope


class BaseMachineStoreAdapter(ABC):
    """Abstract base class for the stores machine reconciliation reads from."""

    @abstractmethod
    def fetch_machine_document(self, view: str, full_model: str, serial: str,
                               organization_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Get the zero-or-one source document for a machine, lists in stored order."""
        pass

    @abstractmethod
    def fetch_billing_address(self, organization_id: str, account_number: str) -> Optional[BillingAddress]:
        """Get the billing address for a customer account."""
        pass

    @abstractmethod
    def fetch_permission_scope(self, view: str, user_email: str) -> PermissionScope:
        """Get the organizations a user may see unmasked."""
        pass
