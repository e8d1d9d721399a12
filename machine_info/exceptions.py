class MachineInfoError(Exception):
    """Base exception for machine info reconciliation errors."""
    pass

class ConfigurationError(MachineInfoError):
    """Raised when environment configuration is invalid."""
    pass

class UnsupportedViewError(MachineInfoError):
    """Raised when a view mode has no matching source adapter."""
    pass

class MalformedInputError(MachineInfoError):
    """Raised when a present numeric field cannot be parsed."""

    def __init__(self, field_name: str, raw_value):
        self.field_name = field_name
        self.raw_value = raw_value
        super().__init__(f"Malformed value for {field_name}: {raw_value!r}")

class MachineStoreError(MachineInfoError):
    """Raised when the machine store cannot be queried."""
    pass
