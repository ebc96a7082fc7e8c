class ParkApiError(RuntimeError):
    """Raised when the park gateway fails (timeouts, network errors, non-2xx status)."""
    pass


class ParkApiContractError(RuntimeError):
    """Raised when the park gateway answers with a payload we cannot read."""
    pass


class UserSyncError(RuntimeError):
    """Raised inside the admin panel client; converted to text or False at its boundary."""
    pass
