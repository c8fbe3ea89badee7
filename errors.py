from typing import Optional


class WalletDashboardError(Exception):
    """Base error for the wallet dashboard."""


class ConfigurationError(WalletDashboardError):
    """Missing or invalid environment configuration."""


class SimAPIError(WalletDashboardError):
    """The Sim API answered with an error status or an unusable payload."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
