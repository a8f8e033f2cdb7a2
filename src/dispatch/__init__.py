"""Transport settings, Dispatch Service client and the result ledger."""

from .client import DispatchClient
from .config import TransportConfig, TransportMode
from .ledger import ResultLedger
from .models import DispatchResult, DispatchStatus

__all__ = [
    "DispatchClient",
    "TransportConfig",
    "TransportMode",
    "ResultLedger",
    "DispatchResult",
    "DispatchStatus",
]
