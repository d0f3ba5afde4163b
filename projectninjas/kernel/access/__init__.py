"""
Access request ledger.
"""

from projectninjas.kernel.access.ledger import (
    AccessRequestLedger,
    ReceivedRequest,
    SentRequest,
    parse_response_status,
)

__all__ = [
    "AccessRequestLedger",
    "ReceivedRequest",
    "SentRequest",
    "parse_response_status",
]
