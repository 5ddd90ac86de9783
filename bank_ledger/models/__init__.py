"""
Data Models Package

Pydantic models shared by the ledger core, storage and dispatcher.
"""

from bank_ledger.models.ledger import (
    CENTS,
    MAX_INTEGER_DIGITS,
    CommandResult,
    LedgerCommand,
    LedgerSnapshot,
    exceeds_max_amount,
    format_amount,
    sum_amounts,
)
from bank_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "CENTS",
    "MAX_INTEGER_DIGITS",
    "CommandResult",
    "LedgerCommand",
    "LedgerSnapshot",
    "exceeds_max_amount",
    "format_amount",
    "sum_amounts",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
