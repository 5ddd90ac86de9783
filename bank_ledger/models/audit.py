"""
Audit Models for Bank Ledger

Every user-visible action of the dispatcher produces an audit event.
Events are only written to the structured log; the ledger document
itself holds amounts and nothing else.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Loading
    LEDGER_LOADED = "ledger_loaded"
    LEDGER_LOAD_FAILED = "ledger_load_failed"

    # Mutations
    DEPOSIT_RECORDED = "deposit_recorded"
    WITHDRAWAL_RECORDED = "withdrawal_recorded"
    AMOUNT_REJECTED = "amount_rejected"
    SAVE_FAILED = "save_failed"

    # Reads
    BALANCE_REPORTED = "balance_reported"

    # Dispatcher
    INVALID_COMMAND = "invalid_command"
    SESSION_ENDED = "session_ended"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant dispatcher action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Which ledger document this is about
    ledger_path: Optional[str] = Field(
        default=None,
        description="Path of the ledger document"
    )

    # Correlation - all events of one interactive session
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate events of one session"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "ledger_path": self.ledger_path,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.deposit_recorded(path, "10.00", "110.00", correlation_id)
    """

    @staticmethod
    def ledger_loaded(
        ledger_path: str,
        donation_count: int,
        transaction_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            ledger_path=ledger_path,
            correlation_id=correlation_id,
            description=f"Ledger loaded: {transaction_count} transactions",
            details={
                "donation_count": donation_count,
                "transaction_count": transaction_count,
            },
        )

    @staticmethod
    def ledger_load_failed(
        ledger_path: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            ledger_path=ledger_path,
            correlation_id=correlation_id,
            description="Ledger document could not be read",
            error_message=error_message,
        )

    @staticmethod
    def deposit_recorded(
        ledger_path: str,
        amount: str,
        balance: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEPOSIT_RECORDED,
            ledger_path=ledger_path,
            correlation_id=correlation_id,
            description=f"Deposit recorded: ${amount}",
            details={
                "amount": amount,
                "balance": balance,
            },
            is_user_action=True,
        )

    @staticmethod
    def withdrawal_recorded(
        ledger_path: str,
        amount: str,
        balance: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WITHDRAWAL_RECORDED,
            ledger_path=ledger_path,
            correlation_id=correlation_id,
            description=f"Withdrawal recorded: ${amount}",
            details={
                "amount": amount,
                "balance": balance,
            },
            is_user_action=True,
        )

    @staticmethod
    def amount_rejected(
        ledger_path: str,
        command: str,
        amount_text: str,
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AMOUNT_REJECTED,
            severity=AuditSeverity.WARNING,
            ledger_path=ledger_path,
            correlation_id=correlation_id,
            description=f"Rejected {command} amount",
            details={
                "command": command,
                "amount_text": amount_text,
            },
            error_message=reason,
            is_user_action=True,
        )

    @staticmethod
    def save_failed(
        ledger_path: str,
        command: str,
        error_message: str,
        attempts: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            ledger_path=ledger_path,
            correlation_id=correlation_id,
            description=f"Could not save {command}",
            details={
                "command": command,
                "attempts": attempts,
            },
            error_message=error_message,
        )

    @staticmethod
    def balance_reported(
        ledger_path: str,
        balance: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_REPORTED,
            severity=AuditSeverity.DEBUG,
            ledger_path=ledger_path,
            correlation_id=correlation_id,
            description="Balance reported",
            details={"balance": balance},
            is_user_action=True,
        )

    @staticmethod
    def invalid_command(
        command: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVALID_COMMAND,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description="Unrecognized command entered",
            details={"command": command},
            is_user_action=True,
        )

    @staticmethod
    def session_ended(
        ledger_path: Optional[str],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_ENDED,
            ledger_path=ledger_path,
            correlation_id=correlation_id,
            description="Session ended",
        )
