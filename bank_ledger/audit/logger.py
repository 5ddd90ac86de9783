"""
Audit Logger

DESIGN DECISION: Every user action handled by the dispatcher is logged.
The ledger core itself never logs; it only raises.

The audit logger:
- Writes structured lines to stderr so they never mix with prompts
- Picks the log level from the event severity
- Supports correlation IDs to trace one interactive session
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from bank_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(level: str = "WARNING", json_format: bool = True) -> None:
    """
    Configure stdlib logging and structlog for the command-line app.

    Args:
        level: Minimum level name ("DEBUG", "INFO", ...)
        json_format: JSON lines if True, human-readable console lines otherwise
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.WARNING),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service for a ledger session.
    """

    def __init__(self, correlation_id: Optional[UUID] = None):
        """
        Args:
            correlation_id: Shared by every event of this logger.
                A new one is created if None.
        """
        self.correlation_id = correlation_id or create_correlation_id()
        self._logger = structlog.get_logger("bank_ledger.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_ledger_loaded(
        self,
        ledger_path: str,
        donation_count: int,
        transaction_count: int,
    ) -> None:
        self.log(AuditEventBuilder.ledger_loaded(
            ledger_path=ledger_path,
            donation_count=donation_count,
            transaction_count=transaction_count,
            correlation_id=self.correlation_id,
        ))

    def log_ledger_load_failed(self, ledger_path: str, error_message: str) -> None:
        self.log(AuditEventBuilder.ledger_load_failed(
            ledger_path=ledger_path,
            error_message=error_message,
            correlation_id=self.correlation_id,
        ))

    def log_deposit_recorded(self, ledger_path: str, amount: str, balance: str) -> None:
        self.log(AuditEventBuilder.deposit_recorded(
            ledger_path=ledger_path,
            amount=amount,
            balance=balance,
            correlation_id=self.correlation_id,
        ))

    def log_withdrawal_recorded(self, ledger_path: str, amount: str, balance: str) -> None:
        self.log(AuditEventBuilder.withdrawal_recorded(
            ledger_path=ledger_path,
            amount=amount,
            balance=balance,
            correlation_id=self.correlation_id,
        ))

    def log_amount_rejected(
        self,
        ledger_path: str,
        command: str,
        amount_text: str,
        reason: str,
    ) -> None:
        """Log a deposit/withdraw amount that failed validation."""
        self.log(AuditEventBuilder.amount_rejected(
            ledger_path=ledger_path,
            command=command,
            amount_text=amount_text,
            reason=reason,
            correlation_id=self.correlation_id,
        ))

    def log_save_failed(
        self,
        ledger_path: str,
        command: str,
        error_message: str,
        attempts: int,
    ) -> None:
        """Log a write that still failed after all retries."""
        self.log(AuditEventBuilder.save_failed(
            ledger_path=ledger_path,
            command=command,
            error_message=error_message,
            attempts=attempts,
            correlation_id=self.correlation_id,
        ))

    def log_balance_reported(self, ledger_path: str, balance: str) -> None:
        self.log(AuditEventBuilder.balance_reported(
            ledger_path=ledger_path,
            balance=balance,
            correlation_id=self.correlation_id,
        ))

    def log_invalid_command(self, command: str) -> None:
        self.log(AuditEventBuilder.invalid_command(
            command=command,
            correlation_id=self.correlation_id,
        ))

    def log_session_ended(self, ledger_path: Optional[str]) -> None:
        self.log(AuditEventBuilder.session_ended(
            ledger_path=ledger_path,
            correlation_id=self.correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    One per interactive session.
    """
    return uuid4()
