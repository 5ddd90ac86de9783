"""
Command Dispatcher for Bank Ledger

This module ties the ledger to the user. It maps the interactive
commands (Deposit, Withdraw, Balance, Exit) to Ledger operations and
turns the ledger's errors into prompts.

DESIGN DECISION: The session is an explicit loop.
Every iteration produces one CommandResult; invalid input never
re-enters the menu recursively, however often the user mistypes.

ERROR POLICY:
- ValidationError    -> ask for another amount
- StorageReadError   -> ask for another ledger path and reload
- StorageWriteError  -> retry the operation (the ledger rolled back),
                        then report and return to the menu
"""

from pathlib import Path
from typing import Callable, Optional

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from bank_ledger.audit import AuditLogger
from bank_ledger.config import LedgerSettings, get_settings
from bank_ledger.ledger import Ledger
from bank_ledger.models.ledger import CommandResult, LedgerCommand, format_amount
from bank_ledger.services.storage import (
    LedgerStorageInterface,
    StorageReadError,
    StorageWriteError,
    get_storage_for_path,
)
from bank_ledger.validation import ValidationError


MENU_PROMPT = "Please enter in a command (Deposit, Withdraw, Balance, Exit) :"
DEPOSIT_PROMPT = "Please enter an amount to deposit:"
WITHDRAW_PROMPT = "Please enter an amount to withdraw:"
INVALID_NUMBER_PROMPT = "Invalid number entered.  Please enter another value:"
PATH_PROMPT = "Unable to read or write to the ledger file, please specify a file path:"
INVALID_COMMAND_MESSAGE = "Input was invalid, please try again."
BALANCE_MESSAGE = "The current balance is: ${balance}"
CANCELLED_MESSAGE = "No amount entered, returning to the menu."


class LedgerSession:
    """
    One interactive session over a single ledger document.

    The session owns the only Ledger reference; there is no global
    ledger. Input and output are injected so the loop can be driven
    from tests.
    """

    def __init__(
        self,
        ledger_path: Optional[Path] = None,
        settings: Optional[LedgerSettings] = None,
        input_func: Callable[[], str] = input,
        output_func: Callable[[str], None] = print,
        audit_logger: Optional[AuditLogger] = None,
        storage: Optional[LedgerStorageInterface] = None,
    ):
        """
        Args:
            ledger_path: Document to open. Defaults to the configured path.
            settings: Ledger settings. Loaded from the environment if None.
            input_func: Reads one line of user input (raises EOFError at end)
            output_func: Shows one line to the user
            audit_logger: Audit logger. A new session logger if None.
            storage: Document backend. Picked per path if None.
        """
        self._settings = settings or get_settings().ledger
        self._ledger_path = Path(ledger_path or self._settings.ledger_path)
        self._input = input_func
        self._output = output_func
        self._audit_logger = audit_logger or AuditLogger()
        self._storage = storage
        self._ledger: Optional[Ledger] = None

    @property
    def ledger(self) -> Optional[Ledger]:
        return self._ledger

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def _ask(self, prompt: str) -> str:
        self._output(prompt)
        return self._input().strip()

    def _storage_for(self, path: Path) -> LedgerStorageInterface:
        return self._storage or get_storage_for_path(path, self._settings.storage_format)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def open_ledger(self) -> Ledger:
        """
        Load the ledger, asking for another path while it cannot be read.

        Raises:
            StorageReadError: If no readable ledger was found within
                max_path_attempts tries
            EOFError: If input ends while asking for a path
        """
        path = self._ledger_path
        attempts = 0

        while True:
            try:
                ledger = Ledger(path, storage=self._storage_for(path))
            except StorageReadError as e:
                attempts += 1
                self._audit_logger.log_ledger_load_failed(str(path), str(e))
                if attempts >= self._settings.max_path_attempts:
                    raise
                path = Path(self._ask(PATH_PROMPT))
                continue

            self._ledger = ledger
            self._ledger_path = path
            self._audit_logger.log_ledger_loaded(
                ledger_path=str(path),
                donation_count=len(ledger.donations),
                transaction_count=len(ledger.transactions),
            )
            return ledger

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def dispatch(self, command_text: str) -> CommandResult:
        """
        Handle one menu command.

        Deposit and withdraw prompt for an amount and keep asking
        until a valid one is entered. An empty amount cancels.
        """
        if self._ledger is None:
            self.open_ledger()

        command = command_text.strip().lower()
        try:
            parsed = LedgerCommand(command)
        except ValueError:
            self._audit_logger.log_invalid_command(command)
            return CommandResult(
                command=command,
                success=False,
                message=INVALID_COMMAND_MESSAGE,
            )

        if parsed == LedgerCommand.EXIT:
            return CommandResult(command=command, success=True, exit_requested=True)

        if parsed == LedgerCommand.BALANCE:
            balance = self._ledger.determine_balance()
            self._audit_logger.log_balance_reported(str(self._ledger_path), balance)
            return CommandResult(
                command=command,
                success=True,
                message=BALANCE_MESSAGE.format(balance=balance),
                balance=balance,
            )

        prompt = DEPOSIT_PROMPT if parsed == LedgerCommand.DEPOSIT else WITHDRAW_PROMPT
        amount_text = self._ask(prompt)
        while True:
            if not amount_text:
                return CommandResult(command=command, success=False, message=CANCELLED_MESSAGE)
            result = self.record(parsed, amount_text)
            if result.success or result.write_failed:
                return result
            amount_text = self._ask(INVALID_NUMBER_PROMPT)

    def record(self, command: LedgerCommand, amount_text: str) -> CommandResult:
        """
        Apply one deposit or withdrawal with write retries.

        Returns a failed CommandResult (instead of raising) for
        validation and write errors.
        """
        operation = (
            self._ledger.deposit
            if command == LedgerCommand.DEPOSIT
            else self._ledger.withdraw
        )
        retrying = Retrying(
            stop=stop_after_attempt(self._settings.write_retry_attempts),
            wait=wait_exponential(multiplier=self._settings.write_retry_wait_seconds, max=10),
            retry=retry_if_exception_type(StorageWriteError),
            reraise=True,
        )

        try:
            recorded = retrying(operation, amount_text)
        except ValidationError as e:
            self._audit_logger.log_amount_rejected(
                ledger_path=str(self._ledger_path),
                command=command.value,
                amount_text=amount_text,
                reason=str(e),
            )
            return CommandResult(command=command.value, success=False, message=str(e))
        except StorageWriteError as e:
            self._audit_logger.log_save_failed(
                ledger_path=str(self._ledger_path),
                command=command.value,
                error_message=str(e),
                attempts=self._settings.write_retry_attempts,
            )
            return CommandResult(
                command=command.value,
                success=False,
                message=f"Unable to save to the ledger file, the {command.value} was not recorded: {e}",
                balance=self._ledger.determine_balance(),
                write_failed=True,
            )

        balance = self._ledger.determine_balance()
        if command == LedgerCommand.DEPOSIT:
            self._audit_logger.log_deposit_recorded(
                str(self._ledger_path), format_amount(recorded), balance
            )
        else:
            self._audit_logger.log_withdrawal_recorded(
                str(self._ledger_path), format_amount(-recorded), balance
            )

        return CommandResult(
            command=command.value,
            success=True,
            amount=recorded,
            balance=balance,
        )

    # -------------------------------------------------------------------------
    # Main loop
    # -------------------------------------------------------------------------

    def run(self) -> int:
        """
        Run the interactive loop until Exit or end of input.

        Returns:
            Process exit code: 0 on normal exit, 1 if no ledger could
            be opened
        """
        try:
            if self._ledger is None:
                self.open_ledger()
        except StorageReadError as e:
            self._output(f"Unable to open a ledger file: {e}")
            return 1
        except EOFError:
            return 1

        while True:
            try:
                result = self.dispatch(self._ask(MENU_PROMPT))
            except EOFError:
                break

            if result.message:
                self._output(result.message)
            if result.exit_requested:
                break

        self._audit_logger.log_session_ended(str(self._ledger_path))
        return 0
