"""
Logging configuration for SigLab.

Provides structured JSON logging and an audit logger for simulation
events. The Event Log is what the observer reads; this is what the
operator reads.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Iterable, Optional

# Context variable for run ID tracking
run_id_var: ContextVar[str] = ContextVar('run_id', default='')


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs in a consistent JSON format suitable for
    log aggregation systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        run_id = run_id_var.get()
        if run_id:
            log_data["run_id"] = run_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        return json.dumps(log_data)


class SimulationAuditLogger:
    """
    Specialized logger for simulation events.

    One method per engine event: provisioning, runs, attacks,
    outcomes and rejected operations.
    """

    def __init__(self, name: str = "siglab.audit"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event_type: str, exc_info=None, **kwargs) -> None:
        """Internal logging method with extra fields."""
        extra = {
            "event_type": event_type,
            "run_id": run_id_var.get(),
            **kwargs
        }

        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "",
            0,
            f"{event_type}: {kwargs.get('message', '')}",
            (),
            exc_info
        )
        record.extra_fields = extra
        self._logger.handle(record)

    def keys_provisioned(self, algorithm: str, key_bits: int) -> None:
        """Log a successful key provisioning."""
        self._log(
            logging.INFO,
            "KEYS_PROVISIONED",
            algorithm=algorithm,
            key_bits=key_bits,
            message=f"Provisioned {key_bits}-bit {algorithm} key pairs for A and B"
        )

    def key_generation_failed(self, algorithm: str, key_bits: int, reason: str) -> None:
        """Log a failed key provisioning."""
        self._log(
            logging.ERROR,
            "KEY_GENERATION_FAILED",
            algorithm=algorithm,
            key_bits=key_bits,
            reason=reason,
            message=f"Key generation failed: {reason}"
        )

    def run_started(self, algorithm: str, key_bits: int, attacks: Iterable[str]) -> None:
        """Log the start of a scenario run."""
        attacks = list(attacks)
        self._log(
            logging.INFO,
            "RUN_STARTED",
            algorithm=algorithm,
            key_bits=key_bits,
            attacks=attacks,
            message=f"Scenario run started ({algorithm}, attacks={attacks or 'none'})"
        )

    def attack_applied(self, attack: str, stage: str) -> None:
        """Log an injected attack."""
        self._log(
            logging.WARNING,
            "ATTACK_APPLIED",
            attack=attack,
            stage=stage,
            message=f"Attack {attack} applied at {stage}"
        )

    def verification_outcome(self, verified: bool, used_key: str) -> None:
        """Log B's verification result."""
        level = logging.INFO if verified else logging.WARNING
        self._log(
            level,
            "VERIFICATION_OUTCOME",
            verified=verified,
            used_key=used_key,
            message=f"Signature {'VALID' if verified else 'INVALID'} under {used_key}'s public key"
        )

    def run_failed(self, stage: str, reason: str, exc: Optional[BaseException] = None) -> None:
        """Log a run aborted by an unexpected error."""
        exc_info = (type(exc), exc, exc.__traceback__) if exc is not None else None
        self._log(
            logging.ERROR,
            "RUN_FAILED",
            exc_info=exc_info,
            stage=stage,
            reason=reason,
            message=f"Run failed during {stage}: {reason}"
        )

    def precondition_rejected(self, operation: str, reason: str) -> None:
        """Log an operation refused because of the current state."""
        self._log(
            logging.WARNING,
            "PRECONDITION_REJECTED",
            operation=operation,
            reason=reason,
            message=f"{operation} rejected: {reason}"
        )


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatting
        log_file: Optional file path for log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def set_run_id(run_id: Optional[str] = None) -> str:
    """
    Set the run ID for the current context.

    Args:
        run_id: Run ID to set, or None to generate one

    Returns:
        The run ID that was set
    """
    if run_id is None:
        run_id = str(uuid.uuid4())
    run_id_var.set(run_id)
    return run_id


def get_run_id() -> str:
    """Get the current run ID."""
    return run_id_var.get()


# Global audit logger instance
audit_log = SimulationAuditLogger()
