"""
Audit Logger

DESIGN DECISION: Every fallback an engine applies is logged.
This provides:
1. Traceability of numbers that rest on an assumption (1:1 currency
   fallback, reverted transfers, over-split expenses)
2. Debugging capability for dirty ledger data
3. A way for the caller to surface warnings next to the figures

The audit logger:
- Is synchronous (the engines have no suspension points)
- Gracefully handles failures (a broken sink never breaks a calculation)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finance_engine.audit.sink import AuditSink
from finance_engine.config import LoggingSettings, get_settings
from finance_engine.models.audit import AuditEvent, AuditSeverity

LOGGER_NAME = "finance_engine"


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """Configure structlog for the engine loggers."""
    settings = settings or get_settings().logging

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_output
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
    logging.getLogger(LOGGER_NAME).setLevel(settings.level)


configure_logging()


def get_logger(name: str = LOGGER_NAME):
    """Structlog logger under the engine's logger namespace."""
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return structlog.get_logger(name)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An optional AuditSink (for the caller)
    """

    def __init__(
        self,
        sink: Optional[AuditSink] = None,
        correlation_id: Optional[UUID] = None,
    ):
        """
        Initialize audit logger.

        Args:
            sink: Destination for events. If None, only logs locally.
            correlation_id: Stamped on events that carry none of their own.
        """
        self._sink = sink
        self._correlation_id = correlation_id
        self._logger = get_logger("audit")

    @property
    def correlation_id(self) -> Optional[UUID]:
        return self._correlation_id

    def with_correlation(self, correlation_id: UUID) -> "AuditLogger":
        """A logger writing to the same sink under another correlation id."""
        return AuditLogger(sink=self._sink, correlation_id=correlation_id)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Forwards to the sink if one is configured.

        Returns True if the sink accepted the event (or no sink configured).
        """
        if self._correlation_id and event.correlation_id is None:
            event = event.model_copy(update={"correlation_id": self._correlation_id})

        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.CRITICAL:
            self._logger.critical("audit_event", **log_dict)
        elif event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._sink:
            try:
                return self._sink.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_sink_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of one caller request (e.g., a ledger summary)
    and pass it through all engine calls made for it.
    """
    return uuid4()
