"""Structured logging configuration for microfinance."""

import logging
import sys
from typing import Any

# Record attributes set through ``extra=`` that identify what a line is about
CONTEXT_FIELDS = ("loan_id", "repayment_id", "chit_fund_id", "period_start", "period_end")

CALCULATORS_LOGGER = "microfinance.calculators"


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    calculator_level: str | None = None,
) -> None:
    """Configure logging for microfinance.

    Parameters
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    format_type : str
        Format type: "standard" or "json".
    calculator_level : str | None
        Separate level for the calculators, which trace every loan and
        chit fund at DEBUG. Follows ``level`` when None.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_type == "json":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Sinks print records to stdout, so logs stay on stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.NOTSET)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("microfinance").setLevel(log_level)
    if calculator_level is None:
        logging.getLogger(CALCULATORS_LOGGER).setLevel(logging.NOTSET)
    else:
        logging.getLogger(CALCULATORS_LOGGER).setLevel(
            getattr(logging, calculator_level.upper(), log_level)
        )

    # Faker logs every provider lookup at DEBUG
    logging.getLogger("faker").setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """JSON log formatter carrying loan and chit fund context."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        import json
        from datetime import datetime, timezone

        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra"):
            log_data.update(record.extra)

        # Decimals and datetimes render as strings
        return json.dumps(log_data, default=str)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Parameters
    ----------
    name : str
        Logger name (usually __name__).

    Returns
    -------
    logging.Logger
        Configured logger.
    """
    return logging.getLogger(name)
