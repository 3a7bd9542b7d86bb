"""
Structured Logging Configuration

structlog is configured on top of the standard logging library. Output is
JSON by default and a coloured console rendering when LOG_JSON_FORMAT is
false. The shared secret, the GitHub token and the OpenAI key never reach
the log output.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, WrappedLogger

from pr_analyzer import __version__
from pr_analyzer.config import get_settings

REDACTED_KEYS = {"api_key", "x_api_key", "github_token", "openai_api_key", "authorization"}

TOKEN_PREFIXES = ("sk-", "ghp_", "github_pat_")


def redact_secrets(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Replace credential fields and token-looking values with a marker."""
    for key, value in event_dict.items():
        if key.lower().replace("-", "_") in REDACTED_KEYS:
            event_dict[key] = "[REDACTED]"
        elif isinstance(value, str) and value.startswith(TOKEN_PREFIXES):
            event_dict[key] = "[REDACTED]"
    return event_dict


def add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict["app"] = "pr-analyzer"
    event_dict["version"] = __version__
    return event_dict


def setup_logging() -> None:
    """
    Configure structlog and the root logger.

    Called once when the application module is imported.
    """
    settings = get_settings()

    pre_chain = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        redact_secrets,
    ]

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if settings.log_json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.log_level))

    # Request-level lines from the HTTP clients are noise here
    for name in ("httpx", "httpcore", "openai"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
