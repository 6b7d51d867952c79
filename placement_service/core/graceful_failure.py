"""
Best-effort side work that must never fail the caller.

Question usage analytics are the main user: a submitted answer is already
persisted when the counters are bumped, so a failure there is logged and
dropped rather than surfaced to the client.

Usage:
    from placement_service.core.graceful_failure import graceful_failure

    with graceful_failure("record question usage", logger, context={"question_id": qid}):
        repository.record_usage(qid, correct, time_spent)
"""

import logging
from contextlib import contextmanager
from typing import Any, Generator, Optional


@contextmanager
def graceful_failure(
    operation_name: str,
    logger: logging.Logger,
    *,
    log_level: int = logging.WARNING,
    exc_info: bool = False,
    context: Optional[dict[str, Any]] = None,
) -> Generator[None, None, None]:
    """Run the wrapped block, logging and swallowing any ``Exception``.

    Args:
        operation_name: Short description used in the log line
            ("record question usage").
        logger: Logger that receives the failure message.
        log_level: Level of the failure message. Defaults to WARNING.
        exc_info: Attach the traceback to the log record.
        context: Extra key/value pairs rendered into the message.
    """
    try:
        yield
    except Exception as e:
        if context:
            context_str = ", ".join(f"{k}={v}" for k, v in context.items())
            message = f"Failed to {operation_name} ({context_str}): {e}"
        else:
            message = f"Failed to {operation_name}: {e}"

        logger.log(log_level, message, exc_info=exc_info)
