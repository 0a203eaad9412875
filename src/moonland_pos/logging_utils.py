import json
import logging
from datetime import datetime, timezone
from typing import Any


def log_action(
    logger: logging.Logger,
    module: str,
    action: str,
    outcome: str,
    trace_id: str | None = None,
    **context: Any,
) -> None:
    logger.info(
        json.dumps(
            {
                "ts": datetime.now(timezone.utc).isoformat(),
                "level": "INFO",
                "module": module,
                "action": action,
                "trace_id": trace_id,
                "outcome": outcome,
                **context,
            },
            default=str,
        )
    )
