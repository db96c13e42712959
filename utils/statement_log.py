"""
Statement Log

Appends one JSON line per dispatched statement to a daily file
(statements_YYYY-MM-DD.jsonl) so operators can see which actions callers
actually use. Parameter values are never written, only their count.

A failed write is logged and ignored; it must never fail the request.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class StatementLog:
    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, when: Optional[datetime] = None) -> Path:
        when = when or datetime.now()
        return self.directory / f"statements_{when.strftime('%Y-%m-%d')}.jsonl"

    def record(self, action: str, sql: str, param_count: int, status: str = "DISPATCHED") -> None:
        now = datetime.now()
        entry = {
            "timestamp": now.isoformat(),
            "action": action,
            "sql": sql.strip(),
            "param_count": param_count,
            "status": status,
        }
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(self.path_for(now), "a", encoding="utf-8") as f:
                f.write(json.dumps(entry) + "\n")
        except OSError as e:
            logger.warning(f"Failed to log statement: {e}")
