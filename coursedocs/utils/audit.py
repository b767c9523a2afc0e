"""Audit logging utilities."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

logger = logging.getLogger("coursedocs.audit")


class AuditLogger:
    """Structured audit logger for privileged writes."""

    def record(self, action: str, actor: str, details: Dict[str, Any]) -> None:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "action": action,
            "actor": actor,
            "details": details,
        }
        logger.info(json.dumps(payload, default=str))


audit_logger = AuditLogger()


__all__ = ["audit_logger", "AuditLogger"]
