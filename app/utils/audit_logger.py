from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import Request

audit_logger = logging.getLogger("audit")


def build_audit_entry(action: str, request: Request, details: dict[str, Any] | None = None) -> dict[str, Any]:
    client_ip = request.headers.get("x-forwarded-for") or (
        request.client.host if request.client else "unknown"
    )
    entry: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "action": action,
        "client_ip": client_ip,
        "path": str(request.url.path),
        "method": request.method,
    }
    if details:
        entry["details"] = details
    return entry


def log_prompt_action(
    action: str,
    request: Request,
    details: dict[str, Any] | None = None,
) -> None:
    """
    Record a mutation of the prompt table.

    Args:
        action: What happened (e.g., "prompt_created", "prompt_deleted")
        request: The FastAPI request object
        details: Additional details to log, usually the prompt id
    """
    audit_logger.info(f"Prompt action: {build_audit_entry(action, request, details)}")
