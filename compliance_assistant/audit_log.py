"""Audit logging for admin actions."""
import logging
from datetime import datetime, timezone
from typing import Dict

logger = logging.getLogger('compliance_assistant.audit')


async def log_admin_action(
    admin_user: str,
    action: str,
    parameters: Dict,
    result: str
):
    """
    Log admin action to audit trail.

    Args:
        admin_user: Account ID performing the action
        action: Action performed (e.g., "change_role")
        parameters: Action parameters
        result: Action result ("success", "failure: ...")
    """
    audit_entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "admin_user": admin_user,
        "action": action,
        "parameters": parameters,
        "result": result
    }

    logger.info(f"AUDIT: {admin_user} performed {action} -> {result}")
    logger.debug(f"Audit details: {audit_entry}")
