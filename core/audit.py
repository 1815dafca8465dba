import logging
from typing import Any

from django.contrib.auth.models import AbstractBaseUser

from core.models import AuditLog

logger = logging.getLogger(__name__)


def log_event(user: AbstractBaseUser | None, action: str, model: str, object_id: str, payload: dict[str, Any] | None = None) -> None:
    actor = user if getattr(user, "is_authenticated", False) else None
    AuditLog.objects.create(
        user=actor,
        action=action,
        model=model,
        object_id=str(object_id),
        payload=payload or {},
    )
    logger.info(
        "audit action=%s model=%s id=%s user=%s",
        action,
        model,
        object_id,
        getattr(actor, "username", "-"),
    )
