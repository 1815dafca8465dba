from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from django.db import IntegrityError
from django.db.models import ProtectedError
from django.utils import timezone
from rest_framework import exceptions
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ReglaNegocioError(exceptions.APIException):
    status_code = 400
    default_detail = "La operación no cumple las reglas de negocio."
    default_code = "regla_negocio"


class ConflictoError(exceptions.APIException):
    status_code = 409
    default_detail = "La operación entra en conflicto con el estado actual del recurso."
    default_code = "conflicto"


def _first_message(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return _first_message(value[0]) if value else ""
    if isinstance(value, dict):
        for item in value.values():
            return _first_message(item)
        return ""
    return str(value)


def _child_name(prefix: str, key: Any) -> str:
    if not prefix:
        return str(key)
    if key == "non_field_errors":
        return prefix
    if isinstance(key, int) or (isinstance(key, str) and key.isdigit()):
        return f"{prefix}[{key}]"
    return f"{prefix}.{key}"


def flatten_validation_errors(detail: Any, prefix: str = "") -> dict[str, str]:
    """Aplana los errores de DRF a ``{"campo": "mensaje"}``.

    Los errores de listas anidadas (``detalles``) se nombran ``detalles[0].idProducto``,
    tanto si DRF los entrega como lista como si los indexa en un dict. Los
    ``non_field_errors`` anidados se reportan con el nombre del campo padre.
    """
    errors: dict[str, str] = {}
    if isinstance(detail, dict):
        for key, value in detail.items():
            name = _child_name(prefix, key)
            if isinstance(value, dict):
                errors.update(flatten_validation_errors(value, name))
            elif isinstance(value, list) and value and isinstance(value[0], (dict, list)):
                for idx, item in enumerate(value):
                    if item:
                        errors.update(flatten_validation_errors(item, f"{name}[{idx}]"))
            else:
                errors.setdefault(name, _first_message(value))
    elif isinstance(detail, list) and prefix:
        errors[prefix] = _first_message(detail)
    return errors


def api_exception_handler(exc, context):
    if isinstance(exc, ProtectedError):
        exc = ConflictoError("El registro está referenciado por otros registros y no puede eliminarse.")
    elif isinstance(exc, IntegrityError):
        exc = ConflictoError("El registro viola una restricción de integridad.")

    response = exception_handler(exc, context)
    if response is None:
        return None

    request = context.get("request")
    status_code = response.status_code
    body: dict[str, Any] = {
        "timestamp": timezone.now().isoformat(),
        "status": status_code,
        "error": HTTPStatus(status_code).phrase,
        "message": _first_message(getattr(exc, "detail", "")) or HTTPStatus(status_code).phrase,
        "path": request.path if request is not None else "",
    }
    if isinstance(exc, exceptions.ValidationError):
        validation_errors = flatten_validation_errors(exc.detail)
        if validation_errors:
            body["message"] = "La solicitud contiene datos inválidos."
            body["validationErrors"] = validation_errors

    if status_code >= 500:
        logger.error("API error %s on %s: %s", status_code, body["path"], body["message"])
    else:
        logger.info("API error %s on %s: %s", status_code, body["path"], body["message"])

    response.data = body
    return response
