from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from rest_framework.authtoken.models import Token
from rest_framework.exceptions import ValidationError

from core.access import ROLE_ORDER, primary_role
from core.audit import log_event
from core.exceptions import ConflictoError, ReglaNegocioError
from core.models import UserProfile

logger = logging.getLogger(__name__)

User = get_user_model()


def _validar_contrasena(password: str, user=None, *, campo: str = "contrasena") -> None:
    try:
        validate_password(password, user=user)
    except DjangoValidationError as exc:
        raise ValidationError({campo: list(exc.messages)}) from exc


def _validar_empleado_libre(empleado, user=None) -> None:
    if empleado is None:
        return
    perfil = UserProfile.objects.filter(empleado=empleado).exclude(user=user).select_related("user").first()
    if perfil is not None:
        raise ConflictoError(
            f"El empleado '{empleado.nombre}' ya está vinculado al usuario '{perfil.user.username}'."
        )


def asignar_rol(user, rol: str) -> None:
    if rol not in ROLE_ORDER:
        raise ReglaNegocioError(f"Rol inválido: '{rol}'. Roles válidos: {', '.join(ROLE_ORDER)}.")
    group, _ = Group.objects.get_or_create(name=rol)
    user.groups.set([group])


def crear_usuario(
    actor,
    *,
    nombre_usuario: str,
    contrasena: str,
    rol: str,
    empleado=None,
    email: str = "",
    nombre: str = "",
    apellido: str = "",
    telefono: str = "",
    habilitado: bool = True,
):
    nombre_usuario = (nombre_usuario or "").strip()
    if User.objects.filter(username__iexact=nombre_usuario).exists():
        raise ConflictoError(f"El nombre de usuario '{nombre_usuario}' ya está en uso.")
    _validar_empleado_libre(empleado)
    _validar_contrasena(contrasena, User(username=nombre_usuario, email=email, first_name=nombre, last_name=apellido))

    with transaction.atomic():
        user = User.objects.create_user(
            username=nombre_usuario,
            email=email or "",
            password=contrasena,
            first_name=nombre or "",
            last_name=apellido or "",
            is_active=habilitado,
        )
        UserProfile.objects.create(user=user, empleado=empleado, telefono=telefono or "")
        asignar_rol(user, rol)

    log_event(
        actor,
        "CREATE",
        "auth.User",
        user.id,
        {"username": user.username, "rol": rol, "empleado": getattr(empleado, "id", None)},
    )
    return user


def actualizar_usuario(actor, user, data: dict, *, como_admin: bool):
    """Los campos de contacto los edita el propio usuario; rol, empleado y habilitado solo un administrador."""
    restringidos = {"rol", "empleado", "habilitado"}
    if not como_admin and restringidos.intersection(k for k, v in data.items() if v is not None):
        raise ReglaNegocioError("Solo un administrador puede cambiar el rol, el empleado o el estado del usuario.")

    perfil, _ = UserProfile.objects.get_or_create(user=user)
    cambios = {}
    with transaction.atomic():
        if data.get("email") is not None:
            user.email = data["email"]
            cambios["email"] = user.email
        if data.get("nombre") is not None:
            user.first_name = data["nombre"]
            cambios["nombre"] = user.first_name
        if data.get("apellido") is not None:
            user.last_name = data["apellido"]
            cambios["apellido"] = user.last_name
        if data.get("telefono") is not None:
            perfil.telefono = data["telefono"]
            cambios["telefono"] = perfil.telefono
        if como_admin:
            if data.get("habilitado") is not None:
                if not data["habilitado"] and actor is not None and actor.pk == user.pk:
                    raise ConflictoError("No puedes deshabilitar tu propia cuenta.")
                user.is_active = data["habilitado"]
                cambios["habilitado"] = user.is_active
            if "empleado" in data:
                _validar_empleado_libre(data["empleado"], user)
                perfil.empleado = data["empleado"]
                cambios["empleado"] = getattr(data["empleado"], "id", None)
            if data.get("rol"):
                prev_rol = primary_role(user)
                asignar_rol(user, data["rol"])
                cambios["rol"] = {"from": prev_rol, "to": data["rol"]}
        user.save()
        perfil.save()

    log_event(actor, "UPDATE", "auth.User", user.id, cambios)
    return user


def cambiar_contrasena(actor, user, *, nueva: str, actual: str | None = None, requiere_actual: bool = True) -> Token:
    if requiere_actual:
        if not actual:
            raise ValidationError({"currentPassword": ["Debes enviar la contraseña actual."]})
        if not user.check_password(actual):
            raise ValidationError({"currentPassword": ["La contraseña actual no es correcta."]})
    _validar_contrasena(nueva, user, campo="newPassword")

    with transaction.atomic():
        user.set_password(nueva)
        user.save(update_fields=["password"])
        Token.objects.filter(user=user).delete()
        token = Token.objects.create(user=user)

    logger.info("password changed user=%s by=%s", user.username, getattr(actor, "username", "-"))
    log_event(actor, "PASSWORD", "auth.User", user.id, {"username": user.username, "token": "rotated"})
    return token


def eliminar_usuario(actor, user) -> None:
    if actor is not None and actor.pk == user.pk:
        raise ConflictoError("No puedes eliminar tu propio usuario.")
    user_id = user.id
    username = user.username
    user.delete()
    log_event(actor, "DELETE", "auth.User", user_id, {"username": username})
