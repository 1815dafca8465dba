from __future__ import annotations

import logging

from django.contrib.auth import authenticate, get_user_model
from django.db.models import Q
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.exceptions import AuthenticationFailed, NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core.access import (
    ROLE_OPERARIO,
    ROLE_ORDER,
    can_manage_users,
    can_view_users,
    is_self,
    primary_role,
)
from core.audit import log_event
from core.exceptions import ConflictoError
from core.models import Permiso, RolPermiso
from core.services import actualizar_usuario, cambiar_contrasena, crear_usuario, eliminar_usuario

from .base import BaseApiView
from .usuarios_serializers import (
    CambioContrasenaSerializer,
    LoginSerializer,
    PermisoSerializer,
    RegistroSerializer,
    RolPermisoAsignacionSerializer,
    RolPermisoSerializer,
    UserInfoSerializer,
    UsuarioUpdateSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()


def _usuarios_qs():
    return User.objects.select_related("userprofile__empleado").prefetch_related("groups")


def _nombre_permiso(raw: str) -> str:
    return "_".join((raw or "").strip().upper().split())


class LoginView(BaseApiView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        username = serializer.validated_data["nombreUsuario"].strip()
        password = serializer.validated_data["contrasena"]

        existing = User.objects.filter(username__iexact=username).first()
        if existing is not None and not existing.is_active:
            logger.warning("login rejected (disabled) username=%s", username)
            raise AuthenticationFailed("El usuario está deshabilitado.")

        user = authenticate(request, username=existing.username if existing else username, password=password)
        if user is None:
            logger.warning("login failed username=%s", username)
            raise AuthenticationFailed("Nombre de usuario o contraseña incorrectos.")

        token, _ = Token.objects.get_or_create(user=user)
        logger.info("login ok username=%s", user.username)
        log_event(user, "LOGIN", "auth.User", user.id, {"username": user.username})
        return Response(
            {
                "token": token.key,
                "type": "Bearer",
                "idUsuario": user.id,
                "nombreUsuario": user.username,
                "rolUsuario": primary_role(user),
            },
            status=status.HTTP_200_OK,
        )


class RegisterView(BaseApiView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegistroSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        if not can_manage_users(request.user):
            self._require(
                data["rol"] == ROLE_OPERARIO,
                "Solo un administrador puede registrar usuarios con un rol distinto de Operario.",
            )
            # El autorregistro no vincula empleados ni crea cuentas deshabilitadas.
            data.pop("empleado", None)
            data["habilitado"] = True
        user = crear_usuario(request.user, **data)
        return Response(UserInfoSerializer(user).data, status=status.HTTP_201_CREATED)


class UsuariosView(BaseApiView):
    sort_fields = {
        "idUsuario": "id",
        "nombreUsuario": "username",
        "habilitado": "is_active",
        "fechaCreacion": "date_joined",
    }
    default_ordering = ["username"]

    def get(self, request):
        self._require(can_view_users(request.user), "No tienes permisos para consultar usuarios.")
        qs = _usuarios_qs()
        q = (request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(username__icontains=q) | Q(first_name__icontains=q) | Q(last_name__icontains=q))
        rol = (request.query_params.get("rolUsuario") or "").strip()
        if rol:
            qs = qs.filter(groups__name=rol)
        return self._page(request, qs, UserInfoSerializer)

    def post(self, request):
        self._require(can_manage_users(request.user), "No tienes permisos para crear usuarios.")
        serializer = RegistroSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = crear_usuario(request.user, **serializer.validated_data)
        return Response(UserInfoSerializer(user).data, status=status.HTTP_201_CREATED)


class UsuarioDetailView(BaseApiView):
    def get(self, request, user_id: int):
        self._require(
            is_self(request.user, user_id) or can_view_users(request.user),
            "No tienes permisos para consultar este usuario.",
        )
        user = self._get_or_404(_usuarios_qs(), user_id, "el usuario")
        return Response(UserInfoSerializer(user).data)

    def put(self, request, user_id: int):
        como_admin = can_manage_users(request.user)
        self._require(
            como_admin or is_self(request.user, user_id),
            "No tienes permisos para editar este usuario.",
        )
        user = self._get_or_404(_usuarios_qs(), user_id, "el usuario")
        serializer = UsuarioUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = actualizar_usuario(request.user, user, dict(serializer.validated_data), como_admin=como_admin)
        return Response(UserInfoSerializer(_usuarios_qs().get(pk=user.pk)).data)

    def delete(self, request, user_id: int):
        self._require(can_manage_users(request.user), "No tienes permisos para eliminar usuarios.")
        user = self._get_or_404(_usuarios_qs(), user_id, "el usuario")
        eliminar_usuario(request.user, user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class UsuarioPorNombreView(BaseApiView):
    def get(self, request, username: str):
        user = _usuarios_qs().filter(username__iexact=username).first()
        self._require(
            (user is not None and is_self(request.user, user.pk)) or can_view_users(request.user),
            "No tienes permisos para consultar este usuario.",
        )
        if user is None:
            raise NotFound(f"No se encontró el usuario '{username}'.")
        return Response(UserInfoSerializer(user).data)


class CambioContrasenaView(BaseApiView):
    def post(self, request, user_id: int):
        como_admin = can_manage_users(request.user)
        propio = is_self(request.user, user_id)
        self._require(como_admin or propio, "No tienes permisos para cambiar esta contraseña.")
        user = self._get_or_404(User.objects.all(), user_id, "el usuario")
        serializer = CambioContrasenaSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actual = serializer.validated_data.get("currentPassword")
        cambiar_contrasena(
            request.user,
            user,
            nueva=serializer.validated_data["newPassword"],
            actual=actual,
            requiere_actual=not como_admin or (propio and bool(actual)),
        )
        return Response("Contraseña cambiada exitosamente.", status=status.HTTP_200_OK)


class PermisosView(BaseApiView):
    def get(self, request):
        self._require(can_manage_users(request.user), "No tienes permisos para consultar permisos.")
        rows = Permiso.objects.order_by("nombre_permiso", "id")
        return Response(PermisoSerializer(rows, many=True).data)

    def post(self, request):
        self._require(can_manage_users(request.user), "No tienes permisos para crear permisos.")
        serializer = PermisoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        nombre = _nombre_permiso(serializer.validated_data["nombre_permiso"])
        if Permiso.objects.filter(nombre_permiso=nombre).exists():
            raise ConflictoError(f"El permiso '{nombre}' ya existe.")
        permiso = serializer.save()
        log_event(request.user, "CREATE", "core.Permiso", permiso.id, {"nombre": permiso.nombre_permiso})
        return Response(PermisoSerializer(permiso).data, status=status.HTTP_201_CREATED)


class PermisoDetailView(BaseApiView):
    def get(self, request, permiso_id: int):
        self._require(can_manage_users(request.user), "No tienes permisos para consultar permisos.")
        permiso = self._get_or_404(Permiso.objects.all(), permiso_id, "el permiso")
        return Response(PermisoSerializer(permiso).data)

    def put(self, request, permiso_id: int):
        self._require(can_manage_users(request.user), "No tienes permisos para editar permisos.")
        permiso = self._get_or_404(Permiso.objects.all(), permiso_id, "el permiso")
        serializer = PermisoSerializer(permiso, data=request.data)
        serializer.is_valid(raise_exception=True)
        nombre = _nombre_permiso(serializer.validated_data["nombre_permiso"])
        if Permiso.objects.filter(nombre_permiso=nombre).exclude(pk=permiso.pk).exists():
            raise ConflictoError(f"El permiso '{nombre}' ya existe.")
        prev = permiso.nombre_permiso
        permiso = serializer.save()
        log_event(request.user, "UPDATE", "core.Permiso", permiso.id, {"from": prev, "to": permiso.nombre_permiso})
        return Response(PermisoSerializer(permiso).data)

    def delete(self, request, permiso_id: int):
        self._require(can_manage_users(request.user), "No tienes permisos para eliminar permisos.")
        permiso = self._get_or_404(Permiso.objects.all(), permiso_id, "el permiso")
        nombre = permiso.nombre_permiso
        permiso.delete()
        log_event(request.user, "DELETE", "core.Permiso", permiso_id, {"nombre": nombre})
        return Response(status=status.HTTP_204_NO_CONTENT)


class RolPermisosView(BaseApiView):
    def post(self, request):
        self._require(can_manage_users(request.user), "No tienes permisos para asignar permisos.")
        serializer = RolPermisoAsignacionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rol = serializer.validated_data["rol_nombre"]
        permiso = serializer.validated_data["permiso"]
        if RolPermiso.objects.filter(rol_nombre=rol, permiso=permiso).exists():
            raise ConflictoError(f"El rol '{rol}' ya tiene asignado el permiso '{permiso.nombre_permiso}'.")
        asignacion = RolPermiso.objects.create(rol_nombre=rol, permiso=permiso)
        log_event(
            request.user,
            "CREATE",
            "core.RolPermiso",
            asignacion.id,
            {"rol": rol, "permiso": permiso.nombre_permiso},
        )
        return Response(RolPermisoSerializer(asignacion).data, status=status.HTTP_201_CREATED)


class PermisosPorRolView(BaseApiView):
    def get(self, request, rol: str):
        self._require(can_manage_users(request.user), "No tienes permisos para consultar permisos.")
        if rol not in ROLE_ORDER:
            raise NotFound(f"El rol '{rol}' no existe.")
        rows = Permiso.objects.filter(asignaciones__rol_nombre=rol).order_by("nombre_permiso", "id")
        return Response(PermisoSerializer(rows, many=True).data)


class RolPermisoDetailView(BaseApiView):
    def delete(self, request, rol: str, permiso_id: int):
        self._require(can_manage_users(request.user), "No tienes permisos para revocar permisos.")
        asignacion = RolPermiso.objects.filter(rol_nombre=rol, permiso_id=permiso_id).select_related("permiso").first()
        if asignacion is None:
            raise NotFound(f"El rol '{rol}' no tiene asignado el permiso {permiso_id}.")
        asignacion_id = asignacion.id
        nombre = asignacion.permiso.nombre_permiso
        asignacion.delete()
        log_event(request.user, "DELETE", "core.RolPermiso", asignacion_id, {"rol": rol, "permiso": nombre})
        return Response(status=status.HTTP_204_NO_CONTENT)
