from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from core.access import ROLE_ORDER, primary_role
from core.models import Permiso, RolPermiso, UserProfile
from rrhh.models import Empleado

from .fields import OptionalCharField
from .rrhh_serializers import RRHHEmpleadoSummarySerializer

User = get_user_model()


def _perfil(user) -> UserProfile | None:
    try:
        return user.userprofile
    except UserProfile.DoesNotExist:
        return None


class LoginSerializer(serializers.Serializer):
    nombreUsuario = serializers.CharField(max_length=150)
    contrasena = serializers.CharField(trim_whitespace=False)


class UserInfoSerializer(serializers.ModelSerializer):
    idUsuario = serializers.IntegerField(source="id", read_only=True)
    nombreUsuario = serializers.CharField(source="username", read_only=True)
    rolUsuario = serializers.SerializerMethodField()
    habilitado = serializers.BooleanField(source="is_active", read_only=True)
    nombre = serializers.CharField(source="first_name", read_only=True)
    apellido = serializers.CharField(source="last_name", read_only=True)
    email = serializers.CharField(read_only=True)
    telefono = serializers.SerializerMethodField()
    fechaCreacion = serializers.DateTimeField(source="date_joined", read_only=True)
    fechaActualizacion = serializers.SerializerMethodField()
    empleado = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "idUsuario",
            "nombreUsuario",
            "rolUsuario",
            "habilitado",
            "nombre",
            "apellido",
            "email",
            "telefono",
            "fechaCreacion",
            "fechaActualizacion",
            "empleado",
        ]

    def get_rolUsuario(self, obj):
        return primary_role(obj)

    def get_telefono(self, obj):
        perfil = _perfil(obj)
        return perfil.telefono if perfil else ""

    def get_fechaActualizacion(self, obj):
        perfil = _perfil(obj)
        if perfil is None:
            return None
        return serializers.DateTimeField().to_representation(perfil.updated_at)

    def get_empleado(self, obj):
        perfil = _perfil(obj)
        if perfil is None or perfil.empleado is None:
            return None
        return RRHHEmpleadoSummarySerializer(perfil.empleado).data


class RegistroSerializer(serializers.Serializer):
    idEmpleado = serializers.PrimaryKeyRelatedField(
        queryset=Empleado.objects.all(),
        source="empleado",
        required=False,
        allow_null=True,
    )
    nombreUsuario = serializers.CharField(source="nombre_usuario", max_length=150)
    contrasena = serializers.CharField(trim_whitespace=False)
    rolUsuario = serializers.ChoiceField(source="rol", choices=ROLE_ORDER)
    email = OptionalCharField(max_length=254)
    nombre = OptionalCharField(max_length=150)
    apellido = OptionalCharField(max_length=150)
    telefono = OptionalCharField(max_length=30)
    habilitado = serializers.BooleanField(required=False, default=True)


class UsuarioUpdateSerializer(serializers.Serializer):
    idEmpleado = serializers.PrimaryKeyRelatedField(
        queryset=Empleado.objects.all(),
        source="empleado",
        required=False,
        allow_null=True,
    )
    rolUsuario = serializers.ChoiceField(source="rol", choices=ROLE_ORDER, required=False, allow_null=True)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    nombre = serializers.CharField(max_length=150, required=False, allow_blank=True, allow_null=True)
    apellido = serializers.CharField(max_length=150, required=False, allow_blank=True, allow_null=True)
    telefono = serializers.CharField(max_length=30, required=False, allow_blank=True, allow_null=True)
    habilitado = serializers.BooleanField(required=False, allow_null=True)


class CambioContrasenaSerializer(serializers.Serializer):
    currentPassword = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
    newPassword = serializers.CharField(trim_whitespace=False)


class PermisoSerializer(serializers.ModelSerializer):
    idPermiso = serializers.IntegerField(source="id", read_only=True)
    nombrePermiso = serializers.CharField(source="nombre_permiso", max_length=100)

    class Meta:
        model = Permiso
        fields = ["idPermiso", "nombrePermiso"]


class RolPermisoSerializer(serializers.ModelSerializer):
    idRolPermiso = serializers.IntegerField(source="id", read_only=True)
    rolNombre = serializers.CharField(source="rol_nombre", read_only=True)
    idPermiso = serializers.IntegerField(source="permiso_id", read_only=True)
    permiso = PermisoSerializer(read_only=True)

    class Meta:
        model = RolPermiso
        fields = ["idRolPermiso", "rolNombre", "idPermiso", "permiso"]


class RolPermisoAsignacionSerializer(serializers.Serializer):
    rolNombre = serializers.ChoiceField(source="rol_nombre", choices=ROLE_ORDER)
    idPermiso = serializers.PrimaryKeyRelatedField(queryset=Permiso.objects.all(), source="permiso")
