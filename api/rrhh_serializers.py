from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from core.access import primary_role
from rrhh.models import Empleado

from .fields import OptionalCharField


class RRHHEmpleadoSummarySerializer(serializers.ModelSerializer):
    idEmpleado = serializers.IntegerField(source="id", read_only=True)
    numeroDocumento = serializers.CharField(source="numero_documento", read_only=True)
    nombreEmpleado = serializers.CharField(source="nombre", read_only=True)

    class Meta:
        model = Empleado
        fields = ["idEmpleado", "numeroDocumento", "nombreEmpleado"]


class RRHHEmpleadoSerializer(serializers.ModelSerializer):
    idEmpleado = serializers.IntegerField(source="id", read_only=True)
    tipoDocumento = serializers.ChoiceField(
        source="tipo_documento",
        choices=Empleado.DOC_CHOICES,
        required=False,
    )
    numeroDocumento = serializers.CharField(source="numero_documento", max_length=40)
    nombreEmpleado = serializers.CharField(source="nombre", max_length=180)
    cargoEmpleado = OptionalCharField(source="cargo", max_length=120)
    areaEmpleado = OptionalCharField(source="area", max_length=120)
    salarioEmpleado = serializers.DecimalField(
        source="salario",
        max_digits=14,
        decimal_places=2,
        min_value=Decimal("0"),
        required=False,
    )
    fechaContratacionEmpleado = serializers.DateField(source="fecha_contratacion", required=False)
    fechaCreacion = serializers.DateTimeField(source="created_at", read_only=True)
    fechaActualizacion = serializers.DateTimeField(source="updated_at", read_only=True)
    usuario = serializers.SerializerMethodField()

    class Meta:
        model = Empleado
        fields = [
            "idEmpleado",
            "tipoDocumento",
            "numeroDocumento",
            "nombreEmpleado",
            "cargoEmpleado",
            "areaEmpleado",
            "salarioEmpleado",
            "fechaContratacionEmpleado",
            "fechaCreacion",
            "fechaActualizacion",
            "usuario",
        ]

    def validate_numeroDocumento(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("El número de documento es obligatorio.")
        return value

    def get_usuario(self, obj: Empleado):
        perfil = getattr(obj, "perfil_usuario", None)
        if perfil is None:
            return None
        return {
            "idUsuario": perfil.user_id,
            "nombreUsuario": perfil.user.username,
            "rolUsuario": primary_role(perfil.user),
        }


class RRHHEmpleadoUpdateSerializer(RRHHEmpleadoSerializer):
    tipoDocumento = serializers.CharField(source="tipo_documento", read_only=True)
    numeroDocumento = serializers.CharField(source="numero_documento", read_only=True)
