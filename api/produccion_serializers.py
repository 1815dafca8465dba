from __future__ import annotations

from rest_framework import serializers

from produccion.models import OrdenProduccion, TareaProduccion
from rrhh.models import Empleado
from ventas.models import OrdenVenta

from .fields import OptionalCharField
from .rrhh_serializers import RRHHEmpleadoSummarySerializer
from .ventas_serializers import OrdenVentaSummarySerializer


class TareaProduccionSerializer(serializers.ModelSerializer):
    idTareaProduccion = serializers.IntegerField(source="id", read_only=True)
    idOrdenProduccion = serializers.IntegerField(source="orden_produccion_id", read_only=True)
    empleado = RRHHEmpleadoSummarySerializer(read_only=True)
    nombreTarea = serializers.CharField(source="nombre", read_only=True)
    fechaInicioTarea = serializers.DateTimeField(source="fecha_inicio", read_only=True)
    fechaFinTarea = serializers.DateTimeField(source="fecha_fin", read_only=True)
    duracionEstimadaTarea = serializers.DurationField(source="duracion_estimada", read_only=True)
    duracionRealTarea = serializers.DurationField(source="duracion_real", read_only=True)
    estadoTarea = serializers.CharField(source="estado", read_only=True)
    observacionesTarea = serializers.CharField(source="observaciones", read_only=True)

    class Meta:
        model = TareaProduccion
        fields = [
            "idTareaProduccion",
            "idOrdenProduccion",
            "empleado",
            "nombreTarea",
            "fechaInicioTarea",
            "fechaFinTarea",
            "duracionEstimadaTarea",
            "duracionRealTarea",
            "estadoTarea",
            "observacionesTarea",
        ]


class OrdenProduccionSerializer(serializers.ModelSerializer):
    idOrdenProduccion = serializers.IntegerField(source="id", read_only=True)
    ordenVenta = OrdenVentaSummarySerializer(source="orden_venta", read_only=True)
    fechaCreacion = serializers.DateTimeField(source="created_at", read_only=True)
    fechaInicioProduccion = serializers.DateField(source="fecha_inicio", read_only=True)
    fechaFinEstimadaProduccion = serializers.DateField(source="fecha_fin_estimada", read_only=True)
    fechaFinRealProduccion = serializers.DateField(source="fecha_fin_real", read_only=True)
    estadoProduccion = serializers.CharField(source="estado", read_only=True)
    observacionesProduccion = serializers.CharField(source="observaciones", read_only=True)
    fechaActualizacion = serializers.DateTimeField(source="updated_at", read_only=True)
    tareas = TareaProduccionSerializer(many=True, read_only=True)

    class Meta:
        model = OrdenProduccion
        fields = [
            "idOrdenProduccion",
            "ordenVenta",
            "fechaCreacion",
            "fechaInicioProduccion",
            "fechaFinEstimadaProduccion",
            "fechaFinRealProduccion",
            "estadoProduccion",
            "observacionesProduccion",
            "fechaActualizacion",
            "tareas",
        ]


class OrdenProduccionCreateSerializer(serializers.Serializer):
    idOrdenVenta = serializers.PrimaryKeyRelatedField(queryset=OrdenVenta.objects.all(), source="orden_venta")
    fechaInicioProduccion = serializers.DateField(source="fecha_inicio", required=False, allow_null=True)
    fechaFinEstimadaProduccion = serializers.DateField(source="fecha_fin_estimada", required=False, allow_null=True)
    observacionesProduccion = OptionalCharField(source="observaciones")


class OrdenProduccionUpdateSerializer(serializers.Serializer):
    fechaInicioProduccion = serializers.DateField(source="fecha_inicio", required=False, allow_null=True)
    fechaFinEstimadaProduccion = serializers.DateField(source="fecha_fin_estimada", required=False, allow_null=True)
    fechaFinRealProduccion = serializers.DateField(source="fecha_fin_real", required=False, allow_null=True)
    estadoProduccion = serializers.ChoiceField(
        source="estado",
        choices=OrdenProduccion.ESTADO_CHOICES,
        required=False,
        allow_null=True,
    )
    observacionesProduccion = OptionalCharField(source="observaciones")


class TareaProduccionCreateSerializer(serializers.Serializer):
    idOrdenProduccion = serializers.IntegerField(required=False, allow_null=True)
    idEmpleado = serializers.PrimaryKeyRelatedField(
        queryset=Empleado.objects.all(),
        source="empleado",
        required=False,
        allow_null=True,
    )
    nombreTarea = serializers.CharField(source="nombre", max_length=160)
    duracionEstimadaTarea = serializers.DurationField(source="duracion_estimada", required=False, allow_null=True)
    observacionesTarea = OptionalCharField(source="observaciones")


class TareaProduccionUpdateSerializer(serializers.Serializer):
    idEmpleado = serializers.PrimaryKeyRelatedField(
        queryset=Empleado.objects.all(),
        source="empleado",
        required=False,
        allow_null=True,
    )
    nombreTarea = serializers.CharField(source="nombre", max_length=160, required=False, allow_null=True)
    fechaInicioTarea = serializers.DateTimeField(source="fecha_inicio", required=False, allow_null=True)
    fechaFinTarea = serializers.DateTimeField(source="fecha_fin", required=False, allow_null=True)
    duracionEstimadaTarea = serializers.DurationField(source="duracion_estimada", required=False, allow_null=True)
    duracionRealTarea = serializers.DurationField(source="duracion_real", required=False, allow_null=True)
    estadoTarea = serializers.ChoiceField(
        source="estado",
        choices=TareaProduccion.ESTADO_CHOICES,
        required=False,
        allow_null=True,
    )
    observacionesTarea = serializers.CharField(source="observaciones", required=False, allow_blank=True, allow_null=True)
