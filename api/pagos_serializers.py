from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from compras.models import OrdenCompra
from pagos.models import PagoCobro
from ventas.models import OrdenVenta

from .compras_serializers import OrdenCompraSummarySerializer
from .fields import OptionalCharField
from .ventas_serializers import OrdenVentaSummarySerializer


class PagoCobroSerializer(serializers.ModelSerializer):
    idPagoCobro = serializers.IntegerField(source="id", read_only=True)
    tipoTransaccion = serializers.CharField(source="tipo", read_only=True)
    ordenVenta = OrdenVentaSummarySerializer(source="orden_venta", read_only=True)
    ordenCompra = OrdenCompraSummarySerializer(source="orden_compra", read_only=True)
    fechaRegistroTransaccion = serializers.DateTimeField(source="fecha_registro", read_only=True)
    fechaPagoCobro = serializers.DateField(source="fecha_pago_cobro", read_only=True)
    metodoPago = serializers.CharField(source="metodo_pago", read_only=True)
    montoTransaccion = serializers.DecimalField(source="monto", max_digits=16, decimal_places=2, read_only=True)
    referenciaTransaccion = serializers.CharField(source="referencia", read_only=True)
    estadoTransaccion = serializers.CharField(source="estado", read_only=True)
    observacionesTransaccion = serializers.CharField(source="observaciones", read_only=True)
    fechaActualizacion = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = PagoCobro
        fields = [
            "idPagoCobro",
            "tipoTransaccion",
            "ordenVenta",
            "ordenCompra",
            "fechaRegistroTransaccion",
            "fechaPagoCobro",
            "metodoPago",
            "montoTransaccion",
            "referenciaTransaccion",
            "estadoTransaccion",
            "observacionesTransaccion",
            "fechaActualizacion",
        ]


class PagoCobroCreateSerializer(serializers.Serializer):
    tipoTransaccion = serializers.ChoiceField(source="tipo", choices=PagoCobro.TIPO_CHOICES)
    idOrdenVenta = serializers.PrimaryKeyRelatedField(
        queryset=OrdenVenta.objects.all(),
        source="orden_venta",
        required=False,
        allow_null=True,
    )
    idOrdenCompra = serializers.PrimaryKeyRelatedField(
        queryset=OrdenCompra.objects.all(),
        source="orden_compra",
        required=False,
        allow_null=True,
    )
    fechaPagoCobro = serializers.DateField(source="fecha_pago_cobro")
    metodoPago = serializers.CharField(source="metodo_pago", max_length=60)
    montoTransaccion = serializers.DecimalField(
        source="monto",
        max_digits=16,
        decimal_places=2,
        min_value=Decimal("0.01"),
    )
    referenciaTransaccion = OptionalCharField(source="referencia", max_length=120)
    estadoTransaccion = serializers.ChoiceField(
        source="estado",
        choices=PagoCobro.ESTADO_CHOICES,
        required=False,
        default=PagoCobro.ESTADO_PENDIENTE,
    )
    observacionesTransaccion = OptionalCharField(source="observaciones")


class PagoCobroUpdateSerializer(serializers.Serializer):
    fechaPagoCobro = serializers.DateField(source="fecha_pago_cobro", required=False, allow_null=True)
    metodoPago = serializers.CharField(source="metodo_pago", max_length=60, required=False, allow_null=True)
    referenciaTransaccion = serializers.CharField(
        source="referencia",
        max_length=120,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    estadoTransaccion = serializers.ChoiceField(
        source="estado",
        choices=PagoCobro.ESTADO_CHOICES,
        required=False,
        allow_null=True,
    )
    observacionesTransaccion = serializers.CharField(
        source="observaciones",
        required=False,
        allow_blank=True,
        allow_null=True,
    )
