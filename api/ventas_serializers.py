from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from crm.models import Cliente
from maestros.models import Producto
from ventas.models import DetalleOrdenVenta, OrdenVenta

from .crm_serializers import CRMClienteSummarySerializer
from .fields import OptionalCharField
from .maestros_serializers import ProductoSummarySerializer


class DetalleOrdenVentaSerializer(serializers.ModelSerializer):
    idDetalleOrden = serializers.IntegerField(source="id", read_only=True)
    producto = ProductoSummarySerializer(read_only=True)
    cantidadProducto = serializers.IntegerField(source="cantidad", read_only=True)
    precioUnitarioVenta = serializers.DecimalField(source="precio_unitario", max_digits=14, decimal_places=2, read_only=True)
    subtotalDetalle = serializers.DecimalField(source="subtotal", max_digits=16, decimal_places=2, read_only=True)

    class Meta:
        model = DetalleOrdenVenta
        fields = ["idDetalleOrden", "producto", "cantidadProducto", "precioUnitarioVenta", "subtotalDetalle"]


class OrdenVentaSerializer(serializers.ModelSerializer):
    idOrdenVenta = serializers.IntegerField(source="id", read_only=True)
    cliente = CRMClienteSummarySerializer(read_only=True)
    fechaPedido = serializers.DateField(source="fecha_pedido", read_only=True)
    fechaEntregaEstimada = serializers.DateField(source="fecha_entrega_estimada", read_only=True)
    estadoOrden = serializers.CharField(source="estado", read_only=True)
    totalOrden = serializers.DecimalField(source="total", max_digits=16, decimal_places=2, read_only=True)
    observacionesOrden = serializers.CharField(source="observaciones", read_only=True)
    fechaActualizacion = serializers.DateTimeField(source="updated_at", read_only=True)
    detalles = DetalleOrdenVentaSerializer(many=True, read_only=True)

    class Meta:
        model = OrdenVenta
        fields = [
            "idOrdenVenta",
            "cliente",
            "fechaPedido",
            "fechaEntregaEstimada",
            "estadoOrden",
            "totalOrden",
            "observacionesOrden",
            "fechaActualizacion",
            "detalles",
        ]


class OrdenVentaSummarySerializer(serializers.ModelSerializer):
    idOrdenVenta = serializers.IntegerField(source="id", read_only=True)
    fechaPedido = serializers.DateField(source="fecha_pedido", read_only=True)
    clienteNombre = serializers.CharField(source="cliente.nombre", read_only=True)
    estadoOrden = serializers.CharField(source="estado", read_only=True)
    totalOrden = serializers.DecimalField(source="total", max_digits=16, decimal_places=2, read_only=True)

    class Meta:
        model = OrdenVenta
        fields = ["idOrdenVenta", "fechaPedido", "clienteNombre", "estadoOrden", "totalOrden"]


class DetalleOrdenVentaInputSerializer(serializers.Serializer):
    idProducto = serializers.PrimaryKeyRelatedField(queryset=Producto.objects.all(), source="producto")
    cantidadProducto = serializers.IntegerField(source="cantidad", min_value=1)
    precioUnitarioVenta = serializers.DecimalField(
        source="precio_unitario",
        max_digits=14,
        decimal_places=2,
        min_value=Decimal("0"),
        required=False,
        allow_null=True,
    )


class DetalleOrdenVentaUpdateSerializer(serializers.Serializer):
    idProducto = serializers.PrimaryKeyRelatedField(
        queryset=Producto.objects.all(),
        source="producto",
        required=False,
        allow_null=True,
    )
    cantidadProducto = serializers.IntegerField(source="cantidad", min_value=1, required=False, allow_null=True)
    precioUnitarioVenta = serializers.DecimalField(
        source="precio_unitario",
        max_digits=14,
        decimal_places=2,
        min_value=Decimal("0"),
        required=False,
        allow_null=True,
    )


class OrdenVentaCreateSerializer(serializers.Serializer):
    idCliente = serializers.PrimaryKeyRelatedField(queryset=Cliente.objects.all(), source="cliente")
    fechaEntregaEstimada = serializers.DateField(source="fecha_entrega_estimada", required=False, allow_null=True)
    observacionesOrden = OptionalCharField(source="observaciones")
    detalles = DetalleOrdenVentaInputSerializer(many=True, allow_empty=False)


class OrdenVentaUpdateSerializer(serializers.Serializer):
    fechaEntregaEstimada = serializers.DateField(source="fecha_entrega_estimada", required=False, allow_null=True)
    estadoOrden = serializers.ChoiceField(
        source="estado",
        choices=OrdenVenta.ESTADO_CHOICES,
        required=False,
        allow_null=True,
    )
    observacionesOrden = OptionalCharField(source="observaciones")
