from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from compras.models import DetalleOrdenCompra, OrdenCompra
from maestros.models import Insumo, Proveedor

from .fields import OptionalCharField
from .maestros_serializers import InsumoSummarySerializer, ProveedorSummarySerializer


class DetalleOrdenCompraSerializer(serializers.ModelSerializer):
    idDetalleCompra = serializers.IntegerField(source="id", read_only=True)
    insumo = InsumoSummarySerializer(read_only=True)
    cantidadCompra = serializers.IntegerField(source="cantidad", read_only=True)
    precioUnitarioCompra = serializers.DecimalField(source="precio_unitario", max_digits=14, decimal_places=2, read_only=True)
    subtotalCompra = serializers.DecimalField(source="subtotal", max_digits=16, decimal_places=2, read_only=True)

    class Meta:
        model = DetalleOrdenCompra
        fields = ["idDetalleCompra", "insumo", "cantidadCompra", "precioUnitarioCompra", "subtotalCompra"]


class OrdenCompraSerializer(serializers.ModelSerializer):
    idOrdenCompra = serializers.IntegerField(source="id", read_only=True)
    proveedor = ProveedorSummarySerializer(read_only=True)
    fechaPedidoCompra = serializers.DateField(source="fecha_pedido", read_only=True)
    fechaEntregaEstimadaCompra = serializers.DateField(source="fecha_entrega_estimada", read_only=True)
    fechaEntregaRealCompra = serializers.DateField(source="fecha_entrega_real", read_only=True)
    estadoCompra = serializers.CharField(source="estado", read_only=True)
    totalCompra = serializers.DecimalField(source="total", max_digits=16, decimal_places=2, read_only=True)
    observacionesCompra = serializers.CharField(source="observaciones", read_only=True)
    fechaActualizacion = serializers.DateTimeField(source="updated_at", read_only=True)
    detalles = DetalleOrdenCompraSerializer(many=True, read_only=True)

    class Meta:
        model = OrdenCompra
        fields = [
            "idOrdenCompra",
            "proveedor",
            "fechaPedidoCompra",
            "fechaEntregaEstimadaCompra",
            "fechaEntregaRealCompra",
            "estadoCompra",
            "totalCompra",
            "observacionesCompra",
            "fechaActualizacion",
            "detalles",
        ]


class OrdenCompraSummarySerializer(serializers.ModelSerializer):
    idOrdenCompra = serializers.IntegerField(source="id", read_only=True)
    fechaPedidoCompra = serializers.DateField(source="fecha_pedido", read_only=True)
    proveedorNombre = serializers.CharField(source="proveedor.nombre_comercial", read_only=True)
    estadoCompra = serializers.CharField(source="estado", read_only=True)
    totalCompra = serializers.DecimalField(source="total", max_digits=16, decimal_places=2, read_only=True)

    class Meta:
        model = OrdenCompra
        fields = ["idOrdenCompra", "fechaPedidoCompra", "proveedorNombre", "estadoCompra", "totalCompra"]


class DetalleOrdenCompraInputSerializer(serializers.Serializer):
    idInsumo = serializers.PrimaryKeyRelatedField(queryset=Insumo.objects.all(), source="insumo")
    cantidadCompra = serializers.IntegerField(source="cantidad", min_value=1)
    precioUnitarioCompra = serializers.DecimalField(
        source="precio_unitario",
        max_digits=14,
        decimal_places=2,
        min_value=Decimal("0"),
    )


class DetalleOrdenCompraUpdateSerializer(serializers.Serializer):
    idInsumo = serializers.PrimaryKeyRelatedField(
        queryset=Insumo.objects.all(),
        source="insumo",
        required=False,
        allow_null=True,
    )
    cantidadCompra = serializers.IntegerField(source="cantidad", min_value=1, required=False, allow_null=True)
    precioUnitarioCompra = serializers.DecimalField(
        source="precio_unitario",
        max_digits=14,
        decimal_places=2,
        min_value=Decimal("0"),
        required=False,
        allow_null=True,
    )


class OrdenCompraCreateSerializer(serializers.Serializer):
    idProveedor = serializers.PrimaryKeyRelatedField(queryset=Proveedor.objects.all(), source="proveedor")
    fechaEntregaEstimadaCompra = serializers.DateField(source="fecha_entrega_estimada", required=False, allow_null=True)
    observacionesCompra = OptionalCharField(source="observaciones")
    detalles = DetalleOrdenCompraInputSerializer(many=True, allow_empty=False)


class OrdenCompraUpdateSerializer(serializers.Serializer):
    fechaEntregaEstimadaCompra = serializers.DateField(source="fecha_entrega_estimada", required=False, allow_null=True)
    fechaEntregaRealCompra = serializers.DateField(source="fecha_entrega_real", required=False, allow_null=True)
    estadoCompra = serializers.ChoiceField(
        source="estado",
        choices=OrdenCompra.ESTADO_CHOICES,
        required=False,
        allow_null=True,
    )
    observacionesCompra = OptionalCharField(source="observaciones")
