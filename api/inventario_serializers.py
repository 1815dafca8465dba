from __future__ import annotations

from rest_framework import serializers

from inventario.models import (
    AlertaStock,
    InventarioInsumo,
    InventarioProducto,
    MovimientoBase,
    MovimientoInsumo,
    MovimientoProducto,
)
from maestros.models import Insumo, Producto

from .fields import OptionalCharField
from .maestros_serializers import InsumoSummarySerializer, ProductoSummarySerializer


def _cantidad(**kwargs):
    return serializers.DecimalField(max_digits=18, decimal_places=3, **kwargs)


class InventarioInsumoSerializer(serializers.ModelSerializer):
    idInventarioInsumo = serializers.IntegerField(source="id", read_only=True)
    ubicacionInventario = serializers.CharField(source="ubicacion", read_only=True)
    insumo = InsumoSummarySerializer(read_only=True)
    cantidadStock = _cantidad(source="cantidad_stock", read_only=True)
    ultimaActualizacion = serializers.DateTimeField(source="ultima_actualizacion", read_only=True)
    umbralMinimoStock = serializers.IntegerField(source="insumo.stock_minimo", read_only=True)

    class Meta:
        model = InventarioInsumo
        fields = [
            "idInventarioInsumo",
            "ubicacionInventario",
            "insumo",
            "cantidadStock",
            "ultimaActualizacion",
            "umbralMinimoStock",
        ]


class InventarioProductoSerializer(serializers.ModelSerializer):
    idInventarioProducto = serializers.IntegerField(source="id", read_only=True)
    ubicacionInventario = serializers.CharField(source="ubicacion", read_only=True)
    producto = ProductoSummarySerializer(read_only=True)
    cantidadStock = _cantidad(source="cantidad_stock", read_only=True)
    ultimaActualizacion = serializers.DateTimeField(source="ultima_actualizacion", read_only=True)
    umbralMinimoStock = serializers.IntegerField(source="producto.stock_minimo", read_only=True)

    class Meta:
        model = InventarioProducto
        fields = [
            "idInventarioProducto",
            "ubicacionInventario",
            "producto",
            "cantidadStock",
            "ultimaActualizacion",
            "umbralMinimoStock",
        ]


class InventarioInsumoCreateSerializer(serializers.Serializer):
    ubicacionInventario = serializers.CharField(source="ubicacion", max_length=120)
    idInsumo = serializers.PrimaryKeyRelatedField(queryset=Insumo.objects.all(), source="item")
    cantidadStock = _cantidad(source="cantidad_stock", min_value=0)


class InventarioProductoCreateSerializer(serializers.Serializer):
    ubicacionInventario = serializers.CharField(source="ubicacion", max_length=120)
    idProducto = serializers.PrimaryKeyRelatedField(queryset=Producto.objects.all(), source="item")
    cantidadStock = _cantidad(source="cantidad_stock", min_value=0)


class MovimientoInsumoSerializer(serializers.ModelSerializer):
    idMovimientoInsumo = serializers.IntegerField(source="id", read_only=True)
    tipoMovimiento = serializers.CharField(source="tipo", read_only=True)
    inventarioInsumoRef = serializers.SerializerMethodField()
    cantidadMovimiento = _cantidad(source="cantidad", read_only=True)
    fechaMovimiento = serializers.DateTimeField(source="fecha", read_only=True)
    descripcionMovimiento = serializers.CharField(source="descripcion", read_only=True)

    class Meta:
        model = MovimientoInsumo
        fields = [
            "idMovimientoInsumo",
            "tipoMovimiento",
            "inventarioInsumoRef",
            "cantidadMovimiento",
            "fechaMovimiento",
            "descripcionMovimiento",
        ]

    def get_inventarioInsumoRef(self, obj):
        return {
            "idInventarioInsumo": obj.inventario_id,
            "ubicacionInventario": obj.inventario.ubicacion,
            "insumoNombre": obj.inventario.insumo.nombre,
        }


class MovimientoProductoSerializer(serializers.ModelSerializer):
    idMovimientoProducto = serializers.IntegerField(source="id", read_only=True)
    tipoMovimiento = serializers.CharField(source="tipo", read_only=True)
    inventarioProductoRef = serializers.SerializerMethodField()
    cantidadMovimiento = _cantidad(source="cantidad", read_only=True)
    fechaMovimiento = serializers.DateTimeField(source="fecha", read_only=True)
    descripcionMovimiento = serializers.CharField(source="descripcion", read_only=True)

    class Meta:
        model = MovimientoProducto
        fields = [
            "idMovimientoProducto",
            "tipoMovimiento",
            "inventarioProductoRef",
            "cantidadMovimiento",
            "fechaMovimiento",
            "descripcionMovimiento",
        ]

    def get_inventarioProductoRef(self, obj):
        return {
            "idInventarioProducto": obj.inventario_id,
            "ubicacionInventario": obj.inventario.ubicacion,
            "productoNombre": obj.inventario.producto.nombre,
        }


class MovimientoInsumoCreateSerializer(serializers.Serializer):
    tipoMovimiento = serializers.ChoiceField(source="tipo", choices=MovimientoBase.TIPO_CHOICES)
    idInventarioInsumo = serializers.IntegerField(source="inventario_id")
    cantidadMovimiento = _cantidad(source="cantidad")
    descripcionMovimiento = OptionalCharField(source="descripcion", max_length=255)


class MovimientoProductoCreateSerializer(serializers.Serializer):
    tipoMovimiento = serializers.ChoiceField(source="tipo", choices=MovimientoBase.TIPO_CHOICES)
    idInventarioProducto = serializers.IntegerField(source="inventario_id")
    cantidadMovimiento = _cantidad(source="cantidad")
    descripcionMovimiento = OptionalCharField(source="descripcion", max_length=255)


class AlertaStockSerializer(serializers.ModelSerializer):
    idAlerta = serializers.IntegerField(source="id", read_only=True)
    tipoItem = serializers.CharField(source="tipo_item", read_only=True)
    idItem = serializers.SerializerMethodField()
    nombreItem = serializers.SerializerMethodField()
    mensaje = serializers.CharField(read_only=True)
    nivelActual = _cantidad(source="nivel_actual", read_only=True)
    umbralConfigurado = serializers.IntegerField(source="umbral", read_only=True)
    fechaCreacion = serializers.DateTimeField(source="created_at", read_only=True)
    estadoAlerta = serializers.CharField(source="estado", read_only=True)

    class Meta:
        model = AlertaStock
        fields = [
            "idAlerta",
            "tipoItem",
            "idItem",
            "nombreItem",
            "mensaje",
            "nivelActual",
            "umbralConfigurado",
            "fechaCreacion",
            "estadoAlerta",
        ]

    def get_idItem(self, obj):
        return obj.insumo_id if obj.tipo_item == AlertaStock.TIPO_INSUMO else obj.producto_id

    def get_nombreItem(self, obj):
        item = obj.item
        return item.nombre if item is not None else ""


class UmbralStockSerializer(serializers.Serializer):
    nuevoUmbral = serializers.IntegerField(min_value=0)
