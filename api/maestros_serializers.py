from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from maestros.models import Insumo, InsumoPorProducto, Producto, Proveedor

from .fields import OptionalCharField


class ProveedorSerializer(serializers.ModelSerializer):
    idProveedor = serializers.IntegerField(source="id", read_only=True)
    nombreComercialProveedor = serializers.CharField(source="nombre_comercial", max_length=200)
    razonSocialProveedor = OptionalCharField(source="razon_social", max_length=200)
    nitProveedor = serializers.CharField(source="nit", max_length=40)
    direccionProveedor = OptionalCharField(source="direccion", max_length=255)
    telefonoProveedor = OptionalCharField(source="telefono", max_length=40)
    correoProveedor = serializers.EmailField(source="correo", required=False, allow_blank=True, allow_null=True)
    contactoPrincipalProveedor = OptionalCharField(source="contacto_principal", max_length=160)
    fechaCreacion = serializers.DateTimeField(source="created_at", read_only=True)
    fechaActualizacion = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Proveedor
        fields = [
            "idProveedor",
            "nombreComercialProveedor",
            "razonSocialProveedor",
            "nitProveedor",
            "direccionProveedor",
            "telefonoProveedor",
            "correoProveedor",
            "contactoPrincipalProveedor",
            "fechaCreacion",
            "fechaActualizacion",
        ]

    def validate_nitProveedor(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("El NIT es obligatorio.")
        return value

    def validate_correoProveedor(self, value):
        return value or ""


class ProveedorUpdateSerializer(ProveedorSerializer):
    nitProveedor = serializers.CharField(source="nit", read_only=True)


class ProveedorSummarySerializer(serializers.ModelSerializer):
    idProveedor = serializers.IntegerField(source="id", read_only=True)
    nitProveedor = serializers.CharField(source="nit", read_only=True)
    nombreComercialProveedor = serializers.CharField(source="nombre_comercial", read_only=True)

    class Meta:
        model = Proveedor
        fields = ["idProveedor", "nitProveedor", "nombreComercialProveedor"]


class InsumoSerializer(serializers.ModelSerializer):
    idInsumo = serializers.IntegerField(source="id", read_only=True)
    nombreInsumo = serializers.CharField(source="nombre", max_length=250)
    descripcionInsumo = OptionalCharField(source="descripcion")
    unidadMedidaInsumo = serializers.CharField(source="unidad_medida", max_length=30)
    stockMinimoInsumo = serializers.IntegerField(source="stock_minimo", min_value=0, required=False)
    fechaCreacion = serializers.DateTimeField(source="created_at", read_only=True)
    fechaActualizacion = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Insumo
        fields = [
            "idInsumo",
            "nombreInsumo",
            "descripcionInsumo",
            "unidadMedidaInsumo",
            "stockMinimoInsumo",
            "fechaCreacion",
            "fechaActualizacion",
        ]

    def validate_nombreInsumo(self, value: str) -> str:
        value = " ".join(value.split())
        if not value:
            raise serializers.ValidationError("El nombre del insumo es obligatorio.")
        return value


class InsumoSummarySerializer(serializers.ModelSerializer):
    idInsumo = serializers.IntegerField(source="id", read_only=True)
    nombreInsumo = serializers.CharField(source="nombre", read_only=True)
    unidadMedidaInsumo = serializers.CharField(source="unidad_medida", read_only=True)

    class Meta:
        model = Insumo
        fields = ["idInsumo", "nombreInsumo", "unidadMedidaInsumo"]


class ProductoSerializer(serializers.ModelSerializer):
    idProducto = serializers.IntegerField(source="id", read_only=True)
    referenciaProducto = serializers.CharField(source="referencia", max_length=60)
    nombreProducto = serializers.CharField(source="nombre", max_length=200)
    descripcionProducto = OptionalCharField(source="descripcion")
    tallaProducto = OptionalCharField(source="talla", max_length=30)
    colorProducto = OptionalCharField(source="color", max_length=60)
    tipoProducto = OptionalCharField(source="tipo", max_length=80)
    generoProducto = OptionalCharField(source="genero", max_length=40)
    costoProduccion = serializers.DecimalField(
        source="costo_produccion",
        max_digits=14,
        decimal_places=2,
        min_value=Decimal("0"),
        required=False,
    )
    precioVenta = serializers.DecimalField(
        source="precio_venta",
        max_digits=14,
        decimal_places=2,
        min_value=Decimal("0"),
    )
    unidadMedidaProducto = OptionalCharField(source="unidad_medida", max_length=30)
    stockMinimoProducto = serializers.IntegerField(source="stock_minimo", min_value=0, required=False)
    fechaCreacion = serializers.DateTimeField(source="created_at", read_only=True)
    fechaActualizacion = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Producto
        fields = [
            "idProducto",
            "referenciaProducto",
            "nombreProducto",
            "descripcionProducto",
            "tallaProducto",
            "colorProducto",
            "tipoProducto",
            "generoProducto",
            "costoProduccion",
            "precioVenta",
            "unidadMedidaProducto",
            "stockMinimoProducto",
            "fechaCreacion",
            "fechaActualizacion",
        ]

    def validate_referenciaProducto(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("La referencia es obligatoria.")
        return value


class ProductoUpdateSerializer(ProductoSerializer):
    referenciaProducto = serializers.CharField(source="referencia", read_only=True)


class ProductoSummarySerializer(serializers.ModelSerializer):
    idProducto = serializers.IntegerField(source="id", read_only=True)
    referenciaProducto = serializers.CharField(source="referencia", read_only=True)
    nombreProducto = serializers.CharField(source="nombre", read_only=True)
    tallaProducto = serializers.CharField(source="talla", read_only=True)
    colorProducto = serializers.CharField(source="color", read_only=True)

    class Meta:
        model = Producto
        fields = ["idProducto", "referenciaProducto", "nombreProducto", "tallaProducto", "colorProducto"]


class InsumoPorProductoSerializer(serializers.ModelSerializer):
    idProducto = serializers.IntegerField(source="producto_id", read_only=True)
    referenciaProducto = serializers.CharField(source="producto.referencia", read_only=True)
    nombreProducto = serializers.CharField(source="producto.nombre", read_only=True)
    idInsumo = serializers.IntegerField(source="insumo_id", read_only=True)
    nombreInsumo = serializers.CharField(source="insumo.nombre", read_only=True)
    unidadMedidaInsumo = serializers.CharField(source="insumo.unidad_medida", read_only=True)
    cantidadRequerida = serializers.DecimalField(source="cantidad_requerida", max_digits=14, decimal_places=4, read_only=True)

    class Meta:
        model = InsumoPorProducto
        fields = [
            "idProducto",
            "referenciaProducto",
            "nombreProducto",
            "idInsumo",
            "nombreInsumo",
            "unidadMedidaInsumo",
            "cantidadRequerida",
        ]


class InsumoPorProductoCreateSerializer(serializers.Serializer):
    idProducto = serializers.IntegerField(required=False, allow_null=True)
    idInsumo = serializers.PrimaryKeyRelatedField(queryset=Insumo.objects.all(), source="insumo")
    cantidadRequerida = serializers.DecimalField(
        source="cantidad_requerida",
        max_digits=14,
        decimal_places=4,
        min_value=Decimal("0.0001"),
    )


class InsumoPorProductoUpdateSerializer(serializers.Serializer):
    cantidadRequerida = serializers.DecimalField(
        source="cantidad_requerida",
        max_digits=14,
        decimal_places=4,
        min_value=Decimal("0.0001"),
    )
