from __future__ import annotations

from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from core.access import (
    RECURSO_INSUMOS,
    RECURSO_PRODUCTOS,
    RECURSO_PROVEEDORES,
    can_create,
    can_delete,
    can_edit,
    can_view,
)
from core.audit import log_event
from core.exceptions import ConflictoError, ReglaNegocioError
from core.utils import normalizar_nombre
from inventario.services import evaluar_alerta
from maestros.models import Insumo, InsumoPorProducto, Producto, Proveedor

from .base import BaseApiView
from .filters import InsumoFilter, ProductoFilter, ProveedorFilter
from .maestros_serializers import (
    InsumoPorProductoCreateSerializer,
    InsumoPorProductoSerializer,
    InsumoPorProductoUpdateSerializer,
    InsumoSerializer,
    ProductoSerializer,
    ProductoUpdateSerializer,
    ProveedorSerializer,
    ProveedorUpdateSerializer,
)


class ProveedoresView(BaseApiView):
    filterset_class = ProveedorFilter
    sort_fields = {
        "idProveedor": "id",
        "nombreComercialProveedor": "nombre_comercial",
        "razonSocialProveedor": "razon_social",
        "nitProveedor": "nit",
        "fechaCreacion": "created_at",
    }
    default_ordering = ["nombre_comercial"]

    def get(self, request):
        self._require(can_view(request.user, RECURSO_PROVEEDORES), "No tienes permisos para consultar proveedores.")
        return self._page(request, self._filter(request, Proveedor.objects.all()), ProveedorSerializer)

    def post(self, request):
        self._require(can_create(request.user, RECURSO_PROVEEDORES), "No tienes permisos para crear proveedores.")
        serializer = ProveedorSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        nit = serializer.validated_data["nit"]
        if Proveedor.objects.filter(nit__iexact=nit).exists():
            raise ConflictoError(f"Ya existe un proveedor con NIT '{nit}'.")
        proveedor = serializer.save()
        log_event(
            request.user,
            "CREATE",
            "maestros.Proveedor",
            proveedor.id,
            {"nit": proveedor.nit, "nombre_comercial": proveedor.nombre_comercial},
        )
        return Response(ProveedorSerializer(proveedor).data, status=status.HTTP_201_CREATED)


class ProveedorDetailView(BaseApiView):
    def get(self, request, proveedor_id: int):
        self._require(can_view(request.user, RECURSO_PROVEEDORES), "No tienes permisos para consultar proveedores.")
        proveedor = self._get_or_404(Proveedor.objects.all(), proveedor_id, "el proveedor")
        return Response(ProveedorSerializer(proveedor).data)

    def put(self, request, proveedor_id: int):
        self._require(can_edit(request.user, RECURSO_PROVEEDORES), "No tienes permisos para editar proveedores.")
        proveedor = self._get_or_404(Proveedor.objects.all(), proveedor_id, "el proveedor")
        serializer = ProveedorUpdateSerializer(proveedor, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        proveedor = serializer.save()
        log_event(
            request.user,
            "UPDATE",
            "maestros.Proveedor",
            proveedor.id,
            {"nombre_comercial": proveedor.nombre_comercial},
        )
        return Response(ProveedorSerializer(proveedor).data)

    def delete(self, request, proveedor_id: int):
        self._require(can_delete(request.user, RECURSO_PROVEEDORES), "No tienes permisos para eliminar proveedores.")
        proveedor = self._get_or_404(Proveedor.objects.all(), proveedor_id, "el proveedor")
        if proveedor.ordenes_compra.exists():
            raise ConflictoError("El proveedor tiene órdenes de compra registradas y no puede eliminarse.")
        nit = proveedor.nit
        proveedor.delete()
        log_event(request.user, "DELETE", "maestros.Proveedor", proveedor_id, {"nit": nit})
        return Response(status=status.HTTP_204_NO_CONTENT)


class ProveedorPorNitView(BaseApiView):
    def get(self, request, nit: str):
        self._require(can_view(request.user, RECURSO_PROVEEDORES), "No tienes permisos para consultar proveedores.")
        proveedor = Proveedor.objects.filter(nit__iexact=nit.strip()).first()
        if proveedor is None:
            raise NotFound(f"No se encontró un proveedor con NIT '{nit}'.")
        return Response(ProveedorSerializer(proveedor).data)


class InsumosView(BaseApiView):
    filterset_class = InsumoFilter
    sort_fields = {
        "idInsumo": "id",
        "nombreInsumo": "nombre",
        "unidadMedidaInsumo": "unidad_medida",
        "stockMinimoInsumo": "stock_minimo",
        "fechaCreacion": "created_at",
    }
    default_ordering = ["nombre"]

    def get(self, request):
        self._require(can_view(request.user, RECURSO_INSUMOS), "No tienes permisos para consultar insumos.")
        return self._page(request, self._filter(request, Insumo.objects.all()), InsumoSerializer)

    def post(self, request):
        self._require(can_create(request.user, RECURSO_INSUMOS), "No tienes permisos para crear insumos.")
        serializer = InsumoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        nombre = serializer.validated_data["nombre"]
        if Insumo.objects.filter(nombre_normalizado=normalizar_nombre(nombre)).exists():
            raise ConflictoError(f"Ya existe un insumo llamado '{nombre}'.")
        insumo = serializer.save()
        log_event(
            request.user,
            "CREATE",
            "maestros.Insumo",
            insumo.id,
            {"nombre": insumo.nombre, "unidad_medida": insumo.unidad_medida},
        )
        return Response(InsumoSerializer(insumo).data, status=status.HTTP_201_CREATED)


class InsumoDetailView(BaseApiView):
    def get(self, request, insumo_id: int):
        self._require(can_view(request.user, RECURSO_INSUMOS), "No tienes permisos para consultar insumos.")
        insumo = self._get_or_404(Insumo.objects.all(), insumo_id, "el insumo")
        return Response(InsumoSerializer(insumo).data)

    def put(self, request, insumo_id: int):
        self._require(can_edit(request.user, RECURSO_INSUMOS), "No tienes permisos para editar insumos.")
        insumo = self._get_or_404(Insumo.objects.all(), insumo_id, "el insumo")
        serializer = InsumoSerializer(insumo, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        nombre = serializer.validated_data.get("nombre")
        if nombre and Insumo.objects.filter(nombre_normalizado=normalizar_nombre(nombre)).exclude(pk=insumo.pk).exists():
            raise ConflictoError(f"Ya existe un insumo llamado '{nombre}'.")
        prev_umbral = insumo.stock_minimo
        insumo = serializer.save()
        if insumo.stock_minimo != prev_umbral:
            evaluar_alerta(insumo)
        log_event(request.user, "UPDATE", "maestros.Insumo", insumo.id, {"nombre": insumo.nombre})
        return Response(InsumoSerializer(insumo).data)

    def delete(self, request, insumo_id: int):
        self._require(can_delete(request.user, RECURSO_INSUMOS), "No tienes permisos para eliminar insumos.")
        insumo = self._get_or_404(Insumo.objects.all(), insumo_id, "el insumo")
        if insumo.usos_bom.exists() or insumo.detalles_compra.exists() or insumo.inventarios.exists():
            raise ConflictoError(
                "El insumo está referenciado por listas de materiales, compras o inventarios y no puede eliminarse."
            )
        nombre = insumo.nombre
        insumo.delete()
        log_event(request.user, "DELETE", "maestros.Insumo", insumo_id, {"nombre": nombre})
        return Response(status=status.HTTP_204_NO_CONTENT)


class InsumoPorNombreView(BaseApiView):
    def get(self, request, nombre: str):
        self._require(can_view(request.user, RECURSO_INSUMOS), "No tienes permisos para consultar insumos.")
        insumo = Insumo.objects.filter(nombre_normalizado=normalizar_nombre(nombre)).first()
        if insumo is None:
            raise NotFound(f"No se encontró un insumo llamado '{nombre}'.")
        return Response(InsumoSerializer(insumo).data)


class ProductosView(BaseApiView):
    filterset_class = ProductoFilter
    sort_fields = {
        "idProducto": "id",
        "referenciaProducto": "referencia",
        "nombreProducto": "nombre",
        "tipoProducto": "tipo",
        "generoProducto": "genero",
        "precioVenta": "precio_venta",
        "costoProduccion": "costo_produccion",
        "fechaCreacion": "created_at",
    }
    default_ordering = ["nombre"]

    def get(self, request):
        self._require(can_view(request.user, RECURSO_PRODUCTOS), "No tienes permisos para consultar productos.")
        return self._page(request, self._filter(request, Producto.objects.all()), ProductoSerializer)

    def post(self, request):
        self._require(can_create(request.user, RECURSO_PRODUCTOS), "No tienes permisos para crear productos.")
        serializer = ProductoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        referencia = serializer.validated_data["referencia"]
        if Producto.objects.filter(referencia__iexact=referencia).exists():
            raise ConflictoError(f"Ya existe un producto con referencia '{referencia}'.")
        producto = serializer.save()
        log_event(
            request.user,
            "CREATE",
            "maestros.Producto",
            producto.id,
            {"referencia": producto.referencia, "precio_venta": str(producto.precio_venta)},
        )
        return Response(ProductoSerializer(producto).data, status=status.HTTP_201_CREATED)


class ProductoDetailView(BaseApiView):
    def get(self, request, producto_id: int):
        self._require(can_view(request.user, RECURSO_PRODUCTOS), "No tienes permisos para consultar productos.")
        producto = self._get_or_404(Producto.objects.all(), producto_id, "el producto")
        return Response(ProductoSerializer(producto).data)

    def put(self, request, producto_id: int):
        self._require(can_edit(request.user, RECURSO_PRODUCTOS), "No tienes permisos para editar productos.")
        producto = self._get_or_404(Producto.objects.all(), producto_id, "el producto")
        serializer = ProductoUpdateSerializer(producto, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        prev_umbral = producto.stock_minimo
        producto = serializer.save()
        if producto.stock_minimo != prev_umbral:
            evaluar_alerta(producto)
        log_event(
            request.user,
            "UPDATE",
            "maestros.Producto",
            producto.id,
            {"referencia": producto.referencia, "precio_venta": str(producto.precio_venta)},
        )
        return Response(ProductoSerializer(producto).data)

    def delete(self, request, producto_id: int):
        self._require(can_delete(request.user, RECURSO_PRODUCTOS), "No tienes permisos para eliminar productos.")
        producto = self._get_or_404(Producto.objects.all(), producto_id, "el producto")
        if producto.detalles_venta.exists() or producto.inventarios.exists():
            raise ConflictoError("El producto está referenciado por órdenes de venta o inventarios y no puede eliminarse.")
        referencia = producto.referencia
        producto.delete()
        log_event(request.user, "DELETE", "maestros.Producto", producto_id, {"referencia": referencia})
        return Response(status=status.HTTP_204_NO_CONTENT)


class ProductoPorReferenciaView(BaseApiView):
    def get(self, request, referencia: str):
        self._require(can_view(request.user, RECURSO_PRODUCTOS), "No tienes permisos para consultar productos.")
        producto = Producto.objects.filter(referencia__iexact=referencia.strip()).first()
        if producto is None:
            raise NotFound(f"No se encontró un producto con referencia '{referencia}'.")
        return Response(ProductoSerializer(producto).data)


class ProductoBOMView(BaseApiView):
    def get(self, request, producto_id: int):
        self._require(can_view(request.user, RECURSO_PRODUCTOS), "No tienes permisos para consultar productos.")
        producto = self._get_or_404(Producto.objects.all(), producto_id, "el producto")
        rows = producto.bom.select_related("producto", "insumo").order_by("insumo__nombre", "id")
        return Response(InsumoPorProductoSerializer(rows, many=True).data)

    def post(self, request, producto_id: int):
        self._require(can_edit(request.user, RECURSO_PRODUCTOS), "No tienes permisos para editar productos.")
        producto = self._get_or_404(Producto.objects.all(), producto_id, "el producto")
        serializer = InsumoPorProductoCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        body_producto = serializer.validated_data.get("idProducto")
        if body_producto is not None and body_producto != producto.id:
            raise ReglaNegocioError("El idProducto del cuerpo no coincide con el de la ruta.")
        insumo = serializer.validated_data["insumo"]
        if producto.bom.filter(insumo=insumo).exists():
            raise ConflictoError(f"El insumo '{insumo.nombre}' ya está en la lista de materiales del producto.")
        renglon = InsumoPorProducto.objects.create(
            producto=producto,
            insumo=insumo,
            cantidad_requerida=serializer.validated_data["cantidad_requerida"],
        )
        log_event(
            request.user,
            "CREATE",
            "maestros.InsumoPorProducto",
            renglon.id,
            {"producto": producto.referencia, "insumo": insumo.nombre, "cantidad": str(renglon.cantidad_requerida)},
        )
        return Response(InsumoPorProductoSerializer(renglon).data, status=status.HTTP_201_CREATED)


class ProductoBOMDetailView(BaseApiView):
    def _renglon(self, producto_id: int, insumo_id: int) -> InsumoPorProducto:
        self._get_or_404(Producto.objects.all(), producto_id, "el producto")
        renglon = (
            InsumoPorProducto.objects.select_related("producto", "insumo")
            .filter(producto_id=producto_id, insumo_id=insumo_id)
            .first()
        )
        if renglon is None:
            raise NotFound(f"El insumo {insumo_id} no está en la lista de materiales del producto {producto_id}.")
        return renglon

    def put(self, request, producto_id: int, insumo_id: int):
        self._require(can_edit(request.user, RECURSO_PRODUCTOS), "No tienes permisos para editar productos.")
        renglon = self._renglon(producto_id, insumo_id)
        serializer = InsumoPorProductoUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        prev = renglon.cantidad_requerida
        renglon.cantidad_requerida = serializer.validated_data["cantidad_requerida"]
        renglon.save(update_fields=["cantidad_requerida"])
        log_event(
            request.user,
            "UPDATE",
            "maestros.InsumoPorProducto",
            renglon.id,
            {"cantidad": {"from": str(prev), "to": str(renglon.cantidad_requerida)}},
        )
        return Response(InsumoPorProductoSerializer(renglon).data)

    def delete(self, request, producto_id: int, insumo_id: int):
        self._require(can_edit(request.user, RECURSO_PRODUCTOS), "No tienes permisos para editar productos.")
        renglon = self._renglon(producto_id, insumo_id)
        renglon_id = renglon.id
        renglon.delete()
        log_event(
            request.user,
            "DELETE",
            "maestros.InsumoPorProducto",
            renglon_id,
            {"producto": producto_id, "insumo": insumo_id},
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
