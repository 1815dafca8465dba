from __future__ import annotations

from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from core.access import RECURSO_INSUMOS, RECURSO_INVENTARIOS, RECURSO_PRODUCTOS, can_create, can_edit, can_view
from inventario import services
from inventario.models import AlertaStock, InventarioInsumo, InventarioProducto
from maestros.models import Insumo, Producto

from .base import BaseApiView
from .filters import InventarioInsumoFilter, InventarioProductoFilter
from .inventario_serializers import (
    AlertaStockSerializer,
    InventarioInsumoCreateSerializer,
    InventarioInsumoSerializer,
    InventarioProductoCreateSerializer,
    InventarioProductoSerializer,
    MovimientoInsumoCreateSerializer,
    MovimientoInsumoSerializer,
    MovimientoProductoCreateSerializer,
    MovimientoProductoSerializer,
    UmbralStockSerializer,
)


class _InventarioBaseView(BaseApiView):
    """Vistas compartidas por el inventario de insumos y el de productos."""

    inventario_model = InventarioInsumo
    item_model = Insumo
    item_field = "insumo"
    etiqueta_item = "el insumo"
    serializer_class = InventarioInsumoSerializer
    create_serializer_class = InventarioInsumoCreateSerializer
    movimiento_serializer_class = MovimientoInsumoSerializer
    movimiento_create_serializer_class = MovimientoInsumoCreateSerializer
    filterset_class = InventarioInsumoFilter
    sort_fields = {
        "ubicacionInventario": "ubicacion",
        "cantidadStock": "cantidad_stock",
        "ultimaActualizacion": "ultima_actualizacion",
    }
    default_ordering = ["ubicacion"]

    def _check_view(self, request) -> None:
        self._require(can_view(request.user, RECURSO_INVENTARIOS), "No tienes permisos para consultar inventarios.")

    def _inventarios_qs(self):
        return self.inventario_model.objects.select_related(self.item_field)

    def _inventario(self, inventario_id: int):
        return self._get_or_404(self._inventarios_qs(), inventario_id, "el inventario")


class InventariosView(_InventarioBaseView):
    def get(self, request):
        self._check_view(request)
        return self._page(request, self._filter(request, self._inventarios_qs()), self.serializer_class)

    def post(self, request):
        self._require(can_create(request.user, RECURSO_INVENTARIOS), "No tienes permisos para crear inventarios.")
        serializer = self.create_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        inventario = services.crear_inventario(request.user, **serializer.validated_data)
        return Response(self.serializer_class(self._inventario(inventario.id)).data, status=status.HTTP_201_CREATED)


class InventarioDetailView(_InventarioBaseView):
    def get(self, request, inventario_id: int):
        self._check_view(request)
        return Response(self.serializer_class(self._inventario(inventario_id)).data)


class InventariosPorItemView(_InventarioBaseView):
    def get(self, request, item_id: int):
        self._check_view(request)
        self._get_or_404(self.item_model.objects.all(), item_id, self.etiqueta_item)
        rows = self._inventarios_qs().filter(**{f"{self.item_field}_id": item_id}).order_by("ubicacion", "id")
        return Response(self.serializer_class(rows, many=True).data)


class InventarioPorUbicacionView(_InventarioBaseView):
    def get(self, request, item_id: int, ubicacion: str):
        self._check_view(request)
        inventario = (
            self._inventarios_qs()
            .filter(**{f"{self.item_field}_id": item_id}, ubicacion__iexact=ubicacion.strip())
            .first()
        )
        if inventario is None:
            raise NotFound(f"No hay inventario del item {item_id} en la ubicación '{ubicacion}'.")
        return Response(self.serializer_class(inventario).data)


class MovimientosView(_InventarioBaseView):
    def post(self, request):
        self._require(can_edit(request.user, RECURSO_INVENTARIOS), "No tienes permisos para registrar movimientos.")
        serializer = self.movimiento_create_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        movimiento = services.registrar_movimiento(
            request.user,
            inventario_model=self.inventario_model,
            **serializer.validated_data,
        )
        return Response(self.movimiento_serializer_class(movimiento).data, status=status.HTTP_201_CREATED)


class MovimientosPorInventarioView(_InventarioBaseView):
    sort_fields = {
        "fechaMovimiento": "fecha",
        "tipoMovimiento": "tipo",
        "cantidadMovimiento": "cantidad",
    }
    default_ordering = ["-fecha", "-id"]

    def get(self, request, inventario_id: int):
        self._check_view(request)
        inventario = self._inventario(inventario_id)
        qs = inventario.movimientos.select_related(f"inventario__{self.item_field}")
        return self._page(request, qs, self.movimiento_serializer_class)


class StockInventarioView(_InventarioBaseView):
    def get(self, request, inventario_id: int):
        self._check_view(request)
        return Response(self._inventario(inventario_id).cantidad_stock)


class _ProductoMixin:
    inventario_model = InventarioProducto
    item_model = Producto
    item_field = "producto"
    etiqueta_item = "el producto"
    serializer_class = InventarioProductoSerializer
    create_serializer_class = InventarioProductoCreateSerializer
    movimiento_serializer_class = MovimientoProductoSerializer
    movimiento_create_serializer_class = MovimientoProductoCreateSerializer
    filterset_class = InventarioProductoFilter


class InventariosProductoView(_ProductoMixin, InventariosView):
    pass


class InventarioProductoDetailView(_ProductoMixin, InventarioDetailView):
    pass


class InventariosPorProductoView(_ProductoMixin, InventariosPorItemView):
    pass


class InventarioProductoPorUbicacionView(_ProductoMixin, InventarioPorUbicacionView):
    pass


class MovimientosProductoView(_ProductoMixin, MovimientosView):
    pass


class MovimientosPorInventarioProductoView(_ProductoMixin, MovimientosPorInventarioView):
    pass


class StockInventarioProductoView(_ProductoMixin, StockInventarioView):
    pass


class AlertasActivasView(BaseApiView):
    def get(self, request):
        self._require(can_view(request.user, RECURSO_INVENTARIOS), "No tienes permisos para consultar alertas de stock.")
        rows = (
            AlertaStock.objects.filter(estado__in=AlertaStock.ESTADOS_ABIERTOS)
            .select_related("insumo", "producto")
            .order_by("-created_at", "-id")
        )
        return Response(AlertaStockSerializer(rows, many=True).data)


class AlertaVistaView(BaseApiView):
    def post(self, request, alerta_id: int):
        self._require(can_view(request.user, RECURSO_INVENTARIOS), "No tienes permisos para gestionar alertas de stock.")
        alerta = self._get_or_404(AlertaStock.objects.all(), alerta_id, "la alerta")
        services.marcar_alerta_vista(request.user, alerta)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AlertaResolverView(BaseApiView):
    def post(self, request, alerta_id: int):
        self._require(can_edit(request.user, RECURSO_INVENTARIOS), "No tienes permisos para gestionar alertas de stock.")
        alerta = self._get_or_404(AlertaStock.objects.all(), alerta_id, "la alerta")
        services.resolver_alerta(request.user, alerta)
        return Response(status=status.HTTP_204_NO_CONTENT)


class UmbralInsumoView(BaseApiView):
    def put(self, request, item_id: int):
        self._require(can_edit(request.user, RECURSO_INSUMOS), "No tienes permisos para editar insumos.")
        insumo = self._get_or_404(Insumo.objects.all(), item_id, "el insumo")
        serializer = UmbralStockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        umbral = serializer.validated_data["nuevoUmbral"]
        services.actualizar_umbral(request.user, insumo, umbral)
        return Response(f"Umbral del insumo '{insumo.nombre}' actualizado a {umbral}.")


class UmbralProductoView(BaseApiView):
    def put(self, request, item_id: int):
        self._require(can_edit(request.user, RECURSO_PRODUCTOS), "No tienes permisos para editar productos.")
        producto = self._get_or_404(Producto.objects.all(), item_id, "el producto")
        serializer = UmbralStockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        umbral = serializer.validated_data["nuevoUmbral"]
        services.actualizar_umbral(request.user, producto, umbral)
        return Response(f"Umbral del producto '{producto.nombre}' actualizado a {umbral}.")
