from __future__ import annotations

from django.db.models import Prefetch
from rest_framework import status
from rest_framework.response import Response

from compras import services
from compras.models import DetalleOrdenCompra, OrdenCompra
from core.access import RECURSO_ORDENES_COMPRA, can_annul, can_create, can_edit, can_view
from maestros.models import Proveedor

from .base import BaseApiView
from .compras_serializers import (
    DetalleOrdenCompraInputSerializer,
    DetalleOrdenCompraSerializer,
    DetalleOrdenCompraUpdateSerializer,
    OrdenCompraCreateSerializer,
    OrdenCompraSerializer,
    OrdenCompraUpdateSerializer,
)
from .filters import OrdenCompraFilter


def _ordenes_qs():
    return OrdenCompra.objects.select_related("proveedor").prefetch_related(
        Prefetch("detalles", queryset=DetalleOrdenCompra.objects.select_related("insumo").order_by("id"))
    )


class _ComprasBaseView(BaseApiView):
    filterset_class = OrdenCompraFilter
    sort_fields = {
        "idOrdenCompra": "id",
        "fechaPedidoCompra": "fecha_pedido",
        "fechaEntregaEstimadaCompra": "fecha_entrega_estimada",
        "fechaEntregaRealCompra": "fecha_entrega_real",
        "estadoCompra": "estado",
        "totalCompra": "total",
        "proveedorNombre": "proveedor__nombre_comercial",
    }
    default_ordering = ["-fecha_pedido", "-id"]

    def _orden(self, orden_id: int) -> OrdenCompra:
        return self._get_or_404(_ordenes_qs(), orden_id, "la orden de compra")

    def _detalle(self, orden: OrdenCompra, detalle_id: int) -> DetalleOrdenCompra:
        return self._get_or_404(orden.detalles.select_related("insumo"), detalle_id, "el detalle de la orden")


class OrdenesCompraView(_ComprasBaseView):
    def get(self, request):
        self._require(can_view(request.user, RECURSO_ORDENES_COMPRA), "No tienes permisos para consultar órdenes de compra.")
        return self._page(request, self._filter(request, _ordenes_qs()), OrdenCompraSerializer)

    def post(self, request):
        self._require(can_create(request.user, RECURSO_ORDENES_COMPRA), "No tienes permisos para crear órdenes de compra.")
        serializer = OrdenCompraCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        orden = services.crear_orden_compra(request.user, **serializer.validated_data)
        return Response(OrdenCompraSerializer(self._orden(orden.id)).data, status=status.HTTP_201_CREATED)


class OrdenCompraDetailView(_ComprasBaseView):
    def get(self, request, orden_id: int):
        self._require(can_view(request.user, RECURSO_ORDENES_COMPRA), "No tienes permisos para consultar órdenes de compra.")
        return Response(OrdenCompraSerializer(self._orden(orden_id)).data)

    def put(self, request, orden_id: int):
        self._require(can_edit(request.user, RECURSO_ORDENES_COMPRA), "No tienes permisos para editar órdenes de compra.")
        orden = self._orden(orden_id)
        serializer = OrdenCompraUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        if data.get("estado") == OrdenCompra.ESTADO_ANULADA:
            self._require(can_annul(request.user, RECURSO_ORDENES_COMPRA), "No tienes permisos para anular órdenes de compra.")
        services.actualizar_orden_compra(request.user, orden, data)
        return Response(OrdenCompraSerializer(self._orden(orden_id)).data)


class OrdenesCompraPorProveedorView(_ComprasBaseView):
    def get(self, request, proveedor_id: int):
        self._require(can_view(request.user, RECURSO_ORDENES_COMPRA), "No tienes permisos para consultar órdenes de compra.")
        self._get_or_404(Proveedor.objects.all(), proveedor_id, "el proveedor")
        rows = _ordenes_qs().filter(proveedor_id=proveedor_id).order_by("-fecha_pedido", "-id")
        return Response(OrdenCompraSerializer(rows, many=True).data)


class AnularOrdenCompraView(_ComprasBaseView):
    def post(self, request, orden_id: int):
        self._require(can_annul(request.user, RECURSO_ORDENES_COMPRA), "No tienes permisos para anular órdenes de compra.")
        services.anular_orden_compra(request.user, self._orden(orden_id))
        return Response(status=status.HTTP_204_NO_CONTENT)


class DetallesOrdenCompraView(_ComprasBaseView):
    def post(self, request, orden_id: int):
        self._require(can_edit(request.user, RECURSO_ORDENES_COMPRA), "No tienes permisos para editar órdenes de compra.")
        orden = self._orden(orden_id)
        serializer = DetalleOrdenCompraInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        detalle = services.agregar_detalle(request.user, orden, **serializer.validated_data)
        return Response(DetalleOrdenCompraSerializer(detalle).data, status=status.HTTP_201_CREATED)


class DetalleOrdenCompraView(_ComprasBaseView):
    def put(self, request, orden_id: int, detalle_id: int):
        self._require(can_edit(request.user, RECURSO_ORDENES_COMPRA), "No tienes permisos para editar órdenes de compra.")
        orden = self._orden(orden_id)
        detalle = self._detalle(orden, detalle_id)
        serializer = DetalleOrdenCompraUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        detalle = services.actualizar_detalle(request.user, orden, detalle, dict(serializer.validated_data))
        return Response(DetalleOrdenCompraSerializer(detalle).data)

    def delete(self, request, orden_id: int, detalle_id: int):
        self._require(can_edit(request.user, RECURSO_ORDENES_COMPRA), "No tienes permisos para editar órdenes de compra.")
        orden = self._orden(orden_id)
        services.eliminar_detalle(request.user, orden, self._detalle(orden, detalle_id))
        return Response(status=status.HTTP_204_NO_CONTENT)
