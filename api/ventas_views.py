from __future__ import annotations

from django.db.models import Prefetch
from rest_framework import status
from rest_framework.response import Response

from core.access import RECURSO_ORDENES_VENTA, can_annul, can_create, can_edit, can_view
from crm.models import Cliente
from ventas import services
from ventas.models import DetalleOrdenVenta, OrdenVenta

from .base import BaseApiView
from .filters import OrdenVentaFilter
from .ventas_serializers import (
    DetalleOrdenVentaInputSerializer,
    DetalleOrdenVentaSerializer,
    DetalleOrdenVentaUpdateSerializer,
    OrdenVentaCreateSerializer,
    OrdenVentaSerializer,
    OrdenVentaUpdateSerializer,
)


def _ordenes_qs():
    return OrdenVenta.objects.select_related("cliente").prefetch_related(
        Prefetch("detalles", queryset=DetalleOrdenVenta.objects.select_related("producto").order_by("id"))
    )


class _VentasBaseView(BaseApiView):
    filterset_class = OrdenVentaFilter
    sort_fields = {
        "idOrdenVenta": "id",
        "fechaPedido": "fecha_pedido",
        "fechaEntregaEstimada": "fecha_entrega_estimada",
        "estadoOrden": "estado",
        "totalOrden": "total",
        "clienteNombre": "cliente__nombre",
    }
    default_ordering = ["-fecha_pedido", "-id"]

    def _orden(self, orden_id: int) -> OrdenVenta:
        return self._get_or_404(_ordenes_qs(), orden_id, "la orden de venta")

    def _detalle(self, orden: OrdenVenta, detalle_id: int) -> DetalleOrdenVenta:
        return self._get_or_404(orden.detalles.select_related("producto"), detalle_id, "el detalle de la orden")


class OrdenesVentaView(_VentasBaseView):
    def get(self, request):
        self._require(can_view(request.user, RECURSO_ORDENES_VENTA), "No tienes permisos para consultar órdenes de venta.")
        return self._page(request, self._filter(request, _ordenes_qs()), OrdenVentaSerializer)

    def post(self, request):
        self._require(can_create(request.user, RECURSO_ORDENES_VENTA), "No tienes permisos para crear órdenes de venta.")
        serializer = OrdenVentaCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        orden = services.crear_orden_venta(request.user, **serializer.validated_data)
        return Response(OrdenVentaSerializer(self._orden(orden.id)).data, status=status.HTTP_201_CREATED)


class OrdenVentaDetailView(_VentasBaseView):
    def get(self, request, orden_id: int):
        self._require(can_view(request.user, RECURSO_ORDENES_VENTA), "No tienes permisos para consultar órdenes de venta.")
        return Response(OrdenVentaSerializer(self._orden(orden_id)).data)

    def put(self, request, orden_id: int):
        self._require(can_edit(request.user, RECURSO_ORDENES_VENTA), "No tienes permisos para editar órdenes de venta.")
        orden = self._orden(orden_id)
        serializer = OrdenVentaUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        if data.get("estado") == OrdenVenta.ESTADO_ANULADA:
            self._require(can_annul(request.user, RECURSO_ORDENES_VENTA), "No tienes permisos para anular órdenes de venta.")
        services.actualizar_orden_venta(request.user, orden, data)
        return Response(OrdenVentaSerializer(self._orden(orden_id)).data)


class OrdenesVentaPorClienteView(_VentasBaseView):
    def get(self, request, cliente_id: int):
        self._require(can_view(request.user, RECURSO_ORDENES_VENTA), "No tienes permisos para consultar órdenes de venta.")
        self._get_or_404(Cliente.objects.all(), cliente_id, "el cliente")
        rows = _ordenes_qs().filter(cliente_id=cliente_id).order_by("-fecha_pedido", "-id")
        return Response(OrdenVentaSerializer(rows, many=True).data)


class AnularOrdenVentaView(_VentasBaseView):
    def post(self, request, orden_id: int):
        self._require(can_annul(request.user, RECURSO_ORDENES_VENTA), "No tienes permisos para anular órdenes de venta.")
        services.anular_orden_venta(request.user, self._orden(orden_id))
        return Response(status=status.HTTP_204_NO_CONTENT)


class DetallesOrdenVentaView(_VentasBaseView):
    def post(self, request, orden_id: int):
        self._require(can_edit(request.user, RECURSO_ORDENES_VENTA), "No tienes permisos para editar órdenes de venta.")
        orden = self._orden(orden_id)
        serializer = DetalleOrdenVentaInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        detalle = services.agregar_detalle(request.user, orden, **serializer.validated_data)
        return Response(DetalleOrdenVentaSerializer(detalle).data, status=status.HTTP_201_CREATED)


class DetalleOrdenVentaView(_VentasBaseView):
    def put(self, request, orden_id: int, detalle_id: int):
        self._require(can_edit(request.user, RECURSO_ORDENES_VENTA), "No tienes permisos para editar órdenes de venta.")
        orden = self._orden(orden_id)
        detalle = self._detalle(orden, detalle_id)
        serializer = DetalleOrdenVentaUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        detalle = services.actualizar_detalle(request.user, orden, detalle, dict(serializer.validated_data))
        return Response(DetalleOrdenVentaSerializer(detalle).data)

    def delete(self, request, orden_id: int, detalle_id: int):
        self._require(can_edit(request.user, RECURSO_ORDENES_VENTA), "No tienes permisos para editar órdenes de venta.")
        orden = self._orden(orden_id)
        services.eliminar_detalle(request.user, orden, self._detalle(orden, detalle_id))
        return Response(status=status.HTTP_204_NO_CONTENT)
