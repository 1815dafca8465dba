from __future__ import annotations

from django.db.models import Prefetch
from rest_framework import status
from rest_framework.response import Response

from core.access import RECURSO_ORDENES_PRODUCCION, can_annul, can_create, can_edit, can_view
from core.exceptions import ReglaNegocioError
from produccion import services
from produccion.models import OrdenProduccion, TareaProduccion
from ventas.models import OrdenVenta

from .base import BaseApiView
from .filters import OrdenProduccionFilter
from .produccion_serializers import (
    OrdenProduccionCreateSerializer,
    OrdenProduccionSerializer,
    OrdenProduccionUpdateSerializer,
    TareaProduccionCreateSerializer,
    TareaProduccionSerializer,
    TareaProduccionUpdateSerializer,
)


def _ordenes_qs():
    return OrdenProduccion.objects.select_related("orden_venta__cliente").prefetch_related(
        Prefetch("tareas", queryset=TareaProduccion.objects.select_related("empleado").order_by("id"))
    )


class _ProduccionBaseView(BaseApiView):
    filterset_class = OrdenProduccionFilter
    sort_fields = {
        "idOrdenProduccion": "id",
        "fechaCreacion": "created_at",
        "fechaInicioProduccion": "fecha_inicio",
        "fechaFinEstimadaProduccion": "fecha_fin_estimada",
        "fechaFinRealProduccion": "fecha_fin_real",
        "estadoProduccion": "estado",
    }
    default_ordering = ["-created_at", "-id"]

    def _orden(self, orden_id: int) -> OrdenProduccion:
        return self._get_or_404(_ordenes_qs(), orden_id, "la orden de producción")

    def _tarea(self, orden: OrdenProduccion, tarea_id: int) -> TareaProduccion:
        return self._get_or_404(orden.tareas.select_related("empleado"), tarea_id, "la tarea de producción")


class OrdenesProduccionView(_ProduccionBaseView):
    def get(self, request):
        self._require(
            can_view(request.user, RECURSO_ORDENES_PRODUCCION),
            "No tienes permisos para consultar órdenes de producción.",
        )
        return self._page(request, self._filter(request, _ordenes_qs()), OrdenProduccionSerializer)

    def post(self, request):
        self._require(
            can_create(request.user, RECURSO_ORDENES_PRODUCCION),
            "No tienes permisos para crear órdenes de producción.",
        )
        serializer = OrdenProduccionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        orden = services.crear_orden_produccion(request.user, **serializer.validated_data)
        return Response(OrdenProduccionSerializer(self._orden(orden.id)).data, status=status.HTTP_201_CREATED)


class OrdenProduccionDetailView(_ProduccionBaseView):
    def get(self, request, orden_id: int):
        self._require(
            can_view(request.user, RECURSO_ORDENES_PRODUCCION),
            "No tienes permisos para consultar órdenes de producción.",
        )
        return Response(OrdenProduccionSerializer(self._orden(orden_id)).data)

    def put(self, request, orden_id: int):
        self._require(
            can_edit(request.user, RECURSO_ORDENES_PRODUCCION),
            "No tienes permisos para editar órdenes de producción.",
        )
        orden = self._orden(orden_id)
        serializer = OrdenProduccionUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        if data.get("estado") == OrdenProduccion.ESTADO_ANULADA:
            self._require(
                can_annul(request.user, RECURSO_ORDENES_PRODUCCION),
                "No tienes permisos para anular órdenes de producción.",
            )
        services.actualizar_orden_produccion(request.user, orden, data)
        return Response(OrdenProduccionSerializer(self._orden(orden_id)).data)


class OrdenesProduccionPorVentaView(_ProduccionBaseView):
    def get(self, request, orden_venta_id: int):
        self._require(
            can_view(request.user, RECURSO_ORDENES_PRODUCCION),
            "No tienes permisos para consultar órdenes de producción.",
        )
        self._get_or_404(OrdenVenta.objects.all(), orden_venta_id, "la orden de venta")
        rows = _ordenes_qs().filter(orden_venta_id=orden_venta_id).order_by("-created_at", "-id")
        return Response(OrdenProduccionSerializer(rows, many=True).data)


class AnularOrdenProduccionView(_ProduccionBaseView):
    def post(self, request, orden_id: int):
        self._require(
            can_annul(request.user, RECURSO_ORDENES_PRODUCCION),
            "No tienes permisos para anular órdenes de producción.",
        )
        services.anular_orden_produccion(request.user, self._orden(orden_id))
        return Response(status=status.HTTP_204_NO_CONTENT)


class TareasProduccionView(_ProduccionBaseView):
    def get(self, request, orden_id: int):
        self._require(
            can_view(request.user, RECURSO_ORDENES_PRODUCCION),
            "No tienes permisos para consultar órdenes de producción.",
        )
        orden = self._orden(orden_id)
        return Response(TareaProduccionSerializer(orden.tareas.all(), many=True).data)

    def post(self, request, orden_id: int):
        self._require(
            can_edit(request.user, RECURSO_ORDENES_PRODUCCION),
            "No tienes permisos para editar órdenes de producción.",
        )
        orden = self._orden(orden_id)
        serializer = TareaProduccionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        body_orden = data.pop("idOrdenProduccion", None)
        if body_orden is not None and body_orden != orden.id:
            raise ReglaNegocioError("El idOrdenProduccion del cuerpo no coincide con el de la ruta.")
        tarea = services.crear_tarea(request.user, orden, **data)
        return Response(TareaProduccionSerializer(tarea).data, status=status.HTTP_201_CREATED)


class TareaProduccionDetailView(_ProduccionBaseView):
    def put(self, request, orden_id: int, tarea_id: int):
        self._require(
            can_edit(request.user, RECURSO_ORDENES_PRODUCCION),
            "No tienes permisos para editar órdenes de producción.",
        )
        orden = self._orden(orden_id)
        tarea = self._tarea(orden, tarea_id)
        serializer = TareaProduccionUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        tarea = services.actualizar_tarea(request.user, orden, tarea, dict(serializer.validated_data))
        return Response(TareaProduccionSerializer(tarea).data)

    def delete(self, request, orden_id: int, tarea_id: int):
        self._require(
            can_edit(request.user, RECURSO_ORDENES_PRODUCCION),
            "No tienes permisos para editar órdenes de producción.",
        )
        orden = self._orden(orden_id)
        services.eliminar_tarea(request.user, orden, self._tarea(orden, tarea_id))
        return Response(status=status.HTTP_204_NO_CONTENT)
