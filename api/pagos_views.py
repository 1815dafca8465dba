from __future__ import annotations

from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from compras.models import OrdenCompra
from core.access import RECURSO_PAGOS_COBROS, can_annul, can_create, can_edit, can_view
from pagos import services
from pagos.models import PagoCobro
from ventas.models import OrdenVenta

from .base import BaseApiView
from .filters import PagoCobroFilter
from .pagos_serializers import PagoCobroCreateSerializer, PagoCobroSerializer, PagoCobroUpdateSerializer


def _pagos_qs():
    return PagoCobro.objects.select_related("orden_venta__cliente", "orden_compra__proveedor")


class _PagosBaseView(BaseApiView):
    filterset_class = PagoCobroFilter
    sort_fields = {
        "idPagoCobro": "id",
        "tipoTransaccion": "tipo",
        "fechaRegistroTransaccion": "fecha_registro",
        "fechaPagoCobro": "fecha_pago_cobro",
        "metodoPago": "metodo_pago",
        "montoTransaccion": "monto",
        "estadoTransaccion": "estado",
    }
    default_ordering = ["-fecha_registro", "-id"]

    def _pago(self, pago_id: int) -> PagoCobro:
        return self._get_or_404(_pagos_qs(), pago_id, "la transacción")

    def _listar(self, request, **filtros) -> Response:
        rows = _pagos_qs().filter(**filtros).order_by(*self.default_ordering)
        return Response(PagoCobroSerializer(rows, many=True).data)


class PagosCobrosView(_PagosBaseView):
    def get(self, request):
        self._require(can_view(request.user, RECURSO_PAGOS_COBROS), "No tienes permisos para consultar pagos y cobros.")
        return self._page(request, self._filter(request, _pagos_qs()), PagoCobroSerializer)

    def post(self, request):
        self._require(can_create(request.user, RECURSO_PAGOS_COBROS), "No tienes permisos para registrar pagos y cobros.")
        serializer = PagoCobroCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        pago = services.crear_pago_cobro(request.user, **serializer.validated_data)
        return Response(PagoCobroSerializer(self._pago(pago.id)).data, status=status.HTTP_201_CREATED)


class PagoCobroDetailView(_PagosBaseView):
    def get(self, request, pago_id: int):
        self._require(can_view(request.user, RECURSO_PAGOS_COBROS), "No tienes permisos para consultar pagos y cobros.")
        return Response(PagoCobroSerializer(self._pago(pago_id)).data)

    def put(self, request, pago_id: int):
        self._require(can_edit(request.user, RECURSO_PAGOS_COBROS), "No tienes permisos para editar pagos y cobros.")
        pago = self._pago(pago_id)
        serializer = PagoCobroUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        if data.get("estado") == PagoCobro.ESTADO_ANULADO:
            self._require(can_annul(request.user, RECURSO_PAGOS_COBROS), "No tienes permisos para anular pagos y cobros.")
        services.actualizar_pago_cobro(request.user, pago, data)
        return Response(PagoCobroSerializer(self._pago(pago_id)).data)


class AnularPagoCobroView(_PagosBaseView):
    def post(self, request, pago_id: int):
        self._require(can_annul(request.user, RECURSO_PAGOS_COBROS), "No tienes permisos para anular pagos y cobros.")
        services.anular_pago_cobro(request.user, self._pago(pago_id))
        return Response(status=status.HTTP_204_NO_CONTENT)


class PagosCobrosPorTipoView(_PagosBaseView):
    def get(self, request, tipo: str):
        self._require(can_view(request.user, RECURSO_PAGOS_COBROS), "No tienes permisos para consultar pagos y cobros.")
        tipos = {valor.lower(): valor for valor, _ in PagoCobro.TIPO_CHOICES}
        if tipo.lower() not in tipos:
            raise NotFound(f"Tipo de transacción desconocido: '{tipo}'.")
        return self._listar(request, tipo=tipos[tipo.lower()])


class PagosCobrosPorOrdenVentaView(_PagosBaseView):
    def get(self, request, orden_id: int):
        self._require(can_view(request.user, RECURSO_PAGOS_COBROS), "No tienes permisos para consultar pagos y cobros.")
        self._get_or_404(OrdenVenta.objects.all(), orden_id, "la orden de venta")
        return self._listar(request, orden_venta_id=orden_id)


class PagosCobrosPorOrdenCompraView(_PagosBaseView):
    def get(self, request, orden_id: int):
        self._require(can_view(request.user, RECURSO_PAGOS_COBROS), "No tienes permisos para consultar pagos y cobros.")
        self._get_or_404(OrdenCompra.objects.all(), orden_id, "la orden de compra")
        return self._listar(request, orden_compra_id=orden_id)
