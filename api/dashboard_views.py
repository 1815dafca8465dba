from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.db.models import Sum
from django.utils import timezone
from rest_framework.response import Response

from crm.models import Cliente
from maestros.models import Producto
from produccion.models import OrdenProduccion
from ventas.models import OrdenVenta

from .base import BaseApiView


class DashboardSummaryStatsView(BaseApiView):
    def get(self, request):
        hoy = timezone.localdate()
        vigentes = OrdenVenta.objects.exclude(estado=OrdenVenta.ESTADO_ANULADA)
        recientes = vigentes.filter(fecha_pedido__gte=hoy - timedelta(days=6), fecha_pedido__lte=hoy)
        valor_reciente = recientes.aggregate(total=Sum("total"))["total"] or Decimal("0")
        return Response(
            {
                "totalClients": Cliente.objects.count(),
                "totalProducts": Producto.objects.count(),
                "totalSalesThisMonth": vigentes.filter(
                    fecha_pedido__year=hoy.year,
                    fecha_pedido__month=hoy.month,
                ).count(),
                "totalProductionOrdersPending": OrdenProduccion.objects.filter(
                    estado__in=OrdenProduccion.ESTADOS_ABIERTOS
                ).count(),
                "recentSalesValue": valor_reciente,
            }
        )
