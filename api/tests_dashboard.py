from datetime import timedelta
from decimal import Decimal

from django.contrib.auth.models import Group, User
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from core.access import ROLE_OPERARIO
from crm.models import Cliente
from maestros.models import Producto
from produccion.models import OrdenProduccion
from ventas.models import OrdenVenta


class DashboardApiTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="operario_dash", password="pass123")
        group, _ = Group.objects.get_or_create(name=ROLE_OPERARIO)
        self.user.groups.add(group)

    def test_summary_stats(self):
        hoy = timezone.localdate()
        cliente = Cliente.objects.create(numero_documento="D-1", nombre="Cliente Dashboard")
        Cliente.objects.create(numero_documento="D-2", nombre="Otro Cliente")
        Producto.objects.create(referencia="DASH-1", nombre="Blusa")

        reciente = OrdenVenta.objects.create(cliente=cliente, fecha_pedido=hoy, total=Decimal("1500.50"))
        OrdenVenta.objects.create(cliente=cliente, fecha_pedido=hoy - timedelta(days=6), total=Decimal("500"))
        OrdenVenta.objects.create(cliente=cliente, fecha_pedido=hoy - timedelta(days=7), total=Decimal("9999"))
        OrdenVenta.objects.create(
            cliente=cliente, fecha_pedido=hoy, total=Decimal("7777"), estado=OrdenVenta.ESTADO_ANULADA
        )
        OrdenProduccion.objects.create(orden_venta=reciente)
        OrdenProduccion.objects.create(orden_venta=reciente, estado=OrdenProduccion.ESTADO_RETRASADA)
        OrdenProduccion.objects.create(orden_venta=reciente, estado=OrdenProduccion.ESTADO_TERMINADA)

        self.client.force_authenticate(self.user)
        resp = self.client.get(reverse("api_dashboard_summary_stats"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["totalClients"], 2)
        self.assertEqual(resp.data["totalProducts"], 1)
        self.assertEqual(resp.data["totalProductionOrdersPending"], 2)
        self.assertEqual(resp.data["recentSalesValue"], Decimal("2000.50"))

        en_mes = sum(
            1
            for fecha in (hoy, hoy - timedelta(days=6), hoy - timedelta(days=7))
            if (fecha.year, fecha.month) == (hoy.year, hoy.month)
        )
        self.assertEqual(resp.data["totalSalesThisMonth"], en_mes)

    def test_requires_authentication(self):
        resp = self.client.get(reverse("api_dashboard_summary_stats"))
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
