from decimal import Decimal

from django.contrib.auth.models import Group, User
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from core.access import ROLE_GERENTE, ROLE_OPERARIO
from crm.models import Cliente
from maestros.models import Producto
from produccion.models import OrdenProduccion, TareaProduccion
from rrhh.models import Empleado
from ventas.models import DetalleOrdenVenta, OrdenVenta


class ProduccionApiTests(APITestCase):
    def setUp(self):
        self.user_gerente = User.objects.create_user(username="gerente_prod", password="pass123")
        gerente_group, _ = Group.objects.get_or_create(name=ROLE_GERENTE)
        self.user_gerente.groups.add(gerente_group)

        self.user_operario = User.objects.create_user(username="operario_prod", password="pass123")
        operario_group, _ = Group.objects.get_or_create(name=ROLE_OPERARIO)
        self.user_operario.groups.add(operario_group)

        cliente = Cliente.objects.create(numero_documento="C-PROD", nombre="Cliente Producción")
        producto = Producto.objects.create(referencia="VES-1", nombre="Vestido", precio_venta=Decimal("120000"))
        self.venta = OrdenVenta.objects.create(cliente=cliente, estado=OrdenVenta.ESTADO_CONFIRMADA)
        DetalleOrdenVenta.objects.create(orden=self.venta, producto=producto, cantidad=3, precio_unitario=Decimal("120000"))
        self.venta.recompute_total()
        self.venta.save()
        self.empleado = Empleado.objects.create(numero_documento="E-1", nombre="Rosa Cortadora")
        self.client.force_authenticate(self.user_gerente)

    def _crear_orden(self, **extra):
        payload = {"idOrdenVenta": self.venta.id}
        payload.update(extra)
        return self.client.post(reverse("api_ordenes_produccion"), payload, format="json")

    def test_create_moves_venta_to_en_produccion(self):
        resp = self._crear_orden(observacionesProduccion="Lote 1")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["estadoProduccion"], OrdenProduccion.ESTADO_PENDIENTE)
        self.assertEqual(resp.data["ordenVenta"]["idOrdenVenta"], self.venta.id)
        self.assertEqual(resp.data["ordenVenta"]["totalOrden"], Decimal("360000.00"))
        self.venta.refresh_from_db()
        self.assertEqual(self.venta.estado, OrdenVenta.ESTADO_EN_PRODUCCION)

    def test_cannot_produce_annulled_venta(self):
        self.venta.estado = OrdenVenta.ESTADO_ANULADA
        self.venta.save()
        resp = self._crear_orden()
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

    def test_invalid_dates_rejected(self):
        resp = self._crear_orden(fechaInicioProduccion="2025-05-10", fechaFinEstimadaProduccion="2025-05-01")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_tareas_lifecycle_and_termination(self):
        orden_id = self._crear_orden().data["idOrdenProduccion"]
        tareas_url = reverse("api_orden_produccion_tareas", kwargs={"orden_id": orden_id})

        resp_tarea = self.client.post(
            tareas_url,
            {"idEmpleado": self.empleado.id, "nombreTarea": "Corte", "duracionEstimadaTarea": "02:00:00"},
            format="json",
        )
        self.assertEqual(resp_tarea.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp_tarea.data["duracionEstimadaTarea"], "02:00:00")
        self.assertEqual(resp_tarea.data["empleado"]["idEmpleado"], self.empleado.id)
        tarea_url = reverse(
            "api_orden_produccion_tarea",
            kwargs={"orden_id": orden_id, "tarea_id": resp_tarea.data["idTareaProduccion"]},
        )

        resp_mismatch = self.client.post(
            tareas_url,
            {"idOrdenProduccion": orden_id + 50, "nombreTarea": "Confección"},
            format="json",
        )
        self.assertEqual(resp_mismatch.status_code, status.HTTP_400_BAD_REQUEST)

        detail_url = reverse("api_orden_produccion_detail", kwargs={"orden_id": orden_id})
        resp_en_curso = self.client.put(tarea_url, {"estadoTarea": TareaProduccion.ESTADO_EN_CURSO}, format="json")
        self.assertEqual(resp_en_curso.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(resp_en_curso.data["fechaInicioTarea"])
        self.assertEqual(OrdenProduccion.objects.get(pk=orden_id).estado, OrdenProduccion.ESTADO_EN_PROCESO)

        resp_early = self.client.put(detail_url, {"estadoProduccion": OrdenProduccion.ESTADO_TERMINADA}, format="json")
        self.assertEqual(resp_early.status_code, status.HTTP_409_CONFLICT)

        resp_done = self.client.put(tarea_url, {"estadoTarea": TareaProduccion.ESTADO_COMPLETADA}, format="json")
        self.assertEqual(resp_done.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(resp_done.data["duracionRealTarea"])

        resp_end = self.client.put(detail_url, {"estadoProduccion": OrdenProduccion.ESTADO_TERMINADA}, format="json")
        self.assertEqual(resp_end.status_code, status.HTTP_200_OK)
        self.assertEqual(resp_end.data["fechaFinRealProduccion"], timezone.localdate().isoformat())

        resp_locked = self.client.post(tareas_url, {"nombreTarea": "Planchado"}, format="json")
        self.assertEqual(resp_locked.status_code, status.HTTP_409_CONFLICT)

        resp_annul = self.client.post(reverse("api_orden_produccion_anular", kwargs={"orden_id": orden_id}))
        self.assertEqual(resp_annul.status_code, status.HTTP_409_CONFLICT)

    def test_anular_and_por_orden_venta(self):
        orden_id = self._crear_orden().data["idOrdenProduccion"]

        resp = self.client.post(reverse("api_orden_produccion_anular", kwargs={"orden_id": orden_id}))
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(OrdenProduccion.objects.get(pk=orden_id).estado, OrdenProduccion.ESTADO_ANULADA)

        resp_list = self.client.get(
            reverse("api_ordenes_produccion_por_venta", kwargs={"orden_venta_id": self.venta.id})
        )
        self.assertEqual(resp_list.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp_list.data), 1)

        resp_filter = self.client.get(reverse("api_ordenes_produccion"), {"estado": OrdenProduccion.ESTADO_ANULADA})
        self.assertEqual(resp_filter.data["totalElements"], 1)

    def test_operario_without_permisos_cannot_create(self):
        self.client.force_authenticate(self.user_operario)
        resp = self._crear_orden()
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(OrdenProduccion.objects.exists())
