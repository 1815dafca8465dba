from datetime import timedelta
from decimal import Decimal

from django.contrib.auth.models import Group, User
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from core.access import ACCION_CREAR, ACCION_EDITAR, ACCION_VER, RECURSO_ORDENES_VENTA, ROLE_GERENTE, ROLE_VENTAS, permiso_nombre
from core.models import AuditLog, Permiso, RolPermiso
from crm.models import Cliente
from maestros.models import Producto
from pagos.models import PagoCobro
from produccion.models import OrdenProduccion
from ventas.models import DetalleOrdenVenta, OrdenVenta


class VentasApiTests(APITestCase):
    def setUp(self):
        self.user_gerente = User.objects.create_user(username="gerente_ventas", password="pass123")
        gerente_group, _ = Group.objects.get_or_create(name=ROLE_GERENTE)
        self.user_gerente.groups.add(gerente_group)

        self.user_ventas = User.objects.create_user(username="vendedor", password="pass123")
        ventas_group, _ = Group.objects.get_or_create(name=ROLE_VENTAS)
        self.user_ventas.groups.add(ventas_group)
        for accion in (ACCION_VER, ACCION_CREAR, ACCION_EDITAR):
            permiso = Permiso.objects.create(nombre_permiso=permiso_nombre(accion, RECURSO_ORDENES_VENTA))
            RolPermiso.objects.create(rol_nombre=ROLE_VENTAS, permiso=permiso)

        self.cliente = Cliente.objects.create(numero_documento="900", nombre="Boutique Centro")
        self.camisa = Producto.objects.create(referencia="CAM-1", nombre="Camisa", precio_venta=Decimal("50000"))
        self.jean = Producto.objects.create(referencia="JEA-1", nombre="Jean", precio_venta=Decimal("80000"))

    def _crear_orden(self, user=None, **extra):
        self.client.force_authenticate(user or self.user_gerente)
        payload = {
            "idCliente": self.cliente.id,
            "detalles": [
                {"idProducto": self.camisa.id, "cantidadProducto": 2},
                {"idProducto": self.jean.id, "cantidadProducto": 1, "precioUnitarioVenta": "75000.00"},
            ],
        }
        payload.update(extra)
        return self.client.post(reverse("api_ordenes_venta"), payload, format="json")

    def test_create_orden_computes_total_from_detalles(self):
        resp = self._crear_orden(user=self.user_ventas, observacionesOrden="Entrega en tienda")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["estadoOrden"], OrdenVenta.ESTADO_PENDIENTE)
        self.assertEqual(resp.data["totalOrden"], Decimal("175000.00"))
        self.assertEqual(resp.data["cliente"]["idCliente"], self.cliente.id)
        self.assertEqual(len(resp.data["detalles"]), 2)
        self.assertEqual(resp.data["detalles"][0]["precioUnitarioVenta"], Decimal("50000.00"))
        self.assertTrue(AuditLog.objects.filter(action="CREATE", model="ventas.OrdenVenta").exists())

    def test_create_orden_rejects_empty_and_repeated_detalles(self):
        resp_empty = self._crear_orden(detalles=[])
        self.assertEqual(resp_empty.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("detalles", resp_empty.data["validationErrors"])

        resp_repeated = self._crear_orden(
            detalles=[
                {"idProducto": self.camisa.id, "cantidadProducto": 1},
                {"idProducto": self.camisa.id, "cantidadProducto": 3},
            ]
        )
        self.assertEqual(resp_repeated.status_code, status.HTTP_400_BAD_REQUEST)

        resp_bad_qty = self._crear_orden(detalles=[{"idProducto": self.camisa.id, "cantidadProducto": 0}])
        self.assertEqual(resp_bad_qty.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("detalles[0].cantidadProducto", resp_bad_qty.data["validationErrors"])
        self.assertFalse(OrdenVenta.objects.exists())

    def test_create_orden_rejects_past_delivery_date(self):
        ayer = timezone.localdate() - timedelta(days=1)
        resp = self._crear_orden(fechaEntregaEstimada=ayer.isoformat())
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_state_transitions(self):
        orden_id = self._crear_orden().data["idOrdenVenta"]
        detail_url = reverse("api_orden_venta_detail", kwargs={"orden_id": orden_id})

        resp_confirm = self.client.put(detail_url, {"estadoOrden": OrdenVenta.ESTADO_CONFIRMADA}, format="json")
        self.assertEqual(resp_confirm.status_code, status.HTTP_200_OK)
        self.assertEqual(resp_confirm.data["estadoOrden"], OrdenVenta.ESTADO_CONFIRMADA)

        resp_back = self.client.put(detail_url, {"estadoOrden": OrdenVenta.ESTADO_PENDIENTE}, format="json")
        self.assertEqual(resp_back.status_code, status.HTTP_409_CONFLICT)

        resp_deliver = self.client.put(detail_url, {"estadoOrden": OrdenVenta.ESTADO_ENTREGADA}, format="json")
        self.assertEqual(resp_deliver.status_code, status.HTTP_200_OK)

        resp_final = self.client.put(detail_url, {"observacionesOrden": "tarde"}, format="json")
        self.assertEqual(resp_final.status_code, status.HTTP_409_CONFLICT)

        resp_annul = self.client.post(reverse("api_orden_venta_anular", kwargs={"orden_id": orden_id}))
        self.assertEqual(resp_annul.status_code, status.HTTP_409_CONFLICT)

    def test_anular_cascades_to_produccion_and_pending_cobros(self):
        orden_id = self._crear_orden().data["idOrdenVenta"]
        orden = OrdenVenta.objects.get(pk=orden_id)
        produccion = OrdenProduccion.objects.create(orden_venta=orden)
        terminada = OrdenProduccion.objects.create(orden_venta=orden, estado=OrdenProduccion.ESTADO_TERMINADA)
        pendiente = PagoCobro.objects.create(
            tipo=PagoCobro.TIPO_COBRO, orden_venta=orden, metodo_pago="Efectivo", monto=Decimal("1000")
        )
        cobrado = PagoCobro.objects.create(
            tipo=PagoCobro.TIPO_COBRO,
            orden_venta=orden,
            metodo_pago="Efectivo",
            monto=Decimal("2000"),
            estado=PagoCobro.ESTADO_COBRADO,
        )

        resp = self.client.post(reverse("api_orden_venta_anular", kwargs={"orden_id": orden_id}))
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)

        orden.refresh_from_db()
        produccion.refresh_from_db()
        terminada.refresh_from_db()
        pendiente.refresh_from_db()
        cobrado.refresh_from_db()
        self.assertEqual(orden.estado, OrdenVenta.ESTADO_ANULADA)
        self.assertEqual(produccion.estado, OrdenProduccion.ESTADO_ANULADA)
        self.assertEqual(terminada.estado, OrdenProduccion.ESTADO_TERMINADA)
        self.assertEqual(pendiente.estado, PagoCobro.ESTADO_ANULADO)
        self.assertEqual(cobrado.estado, PagoCobro.ESTADO_COBRADO)

        resp_again = self.client.post(reverse("api_orden_venta_anular", kwargs={"orden_id": orden_id}))
        self.assertEqual(resp_again.status_code, status.HTTP_409_CONFLICT)

    def test_ventas_role_cannot_annul(self):
        orden_id = self._crear_orden().data["idOrdenVenta"]
        self.client.force_authenticate(self.user_ventas)

        resp_post = self.client.post(reverse("api_orden_venta_anular", kwargs={"orden_id": orden_id}))
        self.assertEqual(resp_post.status_code, status.HTTP_403_FORBIDDEN)

        resp_put = self.client.put(
            reverse("api_orden_venta_detail", kwargs={"orden_id": orden_id}),
            {"estadoOrden": OrdenVenta.ESTADO_ANULADA},
            format="json",
        )
        self.assertEqual(resp_put.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(OrdenVenta.objects.get(pk=orden_id).estado, OrdenVenta.ESTADO_PENDIENTE)

    def test_detalles_add_update_delete_recompute_total(self):
        resp = self._crear_orden(detalles=[{"idProducto": self.camisa.id, "cantidadProducto": 1}])
        orden_id = resp.data["idOrdenVenta"]
        detalle_camisa = resp.data["detalles"][0]["idDetalleOrden"]
        detalles_url = reverse("api_orden_venta_detalles", kwargs={"orden_id": orden_id})

        resp_add = self.client.post(detalles_url, {"idProducto": self.jean.id, "cantidadProducto": 2}, format="json")
        self.assertEqual(resp_add.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp_add.data["subtotalDetalle"], Decimal("160000.00"))
        self.assertEqual(OrdenVenta.objects.get(pk=orden_id).total, Decimal("210000.00"))

        resp_dup = self.client.post(detalles_url, {"idProducto": self.jean.id, "cantidadProducto": 1}, format="json")
        self.assertEqual(resp_dup.status_code, status.HTTP_409_CONFLICT)

        camisa_url = reverse("api_orden_venta_detalle", kwargs={"orden_id": orden_id, "detalle_id": detalle_camisa})
        resp_update = self.client.put(camisa_url, {"cantidadProducto": 3}, format="json")
        self.assertEqual(resp_update.status_code, status.HTTP_200_OK)
        self.assertEqual(OrdenVenta.objects.get(pk=orden_id).total, Decimal("310000.00"))

        resp_delete = self.client.delete(camisa_url)
        self.assertEqual(resp_delete.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(OrdenVenta.objects.get(pk=orden_id).total, Decimal("160000.00"))

        ultimo = DetalleOrdenVenta.objects.get(orden_id=orden_id)
        resp_last = self.client.delete(
            reverse("api_orden_venta_detalle", kwargs={"orden_id": orden_id, "detalle_id": ultimo.id})
        )
        self.assertEqual(resp_last.status_code, status.HTTP_409_CONFLICT)

    def test_detalle_changes_cannot_drop_total_below_collected(self):
        resp = self._crear_orden()
        orden_id = resp.data["idOrdenVenta"]
        detalle_camisa, detalle_jean = (d["idDetalleOrden"] for d in resp.data["detalles"])
        PagoCobro.objects.create(
            tipo=PagoCobro.TIPO_COBRO,
            orden_venta_id=orden_id,
            metodo_pago="Transferencia",
            monto=Decimal("175000"),
        )
        jean_url = reverse("api_orden_venta_detalle", kwargs={"orden_id": orden_id, "detalle_id": detalle_jean})
        camisa_url = reverse("api_orden_venta_detalle", kwargs={"orden_id": orden_id, "detalle_id": detalle_camisa})

        resp_delete = self.client.delete(jean_url)
        self.assertEqual(resp_delete.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(DetalleOrdenVenta.objects.filter(pk=detalle_jean).exists())

        resp_update = self.client.put(camisa_url, {"cantidadProducto": 1}, format="json")
        self.assertEqual(resp_update.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(DetalleOrdenVenta.objects.get(pk=detalle_camisa).cantidad, 2)
        self.assertEqual(OrdenVenta.objects.get(pk=orden_id).total, Decimal("175000.00"))

        resp_up = self.client.put(camisa_url, {"cantidadProducto": 3}, format="json")
        self.assertEqual(resp_up.status_code, status.HTTP_200_OK)
        self.assertEqual(OrdenVenta.objects.get(pk=orden_id).total, Decimal("225000.00"))

        PagoCobro.objects.filter(orden_venta_id=orden_id).update(estado=PagoCobro.ESTADO_ANULADO)
        self.assertEqual(self.client.delete(jean_url).status_code, status.HTTP_204_NO_CONTENT)

    def test_list_filters_and_por_cliente(self):
        self._crear_orden()
        otro = Cliente.objects.create(numero_documento="901", nombre="Otra Tienda")
        OrdenVenta.objects.create(cliente=otro)

        resp_list = self.client.get(reverse("api_ordenes_venta"), {"idCliente": self.cliente.id})
        self.assertEqual(resp_list.data["totalElements"], 1)

        resp_cliente = self.client.get(reverse("api_ordenes_venta_cliente", kwargs={"cliente_id": otro.id}))
        self.assertEqual(resp_cliente.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp_cliente.data), 1)

        resp_missing = self.client.get(reverse("api_ordenes_venta_cliente", kwargs={"cliente_id": 9999}))
        self.assertEqual(resp_missing.status_code, status.HTTP_404_NOT_FOUND)
