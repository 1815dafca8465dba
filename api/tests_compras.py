from decimal import Decimal

from django.contrib.auth.models import Group, User
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from compras.models import OrdenCompra
from core.access import ROLE_GERENTE, ROLE_VENTAS
from maestros.models import Insumo, Proveedor
from pagos.models import PagoCobro


class ComprasApiTests(APITestCase):
    def setUp(self):
        self.user_gerente = User.objects.create_user(username="gerente_compras", password="pass123")
        gerente_group, _ = Group.objects.get_or_create(name=ROLE_GERENTE)
        self.user_gerente.groups.add(gerente_group)

        self.user_ventas = User.objects.create_user(username="ventas_compras", password="pass123")
        ventas_group, _ = Group.objects.get_or_create(name=ROLE_VENTAS)
        self.user_ventas.groups.add(ventas_group)

        self.proveedor = Proveedor.objects.create(nombre_comercial="Telas del Valle", nit="800-1")
        self.tela = Insumo.objects.create(nombre="Lino", unidad_medida="m")
        self.hilo = Insumo.objects.create(nombre="Hilo poliéster", unidad_medida="cono")

    def _crear_orden(self, **extra):
        self.client.force_authenticate(self.user_gerente)
        payload = {
            "idProveedor": self.proveedor.id,
            "detalles": [
                {"idInsumo": self.tela.id, "cantidadCompra": 10, "precioUnitarioCompra": "12000.00"},
                {"idInsumo": self.hilo.id, "cantidadCompra": 5, "precioUnitarioCompra": "3500.00"},
            ],
        }
        payload.update(extra)
        return self.client.post(reverse("api_ordenes_compra"), payload, format="json")

    def test_create_orden_compra(self):
        resp = self._crear_orden(observacionesCompra="Urgente")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["totalCompra"], Decimal("137500.00"))
        self.assertEqual(resp.data["estadoCompra"], OrdenCompra.ESTADO_PENDIENTE)
        self.assertEqual(resp.data["proveedor"]["idProveedor"], self.proveedor.id)
        self.assertIsNone(resp.data["fechaEntregaRealCompra"])

    def test_create_requires_unit_price(self):
        resp = self._crear_orden(detalles=[{"idInsumo": self.tela.id, "cantidadCompra": 1}])
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("detalles[0].precioUnitarioCompra", resp.data["validationErrors"])

    def test_receive_total_sets_real_delivery_date(self):
        orden_id = self._crear_orden().data["idOrdenCompra"]
        detail_url = reverse("api_orden_compra_detail", kwargs={"orden_id": orden_id})

        resp_skip = self.client.put(detail_url, {"estadoCompra": OrdenCompra.ESTADO_RECIBIDA_TOTAL}, format="json")
        self.assertEqual(resp_skip.status_code, status.HTTP_409_CONFLICT)

        self.assertEqual(
            self.client.put(detail_url, {"estadoCompra": OrdenCompra.ESTADO_ENVIADA}, format="json").status_code,
            status.HTTP_200_OK,
        )
        resp_total = self.client.put(detail_url, {"estadoCompra": OrdenCompra.ESTADO_RECIBIDA_TOTAL}, format="json")
        self.assertEqual(resp_total.status_code, status.HTTP_200_OK)
        self.assertEqual(resp_total.data["fechaEntregaRealCompra"], timezone.localdate().isoformat())

        resp_annul = self.client.post(reverse("api_orden_compra_anular", kwargs={"orden_id": orden_id}))
        self.assertEqual(resp_annul.status_code, status.HTTP_409_CONFLICT)

    def test_anular_cancels_pending_pagos(self):
        orden_id = self._crear_orden().data["idOrdenCompra"]
        orden = OrdenCompra.objects.get(pk=orden_id)
        pago = PagoCobro.objects.create(
            tipo=PagoCobro.TIPO_PAGO, orden_compra=orden, metodo_pago="Transferencia", monto=Decimal("5000")
        )

        resp = self.client.post(reverse("api_orden_compra_anular", kwargs={"orden_id": orden_id}))
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        orden.refresh_from_db()
        pago.refresh_from_db()
        self.assertEqual(orden.estado, OrdenCompra.ESTADO_ANULADA)
        self.assertEqual(pago.estado, PagoCobro.ESTADO_ANULADO)

    def test_detalles_only_editable_while_pendiente(self):
        resp = self._crear_orden(
            detalles=[{"idInsumo": self.tela.id, "cantidadCompra": 2, "precioUnitarioCompra": "1000"}]
        )
        orden_id = resp.data["idOrdenCompra"]
        detalles_url = reverse("api_orden_compra_detalles", kwargs={"orden_id": orden_id})

        resp_add = self.client.post(
            detalles_url,
            {"idInsumo": self.hilo.id, "cantidadCompra": 4, "precioUnitarioCompra": "500"},
            format="json",
        )
        self.assertEqual(resp_add.status_code, status.HTTP_201_CREATED)
        self.assertEqual(OrdenCompra.objects.get(pk=orden_id).total, Decimal("4000.00"))

        self.client.put(
            reverse("api_orden_compra_detail", kwargs={"orden_id": orden_id}),
            {"estadoCompra": OrdenCompra.ESTADO_ENVIADA},
            format="json",
        )
        detalle_url = reverse(
            "api_orden_compra_detalle", kwargs={"orden_id": orden_id, "detalle_id": resp_add.data["idDetalleCompra"]}
        )
        resp_update = self.client.put(detalle_url, {"cantidadCompra": 8}, format="json")
        self.assertEqual(resp_update.status_code, status.HTTP_409_CONFLICT)

    def test_detalle_changes_cannot_drop_total_below_paid(self):
        resp = self._crear_orden()
        orden_id = resp.data["idOrdenCompra"]
        detalle_tela, detalle_hilo = (d["idDetalleCompra"] for d in resp.data["detalles"])
        PagoCobro.objects.create(
            tipo=PagoCobro.TIPO_PAGO,
            orden_compra_id=orden_id,
            metodo_pago="Transferencia",
            monto=Decimal("130000"),
        )
        hilo_url = reverse("api_orden_compra_detalle", kwargs={"orden_id": orden_id, "detalle_id": detalle_hilo})
        tela_url = reverse("api_orden_compra_detalle", kwargs={"orden_id": orden_id, "detalle_id": detalle_tela})

        resp_delete = self.client.delete(hilo_url)
        self.assertEqual(resp_delete.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(OrdenCompra.objects.get(pk=orden_id).detalles.count(), 2)

        resp_update = self.client.put(tela_url, {"precioUnitarioCompra": "10000.00"}, format="json")
        self.assertEqual(resp_update.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(OrdenCompra.objects.get(pk=orden_id).total, Decimal("137500.00"))

        resp_ok = self.client.put(tela_url, {"precioUnitarioCompra": "11500.00"}, format="json")
        self.assertEqual(resp_ok.status_code, status.HTTP_200_OK)
        self.assertEqual(OrdenCompra.objects.get(pk=orden_id).total, Decimal("132500.00"))

    def test_por_proveedor_and_permissions(self):
        self._crear_orden()
        resp = self.client.get(reverse("api_ordenes_compra_proveedor", kwargs={"proveedor_id": self.proveedor.id}))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data), 1)
        self.assertEqual(resp.data[0]["proveedor"]["nitProveedor"], "800-1")

        self.client.force_authenticate(self.user_ventas)
        resp_forbidden = self.client.get(reverse("api_ordenes_compra"))
        self.assertEqual(resp_forbidden.status_code, status.HTTP_403_FORBIDDEN)
