from decimal import Decimal

from django.contrib.auth.models import Group, User
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from compras.models import OrdenCompra
from core.access import ROLE_GERENTE, ROLE_VENTAS
from crm.models import Cliente
from maestros.models import Proveedor
from pagos.models import PagoCobro
from ventas.models import OrdenVenta


class PagosApiTests(APITestCase):
    def setUp(self):
        self.user_gerente = User.objects.create_user(username="gerente_pagos", password="pass123")
        gerente_group, _ = Group.objects.get_or_create(name=ROLE_GERENTE)
        self.user_gerente.groups.add(gerente_group)

        self.user_ventas = User.objects.create_user(username="ventas_pagos", password="pass123")
        ventas_group, _ = Group.objects.get_or_create(name=ROLE_VENTAS)
        self.user_ventas.groups.add(ventas_group)

        cliente = Cliente.objects.create(numero_documento="C-PAG", nombre="Cliente Pagos")
        proveedor = Proveedor.objects.create(nombre_comercial="Proveedor Pagos", nit="N-PAG")
        self.venta = OrdenVenta.objects.create(cliente=cliente, total=Decimal("100000"))
        self.compra = OrdenCompra.objects.create(proveedor=proveedor, total=Decimal("40000"))
        self.client.force_authenticate(self.user_gerente)

    def _cobro(self, monto="30000.00", **extra):
        payload = {
            "tipoTransaccion": PagoCobro.TIPO_COBRO,
            "idOrdenVenta": self.venta.id,
            "fechaPagoCobro": "2025-03-15",
            "metodoPago": "Transferencia",
            "montoTransaccion": monto,
        }
        payload.update(extra)
        return self.client.post(reverse("api_pagos_cobros"), payload, format="json")

    def test_create_cobro(self):
        resp = self._cobro(referenciaTransaccion="TRX-1")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["estadoTransaccion"], PagoCobro.ESTADO_PENDIENTE)
        self.assertEqual(resp.data["ordenVenta"]["idOrdenVenta"], self.venta.id)
        self.assertIsNone(resp.data["ordenCompra"])
        self.assertEqual(resp.data["montoTransaccion"], Decimal("30000.00"))

    def test_cobro_must_reference_orden_venta_only(self):
        resp_missing = self._cobro(idOrdenVenta=None)
        self.assertEqual(resp_missing.status_code, status.HTTP_400_BAD_REQUEST)

        resp_both = self._cobro(idOrdenCompra=self.compra.id)
        self.assertEqual(resp_both.status_code, status.HTTP_400_BAD_REQUEST)

        resp_state = self._cobro(estadoTransaccion=PagoCobro.ESTADO_PAGADO)
        self.assertEqual(resp_state.status_code, status.HTTP_400_BAD_REQUEST)

    def test_amount_cannot_exceed_order_balance(self):
        self.assertEqual(self._cobro(monto="70000.00").status_code, status.HTTP_201_CREATED)
        resp_over = self._cobro(monto="30000.01")
        self.assertEqual(resp_over.status_code, status.HTTP_409_CONFLICT)

        resp_zero = self._cobro(monto="0")
        self.assertEqual(resp_zero.status_code, status.HTTP_400_BAD_REQUEST)

    def test_annulled_amounts_free_the_balance(self):
        pago_id = self._cobro(monto="100000.00").data["idPagoCobro"]
        resp_annul = self.client.post(reverse("api_pago_cobro_anular", kwargs={"pago_id": pago_id}))
        self.assertEqual(resp_annul.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self._cobro(monto="100000.00").status_code, status.HTTP_201_CREATED)

        resp_edit = self.client.put(
            reverse("api_pago_cobro_detail", kwargs={"pago_id": pago_id}),
            {"metodoPago": "Efectivo"},
            format="json",
        )
        self.assertEqual(resp_edit.status_code, status.HTTP_409_CONFLICT)

    def test_no_transactions_on_annulled_order(self):
        self.compra.estado = OrdenCompra.ESTADO_ANULADA
        self.compra.save()
        resp = self.client.post(
            reverse("api_pagos_cobros"),
            {
                "tipoTransaccion": PagoCobro.TIPO_PAGO,
                "idOrdenCompra": self.compra.id,
                "fechaPagoCobro": "2025-03-15",
                "metodoPago": "Cheque",
                "montoTransaccion": "100.00",
            },
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

    def test_update_state_and_queries(self):
        cobro_id = self._cobro().data["idPagoCobro"]
        PagoCobro.objects.create(
            tipo=PagoCobro.TIPO_PAGO, orden_compra=self.compra, metodo_pago="Cheque", monto=Decimal("1000")
        )

        resp_update = self.client.put(
            reverse("api_pago_cobro_detail", kwargs={"pago_id": cobro_id}),
            {"estadoTransaccion": PagoCobro.ESTADO_COBRADO, "referenciaTransaccion": "REC-9"},
            format="json",
        )
        self.assertEqual(resp_update.status_code, status.HTTP_200_OK)
        self.assertEqual(resp_update.data["estadoTransaccion"], PagoCobro.ESTADO_COBRADO)
        self.assertEqual(resp_update.data["referenciaTransaccion"], "REC-9")

        resp_tipo = self.client.get(reverse("api_pagos_cobros_tipo", kwargs={"tipo": "pago"}))
        self.assertEqual(resp_tipo.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp_tipo.data), 1)
        self.assertEqual(resp_tipo.data[0]["tipoTransaccion"], PagoCobro.TIPO_PAGO)

        resp_bad_tipo = self.client.get(reverse("api_pagos_cobros_tipo", kwargs={"tipo": "reembolso"}))
        self.assertEqual(resp_bad_tipo.status_code, status.HTTP_404_NOT_FOUND)

        resp_venta = self.client.get(reverse("api_pagos_cobros_orden_venta", kwargs={"orden_id": self.venta.id}))
        self.assertEqual(len(resp_venta.data), 1)

        resp_compra = self.client.get(reverse("api_pagos_cobros_orden_compra", kwargs={"orden_id": 9999}))
        self.assertEqual(resp_compra.status_code, status.HTTP_404_NOT_FOUND)

        resp_page = self.client.get(reverse("api_pagos_cobros"), {"tipo": PagoCobro.TIPO_COBRO, "size": 1})
        self.assertEqual(resp_page.data["totalElements"], 1)
        self.assertEqual(resp_page.data["size"], 1)

    def test_ventas_role_without_permisos_is_forbidden(self):
        self.client.force_authenticate(self.user_ventas)
        resp = self.client.get(reverse("api_pagos_cobros_orden_venta", kwargs={"orden_id": 9999}))
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
