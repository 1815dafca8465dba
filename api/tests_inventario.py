from decimal import Decimal

from django.contrib.auth.models import Group, User
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from core.access import ROLE_GERENTE, ROLE_OPERARIO
from inventario.models import AlertaStock, InventarioInsumo, InventarioProducto, MovimientoInsumo
from maestros.models import Insumo, Producto


class InventarioApiTests(APITestCase):
    def setUp(self):
        self.user_gerente = User.objects.create_user(username="gerente_inv", password="pass123")
        gerente_group, _ = Group.objects.get_or_create(name=ROLE_GERENTE)
        self.user_gerente.groups.add(gerente_group)

        self.user_operario = User.objects.create_user(username="operario_inv", password="pass123")
        operario_group, _ = Group.objects.get_or_create(name=ROLE_OPERARIO)
        self.user_operario.groups.add(operario_group)

        self.insumo = Insumo.objects.create(nombre="Tela Denim", unidad_medida="m", stock_minimo=20)
        self.producto = Producto.objects.create(referencia="JEA-9", nombre="Jean Clásico", stock_minimo=0)
        self.client.force_authenticate(self.user_gerente)

    def _crear_inventario(self, cantidad="50", ubicacion="Bodega A"):
        return self.client.post(
            reverse("api_inventario_insumos"),
            {"ubicacionInventario": ubicacion, "idInsumo": self.insumo.id, "cantidadStock": cantidad},
            format="json",
        )

    def test_create_inventario_records_initial_entry(self):
        resp = self._crear_inventario()
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["cantidadStock"], Decimal("50.000"))
        self.assertEqual(resp.data["umbralMinimoStock"], 20)
        inventario = InventarioInsumo.objects.get(pk=resp.data["idInventarioInsumo"])
        self.assertEqual(inventario.movimientos.count(), 1)
        self.assertFalse(AlertaStock.objects.exists())

        resp_dup = self._crear_inventario(ubicacion="bodega a")
        self.assertEqual(resp_dup.status_code, status.HTTP_409_CONFLICT)

    def test_movements_update_stock_and_alerts(self):
        inventario_id = self._crear_inventario(cantidad="30").data["idInventarioInsumo"]
        movimientos_url = reverse("api_inventario_insumos_movimientos")

        resp_salida = self.client.post(
            movimientos_url,
            {
                "tipoMovimiento": "Salida",
                "idInventarioInsumo": inventario_id,
                "cantidadMovimiento": "15",
                "descripcionMovimiento": "Corte lote 7",
            },
            format="json",
        )
        self.assertEqual(resp_salida.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp_salida.data["inventarioInsumoRef"]["idInventarioInsumo"], inventario_id)

        stock = self.client.get(reverse("api_inventario_insumo_stock", kwargs={"inventario_id": inventario_id}))
        self.assertEqual(stock.data, Decimal("15.000"))

        alerta = AlertaStock.objects.get(insumo=self.insumo)
        self.assertEqual(alerta.estado, AlertaStock.ESTADO_NUEVA)
        self.assertEqual(alerta.nivel_actual, Decimal("15"))

        resp_over = self.client.post(
            movimientos_url,
            {"tipoMovimiento": "Salida", "idInventarioInsumo": inventario_id, "cantidadMovimiento": "16"},
            format="json",
        )
        self.assertEqual(resp_over.status_code, status.HTTP_409_CONFLICT)

        resp_entrada = self.client.post(
            movimientos_url,
            {"tipoMovimiento": "Entrada", "idInventarioInsumo": inventario_id, "cantidadMovimiento": "10"},
            format="json",
        )
        self.assertEqual(resp_entrada.status_code, status.HTTP_201_CREATED)
        alerta.refresh_from_db()
        self.assertEqual(alerta.estado, AlertaStock.ESTADO_RESUELTA)

        resp_history = self.client.get(
            reverse("api_inventario_insumo_movimientos", kwargs={"inventario_id": inventario_id})
        )
        self.assertEqual(resp_history.data["totalElements"], 3)
        self.assertEqual(resp_history.data["content"][0]["tipoMovimiento"], "Entrada")

    def test_invalid_movements(self):
        inventario_id = self._crear_inventario().data["idInventarioInsumo"]
        movimientos_url = reverse("api_inventario_insumos_movimientos")

        resp_zero = self.client.post(
            movimientos_url,
            {"tipoMovimiento": "Entrada", "idInventarioInsumo": inventario_id, "cantidadMovimiento": "0"},
            format="json",
        )
        self.assertEqual(resp_zero.status_code, status.HTTP_400_BAD_REQUEST)

        resp_tipo = self.client.post(
            movimientos_url,
            {"tipoMovimiento": "Ajuste", "idInventarioInsumo": inventario_id, "cantidadMovimiento": "1"},
            format="json",
        )
        self.assertEqual(resp_tipo.status_code, status.HTTP_400_BAD_REQUEST)

        resp_missing = self.client.post(
            movimientos_url,
            {"tipoMovimiento": "Entrada", "idInventarioInsumo": 9999, "cantidadMovimiento": "1"},
            format="json",
        )
        self.assertEqual(resp_missing.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(MovimientoInsumo.objects.count(), 1)

    def test_lookup_by_item_and_location(self):
        self._crear_inventario(ubicacion="Bodega A")
        self._crear_inventario(ubicacion="Planta")

        resp_item = self.client.get(reverse("api_inventario_por_insumo", kwargs={"item_id": self.insumo.id}))
        self.assertEqual(len(resp_item.data), 2)

        resp_loc = self.client.get(
            reverse("api_inventario_insumo_ubicacion", kwargs={"item_id": self.insumo.id, "ubicacion": "planta"})
        )
        self.assertEqual(resp_loc.status_code, status.HTTP_200_OK)
        self.assertEqual(resp_loc.data["ubicacionInventario"], "Planta")

        resp_none = self.client.get(
            reverse("api_inventario_insumo_ubicacion", kwargs={"item_id": self.insumo.id, "ubicacion": "Tienda"})
        )
        self.assertEqual(resp_none.status_code, status.HTTP_404_NOT_FOUND)

    def test_producto_inventory_and_threshold(self):
        resp = self.client.post(
            reverse("api_inventario_productos"),
            {"ubicacionInventario": "Tienda", "idProducto": self.producto.id, "cantidadStock": "4"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(InventarioProducto.objects.count(), 1)
        self.assertFalse(AlertaStock.objects.filter(producto=self.producto).exists())

        resp_umbral = self.client.put(
            reverse("api_stock_threshold_producto", kwargs={"item_id": self.producto.id}),
            {"nuevoUmbral": 5},
            format="json",
        )
        self.assertEqual(resp_umbral.status_code, status.HTTP_200_OK)
        self.assertIn("5", resp_umbral.data)

        resp_active = self.client.get(reverse("api_stock_alerts_active"))
        self.assertEqual(len(resp_active.data), 1)
        self.assertEqual(resp_active.data[0]["tipoItem"], AlertaStock.TIPO_PRODUCTO)
        self.assertEqual(resp_active.data[0]["nombreItem"], "Jean Clásico")
        self.assertEqual(resp_active.data[0]["umbralConfigurado"], 5)

        resp_negative = self.client.put(
            reverse("api_stock_threshold_insumo", kwargs={"item_id": self.insumo.id}),
            {"nuevoUmbral": -1},
            format="json",
        )
        self.assertEqual(resp_negative.status_code, status.HTTP_400_BAD_REQUEST)

    def test_alert_view_and_resolve(self):
        self._crear_inventario(cantidad="5")
        alerta = AlertaStock.objects.get(insumo=self.insumo)

        resp_view = self.client.post(reverse("api_stock_alert_view", kwargs={"alerta_id": alerta.id}))
        self.assertEqual(resp_view.status_code, status.HTTP_204_NO_CONTENT)
        alerta.refresh_from_db()
        self.assertEqual(alerta.estado, AlertaStock.ESTADO_VISTA)

        resp_resolve = self.client.post(reverse("api_stock_alert_resolve", kwargs={"alerta_id": alerta.id}))
        self.assertEqual(resp_resolve.status_code, status.HTTP_204_NO_CONTENT)
        alerta.refresh_from_db()
        self.assertEqual(alerta.estado, AlertaStock.ESTADO_RESUELTA)
        self.assertIsNotNone(alerta.resuelta_en)

        resp_view_again = self.client.post(reverse("api_stock_alert_view", kwargs={"alerta_id": alerta.id}))
        self.assertEqual(resp_view_again.status_code, status.HTTP_409_CONFLICT)

        resp_active = self.client.get(reverse("api_stock_alerts_active"))
        self.assertEqual(resp_active.data, [])

    def test_operario_without_permisos_is_forbidden(self):
        self.client.force_authenticate(self.user_operario)
        resp = self.client.get(reverse("api_inventario_insumos"))
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
