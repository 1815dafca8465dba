from decimal import Decimal

from django.contrib.auth.models import Group, User
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from compras.models import OrdenCompra
from core.access import ROLE_ADMIN, ROLE_GERENTE
from inventario.models import AlertaStock, InventarioInsumo
from maestros.models import Insumo, InsumoPorProducto, Producto, Proveedor


class MaestrosApiTests(APITestCase):
    def setUp(self):
        self.user_gerente = User.objects.create_user(username="gerente_maestros", password="pass123")
        gerente_group, _ = Group.objects.get_or_create(name=ROLE_GERENTE)
        self.user_gerente.groups.add(gerente_group)

        self.user_admin = User.objects.create_user(username="admin_maestros", password="pass123")
        admin_group, _ = Group.objects.get_or_create(name=ROLE_ADMIN)
        self.user_admin.groups.add(admin_group)

    def test_proveedores_create_duplicate_nit_and_lookup(self):
        self.client.force_authenticate(self.user_gerente)
        url = reverse("api_proveedores")

        resp_create = self.client.post(
            url,
            {"nombreComercialProveedor": "Textiles Andinos", "nitProveedor": "800111-1"},
            format="json",
        )
        self.assertEqual(resp_create.status_code, status.HTTP_201_CREATED)

        resp_dup = self.client.post(
            url,
            {"nombreComercialProveedor": "Copia", "nitProveedor": "800111-1"},
            format="json",
        )
        self.assertEqual(resp_dup.status_code, status.HTTP_409_CONFLICT)

        resp_nit = self.client.get(reverse("api_proveedor_nit", kwargs={"nit": "800111-1"}))
        self.assertEqual(resp_nit.status_code, status.HTTP_200_OK)
        self.assertEqual(resp_nit.data["nombreComercialProveedor"], "Textiles Andinos")

    def test_delete_proveedor_with_ordenes_is_conflict(self):
        proveedor = Proveedor.objects.create(nombre_comercial="Con compras", nit="NIT-9")
        OrdenCompra.objects.create(proveedor=proveedor)
        self.client.force_authenticate(self.user_admin)

        resp = self.client.delete(reverse("api_proveedor_detail", kwargs={"proveedor_id": proveedor.id}))
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

    def test_insumo_name_is_unique_after_normalization(self):
        Insumo.objects.create(nombre="Tela Algodón", unidad_medida="m")
        self.client.force_authenticate(self.user_gerente)

        resp = self.client.post(
            reverse("api_insumos"),
            {"nombreInsumo": "  tela   algodon ", "unidadMedidaInsumo": "m"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

        resp_lookup = self.client.get(reverse("api_insumo_nombre", kwargs={"nombre": "TELA ALGODON"}))
        self.assertEqual(resp_lookup.status_code, status.HTTP_200_OK)
        self.assertEqual(resp_lookup.data["nombreInsumo"], "Tela Algodón")

    def test_insumo_threshold_change_opens_alert(self):
        insumo = Insumo.objects.create(nombre="Botón", unidad_medida="und")
        InventarioInsumo.objects.create(insumo=insumo, ubicacion="Bodega", cantidad_stock=Decimal("5"))
        self.client.force_authenticate(self.user_gerente)

        resp = self.client.put(
            reverse("api_insumo_detail", kwargs={"insumo_id": insumo.id}),
            {"stockMinimoInsumo": 10},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        alerta = AlertaStock.objects.get(insumo=insumo)
        self.assertEqual(alerta.estado, AlertaStock.ESTADO_NUEVA)
        self.assertEqual(alerta.umbral, 10)

    def test_delete_insumo_in_use_is_conflict(self):
        insumo = Insumo.objects.create(nombre="Cremallera", unidad_medida="und")
        producto = Producto.objects.create(referencia="P-1", nombre="Chaqueta")
        InsumoPorProducto.objects.create(producto=producto, insumo=insumo, cantidad_requerida=Decimal("1"))
        self.client.force_authenticate(self.user_admin)

        resp = self.client.delete(reverse("api_insumo_detail", kwargs={"insumo_id": insumo.id}))
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

        libre = Insumo.objects.create(nombre="Hilo", unidad_medida="cono")
        resp_ok = self.client.delete(reverse("api_insumo_detail", kwargs={"insumo_id": libre.id}))
        self.assertEqual(resp_ok.status_code, status.HTTP_204_NO_CONTENT)

    def test_productos_create_filter_and_referencia_is_immutable(self):
        self.client.force_authenticate(self.user_gerente)
        url = reverse("api_productos")

        resp_create = self.client.post(
            url,
            {
                "referenciaProducto": "CAM-001",
                "nombreProducto": "Camisa Oxford",
                "tipoProducto": "Camisa",
                "precioVenta": "89000.00",
            },
            format="json",
        )
        self.assertEqual(resp_create.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp_create.data["precioVenta"], Decimal("89000.00"))
        producto_id = resp_create.data["idProducto"]

        resp_dup = self.client.post(
            url,
            {"referenciaProducto": "cam-001", "nombreProducto": "Otra", "precioVenta": "1.00"},
            format="json",
        )
        self.assertEqual(resp_dup.status_code, status.HTTP_409_CONFLICT)

        resp_filter = self.client.get(url, {"tipoProducto": "camisa", "precioMin": "50000"})
        self.assertEqual(resp_filter.data["totalElements"], 1)

        resp_update = self.client.put(
            reverse("api_producto_detail", kwargs={"producto_id": producto_id}),
            {"referenciaProducto": "CAM-999", "colorProducto": "Azul"},
            format="json",
        )
        self.assertEqual(resp_update.status_code, status.HTTP_200_OK)
        self.assertEqual(resp_update.data["referenciaProducto"], "CAM-001")
        self.assertEqual(resp_update.data["colorProducto"], "Azul")

        resp_ref = self.client.get(reverse("api_producto_referencia", kwargs={"referencia": "CAM-001"}))
        self.assertEqual(resp_ref.data["idProducto"], producto_id)

    def test_bom_add_update_and_remove(self):
        producto = Producto.objects.create(referencia="PAN-1", nombre="Pantalón")
        tela = Insumo.objects.create(nombre="Dril", unidad_medida="m")
        self.client.force_authenticate(self.user_gerente)
        bom_url = reverse("api_producto_bom", kwargs={"producto_id": producto.id})

        resp_add = self.client.post(bom_url, {"idInsumo": tela.id, "cantidadRequerida": "1.2500"}, format="json")
        self.assertEqual(resp_add.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp_add.data["nombreInsumo"], "Dril")

        resp_dup = self.client.post(bom_url, {"idInsumo": tela.id, "cantidadRequerida": "2"}, format="json")
        self.assertEqual(resp_dup.status_code, status.HTTP_409_CONFLICT)

        resp_mismatch = self.client.post(
            bom_url,
            {"idProducto": producto.id + 100, "idInsumo": tela.id, "cantidadRequerida": "2"},
            format="json",
        )
        self.assertEqual(resp_mismatch.status_code, status.HTTP_400_BAD_REQUEST)

        resp_unknown = self.client.post(bom_url, {"idInsumo": 9999, "cantidadRequerida": "2"}, format="json")
        self.assertEqual(resp_unknown.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("idInsumo", resp_unknown.data["validationErrors"])

        detail_url = reverse("api_producto_bom_detail", kwargs={"producto_id": producto.id, "insumo_id": tela.id})
        resp_update = self.client.put(detail_url, {"cantidadRequerida": "1.5"}, format="json")
        self.assertEqual(resp_update.status_code, status.HTTP_200_OK)
        self.assertEqual(resp_update.data["cantidadRequerida"], Decimal("1.5000"))

        resp_list = self.client.get(bom_url)
        self.assertEqual(len(resp_list.data), 1)

        resp_delete = self.client.delete(detail_url)
        self.assertEqual(resp_delete.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(InsumoPorProducto.objects.exists())

        resp_missing = self.client.delete(detail_url)
        self.assertEqual(resp_missing.status_code, status.HTTP_404_NOT_FOUND)
