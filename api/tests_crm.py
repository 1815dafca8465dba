from django.contrib.auth.models import Group, User
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from core.access import ACCION_CREAR, ACCION_VER, RECURSO_CLIENTES, ROLE_GERENTE, ROLE_VENTAS, permiso_nombre
from core.models import Permiso, RolPermiso
from crm.models import Cliente, ContactoCliente
from ventas.models import OrdenVenta


class CRMApiTests(APITestCase):
    def setUp(self):
        self.user_gerente = User.objects.create_user(username="gerente_crm", password="pass123")
        gerente_group, _ = Group.objects.get_or_create(name=ROLE_GERENTE)
        self.user_gerente.groups.add(gerente_group)

        self.user_ventas = User.objects.create_user(username="ventas_crm", password="pass123")
        ventas_group, _ = Group.objects.get_or_create(name=ROLE_VENTAS)
        self.user_ventas.groups.add(ventas_group)
        for accion in (ACCION_VER, ACCION_CREAR):
            permiso = Permiso.objects.create(nombre_permiso=permiso_nombre(accion, RECURSO_CLIENTES))
            RolPermiso.objects.create(rol_nombre=ROLE_VENTAS, permiso=permiso)

    def test_clientes_create_and_list(self):
        self.client.force_authenticate(self.user_ventas)
        url = reverse("api_clientes")

        resp_create = self.client.post(
            url,
            {
                "tipoDocumento": "NIT",
                "numeroDocumento": "900123",
                "nombreCliente": "Almacenes Éxito",
                "correoCliente": "compras@exito.test",
            },
            format="json",
        )
        self.assertEqual(resp_create.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp_create.data["contactosCliente"], [])

        resp_list = self.client.get(url, {"q": "exito", "sort": "nombreCliente,desc"})
        self.assertEqual(resp_list.status_code, status.HTTP_200_OK)
        self.assertEqual(resp_list.data["totalElements"], 1)
        self.assertTrue(resp_list.data["sort"]["sorted"])

    def test_list_paging_params_are_clamped(self):
        for numero in ("C-1", "C-2", "C-3"):
            Cliente.objects.create(numero_documento=numero, nombre=f"Cliente {numero}")
        self.client.force_authenticate(self.user_gerente)
        url = reverse("api_clientes")

        resp_min = self.client.get(url, {"size": 0})
        self.assertEqual(resp_min.status_code, status.HTTP_200_OK)
        self.assertEqual(resp_min.data["size"], 1)
        self.assertEqual(resp_min.data["number"], 0)
        self.assertEqual(resp_min.data["totalPages"], 3)
        self.assertTrue(resp_min.data["first"])
        self.assertFalse(resp_min.data["last"])
        self.assertEqual(resp_min.data["numberOfElements"], 1)

        resp_max = self.client.get(url, {"size": 10000})
        self.assertEqual(resp_max.data["size"], 200)
        self.assertEqual(resp_max.data["totalPages"], 1)
        self.assertTrue(resp_max.data["last"])
        self.assertEqual(resp_max.data["numberOfElements"], 3)

        resp_bad_page = self.client.get(url, {"page": "abc", "size": 2})
        self.assertEqual(resp_bad_page.data["number"], 0)
        self.assertEqual(resp_bad_page.data["size"], 2)
        self.assertEqual(resp_bad_page.data["totalPages"], 2)
        self.assertTrue(resp_bad_page.data["first"])
        self.assertFalse(resp_bad_page.data["last"])

        resp_past_end = self.client.get(url, {"page": 5, "size": 2})
        self.assertEqual(resp_past_end.data["content"], [])
        self.assertTrue(resp_past_end.data["last"])
        self.assertTrue(resp_past_end.data["empty"])

    def test_ventas_can_create_but_cannot_edit_or_delete(self):
        cliente = Cliente.objects.create(numero_documento="111", nombre="Cliente Uno")
        self.client.force_authenticate(self.user_ventas)
        detail_url = reverse("api_cliente_detail", kwargs={"cliente_id": cliente.id})

        resp_put = self.client.put(detail_url, {"nombreCliente": "Otro"}, format="json")
        self.assertEqual(resp_put.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp_put.data["status"], 403)

        resp_delete = self.client.delete(detail_url)
        self.assertEqual(resp_delete.status_code, status.HTTP_403_FORBIDDEN)

    def test_duplicate_documento_on_create_and_update(self):
        Cliente.objects.create(numero_documento="AAA", nombre="Primero")
        segundo = Cliente.objects.create(numero_documento="BBB", nombre="Segundo")
        self.client.force_authenticate(self.user_gerente)

        resp_create = self.client.post(
            reverse("api_clientes"),
            {"numeroDocumento": "aaa", "nombreCliente": "Copia"},
            format="json",
        )
        self.assertEqual(resp_create.status_code, status.HTTP_409_CONFLICT)

        resp_update = self.client.put(
            reverse("api_cliente_detail", kwargs={"cliente_id": segundo.id}),
            {"numeroDocumento": "AAA"},
            format="json",
        )
        self.assertEqual(resp_update.status_code, status.HTTP_409_CONFLICT)

        resp_same = self.client.put(
            reverse("api_cliente_detail", kwargs={"cliente_id": segundo.id}),
            {"numeroDocumento": "BBB", "telefonoCliente": "3001234567"},
            format="json",
        )
        self.assertEqual(resp_same.status_code, status.HTTP_200_OK)
        self.assertEqual(resp_same.data["telefonoCliente"], "3001234567")

    def test_delete_cliente_with_ordenes_is_conflict(self):
        cliente = Cliente.objects.create(numero_documento="ORD-1", nombre="Con pedidos")
        OrdenVenta.objects.create(cliente=cliente)
        self.client.force_authenticate(self.user_gerente)
        # Gerente no elimina; se concede el permiso explícito.
        permiso = Permiso.objects.create(nombre_permiso="PERMISO_ELIMINAR_CLIENTES")
        RolPermiso.objects.create(rol_nombre=ROLE_GERENTE, permiso=permiso)

        resp = self.client.delete(reverse("api_cliente_detail", kwargs={"cliente_id": cliente.id}))
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Cliente.objects.filter(pk=cliente.id).exists())

    def test_contactos_crud_scoped_to_cliente(self):
        cliente = Cliente.objects.create(numero_documento="C-1", nombre="Cliente Contactos")
        otro = Cliente.objects.create(numero_documento="C-2", nombre="Otro Cliente")
        self.client.force_authenticate(self.user_gerente)
        contactos_url = reverse("api_cliente_contactos", kwargs={"cliente_id": cliente.id})

        resp_create = self.client.post(
            contactos_url,
            {"nombreContacto": "Laura", "cargoContacto": "Compras", "correoContacto": None},
            format="json",
        )
        self.assertEqual(resp_create.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp_create.data["idCliente"], cliente.id)
        self.assertEqual(resp_create.data["correoContacto"], "")
        contacto_id = resp_create.data["idContacto"]

        resp_mismatch = self.client.post(
            contactos_url,
            {"idCliente": otro.id, "nombreContacto": "Pedro"},
            format="json",
        )
        self.assertEqual(resp_mismatch.status_code, status.HTTP_400_BAD_REQUEST)

        resp_wrong_owner = self.client.put(
            reverse("api_cliente_contacto_detail", kwargs={"cliente_id": otro.id, "contacto_id": contacto_id}),
            {"nombreContacto": "Laura M."},
            format="json",
        )
        self.assertEqual(resp_wrong_owner.status_code, status.HTTP_404_NOT_FOUND)

        resp_update = self.client.put(
            reverse("api_cliente_contacto_detail", kwargs={"cliente_id": cliente.id, "contacto_id": contacto_id}),
            {"nombreContacto": "Laura M."},
            format="json",
        )
        self.assertEqual(resp_update.status_code, status.HTTP_200_OK)
        self.assertEqual(resp_update.data["nombreContacto"], "Laura M.")

        resp_list = self.client.get(contactos_url)
        self.assertEqual(len(resp_list.data), 1)

        resp_delete = self.client.delete(
            reverse("api_cliente_contacto_detail", kwargs={"cliente_id": cliente.id, "contacto_id": contacto_id})
        )
        self.assertEqual(resp_delete.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ContactoCliente.objects.exists())

    def test_lookup_by_documento(self):
        Cliente.objects.create(numero_documento="DOC-77", nombre="Buscado")
        self.client.force_authenticate(self.user_ventas)

        resp = self.client.get(reverse("api_cliente_documento", kwargs={"numero": "DOC-77"}))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["nombreCliente"], "Buscado")

        resp_missing = self.client.get(reverse("api_cliente_documento", kwargs={"numero": "NOPE"}))
        self.assertEqual(resp_missing.status_code, status.HTTP_404_NOT_FOUND)
