from decimal import Decimal

from django.contrib.auth.models import Group, User
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from core.access import ROLE_ADMIN, ROLE_GERENTE, ROLE_OPERARIO
from rrhh.models import Empleado


class RRHHApiTests(APITestCase):
    def setUp(self):
        self.user_gerente = User.objects.create_user(username="gerente_rrhh", password="pass123")
        gerente_group, _ = Group.objects.get_or_create(name=ROLE_GERENTE)
        self.user_gerente.groups.add(gerente_group)

        self.user_admin = User.objects.create_user(username="admin_rrhh", password="pass123")
        admin_group, _ = Group.objects.get_or_create(name=ROLE_ADMIN)
        self.user_admin.groups.add(admin_group)

        self.user_operario = User.objects.create_user(username="operario_rrhh", password="pass123")
        operario_group, _ = Group.objects.get_or_create(name=ROLE_OPERARIO)
        self.user_operario.groups.add(operario_group)

    def test_empleados_create_and_list(self):
        self.client.force_authenticate(self.user_gerente)
        url = reverse("api_empleados")

        resp_create = self.client.post(
            url,
            {
                "numeroDocumento": " 1010 ",
                "nombreEmpleado": "Ana Costura",
                "cargoEmpleado": "Costurera",
                "areaEmpleado": "Confección",
                "salarioEmpleado": "1500000.00",
                "fechaContratacionEmpleado": "2024-02-01",
            },
            format="json",
        )
        self.assertEqual(resp_create.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp_create.data["numeroDocumento"], "1010")
        self.assertIsNone(resp_create.data["usuario"])

        resp_list = self.client.get(url, {"q": "ana"})
        self.assertEqual(resp_list.status_code, status.HTTP_200_OK)
        self.assertEqual(resp_list.data["totalElements"], 1)
        self.assertEqual(resp_list.data["content"][0]["nombreEmpleado"], "Ana Costura")
        self.assertTrue(resp_list.data["first"])

    def test_duplicate_documento_returns_conflict(self):
        Empleado.objects.create(numero_documento="2020", nombre="Existente")
        self.client.force_authenticate(self.user_gerente)

        resp = self.client.post(
            reverse("api_empleados"),
            {"numeroDocumento": "2020", "nombreEmpleado": "Duplicado"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["status"], 409)
        self.assertEqual(Empleado.objects.count(), 1)

    def test_missing_required_fields_returns_validation_envelope(self):
        self.client.force_authenticate(self.user_gerente)
        resp = self.client.post(reverse("api_empleados"), {"cargoEmpleado": "X"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("numeroDocumento", resp.data["validationErrors"])
        self.assertIn("nombreEmpleado", resp.data["validationErrors"])
        self.assertEqual(resp.data["path"], reverse("api_empleados"))

    def test_update_keeps_documento_and_delete_requires_admin(self):
        empleado = Empleado.objects.create(numero_documento="3030", nombre="Luis", salario=Decimal("100"))
        detail_url = reverse("api_empleado_detail", kwargs={"empleado_id": empleado.id})

        self.client.force_authenticate(self.user_gerente)
        resp_update = self.client.put(
            detail_url,
            {"numeroDocumento": "9999", "cargoEmpleado": "Cortador"},
            format="json",
        )
        self.assertEqual(resp_update.status_code, status.HTTP_200_OK)
        empleado.refresh_from_db()
        self.assertEqual(empleado.numero_documento, "3030")
        self.assertEqual(empleado.cargo, "Cortador")

        resp_delete_gerente = self.client.delete(detail_url)
        self.assertEqual(resp_delete_gerente.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.user_admin)
        resp_delete = self.client.delete(detail_url)
        self.assertEqual(resp_delete.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Empleado.objects.filter(pk=empleado.id).exists())

    def test_lookup_by_documento_and_not_found(self):
        Empleado.objects.create(numero_documento="ABC-1", nombre="Marta")
        self.client.force_authenticate(self.user_gerente)

        resp = self.client.get(reverse("api_empleado_documento", kwargs={"numero": "abc-1"}))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["nombreEmpleado"], "Marta")

        resp_missing = self.client.get(reverse("api_empleado_detail", kwargs={"empleado_id": 999}))
        self.assertEqual(resp_missing.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp_missing.data["error"], "Not Found")

    def test_operario_without_permisos_is_forbidden(self):
        self.client.force_authenticate(self.user_operario)
        resp = self.client.get(reverse("api_empleados"))
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_is_unauthorized(self):
        resp = self.client.get(reverse("api_empleados"))
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
