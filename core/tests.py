import json
from decimal import Decimal
from io import StringIO

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import RequestFactory, TestCase
from rest_framework import exceptions
from rest_framework.authtoken.models import Token

from api.ventas_serializers import OrdenVentaCreateSerializer
from core.access import (
    ACCION_ANULAR,
    RECURSO_ORDENES_VENTA,
    ROLE_ADMIN,
    ROLE_GERENTE,
    ROLE_OPERARIO,
    ROLE_VENTAS,
    can_annul,
    can_delete,
    can_view,
    permiso_nombre,
    primary_role,
)
from core.exceptions import ConflictoError, api_exception_handler, flatten_validation_errors
from core.models import AuditLog, Permiso, RolPermiso
from core.pagination import parse_sort
from core.utils import normalizar_nombre
from crm.models import Cliente
from ventas.models import OrdenVenta


class AccessTests(TestCase):
    def setUp(self):
        user_model = get_user_model()
        self.gerente = user_model.objects.create_user(username="gerente_core", password="x")
        self.gerente.groups.add(Group.objects.create(name=ROLE_GERENTE))
        self.ventas = user_model.objects.create_user(username="ventas_core", password="x")
        self.ventas.groups.add(Group.objects.create(name=ROLE_VENTAS))

    def test_gerente_has_default_access_but_cannot_delete(self):
        self.assertTrue(can_view(self.gerente, RECURSO_ORDENES_VENTA))
        self.assertTrue(can_annul(self.gerente, RECURSO_ORDENES_VENTA))
        self.assertFalse(can_delete(self.gerente, RECURSO_ORDENES_VENTA))

    def test_granular_permisos_by_role(self):
        self.assertFalse(can_annul(self.ventas, RECURSO_ORDENES_VENTA))
        permiso = Permiso.objects.create(nombre_permiso=permiso_nombre(ACCION_ANULAR, RECURSO_ORDENES_VENTA))
        RolPermiso.objects.create(rol_nombre=ROLE_VENTAS, permiso=permiso)
        self.assertTrue(can_annul(self.ventas, RECURSO_ORDENES_VENTA))

    def test_primary_role_follows_role_order(self):
        self.ventas.groups.add(Group.objects.create(name=ROLE_ADMIN))
        self.assertEqual(primary_role(self.ventas), ROLE_ADMIN)
        self.assertEqual(primary_role(self.gerente), ROLE_GERENTE)

    def test_permiso_name_is_normalized_on_save(self):
        permiso = Permiso.objects.create(nombre_permiso="  permiso  ver  algo ")
        self.assertEqual(permiso.nombre_permiso, "PERMISO_VER_ALGO")


class ExceptionHandlerTests(TestCase):
    def setUp(self):
        self.request = RequestFactory().get("/api/v1/clientes")

    def _handle_serializer_errors(self, serializer_class, data):
        serializer = serializer_class(data=data)
        self.assertFalse(serializer.is_valid())
        return api_exception_handler(exceptions.ValidationError(serializer.errors), {"request": self.request})

    def test_nested_serializer_errors_use_indexed_names(self):
        cliente = Cliente.objects.create(numero_documento="EH-1", nombre="Cliente errores")
        response = self._handle_serializer_errors(
            OrdenVentaCreateSerializer,
            {"idCliente": cliente.id, "detalles": [{"cantidadProducto": 1}]},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["path"], "/api/v1/clientes")
        self.assertEqual(response.data["error"], "Bad Request")
        self.assertEqual(list(response.data["validationErrors"]), ["detalles[0].idProducto"])

    def test_empty_nested_list_is_reported_on_the_field(self):
        response = self._handle_serializer_errors(OrdenVentaCreateSerializer, {"detalles": []})
        errors = response.data["validationErrors"]
        self.assertIn("detalles", errors)
        self.assertIn("idCliente", errors)
        self.assertFalse(any("non_field_errors" in name for name in errors))

    def test_flatten_index_keyed_errors(self):
        detail = {
            "detalles": {
                1: {"cantidadProducto": ["Mínimo 1."]},
                "2": {"non_field_errors": ["Renglón inválido."]},
            },
            "nombreCliente": ["Este campo es requerido."],
        }
        self.assertEqual(
            flatten_validation_errors(detail),
            {
                "detalles[1].cantidadProducto": "Mínimo 1.",
                "detalles[2]": "Renglón inválido.",
                "nombreCliente": "Este campo es requerido.",
            },
        )

    def test_conflict_envelope(self):
        response = api_exception_handler(ConflictoError("Duplicado."), {"request": self.request})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["message"], "Duplicado.")
        self.assertNotIn("validationErrors", response.data)
        self.assertIn("timestamp", response.data)

    def test_flatten_nested_dicts(self):
        self.assertEqual(flatten_validation_errors({"a": {"b": ["x"]}}), {"a.b": "x"})


class HelpersTests(TestCase):
    def test_normalizar_nombre(self):
        self.assertEqual(normalizar_nombre("  Tela   ALGODÓN "), "tela algodon")
        self.assertEqual(normalizar_nombre(""), "")

    def test_parse_sort_ignores_unknown_fields(self):
        campos = {"nombreCliente": "nombre", "idCliente": "id"}
        self.assertEqual(parse_sort(["nombreCliente,desc", "otro,asc", "idCliente"], campos), ["-nombre", "id"])

    def test_health_check(self):
        response = self.client.get("/health/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})


class ManagementCommandTests(TestCase):
    def test_bootstrap_roles_creates_groups_and_permisos(self):
        call_command("bootstrap_roles", stdout=StringIO())
        for role in (ROLE_ADMIN, ROLE_GERENTE, ROLE_VENTAS, ROLE_OPERARIO):
            self.assertTrue(Group.objects.filter(name=role).exists())
        self.assertTrue(Permiso.objects.exists())
        self.assertTrue(RolPermiso.objects.filter(rol_nombre=ROLE_VENTAS).exists())

        total = RolPermiso.objects.count()
        call_command("bootstrap_roles", stdout=StringIO())
        self.assertEqual(RolPermiso.objects.count(), total)

    def test_generar_token_api(self):
        user = get_user_model().objects.create_user(username="integracion", password="x")
        out = StringIO()
        call_command("generar_token_api", "--username", "INTEGRACION", stdout=out)
        token = Token.objects.get(user=user)
        self.assertIn(token.key, out.getvalue())

        call_command("generar_token_api", "--username", "integracion", "--rotate", stdout=StringIO())
        self.assertNotEqual(Token.objects.get(user=user).key, token.key)

        with self.assertRaises(CommandError):
            call_command("generar_token_api", "--username", "nadie", stdout=StringIO())

    def test_auditar_consistencia_reports_mismatched_totals(self):
        cliente = Cliente.objects.create(numero_documento="AUD-1", nombre="Auditoría")
        orden = OrdenVenta.objects.create(cliente=cliente, total=Decimal("10"))
        out = StringIO()
        call_command("auditar_consistencia", "--json", stdout=out)
        metrics = json.loads(out.getvalue())
        self.assertEqual(metrics["volumen"]["ordenes_venta"], 1)
        self.assertEqual(metrics["consistencia"]["ventas_total_descuadrado"], [orden.id])
        self.assertEqual(metrics["consistencia"]["ordenes_sin_detalle"], 1)
        self.assertTrue(metrics["alertas"])


class AuditLogTests(TestCase):
    def test_log_event_ignores_anonymous_actor(self):
        from django.contrib.auth.models import AnonymousUser

        from core.audit import log_event

        log_event(AnonymousUser(), "CREATE", "crm.Cliente", 7, {"nombre": "x"})
        entry = AuditLog.objects.get()
        self.assertIsNone(entry.user)
        self.assertEqual(entry.object_id, "7")
