from django.contrib.auth.models import Group, User
from django.urls import reverse
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APITestCase

from core.access import ROLE_ADMIN, ROLE_GERENTE, ROLE_OPERARIO, ROLE_VENTAS
from core.models import AuditLog, Permiso, RolPermiso, UserProfile
from rrhh.models import Empleado

PASSWORD = "Costura#2025"


class AuthApiTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="marta", password=PASSWORD)
        group, _ = Group.objects.get_or_create(name=ROLE_VENTAS)
        self.user.groups.add(group)

    def test_login_returns_bearer_token(self):
        resp = self.client.post(
            reverse("api_auth_login"),
            {"nombreUsuario": "Marta", "contrasena": PASSWORD},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["type"], "Bearer")
        self.assertEqual(resp.data["rolUsuario"], ROLE_VENTAS)
        self.assertEqual(resp.data["token"], Token.objects.get(user=self.user).key)
        self.assertTrue(AuditLog.objects.filter(action="LOGIN", object_id=str(self.user.id)).exists())

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {resp.data['token']}")
        resp_me = self.client.get(reverse("api_usuario_detail", kwargs={"user_id": self.user.id}))
        self.assertEqual(resp_me.status_code, status.HTTP_200_OK)
        self.assertEqual(resp_me.data["nombreUsuario"], "marta")

    def test_login_rejects_bad_credentials_and_disabled_users(self):
        resp_bad = self.client.post(
            reverse("api_auth_login"),
            {"nombreUsuario": "marta", "contrasena": "incorrecta"},
            format="json",
        )
        self.assertEqual(resp_bad.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp_bad.data["status"], 401)

        self.user.is_active = False
        self.user.save()
        resp_disabled = self.client.post(
            reverse("api_auth_login"),
            {"nombreUsuario": "marta", "contrasena": PASSWORD},
            format="json",
        )
        self.assertEqual(resp_disabled.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_public_register_only_for_operario(self):
        url = reverse("api_auth_register")
        resp = self.client.post(
            url,
            {"nombreUsuario": "nuevo.operario", "contrasena": PASSWORD, "rolUsuario": ROLE_OPERARIO},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["rolUsuario"], ROLE_OPERARIO)
        self.assertTrue(UserProfile.objects.filter(user__username="nuevo.operario").exists())

        resp_admin = self.client.post(
            url,
            {"nombreUsuario": "intruso", "contrasena": PASSWORD, "rolUsuario": ROLE_ADMIN},
            format="json",
        )
        self.assertEqual(resp_admin.status_code, status.HTTP_403_FORBIDDEN)

        resp_dup = self.client.post(
            url,
            {"nombreUsuario": "NUEVO.OPERARIO", "contrasena": PASSWORD, "rolUsuario": ROLE_OPERARIO},
            format="json",
        )
        self.assertEqual(resp_dup.status_code, status.HTTP_409_CONFLICT)

        resp_weak = self.client.post(
            url,
            {"nombreUsuario": "debil", "contrasena": "123", "rolUsuario": ROLE_OPERARIO},
            format="json",
        )
        self.assertEqual(resp_weak.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("contrasena", resp_weak.data["validationErrors"])

    def test_public_register_ignores_empleado_and_habilitado(self):
        empleado = Empleado.objects.create(numero_documento="E-90", nombre="Rosa Corte")
        resp = self.client.post(
            reverse("api_auth_register"),
            {
                "idEmpleado": empleado.id,
                "nombreUsuario": "rosa",
                "contrasena": PASSWORD,
                "rolUsuario": ROLE_OPERARIO,
                "habilitado": False,
            },
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertTrue(resp.data["habilitado"])
        self.assertIsNone(resp.data["empleado"])
        perfil = UserProfile.objects.get(user__username="rosa")
        self.assertIsNone(perfil.empleado)
        self.assertTrue(perfil.user.is_active)


class UsuariosApiTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(username="admin_erp", password=PASSWORD)
        admin_group, _ = Group.objects.get_or_create(name=ROLE_ADMIN)
        self.admin.groups.add(admin_group)

        self.gerente = User.objects.create_user(username="gerente_erp", password=PASSWORD)
        gerente_group, _ = Group.objects.get_or_create(name=ROLE_GERENTE)
        self.gerente.groups.add(gerente_group)

        self.operario = User.objects.create_user(username="operario_erp", password=PASSWORD)
        operario_group, _ = Group.objects.get_or_create(name=ROLE_OPERARIO)
        self.operario.groups.add(operario_group)

    def test_admin_creates_user_linked_to_empleado(self):
        empleado = Empleado.objects.create(numero_documento="E-77", nombre="Carlos Bodega")
        self.client.force_authenticate(self.admin)

        resp = self.client.post(
            reverse("api_usuarios"),
            {
                "idEmpleado": empleado.id,
                "nombreUsuario": "carlos",
                "contrasena": PASSWORD,
                "rolUsuario": ROLE_GERENTE,
                "email": "carlos@erp.test",
            },
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["empleado"]["idEmpleado"], empleado.id)

        resp_taken = self.client.post(
            reverse("api_usuarios"),
            {"idEmpleado": empleado.id, "nombreUsuario": "carlos2", "contrasena": PASSWORD, "rolUsuario": ROLE_VENTAS},
            format="json",
        )
        self.assertEqual(resp_taken.status_code, status.HTTP_409_CONFLICT)

    def test_list_users_requires_viewer_role(self):
        self.client.force_authenticate(self.gerente)
        resp = self.client.get(reverse("api_usuarios"), {"rolUsuario": ROLE_OPERARIO})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["totalElements"], 1)
        self.assertEqual(resp.data["content"][0]["nombreUsuario"], "operario_erp")

        self.client.force_authenticate(self.operario)
        self.assertEqual(self.client.get(reverse("api_usuarios")).status_code, status.HTTP_403_FORBIDDEN)
        resp_other = self.client.get(reverse("api_usuario_detail", kwargs={"user_id": self.admin.id}))
        self.assertEqual(resp_other.status_code, status.HTTP_403_FORBIDDEN)
        resp_self = self.client.get(reverse("api_usuario_username", kwargs={"username": "operario_erp"}))
        self.assertEqual(resp_self.status_code, status.HTTP_200_OK)

    def test_self_update_cannot_change_role(self):
        self.client.force_authenticate(self.operario)
        url = reverse("api_usuario_detail", kwargs={"user_id": self.operario.id})

        resp = self.client.put(url, {"telefono": "3105550000", "nombre": "Pedro"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["telefono"], "3105550000")
        self.assertEqual(resp.data["nombre"], "Pedro")

        resp_role = self.client.put(url, {"rolUsuario": ROLE_ADMIN}, format="json")
        self.assertEqual(resp_role.status_code, status.HTTP_400_BAD_REQUEST)

        self.client.force_authenticate(self.admin)
        resp_admin = self.client.put(url, {"rolUsuario": ROLE_VENTAS, "habilitado": False}, format="json")
        self.assertEqual(resp_admin.status_code, status.HTTP_200_OK)
        self.assertEqual(resp_admin.data["rolUsuario"], ROLE_VENTAS)
        self.assertFalse(resp_admin.data["habilitado"])

    def test_change_password_rotates_token(self):
        old_token = Token.objects.create(user=self.operario)
        self.client.force_authenticate(self.operario)
        url = reverse("api_usuario_change_password", kwargs={"user_id": self.operario.id})

        resp_wrong = self.client.post(url, {"currentPassword": "otra", "newPassword": "Nueva#Clave99"}, format="json")
        self.assertEqual(resp_wrong.status_code, status.HTTP_400_BAD_REQUEST)

        resp = self.client.post(url, {"currentPassword": PASSWORD, "newPassword": "Nueva#Clave99"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data, "Contraseña cambiada exitosamente.")
        self.operario.refresh_from_db()
        self.assertTrue(self.operario.check_password("Nueva#Clave99"))
        self.assertFalse(Token.objects.filter(key=old_token.key).exists())

        self.client.force_authenticate(self.admin)
        resp_admin = self.client.post(url, {"newPassword": "Otra#Clave77"}, format="json")
        self.assertEqual(resp_admin.status_code, status.HTTP_200_OK)

    def test_admin_cannot_delete_self(self):
        self.client.force_authenticate(self.admin)
        resp_self = self.client.delete(reverse("api_usuario_detail", kwargs={"user_id": self.admin.id}))
        self.assertEqual(resp_self.status_code, status.HTTP_409_CONFLICT)

        resp = self.client.delete(reverse("api_usuario_detail", kwargs={"user_id": self.operario.id}))
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=self.operario.id).exists())


class PermisosApiTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(username="admin_permisos", password=PASSWORD)
        admin_group, _ = Group.objects.get_or_create(name=ROLE_ADMIN)
        self.admin.groups.add(admin_group)
        self.client.force_authenticate(self.admin)

    def test_permiso_crud_normalizes_names(self):
        resp = self.client.post(reverse("api_permisos"), {"nombrePermiso": " permiso ver reportes "}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["nombrePermiso"], "PERMISO_VER_REPORTES")

        resp_dup = self.client.post(reverse("api_permisos"), {"nombrePermiso": "permiso_ver_reportes"}, format="json")
        self.assertEqual(resp_dup.status_code, status.HTTP_409_CONFLICT)

        detail_url = reverse("api_permiso_detail", kwargs={"permiso_id": resp.data["idPermiso"]})
        resp_update = self.client.put(detail_url, {"nombrePermiso": "permiso exportar reportes"}, format="json")
        self.assertEqual(resp_update.data["nombrePermiso"], "PERMISO_EXPORTAR_REPORTES")

        self.assertEqual(self.client.delete(detail_url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Permiso.objects.exists())

    def test_assign_list_and_revoke_role_permissions(self):
        permiso = Permiso.objects.create(nombre_permiso="PERMISO_VER_CLIENTES")

        resp = self.client.post(
            reverse("api_roles_permisos"),
            {"rolNombre": ROLE_VENTAS, "idPermiso": permiso.id},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["permiso"]["nombrePermiso"], "PERMISO_VER_CLIENTES")

        resp_dup = self.client.post(
            reverse("api_roles_permisos"),
            {"rolNombre": ROLE_VENTAS, "idPermiso": permiso.id},
            format="json",
        )
        self.assertEqual(resp_dup.status_code, status.HTTP_409_CONFLICT)

        resp_list = self.client.get(reverse("api_roles_permisos_rol", kwargs={"rol": ROLE_VENTAS}))
        self.assertEqual([p["idPermiso"] for p in resp_list.data], [permiso.id])

        resp_unknown = self.client.get(reverse("api_roles_permisos_rol", kwargs={"rol": "Auditor"}))
        self.assertEqual(resp_unknown.status_code, status.HTTP_404_NOT_FOUND)

        detail_url = reverse("api_roles_permisos_detail", kwargs={"rol": ROLE_VENTAS, "permiso_id": permiso.id})
        self.assertEqual(self.client.delete(detail_url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(RolPermiso.objects.exists())
        self.assertEqual(self.client.delete(detail_url).status_code, status.HTTP_404_NOT_FOUND)
