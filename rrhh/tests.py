from django.test import TestCase

from core.models import UserProfile
from rrhh.models import Empleado


class EmpleadoModelTests(TestCase):
    def test_save_strips_documento_and_normalizes_name(self):
        empleado = Empleado.objects.create(numero_documento="  10203040 ", nombre="José  Pérez")
        self.assertEqual(empleado.numero_documento, "10203040")
        self.assertEqual(empleado.nombre_normalizado, "jose perez")

    def test_delete_unlinks_user_profile(self):
        from django.contrib.auth import get_user_model

        empleado = Empleado.objects.create(numero_documento="55", nombre="Vinculado")
        user = get_user_model().objects.create_user(username="vinculado", password="x")
        perfil = UserProfile.objects.create(user=user, empleado=empleado)

        empleado.delete()
        perfil.refresh_from_db()
        self.assertIsNone(perfil.empleado)
