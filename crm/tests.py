from django.db import IntegrityError
from django.test import TestCase

from crm.models import Cliente, ContactoCliente


class ClienteModelTests(TestCase):
    def test_save_normalizes_fields(self):
        cliente = Cliente.objects.create(numero_documento=" 900.123 ", nombre="Confecciones  ÑANDÚ")
        self.assertEqual(cliente.numero_documento, "900.123")
        self.assertEqual(cliente.nombre_normalizado, "confecciones nandu")

    def test_documento_is_unique(self):
        Cliente.objects.create(numero_documento="X1", nombre="Uno")
        with self.assertRaises(IntegrityError):
            Cliente.objects.create(numero_documento="X1 ", nombre="Dos")

    def test_contactos_are_removed_with_cliente(self):
        cliente = Cliente.objects.create(numero_documento="X2", nombre="Con contacto")
        ContactoCliente.objects.create(cliente=cliente, nombre="Ana")
        cliente.delete()
        self.assertFalse(ContactoCliente.objects.exists())
