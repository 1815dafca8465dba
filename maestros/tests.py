from decimal import Decimal

from django.db import IntegrityError
from django.db.models import ProtectedError
from django.test import TestCase

from maestros.models import Insumo, InsumoPorProducto, Producto


class MaestrosModelTests(TestCase):
    def test_insumo_normalized_name_is_unique(self):
        Insumo.objects.create(nombre="Botón Metálico", unidad_medida="und")
        with self.assertRaises(IntegrityError):
            Insumo.objects.create(nombre="boton   metalico", unidad_medida="und")

    def test_producto_referencia_is_stripped(self):
        producto = Producto.objects.create(referencia="  REF-10 ", nombre="Falda")
        self.assertEqual(producto.referencia, "REF-10")

    def test_bom_protects_insumo_and_cascades_with_producto(self):
        insumo = Insumo.objects.create(nombre="Encaje", unidad_medida="m")
        producto = Producto.objects.create(referencia="BLU-1", nombre="Blusa")
        InsumoPorProducto.objects.create(producto=producto, insumo=insumo, cantidad_requerida=Decimal("0.5"))

        with self.assertRaises(ProtectedError):
            insumo.delete()

        producto.delete()
        self.assertFalse(InsumoPorProducto.objects.exists())
