from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.exceptions import NotFound

from core.exceptions import ConflictoError, ReglaNegocioError
from inventario import services
from inventario.models import AlertaStock, InventarioInsumo, InventarioProducto, MovimientoBase
from maestros.models import Insumo, Producto


class InventarioServicesTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="bodega", password="x")
        self.insumo = Insumo.objects.create(nombre="Cremallera", unidad_medida="und", stock_minimo=10)

    def test_stock_total_sums_locations(self):
        services.crear_inventario(self.user, item=self.insumo, ubicacion="Bodega A", cantidad_stock=Decimal("4"))
        services.crear_inventario(self.user, item=self.insumo, ubicacion="Bodega B", cantidad_stock=Decimal("7.5"))
        self.assertEqual(services.stock_total(self.insumo), Decimal("11.5"))
        self.assertFalse(AlertaStock.objects.filter(estado__in=AlertaStock.ESTADOS_ABIERTOS).exists())

    def test_alert_lifecycle_follows_total_stock(self):
        inv = services.crear_inventario(self.user, item=self.insumo, ubicacion="Bodega A", cantidad_stock=Decimal("12"))

        services.registrar_movimiento(
            self.user,
            inventario_model=InventarioInsumo,
            inventario_id=inv.id,
            tipo=MovimientoBase.TIPO_SALIDA,
            cantidad=Decimal("3"),
        )
        alerta = AlertaStock.objects.get(insumo=self.insumo)
        self.assertEqual(alerta.estado, AlertaStock.ESTADO_NUEVA)
        self.assertEqual(alerta.nivel_actual, Decimal("9"))
        self.assertEqual(alerta.umbral, 10)

        services.registrar_movimiento(
            self.user,
            inventario_model=InventarioInsumo,
            inventario_id=inv.id,
            tipo=MovimientoBase.TIPO_SALIDA,
            cantidad=Decimal("1"),
        )
        self.assertEqual(AlertaStock.objects.filter(insumo=self.insumo).count(), 1)
        alerta.refresh_from_db()
        self.assertEqual(alerta.nivel_actual, Decimal("8"))

        services.registrar_movimiento(
            self.user,
            inventario_model=InventarioInsumo,
            inventario_id=inv.id,
            tipo=MovimientoBase.TIPO_ENTRADA,
            cantidad=Decimal("5"),
        )
        alerta.refresh_from_db()
        self.assertEqual(alerta.estado, AlertaStock.ESTADO_RESUELTA)
        self.assertIsNotNone(alerta.resuelta_en)

    def test_salida_cannot_exceed_stock(self):
        inv = services.crear_inventario(self.user, item=self.insumo, ubicacion="Bodega A", cantidad_stock=Decimal("2"))
        with self.assertRaises(ConflictoError):
            services.registrar_movimiento(
                self.user,
                inventario_model=InventarioInsumo,
                inventario_id=inv.id,
                tipo=MovimientoBase.TIPO_SALIDA,
                cantidad=Decimal("2.001"),
            )
        inv.refresh_from_db()
        self.assertEqual(inv.cantidad_stock, Decimal("2"))
        self.assertEqual(inv.movimientos.count(), 1)

    def test_invalid_movements(self):
        with self.assertRaises(ReglaNegocioError):
            services.registrar_movimiento(
                self.user,
                inventario_model=InventarioInsumo,
                inventario_id=1,
                tipo="Ajuste",
                cantidad=Decimal("1"),
            )
        with self.assertRaises(ReglaNegocioError):
            services.registrar_movimiento(
                self.user,
                inventario_model=InventarioInsumo,
                inventario_id=1,
                tipo=MovimientoBase.TIPO_ENTRADA,
                cantidad=Decimal("0"),
            )
        with self.assertRaises(NotFound):
            services.registrar_movimiento(
                self.user,
                inventario_model=InventarioInsumo,
                inventario_id=999,
                tipo=MovimientoBase.TIPO_ENTRADA,
                cantidad=Decimal("1"),
            )

    def test_duplicate_location_is_case_insensitive(self):
        producto = Producto.objects.create(referencia="CAM-1", nombre="Camisa")
        services.crear_inventario(self.user, item=producto, ubicacion="Tienda", cantidad_stock=Decimal("0"))
        with self.assertRaises(ConflictoError):
            services.crear_inventario(self.user, item=producto, ubicacion=" tienda ", cantidad_stock=Decimal("1"))
        self.assertEqual(InventarioProducto.objects.count(), 1)

    def test_threshold_change_reevaluates(self):
        services.crear_inventario(self.user, item=self.insumo, ubicacion="Bodega A", cantidad_stock=Decimal("15"))
        alerta = services.actualizar_umbral(self.user, self.insumo, 20)
        self.assertIsNotNone(alerta)
        self.assertEqual(alerta.tipo_item, AlertaStock.TIPO_INSUMO)

        self.assertIsNone(services.actualizar_umbral(self.user, self.insumo, 0))
        alerta.refresh_from_db()
        self.assertEqual(alerta.estado, AlertaStock.ESTADO_RESUELTA)

    def test_view_and_resolve(self):
        services.crear_inventario(self.user, item=self.insumo, ubicacion="Bodega A", cantidad_stock=Decimal("1"))
        alerta = AlertaStock.objects.get(insumo=self.insumo)
        services.marcar_alerta_vista(self.user, alerta)
        self.assertEqual(alerta.estado, AlertaStock.ESTADO_VISTA)
        services.resolver_alerta(self.user, alerta)
        with self.assertRaises(ConflictoError):
            services.marcar_alerta_vista(self.user, alerta)
