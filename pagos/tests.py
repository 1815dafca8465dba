from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone

from compras.models import DetalleOrdenCompra, OrdenCompra
from core.exceptions import ConflictoError, ReglaNegocioError
from crm.models import Cliente
from maestros.models import Insumo, Producto, Proveedor
from pagos import services
from pagos.models import PagoCobro
from ventas.models import DetalleOrdenVenta, OrdenVenta


class PagosServicesTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="tesoreria", password="x")
        cliente = Cliente.objects.create(numero_documento="C-9", nombre="Almacén Centro")
        producto = Producto.objects.create(referencia="JEA-1", nombre="Jean")
        self.venta = OrdenVenta.objects.create(cliente=cliente)
        DetalleOrdenVenta.objects.create(orden=self.venta, producto=producto, cantidad=2, precio_unitario=Decimal("50000"))
        self.venta.recompute_total()
        self.venta.save()

        proveedor = Proveedor.objects.create(nombre_comercial="Telas Andinas", nit="NIT-T")
        insumo = Insumo.objects.create(nombre="Denim", unidad_medida="m")
        self.compra = OrdenCompra.objects.create(proveedor=proveedor)
        DetalleOrdenCompra.objects.create(orden=self.compra, insumo=insumo, cantidad=10, precio_unitario=Decimal("8000"))
        self.compra.recompute_total()
        self.compra.save()

    def _cobro(self, monto, **kwargs):
        return services.crear_pago_cobro(
            self.user,
            tipo=PagoCobro.TIPO_COBRO,
            monto=Decimal(monto),
            metodo_pago="Transferencia",
            fecha_pago_cobro=timezone.localdate(),
            orden_venta=self.venta,
            **kwargs,
        )

    def test_monto_comprometido_ignores_annulled(self):
        primero = self._cobro("40000")
        self._cobro("30000")
        self.assertEqual(services.monto_comprometido(self.venta), Decimal("70000"))

        services.anular_pago_cobro(self.user, primero)
        self.assertEqual(services.monto_comprometido(self.venta), Decimal("30000"))

    def test_balance_cannot_be_exceeded(self):
        self._cobro("90000")
        with self.assertRaises(ConflictoError):
            self._cobro("10000.01")
        self._cobro("10000")

    def test_reference_must_match_type(self):
        with self.assertRaises(ReglaNegocioError):
            services.crear_pago_cobro(
                self.user,
                tipo=PagoCobro.TIPO_PAGO,
                monto=Decimal("100"),
                metodo_pago="Efectivo",
                fecha_pago_cobro=timezone.localdate(),
                orden_venta=self.venta,
            )

    def test_state_must_match_type(self):
        with self.assertRaises(ReglaNegocioError):
            self._cobro("100", estado=PagoCobro.ESTADO_PAGADO)
        with self.assertRaises(ReglaNegocioError):
            self._cobro("100", estado=PagoCobro.ESTADO_ANULADO)

    def test_pago_against_compra(self):
        pago = services.crear_pago_cobro(
            self.user,
            tipo=PagoCobro.TIPO_PAGO,
            monto=Decimal("80000"),
            metodo_pago="Cheque",
            fecha_pago_cobro=timezone.localdate(),
            orden_compra=self.compra,
            estado=PagoCobro.ESTADO_PAGADO,
        )
        self.assertEqual(pago.orden, self.compra)
        self.assertEqual(services.monto_comprometido(self.compra), Decimal("80000"))

    def test_annulled_transaction_is_frozen(self):
        cobro = self._cobro("1000")
        services.actualizar_pago_cobro(self.user, cobro, {"estado": PagoCobro.ESTADO_ANULADO})
        cobro.refresh_from_db()
        self.assertEqual(cobro.estado, PagoCobro.ESTADO_ANULADO)
        with self.assertRaises(ConflictoError):
            services.actualizar_pago_cobro(self.user, cobro, {"referencia": "X"})
        with self.assertRaises(ConflictoError):
            services.anular_pago_cobro(self.user, cobro)
