from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from core.exceptions import ConflictoError, ReglaNegocioError
from crm.models import Cliente
from maestros.models import Producto
from pagos.models import PagoCobro
from produccion.models import OrdenProduccion
from ventas import services
from ventas.models import DetalleOrdenVenta, OrdenVenta


class VentasServicesTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="vendedora", password="x")
        self.cliente = Cliente.objects.create(numero_documento="V-1", nombre="Tienda Norte")
        self.producto = Producto.objects.create(referencia="POL-1", nombre="Polo", precio_venta=Decimal("35000"))

    def test_detalle_subtotal_and_order_total(self):
        orden = services.crear_orden_venta(
            self.user,
            cliente=self.cliente,
            detalles=[{"producto": self.producto, "cantidad": 3, "precio_unitario": None}],
        )
        detalle = DetalleOrdenVenta.objects.get(orden=orden)
        self.assertEqual(detalle.precio_unitario, Decimal("35000"))
        self.assertEqual(detalle.subtotal, Decimal("105000"))
        self.assertEqual(orden.total, Decimal("105000"))

    def test_recompute_total_reads_current_rows(self):
        orden = OrdenVenta.objects.create(cliente=self.cliente)
        DetalleOrdenVenta.objects.create(orden=orden, producto=self.producto, cantidad=2, precio_unitario=Decimal("10"))
        self.assertEqual(orden.recompute_total(), Decimal("20"))
        orden.detalles.all().delete()
        self.assertEqual(orden.recompute_total(), Decimal("0"))

    def test_transitions(self):
        self.assertTrue(services._can_transition_orden(OrdenVenta.ESTADO_PENDIENTE, OrdenVenta.ESTADO_CONFIRMADA))
        self.assertTrue(services._can_transition_orden(OrdenVenta.ESTADO_EN_PRODUCCION, OrdenVenta.ESTADO_ENTREGADA))
        self.assertFalse(services._can_transition_orden(OrdenVenta.ESTADO_ENTREGADA, OrdenVenta.ESTADO_PENDIENTE))
        self.assertFalse(services._can_transition_orden(OrdenVenta.ESTADO_PENDIENTE, OrdenVenta.ESTADO_ENTREGADA))

    def test_delivery_date_before_order_date_is_rejected(self):
        orden = services.crear_orden_venta(
            self.user,
            cliente=self.cliente,
            detalles=[{"producto": self.producto, "cantidad": 1}],
        )
        with self.assertRaises(ReglaNegocioError):
            services.actualizar_orden_venta(
                self.user,
                orden,
                {"fecha_entrega_estimada": orden.fecha_pedido - timedelta(days=1)},
            )

    def test_detalles_locked_once_in_production(self):
        orden = services.crear_orden_venta(
            self.user,
            cliente=self.cliente,
            detalles=[{"producto": self.producto, "cantidad": 1}],
        )
        services.actualizar_orden_venta(self.user, orden, {"estado": OrdenVenta.ESTADO_EN_PRODUCCION})
        otro = Producto.objects.create(referencia="POL-2", nombre="Polo 2", precio_venta=Decimal("1"))
        with self.assertRaises(ConflictoError):
            services.agregar_detalle(self.user, orden, producto=otro, cantidad=1)

    def test_anular_cascades_to_open_production_and_pending_cobros(self):
        orden = services.crear_orden_venta(
            self.user,
            cliente=self.cliente,
            detalles=[{"producto": self.producto, "cantidad": 2}],
        )
        abierta = OrdenProduccion.objects.create(orden_venta=orden)
        terminada = OrdenProduccion.objects.create(orden_venta=orden, estado=OrdenProduccion.ESTADO_TERMINADA)
        pendiente = PagoCobro.objects.create(
            tipo=PagoCobro.TIPO_COBRO,
            orden_venta=orden,
            monto=Decimal("1000"),
            metodo_pago="Efectivo",
        )
        cobrado = PagoCobro.objects.create(
            tipo=PagoCobro.TIPO_COBRO,
            orden_venta=orden,
            monto=Decimal("500"),
            metodo_pago="Efectivo",
            estado=PagoCobro.ESTADO_COBRADO,
        )

        services.anular_orden_venta(self.user, orden)

        for obj in (orden, abierta, terminada, pendiente, cobrado):
            obj.refresh_from_db()
        self.assertEqual(orden.estado, OrdenVenta.ESTADO_ANULADA)
        self.assertEqual(abierta.estado, OrdenProduccion.ESTADO_ANULADA)
        self.assertEqual(terminada.estado, OrdenProduccion.ESTADO_TERMINADA)
        self.assertEqual(pendiente.estado, PagoCobro.ESTADO_ANULADO)
        self.assertEqual(cobrado.estado, PagoCobro.ESTADO_COBRADO)

        with self.assertRaises(ConflictoError):
            services.anular_orden_venta(self.user, orden)
