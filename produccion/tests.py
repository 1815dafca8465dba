from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone

from core.exceptions import ConflictoError, ReglaNegocioError
from crm.models import Cliente
from maestros.models import Producto
from produccion import services
from produccion.models import OrdenProduccion, TareaProduccion
from ventas.models import DetalleOrdenVenta, OrdenVenta


class ProduccionServicesTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="jefe_planta", password="x")
        cliente = Cliente.objects.create(numero_documento="P-1", nombre="Boutique Sur")
        producto = Producto.objects.create(referencia="CHA-1", nombre="Chaqueta", precio_venta=Decimal("90000"))
        self.venta = OrdenVenta.objects.create(cliente=cliente)
        DetalleOrdenVenta.objects.create(orden=self.venta, producto=producto, cantidad=5, precio_unitario=Decimal("90000"))

    def test_transitions(self):
        self.assertTrue(
            services._can_transition_orden(OrdenProduccion.ESTADO_PENDIENTE, OrdenProduccion.ESTADO_EN_PROCESO)
        )
        self.assertTrue(
            services._can_transition_orden(OrdenProduccion.ESTADO_RETRASADA, OrdenProduccion.ESTADO_TERMINADA)
        )
        self.assertFalse(
            services._can_transition_orden(OrdenProduccion.ESTADO_PENDIENTE, OrdenProduccion.ESTADO_TERMINADA)
        )
        self.assertFalse(
            services._can_transition_orden(OrdenProduccion.ESTADO_TERMINADA, OrdenProduccion.ESTADO_EN_PROCESO)
        )

    def test_create_moves_sale_to_production(self):
        orden = services.crear_orden_produccion(self.user, orden_venta=self.venta)
        self.venta.refresh_from_db()
        self.assertEqual(orden.estado, OrdenProduccion.ESTADO_PENDIENTE)
        self.assertEqual(self.venta.estado, OrdenVenta.ESTADO_EN_PRODUCCION)

    def test_create_rejects_delivered_sale(self):
        self.venta.estado = OrdenVenta.ESTADO_ENTREGADA
        self.venta.save()
        with self.assertRaises(ConflictoError):
            services.crear_orden_produccion(self.user, orden_venta=self.venta)

    def test_create_rejects_inverted_dates(self):
        hoy = timezone.localdate()
        with self.assertRaises(ReglaNegocioError):
            services.crear_orden_produccion(
                self.user,
                orden_venta=self.venta,
                fecha_inicio=hoy,
                fecha_fin_estimada=hoy - timedelta(days=2),
            )

    def test_completing_task_computes_real_duration(self):
        orden = services.crear_orden_produccion(self.user, orden_venta=self.venta)
        tarea = services.crear_tarea(self.user, orden, nombre="  Corte ")
        self.assertEqual(tarea.nombre, "Corte")

        inicio = timezone.now() - timedelta(hours=2)
        services.actualizar_tarea(
            self.user,
            orden,
            tarea,
            {"estado": TareaProduccion.ESTADO_EN_CURSO, "fecha_inicio": inicio},
        )
        orden.refresh_from_db()
        self.assertEqual(orden.estado, OrdenProduccion.ESTADO_EN_PROCESO)
        self.assertEqual(orden.fecha_inicio, timezone.localdate())

        fin = inicio + timedelta(hours=1, minutes=30)
        services.actualizar_tarea(
            self.user,
            orden,
            tarea,
            {"estado": TareaProduccion.ESTADO_COMPLETADA, "fecha_fin": fin},
        )
        tarea.refresh_from_db()
        self.assertEqual(tarea.duracion_real, timedelta(hours=1, minutes=30))

    def test_task_end_before_start_is_rejected(self):
        orden = services.crear_orden_produccion(self.user, orden_venta=self.venta)
        tarea = services.crear_tarea(self.user, orden, nombre="Confección")
        ahora = timezone.now()
        with self.assertRaises(ReglaNegocioError):
            services.actualizar_tarea(
                self.user,
                orden,
                tarea,
                {"fecha_inicio": ahora, "fecha_fin": ahora - timedelta(minutes=5)},
            )

    def test_finishing_sets_real_end_date(self):
        orden = services.crear_orden_produccion(self.user, orden_venta=self.venta)
        services.actualizar_orden_produccion(self.user, orden, {"estado": OrdenProduccion.ESTADO_EN_PROCESO})
        services.actualizar_orden_produccion(self.user, orden, {"estado": OrdenProduccion.ESTADO_TERMINADA})
        orden.refresh_from_db()
        self.assertEqual(orden.fecha_fin_real, timezone.localdate())

        with self.assertRaises(ConflictoError):
            services.anular_orden_produccion(self.user, orden)
        with self.assertRaises(ConflictoError):
            services.crear_tarea(self.user, orden, nombre="Tardía")
