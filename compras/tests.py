from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from compras import services
from compras.models import OrdenCompra
from core.exceptions import ConflictoError, ReglaNegocioError
from core.models import AuditLog
from maestros.models import Insumo, Proveedor


class ComprasServicesTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="comprador", password="x")
        self.proveedor = Proveedor.objects.create(nombre_comercial="Hilos SAS", nit="NIT-H")
        self.insumo = Insumo.objects.create(nombre="Hilo negro", unidad_medida="cono")

    def _orden(self):
        return services.crear_orden_compra(
            self.user,
            proveedor=self.proveedor,
            detalles=[{"insumo": self.insumo, "cantidad": 4, "precio_unitario": Decimal("2500")}],
        )

    def test_transitions(self):
        self.assertTrue(services._can_transition_orden(OrdenCompra.ESTADO_PENDIENTE, OrdenCompra.ESTADO_ENVIADA))
        self.assertTrue(
            services._can_transition_orden(OrdenCompra.ESTADO_RECIBIDA_PARCIAL, OrdenCompra.ESTADO_RECIBIDA_TOTAL)
        )
        self.assertFalse(
            services._can_transition_orden(OrdenCompra.ESTADO_PENDIENTE, OrdenCompra.ESTADO_RECIBIDA_TOTAL)
        )
        self.assertFalse(services._can_transition_orden(OrdenCompra.ESTADO_ANULADA, OrdenCompra.ESTADO_PENDIENTE))

    def test_create_computes_total_and_audits(self):
        orden = self._orden()
        self.assertEqual(orden.total, Decimal("10000.00"))
        log = AuditLog.objects.get(action="CREATE", model="compras.OrdenCompra")
        self.assertEqual(log.payload["detalles"], 1)

    def test_create_rejects_empty_detalles(self):
        with self.assertRaises(ReglaNegocioError):
            services.crear_orden_compra(self.user, proveedor=self.proveedor, detalles=[])

    def test_partial_reception_cannot_be_annulled(self):
        orden = self._orden()
        services.actualizar_orden_compra(self.user, orden, {"estado": OrdenCompra.ESTADO_ENVIADA})
        services.actualizar_orden_compra(self.user, orden, {"estado": OrdenCompra.ESTADO_RECIBIDA_PARCIAL})
        with self.assertRaises(ConflictoError):
            services.anular_orden_compra(self.user, orden)

    def test_update_logs_state_change(self):
        orden = self._orden()
        services.actualizar_orden_compra(self.user, orden, {"estado": OrdenCompra.ESTADO_ENVIADA})
        log = AuditLog.objects.filter(action="UPDATE", model="compras.OrdenCompra").latest("id")
        self.assertEqual(log.payload["from"], OrdenCompra.ESTADO_PENDIENTE)
        self.assertEqual(log.payload["to"], OrdenCompra.ESTADO_ENVIADA)
