import json

from django.core.management.base import BaseCommand
from django.db.models import DecimalField, F, OuterRef, Q, Subquery, Sum, Value
from django.db.models.functions import Coalesce

from compras.models import DetalleOrdenCompra, OrdenCompra
from crm.models import Cliente
from inventario.models import AlertaStock, InventarioInsumo, InventarioProducto
from maestros.models import Insumo, Producto
from pagos.models import PagoCobro
from produccion.models import OrdenProduccion
from ventas.models import DetalleOrdenVenta, OrdenVenta

_ZERO = Value(0, output_field=DecimalField(max_digits=16, decimal_places=2))


def _suma_detalles(detalle_model):
    return Coalesce(
        Subquery(
            detalle_model.objects.filter(orden=OuterRef("pk"))
            .values("orden")
            .annotate(total=Sum("subtotal"))
            .values("total")[:1],
            output_field=DecimalField(max_digits=16, decimal_places=2),
        ),
        _ZERO,
    )


def _suma_transacciones(campo_orden: str):
    return Coalesce(
        Subquery(
            PagoCobro.objects.filter(**{campo_orden: OuterRef("pk")})
            .exclude(estado=PagoCobro.ESTADO_ANULADO)
            .values(campo_orden)
            .annotate(total=Sum("monto"))
            .values("total")[:1],
            output_field=DecimalField(max_digits=16, decimal_places=2),
        ),
        _ZERO,
    )


class Command(BaseCommand):
    help = "Audita consistencia de órdenes, pagos, producción e inventario."

    def add_arguments(self, parser):
        parser.add_argument(
            "--json",
            action="store_true",
            help="Salida JSON (útil para monitoreo/CI).",
        )

    def handle(self, *args, **options):
        metrics = build_metrics()
        if options["json"]:
            self.stdout.write(json.dumps(metrics, ensure_ascii=False, indent=2))
            return

        self.stdout.write(self.style.MIGRATE_HEADING("Auditoría de consistencia ERP"))
        for seccion in ("volumen", "consistencia"):
            self.stdout.write(f"  -- {seccion.capitalize()} --")
            for clave, valor in metrics[seccion].items():
                self.stdout.write(f"    {clave}: {valor}")

        alertas = metrics["alertas"]
        if alertas:
            self.stdout.write(self.style.WARNING("  -- Alertas --"))
            for alerta in alertas:
                self.stdout.write(self.style.WARNING(f"    - {alerta}"))
        else:
            self.stdout.write(self.style.SUCCESS("  Sin alertas críticas detectadas."))


def build_metrics() -> dict:
    volumen = {
        "clientes": Cliente.objects.count(),
        "productos": Producto.objects.count(),
        "insumos": Insumo.objects.count(),
        "ordenes_venta": OrdenVenta.objects.count(),
        "ordenes_produccion": OrdenProduccion.objects.count(),
        "ordenes_compra": OrdenCompra.objects.count(),
        "pagos_cobros": PagoCobro.objects.count(),
        "alertas_stock_abiertas": AlertaStock.objects.filter(estado__in=AlertaStock.ESTADOS_ABIERTOS).count(),
    }

    ventas_total_descuadrado = list(
        OrdenVenta.objects.annotate(suma=_suma_detalles(DetalleOrdenVenta))
        .exclude(total=F("suma"))
        .values_list("id", flat=True)
    )
    compras_total_descuadrado = list(
        OrdenCompra.objects.annotate(suma=_suma_detalles(DetalleOrdenCompra))
        .exclude(total=F("suma"))
        .values_list("id", flat=True)
    )
    ventas_sobrecobradas = list(
        OrdenVenta.objects.annotate(cobrado=_suma_transacciones("orden_venta"))
        .filter(cobrado__gt=F("total"))
        .values_list("id", flat=True)
    )
    compras_sobrepagadas = list(
        OrdenCompra.objects.annotate(pagado=_suma_transacciones("orden_compra"))
        .filter(pagado__gt=F("total"))
        .values_list("id", flat=True)
    )
    produccion_huerfana = list(
        OrdenProduccion.objects.filter(
            estado__in=OrdenProduccion.ESTADOS_ABIERTOS,
            orden_venta__estado=OrdenVenta.ESTADO_ANULADA,
        ).values_list("id", flat=True)
    )
    ordenes_sin_detalle = OrdenVenta.objects.filter(detalles__isnull=True).count() + OrdenCompra.objects.filter(
        detalles__isnull=True
    ).count()
    stock_negativo = (
        InventarioInsumo.objects.filter(cantidad_stock__lt=0).count()
        + InventarioProducto.objects.filter(cantidad_stock__lt=0).count()
    )
    transacciones_mal_referenciadas = PagoCobro.objects.filter(
        Q(tipo=PagoCobro.TIPO_COBRO, orden_venta__isnull=True)
        | Q(tipo=PagoCobro.TIPO_PAGO, orden_compra__isnull=True)
    ).count()

    consistencia = {
        "ventas_total_descuadrado": ventas_total_descuadrado,
        "compras_total_descuadrado": compras_total_descuadrado,
        "ventas_sobrecobradas": ventas_sobrecobradas,
        "compras_sobrepagadas": compras_sobrepagadas,
        "produccion_abierta_con_venta_anulada": produccion_huerfana,
        "ordenes_sin_detalle": ordenes_sin_detalle,
        "inventarios_stock_negativo": stock_negativo,
        "transacciones_mal_referenciadas": transacciones_mal_referenciadas,
    }

    alertas = []
    if ventas_total_descuadrado or compras_total_descuadrado:
        alertas.append("Hay órdenes cuyo total no coincide con la suma de sus detalles.")
    if ventas_sobrecobradas or compras_sobrepagadas:
        alertas.append("Hay órdenes con transacciones por encima de su total.")
    if produccion_huerfana:
        alertas.append("Hay órdenes de producción abiertas sobre ventas anuladas.")
    if ordenes_sin_detalle:
        alertas.append("Hay órdenes sin detalles.")
    if stock_negativo:
        alertas.append("Hay inventarios con stock negativo.")
    if transacciones_mal_referenciadas:
        alertas.append("Hay pagos/cobros sin la orden que corresponde a su tipo.")

    return {"volumen": volumen, "consistencia": consistencia, "alertas": alertas}
