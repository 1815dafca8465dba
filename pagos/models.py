from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from compras.models import OrdenCompra
from ventas.models import OrdenVenta


class PagoCobro(models.Model):
    TIPO_PAGO = "Pago"
    TIPO_COBRO = "Cobro"
    TIPO_CHOICES = [
        (TIPO_PAGO, "Pago"),
        (TIPO_COBRO, "Cobro"),
    ]

    ESTADO_PENDIENTE = "Pendiente"
    ESTADO_PAGADO = "Pagado"
    ESTADO_COBRADO = "Cobrado"
    ESTADO_ANULADO = "Anulado"
    ESTADO_CHOICES = [
        (ESTADO_PENDIENTE, "Pendiente"),
        (ESTADO_PAGADO, "Pagado"),
        (ESTADO_COBRADO, "Cobrado"),
        (ESTADO_ANULADO, "Anulado"),
    ]

    tipo = models.CharField(max_length=10, choices=TIPO_CHOICES)
    orden_venta = models.ForeignKey(
        OrdenVenta,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="cobros",
    )
    orden_compra = models.ForeignKey(
        OrdenCompra,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="pagos",
    )
    fecha_registro = models.DateTimeField(auto_now_add=True)
    fecha_pago_cobro = models.DateField(default=timezone.localdate)
    metodo_pago = models.CharField(max_length=60)
    monto = models.DecimalField(
        max_digits=16,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    referencia = models.CharField(max_length=120, blank=True, default="")
    estado = models.CharField(max_length=20, choices=ESTADO_CHOICES, default=ESTADO_PENDIENTE)
    observaciones = models.TextField(blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-fecha_registro", "-id"]
        verbose_name = "Pago / cobro"
        verbose_name_plural = "Pagos y cobros"

    @property
    def orden(self):
        return self.orden_venta if self.tipo == self.TIPO_COBRO else self.orden_compra

    def __str__(self) -> str:
        return f"{self.tipo} #{self.id} {self.monto} ({self.estado})"
