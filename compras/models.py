from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from maestros.models import Insumo, Proveedor


class OrdenCompra(models.Model):
    ESTADO_PENDIENTE = "Pendiente"
    ESTADO_ENVIADA = "Enviada"
    ESTADO_RECIBIDA_PARCIAL = "Recibida Parcial"
    ESTADO_RECIBIDA_TOTAL = "Recibida Total"
    ESTADO_ANULADA = "Anulada"
    ESTADO_CHOICES = [
        (ESTADO_PENDIENTE, "Pendiente"),
        (ESTADO_ENVIADA, "Enviada"),
        (ESTADO_RECIBIDA_PARCIAL, "Recibida parcial"),
        (ESTADO_RECIBIDA_TOTAL, "Recibida total"),
        (ESTADO_ANULADA, "Anulada"),
    ]

    proveedor = models.ForeignKey(Proveedor, on_delete=models.PROTECT, related_name="ordenes_compra")
    fecha_pedido = models.DateField(default=timezone.localdate)
    fecha_entrega_estimada = models.DateField(null=True, blank=True)
    fecha_entrega_real = models.DateField(null=True, blank=True)
    estado = models.CharField(max_length=20, choices=ESTADO_CHOICES, default=ESTADO_PENDIENTE)
    total = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0"))
    observaciones = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-fecha_pedido", "-id"]
        verbose_name = "Orden de compra"
        verbose_name_plural = "Órdenes de compra"

    def recompute_total(self) -> Decimal:
        total = self.detalles.model.objects.filter(orden=self).aggregate(total=models.Sum("subtotal"))["total"]
        self.total = total if total is not None else Decimal("0")
        return self.total

    def __str__(self) -> str:
        return f"OC-{self.id} · {self.proveedor.nombre_comercial}"


class DetalleOrdenCompra(models.Model):
    orden = models.ForeignKey(OrdenCompra, on_delete=models.CASCADE, related_name="detalles")
    insumo = models.ForeignKey(Insumo, on_delete=models.PROTECT, related_name="detalles_compra")
    cantidad = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    precio_unitario = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    subtotal = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0"))

    class Meta:
        ordering = ["id"]
        verbose_name = "Detalle de orden de compra"
        verbose_name_plural = "Detalles de orden de compra"
        unique_together = [("orden", "insumo")]

    def save(self, *args, **kwargs):
        self.subtotal = Decimal(self.cantidad or 0) * (self.precio_unitario or Decimal("0"))
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.insumo.nombre} x {self.cantidad}"
