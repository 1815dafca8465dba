from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from crm.models import Cliente
from maestros.models import Producto


class OrdenVenta(models.Model):
    ESTADO_PENDIENTE = "Pendiente"
    ESTADO_CONFIRMADA = "Confirmada"
    ESTADO_EN_PRODUCCION = "En Producción"
    ESTADO_ENTREGADA = "Entregada"
    ESTADO_ANULADA = "Anulada"
    ESTADO_CHOICES = [
        (ESTADO_PENDIENTE, "Pendiente"),
        (ESTADO_CONFIRMADA, "Confirmada"),
        (ESTADO_EN_PRODUCCION, "En producción"),
        (ESTADO_ENTREGADA, "Entregada"),
        (ESTADO_ANULADA, "Anulada"),
    ]
    ESTADOS_FINALES = {ESTADO_ENTREGADA, ESTADO_ANULADA}

    cliente = models.ForeignKey(Cliente, on_delete=models.PROTECT, related_name="ordenes_venta")
    fecha_pedido = models.DateField(default=timezone.localdate)
    fecha_entrega_estimada = models.DateField(null=True, blank=True)
    estado = models.CharField(max_length=20, choices=ESTADO_CHOICES, default=ESTADO_PENDIENTE)
    total = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0"))
    observaciones = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-fecha_pedido", "-id"]
        verbose_name = "Orden de venta"
        verbose_name_plural = "Órdenes de venta"

    def recompute_total(self) -> Decimal:
        total = self.detalles.model.objects.filter(orden=self).aggregate(total=models.Sum("subtotal"))["total"]
        self.total = total if total is not None else Decimal("0")
        return self.total

    def __str__(self) -> str:
        return f"OV-{self.id} · {self.cliente.nombre}"


class DetalleOrdenVenta(models.Model):
    orden = models.ForeignKey(OrdenVenta, on_delete=models.CASCADE, related_name="detalles")
    producto = models.ForeignKey(Producto, on_delete=models.PROTECT, related_name="detalles_venta")
    cantidad = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    precio_unitario = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    subtotal = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0"))

    class Meta:
        ordering = ["id"]
        verbose_name = "Detalle de orden de venta"
        verbose_name_plural = "Detalles de orden de venta"
        unique_together = [("orden", "producto")]

    def save(self, *args, **kwargs):
        self.subtotal = Decimal(self.cantidad or 0) * (self.precio_unitario or Decimal("0"))
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.producto.referencia} x {self.cantidad}"
