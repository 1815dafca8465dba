from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from maestros.models import Insumo, Producto


class InventarioBase(models.Model):
    ubicacion = models.CharField(max_length=120)
    cantidad_stock = models.DecimalField(max_digits=18, decimal_places=3, default=Decimal("0"))
    ultima_actualizacion = models.DateTimeField(default=timezone.now)

    class Meta:
        abstract = True


class MovimientoBase(models.Model):
    TIPO_ENTRADA = "Entrada"
    TIPO_SALIDA = "Salida"
    TIPO_CHOICES = [
        (TIPO_ENTRADA, "Entrada"),
        (TIPO_SALIDA, "Salida"),
    ]

    fecha = models.DateTimeField(default=timezone.now)
    tipo = models.CharField(max_length=20, choices=TIPO_CHOICES)
    cantidad = models.DecimalField(max_digits=18, decimal_places=3)
    descripcion = models.CharField(max_length=255, blank=True, default="")
    usuario = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+")

    class Meta:
        abstract = True
        ordering = ["-fecha", "-id"]


class InventarioInsumo(InventarioBase):
    insumo = models.ForeignKey(Insumo, on_delete=models.PROTECT, related_name="inventarios")

    class Meta:
        verbose_name = "Inventario de insumo"
        verbose_name_plural = "Inventarios de insumos"
        ordering = ["insumo__nombre", "ubicacion"]
        unique_together = [("insumo", "ubicacion")]

    def __str__(self):
        return f"{self.insumo.nombre} @ {self.ubicacion}"


class MovimientoInsumo(MovimientoBase):
    inventario = models.ForeignKey(InventarioInsumo, on_delete=models.CASCADE, related_name="movimientos")

    class Meta(MovimientoBase.Meta):
        verbose_name = "Movimiento de insumo"
        verbose_name_plural = "Movimientos de insumos"

    def __str__(self):
        return f"{self.tipo} {self.inventario.insumo.nombre} {self.cantidad}"


class InventarioProducto(InventarioBase):
    producto = models.ForeignKey(Producto, on_delete=models.PROTECT, related_name="inventarios")

    class Meta:
        verbose_name = "Inventario de producto"
        verbose_name_plural = "Inventarios de productos"
        ordering = ["producto__nombre", "ubicacion"]
        unique_together = [("producto", "ubicacion")]

    def __str__(self):
        return f"{self.producto.referencia} @ {self.ubicacion}"


class MovimientoProducto(MovimientoBase):
    inventario = models.ForeignKey(InventarioProducto, on_delete=models.CASCADE, related_name="movimientos")

    class Meta(MovimientoBase.Meta):
        verbose_name = "Movimiento de producto"
        verbose_name_plural = "Movimientos de productos"

    def __str__(self):
        return f"{self.tipo} {self.inventario.producto.referencia} {self.cantidad}"


class AlertaStock(models.Model):
    TIPO_INSUMO = "Insumo"
    TIPO_PRODUCTO = "Producto"
    TIPO_CHOICES = [
        (TIPO_INSUMO, "Insumo"),
        (TIPO_PRODUCTO, "Producto"),
    ]

    ESTADO_NUEVA = "Nueva"
    ESTADO_VISTA = "Vista"
    ESTADO_RESUELTA = "Resuelta"
    ESTADO_CHOICES = [
        (ESTADO_NUEVA, "Nueva"),
        (ESTADO_VISTA, "Vista"),
        (ESTADO_RESUELTA, "Resuelta"),
    ]
    ESTADOS_ABIERTOS = {ESTADO_NUEVA, ESTADO_VISTA}

    tipo_item = models.CharField(max_length=10, choices=TIPO_CHOICES)
    insumo = models.ForeignKey(Insumo, null=True, blank=True, on_delete=models.CASCADE, related_name="alertas_stock")
    producto = models.ForeignKey(Producto, null=True, blank=True, on_delete=models.CASCADE, related_name="alertas_stock")
    mensaje = models.CharField(max_length=255)
    nivel_actual = models.DecimalField(max_digits=18, decimal_places=3, default=Decimal("0"))
    umbral = models.PositiveIntegerField(default=0)
    estado = models.CharField(max_length=10, choices=ESTADO_CHOICES, default=ESTADO_NUEVA)
    created_at = models.DateTimeField(default=timezone.now)
    resuelta_en = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = "Alerta de stock"
        verbose_name_plural = "Alertas de stock"
        ordering = ["-created_at", "-id"]

    @property
    def item(self):
        return self.insumo if self.tipo_item == self.TIPO_INSUMO else self.producto

    def __str__(self):
        return f"{self.tipo_item} {self.item} · {self.estado}"
