from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from core.utils import normalizar_nombre


class Proveedor(models.Model):
    nombre_comercial = models.CharField(max_length=200)
    razon_social = models.CharField(max_length=200, blank=True, default="")
    nit = models.CharField(max_length=40, unique=True)
    direccion = models.CharField(max_length=255, blank=True, default="")
    telefono = models.CharField(max_length=40, blank=True, default="")
    correo = models.EmailField(blank=True, default="")
    contacto_principal = models.CharField(max_length=160, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Proveedor"
        verbose_name_plural = "Proveedores"
        ordering = ["nombre_comercial", "id"]

    def save(self, *args, **kwargs):
        self.nit = (self.nit or "").strip()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.nit} · {self.nombre_comercial}"


class Insumo(models.Model):
    nombre = models.CharField(max_length=250)
    nombre_normalizado = models.CharField(max_length=260, unique=True, editable=False)
    descripcion = models.TextField(blank=True, default="")
    unidad_medida = models.CharField(max_length=30)
    stock_minimo = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Insumo"
        verbose_name_plural = "Insumos"
        ordering = ["nombre", "id"]

    def save(self, *args, **kwargs):
        self.nombre_normalizado = normalizar_nombre(self.nombre)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.nombre


class Producto(models.Model):
    referencia = models.CharField(max_length=60, unique=True)
    nombre = models.CharField(max_length=200)
    descripcion = models.TextField(blank=True, default="")
    talla = models.CharField(max_length=30, blank=True, default="")
    color = models.CharField(max_length=60, blank=True, default="")
    tipo = models.CharField(max_length=80, blank=True, default="")
    genero = models.CharField(max_length=40, blank=True, default="")
    costo_produccion = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    precio_venta = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    unidad_medida = models.CharField(max_length=30, blank=True, default="")
    stock_minimo = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Producto"
        verbose_name_plural = "Productos"
        ordering = ["nombre", "id"]

    def save(self, *args, **kwargs):
        self.referencia = (self.referencia or "").strip()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.referencia} · {self.nombre}"


class InsumoPorProducto(models.Model):
    """Renglón de la lista de materiales (BOM) de un producto."""

    producto = models.ForeignKey(Producto, on_delete=models.CASCADE, related_name="bom")
    insumo = models.ForeignKey(Insumo, on_delete=models.PROTECT, related_name="usos_bom")
    cantidad_requerida = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        validators=[MinValueValidator(Decimal("0.0001"))],
    )

    class Meta:
        verbose_name = "Insumo por producto"
        verbose_name_plural = "Insumos por producto"
        ordering = ["producto_id", "insumo__nombre"]
        unique_together = [("producto", "insumo")]

    def __str__(self) -> str:
        return f"{self.producto.referencia} <- {self.insumo.nombre} x {self.cantidad_requerida}"
