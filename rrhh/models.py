from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from core.utils import normalizar_nombre


class Empleado(models.Model):
    DOC_CEDULA = "Cédula"
    DOC_OTRO = "Otro"
    DOC_CHOICES = [
        (DOC_CEDULA, "Cédula"),
        (DOC_OTRO, "Otro"),
    ]

    tipo_documento = models.CharField(max_length=20, choices=DOC_CHOICES, default=DOC_CEDULA)
    numero_documento = models.CharField(max_length=40, unique=True)
    nombre = models.CharField(max_length=180)
    nombre_normalizado = models.CharField(max_length=180, db_index=True, editable=False)
    cargo = models.CharField(max_length=120, blank=True, default="")
    area = models.CharField(max_length=120, blank=True, default="")
    salario = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    fecha_contratacion = models.DateField(default=timezone.localdate)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["nombre", "id"]
        verbose_name = "Empleado"
        verbose_name_plural = "Empleados"

    def __str__(self) -> str:
        return f"{self.numero_documento} · {self.nombre}"

    def save(self, *args, **kwargs):
        self.numero_documento = (self.numero_documento or "").strip()
        self.nombre_normalizado = normalizar_nombre(self.nombre or "")
        super().save(*args, **kwargs)
