from django.db import models

from rrhh.models import Empleado
from ventas.models import OrdenVenta


class OrdenProduccion(models.Model):
    ESTADO_PENDIENTE = "Pendiente"
    ESTADO_EN_PROCESO = "En Proceso"
    ESTADO_TERMINADA = "Terminada"
    ESTADO_RETRASADA = "Retrasada"
    ESTADO_ANULADA = "Anulada"
    ESTADO_CHOICES = [
        (ESTADO_PENDIENTE, "Pendiente"),
        (ESTADO_EN_PROCESO, "En proceso"),
        (ESTADO_TERMINADA, "Terminada"),
        (ESTADO_RETRASADA, "Retrasada"),
        (ESTADO_ANULADA, "Anulada"),
    ]
    ESTADOS_FINALES = {ESTADO_TERMINADA, ESTADO_ANULADA}
    ESTADOS_ABIERTOS = {ESTADO_PENDIENTE, ESTADO_EN_PROCESO, ESTADO_RETRASADA}

    orden_venta = models.ForeignKey(OrdenVenta, on_delete=models.PROTECT, related_name="ordenes_produccion")
    fecha_inicio = models.DateField(null=True, blank=True)
    fecha_fin_estimada = models.DateField(null=True, blank=True)
    fecha_fin_real = models.DateField(null=True, blank=True)
    estado = models.CharField(max_length=20, choices=ESTADO_CHOICES, default=ESTADO_PENDIENTE)
    observaciones = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "Orden de producción"
        verbose_name_plural = "Órdenes de producción"

    def __str__(self) -> str:
        return f"OP-{self.id} (OV-{self.orden_venta_id})"


class TareaProduccion(models.Model):
    ESTADO_PENDIENTE = "Pendiente"
    ESTADO_EN_CURSO = "En Curso"
    ESTADO_COMPLETADA = "Completada"
    ESTADO_BLOQUEADA = "Bloqueada"
    ESTADO_CHOICES = [
        (ESTADO_PENDIENTE, "Pendiente"),
        (ESTADO_EN_CURSO, "En curso"),
        (ESTADO_COMPLETADA, "Completada"),
        (ESTADO_BLOQUEADA, "Bloqueada"),
    ]

    orden_produccion = models.ForeignKey(OrdenProduccion, on_delete=models.CASCADE, related_name="tareas")
    empleado = models.ForeignKey(
        Empleado,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="tareas_produccion",
    )
    nombre = models.CharField(max_length=160)
    fecha_inicio = models.DateTimeField(null=True, blank=True)
    fecha_fin = models.DateTimeField(null=True, blank=True)
    duracion_estimada = models.DurationField(null=True, blank=True)
    duracion_real = models.DurationField(null=True, blank=True)
    estado = models.CharField(max_length=20, choices=ESTADO_CHOICES, default=ESTADO_PENDIENTE)
    observaciones = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        verbose_name = "Tarea de producción"
        verbose_name_plural = "Tareas de producción"

    def __str__(self) -> str:
        return f"{self.nombre} ({self.estado})"
