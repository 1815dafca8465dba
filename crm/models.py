from __future__ import annotations

from django.db import models

from core.utils import normalizar_nombre


class Cliente(models.Model):
    DOC_NIT = "NIT"
    DOC_CEDULA = "Cédula"
    DOC_CHOICES = [
        (DOC_NIT, "NIT"),
        (DOC_CEDULA, "Cédula"),
    ]

    tipo_documento = models.CharField(max_length=20, choices=DOC_CHOICES, default=DOC_NIT)
    numero_documento = models.CharField(max_length=40, unique=True)
    nombre = models.CharField(max_length=180)
    nombre_normalizado = models.CharField(max_length=180, db_index=True, editable=False)
    direccion = models.CharField(max_length=255, blank=True, default="")
    telefono = models.CharField(max_length=40, blank=True, default="")
    correo = models.EmailField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["nombre", "id"]
        verbose_name = "Cliente"
        verbose_name_plural = "Clientes"

    def __str__(self) -> str:
        return self.nombre

    def save(self, *args, **kwargs):
        self.numero_documento = (self.numero_documento or "").strip()
        self.nombre_normalizado = normalizar_nombre(self.nombre or "")
        super().save(*args, **kwargs)


class ContactoCliente(models.Model):
    cliente = models.ForeignKey(Cliente, on_delete=models.CASCADE, related_name="contactos")
    nombre = models.CharField(max_length=160)
    cargo = models.CharField(max_length=120, blank=True, default="")
    telefono = models.CharField(max_length=40, blank=True, default="")
    correo = models.EmailField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["nombre", "id"]
        verbose_name = "Contacto de cliente"
        verbose_name_plural = "Contactos de cliente"

    def __str__(self) -> str:
        return f"{self.cliente.nombre} · {self.nombre}"
