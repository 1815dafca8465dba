from django.conf import settings
from django.db import models
from django.utils import timezone


class Permiso(models.Model):
    nombre_permiso = models.CharField(max_length=100, unique=True)
    descripcion = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        verbose_name = "Permiso"
        verbose_name_plural = "Permisos"
        ordering = ["nombre_permiso"]

    def save(self, *args, **kwargs):
        self.nombre_permiso = "_".join((self.nombre_permiso or "").strip().upper().split())
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.nombre_permiso


class RolPermiso(models.Model):
    rol_nombre = models.CharField(max_length=60, db_index=True)
    permiso = models.ForeignKey(Permiso, on_delete=models.CASCADE, related_name="asignaciones")

    class Meta:
        verbose_name = "Permiso por rol"
        verbose_name_plural = "Permisos por rol"
        ordering = ["rol_nombre", "permiso__nombre_permiso"]
        unique_together = [("rol_nombre", "permiso")]

    def __str__(self) -> str:
        return f"{self.rol_nombre} · {self.permiso.nombre_permiso}"


class UserProfile(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE)
    empleado = models.OneToOneField(
        "rrhh.Empleado",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="perfil_usuario",
    )
    telefono = models.CharField(max_length=30, blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Perfil de usuario"
        verbose_name_plural = "Perfiles de usuario"

    def __str__(self) -> str:
        return f"Perfil: {self.user.username}"


class AuditLog(models.Model):
    timestamp = models.DateTimeField(default=timezone.now)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL)
    action = models.CharField(max_length=64)  # CREATE/UPDATE/DELETE/ANULAR/LOGIN
    model = models.CharField(max_length=128)
    object_id = models.CharField(max_length=64, blank=True, default="")
    payload = models.JSONField(default=dict, blank=True)

    class Meta:
        verbose_name = "Bitácora (Audit)"
        verbose_name_plural = "Bitácora (Audit)"
        ordering = ["-timestamp"]

    def __str__(self) -> str:
        return f"{self.timestamp:%Y-%m-%d %H:%M} {self.action} {self.model} {self.object_id}"
