from django.contrib import admin

from .models import Empleado


@admin.register(Empleado)
class EmpleadoAdmin(admin.ModelAdmin):
    list_display = ("numero_documento", "nombre", "cargo", "area", "salario", "fecha_contratacion")
    list_filter = ("tipo_documento", "area")
    search_fields = ("numero_documento", "nombre", "cargo", "area")
