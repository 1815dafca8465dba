from django.contrib import admin

from .models import OrdenProduccion, TareaProduccion


class TareaProduccionInline(admin.TabularInline):
    model = TareaProduccion
    extra = 0


@admin.register(OrdenProduccion)
class OrdenProduccionAdmin(admin.ModelAdmin):
    list_display = ("id", "orden_venta", "fecha_inicio", "fecha_fin_estimada", "fecha_fin_real", "estado")
    list_filter = ("estado",)
    search_fields = ("orden_venta__cliente__nombre",)
    inlines = [TareaProduccionInline]


@admin.register(TareaProduccion)
class TareaProduccionAdmin(admin.ModelAdmin):
    list_display = ("nombre", "orden_produccion", "empleado", "estado", "fecha_inicio", "fecha_fin")
    list_filter = ("estado",)
    search_fields = ("nombre", "empleado__nombre")
