from django.contrib import admin

from .models import (
    AlertaStock,
    InventarioInsumo,
    InventarioProducto,
    MovimientoInsumo,
    MovimientoProducto,
)


class MovimientoInsumoInline(admin.TabularInline):
    model = MovimientoInsumo
    extra = 0
    readonly_fields = ("fecha", "tipo", "cantidad", "descripcion", "usuario")
    can_delete = False


class MovimientoProductoInline(admin.TabularInline):
    model = MovimientoProducto
    extra = 0
    readonly_fields = ("fecha", "tipo", "cantidad", "descripcion", "usuario")
    can_delete = False


@admin.register(InventarioInsumo)
class InventarioInsumoAdmin(admin.ModelAdmin):
    list_display = ("insumo", "ubicacion", "cantidad_stock", "ultima_actualizacion")
    search_fields = ("insumo__nombre", "ubicacion")
    readonly_fields = ("cantidad_stock", "ultima_actualizacion")
    inlines = [MovimientoInsumoInline]


@admin.register(InventarioProducto)
class InventarioProductoAdmin(admin.ModelAdmin):
    list_display = ("producto", "ubicacion", "cantidad_stock", "ultima_actualizacion")
    search_fields = ("producto__nombre", "producto__referencia", "ubicacion")
    readonly_fields = ("cantidad_stock", "ultima_actualizacion")
    inlines = [MovimientoProductoInline]


@admin.register(AlertaStock)
class AlertaStockAdmin(admin.ModelAdmin):
    list_display = ("created_at", "tipo_item", "insumo", "producto", "nivel_actual", "umbral", "estado")
    list_filter = ("tipo_item", "estado")
    search_fields = ("mensaje", "insumo__nombre", "producto__referencia")
