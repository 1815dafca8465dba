from django.contrib import admin

from .models import DetalleOrdenVenta, OrdenVenta


class DetalleOrdenVentaInline(admin.TabularInline):
    model = DetalleOrdenVenta
    extra = 0
    readonly_fields = ("subtotal",)


@admin.register(OrdenVenta)
class OrdenVentaAdmin(admin.ModelAdmin):
    list_display = ("id", "cliente", "fecha_pedido", "fecha_entrega_estimada", "estado", "total")
    list_filter = ("estado",)
    search_fields = ("cliente__nombre", "cliente__numero_documento")
    readonly_fields = ("total",)
    inlines = [DetalleOrdenVentaInline]
