from django.contrib import admin

from .models import DetalleOrdenCompra, OrdenCompra


class DetalleOrdenCompraInline(admin.TabularInline):
    model = DetalleOrdenCompra
    extra = 0
    readonly_fields = ("subtotal",)


@admin.register(OrdenCompra)
class OrdenCompraAdmin(admin.ModelAdmin):
    list_display = ("id", "proveedor", "fecha_pedido", "fecha_entrega_estimada", "estado", "total")
    list_filter = ("estado",)
    search_fields = ("proveedor__nombre_comercial", "proveedor__nit")
    readonly_fields = ("total",)
    inlines = [DetalleOrdenCompraInline]
