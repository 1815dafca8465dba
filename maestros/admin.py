from django.contrib import admin
from .models import Insumo, InsumoPorProducto, Producto, Proveedor


@admin.register(Proveedor)
class ProveedorAdmin(admin.ModelAdmin):
    list_display = ("nit", "nombre_comercial", "razon_social", "telefono", "correo")
    search_fields = ("nit", "nombre_comercial", "razon_social")


@admin.register(Insumo)
class InsumoAdmin(admin.ModelAdmin):
    list_display = ("nombre", "unidad_medida", "stock_minimo", "updated_at")
    search_fields = ("nombre", "nombre_normalizado", "descripcion")
    list_filter = ("unidad_medida",)


class InsumoPorProductoInline(admin.TabularInline):
    model = InsumoPorProducto
    extra = 0
    autocomplete_fields = ("insumo",)


@admin.register(Producto)
class ProductoAdmin(admin.ModelAdmin):
    list_display = ("referencia", "nombre", "tipo", "talla", "color", "precio_venta", "stock_minimo")
    search_fields = ("referencia", "nombre", "tipo")
    list_filter = ("tipo", "genero")
    inlines = [InsumoPorProductoInline]
