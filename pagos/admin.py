from django.contrib import admin

from .models import PagoCobro


@admin.register(PagoCobro)
class PagoCobroAdmin(admin.ModelAdmin):
    list_display = ("id", "tipo", "orden_venta", "orden_compra", "fecha_pago_cobro", "monto", "estado")
    list_filter = ("tipo", "estado", "metodo_pago")
    search_fields = ("referencia", "observaciones")
