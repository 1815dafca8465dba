from django.contrib import admin

from .models import Cliente, ContactoCliente


class ContactoClienteInline(admin.TabularInline):
    model = ContactoCliente
    extra = 0


@admin.register(Cliente)
class ClienteAdmin(admin.ModelAdmin):
    list_display = ("numero_documento", "tipo_documento", "nombre", "telefono", "correo")
    list_filter = ("tipo_documento",)
    search_fields = ("numero_documento", "nombre", "telefono", "correo")
    inlines = [ContactoClienteInline]
