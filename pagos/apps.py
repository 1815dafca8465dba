from django.apps import AppConfig

class PagosConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pagos"
    verbose_name = "Pagos y cobros"
