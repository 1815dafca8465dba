from django.apps import AppConfig

class MaestrosConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "maestros"
    verbose_name = "Maestros"
