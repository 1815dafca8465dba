from django.contrib import admin
from .models import AuditLog, Permiso, RolPermiso, UserProfile


class RolPermisoInline(admin.TabularInline):
    model = RolPermiso
    extra = 0


@admin.register(Permiso)
class PermisoAdmin(admin.ModelAdmin):
    list_display = ("nombre_permiso", "descripcion")
    search_fields = ("nombre_permiso", "descripcion")
    inlines = [RolPermisoInline]


@admin.register(RolPermiso)
class RolPermisoAdmin(admin.ModelAdmin):
    list_display = ("rol_nombre", "permiso")
    list_filter = ("rol_nombre",)
    search_fields = ("rol_nombre", "permiso__nombre_permiso")


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "empleado", "telefono", "updated_at")
    search_fields = ("user__username", "user__email", "empleado__nombre")


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "user", "action", "model", "object_id")
    list_filter = ("action", "model")
    search_fields = ("model", "object_id", "user__username")
    readonly_fields = ("timestamp", "user", "action", "model", "object_id", "payload")
