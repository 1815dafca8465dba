from django.contrib.auth.models import Group
from django.core.management.base import BaseCommand

from core.access import (
    ACCION_ANULAR,
    ACCION_CREAR,
    ACCION_EDITAR,
    ACCION_ELIMINAR,
    ACCION_VER,
    RECURSO_CLIENTES,
    RECURSO_INSUMOS,
    RECURSO_INVENTARIOS,
    RECURSO_ORDENES_COMPRA,
    RECURSO_ORDENES_PRODUCCION,
    RECURSO_ORDENES_VENTA,
    RECURSO_PAGOS_COBROS,
    RECURSO_PRODUCTOS,
    RECURSOS,
    ROLE_OPERARIO,
    ROLE_ORDER,
    ROLE_VENTAS,
    permiso_nombre,
)
from core.models import Permiso, RolPermiso

ANULABLES = {
    RECURSO_ORDENES_VENTA,
    RECURSO_ORDENES_PRODUCCION,
    RECURSO_ORDENES_COMPRA,
    RECURSO_PAGOS_COBROS,
}

# Administrador y Gerente no necesitan permisos nominales (ver core.access).
ROLE_PERMS = {
    ROLE_VENTAS: [
        permiso_nombre(ACCION_VER, RECURSO_CLIENTES),
        permiso_nombre(ACCION_CREAR, RECURSO_CLIENTES),
        permiso_nombre(ACCION_EDITAR, RECURSO_CLIENTES),
        permiso_nombre(ACCION_VER, RECURSO_PRODUCTOS),
        permiso_nombre(ACCION_VER, RECURSO_ORDENES_VENTA),
        permiso_nombre(ACCION_CREAR, RECURSO_ORDENES_VENTA),
        permiso_nombre(ACCION_EDITAR, RECURSO_ORDENES_VENTA),
        permiso_nombre(ACCION_VER, RECURSO_PAGOS_COBROS),
        permiso_nombre(ACCION_CREAR, RECURSO_PAGOS_COBROS),
        permiso_nombre(ACCION_VER, RECURSO_INVENTARIOS),
    ],
    ROLE_OPERARIO: [
        permiso_nombre(ACCION_VER, RECURSO_INSUMOS),
        permiso_nombre(ACCION_VER, RECURSO_PRODUCTOS),
        permiso_nombre(ACCION_VER, RECURSO_ORDENES_PRODUCCION),
        permiso_nombre(ACCION_EDITAR, RECURSO_ORDENES_PRODUCCION),
        permiso_nombre(ACCION_VER, RECURSO_INVENTARIOS),
        permiso_nombre(ACCION_CREAR, RECURSO_INVENTARIOS),
    ],
}


def catalogo_permisos() -> list[str]:
    nombres = []
    for recurso in RECURSOS:
        for accion in (ACCION_VER, ACCION_CREAR, ACCION_EDITAR, ACCION_ELIMINAR):
            nombres.append(permiso_nombre(accion, recurso))
        if recurso in ANULABLES:
            nombres.append(permiso_nombre(ACCION_ANULAR, recurso))
    return nombres


class Command(BaseCommand):
    help = "Crea los roles (grupos), el catálogo de permisos y las asignaciones por defecto."

    def handle(self, *args, **options):
        created_groups = 0
        for role in ROLE_ORDER:
            _, was_created = Group.objects.get_or_create(name=role)
            if was_created:
                created_groups += 1

        created_perms = 0
        for nombre in catalogo_permisos():
            _, was_created = Permiso.objects.get_or_create(nombre_permiso=nombre)
            if was_created:
                created_perms += 1

        for role, nombres in ROLE_PERMS.items():
            for nombre in nombres:
                permiso = Permiso.objects.filter(nombre_permiso=nombre).first()
                if permiso is None:
                    self.stdout.write(self.style.WARNING(f"Permiso no encontrado: {nombre}"))
                    continue
                RolPermiso.objects.get_or_create(rol_nombre=role, permiso=permiso)

        self.stdout.write(
            self.style.SUCCESS(
                f"Roles listos. Nuevos grupos creados: {created_groups}. Nuevos permisos: {created_perms}"
            )
        )
