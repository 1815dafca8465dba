from django.contrib.auth.models import AbstractBaseUser

ROLE_ADMIN = "Administrador"
ROLE_GERENTE = "Gerente"
ROLE_OPERARIO = "Operario"
ROLE_VENTAS = "Ventas"

ROLE_ORDER = [
    ROLE_ADMIN,
    ROLE_GERENTE,
    ROLE_VENTAS,
    ROLE_OPERARIO,
]

RECURSO_EMPLEADOS = "EMPLEADOS"
RECURSO_CLIENTES = "CLIENTES"
RECURSO_PROVEEDORES = "PROVEEDORES"
RECURSO_INSUMOS = "INSUMOS"
RECURSO_PRODUCTOS = "PRODUCTOS"
RECURSO_ORDENES_VENTA = "ORDENES_VENTA"
RECURSO_ORDENES_PRODUCCION = "ORDENES_PRODUCCION"
RECURSO_ORDENES_COMPRA = "ORDENES_COMPRA"
RECURSO_PAGOS_COBROS = "PAGOS_COBROS"
RECURSO_INVENTARIOS = "INVENTARIOS"

RECURSOS = [
    RECURSO_EMPLEADOS,
    RECURSO_CLIENTES,
    RECURSO_PROVEEDORES,
    RECURSO_INSUMOS,
    RECURSO_PRODUCTOS,
    RECURSO_ORDENES_VENTA,
    RECURSO_ORDENES_PRODUCCION,
    RECURSO_ORDENES_COMPRA,
    RECURSO_PAGOS_COBROS,
    RECURSO_INVENTARIOS,
]

ACCION_VER = "VER"
ACCION_CREAR = "CREAR"
ACCION_EDITAR = "EDITAR"
ACCION_ELIMINAR = "ELIMINAR"
ACCION_ANULAR = "ANULAR"


def permiso_nombre(accion: str, recurso: str) -> str:
    return f"PERMISO_{accion}_{recurso}"


def _group_names(user: AbstractBaseUser) -> set[str]:
    if not user or not user.is_authenticated:
        return set()
    return set(user.groups.values_list("name", flat=True))


def has_any_role(user: AbstractBaseUser, *roles: str) -> bool:
    if not user or not user.is_authenticated:
        return False
    if user.is_superuser:
        return True
    return bool(_group_names(user).intersection(set(roles)))


def primary_role(user: AbstractBaseUser) -> str:
    groups = _group_names(user)
    for role in ROLE_ORDER:
        if role in groups:
            return role
    if user and user.is_authenticated and user.is_superuser:
        return ROLE_ADMIN
    return ""


def has_permiso(user: AbstractBaseUser, nombre: str) -> bool:
    from core.models import RolPermiso

    roles = _group_names(user)
    if not roles:
        return False
    return RolPermiso.objects.filter(rol_nombre__in=roles, permiso__nombre_permiso=nombre).exists()


def can_view(user: AbstractBaseUser, recurso: str) -> bool:
    return has_any_role(user, ROLE_ADMIN, ROLE_GERENTE) or has_permiso(user, permiso_nombre(ACCION_VER, recurso))


def can_create(user: AbstractBaseUser, recurso: str) -> bool:
    return has_any_role(user, ROLE_ADMIN, ROLE_GERENTE) or has_permiso(user, permiso_nombre(ACCION_CREAR, recurso))


def can_edit(user: AbstractBaseUser, recurso: str) -> bool:
    return has_any_role(user, ROLE_ADMIN, ROLE_GERENTE) or has_permiso(user, permiso_nombre(ACCION_EDITAR, recurso))


def can_delete(user: AbstractBaseUser, recurso: str) -> bool:
    return has_any_role(user, ROLE_ADMIN) or has_permiso(user, permiso_nombre(ACCION_ELIMINAR, recurso))


def can_annul(user: AbstractBaseUser, recurso: str) -> bool:
    return has_any_role(user, ROLE_ADMIN, ROLE_GERENTE) or has_permiso(user, permiso_nombre(ACCION_ANULAR, recurso))


def can_manage_users(user: AbstractBaseUser) -> bool:
    return has_any_role(user, ROLE_ADMIN)


def can_view_users(user: AbstractBaseUser) -> bool:
    return has_any_role(user, ROLE_ADMIN, ROLE_GERENTE)


def is_self(user: AbstractBaseUser, user_id: int) -> bool:
    return bool(user and user.is_authenticated and user.pk == user_id)
