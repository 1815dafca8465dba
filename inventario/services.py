from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone
from rest_framework.exceptions import NotFound

from core.audit import log_event
from core.exceptions import ConflictoError, ReglaNegocioError
from maestros.models import Insumo, Producto

from .models import (
    AlertaStock,
    InventarioInsumo,
    InventarioProducto,
    MovimientoBase,
)

logger = logging.getLogger(__name__)


def _fmt(value: Decimal) -> str:
    return f"{Decimal(value).normalize():f}"


def _item_de(inventario) -> Insumo | Producto:
    return inventario.insumo if isinstance(inventario, InventarioInsumo) else inventario.producto


def _tipo_item(item) -> str:
    return AlertaStock.TIPO_INSUMO if isinstance(item, Insumo) else AlertaStock.TIPO_PRODUCTO


def _item_filter(item) -> dict:
    return {"insumo": item} if isinstance(item, Insumo) else {"producto": item}


def stock_total(item: Insumo | Producto) -> Decimal:
    total = item.inventarios.aggregate(total=Sum("cantidad_stock"))["total"]
    return total if total is not None else Decimal("0")


def evaluar_alerta(item: Insumo | Producto) -> AlertaStock | None:
    """Crea, refresca o resuelve la alerta abierta del item según su stock total.

    Hay alerta abierta cuando el umbral es positivo y el stock sumado de todas
    las ubicaciones no lo supera.
    """
    total = stock_total(item)
    umbral = int(item.stock_minimo or 0)
    abiertas = AlertaStock.objects.filter(estado__in=AlertaStock.ESTADOS_ABIERTOS, **_item_filter(item))

    if umbral > 0 and total <= umbral:
        mensaje = f"Stock bajo de {item.nombre}: {_fmt(total)} (umbral {umbral})."
        alerta = abiertas.order_by("-created_at", "-id").first()
        if alerta is None:
            alerta = AlertaStock.objects.create(
                tipo_item=_tipo_item(item),
                mensaje=mensaje,
                nivel_actual=total,
                umbral=umbral,
                **_item_filter(item),
            )
            logger.warning("stock alert created tipo=%s item=%s nivel=%s umbral=%s", alerta.tipo_item, item.id, total, umbral)
        else:
            alerta.mensaje = mensaje
            alerta.nivel_actual = total
            alerta.umbral = umbral
            alerta.save(update_fields=["mensaje", "nivel_actual", "umbral"])
        return alerta

    resueltas = abiertas.update(estado=AlertaStock.ESTADO_RESUELTA, resuelta_en=timezone.now())
    if resueltas:
        logger.info("stock alerts resolved tipo=%s item=%s count=%s", _tipo_item(item), item.id, resueltas)
    return None


def crear_inventario(user, *, item: Insumo | Producto, ubicacion: str, cantidad_stock: Decimal):
    ubicacion = (ubicacion or "").strip()
    if not ubicacion:
        raise ReglaNegocioError("La ubicación del inventario es obligatoria.")
    if cantidad_stock < 0:
        raise ReglaNegocioError("La cantidad inicial no puede ser negativa.")

    model = InventarioInsumo if isinstance(item, Insumo) else InventarioProducto
    with transaction.atomic():
        if model.objects.filter(ubicacion__iexact=ubicacion, **_item_filter(item)).exists():
            raise ConflictoError(f"Ya existe inventario de '{item.nombre}' en la ubicación '{ubicacion}'.")
        inventario = model.objects.create(ubicacion=ubicacion, cantidad_stock=Decimal("0"), **_item_filter(item))
        if cantidad_stock > 0:
            inventario.cantidad_stock = cantidad_stock
            inventario.save(update_fields=["cantidad_stock"])
            inventario.movimientos.create(
                tipo=MovimientoBase.TIPO_ENTRADA,
                cantidad=cantidad_stock,
                descripcion="Stock inicial",
                usuario=user if getattr(user, "is_authenticated", False) else None,
            )
        evaluar_alerta(item)

    log_event(
        user,
        "CREATE",
        f"inventario.{model.__name__}",
        inventario.id,
        {"item": item.nombre, "ubicacion": ubicacion, "cantidad_stock": str(cantidad_stock)},
    )
    return inventario


def registrar_movimiento(user, *, inventario_model, inventario_id: int, tipo: str, cantidad: Decimal, descripcion: str = ""):
    if tipo not in {MovimientoBase.TIPO_ENTRADA, MovimientoBase.TIPO_SALIDA}:
        raise ReglaNegocioError("Tipo de movimiento inválido. Usa 'Entrada' o 'Salida'.")
    if cantidad is None or cantidad <= 0:
        raise ReglaNegocioError("La cantidad del movimiento debe ser mayor a cero.")

    with transaction.atomic():
        inventario = inventario_model.objects.select_for_update().filter(pk=inventario_id).first()
        if inventario is None:
            raise NotFound(f"Inventario {inventario_id} no encontrado.")
        prev_stock = inventario.cantidad_stock
        if tipo == MovimientoBase.TIPO_SALIDA:
            if cantidad > prev_stock:
                raise ConflictoError(
                    f"Stock insuficiente en '{inventario.ubicacion}': disponible {_fmt(prev_stock)}, solicitado {_fmt(cantidad)}."
                )
            inventario.cantidad_stock = prev_stock - cantidad
        else:
            inventario.cantidad_stock = prev_stock + cantidad
        inventario.ultima_actualizacion = timezone.now()
        inventario.save(update_fields=["cantidad_stock", "ultima_actualizacion"])
        movimiento = inventario.movimientos.create(
            tipo=tipo,
            cantidad=cantidad,
            descripcion=(descripcion or "").strip(),
            usuario=user if getattr(user, "is_authenticated", False) else None,
        )
        evaluar_alerta(_item_de(inventario))

    log_event(
        user,
        "MOVIMIENTO",
        f"inventario.{inventario_model.__name__}",
        inventario.id,
        {
            "tipo": tipo,
            "cantidad": str(cantidad),
            "from_stock": str(prev_stock),
            "to_stock": str(inventario.cantidad_stock),
        },
    )
    return movimiento


def actualizar_umbral(user, item: Insumo | Producto, nuevo_umbral: int) -> AlertaStock | None:
    if nuevo_umbral is None or nuevo_umbral < 0:
        raise ReglaNegocioError("El umbral debe ser un entero mayor o igual a cero.")
    prev = item.stock_minimo
    with transaction.atomic():
        item.stock_minimo = nuevo_umbral
        item.save(update_fields=["stock_minimo", "updated_at"])
        alerta = evaluar_alerta(item)
    log_event(
        user,
        "UPDATE",
        f"maestros.{type(item).__name__}",
        item.id,
        {"stock_minimo": {"from": prev, "to": nuevo_umbral}},
    )
    return alerta


def marcar_alerta_vista(user, alerta: AlertaStock) -> AlertaStock:
    if alerta.estado == AlertaStock.ESTADO_RESUELTA:
        raise ConflictoError("La alerta ya fue resuelta.")
    if alerta.estado == AlertaStock.ESTADO_NUEVA:
        alerta.estado = AlertaStock.ESTADO_VISTA
        alerta.save(update_fields=["estado"])
        log_event(user, "VIEW", "inventario.AlertaStock", alerta.id, {"to": alerta.estado})
    return alerta


def resolver_alerta(user, alerta: AlertaStock) -> AlertaStock:
    if alerta.estado != AlertaStock.ESTADO_RESUELTA:
        prev = alerta.estado
        alerta.estado = AlertaStock.ESTADO_RESUELTA
        alerta.resuelta_en = timezone.now()
        alerta.save(update_fields=["estado", "resuelta_en"])
        log_event(user, "RESOLVE", "inventario.AlertaStock", alerta.id, {"from": prev, "to": alerta.estado})
    return alerta
