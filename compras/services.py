from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from core.audit import log_event
from core.exceptions import ConflictoError, ReglaNegocioError
from pagos.models import PagoCobro
from pagos.services import monto_comprometido

from .models import DetalleOrdenCompra, OrdenCompra

logger = logging.getLogger(__name__)

ESTADOS_ANULABLES = {OrdenCompra.ESTADO_PENDIENTE, OrdenCompra.ESTADO_ENVIADA}
ESTADOS_FINALES = {OrdenCompra.ESTADO_RECIBIDA_TOTAL, OrdenCompra.ESTADO_ANULADA}


def _can_transition_orden(current: str, new: str) -> bool:
    transitions = {
        OrdenCompra.ESTADO_PENDIENTE: {OrdenCompra.ESTADO_ENVIADA},
        OrdenCompra.ESTADO_ENVIADA: {OrdenCompra.ESTADO_RECIBIDA_PARCIAL, OrdenCompra.ESTADO_RECIBIDA_TOTAL},
        OrdenCompra.ESTADO_RECIBIDA_PARCIAL: {OrdenCompra.ESTADO_RECIBIDA_TOTAL},
        OrdenCompra.ESTADO_RECIBIDA_TOTAL: set(),
        OrdenCompra.ESTADO_ANULADA: set(),
    }
    return new in transitions.get(current, set())


def _recalcular_total(orden: OrdenCompra) -> None:
    orden.recompute_total()
    orden.save(update_fields=["total", "updated_at"])


def _assert_detalle_editable(orden: OrdenCompra) -> None:
    if orden.estado != OrdenCompra.ESTADO_PENDIENTE:
        raise ConflictoError(f"Solo se pueden modificar detalles de órdenes en estado 'Pendiente' (actual: '{orden.estado}').")


def _recalcular_total_con_saldo(orden: OrdenCompra) -> None:
    _recalcular_total(orden)
    comprometido = monto_comprometido(orden)
    if orden.total < comprometido:
        raise ConflictoError(
            f"El nuevo total {orden.total} quedaría por debajo de lo ya pagado en la orden ({comprometido})."
        )


def crear_orden_compra(user, *, proveedor, detalles: list[dict], fecha_entrega_estimada=None, observaciones: str = "") -> OrdenCompra:
    if not detalles:
        raise ReglaNegocioError("La orden de compra debe tener al menos un detalle.")
    vistos = set()
    for detalle in detalles:
        insumo = detalle["insumo"]
        if insumo.id in vistos:
            raise ReglaNegocioError(f"El insumo '{insumo.nombre}' está repetido en la orden.")
        vistos.add(insumo.id)
    if fecha_entrega_estimada and fecha_entrega_estimada < timezone.localdate():
        raise ReglaNegocioError("La fecha de entrega estimada no puede ser anterior a hoy.")

    with transaction.atomic():
        orden = OrdenCompra.objects.create(
            proveedor=proveedor,
            fecha_entrega_estimada=fecha_entrega_estimada,
            observaciones=observaciones or "",
        )
        for detalle in detalles:
            DetalleOrdenCompra.objects.create(
                orden=orden,
                insumo=detalle["insumo"],
                cantidad=detalle["cantidad"],
                precio_unitario=detalle["precio_unitario"],
            )
        _recalcular_total(orden)

    log_event(
        user,
        "CREATE",
        "compras.OrdenCompra",
        orden.id,
        {"proveedor": proveedor.nit, "total": str(orden.total), "detalles": len(detalles)},
    )
    return orden


def actualizar_orden_compra(user, orden: OrdenCompra, data: dict) -> OrdenCompra:
    if orden.estado in ESTADOS_FINALES:
        raise ConflictoError(f"La orden de compra está en estado final '{orden.estado}' y no puede editarse.")

    nuevo_estado = data.get("estado")
    if nuevo_estado == OrdenCompra.ESTADO_ANULADA:
        return anular_orden_compra(user, orden)

    prev_estado = orden.estado
    if nuevo_estado and nuevo_estado != prev_estado:
        if not _can_transition_orden(prev_estado, nuevo_estado):
            raise ConflictoError(f"Transición de estado no permitida: '{prev_estado}' → '{nuevo_estado}'.")
        orden.estado = nuevo_estado
        if nuevo_estado == OrdenCompra.ESTADO_RECIBIDA_TOTAL and not orden.fecha_entrega_real:
            orden.fecha_entrega_real = timezone.localdate()
    if "fecha_entrega_estimada" in data:
        fecha = data["fecha_entrega_estimada"]
        if fecha and fecha < orden.fecha_pedido:
            raise ReglaNegocioError("La fecha de entrega estimada no puede ser anterior a la fecha del pedido.")
        orden.fecha_entrega_estimada = fecha
    if data.get("fecha_entrega_real"):
        if data["fecha_entrega_real"] < orden.fecha_pedido:
            raise ReglaNegocioError("La fecha de entrega real no puede ser anterior a la fecha del pedido.")
        orden.fecha_entrega_real = data["fecha_entrega_real"]
    if "observaciones" in data:
        orden.observaciones = data["observaciones"] or ""
    orden.save()

    payload = {"fecha_entrega_estimada": str(orden.fecha_entrega_estimada or "")}
    if orden.estado != prev_estado:
        payload.update({"from": prev_estado, "to": orden.estado})
        logger.info("orden compra %s: %s -> %s", orden.id, prev_estado, orden.estado)
    log_event(user, "UPDATE", "compras.OrdenCompra", orden.id, payload)
    return orden


def anular_orden_compra(user, orden: OrdenCompra) -> OrdenCompra:
    with transaction.atomic():
        orden = OrdenCompra.objects.select_for_update().get(pk=orden.pk)
        if orden.estado == OrdenCompra.ESTADO_ANULADA:
            raise ConflictoError("La orden de compra ya está anulada.")
        if orden.estado not in ESTADOS_ANULABLES:
            raise ConflictoError(f"No se puede anular una orden de compra en estado '{orden.estado}'.")

        prev_estado = orden.estado
        orden.estado = OrdenCompra.ESTADO_ANULADA
        orden.save(update_fields=["estado", "updated_at"])

        pagos = orden.pagos.filter(estado=PagoCobro.ESTADO_PENDIENTE)
        pagos_ids = list(pagos.values_list("id", flat=True))
        pagos.update(estado=PagoCobro.ESTADO_ANULADO, updated_at=timezone.now())

    logger.info("orden compra %s anulada (pagos=%s)", orden.id, pagos_ids)
    log_event(
        user,
        "ANULAR",
        "compras.OrdenCompra",
        orden.id,
        {"from": prev_estado, "to": orden.estado, "pagos_anulados": pagos_ids},
    )
    return orden


def agregar_detalle(user, orden: OrdenCompra, *, insumo, cantidad: int, precio_unitario: Decimal) -> DetalleOrdenCompra:
    _assert_detalle_editable(orden)
    if orden.detalles.filter(insumo=insumo).exists():
        raise ConflictoError(f"El insumo '{insumo.nombre}' ya está en la orden.")
    with transaction.atomic():
        detalle = DetalleOrdenCompra.objects.create(
            orden=orden,
            insumo=insumo,
            cantidad=cantidad,
            precio_unitario=precio_unitario,
        )
        _recalcular_total(orden)
    log_event(
        user,
        "CREATE",
        "compras.DetalleOrdenCompra",
        detalle.id,
        {"orden": orden.id, "insumo": insumo.nombre, "cantidad": cantidad},
    )
    return detalle


def actualizar_detalle(user, orden: OrdenCompra, detalle: DetalleOrdenCompra, data: dict) -> DetalleOrdenCompra:
    _assert_detalle_editable(orden)
    insumo = data.get("insumo")
    with transaction.atomic():
        orden = OrdenCompra.objects.select_for_update().get(pk=orden.pk)
        _assert_detalle_editable(orden)
        if insumo is not None and insumo.id != detalle.insumo_id:
            if orden.detalles.filter(insumo=insumo).exclude(pk=detalle.pk).exists():
                raise ConflictoError(f"El insumo '{insumo.nombre}' ya está en la orden.")
            detalle.insumo = insumo
        if data.get("cantidad") is not None:
            detalle.cantidad = data["cantidad"]
        if data.get("precio_unitario") is not None:
            detalle.precio_unitario = data["precio_unitario"]
        detalle.save()
        _recalcular_total_con_saldo(orden)
    log_event(
        user,
        "UPDATE",
        "compras.DetalleOrdenCompra",
        detalle.id,
        {"orden": orden.id, "cantidad": detalle.cantidad, "precio_unitario": str(detalle.precio_unitario)},
    )
    return detalle


def eliminar_detalle(user, orden: OrdenCompra, detalle: DetalleOrdenCompra) -> None:
    _assert_detalle_editable(orden)
    if orden.detalles.count() <= 1:
        raise ConflictoError("No se puede eliminar el único detalle de la orden de compra.")
    detalle_id = detalle.id
    with transaction.atomic():
        orden = OrdenCompra.objects.select_for_update().get(pk=orden.pk)
        detalle.delete()
        _recalcular_total_con_saldo(orden)
    log_event(user, "DELETE", "compras.DetalleOrdenCompra", detalle_id, {"orden": orden.id})
