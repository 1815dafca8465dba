from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from core.audit import log_event
from core.exceptions import ConflictoError, ReglaNegocioError
from pagos.models import PagoCobro
from pagos.services import monto_comprometido
from produccion.models import OrdenProduccion

from .models import DetalleOrdenVenta, OrdenVenta

logger = logging.getLogger(__name__)

ESTADOS_DETALLE_EDITABLE = {OrdenVenta.ESTADO_PENDIENTE, OrdenVenta.ESTADO_CONFIRMADA}


def _can_transition_orden(current: str, new: str) -> bool:
    transitions = {
        OrdenVenta.ESTADO_PENDIENTE: {OrdenVenta.ESTADO_CONFIRMADA, OrdenVenta.ESTADO_EN_PRODUCCION},
        OrdenVenta.ESTADO_CONFIRMADA: {OrdenVenta.ESTADO_EN_PRODUCCION, OrdenVenta.ESTADO_ENTREGADA},
        OrdenVenta.ESTADO_EN_PRODUCCION: {OrdenVenta.ESTADO_ENTREGADA},
        OrdenVenta.ESTADO_ENTREGADA: set(),
        OrdenVenta.ESTADO_ANULADA: set(),
    }
    return new in transitions.get(current, set())


def _recalcular_total(orden: OrdenVenta) -> None:
    orden.recompute_total()
    orden.save(update_fields=["total", "updated_at"])


def _validar_detalles(detalles: list[dict]) -> None:
    if not detalles:
        raise ReglaNegocioError("La orden de venta debe tener al menos un detalle.")
    vistos = set()
    for detalle in detalles:
        producto = detalle["producto"]
        if producto.id in vistos:
            raise ReglaNegocioError(f"El producto '{producto.referencia}' está repetido en la orden.")
        vistos.add(producto.id)


def _assert_detalle_editable(orden: OrdenVenta) -> None:
    if orden.estado not in ESTADOS_DETALLE_EDITABLE:
        raise ConflictoError(f"No se pueden modificar los detalles de una orden en estado '{orden.estado}'.")


def _recalcular_total_con_saldo(orden: OrdenVenta) -> None:
    _recalcular_total(orden)
    comprometido = monto_comprometido(orden)
    if orden.total < comprometido:
        raise ConflictoError(
            f"El nuevo total {orden.total} quedaría por debajo de lo ya cobrado en la orden ({comprometido})."
        )


def crear_orden_venta(user, *, cliente, detalles: list[dict], fecha_entrega_estimada=None, observaciones: str = "") -> OrdenVenta:
    _validar_detalles(detalles)
    if fecha_entrega_estimada and fecha_entrega_estimada < timezone.localdate():
        raise ReglaNegocioError("La fecha de entrega estimada no puede ser anterior a hoy.")

    with transaction.atomic():
        orden = OrdenVenta.objects.create(
            cliente=cliente,
            fecha_entrega_estimada=fecha_entrega_estimada,
            observaciones=observaciones or "",
        )
        for detalle in detalles:
            producto = detalle["producto"]
            precio = detalle.get("precio_unitario")
            DetalleOrdenVenta.objects.create(
                orden=orden,
                producto=producto,
                cantidad=detalle["cantidad"],
                precio_unitario=precio if precio is not None else producto.precio_venta,
            )
        _recalcular_total(orden)

    log_event(
        user,
        "CREATE",
        "ventas.OrdenVenta",
        orden.id,
        {"cliente": cliente.numero_documento, "total": str(orden.total), "detalles": len(detalles)},
    )
    return orden


def actualizar_orden_venta(user, orden: OrdenVenta, data: dict) -> OrdenVenta:
    if orden.estado in OrdenVenta.ESTADOS_FINALES:
        raise ConflictoError(f"La orden de venta está en estado final '{orden.estado}' y no puede editarse.")

    nuevo_estado = data.get("estado")
    if nuevo_estado == OrdenVenta.ESTADO_ANULADA:
        return anular_orden_venta(user, orden)

    prev_estado = orden.estado
    if nuevo_estado and nuevo_estado != prev_estado:
        if not _can_transition_orden(prev_estado, nuevo_estado):
            raise ConflictoError(f"Transición de estado no permitida: '{prev_estado}' → '{nuevo_estado}'.")
        orden.estado = nuevo_estado
    if "fecha_entrega_estimada" in data:
        fecha = data["fecha_entrega_estimada"]
        if fecha and fecha < orden.fecha_pedido:
            raise ReglaNegocioError("La fecha de entrega estimada no puede ser anterior a la fecha del pedido.")
        orden.fecha_entrega_estimada = fecha
    if "observaciones" in data:
        orden.observaciones = data["observaciones"] or ""
    orden.save()

    payload = {"fecha_entrega_estimada": str(orden.fecha_entrega_estimada or "")}
    if orden.estado != prev_estado:
        payload.update({"from": prev_estado, "to": orden.estado})
        logger.info("orden venta %s: %s -> %s", orden.id, prev_estado, orden.estado)
    log_event(user, "UPDATE", "ventas.OrdenVenta", orden.id, payload)
    return orden


def anular_orden_venta(user, orden: OrdenVenta) -> OrdenVenta:
    """Anula la orden y en cascada sus órdenes de producción abiertas y cobros pendientes."""
    with transaction.atomic():
        orden = OrdenVenta.objects.select_for_update().get(pk=orden.pk)
        if orden.estado == OrdenVenta.ESTADO_ENTREGADA:
            raise ConflictoError("No se puede anular una orden de venta ya entregada.")
        if orden.estado == OrdenVenta.ESTADO_ANULADA:
            raise ConflictoError("La orden de venta ya está anulada.")

        prev_estado = orden.estado
        orden.estado = OrdenVenta.ESTADO_ANULADA
        orden.save(update_fields=["estado", "updated_at"])

        producciones = orden.ordenes_produccion.exclude(
            estado__in=[OrdenProduccion.ESTADO_TERMINADA, OrdenProduccion.ESTADO_ANULADA]
        )
        producciones_ids = list(producciones.values_list("id", flat=True))
        producciones.update(estado=OrdenProduccion.ESTADO_ANULADA, updated_at=timezone.now())

        cobros = orden.cobros.filter(estado=PagoCobro.ESTADO_PENDIENTE)
        cobros_ids = list(cobros.values_list("id", flat=True))
        cobros.update(estado=PagoCobro.ESTADO_ANULADO, updated_at=timezone.now())

    logger.info(
        "orden venta %s anulada (producciones=%s cobros=%s)",
        orden.id,
        producciones_ids,
        cobros_ids,
    )
    log_event(
        user,
        "ANULAR",
        "ventas.OrdenVenta",
        orden.id,
        {
            "from": prev_estado,
            "to": orden.estado,
            "ordenes_produccion_anuladas": producciones_ids,
            "cobros_anulados": cobros_ids,
        },
    )
    return orden


def agregar_detalle(user, orden: OrdenVenta, *, producto, cantidad: int, precio_unitario: Decimal | None = None) -> DetalleOrdenVenta:
    _assert_detalle_editable(orden)
    if orden.detalles.filter(producto=producto).exists():
        raise ConflictoError(f"El producto '{producto.referencia}' ya está en la orden.")
    with transaction.atomic():
        detalle = DetalleOrdenVenta.objects.create(
            orden=orden,
            producto=producto,
            cantidad=cantidad,
            precio_unitario=precio_unitario if precio_unitario is not None else producto.precio_venta,
        )
        _recalcular_total(orden)
    log_event(
        user,
        "CREATE",
        "ventas.DetalleOrdenVenta",
        detalle.id,
        {"orden": orden.id, "producto": producto.referencia, "cantidad": cantidad},
    )
    return detalle


def actualizar_detalle(user, orden: OrdenVenta, detalle: DetalleOrdenVenta, data: dict) -> DetalleOrdenVenta:
    _assert_detalle_editable(orden)
    producto = data.get("producto")
    with transaction.atomic():
        orden = OrdenVenta.objects.select_for_update().get(pk=orden.pk)
        _assert_detalle_editable(orden)
        if producto is not None and producto.id != detalle.producto_id:
            if orden.detalles.filter(producto=producto).exclude(pk=detalle.pk).exists():
                raise ConflictoError(f"El producto '{producto.referencia}' ya está en la orden.")
            detalle.producto = producto
        if data.get("cantidad") is not None:
            detalle.cantidad = data["cantidad"]
        if data.get("precio_unitario") is not None:
            detalle.precio_unitario = data["precio_unitario"]
        detalle.save()
        _recalcular_total_con_saldo(orden)
    log_event(
        user,
        "UPDATE",
        "ventas.DetalleOrdenVenta",
        detalle.id,
        {"orden": orden.id, "cantidad": detalle.cantidad, "precio_unitario": str(detalle.precio_unitario)},
    )
    return detalle


def eliminar_detalle(user, orden: OrdenVenta, detalle: DetalleOrdenVenta) -> None:
    _assert_detalle_editable(orden)
    if orden.detalles.count() <= 1:
        raise ConflictoError("No se puede eliminar el único detalle de la orden de venta.")
    detalle_id = detalle.id
    with transaction.atomic():
        orden = OrdenVenta.objects.select_for_update().get(pk=orden.pk)
        detalle.delete()
        _recalcular_total_con_saldo(orden)
    log_event(user, "DELETE", "ventas.DetalleOrdenVenta", detalle_id, {"orden": orden.id})
