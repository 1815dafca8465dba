from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from core.audit import log_event
from core.exceptions import ConflictoError, ReglaNegocioError
from ventas.models import OrdenVenta

from .models import OrdenProduccion, TareaProduccion

logger = logging.getLogger(__name__)

ESTADOS_VENTA_PRODUCIBLES = {
    OrdenVenta.ESTADO_PENDIENTE,
    OrdenVenta.ESTADO_CONFIRMADA,
    OrdenVenta.ESTADO_EN_PRODUCCION,
}


def _can_transition_orden(current: str, new: str) -> bool:
    transitions = {
        OrdenProduccion.ESTADO_PENDIENTE: {OrdenProduccion.ESTADO_EN_PROCESO, OrdenProduccion.ESTADO_RETRASADA},
        OrdenProduccion.ESTADO_EN_PROCESO: {OrdenProduccion.ESTADO_TERMINADA, OrdenProduccion.ESTADO_RETRASADA},
        OrdenProduccion.ESTADO_RETRASADA: {OrdenProduccion.ESTADO_EN_PROCESO, OrdenProduccion.ESTADO_TERMINADA},
        OrdenProduccion.ESTADO_TERMINADA: set(),
        OrdenProduccion.ESTADO_ANULADA: set(),
    }
    return new in transitions.get(current, set())


def _validar_fechas(inicio, fin_estimada, fin_real) -> None:
    if inicio and fin_estimada and fin_estimada < inicio:
        raise ReglaNegocioError("La fecha fin estimada no puede ser anterior a la fecha de inicio.")
    if inicio and fin_real and fin_real < inicio:
        raise ReglaNegocioError("La fecha fin real no puede ser anterior a la fecha de inicio.")


def _assert_tareas_editables(orden: OrdenProduccion) -> None:
    if orden.estado in OrdenProduccion.ESTADOS_FINALES:
        raise ConflictoError(f"No se pueden modificar tareas de una orden de producción '{orden.estado}'.")


def crear_orden_produccion(
    user,
    *,
    orden_venta: OrdenVenta,
    fecha_inicio=None,
    fecha_fin_estimada=None,
    observaciones: str = "",
) -> OrdenProduccion:
    _validar_fechas(fecha_inicio, fecha_fin_estimada, None)
    with transaction.atomic():
        orden_venta = OrdenVenta.objects.select_for_update().get(pk=orden_venta.pk)
        if orden_venta.estado not in ESTADOS_VENTA_PRODUCIBLES:
            raise ConflictoError(
                f"No se puede crear una orden de producción para una orden de venta '{orden_venta.estado}'."
            )
        orden = OrdenProduccion.objects.create(
            orden_venta=orden_venta,
            fecha_inicio=fecha_inicio,
            fecha_fin_estimada=fecha_fin_estimada,
            observaciones=observaciones or "",
        )
        venta_prev = orden_venta.estado
        if venta_prev != OrdenVenta.ESTADO_EN_PRODUCCION:
            orden_venta.estado = OrdenVenta.ESTADO_EN_PRODUCCION
            orden_venta.save(update_fields=["estado", "updated_at"])
            log_event(
                user,
                "UPDATE",
                "ventas.OrdenVenta",
                orden_venta.id,
                {"from": venta_prev, "to": orden_venta.estado, "origen": f"produccion.OrdenProduccion:{orden.id}"},
            )

    log_event(
        user,
        "CREATE",
        "produccion.OrdenProduccion",
        orden.id,
        {"orden_venta": orden_venta.id, "fecha_fin_estimada": str(fecha_fin_estimada or "")},
    )
    return orden


def actualizar_orden_produccion(user, orden: OrdenProduccion, data: dict) -> OrdenProduccion:
    if orden.estado in OrdenProduccion.ESTADOS_FINALES:
        raise ConflictoError(f"La orden de producción está en estado final '{orden.estado}' y no puede editarse.")

    nuevo_estado = data.get("estado")
    if nuevo_estado == OrdenProduccion.ESTADO_ANULADA:
        return anular_orden_produccion(user, orden)

    inicio = data["fecha_inicio"] if "fecha_inicio" in data else orden.fecha_inicio
    fin_estimada = data["fecha_fin_estimada"] if "fecha_fin_estimada" in data else orden.fecha_fin_estimada
    fin_real = data["fecha_fin_real"] if "fecha_fin_real" in data else orden.fecha_fin_real

    prev_estado = orden.estado
    if nuevo_estado and nuevo_estado != prev_estado:
        if not _can_transition_orden(prev_estado, nuevo_estado):
            raise ConflictoError(f"Transición de estado no permitida: '{prev_estado}' → '{nuevo_estado}'.")
        if nuevo_estado == OrdenProduccion.ESTADO_EN_PROCESO and not inicio:
            inicio = timezone.localdate()
        if nuevo_estado == OrdenProduccion.ESTADO_TERMINADA:
            pendientes = orden.tareas.exclude(estado=TareaProduccion.ESTADO_COMPLETADA).count()
            if pendientes:
                raise ConflictoError(f"No se puede terminar la orden: {pendientes} tarea(s) sin completar.")
            if not fin_real:
                fin_real = timezone.localdate()
        orden.estado = nuevo_estado

    _validar_fechas(inicio, fin_estimada, fin_real)
    orden.fecha_inicio = inicio
    orden.fecha_fin_estimada = fin_estimada
    orden.fecha_fin_real = fin_real
    if "observaciones" in data:
        orden.observaciones = data["observaciones"] or ""
    orden.save()

    payload = {"fecha_inicio": str(orden.fecha_inicio or ""), "fecha_fin_real": str(orden.fecha_fin_real or "")}
    if orden.estado != prev_estado:
        payload.update({"from": prev_estado, "to": orden.estado})
        logger.info("orden produccion %s: %s -> %s", orden.id, prev_estado, orden.estado)
    log_event(user, "UPDATE", "produccion.OrdenProduccion", orden.id, payload)
    return orden


def anular_orden_produccion(user, orden: OrdenProduccion) -> OrdenProduccion:
    with transaction.atomic():
        orden = OrdenProduccion.objects.select_for_update().get(pk=orden.pk)
        if orden.estado == OrdenProduccion.ESTADO_ANULADA:
            raise ConflictoError("La orden de producción ya está anulada.")
        if orden.estado == OrdenProduccion.ESTADO_TERMINADA:
            raise ConflictoError("No se puede anular una orden de producción terminada.")
        prev_estado = orden.estado
        orden.estado = OrdenProduccion.ESTADO_ANULADA
        orden.save(update_fields=["estado", "updated_at"])

    logger.info("orden produccion %s anulada", orden.id)
    log_event(user, "ANULAR", "produccion.OrdenProduccion", orden.id, {"from": prev_estado, "to": orden.estado})
    return orden


def crear_tarea(user, orden: OrdenProduccion, *, nombre: str, empleado=None, duracion_estimada=None, observaciones: str = "") -> TareaProduccion:
    _assert_tareas_editables(orden)
    tarea = TareaProduccion.objects.create(
        orden_produccion=orden,
        empleado=empleado,
        nombre=nombre.strip(),
        duracion_estimada=duracion_estimada,
        observaciones=observaciones or "",
    )
    log_event(
        user,
        "CREATE",
        "produccion.TareaProduccion",
        tarea.id,
        {"orden_produccion": orden.id, "nombre": tarea.nombre, "empleado": getattr(empleado, "id", None)},
    )
    return tarea


def actualizar_tarea(user, orden: OrdenProduccion, tarea: TareaProduccion, data: dict) -> TareaProduccion:
    """Actualización parcial: las claves ausentes (o nulas en el cuerpo) no se tocan."""
    _assert_tareas_editables(orden)
    campos = ("empleado", "nombre", "fecha_inicio", "fecha_fin", "duracion_estimada", "duracion_real", "observaciones")

    with transaction.atomic():
        for campo in campos:
            if data.get(campo) is not None:
                setattr(tarea, campo, data[campo])

        prev_estado = tarea.estado
        nuevo_estado = data.get("estado")
        if nuevo_estado and nuevo_estado != prev_estado:
            tarea.estado = nuevo_estado
            if nuevo_estado == TareaProduccion.ESTADO_EN_CURSO:
                if not tarea.fecha_inicio:
                    tarea.fecha_inicio = timezone.now()
                if orden.estado == OrdenProduccion.ESTADO_PENDIENTE:
                    orden.estado = OrdenProduccion.ESTADO_EN_PROCESO
                    if not orden.fecha_inicio:
                        orden.fecha_inicio = timezone.localdate()
                    orden.save(update_fields=["estado", "fecha_inicio", "updated_at"])
                    logger.info("orden produccion %s: Pendiente -> En Proceso (tarea %s)", orden.id, tarea.id)
            elif nuevo_estado == TareaProduccion.ESTADO_COMPLETADA:
                if not tarea.fecha_fin:
                    tarea.fecha_fin = timezone.now()
                if not tarea.duracion_real and tarea.fecha_inicio and tarea.fecha_fin >= tarea.fecha_inicio:
                    tarea.duracion_real = tarea.fecha_fin - tarea.fecha_inicio

        if tarea.fecha_inicio and tarea.fecha_fin and tarea.fecha_fin < tarea.fecha_inicio:
            raise ReglaNegocioError("La fecha fin de la tarea no puede ser anterior a su fecha de inicio.")
        tarea.save()

    payload = {"nombre": tarea.nombre}
    if tarea.estado != prev_estado:
        payload.update({"from": prev_estado, "to": tarea.estado})
    log_event(user, "UPDATE", "produccion.TareaProduccion", tarea.id, payload)
    return tarea


def eliminar_tarea(user, orden: OrdenProduccion, tarea: TareaProduccion) -> None:
    _assert_tareas_editables(orden)
    tarea_id = tarea.id
    nombre = tarea.nombre
    tarea.delete()
    log_event(user, "DELETE", "produccion.TareaProduccion", tarea_id, {"orden_produccion": orden.id, "nombre": nombre})
