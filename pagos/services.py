from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum

from compras.models import OrdenCompra
from core.audit import log_event
from core.exceptions import ConflictoError, ReglaNegocioError
from ventas.models import OrdenVenta

from .models import PagoCobro

logger = logging.getLogger(__name__)


def _validar_estado(tipo: str, estado: str) -> None:
    if estado == PagoCobro.ESTADO_PAGADO and tipo != PagoCobro.TIPO_PAGO:
        raise ReglaNegocioError("El estado 'Pagado' solo aplica a transacciones de tipo 'Pago'.")
    if estado == PagoCobro.ESTADO_COBRADO and tipo != PagoCobro.TIPO_COBRO:
        raise ReglaNegocioError("El estado 'Cobrado' solo aplica a transacciones de tipo 'Cobro'.")


def _validar_referencia(tipo: str, orden_venta, orden_compra) -> None:
    if tipo == PagoCobro.TIPO_COBRO and (orden_venta is None or orden_compra is not None):
        raise ReglaNegocioError("Un cobro debe referenciar una orden de venta y ninguna orden de compra.")
    if tipo == PagoCobro.TIPO_PAGO and (orden_compra is None or orden_venta is not None):
        raise ReglaNegocioError("Un pago debe referenciar una orden de compra y ninguna orden de venta.")


def monto_comprometido(orden) -> Decimal:
    relacion = orden.cobros if isinstance(orden, OrdenVenta) else orden.pagos
    total = relacion.exclude(estado=PagoCobro.ESTADO_ANULADO).aggregate(total=Sum("monto"))["total"]
    return total if total is not None else Decimal("0")


def crear_pago_cobro(
    user,
    *,
    tipo: str,
    monto: Decimal,
    metodo_pago: str,
    fecha_pago_cobro,
    orden_venta=None,
    orden_compra=None,
    referencia: str = "",
    estado: str = PagoCobro.ESTADO_PENDIENTE,
    observaciones: str = "",
) -> PagoCobro:
    _validar_referencia(tipo, orden_venta, orden_compra)
    estado = estado or PagoCobro.ESTADO_PENDIENTE
    if estado == PagoCobro.ESTADO_ANULADO:
        raise ReglaNegocioError("No se puede registrar una transacción directamente como 'Anulado'.")
    _validar_estado(tipo, estado)
    if monto is None or monto <= 0:
        raise ReglaNegocioError("El monto de la transacción debe ser mayor a cero.")

    with transaction.atomic():
        if tipo == PagoCobro.TIPO_COBRO:
            orden = OrdenVenta.objects.select_for_update().get(pk=orden_venta.pk)
            anulada = orden.estado == OrdenVenta.ESTADO_ANULADA
        else:
            orden = OrdenCompra.objects.select_for_update().get(pk=orden_compra.pk)
            anulada = orden.estado == OrdenCompra.ESTADO_ANULADA
        if anulada:
            raise ConflictoError("No se pueden registrar transacciones sobre una orden anulada.")

        comprometido = monto_comprometido(orden)
        if comprometido + monto > orden.total:
            saldo = orden.total - comprometido
            raise ConflictoError(
                f"El monto {monto} excede el saldo disponible de la orden ({saldo}; total {orden.total})."
            )

        pago = PagoCobro.objects.create(
            tipo=tipo,
            orden_venta=orden if tipo == PagoCobro.TIPO_COBRO else None,
            orden_compra=orden if tipo == PagoCobro.TIPO_PAGO else None,
            fecha_pago_cobro=fecha_pago_cobro,
            metodo_pago=metodo_pago,
            monto=monto,
            referencia=referencia or "",
            estado=estado,
            observaciones=observaciones or "",
        )

    log_event(
        user,
        "CREATE",
        "pagos.PagoCobro",
        pago.id,
        {"tipo": tipo, "orden": orden.id, "monto": str(monto), "estado": estado},
    )
    return pago


def actualizar_pago_cobro(user, pago: PagoCobro, data: dict) -> PagoCobro:
    if pago.estado == PagoCobro.ESTADO_ANULADO:
        raise ConflictoError("Una transacción anulada no puede editarse.")

    nuevo_estado = data.get("estado")
    if nuevo_estado == PagoCobro.ESTADO_ANULADO:
        return anular_pago_cobro(user, pago)

    prev_estado = pago.estado
    if nuevo_estado:
        _validar_estado(pago.tipo, nuevo_estado)
        pago.estado = nuevo_estado
    for campo in ("fecha_pago_cobro", "metodo_pago"):
        if data.get(campo):
            setattr(pago, campo, data[campo])
    for campo in ("referencia", "observaciones"):
        if campo in data:
            setattr(pago, campo, data[campo] or "")
    pago.save()

    payload = {"metodo_pago": pago.metodo_pago, "referencia": pago.referencia}
    if pago.estado != prev_estado:
        payload.update({"from": prev_estado, "to": pago.estado})
    log_event(user, "UPDATE", "pagos.PagoCobro", pago.id, payload)
    return pago


def anular_pago_cobro(user, pago: PagoCobro) -> PagoCobro:
    with transaction.atomic():
        pago = PagoCobro.objects.select_for_update().get(pk=pago.pk)
        if pago.estado == PagoCobro.ESTADO_ANULADO:
            raise ConflictoError("La transacción ya está anulada.")
        prev_estado = pago.estado
        pago.estado = PagoCobro.ESTADO_ANULADO
        pago.save(update_fields=["estado", "updated_at"])

    logger.info("pago/cobro %s anulado", pago.id)
    log_event(user, "ANULAR", "pagos.PagoCobro", pago.id, {"from": prev_estado, "to": pago.estado})
    return pago
