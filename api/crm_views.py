from __future__ import annotations

from django.db.models import Prefetch
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from core.access import RECURSO_CLIENTES, can_create, can_delete, can_edit, can_view
from core.audit import log_event
from core.exceptions import ConflictoError, ReglaNegocioError
from crm.models import Cliente, ContactoCliente

from .base import BaseApiView
from .crm_serializers import CRMClienteSerializer, CRMContactoSerializer
from .filters import ClienteFilter


def _clientes_qs():
    return Cliente.objects.prefetch_related(Prefetch("contactos", queryset=ContactoCliente.objects.order_by("id")))


def _assert_documento_libre(documento: str, exclude_id: int | None = None) -> None:
    qs = Cliente.objects.filter(numero_documento__iexact=documento)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    if qs.exists():
        raise ConflictoError(f"Ya existe un cliente con documento '{documento}'.")


class _CRMBaseView(BaseApiView):
    sort_fields = {
        "idCliente": "id",
        "numeroDocumento": "numero_documento",
        "nombreCliente": "nombre",
        "tipoDocumento": "tipo_documento",
        "fechaCreacion": "created_at",
    }
    default_ordering = ["nombre"]
    filterset_class = ClienteFilter

    def _cliente(self, cliente_id: int) -> Cliente:
        return self._get_or_404(_clientes_qs(), cliente_id, "el cliente")


class CRMClientesView(_CRMBaseView):
    def get(self, request):
        self._require(can_view(request.user, RECURSO_CLIENTES), "No tienes permisos para consultar clientes.")
        qs = self._filter(request, _clientes_qs())
        return self._page(request, qs, CRMClienteSerializer)

    def post(self, request):
        self._require(can_create(request.user, RECURSO_CLIENTES), "No tienes permisos para crear clientes.")
        serializer = CRMClienteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        _assert_documento_libre(serializer.validated_data["numero_documento"])
        cliente = serializer.save()
        log_event(
            request.user,
            "CREATE",
            "crm.Cliente",
            cliente.id,
            {"numero_documento": cliente.numero_documento, "nombre": cliente.nombre},
        )
        return Response(CRMClienteSerializer(cliente).data, status=status.HTTP_201_CREATED)


class CRMClienteDetailView(_CRMBaseView):
    def get(self, request, cliente_id: int):
        self._require(can_view(request.user, RECURSO_CLIENTES), "No tienes permisos para consultar clientes.")
        return Response(CRMClienteSerializer(self._cliente(cliente_id)).data)

    def put(self, request, cliente_id: int):
        self._require(can_edit(request.user, RECURSO_CLIENTES), "No tienes permisos para editar clientes.")
        cliente = self._cliente(cliente_id)
        serializer = CRMClienteSerializer(cliente, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        if "numero_documento" in serializer.validated_data:
            _assert_documento_libre(serializer.validated_data["numero_documento"], cliente.id)
        cliente = serializer.save()
        log_event(request.user, "UPDATE", "crm.Cliente", cliente.id, {"nombre": cliente.nombre})
        return Response(CRMClienteSerializer(self._cliente(cliente.id)).data)

    def delete(self, request, cliente_id: int):
        self._require(can_delete(request.user, RECURSO_CLIENTES), "No tienes permisos para eliminar clientes.")
        cliente = self._get_or_404(Cliente.objects.all(), cliente_id, "el cliente")
        if cliente.ordenes_venta.exists():
            raise ConflictoError("El cliente tiene órdenes de venta registradas y no puede eliminarse.")
        documento = cliente.numero_documento
        cliente.delete()
        log_event(request.user, "DELETE", "crm.Cliente", cliente_id, {"numero_documento": documento})
        return Response(status=status.HTTP_204_NO_CONTENT)


class CRMClientePorDocumentoView(_CRMBaseView):
    def get(self, request, numero: str):
        self._require(can_view(request.user, RECURSO_CLIENTES), "No tienes permisos para consultar clientes.")
        cliente = _clientes_qs().filter(numero_documento__iexact=numero.strip()).first()
        if cliente is None:
            raise NotFound(f"No se encontró un cliente con documento '{numero}'.")
        return Response(CRMClienteSerializer(cliente).data)


class CRMContactosView(_CRMBaseView):
    def get(self, request, cliente_id: int):
        self._require(can_view(request.user, RECURSO_CLIENTES), "No tienes permisos para consultar clientes.")
        cliente = self._cliente(cliente_id)
        return Response(CRMContactoSerializer(cliente.contactos.order_by("id"), many=True).data)

    def post(self, request, cliente_id: int):
        self._require(can_edit(request.user, RECURSO_CLIENTES), "No tienes permisos para editar clientes.")
        cliente = self._cliente(cliente_id)
        serializer = CRMContactoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        body_cliente = serializer.validated_data.pop("cliente_id", None)
        if body_cliente is not None and body_cliente != cliente.id:
            raise ReglaNegocioError("El idCliente del cuerpo no coincide con el de la ruta.")
        contacto = serializer.save(cliente=cliente)
        log_event(
            request.user,
            "CREATE",
            "crm.ContactoCliente",
            contacto.id,
            {"cliente": cliente.id, "nombre": contacto.nombre},
        )
        return Response(CRMContactoSerializer(contacto).data, status=status.HTTP_201_CREATED)


class CRMContactoDetailView(_CRMBaseView):
    def _contacto(self, cliente: Cliente, contacto_id: int) -> ContactoCliente:
        contacto = cliente.contactos.filter(pk=contacto_id).first()
        if contacto is None:
            raise NotFound(f"No se encontró el contacto {contacto_id} del cliente {cliente.id}.")
        return contacto

    def put(self, request, cliente_id: int, contacto_id: int):
        self._require(can_edit(request.user, RECURSO_CLIENTES), "No tienes permisos para editar clientes.")
        cliente = self._cliente(cliente_id)
        contacto = self._contacto(cliente, contacto_id)
        serializer = CRMContactoSerializer(contacto, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        body_cliente = serializer.validated_data.pop("cliente_id", None)
        if body_cliente is not None and body_cliente != cliente.id:
            raise ReglaNegocioError("El idCliente del cuerpo no coincide con el de la ruta.")
        contacto = serializer.save()
        log_event(request.user, "UPDATE", "crm.ContactoCliente", contacto.id, {"cliente": cliente.id})
        return Response(CRMContactoSerializer(contacto).data)

    def delete(self, request, cliente_id: int, contacto_id: int):
        self._require(can_edit(request.user, RECURSO_CLIENTES), "No tienes permisos para editar clientes.")
        cliente = self._cliente(cliente_id)
        contacto = self._contacto(cliente, contacto_id)
        contacto.delete()
        log_event(request.user, "DELETE", "crm.ContactoCliente", contacto_id, {"cliente": cliente.id})
        return Response(status=status.HTTP_204_NO_CONTENT)
