from __future__ import annotations

from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from core.access import RECURSO_EMPLEADOS, can_create, can_delete, can_edit, can_view
from core.audit import log_event
from core.exceptions import ConflictoError
from rrhh.models import Empleado

from .base import BaseApiView
from .filters import EmpleadoFilter
from .rrhh_serializers import RRHHEmpleadoSerializer, RRHHEmpleadoUpdateSerializer


def _empleados_qs():
    return Empleado.objects.select_related("perfil_usuario__user")


class _RRHHBaseView(BaseApiView):
    sort_fields = {
        "idEmpleado": "id",
        "numeroDocumento": "numero_documento",
        "nombreEmpleado": "nombre",
        "cargoEmpleado": "cargo",
        "areaEmpleado": "area",
        "salarioEmpleado": "salario",
        "fechaContratacionEmpleado": "fecha_contratacion",
        "fechaCreacion": "created_at",
    }
    default_ordering = ["nombre"]
    filterset_class = EmpleadoFilter


class RRHHEmpleadosView(_RRHHBaseView):
    def get(self, request):
        self._require(can_view(request.user, RECURSO_EMPLEADOS), "No tienes permisos para consultar empleados.")
        qs = self._filter(request, _empleados_qs())
        return self._page(request, qs, RRHHEmpleadoSerializer)

    def post(self, request):
        self._require(can_create(request.user, RECURSO_EMPLEADOS), "No tienes permisos para crear empleados.")
        serializer = RRHHEmpleadoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        documento = serializer.validated_data["numero_documento"]
        if Empleado.objects.filter(numero_documento__iexact=documento).exists():
            raise ConflictoError(f"Ya existe un empleado con documento '{documento}'.")
        empleado = serializer.save()
        log_event(
            request.user,
            "CREATE",
            "rrhh.Empleado",
            empleado.id,
            {"numero_documento": empleado.numero_documento, "nombre": empleado.nombre},
        )
        return Response(RRHHEmpleadoSerializer(empleado).data, status=status.HTTP_201_CREATED)


class RRHHEmpleadoDetailView(_RRHHBaseView):
    def get(self, request, empleado_id: int):
        self._require(can_view(request.user, RECURSO_EMPLEADOS), "No tienes permisos para consultar empleados.")
        empleado = self._get_or_404(_empleados_qs(), empleado_id, "el empleado")
        return Response(RRHHEmpleadoSerializer(empleado).data)

    def put(self, request, empleado_id: int):
        self._require(can_edit(request.user, RECURSO_EMPLEADOS), "No tienes permisos para editar empleados.")
        empleado = self._get_or_404(_empleados_qs(), empleado_id, "el empleado")
        serializer = RRHHEmpleadoUpdateSerializer(empleado, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        empleado = serializer.save()
        log_event(
            request.user,
            "UPDATE",
            "rrhh.Empleado",
            empleado.id,
            {"nombre": empleado.nombre, "cargo": empleado.cargo, "area": empleado.area},
        )
        return Response(RRHHEmpleadoSerializer(empleado).data)

    def delete(self, request, empleado_id: int):
        self._require(can_delete(request.user, RECURSO_EMPLEADOS), "No tienes permisos para eliminar empleados.")
        empleado = self._get_or_404(Empleado.objects.all(), empleado_id, "el empleado")
        documento = empleado.numero_documento
        empleado.delete()
        log_event(request.user, "DELETE", "rrhh.Empleado", empleado_id, {"numero_documento": documento})
        return Response(status=status.HTTP_204_NO_CONTENT)


class RRHHEmpleadoPorDocumentoView(_RRHHBaseView):
    def get(self, request, numero: str):
        self._require(can_view(request.user, RECURSO_EMPLEADOS), "No tienes permisos para consultar empleados.")
        empleado = _empleados_qs().filter(numero_documento__iexact=numero.strip()).first()
        if empleado is None:
            raise NotFound(f"No se encontró un empleado con documento '{numero}'.")
        return Response(RRHHEmpleadoSerializer(empleado).data)
