from __future__ import annotations

from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.pagination import bounded_int, page_response


class BaseApiView(APIView):
    permission_classes = [IsAuthenticated]
    filterset_class = None
    sort_fields: dict[str, str] = {}
    default_ordering: list[str] = ["-id"]

    @staticmethod
    def _bounded_int(value, *, default: int, min_value: int, max_value: int) -> int:
        return bounded_int(value, default=default, min_value=min_value, max_value=max_value)

    @staticmethod
    def _require(allowed: bool, message: str) -> None:
        if not allowed:
            raise PermissionDenied(message)

    @staticmethod
    def _get_or_404(queryset, pk, etiqueta: str):
        obj = queryset.filter(pk=pk).first()
        if obj is None:
            raise NotFound(f"No se encontró {etiqueta} con id {pk}.")
        return obj

    def _filter(self, request, queryset):
        if self.filterset_class is None:
            return queryset
        filterset = self.filterset_class(request.query_params, queryset=queryset, request=request)
        if not filterset.is_valid():
            raise ValidationError(filterset.errors)
        return filterset.qs

    def _page(self, request, queryset, serializer_class) -> Response:
        return Response(
            page_response(
                request,
                queryset,
                serializer_class,
                sort_fields=self.sort_fields,
                default_ordering=self.default_ordering,
            )
        )
