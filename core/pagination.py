from __future__ import annotations

import math
from typing import Any

from django.conf import settings
from django.db.models import QuerySet


def bounded_int(value, *, default: int, min_value: int, max_value: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        parsed = default
    return max(min_value, min(parsed, max_value))


def parse_sort(raw_values: list[str], sort_fields: dict[str, str]) -> list[str]:
    """Traduce ``sort=campo,asc`` (nombres del contrato) a ``order_by`` de Django."""
    ordering: list[str] = []
    for raw in raw_values:
        parts = [part.strip() for part in (raw or "").split(",") if part.strip()]
        if not parts:
            continue
        field = sort_fields.get(parts[0])
        if not field:
            continue
        direction = parts[1].lower() if len(parts) > 1 else "asc"
        ordering.append(f"-{field}" if direction == "desc" else field)
    return ordering


def page_response(
    request,
    queryset: QuerySet,
    serializer_class,
    *,
    sort_fields: dict[str, str],
    default_ordering: list[str],
) -> dict[str, Any]:
    default_size = getattr(settings, "API_PAGE_SIZE_DEFAULT", 20)
    max_size = getattr(settings, "API_PAGE_SIZE_MAX", 200)
    page = bounded_int(request.query_params.get("page"), default=0, min_value=0, max_value=1_000_000)
    size = bounded_int(request.query_params.get("size"), default=default_size, min_value=1, max_value=max_size)

    ordering = parse_sort(request.query_params.getlist("sort"), sort_fields)
    total = queryset.count()
    offset = page * size
    order = list(ordering or default_ordering)
    # "id" al final mantiene un orden estable entre páginas.
    if "id" not in order and "-id" not in order:
        order.append("id")
    rows = list(queryset.order_by(*order)[offset : offset + size])
    content = serializer_class(rows, many=True).data

    total_pages = math.ceil(total / size) if total else 0
    sort_info = {"sorted": bool(ordering), "unsorted": not ordering, "empty": not ordering}
    return {
        "content": content,
        "pageable": {
            "sort": sort_info,
            "offset": offset,
            "pageNumber": page,
            "pageSize": size,
            "paged": True,
            "unpaged": False,
        },
        "last": page >= total_pages - 1,
        "totalPages": total_pages,
        "totalElements": total,
        "size": size,
        "number": page,
        "sort": sort_info,
        "first": page == 0,
        "numberOfElements": len(content),
        "empty": not content,
    }
