from django.db.models import Q
from django_filters import rest_framework as filters

from compras.models import OrdenCompra
from crm.models import Cliente
from inventario.models import InventarioInsumo, InventarioProducto
from maestros.models import Insumo, Producto, Proveedor
from pagos.models import PagoCobro
from produccion.models import OrdenProduccion
from rrhh.models import Empleado
from ventas.models import OrdenVenta


def _search(queryset, value, *fields):
    value = (value or "").strip()
    if not value:
        return queryset
    query = Q()
    for field in fields:
        query |= Q(**{f"{field}__icontains": value})
    return queryset.filter(query)


class EmpleadoFilter(filters.FilterSet):
    q = filters.CharFilter(method="filter_q")
    areaEmpleado = filters.CharFilter(field_name="area", lookup_expr="iexact")
    cargoEmpleado = filters.CharFilter(field_name="cargo", lookup_expr="icontains")

    class Meta:
        model = Empleado
        fields = ["q", "areaEmpleado", "cargoEmpleado"]

    def filter_q(self, queryset, name, value):
        return _search(queryset, value, "nombre", "numero_documento", "cargo", "area")


class ClienteFilter(filters.FilterSet):
    q = filters.CharFilter(method="filter_q")
    tipoDocumento = filters.CharFilter(field_name="tipo_documento")

    class Meta:
        model = Cliente
        fields = ["q", "tipoDocumento"]

    def filter_q(self, queryset, name, value):
        return _search(queryset, value, "nombre", "numero_documento", "correo", "telefono")


class ProveedorFilter(filters.FilterSet):
    q = filters.CharFilter(method="filter_q")

    class Meta:
        model = Proveedor
        fields = ["q"]

    def filter_q(self, queryset, name, value):
        return _search(queryset, value, "nombre_comercial", "razon_social", "nit")


class InsumoFilter(filters.FilterSet):
    q = filters.CharFilter(method="filter_q")
    unidadMedidaInsumo = filters.CharFilter(field_name="unidad_medida", lookup_expr="iexact")

    class Meta:
        model = Insumo
        fields = ["q", "unidadMedidaInsumo"]

    def filter_q(self, queryset, name, value):
        return _search(queryset, value, "nombre", "descripcion")


class ProductoFilter(filters.FilterSet):
    q = filters.CharFilter(method="filter_q")
    tipoProducto = filters.CharFilter(field_name="tipo", lookup_expr="iexact")
    generoProducto = filters.CharFilter(field_name="genero", lookup_expr="iexact")
    precioMin = filters.NumberFilter(field_name="precio_venta", lookup_expr="gte")
    precioMax = filters.NumberFilter(field_name="precio_venta", lookup_expr="lte")

    class Meta:
        model = Producto
        fields = ["q", "tipoProducto", "generoProducto", "precioMin", "precioMax"]

    def filter_q(self, queryset, name, value):
        return _search(queryset, value, "referencia", "nombre", "descripcion", "color")


class OrdenVentaFilter(filters.FilterSet):
    q = filters.CharFilter(method="filter_q")
    estado = filters.ChoiceFilter(field_name="estado", choices=OrdenVenta.ESTADO_CHOICES)
    idCliente = filters.NumberFilter(field_name="cliente_id")
    fechaDesde = filters.DateFilter(field_name="fecha_pedido", lookup_expr="gte")
    fechaHasta = filters.DateFilter(field_name="fecha_pedido", lookup_expr="lte")

    class Meta:
        model = OrdenVenta
        fields = ["q", "estado", "idCliente", "fechaDesde", "fechaHasta"]

    def filter_q(self, queryset, name, value):
        return _search(queryset, value, "cliente__nombre", "cliente__numero_documento", "observaciones")


class OrdenProduccionFilter(filters.FilterSet):
    estado = filters.ChoiceFilter(field_name="estado", choices=OrdenProduccion.ESTADO_CHOICES)
    idOrdenVenta = filters.NumberFilter(field_name="orden_venta_id")
    fechaDesde = filters.DateFilter(field_name="created_at__date", lookup_expr="gte")
    fechaHasta = filters.DateFilter(field_name="created_at__date", lookup_expr="lte")

    class Meta:
        model = OrdenProduccion
        fields = ["estado", "idOrdenVenta", "fechaDesde", "fechaHasta"]


class OrdenCompraFilter(filters.FilterSet):
    q = filters.CharFilter(method="filter_q")
    estado = filters.ChoiceFilter(field_name="estado", choices=OrdenCompra.ESTADO_CHOICES)
    idProveedor = filters.NumberFilter(field_name="proveedor_id")
    fechaDesde = filters.DateFilter(field_name="fecha_pedido", lookup_expr="gte")
    fechaHasta = filters.DateFilter(field_name="fecha_pedido", lookup_expr="lte")

    class Meta:
        model = OrdenCompra
        fields = ["q", "estado", "idProveedor", "fechaDesde", "fechaHasta"]

    def filter_q(self, queryset, name, value):
        return _search(queryset, value, "proveedor__nombre_comercial", "proveedor__nit", "observaciones")


class PagoCobroFilter(filters.FilterSet):
    q = filters.CharFilter(method="filter_q")
    tipo = filters.ChoiceFilter(field_name="tipo", choices=PagoCobro.TIPO_CHOICES)
    estado = filters.ChoiceFilter(field_name="estado", choices=PagoCobro.ESTADO_CHOICES)
    fechaDesde = filters.DateFilter(field_name="fecha_pago_cobro", lookup_expr="gte")
    fechaHasta = filters.DateFilter(field_name="fecha_pago_cobro", lookup_expr="lte")

    class Meta:
        model = PagoCobro
        fields = ["q", "tipo", "estado", "fechaDesde", "fechaHasta"]

    def filter_q(self, queryset, name, value):
        return _search(queryset, value, "referencia", "metodo_pago", "observaciones")


class InventarioInsumoFilter(filters.FilterSet):
    q = filters.CharFilter(method="filter_q")
    ubicacion = filters.CharFilter(field_name="ubicacion", lookup_expr="iexact")

    class Meta:
        model = InventarioInsumo
        fields = ["q", "ubicacion"]

    def filter_q(self, queryset, name, value):
        return _search(queryset, value, "insumo__nombre", "ubicacion")


class InventarioProductoFilter(filters.FilterSet):
    q = filters.CharFilter(method="filter_q")
    ubicacion = filters.CharFilter(field_name="ubicacion", lookup_expr="iexact")

    class Meta:
        model = InventarioProducto
        fields = ["q", "ubicacion"]

    def filter_q(self, queryset, name, value):
        return _search(queryset, value, "producto__nombre", "producto__referencia", "ubicacion")
