from django.urls import path

from .compras_views import (
    AnularOrdenCompraView,
    DetalleOrdenCompraView,
    DetallesOrdenCompraView,
    OrdenCompraDetailView,
    OrdenesCompraPorProveedorView,
    OrdenesCompraView,
)
from .crm_views import (
    CRMClienteDetailView,
    CRMClientePorDocumentoView,
    CRMClientesView,
    CRMContactoDetailView,
    CRMContactosView,
)
from .dashboard_views import DashboardSummaryStatsView
from .inventario_views import (
    AlertaResolverView,
    AlertasActivasView,
    AlertaVistaView,
    InventarioDetailView,
    InventarioPorUbicacionView,
    InventarioProductoDetailView,
    InventarioProductoPorUbicacionView,
    InventariosPorItemView,
    InventariosPorProductoView,
    InventariosProductoView,
    InventariosView,
    MovimientosPorInventarioProductoView,
    MovimientosPorInventarioView,
    MovimientosProductoView,
    MovimientosView,
    StockInventarioProductoView,
    StockInventarioView,
    UmbralInsumoView,
    UmbralProductoView,
)
from .maestros_views import (
    InsumoDetailView,
    InsumoPorNombreView,
    InsumosView,
    ProductoBOMDetailView,
    ProductoBOMView,
    ProductoDetailView,
    ProductoPorReferenciaView,
    ProductosView,
    ProveedorDetailView,
    ProveedoresView,
    ProveedorPorNitView,
)
from .pagos_views import (
    AnularPagoCobroView,
    PagoCobroDetailView,
    PagosCobrosPorOrdenCompraView,
    PagosCobrosPorOrdenVentaView,
    PagosCobrosPorTipoView,
    PagosCobrosView,
)
from .produccion_views import (
    AnularOrdenProduccionView,
    OrdenesProduccionPorVentaView,
    OrdenesProduccionView,
    OrdenProduccionDetailView,
    TareaProduccionDetailView,
    TareasProduccionView,
)
from .rrhh_views import RRHHEmpleadoDetailView, RRHHEmpleadoPorDocumentoView, RRHHEmpleadosView
from .usuarios_views import (
    CambioContrasenaView,
    LoginView,
    PermisoDetailView,
    PermisosPorRolView,
    PermisosView,
    RegisterView,
    RolPermisoDetailView,
    RolPermisosView,
    UsuarioDetailView,
    UsuarioPorNombreView,
    UsuariosView,
)
from .ventas_views import (
    AnularOrdenVentaView,
    DetalleOrdenVentaView,
    DetallesOrdenVentaView,
    OrdenesVentaPorClienteView,
    OrdenesVentaView,
    OrdenVentaDetailView,
)

urlpatterns = [
    path("auth/login", LoginView.as_view(), name="api_auth_login"),
    path("auth/register", RegisterView.as_view(), name="api_auth_register"),
    path("usuarios", UsuariosView.as_view(), name="api_usuarios"),
    path("usuarios/<int:user_id>", UsuarioDetailView.as_view(), name="api_usuario_detail"),
    path("usuarios/username/<str:username>", UsuarioPorNombreView.as_view(), name="api_usuario_username"),
    path("usuarios/<int:user_id>/change-password", CambioContrasenaView.as_view(), name="api_usuario_change_password"),
    path("permisos", PermisosView.as_view(), name="api_permisos"),
    path("permisos/<int:permiso_id>", PermisoDetailView.as_view(), name="api_permiso_detail"),
    path("roles-permisos", RolPermisosView.as_view(), name="api_roles_permisos"),
    path("roles-permisos/<str:rol>/permisos", PermisosPorRolView.as_view(), name="api_roles_permisos_rol"),
    path(
        "roles-permisos/<str:rol>/permisos/<int:permiso_id>",
        RolPermisoDetailView.as_view(),
        name="api_roles_permisos_detail",
    ),
    path("empleados", RRHHEmpleadosView.as_view(), name="api_empleados"),
    path("empleados/<int:empleado_id>", RRHHEmpleadoDetailView.as_view(), name="api_empleado_detail"),
    path("empleados/documento/<str:numero>", RRHHEmpleadoPorDocumentoView.as_view(), name="api_empleado_documento"),
    path("clientes", CRMClientesView.as_view(), name="api_clientes"),
    path("clientes/<int:cliente_id>", CRMClienteDetailView.as_view(), name="api_cliente_detail"),
    path("clientes/documento/<str:numero>", CRMClientePorDocumentoView.as_view(), name="api_cliente_documento"),
    path("clientes/<int:cliente_id>/contactos", CRMContactosView.as_view(), name="api_cliente_contactos"),
    path(
        "clientes/<int:cliente_id>/contactos/<int:contacto_id>",
        CRMContactoDetailView.as_view(),
        name="api_cliente_contacto_detail",
    ),
    path("proveedores", ProveedoresView.as_view(), name="api_proveedores"),
    path("proveedores/<int:proveedor_id>", ProveedorDetailView.as_view(), name="api_proveedor_detail"),
    path("proveedores/nit/<str:nit>", ProveedorPorNitView.as_view(), name="api_proveedor_nit"),
    path("insumos", InsumosView.as_view(), name="api_insumos"),
    path("insumos/<int:insumo_id>", InsumoDetailView.as_view(), name="api_insumo_detail"),
    path("insumos/nombre/<str:nombre>", InsumoPorNombreView.as_view(), name="api_insumo_nombre"),
    path("productos", ProductosView.as_view(), name="api_productos"),
    path("productos/<int:producto_id>", ProductoDetailView.as_view(), name="api_producto_detail"),
    path("productos/referencia/<str:referencia>", ProductoPorReferenciaView.as_view(), name="api_producto_referencia"),
    path("productos/<int:producto_id>/bom", ProductoBOMView.as_view(), name="api_producto_bom"),
    path(
        "productos/<int:producto_id>/bom/<int:insumo_id>",
        ProductoBOMDetailView.as_view(),
        name="api_producto_bom_detail",
    ),
    path("ordenes-venta", OrdenesVentaView.as_view(), name="api_ordenes_venta"),
    path("ordenes-venta/<int:orden_id>", OrdenVentaDetailView.as_view(), name="api_orden_venta_detail"),
    path("ordenes-venta/cliente/<int:cliente_id>", OrdenesVentaPorClienteView.as_view(), name="api_ordenes_venta_cliente"),
    path("ordenes-venta/<int:orden_id>/anular", AnularOrdenVentaView.as_view(), name="api_orden_venta_anular"),
    path("ordenes-venta/<int:orden_id>/detalles", DetallesOrdenVentaView.as_view(), name="api_orden_venta_detalles"),
    path(
        "ordenes-venta/<int:orden_id>/detalles/<int:detalle_id>",
        DetalleOrdenVentaView.as_view(),
        name="api_orden_venta_detalle",
    ),
    path("ordenes-produccion", OrdenesProduccionView.as_view(), name="api_ordenes_produccion"),
    path("ordenes-produccion/<int:orden_id>", OrdenProduccionDetailView.as_view(), name="api_orden_produccion_detail"),
    path(
        "ordenes-produccion/por-orden-venta/<int:orden_venta_id>",
        OrdenesProduccionPorVentaView.as_view(),
        name="api_ordenes_produccion_por_venta",
    ),
    path(
        "ordenes-produccion/<int:orden_id>/anular",
        AnularOrdenProduccionView.as_view(),
        name="api_orden_produccion_anular",
    ),
    path("ordenes-produccion/<int:orden_id>/tareas", TareasProduccionView.as_view(), name="api_orden_produccion_tareas"),
    path(
        "ordenes-produccion/<int:orden_id>/tareas/<int:tarea_id>",
        TareaProduccionDetailView.as_view(),
        name="api_orden_produccion_tarea",
    ),
    path("ordenes-compra", OrdenesCompraView.as_view(), name="api_ordenes_compra"),
    path("ordenes-compra/<int:orden_id>", OrdenCompraDetailView.as_view(), name="api_orden_compra_detail"),
    path(
        "ordenes-compra/proveedor/<int:proveedor_id>",
        OrdenesCompraPorProveedorView.as_view(),
        name="api_ordenes_compra_proveedor",
    ),
    path("ordenes-compra/<int:orden_id>/anular", AnularOrdenCompraView.as_view(), name="api_orden_compra_anular"),
    path("ordenes-compra/<int:orden_id>/detalles", DetallesOrdenCompraView.as_view(), name="api_orden_compra_detalles"),
    path(
        "ordenes-compra/<int:orden_id>/detalles/<int:detalle_id>",
        DetalleOrdenCompraView.as_view(),
        name="api_orden_compra_detalle",
    ),
    path("pagos-cobros", PagosCobrosView.as_view(), name="api_pagos_cobros"),
    path("pagos-cobros/<int:pago_id>", PagoCobroDetailView.as_view(), name="api_pago_cobro_detail"),
    path("pagos-cobros/<int:pago_id>/anular", AnularPagoCobroView.as_view(), name="api_pago_cobro_anular"),
    path("pagos-cobros/tipo/<str:tipo>", PagosCobrosPorTipoView.as_view(), name="api_pagos_cobros_tipo"),
    path(
        "pagos-cobros/orden-venta/<int:orden_id>",
        PagosCobrosPorOrdenVentaView.as_view(),
        name="api_pagos_cobros_orden_venta",
    ),
    path(
        "pagos-cobros/orden-compra/<int:orden_id>",
        PagosCobrosPorOrdenCompraView.as_view(),
        name="api_pagos_cobros_orden_compra",
    ),
    path("inventario-insumos", InventariosView.as_view(), name="api_inventario_insumos"),
    path("inventario-insumos/movimientos", MovimientosView.as_view(), name="api_inventario_insumos_movimientos"),
    path("inventario-insumos/<int:inventario_id>", InventarioDetailView.as_view(), name="api_inventario_insumo_detail"),
    path(
        "inventario-insumos/<int:inventario_id>/movimientos",
        MovimientosPorInventarioView.as_view(),
        name="api_inventario_insumo_movimientos",
    ),
    path(
        "inventario-insumos/<int:inventario_id>/stock",
        StockInventarioView.as_view(),
        name="api_inventario_insumo_stock",
    ),
    path("inventario-insumos/insumo/<int:item_id>", InventariosPorItemView.as_view(), name="api_inventario_por_insumo"),
    path(
        "inventario-insumos/insumo/<int:item_id>/ubicacion/<str:ubicacion>",
        InventarioPorUbicacionView.as_view(),
        name="api_inventario_insumo_ubicacion",
    ),
    path("inventario-productos", InventariosProductoView.as_view(), name="api_inventario_productos"),
    path(
        "inventario-productos/movimientos",
        MovimientosProductoView.as_view(),
        name="api_inventario_productos_movimientos",
    ),
    path(
        "inventario-productos/<int:inventario_id>",
        InventarioProductoDetailView.as_view(),
        name="api_inventario_producto_detail",
    ),
    path(
        "inventario-productos/<int:inventario_id>/movimientos",
        MovimientosPorInventarioProductoView.as_view(),
        name="api_inventario_producto_movimientos",
    ),
    path(
        "inventario-productos/<int:inventario_id>/stock",
        StockInventarioProductoView.as_view(),
        name="api_inventario_producto_stock",
    ),
    path(
        "inventario-productos/producto/<int:item_id>",
        InventariosPorProductoView.as_view(),
        name="api_inventario_por_producto",
    ),
    path(
        "inventario-productos/producto/<int:item_id>/ubicacion/<str:ubicacion>",
        InventarioProductoPorUbicacionView.as_view(),
        name="api_inventario_producto_ubicacion",
    ),
    path("stock-alerts/active", AlertasActivasView.as_view(), name="api_stock_alerts_active"),
    path("stock-alerts/<int:alerta_id>/view", AlertaVistaView.as_view(), name="api_stock_alert_view"),
    path("stock-alerts/<int:alerta_id>/resolve", AlertaResolverView.as_view(), name="api_stock_alert_resolve"),
    path("stock-alerts/threshold/insumo/<int:item_id>", UmbralInsumoView.as_view(), name="api_stock_threshold_insumo"),
    path(
        "stock-alerts/threshold/producto/<int:item_id>",
        UmbralProductoView.as_view(),
        name="api_stock_threshold_producto",
    ),
    path("dashboard/summary-stats", DashboardSummaryStatsView.as_view(), name="api_dashboard_summary_stats"),
]
