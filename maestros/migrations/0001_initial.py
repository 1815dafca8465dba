from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Proveedor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nombre_comercial", models.CharField(max_length=200)),
                ("razon_social", models.CharField(blank=True, default="", max_length=200)),
                ("nit", models.CharField(max_length=40, unique=True)),
                ("direccion", models.CharField(blank=True, default="", max_length=255)),
                ("telefono", models.CharField(blank=True, default="", max_length=40)),
                ("correo", models.EmailField(blank=True, default="", max_length=254)),
                ("contacto_principal", models.CharField(blank=True, default="", max_length=160)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Proveedor",
                "verbose_name_plural": "Proveedores",
                "ordering": ["nombre_comercial", "id"],
            },
        ),
        migrations.CreateModel(
            name="Insumo",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nombre", models.CharField(max_length=250)),
                ("nombre_normalizado", models.CharField(editable=False, max_length=260, unique=True)),
                ("descripcion", models.TextField(blank=True, default="")),
                ("unidad_medida", models.CharField(max_length=30)),
                ("stock_minimo", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Insumo",
                "verbose_name_plural": "Insumos",
                "ordering": ["nombre", "id"],
            },
        ),
        migrations.CreateModel(
            name="Producto",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("referencia", models.CharField(max_length=60, unique=True)),
                ("nombre", models.CharField(max_length=200)),
                ("descripcion", models.TextField(blank=True, default="")),
                ("talla", models.CharField(blank=True, default="", max_length=30)),
                ("color", models.CharField(blank=True, default="", max_length=60)),
                ("tipo", models.CharField(blank=True, default="", max_length=80)),
                ("genero", models.CharField(blank=True, default="", max_length=40)),
                (
                    "costo_produccion",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                (
                    "precio_venta",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                ("unidad_medida", models.CharField(blank=True, default="", max_length=30)),
                ("stock_minimo", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Producto",
                "verbose_name_plural": "Productos",
                "ordering": ["nombre", "id"],
            },
        ),
        migrations.CreateModel(
            name="InsumoPorProducto",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "cantidad_requerida",
                    models.DecimalField(
                        decimal_places=4,
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.0001"))],
                    ),
                ),
                (
                    "insumo",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="usos_bom",
                        to="maestros.insumo",
                    ),
                ),
                (
                    "producto",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bom",
                        to="maestros.producto",
                    ),
                ),
            ],
            options={
                "verbose_name": "Insumo por producto",
                "verbose_name_plural": "Insumos por producto",
                "ordering": ["producto_id", "insumo__nombre"],
                "unique_together": {("producto", "insumo")},
            },
        ),
    ]
