from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("maestros", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="InventarioInsumo",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("ubicacion", models.CharField(max_length=120)),
                ("cantidad_stock", models.DecimalField(decimal_places=3, default=Decimal("0"), max_digits=18)),
                ("ultima_actualizacion", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "insumo",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="inventarios",
                        to="maestros.insumo",
                    ),
                ),
            ],
            options={
                "verbose_name": "Inventario de insumo",
                "verbose_name_plural": "Inventarios de insumos",
                "ordering": ["insumo__nombre", "ubicacion"],
                "unique_together": {("insumo", "ubicacion")},
            },
        ),
        migrations.CreateModel(
            name="InventarioProducto",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("ubicacion", models.CharField(max_length=120)),
                ("cantidad_stock", models.DecimalField(decimal_places=3, default=Decimal("0"), max_digits=18)),
                ("ultima_actualizacion", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "producto",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="inventarios",
                        to="maestros.producto",
                    ),
                ),
            ],
            options={
                "verbose_name": "Inventario de producto",
                "verbose_name_plural": "Inventarios de productos",
                "ordering": ["producto__nombre", "ubicacion"],
                "unique_together": {("producto", "ubicacion")},
            },
        ),
        migrations.CreateModel(
            name="MovimientoInsumo",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("fecha", models.DateTimeField(default=django.utils.timezone.now)),
                ("tipo", models.CharField(choices=[("Entrada", "Entrada"), ("Salida", "Salida")], max_length=20)),
                ("cantidad", models.DecimalField(decimal_places=3, max_digits=18)),
                ("descripcion", models.CharField(blank=True, default="", max_length=255)),
                (
                    "inventario",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="movimientos",
                        to="inventario.inventarioinsumo",
                    ),
                ),
                (
                    "usuario",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Movimiento de insumo",
                "verbose_name_plural": "Movimientos de insumos",
                "ordering": ["-fecha", "-id"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="MovimientoProducto",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("fecha", models.DateTimeField(default=django.utils.timezone.now)),
                ("tipo", models.CharField(choices=[("Entrada", "Entrada"), ("Salida", "Salida")], max_length=20)),
                ("cantidad", models.DecimalField(decimal_places=3, max_digits=18)),
                ("descripcion", models.CharField(blank=True, default="", max_length=255)),
                (
                    "inventario",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="movimientos",
                        to="inventario.inventarioproducto",
                    ),
                ),
                (
                    "usuario",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Movimiento de producto",
                "verbose_name_plural": "Movimientos de productos",
                "ordering": ["-fecha", "-id"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="AlertaStock",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tipo_item", models.CharField(choices=[("Insumo", "Insumo"), ("Producto", "Producto")], max_length=10)),
                ("mensaje", models.CharField(max_length=255)),
                ("nivel_actual", models.DecimalField(decimal_places=3, default=Decimal("0"), max_digits=18)),
                ("umbral", models.PositiveIntegerField(default=0)),
                (
                    "estado",
                    models.CharField(
                        choices=[("Nueva", "Nueva"), ("Vista", "Vista"), ("Resuelta", "Resuelta")],
                        default="Nueva",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("resuelta_en", models.DateTimeField(blank=True, null=True)),
                (
                    "insumo",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="alertas_stock",
                        to="maestros.insumo",
                    ),
                ),
                (
                    "producto",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="alertas_stock",
                        to="maestros.producto",
                    ),
                ),
            ],
            options={
                "verbose_name": "Alerta de stock",
                "verbose_name_plural": "Alertas de stock",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
