from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("maestros", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="OrdenCompra",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("fecha_pedido", models.DateField(default=django.utils.timezone.localdate)),
                ("fecha_entrega_estimada", models.DateField(blank=True, null=True)),
                ("fecha_entrega_real", models.DateField(blank=True, null=True)),
                (
                    "estado",
                    models.CharField(
                        choices=[
                            ("Pendiente", "Pendiente"),
                            ("Enviada", "Enviada"),
                            ("Recibida Parcial", "Recibida parcial"),
                            ("Recibida Total", "Recibida total"),
                            ("Anulada", "Anulada"),
                        ],
                        default="Pendiente",
                        max_length=20,
                    ),
                ),
                ("total", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=16)),
                ("observaciones", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "proveedor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ordenes_compra",
                        to="maestros.proveedor",
                    ),
                ),
            ],
            options={
                "verbose_name": "Orden de compra",
                "verbose_name_plural": "Órdenes de compra",
                "ordering": ["-fecha_pedido", "-id"],
            },
        ),
        migrations.CreateModel(
            name="DetalleOrdenCompra",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("cantidad", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                (
                    "precio_unitario",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                ("subtotal", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=16)),
                (
                    "insumo",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="detalles_compra",
                        to="maestros.insumo",
                    ),
                ),
                (
                    "orden",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="detalles",
                        to="compras.ordencompra",
                    ),
                ),
            ],
            options={
                "verbose_name": "Detalle de orden de compra",
                "verbose_name_plural": "Detalles de orden de compra",
                "ordering": ["id"],
                "unique_together": {("orden", "insumo")},
            },
        ),
    ]
