from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("compras", "0001_initial"),
        ("ventas", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PagoCobro",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tipo", models.CharField(choices=[("Pago", "Pago"), ("Cobro", "Cobro")], max_length=10)),
                ("fecha_registro", models.DateTimeField(auto_now_add=True)),
                ("fecha_pago_cobro", models.DateField(default=django.utils.timezone.localdate)),
                ("metodo_pago", models.CharField(max_length=60)),
                (
                    "monto",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=16,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                ("referencia", models.CharField(blank=True, default="", max_length=120)),
                (
                    "estado",
                    models.CharField(
                        choices=[
                            ("Pendiente", "Pendiente"),
                            ("Pagado", "Pagado"),
                            ("Cobrado", "Cobrado"),
                            ("Anulado", "Anulado"),
                        ],
                        default="Pendiente",
                        max_length=20,
                    ),
                ),
                ("observaciones", models.TextField(blank=True, default="")),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "orden_compra",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="pagos",
                        to="compras.ordencompra",
                    ),
                ),
                (
                    "orden_venta",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="cobros",
                        to="ventas.ordenventa",
                    ),
                ),
            ],
            options={
                "verbose_name": "Pago / cobro",
                "verbose_name_plural": "Pagos y cobros",
                "ordering": ["-fecha_registro", "-id"],
            },
        ),
    ]
