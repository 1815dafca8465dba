from decimal import Decimal

import django.core.validators
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Empleado",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "tipo_documento",
                    models.CharField(choices=[("Cédula", "Cédula"), ("Otro", "Otro")], default="Cédula", max_length=20),
                ),
                ("numero_documento", models.CharField(max_length=40, unique=True)),
                ("nombre", models.CharField(max_length=180)),
                ("nombre_normalizado", models.CharField(db_index=True, editable=False, max_length=180)),
                ("cargo", models.CharField(blank=True, default="", max_length=120)),
                ("area", models.CharField(blank=True, default="", max_length=120)),
                (
                    "salario",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                ("fecha_contratacion", models.DateField(default=django.utils.timezone.localdate)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Empleado",
                "verbose_name_plural": "Empleados",
                "ordering": ["nombre", "id"],
            },
        ),
    ]
