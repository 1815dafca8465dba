import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("rrhh", "0001_initial"),
        ("ventas", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="OrdenProduccion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("fecha_inicio", models.DateField(blank=True, null=True)),
                ("fecha_fin_estimada", models.DateField(blank=True, null=True)),
                ("fecha_fin_real", models.DateField(blank=True, null=True)),
                (
                    "estado",
                    models.CharField(
                        choices=[
                            ("Pendiente", "Pendiente"),
                            ("En Proceso", "En proceso"),
                            ("Terminada", "Terminada"),
                            ("Retrasada", "Retrasada"),
                            ("Anulada", "Anulada"),
                        ],
                        default="Pendiente",
                        max_length=20,
                    ),
                ),
                ("observaciones", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "orden_venta",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ordenes_produccion",
                        to="ventas.ordenventa",
                    ),
                ),
            ],
            options={
                "verbose_name": "Orden de producción",
                "verbose_name_plural": "Órdenes de producción",
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="TareaProduccion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nombre", models.CharField(max_length=160)),
                ("fecha_inicio", models.DateTimeField(blank=True, null=True)),
                ("fecha_fin", models.DateTimeField(blank=True, null=True)),
                ("duracion_estimada", models.DurationField(blank=True, null=True)),
                ("duracion_real", models.DurationField(blank=True, null=True)),
                (
                    "estado",
                    models.CharField(
                        choices=[
                            ("Pendiente", "Pendiente"),
                            ("En Curso", "En curso"),
                            ("Completada", "Completada"),
                            ("Bloqueada", "Bloqueada"),
                        ],
                        default="Pendiente",
                        max_length=20,
                    ),
                ),
                ("observaciones", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "empleado",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="tareas_produccion",
                        to="rrhh.empleado",
                    ),
                ),
                (
                    "orden_produccion",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tareas",
                        to="produccion.ordenproduccion",
                    ),
                ),
            ],
            options={
                "verbose_name": "Tarea de producción",
                "verbose_name_plural": "Tareas de producción",
                "ordering": ["id"],
            },
        ),
    ]
