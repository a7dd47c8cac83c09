import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ConfigurationGroup",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, unique=True)),
                ("description", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Configuration Group",
                "verbose_name_plural": "Configuration Groups",
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="ConfigurationItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(help_text="Dotted configuration key, e.g. 'api.timeout'.", max_length=255)),
                ("value", models.TextField()),
                ("description", models.TextField(blank=True, default="")),
                (
                    "environment",
                    models.CharField(
                        choices=[("DEV", "Development"), ("TEST", "Test"), ("STAGE", "Staging"), ("PROD", "Production")],
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "group",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="configuration.configurationgroup",
                    ),
                ),
            ],
            options={
                "verbose_name": "Configuration Item",
                "verbose_name_plural": "Configuration Items",
                "ordering": ["group", "key", "environment"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("group", "key", "environment"),
                        name="unique_item_key_per_group_environment",
                    )
                ],
            },
        ),
    ]
