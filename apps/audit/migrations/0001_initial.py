from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "action",
                    models.CharField(
                        choices=[("CREATE", "Create"), ("UPDATE", "Update"), ("DELETE", "Delete")],
                        max_length=10,
                    ),
                ),
                (
                    "entity_type",
                    models.CharField(
                        choices=[("Group", "Configuration group"), ("ConfigItem", "Configuration item")],
                        max_length=20,
                    ),
                ),
                ("entity_id", models.BigIntegerField()),
                ("old_value", models.TextField(blank=True, null=True)),
                ("new_value", models.TextField(blank=True, null=True)),
                (
                    "user_id",
                    models.CharField(
                        help_text="Username of the actor, or 'system' for unattended changes.",
                        max_length=150,
                    ),
                ),
                ("timestamp", models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                "verbose_name": "Audit Log Entry",
                "verbose_name_plural": "Audit Log",
                "ordering": ["-timestamp", "-id"],
                "indexes": [models.Index(fields=["entity_type", "entity_id"], name="audit_entity_idx")],
            },
        ),
    ]
