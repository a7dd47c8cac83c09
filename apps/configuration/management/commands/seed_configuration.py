"""
manage.py seed_configuration – load sample groups and items.

Existing groups and items are left untouched, so the command can be re-run.
"""
import structlog
from django.core.management.base import BaseCommand

from apps.configuration import services
from apps.configuration.models import ConfigurationGroup, ConfigurationItem

logger = structlog.get_logger(__name__)

SAMPLE_GROUPS = {
    "api-service": "API Gateway Configuration",
    "user-service": "User Management Service Configuration",
    "payment-service": "Payment Processing Service Configuration",
    "notification-service": "Notification Service Configuration",
}

#: (group, key) -> {environment: value}
SAMPLE_ITEMS = {
    ("api-service", "api.timeout"): {"DEV": "30", "STAGE": "20", "PROD": "10"},
    ("api-service", "api.max-connections"): {"DEV": "100", "STAGE": "200", "PROD": "500"},
    ("user-service", "user.session.timeout"): {"DEV": "60", "STAGE": "45", "PROD": "30"},
    ("user-service", "user.password.expiry"): {"DEV": "90", "STAGE": "60", "PROD": "30"},
    ("payment-service", "payment.retry.count"): {"DEV": "3", "STAGE": "3", "PROD": "5"},
    ("payment-service", "payment.gateway.url"): {
        "DEV": "https://dev-payment-gateway.example.com",
        "STAGE": "https://stage-payment-gateway.example.com",
        "PROD": "https://payment-gateway.example.com",
    },
    ("notification-service", "notification.email.from"): {
        "DEV": "dev-noreply@example.com",
        "STAGE": "stage-noreply@example.com",
        "PROD": "noreply@example.com",
    },
    ("notification-service", "notification.sms.enabled"): {
        "DEV": "true",
        "STAGE": "true",
        "PROD": "true",
    },
}


class Command(BaseCommand):
    help = "Create sample configuration groups and items for DEV, STAGE and PROD"

    def handle(self, *args, **options):
        groups = {}
        for name, description in SAMPLE_GROUPS.items():
            group = ConfigurationGroup.objects.filter(name=name).first()
            if group is None:
                group = services.create_group(name=name, description=description)
            groups[name] = group

        created = 0
        for (group_name, key), values in SAMPLE_ITEMS.items():
            group = groups[group_name]
            for environment, value in values.items():
                exists = ConfigurationItem.objects.filter(
                    group=group, key=key, environment=environment
                ).exists()
                if exists:
                    continue
                services.create_item(
                    key=key, value=value, environment=environment, group_id=group.id
                )
                created += 1

        logger.info("sample_configuration_seeded", groups=len(groups), items_created=created)
        self.stdout.write(
            self.style.SUCCESS(f"Seeded {len(groups)} groups, created {created} item(s)")
        )
