from django.apps import AppConfig


class RestComplianceConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "rest_compliance"
    verbose_name = "Rest Compliance"
