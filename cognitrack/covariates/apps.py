from django.apps import AppConfig


class CovariatesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "cognitrack.covariates"
