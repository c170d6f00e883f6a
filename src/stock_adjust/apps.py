from django.apps import AppConfig


class StockAdjustConfig(AppConfig):
    name = "stock_adjust"
    verbose_name = "Stock adjustment"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self) -> None:
        from .conf import get_setting

        if get_setting("CONFIGURE_LOGGING"):
            from .log import configure_logging

            configure_logging()
