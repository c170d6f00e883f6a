import json

from django.core.management.base import BaseCommand, CommandError
from django.core.serializers.json import DjangoJSONEncoder

from stock_adjust.exceptions import StockAdjustError
from stock_adjust.operations import OPERATIONS
from stock_adjust.service import adjust_stock


class Command(BaseCommand):
    help = "Add to, subtract from, or set the stock level of a product."

    def add_arguments(self, parser):
        parser.add_argument("product_id")
        parser.add_argument("quantity", type=int)
        parser.add_argument("operation", choices=OPERATIONS)
        parser.add_argument(
            "--timeout",
            type=float,
            default=None,
            help="Seconds to wait for the product's lock (default: LOCK_TIMEOUT).",
        )

    def handle(self, *args, **options):
        kwargs = {}
        if options["timeout"] is not None:
            kwargs["timeout"] = options["timeout"]

        try:
            result = adjust_stock(
                options["product_id"], options["quantity"], options["operation"], **kwargs
            )
        except StockAdjustError as exc:
            raise CommandError(f"{exc} ({exc.status})") from exc

        self.stdout.write(json.dumps(result.as_response(), cls=DjangoJSONEncoder))
