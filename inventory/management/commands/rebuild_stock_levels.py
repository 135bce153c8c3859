from django.core.management.base import BaseCommand, CommandError
from inventory.ledger import find_projection_drift, rebuild_stock_levels


class Command(BaseCommand):
    help = "Recompute stock levels by replaying the transaction ledger."

    def add_arguments(self, parser):
        parser.add_argument(
            "--check",
            action="store_true",
            help="Only report drift between stock levels and the ledger; exit non-zero if any is found.",
        )

    def handle(self, *args, **options):
        if options["check"]:
            drift = find_projection_drift()
            for row in drift:
                self.stdout.write(
                    f"item={row['item_id']} location={row['location_id']} "
                    f"expected={row['expected']} actual={row['actual']}"
                )
            if drift:
                raise CommandError(f"Stock levels drifted from the ledger: {len(drift)} row(s)")
            self.stdout.write(self.style.SUCCESS("Stock levels match the ledger."))
            return

        corrected = rebuild_stock_levels()
        self.stdout.write(self.style.SUCCESS(f"Stock levels rebuilt: {corrected} row(s) corrected"))
