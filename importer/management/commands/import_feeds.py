from django.core.management.base import BaseCommand, CommandError

from importer.scheduler import ImportScheduler


class Command(BaseCommand):
    help = "Queue feed imports, either for one feed URL or for every configured feed"

    def add_arguments(self, parser):
        parser.add_argument(
            "--all",
            action="store_true",
            help="Queue an import for every configured feed source",
        )
        parser.add_argument("--feed-url", help="URL of a single feed to import")
        parser.add_argument(
            "--category",
            help="Category for jobs from --feed-url which carry none of their own",
        )

    def handle(self, *args, **options):
        import_all = options["all"]
        feed_url = options["feed_url"]
        if import_all == bool(feed_url):
            raise CommandError("Pass exactly one of --all or --feed-url")

        scheduler = ImportScheduler()
        if import_all:
            import_logs = scheduler.enqueue_all()
        else:
            import_logs = [scheduler.enqueue_import(feed_url, options["category"])]

        for import_log in import_logs:
            self.stdout.write(
                f"Queued {import_log.import_id} for {import_log.feed_url}"
            )
        self.stdout.write(self.style.SUCCESS(f"Queued {len(import_logs)} imports"))
