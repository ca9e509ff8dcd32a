from django.core.management.base import BaseCommand

from study.services.seeding import seed_sample_documents


class Command(BaseCommand):
    help = "Install the bundled sample physics chapters (runs once per database)."

    def handle(self, *args, **options):
        created = seed_sample_documents()
        if created:
            self.stdout.write(self.style.SUCCESS(f"Seeded {created} sample documents."))
        else:
            self.stdout.write("Sample documents already present, nothing to do.")
