from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from study.models import Chunk, Document, SeedMarker
from study.services.seeding import SAMPLE_DOCUMENTS, SAMPLE_MARKER, seed_sample_documents


class SeedSampleDocumentsTests(TestCase):
    def test_first_run_installs_samples(self):
        created = seed_sample_documents()

        self.assertEqual(created, len(SAMPLE_DOCUMENTS))
        self.assertEqual(Document.objects.filter(is_sample=True).count(), 3)
        self.assertTrue(SeedMarker.objects.filter(name=SAMPLE_MARKER).exists())
        for document in Document.objects.all():
            indexes = list(document.chunks.values_list('chunk_index', flat=True))
            self.assertEqual(indexes, list(range(len(indexes))))

    def test_second_run_is_a_no_op(self):
        seed_sample_documents()
        chunk_count = Chunk.objects.count()

        self.assertEqual(seed_sample_documents(), 0)
        self.assertEqual(Document.objects.count(), 3)
        self.assertEqual(Chunk.objects.count(), chunk_count)

    def test_samples_are_not_reinstalled_after_deletion(self):
        seed_sample_documents()
        Document.objects.all().delete()

        self.assertEqual(seed_sample_documents(), 0)
        self.assertEqual(Document.objects.count(), 0)


class SeedSamplesCommandTests(TestCase):
    def test_command_reports_outcome(self):
        out = StringIO()
        call_command('seed_samples', stdout=out)
        call_command('seed_samples', stdout=out)

        output = out.getvalue()
        self.assertIn("Seeded 3 sample documents.", output)
        self.assertIn("already present", output)
        self.assertEqual(Document.objects.count(), 3)
