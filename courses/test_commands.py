"""
check_content management command.
"""
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from assessments.models import Test as Quiz
from core.testing import CourseFixture
from courses.models import Lecture


class CheckContentCommandTests(TestCase):
    def setUp(self):
        self.fx = CourseFixture()

    def _run(self, *args):
        out = StringIO()
        call_command("check_content", *args, stdout=out)
        return out.getvalue()

    def test_dry_run_reports_without_changes(self):
        self.fx.question.delete()
        output = self._run()
        self.assertIn("DRY RUN", output)
        self.assertIn(f"test {self.fx.test.pk}", output)
        self.assertIn("test has no questions", output)
        self.fx.test.refresh_from_db()
        self.assertEqual(self.fx.test.status, Quiz.Status.PUBLISHED)

    def test_missing_file_reported(self):
        output = self._run()
        self.assertIn(f"lecture {self.fx.lecture.pk}", output)
        self.assertIn("lecture file missing from storage", output)

    def test_apply_hides_offending_items(self):
        self.fx.question.delete()
        self._run("--apply")
        self.fx.test.refresh_from_db()
        self.fx.lecture.refresh_from_db()
        self.assertEqual(self.fx.test.status, Quiz.Status.HIDDEN)
        self.assertEqual(self.fx.lecture.status, Lecture.Status.HIDDEN)
