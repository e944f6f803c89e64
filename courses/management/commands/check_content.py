"""
Report published content that no longer meets its publishing preconditions
(e.g. a question deleted after the test went live, a lecture file lost on disk).
Usage: python manage.py check_content [--apply]
Without --apply: dry-run only (report, no changes). With --apply the items are hidden.
"""
from django.core.management.base import BaseCommand

from assessments.models import Test
from courses.models import Lecture, Subject
from courses.services.publishing import check_status_change, request_status_change
from courses.storage import lecture_file_exists


class Command(BaseCommand):
    help = 'Find published subjects/lectures/tests whose publishing preconditions no longer hold'

    def add_arguments(self, parser):
        parser.add_argument(
            '--apply',
            action='store_true',
            help='Hide the offending items (default: dry-run only)',
        )

    def handle(self, *args, **options):
        apply = options['apply']
        if not apply:
            self.stdout.write(self.style.WARNING('DRY RUN - no changes will be made. Use --apply to hide.'))

        found = 0
        for model in (Lecture, Test, Subject):
            for item in model.objects.filter(status=model.Status.PUBLISHED):
                result = check_status_change(item, model.Status.PUBLISHED)
                reason = result.reason
                if result.accepted and isinstance(item, Lecture) and not lecture_file_exists(item.file):
                    reason = 'lecture file missing from storage'
                if reason is None:
                    continue
                found += 1
                label = model.__name__.lower()
                self.stdout.write(f'{label} {item.pk} "{item}": {reason}')
                if apply:
                    request_status_change(item, model.Status.HIDDEN)
                    self.stdout.write(self.style.SUCCESS(f'  -> {label} {item.pk} hidden'))

        self.stdout.write(self.style.SUCCESS(f'Done. {found} item(s) found.'))
