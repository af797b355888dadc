from django.core.management.base import BaseCommand
from django.utils import timezone

from contents.services import purge_expired_bugs


class Command(BaseCommand):
    help = "Delete bug reports past expires_at together with their likes, bookmarks, comments, notifications and reports."

    def handle(self, *args, **options):
        now = timezone.now()
        deleted = purge_expired_bugs(now=now)
        self.stdout.write(self.style.SUCCESS(f"Purged {deleted} expired bug reports (cutoff={now.isoformat()})."))
