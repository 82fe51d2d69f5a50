from django.core.management.base import BaseCommand

from PW_battle import store


class Command(BaseCommand):
    help = "Delete battle sessions whose TTL has run out."

    def handle(self, *args, **options):
        deleted = store.purge_expired()
        self.stdout.write(self.style.SUCCESS(f"Purged {deleted} expired battle session(s)."))
