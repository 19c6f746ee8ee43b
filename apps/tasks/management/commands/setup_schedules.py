"""
Management command to set up Django-Q2 schedules for the daily task jobs.

This command creates/updates the scheduled tasks required for:
- Daily task duplication (yesterday's completed daily tasks → today)
- Daily task reset (completed daily tasks → pending)
- Hourly purge of expired notices

Cron expressions come from DAILY_TASK_DUPLICATE_CRON,
DAILY_TASK_RESET_CRON and NOTICE_PURGE_CRON and are evaluated in TIME_ZONE.

Usage:
    python manage.py setup_schedules

The command is idempotent - safe to run multiple times.
Existing schedules will be updated if their configuration changes.
"""
from django.conf import settings
from django.core.management.base import BaseCommand
from django_q.models import Schedule


SCHEDULES = (
    {
        'name': 'Daily Task Duplication',
        'func': 'apps.tasks.jobs.run_duplicate_job',
        'setting': 'DAILY_TASK_DUPLICATE_CRON',
    },
    {
        'name': 'Daily Task Reset',
        'func': 'apps.tasks.jobs.run_reset_job',
        'setting': 'DAILY_TASK_RESET_CRON',
    },
    {
        'name': 'Expired Notice Purge',
        'func': 'apps.notifications.tasks.purge_expired_notices',
        'setting': 'NOTICE_PURGE_CRON',
    },
)


class Command(BaseCommand):
    help = 'Set up Django-Q2 schedules for daily task rollover and notice jobs'

    def handle(self, *args, **options):
        self.stdout.write('\nSetting up Django-Q2 schedules...\n')

        schedules_created = 0
        schedules_updated = 0

        for entry in SCHEDULES:
            cron = getattr(settings, entry['setting'])
            _, created = Schedule.objects.update_or_create(
                name=entry['name'],
                defaults={
                    'func': entry['func'],
                    'schedule_type': Schedule.CRON,
                    'cron': cron,
                    'repeats': -1,  # Run forever
                },
            )
            if created:
                schedules_created += 1
                self.stdout.write(
                    self.style.SUCCESS(f"✓ Created schedule: {entry['name']} ({cron})")
                )
            else:
                schedules_updated += 1
                self.stdout.write(
                    self.style.WARNING(f"↻ Updated schedule: {entry['name']} ({cron})")
                )

        total = schedules_created + schedules_updated
        self.stdout.write('')
        self.stdout.write(
            self.style.SUCCESS(
                f'Done! {schedules_created} schedule(s) created, '
                f'{schedules_updated} schedule(s) updated. '
                f'Total: {total} schedules configured.'
            )
        )

        self.stdout.write('')
        self.stdout.write(
            self.style.NOTICE(
                'Note: Ensure Django-Q cluster is running: python manage.py qcluster'
            )
        )
        self.stdout.write('')
