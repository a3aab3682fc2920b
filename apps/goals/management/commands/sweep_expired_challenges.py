from django.core.management.base import BaseCommand, CommandError
from django.utils.dateparse import parse_date

from apps.goals.application.progress_coordinator import build_default_coordinator


class Command(BaseCommand):
    help = 'Rozstrzyga challenge, którym minęła data końcowa (uruchamiane z crona)'

    def add_arguments(self, parser):
        parser.add_argument('--date', help='Dzień rozliczenia YYYY-MM-DD (domyślnie dziś)')

    def handle(self, *args, **options):
        day = None
        if options.get('date'):
            day = parse_date(options['date'])
            if day is None:
                raise CommandError(f"Niepoprawna data: {options['date']}")

        coordinator = build_default_coordinator()
        resolved = coordinator.sweep_expired_challenges(now=day)

        self.stdout.write(self.style.SUCCESS(f'Rozstrzygnięto {len(resolved)} challenge.'))
        for goal_id in resolved:
            self.stdout.write(f"- {goal_id}")
