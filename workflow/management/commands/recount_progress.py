from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from projects.models import Project
from workflow.services import recount_project_progress


class Command(BaseCommand):
    help = "Rebuild house and project progress counters from the house activity rows."

    def add_arguments(self, parser):
        parser.add_argument(
            "--project",
            type=str,
            help="Only recount the houses of this project (UUID)."
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report the corrections without writing them."
        )

    def handle(self, *args, **options):
        project = None
        if options["project"]:
            try:
                project = Project.objects.get(pk=options["project"])
            except (Project.DoesNotExist, ValidationError) as e:
                raise CommandError(f"Project {options['project']} not found") from e

        with transaction.atomic():
            corrections = recount_project_progress(project, dry_run=options["dry_run"])

        for item in corrections:
            self.stdout.write(str(item))

        verb = "would be applied" if options["dry_run"] else "applied"
        self.stdout.write(
            self.style.SUCCESS(f"{len(corrections)} correction(s) {verb}")
        )
