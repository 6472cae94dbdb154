"""Management command to score a raw session payload exported from the task runner."""
import json
import logging
from pathlib import Path

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand
from django.core.management.base import CommandError

from cognitrack.tasks.registry import TEST_REGISTRY
from cognitrack.tasks.registry import score_test

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Score a raw n-back or reaction-time session (JSON) and print the result."

    def add_arguments(self, parser):
        parser.add_argument("path", type=Path, help="JSON file holding the session payload.")
        parser.add_argument(
            "--test-type",
            default=None,
            help=(
                f"One of {', '.join(TEST_REGISTRY)}. "
                "Defaults to the payload's test_type key."
            ),
        )

    def handle(self, *args, **options):
        path = options["path"]
        try:
            payload = json.loads(path.read_text())
        except FileNotFoundError:
            raise CommandError(f"No such file: {path}")
        except json.JSONDecodeError as exc:
            raise CommandError(f"{path} is not valid JSON: {exc}")

        test_type = options["test_type"] or payload.get("test_type")
        try:
            result = score_test(test_type, payload)
        except ValidationError as exc:
            raise CommandError("; ".join(exc.messages))

        logger.info("Scored %s session from %s: score=%s", test_type, path, result["score"])
        summary = {k: v for k, v in result.items() if k != "raw_data"}
        self.stdout.write(json.dumps(summary, indent=2))
