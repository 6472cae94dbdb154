"""Management command to compare two periods of scored results and print the interpretation."""
import datetime
import json
import logging
from pathlib import Path
from types import SimpleNamespace

from django.core.management.base import BaseCommand
from django.core.management.base import CommandError

from cognitrack.analysis.helpers.period_stats import METRICS
from cognitrack.analysis.helpers.period_stats import analyze_statistical_significance
from cognitrack.analysis.helpers.significance import get_recommendation
from cognitrack.analysis.helpers.significance import get_significance_interpretation

logger = logging.getLogger(__name__)


def _datetime(value):
    dt = datetime.datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt


def _load_results(path):
    """Read a JSON list of {"timestamp", "score", "reaction_time", "accuracy"} records."""
    try:
        rows = json.loads(path.read_text())
    except FileNotFoundError:
        raise CommandError(f"No such file: {path}")
    except json.JSONDecodeError as exc:
        raise CommandError(f"{path} is not valid JSON: {exc}")
    try:
        return [
            SimpleNamespace(
                timestamp=_datetime(row["timestamp"]),
                score=row["score"],
                reaction_time=row["reaction_time"],
                accuracy=row["accuracy"],
            )
            for row in rows
        ]
    except (KeyError, TypeError, ValueError) as exc:
        raise CommandError(f"Malformed result record in {path}: {exc}")


class Command(BaseCommand):
    help = "Test whether performance changed significantly between a baseline and a comparison period."

    def add_arguments(self, parser):
        parser.add_argument("path", type=Path, help="JSON file holding a list of scored results.")
        parser.add_argument(
            "--baseline",
            nargs=2,
            type=_datetime,
            required=True,
            metavar=("START", "END"),
            help="Baseline period bounds (ISO 8601).",
        )
        parser.add_argument(
            "--comparison",
            nargs=2,
            type=_datetime,
            required=True,
            metavar=("START", "END"),
            help="Comparison period bounds (ISO 8601).",
        )
        parser.add_argument("--alpha", type=float, default=None, help="Significance level. Defaults to settings.")

    def handle(self, *args, **options):
        results = _load_results(options["path"])
        analysis = analyze_statistical_significance(
            results,
            tuple(options["baseline"]),
            tuple(options["comparison"]),
            alpha=options["alpha"],
        )
        if not analysis["success"]:
            raise CommandError(analysis["error"])

        significance = analysis["significance_analysis"]
        logger.info(
            "Analysed %d baseline vs %d comparison results",
            analysis["baseline_period"]["sample_size"],
            analysis["comparison_period"]["sample_size"],
        )
        for metric in METRICS:
            self.stdout.write(f"{metric}: {get_significance_interpretation(significance[metric])}")
        self.stdout.write(self.style.SUCCESS(get_recommendation(significance)))
