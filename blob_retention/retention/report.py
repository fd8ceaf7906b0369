"""Per-category outcome accumulation and the final run report."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping

from blob_retention.retention.categories import Category
from blob_retention.storage.base import DeleteResult


@dataclass
class CategoryOutcome:
    """Mutable counters for one category during a run."""
    deleted: int = 0
    kept: int = 0
    skipped: int = 0
    errors: int = 0

    @property
    def processed(self) -> int:
        return self.deleted + self.kept + self.skipped + self.errors

    def as_dict(self) -> Dict[str, int]:
        return {
            "deleted": self.deleted,
            "kept": self.kept,
            "skipped": self.skipped,
            "errors": self.errors,
        }

    def __add__(self, other: "CategoryOutcome") -> "CategoryOutcome":
        return CategoryOutcome(
            deleted=self.deleted + other.deleted,
            kept=self.kept + other.kept,
            skipped=self.skipped + other.skipped,
            errors=self.errors + other.errors,
        )


@dataclass(frozen=True)
class RunReport:
    """Final output of one retention run.

    Attributes:
        dry_run: Whether deletes were simulated
        outcomes: One outcome per category
        scanned: Distinct objects listed across all prefixes
    """
    dry_run: bool
    outcomes: Mapping[Category, CategoryOutcome]
    scanned: int = 0

    @property
    def totals(self) -> CategoryOutcome:
        return sum(self.outcomes.values(), CategoryOutcome())

    def outcome(self, category: Category) -> CategoryOutcome:
        return self.outcomes[category]

    def to_response_body(self) -> Dict[str, Any]:
        """Render the report in the cron endpoint's JSON shape."""
        o = {category: outcome.as_dict() for category, outcome in self.outcomes.items()}
        development_deleted = (
            self.outcomes[Category.CHAT_DEVELOPMENT].deleted
            + self.outcomes[Category.AUDIT_DEVELOPMENT].deleted
        )
        return {
            "success": True,
            "dryRun": self.dry_run,
            "chats": {
                "production": o[Category.CHAT_PRODUCTION],
                "preview": o[Category.CHAT_PREVIEW],
            },
            "fitAssessments": o[Category.FIT_ASSESSMENT],
            "resumeGenerations": o[Category.RESUME_GENERATION],
            "audit": {
                "production": o[Category.AUDIT_PRODUCTION],
                "preview": o[Category.AUDIT_PREVIEW],
                "development": {"deleted": development_deleted},
            },
            "artifacts": {
                "emptyPlaceholders": {
                    "deleted": self.outcomes[Category.ARTIFACT_EMPTY_PLACEHOLDER].deleted,
                },
                "orphanSessions": {
                    "deleted": self.outcomes[Category.ARTIFACT_ORPHAN_SESSION].deleted,
                },
            },
            "totals": self.totals.as_dict(),
            "categories": {category.value: counts for category, counts in o.items()},
        }


@dataclass
class CategoryAggregator:
    """Accumulates outcomes for every category during one run.

    Each category owns its own counter, so concurrent category tasks never
    touch the same state.
    """
    categories: Iterable[Category] = tuple(Category)
    _outcomes: Dict[Category, CategoryOutcome] = field(init=False)

    def __post_init__(self) -> None:
        self._outcomes = {category: CategoryOutcome() for category in self.categories}

    def __getitem__(self, category: Category) -> CategoryOutcome:
        return self._outcomes[category]

    def record_kept(self, category: Category) -> None:
        self._outcomes[category].kept += 1

    def record_skipped(self, category: Category) -> None:
        self._outcomes[category].skipped += 1

    def record_deleted(self, category: Category, count: int = 1) -> None:
        self._outcomes[category].deleted += count

    def record_delete_result(self, category: Category, result: DeleteResult) -> None:
        """Count a live delete; an object already gone counts as deleted."""
        if result.succeeded:
            self._outcomes[category].deleted += 1
        else:
            self._outcomes[category].errors += 1

    def finalize(self, dry_run: bool, scanned: int = 0) -> RunReport:
        """Freeze the counters into a report."""
        outcomes = {
            category: CategoryOutcome(**outcome.as_dict())
            for category, outcome in self._outcomes.items()
        }
        return RunReport(
            dry_run=dry_run,
            outcomes=MappingProxyType(outcomes),
            scanned=scanned,
        )
