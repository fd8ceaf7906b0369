"""Retention policies and the per-object retention decision.

The policy table is immutable and built once from settings. The evaluator
is a pure function of (object, category, now) so it can be tested without
a store.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple

from blob_retention.config import RetentionSettings
from blob_retention.retention.categories import Category
from blob_retention.retention.timestamps import extract_timestamp
from blob_retention.storage.base import StoredObject


@dataclass(frozen=True)
class RetentionPolicy:
    """Retention policy for one category.

    Exactly one of ``max_age_days`` or ``immediate`` is set.
    """
    max_age_days: Optional[int] = None
    immediate: bool = False

    def __post_init__(self) -> None:
        if self.immediate == (self.max_age_days is not None):
            raise ValueError("A policy needs either max_age_days or immediate, not both")
        if self.max_age_days is not None and self.max_age_days < 0:
            raise ValueError("max_age_days must be >= 0")

    @classmethod
    def days(cls, max_age_days: int) -> "RetentionPolicy":
        return cls(max_age_days=max_age_days)

    @classmethod
    def immediate_deletion(cls) -> "RetentionPolicy":
        return cls(immediate=True)


@dataclass(frozen=True)
class ProtectedPredicate:
    """Key rule that makes an object permanently ineligible for deletion.

    Attributes:
        name: Identifier used in logs
        pattern: Key prefix, or the full key when ``exact`` is set
        exact: Match the whole key instead of a prefix
    """
    name: str
    pattern: str
    exact: bool = False

    def matches(self, key: str) -> bool:
        if self.exact:
            return key == self.pattern
        return key.startswith(self.pattern)


class RetentionPolicyTable:
    """Category to policy lookup plus the protected-path predicates."""

    def __init__(
        self,
        policies: Mapping[Category, RetentionPolicy],
        protected: Sequence[ProtectedPredicate] = (),
    ):
        missing = set(Category) - set(policies)
        if missing:
            raise ValueError(
                f"No retention policy for: {sorted(c.value for c in missing)}"
            )
        self._policies = MappingProxyType(dict(policies))
        self.protected: Tuple[ProtectedPredicate, ...] = tuple(protected)

    @classmethod
    def from_settings(cls, settings: RetentionSettings) -> "RetentionPolicyTable":
        """Build the table from configured thresholds.

        Development-environment categories and structural artifacts carry
        no durability guarantee and are always eligible.
        """
        policies = {
            Category.CHAT_PRODUCTION: RetentionPolicy.days(settings.chats_production_days),
            Category.CHAT_PREVIEW: RetentionPolicy.days(settings.chats_preview_days),
            Category.CHAT_DEVELOPMENT: RetentionPolicy.immediate_deletion(),
            Category.FIT_ASSESSMENT: RetentionPolicy.days(settings.fit_assessments_days),
            Category.RESUME_GENERATION: RetentionPolicy.days(settings.resume_generations_days),
            Category.AUDIT_PRODUCTION: RetentionPolicy.days(settings.audit_production_days),
            Category.AUDIT_PREVIEW: RetentionPolicy.days(settings.audit_preview_days),
            Category.AUDIT_DEVELOPMENT: RetentionPolicy.immediate_deletion(),
            # TODO: confirm with product whether placeholders need a grace
            # period so a write in progress is never raced.
            Category.ARTIFACT_EMPTY_PLACEHOLDER: RetentionPolicy.immediate_deletion(),
            Category.ARTIFACT_ORPHAN_SESSION: RetentionPolicy.immediate_deletion(),
        }
        protected = [
            ProtectedPredicate(name="root_marker", pattern=settings.base_prefix, exact=True),
        ]
        protected.extend(
            ProtectedPredicate(
                name=prefix.strip("/"),
                pattern=f"{settings.base_prefix}{prefix.lstrip('/')}",
            )
            for prefix in settings.protected_prefixes
        )
        return cls(policies, protected)

    @property
    def policies(self) -> Mapping[Category, RetentionPolicy]:
        return self._policies

    def policy_for(self, category: Category) -> RetentionPolicy:
        return self._policies[category]

    def protecting_predicate(self, key: str) -> Optional[ProtectedPredicate]:
        """Return the first protected predicate matching a key, if any."""
        for predicate in self.protected:
            if predicate.matches(key):
                return predicate
        return None

    def is_protected(self, key: str) -> bool:
        return self.protecting_predicate(key) is not None


class Decision(str, Enum):
    """Per-object retention decision."""
    DELETE = "delete"
    KEEP = "keep"
    SKIP = "skip"


@dataclass(frozen=True)
class Evaluation:
    """Decision for one object and why it was made."""
    decision: Decision
    reason: str
    timestamp: Optional[datetime] = None


class RetentionPolicyEvaluator:
    """Decides delete / keep / skip for one classified object."""

    def __init__(self, table: RetentionPolicyTable, trust_uploaded_at: bool = True):
        """Initialize the evaluator.

        Args:
            table: Policy table
            trust_uploaded_at: Use the store upload time when the key has
                no embedded timestamp
        """
        self.table = table
        self.trust_uploaded_at = trust_uploaded_at

    def object_timestamp(self, obj: StoredObject) -> Optional[datetime]:
        timestamp = extract_timestamp(obj.key)
        if timestamp is None and self.trust_uploaded_at:
            timestamp = obj.uploaded_at
        if timestamp is not None and timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return timestamp

    def evaluate(self, obj: StoredObject, category: Category, now: datetime) -> Evaluation:
        """Evaluate an object against its category policy.

        Protection is checked first and always wins. Immediate policies do
        not need a timestamp; age-based ones skip objects without one.

        Args:
            obj: Stored object
            category: Category assigned by the classifier
            now: Timezone-aware evaluation time

        Returns:
            Evaluation with decision and reason
        """
        if self.table.is_protected(obj.key):
            return Evaluation(Decision.KEEP, "protected")

        policy = self.table.policy_for(category)
        if policy.immediate:
            return Evaluation(Decision.DELETE, "immediate")

        timestamp = self.object_timestamp(obj)
        if timestamp is None:
            return Evaluation(Decision.SKIP, "no_timestamp")

        if now - timestamp > timedelta(days=policy.max_age_days):
            return Evaluation(Decision.DELETE, "expired", timestamp)
        return Evaluation(Decision.KEEP, "within_retention", timestamp)
