"""Category classification for stored objects.

Every object in the namespace maps to at most one category. Classification
is an ordered list of rules evaluated first-match-wins, so adding a
category means adding a rule rather than another branch.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from blob_retention.config import RetentionSettings
from blob_retention.storage.base import StoredObject


class Category(str, Enum):
    """Closed, ordered set of retention categories."""
    CHAT_PRODUCTION = "chat-production"
    CHAT_PREVIEW = "chat-preview"
    CHAT_DEVELOPMENT = "chat-development"
    FIT_ASSESSMENT = "fit-assessment"
    RESUME_GENERATION = "resume-generation"
    AUDIT_PRODUCTION = "audit-production"
    AUDIT_PREVIEW = "audit-preview"
    AUDIT_DEVELOPMENT = "audit-development"
    ARTIFACT_EMPTY_PLACEHOLDER = "artifact-empty-placeholder"
    ARTIFACT_ORPHAN_SESSION = "artifact-orphan-session"


ENVIRONMENTS: Tuple[str, ...] = ("production", "preview", "development")


@dataclass(frozen=True)
class KeyLayout:
    """Key prefixes owned by the writers of the shared namespace."""

    base: str

    @property
    def chats(self) -> str:
        return f"{self.base}chats/"

    @property
    def fit_assessments(self) -> str:
        return f"{self.base}fit-assessments/"

    @property
    def resume_generations(self) -> str:
        return f"{self.base}resume-generations/"

    @property
    def audit(self) -> str:
        return f"{self.base}audit/"

    @property
    def usage(self) -> str:
        return f"{self.base}usage/"

    def fit_assessments_env(self, env: str) -> str:
        return f"{self.fit_assessments}{env}/"

    def chats_env(self, env: str) -> str:
        return f"{self.chats}{env}/"

    def audit_env(self, env: str) -> str:
        return f"{self.audit}{env}/"

    def usage_env(self, env: str) -> str:
        return f"{self.usage}{env}/"

    def sessions(self, env: str) -> str:
        return f"{self.usage_env(env)}sessions/"


@dataclass(frozen=True)
class ClassificationRule:
    """One entry of the ordered classification table.

    Attributes:
        category: Category assigned when the rule matches
        matches: Predicate over the stored object
        scan_prefixes: Prefixes listed to find candidates for the category
    """
    category: Category
    matches: Callable[[StoredObject], bool]
    scan_prefixes: Tuple[str, ...]


def _under(*prefixes: str) -> Callable[[StoredObject], bool]:
    return lambda obj: any(obj.key.startswith(p) for p in prefixes)


def is_empty_placeholder(obj: StoredObject) -> bool:
    """Zero-byte object whose name has no filename suffix (a container marker)."""
    return obj.size == 0 and "." not in obj.basename


def build_rules(
    layout: KeyLayout,
    valid_session_prefixes: Sequence[str],
) -> List[ClassificationRule]:
    """Build the classification table in priority order.

    Structural anomalies are detected before any prefix rule so that a
    marker or legacy session file is never treated as regular content.
    """
    session_prefixes = tuple(layout.sessions(env) for env in ENVIRONMENTS)
    valid = tuple(valid_session_prefixes)

    def is_orphan_session(obj: StoredObject) -> bool:
        if not obj.key.startswith(session_prefixes):
            return False
        return not obj.basename.startswith(valid)

    dev_artifacts = (
        layout.audit_env("development"),
        layout.usage_env("development"),
        layout.fit_assessments_env("development"),
    )

    return [
        ClassificationRule(
            Category.ARTIFACT_EMPTY_PLACEHOLDER, is_empty_placeholder, (layout.base,)
        ),
        ClassificationRule(
            Category.ARTIFACT_ORPHAN_SESSION, is_orphan_session, session_prefixes
        ),
        ClassificationRule(
            Category.CHAT_DEVELOPMENT,
            _under(layout.chats_env("development")),
            (layout.chats_env("development"),),
        ),
        ClassificationRule(Category.AUDIT_DEVELOPMENT, _under(*dev_artifacts), dev_artifacts),
        ClassificationRule(
            Category.CHAT_PRODUCTION,
            _under(layout.chats_env("production")),
            (layout.chats_env("production"),),
        ),
        ClassificationRule(
            Category.CHAT_PREVIEW,
            _under(layout.chats_env("preview")),
            (layout.chats_env("preview"),),
        ),
        ClassificationRule(
            Category.FIT_ASSESSMENT,
            _under(layout.fit_assessments),
            (layout.fit_assessments,),
        ),
        ClassificationRule(
            Category.RESUME_GENERATION,
            _under(layout.resume_generations),
            (layout.resume_generations,),
        ),
        ClassificationRule(
            Category.AUDIT_PRODUCTION,
            _under(layout.audit_env("production")),
            (layout.audit_env("production"),),
        ),
        ClassificationRule(
            Category.AUDIT_PREVIEW,
            _under(layout.audit_env("preview")),
            (layout.audit_env("preview"),),
        ),
    ]


class CategoryClassifier:
    """Maps stored objects to exactly one category or None (unclassified).

    Example:
        >>> classifier = CategoryClassifier.from_settings(settings.retention)
        >>> classifier.classify(obj)
        <Category.CHAT_PRODUCTION: 'chat-production'>
    """

    def __init__(self, rules: Sequence[ClassificationRule]):
        """Initialize the classifier.

        Args:
            rules: Classification rules in priority order; every category
                must appear exactly once
        """
        seen = [rule.category for rule in rules]
        missing = set(Category) - set(seen)
        if missing or len(seen) != len(set(seen)):
            raise ValueError(
                f"Classification rules must cover each category once "
                f"(missing: {sorted(c.value for c in missing)})"
            )
        self._rules = tuple(rules)
        self._by_category: Dict[Category, ClassificationRule] = {
            rule.category: rule for rule in rules
        }

    @classmethod
    def from_settings(cls, settings: RetentionSettings) -> "CategoryClassifier":
        """Build the classifier for the configured namespace."""
        layout = KeyLayout(base=settings.base_prefix)
        return cls(build_rules(layout, settings.valid_session_prefixes))

    def classify(self, obj: StoredObject) -> Optional[Category]:
        """Return the first matching category, or None when unclassified."""
        for rule in self._rules:
            if rule.matches(obj):
                return rule.category
        return None

    def scan_prefixes(self, category: Category) -> Tuple[str, ...]:
        """Prefixes that must be listed to find every object of a category."""
        return self._by_category[category].scan_prefixes
