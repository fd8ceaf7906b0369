"""Retention and garbage collection engine for the shared blob namespace.

This module classifies stored objects into retention categories, evaluates
them against per-category policies and deletes the expired ones.
"""

from blob_retention.retention.categories import Category, CategoryClassifier, KeyLayout
from blob_retention.retention.executor import DeletionExecutor
from blob_retention.retention.job import RetentionJob, RetentionJobError
from blob_retention.retention.policy import (
    Decision,
    Evaluation,
    ProtectedPredicate,
    RetentionPolicy,
    RetentionPolicyEvaluator,
    RetentionPolicyTable,
)
from blob_retention.retention.report import CategoryAggregator, CategoryOutcome, RunReport
from blob_retention.retention.scanner import PrefixScanner
from blob_retention.retention.timestamps import extract_timestamp

__all__ = [
    "Category",
    "CategoryAggregator",
    "CategoryClassifier",
    "CategoryOutcome",
    "Decision",
    "DeletionExecutor",
    "Evaluation",
    "KeyLayout",
    "PrefixScanner",
    "ProtectedPredicate",
    "RetentionJob",
    "RetentionJobError",
    "RetentionPolicy",
    "RetentionPolicyEvaluator",
    "RetentionPolicyTable",
    "RunReport",
    "extract_timestamp",
]
