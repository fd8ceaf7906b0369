"""Authentication for scheduler-facing endpoints."""

from blob_retention.auth.bearer import require_cron_secret, verify_token

__all__ = ["require_cron_secret", "verify_token"]
