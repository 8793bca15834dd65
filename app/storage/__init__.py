"""Storage bucket provisioning and access checks."""

from app.storage.buckets import (
    KNOWN_BUCKETS,
    REQUIRED_BUCKETS,
    BucketResult,
    BucketSpec,
    compare_access,
    ensure_bucket,
    find_bucket,
    format_size,
    list_bucket_names,
    probe_upload,
    update_bucket_limits,
    verify_buckets,
)

__all__ = [
    "KNOWN_BUCKETS",
    "REQUIRED_BUCKETS",
    "BucketResult",
    "BucketSpec",
    "compare_access",
    "ensure_bucket",
    "find_bucket",
    "format_size",
    "list_bucket_names",
    "probe_upload",
    "update_bucket_limits",
    "verify_buckets",
]
