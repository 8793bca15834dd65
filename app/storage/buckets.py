"""
Storage bucket provisioning and verification.

The hosted platform owns bucket policies; programmatic changes are often
rejected (anon key, missing storage.objects grants). Every operation
here reports what happened and, on failure, the dashboard steps that
achieve the same result by hand.
"""

import time
from dataclasses import dataclass, field
from typing import Literal

import structlog
from supabase import Client

logger = structlog.get_logger()

IMAGE_MIME_TYPES = ("image/jpeg", "image/png", "image/webp")
DOCUMENT_MIME_TYPES = IMAGE_MIME_TYPES + ("application/pdf",)

MB = 1024 * 1024


@dataclass(frozen=True)
class BucketSpec:
    name: str
    public: bool = False
    file_size_limit: int | None = None
    allowed_mime_types: tuple[str, ...] = ()

    def options(self) -> dict:
        """Bucket options in the shape the storage API expects."""
        opts: dict = {"public": self.public}
        if self.file_size_limit is not None:
            opts["file_size_limit"] = self.file_size_limit
        if self.allowed_mime_types:
            opts["allowed_mime_types"] = list(self.allowed_mime_types)
        return opts


KNOWN_BUCKETS: dict[str, BucketSpec] = {
    spec.name: spec
    for spec in (
        BucketSpec("commission-proofs", False, 3 * MB, IMAGE_MIME_TYPES),
        BucketSpec("commission-screenshots", False, 5 * MB, IMAGE_MIME_TYPES),
        BucketSpec("shop-photos", True, 5 * MB, IMAGE_MIME_TYPES),
        BucketSpec("verification-docs", False, 10 * MB, DOCUMENT_MIME_TYPES),
        BucketSpec("provider-documents", False, 10 * MB, DOCUMENT_MIME_TYPES),
        BucketSpec("profile-photos", True, 2 * MB, IMAGE_MIME_TYPES),
    )
}

# Buckets the provider onboarding flow uploads into
REQUIRED_BUCKETS = ("verification-docs", "shop-photos", "provider-documents", "profile-photos")


def format_size(size: int | None) -> str:
    if not size:
        return "unlimited"
    if size >= MB:
        return f"{round(size / MB)}MB"
    return f"{round(size / 1024)}KB"


def manual_instructions(spec: BucketSpec) -> str:
    """Dashboard steps for creating a bucket the API refused to create."""
    lines = [
        f'Please create the "{spec.name}" bucket manually in your Supabase dashboard:',
        "1. Go to Storage in your Supabase dashboard",
        '2. Click "New bucket"',
        f"3. Name: {spec.name}",
        f"4. Public: {'Yes' if spec.public else 'No (private bucket)'}",
        f"5. File size limit: {format_size(spec.file_size_limit)}",
    ]
    if spec.allowed_mime_types:
        lines.append(f"6. Allowed MIME types: {', '.join(spec.allowed_mime_types)}")
    return "\n".join(lines)


# ══════════════════════════════════════════════════════════
# Listing
# ══════════════════════════════════════════════════════════


def list_buckets(client: Client) -> list:
    return client.storage.list_buckets() or []


def list_bucket_names(client: Client) -> list[str]:
    return [bucket.name for bucket in list_buckets(client)]


def find_bucket(client: Client, name: str):
    """The bucket object named ``name``, or None."""
    for bucket in list_buckets(client):
        if bucket.name == name:
            return bucket
    return None


def describe_bucket(bucket) -> dict:
    return {
        "name": bucket.name,
        "id": getattr(bucket, "id", bucket.name),
        "public": bool(getattr(bucket, "public", False)),
        "file_size_limit": getattr(bucket, "file_size_limit", None),
        "allowed_mime_types": list(getattr(bucket, "allowed_mime_types", None) or []),
    }


# ══════════════════════════════════════════════════════════
# Provisioning
# ══════════════════════════════════════════════════════════


BucketOutcome = Literal["created", "updated", "already_exists", "failed"]


@dataclass
class BucketResult:
    name: str
    outcome: BucketOutcome
    error: str | None = None
    instructions: str | None = None
    bucket: dict | None = None

    @property
    def ok(self) -> bool:
        return self.outcome != "failed"


def ensure_bucket(client: Client, spec: BucketSpec) -> BucketResult:
    """Create the bucket unless it already exists."""
    existing = None
    try:
        existing = find_bucket(client, spec.name)
    except Exception as e:
        # Listing may be blocked by policy while creation is still allowed
        logger.warning("Could not list buckets", error=str(e))

    if existing is not None:
        logger.info("Bucket already exists", bucket=spec.name)
        return BucketResult(spec.name, "already_exists", bucket=describe_bucket(existing))

    try:
        client.storage.create_bucket(spec.name, options=spec.options())
    except Exception as e:
        logger.error("Bucket creation failed", bucket=spec.name, error=str(e))
        return BucketResult(
            spec.name, "failed", error=str(e), instructions=manual_instructions(spec)
        )

    logger.info("Created bucket", bucket=spec.name, public=spec.public)
    return BucketResult(spec.name, "created")


def update_bucket_limits(client: Client, spec: BucketSpec) -> BucketResult:
    """
    Apply the bucket spec's size limit and MIME types to an existing bucket,
    then re-list to report the configuration actually in effect.
    """
    try:
        client.storage.update_bucket(spec.name, options=spec.options())
    except Exception as e:
        logger.warning("Could not update bucket via API", bucket=spec.name, error=str(e))
        return BucketResult(
            spec.name,
            "failed",
            error=str(e),
            instructions=(
                f"Update the {spec.name} bucket in the dashboard: Storage → "
                f"{spec.name} → Edit bucket → file size limit "
                f"{format_size(spec.file_size_limit)}"
            ),
        )

    try:
        bucket = find_bucket(client, spec.name)
    except Exception as e:
        logger.warning("Updated bucket but could not re-list it", bucket=spec.name, error=str(e))
        return BucketResult(spec.name, "updated", error=str(e))

    described = describe_bucket(bucket) if bucket is not None else None
    logger.info(
        "Updated bucket",
        bucket=spec.name,
        file_size_limit=described and described["file_size_limit"],
    )
    return BucketResult(spec.name, "updated", bucket=described)


@dataclass
class VerifyResult:
    present: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    available: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and not self.missing


def verify_buckets(client: Client, names: list[str] | tuple[str, ...]) -> VerifyResult:
    """
    Check which of ``names`` exist. A denied listing is recorded on the
    result and every requested bucket counts as missing.
    """
    try:
        available = list_bucket_names(client)
    except Exception as e:
        logger.warning("Could not list buckets", error=str(e))
        return VerifyResult(missing=list(names), error=str(e))

    result = VerifyResult(available=available)
    for name in names:
        (result.present if name in available else result.missing).append(name)
    return result


# ══════════════════════════════════════════════════════════
# Access checks
# ══════════════════════════════════════════════════════════


@dataclass
class UploadProbe:
    bucket: str
    path: str
    uploaded: bool
    cleaned_up: bool = False
    error: str | None = None


def probe_upload(
    client: Client,
    bucket: str,
    path: str | None = None,
    content: bytes = b"test file content for upload probe",
    content_type: str = "text/plain",
) -> UploadProbe:
    """
    Upload a tiny object to check write policies, then remove it.

    Removal is attempted only when the upload succeeded.
    """
    path = path or f"test/probe_{int(time.time() * 1000)}.txt"
    objects = client.storage.from_(bucket)

    try:
        objects.upload(path, content, file_options={"content-type": content_type, "upsert": "true"})
    except Exception as e:
        logger.warning("Upload probe failed", bucket=bucket, path=path, error=str(e))
        return UploadProbe(bucket=bucket, path=path, uploaded=False, error=str(e))

    probe = UploadProbe(bucket=bucket, path=path, uploaded=True)
    try:
        objects.remove([path])
        probe.cleaned_up = True
    except Exception as e:
        logger.warning("Upload probe cleanup failed", bucket=bucket, path=path, error=str(e))
        probe.error = str(e)
    return probe


@dataclass
class AccessReport:
    label: str
    buckets: list[str] = field(default_factory=list)
    error: str | None = None
    objects_error: str | None = None

    @property
    def can_see(self) -> bool:
        return self.error is None


def compare_access(clients: dict[str, Client], bucket: str | None = None) -> list[AccessReport]:
    """
    List buckets with each client to see which keys the policies let through.

    When ``bucket`` is given, also list its objects with every client that can see it.
    """
    reports = []
    for label, client in clients.items():
        try:
            names = list_bucket_names(client)
        except Exception as e:
            logger.info("Bucket listing denied", client=label, error=str(e))
            reports.append(AccessReport(label=label, error=str(e)))
            continue

        report = AccessReport(label=label, buckets=names)
        if bucket and bucket in names:
            try:
                files = client.storage.from_(bucket).list()
                logger.info("Listed bucket objects", client=label, bucket=bucket, count=len(files or []))
            except Exception as e:
                logger.info("Object listing denied", client=label, bucket=bucket, error=str(e))
                report.objects_error = str(e)
        reports.append(report)
    return reports
