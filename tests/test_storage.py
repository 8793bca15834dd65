"""
Bucket provisioning, verification and access probes.

Run with:
    python -m pytest tests/test_storage.py -v
"""

from app.storage import (
    KNOWN_BUCKETS,
    REQUIRED_BUCKETS,
    compare_access,
    ensure_bucket,
    format_size,
    probe_upload,
    update_bucket_limits,
    verify_buckets,
)
from app.storage.buckets import MB, BucketSpec, manual_instructions


class TestBucketSpecs:
    def test_commission_proofs_limit(self):
        spec = KNOWN_BUCKETS["commission-proofs"]
        assert spec.file_size_limit == 3 * MB
        assert not spec.public

    def test_required_buckets_are_known(self):
        for name in REQUIRED_BUCKETS:
            assert name in KNOWN_BUCKETS

    def test_options_shape(self):
        spec = BucketSpec("x", public=True)
        assert spec.options() == {"public": True}

    def test_format_size(self):
        assert format_size(3 * MB) == "3MB"
        assert format_size(512 * 1024) == "512KB"
        assert format_size(None) == "unlimited"

    def test_manual_instructions(self):
        text = manual_instructions(KNOWN_BUCKETS["commission-proofs"])
        assert "commission-proofs" in text
        assert "3MB" in text
        assert "private" in text


class TestEnsureBucket:
    def test_creates_missing_bucket(self, fake_client):
        spec = KNOWN_BUCKETS["commission-proofs"]
        result = ensure_bucket(fake_client, spec)

        assert result.outcome == "created"
        assert fake_client.storage.buckets["commission-proofs"].file_size_limit == 3 * MB

    def test_existing_bucket(self, fake_client):
        fake_client.storage.add_bucket("shop-photos", public=True)
        result = ensure_bucket(fake_client, KNOWN_BUCKETS["shop-photos"])

        assert result.outcome == "already_exists"
        assert result.bucket["public"] is True

    def test_create_denied_gives_instructions(self, fake_client):
        fake_client.storage.denied["create_bucket"] = "new row violates row-level security policy"
        result = ensure_bucket(fake_client, KNOWN_BUCKETS["verification-docs"])

        assert result.outcome == "failed"
        assert not result.ok
        assert "row-level security" in result.error
        assert "verification-docs" in result.instructions

    def test_listing_denied_still_tries_create(self, fake_client):
        fake_client.storage.denied["list_buckets"] = "permission denied"
        result = ensure_bucket(fake_client, KNOWN_BUCKETS["profile-photos"])
        assert result.outcome == "created"


class TestUpdateBucket:
    def test_reports_new_limit(self, fake_client):
        fake_client.storage.add_bucket("commission-proofs", file_size_limit=MB)
        result = update_bucket_limits(fake_client, KNOWN_BUCKETS["commission-proofs"])

        assert result.outcome == "updated"
        assert result.bucket["file_size_limit"] == 3 * MB

    def test_relist_denied_after_update(self, fake_client):
        fake_client.storage.add_bucket("commission-proofs", file_size_limit=MB)
        fake_client.storage.denied["list_buckets"] = "permission denied"
        result = update_bucket_limits(fake_client, KNOWN_BUCKETS["commission-proofs"])

        assert result.outcome == "updated"
        assert result.bucket is None
        assert result.error == "permission denied"
        assert fake_client.storage.buckets["commission-proofs"].file_size_limit == 3 * MB

    def test_missing_bucket_fails(self, fake_client):
        result = update_bucket_limits(fake_client, KNOWN_BUCKETS["commission-proofs"])
        assert result.outcome == "failed"
        assert "Edit bucket" in result.instructions


class TestVerifyAndProbe:
    def test_verify_reports_missing(self, fake_client):
        fake_client.storage.add_bucket("shop-photos")
        result = verify_buckets(fake_client, REQUIRED_BUCKETS)

        assert result.present == ["shop-photos"]
        assert "verification-docs" in result.missing
        assert not result.ok

    def test_verify_listing_denied(self, fake_client):
        fake_client.storage.add_bucket("shop-photos")
        fake_client.storage.denied["list_buckets"] = "permission denied"
        result = verify_buckets(fake_client, REQUIRED_BUCKETS)

        assert result.error == "permission denied"
        assert result.present == []
        assert result.missing == list(REQUIRED_BUCKETS)
        assert not result.ok

    def test_probe_upload_cleans_up(self, fake_client):
        probe = probe_upload(fake_client, "verification-docs", path="test/probe.txt")

        assert probe.uploaded
        assert probe.cleaned_up
        assert fake_client.storage.objects["verification-docs"] == {}

    def test_probe_upload_denied_skips_cleanup(self, fake_client):
        fake_client.storage.denied["upload"] = "new row violates row-level security policy"
        probe = probe_upload(fake_client, "verification-docs")

        assert not probe.uploaded
        assert not probe.cleaned_up
        assert "row-level security" in probe.error

    def test_compare_access(self, make_client):
        anon, service = make_client(), make_client()
        anon.storage.denied["list_buckets"] = "permission denied"
        service.storage.add_bucket("commission-proofs")

        reports = compare_access({"anon": anon, "service": service}, "commission-proofs")

        assert not reports[0].can_see
        assert reports[1].buckets == ["commission-proofs"]

    def test_compare_access_object_listing_denied(self, make_client):
        anon = make_client()
        anon.storage.add_bucket("commission-proofs")
        anon.storage.denied["list"] = "permission denied"

        report = compare_access({"anon": anon}, "commission-proofs")[0]

        assert report.can_see
        assert report.buckets == ["commission-proofs"]
        assert report.error is None
        assert report.objects_error == "permission denied"
