"""
Manual checks against a live Supabase project.

Each module runs on its own, e.g. ``python -m testing.test_storage``.
Automated tests live in ``tests/``.
"""
