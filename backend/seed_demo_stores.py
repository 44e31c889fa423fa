#!/usr/bin/env python3
"""Script to write the demo stores and their 60-day series to a series store.

Usage:
  python3 seed_demo_stores.py              # local cache (data/local_cache/)
  python3 seed_demo_stores.py --supabase   # Supabase stores / store_series tables
"""

import argparse

from app.config import get_settings, supabase_configured
from app.services.local_cache import (
    fallback_series,
    fallback_stores,
    save_fallback_series,
    save_fallback_stores,
)
from app.services.sample_data import generate_demo_series, sample_stores


def seed_local_cache() -> None:
    """Copy every demo store into the on-disk local cache."""
    for store_id, profile in sample_stores.items():
        fallback_stores[store_id] = dict(profile)
        fallback_series[store_id] = generate_demo_series(store_id)
        print(f"  ✅ {profile['name']}: {len(fallback_series[store_id])} days")

    save_fallback_stores()
    save_fallback_series()
    print("💾 Local cache updated")


def seed_supabase() -> bool:
    """Upsert the demo stores into Supabase."""
    settings = get_settings()
    if not supabase_configured(settings):
        print("❌ SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables required")
        return False

    from app.models.database import get_supabase_client

    supabase = get_supabase_client()
    try:
        for store_id, profile in sample_stores.items():
            supabase.table(settings.stores_table).upsert(profile, on_conflict="id").execute()
            rows = [{"store_id": store_id, **row} for row in generate_demo_series(store_id)]
            supabase.table(settings.series_table).upsert(rows, on_conflict="store_id,date").execute()
            print(f"  ✅ {profile['name']}: {len(rows)} days")
    except Exception as exc:  # noqa: BLE001
        print(f"❌ Error seeding Supabase: {exc}")
        return False
    return True


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--supabase", action="store_true", help="Seed Supabase instead of the local cache")
    args = parser.parse_args()

    print(f"🌱 Seeding {len(sample_stores)} demo stores")
    if args.supabase:
        seed_supabase()
    else:
        seed_local_cache()


if __name__ == "__main__":
    main()
