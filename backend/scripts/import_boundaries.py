"""Load a province boundary GeoJSON FeatureCollection into PostGIS.

Usage: python scripts/import_boundaries.py [path/to/provinces.geojson] [--replace]
"""
import argparse
import asyncio
import json
import os
import sys

from sqlalchemy import text

# Add parent directory to path to import commons_youth modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from commons_youth.config import get_settings
from commons_youth.database import Base, async_session, engine
from commons_youth.geo.matcher import resolve_display_name
import commons_youth.models  # noqa: F401  register all models

settings = get_settings()

INSERT_BOUNDARY = text("""
    INSERT INTO province_boundaries (id, name, properties, geom)
    VALUES (
        gen_random_uuid(),
        :name,
        CAST(:properties AS jsonb),
        ST_Multi(ST_SetSRID(ST_GeomFromGeoJSON(:geom_json), 4326))
    )
""")


async def import_boundaries(file_path: str, replace: bool = False):
    async with engine.begin() as conn:
        await conn.execute(text("CREATE EXTENSION IF NOT EXISTS postgis"))
        await conn.run_sync(Base.metadata.create_all)

    print(f"Reading GeoJSON from {file_path}...")
    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    features = data.get("features", [])
    print(f"Found {len(features)} features.")

    async with async_session() as session:
        if replace:
            await session.execute(text("DELETE FROM province_boundaries"))
            print("Cleared existing boundaries.")

        count = 0
        skipped = 0
        for feature in features:
            props = feature.get("properties") or {}
            geom_data = feature.get("geometry")
            name = resolve_display_name(props)

            if not geom_data or not name:
                skipped += 1
                continue

            await session.execute(INSERT_BOUNDARY, {
                "name": name,
                "properties": json.dumps(props, ensure_ascii=False),
                "geom_json": json.dumps(geom_data),
            })

            count += 1
            if count % 20 == 0:
                print(f"Imported {count} provinces...")
                await session.commit()

        await session.commit()
        print(f"Successfully imported {count} provinces ({skipped} skipped).")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Import province boundaries into PostGIS")
    parser.add_argument("file", nargs="?", default=settings.BOUNDARY_PATH,
                        help="GeoJSON FeatureCollection of provinces")
    parser.add_argument("--replace", "-r", action="store_true",
                        help="Delete existing boundaries before importing")
    args = parser.parse_args()

    if not os.path.exists(args.file):
        print(f"File not found: {args.file}")
        sys.exit(1)

    asyncio.run(import_boundaries(args.file, replace=args.replace))
