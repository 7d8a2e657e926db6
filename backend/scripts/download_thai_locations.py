"""Download the Thai province / amphoe / tambon dataset used for coordinates.

Usage: python scripts/download_thai_locations.py [--output data/thai_province_data.json]
"""
import argparse
import json
import os
import sys

import requests

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from commons_youth.config import get_settings
from commons_youth.services.thai_locations import parse_locations

DATASET_URL = (
    "https://raw.githubusercontent.com/kongvut/thai-province-data/"
    "master/api/v1/province_with_amphure_tambon.json"
)


def download(url: str, output: str, timeout: float = 60.0) -> int:
    """Fetch the dataset, check that it parses and write it to output."""
    print(f"Downloading {url}...")
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    raw = response.json()

    provinces = parse_locations(raw)
    if not provinces:
        raise ValueError("Downloaded dataset contains no provinces")

    os.makedirs(os.path.dirname(os.path.abspath(output)), exist_ok=True)
    with open(output, "w", encoding="utf-8") as f:
        json.dump(raw, f, ensure_ascii=False)

    print(f"Download completed: {len(provinces)} provinces, {os.path.getsize(output)} bytes -> {output}")
    return len(provinces)


if __name__ == "__main__":
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Download Thai location data")
    parser.add_argument("--url", default=DATASET_URL, help="Dataset URL")
    parser.add_argument("--output", "-o", default=settings.THAI_LOCATIONS_PATH,
                        help="Where to write the JSON file")
    args = parser.parse_args()

    try:
        download(args.url, args.output)
    except (requests.RequestException, ValueError) as e:
        print(f"Error downloading: {e}")
        if os.path.exists(args.output) and os.path.getsize(args.output) == 0:
            os.unlink(args.output)
        sys.exit(1)
