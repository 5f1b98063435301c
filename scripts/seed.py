"""
Demo Data Seeder

Creates random restaurants and uploads a menu for each through the public
API, concurrently. Run from project root against a running server:

    python scripts/seed.py --restaurants 20
"""

import asyncio
import argparse
import random
import sys
import time
from datetime import datetime
from typing import Any

import httpx

# Configuration
API_BASE_URL = "http://localhost:3000"
TOTAL_RESTAURANTS = 10

# Sample data for random restaurants
PREFIXES = ["Spice", "Urban", "Golden", "Green", "Royal", "Coastal", "Little", "Old Town"]
SUFFIXES = ["Kitchen", "Bistro", "Dhaba", "Cafe", "Grill", "Tiffins", "Table"]
STREETS = ["MG Road", "Brigade Road", "Church Street", "Indiranagar 100ft Rd", "Koramangala 5th Block"]
MENU_ITEMS = [
    {"name": "Masala Dosa", "category": "Breakfast", "price": 120, "spicinessLevel": 2},
    {"name": "Paneer Tikka", "category": "Starters", "price": "240", "spicinessLevel": 3},
    {"name": "Veg Biryani", "category": "Mains", "price": 260, "sufficientFor": 2},
    {"name": "Gulab Jamun", "category": "Desserts", "price": 90, "sweetnessLevel": 5},
    {"name": "Filter Coffee", "category": "Beverages", "price": 60, "caffeineLevel": "High"},
    {"name": "Lassi", "category": "Beverages", "price": 80, "sweetnessLevel": 3, "available": False},
]
EXTRA_CHEESE = {
    "categories": [
        {
            "categoryName": "Extras",
            "minQuantity": 0,
            "maxQuantity": 2,
            "items": [{"name": "Extra cheese", "price": 30}, {"name": "Butter", "price": 20}],
        }
    ]
}


def generate_restaurant_payload() -> dict[str, Any]:
    """Generate a random restaurant profile."""
    return {
        "name": f"{random.choice(PREFIXES)} {random.choice(SUFFIXES)}",
        "contactNo": "".join(str(random.randint(0, 9)) for _ in range(10)),
        "address": f"{random.randint(1, 999)} {random.choice(STREETS)}, Bengaluru",
        "menuSummary": "Seeded demo restaurant",
        "isOnline": random.random() < 0.7,
        "location": {
            "latitude": round(random.uniform(12.85, 13.10), 6),
            "longitude": round(random.uniform(77.45, 77.75), 6),
        },
    }


def generate_menu_payload() -> dict[str, Any]:
    """Pick a few items; the first one gets a customisation."""
    chosen = random.sample(MENU_ITEMS, k=random.randint(2, len(MENU_ITEMS)))
    items = [dict(item, id=index + 1) for index, item in enumerate(chosen)]
    return {
        "menuItems": items,
        "customisations": [{"id": 1, "customisation": EXTRA_CHEESE}],
    }


async def seed_restaurant(client: httpx.AsyncClient, number: int) -> dict[str, Any]:
    """Create one restaurant and upload its menu by durable identity."""
    start_time = time.time()

    try:
        response = await client.post(
            f"{API_BASE_URL}/api/restaurants",
            json=generate_restaurant_payload(),
            timeout=30.0,
        )
        if response.status_code != 201:
            return {"number": number, "success": False, "error": response.text[:100]}

        durable_id = response.json()["data"]["restaurantId"]
        response = await client.put(
            f"{API_BASE_URL}/api/restaurants/{durable_id}/menu",
            json=generate_menu_payload(),
            timeout=30.0,
        )
        elapsed = round(time.time() - start_time, 3)

        if response.status_code == 200:
            items = response.json()["data"]["items"]
            return {"number": number, "success": True, "items": len(items), "time": elapsed}
        return {"number": number, "success": False, "error": response.text[:100], "time": elapsed}

    except httpx.HTTPError as e:
        return {"number": number, "success": False, "error": str(e)[:100]}


async def run_seed(num_restaurants: int = TOTAL_RESTAURANTS) -> dict[str, Any]:
    print("=" * 70)
    print("🌱 SEEDING DEMO RESTAURANTS")
    print("=" * 70)
    print(f"📋 Restaurants: {num_restaurants}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()
    async with httpx.AsyncClient() as client:
        health = await client.get(f"{API_BASE_URL}/health")
        if health.status_code != 200:
            print(f"❌ Health check failed: {health.text}")
            return {"total": num_restaurants, "successful": 0, "failed": num_restaurants}

        tasks = [seed_restaurant(client, i + 1) for i in range(num_restaurants)]
        results = await asyncio.gather(*tasks)

    total_time = round(time.time() - start_time, 2)
    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print(f"\n✅ Seeded: {len(successful)}/{num_restaurants}")
    print(f"❌ Failed: {len(failed)}/{num_restaurants}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        total_items = sum(r["items"] for r in successful)
        print(f"🍽️  Menu items written: {total_items}")

    if failed:
        print("\n⚠️  Failures (showing first 5):")
        for f in failed[:5]:
            print(f"   Restaurant #{f['number']}: {f.get('error', 'Unknown error')}")

    print("\nNext: python scripts/verify.py")
    return {"total": num_restaurants, "successful": len(successful), "failed": len(failed)}


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo restaurants and menus")
    parser.add_argument("--restaurants", type=int, default=TOTAL_RESTAURANTS, help="Number of restaurants")
    parser.add_argument("--base-url", default=API_BASE_URL, help="API base URL")
    args = parser.parse_args()

    API_BASE_URL = args.base_url.rstrip("/")
    summary = asyncio.run(run_seed(args.restaurants))
    sys.exit(0 if summary["failed"] == 0 else 1)
