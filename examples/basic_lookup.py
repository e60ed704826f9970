"""Basic example of using beavernet-streets."""

import asyncio

from beavernet_streets import StreetDataConfig, StreetLookup


async def main():
    # Initialize the lookup
    # - streets_source / intersections_source: URLs or local files
    #   (defaults point at the dashboard's /data directory)
    # - use_fallback: serve the built-in Niagara Falls sample if loading fails
    lookup = StreetLookup(config=StreetDataConfig.from_env(use_fallback=True))

    try:
        # Street name autocompletion
        print("=" * 60)
        print("Street Search")
        print("=" * 60)

        for query in ["qu", "st", "mont"]:
            print(f"{query!r}: {await lookup.search_streets(query)}")

        # Address analysis
        print("\n" + "=" * 60)
        print("Address Analysis")
        print("=" * 60)

        address = "4500 QUEEN ST AT KING ST"
        result = await lookup.analyze_address(address)

        print(f"Address: {address}")
        print(f"Detected streets: {result.detected_streets}")
        for intersection in result.suggested_intersections:
            print(f"  {intersection.name} ({intersection.latitude}, {intersection.longitude})")
        print(f"Cross street: {result.cross_street}")

        # GPS fix to cross street
        print("\n" + "=" * 60)
        print("Nearest Intersection")
        print("=" * 60)

        lat, lon = 43.0883, -79.0744
        closest = await lookup.find_closest_intersection(lat, lon)

        if closest is not None:
            print(f"Coordinates: ({lat}, {lon})")
            print(f"Intersection: {closest.name}")
            print(f"Cross street: {closest.cross_street}")
        else:
            print(f"No intersection near ({lat}, {lon})")
    finally:
        await lookup.close()


if __name__ == "__main__":
    asyncio.run(main())
