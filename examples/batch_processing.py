"""Example of batch processing addresses with beavernet-streets."""

import asyncio

import pandas as pd

from beavernet_streets import StreetDataConfig, StreetLookup

# Create sample data
addresses = [
    "4500 QUEEN ST AT KING ST",
    "5200 FALLS AV",
    "MAIN ST & STANLEY AV",
    "6000 PORTAGE RD NEAR STANLEY AV",
    "Address With No Known Street",
]

df = pd.DataFrame({"address": addresses, "id": range(1, len(addresses) + 1)})


async def main():
    print("Input DataFrame:")
    print(df)
    print()

    lookup = StreetLookup(config=StreetDataConfig.from_env(use_fallback=True))
    try:
        print("Processing addresses...")
        results = await lookup.analyze_batch(df["address"], progress=True)
    finally:
        await lookup.close()

    # Combine original data with results
    output = pd.concat([df, results.drop(columns=["address"])], axis=1)

    print("\nResults:")
    print(output[["id", "address", "detected_streets", "cross_street"]])

    # Summary statistics
    inferred = results["cross_street"].notna().sum()
    print(f"\nCross street inferred: {inferred}/{len(df)} ({100*inferred/len(df):.1f}%)")

    # Save to file
    # output.to_csv("analyzed_addresses.csv", index=False)
    # output.to_parquet("analyzed_addresses.parquet")


if __name__ == "__main__":
    asyncio.run(main())
