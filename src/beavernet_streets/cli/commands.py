"""CLI commands for beavernet-streets."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import click
import pandas as pd

from beavernet_streets import StreetDataConfig, StreetLookup
from beavernet_streets.data.constants import (
    DEFAULT_MAX_DISTANCE,
    DEFAULT_SUGGESTION_LIMIT,
    ENV_FETCH_TIMEOUT,
    ENV_INTERSECTIONS_SOURCE,
    ENV_STREETS_SOURCE,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


@click.group()
@click.version_option(package_name="beavernet-streets")
@click.option(
    "--streets",
    "streets_source",
    envvar=ENV_STREETS_SOURCE,
    help="Street name index (URL or local file)",
)
@click.option(
    "--intersections",
    "intersections_source",
    envvar=ENV_INTERSECTIONS_SOURCE,
    help="Road intersection index (URL or local file)",
)
@click.option(
    "--timeout",
    type=float,
    envvar=ENV_FETCH_TIMEOUT,
    help="Request timeout in seconds",
)
@click.option(
    "--fallback/--no-fallback",
    default=False,
    help="Serve the built-in Niagara Falls sample if loading fails",
)
@click.option("--verbose", "-V", is_flag=True, help="Debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    streets_source: Optional[str],
    intersections_source: Optional[str],
    timeout: Optional[float],
    fallback: bool,
    verbose: bool,
):
    """BEAVERNET street and intersection lookup for dispatch address entry."""
    _configure_logging(verbose)
    ctx.obj = StreetDataConfig.from_env(
        streets_source=streets_source,
        intersections_source=intersections_source,
        timeout=timeout,
        use_fallback=fallback,
    )


@cli.command()
@click.argument("query")
@click.option("--limit", "-n", type=int, default=None, help="Maximum names to print")
@click.pass_obj
def search(config: StreetDataConfig, query: str, limit: Optional[int]):
    """Search street names containing QUERY."""
    asyncio.run(_search_async(config, query, limit))


async def _search_async(config: StreetDataConfig, query: str, limit: Optional[int]):
    """Async implementation of search command."""
    lookup = StreetLookup(config=config)
    try:
        streets = await lookup.search_streets(query)
        if limit is not None:
            streets = streets[:limit]
        _echo_json(streets)
    finally:
        await lookup.close()


@cli.command()
@click.argument("address")
@click.pass_obj
def analyze(config: StreetDataConfig, address: str):
    """Detect streets in ADDRESS and suggest intersections."""
    asyncio.run(_analyze_async(config, address))


async def _analyze_async(config: StreetDataConfig, address: str):
    """Async implementation of analyze command."""
    lookup = StreetLookup(config=config)
    try:
        result = await lookup.analyze_address(address)
        _echo_json(result.to_dict())
    finally:
        await lookup.close()


@cli.command()
@click.argument("address")
@click.option(
    "--limit",
    "-n",
    type=int,
    default=DEFAULT_SUGGESTION_LIMIT,
    show_default=True,
    help="Maximum street suggestions",
)
@click.pass_obj
def suggest(config: StreetDataConfig, address: str, limit: int):
    """Street and intersection suggestions for a partly typed ADDRESS."""
    asyncio.run(_suggest_async(config, address, limit))


async def _suggest_async(config: StreetDataConfig, address: str, limit: int):
    """Async implementation of suggest command."""
    lookup = StreetLookup(config=config)
    try:
        result = await lookup.suggest(address, limit=limit)
        _echo_json(result.to_dict())
    finally:
        await lookup.close()


@cli.command()
@click.argument("street")
@click.pass_obj
def intersections(config: StreetDataConfig, street: str):
    """List intersections that STREET is part of (exact name)."""
    asyncio.run(_intersections_async(config, street))


async def _intersections_async(config: StreetDataConfig, street: str):
    """Async implementation of intersections command."""
    lookup = StreetLookup(config=config)
    try:
        found = await lookup.find_intersections_for_street(street)
        _echo_json([i.to_dict() for i in found])
    finally:
        await lookup.close()


@cli.command()
@click.argument("lat", type=float)
@click.argument("lon", type=float)
@click.option(
    "--max-distance",
    "-d",
    type=float,
    default=DEFAULT_MAX_DISTANCE,
    show_default=True,
    help="Search radius in degrees (planar)",
)
@click.pass_obj
def closest(config: StreetDataConfig, lat: float, lon: float, max_distance: float):
    """Find the intersection nearest to coordinates (lat, lon)."""
    asyncio.run(_closest_async(config, lat, lon, max_distance))


async def _closest_async(config: StreetDataConfig, lat: float, lon: float, max_distance: float):
    """Async implementation of closest command."""
    lookup = StreetLookup(config=config)
    try:
        result = await lookup.find_closest_intersection(lat, lon, max_distance)
        if result is not None:
            data = result.to_dict()
            data["cross_street"] = result.cross_street
            _echo_json(data)
        else:
            click.echo(f"No intersection within {max_distance} degrees of ({lat}, {lon}).")
    finally:
        await lookup.close()


@cli.command()
@click.argument("input_file", type=click.Path(exists=True))
@click.argument("output_file", type=click.Path())
@click.option(
    "--address-column",
    "-a",
    required=True,
    help="Column containing addresses",
)
@click.pass_obj
def batch(config: StreetDataConfig, input_file: str, output_file: str, address_column: str):
    """Analyze a CSV file of addresses."""
    asyncio.run(_batch_async(config, input_file, output_file, address_column))


async def _batch_async(
    config: StreetDataConfig,
    input_file: str,
    output_file: str,
    address_column: str,
):
    """Async implementation of batch command."""
    input_path = Path(input_file)

    if input_path.suffix != ".csv":
        raise click.ClickException(
            f"Unsupported file format: {input_path.suffix}. Only CSV is supported."
        )
    df = pd.read_csv(input_path)

    if address_column not in df.columns:
        raise click.ClickException(f"Column '{address_column}' not found in input file")

    lookup = StreetLookup(config=config)
    try:
        address_series: pd.Series = df[address_column]  # type: ignore[assignment]
        results = await lookup.analyze_batch(address_series, progress=True)
        results = results.drop(columns=["address"])

        output_df = pd.concat([df.reset_index(drop=True), results.reset_index(drop=True)], axis=1)

        output_path = Path(output_file)
        if output_path.suffix == ".parquet":
            output_df.to_parquet(output_path)
        else:
            output_df.to_csv(output_path, index=False)

        click.echo(f"Processed {len(df)} addresses -> {output_file}")

        if len(df):
            with_cross = int(results["cross_street"].notna().sum())
            detected = int((results["detected_streets"] != "").sum())
            click.echo(f"Streets detected: {detected}/{len(df)} ({100 * detected / len(df):.1f}%)")
            click.echo(f"Cross street inferred: {with_cross}/{len(df)}")
    finally:
        await lookup.close()


@cli.command()
@click.pass_obj
def info(config: StreetDataConfig):
    """Show configured sources and loaded record counts."""
    asyncio.run(_info_async(config))


async def _info_async(config: StreetDataConfig):
    """Async implementation of info command."""
    lookup = StreetLookup(config=config)
    try:
        await lookup.ensure_loaded()
        stats = lookup.store.stats()
    finally:
        await lookup.close()

    click.echo(f"\nStreets source:       {config.streets_source}")
    click.echo(f"Intersections source: {config.intersections_source}")

    if not stats["loaded"]:
        click.echo("\nNo data loaded (sources unavailable). Run with --verbose for details.")
        return

    if stats["fallback"]:
        click.echo("\nSources unavailable; using built-in fallback data.")

    click.echo(f"\nStreet segments:        {stats['streets']}")
    click.echo(f"Intersections:          {stats['intersections']}")
    click.echo(f"  with coordinates:     {stats['located_intersections']}")
    click.echo(f"Distinct street names:  {stats['distinct_street_names']}")


if __name__ == "__main__":
    cli()
