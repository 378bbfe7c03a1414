from __future__ import annotations

import argparse
import datetime
import os
import sys
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .api import (
    DEFAULT_TIMEOUT,
    NPM_DOWNLOADS_API_URL,
    NPM_REGISTRY_URL,
    ApiError,
    fetch_download_range,
    fetch_package_metadata,
)
from .chart import DEFAULT_CHART_HEIGHT, render_download_chart
from .data import DAILY, GRANULARITIES
from .series import lookback_start, resample, window

DEFAULT_NUM_POINTS = 60
SEPARATOR_WIDTH = 80


class InvalidGranularity(ValueError):
    """Raised when the requested granularity is not one of ``GRANULARITIES``."""


@dataclass
class ChartConfig:
    package: str
    granularity: str = DAILY
    num_points: int = DEFAULT_NUM_POINTS
    height: int = DEFAULT_CHART_HEIGHT
    timeout: float = DEFAULT_TIMEOUT
    registry_url: str = NPM_REGISTRY_URL
    api_url: str = NPM_DOWNLOADS_API_URL


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="package-downloads",
        description="Chart npm package download counts in the terminal.",
    )
    parser.add_argument("package", help="npm package name")
    parser.add_argument(
        "granularity",
        nargs="?",
        default=DAILY,
        help="Data granularity: daily, weekly or monthly (default: %(default)s)",
    )
    parser.add_argument(
        "-n",
        "--num-points",
        type=int,
        default=DEFAULT_NUM_POINTS,
        help="Number of data points to chart (default: %(default)s)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=DEFAULT_CHART_HEIGHT,
        help="Chart height in rows (default: %(default)s)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=os.getenv("PACKAGE_DOWNLOADS_TIMEOUT", str(DEFAULT_TIMEOUT)),
        help="HTTP timeout in seconds (env: PACKAGE_DOWNLOADS_TIMEOUT, default: %(default)s)",
    )
    parser.add_argument(
        "--registry-url",
        default=os.getenv("NPM_REGISTRY_URL", NPM_REGISTRY_URL),
        help="npm registry base URL (env: NPM_REGISTRY_URL, default: %(default)s)",
    )
    parser.add_argument(
        "--api-url",
        default=os.getenv("NPM_DOWNLOADS_API_URL", NPM_DOWNLOADS_API_URL),
        help="npm downloads API base URL (env: NPM_DOWNLOADS_API_URL, default: %(default)s)",
    )
    return parser


def parse_args(argv: Optional[Iterable[str]] = None) -> ChartConfig:
    parser = build_argument_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    granularity = args.granularity.lower()
    if granularity not in GRANULARITIES:
        raise InvalidGranularity("Invalid granularity. Choose from: daily, weekly, monthly.")
    if args.height <= 0:
        parser.error("--height must be greater than zero")
    return ChartConfig(
        package=args.package,
        granularity=granularity,
        num_points=args.num_points,
        height=args.height,
        timeout=args.timeout,
        registry_url=args.registry_url,
        api_url=args.api_url,
    )


def print_metadata(config: ChartConfig) -> None:
    try:
        metadata = fetch_package_metadata(
            config.package,
            timeout=config.timeout,
            registry_url=config.registry_url,
        )
    except ApiError as exc:
        print(f"Failed to fetch package metadata: {exc}", file=sys.stderr)
        return
    for line in metadata.summary_lines():
        print(line)
    print("\n" + "-" * SEPARATOR_WIDTH + "\n")


def run_report(config: ChartConfig, today: Optional[datetime.date] = None) -> int:
    """Print metadata and the download chart for ``config``; return an exit code."""
    print("")
    end = today or datetime.date.today()
    start = lookback_start(end, config.granularity, config.num_points)

    print_metadata(config)

    try:
        samples = fetch_download_range(
            config.package,
            start,
            end,
            timeout=config.timeout,
            api_url=config.api_url,
        )
    except ApiError as exc:
        raise ApiError(f"Failed to fetch data: {exc}") from exc

    periods = window(resample(samples, config.granularity), config.num_points)
    if not periods:
        print(
            "No download data available for the selected period and granularity "
            f"({config.granularity})."
        )
        return 0

    print(render_download_chart(periods, config.granularity, height=config.height))
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    arguments: List[str] = list(argv) if argv is not None else sys.argv[1:]
    if not arguments:
        build_argument_parser().print_help()
        return 0
    try:
        config = parse_args(arguments)
        return run_report(config)
    except InvalidGranularity as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
