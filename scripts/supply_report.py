"""Supply report: resolve a token and print its circulating supply breakdown.

Runs the same resolver / estimator as the API, once, without a server.

Usage:
    python scripts/supply_report.py --token 0x... [--percentage 42.5] [--json]
"""

import argparse
import asyncio
import json
import math
import sys
from fractions import Fraction
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger  # noqa: E402

from config.settings import Settings, settings  # noqa: E402
from src.parsers.erc20.client import Erc20Client  # noqa: E402
from src.parsers.etherscan.client import EtherscanClient  # noqa: E402
from src.parsers.ethplorer.client import EthplorerClient  # noqa: E402
from src.supply.estimator import CirculatingSupplyEstimator  # noqa: E402
from src.supply.exceptions import SupplyError  # noqa: E402
from src.supply.models import SupplyBreakdown  # noqa: E402
from src.supply.resolver import TokenDescriptorResolver  # noqa: E402
from src.supply.units import (  # noqa: E402
    apply_percentage_override,
    format_percentage,
    format_units,
    parse_percentage,
)
from src.utils.logger import setup_logger  # noqa: E402


async def build_report(cfg: Settings, token: str, percentage: float | None) -> dict:
    """Resolve ``token`` and return a JSON-serialisable report."""
    erc20 = Erc20Client(cfg.rpc_url, timeout=cfg.rpc_timeout_sec)
    ethplorer = EthplorerClient(
        cfg.ethplorer_api_key,
        base_url=cfg.ethplorer_api_url,
        timeout=cfg.http_timeout_sec,
        max_rps=cfg.ethplorer_max_rps,
    )
    etherscan = EtherscanClient(
        cfg.etherscan_api_key,
        base_url=cfg.etherscan_api_url,
        chain_id=cfg.etherscan_chain_id,
        timeout=cfg.http_timeout_sec,
        max_rps=cfg.etherscan_max_rps,
    )
    try:
        resolver = TokenDescriptorResolver(erc20, default_decimals=cfg.token_decimals)
        descriptor = await resolver.resolve(token)

        if percentage is not None:
            breakdown = SupplyBreakdown(
                circulating_supply=apply_percentage_override(descriptor.total_supply, percentage),
                circulating_percentage=format_percentage(Fraction(math.floor(percentage * 100), 100)),
            )
        else:
            estimator = CirculatingSupplyEstimator(
                ethplorer, etherscan, max_concurrent=cfg.holder_lookup_concurrency
            )
            breakdown = await estimator.estimate(
                token, descriptor.total_supply, descriptor.decimals
            )
    finally:
        await erc20.close()
        await ethplorer.close()
        await etherscan.close()

    return {
        "address": token,
        "name": descriptor.name,
        "symbol": descriptor.symbol,
        "decimals": descriptor.decimals,
        "totalSupplyMethod": descriptor.total_supply_method,
        "totalSupply": format_units(descriptor.total_supply, descriptor.decimals),
        "circulatingSupply": format_units(breakdown.circulating_supply, descriptor.decimals),
        "circulatingPercentage": breakdown.circulating_percentage,
        "breakdown": breakdown.breakdown_dict(),
    }


def print_report(report: dict) -> None:
    print(f"\n{report['name']} ({report['symbol']}) {report['address']}")
    print(f"  Total supply:       {report['totalSupply']}  via {report['totalSupplyMethod']}")
    print(
        f"  Circulating supply: {report['circulatingSupply']}"
        f"  ({report['circulatingPercentage']}%)"
    )
    if not report["breakdown"]:
        print("  Non-circulating:    none identified")
        return
    print("  Non-circulating:")
    for label, group in report["breakdown"].items():
        print(f"    {label:<14} {group['totalPercentage']:>6}%  {len(group['addresses'])} address(es)")
        for entry in group["addresses"]:
            print(f"      {entry['address']}  {entry['percentage']}%")


def main() -> int:
    parser = argparse.ArgumentParser(description="Token circulating supply report")
    parser.add_argument("--token", default=settings.default_token, help="Token contract address")
    parser.add_argument("--percentage", default=None, help="Manual circulating percentage (0-100)")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    args = parser.parse_args()

    setup_logger(level="WARNING", log_dir=None)

    try:
        report = asyncio.run(
            build_report(settings, args.token, parse_percentage(args.percentage))
        )
    except SupplyError as e:
        logger.error(str(e))
        return 1

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print_report(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
