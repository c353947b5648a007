"""Terminal front end for the monitoring dashboard.

Usage:
    python -m smart_health.client.cli --age 55 --bp 145
    python -m smart_health.client.cli --mock --watch 5
"""

import argparse
import asyncio

from smart_health.api.config import DASHBOARD_API_URL
from smart_health.client.dashboard import REFRESH_INTERVAL_SECONDS, DashboardClient


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Submit vitals to the mock prediction service",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--url", default=DASHBOARD_API_URL, help="Prediction service base URL")
    parser.add_argument("--age", type=float, default=30)
    parser.add_argument("--gender", choices=["male", "female"], default="male")
    parser.add_argument("--bp", type=float, default=120, help="Systolic blood pressure")
    parser.add_argument("--chol", type=float, default=200, help="Cholesterol")
    parser.add_argument("--glucose", type=float, default=100)
    parser.add_argument("--mock", action="store_true", help="Skip the live service")
    parser.add_argument(
        "--watch",
        type=int,
        default=0,
        metavar="N",
        help="Run the live metrics timer for N refreshes",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=REFRESH_INTERVAL_SECONDS,
        help="Seconds between metric refreshes",
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    vitals = {
        "age": args.age,
        "gender": args.gender,
        "bp": args.bp,
        "chol": args.chol,
        "glucose": args.glucose,
    }

    with DashboardClient(args.url) as client:
        result = client.run_mock(vitals) if args.mock else client.predict(vitals)

        print(f"Prediction: {result.prediction}")
        print(f"Confidence: {result.confidence * 100:.1f}%")
        print(f"Notes:      {result.notes or '—'}")
        print(f"Status:     {client.status}")

        if args.watch > 0:
            asyncio.run(client.run(args.interval, ticks=args.watch))
            print(f"Heart rate (bpm):  {client.heart_rate.values[-args.watch:]}")
            print(f"Systolic (mmHg):   {client.systolic.values[-args.watch:]}")

        print()
        print("Activity log:")
        for entry in client.log.entries:
            print(f"  {entry}")


if __name__ == "__main__":
    main()
