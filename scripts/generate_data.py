#!/usr/bin/env python
"""
Data Generator — Synthetic Oil Test Simulator

Generates realistic lab readings and POSTs them to the /score endpoint,
or runs repeated sensor tests against a batch.

Usage:
    python scripts/generate_data.py --count 20 --fresh
    python scripts/generate_data.py --count 10 --degraded --standard china
    python scripts/generate_data.py --batch_id BATCH-2024-0115-A --count 5
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import argparse
import time
import random

import requests


# API Configuration
API_BASE_URL = os.environ.get("API_URL", "http://localhost:8000")
SCORE_ENDPOINT = f"{API_BASE_URL}/api/v1/score"
BATCH_TEST_ENDPOINT = f"{API_BASE_URL}/api/v1/batches/{{batch_id}}/tests"


def generate_fresh_reading():
    """Readings for freshly filled oil."""
    return {
        "ffa": round(random.uniform(0.03, 0.12), 2),   # % oleic acid
        "tpc": round(random.uniform(4.0, 12.0), 1),    # % polar compounds
        "pv": round(random.uniform(1.0, 4.0), 1),      # meq O2/kg
        "confidence": round(random.uniform(88.0, 97.0), 1),
    }


def generate_degraded_reading(stage=None):
    """Readings for oil after extended frying."""
    if stage is None:
        stage = random.choice(["tiring", "at_limit", "spent"])

    reading = generate_fresh_reading()

    if stage == "tiring":
        reading["ffa"] = round(random.uniform(0.18, 0.25), 2)
        reading["tpc"] = round(random.uniform(17.0, 21.0), 1)
    elif stage == "at_limit":
        reading["ffa"] = round(random.uniform(0.27, 0.31), 2)
        reading["tpc"] = round(random.uniform(23.0, 26.0), 1)
        reading["pv"] = round(random.uniform(8.0, 10.5), 1)
    elif stage == "spent":
        # Well past every limit
        reading["ffa"] = round(random.uniform(0.4, 0.8), 2)
        reading["tpc"] = round(random.uniform(28.0, 35.0), 1)
        reading["pv"] = round(random.uniform(12.0, 20.0), 1)

    return reading


def send_reading(reading: dict, standard: str) -> bool:
    """Score a single reading via the API."""
    payload = {**reading, "standard": standard}

    try:
        response = requests.post(SCORE_ENDPOINT, json=payload, timeout=5)

        if response.status_code == 200:
            body = response.json()
            print(f"[OK] FFA={reading['ffa']:.2f}%, "
                  f"TPC={reading['tpc']:.1f}%, "
                  f"PV={reading['pv']:.1f} -> "
                  f"score {body['score']} ({body['classification'].upper()})")
            return True
        else:
            print(f"[ERROR] HTTP {response.status_code}: {response.text}")
            return False

    except requests.exceptions.ConnectionError:
        print(f"[ERROR] Cannot connect to {SCORE_ENDPOINT}")
        print("       Make sure the backend is running: uvicorn oiliq.api.main:app")
        return False
    except requests.exceptions.RequestException as e:
        print(f"[ERROR] {e}")
        return False


def run_batch_test(batch_id: str, operator_id: str) -> bool:
    """Trigger a sensor test on a batch via the API."""
    url = BATCH_TEST_ENDPOINT.format(batch_id=batch_id)

    try:
        response = requests.post(url, json={"operator_id": operator_id}, timeout=30)

        if response.status_code == 200:
            record = response.json()["record"]
            print(f"[OK] {record['id']} | score {record['score']} "
                  f"({record['classification'].upper()})")
            return True
        else:
            print(f"[ERROR] HTTP {response.status_code}: {response.text}")
            return False

    except requests.exceptions.ConnectionError:
        print(f"[ERROR] Cannot connect to {url}")
        return False
    except requests.exceptions.RequestException as e:
        print(f"[ERROR] {e}")
        return False


def run_generator(count: int, interval: float, degraded: bool, standard: str, batch_id: str = None):
    """Send `count` readings (or batch tests) to the API."""
    print("=" * 60)
    print("FOODOIL IQ - DATA GENERATOR")
    print("=" * 60)
    if batch_id:
        print(f"Batch ID:   {batch_id}")
    else:
        print(f"Mode:       {'DEGRADED (used oil)' if degraded else 'FRESH (new oil)'}")
        print(f"Standard:   {standard}")
    print(f"Count:      {count}")
    print(f"Interval:   {interval} seconds")
    print("=" * 60)
    print()

    sent = 0
    failed = 0

    try:
        for _ in range(count):
            if batch_id:
                ok = run_batch_test(batch_id, operator_id="generator")
            else:
                reading = generate_degraded_reading() if degraded else generate_fresh_reading()
                ok = send_reading(reading, standard)

            if ok:
                sent += 1
            else:
                failed += 1

            time.sleep(interval)

    except KeyboardInterrupt:
        print("\n[STOPPED] Generator interrupted by user")

    print()
    print("=" * 60)
    print(f"[COMPLETE] Sent {sent} requests, {failed} failed")
    print("=" * 60)


def main():
    parser = argparse.ArgumentParser(description="Synthetic oil test generator")
    parser.add_argument("--count", type=int, default=10, help="Number of requests")
    parser.add_argument("--interval", type=float, default=0.5, help="Seconds between requests")
    parser.add_argument("--standard", default="fssai", help="fssai, eu, china, codex")
    parser.add_argument("--batch_id", default=None, help="Run sensor tests on this batch instead")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--fresh", action="store_true", help="Fresh oil readings (default)")
    mode.add_argument("--degraded", action="store_true", help="Used oil readings")

    args = parser.parse_args()

    run_generator(
        count=args.count,
        interval=args.interval,
        degraded=args.degraded,
        standard=args.standard,
        batch_id=args.batch_id,
    )


if __name__ == "__main__":
    main()
