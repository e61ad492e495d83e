from __future__ import annotations

import argparse
import random
import time

import httpx


def simulate(client: httpx.Client, *, count: int | None = None, interval: float = 0.0) -> list[dict]:
    """Post check events for random employees, flipping each one's current state."""
    r = client.get("/api/status")
    r.raise_for_status()
    state = {row["id"]: row["current_status"] for row in r.json()}
    if not state:
        raise SystemExit("no employees to check in")

    sent: list[dict] = []
    while count is None or len(sent) < count:
        employee_id = random.choice(list(state))
        kind = "OUT" if state[employee_id] == "IN" else "IN"
        rr = client.post("/api/check", json={"employeeId": employee_id, "type": kind})
        rr.raise_for_status()
        log = rr.json()["log"]
        state[employee_id] = log["type"]
        sent.append(log)
        print(f"sent: {log['employee_name']} {log['type']} at {log['timestamp']}")
        if interval:
            time.sleep(interval)
    return sent


def main() -> None:
    p = argparse.ArgumentParser(description="Simulate a check-in terminal posting IN/OUT events")
    p.add_argument("--api", default="http://localhost:3000", help="API base URL")
    p.add_argument("--count", type=int, default=None, help="Stop after this many events")
    p.add_argument("--interval", type=float, default=2.0, help="Seconds between events")
    args = p.parse_args()

    with httpx.Client(base_url=args.api, timeout=10.0) as client:
        print(f"Connected to {args.api}. Sending events...")
        simulate(client, count=args.count, interval=args.interval)


if __name__ == "__main__":
    main()
