"""Lightweight REST client for the scoutbook API."""

from __future__ import annotations

import argparse
import json

import httpx


def build_patch(raw: str) -> dict:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid patch JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise SystemExit("Patch JSON must be an object")
    return payload


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the scoutbook REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--list", action="store_true", help="List players and exit")
    parser.add_argument("--sort", default=None, help="Sort key used with --list")
    parser.add_argument("--direction", default="asc", help="Sort direction used with --list")
    parser.add_argument("--get", metavar="PLAYER_ID", help="Fetch a single player")
    parser.add_argument("--patch", nargs=2, metavar=("PLAYER_ID", "JSON"), help="Apply a JSON patch to a player")
    parser.add_argument("--describe", metavar="PLAYER_ID", help="Get or generate a scouting report")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url, timeout=60.0) as client:
        if args.list:
            params = {"direction": args.direction}
            if args.sort:
                params["sort"] = args.sort
            resp = client.get("/players", params=params)
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.get:
            resp = client.get(f"/players/{args.get}")
            if resp.status_code == 404:
                raise SystemExit(f"player {args.get} not found")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.patch:
            player_id, raw = args.patch
            resp = client.patch(f"/players/{player_id}", json=build_patch(raw))
            if resp.status_code == 404:
                raise SystemExit(f"player {player_id} not found")
            if resp.status_code == 400:
                raise SystemExit(resp.json().get("detail", "Validation failed"))
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.describe:
            resp = client.post(f"/players/{args.describe}/description")
            if resp.status_code == 404:
                raise SystemExit(f"player {args.describe} not found")
            resp.raise_for_status()
            payload = resp.json()
            suffix = " (cached)" if payload["cached"] else ""
            print(f"{payload['description']}{suffix}")


if __name__ == "__main__":
    main()
