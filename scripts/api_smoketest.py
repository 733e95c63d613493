"""Tiny smoke test against a running Movie Likes API.

Creates a user, likes a movie twice, then reads the user back.
Prints status codes + response bodies.

Usage:
  uvicorn movielikes.main:app
  python scripts/api_smoketest.py [base_url]
"""

from __future__ import annotations

import sys

import requests


def main() -> int:
    base = (sys.argv[1] if len(sys.argv) > 1 else "http://127.0.0.1:8000").rstrip("/")

    try:
        r = requests.post(base + "/users", json={"name": "Nova"}, timeout=10)
        print("POST /users", r.status_code, r.text[:500])
        if r.status_code != 201:
            return 1
        user_id = r.json()["id"]

        for _ in range(2):
            r = requests.put(f"{base}/users/{user_id}/likes/tt0111161", timeout=10)
            print("PUT like", r.status_code, r.text[:500])

        r = requests.get(f"{base}/users/{user_id}", timeout=10)
        print("GET user", r.status_code, r.text[:500])
        return 0 if r.json().get("likes") == ["tt0111161"] else 1
    except requests.exceptions.RequestException as exc:
        print("exception:", type(exc).__name__, str(exc))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
