#!/usr/bin/env python3
"""
End-to-end smoke check for a running City Manager API.

Walks the create/read/search/update/delete flow and cleans up after itself.

Usage:
    python scripts/api_smoke.py [BASE_URL]
"""

import sys
import uuid
from typing import Optional

import requests

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"


class Colors:
    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    END = '\033[0m'


def print_step(name: str):
    print(f"\n{Colors.BLUE}=== {name} ==={Colors.END}")


def print_success(msg: str):
    print(f"{Colors.GREEN}✓ {msg}{Colors.END}")


def print_error(msg: str):
    print(f"{Colors.RED}✗ {msg}{Colors.END}")


def print_info(msg: str):
    print(f"{Colors.YELLOW}ℹ {msg}{Colors.END}")


def check_health() -> bool:
    print_step("Health Checks")
    try:
        r = requests.get(f"{BASE_URL}/health", timeout=5)
        assert r.status_code == 200
        print_success("GET /health")
        print_info(f"Database: {r.json().get('database', 'unknown')}")
    except Exception as e:
        print_error(f"GET /health - {e}")
        return False
    return True


def check_create(name: str) -> Optional[str]:
    print_step("Create")
    try:
        r = requests.post(f"{BASE_URL}/cities", json={"cityName": name, "count": 3}, timeout=5)
        assert r.status_code == 201, f"{r.status_code}: {r.text}"
        city_id = r.json()["_id"]
        print_success(f"POST /cities - created {city_id}")

        r = requests.post(f"{BASE_URL}/cities", json={"cityName": name.upper(), "count": 9}, timeout=5)
        assert r.status_code == 409, f"{r.status_code}: {r.text}"
        print_success("POST /cities - duplicate name rejected")
        return city_id
    except Exception as e:
        print_error(f"POST /cities - {e}")
        return None


def check_read(city_id: str, name: str) -> bool:
    print_step("Read & Search")
    try:
        r = requests.get(f"{BASE_URL}/cities/{city_id}", timeout=5)
        assert r.status_code == 200 and r.json()["cityName"] == name
        print_success(f"GET /cities/{city_id}")

        r = requests.get(f"{BASE_URL}/api/cities", params={"search": name.lower()}, timeout=5)
        data = r.json()
        assert r.status_code == 200 and data["total"] == 1
        print_success("GET /api/cities - search found the city")
    except Exception as e:
        print_error(f"Read - {e}")
        return False
    return True


def check_update_and_delete(city_id: str, name: str) -> bool:
    print_step("Update & Delete")
    try:
        r = requests.put(f"{BASE_URL}/cities/{city_id}", json={"cityName": name, "count": 4}, timeout=5)
        assert r.status_code == 200 and r.json()["count"] == 4
        print_success(f"PUT /cities/{city_id}")

        r = requests.delete(f"{BASE_URL}/cities/{city_id}", timeout=5)
        assert r.status_code == 200
        r = requests.delete(f"{BASE_URL}/cities/{city_id}", timeout=5)
        assert r.status_code == 404
        print_success(f"DELETE /cities/{city_id} - second delete is 404")
    except Exception as e:
        print_error(f"Update/Delete - {e}")
        return False
    return True


def main():
    print_info(f"Checking against: {BASE_URL}")

    if not check_health():
        print_error("Health check failed. Is the API running?")
        sys.exit(1)

    name = f"Smoketown-{uuid.uuid4().hex[:8]}"
    city_id = check_create(name)
    if not city_id:
        sys.exit(1)

    ok = check_read(city_id, name)
    ok = check_update_and_delete(city_id, name) and ok

    if not ok:
        sys.exit(1)
    print(f"\n{Colors.GREEN}All checks passed{Colors.END}\n")


if __name__ == "__main__":
    main()
