#!/usr/bin/env python3
"""
Warehouse, dispatch, delivery and un-delivery flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_deliver_and_restore.py
    python scripts/flow_deliver_and_restore.py --token <JWT> --vehicle-number MH04AB1234

Flow:
    1. Create warehouse, driver and owned vehicle
    2. Create booking
    3. Move booking into the warehouse
    4. Assign the vehicle (goods leave the warehouse)
    5. Mark booking DELIVERED (vehicle released)
    6. Move booking back to IN_TRANSIT (vehicle restored)
    7. Print the booking timeline and warehouse logs
"""

import argparse
import json
import sys

import httpx

BASE_URL = "http://localhost:8000"


def api_request(token: str | None, method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make API request, with the acting user's token when given."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    url = f"{BASE_URL}{endpoint}"

    if method == "GET":
        response = httpx.get(url, headers=headers, timeout=10.0, follow_redirects=True)
    elif method == "POST":
        response = httpx.post(url, headers=headers, json=data or {}, timeout=10.0, follow_redirects=True)
    elif method == "PUT":
        response = httpx.put(url, headers=headers, json=data or {}, timeout=10.0, follow_redirects=True)
    elif method == "PATCH":
        response = httpx.patch(url, headers=headers, json=data or {}, timeout=10.0, follow_redirects=True)
    else:
        raise ValueError(f"Unknown method: {method}")

    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def print_result(result: dict, fields: list[str] | None = None):
    """Print result, optionally filtering fields."""
    if result["status"] >= 400:
        print(f"ERROR ({result['status']}): {json.dumps(result['data'], indent=2)}")
        return False

    print(f"Status: {result['status']}")
    if fields:
        filtered = {k: result["data"].get(k) for k in fields if k in result["data"]}
        print(json.dumps(filtered, indent=2))
    else:
        print(json.dumps(result["data"], indent=2))
    return True


def require(result: dict, fields: list[str] | None = None) -> dict:
    if not print_result(result, fields):
        sys.exit(1)
    return result["data"]


def main():
    parser = argparse.ArgumentParser(description="Deliver and restore flow")
    parser.add_argument("--token", help="Bearer token of the acting user")
    parser.add_argument("--vehicle-number", default="MH04AB1234", help="Owned vehicle registration")
    parser.add_argument("--restore-to", default="IN_TRANSIT", help="Status to move back to after delivery")
    args = parser.parse_args()
    token = args.token

    # Step 1: Registry data
    print_step(1, "Create warehouse, driver and vehicle")
    warehouse = require(api_request(token, "POST", "/api/v1/warehouses", {
        "name": "Bhiwandi Hub",
        "city": "Mumbai",
        "capacity": 100,
    }), ["id", "code", "current_stock"])
    driver = require(api_request(token, "POST", "/api/v1/vehicles/drivers", {
        "name": "Ramesh Kumar",
        "phone": "9876543210",
        "license_number": "MH0420190012345",
    }), ["id", "name"])
    vehicle = require(api_request(token, "POST", "/api/v1/vehicles/owned", {
        "vehicle_number": args.vehicle_number,
        "vehicle_type": "32FT MXL",
        "capacity": "15 MT",
    }), ["id", "vehicle_number", "status"])

    # Step 2: Booking
    print_step(2, "Create booking")
    booking = require(api_request(token, "POST", "/api/v1/bookings", {
        "consignor_name": "Acme Textiles",
        "consignee_name": "Globex Retail",
        "from_location": "Surat",
        "to_location": "Pune",
        "material_description": "Cotton bales",
        "cargo_units": "40 bales",
    }), ["id", "booking_number", "status"])
    booking_url = f"/api/v1/bookings/{booking['id']}"

    # Step 3: Warehouse
    print_step(3, "Move booking into warehouse")
    require(api_request(token, "PUT", f"{booking_url}/warehouse", {
        "warehouse_id": warehouse["id"],
    }), ["status", "current_warehouse_id"])

    # Step 4: Vehicle
    print_step(4, "Assign vehicle")
    require(api_request(token, "POST", f"{booking_url}/assignment", {
        "vehicle_type": "OWNED",
        "vehicle_id": vehicle["id"],
        "driver_id": driver["id"],
    }), ["id", "status", "vehicle_id"])

    # Step 5: Deliver
    print_step(5, "Mark delivered")
    require(api_request(token, "PATCH", f"{booking_url}/status", {
        "status": "DELIVERED",
    }), ["status", "actual_delivery"])

    # Step 6: Un-deliver
    print_step(6, f"Move back to {args.restore_to}")
    require(api_request(token, "PATCH", f"{booking_url}/status", {
        "status": args.restore_to,
    }), ["status", "current_warehouse_id", "actual_delivery"])

    # Step 7: Audit trail
    print_step(7, "Timeline and warehouse logs")
    timeline = require(api_request(token, "GET", f"{booking_url}/timeline"), [])
    for entry in timeline:
        print(f"  {entry['created_at']}  {entry['action']:<24} {entry['description']}")
    logs = require(api_request(token, "GET", f"/api/v1/warehouses/{warehouse['id']}/logs"), [])
    for log in logs:
        print(f"  {log['created_at']}  {log['type']:<8} {log['notes']}")

    print("\nFlow complete.")


if __name__ == "__main__":
    main()
