#!/usr/bin/env python3
"""Walk a booking through its lifecycle against a running dev server (demo directory)."""

import sys
from datetime import date, timedelta

import httpx


BASE_URL = "http://127.0.0.1:8001"

CUSTOMER = {"X-Actor-Id": "smoke-customer", "X-Actor-Role": "customer"}
BARBER = {"X-Actor-Id": "barber-marco", "X-Actor-Role": "barber"}


def next_monday() -> date:
    today = date.today()
    return today + timedelta(days=(7 - today.weekday()) or 7)


def show_slots(day: date) -> list[str]:
    print("=" * 60)
    print(f"GET /providers/barber-marco/available-slots?date={day}")
    print("=" * 60)
    response = httpx.get(
        f"{BASE_URL}/providers/barber-marco/available-slots",
        params={"date": day.isoformat(), "serviceId": "svc-haircut"},
        timeout=10.0,
    )
    response.raise_for_status()
    slots = response.json()["slots"]
    print(f"{len(slots)} free slots: {', '.join(slots)}")
    return slots


def book(day: date, slot: str) -> dict | None:
    print("\n" + "=" * 60)
    print(f"POST /bookings ({day} {slot})")
    print("=" * 60)
    payload = {"providerId": "barber-marco", "serviceId": "svc-haircut", "date": day.isoformat(), "time": slot}
    try:
        response = httpx.post(f"{BASE_URL}/bookings", json=payload, headers=CUSTOMER, timeout=10.0)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        print(f"HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return None
    data = response.json()
    print(f"Created {data['uid']} status={data['status']}")
    return data


def reject_and_compare(booking_id: str) -> None:
    print("\n" + "=" * 60)
    print("POST /bookings/{id}/reject, then read as both parties")
    print("=" * 60)
    httpx.post(
        f"{BASE_URL}/bookings/{booking_id}/reject",
        json={"reason": "fully booked"},
        headers=BARBER,
        timeout=10.0,
    ).raise_for_status()
    for name, headers in (("barber", BARBER), ("customer", CUSTOMER)):
        view = httpx.get(f"{BASE_URL}/bookings/{booking_id}", headers=headers, timeout=10.0).json()
        print(f"  {name} sees status={view['status']}")


def main():
    try:
        httpx.get(f"{BASE_URL}/health", timeout=5.0)
    except httpx.HTTPError:
        print("Server is not running!")
        print("   Please start it with: uvicorn booking_engine.main:app --reload --port 8001")
        sys.exit(1)

    day = next_monday()
    slots = show_slots(day)
    if not slots:
        print("No free slots; nothing to book.")
        return

    booking = book(day, slots[0])
    if booking is None:
        sys.exit(1)
    show_slots(day)
    reject_and_compare(booking["id"])


if __name__ == "__main__":
    main()
