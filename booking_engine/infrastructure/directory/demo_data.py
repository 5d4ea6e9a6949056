"""Directory records used by the static adapters in dev/local mode."""

_WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")


def _personal(from_time: str, to_time: str, days=_WEEKDAYS) -> dict:
    return {day: {"from": from_time, "to": to_time, "status": "available"} for day in days}


DEMO_DIRECTORY = {
    "shops": [
        {
            "id": "shop-downtown",
            "ownerId": "owner-lena",
            "name": "Downtown Cuts",
            "openingHours": [
                {"day": "monday", "isOpen": True, "openTime": "09:00", "closeTime": "18:00"},
                {"day": "tuesday", "isOpen": True, "openTime": "09:00", "closeTime": "18:00"},
                {"day": "wednesday", "isOpen": True, "openTime": "09:00", "closeTime": "18:00"},
                {"day": "thursday", "isOpen": True, "openTime": "09:00", "closeTime": "20:00"},
                {"day": "friday", "isOpen": True, "openTime": "09:00", "closeTime": "20:00"},
                {"day": "saturday", "isOpen": True, "openTime": "10:00", "closeTime": "16:00"},
                {"day": "sunday", "isOpen": False, "openTime": "", "closeTime": ""},
            ],
        }
    ],
    "providers": [
        {"id": "owner-lena", "kind": "shopOwner", "name": "Lena Ortiz", "shopId": "shop-downtown"},
        {
            "id": "barber-marco",
            "kind": "employedBarber",
            "name": "Marco Diaz",
            "shopId": "shop-downtown",
            "schedule": _personal("09:00", "17:00"),
        },
        {
            "id": "barber-sam",
            "kind": "employedBarber",
            "name": "Sam Lee",
            "shopId": "shop-downtown",
            "schedule": _personal("12:00", "20:00", ("wednesday", "thursday", "friday", "saturday")),
        },
        {
            "id": "freelance-ana",
            "kind": "freelanceBarber",
            "name": "Ana Silva",
            "schedule": _personal("08:00", "14:00"),
        },
        {
            "id": "freelancer-kofi",
            "kind": "freelancer",
            "name": "Kofi Mensah",
            "schedule": _personal("10:00", "19:00", ("tuesday", "thursday", "saturday")),
        },
    ],
}

DEMO_SERVICES = {
    "services": [
        {"id": "svc-haircut", "name": "Classic haircut", "type": "shopBased", "price": 25, "duration": 30,
         "shopId": "shop-downtown"},
        {"id": "svc-beard", "name": "Beard trim", "type": "shopBased", "price": 15, "duration": 20,
         "shopId": "shop-downtown"},
        {"id": "svc-fade", "name": "Skin fade", "type": "shopBased", "price": 35, "duration": 45,
         "shopId": "shop-downtown"},
        {"id": "svc-home-cut", "name": "Home haircut", "type": "homeBased", "price": 40, "duration": 60},
    ]
}
