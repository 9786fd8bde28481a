import pytest

from trips import Trip


@pytest.fixture
def members():
    """Three internal trip members."""
    return ["Alice", "Bob", "Carol"]


@pytest.fixture
def trip_data(members):
    """
    Trip record touching every transaction source.

    Expected balances (HKD):
        Alice -220, Bob -360, Carol +680, Dave (external) -100
    """
    return {
        "trip_id": "trip_tokyo",
        "title": "Tokyo in spring",
        "settlement_currency": "HKD",
        "fx_rate": 0.052,
        "members": members,
        "external_names": ["Dave"],
        "expenses": [
            {
                # 6000 JPY at 0.05 = 300 HKD
                "expense_id": "E1",
                "description": "Sushi dinner",
                "amount_local": 6000,
                "exchange_rate": 0.05,
                "currency": "JPY",
                "payment_method": "Credit Card",
                "split": {"method": "Equally", "payer": "Alice"},
                "date": "2025-04-02",
            },
            {
                "expense_id": "E2",
                "description": "Souvenirs",
                "amount_local": 3000,
                "exchange_rate": 0.05,
                "amount_settlement": 150,
                "currency": "JPY",
                "payment_method": "Cash",
                "split": {
                    "method": "Custom",
                    "payer": "Bob",
                    "custom_shares": {"Bob": 50, "Dave": 100},
                    "custom_local_shares": {"Bob": 1000, "Dave": 2000},
                },
                "date": "2025-04-03",
            },
            {
                "expense_id": "E3",
                "description": "Taxi",
                "amount_settlement": 90,
                "currency": "HKD",
                "payment_method": "Cash",
                "split": {"method": "Solely", "payer": "Carol"},
                "date": "2025-04-01",
            },
        ],
        "bookings": [
            {
                "booking_id": "B1",
                "booking_type": "Hotel",
                "name": "Shinjuku hotel",
                "amount_settlement": 1200,
                "payment_method": "Credit Card",
                "split": {"method": "Equally", "payer": "Carol"},
                "date": "2025-04-01",
            },
            {
                # No amount yet
                "booking_id": "B2",
                "booking_type": "Ticket",
                "name": "Museum tickets",
                "split": {"method": "Equally", "payer": "Bob"},
            },
        ],
        "plan_days": [
            {
                "date": "2025-04-02",
                "scheduled": [
                    {
                        "item_id": "A1",
                        "activity": "Tea ceremony",
                        "amount_settlement": 60,
                        "payment_method": "Cash",
                        "split": {"method": "Equally", "payer": "Bob"},
                    },
                    {
                        "item_id": "A2",
                        "activity": "Walk in Yoyogi park",
                        "split": {"method": "Equally", "payer": "Alice"},
                    },
                ],
            }
        ],
    }


@pytest.fixture
def trip(trip_data):
    return Trip.from_dict(trip_data)


@pytest.fixture
def expected_balances():
    return {"Alice": -220.0, "Bob": -360.0, "Carol": 680.0, "Dave": -100.0}
