from __future__ import annotations

from datetime import datetime, timezone

from fastapi.testclient import TestClient

from app.api.routes import internal_helpers, internal_tickets
from app.economy.loyalty.errors import LoyaltyPointsOverflowError
from app.economy.loyalty.types import LoyaltyTier
from app.economy.tickets.errors import (
    TicketEventNotFoundError,
    TicketEventSoldOutError,
    TicketEventValidationError,
    TicketNotFoundError,
)
from app.economy.tickets.types import (
    EventRecord,
    TicketPriceQuote,
    TicketPurchaseResult,
    TicketRecord,
)
from app.main import app
from tests.api.helpers import INTERNAL_HEADERS, DummySessionLocal, internal_settings

NOW_UTC = datetime(2026, 3, 1, 18, 30, tzinfo=timezone.utc)


def _client(monkeypatch) -> TestClient:
    monkeypatch.setattr(internal_helpers, "get_settings", lambda: internal_settings())
    monkeypatch.setattr(internal_tickets, "SessionLocal", DummySessionLocal())
    return TestClient(app, client=("127.0.0.1", 5100))


def _ticket(**overrides) -> TicketRecord:
    values = {
        "ticket_id": 11,
        "event_id": 3,
        "user_id": 7,
        "seat_number": "A-12",
        "purchase_date": NOW_UTC,
        "base_price": 100,
        "demand_price": 100,
        "discount_percent": 85,
        "tier_at_purchase": LoyaltyTier.GOLD,
        "price": 85,
        "points_earned": 8,
    }
    values.update(overrides)
    return TicketRecord(**values)


def test_purchase_ticket_returns_ticket_and_loyalty_state(monkeypatch) -> None:
    captured: dict[str, object] = {}

    async def _fake_purchase(session, **kwargs):
        captured.update(kwargs)
        return TicketPurchaseResult(
            ticket=_ticket(),
            loyalty_points=5008,
            loyalty_tier=LoyaltyTier.GOLD,
            previous_loyalty_tier=LoyaltyTier.GOLD,
        )

    client = _client(monkeypatch)
    monkeypatch.setattr(internal_tickets.TicketService, "purchase_ticket", _fake_purchase)

    response = client.post(
        "/internal/tickets/purchase",
        json={"event_id": 3, "user_id": 7, "seat_number": "A-12"},
        headers=INTERNAL_HEADERS,
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["ticket"]["ticket_id"] == 11
    assert payload["ticket"]["price"] == 85
    assert payload["ticket"]["tier_at_purchase"] == "GOLD"
    assert payload["loyalty_points"] == 5008
    assert payload["loyalty_tier"] == "GOLD"
    assert payload["tier_changed"] is False
    assert captured["event_id"] == 3
    assert captured["user_id"] == 7
    assert captured["seat_number"] == "A-12"
    assert captured["now_utc"].tzinfo is not None


def test_purchase_ticket_sold_out_maps_to_409(monkeypatch) -> None:
    async def _fake_purchase(session, **kwargs):
        raise TicketEventSoldOutError

    client = _client(monkeypatch)
    monkeypatch.setattr(internal_tickets.TicketService, "purchase_ticket", _fake_purchase)

    response = client.post(
        "/internal/tickets/purchase",
        json={"event_id": 3, "user_id": 7, "seat_number": "A-12"},
        headers=INTERNAL_HEADERS,
    )

    assert response.status_code == 409
    assert response.json() == {"detail": {"code": "E_EVENT_SOLD_OUT"}}


def test_purchase_ticket_unknown_event_maps_to_404(monkeypatch) -> None:
    async def _fake_purchase(session, **kwargs):
        raise TicketEventNotFoundError

    client = _client(monkeypatch)
    monkeypatch.setattr(internal_tickets.TicketService, "purchase_ticket", _fake_purchase)

    response = client.post(
        "/internal/tickets/purchase",
        json={"event_id": 404, "user_id": 7, "seat_number": "A-12"},
        headers=INTERNAL_HEADERS,
    )

    assert response.status_code == 404
    assert response.json() == {"detail": {"code": "E_EVENT_NOT_FOUND"}}


def test_purchase_ticket_points_overflow_maps_to_422(monkeypatch) -> None:
    async def _fake_purchase(session, **kwargs):
        raise LoyaltyPointsOverflowError

    client = _client(monkeypatch)
    monkeypatch.setattr(internal_tickets.TicketService, "purchase_ticket", _fake_purchase)

    response = client.post(
        "/internal/tickets/purchase",
        json={"event_id": 3, "user_id": 7, "seat_number": "A-12"},
        headers=INTERNAL_HEADERS,
    )

    assert response.status_code == 422
    assert response.json() == {"detail": {"code": "E_POINTS_OVERFLOW"}}


def test_purchase_ticket_rejects_missing_token(monkeypatch) -> None:
    client = _client(monkeypatch)

    response = client.post(
        "/internal/tickets/purchase",
        json={"event_id": 3, "user_id": 7, "seat_number": "A-12"},
    )

    assert response.status_code == 403
    assert response.json() == {"detail": {"code": "E_FORBIDDEN"}}


def test_purchase_ticket_rejects_disallowed_ip(monkeypatch) -> None:
    monkeypatch.setattr(
        internal_helpers,
        "get_settings",
        lambda: internal_settings(allowlist="192.168.0.0/16"),
    )
    client = TestClient(app, client=("10.0.0.25", 5101))

    response = client.post(
        "/internal/tickets/purchase",
        json={"event_id": 3, "user_id": 7, "seat_number": "A-12"},
        headers=INTERNAL_HEADERS,
    )

    assert response.status_code == 403
    assert response.json() == {"detail": {"code": "E_FORBIDDEN"}}


def test_create_event_returns_201(monkeypatch) -> None:
    async def _fake_create_event(session, **kwargs):
        return EventRecord(
            event_id=3,
            title=kwargs["title"],
            ticket_price=kwargs["ticket_price"],
            total_tickets=kwargs["total_tickets"],
            tickets_sold=0,
            created_at=NOW_UTC,
        )

    client = _client(monkeypatch)
    monkeypatch.setattr(internal_tickets.TicketService, "create_event", _fake_create_event)

    response = client.post(
        "/internal/events",
        json={"title": "Spring Concert", "ticket_price": 100, "total_tickets": 250},
        headers=INTERNAL_HEADERS,
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["event_id"] == 3
    assert payload["tickets_sold"] == 0
    assert payload["tickets_remaining"] == 250


def test_create_event_rejects_zero_capacity_payload(monkeypatch) -> None:
    client = _client(monkeypatch)

    response = client.post(
        "/internal/events",
        json={"title": "Spring Concert", "ticket_price": 100, "total_tickets": 0},
        headers=INTERNAL_HEADERS,
    )

    assert response.status_code == 422


def test_create_event_service_validation_maps_to_422(monkeypatch) -> None:
    async def _fake_create_event(session, **kwargs):
        raise TicketEventValidationError

    client = _client(monkeypatch)
    monkeypatch.setattr(internal_tickets.TicketService, "create_event", _fake_create_event)

    response = client.post(
        "/internal/events",
        json={"title": " ", "ticket_price": 100, "total_tickets": 10},
        headers=INTERNAL_HEADERS,
    )

    assert response.status_code == 422
    assert response.json() == {"detail": {"code": "E_EVENT_INVALID"}}


def test_quote_ticket_price(monkeypatch) -> None:
    async def _fake_quote(session, *, event_id: int, user_id: int):
        return TicketPriceQuote(
            event_id=event_id,
            user_id=user_id,
            base_price=100,
            demand_price=100,
            discount_percent=100,
            tier=None,
            final_price=100,
            points_to_earn=10,
            tickets_remaining=50,
        )

    client = _client(monkeypatch)
    monkeypatch.setattr(internal_tickets.TicketService, "quote_ticket_price", _fake_quote)

    response = client.get("/internal/events/3/price?user_id=7", headers=INTERNAL_HEADERS)

    assert response.status_code == 200
    payload = response.json()
    assert payload["tier"] is None
    assert payload["final_price"] == 100
    assert payload["points_to_earn"] == 10


def test_get_ticket_not_found(monkeypatch) -> None:
    async def _fake_get_ticket(session, *, ticket_id: int):
        raise TicketNotFoundError

    client = _client(monkeypatch)
    monkeypatch.setattr(internal_tickets.TicketService, "get_ticket", _fake_get_ticket)

    response = client.get("/internal/tickets/404", headers=INTERNAL_HEADERS)

    assert response.status_code == 404
    assert response.json() == {"detail": {"code": "E_TICKET_NOT_FOUND"}}


def test_list_user_tickets(monkeypatch) -> None:
    captured: dict[str, object] = {}

    async def _fake_list(session, **kwargs):
        captured.update(kwargs)
        return [_ticket(ticket_id=12, seat_number="A-13"), _ticket()]

    client = _client(monkeypatch)
    monkeypatch.setattr(internal_tickets.TicketService, "list_user_tickets", _fake_list)

    response = client.get("/internal/users/7/tickets?limit=2", headers=INTERNAL_HEADERS)

    assert response.status_code == 200
    assert [item["ticket_id"] for item in response.json()["tickets"]] == [12, 11]
    assert captured == {"user_id": 7, "limit": 2, "offset": 0}


def test_create_event_rejects_capacity_beyond_integer_column(monkeypatch) -> None:
    client = _client(monkeypatch)

    response = client.post(
        "/internal/events",
        json={"title": "Spring Concert", "ticket_price": 100, "total_tickets": 2**31},
        headers=INTERNAL_HEADERS,
    )

    assert response.status_code == 422


def test_create_event_rejects_price_that_could_overflow_demand_price(monkeypatch) -> None:
    client = _client(monkeypatch)

    response = client.post(
        "/internal/events",
        json={"title": "Spring Concert", "ticket_price": 2**63 - 1, "total_tickets": 10},
        headers=INTERNAL_HEADERS,
    )

    assert response.status_code == 422


def test_purchase_ticket_rejects_ids_beyond_bigint(monkeypatch) -> None:
    client = _client(monkeypatch)

    response = client.post(
        "/internal/tickets/purchase",
        json={"event_id": 3, "user_id": 2**63, "seat_number": "A-12"},
        headers=INTERNAL_HEADERS,
    )

    assert response.status_code == 422


def test_get_event_rejects_path_id_beyond_bigint(monkeypatch) -> None:
    client = _client(monkeypatch)

    response = client.get(f"/internal/events/{2**63}", headers=INTERNAL_HEADERS)

    assert response.status_code == 422
