from lensmatch.models.booking import Booking, BookingStatus
from lensmatch.models.slot import AvailabilitySlot
from lensmatch.models.user import Role
from lensmatch.services import availability


def _request(photographer_id, **extra):
    body = {
        "photographer_id": photographer_id,
        "date": "2024-06-01",
        "start_time": "10:00",
        "end_time": "11:00",
        "total_amount": 150000,
        "location": "Bandra",
    }
    body.update(extra)
    return body


def test_booking_round_trip(client, make_photographer, make_slot, make_user, headers, gateway):
    p = make_photographer()
    make_slot(p)
    customer = make_user()

    r = client.post("/api/bookings", json=_request(p.id), headers=headers(customer))
    assert r.status_code == 201
    created = r.json()
    assert created["client_secret"] == "pi_1_secret"
    booking_id = created["booking"]["id"]

    got = client.get(f"/api/bookings/{booking_id}", headers=headers(customer)).json()
    assert got["total_amount"] == 150000
    assert got["status"] == "pending"
    assert got["payment_intent_id"] == "pi_1"
    assert got["photographer"]["id"] == p.id
    assert gateway.authorized[0][0] == 150000


def test_second_customer_cannot_take_booked_slot(client, make_photographer, make_user, headers):
    x = make_photographer()
    client.post(
        "/api/availability",
        json={"photographer_id": x.id, "date": "2024-06-01", "start_time": "10:00", "end_time": "11:00"},
        headers=headers(x.user),
    )
    y = make_user()
    z = make_user()

    r = client.post("/api/bookings", json=_request(x.id), headers=headers(y))
    assert r.status_code == 201
    assert r.json()["booking"]["status"] == "pending"

    slots = client.get(f"/api/photographers/{x.id}/availability").json()
    assert slots[0]["is_booked"] is True

    r = client.post("/api/bookings", json=_request(x.id), headers=headers(z))
    assert r.status_code == 409
    assert r.json()["detail"] == "The selected time slot is not available"


def test_booking_without_slot_fails(client, make_photographer, make_user, headers, gateway):
    p = make_photographer()
    r = client.post("/api/bookings", json=_request(p.id), headers=headers(make_user()))
    assert r.status_code == 409
    assert gateway.authorized == []


def test_failed_authorization_persists_nothing(client, db, make_photographer, make_slot, make_user, headers, gateway):
    p = make_photographer()
    make_slot(p)
    gateway.fail = True

    r = client.post("/api/bookings", json=_request(p.id), headers=headers(make_user()))
    assert r.status_code == 502
    assert db.query(Booking).count() == 0
    assert db.query(AvailabilitySlot).one().is_booked is False


def test_lost_slot_race_voids_authorization(client, db, make_photographer, make_slot, make_user, headers, gateway, monkeypatch):
    p = make_photographer()
    make_slot(p, booked=True)
    # the pre-check saw the slot free; the claim then finds it taken
    monkeypatch.setattr(availability, "is_slot_free", lambda *a, **kw: True)

    r = client.post("/api/bookings", json=_request(p.id), headers=headers(make_user()))
    assert r.status_code == 409
    assert gateway.cancelled == ["pi_1"]
    assert db.query(Booking).count() == 0


def test_only_customers_can_book(client, make_photographer, make_slot, headers):
    p = make_photographer()
    other = make_photographer()
    make_slot(p)
    r = client.post("/api/bookings", json=_request(p.id), headers=headers(other.user))
    assert r.status_code == 403


def test_booking_unknown_photographer_is_404(client, make_user, headers):
    r = client.post("/api/bookings", json=_request(999), headers=headers(make_user()))
    assert r.status_code == 404


def test_non_positive_amount_is_rejected(client, make_photographer, make_user, headers):
    p = make_photographer()
    r = client.post("/api/bookings", json=_request(p.id, total_amount=0), headers=headers(make_user()))
    assert r.status_code == 400


def test_booking_requires_authentication(client, make_photographer):
    p = make_photographer()
    assert client.post("/api/bookings", json=_request(p.id)).status_code == 401


def test_customer_cannot_read_someone_elses_booking(client, make_photographer, make_user, make_booking, headers):
    p = make_photographer()
    owner = make_user()
    stranger = make_user()
    b = make_booking(owner, p)

    r = client.get(f"/api/bookings/{b.id}", headers=headers(stranger))
    assert r.status_code == 403
    assert client.get("/api/bookings/999", headers=headers(stranger)).status_code == 404


def test_list_is_scoped_to_the_principal(client, make_photographer, make_user, make_booking, headers):
    p1 = make_photographer()
    p2 = make_photographer()
    c1 = make_user()
    c2 = make_user()
    admin = make_user(Role.ADMIN)
    b1 = make_booking(c1, p1)
    b2 = make_booking(c2, p2, start="12:00", end="13:00")

    assert [b["id"] for b in client.get("/api/bookings", headers=headers(c1)).json()] == [b1.id]
    assert [b["id"] for b in client.get("/api/bookings", headers=headers(p2.user)).json()] == [b2.id]
    assert {b["id"] for b in client.get("/api/bookings", headers=headers(admin)).json()} == {b1.id, b2.id}


def test_photographer_moves_booking_through_lifecycle(client, make_photographer, make_user, make_booking, headers):
    p = make_photographer()
    b = make_booking(make_user(), p)

    r = client.patch(f"/api/bookings/{b.id}/status", json={"status": "confirmed"}, headers=headers(p.user))
    assert r.status_code == 200
    assert r.json()["status"] == "confirmed"

    r = client.patch(f"/api/bookings/{b.id}/status", json={"status": "completed"}, headers=headers(p.user))
    assert r.json()["status"] == "completed"

    r = client.patch(f"/api/bookings/{b.id}/status", json={"status": "cancelled"}, headers=headers(p.user))
    assert r.status_code == 409


def test_pending_cannot_jump_to_completed(client, make_photographer, make_user, make_booking, headers):
    p = make_photographer()
    b = make_booking(make_user(), p)
    r = client.patch(f"/api/bookings/{b.id}/status", json={"status": "completed"}, headers=headers(p.user))
    assert r.status_code == 409


def test_unknown_status_is_400(client, make_photographer, make_user, make_booking, headers):
    p = make_photographer()
    b = make_booking(make_user(), p)
    r = client.patch(f"/api/bookings/{b.id}/status", json={"status": "archived"}, headers=headers(p.user))
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid status"


def test_customer_may_only_cancel(client, make_photographer, make_user, make_booking, headers):
    p = make_photographer()
    customer = make_user()
    b = make_booking(customer, p)

    r = client.patch(f"/api/bookings/{b.id}/status", json={"status": "confirmed"}, headers=headers(customer))
    assert r.status_code == 403

    r = client.patch(f"/api/bookings/{b.id}/status", json={"status": "cancelled"}, headers=headers(customer))
    assert r.status_code == 200
    assert r.json()["status"] == "cancelled"


def test_stranger_cannot_change_status(client, make_photographer, make_user, make_booking, headers):
    p = make_photographer()
    b = make_booking(make_user(), p)
    r = client.patch(f"/api/bookings/{b.id}/status", json={"status": "cancelled"}, headers=headers(make_user()))
    assert r.status_code == 403


def test_cancelling_frees_the_slot(client, db, make_photographer, make_slot, make_user, headers):
    p = make_photographer()
    make_slot(p)
    customer = make_user()
    booking_id = client.post("/api/bookings", json=_request(p.id), headers=headers(customer)).json()["booking"]["id"]
    assert db.query(AvailabilitySlot).one().is_booked is True

    client.patch(f"/api/bookings/{booking_id}/status", json={"status": "cancelled"}, headers=headers(customer))
    assert db.query(AvailabilitySlot).one().is_booked is False
    assert db.get(Booking, booking_id).status == BookingStatus.CANCELLED


def test_payment_intent_reuses_stored_authorization(client, make_photographer, make_slot, make_user, headers, gateway):
    p = make_photographer()
    make_slot(p)
    customer = make_user()
    booking_id = client.post("/api/bookings", json=_request(p.id), headers=headers(customer)).json()["booking"]["id"]

    r = client.post("/api/create-payment-intent", json={"booking_id": booking_id}, headers=headers(customer))
    assert r.status_code == 200
    assert r.json()["client_secret"] == "pi_1_secret"
    assert len(gateway.authorized) == 1


def test_payment_intent_created_for_unpaid_booking(client, make_photographer, make_user, make_booking, headers, gateway):
    p = make_photographer()
    customer = make_user()
    b = make_booking(customer, p)

    r = client.post("/api/create-payment-intent", json={"booking_id": b.id}, headers=headers(customer))
    assert r.json()["client_secret"] == "pi_1_secret"
    assert gateway.authorized[0][1]["booking_id"] == str(b.id)

    r = client.post("/api/create-payment-intent", json={"booking_id": b.id}, headers=headers(p.user))
    assert r.status_code == 403


def test_other_photographer_cannot_read_or_change_booking(client, make_photographer, make_user, make_booking, headers):
    p = make_photographer()
    rival = make_photographer()
    b = make_booking(make_user(), p)

    assert client.get(f"/api/bookings/{b.id}", headers=headers(rival.user)).status_code == 403
    r = client.patch(f"/api/bookings/{b.id}/status", json={"status": "confirmed"}, headers=headers(rival.user))
    assert r.status_code == 403
    assert client.get("/api/bookings", headers=headers(rival.user)).json() == []


def test_cancelling_confirmed_booking_frees_the_slot(client, db, make_photographer, make_slot, make_user, headers):
    p = make_photographer()
    make_slot(p)
    customer = make_user()
    booking_id = client.post("/api/bookings", json=_request(p.id), headers=headers(customer)).json()["booking"]["id"]
    client.patch(f"/api/bookings/{booking_id}/status", json={"status": "confirmed"}, headers=headers(p.user))

    r = client.patch(f"/api/bookings/{booking_id}/status", json={"status": "cancelled"}, headers=headers(p.user))
    assert r.status_code == 200
    assert r.json()["status"] == "cancelled"
    assert db.query(AvailabilitySlot).one().is_booked is False


def test_admin_confirms_pending_booking(client, make_photographer, make_user, make_booking, headers):
    b = make_booking(make_user(), make_photographer())
    r = client.patch(f"/api/bookings/{b.id}/status", json={"status": "confirmed"}, headers=headers(make_user(Role.ADMIN)))
    assert r.status_code == 200
    assert r.json()["status"] == "confirmed"
