from datetime import date

from conftest import DAY, booking_request, slot_states
from models import db, Availability, Booking, Studio
from services import get_booking_engine, get_notifier


def test_admin_endpoints_reject_other_roles(factory, api):
    customer = api(factory.user())
    owner = api(factory.user(role="OWNER"))

    for client in (customer, owner):
        assert client.get("/api/admin/bookings").status_code == 403
        assert client.get("/api/admin/studios/pending").status_code == 403
        assert client.delete("/api/admin/bookings/1").status_code == 403

    assert api().get("/api/admin/bookings").status_code == 401


def test_delete_booking_restores_slots(factory, api):
    studio = factory.studio()
    factory.availability(studio, hours=(9, 10, 11))
    factory.availability(studio, day=date(2025, 2, 2), hours=(9,))
    customer = api(factory.user())
    booking = customer.post("/api/booking", json=booking_request(studio, hours=[9, 10])).get_json()["booking"]
    customer.post("/api/booking", json=booking_request(studio, hours=[9], day=date(2025, 2, 2)))

    resp = api(factory.user(role="ADMIN")).delete(f"/api/admin/bookings/{booking['id']}")

    assert resp.status_code == 200
    assert resp.get_json() == {"message": "Booking deleted and slots restored"}
    assert db.session.get(Booking, booking["id"]) is None
    assert slot_states(studio) == {9: True, 10: True, 11: True}
    assert slot_states(studio, day=date(2025, 2, 2)) == {9: False}
    assert Availability.query.filter_by(studio_id=studio.id, date=DAY).count() == 1


def test_delete_unknown_booking(factory, api):
    resp = api(factory.user(role="ADMIN")).delete("/api/admin/bookings/999")

    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Booking not found"}


def test_all_bookings_lists_every_customer(factory, api):
    studio = factory.studio()
    factory.availability(studio)
    api(factory.user(name="A")).post("/api/booking", json=booking_request(studio, hours=[9]))
    api(factory.user(name="B")).post("/api/booking", json=booking_request(studio, hours=[10]))

    rows = api(factory.user(role="ADMIN")).get("/api/admin/bookings").get_json()

    assert [r["customer"]["name"] for r in rows] == ["B", "A"]


def test_pending_approve_and_deny(factory, api, notifier):
    owner = factory.user(role="OWNER", email="owner@podhive.test")
    pending = factory.studio(owner=owner, approved=False, name="Pending")
    doomed = factory.studio(owner=owner, approved=False, name="Doomed")
    factory.availability(doomed)
    live = factory.studio(owner=owner, name="Live")
    admin = api(factory.user(role="ADMIN"))

    names = [s["name"] for s in admin.get("/api/admin/studios/pending").get_json()]
    assert names == ["Pending", "Doomed"]

    resp = admin.put(f"/api/admin/studios/{pending.id}/approve")
    assert resp.status_code == 200
    assert resp.get_json()["studio"]["approved"] is True
    assert notifier.emails[-1]["to"] == "owner@podhive.test"

    doomed_id = doomed.id
    resp = admin.delete(f"/api/admin/studios/{doomed_id}/deny")
    assert resp.status_code == 200
    assert db.session.get(Studio, doomed_id) is None
    assert Availability.query.filter_by(studio_id=doomed_id).count() == 0

    resp = admin.delete(f"/api/admin/studios/{live.id}/deny")
    assert resp.status_code == 400

    assert admin.get("/api/admin/studios/pending").get_json() == []


def test_approve_unknown_studio(factory, api):
    resp = api(factory.user(role="ADMIN")).put("/api/admin/studios/31337/approve")
    assert resp.status_code == 404


def test_audit_log_records_booking_events(factory, api):
    studio = factory.studio()
    factory.availability(studio, hours=(9,))
    customer = factory.user()
    client = api(customer)
    client.post("/api/booking", json=booking_request(studio, hours=[9]))
    client.post("/api/booking", json=booking_request(studio, hours=[9]))

    admin = api(factory.user(role="ADMIN"))
    rows = admin.get("/api/admin/audit-logs?action=BOOKING_CONFLICT").get_json()

    assert len(rows) == 1
    assert rows[0]["userId"] == customer.id
    assert rows[0]["metadata"] == {"date": DAY.isoformat(), "hours": [9]}

    created = admin.get(f"/api/admin/audit-logs?action=BOOKING_CREATE&user_id={customer.id}").get_json()
    assert created[0]["metadata"]["total_price"] == 1000


def test_make_admin_command(app, factory):
    user = factory.user(email="boss@podhive.test")
    runner = app.test_cli_runner()

    result = runner.invoke(args=["make-admin", "Boss@PodHive.test"])
    assert "promoted to ADMIN" in result.output
    # running it twice is harmless
    runner.invoke(args=["make-admin", "boss@podhive.test"])

    db.session.expire_all()
    assert [r.name for r in db.session.get(type(user), user.id).roles].count("ADMIN") == 1
    assert "User not found" in runner.invoke(args=["make-admin", "ghost@podhive.test"]).output


def test_service_accessors_return_app_instances(app, notifier):
    assert get_booking_engine() is app.extensions["booking_engine"]
    assert get_notifier() is notifier
