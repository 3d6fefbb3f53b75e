from conftest import DAY, booking_request, slot_states
from models import db, Review, Studio


def studio_payload(**overrides):
    payload = {
        "name": "Blue Booth",
        "description": "Two-mic room",
        "equipments": ["SM7B", "Rodecaster"],
        "images": ["https://img.example/booth.jpg"],
        "location": {"fullAddress": "12 MG Road", "city": "Bengaluru", "state": "KA", "pinCode": "560001"},
        "pricePerHour": 800,
        "operationalHours": {"start": 9, "end": 18},
        "packages": [
            {"key": "1cam", "price": 1000, "description": "One camera"},
            {"key": "audio", "price": 600},
        ],
        "addons": [{"key": "edit", "price": 500, "maxQuantity": 3}],
        "availability": [
            {"date": DAY.isoformat(), "slots": [{"hour": 9}, {"hour": 10, "isAvailable": False}]},
        ],
    }
    payload.update(overrides)
    return payload


def test_owner_creates_pending_studio(factory, api):
    owner = factory.user(role="OWNER")

    resp = api(owner).post("/api/studio", json=studio_payload())

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["approved"] is False
    assert body["author"] == owner.id
    assert body["operationalHours"] == {"start": 9, "end": 18}
    assert [p["key"] for p in body["packages"]] == ["1cam", "audio"]
    assert body["addons"][0]["maxQuantity"] == 3
    assert body["location"]["city"] == "Bengaluru"
    studio = db.session.get(Studio, body["id"])
    assert slot_states(studio) == {9: True, 10: False}


def test_customer_cannot_create_studio(factory, api):
    resp = api(factory.user()).post("/api/studio", json=studio_payload())
    assert resp.status_code == 403


def test_create_rejects_hours_outside_operational_window(factory, api):
    payload = studio_payload(availability=[{"date": DAY.isoformat(), "slots": [{"hour": 20}]}])

    resp = api(factory.user(role="OWNER")).post("/api/studio", json=payload)

    assert resp.status_code == 400
    assert "outside operational hours" in resp.get_json()["error"]
    assert Studio.query.count() == 0


def test_create_validates_catalog(factory, api):
    client = api(factory.user(role="OWNER"))

    no_packages = client.post("/api/studio", json=studio_payload(packages=[]))
    twin_packages = client.post("/api/studio", json=studio_payload(packages=[
        {"key": "a", "price": 1}, {"key": "a", "price": 2},
    ]))
    backwards_hours = client.post("/api/studio", json=studio_payload(operationalHours={"start": 18, "end": 9}))

    for resp in (no_packages, twin_packages, backwards_hours):
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid request"


def test_public_listing_shows_approved_studios_with_ratings(factory, api):
    approved = factory.studio(name="Echo Room", city="Pune")
    factory.studio(name="Hidden", approved=False)
    factory.studio(name="Mumbai Mics", city="Mumbai")
    factory.availability(approved)
    reviewers = [factory.user(), factory.user()]
    for reviewer, rating in zip(reviewers, (4, 5)):
        db.session.add(Review(studio_id=approved.id, reviewer_id=reviewer.id, rating=rating, description="ok"))
    db.session.commit()

    rows = api().get("/api/studio").get_json()
    assert sorted(r["name"] for r in rows) == ["Echo Room", "Mumbai Mics"]

    rows = api().get("/api/studio?city=pune").get_json()
    assert [r["name"] for r in rows] == ["Echo Room"]
    assert rows[0]["ratingSummary"] == {"average": 4.5, "count": 2}
    assert rows[0]["availability"][0]["date"] == DAY.isoformat()

    rows = api().get("/api/studio?name=mics").get_json()
    assert [r["name"] for r in rows] == ["Mumbai Mics"]
    assert rows[0]["ratingSummary"] == {"average": 0, "count": 0}


def test_pending_studio_visible_to_owner_only(factory, api):
    owner = factory.user(role="OWNER")
    studio = factory.studio(owner=owner, approved=False)

    assert api().get(f"/api/studio/{studio.id}").status_code == 404
    assert api(factory.user()).get(f"/api/studio/{studio.id}").status_code == 404
    assert api(owner).get(f"/api/studio/{studio.id}").status_code == 200

    mine = api(owner).get("/api/studio/mine").get_json()
    assert [s["id"] for s in mine] == [studio.id]


def test_owner_updates_catalog_and_calendar(factory, api):
    owner = factory.user(role="OWNER")
    studio = factory.studio(owner=owner)
    factory.availability(studio)
    api(factory.user()).post("/api/booking", json=booking_request(studio, hours=[10]))

    resp = api(owner).put(f"/api/studio/{studio.id}", json={
        "name": "Echo Room 2",
        "packages": [{"key": "1cam", "price": 1200}],
        "addons": [],
        "availability": [{"date": DAY.isoformat(), "slots": [{"hour": 10}, {"hour": 14}]}],
    })

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["name"] == "Echo Room 2"
    assert body["packages"] == [{"key": "1cam", "price": 1200, "description": ""}]
    assert body["addons"] == []
    # hour 10 is held by the booking above
    assert slot_states(studio) == {10: False, 14: True}


def test_update_rejects_window_that_strands_slots(factory, api):
    owner = factory.user(role="OWNER")
    studio = factory.studio(owner=owner, open_hour=8, close_hour=22)
    factory.availability(studio, hours=(9, 20))

    resp = api(owner).put(f"/api/studio/{studio.id}", json={"operationalHours": {"start": 10, "end": 22}})

    assert resp.status_code == 400
    db.session.expire_all()
    assert db.session.get(Studio, studio.id).open_hour == 8


def test_only_owner_may_edit_or_delete(factory, api):
    studio = factory.studio()
    stranger = api(factory.user(role="OWNER"))

    assert stranger.put(f"/api/studio/{studio.id}", json={"name": "Mine now"}).status_code == 403
    assert stranger.delete(f"/api/studio/{studio.id}").status_code == 403


def test_delete_studio(factory, api):
    owner = factory.user(role="OWNER")
    studio = factory.studio(owner=owner)
    factory.availability(studio)
    studio_id = studio.id

    resp = api(owner).delete(f"/api/studio/{studio_id}")

    assert resp.status_code == 200
    assert db.session.get(Studio, studio_id) is None


def test_delete_studio_with_bookings_is_refused(factory, api):
    owner = factory.user(role="OWNER")
    studio = factory.studio(owner=owner)
    factory.availability(studio)
    api(factory.user()).post("/api/booking", json=booking_request(studio, hours=[9]))

    resp = api(owner).delete(f"/api/studio/{studio.id}")

    assert resp.status_code == 409
    assert db.session.get(Studio, studio.id) is not None
