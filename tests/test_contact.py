def test_contact_form_is_forwarded(api, notifier):
    resp = api().post("/api/contact", json={
        "name": "Dev",
        "email": "dev@example.com",
        "message": "Do you have a studio in Goa?",
    })

    assert resp.status_code == 200
    sent = notifier.emails[-1]
    assert sent["to"] == "inbox@podhive.test"
    assert "dev@example.com" in sent["body"]


def test_studio_inquiry(api, notifier):
    resp = api().post("/api/studio-inquiry", json={
        "name": "Sana",
        "whatsapp": "9000000000",
        "location": "Indore",
        "hasRoom": True,
    })

    assert resp.status_code == 200
    sent = notifier.emails[-1]
    assert sent["subject"] == "New Studio Listing Inquiry"
    assert "Already has a room?: yes" in sent["body"]
    assert "Needs help with setup?: no" in sent["body"]


def test_delivery_failure_is_reported(api, notifier):
    notifier.fail = "error"

    resp = api().post("/api/contact", json={"name": "Dev", "email": "d@x.io", "message": "hi"})

    assert resp.status_code == 502


def test_health(api):
    assert api().get("/health").get_json() == {"status": "ok"}
