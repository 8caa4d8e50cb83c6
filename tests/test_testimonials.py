"""Testimonial tests."""

from marketplace.db.models.testimonial import Testimonial


def _payload(n, rating=5):
    return {
        "rating": rating,
        "user_name": f"Reviewer {n}",
        "user_image": f"https://cdn.example.com/{n}.png",
        "message": f"Great session {n}",
    }


def test_latest_five_testimonials(client, db):
    for n in range(7):
        db.add(Testimonial(**_payload(n)))
        db.commit()

    r = client.get("/testimonials")
    assert r.status_code == 200
    names = [t["user_name"] for t in r.json()]
    assert names == [f"Reviewer {n}" for n in (6, 5, 4, 3, 2)]


def test_no_testimonials(client):
    assert client.get("/testimonials").json() == []


def test_create_testimonial(client, admin_headers, member_headers):
    assert client.post("/testimonials", json=_payload(1)).status_code == 401
    assert client.post("/testimonials", json=_payload(1), headers=member_headers).status_code == 403

    r = client.post("/testimonials", json=_payload(1, rating=4), headers=admin_headers)
    assert r.status_code == 201
    assert r.json()["rating"] == 4

    assert client.post("/testimonials", json=_payload(2, rating=6), headers=admin_headers).status_code == 422
    assert client.post("/testimonials", json=_payload(2, rating=0), headers=admin_headers).status_code == 422
