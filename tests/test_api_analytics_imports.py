import pytest

from kol_tracker.config import IMPORT_SETTINGS


def test_roster_metrics(client, kol_factory, post_factory):
    wendy = kol_factory("Crypto Wendy", platforms=[
        {"platform": "youtube", "follower_count": 80000},
        {"platform": "tiktok", "follower_count": 20000},
    ])
    post_factory(wendy.id, impressions=100000, cost=1000)
    leo = kol_factory("Crypto with Leo", platforms=[{"platform": "twitter", "follower_count": 5000}])
    post_factory(leo.id, impressions=40000, cost=None)
    kol_factory("Pix", platforms=[])

    r = client.get("/api/v1/analytics/roster")
    assert r.status_code == 200
    body = r.json()
    assert body["total_kols"] == 3
    assert body["total_posts"] == 2
    assert body["total_spend"] == 1000
    assert body["total_impressions"] == 140000
    assert body["total_followers_reach"] == 105000
    assert body["average_cpm"] == pytest.approx(1000 / 140000 * 1000)

    budget = {b["platform"]: b["amount"] for b in body["budget_by_platform"]}
    assert budget == {"youtube": pytest.approx(800), "tiktok": pytest.approx(200)}
    assert [t["name"] for t in body["top_performers"]] == ["Crypto Wendy"]


def test_roster_metrics_top_n(client, kol_factory, post_factory):
    for name, cost in [("A", 30), ("B", 10), ("C", 20)]:
        kol = kol_factory(name)
        post_factory(kol.id, impressions=1000, cost=cost)

    body = client.get("/api/v1/analytics/roster", params={"top_n": 2}).json()
    assert [t["name"] for t in body["top_performers"]] == ["B", "C"]
    assert client.get("/api/v1/analytics/roster", params={"top_n": -1}).status_code == 422


def test_empty_roster_metrics(client):
    body = client.get("/api/v1/analytics/roster").json()
    assert body["total_kols"] == 0
    assert body["average_cpm"] == 0
    assert body["budget_by_platform"] == []
    assert body["top_performers"] == []


def test_cpm_by_kol_and_single_kol_metrics(client, kol_factory, post_factory):
    cheap = kol_factory("Cheap")
    post_factory(cheap.id, impressions=10000, cost=10)
    pricey = kol_factory("Pricey")
    post_factory(pricey.id, impressions=1000, cost=100)
    kol_factory("No Posts")

    series = client.get("/api/v1/analytics/cpm-by-kol").json()
    assert [e["name"] for e in series] == ["Cheap", "Pricey"]
    assert series[1]["average_cpm"] == pytest.approx(100.0)

    r = client.get(f"/api/v1/analytics/kols/{cheap.id}")
    assert r.status_code == 200
    assert r.json()["average_cpm"] == pytest.approx(1.0)
    assert client.get("/api/v1/analytics/kols/999").status_code == 404


def test_import_rows_endpoint(client):
    payload = {
        "rows": [
            {"Name": "Bodoggos", "Platform": "TikTok", "Profile Link": "https://tiktok.com/@bodoggos",
             "TikTok Followers": "520K", "Email/Contact": "bodoggos@example.com"},
            {"Name": "", "Platform": "YouTube"},
        ]
    }
    r = client.post("/api/v1/imports/rows", json=payload)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["imported_count"] == 1
    assert body["failed_count"] == 1
    assert body["success"] is False
    assert body["errors"] == [{"row": 3, "message": "Name is required"}]
    assert body["kols"][0]["total_followers"] == 520000

    roster = client.get("/api/v1/kols/").json()
    assert [k["name"] for k in roster] == ["Bodoggos"]


def test_import_rows_with_mapping(client):
    payload = {
        "rows": [{"Creator": "Andrew Asks", "Links": "https://youtube.com/@andrew", "Subs": "1.5M"}],
        "mapping": {"name": "Creator", "profile_link": "Links", "youtube_followers": "Subs"},
    }
    body = client.post("/api/v1/imports/rows", json=payload).json()
    assert body["success"] is True
    assert body["kols"][0]["platforms"][0]["follower_count"] == 1_500_000


def test_import_rows_rejects_empty_and_oversized(client, monkeypatch):
    assert client.post("/api/v1/imports/rows", json={"rows": []}).status_code == 422

    monkeypatch.setitem(IMPORT_SETTINGS, "max_rows", 1)
    r = client.post("/api/v1/imports/rows", json={"rows": [{"Name": "A"}, {"Name": "B"}]})
    assert r.status_code == 400
    assert client.get("/api/v1/kols/").json() == []


def test_import_csv(client):
    csv_text = (
        "Name,Platform,Profile Link,Youtube subscribers,Email/Contact\n"
        "Andrew Asks,YouTube,https://youtube.com/@andrew,\"12,500\",andrew@example.com\n"
        "\n"
        "Star Platinum,,,,\n"
    )
    r = client.post(
        "/api/v1/imports/csv",
        content=csv_text.encode("utf-8"),
        headers={"Content-Type": "text/csv"},
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["imported_count"] == 2
    andrew = next(k for k in body["kols"] if k["name"] == "Andrew Asks")
    assert andrew["total_followers"] == 12500
    assert {w["message"] for w in body["warnings"]} == {"No platforms detected", "No email provided"}


def test_import_csv_bad_bodies(client):
    headers = {"Content-Type": "text/csv"}
    assert client.post("/api/v1/imports/csv", content=b"Name,Platform\n", headers=headers).status_code == 400
    assert client.post("/api/v1/imports/csv", content=b"\xff\xfe\x00bad", headers=headers).status_code == 400
