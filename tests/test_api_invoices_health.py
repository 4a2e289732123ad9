def _invoice(client, kol_id, amount, **extra):
    r = client.post("/api/v1/invoices/", json={"kol_id": kol_id, "amount": amount, **extra})
    assert r.status_code == 201, r.text
    return r.json()


def test_create_invoice_defaults(client, kol_factory):
    kol = kol_factory("Crypto Wendy")
    invoice = _invoice(client, kol.id, 15000, invoice_number="INV-0042")
    assert invoice["currency"] == "USD"
    assert invoice["status"] == "pending"
    assert invoice["budget_period"] == "one_time"
    assert invoice["paid_date"] is None

    r = client.get(f"/api/v1/invoices/{invoice['id']}")
    assert r.status_code == 200
    assert r.json()["invoice_number"] == "INV-0042"


def test_create_invoice_conflicts_and_missing_kol(client, kol_factory):
    kol = kol_factory()
    _invoice(client, kol.id, 100, invoice_number="INV-1")
    r = client.post("/api/v1/invoices/", json={"kol_id": kol.id, "amount": 5, "invoice_number": "INV-1"})
    assert r.status_code == 409

    r = client.post("/api/v1/invoices/", json={"kol_id": 9999, "amount": 5})
    assert r.status_code == 404

    r = client.post("/api/v1/invoices/", json={"kol_id": kol.id, "amount": -1})
    assert r.status_code == 422


def test_mark_paid_stamps_paid_date(client, kol_factory):
    kol = kol_factory()
    invoice = _invoice(client, kol.id, 2500, status="invoiced", currency="eur")
    assert invoice["currency"] == "EUR"

    r = client.patch(f"/api/v1/invoices/{invoice['id']}", json={"status": "paid"})
    assert r.status_code == 200
    assert r.json()["status"] == "paid"
    assert r.json()["paid_date"] is not None

    r = client.patch(f"/api/v1/invoices/{invoice['id']}", json={"paid_date": "2025-10-31"})
    assert r.json()["paid_date"] == "2025-10-31"


def test_list_filter_and_summary(client, kol_factory):
    wendy = kol_factory("Crypto Wendy")
    bodoggos = kol_factory("Bodoggos")
    _invoice(client, wendy.id, 15000, status="paid")
    _invoice(client, wendy.id, 5000, status="invoiced")
    _invoice(client, bodoggos.id, 9999, status="not_paid")

    assert len(client.get("/api/v1/invoices/").json()) == 3
    paid = client.get("/api/v1/invoices/", params={"status": "paid"}).json()
    assert [i["amount"] for i in paid] == [15000]
    assert len(client.get("/api/v1/invoices/", params={"kol_id": bodoggos.id}).json()) == 1

    summary = client.get("/api/v1/invoices/summary").json()
    assert summary["invoice_count"] == 3
    assert summary["total_budget"] == 29999
    assert summary["total_paid"] == 15000
    assert summary["total_pending"] == 14999
    assert summary["overdue_amount"] == 9999
    assert summary["counts_by_status"]["not_paid"] == 1

    wendy_only = client.get("/api/v1/invoices/summary", params={"kol_id": wendy.id}).json()
    assert wendy_only["total_budget"] == 20000


def test_delete_invoice_and_cascade_with_kol(client, kol_factory):
    kol = kol_factory()
    first = _invoice(client, kol.id, 10)
    _invoice(client, kol.id, 20)

    assert client.delete(f"/api/v1/invoices/{first['id']}").status_code == 204
    assert client.get(f"/api/v1/invoices/{first['id']}").status_code == 404

    assert client.delete(f"/api/v1/kols/{kol.id}").status_code == 204
    assert client.get("/api/v1/invoices/").json() == []


def test_invoice_spend_does_not_change_roster_metrics(client, kol_factory, post_factory):
    kol = kol_factory()
    post_factory(kol.id, impressions=10000, cost=100)
    _invoice(client, kol.id, 50000, status="paid")
    body = client.get("/api/v1/analytics/roster").json()
    assert body["total_spend"] == 100


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"
    assert r.json()["demo_mode"] is False


def test_health_detailed(client, kol_factory):
    kol_factory()
    body = client.get("/health/detailed").json()
    assert body["checks"]["database"] == "healthy"
    assert body["checks"]["roster"]["kol_count"] == 1
    assert body["checks"]["roster"]["data_source"] == "RemoteDataSource"
    assert body["status"] == "healthy"


def test_root(client):
    body = client.get("/").json()
    assert body["api_base"] == "/api/v1"


def test_roster_unavailable_before_startup(client):
    from kol_tracker.main import app

    app.state.roster_service = None
    r = client.get("/api/v1/kols/")
    assert r.status_code == 503
