from __future__ import annotations

import json

from flask.testing import FlaskClient

from renteberegner.core.state import CalculatorStateStore


def projection_payload() -> dict:
    return {
        "principal": 0,
        "periodicContribution": 60000,
        "annualRate": 20,
        "years": 20,
    }


def test_projection_endpoint_returns_rows_and_summary(client: FlaskClient):
    resp = client.post("/api/projection", json=projection_payload())

    assert resp.status_code == 200
    body = resp.get_json()

    snapshots = body["snapshots"]
    assert len(snapshots) == 21
    assert snapshots[0] == {
        "year": 0,
        "startBalance": 0.0,
        "contribution": 0.0,
        "interest": 0.0,
        "endBalance": 0.0,
        "totalContributed": 0.0,
    }
    assert abs(body["summary"]["finalBalance"] - 13441535) < 1
    assert body["summary"]["totalContributed"] == 1_200_000
    assert body["formatted"]["totalContributed"] == "1.200.000 kr."
    assert body["formatted"]["finalBalanceCompact"] == "13,4 mio. kr."
    assert body["validity"]["principal"] is False
    assert len(body["cumulativeReturn"]) == 21


def test_monthly_contribution_is_multiplied_by_twelve(client: FlaskClient):
    payload = {"principal": 0, "periodicContribution": 2000, "annualRate": 7, "years": 5,
               "contributionFrequency": "monthly"}

    body = client.post("/api/projection", json=payload).get_json()

    assert body["inputs"]["periodicContribution"] == 24000
    assert body["snapshots"][1]["contribution"] == 24000


def test_unreadable_inputs_are_coerced_not_rejected(client: FlaskClient):
    payload = {"principal": "abc", "periodicContribution": "1.000,5", "annualRate": None, "years": "x"}

    resp = client.post("/api/projection", json=payload)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["inputs"] == {
        "principal": 0.0,
        "periodicContribution": 1000.5,
        "annualRate": 0.0,
        "years": 1,
    }
    assert body["summary"]["totalInterest"] == 0


def test_out_of_range_inputs_are_flagged_but_still_computed(client: FlaskClient):
    payload = {"principal": 20_000_000, "periodicContribution": 0, "annualRate": 60, "years": 0}

    resp = client.post("/api/projection", json=payload)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["validity"]["principal"] is True
    assert body["validity"]["annualRate"] is True
    assert body["validity"]["years"] is True
    assert body["validity"]["messages"]["years"] == "Værdi skal være mellem 1 og 100"
    assert body["inputs"]["years"] == 1
    assert len(body["snapshots"]) == 2
    assert body["summary"]["finalBalance"] == 32_000_000


def test_unknown_frequency_returns_422(client: FlaskClient):
    payload = dict(projection_payload(), contributionFrequency="weekly")

    resp = client.post("/api/projection", json=payload)

    assert resp.status_code == 422
    assert "detail" in resp.get_json()


def test_unknown_field_returns_422(client: FlaskClient):
    resp = client.post("/api/projection", json=dict(projection_payload(), currency="EUR"))

    assert resp.status_code == 422


def test_non_json_body_returns_400(client: FlaskClient):
    resp = client.post("/api/projection", data="not json", content_type="application/json")

    assert resp.status_code == 400
    assert resp.get_json()["detail"] == "request body must be JSON"


def test_comparison_endpoint(client: FlaskClient):
    resp = client.post("/api/projection/comparison", json=projection_payload())

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["baseRate"] == 20
    assert body["gaps"] == [8, 4]
    assert [s["label"] for s in body["scenarios"]] == ["23.0%", "16.0%", "12.0%"]
    assert all("balances" not in s for s in body["scenarios"])


def test_comparison_endpoint_with_series(client: FlaskClient):
    payload = dict(projection_payload(), includeSeries=True)

    body = client.post("/api/projection/comparison", json=payload).get_json()

    assert all(len(s["balances"]) == 21 for s in body["scenarios"])


def test_reference_values_endpoint(client: FlaskClient):
    resp = client.post("/api/projection/reference-values", json=projection_payload())

    assert resp.status_code == 200
    values = resp.get_json()["values"]
    assert [v["label"] for v in values] == ["7.0%", "20.0%", "30.0%"]
    assert values[1]["formatted"] == "13.441.536 kr."


def test_projection_updates_shared_state(client: FlaskClient, state_store: CalculatorStateStore):
    seen = []
    state_store.subscribe(seen.append)

    client.post("/api/projection", json=projection_payload())

    assert len(seen) == 1
    assert state_store.get().inputs() == {
        "principal": 0.0,
        "periodicContribution": 60000.0,
        "annualRate": 20.0,
        "years": 20,
    }

    body = client.get("/api/state").get_json()
    assert body["annualRate"] == 20.0
    assert "updatedAt" in body


def test_put_state_applies_partial_update(client: FlaskClient):
    resp = client.put("/api/state", json={"years": "12", "annualRate": "8,5"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["years"] == 12
    assert body["annualRate"] == 8.5
    assert body["periodicContribution"] == 24000.0


def test_put_state_rejects_unknown_fields(client: FlaskClient):
    resp = client.put("/api/state", json={"theme": "dark"})

    assert resp.status_code == 422


def _strict_json(resp) -> dict:
    def reject(token):
        raise ValueError(f"non-standard JSON constant {token}")

    return json.loads(resp.get_data(as_text=True), parse_constant=reject)


def test_integer_too_large_for_a_float_is_coerced(client: FlaskClient):
    payload = {"principal": 10**400, "periodicContribution": 1000, "annualRate": 5, "years": 10**400}

    resp = client.post("/api/projection", json=payload)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["inputs"]["principal"] == 0.0
    assert body["inputs"]["years"] == 1


def test_overflowing_balances_are_sent_as_null(client: FlaskClient):
    payload = {"principal": 1e300, "annualRate": 1e300, "years": 3}

    resp = client.post("/api/projection", json=payload)

    assert resp.status_code == 200
    body = _strict_json(resp)
    assert body["snapshots"][0]["endBalance"] == 1e300
    assert body["snapshots"][-1]["endBalance"] is None
    assert body["summary"]["finalBalance"] is None
    assert body["summary"]["totalInterest"] is None
    assert body["cumulativeReturn"][-1] is None
    assert body["formatted"]["finalBalance"] == "∞ kr."


def test_overflowing_comparison_and_reference_values_are_valid_json(client: FlaskClient):
    payload = {"principal": 1e300, "annualRate": 1e300, "years": 3, "includeSeries": True}

    comparison = client.post("/api/projection/comparison", json=payload)
    reference = client.post("/api/projection/reference-values", json={"principal": 1e308, "years": 100})

    assert comparison.status_code == 200
    assert reference.status_code == 200
    scenarios = _strict_json(comparison)["scenarios"]
    assert scenarios[0]["balances"][-1] is None
    assert _strict_json(reference)["values"][-1]["finalBalance"] is None


def test_years_above_the_hard_ceiling_return_422(client: FlaskClient, state_store: CalculatorStateStore):
    for path in ("/api/projection", "/api/projection/comparison", "/api/projection/reference-values"):
        resp = client.post(path, json=dict(projection_payload(), years=1001))

        assert resp.status_code == 422
        detail = resp.get_json()["detail"]
        assert detail[0]["loc"] == ["years"]
        assert detail[0]["msg"] == "years must be at most 1000"

    assert state_store.get().years == 5


def test_years_at_the_hard_ceiling_still_compute(client: FlaskClient):
    resp = client.post("/api/projection", json=dict(projection_payload(), annualRate=1, years=1000))

    assert resp.status_code == 200
    assert len(resp.get_json()["snapshots"]) == 1001


def test_hard_ceiling_follows_config(app, client: FlaskClient):
    app.config["MAX_YEARS"] = 10

    assert client.post("/api/projection", json=dict(projection_payload(), years=11)).status_code == 422
    assert client.post("/api/projection", json=dict(projection_payload(), years=10)).status_code == 200
