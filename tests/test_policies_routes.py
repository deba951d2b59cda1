"""Tests for the policy search and detail proxy routes."""

import json

import httpx
import pytest
from respx import MockRouter

from tests.conftest import AUTH_URL, POLICY_SEARCH_URL


@pytest.fixture
def token_route(respx_mock: MockRouter):
    return respx_mock.post(AUTH_URL).mock(return_value=httpx.Response(200, json={"access_token": "tok-1"}))


SEARCH_RESPONSE = {
    "details": [
        {
            "basicInfo": {
                "policyNumber": "S6-10023",
                "effectiveDate": "2024-04-01",
                "productName": "Travel Plus",
                "status": "Active",
            },
            "people": [{"firstName": "Ada", "lastName": "Lovelace"}],
        },
        {"policyNumber": "S6-10024", "customerName": "Acme Corp"},
    ]
}


def test_policy_search_normalizes_results(client, respx_mock, token_route):
    search = respx_mock.post(POLICY_SEARCH_URL).mock(return_value=httpx.Response(200, json=SEARCH_RESPONSE))

    res = client.get("/api/policies/search", params={"date": "2024-04-01"})

    assert res.status_code == 200
    assert res.json() == {
        "policies": [
            {
                "id": "S6-10023",
                "policyNumber": "S6-10023",
                "dateEffective": "2024-04-01",
                "customerName": "Ada Lovelace",
                "productName": "Travel Plus",
                "status": "Active",
            },
            {
                "id": "S6-10024",
                "policyNumber": "S6-10024",
                "dateEffective": "",
                "customerName": "Acme Corp",
                "productName": "Unknown",
                "status": "Unknown",
            },
        ]
    }
    request = search.calls.last.request
    assert request.headers["Authorization"] == "Bearer tok-1"
    assert request.headers["apiversion"] == "2"
    assert json.loads(request.content) == {
        "impersonateID": "operator@example.test",
        "language": "en",
        "searchvalue": "2024-04-01",
        "searchType": "ByPolicyEffectiveDate",
        "resultType": "Detailed",
    }


def test_policy_search_route_specific_impersonation(make_client, uat_env, respx_mock, token_route):
    uat_env["UAT_POLICY_SEARCH_IMPERSONATE_ID"] = "search-bot@example.test"
    search = respx_mock.post(POLICY_SEARCH_URL).mock(return_value=httpx.Response(200, json=SEARCH_RESPONSE))
    with make_client(uat_env) as client:
        client.get("/api/policies/search", params={"date": "2024-04-01"})

    assert json.loads(search.calls.last.request.content)["impersonateID"] == "search-bot@example.test"


def test_policy_search_requires_date(client, respx_mock):
    res = client.get("/api/policies/search")

    assert res.status_code == 400
    assert "date" in res.json()["error"]
    assert len(respx_mock.calls) == 0


def test_policy_search_requires_policy_base_url(make_client, uat_env, respx_mock):
    del uat_env["UAT_API_BASE_URL"]
    with make_client(uat_env) as client:
        res = client.get("/api/policies/search", params={"date": "2024-04-01"})

    assert res.status_code == 500
    assert "UAT_API_BASE_URL" in res.json()["error"]
    assert len(respx_mock.calls) == 0


def test_policy_search_upstream_failure(client, respx_mock, token_route):
    respx_mock.post(POLICY_SEARCH_URL).mock(return_value=httpx.Response(503, text="busy"))

    res = client.get("/api/policies/search", params={"date": "2024-04-01"})

    assert res.status_code == 502
    assert res.json() == {
        "error": "UAT policy search returned a non-success status.",
        "status": 503,
        "body": "busy",
    }


def test_policy_search_empty_and_unparseable(client, respx_mock, token_route):
    respx_mock.post(POLICY_SEARCH_URL).mock(
        side_effect=[httpx.Response(200, json={"details": []}), httpx.Response(200, text="oops{")]
    )

    empty = client.get("/api/policies/search", params={"date": "2024-04-01"}).json()
    broken = client.get("/api/policies/search", params={"date": "2024-04-01"}).json()

    assert empty["policies"] == []
    assert empty["message"]
    assert broken["policies"] == []
    assert broken["error"].startswith("Could not parse policy search response")


def test_policy_detail_unparseable_body_is_reported(client, respx_mock, token_route):
    respx_mock.post(POLICY_SEARCH_URL).mock(return_value=httpx.Response(200, text="<html>down</html>"))

    res = client.get("/api/policies/detail", params={"policyNumber": "S6-10023"})

    assert res.status_code == 200
    body = res.json()
    assert body["policy"] is None
    assert body["error"].startswith("Could not parse policy detail response")


DETAIL_RESPONSE = {
    "data": {
        "details": [
            {
                "basicInfo": {"policyNumber": "S6-10023", "status": "Active", "billingCurrency": "GBP"},
                "transactions": [
                    {"transactionId": "t1", "createdDate": "2024-01-01", "amount": -5.25},
                    {"transactionId": "t2", "createdDate": "2024-02-01", "amount": 12},
                ],
                "invoices": [{"invoiceId": "inv-1", "status": "Paid", "currency": {"id": "GBP"}}],
                "insureds": [
                    {
                        "firstName": "Ada",
                        "coverageVariants": [
                            {
                                "coverageVariantDesc": "Medical",
                                "code": "MED",
                                "beneficiaries": [{"name": "Byron", "relationship": "Son"}],
                            }
                        ],
                    }
                ],
            }
        ]
    }
}


def test_policy_detail_returns_normalized_sections(client, respx_mock, token_route):
    search = respx_mock.post(POLICY_SEARCH_URL).mock(return_value=httpx.Response(200, json=DETAIL_RESPONSE))

    res = client.get("/api/policies/detail", params={"policyNumber": "S6-10023"})

    assert res.status_code == 200
    body = res.json()
    assert body["policy"]["policyNumber"] == "S6-10023"
    assert body["policy"]["currency"] == "GBP"
    assert [t["transactionId"] for t in body["transactions"]] == ["t2", "t1"]
    assert body["transactions"][1]["amount"] == "-5.25"
    assert body["invoices"][0]["currency"] == "GBP"
    assert body["coverages"] == [
        {
            "variantName": "Medical",
            "rows": [
                {
                    "insuredName": "Ada",
                    "insuredType": "",
                    "code": "MED",
                    "deductibleMain": "",
                    "limitMain": "",
                    "deductibleChild": "",
                    "limitChild": "",
                }
            ],
        }
    ]
    assert body["beneficiaries"][0]["name"] == "Byron"
    assert body["beneficiaries"][0]["relationship"] == "Son"

    sent = json.loads(search.calls.last.request.content)
    assert sent["searchType"] == "ByPolicyNumber"
    assert sent["searchvalue"] == "S6-10023"


def test_policy_detail_not_found(client, respx_mock, token_route):
    respx_mock.post(POLICY_SEARCH_URL).mock(return_value=httpx.Response(200, json={"details": []}))

    res = client.get("/api/policies/detail", params={"policyNumber": "S6-404"})

    assert res.status_code == 404
    assert res.json() == {"error": "Policy S6-404 was not found."}


def test_policy_detail_upstream_404_is_not_found(client, respx_mock, token_route):
    respx_mock.post(POLICY_SEARCH_URL).mock(return_value=httpx.Response(404, text="no such policy"))

    res = client.get("/api/policies/detail", params={"policyNumber": "S6-404"})

    assert res.status_code == 404
    assert res.json()["status"] == 404


def test_policy_detail_token_failure(client, respx_mock):
    respx_mock.post(AUTH_URL).mock(return_value=httpx.Response(200, json={}))

    res = client.get("/api/policies/detail", params={"policyNumber": "S6-10023"})

    assert res.status_code == 502
    assert res.json()["error"] == "Authorization endpoint did not return access_token."


def test_health_does_not_touch_upstream(client, respx_mock):
    res = client.get("/health")

    assert res.status_code == 200
    assert res.json()["status"] == "healthy"
    assert len(respx_mock.calls) == 0
