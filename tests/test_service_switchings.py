import pytest

from conftest import API
from models import db
from models.messaging import MsgApi
from models.product import Product, ProductCategory
from models.service_switching import ServiceSwitching

BASE = f"{API}/service-switchings"


@pytest.fixture
def catalog(app):
    """One API and two products to map between."""
    api = MsgApi(serial_no=1, api_name="Gupshup", api_type="SMS", base_url="https://api.example.com",
                 method="GET", status="Active")
    category = ProductCategory(serial_no=1, name="Messaging", slug="messaging", status="Active")
    db.session.add_all([api, category])
    db.session.flush()
    sms = Product(serial_no=1, category_id=category.id, name="Bulk SMS", slug="bulk-sms", status="Active")
    otp = Product(serial_no=2, category_id=category.id, name="OTP SMS", slug="otp-sms", status="Active")
    db.session.add_all([sms, otp])
    db.session.commit()
    return {"api_id": api.id, "sms_id": sms.id, "otp_id": otp.id}


def switching_payload(catalog, **overrides):
    payload = {
        "api_id": catalog["api_id"],
        "product_id": catalog["sms_id"],
        "api_code": "GS01",
        "rate": "0.12",
        "commission_surcharge": "0.5",
        "flat_per": "flat",
        "gst": 18,
        "tds": 2,
        "txn_limit": 1000,
    }
    payload.update(overrides)
    return payload


def test_add_and_purchase_text(client, headers, catalog):
    response = client.post(f"{BASE}/add", json=switching_payload(catalog), headers=headers)
    data = response.get_json()["data"]

    assert response.status_code == 200
    assert data["serial_no"] == 1
    assert data["status"] == "Active"
    assert data["api_name"] == "Gupshup"
    assert data["product_name"] == "Bulk SMS"
    assert data["purchase"] == "Surcharge @ 0.5 ₹/Txn"

    response = client.post(f"{BASE}/add",
                           json=switching_payload(catalog, product_id=catalog["otp_id"], flat_per="Percent",
                                                  commission_surcharge=2),
                           headers=headers)
    assert response.get_json()["data"]["purchase"] == "Commission @ 2 %"


def test_one_switching_per_api_and_product(client, headers, catalog):
    client.post(f"{BASE}/add", json=switching_payload(catalog), headers=headers)

    response = client.post(f"{BASE}/add", json=switching_payload(catalog, api_code="GS02"), headers=headers)

    assert response.status_code == 409
    assert ServiceSwitching.query.count() == 1


def test_missing_references_are_not_found(client, headers, catalog):
    response = client.post(f"{BASE}/add", json=switching_payload(catalog, api_id=99), headers=headers)
    assert response.status_code == 404
    assert response.get_json()["message"] == "API not found"

    response = client.post(f"{BASE}/add", json=switching_payload(catalog, product_id=99), headers=headers)
    assert response.status_code == 404
    assert response.get_json()["message"] == "Product not found"


def test_negative_rates_rejected(client, headers, catalog):
    response = client.post(f"{BASE}/add", json=switching_payload(catalog, gst=-1), headers=headers)
    assert response.status_code == 422
    assert response.get_json()["message"] == "GST must be a non-negative number"


def test_non_finite_rates_rejected(client, headers, catalog):
    response = client.post(f"{BASE}/add", json=switching_payload(catalog, rate="nan"), headers=headers)
    assert response.status_code == 422
    assert response.get_json()["message"] == "Rate must be a non-negative number"

    response = client.post(f"{BASE}/add", json=switching_payload(catalog, tds="inf"), headers=headers)
    assert response.status_code == 422
    assert response.get_json()["message"] == "TDS must be a non-negative number"
    assert ServiceSwitching.query.count() == 0


def test_referenced_api_and_product_cannot_be_deleted(client, headers, catalog):
    client.post(f"{BASE}/add", json=switching_payload(catalog), headers=headers)

    response = client.delete(f"{API}/msg-apis/delete/{catalog['api_id']}", headers=headers)
    assert response.status_code == 400
    response = client.delete(f"{API}/product-management/products/delete/{catalog['sms_id']}", headers=headers)
    assert response.status_code == 400
    assert db.session.get(Product, catalog["sms_id"]) is not None


def test_list_filters_and_search(client, headers, catalog):
    client.post(f"{BASE}/add", json=switching_payload(catalog), headers=headers)
    client.post(f"{BASE}/add", json=switching_payload(catalog, product_id=catalog["otp_id"], api_code="OTP9"),
                headers=headers)

    body = client.post(f"{BASE}/get-list", json={"product_id": catalog["otp_id"]}, headers=headers).get_json()
    assert body["recordsTotal"] == 2
    assert body["recordsFiltered"] == 1
    assert body["data"][0]["api_code"] == "OTP9"

    body = client.post(f"{BASE}/get-list", json={"searchValue": "bulk"}, headers=headers).get_json()
    assert [row["product_name"] for row in body["data"]] == ["Bulk SMS"]


def test_update_change_status_and_delete(client, headers, catalog):
    switching_id = client.post(f"{BASE}/add", json=switching_payload(catalog),
                               headers=headers).get_json()["data"]["id"]

    body = client.put(f"{BASE}/update/{switching_id}", json=switching_payload(catalog),
                      headers=headers).get_json()
    assert body["statusCode"] == 3

    body = client.put(f"{BASE}/update/{switching_id}", json=switching_payload(catalog, rate="0.15"),
                      headers=headers).get_json()
    assert body["data"]["rate"] == 0.15

    body = client.post(f"{BASE}/change-status/{switching_id}", json={"status": "Inactive"},
                       headers=headers).get_json()
    assert body["data"]["status"] == "Inactive"

    assert client.delete(f"{BASE}/delete/{switching_id}", headers=headers).status_code == 200
    assert client.delete(f"{API}/msg-apis/delete/{catalog['api_id']}", headers=headers).status_code == 200
