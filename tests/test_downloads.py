"""Download entitlement gate"""

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from app.application.use_cases.download_order_file import (
    DENIED_MESSAGE,
    download_filename,
    media_type_for,
)
from app.db.database import SessionLocal
from app.domain.value_objects.entity_ids import OrderId
from app.infrastructure.repositories.order_repository_impl import OrderRepositoryImpl

from conftest import create_catalog_model, create_order, create_user, auth_headers, fetch_order, run


UNAVAILABLE_MESSAGE = "The requested file is currently unavailable. Please contact support."


@pytest.fixture
def excel_asset(storage_service):
    path = storage_service.upload_dir / "1700000000000_0123456789abcdef_dcf.xlsx"
    path.write_bytes(b"PK\x03\x04 spreadsheet bytes")
    return path


@pytest.fixture
def purchased(client, excel_asset):
    model = create_catalog_model(excel_url=f"/uploads/excel/{excel_asset.name}")
    return create_order(model=model)


def test_download_streams_file_and_counts(client, customer_headers, purchased, excel_asset):
    response = client.get(f"/api/v1/download/{purchased.id}", headers=customer_headers)

    assert response.status_code == 200
    assert response.content == excel_asset.read_bytes()
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert 'filename="DCF_Valuation_Model.xlsx"' in response.headers["content-disposition"]
    assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"
    assert response.headers["pragma"] == "no-cache"
    assert response.headers["expires"] == "0"
    assert fetch_order(purchased.id).download_count == 1


def test_falls_back_to_generic_file_url(client, customer_headers, storage_service):
    generic = storage_service.public_dir / "files" / "model.xlsx"
    generic.parent.mkdir(parents=True)
    generic.write_bytes(b"generic")
    model = create_catalog_model(excel_url="/uploads/excel/missing.xlsx", file_url="/files/model.xlsx")
    order = create_order(model=model)

    response = client.get(f"/api/v1/download/{order.id}", headers=customer_headers)

    assert response.status_code == 200
    assert response.content == b"generic"


def test_owner_email_match_ignores_case(client, customer_headers, excel_asset):
    model = create_catalog_model(excel_url=f"/uploads/excel/{excel_asset.name}")
    order = create_order(model=model, email="Buyer@Example.COM")

    response = client.get(f"/api/v1/download/{order.id}", headers=customer_headers)

    assert response.status_code == 200


def test_last_slot_can_be_used_once(client, customer_headers, excel_asset):
    model = create_catalog_model(excel_url=f"/uploads/excel/{excel_asset.name}")
    order = create_order(model=model, download_count=4)

    first = client.get(f"/api/v1/download/{order.id}", headers=customer_headers)
    second = client.get(f"/api/v1/download/{order.id}", headers=customer_headers)

    assert first.status_code == 200
    assert second.status_code == 404
    assert second.json()["error"] == DENIED_MESSAGE
    assert fetch_order(order.id).download_count == 5


@pytest.mark.parametrize("order_kwargs", [
    {"download_count": 5},
    {"expires_in": timedelta(days=-1)},
    {"expires_in": None},
    {"status": "pending"},
    {"email": "someone-else@example.com"},
])
def test_denied_orders_look_identical(client, customer_headers, excel_asset, order_kwargs):
    model = create_catalog_model(excel_url=f"/uploads/excel/{excel_asset.name}")
    order = create_order(model=model, **order_kwargs)

    response = client.get(f"/api/v1/download/{order.id}", headers=customer_headers)

    assert response.status_code == 404
    assert response.json() == {"error": DENIED_MESSAGE}
    assert fetch_order(order.id).download_count == order.download_count


@pytest.mark.parametrize("order_id", [
    "999", "abc", "0", "-4", "1_0", "2147483648", "99999999999999999999",
])
def test_unknown_or_malformed_order_id(client, customer_headers, order_id):
    response = client.get(f"/api/v1/download/{order_id}", headers=customer_headers)

    assert response.status_code == 404
    assert response.json()["error"] == DENIED_MESSAGE


def test_missing_file_does_not_consume_a_download(client, customer_headers):
    model = create_catalog_model(excel_url="/uploads/excel/vanished.xlsx")
    order = create_order(model=model, download_count=2)

    response = client.get(f"/api/v1/download/{order.id}", headers=customer_headers)

    assert response.status_code == 404
    assert response.json()["error"] == UNAVAILABLE_MESSAGE
    assert fetch_order(order.id).download_count == 2


def test_order_without_catalog_model_is_unavailable(client, customer_headers):
    order = create_order(model=None)

    response = client.get(f"/api/v1/download/{order.id}", headers=customer_headers)

    assert response.status_code == 404
    assert response.json()["error"] == UNAVAILABLE_MESSAGE


def test_asset_path_cannot_escape_public_dir(client, customer_headers, storage_service):
    outside = storage_service.public_dir.parent / "secret.xlsx"
    outside.write_bytes(b"secret")
    model = create_catalog_model(excel_url="/../secret.xlsx")
    order = create_order(model=model)

    response = client.get(f"/api/v1/download/{order.id}", headers=customer_headers)

    assert response.status_code == 404
    assert response.json()["error"] == UNAVAILABLE_MESSAGE


def test_download_requires_authentication(client, purchased):
    response = client.get(f"/api/v1/download/{purchased.id}")

    assert response.status_code == 401
    assert fetch_order(purchased.id).download_count == 0


def test_other_users_token_is_denied(client, purchased):
    intruder = create_user(email="intruder@example.com")

    response = client.get(f"/api/v1/download/{purchased.id}", headers=auth_headers(intruder))

    assert response.status_code == 404
    assert fetch_order(purchased.id).download_count == 0


def test_guarded_increment_never_exceeds_limit(database):
    order = create_order(download_count=4, max_downloads=5)
    now = datetime.utcnow()

    with SessionLocal() as session:
        repository = OrderRepositoryImpl(session)
        first = run(repository.increment_download_count(OrderId(order.id), now))
        second = run(repository.increment_download_count(OrderId(order.id), now))
        session.commit()

    assert first is not None and first.download_count == 5
    assert second is None
    assert fetch_order(order.id).download_count == 5


def test_increment_refuses_expired_order(database):
    order = create_order(expires_in=timedelta(seconds=-1))

    with SessionLocal() as session:
        result = run(OrderRepositoryImpl(session).increment_download_count(
            OrderId(order.id), datetime.utcnow()
        ))
        session.rollback()

    assert result is None


def test_download_filename_replaces_unsafe_characters():
    assert download_filename("LBO Model: v2/Final", ".xlsx") == "LBO_Model__v2_Final.xlsx"
    assert download_filename("", ".xlsm") == "download.xlsm"


def test_media_type_for_extensions():
    assert media_type_for(Path("a.xlsx")).startswith("application/vnd.openxmlformats")
    assert media_type_for(Path("a.XLSM")).startswith("application/vnd.openxmlformats")
    assert media_type_for(Path("a.xls")) == "application/octet-stream"
