# tests/test_store.py
import pytest
from fastapi.testclient import TestClient

from gameforge.main import create_app
from gameforge.storage import InMemoryStorage


@pytest.fixture
def seeded(settings):
    storage = InMemoryStorage(seed_data=True)
    with TestClient(create_app(settings, storage=storage)) as c:
        yield c, storage


def test_catalog_reads(seeded):
    client, _ = seeded

    assets = client.get("/api/assets").json()
    assert len(assets) == 15
    assert all("fileUrl" in a for a in assets)

    music = client.get("/api/assets", params={"category": "music"}).json()
    assert music and all(a["category"] == "music" for a in music)

    asset_id = assets[0]["id"]
    assert client.get(f"/api/assets/{asset_id}").json()["id"] == asset_id
    assert client.get("/api/assets/nope").status_code == 404

    bundles = client.get("/api/bundles").json()
    assert len(bundles) == 4
    assert client.get(f"/api/bundles/{bundles[0]['id']}").status_code == 200
    assert client.get("/api/bundles/nope").json()["message"] == "Bundle not found"


def test_cart_item_needs_exactly_one_product(seeded):
    client, _ = seeded

    r = client.post("/api/cart", json={"userId": "user-1"})
    assert r.status_code == 400

    r = client.post("/api/cart", json={"userId": "user-1", "assetId": "asset-music-1", "bundleId": "bundle-1"})
    assert r.status_code == 400
    assert "Exactly one of assetId or bundleId" in r.json()["message"]


def test_cart_item_references_must_exist(seeded):
    client, _ = seeded

    r = client.post("/api/cart", json={"userId": "user-1", "assetId": "asset-missing"})
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "assetId"

    r = client.post("/api/cart", json={"userId": "ghost", "bundleId": "bundle-1"})
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "userId"


def test_cart_add_list_remove_clear(seeded):
    client, _ = seeded

    first = client.post("/api/cart", json={"userId": "user-1", "assetId": "asset-music-1"}).json()
    second = client.post("/api/cart", json={"userId": "user-1", "bundleId": "bundle-1", "quantity": 2}).json()
    assert first["quantity"] == 1

    items = client.get("/api/cart/user-1").json()
    assert [i["id"] for i in items] == [second["id"], first["id"]]

    # another user's id cannot remove the item
    assert client.delete(f"/api/cart/user-2/{first['id']}").status_code == 404
    r = client.delete(f"/api/cart/user-1/{first['id']}")
    assert r.status_code == 200
    assert r.json()["message"] == "Item removed from cart"

    assert client.delete("/api/cart/user-1").json()["message"] == "Cart cleared"
    assert client.get("/api/cart/user-1").json() == []


def test_checkout_turns_cart_into_purchases(seeded):
    client, storage = seeded
    asset = storage.get_asset("asset-music-1")
    bundle = storage.get_bundle("bundle-1")

    client.post("/api/cart", json={"userId": "user-2", "assetId": asset.id, "quantity": 3})
    client.post("/api/cart", json={"userId": "user-2", "bundleId": bundle.id})

    r = client.post("/api/cart/user-2/checkout")
    assert r.status_code == 201
    amounts = sorted(p["amount"] for p in r.json())
    assert amounts == sorted([asset.price * 3, bundle.price])
    assert all(p["status"] == "completed" for p in r.json())

    assert client.get("/api/cart/user-2").json() == []
    assert len(client.get("/api/purchases/user-2").json()) == 2


def test_checkout_empty_cart(seeded):
    client, _ = seeded
    r = client.post("/api/cart/user-3/checkout")
    assert r.status_code == 400
    assert r.json()["message"] == "Cart is empty"


def test_record_purchase(seeded):
    client, _ = seeded

    r = client.post("/api/purchases", json={"userId": "user-1", "bundleId": "bundle-2", "amount": 4999})
    assert r.status_code == 201
    assert r.json()["status"] == "completed"

    r = client.post("/api/purchases", json={"userId": "user-1", "assetId": "asset-music-1", "amount": -1})
    assert r.status_code == 400

    purchases = client.get("/api/purchases/user-1").json()
    assert [p["amount"] for p in purchases] == [4999]
