"""
Tests for item CRUD and item image patches.
"""
from menuboard.models import Image, Item


def test_create_item_with_images(client, owner_headers, item):
    assert item["title"] == "Muzzarella"
    assert item["price"] == 7500
    assert [img["sort_order"] for img in item["images"]] == [0, 1]
    assert item["images"][0]["alt"] == "Muzzarella"


def test_list_items_by_category(client, owner_headers, category, item):
    resp = client.get(f"/items?category_id={category['id']}", headers=owner_headers)
    assert resp.status_code == 200
    assert [i["id"] for i in resp.json()] == [item["id"]]
    assert len(resp.json()[0]["images"]) == 2


def test_create_item_validation(client, owner_headers, category):
    resp = client.post(
        "/items",
        json={"category_id": category["id"], "title": "Gratis", "price": -1},
        headers=owner_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["path"] == "price"


def test_create_item_in_foreign_category(client, other_headers, category):
    resp = client.post(
        "/items",
        json={"category_id": category["id"], "title": "x", "price": 1},
        headers=other_headers,
    )
    assert resp.status_code == 404
    assert resp.json() == {"message": "Category not found"}


def test_update_item_fields(client, owner_headers, item):
    resp = client.put(
        f"/items/{item['id']}",
        json={"price": 7900.99, "description": "Clásica"},
        headers=owner_headers,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["price"] == 7900.99
    assert data["description"] == "Clásica"
    assert len(data["images"]) == 2


def test_update_item_image_patch(client, owner_headers, item):
    first, second = item["images"]
    resp = client.put(
        f"/items/{item['id']}",
        json={
            "images": [
                {"id": first["id"], "_delete": True},
                {"id": second["id"], "sort_order": 0},
                {"url": "https://cdn.example.com/muzza-3.jpg", "alt": "Nueva"},
            ]
        },
        headers=owner_headers,
    )
    assert resp.status_code == 200, resp.text
    images = resp.json()["images"]
    assert [img["id"] for img in images][0] == second["id"]
    assert images[1]["alt"] == "Nueva"
    assert images[1]["sort_order"] == 1


def test_update_item_unknown_image_rolls_back(client, session_factory, owner_headers, item):
    resp = client.put(
        f"/items/{item['id']}",
        json={"title": "Renombrada", "images": [{"id": 9999, "_delete": True}]},
        headers=owner_headers,
    )
    assert resp.status_code == 404
    assert resp.json() == {"message": "Image 9999 not found in item"}
    with session_factory() as s:
        assert s.get(Item, item["id"]).title == "Muzzarella"


def test_update_item_image_limit(client, owner_headers, item):
    images = [{"url": f"https://cdn.example.com/{i}.jpg"} for i in range(31)]
    resp = client.put(f"/items/{item['id']}", json={"images": images}, headers=owner_headers)
    assert resp.status_code == 400


def test_delete_item(client, session_factory, owner_headers, item):
    resp = client.delete(f"/items/{item['id']}", headers=owner_headers)
    assert resp.status_code == 204
    assert client.get(f"/items/{item['id']}", headers=owner_headers).status_code == 404
    with session_factory() as s:
        assert s.query(Image).filter_by(item_id=item["id"], active=True).count() == 0


def test_other_tenant_cannot_read_item(client, other_headers, item):
    assert client.get(f"/items/{item['id']}", headers=other_headers).status_code == 404
