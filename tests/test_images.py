"""
Tests for image CRUD and file uploads.
"""
from menuboard.models import Image

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def test_create_image_from_url(client, owner_headers, item):
    resp = client.post(
        "/images",
        json={"item_id": item["id"], "url": "https://cdn.example.com/extra.jpg"},
        headers=owner_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["sort_order"] == 2
    assert resp.json()["item_id"] == item["id"]


def test_create_image_rejects_bad_url(client, owner_headers, item):
    resp = client.post(
        "/images",
        json={"item_id": item["id"], "url": "ftp://cdn.example.com/x.jpg"},
        headers=owner_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["path"] == "url"


def test_list_and_get(client, owner_headers, item):
    listed = client.get(f"/images?item_id={item['id']}", headers=owner_headers).json()
    assert [img["id"] for img in listed] == [img["id"] for img in item["images"]]
    resp = client.get(f"/images/{listed[0]['id']}", headers=owner_headers)
    assert resp.status_code == 200


def test_update_image(client, owner_headers, item):
    image_id = item["images"][0]["id"]
    resp = client.put(f"/images/{image_id}", json={"alt": None, "sort_order": 9}, headers=owner_headers)
    assert resp.status_code == 200
    assert resp.json()["alt"] is None
    assert resp.json()["sort_order"] == 9


def test_appended_sort_order_stays_within_range(client, owner_headers, item):
    first = client.post(
        "/images",
        json={"item_id": item["id"], "url": "https://cdn.example.com/last.jpg", "sort_order": 999},
        headers=owner_headers,
    )
    assert first.status_code == 201

    resp = client.post(
        "/images",
        json={"item_id": item["id"], "url": "https://cdn.example.com/after.jpg"},
        headers=owner_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["sort_order"] == 999

    listed = client.get(f"/images?item_id={item['id']}", headers=owner_headers).json()
    assert [img["id"] for img in listed][-2:] == [first.json()["id"], resp.json()["id"]]


def test_upload_images(client, owner, owner_headers, item, storage):
    resp = client.post(
        f"/images/items/{item['id']}",
        files=[
            ("files", ("front.png", PNG_BYTES, "image/png")),
            ("files", ("side.png", PNG_BYTES, "image/png")),
        ],
        data={"alt": "Muzzarella"},
        headers=owner_headers,
    )
    assert resp.status_code == 201, resp.text
    images = resp.json()
    assert [img["sort_order"] for img in images] == [2, 3]
    assert all(img["alt"] == "Muzzarella" for img in images)
    assert all(img["url"].startswith(f"/uploads/items/{owner.id}/") for img in images)
    for img in images:
        assert (storage.root / img["url"][len("/uploads/"):]).exists()


def test_upload_rejects_bad_type_and_keeps_nothing(client, session_factory, owner_headers, item, storage):
    resp = client.post(
        f"/images/items/{item['id']}",
        files=[
            ("files", ("ok.png", PNG_BYTES, "image/png")),
            ("files", ("doc.pdf", b"%PDF-1.4", "application/pdf")),
        ],
        headers=owner_headers,
    )
    assert resp.status_code == 400
    with session_factory() as s:
        assert s.query(Image).filter_by(item_id=item["id"]).count() == 2
    assert not list((storage.root / "items").rglob("*.png"))


def test_upload_too_many_files(client, owner_headers, item, monkeypatch):
    import menuboard.config as config_mod
    monkeypatch.setattr(config_mod, "MAX_UPLOAD_FILES", 1)
    resp = client.post(
        f"/images/items/{item['id']}",
        files=[("files", ("a.png", PNG_BYTES, "image/png")), ("files", ("b.png", PNG_BYTES, "image/png"))],
        headers=owner_headers,
    )
    assert resp.status_code == 400
    assert resp.json() == {"message": "Too many files. Max: 1"}


def test_upload_requires_files(client, owner_headers, item):
    resp = client.post(f"/images/items/{item['id']}", data={"alt": "x"}, headers=owner_headers)
    assert resp.status_code == 400


def test_upload_to_foreign_item(client, other_headers, item):
    resp = client.post(
        f"/images/items/{item['id']}",
        files=[("files", ("a.png", PNG_BYTES, "image/png"))],
        headers=other_headers,
    )
    assert resp.status_code == 404


def test_delete_uploaded_image_removes_file(client, owner_headers, item, storage):
    uploaded = client.post(
        f"/images/items/{item['id']}",
        files=[("files", ("a.png", PNG_BYTES, "image/png"))],
        headers=owner_headers,
    ).json()[0]
    path = storage.root / uploaded["url"][len("/uploads/"):]
    assert path.exists()

    resp = client.delete(f"/images/{uploaded['id']}", headers=owner_headers)
    assert resp.status_code == 204
    assert not path.exists()
    assert client.get(f"/images/{uploaded['id']}", headers=owner_headers).status_code == 404


def test_delete_url_image(client, owner_headers, item):
    image_id = item["images"][0]["id"]
    assert client.delete(f"/images/{image_id}", headers=owner_headers).status_code == 204
    remaining = client.get(f"/items/{item['id']}", headers=owner_headers).json()["images"]
    assert [img["id"] for img in remaining] == [item["images"][1]["id"]]


def test_uploads_after_last_sort_order_are_capped(client, owner_headers, item):
    image_id = item["images"][-1]["id"]
    client.put(f"/images/{image_id}", json={"sort_order": 998}, headers=owner_headers)

    resp = client.post(
        f"/images/items/{item['id']}",
        files=[
            ("files", ("a.png", PNG_BYTES, "image/png")),
            ("files", ("b.png", PNG_BYTES, "image/png")),
        ],
        headers=owner_headers,
    )
    assert resp.status_code == 201, resp.text
    assert [img["sort_order"] for img in resp.json()] == [999, 999]
