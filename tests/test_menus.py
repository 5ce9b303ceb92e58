"""
Tests for menu CRUD over JSON and multipart bodies.
"""
import json

import pytest

from menuboard.models import Menu
from menuboard.services.menus import normalize_menu_body
from menuboard.errors import ApiError

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class TestNormalizeMenuBody:
    def test_payload_string_is_merged(self):
        body = normalize_menu_body({"payload": json.dumps({"title": "Carta"}), "pos": "caja-1"})
        assert body == {"title": "Carta", "pos": "caja-1"}

    def test_flat_colors_get_defaults(self):
        body = normalize_menu_body({"title": "Carta", "colorPrimary": "#112233"})
        assert body["color"] == {"primary": "#112233", "secondary": "#FFFFFF"}
        assert "colorPrimary" not in body

    def test_active_string(self):
        assert normalize_menu_body({"active": "false"})["active"] is False
        assert normalize_menu_body({"active": "TRUE"})["active"] is True

    def test_empty_active_is_dropped(self):
        assert "active" not in normalize_menu_body({"title": "Carta", "active": "  "})

    def test_background_image_alias_and_empty_strings(self):
        body = normalize_menu_body({"backgroundImage": "", "logo": ""})
        assert body == {"background_image": None, "logo": None}

    def test_payload_not_json(self):
        with pytest.raises(ApiError) as exc:
            normalize_menu_body({"payload": "{not json"})
        assert exc.value.message == "Invalid payload: not JSON"

    def test_payload_not_object(self):
        with pytest.raises(ApiError):
            normalize_menu_body({"payload": "[1, 2]"})


class TestMenuJson:
    def test_create_and_get(self, client, owner, owner_headers):
        resp = client.post(
            "/menus",
            json={
                "title": "Pizzería Don Pepe",
                "logo": "https://cdn.example.com/logo.png",
                "color": {"primary": "#AA0000", "secondary": "#FFFFFF"},
            },
            headers=owner_headers,
        )
        assert resp.status_code == 201, resp.text
        menu = resp.json()
        assert menu["user_id"] == owner.id
        assert menu["active"] is True
        assert menu["color"] == {"primary": "#AA0000", "secondary": "#FFFFFF"}

        resp = client.get(f"/menus/{menu['id']}", headers=owner_headers)
        assert resp.status_code == 200
        assert resp.json()["title"] == "Pizzería Don Pepe"

    def test_list_only_own_active_menus(self, client, owner_headers, other_headers):
        client.post("/menus", json={"title": "Uno"}, headers=owner_headers)
        second = client.post("/menus", json={"title": "Dos"}, headers=owner_headers).json()
        client.post("/menus", json={"title": "Ajeno"}, headers=other_headers)
        client.delete(f"/menus/{second['id']}", headers=owner_headers)

        resp = client.get("/menus", headers=owner_headers)
        assert [m["title"] for m in resp.json()] == ["Uno"]

    def test_validation(self, client, owner_headers):
        resp = client.post(
            "/menus",
            json={"title": "", "color": {"primary": "red", "secondary": "#FFFFFF"}, "logo": "not a url"},
            headers=owner_headers,
        )
        assert resp.status_code == 400
        paths = {e["path"] for e in resp.json()["errors"]}
        assert paths == {"title", "color.primary", "logo"}

    def test_invalid_json_body(self, client, owner_headers):
        resp = client.post(
            "/menus",
            content=b"{oops",
            headers={**owner_headers, "Content-Type": "application/json"},
        )
        assert resp.status_code == 400

    def test_update_partial_and_clear(self, client, owner_headers, menu):
        resp = client.put(
            f"/menus/{menu['id']}",
            json={"pos": "caja-2", "color_secondary": "#EEEEEE"},
            headers=owner_headers,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["title"] == "Carta"
        assert data["pos"] == "caja-2"
        assert data["color"] == {"primary": "#000000", "secondary": "#EEEEEE"}

        resp = client.put(f"/menus/{menu['id']}", json={"pos": None, "color": None}, headers=owner_headers)
        assert resp.json()["pos"] is None
        assert resp.json()["color"] is None

    def test_update_ignores_null_title(self, client, owner_headers, menu):
        resp = client.put(f"/menus/{menu['id']}", json={"title": None}, headers=owner_headers)
        assert resp.status_code == 200
        assert resp.json()["title"] == "Carta"

    def test_other_tenant_gets_404(self, client, other_headers, menu):
        assert client.get(f"/menus/{menu['id']}", headers=other_headers).status_code == 404
        assert client.put(f"/menus/{menu['id']}", json={"title": "x"}, headers=other_headers).status_code == 404
        assert client.delete(f"/menus/{menu['id']}", headers=other_headers).status_code == 404

    def test_delete_is_soft(self, client, session_factory, owner_headers, menu):
        resp = client.delete(f"/menus/{menu['id']}", headers=owner_headers)
        assert resp.status_code == 204
        assert client.get(f"/menus/{menu['id']}", headers=owner_headers).status_code == 404
        with session_factory() as s:
            assert s.get(Menu, menu["id"]).active is False

    def test_requires_auth(self, client):
        assert client.get("/menus").status_code == 401


class TestMenuMultipart:
    def test_create_with_payload_and_files(self, client, owner, owner_headers, storage):
        resp = client.post(
            "/menus",
            data={
                "payload": json.dumps({"title": "Cafetería La Plaza", "colorPrimary": "#4B2E2A"}),
                "active": "true",
            },
            files={
                "logo": ("logo.png", PNG_BYTES, "image/png"),
                "backgroundImage": ("wall.png", PNG_BYTES, "image/png"),
            },
            headers=owner_headers,
        )
        assert resp.status_code == 201, resp.text
        data = resp.json()
        assert data["title"] == "Cafetería La Plaza"
        assert data["color"] == {"primary": "#4B2E2A", "secondary": "#FFFFFF"}
        assert data["logo"].startswith(f"/uploads/menus/{owner.id}/")
        assert data["background_image"].startswith(f"/uploads/menus/{owner.id}/")

        key = data["logo"][len("/uploads/"):]
        assert (storage.root / key).read_bytes() == PNG_BYTES

    def test_plain_form_fields(self, client, owner_headers):
        resp = client.post(
            "/menus",
            data={"title": "Carta de vinos", "color_primary": "#550000", "color_secondary": "#FFEEDD"},
            headers=owner_headers,
        )
        assert resp.status_code == 201, resp.text
        assert resp.json()["color"] == {"primary": "#550000", "secondary": "#FFEEDD"}

    def test_update_replaces_logo(self, client, owner_headers, menu):
        resp = client.put(
            f"/menus/{menu['id']}",
            files={"logo": ("new.png", PNG_BYTES, "image/png")},
            headers=owner_headers,
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["logo"].startswith("/uploads/menus/")
        assert resp.json()["title"] == "Carta"

    def test_rejects_non_image_file(self, client, owner_headers):
        resp = client.post(
            "/menus",
            data={"title": "Carta"},
            files={"logo": ("notes.txt", b"hello", "text/plain")},
            headers=owner_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["message"].startswith("Unsupported image type")

    def test_bad_payload(self, client, owner_headers):
        resp = client.post("/menus", data={"payload": "{nope"}, headers=owner_headers)
        assert resp.status_code == 400
        assert resp.json() == {"message": "Invalid payload: not JSON"}

    def test_empty_active_keeps_menu_visible(self, client, owner_headers, menu):
        resp = client.put(
            f"/menus/{menu['id']}",
            data={"title": "Carta 2", "active": ""},
            headers=owner_headers,
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["active"] is True
        assert resp.json()["title"] == "Carta 2"
        assert client.get(f"/menus/{menu['id']}", headers=owner_headers).status_code == 200
