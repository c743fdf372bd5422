def _shelves_url(library, floor):
    return f"/libraries/{library['id']}/floors/{floor['id']}/shelves/"


def test_floor_crud(client, super_admin, library):
    base = f"/libraries/{library['id']}/floors/"
    r = client.post(base, json={"name": "Etage 1", "floor_number": 1, "map_asset_path": "maps/f1.png"},
                    headers=super_admin.headers)
    assert r.status_code == 201
    floor = r.json()
    assert floor["id"].startswith("floor_")
    assert floor["map_url"] == "maps/f1.png"
    assert floor["library_id"] == library["id"]

    client.put(f"{base}ground", json={"name": "RDC", "floor_number": 0}, headers=super_admin.headers)
    listed = client.get(base, headers=super_admin.headers).json()
    assert [f["floor_number"] for f in listed] == [0, 1]

    r = client.patch(f"{base}{floor['id']}", json={"description": "Salle de lecture"}, headers=super_admin.headers)
    assert r.status_code == 200
    assert r.json()["description"] == "Salle de lecture"

    assert client.get(f"{base}missing", headers=super_admin.headers).status_code == 404


def test_floor_requires_existing_library(client, super_admin):
    r = client.post("/libraries/ghost/floors/", json={"name": "x"}, headers=super_admin.headers)
    assert r.status_code == 404


def test_shelf_create_counts_and_accuracy(client, super_admin, library, floor, shelf):
    assert shelf["accuracy"] == 0.0
    assert shelf["is_active"] is True
    floor_now = client.get(f"/libraries/{library['id']}/floors/{floor['id']}", headers=super_admin.headers).json()
    assert floor_now["shelf_count"] == 1

    r = client.patch(
        f"{_shelves_url(library, floor)}{shelf['id']}",
        json={"current_count": 5},
        headers=super_admin.headers,
    )
    assert r.status_code == 200
    assert r.json()["accuracy"] == 50.0


def test_shelf_rejects_negative_capacity(client, super_admin, library, floor):
    r = client.post(_shelves_url(library, floor), json={"name": "B", "capacity": -1}, headers=super_admin.headers)
    assert r.status_code == 422


def test_inactive_shelves_hidden_from_list(client, super_admin, library, floor, shelf):
    client.patch(f"{_shelves_url(library, floor)}{shelf['id']}", json={"is_active": False}, headers=super_admin.headers)
    assert client.get(_shelves_url(library, floor), headers=super_admin.headers).json() == []


def test_place_and_remove_books(client, super_admin, library, floor, shelf, book):
    url = f"{_shelves_url(library, floor)}{shelf['id']}/books"
    r = client.post(url, json={"isbn": book["isbn"], "position": 3}, headers=super_admin.headers)
    assert r.status_code == 201, r.text
    placement = r.json()
    assert placement["position"] == 3
    assert placement["expected_position"] == 3
    assert placement["is_correct_order"] is True

    detail = client.get(f"{_shelves_url(library, floor)}{shelf['id']}", headers=super_admin.headers).json()
    assert detail["current_count"] == 1
    assert detail["accuracy"] == 10.0
    assert [b["book_isbn"] for b in detail["books"]] == [book["isbn"]]

    locations = client.get(f"/books/{book['isbn']}/locations", headers=super_admin.headers).json()
    assert len(locations) == 1
    assert locations[0]["shelf_id"] == shelf["id"]
    assert locations[0]["floor_id"] == floor["id"]

    # Re-placing moves the book instead of adding a copy
    client.post(url, json={"isbn": book["isbn"], "position": 1}, headers=super_admin.headers)
    books = client.get(url, headers=super_admin.headers).json()
    assert [(b["book_isbn"], b["position"]) for b in books] == [(book["isbn"], 1)]

    r = client.delete(f"{url}/{book['isbn']}", headers=super_admin.headers)
    assert r.status_code == 204
    assert client.get(url, headers=super_admin.headers).json() == []
    assert client.get(f"/books/{book['isbn']}/locations", headers=super_admin.headers).json() == []
    assert client.delete(f"{url}/{book['isbn']}", headers=super_admin.headers).status_code == 404


def test_place_book_validation(client, super_admin, library, floor, shelf, book):
    url = f"{_shelves_url(library, floor)}{shelf['id']}/books"
    assert client.post(url, json={"isbn": book["isbn"], "position": 0}, headers=super_admin.headers).status_code == 422
    assert client.post(url, json={"isbn": "000", "position": 1}, headers=super_admin.headers).status_code == 404


def test_floor_and_shelf_ids_are_scoped_to_their_library(client, super_admin, library, floor, shelf, book):
    r = client.post("/libraries/", json={"id": "lib_two", "name": "Annexe", "city": "Oran"},
                    headers=super_admin.headers)
    assert r.status_code == 201
    r = client.post("/libraries/lib_two/floors/", json={"id": floor["id"], "name": "RDC"},
                    headers=super_admin.headers)
    assert r.status_code == 201, r.text
    assert r.json()["library_id"] == "lib_two"

    other_shelves = f"/libraries/lib_two/floors/{floor['id']}/shelves/"
    r = client.post(other_shelves, json={"id": shelf["id"], "name": "Z-9", "capacity": 4},
                    headers=super_admin.headers)
    assert r.status_code == 201, r.text
    assert r.json()["library_id"] == "lib_two"

    r = client.post(f"{other_shelves}{shelf['id']}/books", json={"isbn": book["isbn"], "position": 1},
                    headers=super_admin.headers)
    assert r.status_code == 201, r.text

    original = client.get(f"{_shelves_url(library, floor)}{shelf['id']}", headers=super_admin.headers).json()
    assert original["name"] == "A-1-1"
    assert original["current_count"] == 0
    assert original["books"] == []
    other = client.get(f"{other_shelves}{shelf['id']}", headers=super_admin.headers).json()
    assert other["current_count"] == 1
    assert [b["book_isbn"] for b in other["books"]] == [book["isbn"]]


def test_shelf_id_taken_on_another_floor_conflicts(client, super_admin, library, floor, shelf):
    r = client.post(f"/libraries/{library['id']}/floors/", json={"id": "floor_1", "name": "Etage 1", "floor_number": 1},
                    headers=super_admin.headers)
    assert r.status_code == 201
    url = f"/libraries/{library['id']}/floors/floor_1/shelves/"
    r = client.post(url, json={"id": shelf["id"], "name": "B-1"}, headers=super_admin.headers)
    assert r.status_code == 409
    r = client.put(f"{url}{shelf['id']}", json={"name": "B-1"}, headers=super_admin.headers)
    assert r.status_code == 409

    kept = client.get(f"{_shelves_url(library, floor)}{shelf['id']}", headers=super_admin.headers).json()
    assert kept["name"] == "A-1-1"
    assert kept["floor_id"] == floor["id"]


def test_patch_null_on_floor_and_shelf_names_is_rejected(client, super_admin, library, floor, shelf):
    r = client.patch(f"/libraries/{library['id']}/floors/{floor['id']}", json={"name": None},
                     headers=super_admin.headers)
    assert r.status_code == 422
    r = client.patch(f"{_shelves_url(library, floor)}{shelf['id']}", json={"name": None, "capacity": None},
                     headers=super_admin.headers)
    assert r.status_code == 422
    assert "capacity" in r.json()["detail"]
