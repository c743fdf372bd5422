def test_position_update_tracks_misplacements(client, super_admin, library, book):
    url = f"/libraries/{library['id']}/book-locations/shelf_x/{book['isbn']}"

    r = client.put(url, json={"position": 4, "expected_position": 4, "is_correct_order": True},
                   headers=super_admin.headers)
    assert r.status_code == 200, r.text
    assert r.json()["misplacement_count"] == 0

    r = client.put(url, json={"position": 7, "is_correct_order": False, "reason": "wrong slot"},
                   headers=super_admin.headers)
    assert r.json()["misplacement_count"] == 1
    assert r.json()["expected_position"] == 4

    # Staying misplaced does not count again
    r = client.put(url, json={"position": 8, "is_correct_order": False}, headers=super_admin.headers)
    assert r.json()["misplacement_count"] == 1

    r = client.put(url, json={"position": 4, "is_correct_order": True}, headers=super_admin.headers)
    r = client.put(url, json={"position": 2, "is_correct_order": False}, headers=super_admin.headers)
    assert r.json()["misplacement_count"] == 2


def test_new_misplaced_row_starts_at_one(client, super_admin, library, book):
    url = f"/libraries/{library['id']}/book-locations/shelf_y/{book['isbn']}"
    r = client.put(url, json={"position": 2, "expected_position": 5, "is_correct_order": False},
                   headers=super_admin.headers)
    assert r.json()["misplacement_count"] == 1


def test_list_and_misplaced(client, super_admin, library, book):
    base = f"/libraries/{library['id']}/book-locations/"
    client.put(f"{base}shelf_a/{book['isbn']}", json={"position": 1, "is_correct_order": True},
               headers=super_admin.headers)
    client.put(f"{base}shelf_b/{book['isbn']}", json={"position": 3, "is_correct_order": False},
               headers=super_admin.headers)

    everything = client.get(base, headers=super_admin.headers).json()
    assert [loc["shelf_id"] for loc in everything] == ["shelf_a", "shelf_b"]

    misplaced = client.get(f"{base}misplaced", headers=super_admin.headers).json()
    assert [loc["shelf_id"] for loc in misplaced] == ["shelf_b"]


def test_position_update_unknown_targets(client, super_admin, library, book):
    r = client.put(f"/libraries/ghost/book-locations/s/{book['isbn']}", json={"position": 1},
                   headers=super_admin.headers)
    assert r.status_code == 404
    r = client.put(f"/libraries/{library['id']}/book-locations/s/0000", json={"position": 1},
                   headers=super_admin.headers)
    assert r.status_code == 404
