from libadmin.utils.feature_flags import refresh_feature_flag_cache


def _scan_payload(library, floor, shelf, items):
    return {
        "library_id": library["id"],
        "floor_id": floor["id"],
        "shelf_id": shelf["id"],
        "scanned_books": items,
        "scan_duration": 12.5,
        "device_info": {"platform": "android", "model": "Pixel"},
    }


def _item(isbn, detected, expected, correct, title=None):
    return {
        "isbn": isbn,
        "title": title,
        "detected_position": detected,
        "expected_position": expected,
        "is_correct": correct,
    }


def test_submit_scan_derives_counters_and_flags_locations(client, super_admin, library, floor, shelf, book):
    shelf_url = f"/libraries/{library['id']}/floors/{floor['id']}/shelves/{shelf['id']}"
    client.post(f"{shelf_url}/books", json={"isbn": book["isbn"], "position": 2}, headers=super_admin.headers)

    payload = _scan_payload(library, floor, shelf, [
        _item(book["isbn"], 5, 2, False, "L'Etranger"),
        _item("9780000000002", 1, 1, True),
        _item("9780000000003", 3, 3, True),
        _item("9780000000004", 9, 4, False),
    ])
    # Client-sent counters are ignored in favour of the item list
    payload.update({"total_scanned": 99, "correct_count": 99, "accuracy": 1.0})
    r = client.post("/scans/", json=payload, headers=super_admin.headers)
    assert r.status_code == 201, r.text
    scan_id = r.json()["id"]

    scan = client.get(f"/scans/{scan_id}", headers=super_admin.headers).json()
    assert scan["total_scanned"] == 4
    assert scan["correct_count"] == 2
    assert scan["error_count"] == 2
    assert scan["accuracy"] == 50.0
    assert scan["user_id"] == super_admin.uid
    assert scan["device_info"]["platform"] == "android"

    shelf_now = client.get(shelf_url, headers=super_admin.headers).json()
    assert shelf_now["last_scan_date"] is not None

    misplaced = client.get(f"/libraries/{library['id']}/book-locations/misplaced", headers=super_admin.headers).json()
    # Only books already in the location index are flagged
    assert [(loc["book_isbn"], loc["position"], loc["expected_position"]) for loc in misplaced] == [
        (book["isbn"], 5, 2)
    ]
    assert misplaced[0]["misplacement_count"] == 1
    assert misplaced[0]["last_checked_at"] is not None

    stats = client.get(f"/books/{book['isbn']}", headers=super_admin.headers).json()["stats"]
    assert stats["scan_count"] == 1
    assert stats["total_copies"] == 1


def test_scan_with_plain_account_and_listing(client, make_user, super_admin, library, floor, shelf):
    mobile = make_user(None)
    r = client.post("/scans/", json=_scan_payload(library, floor, shelf, []), headers=mobile.headers)
    assert r.status_code == 201
    # Listing is admin-only
    assert client.get("/scans/", headers=mobile.headers).status_code == 403

    listed = client.get(f"/scans/?library_id={library['id']}", headers=super_admin.headers).json()
    assert len(listed) == 1
    assert listed[0]["user_id"] == mobile.uid
    assert client.get("/scans/?library_id=other", headers=super_admin.headers).json() == []


def test_scan_unknown_library(client, super_admin, library, floor, shelf):
    payload = _scan_payload(library, floor, shelf, [])
    payload["library_id"] = "ghost"
    assert client.post("/scans/", json=payload, headers=super_admin.headers).status_code == 404
    assert client.get("/scans/missing", headers=super_admin.headers).status_code == 404


def test_scans_blocked_in_maintenance(client, super_admin, library, floor, shelf):
    client.patch("/system/config", json={"maintenance_mode": True, "maintenance_message": "Back soon"},
                 headers=super_admin.headers)
    r = client.post("/scans/", json=_scan_payload(library, floor, shelf, []), headers=super_admin.headers)
    assert r.status_code == 503
    assert r.json()["detail"] == "Back soon"


def test_scans_disabled_by_flag(client, super_admin, monkeypatch):
    monkeypatch.setenv("FEATURE_AR_SCANNING_ENABLED", "0")
    refresh_feature_flag_cache()
    assert client.get("/scans/", headers=super_admin.headers).status_code == 404


def _movement(isbn, done=False):
    return {"book_isbn": isbn, "from_position": 5, "to_position": 2, "direction": "left", "priority": 3,
            "is_completed": done}


def test_correction_progress_and_completion(client, super_admin, library, floor, shelf):
    r = client.post(
        "/corrections/",
        json={
            "library_id": library["id"],
            "shelf_id": shelf["id"],
            "movements": [_movement("1", True), _movement("2"), _movement("3"), _movement("4")],
        },
        headers=super_admin.headers,
    )
    assert r.status_code == 201, r.text
    correction_id = r.json()["id"]

    correction = client.get(f"/corrections/{correction_id}", headers=super_admin.headers).json()
    assert correction["status"] == "in_progress"
    assert correction["total_moves"] == 4
    assert correction["completed_moves"] == 1
    assert correction["progress_percentage"] == 25.0
    assert correction["completed_at"] is None

    r = client.patch(
        f"/corrections/{correction_id}",
        json={"status": "completed", "movements": [_movement(str(i), True) for i in range(1, 5)]},
        headers=super_admin.headers,
    )
    assert r.status_code == 200, r.text
    done = r.json()
    assert done["progress_percentage"] == 100.0
    assert done["completed_at"] is not None
    assert done["duration"] >= 0

    shelf_now = client.get(
        f"/libraries/{library['id']}/floors/{floor['id']}/shelves/{shelf['id']}", headers=super_admin.headers
    ).json()
    assert shelf_now["last_correction_date"] is not None


def test_correction_validation(client, super_admin, library, shelf):
    bad = _movement("1")
    bad["priority"] = 9
    r = client.post("/corrections/", json={"library_id": library["id"], "shelf_id": shelf["id"], "movements": [bad]},
                    headers=super_admin.headers)
    assert r.status_code == 422

    bad = _movement("1")
    bad["direction"] = "up"
    r = client.post("/corrections/", json={"library_id": library["id"], "shelf_id": shelf["id"], "movements": [bad]},
                    headers=super_admin.headers)
    assert r.status_code == 422


def test_correction_patch_restricted_to_submitter(client, make_user, super_admin, library, shelf):
    owner = make_user(None)
    stranger = make_user(None)
    r = client.post("/corrections/", json={"library_id": library["id"], "shelf_id": shelf["id"]},
                    headers=owner.headers)
    correction_id = r.json()["id"]

    assert client.patch(f"/corrections/{correction_id}", json={"status": "cancelled"},
                        headers=stranger.headers).status_code == 403
    r = client.patch(f"/corrections/{correction_id}", json={"status": "cancelled"}, headers=owner.headers)
    assert r.status_code == 200
    assert r.json()["status"] == "cancelled"
    assert r.json()["completed_at"] is None
    assert client.patch("/corrections/missing", json={}, headers=owner.headers).status_code == 404

    listed = client.get("/corrections/", headers=super_admin.headers).json()
    assert [c["id"] for c in listed] == [correction_id]


def test_book_scan_stats_count_each_scan_once(client, super_admin, library, floor, shelf, book):
    before = client.get(f"/books/{book['isbn']}", headers=super_admin.headers).json()["stats"]
    assert before["scan_count"] == 0
    assert before["last_scan_date"] is None

    # The same book twice in one scan, next to an isbn missing from the catalogue
    first = _scan_payload(library, floor, shelf, [
        _item(book["isbn"], 1, 1, True),
        _item(book["isbn"], 4, 2, False),
        _item("9789999999999", 2, 2, True),
    ])
    assert client.post("/scans/", json=first, headers=super_admin.headers).status_code == 201
    second = _scan_payload(library, floor, shelf, [_item(book["isbn"], 1, 1, True)])
    assert client.post("/scans/", json=second, headers=super_admin.headers).status_code == 201
    unrelated = _scan_payload(library, floor, shelf, [_item("9789999999999", 1, 1, True)])
    assert client.post("/scans/", json=unrelated, headers=super_admin.headers).status_code == 201

    stats = client.get(f"/books/{book['isbn']}", headers=super_admin.headers).json()["stats"]
    assert stats["scan_count"] == 2
    assert stats["last_scan_date"] is not None
