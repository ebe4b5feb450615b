def _create(client, headers, **body):
    response = client.post("/api/items", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_items_get_sequential_backpack_ids(client, auth_headers):
    headers = auth_headers("alice@example.com")

    tent = _create(client, headers, name="Tent", description="2-person")
    stove = _create(client, headers, name="Stove")

    assert tent["backpack_id"] == "ALI0001"
    assert stove["backpack_id"] == "ALI0002"
    assert tent["description"] == "2-person"
    assert tent["user_email"] == "alice@example.com"
    assert tent["tags"] == []


def test_users_sharing_a_prefix_share_a_counter(client, auth_headers):
    alice = auth_headers("alice@example.com")
    alicia = auth_headers("alicia@example.com")

    first = _create(client, alice, name="Tent")
    second = _create(client, alicia, name="Rope")

    assert (first["backpack_id"], second["backpack_id"]) == ("ALI0001", "ALI0002")


def test_items_are_isolated_per_user(client, auth_headers):
    alice = auth_headers("alice@example.com")
    bob = auth_headers("bob@example.com")
    tent = _create(client, alice, name="Tent")

    assert client.get(f"/api/items/{tent['id']}", headers=bob).status_code == 404
    assert client.get("/api/items", headers=bob).json() == {"items": []}
    assert client.delete(f"/api/items/{tent['id']}", headers=bob).status_code == 404
    assert client.get(f"/api/items/{tent['id']}", headers=alice).status_code == 200


def test_list_filters_by_name_case_insensitively(client, auth_headers):
    headers = auth_headers("alice@example.com")
    _create(client, headers, name="Sleeping Bag")
    _create(client, headers, name="Water bottle")
    _create(client, headers, name="Tea bags")

    response = client.get("/api/items", params={"name": "BAG"}, headers=headers)

    assert sorted(i["name"] for i in response.json()["items"]) == ["Sleeping Bag", "Tea bags"]


def test_parent_must_belong_to_caller(client, auth_headers):
    alice = auth_headers("alice@example.com")
    bob = auth_headers("bob@example.com")
    backpack = _create(client, alice, name="Backpack")

    child = _create(client, alice, name="Pouch", parent=backpack["id"])
    foreign = client.post("/api/items", json={"name": "Pouch", "parent": backpack["id"]}, headers=bob)

    assert child["parent_id"] == backpack["id"]
    assert foreign.status_code == 404
    assert foreign.json() == {"error": "Parent item not found"}


def test_failed_create_does_not_consume_a_number(client, auth_headers):
    headers = auth_headers("alice@example.com")

    failed = client.post("/api/items", json={"name": "Pouch", "parent": 9999}, headers=headers)
    created = _create(client, headers, name="Tent")

    assert failed.status_code == 404
    assert created["backpack_id"] == "ALI0001"


def test_patch_updates_fields_and_ignores_empty_values(client, auth_headers):
    headers = auth_headers("alice@example.com")
    item = _create(client, headers, name="Tent", description="old")

    response = client.patch(
        f"/api/items/{item['id']}",
        json={"name": "", "description": "new"},
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Tent"
    assert body["description"] == "new"
    assert body["backpack_id"] == item["backpack_id"]


def test_item_cannot_be_its_own_parent(client, auth_headers):
    headers = auth_headers("alice@example.com")
    item = _create(client, headers, name="Tent")

    response = client.patch(f"/api/items/{item['id']}", json={"parent": item["id"]}, headers=headers)

    assert response.status_code == 400
    assert response.json() == {"error": "An item cannot be its own parent"}


def test_deleting_parent_orphans_children(client, auth_headers):
    headers = auth_headers("alice@example.com")
    backpack = _create(client, headers, name="Backpack")
    pouch = _create(client, headers, name="Pouch", parent=backpack["id"])

    assert client.delete(f"/api/items/{backpack['id']}", headers=headers).status_code == 204

    orphan = client.get(f"/api/items/{pouch['id']}", headers=headers).json()
    assert orphan["parent_id"] is None


def test_patch_tags_only_from_active_organization(client, auth_headers):
    alice = auth_headers("alice@example.com")
    bob = auth_headers("bob@example.com")
    item = _create(client, alice, name="Tent")
    own_tag = client.post("/api/tags", json={"name": "camping"}, headers=alice).json()
    foreign_tag = client.post("/api/tags", json={"name": "secret"}, headers=bob).json()

    response = client.patch(
        f"/api/items/{item['id']}",
        json={"tags": [own_tag["id"], foreign_tag["id"]]},
        headers=alice,
    )

    assert response.status_code == 200
    assert [t["id"] for t in response.json()["tags"]] == [own_tag["id"]]

    cleared = client.patch(f"/api/items/{item['id']}", json={"tags": []}, headers=alice)
    assert cleared.json()["tags"] == []


def test_missing_item_is_not_found(client, auth_headers):
    headers = auth_headers("alice@example.com")

    assert client.get("/api/items/12345", headers=headers).json() == {"error": "Item not found"}
    assert client.patch("/api/items/12345", json={"name": "x"}, headers=headers).status_code == 404


def test_item_cannot_move_under_its_descendant(client, auth_headers):
    headers = auth_headers("alice@example.com")
    backpack = _create(client, headers, name="Backpack")
    pouch = _create(client, headers, name="Pouch", parent=backpack["id"])
    wallet = _create(client, headers, name="Wallet", parent=pouch["id"])

    direct = client.patch(f"/api/items/{backpack['id']}", json={"parent": pouch["id"]}, headers=headers)
    deep = client.patch(f"/api/items/{backpack['id']}", json={"parent": wallet["id"]}, headers=headers)

    assert direct.status_code == deep.status_code == 400
    assert deep.json() == {"error": "An item cannot be placed inside one of its own descendants"}
    assert client.get(f"/api/items/{backpack['id']}", headers=headers).json()["parent_id"] is None

    sideways = _create(client, headers, name="Tent")
    moved = client.patch(f"/api/items/{wallet['id']}", json={"parent": sideways["id"]}, headers=headers)
    assert moved.status_code == 200
    assert moved.json()["parent_id"] == sideways["id"]
