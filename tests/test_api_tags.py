def test_create_list_and_delete_tags(client, auth_headers):
    headers = auth_headers("alice@example.com")

    created = client.post("/api/tags", json={"name": "camping"}, headers=headers)
    assert created.status_code == 201
    tag = created.json()

    listed = client.get("/api/tags", headers=headers).json()
    assert [t["name"] for t in listed] == ["camping"]

    assert client.delete(f"/api/tags/{tag['id']}", headers=headers).status_code == 204
    assert client.get("/api/tags", headers=headers).json() == []
    assert client.delete(f"/api/tags/{tag['id']}", headers=headers).status_code == 404


def test_tag_name_is_limited_to_twenty_characters(client, auth_headers):
    headers = auth_headers("alice@example.com")

    response = client.post("/api/tags", json={"name": "x" * 21}, headers=headers)

    assert response.status_code == 400


def test_tags_are_scoped_to_organization(client, auth_headers):
    alice = auth_headers("alice@example.com")
    bob = auth_headers("bob@example.com")
    tag = client.post("/api/tags", json={"name": "camping"}, headers=alice).json()

    assert client.get("/api/tags", headers=bob).json() == []
    assert client.delete(f"/api/tags/{tag['id']}", headers=bob).status_code == 404
    assert client.get(f"/api/tags/{tag['id']}/items", headers=bob).status_code == 404


def test_items_by_tag(client, auth_headers):
    headers = auth_headers("alice@example.com")
    tag = client.post("/api/tags", json={"name": "camping"}, headers=headers).json()
    tent = client.post("/api/items", json={"name": "Tent"}, headers=headers).json()
    client.post("/api/items", json={"name": "Laptop"}, headers=headers)
    client.patch(f"/api/items/{tent['id']}", json={"tags": [tag["id"]]}, headers=headers)

    response = client.get(f"/api/tags/{tag['id']}/items", headers=headers)

    assert response.status_code == 200
    assert [i["name"] for i in response.json()["items"]] == ["Tent"]


def test_deleting_tag_detaches_it_from_items(client, auth_headers):
    headers = auth_headers("alice@example.com")
    tag = client.post("/api/tags", json={"name": "camping"}, headers=headers).json()
    tent = client.post("/api/items", json={"name": "Tent"}, headers=headers).json()
    client.patch(f"/api/items/{tent['id']}", json={"tags": [tag["id"]]}, headers=headers)

    client.delete(f"/api/tags/{tag['id']}", headers=headers)

    assert client.get(f"/api/items/{tent['id']}", headers=headers).json()["tags"] == []
