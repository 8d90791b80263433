from http import HTTPStatus

import pytest

from attachable import RelationResolver
from conftest import Post, member_ids

UPDATE_METHODS = ["post", "delete", "put", "patch"]


def test_attach_keeps_existing_members(client):
    response = client.post("/posts/1/tags", json={"tags": [3]})

    assert response.status_code == HTTPStatus.OK
    assert response.get_json() == {"status": "ok"}
    assert member_ids(1) == [1, 2, 3]


def test_repeated_attach_adds_no_duplicates(client):
    client.post("/posts/1/tags", json={"tags": [3, 3, "3"]})
    client.post("/posts/1/tags", json={"tags": [1, 3]})

    assert member_ids(1) == [1, 2, 3]
    data = client.get("/posts/1/tags").get_json()["data"]
    assert [tag["id"] for tag in data] == [1, 2, 3]


def test_detach_removes_exactly_the_items(client):
    response = client.delete("/posts/1/tags", json={"tags": [1]})

    assert response.status_code == HTTPStatus.OK
    assert response.get_json() == {"status": "ok"}
    assert member_ids(1) == [2]


def test_detach_non_member_is_a_noop(client):
    response = client.delete("/posts/1/tags", json={"tags": [4, 404]})

    assert response.status_code == HTTPStatus.OK
    assert member_ids(1) == [1, 2]


@pytest.mark.parametrize("method", ["put", "patch"])
def test_sync_replaces_members(client, method):
    response = getattr(client, method)("/posts/1/tags", json={"tags": [4, 2, 3]})

    assert response.status_code == HTTPStatus.OK
    assert response.get_json() == {"status": "ok"}
    assert member_ids(1) == [2, 3, 4]


def test_sync_report(app, client):
    app.config["ATTACHABLE_SYNC_REPORT"] = True

    response = client.put("/posts/1/tags", json={"tags": [2, 3]})

    assert response.get_json() == {"status": "ok", "added": [3], "removed": [1]}


def test_attach_detach_sync_scenario(client):
    # {A,B} -> attach [C] -> {A,B,C} -> detach [A] -> {B,C} -> sync [C,D] -> {C,D}
    client.post("/posts/1/tags", json={"tags": [3]})
    assert member_ids(1) == [1, 2, 3]
    client.delete("/posts/1/tags", json={"tags": [1]})
    assert member_ids(1) == [2, 3]
    client.put("/posts/1/tags", json={"tags": [3, 4]})
    assert member_ids(1) == [3, 4]


def test_resource_identifier_items(client):
    response = client.post("/posts/1/tags", json={"tags": [{"id": "3", "type": "tags"}]})

    assert response.status_code == HTTPStatus.OK
    assert member_ids(1) == [1, 2, 3]


def test_hyphenated_relation_is_camel_cased(client):
    response = client.post("/posts/1/featured-tags", json={"featured-tags": [1, 4]})

    assert response.status_code == HTTPStatus.OK
    assert member_ids(1, "featuredTags") == [1, 4]


def test_param_key(client):
    response = client.post("/posts/1/tags/tag_ids", json={"tag_ids": [4]})

    assert response.status_code == HTTPStatus.OK
    assert member_ids(1) == [1, 2, 4]


def test_param_key_error_hint(client):
    response = client.post("/posts/1/tags/tag_ids", json={"tag_ids": [99]})

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.get_json()["errors"][0]["detail"] == "Something went wrong. Are you sure the tag ids exists?"


def test_form_input(client):
    response = client.post("/posts/1/tags", data={"tags[]": ["3", "4"]})

    assert response.status_code == HTTPStatus.OK
    assert member_ids(1) == [1, 2, 3, 4]


def test_form_scalar_is_not_an_array(client):
    response = client.post("/posts/1/tags", data={"tags": "3"})

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert response.get_json()["errors"][0]["detail"] == "The tags must be an array."
    assert member_ids(1) == [1, 2]


@pytest.mark.parametrize("method", UPDATE_METHODS)
@pytest.mark.parametrize("body", [{"tags": "not-an-array"}, {}, {"tags": []}, {"other": [1]}])
def test_invalid_items_are_validation_errors(client, method, body):
    response = getattr(client, method)("/posts/1/tags", json=body)

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    errors = response.get_json()["errors"]
    assert errors[0]["title"] == "Validation Error"
    assert errors[0]["source"] == {"pointer": "/tags"}
    assert member_ids(1) == [1, 2]


def test_validation_precedes_owner_lookup(client):
    response = client.post("/posts/42/tags", json={"tags": "x"})

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


@pytest.mark.parametrize("method", UPDATE_METHODS)
def test_unknown_owner(client, method):
    response = getattr(client, method)("/posts/42/tags", json={"tags": [1]})

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.get_json() == {"errors": [{"title": "Not Found", "detail": "Not Found", "code": "404"}]}


def test_unknown_owner_list(client):
    response = client.get("/posts/42/tags")

    assert response.status_code == HTTPStatus.NOT_FOUND


def test_unknown_item_is_a_relation_error(client):
    response = client.post("/posts/1/tags", json={"tags": [3, 99]})

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    error = response.get_json()["errors"][0]
    assert error["title"] == "Relation Error"
    assert error["detail"] == "Something went wrong. Are you sure the tags exists?"
    assert "99" not in response.get_data(as_text=True)
    # nothing was attached
    assert member_ids(1) == [1, 2]


@pytest.mark.parametrize("method", ["post", "put"])
@pytest.mark.parametrize("item", [3.9, "3.9", 10**30, "3x"])
def test_invalid_item_id_is_a_relation_error(client, method, item):
    response = getattr(client, method)("/posts/1/tags", json={"tags": [item]})

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    error = response.get_json()["errors"][0]
    assert error["title"] == "Relation Error"
    assert error["detail"] == "Something went wrong. Are you sure the tags exists?"
    assert member_ids(1) == [1, 2]


def test_integral_float_item_id(client):
    response = client.post("/posts/1/tags", json={"tags": [3.0]})

    assert response.status_code == HTTPStatus.OK
    assert member_ids(1) == [1, 2, 3]


@pytest.mark.parametrize("owner_id", ["1.5", "x", str(10**30)])
def test_invalid_owner_id(client, owner_id):
    response = client.post(f"/posts/{owner_id}/tags", json={"tags": [3]})

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert member_ids(1) == [1, 2]


def test_unknown_relation_is_a_relation_error(client):
    response = client.post("/posts/1/comments", json={"comments": [1]})

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.get_json()["errors"][0]["detail"] == "Something went wrong. Are you sure the comments exists?"


def test_to_one_relation_is_a_relation_error(client):
    response = client.post("/posts/1/author", json={"author": [1]})

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.get_json()["errors"][0]["title"] == "Relation Error"


def test_wrong_item_type_is_a_relation_error(client):
    response = client.post("/posts/1/tags", json={"tags": [{"id": 3, "type": "users"}]})

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert member_ids(1) == [1, 2]


def test_hook_filters_items(client):
    response = client.post("/filtered/1/tags", json={"tags": [3, 4]})

    assert response.status_code == HTTPStatus.OK
    assert member_ids(1) == [1, 2, 3]


def test_hook_failure_is_an_internal_error(client):
    response = client.put("/filtered/1/tags", json={"tags": [3]})

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    error = response.get_json()["errors"][0]
    assert error["title"] == "Internal Error"
    assert "hook failure" not in error["detail"]
    assert member_ids(1) == [1, 2]


def test_query_model_locator(client):
    assert client.post("/published/1/tags", json={"tags": [3]}).status_code == HTTPStatus.OK
    assert client.post("/published/2/tags", json={"tags": [3]}).status_code == HTTPStatus.NOT_FOUND
    assert member_ids(1) == [1, 2, 3]
    assert member_ids(2) == []


def test_registered_alias(client):
    RelationResolver.register(Post, "categories", "tags")
    try:
        response = client.post("/posts/1/categories", json={"categories": [4]})
    finally:
        RelationResolver.unregister(Post)

    assert response.status_code == HTTPStatus.OK
    assert member_ids(1) == [1, 2, 4]


def test_list_attached(client):
    response = client.get("/posts/1/tags")

    assert response.status_code == HTTPStatus.OK
    result = response.get_json()
    assert result["data"] == [{"id": 1, "name": "A"}, {"id": 2, "name": "B"}]
    assert result["meta"] == {"limit": 15, "offset": 0, "count": 2}
    assert "next" not in result["links"]


def test_list_attached_page_limit_config(app, client):
    app.config["ATTACHABLE_PAGE_LIMIT"] = 1

    result = client.get("/posts/1/tags").get_json()

    assert result["data"] == [{"id": 1, "name": "A"}]
    assert result["links"]["next"].endswith("page[offset]=1")


def test_list_attached_dynamic_relationship_pages(client):
    first = client.get("/posts/1/labels").get_json()
    assert [label["id"] for label in first["data"]] == ["label-0", "label-1"]
    assert first["meta"]["limit"] == 2
    assert "next" in first["links"]
    assert "prev" not in first["links"]

    last = client.get("/posts/1/labels?page[offset]=4").get_json()
    assert [label["id"] for label in last["data"]] == ["label-4"]
    assert "next" not in last["links"]
    assert last["links"]["prev"].endswith("page[offset]=2")

    numbered = client.get("/posts/1/labels?page[number]=2").get_json()
    assert [label["id"] for label in numbered["data"]] == ["label-2", "label-3"]


def test_list_attached_invalid_page(client):
    response = client.get("/posts/1/labels?page[number]=x")

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_list_unknown_relation(client):
    response = client.get("/posts/1/comments")

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.get_json()["errors"][0]["title"] == "Relation Error"


def test_dynamic_relationship_sync(client):
    response = client.put("/posts/1/labels", json={"labels": ["label-1", "label-3"]})

    assert response.status_code == HTTPStatus.OK
    assert member_ids(1, "labels") == ["label-1", "label-3"]


def test_get_ignores_param_key_route(client):
    # the param_key url only accepts updates
    response = client.get("/posts/1/tags/tag_ids")

    assert response.status_code == HTTPStatus.METHOD_NOT_ALLOWED


def test_swagger_spec(client):
    spec = client.get("/swagger.json").get_json()

    assert "/posts/{id}/{relation}" in spec["paths"]
    path_item = spec["paths"]["/posts/{id}/{relation}"]
    assert set(path_item) >= {"get", "post", "delete", "put", "patch"}
    assert path_item["post"]["tags"] == ["posts"]
