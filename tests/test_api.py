from uuid import uuid4


def create_order(client):
    response = client.post("/orders/")
    assert response.status_code == 201
    return response.json()["uuid"]


def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["database"] == "ok"


def test_create_order(client):
    response = client.post("/orders/")

    assert response.status_code == 201
    data = response.json()
    assert data["items"] == []
    assert data["total_price"] == 0
    assert data["paid_at"] is None


def test_get_unknown_order(client):
    response = client.get(f"/orders/{uuid4()}")

    assert response.status_code == 404
    assert response.json()["code"] == "ORDER_DOES_NOT_EXIST"


def test_order_flow(client, catalog):
    order_uuid = create_order(client)

    response = client.post(f"/orders/{order_uuid}/items", json={"items": [
        {
            "product_uuid": catalog.pizza,
            "count": 2,
            "variations": [{"variation_item_uuids": [catalog.large], "count": 2}],
        },
        {
            "product_uuid": catalog.lunch_menu,
            "count": 1,
            "children": [
                {"product_uuid": catalog.burger, "count": 1},
                {"product_uuid": catalog.cola, "count": 1},
            ],
        },
    ]})
    assert response.status_code == 200
    data = response.json()
    pizza, menu = data["items"]
    assert pizza["product_name"] == "Pizza Margherita"
    assert pizza["unit_price"] == 900
    assert pizza["variations"][0]["variation_item_uuids"] == [catalog.large]
    assert menu["type"] == "MENU"
    assert [child["product_uuid"] for child in menu["children"]] == [catalog.burger, catalog.cola]
    assert data["total_price"] == 2 * 900 + 1500

    response = client.post(f"/orders/{order_uuid}/items/remove", json={"items": [
        {"product_uuid": catalog.pizza, "count": 1},
    ]})
    assert response.status_code == 200
    assert response.json()["items"][0]["count"] == 1

    response = client.get(f"/orders/{order_uuid}/total")
    assert response.json() == {"uuid": order_uuid, "total_price": 900 + 1500}

    response = client.post(f"/orders/{order_uuid}/complete", json={"payment_method": "CARD"})
    assert response.status_code == 200
    assert response.json()["payment_method"] == "CARD"
    assert response.json()["paid_at"] is not None

    response = client.get("/orders/", params={"completed": True})
    assert [order["uuid"] for order in response.json()["items"]] == [order_uuid]


def test_replace_items(client, catalog):
    order_uuid = create_order(client)
    line_id = str(uuid4())
    payload = {"items": [
        {"client_id": line_id, "product_uuid": catalog.burger, "count": 1},
        {"diverse_price": 350, "type": "DIVERSE_DRINK", "count": 2},
    ]}

    first = client.put(f"/orders/{order_uuid}/items", json=payload)
    assert first.status_code == 200
    assert first.json()["items"][0]["uuid"] == line_id
    assert first.json()["total_price"] == 1100 + 2 * 350

    response = client.put(f"/orders/{order_uuid}/items", json={"items": [
        {"client_id": line_id, "product_uuid": catalog.burger, "count": 3},
    ]})
    assert response.status_code == 200
    items = response.json()["items"]
    assert [(item["uuid"], item["count"]) for item in items] == [(line_id, 3)]


def test_list_open_orders(client):
    first = create_order(client)
    second = create_order(client)

    response = client.get("/orders/")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert {order["uuid"] for order in data["items"]} == {first, second}

    response = client.get("/orders/", params={"limit": 1})
    assert response.json()["total"] == 2
    assert len(response.json()["items"]) == 1


def test_validation_error_shape(client, catalog):
    order_uuid = create_order(client)

    response = client.post(f"/orders/{order_uuid}/items", json={"items": [
        {"count": 1},
        {"product_uuid": catalog.daily_special, "type": "SPECIAL", "count": 1},
    ]})

    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "VALIDATION_FAILED"
    assert len(data["errors"]) == 2


def test_unknown_product(client):
    order_uuid = create_order(client)

    response = client.post(f"/orders/{order_uuid}/items", json={"items": [
        {"product_uuid": str(uuid4()), "count": 1},
    ]})

    assert response.status_code == 404
    assert response.json()["code"] == "PRODUCT_DOES_NOT_EXIST"


def test_remove_product_not_in_order(client, catalog):
    order_uuid = create_order(client)

    response = client.post(f"/orders/{order_uuid}/items/remove", json={"items": [
        {"product_uuid": catalog.pizza, "count": 1},
    ]})

    assert response.status_code == 400
    assert response.json()["code"] == "PRODUCT_NOT_IN_ORDER"


def test_completed_order_is_read_only(client, catalog):
    order_uuid = create_order(client)
    client.post(f"/orders/{order_uuid}/complete", json={"payment_method": "CASH"})

    response = client.post(f"/orders/{order_uuid}/items", json={"items": [
        {"product_uuid": catalog.pizza, "count": 1},
    ]})
    assert response.status_code == 403
    assert response.json()["code"] == "ACTION_NOT_ALLOWED"

    response = client.post(f"/orders/{order_uuid}/complete", json={"payment_method": "CASH"})
    assert response.status_code == 400
    assert response.json()["code"] == "ORDER_ALREADY_COMPLETED"


def test_count_must_be_positive(client, catalog):
    order_uuid = create_order(client)

    response = client.post(f"/orders/{order_uuid}/items", json={"items": [
        {"product_uuid": catalog.pizza, "count": 0},
    ]})

    assert response.status_code == 422


def test_reused_variation_client_id_is_a_domain_error(client, catalog):
    variation_id = str(uuid4())
    payload = {"items": [
        {
            "product_uuid": catalog.pizza,
            "count": 1,
            "variations": [{"client_id": variation_id, "variation_item_uuids": [catalog.large], "count": 1}],
        },
    ]}
    assert client.put(f"/orders/{create_order(client)}/items", json=payload).status_code == 200

    response = client.put(f"/orders/{create_order(client)}/items", json=payload)

    assert response.status_code == 404
    assert response.json()["code"] == "ORDER_ITEM_VARIATION_DOES_NOT_EXIST"
