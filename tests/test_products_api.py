"""Product endpoints on the in-memory backend."""

PRODUCT = {
    "name": "Laptop Dell XPS",
    "description": "13-inch ultrabook",
    "price": 1500.0,
    "stock": 4,
    "category": "laptops",
    "marca": "Dell",
    "imageUrl": "https://img.example/xps.png",
}


def test_create_and_get_product(admin_client):
    created = admin_client.post("/products", json=PRODUCT)

    assert created.status_code == 201
    product_id = created.json()["id"]
    fetched = admin_client.get(f"/products/{product_id}").json()
    assert fetched["imageUrl"] == PRODUCT["imageUrl"]
    assert fetched["marca"] == "Dell"


def test_negative_price_rejected(admin_client):
    response = admin_client.post("/products", json={**PRODUCT, "price": -1})
    assert response.status_code == 400


def test_partial_update_preserves_omitted_fields(admin_client):
    product_id = admin_client.post("/products", json=PRODUCT).json()["id"]

    response = admin_client.put(f"/products/{product_id}", json={"stock": 9})

    assert response.status_code == 200
    assert response.json()["stock"] == 9
    assert response.json()["price"] == 1500.0
    assert response.json()["description"] == PRODUCT["description"]


def test_delete_product(admin_client):
    product_id = admin_client.post("/products", json=PRODUCT).json()["id"]

    assert admin_client.delete(f"/products/{product_id}").status_code == 204
    assert admin_client.get(f"/products/{product_id}").status_code == 404


def test_product_writes_require_admin(client):
    assert client.post("/products", json=PRODUCT).status_code == 401
    assert client.get("/products").status_code == 200
