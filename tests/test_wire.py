import msgpack

from wire import MSGPACK_MIMETYPE


def test_msgpack_request_body_is_decoded(client, users):
    body = msgpack.packb({
        "username": "kiran",
        "email": "kiran@example.com",
        "password": "pw123456",
        "confirmPassword": "pw123456",
    })

    response = client.post("/users/register", data=body, content_type=MSGPACK_MIMETYPE)

    assert response.status_code == 201
    assert users.find_one({"username": "kiran"}) is not None


def test_invalid_msgpack_body_is_rejected(client):
    response = client.post("/users/login", data=b"\xc1\xc1", content_type=MSGPACK_MIMETYPE)

    assert response.status_code == 400
    assert response.get_json() == {"error": "Invalid MessagePack data"}


def test_msgpack_response_when_accepted(client):
    response = client.get("/recommendations/cache/status", headers={"Accept": MSGPACK_MIMETYPE})

    assert response.mimetype == MSGPACK_MIMETYPE
    data = msgpack.unpackb(response.data, raw=False)
    assert data["status"] == "Working"


def test_json_is_default(client):
    response = client.get("/recommendations/cache/status", headers={"Accept": "*/*"})
    assert response.mimetype == "application/json"


def test_unencodable_data_falls_back_to_json(app):
    from wire import respond

    with app.test_request_context("/", headers={"Accept": MSGPACK_MIMETYPE}):
        response, status = respond({"value": 2 ** 70})

    assert status == 200
    assert response.mimetype == "application/json"
    assert response.get_json() == {"value": 2 ** 70}
