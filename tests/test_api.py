"""HTTP surface: JSON forms, multipart uploads and schema discovery."""
import pytest

from conftest import MIB, multipart_body

GOOD_PASSWORDS = {"oldPassword": "old", "newPassword": "Abcdef1!", "confirmPassword": "Abcdef1!"}
PRODUCT_ID = "65f1c2a9e4b0a1b2c3d4e5f6"


def error_body(response):
    return response.json()["error"]


def post_multipart(client, url, parts, method="post"):
    body, content_type = multipart_body(parts)
    return client.request(method.upper(), url, content=body, headers={"Content-Type": content_type})


def product_parts(**overrides):
    fields = {"name": "Runner", "description": "Light shoe", "category": "shoes", "price": "59.90", **overrides}
    return [(name, value) for name, value in fields.items() if value is not None]


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_correlation_id_echoed(self, client):
        response = client.get("/health", headers={"X-Correlation-ID": "abc12345"})
        assert response.headers["X-Correlation-ID"] == "abc12345"
        assert client.get("/health").headers["X-Correlation-ID"]

    def test_unmapped_client_status_is_validation_category(self, client):
        response = client.delete("/health")
        assert response.status_code == 405
        error = error_body(response)
        assert error["code"] == "E2000_VALIDATION_GENERIC"
        assert error["category"] == "validation"


class TestAccountForms:
    def test_register(self, client):
        response = client.post("/api/v1/register", json={"email": "user@nitestore.com", "role": "admin"})
        assert response.status_code == 200
        body = response.json()
        assert body["data"] == {"email": "user@nitestore.com"}
        assert len(body["token"]) == 30

    def test_register_invalid_email(self, client):
        response = client.post("/api/v1/register", json={"email": "not-an-email"})
        assert response.status_code == 400
        error = error_body(response)
        assert error["code"] == "E2010_INVALID_EMAIL"
        assert error["metadata"]["errors"] == [
            {"field": "email", "message": "Please provide a valid email address", "constraint": "email"}
        ]

    def test_invalid_json(self, client):
        response = client.post(
            "/api/v1/register", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert error_body(response)["code"] == "E2021_INVALID_JSON"

    def test_password_mismatch(self, client):
        response = client.post("/api/v1/updatePassword", json={**GOOD_PASSWORDS, "confirmPassword": "Abcdef1?"})
        assert response.status_code == 400
        error = error_body(response)
        assert error["code"] == "E2006_FIELD_MISMATCH"
        assert [(e["field"], e["message"]) for e in error["metadata"]["errors"]] == [
            ("confirmPassword", "Passwords don't match")
        ]

    def test_password_change_hides_passwords(self, client):
        response = client.post("/api/v1/updatePassword", json=GOOD_PASSWORDS)
        assert response.status_code == 200
        assert response.json()["data"] == {}
        assert "Abcdef1!" not in response.text

    def test_rejection_never_echoes_values(self, client):
        response = client.post("/api/v1/updatePassword", json={**GOOD_PASSWORDS, "newPassword": "weakpass"})
        assert response.status_code == 400
        assert "weakpass" not in response.text

    def test_several_errors(self, client):
        response = client.post("/api/v1/updatePassword", json={})
        error = error_body(response)
        assert error["code"] == "E2000_VALIDATION_GENERIC"
        assert error["metadata"]["error_count"] == 3
        assert [e["field"] for e in error["metadata"]["errors"]] == ["oldPassword", "newPassword", "confirmPassword"]

    def test_login_normalizes(self, client):
        response = client.post("/api/v1/login", json={"email": " User@NiteStore.com", "password": "pw"})
        assert response.json()["data"] == {"email": "user@nitestore.com"}

    def test_email_update_otp(self, client):
        assert client.post("/api/v1/verify-update-email-otp", json={"otp": "123456"}).status_code == 200
        response = client.post("/api/v1/verify-update-email-otp", json={"otp": "12a456"})
        assert error_body(response)["message"] == "otp: OTP must contain only numbers"

    def test_update_name(self, client):
        response = client.post("/api/v1/updateName", json={"name": "Nite"})
        assert response.json()["data"] == {"name": "Nite"}
        assert client.post("/api/v1/updateName", json={"name": "N" * 51}).status_code == 400


class TestProfileUpload:
    def test_png_accepted(self, client, png_bytes):
        response = post_multipart(client, "/api/v1/profileUpload", [("image", "me.png", "image/png", png_bytes)])
        assert response.status_code == 200
        assert response.json()["images"] == [
            {"fieldName": "image", "originalFilename": "me.png", "mimeType": "image/png", "byteSize": len(png_bytes)}
        ]

    def test_pdf_rejected(self, client):
        response = post_multipart(client, "/api/v1/profileUpload", [("image", "cv.pdf", "application/pdf", b"%PDF-1.7")])
        assert response.status_code == 415
        error = error_body(response)
        assert error["code"] == "E2022_INVALID_FILE_TYPE"
        assert error["message"] == "Invalid file type. Only images are allowed."

    def test_oversized_image(self, client):
        response = post_multipart(
            client, "/api/v1/profileUpload", [("image", "big.png", "image/png", b"\x00" * (5 * MIB + 1))]
        )
        assert response.status_code == 413

    def test_image_required(self, client):
        response = post_multipart(client, "/api/v1/profileUpload", [("note", "hi")])
        assert response.status_code == 400
        assert error_body(response)["message"] == "Image is required"

    def test_wrong_field_name(self, client, png_bytes):
        response = post_multipart(client, "/api/v1/profileUpload", [("avatar", "me.png", "image/png", png_bytes)])
        assert response.status_code == 400
        assert error_body(response)["code"] == "E2002_INVALID_FORMAT"

    def test_not_multipart(self, client):
        response = client.post("/api/v1/profileUpload", data={"image": "me.png"})
        assert response.status_code == 400
        assert error_body(response)["code"] == "E2002_INVALID_FORMAT"


class TestProductCreate:
    def test_created_with_images(self, client, png_bytes):
        parts = product_parts() + [
            ("sizes", "S"),
            ("sizes", "M"),
            ("is_feature", "true"),
            ("images", "front.png", "image/png", png_bytes),
            ("images", "back.png", "image/png", png_bytes),
        ]
        response = post_multipart(client, "/api/v1/product/create", parts)
        assert response.status_code == 201
        body = response.json()
        assert body["data"]["price"] == "59.90"
        assert body["data"]["sizes"] == ["S", "M"]
        assert body["data"]["colors"] == []
        assert body["data"]["is_feature"] is True
        assert body["data"]["instock_count"] == "0"
        assert [image["originalFilename"] for image in body["images"]] == ["front.png", "back.png"]

    def test_missing_fields_in_order(self, client):
        response = post_multipart(client, "/api/v1/product/create", [("name", "Runner")])
        assert response.status_code == 400
        assert [e["field"] for e in error_body(response)["metadata"]["errors"]] == ["description", "category", "price"]

    def test_invalid_price(self, client):
        response = post_multipart(client, "/api/v1/product/create", product_parts(price="12,50"))
        assert error_body(response)["message"] == "price: Must be a valid number"

    def test_eleven_images_rejected(self, client, png_bytes):
        parts = product_parts() + [("images", f"{i}.png", "image/png", png_bytes) for i in range(11)]
        response = post_multipart(client, "/api/v1/product/create", parts)
        assert response.status_code == 413
        assert error_body(response)["code"] == "E2023_TOO_MANY_FILES"

    def test_any_file_type_accepted(self, client):
        parts = product_parts() + [("images", "spec.pdf", "application/pdf", b"%PDF-1.7")]
        assert post_multipart(client, "/api/v1/product/create", parts).status_code == 201


class TestProductUpdate:
    def test_partial_update(self, client):
        response = post_multipart(
            client, f"/api/v1/product/update/{PRODUCT_ID}", [("price", "10.5"), ("name", "  Trail Runner ")], method="put"
        )
        assert response.status_code == 200
        assert response.json()["data"] == {"id": PRODUCT_ID, "name": "Trail Runner", "price": "10.5"}

    def test_zero_price(self, client):
        response = post_multipart(client, f"/api/v1/product/update/{PRODUCT_ID}", [("price", "0")], method="put")
        assert response.status_code == 400
        assert error_body(response)["message"] == "price: Price must be a positive number greater than 0"

    def test_bad_product_id(self, client):
        response = post_multipart(client, "/api/v1/product/update/not-an-id", [("price", "10")], method="put")
        assert response.status_code == 400
        assert error_body(response)["category"] == "validation"


class TestFormDiscovery:
    def test_list_schemas(self, client):
        names = [schema["name"] for schema in client.get("/api/v1/schemas").json()["data"]]
        assert {"password-change", "product-form", "product-create", "sign-up"} <= set(names)

    def test_schema_detail(self, client):
        data = client.get("/api/v1/schemas/email-update-otp").json()["data"]
        assert data["fields"][0]["name"] == "otp"
        assert data["fields"][0]["required"] is True

    def test_unknown_schema(self, client):
        response = client.get("/api/v1/schemas/checkout")
        assert response.status_code == 404
        assert error_body(response)["code"] == "E4010_NOT_FOUND"

    def test_upload_rules(self, client):
        rules = {rule["name"]: rule for rule in client.get("/api/v1/upload-rules").json()["data"]}
        assert rules["single"]["maxFiles"] == 1
        assert rules["multiple"]["maxFiles"] == 10

    @pytest.mark.parametrize("payload,status", [
        ({"email": "user@nitestore.com"}, 200),
        ({"email": "user@"}, 400),
    ])
    def test_validate_draft(self, client, payload, status):
        assert client.post("/api/v1/validate/email-update", json=payload).status_code == status

    def test_validate_product_create_draft(self, client):
        response = client.post("/api/v1/validate/product-create", json={"name": "Runner", "price": 0})
        assert response.status_code == 400
        errors = error_body(response)["metadata"]["errors"]
        assert errors[0] == {"field": "description", "message": "Product description is required", "constraint": "required"}
        assert {"field": "price", "message": "Price must be a positive number greater than 0"} in [
            {"field": e["field"], "message": e["message"]} for e in errors
        ]

    def test_validate_sign_up_draft(self, client):
        payload = {"name": "Nite Owl", "email": "owl@nitestore.com", "password": "Abc12!", "confirm_password": "Abc12?"}
        response = client.post("/api/v1/validate/sign-up", json=payload)
        assert response.status_code == 400
        assert error_body(response)["message"] == "confirm_password: Passwords do not match"

    def test_validate_unknown_schema(self, client):
        assert client.post("/api/v1/validate/checkout", json={}).status_code == 404
