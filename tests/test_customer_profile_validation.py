from __future__ import annotations

from customer_profiles.schemas.customer_profile import (
    UploadedImage,
    detect_image_extension,
    validate_profile_input,
)

from image_samples import BMP_BYTES, GIF_BYTES, JPEG_BYTES, PNG_BYTES


def test_only_present_keys_are_returned() -> None:
    result = validate_profile_input({"city": "Springfield", "unknown": "ignored"}, max_image_kb=2048)
    assert result.ok
    assert result.data == {"city": "Springfield"}
    assert result.image is None


def test_explicit_none_is_kept_for_sparse_updates() -> None:
    result = validate_profile_input({"bio": None, "profile_image": None}, max_image_kb=2048)
    assert result.ok
    assert result.data == {"bio": None, "profile_image": None}


def test_length_limits_follow_field_rules() -> None:
    payload = {
        "phone_number": "1" * 21,
        "address": "a" * 255,
        "city": "c" * 101,
        "state": "s" * 100,
        "postal_code": "9" * 21,
        "bio": "b" * 1000,
    }
    result = validate_profile_input(payload, max_image_kb=2048)
    assert result.errors == {
        "phone_number": ["The phone number field must not be greater than 20 characters."],
        "city": ["The city field must not be greater than 100 characters."],
        "postal_code": ["The postal code field must not be greater than 20 characters."],
    }
    assert result.data == {}


def test_type_errors_are_reported_per_field() -> None:
    result = validate_profile_input({"phone_number": 5551234, "preferences": "dark"}, max_image_kb=2048)
    assert result.errors == {
        "phone_number": ["The phone number field must be a string."],
        "preferences": ["The preferences field must be an array."],
    }


def test_plain_value_for_image_fails() -> None:
    result = validate_profile_input({"profile_image": "avatar.png"}, max_image_kb=2048)
    assert result.errors["profile_image"] == [
        "The profile image field must be an image.",
        "The profile image field must be a file of type: jpeg, png, jpg.",
    ]


def test_gif_is_an_image_of_the_wrong_type() -> None:
    result = validate_profile_input({"profile_image": UploadedImage(content=GIF_BYTES)}, max_image_kb=2048)
    assert result.errors["profile_image"] == ["The profile image field must be a file of type: jpeg, png, jpg."]


def test_valid_image_is_accepted_with_detected_extension() -> None:
    image = UploadedImage(content=JPEG_BYTES, filename="photo.png", content_type="image/png")
    result = validate_profile_input({"profile_image": image}, max_image_kb=2048)
    assert result.ok
    assert result.image is image
    assert result.image_extension == "jpg"
    assert "profile_image" not in result.data


def test_image_size_limit_is_configurable() -> None:
    image = UploadedImage(content=PNG_BYTES + b"\x00" * 1024)
    result = validate_profile_input({"profile_image": image}, max_image_kb=1)
    assert result.errors["profile_image"] == ["The profile image field must not be greater than 1 kilobytes."]


def test_detect_image_extension() -> None:
    assert detect_image_extension(PNG_BYTES) == "png"
    assert detect_image_extension(JPEG_BYTES) == "jpg"
    assert detect_image_extension(GIF_BYTES) == "gif"
    assert detect_image_extension(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == "webp"
    assert detect_image_extension(b"%PDF-1.7") is None


def test_bmp_needs_a_consistent_header() -> None:
    assert detect_image_extension(BMP_BYTES) == "bmp"
    assert detect_image_extension(b"BM just text") is None
    # Right magic and length field, but no known DIB header size.
    forged = b"BM" + (30).to_bytes(4, "little") + b"\x00" * 8 + (7).to_bytes(4, "little") + b"\x00" * 12
    assert detect_image_extension(forged) is None


def test_text_starting_with_bm_is_not_an_image() -> None:
    result = validate_profile_input({"profile_image": UploadedImage(content=b"BM just text")}, max_image_kb=2048)
    assert result.errors["profile_image"] == [
        "The profile image field must be an image.",
        "The profile image field must be a file of type: jpeg, png, jpg.",
    ]


def test_bmp_is_an_image_of_the_wrong_type() -> None:
    result = validate_profile_input({"profile_image": UploadedImage(content=BMP_BYTES)}, max_image_kb=2048)
    assert result.errors["profile_image"] == ["The profile image field must be a file of type: jpeg, png, jpg."]


def test_list_preferences_must_be_associative() -> None:
    result = validate_profile_input({"preferences": ["a", "b"]}, max_image_kb=2048)
    assert result.errors == {"preferences": ["The preferences field must be an associative array."]}
