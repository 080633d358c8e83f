from botocore.exceptions import ClientError

from src.services import storage


def test_avatar_url_passes_external_urls_through(monkeypatch):
    def _fail(*_args, **_kwargs):
        raise AssertionError("external URLs must not be signed")

    monkeypatch.setattr(storage, "get_presigned_url", _fail)

    assert storage.resolve_avatar_url("https://cdn.example.com/a.png") == "https://cdn.example.com/a.png"
    assert storage.resolve_avatar_url(None) is None
    assert storage.resolve_avatar_url("") is None


def test_avatar_url_signs_storage_keys(monkeypatch):
    monkeypatch.setattr(storage, "get_presigned_url", lambda key: f"https://signed/{key}")

    assert storage.resolve_avatar_url("profile-images/u1/1.png") == "https://signed/profile-images/u1/1.png"


def test_avatar_url_signing_failure_yields_none(monkeypatch):
    def _denied(key):
        raise ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "GetObject")

    monkeypatch.setattr(storage, "get_presigned_url", _denied)

    assert storage.resolve_avatar_url("profile-images/u1/1.png") is None


def test_owned_keys_must_sit_under_the_owner_prefix():
    assert storage.owner_prefix("audio", "u1") == "songs/u1/"
    assert storage.is_owned_key("songs/u1/a.mp3", "audio", "u1")
    assert storage.is_owned_key("covers/u1/a.png", "cover", "u1")
    assert not storage.is_owned_key("songs/u10/a.mp3", "audio", "u1")
    assert not storage.is_owned_key("covers/u1/a.png", "audio", "u1")
    assert not storage.is_owned_key("songs/u1", "audio", "u1")
