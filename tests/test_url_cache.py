import pytest
from roster_cache.errors import DecryptionError, MalformedPayloadError
from roster_cache.models import SignedUrlEntry
from roster_cache.record_map import EncryptedRecordMap
from roster_cache.url_cache import SignedUrlCache


def make_cache(cipher, store, clock):
    return SignedUrlCache(cipher, store, "signed_urls", clock=clock)


def test_get_one_unknown(cipher, store, clock):
    urls = make_cache(cipher, store, clock)
    assert urls.get_one("nope") is None
    assert urls.get_all() is None
    urls.set_one("img", "https://u", 60)
    assert urls.get_one("nope") is None


def test_set_one_computes_expiry(cipher, store, clock):
    urls = make_cache(cipher, store, clock)
    entry = urls.set_one("img", "https://u", 3600)
    assert entry.expires_at == clock.now + 3_600_000
    assert urls.get_all() == {"img": entry}


def test_ttl_boundary(cipher, store, clock):
    urls = make_cache(cipher, store, clock)
    T = clock.now + 5000
    urls.set_many({"img": SignedUrlEntry(url="https://u", expires_at=T)})

    clock.now = T - 1
    assert urls.get_one("img") == "https://u"
    clock.now = T
    assert urls.get_one("img") is None
    clock.now = T + 1
    assert urls.get_one("img") is None
    # Expired entries stay until pruned
    assert "img" in urls.get_all()


def test_set_many_keeps_server_expiry(cipher, store, clock):
    urls = make_cache(cipher, store, clock)
    entries = {"a": SignedUrlEntry(url="https://a", expires_at=42)}
    urls.set_many(entries)
    assert urls.get_all()["a"].expires_at == 42


def test_set_many_merges(cipher, store, clock):
    urls = make_cache(cipher, store, clock)
    urls.set_one("a", "https://a", 60)
    urls.set_many({"b": SignedUrlEntry(url="https://b", expires_at=clock.now + 1000)})
    assert set(urls.get_all()) == {"a", "b"}


def test_set_many_idempotent(cipher, store, clock):
    entries = {
        "a": SignedUrlEntry(url="https://a", expires_at=clock.now + 1000),
        "b": SignedUrlEntry(url="https://b", expires_at=clock.now - 1000),
    }
    once = make_cache(cipher, store, clock)
    once.set_many(entries)
    snapshot = once.get_all()
    once.set_many(entries)
    assert once.get_all() == snapshot


def test_set_many_empty_is_noop(cipher, store, clock):
    urls = make_cache(cipher, store, clock)
    urls.set_many(None)
    urls.set_many({})
    assert not urls.exists()


def test_prune_expired(cipher, store, clock):
    urls = make_cache(cipher, store, clock)
    now = clock.now
    urls.set_many({
        "past": SignedUrlEntry(url="https://p", expires_at=now - 1),
        "edge": SignedUrlEntry(url="https://e", expires_at=now),
        "live": SignedUrlEntry(url="https://l", expires_at=now + 1),
    })
    assert urls.prune_expired() == 2
    remaining = urls.get_all()
    assert set(remaining) == {"live"}
    assert all(e.expires_at > now for e in remaining.values())


def test_prune_on_empty_slot(cipher, store, clock):
    assert make_cache(cipher, store, clock).prune_expired() == 0


def test_get_valid_and_delete_many(cipher, store, clock):
    urls = make_cache(cipher, store, clock)
    urls.set_many({
        "old": SignedUrlEntry(url="https://o", expires_at=clock.now - 10),
        "a": SignedUrlEntry(url="https://a", expires_at=clock.now + 10),
        "b": SignedUrlEntry(url="https://b", expires_at=clock.now + 10),
    })
    assert set(urls.get_valid()) == {"a", "b"}
    assert urls.delete_many(["a", "missing"]) == 1
    assert set(urls.get_all()) == {"old", "b"}


def test_legacy_expires_key(cipher, store, clock):
    store.save("signed_urls", cipher.encrypt_json({"img": {"url": "https://u", "expires": clock.now + 5}}))
    assert make_cache(cipher, store, clock).get_one("img") == "https://u"


@pytest.mark.parametrize("payload", [
    ["https://u"],
    {"img": "https://u"},
    {"img": {"url": "https://u"}},
    {"img": {"url": "https://u", "expiresAtEpoch": "soon"}},
    {"img": {"url": "https://u", "expiresAtEpoch": True}},
])
def test_malformed_entries(cipher, store, clock, payload):
    store.save("signed_urls", cipher.encrypt_json(payload))
    with pytest.raises(MalformedPayloadError):
        make_cache(cipher, store, clock).get_one("img")


def test_corrupt_urls_slot_does_not_block_records(cipher, store, clock):
    store.save("signed_urls", "%%%")
    records = EncryptedRecordMap(cipher, store, "records")
    records.replace_all([])
    assert records.get_all() == {}
    with pytest.raises(DecryptionError):
        make_cache(cipher, store, clock).get_one("img")


def test_set_one_default_ttl(cipher, store, clock):
    urls = SignedUrlCache(cipher, store, "signed_urls", clock=clock, default_ttl=10)
    assert urls.set_one("img", "https://u").expires_at == clock.now + 10_000
