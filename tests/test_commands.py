import json

import pytest

from nix_source import commands
from nix_source.commands import add_source, remove_source, update_sources
from nix_source.core.models import Integrity, Source, SourceType
from nix_source.errors import DuplicateSourceError, MissingSourceError, TransportError

SRI = "sha256-" + "A" * 43 + "="
NEW_SRI = "sha256-" + "B" * 43 + "="


def _seed(path, sources):
    path.write_text(json.dumps({"sources": sources}, indent=2), encoding="utf-8")


def _rehash(source: Source) -> Source:
    return Source(url=source.url, hash=Integrity.parse(NEW_SRI), type=source.type or SourceType.FILE)


def test_add_source_passes_type_override(tmp_path):
    path = tmp_path / "sources.json"
    seen = []

    def refresh(source):
        seen.append(source)
        return _rehash(source)

    add_source(path, "foo", "https://example.com/x.tar.gz", source_type=SourceType.FILE, refresh=refresh)

    assert seen == [Source.new("https://example.com/x.tar.gz", SourceType.FILE)]
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["sources"]["foo"]["type"] == "file"


def test_add_duplicate_leaves_file_untouched(tmp_path):
    path = tmp_path / "sources.json"
    _seed(path, {"foo": {"hash": SRI, "url": "https://one.example/a", "type": "file"}})
    before = path.read_text(encoding="utf-8")

    def refresh(source):
        raise AssertionError("refresh must not run for a duplicate")

    with pytest.raises(DuplicateSourceError):
        add_source(path, "foo", "https://two.example/b", refresh=refresh)
    assert path.read_text(encoding="utf-8") == before


def test_add_failure_leaves_valid_empty_registry(tmp_path):
    path = tmp_path / "sources.json"

    def refresh(source):
        raise TransportError(source.url, "connection refused")

    with pytest.raises(TransportError):
        add_source(path, "foo", "https://example.com/x", refresh=refresh)
    assert json.loads(path.read_text(encoding="utf-8")) == {}


def test_update_single_source(tmp_path):
    path = tmp_path / "sources.json"
    _seed(
        path,
        {
            "foo": {"hash": SRI, "url": "https://example.com/foo", "type": "file"},
            "bar": {"hash": SRI, "url": "https://example.com/bar", "type": "file"},
        },
    )
    updated = update_sources(path, "foo", refresh=_rehash)
    assert [name for name, _ in updated] == ["foo"]
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["sources"]["foo"]["hash"] == NEW_SRI
    assert data["sources"]["bar"]["hash"] == SRI


def test_update_all_in_registry_order(tmp_path):
    path = tmp_path / "sources.json"
    _seed(
        path,
        {
            "b": {"url": "https://example.com/b"},
            "a": {"url": "https://example.com/a"},
        },
    )
    order = []

    def refresh(source):
        order.append(source.url)
        return _rehash(source)

    update_sources(path, refresh=refresh)
    assert order == ["https://example.com/b", "https://example.com/a"]


def test_update_missing_name_fails_without_write(tmp_path):
    path = tmp_path / "sources.json"
    _seed(path, {"foo": {"url": "https://example.com/foo"}})
    before = path.read_text(encoding="utf-8")
    with pytest.raises(MissingSourceError):
        update_sources(path, "nope", refresh=_rehash)
    assert path.read_text(encoding="utf-8") == before


def test_update_batch_stops_at_first_failure(tmp_path):
    path = tmp_path / "sources.json"
    _seed(
        path,
        {
            "one": {"url": "https://example.com/one"},
            "two": {"url": "https://example.com/two"},
            "three": {"url": "https://example.com/three"},
        },
    )
    before = path.read_text(encoding="utf-8")
    seen = []

    def refresh(source):
        seen.append(source.url)
        if source.url.endswith("two"):
            raise TransportError(source.url, "502 Server Error")
        return _rehash(source)

    with pytest.raises(TransportError):
        update_sources(path, refresh=refresh)
    assert seen == ["https://example.com/one", "https://example.com/two"]
    assert path.read_text(encoding="utf-8") == before


def test_update_uses_default_refresh_with_shared_session(tmp_path, monkeypatch):
    path = tmp_path / "sources.json"
    _seed(path, {"a": {"url": "https://example.com/a"}, "b": {"url": "https://example.com/b"}})
    sessions = []

    def fake_refresh_source(source, *, session=None, **kwargs):
        sessions.append(session)
        return _rehash(source)

    monkeypatch.setattr(commands, "refresh_source", fake_refresh_source)
    update_sources(path)
    assert len(sessions) == 2
    assert sessions[0] is sessions[1]
    assert sessions[0] is not None


def test_remove_source(tmp_path):
    path = tmp_path / "sources.json"
    _seed(path, {"foo": {"url": "https://example.com/foo"}, "bar": {"url": "https://example.com/bar"}})
    removed = remove_source(path, "foo")
    assert removed.url == "https://example.com/foo"
    assert list(json.loads(path.read_text(encoding="utf-8"))["sources"]) == ["bar"]


def test_remove_missing_fails_without_write(tmp_path):
    path = tmp_path / "sources.json"
    _seed(path, {"foo": {"url": "https://example.com/foo"}})
    before = path.read_text(encoding="utf-8")
    with pytest.raises(MissingSourceError) as excinfo:
        remove_source(path, "bar")
    assert "bar" in str(excinfo.value)
    assert path.read_text(encoding="utf-8") == before
