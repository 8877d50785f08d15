import json

import pytest

from nix_source.core.models import Source
from nix_source.errors import DuplicateSourceError, MissingSourceError, RegistryError
from nix_source.workflows.registry import Registry

SRI = "sha256-" + "A" * 43 + "="


def _write(path, sources):
    path.write_text(json.dumps({"sources": sources}), encoding="utf-8")


def test_load_missing_file_without_create(tmp_path):
    with pytest.raises(RegistryError):
        Registry.load(tmp_path / "sources.json")


def test_load_missing_file_with_create_writes_empty_object(tmp_path):
    path = tmp_path / "sources.json"
    registry = Registry.load(path, create=True)
    assert len(registry) == 0
    assert json.loads(path.read_text(encoding="utf-8")) == {}


def test_load_empty_object(tmp_path):
    path = tmp_path / "sources.json"
    path.write_text("{}", encoding="utf-8")
    assert Registry.load(path).names() == []


def test_load_preserves_file_order(tmp_path):
    path = tmp_path / "sources.json"
    _write(path, {"b": {"url": "https://b.example"}, "a": {"url": "https://a.example"}})
    assert Registry.load(path).names() == ["b", "a"]


def test_load_rejects_invalid_json(tmp_path):
    path = tmp_path / "sources.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(RegistryError):
        Registry.load(path)


def test_load_rejects_bad_record(tmp_path):
    path = tmp_path / "sources.json"
    _write(path, {"foo": {"url": "https://example.com", "hash": "garbage"}})
    with pytest.raises(RegistryError) as excinfo:
        Registry.load(path)
    assert "foo" in str(excinfo.value)


def test_add_duplicate_fails_without_mutation(tmp_path):
    registry = Registry(tmp_path / "sources.json", {"foo": Source.new("https://one.example")})
    with pytest.raises(DuplicateSourceError) as excinfo:
        registry.add("foo", Source.new("https://two.example"))
    assert "foo" in str(excinfo.value)
    assert registry.get("foo").url == "https://one.example"


def test_remove_and_replace_missing_fail_without_mutation(tmp_path):
    registry = Registry(tmp_path / "sources.json", {"foo": Source.new("https://one.example")})
    with pytest.raises(MissingSourceError):
        registry.remove("bar")
    with pytest.raises(MissingSourceError):
        registry.replace("bar", Source.new("https://two.example"))
    with pytest.raises(MissingSourceError):
        registry.get("bar")
    assert registry.names() == ["foo"]


def test_save_rewrites_whole_file(tmp_path):
    path = tmp_path / "sources.json"
    path.write_text(json.dumps({"sources": {"old": {"url": "https://old.example"}}}) + " " * 500, encoding="utf-8")
    registry = Registry.load(path)
    registry.remove("old")
    registry.add("foo", Source.from_dict({"hash": SRI, "url": "https://example.com/x", "type": "file"}))
    registry.save()
    text = path.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    assert json.loads(text) == {
        "sources": {"foo": {"hash": SRI, "url": "https://example.com/x", "type": "file"}}
    }
    assert '\n  "sources"' in text
