from nix_source.workflows import doctor, oracles


def test_doctor_flags_missing_oracles(monkeypatch, tmp_path):
    monkeypatch.setattr(oracles.shutil, "which", lambda name: None)
    report = doctor.build_doctor_report(sources_path=tmp_path / "sources.json")
    assert report["ok"] is False
    statuses = {check["name"]: check["status"] for check in report["checks"]}
    assert statuses["nix-prefetch-url"] == "missing"
    assert statuses["nix"] == "missing"
    assert statuses["sources file"] == "missing"
    assert statuses["sources file writable"] == "ok"


def test_doctor_ok_when_everything_present(monkeypatch, tmp_path):
    path = tmp_path / "sources.json"
    path.write_text("{}", encoding="utf-8")
    monkeypatch.setattr(doctor.shutil, "which", lambda name: f"/nix/bin/{name}")
    report = doctor.build_doctor_report(sources_path=path)
    assert report["ok"] is True
    text = doctor.format_doctor_report(report)
    assert text.startswith("nix-source doctor")
    assert "- [warn] nix: ok" in text
    assert "remedy" not in text
