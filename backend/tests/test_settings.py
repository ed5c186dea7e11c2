from settings import Settings, validate_environment


def test_defaults(monkeypatch):
    for var in ("LETTERCRAFT_PUBLIC_URL", "STRIPE_TIMEOUT", "FRAME_AUTH_REQUIRED", "LETTERCRAFT_FONT_DIR"):
        monkeypatch.delenv(var, raising=False)
    current = Settings()
    assert current.PUBLIC_URL == "http://localhost:8000"
    assert current.STRIPE_TIMEOUT == 10.0
    assert current.FRAME_AUTH_REQUIRED is False
    assert validate_environment(current) == []


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("LETTERCRAFT_PUBLIC_URL", "https://lettercraft.example/")
    monkeypatch.setenv("FRAME_AUTH_REQUIRED", "yes")
    monkeypatch.setenv("STRIPE_TIMEOUT", "2.5")
    current = Settings()
    assert current.PUBLIC_URL == "https://lettercraft.example"
    assert current.FRAME_AUTH_REQUIRED is True
    assert current.STRIPE_TIMEOUT == 2.5


def test_validate_environment_reports_problems(monkeypatch, tmp_path):
    monkeypatch.setenv("LETTERCRAFT_PUBLIC_URL", "not a url")
    monkeypatch.setenv("LETTERCRAFT_FONT_DIR", str(tmp_path / "missing"))
    problems = validate_environment(Settings())
    assert "LETTERCRAFT_PUBLIC_URL must be a valid URL" in problems
    assert any(p.startswith("LETTERCRAFT_FONT_DIR does not exist") for p in problems)
