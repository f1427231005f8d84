from geomail.config import Settings


def test_defaults(monkeypatch):
    for key in ("PORT", "SMTP_HOST", "SMTP_PORT", "CORS_ORIGINS", "SMTP_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)
    s = Settings(_env_file=None)

    assert s.PORT == 3000
    assert s.SMTP_HOST == "smtp.gmail.com"
    assert s.SMTP_PORT == 465
    assert s.SMTP_USE_SSL is True
    assert s.SMTP_TIMEOUT == 60.0
    assert s.CORS_ORIGINS == ["*"]


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("EMAIL_USER", "me@example.com")
    monkeypatch.setenv("RECIPIENT_EMAIL", "you@example.com")
    monkeypatch.setenv("CORS_ORIGINS", '["https://star.github.io"]')
    s = Settings(_env_file=None)

    assert s.PORT == 8080
    assert s.EMAIL_USER == "me@example.com"
    assert s.RECIPIENT_EMAIL == "you@example.com"
    assert s.CORS_ORIGINS == ["https://star.github.io"]


def test_env_file(tmp_path, monkeypatch):
    monkeypatch.delenv("EMAIL_PASS", raising=False)
    env = tmp_path / ".env"
    env.write_text("EMAIL_PASS=app-password\nUNRELATED=1\n")
    s = Settings(_env_file=str(env))

    assert s.EMAIL_PASS == "app-password"
