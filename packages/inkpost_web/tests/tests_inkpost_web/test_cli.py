import pytest
from inkpost_web import cli


@pytest.fixture()
def cli_env(monkeypatch, tmp_path):
    db_path = tmp_path / "cli.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    monkeypatch.setenv("SECRET_KEY", "cli-test-secret-key-long-enough-for-hs256")
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)
    return db_path


def test_init_db(cli_env, capsys):
    assert cli.main(["init-db"]) == 0

    assert cli_env.exists()
    assert "initialized" in capsys.readouterr().out


def test_create_user(cli_env, capsys):
    code = cli.main(
        ["create-user", "admin", "admin@example.com", "S3cret!", "--role", "admin"]
    )

    assert code == 0
    assert "Created user 'admin'" in capsys.readouterr().out


def test_create_existing_user(cli_env, capsys):
    cli.main(["create-user", "admin", "admin@example.com", "S3cret!"])
    capsys.readouterr()

    code = cli.main(["create-user", "admin", "other@example.com", "S3cret!"])

    assert code == 1
    assert "already exists" in capsys.readouterr().out


def test_empty_password_is_rejected(cli_env, capsys):
    code = cli.main(["create-user", "admin", "admin@example.com", ""])

    assert code == 2
    assert "Password cannot be empty" in capsys.readouterr().err


def test_unknown_role_is_rejected(cli_env):
    with pytest.raises(SystemExit):
        cli.main(["create-user", "admin", "admin@example.com", "pw", "--role", "root"])


def test_serve_invokes_uvicorn(cli_env, monkeypatch):
    calls = {}
    monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kw: calls.update(app=app, **kw))

    assert cli.main(["serve", "--port", "8123"]) == 0
    assert calls["app"] == "inkpost_web.app:create_app"
    assert calls["factory"] is True
    assert calls["port"] == 8123
