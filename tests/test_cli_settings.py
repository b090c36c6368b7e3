import argparse

from artifact_viewers import cli


def _write_config(config_dir, body: str) -> None:
    config_dir.mkdir()
    (config_dir / "default.yaml").write_text(
        "defaults:\n  - schema/base\n  - _self_\n\n" + body,
        encoding="utf-8",
    )


def test_load_settings_applies_logging_config(tmp_path, monkeypatch) -> None:
    config_dir = tmp_path / "configs"
    _write_config(
        config_dir,
        "logging:\n  level: DEBUG\n  format: \"%(levelname)s|%(message)s\"\n",
    )
    calls = []
    monkeypatch.setattr(
        cli, "configure_logging", lambda *args, **kwargs: calls.append((args, kwargs))
    )

    settings = cli._load_settings(
        argparse.Namespace(config_path=str(config_dir), config_name="default", overrides=[])
    )

    assert settings.logging.format == "%(levelname)s|%(message)s"
    [(args, kwargs)] = calls
    assert args == (10,)
    assert kwargs["fmt"] == "%(levelname)s|%(message)s"
    assert kwargs["force"] is True


def test_load_settings_defaults_without_config_dir(tmp_path, monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(
        cli, "configure_logging", lambda *args, **kwargs: calls.append((args, kwargs))
    )

    settings = cli._load_settings(
        argparse.Namespace(
            config_path=str(tmp_path / "missing"), config_name="default", overrides=[]
        )
    )

    assert settings.artifacts.base_url == "http://localhost:3000"
    [(args, kwargs)] = calls
    assert kwargs["fmt"] == settings.logging.format
