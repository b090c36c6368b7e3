import os
import subprocess
import sys
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"


def _run_cli(*args: str, cwd=None) -> subprocess.CompletedProcess[str]:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        item for item in (str(SRC_ROOT), env.get("PYTHONPATH")) if item
    )
    return subprocess.run(
        [sys.executable, "-m", "artifact_viewers.cli", *args],
        capture_output=True,
        text=True,
        env=env,
        cwd=cwd,
    )


def test_cli_help_top_level() -> None:
    result = _run_cli("--help")
    assert result.returncode == 0
    assert "usage:" in result.stdout.lower()


def test_cli_help_subcommands() -> None:
    for subcommand in ("cfg", "outputs", "mlmd"):
        result = _run_cli(subcommand, "--help")
        assert result.returncode == 0
        assert "usage:" in result.stdout.lower()


def test_cli_rejects_malformed_pod_name(tmp_path) -> None:
    snapshot = tmp_path / "snapshot.json"
    snapshot.write_text("{}", encoding="utf-8")

    result = _run_cli("mlmd", "taxi-pod2", "--snapshot", str(snapshot), cwd=tmp_path)

    assert result.returncode == 1
    assert "fewer than 3 parts" in result.stderr
