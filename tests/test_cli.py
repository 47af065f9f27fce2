import json
import zipfile

import yaml
from click.testing import CliRunner

from project_zip.cli import cli


def _write_config(tmp_path, projects):
    config_path = tmp_path / "project_zip.yaml"
    with open(config_path, "w") as f:
        yaml.dump({"projects": projects}, f)
    return config_path


def test_cli_export_help():
    runner = CliRunner()
    result = runner.invoke(cli, ["export", "--help"])
    assert result.exit_code == 0
    assert "Exports every project defined in the configuration" in result.output


def test_cli_export_basic(tmp_path, mocker):
    runner = CliRunner()
    config_path = _write_config(
        tmp_path, {"web": {"files": [{"path": "index.html", "content": "<html></html>"}]}}
    )

    # Mock the actual export to check orchestration only
    mock_process = mocker.patch("project_zip.cli.process_target")

    result = runner.invoke(
        cli, ["export", "--config", str(config_path), "--dist", str(tmp_path / "dist")]
    )

    assert result.exit_code == 0
    assert "Found 1 export tasks" in result.output
    assert "Export complete!" in result.output

    mock_process.assert_called_once()

    manifest_path = tmp_path / "dist" / "export_manifest.json"
    assert manifest_path.exists()


def test_cli_export_reproducible(tmp_path):
    runner = CliRunner()
    site = tmp_path / "site"
    (site / "src").mkdir(parents=True)
    (site / "index.html").write_text("<html></html>")
    (site / "src" / "app.js").write_text("console.log(1);")

    config_path = _write_config(
        tmp_path,
        {
            "site": {"name": "My Site", "path": str(site)},
            "snippet": {
                "output": "snippet.zip",
                "files": [
                    {
                        "path": "src",
                        "type": "folder",
                        "children": [{"path": "src/a.js", "content": "a();"}],
                    }
                ],
            },
        },
    )
    dist = tmp_path / "dist"

    args = ["export", "--config", str(config_path), "--dist", str(dist), "--reproducible", "-j", "2"]
    result = runner.invoke(cli, args)

    assert result.exit_code == 0, result.output
    with zipfile.ZipFile(dist / "my-site.zip") as zf:
        assert zf.namelist() == ["index.html", "src/app.js"]
        assert zf.getinfo("index.html").date_time == (1980, 1, 1, 0, 0, 0)
    with zipfile.ZipFile(dist / "snippet.zip") as zf:
        assert zf.read("src/a.js") == b"a();"

    first = (dist / "my-site.zip").read_bytes()
    assert runner.invoke(cli, args).exit_code == 0
    assert (dist / "my-site.zip").read_bytes() == first

    manifest = json.loads((dist / "export_manifest.json").read_text())
    names = {a["name"]: a for a in manifest["artifacts"]}
    assert names["site"]["path"] == "my-site.zip"
    assert names["site"]["metadata"]["entries"] == 2
    assert names["site"]["metadata"]["size"] == len(first)


def test_cli_export_reports_failures(tmp_path):
    runner = CliRunner()
    config_path = _write_config(
        tmp_path,
        {
            "dupes": {
                "output": "dupes.zip",
                "files": [
                    {"path": "a.txt", "content": "one"},
                    {"path": "a.txt", "content": "two"},
                ],
            },
            "fine": {"output": "fine.zip", "files": [{"path": "b.txt", "content": "b"}]},
        },
    )
    dist = tmp_path / "dist"

    result = runner.invoke(cli, ["export", "--config", str(config_path), "--dist", str(dist)])

    assert result.exit_code == 1
    assert "Export failed for dupes" in result.output
    assert "a.txt" in result.output
    assert not (dist / "dupes.zip").exists()
    assert (dist / "fine.zip").exists()


def test_cli_pack(tmp_path):
    runner = CliRunner()
    src = tmp_path / "app"
    src.mkdir()
    (src / "main.py").write_text("print(1)")
    (src / "app.log").write_text("noise")
    out = tmp_path / "app.zip"

    result = runner.invoke(cli, ["pack", str(src), "-o", str(out), "--exclude", "*.log"])

    assert result.exit_code == 0, result.output
    assert "Packed 1 files." in result.output
    with zipfile.ZipFile(out) as zf:
        assert zf.namelist() == ["main.py"]


def test_cli_pack_default_name(tmp_path):
    runner = CliRunner()
    src = tmp_path / "src_dir"
    src.mkdir()
    (src / "a.txt").write_text("a")

    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["pack", str(src), "--name", "My App", "--reproducible"])
        assert result.exit_code == 0, result.output
        with zipfile.ZipFile("my-app.zip") as zf:
            assert zf.read("a.txt") == b"a"


def test_cli_pack_rejects_bad_names(tmp_path):
    runner = CliRunner()
    src = tmp_path / "app"
    src.mkdir()
    (src / "back\\slash.txt").write_text("x")

    result = runner.invoke(cli, ["pack", str(src), "-o", str(tmp_path / "app.zip")])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert not (tmp_path / "app.zip").exists()


def test_cli_flatten(tmp_path):
    runner = CliRunner()
    src = tmp_path / "app"
    (src / "src").mkdir(parents=True)
    (src / "index.html").write_text("<html></html>")
    (src / "src" / "app.js").write_text("console.log(1);")

    result = runner.invoke(cli, ["flatten", str(src)])

    assert result.exit_code == 0
    assert result.output == (
        "// ===== index.html =====\n<html></html>\n\n"
        "// ===== src/app.js =====\nconsole.log(1);\n\n"
    )

    out = tmp_path / "flat.txt"
    result = runner.invoke(cli, ["flatten", str(src), "-o", str(out)])
    assert result.exit_code == 0
    assert out.read_text().startswith("// ===== index.html =====")


def test_cli_verify(tmp_path):
    runner = CliRunner()
    src = tmp_path / "app"
    src.mkdir()
    (src / "main.py").write_text("print(1)")
    out = tmp_path / "app.zip"
    assert runner.invoke(cli, ["pack", str(src), "-o", str(out), "--reproducible"]).exit_code == 0

    result = runner.invoke(cli, ["verify", str(out)])

    assert result.exit_code == 0
    assert "main.py" in result.output
    assert "1980-01-01 00:00:00" in result.output
    assert "1 entries OK" in result.output


def test_cli_verify_detects_corruption(tmp_path):
    runner = CliRunner()
    src = tmp_path / "app"
    src.mkdir()
    (src / "main.py").write_text("print(1)")
    out = tmp_path / "app.zip"
    assert runner.invoke(cli, ["pack", str(src), "-o", str(out)]).exit_code == 0

    data = bytearray(out.read_bytes())
    # Content starts right after the 30-byte header and the 7-byte name
    data[30 + 7] ^= 0xFF
    out.write_bytes(bytes(data))

    result = runner.invoke(cli, ["verify", str(out)])
    assert result.exit_code == 1
    assert "CRC mismatch" in result.output


def test_cli_verify_rejects_non_zip(tmp_path):
    runner = CliRunner()
    bogus = tmp_path / "bogus.zip"
    bogus.write_bytes(b"not a zip")

    result = runner.invoke(cli, ["verify", str(bogus)])
    assert result.exit_code == 1
    assert "not a valid ZIP archive" in result.output
