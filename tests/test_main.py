"""Tests for the command line entry point."""
from __future__ import annotations

import io
import json

import pytest

import main
from chunkmerge.core.models import ChunkAction


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(main, "setup_logging", lambda *args, **kwargs: None)


@pytest.fixture
def config(tmp_path):
    return str(tmp_path / "settings.json")


@pytest.fixture
def files(tmp_path, conflicting):
    paths = []
    for name, text in zip(("base", "left", "right"), conflicting):
        path = tmp_path / f"{name}.txt"
        path.write_text(text)
        paths.append(str(path))
    return paths


def run(argv):
    out = io.StringIO()
    code = main.main(argv, out=out)
    return code, out.getvalue()


class TestParseArguments:
    def test_chunks(self):
        args = main.parse_arguments(["chunks", "b", "l", "r", "--json"])

        assert args.command == main.Command.CHUNKS
        assert (args.base_path, args.left_path, args.right_path) == ("b", "l", "r")
        assert args.as_json

    def test_apply(self):
        args = main.parse_arguments([
            "-v", "apply", "b", "l", "r", "--chunk", "chunk-2", "--action", "apply-right"
        ])

        assert args.command == main.Command.APPLY
        assert args.chunk_id == "chunk-2"
        assert args.action == ChunkAction.APPLY_RIGHT
        assert args.log_level == "DEBUG"

    def test_bad_action(self):
        with pytest.raises(SystemExit) as exc_info:
            main.parse_arguments(["apply", "b", "l", "r", "--chunk", "chunk-1", "--action", "merge"])
        assert exc_info.value.code == 2


class TestChunksCommand:
    def test_table(self, files, config):
        code, output = run(["--config", config, "chunks", *files])

        assert code == 0
        lines = output.splitlines()
        assert len(lines) == 1
        assert lines[0].startswith("chunk-1")
        assert "conflict" in lines[0]
        assert "base 2-2" in lines[0]

    def test_json(self, files, config):
        code, output = run(["--config", config, "chunks", *files, "--json"])

        assert code == 0
        data = json.loads(output)
        assert [chunk['kind'] for chunk in data] == ["conflict"]
        assert data[0]['left_pos_range'] == {'from': 6, 'to': 17}

    def test_settings_change_comparison(self, tmp_path, files):
        config = tmp_path / "custom.json"
        config.write_text(json.dumps({'comparison': {'ignore_case': True}}))
        base, _, _ = files
        upper = tmp_path / "upper.txt"
        upper.write_text("ALPHA\nBRAVO\nCHARLIE\n")

        code, output = run(["--config", str(config), "chunks", base, str(upper), base])

        assert code == 0
        assert output == ""

    def test_missing_file(self, files, config, tmp_path):
        code, output = run(["--config", config, "chunks", files[0], files[1], str(tmp_path / "x")])

        assert code == 1
        assert output == ""


class TestApplyCommand:
    def test_to_stdout(self, files, config, conflicting):
        code, output = run([
            "--config", config, "apply", *files, "--chunk", "chunk-1", "--action", "apply_left"
        ])

        assert code == 0
        assert output == conflicting[1]

    def test_overwrite_with_backup(self, files, config, conflicting, tmp_path):
        code, _ = run([
            "--config", config, "apply", *files,
            "--chunk", "chunk-1", "--action", "apply_right", "-o", files[0]
        ])

        assert code == 0
        assert (tmp_path / "base.txt").read_text() == conflicting[2]
        assert (tmp_path / "base.txt.orig").read_text() == conflicting[0]

    def test_no_backup(self, files, config, tmp_path):
        code, _ = run([
            "--config", config, "apply", *files,
            "--chunk", "chunk-1", "--action", "apply_right", "-o", files[0], "--no-backup"
        ])

        assert code == 0
        assert not (tmp_path / "base.txt.orig").exists()

    def test_keep_base(self, files, config, conflicting):
        code, output = run([
            "--config", config, "apply", *files, "--chunk", "chunk-1", "--action", "keep_base"
        ])

        assert code == 0
        assert output == conflicting[0]

    def test_unknown_chunk(self, files, config):
        code, output = run([
            "--config", config, "apply", *files, "--chunk", "chunk-7", "--action", "apply_left"
        ])

        assert code == 1
        assert output == ""
