"""Tests for the sync pipeline and its command-line harness."""

import hashlib
from pathlib import Path

import pytest

from apisync import (
    EXIT_STRICT,
    SourceNotFoundError,
    SyncConfig,
    detect_line_ending,
    main,
    read_text,
    sync_api,
)
from conftest import BUNDLE_METHOD_NAMES, EXTENSION, EXTENSION_HEAD, EXTENSION_TAIL


def _digest(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


class TestFileHandling:
    """Test line ending detection and byte-preserving reads."""

    @pytest.mark.parametrize("blob, expected", [
        ("a\nb\n", "\n"),
        ("a\r\nb\r\n", "\r\n"),
        ("a\rb\r", "\r"),
        ("no newline", "\n"),
    ])
    def test_detect_line_ending(self, blob: str, expected: str) -> None:
        assert detect_line_ending(blob) == expected

    def test_read_text_keeps_crlf(self, tmp_path: Path) -> None:
        path = tmp_path / "x.ts"
        path.write_bytes(b"one\r\ntwo\r\n")

        blob, line_ending = read_text(path)

        assert blob == "one\r\ntwo\r\n"
        assert line_ending == "\r\n"


class TestSyncApi:
    """Test the pipeline against files on disk."""

    def test_updates_extension(self, bundle_path: Path, extension_path: Path, capsys) -> None:
        rc = sync_api(SyncConfig(source_path=bundle_path, target_paths=(extension_path,)))

        assert rc == 0
        text = extension_path.read_text(encoding="utf-8")
        assert text.startswith(EXTENSION_HEAD + "// Sypnex API method definitions (auto-generated)\n")
        assert text.endswith(EXTENSION_TAIL)
        assert "name: 'old'" not in text
        for name in BUNDLE_METHOD_NAMES:
            assert f"\t\tname: '{name}',\n" in text
        assert "signature: 'sendMessage(event: any, data?: any, room?: any): any'" in text

        out = capsys.readouterr().out
        assert "Found 4 methods:" in out
        assert "   - async init()" in out
        assert "   - sendMessage(event, data = {}, room = null)" in out

    def test_idempotent(self, bundle_path: Path, extension_path: Path) -> None:
        cfg = SyncConfig(source_path=bundle_path, target_paths=(extension_path,))

        sync_api(cfg)
        first = extension_path.read_bytes()
        sync_api(cfg)

        assert extension_path.read_bytes() == first

    def test_missing_source_writes_nothing(self, tmp_path: Path, extension_path: Path) -> None:
        before = _digest(extension_path)

        with pytest.raises(SourceNotFoundError):
            sync_api(SyncConfig(source_path=tmp_path / "missing.js", target_paths=(extension_path,)))

        assert _digest(extension_path) == before

    def test_missing_anchor_leaves_file_unchanged(self, bundle_path: Path, extension_path: Path, capsys) -> None:
        extension_path.write_text(EXTENSION.replace("// Sypnex API method definitions", "// methods"), encoding="utf-8")
        before = _digest(extension_path)

        rc = sync_api(SyncConfig(source_path=bundle_path, target_paths=(extension_path,)))

        assert rc == 0
        assert _digest(extension_path) == before
        assert "Warning: anchor" in capsys.readouterr().err

    def test_missing_anchor_strict(self, bundle_path: Path, extension_path: Path) -> None:
        extension_path.write_text(EXTENSION.replace("// Sypnex API method definitions", "// methods"), encoding="utf-8")

        rc = sync_api(SyncConfig(source_path=bundle_path, target_paths=(extension_path,), strict=True))

        assert rc == EXIT_STRICT

    def test_no_methods(self, tmp_path: Path, extension_path: Path, capsys) -> None:
        source = tmp_path / "empty.js"
        source.write_text("// nothing exported yet\n", encoding="utf-8")

        rc = sync_api(SyncConfig(source_path=source, target_paths=(extension_path,)))

        assert rc == 0
        assert "const sypnexApiMethods = [\n\n];" in extension_path.read_text(encoding="utf-8")
        captured = capsys.readouterr()
        assert "Found 0 methods:" in captured.out
        assert "Warning: no methods found" in captured.err

    def test_no_methods_strict(self, tmp_path: Path, extension_path: Path) -> None:
        source = tmp_path / "empty.js"
        source.write_text("", encoding="utf-8")

        assert sync_api(SyncConfig(source_path=source, target_paths=(extension_path,), strict=True)) == EXIT_STRICT

    def test_output_path(self, bundle_path: Path, extension_path: Path, tmp_path: Path) -> None:
        before = _digest(extension_path)
        output = tmp_path / "generated.ts"

        sync_api(SyncConfig(source_path=bundle_path, target_paths=(extension_path,), output_path=output))

        assert _digest(extension_path) == before
        assert "name: 'disconnectSocket'" in output.read_text(encoding="utf-8")

    def test_multiple_targets(self, bundle_path: Path, extension_path: Path, tmp_path: Path) -> None:
        simple = tmp_path / "src" / "extension-simple.ts"
        simple.write_text(EXTENSION, encoding="utf-8")

        sync_api(SyncConfig(source_path=bundle_path, target_paths=(extension_path, simple)))

        assert extension_path.read_bytes() == simple.read_bytes()
        assert "name: 'getAppId'" in simple.read_text(encoding="utf-8")

    def test_crlf_target_preserved(self, bundle_path: Path, extension_path: Path) -> None:
        extension_path.write_bytes(EXTENSION.replace("\n", "\r\n").encode("utf-8"))

        sync_api(SyncConfig(source_path=bundle_path, target_paths=(extension_path,)))

        data = extension_path.read_bytes()
        assert b"name: 'init'" in data
        assert b"\n" not in data.replace(b"\r\n", b"")

    def test_custom_anchor_and_api_name(self, bundle_path: Path, tmp_path: Path) -> None:
        target = tmp_path / "methods.ts"
        target.write_text("// Demo methods\nconst demo = [\n];\n", encoding="utf-8")

        sync_api(SyncConfig(
            source_path=bundle_path,
            target_paths=(target,),
            anchor="// Demo methods",
            array_name="demo",
            api_name="Demo API",
        ))

        text = target.read_text(encoding="utf-8")
        assert text.startswith("// Demo methods (auto-generated)\nconst demo = [\n")
        assert "description: 'disconnectSocket method from Demo API'" in text


class TestMain:
    """Test exit codes and messages of the command-line entry point."""

    def test_success(self, bundle_path: Path, extension_path: Path) -> None:
        assert main(["--source", str(bundle_path), "--target", str(extension_path)]) == 0
        assert "name: 'sendMessage'" in extension_path.read_text(encoding="utf-8")

    def test_missing_source(self, tmp_path: Path, extension_path: Path, capsys) -> None:
        rc = main(["--source", str(tmp_path / "nope.js"), "--target", str(extension_path)])

        assert rc == 1
        err = capsys.readouterr().err
        assert "API file not found" in err
        assert "--source" in err

    def test_missing_target(self, bundle_path: Path, tmp_path: Path, capsys) -> None:
        rc = main(["--source", str(bundle_path), "--target", str(tmp_path / "nope.ts")])

        assert rc == 1
        assert "Error:" in capsys.readouterr().err

    def test_strict_flag(self, tmp_path: Path, extension_path: Path) -> None:
        source = tmp_path / "empty.js"
        source.write_text("", encoding="utf-8")

        assert main(["-s", str(source), "-t", str(extension_path), "--strict"]) == EXIT_STRICT

    def test_output_needs_single_target(self, bundle_path: Path, extension_path: Path, tmp_path: Path) -> None:
        with pytest.raises(SystemExit):
            main(["-s", str(bundle_path), "-t", str(extension_path), "-t", str(extension_path), "-o", str(tmp_path / "o.ts")])

    def test_defaults_relative_to_cwd(self, bundle_path: Path, extension_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(bundle_path.parent)

        assert main([]) == 0
        assert "name: 'init'" in extension_path.read_text(encoding="utf-8")

    def test_verbose_progress(self, bundle_path: Path, extension_path: Path, capsys) -> None:
        main(["-s", str(bundle_path), "-t", str(extension_path), "-v"])
        main(["-s", str(bundle_path), "-t", str(extension_path)])

        out = capsys.readouterr().out
        assert out.count("Extracting methods...") == 1
