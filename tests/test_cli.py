from __future__ import annotations

import io
import json

from sigil.cli import main


def _write(tmp_path, text: str, name: str = "prog.sg") -> str:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_runs_script_and_prints_output(tmp_path, capsys) -> None:
    path = _write(tmp_path, 'print "hi";\nprint 1 + 2;')
    assert main([path]) == 0
    captured = capsys.readouterr()
    assert captured.out == "hi\n3\n"
    assert captured.err == ""


def test_runtime_error_goes_to_stderr(tmp_path, capsys) -> None:
    path = _write(tmp_path, 'print "a";\nprint y;')
    assert main([path]) == 1
    captured = capsys.readouterr()
    assert captured.out == "a\n"
    assert captured.err.strip() == f"{path}: [Runtime Error] Line 2:7 - Undefined variable 'y'."


def test_json_report(tmp_path, capsys) -> None:
    path = _write(tmp_path, 'print "a";\nprint y;')
    assert main([path, "--json"]) == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["exit_code"] == 1
    assert payload["output"] == ["a"]
    diag = payload["diagnostics"][0]
    assert diag["phase"] == "runtime"
    assert diag["file"] == path
    assert (diag["line"], diag["column"]) == (2, 7)


def test_compile_errors_are_all_reported(tmp_path, capsys) -> None:
    path = _write(tmp_path, "let;\nlet = 1; $")
    assert main([path, "--json"]) == 1
    payload = json.loads(capsys.readouterr().out)
    assert [d["phase"] for d in payload["diagnostics"]] == ["lexer", "parser", "parser"]
    assert "output" not in payload


def test_check_mode(tmp_path, capsys) -> None:
    good = _write(tmp_path, "print y;")
    assert main([good, "--check"]) == 0
    assert capsys.readouterr().out == ""
    bad = _write(tmp_path, "print ;", name="bad.sg")
    assert main([bad, "--check"]) == 1
    assert "Expect expression." in capsys.readouterr().err


def test_tokens_mode(tmp_path, capsys) -> None:
    path = _write(tmp_path, "let a;")
    assert main([path, "--tokens"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "1:1\tLET\t'let'"
    assert lines[-1].split("\t")[1] == "EOF"


def test_ast_mode(tmp_path, capsys) -> None:
    path = _write(tmp_path, "let a = 1;")
    assert main([path, "--ast"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["kind"] == "Program"
    assert data["statements"][0]["kind"] == "LetStatement"


def test_format_mode(tmp_path, capsys) -> None:
    path = _write(tmp_path, "let x=1+2;print x;")
    assert main([path, "--format"]) == 0
    assert capsys.readouterr().out == "let x = 1 + 2;\nprint x;\n"


def test_loop_limit_flag(tmp_path, capsys) -> None:
    path = _write(tmp_path, "let n = 0; while (n < 5) n = n + 1; print n;")
    assert main([path]) == 0
    assert capsys.readouterr().out == "5\n"
    assert main([path, "--max-loop-iterations", "3"]) == 1
    assert "Infinite loop detected" in capsys.readouterr().err


def test_config_file(tmp_path, capsys) -> None:
    path = _write(tmp_path, "let len = 1; print len;")
    assert main([path]) == 1
    assert "Cannot redefine builtin 'len'." in capsys.readouterr().err

    config = tmp_path / "sigil.json"
    config.write_text(json.dumps({"execution": {"allow_global_scope_pollution": True}}))
    assert main([path, "--config", str(config)]) == 0
    assert capsys.readouterr().out == "1\n"


def test_pollution_flag(tmp_path, capsys) -> None:
    path = _write(tmp_path, "let len = 1; print len;")
    assert main([path, "--allow-global-scope-pollution"]) == 0
    assert capsys.readouterr().out == "1\n"


def test_flag_overrides_config_file(tmp_path, capsys) -> None:
    path = _write(tmp_path, "let n = 0; while (n < 5) n = n + 1;")
    config = tmp_path / "sigil.json"
    config.write_text(json.dumps({"max_loop_iterations": 2}))
    assert main([path, "--config", str(config)]) == 1
    capsys.readouterr()
    assert main([path, "--config", str(config), "--max-loop-iterations", "10"]) == 0


def test_invalid_config_file(tmp_path, capsys) -> None:
    path = _write(tmp_path, "print 1;")
    config = tmp_path / "bad.json"
    config.write_text(json.dumps({"max_loop_iterations": 0}))
    assert main([path, "--config", str(config)]) == 1
    assert "invalid configuration" in capsys.readouterr().err


def test_missing_source_file(tmp_path, capsys) -> None:
    missing = str(tmp_path / "nope.sg")
    assert main([missing]) == 1
    assert "cannot read source" in capsys.readouterr().err


def test_reads_stdin(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("print 40 + 2;"))
    assert main(["-"]) == 0
    assert capsys.readouterr().out == "42\n"
