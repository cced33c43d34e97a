"""
Unit tests for lua_embed/generator/

Coverage plan
─────────────
models.py  → options / job / result defaults and output path
task.py    → end-to-end generation, idempotence, up-to-date check,
             error ordering (nothing written on failure), atomic write,
             duplicate outputs, round-trip self-check
syntax.py  → luac present / absent / rejecting (subprocess mocked)
"""

import os
import stat
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

_TEMPLATE_NAME = "CoronaLua.java.template"


@pytest.fixture
def workspace(tmp_path):
    """Lua source + Java template on disk; returns (source, template, out_dir)."""
    source = tmp_path / "init.lua"
    source.write_bytes(b'print("hi\\n")')
    template = tmp_path / _TEMPLATE_NAME
    template.write_bytes(b"String CODE = @code@;")
    return source, template, tmp_path / "generated"


def _make_job(source, template, out_dir, **option_kw):
    from lua_embed.generator import GenerationJob, GeneratorOptions
    return GenerationJob(
        source=source,
        template=template,
        output_dir=out_dir,
        options=GeneratorOptions(**option_kw),
    )


# ─────────────────────────────────────────────────────────────────────────────
# 1. Models
# ─────────────────────────────────────────────────────────────────────────────

class TestModels:

    def test_options_defaults(self):
        from lua_embed.generator import GeneratorOptions
        opts = GeneratorOptions()
        assert opts.style == "java"
        assert opts.encoding == "utf-8"
        assert opts.template_suffix == ".template"
        assert opts.verify is True
        assert opts.check_syntax is False

    def test_job_default_placeholder_key(self, workspace):
        job = _make_job(*workspace)
        assert job.placeholder_key == "code"

    def test_job_coerces_paths(self):
        from lua_embed.generator import GenerationJob
        job = GenerationJob(source="a.lua", template="B.java.template", output_dir="out")
        assert isinstance(job.source, Path)
        assert job.output_path == Path("out") / "B.java"

    def test_job_empty_key_rejected(self):
        from lua_embed.generator import GenerationJob
        from lua_embed.exceptions import ConfigError
        with pytest.raises(ConfigError):
            GenerationJob(source="a.lua", template="B.template", output_dir="o", placeholder_key="")

    def test_result_str(self):
        from lua_embed.generator import GenerationResult
        assert "up-to-date" in str(GenerationResult(Path("x"), written=False))


# ─────────────────────────────────────────────────────────────────────────────
# 2. generate()
# ─────────────────────────────────────────────────────────────────────────────

class TestGenerate:

    def test_print_hi_scenario(self, workspace):
        from lua_embed.generator import generate
        source, template, out_dir = workspace
        result = generate(source, template, out_dir, "code")

        assert result.output_path == out_dir / "CoronaLua.java"
        assert result.written is True
        content = result.output_path.read_text(encoding="utf-8")
        assert content == 'String CODE = "print(\\"hi\\\\n\\")";'
        assert result.size == len(content.encode("utf-8"))

    def test_empty_script(self, workspace):
        from lua_embed.generator import generate
        source, template, out_dir = workspace
        source.write_bytes(b"")
        result = generate(source, template, out_dir)
        assert result.output_path.read_text() == 'String CODE = "";'

    def test_creates_nested_output_dir(self, workspace):
        from lua_embed.generator import generate
        source, template, out_dir = workspace
        nested = out_dir / "source" / "lua" / "release"
        result = generate(source, template, nested)
        assert result.output_path.parent == nested
        assert result.output_path.is_file()

    def test_mixed_line_endings_round_trip(self, tmp_path):
        from lua_embed.escaper import evaluate_literal_expression
        from lua_embed.generator import generate
        original = "local a = 1\r\nlocal b = '\"'\n\rreturn a .. b\\\r"
        source = tmp_path / "s.lua"
        source.write_bytes(original.encode("utf-8"))
        template = tmp_path / "Raw.java.template"
        template.write_bytes(b"@code@")

        result = generate(source, template, tmp_path / "out")
        expression = result.output_path.read_bytes().decode("utf-8")
        assert evaluate_literal_expression(expression) == original

    def test_template_text_passed_through(self, tmp_path):
        from lua_embed.escaper import to_literal_expression
        from lua_embed.generator import generate
        source = tmp_path / "s.lua"
        source.write_bytes(b"return 1\n")
        template_text = (
            "package com.ansca.corona;\r\n\r\n"
            "// generated: do not edit @notakey@ \\n \"\r\n"
            "final class CoronaLua {\r\n"
            "    static final String CODE = @code@;\r\n"
            "}\r\n"
        )
        template = tmp_path / "CoronaLua.java.template"
        template.write_bytes(template_text.encode("utf-8"))

        result = generate(source, template, tmp_path / "out")
        expected = template_text.replace("@code@", to_literal_expression("return 1\n"))
        assert result.output_path.read_bytes() == expected.encode("utf-8")

    def test_kotlin_style(self, tmp_path):
        from lua_embed.generator import GeneratorOptions, generate
        source = tmp_path / "s.lua"
        source.write_bytes(b'print("$HOME")')
        template = tmp_path / "CoronaLua.kt.template"
        template.write_bytes(b"val CODE = @code@")

        result = generate(source, template, tmp_path / "out", options=GeneratorOptions(style="kotlin"))
        assert result.output_path.name == "CoronaLua.kt"
        assert result.output_path.read_text() == 'val CODE = "print(\\"\\$HOME\\")"'

    def test_custom_placeholder_key(self, workspace):
        from lua_embed.generator import generate
        source, template, out_dir = workspace
        template.write_bytes(b"String S = @LUA_SCRIPT@;")
        result = generate(source, template, out_dir, "LUA_SCRIPT")
        assert "@LUA_SCRIPT@" not in result.output_path.read_text()

    def test_no_temp_files_left_behind(self, workspace):
        from lua_embed.generator import generate
        source, template, out_dir = workspace
        generate(source, template, out_dir)
        assert [p.name for p in out_dir.iterdir()] == ["CoronaLua.java"]

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
    def test_new_artifact_respects_umask(self, workspace):
        from lua_embed.generator import generate
        source, template, out_dir = workspace
        old = os.umask(0o077)
        try:
            result = generate(source, template, out_dir)
        finally:
            os.umask(old)
        assert stat.S_IMODE(result.output_path.stat().st_mode) == 0o600

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
    def test_rewrite_keeps_existing_mode(self, workspace):
        from lua_embed.generator import generate
        source, template, out_dir = workspace
        first = generate(source, template, out_dir)
        first.output_path.chmod(0o640)
        source.write_bytes(b"return 2\n")
        second = generate(source, template, out_dir)
        assert second.written is True
        assert stat.S_IMODE(second.output_path.stat().st_mode) == 0o640


# ─────────────────────────────────────────────────────────────────────────────
# 3. Idempotence / up-to-date
# ─────────────────────────────────────────────────────────────────────────────

class TestIdempotence:

    def test_second_run_is_byte_identical_and_skipped(self, workspace):
        from lua_embed.generator import generate
        source, template, out_dir = workspace
        first = generate(source, template, out_dir)
        before = first.output_path.read_bytes()

        second = generate(source, template, out_dir)
        assert second.written is False
        assert second.output_path.read_bytes() == before

    def test_changed_source_rewrites(self, workspace):
        from lua_embed.generator import generate
        source, template, out_dir = workspace
        generate(source, template, out_dir)
        source.write_bytes(b"print('changed')")
        result = generate(source, template, out_dir)
        assert result.written is True
        assert "changed" in result.output_path.read_text()

    def test_hand_edited_artifact_is_overwritten(self, workspace):
        from lua_embed.generator import generate
        source, template, out_dir = workspace
        result = generate(source, template, out_dir)
        original = result.output_path.read_bytes()
        result.output_path.write_text("// edited by hand")

        again = generate(source, template, out_dir)
        assert again.written is True
        assert again.output_path.read_bytes() == original

    def test_check_up_to_date(self, workspace):
        from lua_embed.generator import check_up_to_date, run_job
        source, template, out_dir = workspace
        job = _make_job(source, template, out_dir)

        assert check_up_to_date(job) is False
        run_job(job)
        assert check_up_to_date(job) is True
        source.write_bytes(b"return 2")
        assert check_up_to_date(job) is False


# ─────────────────────────────────────────────────────────────────────────────
# 4. Failures leave nothing behind
# ─────────────────────────────────────────────────────────────────────────────

class TestFailures:

    def test_missing_template_raises_before_writing(self, workspace):
        from lua_embed.generator import generate
        from lua_embed.exceptions import MissingInputError
        source, template, out_dir = workspace
        template.unlink()
        with pytest.raises(MissingInputError, match="template"):
            generate(source, template, out_dir)
        assert not out_dir.exists()

    def test_missing_source_raises_before_writing(self, workspace):
        from lua_embed.generator import generate
        from lua_embed.exceptions import MissingInputError
        source, template, out_dir = workspace
        source.unlink()
        with pytest.raises(MissingInputError, match="Lua source"):
            generate(source, template, out_dir)
        assert not out_dir.exists()

    def test_undecodable_source(self, workspace):
        from lua_embed.generator import generate
        from lua_embed.exceptions import MissingInputError
        source, template, out_dir = workspace
        source.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(MissingInputError, match="decode"):
            generate(source, template, out_dir)

    def test_unknown_encoding(self, workspace):
        from lua_embed.generator import GeneratorOptions, generate
        from lua_embed.exceptions import ConfigError
        source, template, out_dir = workspace
        with pytest.raises(ConfigError, match="encoding"):
            generate(source, template, out_dir, options=GeneratorOptions(encoding="no-such-codec"))

    def test_unknown_style(self, workspace):
        from lua_embed.generator import GeneratorOptions, generate
        from lua_embed.exceptions import ConfigError
        source, template, out_dir = workspace
        with pytest.raises(ConfigError):
            generate(source, template, out_dir, options=GeneratorOptions(style="pascal"))
        assert not out_dir.exists()

    def test_template_mismatch_writes_nothing(self, workspace):
        from lua_embed.generator import generate
        from lua_embed.exceptions import TemplateMismatchError
        source, template, out_dir = workspace
        template.write_bytes(b"String CODE = @CODE@;")
        with pytest.raises(TemplateMismatchError):
            generate(source, template, out_dir)
        assert not out_dir.exists()

    def test_template_without_suffix(self, tmp_path, workspace):
        from lua_embed.generator import generate
        from lua_embed.exceptions import TemplateNameError
        source, _, out_dir = workspace
        plain = tmp_path / "CoronaLua.java"
        plain.write_bytes(b"@code@")
        with pytest.raises(TemplateNameError):
            generate(source, plain, out_dir)
        assert not out_dir.exists()

    def test_output_dir_is_a_file(self, workspace):
        from lua_embed.generator import generate
        from lua_embed.exceptions import WriteFailureError
        source, template, out_dir = workspace
        out_dir.write_text("not a directory")
        with pytest.raises(WriteFailureError):
            generate(source, template, out_dir)

    def test_failed_replace_removes_temp_file(self, workspace):
        from lua_embed.generator import generate
        from lua_embed.exceptions import WriteFailureError
        source, template, out_dir = workspace
        with patch("lua_embed.generator.task.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(WriteFailureError, match="disk full"):
                generate(source, template, out_dir)
        assert list(out_dir.iterdir()) == []

    def test_round_trip_mismatch_raises(self, workspace):
        from lua_embed.generator import generate
        from lua_embed.exceptions import RoundTripError
        source, template, out_dir = workspace
        with patch("lua_embed.generator.task.evaluate_literal_expression", return_value="other"):
            with pytest.raises(RoundTripError):
                generate(source, template, out_dir)
        assert not out_dir.exists()

    def test_verify_disabled_skips_round_trip(self, workspace):
        from lua_embed.generator import GeneratorOptions, generate
        source, template, out_dir = workspace
        with patch("lua_embed.generator.task.evaluate_literal_expression") as mock_eval:
            generate(source, template, out_dir, options=GeneratorOptions(verify=False))
        mock_eval.assert_not_called()


# ─────────────────────────────────────────────────────────────────────────────
# 5. run_jobs()
# ─────────────────────────────────────────────────────────────────────────────

class TestRunJobs:

    def test_runs_each_job(self, tmp_path, workspace):
        from lua_embed.generator import run_jobs
        source, template, out_dir = workspace
        debug_template = tmp_path / "CoronaLuaDebug.java.template"
        debug_template.write_bytes(b"String DEBUG = @code@;")

        results = run_jobs([
            _make_job(source, template, out_dir),
            _make_job(source, debug_template, out_dir),
        ])
        assert [r.output_path.name for r in results] == ["CoronaLua.java", "CoronaLuaDebug.java"]
        assert all(r.written for r in results)

    def test_duplicate_output_rejected_before_running(self, workspace):
        from lua_embed.generator import run_jobs
        from lua_embed.exceptions import ConfigError
        source, template, out_dir = workspace
        with pytest.raises(ConfigError, match="both write"):
            run_jobs([
                _make_job(source, template, out_dir),
                _make_job(source, template, out_dir, style="kotlin"),
            ])
        assert not out_dir.exists()

    def test_stale_outputs_lists_only_stale_jobs(self, tmp_path, workspace):
        from lua_embed.generator import run_job, stale_outputs
        source, template, out_dir = workspace
        debug_template = tmp_path / "CoronaLuaDebug.java.template"
        debug_template.write_bytes(b"String DEBUG = @code@;")
        current = _make_job(source, template, out_dir)
        stale = _make_job(source, debug_template, out_dir)
        run_job(current)
        assert stale_outputs([current, stale]) == [out_dir / "CoronaLuaDebug.java"]

    def test_stale_outputs_rejects_shared_output(self, workspace):
        from lua_embed.generator import stale_outputs
        from lua_embed.exceptions import ConfigError
        source, template, out_dir = workspace
        with pytest.raises(ConfigError, match="both write"):
            stale_outputs([
                _make_job(source, template, out_dir),
                _make_job(source, template, out_dir, style="c"),
            ])


# ─────────────────────────────────────────────────────────────────────────────
# 6. LuaSyntaxChecker
# ─────────────────────────────────────────────────────────────────────────────

class TestLuaSyntaxChecker:

    def test_skipped_when_luac_missing(self, tmp_path):
        from lua_embed.generator import LuaSyntaxChecker
        with patch("lua_embed.generator.syntax.shutil.which", return_value=None):
            checker = LuaSyntaxChecker()
        assert checker.available is False
        assert checker.check(tmp_path / "x.lua") is False

    def test_accepts_valid_script(self, tmp_path):
        from lua_embed.generator import LuaSyntaxChecker
        with patch("lua_embed.generator.syntax.shutil.which", return_value="/usr/bin/luac"), \
             patch("lua_embed.generator.syntax.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stderr="")
            assert LuaSyntaxChecker().check(tmp_path / "x.lua") is True
        args = mock_run.call_args[0][0]
        assert args[:2] == ["/usr/bin/luac", "-p"]

    def test_rejects_bad_script(self, tmp_path):
        from lua_embed.generator import LuaSyntaxChecker
        from lua_embed.exceptions import LuaSyntaxError
        stderr = "/usr/bin/luac: x.lua:1: unexpected symbol near '@'"
        with patch("lua_embed.generator.syntax.shutil.which", return_value="/usr/bin/luac"), \
             patch("lua_embed.generator.syntax.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=1, stderr=stderr)
            with pytest.raises(LuaSyntaxError, match="x.lua:1: unexpected symbol"):
                LuaSyntaxChecker().check(tmp_path / "x.lua")

    def test_generate_with_check_syntax_writes_nothing_on_error(self, workspace):
        from lua_embed.generator import GeneratorOptions, generate
        from lua_embed.exceptions import LuaSyntaxError
        source, template, out_dir = workspace
        with patch("lua_embed.generator.syntax.shutil.which", return_value="/usr/bin/luac"), \
             patch("lua_embed.generator.syntax.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=1, stderr="luac: init.lua:1: '=' expected")
            with pytest.raises(LuaSyntaxError):
                generate(source, template, out_dir, options=GeneratorOptions(check_syntax=True))
        assert not out_dir.exists()
