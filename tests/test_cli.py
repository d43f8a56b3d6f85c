"""
Test the pvctl command line

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

import json

from docval_kernels.values.cli.pvctl import build_parser, main


def _check(temp_dir, page, catalog, *extra):
    argv = [
        "-c", str(temp_dir / "no-config.yaml"),
        "check", str(page),
        "--catalog", str(catalog),
        "-w", str(temp_dir / "ws"),
    ]
    return main(argv + list(extra))


class TestParser:

    def test_check_arguments(self):
        args = build_parser().parse_args(["check", "a.md", "b.md", "--catalog", "c.json", "--strict"])
        assert args.pages == ["a.md", "b.md"]
        assert args.strict
        assert args.variant is None

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "pvctl" in capsys.readouterr().out


class TestKernelsCommand:

    def test_lists_values_kernels(self, capsys):
        assert main(["kernels", "--category", "values"]) == 0
        out = capsys.readouterr().out
        for name in ("pv_directives", "pv_canonical", "pv_reconcile"):
            assert name in out
        assert "3 kernel(s)" in out


class TestCheckCommand:

    def test_reports_diagnostics(self, temp_dir, month_page, catalog_file, capsys):
        assert _check(temp_dir, month_page, catalog_file) == 0
        out = capsys.readouterr().out
        assert "'April' is not a known possible value for 'Month'." in out
        assert "1 diagnostic(s)" in out
        assert (temp_dir / "ws" / "stage2" / "pv_reconcile.json").exists()

    def test_strict(self, temp_dir, month_page, catalog_file):
        assert _check(temp_dir, month_page, catalog_file, "--strict") == 2

    def test_strict_clean_page(self, temp_dir, write_page, catalog_file, capsys):
        page = write_page("#  ``Month``\n\n- PossibleValue January: First\n")
        assert _check(temp_dir, page, catalog_file, "--strict") == 0
        assert "No diagnostics." in capsys.readouterr().out

    def test_json(self, temp_dir, month_page, catalog_file, capsys):
        assert _check(temp_dir, month_page, catalog_file, "--json") == 0
        out = capsys.readouterr().out
        # kernel progress lines come first
        data = json.loads(out[out.index("\n{") + 1:])
        assert data["total_diagnostics"] == 1
        assert data["symbols"][0]["render"]["mode"] == "detailed_section"

    def test_missing_page(self, temp_dir, catalog_file, capsys):
        assert _check(temp_dir, temp_dir / "nope.md", catalog_file) == 1
        assert "File not found" in capsys.readouterr().out

    def test_unknown_symbol_fails(self, temp_dir, write_page, catalog_file):
        page = write_page("#  ``Planet``\n\n- PossibleValue Mars: Red\n", "Planet.md")
        assert _check(temp_dir, page, catalog_file) == 1


class TestShowCommand:

    def _show(self, temp_dir, page, catalog, *extra):
        argv = ["-c", str(temp_dir / "no-config.yaml"), "show", str(page), "--catalog", str(catalog)]
        return main(argv + list(extra))

    def test_detailed_plan(self, temp_dir, month_page, catalog_file, capsys):
        assert self._show(temp_dir, month_page, catalog_file) == 0
        out = capsys.readouterr().out
        assert "Possible Values" in out
        assert "January: First" in out
        assert "'April' is not a known possible value for 'Month'." in out

    def test_json(self, temp_dir, month_page, catalog_file, capsys):
        assert self._show(temp_dir, month_page, catalog_file, "--json") == 0
        data = json.loads(capsys.readouterr().out)
        assert data["symbol"] == "Month"
        assert data["extra"] == ["April"]

    def test_unknown_symbol(self, temp_dir, month_page, catalog_file, capsys):
        assert self._show(temp_dir, month_page, catalog_file, "--symbol", "Planet") == 1
        assert "not found" in capsys.readouterr().out
