"""
pvctl — CLI for the docval possible-values kernel family.

Commands:
    check    Run the kernel pipeline on documentation pages and report diagnostics
    show     Reconcile one page in memory and print its render plan
    kernels  List the available kernels

Exit codes: 0 success, 1 missing inputs or failed kernel, 2 diagnostics
found with ``--strict``.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

import argparse
import hashlib
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import logging

logger = logging.getLogger(__name__)

# ANSI color helpers (auto-disabled for non-TTY)
_USE_COLOR = sys.stdout.isatty()


def _c(code: str, text: str) -> str:
    if not _USE_COLOR:
        return text
    return f"\033[{code}m{text}\033[0m"


def _bold(text: str) -> str:
    return _c("1", text)


def _green(text: str) -> str:
    return _c("32", text)


def _yellow(text: str) -> str:
    return _c("33", text)


def _red(text: str) -> str:
    return _c("31", text)


def _cyan(text: str) -> str:
    return _c("36", text)


def _dim(text: str) -> str:
    return _c("2", text)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _load_config(args: argparse.Namespace):
    from docval_core.config import load_config
    return load_config(Path(args.config) if args.config else None)


def _check_inputs(pages: List[Path], catalog: Path) -> List[str]:
    missing = [str(p) for p in pages if not p.is_file()]
    if not catalog.is_file():
        missing.append(str(catalog))
    return missing


def _resolve_workspace(pages: List[Path], catalog: Path, workspace: Optional[Path]) -> Path:
    """Default: .docval/<first page stem>_<hash of inputs>/ next to the first page."""
    if workspace:
        return workspace
    h = hashlib.sha256()
    for path in sorted(pages) + [catalog]:
        h.update(str(path).encode())
        h.update(path.read_bytes())
    return pages[0].parent / ".docval" / f"{pages[0].stem}_{h.hexdigest()[:12]}"


def _discover_dependencies(requires: List[str], workspace: Path) -> Dict[str, Path]:
    """Find output files from required kernels."""
    deps = {}
    for req in requires:
        for stage in ("stage1", "stage2"):
            candidate = workspace / stage / f"{req}.json"
            if candidate.exists():
                deps[req] = candidate
                break
    return deps


def _run_kernel(kernel_name: str, workspace: Path, config: Dict[str, Any], verbose: bool = False):
    """Run a single kernel by name; returns its KernelOutput, or None if it could not start."""
    from docval_kernels.base import KernelInput
    from docval_kernels.registry import KernelRegistry

    print(f"  [{_cyan(kernel_name)}] ", end="", flush=True)

    try:
        kernel = KernelRegistry.get_instance(kernel_name)
    except KeyError as e:
        print(_red(f"ERROR: {e}"))
        return None

    result = kernel.run(KernelInput(
        workspace=workspace,
        config=config,
        dependencies=_discover_dependencies(kernel.requires, workspace),
    ))

    if result.success:
        print(_green(result.summary or "done"))
    else:
        errors = "; ".join(result.errors) if result.errors else "unknown error"
        print(_red(f"FAILED: {errors}"))
        if verbose:
            for e in result.errors:
                print(f"    {_dim(e)}")
    return result


def _format_location(diagnostic: Dict[str, Any]) -> str:
    location = diagnostic.get("source") or "<unknown>"
    rng = diagnostic.get("range")
    if rng:
        location += f":{rng['lower']['line']}:{rng['lower']['column']}"
    return location


def _print_diagnostics(diagnostics: List[Dict[str, Any]]) -> None:
    for d in diagnostics:
        severity = d.get("severity", "warning")
        tag = _yellow(severity) if severity == "warning" else _dim(severity)
        print(f"{_format_location(d)}: {tag}: {d['summary']} {_dim('[' + d['identifier'] + ']')}")
        for solution in d.get("solutions", []):
            lines = solution["summary"].rstrip("\n").splitlines()
            print(f"    {_cyan('fix:')} {lines[0]}")
            for line in lines[1:]:
                print(f"         {line}" if line else "")


# ---------------------------------------------------------------------------
# Command: check
# ---------------------------------------------------------------------------

def cmd_check(args: argparse.Namespace) -> int:
    """Run pv_directives, pv_canonical and pv_reconcile on the given pages."""
    pages = [Path(p).resolve() for p in args.pages]
    catalog = Path(args.catalog).resolve()

    missing = _check_inputs(pages, catalog)
    if missing:
        for path in missing:
            print(_red(f"Error: File not found: {path}"))
        return 1

    cfg = _load_config(args)
    workspace = _resolve_workspace(pages, catalog, Path(args.workspace) if args.workspace else None)
    workspace.mkdir(parents=True, exist_ok=True)

    config = {
        "pages": [{"path": str(p), "variant": args.variant} for p in pages],
        "catalog": str(catalog),
        "variant": args.variant,
        "values": cfg.values.to_dict(),
        "logging": cfg.logging.to_dict(),
    }

    if not args.json:
        print(_bold(f"docval possible values — {len(pages)} page(s)"))
        print(f"Workspace: {_dim(str(workspace))}")
        print()

    from docval_kernels.registry import KernelRegistry
    failed = False
    result = None
    for name in KernelRegistry.resolve_dependencies(["pv_reconcile"]):
        result = _run_kernel(name, workspace, config, args.verbose)
        if result is None or not result.success:
            failed = True
            break

    if failed:
        return 1

    diagnostics = result.data.get("diagnostics", [])
    if args.json:
        print(json.dumps(result.data, indent=2, sort_keys=True))
    else:
        print()
        if diagnostics:
            _print_diagnostics(diagnostics)
            print(f"\n{_yellow(f'{len(diagnostics)} diagnostic(s)')}")
        else:
            print(_green("No diagnostics."))

    if args.strict and diagnostics:
        return 2
    return 0


# ---------------------------------------------------------------------------
# Command: show
# ---------------------------------------------------------------------------

def cmd_show(args: argparse.Namespace) -> int:
    """Reconcile one page in memory and print its render plan."""
    from docval_kernels.values.canonical import load_symbol_catalog
    from docval_kernels.values.diagnostics import DiagnosticEngine
    from docval_kernels.values.links import CatalogLinkResolver
    from docval_kernels.values.md_parser import extract_page_title
    from docval_kernels.values.pipeline import reconcile_symbol
    from docval_kernels.values.render import format_plan

    page = Path(args.page)
    catalog_path = Path(args.catalog)
    missing = _check_inputs([page], catalog_path)
    if missing:
        for path in missing:
            print(_red(f"Error: File not found: {path}"))
        return 1

    cfg = _load_config(args)
    catalog = load_symbol_catalog(catalog_path)
    title, body, line_offset = extract_page_title(page.read_text(encoding="utf-8"))
    symbol = catalog.find(args.symbol or title or "")
    if symbol is None:
        print(_red(f"Error: symbol '{args.symbol or title}' not found in {catalog_path}"))
        return 1

    engine = DiagnosticEngine()
    result = reconcile_symbol(
        symbol.title,
        {args.variant: body} if args.variant else body,
        symbol.canonical_values,
        resolver=CatalogLinkResolver(catalog),
        engine=engine,
        context_path=symbol.path,
        source=str(page),
        line_offset=line_offset,
        variant=args.variant,
        config=cfg.values,
    )

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, sort_keys=True))
        return 0

    print(_bold(f"{symbol.title} {_dim(symbol.path)}"))
    print(format_plan(result.plan))
    diagnostics = [d.to_dict() for d in engine.drain()]
    if diagnostics:
        print()
        _print_diagnostics(diagnostics)
    return 0


# ---------------------------------------------------------------------------
# Command: kernels
# ---------------------------------------------------------------------------

def cmd_kernels(args: argparse.Namespace) -> int:
    """List available kernels."""
    from docval_kernels.registry import KernelRegistry

    names = KernelRegistry.list_category(args.category) if args.category else KernelRegistry.list_all()
    print(f"{'Kernel':<16} {'Stage':<6} {'Requires':<28} Description")
    print("-" * 80)
    for name in names:
        info = KernelRegistry.get_info(name)
        requires = ", ".join(info["requires"]) or "-"
        print(f"{name:<16} {info['stage']:<6} {requires:<28} {info['description']}")
    print(f"\n{_dim(f'{len(names)} kernel(s)')}")
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """Build the pvctl argument parser."""
    parser = argparse.ArgumentParser(
        prog="pvctl",
        description="docval — check documented possible values against declared values",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("-c", "--config", help="Path to docval.yaml (default: search upward)")

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # --- check ---
    p_check = sub.add_parser("check", help="Run the kernel pipeline and report diagnostics")
    p_check.add_argument("pages", nargs="+", help="Symbol documentation pages (Markdown)")
    p_check.add_argument("--catalog", required=True, help="Symbol catalog (JSON)")
    p_check.add_argument("-w", "--workspace", help="Workspace directory (default: auto)")
    p_check.add_argument("--variant", default=None, help="Content variant tag (e.g. swift)")
    p_check.add_argument("--strict", action="store_true", help="Exit with code 2 if any diagnostic is found")
    p_check.add_argument("--json", action="store_true", help="Print the pv_reconcile data as JSON")
    p_check.set_defaults(func=cmd_check)

    # --- show ---
    p_show = sub.add_parser("show", help="Print the render plan of one page")
    p_show.add_argument("page", help="Symbol documentation page (Markdown)")
    p_show.add_argument("--catalog", required=True, help="Symbol catalog (JSON)")
    p_show.add_argument("--symbol", default=None, help="Symbol name (default: page heading)")
    p_show.add_argument("--variant", default=None, help="Content variant tag")
    p_show.add_argument("--json", action="store_true", help="Print the full result as JSON")
    p_show.set_defaults(func=cmd_show)

    # --- kernels ---
    p_kernels = sub.add_parser("kernels", help="List available kernels")
    p_kernels.add_argument("--category", default=None, help="Filter by category (e.g. values)")
    p_kernels.set_defaults(func=cmd_kernels)

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for pvctl."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
