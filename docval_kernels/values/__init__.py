"""
Possible-values kernels: reconcile authored value documentation with declared values

Checks that the possible values documented for a symbol (enum cases,
dictionary keys) are values the symbol actually declares, suggests fixes
for the ones it does not, and decides how the values are rendered.

Stage 1 — Collection (deterministic):
    pv_directives:  Possible-value directives of a documentation page
    pv_canonical:   Declared values of the page's symbol from a catalog

Stage 2 — Analysis (deterministic):
    pv_reconcile:   Reconciliation, diagnostics, link resolution, render plan

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

__version__ = "0.3.0"

# Kernels are registered automatically by the KernelRegistry
# via package discovery (pkgutil.walk_packages).

__all__ = []
