"""
docval kernels: documentation validation as traceable computation steps.

- Kernels are deterministic (same input, same output)
- Each kernel persists structured JSON plus a short summary
- Kernels declare dependencies and are ordered by the registry

Kernel families:
- values: possible-values reconciliation (pv_directives, pv_canonical, pv_reconcile)

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

from docval_core.version import __version__

__all__ = [
    # Base classes
    "Kernel",
    "KernelInput",
    "KernelOutput",
    # Registry
    "KernelRegistry",
    # Utilities
    "list_kernels",
]


def __getattr__(name):
    """Lazy imports to avoid circular dependencies."""
    if name in ("Kernel", "KernelInput", "KernelOutput"):
        from docval_kernels.base import Kernel, KernelInput, KernelOutput
        return locals()[name]
    elif name in ("KernelRegistry", "list_kernels"):
        from docval_kernels.registry import KernelRegistry, list_kernels
        return locals()[name]
    raise AttributeError(f"module 'docval_kernels' has no attribute '{name}'")
