"""
docval possible-values CLI — pvctl command-line interface.

Usage:
    python -m docval_kernels.values.cli.pvctl check Month.md --catalog catalog.json
    python -m docval_kernels.values.cli.pvctl show Month.md --catalog catalog.json
    python -m docval_kernels.values.cli.pvctl kernels

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

from docval_kernels.values.cli.pvctl import main
