"""
Kernel registry: discovery, lookup and dependency ordering.

1. Auto-discovery of kernels in the docval_kernels package
2. Registration of external kernels
3. Dependency resolution via topological sort
4. Query by name, category, or stage

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

import importlib
import pkgutil
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Set
from collections import defaultdict

from docval_kernels.base import Kernel, KernelClass

logger = logging.getLogger(__name__)

# Module name suffixes that never define kernels
_SKIP_SUFFIXES = ("__init__", ".base", ".registry", "__main__")


class KernelRegistry:
    """
    Discovers and manages available kernels.

    Example:
        KernelRegistry.discover()
        kernel = KernelRegistry.get_instance("pv_reconcile")
        ordered = KernelRegistry.resolve_dependencies(["pv_reconcile"])
        # ['pv_canonical', 'pv_directives', 'pv_reconcile']
    """

    _kernels: Dict[str, KernelClass] = {}
    _categories: Dict[str, List[str]] = defaultdict(list)
    _stages: Dict[int, List[str]] = defaultdict(list)
    _discovered: bool = False

    @classmethod
    def discover(cls, package_path: str = "docval_kernels") -> int:
        """
        Import every module of ``package_path`` and register its Kernel subclasses.

        Returns:
            Number of kernels registered by this call
        """
        if cls._discovered:
            logger.debug("Kernels already discovered, skipping")
            return len(cls._kernels)

        count = 0
        try:
            package = importlib.import_module(package_path)
        except ImportError as e:
            logger.error(f"Failed to import {package_path}: {e}")
            return 0

        package_dir = Path(package.__file__).parent

        for _, module_name, _ in pkgutil.walk_packages([str(package_dir)], prefix=f"{package_path}."):
            if module_name.endswith(_SKIP_SUFFIXES):
                continue

            try:
                module = importlib.import_module(module_name)
            except ImportError as e:
                logger.warning(f"Failed to import {module_name}: {e}")
                continue

            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if (
                    isinstance(attr, type)
                    and issubclass(attr, Kernel)
                    and attr is not Kernel
                    and attr.__module__ == module_name
                    and attr.name != "base"
                ):
                    cls.register(attr)
                    count += 1

        cls._discovered = True
        logger.info(f"Discovered {count} kernels in {package_path}")
        return count

    @classmethod
    def register(cls, kernel_class: KernelClass) -> None:
        """Register a kernel class; a second class under the same name is ignored with a warning."""
        name = kernel_class.name

        if name in cls._kernels:
            existing = cls._kernels[name]
            if existing is not kernel_class:
                logger.warning(
                    f"Kernel '{name}' already registered "
                    f"(existing: {existing.__module__}, new: {kernel_class.__module__})"
                )
            return

        cls._kernels[name] = kernel_class
        cls._categories[kernel_class.category].append(name)
        cls._stages[kernel_class.stage].append(name)
        logger.debug(f"Registered kernel: {name} (category={kernel_class.category}, stage={kernel_class.stage})")

    @classmethod
    def get(cls, name: str) -> KernelClass:
        """
        Raises:
            KeyError: If kernel not found
        """
        cls._ensure_discovered()
        if name not in cls._kernels:
            available = ", ".join(sorted(cls._kernels.keys()))
            raise KeyError(f"Kernel '{name}' not found. Available: {available}")
        return cls._kernels[name]

    @classmethod
    def get_instance(cls, name: str) -> Kernel:
        return cls.get(name)()

    @classmethod
    def list_all(cls) -> List[str]:
        cls._ensure_discovered()
        return sorted(cls._kernels.keys())

    @classmethod
    def list_category(cls, category: str) -> List[str]:
        cls._ensure_discovered()
        return sorted(cls._categories.get(category, []))

    @classmethod
    def list_stage(cls, stage: int) -> List[str]:
        cls._ensure_discovered()
        return sorted(cls._stages.get(stage, []))

    @classmethod
    def get_info(cls, name: str) -> Dict[str, Any]:
        kernel_class = cls.get(name)
        return {
            "name": kernel_class.name,
            "version": kernel_class.version,
            "category": kernel_class.category,
            "stage": kernel_class.stage,
            "description": kernel_class.description,
            "requires": list(kernel_class.requires),
            "provides": list(kernel_class.provides),
            "module": kernel_class.__module__,
        }

    @classmethod
    def resolve_dependencies(cls, kernel_names: List[str]) -> List[str]:
        """
        Expand ``kernel_names`` with their dependencies and sort them topologically.

        Ties are broken alphabetically so the order is deterministic.

        Raises:
            KeyError: If a kernel or dependency is unknown
            ValueError: If circular dependency detected
        """
        cls._ensure_discovered()

        all_kernels = set(kernel_names)
        to_process = list(kernel_names)
        while to_process:
            name = to_process.pop()
            for dep in cls.get(name).requires:
                if dep not in all_kernels:
                    all_kernels.add(dep)
                    to_process.append(dep)

        graph: Dict[str, Set[str]] = {name: set(cls.get(name).requires) for name in all_kernels}

        # Kahn's algorithm
        in_degree = {name: len(deps) for name, deps in graph.items()}
        queue = [name for name, degree in in_degree.items() if degree == 0]
        ordered = []

        while queue:
            queue.sort()
            name = queue.pop(0)
            ordered.append(name)
            for other, deps in graph.items():
                if name in deps:
                    in_degree[other] -= 1
                    if in_degree[other] == 0:
                        queue.append(other)

        if len(ordered) != len(all_kernels):
            remaining = sorted(all_kernels - set(ordered))
            raise ValueError(f"Circular dependency detected among: {remaining}")

        return ordered

    @classmethod
    def _ensure_discovered(cls):
        if not cls._discovered:
            cls.discover()

    @classmethod
    def reset(cls):
        """Reset the registry (mainly for testing)."""
        cls._kernels.clear()
        cls._categories.clear()
        cls._stages.clear()
        cls._discovered = False


def list_kernels(category: Optional[str] = None, stage: Optional[int] = None) -> List[str]:
    """List kernel names, optionally filtered by category or stage."""
    if category:
        return KernelRegistry.list_category(category)
    if stage is not None:
        return KernelRegistry.list_stage(stage)
    return KernelRegistry.list_all()
