"""
Kernel base classes for docval.

A kernel is one deterministic step of a documentation check:

1. Pure computation: no network, no hidden state
2. Deterministic: same input gives the same data
3. Traceable: every run persists its data, a summary and an input hash
4. Composable: kernels declare the kernels they depend on

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional, Type
from datetime import datetime
import hashlib
import json
import logging

logger = logging.getLogger(__name__)

SUMMARY_MAX_CHARS = 500


@dataclass
class KernelInput:
    """Standard input for any kernel.

    Attributes:
        workspace: Check workspace root directory (outputs go to stage{N}/)
        config: Kernel configuration (``docs``, ``catalog``, ``values`` ...)
        dependencies: Output files of the kernels this one requires
    """
    workspace: Path
    config: Dict[str, Any]
    dependencies: Dict[str, Path] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.workspace, str):
            self.workspace = Path(self.workspace)
        self.dependencies = {k: Path(v) for k, v in self.dependencies.items()}


@dataclass
class KernelOutput:
    """Standard output from any kernel.

    ``data`` is the full JSON-serializable result, ``summary`` a short
    human-readable line for the console, ``output_file`` where ``data`` was
    persisted. Failures carry ``success=False`` and the messages in ``errors``.
    """
    success: bool
    data: Dict[str, Any]
    summary: str
    output_file: Path

    # Traceability
    kernel_name: str
    kernel_version: str
    execution_time_ms: int
    input_hash: str
    dependencies_used: List[str]

    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def load_kernel_data(path: Path) -> Dict[str, Any]:
    """Read the ``data`` payload persisted by ``Kernel.run``."""
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise RuntimeError(f"Cannot read kernel output {path}: {e}") from e
    if not payload.get("_meta", {}).get("success", False):
        raise RuntimeError(f"Dependency output {path} records a failed run")
    return payload.get("data", {})


class Kernel(ABC):
    """
    Abstract base class for docval kernels.

    Subclasses set ``name``, ``version``, ``category``, ``stage``,
    ``requires`` and ``provides``, and implement ``compute()`` and
    ``summarize()``.

    Example:
        class CountKernel(Kernel):
            name = "count"
            stage = 1

            def compute(self, input: KernelInput) -> Dict[str, Any]:
                return {"count": 3}

            def summarize(self, data: Dict[str, Any]) -> str:
                return f"{data['count']} item(s)."
    """

    name: str = "base"
    version: str = "1.0.0"
    category: str = "base"
    stage: int = 0
    description: str = "Base kernel"

    requires: List[str] = []   # Kernel names this depends on
    provides: List[str] = []   # Capabilities offered to later stages

    @abstractmethod
    def compute(self, input: KernelInput) -> Dict[str, Any]:
        """
        Core computation. Must be deterministic.

        Raises:
            RuntimeError: If inputs are missing or unreadable
        """

    @abstractmethod
    def summarize(self, data: Dict[str, Any]) -> str:
        """One or two lines describing ``data`` (truncated to 500 characters)."""

    def validate_input(self, input: KernelInput) -> List[str]:
        """Return validation errors (empty if valid). Override to add checks."""
        errors = []

        if not input.workspace.exists():
            errors.append(f"Workspace does not exist: {input.workspace}")

        for dep in self.requires:
            if dep not in input.dependencies:
                errors.append(f"Missing required dependency: {dep}")
            elif not input.dependencies[dep].exists():
                errors.append(f"Dependency file does not exist: {input.dependencies[dep]}")

        return errors

    def output_path(self, workspace: Path) -> Path:
        return workspace / f"stage{self.stage}" / f"{self.name}.json"

    def run(self, input: KernelInput) -> KernelOutput:
        """
        Validate, compute, summarize and persist. Do NOT override.
        """
        start_time = datetime.now()
        warnings = []
        errors = []
        output_file = self.output_path(input.workspace)

        validation_errors = self.validate_input(input)
        if validation_errors:
            for err in validation_errors:
                logger.error(f"[{self.name}] Validation error: {err}")
            return KernelOutput(
                success=False,
                data={"validation_errors": validation_errors},
                summary=f"Kernel {self.name} failed validation: {validation_errors[0]}",
                output_file=output_file,
                kernel_name=self.name,
                kernel_version=self.version,
                execution_time_ms=0,
                input_hash="",
                dependencies_used=[],
                errors=validation_errors,
            )

        input_hash = self._hash_input(input)
        logger.info(f"[{self.name}] Starting computation (input_hash={input_hash[:8]})")

        try:
            data = self.compute(input)
            summary = self.summarize(data)
            if len(summary) > SUMMARY_MAX_CHARS:
                summary = summary[:SUMMARY_MAX_CHARS - 3] + "..."
                warnings.append(f"Summary truncated to {SUMMARY_MAX_CHARS} characters")
            success = True
            logger.info(f"[{self.name}] Computation successful")

        except (RuntimeError, ValueError, TypeError, KeyError, OSError) as e:
            logger.error(f"[{self.name}] Computation failed: {e}")
            data = {"error": str(e), "error_type": type(e).__name__}
            summary = f"Kernel {self.name} failed: {str(e)[:100]}"
            success = False
            errors.append(str(e))

        execution_time_ms = int((datetime.now() - start_time).total_seconds() * 1000)

        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_data = {
            "_meta": {
                "kernel_name": self.name,
                "kernel_version": self.version,
                "execution_time_ms": execution_time_ms,
                "input_hash": input_hash,
                "timestamp": datetime.now().isoformat(),
                "success": success,
            },
            "data": data,
        }
        output_file.write_text(json.dumps(output_data, indent=2, default=str), encoding="utf-8")
        output_file.with_suffix(".summary.txt").write_text(summary, encoding="utf-8")

        logger.info(f"[{self.name}] Output saved to {output_file} ({execution_time_ms}ms)")

        return KernelOutput(
            success=success,
            data=data,
            summary=summary,
            output_file=output_file,
            kernel_name=self.name,
            kernel_version=self.version,
            execution_time_ms=execution_time_ms,
            input_hash=input_hash,
            dependencies_used=sorted(input.dependencies.keys()),
            warnings=warnings,
            errors=errors,
        )

    def _hash_input(self, input: KernelInput) -> str:
        """16-hex-digit SHA256 prefix over kernel identity, config and dependency paths."""
        content = json.dumps({
            "kernel": f"{self.name}@{self.version}",
            "config": input.config,
            "dependencies": {k: str(v) for k, v in sorted(input.dependencies.items())},
        }, sort_keys=True, default=str)
        return hashlib.sha256(content.encode()).hexdigest()[:16]

    def __repr__(self) -> str:
        return f"<Kernel {self.name}@{self.version} stage={self.stage}>"


KernelClass = Type[Kernel]
