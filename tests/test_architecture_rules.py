"""Architecture enforcement tests for the provider layer's import boundaries.

Rules validated here:
1) Vendor packages (``openai``, ``anthropic``, ``gemini``) never import each
   other. Each adapter depends on ``base`` and ``config`` only.
2) ``base`` and ``config`` never import a vendor package. The factory names
   adapter modules as strings for ``importlib``, which is not an import
   statement and is allowed.
3) Library code never imports from the test suite.

These tests are static scans (``ast``) to avoid import-time side effects,
and they emit clear failure messages for quick remediation.
"""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Iterable, List, Tuple

PACKAGE = "relay_providers"
VENDORS = ("openai", "anthropic", "gemini")
REPO_ROOT = Path(__file__).resolve().parent.parent
PACKAGE_ROOT = REPO_ROOT / PACKAGE


def _iter_python_files(root: Path) -> Iterable[Path]:
    """Yield library ``.py`` files under ``root`` (tests and caches skipped)."""
    for path in root.rglob("*.py"):
        if "__pycache__" in path.parts or "tests" in path.relative_to(root).parts:
            continue
        yield path


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def _module_parts(path: Path) -> List[str]:
    rel = path.relative_to(REPO_ROOT).with_suffix("")
    parts = list(rel.parts)
    if parts[-1] == "__init__":
        parts.pop()
    return parts


def _imported_modules(path: Path) -> Iterable[Tuple[int, str]]:
    """Yield ``(lineno, absolute module name)`` for every import in ``path``.

    Relative imports are resolved against the file's own package.
    """
    tree = ast.parse(_read_text(path), filename=str(path))
    parts = _module_parts(path)
    package = parts if path.name == "__init__.py" else parts[:-1]
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield node.lineno, alias.name
        elif isinstance(node, ast.ImportFrom):
            if node.level:
                base = package[: len(package) - (node.level - 1)]
                name = ".".join(base + ([node.module] if node.module else []))
            else:
                name = node.module or ""
            yield node.lineno, name
            for alias in node.names:
                yield node.lineno, f"{name}.{alias.name}"


def _vendor_of(module: str) -> str | None:
    parts = module.split(".")
    if len(parts) >= 2 and parts[0] == PACKAGE and parts[1] in VENDORS:
        return parts[1]
    return None


def _area_of(path: Path) -> str:
    return path.relative_to(PACKAGE_ROOT).parts[0]


def test_vendor_packages_do_not_import_each_other() -> None:
    offenders: List[str] = []
    for py in _iter_python_files(PACKAGE_ROOT):
        area = _area_of(py)
        if area not in VENDORS:
            continue
        for lineno, module in _imported_modules(py):
            vendor = _vendor_of(module)
            if vendor is not None and vendor != area:
                offenders.append(f"{py}:{lineno}: imports {module}")
    assert not offenders, "Vendor packages must stay independent:\n" + "\n".join(sorted(set(offenders)))


def test_core_does_not_import_vendor_packages() -> None:
    offenders: List[str] = []
    for py in _iter_python_files(PACKAGE_ROOT):
        if _area_of(py) not in ("base", "config"):
            continue
        for lineno, module in _imported_modules(py):
            if _vendor_of(module) is not None:
                offenders.append(f"{py}:{lineno}: imports {module}")
    assert not offenders, "base/config must not depend on vendor adapters:\n" + "\n".join(sorted(set(offenders)))


def test_library_does_not_import_tests() -> None:
    offenders: List[str] = []
    for py in _iter_python_files(PACKAGE_ROOT):
        for lineno, module in _imported_modules(py):
            if module.startswith(f"{PACKAGE}.tests"):
                offenders.append(f"{py}:{lineno}: imports {module}")
    assert not offenders, "Library modules must not import the test suite:\n" + "\n".join(sorted(set(offenders)))


def test_factory_registers_every_vendor() -> None:
    """Every vendor package is reachable through the factory's lazy mapping."""
    src = _read_text(PACKAGE_ROOT / "base" / "factory.py")
    for vendor in VENDORS:
        assert f"{PACKAGE}.{vendor}.client" in src
