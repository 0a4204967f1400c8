"""Import checks for the server's third-party stack and route modules."""
import importlib
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

import structlog
from rich.console import Console
from rich.markup import escape

logger = structlog.get_logger(__name__)

console = Console()

DEFAULT_MODULES: Tuple[str, ...] = (
    "fastapi",
    "starlette",
    "pymongo",
    "stripe",
    "structlog",
    "httpx",
    "jinja2",
    "prometheus_client",
)

ROUTE_MODULES: Tuple[Tuple[str, str], ...] = (
    ("routes", "bringit.api.routes"),
    ("pages", "bringit.api.pages"),
    ("frontend", "bringit.api.frontend"),
    ("test server", "bringit.api.test_server"),
)


@dataclass
class ModuleCheckResult:
    name: str
    ok: bool
    error: Optional[str] = None


def _import_in_order(
    targets: Iterable[Tuple[str, str]],
    loader: Callable[[str], Any],
    out: Console,
    announce: bool,
) -> List[ModuleCheckResult]:
    """Import (label, module) pairs in order, stopping at the first failure."""
    results: List[ModuleCheckResult] = []
    for label, module_name in targets:
        if announce:
            out.print(f"Checking {label}...")
        try:
            loader(module_name)
        except Exception as e:
            logger.error(
                "module_import_failed",
                module=module_name,
                error=str(e),
                error_type=type(e).__name__,
            )
            out.print(f"[bold red]{escape(label)} failed:[/bold red] {escape(str(e))}")
            results.append(ModuleCheckResult(label, False, str(e)))
            break
        out.print(f"{label} ok")
        results.append(ModuleCheckResult(label, True))
    return results


def check_modules(
    names: Sequence[str] = DEFAULT_MODULES,
    loader: Callable[[str], Any] = importlib.import_module,
    out: Console = console,
) -> List[ModuleCheckResult]:
    """Verify third-party modules import; stops at the first failure."""
    return _import_in_order(((name, name) for name in names), loader, out, announce=False)


def check_routes(
    routes: Sequence[Tuple[str, str]] = ROUTE_MODULES,
    loader: Callable[[str], Any] = importlib.import_module,
    out: Console = console,
) -> List[ModuleCheckResult]:
    """Verify the HTTP route modules import; stops at the first failure."""
    return _import_in_order(routes, loader, out, announce=True)
