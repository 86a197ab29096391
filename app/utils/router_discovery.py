import importlib
import inspect
import pkgutil

from fastapi import APIRouter, FastAPI
from loguru import logger


def discover_routers(package_name: str = "app.api") -> list[APIRouter]:
    """
    Collect the APIRouter instances defined in the modules of a package.

    Args:
        package_name: The package whose modules are scanned (not recursive).

    Returns:
        The routers, in module name order.
    """
    package = importlib.import_module(package_name)
    package_path = getattr(package, "__path__", None)
    if not package_path:
        logger.warning(f"Cannot scan {package_name} for routers as it's not a package")
        return []

    routers: list[APIRouter] = []
    for module_info in sorted(pkgutil.iter_modules(package_path), key=lambda m: m.name):
        if module_info.ispkg:
            continue

        module = importlib.import_module(f"{package_name}.{module_info.name}")
        for _, obj in inspect.getmembers(module, lambda member: isinstance(member, APIRouter)):
            routers.append(obj)
            paths = ", ".join(sorted({route.path for route in obj.routes}))  # pyright: ignore[reportAttributeAccessIssue]
            logger.debug(f"Discovered router in {module.__name__}: {paths}")

    return routers


def register_routers(app: FastAPI, prefix: str = "/api") -> None:
    """Mount every router found in app.api under prefix."""
    for router in discover_routers():
        app.include_router(router, prefix=prefix)
