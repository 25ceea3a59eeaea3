"""Kida environment setup.

Each bundle gets its own environment, rooted at the bundle directory so
page templates can include and extend anything inside the bundle. Perch's
own templates (``perch/layout.html`` and friends) are always reachable
through a package loader, so pages may extend the browser layout to get
its breadcrumb bar.
"""

from pathlib import Path
from typing import Any

from kida import ChoiceLoader, Environment, FileSystemLoader, PackageLoader

from perch.config import AppConfig


def create_environment(config: AppConfig, bundle_path: Path | None = None) -> Environment:
    """Create a kida Environment for one bundle, or for perch alone.

    Called once per bundle when the app is built. The returned
    environment is never reconfigured afterwards.
    """
    loaders: list[Any] = []
    if bundle_path is not None:
        loaders.append(FileSystemLoader(str(bundle_path)))
    loaders.append(PackageLoader("perch.templating", "templates"))

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )
    env.add_global("perch_debug", config.debug)
    env.add_global("perch_root_url", config.url_prefix + "/")
    return env


def render_template(env: Environment, name: str, context: dict[str, Any]) -> str:
    """Render the template *name* to a string."""
    template = env.get_template(name)
    return template.render(context)
