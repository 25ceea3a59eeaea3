"""Perch: a development-time browser for a bundle's static templates.

Point it at installed bundles and browse their ``Resources/views/static``
folders: folders are listed, ``page.html`` renders ``page.html.twig``,
and ``page.html.twig`` shows the template source.

Basic usage::

    from perch import App, AppConfig, BundleConfig

    app = App(AppConfig(
        debug=True,
        bundles_dir="bundles",
        bundles={"demo": BundleConfig("DemoBundle")},
    ))
    app.run()
"""

__version__ = "0.1.0-dev"
__all__ = [
    "App",
    "AppConfig",
    "BundleConfig",
    "BundleRegistry",
    "ConfigurationError",
    "PerchError",
    "UnknownBundleError",
    "load_config",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name == "App":
        from perch.app import App

        return App

    if name in ("AppConfig", "BundleConfig", "load_config"):
        from perch import config as _config

        return getattr(_config, name)

    if name == "BundleRegistry":
        from perch.bundles import BundleRegistry

        return BundleRegistry

    if name in ("ConfigurationError", "PerchError", "UnknownBundleError"):
        from perch import errors as _errors

        return getattr(_errors, name)

    raise AttributeError(f"module 'perch' has no attribute {name!r}")
