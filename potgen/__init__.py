"""potgen - extract translatable strings from templates and scripts into a .pot catalog."""

# Keep in sync with pyproject.toml [project] version.
__version__ = "0.1.0"
