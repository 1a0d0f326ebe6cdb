"""Companion documents of the generated Jekyll site."""

from __future__ import annotations

import re
from typing import Callable, List, Tuple

from jinja2 import Environment

from ..config import DocgenConfig

_THEME_LINE = re.compile(r"^remote_theme:.*$", re.MULTILINE)
_SEARCH_LINE = re.compile(r"^search_enabled:.*$", re.MULTILINE)
_HOMEPAGE_LINK = re.compile(
    r"^ {2}'(?:\S* on GitHub|Homepage)':\n {4}- '.*'$",
    re.MULTILINE,
)


def homepage_navigation_header(config: DocgenConfig) -> str:
    if "github" in config.project_homepage.lower():
        return f"{config.project_name} on GitHub"
    return "Homepage"


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


class SiteRenderer:
    """Renders the home page, modules index and ``_config.yml``."""

    def __init__(self, environment: Environment) -> None:
        self._env = environment

    def home_page(self) -> str:
        return self._env.get_template("home.md.j2").render()

    def modules_index(self) -> str:
        return self._env.get_template("modules_index.md.j2").render()

    def config_yml(self, config: DocgenConfig) -> str:
        return self._env.get_template("_config.yml.j2").render(
            theme=config.theme,
            search_enabled=_format_bool(config.enable_search),
            navigation_header=homepage_navigation_header(config),
            homepage=config.project_homepage,
        )

    @staticmethod
    def patch_config_yml(previous: str, config: DocgenConfig) -> str:
        """Update the managed fields of an existing ``_config.yml`` in place.

        Only the theme, the search flag and the homepage navigation link are
        touched; everything else is preserved byte for byte.
        """
        header = homepage_navigation_header(config)
        substitutions: List[Tuple[re.Pattern[str], Callable[[re.Match[str]], str]]] = [
            (_THEME_LINE, lambda _: f"remote_theme: {config.theme}"),
            (_SEARCH_LINE, lambda _: f"search_enabled: {_format_bool(config.enable_search)}"),
            (
                _HOMEPAGE_LINK,
                lambda _: f"  '{header}':\n    - '{config.project_homepage}'",
            ),
        ]
        patched = previous
        for pattern, replacement in substitutions:
            patched = pattern.sub(replacement, patched, count=1)
        return patched


__all__ = ["SiteRenderer", "homepage_navigation_header"]
