"""Template rendering.

Page bodies are rendered with Jinja2 from templates bundled in the
package. Autoescape is on for HTML templates.
"""

from typing import Any, Protocol

from jinja2 import Environment, PackageLoader, select_autoescape


class Renderer(Protocol):
    """Protocol for the render collaborator."""

    def render(self, template: str, context: dict[str, Any]) -> str: ...


class TemplateRenderer:
    """Renders page templates shipped with the package."""

    def __init__(self, environment: Environment | None = None) -> None:
        self._env = environment or Environment(
            loader=PackageLoader("folio", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @property
    def environment(self) -> Environment:
        return self._env

    def render(self, template: str, context: dict[str, Any]) -> str:
        """Render a template.

        Raises:
            jinja2.TemplateNotFound: If the template doesn't exist
        """
        return self._env.get_template(template).render(**context)
