"""
Email templates rendered with Jinja2 (HTML autoescaping on).
"""

from __future__ import annotations

from typing import Any

from jinja2 import DictLoader, Environment, select_autoescape

CONTACT_TEMPLATE = "contact.html"

_TEMPLATES = {
    CONTACT_TEMPLATE: (
        "<html><body>"
        "<h2>{{ subject }}</h2>"
        "{% for line in message.splitlines() %}<p>{{ line }}</p>{% endfor %}"
        "</body></html>"
    ),
}

_env = Environment(
    loader=DictLoader(_TEMPLATES),
    autoescape=select_autoescape(default=True, default_for_string=True),
)


def render(name: str, **context: Any) -> str:
    return _env.get_template(name).render(**context)
