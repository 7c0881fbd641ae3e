"""Catalogue of human-readable log templates keyed by (domain, action).

Templates live in ``event_templates.json`` as ``{domain: {action: text}}``.
Each template's ``{placeholder}`` names are parsed once at load time so a log
call can be checked against the context it supplies.
"""

from __future__ import annotations

import json
import string
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

TEMPLATES_PATH = Path(__file__).with_name("event_templates.json")


@dataclass(frozen=True)
class EventTemplate:
    text: str
    fields: frozenset[str]

    @classmethod
    def parse(cls, text: str) -> EventTemplate:
        """Raises ValueError on unbalanced or positional placeholders."""
        fields = set()
        for _, name, _, _ in string.Formatter().parse(text):
            if name is None:
                continue
            core = name.split(".", 1)[0].split("[", 1)[0]
            if not core or core.isdigit():
                raise ValueError(f"positional placeholder in {text!r}")
            fields.add(core)
        return cls(text=text, fields=frozenset(fields))

    def render(self, context: Mapping[str, object]) -> str:
        if not self.fields.issubset(context):
            return self.text
        return self.text.format(**context)


class EventCatalog:
    def __init__(self, templates: Mapping[tuple[str, str], EventTemplate] | None = None):
        self.templates: dict[tuple[str, str], EventTemplate] = dict(templates or {})
        self.problems: list[str] = []

    @classmethod
    def from_file(cls, path: Path = TEMPLATES_PATH) -> EventCatalog:
        catalog = cls()
        catalog.load(path)
        return catalog

    def load(self, path: Path) -> None:
        """Replace the templates with the contents of ``path``.

        Unreadable files and malformed entries are recorded in ``problems``
        instead of raising; logging must keep working without templates.
        """
        self.templates = {}
        self.problems = []
        try:
            with path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            self.problems.append(f"missing template file {path}")
            return
        except (OSError, ValueError) as e:
            self.problems.append(f"unreadable template file {path}: {e}"[:200])
            return
        if not isinstance(raw, Mapping):
            self.problems.append(f"template file {path} is not an object")
            return
        for domain, actions in raw.items():
            if not isinstance(actions, Mapping):
                self.problems.append(f"domain {domain!r} is not an object")
                continue
            for action, text in actions.items():
                if not isinstance(text, str):
                    self.problems.append(f"{domain}.{action} is not a string")
                    continue
                try:
                    self.templates[(domain, action)] = EventTemplate.parse(text)
                except ValueError as e:
                    self.problems.append(f"{domain}.{action}: {e}")

    def get(self, domain: str, action: str) -> EventTemplate | None:
        return self.templates.get((domain, action))

    def missing_fields(
        self, domain: str, action: str, context: Mapping[str, object] | set[str]
    ) -> frozenset[str]:
        """Placeholders of the template that ``context`` does not provide."""
        template = self.get(domain, action)
        if template is None:
            return frozenset()
        keys = context.keys() if isinstance(context, Mapping) else context
        return template.fields - set(keys)

    def render(
        self, domain: str, action: str, context: Mapping[str, object]
    ) -> str | None:
        """Formatted text, the raw template when fields are missing, or None."""
        template = self.get(domain, action)
        if template is None:
            return None
        return template.render(context)


catalog = EventCatalog.from_file()

__all__ = ["EventCatalog", "EventTemplate", "TEMPLATES_PATH", "catalog"]
