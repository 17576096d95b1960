"""Built-in diagram templates."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping


class TemplateNotFoundError(KeyError):
    """Raised when a template name is not one of the built-in templates."""


DIAGRAM_TEMPLATES: Mapping[str, str] = MappingProxyType(
    {
        "flowchart": """flowchart TD
    A[Start] --> B{Is it working?}
    B -->|Yes| C[Great!]
    B -->|No| D[Debug]
    D --> B""",
        "sequence": """sequenceDiagram
    participant Alice
    participant Bob
    Alice->>John: Hello John, how are you?
    loop Healthcheck
        John->>John: Fight against hypochondria
    end
    Note right of John: Rational thoughts <br/>prevail!
    John-->>Alice: Great!
    John->>Bob: How about you?
    Bob-->>John: Jolly good!""",
        "class": """classDiagram
    Animal <|-- Duck
    Animal <|-- Fish
    Animal <|-- Zebra
    Animal : +int age
    Animal : +String gender
    Animal: +isMammal()
    Animal: +mate()
    class Duck{
        +String beakColor
        +swim()
        +quack()
    }""",
        "er": """erDiagram
    CUSTOMER ||--o{ ORDER : places
    ORDER ||--|{ LINE-ITEM : contains
    CUSTOMER }|..|{ DELIVERY-ADDRESS : uses""",
        "gantt": """gantt
    title A Gantt Diagram
    dateFormat  YYYY-MM-DD
    section Section
    A task           :a1, 2014-01-01, 30d
    Another task     :after a1  , 20d
    section Another
    Task in sec      :2014-01-12  , 12d
    another task      : 24d""",
        "git": """gitGraph
    commit
    commit
    branch develop
    checkout develop
    commit
    commit
    checkout main
    merge develop
    commit
    commit""",
    }
)


def available_templates() -> list[str]:
    return list(DIAGRAM_TEMPLATES)


def get_template(name: str) -> str:
    """Return the source text of a built-in template.

    Args:
        name: Template name (e.g. "flowchart")

    Returns:
        Diagram source text
    """
    try:
        return DIAGRAM_TEMPLATES[name]
    except KeyError:
        raise TemplateNotFoundError(name) from None
