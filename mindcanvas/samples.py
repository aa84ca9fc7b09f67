"""Sample trees for the CLI and tests."""
from __future__ import annotations

import copy
from typing import Any

SAMPLES: dict[str, dict[str, Any]] = {
    "project": {
        "id": "root",
        "label": "Project plan",
        "children": [
            {"id": "phase1", "label": "Phase one", "children": [
                {"id": "task1", "label": "Requirements", "children": []},
                {"id": "task2", "label": "Tech selection", "children": []},
            ]},
            {"id": "phase2", "label": "Phase two", "children": [
                {"id": "task3", "label": "Implementation", "children": []},
                {"id": "task4", "label": "Testing", "children": []},
            ]},
        ],
    },
    "knowledge": {
        "id": "root",
        "label": "Knowledge base",
        "children": [
            {"id": "frontend", "label": "Frontend", "children": [
                {"id": "html", "label": "HTML"},
                {"id": "css", "label": "CSS"},
                {"id": "js", "label": "JavaScript", "children": [
                    {"id": "es6", "label": "ES6+"},
                    {"id": "ts", "label": "TypeScript"},
                ]},
            ]},
            {"id": "backend", "label": "Backend", "children": [
                {"id": "python", "label": "Python"},
                {"id": "db", "label": "Databases"},
            ]},
            {"id": "ops", "label": "Operations", "children": [
                {"id": "ci", "label": "CI/CD"},
            ]},
            {"id": "design", "label": "Design"},
        ],
    },
    "styled": {
        "id": "root",
        "label": "Shapes",
        "children": [
            {"id": "rect", "label": "Rectangle", "style": {"shape": "rect"}},
            {"id": "circle", "label": "Circle", "style": {"shape": "circle", "backgroundColor": "#ef5350"}},
            {"id": "ellipse", "label": "Ellipse", "style": {"shape": "ellipse"}},
            {"id": "diamond", "label": "Diamond", "style": {"shape": "diamond", "borderStyle": "dashed"}},
            {"id": "hexagon", "label": "Hexagon", "style": {"shape": "hexagon", "borderColor": "#ab47bc"}},
        ],
    },
}


def get_sample(name: str) -> dict[str, Any]:
    """Deep copy of a named sample tree; KeyError if unknown."""
    return copy.deepcopy(SAMPLES[name])
