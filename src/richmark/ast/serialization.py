#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/ast/serialization.py
"""JSON serialization and deserialization for AST nodes.

The JSON format is the mdast shape produced by ``Node.to_dict``: every
object carries a ``type`` tag, parent kinds carry a ``children`` array and
attributes appear as plain keys.

Examples
--------
Serialize AST to JSON:

    >>> from richmark.ast import Paragraph, Root, Text
    >>> from richmark.ast.serialization import ast_to_json
    >>> root = Root(children=[Paragraph(children=[Text(value="Hello")])])
    >>> ast_to_json(root)
    '{"type": "root", "children": [{"type": "paragraph", "children": [{"type": "text", "value": "Hello"}]}]}'

Deserialize JSON back to AST:

    >>> from richmark.ast.serialization import json_to_ast
    >>> json_to_ast(ast_to_json(root)) == root
    True

"""

from __future__ import annotations

import json
from dataclasses import fields
from typing import Any

from richmark.ast.nodes import NODE_CLASSES, Node
from richmark.exceptions import UnsupportedNodeError, ValidationError


def ast_to_dict(node: Node) -> dict[str, Any]:
    """Convert an AST node (and its subtree) to a dictionary.

    Parameters
    ----------
    node : Node
        Node to convert

    Returns
    -------
    dict
        mdast-shaped dictionary

    """
    return node.to_dict()


def dict_to_ast(data: dict[str, Any]) -> Node:
    """Build an AST node (and its subtree) from a dictionary.

    Parameters
    ----------
    data : dict
        mdast-shaped dictionary

    Returns
    -------
    Node
        Reconstructed node

    Raises
    ------
    ValidationError
        If ``data`` is not a dictionary with a ``type`` key, or carries keys
        the node kind does not define
    UnsupportedNodeError
        If the ``type`` tag names no known node kind

    """
    if not isinstance(data, dict) or "type" not in data:
        raise ValidationError("AST node data must be a dict with a 'type' key", parameter_value=data)

    node_type = data["type"]
    node_class = NODE_CLASSES.get(node_type)
    if node_class is None:
        raise UnsupportedNodeError(node_type, data, direction="deserialize")

    allowed = {f.name for f in fields(node_class)}  # type: ignore[arg-type]
    unknown = set(data) - allowed - {"type"}
    if unknown:
        raise ValidationError(
            f"Unknown keys for '{node_type}' node: {', '.join(sorted(unknown))}",
            parameter_name="data",
            parameter_value=data,
        )

    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key == "type":
            continue
        if key == "children":
            kwargs["children"] = [dict_to_ast(child) for child in value]
        else:
            kwargs[key] = value
    return node_class(**kwargs)


def ast_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize an AST node to a JSON string.

    Parameters
    ----------
    node : Node
        Node to serialize
    indent : int or None, default = None
        Indentation passed to ``json.dumps``

    Returns
    -------
    str
        JSON text

    """
    return json.dumps(ast_to_dict(node), indent=indent, ensure_ascii=False)


def json_to_ast(json_str: str) -> Node:
    """Deserialize an AST node from a JSON string.

    Raises
    ------
    ValidationError
        If the text is not valid JSON

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid AST JSON: {e}", parameter_name="json_str", original_error=e) from e
    return dict_to_ast(data)
