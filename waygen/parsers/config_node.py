r"""
Reading and writing brace-delimited config nodes.

    RANDOM_WAYPOINT_NEAR
    {
        targetBody = Terra
        name = Outpost
        name = Relay
        nearIndex = 0
        maxDistance = 5000
    }

Keys may repeat; repeated keys form lists. Values are kept as strings
and converted by the consumer. `//` starts a comment, so written values
escape backslashes, slashes, line breaks, tabs and edge spaces
(`\\`, `\/`, `\n`, `\r`, `\t`, `\s`); any other backslash is literal.
"""

import re
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from ..procedural.validation import ConfigSyntaxError

_ESCAPES = {"\\": "\\\\", "/": "\\/", "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_UNESCAPES = {"\\": "\\", "/": "/", "n": "\n", "r": "\r", "t": "\t", "s": " "}
_ESCAPE_RE = re.compile(r"\\([\\/nrts])")


def escape_value(value: str) -> str:
    """Escape a value so it reads back unchanged from config text."""
    escaped = "".join(_ESCAPES.get(c, c) for c in value)
    core = escaped.strip(" ")
    if not core:
        return "\\s" * len(escaped)
    lead = len(escaped) - len(escaped.lstrip(" "))
    trail = len(escaped) - len(escaped.rstrip(" "))
    return "\\s" * lead + core + "\\s" * trail


def unescape_value(text: str) -> str:
    return _ESCAPE_RE.sub(lambda m: _UNESCAPES[m.group(1)], text)


# --- Formatting Helpers ---
def _format_value(val: Any) -> str:
    """Helper function to format Python values into config-compatible strings."""
    if val is None:
        return ""
    if isinstance(val, bool):
        return str(val)
    if isinstance(val, str):
        return val
    if isinstance(val, (int, float)):
        # Emit integer-like floats without a decimal point
        fv = float(val)
        if fv.is_integer():
            return str(int(fv))
        return str(fv)
    return str(val)


def _format_vector(vec: Sequence[float]) -> str:
    """Format a 3-element sequence as a vector string."""
    formatted = [_format_value(float(v)).replace('e', 'E') for v in vec]
    while len(formatted) < 3:
        formatted.append('0')
    return f"({formatted[0]}, {formatted[1]}, {formatted[2]})"


def _format_block(name: str, content_str: str, indent_level: int = 1) -> str:
    """Helper function to format a block with correct indentation."""
    indent = "\t" * indent_level
    eol = "\n"
    if not content_str.strip():
        return f"{indent}{name}{eol}{indent}{{{eol}{indent}}}{eol}"
    return f"{indent}{name}{eol}{indent}{{{eol}{content_str}{indent}}}{eol}"


def parse_vector(text: str) -> Tuple[float, float, float]:
    """Parse '(x, y, z)' or 'x,y,z' into a float triple."""
    parts = [p.strip() for p in text.strip().strip("()").split(",")]
    if len(parts) != 3:
        raise ValueError(f"expected 3 components, got {len(parts)}")
    return float(parts[0]), float(parts[1]), float(parts[2])


def parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in ("true", "yes", "1"):
        return True
    if lowered in ("false", "no", "0"):
        return False
    raise ValueError(f"'{text}' is not a boolean")


class ConfigNode:
    """A named node holding ordered key/value pairs and child nodes."""

    def __init__(self, name: str, values: Optional[List[Tuple[str, str]]] = None,
                 nodes: Optional[List["ConfigNode"]] = None):
        self.name = name
        self.values: List[Tuple[str, str]] = values or []
        self.nodes: List["ConfigNode"] = nodes or []

    def __repr__(self):
        return f"ConfigNode({self.name!r}, values={len(self.values)}, nodes={len(self.nodes)})"

    # --- Values ---
    def add_value(self, key: str, value: Any):
        if isinstance(value, tuple):
            self.values.append((key, _format_vector(value)))
        else:
            self.values.append((key, _format_value(value)))

    def has_value(self, key: str) -> bool:
        return any(k == key for k, _ in self.values)

    def get_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        for k, v in self.values:
            if k == key:
                return v
        return default

    def get_values(self, key: str) -> List[str]:
        return [v for k, v in self.values if k == key]

    def keys(self) -> List[str]:
        seen: List[str] = []
        for k, _ in self.values:
            if k not in seen:
                seen.append(k)
        return seen

    # --- Child nodes ---
    def add_node(self, node: "ConfigNode") -> "ConfigNode":
        self.nodes.append(node)
        return node

    def get_nodes(self, name: Optional[str] = None) -> List["ConfigNode"]:
        if name is None:
            return list(self.nodes)
        return [n for n in self.nodes if n.name == name]

    def __iter__(self) -> Iterator["ConfigNode"]:
        return iter(self.nodes)

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "ConfigNode":
        """
        Build a node from a dict.

        Lists become repeated keys, tuples become vectors, dicts (or lists of
        dicts) become child nodes named by their key.
        """
        node = cls(name)
        for key, value in data.items():
            if isinstance(value, dict):
                node.add_node(cls.from_dict(key, value))
            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, dict):
                        node.add_node(cls.from_dict(key, item))
                    else:
                        node.add_value(key, item)
            else:
                node.add_value(key, value)
        return node


def format_config_node(node: ConfigNode, indent_level: int = 0) -> str:
    """Serialize a node (and its children) to text."""
    inner = "\t" * (indent_level + 1)
    content = "".join(f"{inner}{key} = {escape_value(value)}\n" for key, value in node.values)
    content += "".join(format_config_node(child, indent_level + 1) for child in node.nodes)
    return _format_block(node.name, content, indent_level)


def parse_config_text(text: str, root_name: str = "root") -> ConfigNode:
    """
    Parse config text into a root node containing the top-level entries.

    Raises:
        ConfigSyntaxError: On unbalanced braces or stray lines
    """
    root = ConfigNode(root_name)
    stack: List[ConfigNode] = [root]
    pending_name: Optional[str] = None

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("//", 1)[0].strip()
        if not line:
            continue

        # Node names never hold '=', so a value may end with a brace
        if "=" in line:
            if pending_name is not None:
                raise ConfigSyntaxError(f"expected '{{' after '{pending_name}'", lineno)
            key, value = line.split("=", 1)
            stack[-1].values.append((key.strip(), unescape_value(value.strip())))
            continue

        # Allow "NAME {" and "{" on their own lines
        opens = line.endswith("{")
        if opens:
            line = line[:-1].strip()
            if line:
                if pending_name is not None:
                    raise ConfigSyntaxError(f"node '{pending_name}' has no body", lineno)
                pending_name = line
            if pending_name is None:
                raise ConfigSyntaxError("'{' without a node name", lineno)
            stack.append(stack[-1].add_node(ConfigNode(pending_name)))
            pending_name = None
            continue

        if pending_name is not None:
            raise ConfigSyntaxError(f"expected '{{' after '{pending_name}'", lineno)

        if line == "}":
            if len(stack) == 1:
                raise ConfigSyntaxError("unexpected '}'", lineno)
            stack.pop()
        else:
            pending_name = line

    if pending_name is not None:
        raise ConfigSyntaxError(f"node '{pending_name}' has no body")
    if len(stack) != 1:
        raise ConfigSyntaxError(f"unclosed node '{stack[-1].name}'")
    return root
