"""
Base helpers shared by the analyzers and the React Native generator.

Normalizes raw Figma nodes (REST or plugin shaped dicts) into flat
NodeProperties records. This is the only place that decides whether a raw
field can be trusted: values of the wrong type and the MIXED sentinel are
dropped here, so every later stage sees either a clean value or None.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

logger = logging.getLogger(__name__)

# Recursion guard for generator walks
MAX_DEPTH = 40


class _Mixed:
    """Marker for a field whose value differs across a node's children."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'MIXED'


MIXED = _Mixed()

FONT_WEIGHT_MAP = {
    'Thin': '100',
    'ExtraLight': '200',
    'Light': '300',
    'Regular': '400',
    'Medium': '500',
    'SemiBold': '600',
    'Bold': '700',
    'ExtraBold': '800',
    'Black': '900',
}

SHADOW_TYPES = ('DROP_SHADOW', 'INNER_SHADOW')


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass
class ColorValue:
    """RGBA color with channels in the 0..1 range Figma uses."""
    r: float
    g: float
    b: float
    a: float = 1.0

    @property
    def hex(self) -> str:
        return rgb_to_hex(self)

    @property
    def is_achromatic(self) -> bool:
        return _channel(self.r) == _channel(self.g) == _channel(self.b)


@dataclass
class Paint:
    type: str
    visible: bool = True
    color: Optional[ColorValue] = None
    opacity: float = 1.0

    @property
    def is_visible_solid(self) -> bool:
        return self.visible and self.type == 'SOLID' and self.color is not None


@dataclass
class Effect:
    type: str
    visible: bool = True
    color: Optional[ColorValue] = None
    offset_x: float = 0
    offset_y: float = 0
    radius: float = 0
    spread: float = 0


@dataclass
class NodeProperties:
    """Flat, optional-field copy of a design node.

    A field is None when the source omits it, holds MIXED, or holds a value
    of the wrong type. Defaults are applied by the consumer, never here.
    """
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    visible: Optional[bool] = None
    locked: Optional[bool] = None

    # Geometry
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    rotation: Optional[float] = None

    # Paint
    fills: Optional[List[Paint]] = None
    strokes: Optional[List[Paint]] = None
    stroke_weight: Optional[float] = None
    corner_radius: Optional[float] = None
    effects: Optional[List[Effect]] = None
    opacity: Optional[float] = None

    # Auto layout
    layout_mode: Optional[str] = None
    item_spacing: Optional[float] = None
    padding_top: Optional[float] = None
    padding_right: Optional[float] = None
    padding_bottom: Optional[float] = None
    padding_left: Optional[float] = None
    primary_axis_align: Optional[str] = None
    counter_axis_align: Optional[str] = None

    # Text
    characters: Optional[str] = None
    font_family: Optional[str] = None
    font_style: Optional[str] = None
    font_weight: Optional[str] = None
    font_size: Optional[float] = None
    text_align_horizontal: Optional[str] = None
    line_height: Optional[float] = None
    letter_spacing: Optional[float] = None

    @property
    def lowered_name(self) -> str:
        return (self.name or '').lower()

    @property
    def has_auto_layout(self) -> bool:
        return self.layout_mode is not None and self.layout_mode != 'NONE'

    def first_visible_solid_fill(self) -> Optional[Paint]:
        for paint in self.fills or []:
            if paint.is_visible_solid:
                return paint
        return None

    def visible_shadows(self) -> List[Effect]:
        return [e for e in self.effects or [] if e.visible and e.type in SHADOW_TYPES]


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------

def js_round(value: float) -> int:
    """Round half up, the way Math.round does (Python's round() is half-even)."""
    return int(math.floor(value + 0.5))


def js_string(text: str) -> str:
    """Escape text for a single-quoted JS string literal."""
    return text.replace('\\', '\\\\').replace("'", "\\'").replace('\n', '\\n')


def _channel(value: float) -> int:
    return js_round(max(0.0, min(1.0, value)) * 255)


def rgb_to_hex(color: ColorValue) -> str:
    """Convert a 0..1 RGB color to an uppercase #RRGGBB string, ignoring alpha."""
    return '#{:02X}{:02X}{:02X}'.format(_channel(color.r), _channel(color.g), _channel(color.b))


def map_font_weight(style: Any) -> str:
    """Map a Figma font style ('SemiBold', 'Bold Italic') or numeric weight to a CSS weight."""
    if is_number(style):
        return str(int(style))
    if not isinstance(style, str):
        return '400'
    compact = style.replace('Italic', '').replace(' ', '').replace('-', '')
    return FONT_WEIGHT_MAP.get(compact, FONT_WEIGHT_MAP.get(style, '400'))


def is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _number(source: Any, key: str) -> Optional[float]:
    if not isinstance(source, Mapping):
        return None
    value = source.get(key)
    return value if is_number(value) else None


def _string(source: Any, key: str) -> Optional[str]:
    if not isinstance(source, Mapping):
        return None
    value = source.get(key)
    return value if isinstance(value, str) else None


def _bool(source: Mapping, key: str) -> Optional[bool]:
    value = source.get(key)
    return value if isinstance(value, bool) else None


def _parse_color(raw: Any) -> Optional[ColorValue]:
    if not isinstance(raw, Mapping):
        return None
    channels = [raw.get(k) for k in ('r', 'g', 'b')]
    if not all(is_number(c) for c in channels):
        return None
    alpha = raw.get('a', 1)
    if not is_number(alpha):
        alpha = 1
    return ColorValue(r=channels[0], g=channels[1], b=channels[2], a=alpha)


def _parse_paints(raw: Any) -> Optional[List[Paint]]:
    if not isinstance(raw, list):
        return None
    paints = []
    for entry in raw:
        if not isinstance(entry, Mapping) or not isinstance(entry.get('type'), str):
            continue
        opacity = entry.get('opacity', 1)
        paints.append(Paint(
            type=entry['type'],
            visible=entry.get('visible', True) is not False,
            color=_parse_color(entry.get('color')),
            opacity=opacity if is_number(opacity) else 1,
        ))
    return paints


def _parse_effects(raw: Any) -> Optional[List[Effect]]:
    if not isinstance(raw, list):
        return None
    effects = []
    for entry in raw:
        if not isinstance(entry, Mapping) or not isinstance(entry.get('type'), str):
            continue
        offset = entry.get('offset')
        effects.append(Effect(
            type=entry['type'],
            visible=entry.get('visible', True) is not False,
            color=_parse_color(entry.get('color')),
            offset_x=_number(offset, 'x') or 0,
            offset_y=_number(offset, 'y') or 0,
            radius=_number(entry, 'radius') or 0,
            spread=_number(entry, 'spread') or 0,
        ))
    return effects


def _unit_value(raw: Any) -> Optional[float]:
    """Read a plugin-style {unit, value} measure; AUTO and unknown units are absent."""
    if not isinstance(raw, Mapping):
        return None
    if raw.get('unit') not in ('PIXELS', 'PERCENT'):
        return None
    return _number(raw, 'value')


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

def _extract_position(node: Mapping) -> tuple:
    x, y = _number(node, 'x'), _number(node, 'y')
    if x is not None and y is not None:
        return x, y

    transform = node.get('relativeTransform')
    if (isinstance(transform, list) and len(transform) >= 2
            and all(isinstance(row, list) and len(row) >= 3 for row in transform[:2])
            and is_number(transform[0][2]) and is_number(transform[1][2])):
        return transform[0][2], transform[1][2]

    bbox = node.get('absoluteBoundingBox')
    bx, by = _number(bbox, 'x'), _number(bbox, 'y')
    if bx is not None and by is not None:
        return bx, by
    return None, None


def _extract_size(node: Mapping) -> tuple:
    width, height = _number(node, 'width'), _number(node, 'height')
    if width is not None and height is not None:
        return width, height

    size = node.get('size')
    sw, sh = _number(size, 'x'), _number(size, 'y')
    if sw is not None and sh is not None:
        return sw, sh

    bbox = node.get('absoluteBoundingBox')
    return _number(bbox, 'width'), _number(bbox, 'height')


def _extract_text(node: Mapping, props: NodeProperties) -> None:
    style = node.get('style')
    font_name = node.get('fontName')

    props.characters = _string(node, 'characters')
    props.font_family = _string(font_name, 'family') or _string(style, 'fontFamily')
    props.font_style = _string(font_name, 'style')
    if props.font_style is not None:
        props.font_weight = map_font_weight(props.font_style)
    elif _number(style, 'fontWeight') is not None:
        props.font_weight = map_font_weight(style['fontWeight'])

    props.font_size = _number(node, 'fontSize')
    if props.font_size is None:
        props.font_size = _number(style, 'fontSize')
    props.text_align_horizontal = (
        _string(node, 'textAlignHorizontal') or _string(style, 'textAlignHorizontal')
    )

    line_height = _unit_value(node.get('lineHeight'))
    if line_height is None:
        line_height = _number(style, 'lineHeightPx')
    if line_height is not None and line_height > 0:
        props.line_height = line_height

    letter_spacing = _unit_value(node.get('letterSpacing'))
    if letter_spacing is None:
        letter_spacing = _number(style, 'letterSpacing')
    props.letter_spacing = letter_spacing


def extract(node: Mapping) -> NodeProperties:
    """Copy the trustworthy fields of a raw design node into NodeProperties."""
    props = NodeProperties(
        id=_string(node, 'id'),
        name=_string(node, 'name'),
        type=_string(node, 'type'),
        visible=_bool(node, 'visible'),
        locked=_bool(node, 'locked'),
    )

    props.x, props.y = _extract_position(node)
    props.width, props.height = _extract_size(node)
    props.rotation = _number(node, 'rotation')

    props.fills = _parse_paints(node.get('fills'))
    props.strokes = _parse_paints(node.get('strokes'))
    props.stroke_weight = _number(node, 'strokeWeight')
    props.corner_radius = _number(node, 'cornerRadius')
    props.effects = _parse_effects(node.get('effects'))
    opacity = _number(node, 'opacity')
    if opacity is not None and 0 <= opacity <= 1:
        props.opacity = opacity

    props.layout_mode = _string(node, 'layoutMode')
    props.item_spacing = _number(node, 'itemSpacing')
    props.padding_top = _number(node, 'paddingTop')
    props.padding_right = _number(node, 'paddingRight')
    props.padding_bottom = _number(node, 'paddingBottom')
    props.padding_left = _number(node, 'paddingLeft')
    props.primary_axis_align = _string(node, 'primaryAxisAlignItems')
    props.counter_axis_align = _string(node, 'counterAxisAlignItems')

    if props.type == 'TEXT':
        _extract_text(node, props)

    return props


# ---------------------------------------------------------------------------
# Tree helpers
# ---------------------------------------------------------------------------

def node_label(node: Any) -> str:
    """Best-effort display name for log messages; never raises."""
    try:
        name = node.get('name') if isinstance(node, Mapping) else None
    except Exception:
        name = None
    return name if isinstance(name, str) and name else '<unnamed>'


def iter_children(node: Any) -> List[Mapping]:
    """Return the node's child mappings, or [] when the node has none or cannot be read."""
    if not isinstance(node, Mapping):
        return []
    try:
        children = node.get('children')
    except Exception as e:
        logger.debug("Cannot read children of %s: %s", node_label(node), e)
        return []
    if not isinstance(children, list):
        return []
    return [child for child in children if isinstance(child, Mapping)]


def safe_extract(node: Mapping) -> Optional[NodeProperties]:
    """extract() for callers that inspect other nodes; an unreadable node becomes None."""
    try:
        return extract(node)
    except Exception as e:
        logger.warning("Skipping unreadable node %s: %s", node_label(node), e)
        return None


def child_properties(node: Mapping) -> List[NodeProperties]:
    """Extract every readable child of a node, in document order."""
    result = []
    for child in iter_children(node):
        props = safe_extract(child)
        if props is not None:
            result.append(props)
    return result
