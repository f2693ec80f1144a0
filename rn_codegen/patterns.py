"""
Heuristic UI role classification.

Eight independent scorers each sum a few weighted signals into a confidence
in [0, 1]; the highest one wins. All weights live in PATTERN_WEIGHTS so the
heuristic can be tuned without touching the control flow.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from rn_codegen.base import (
    NodeProperties, child_properties, iter_children, node_label, safe_extract,
)
from rn_codegen.layout import analyze_layout

logger = logging.getLogger(__name__)

PATTERN_TYPES = (
    'button', 'input', 'card', 'list-item', 'header', 'image', 'text', 'navigation', 'container',
)

PATTERN_WEIGHTS: Dict[str, Dict[str, float]] = {
    'button': {'name': 0.4, 'fill': 0.2, 'rounded': 0.2, 'text': 0.3, 'size': 0.2},
    'input': {'name': 0.5, 'paint': 0.3, 'placeholder': 0.3},
    'card': {'name': 0.3, 'shadow': 0.3, 'stroke': 0.2, 'rounded': 0.2, 'children': 0.3},
    'list-item': {'name': 0.3, 'list_parent': 0.4, 'horizontal': 0.3},
    'header': {'name': 0.4, 'top': 0.3, 'wide': 0.3},
    'image': {'image_fill': 0.9, 'name': 0.3},
    'text': {'text_node': 0.9},
    'navigation': {'name': 0.5, 'items': 0.4},
}

# A winner at or below this is not trusted and the node becomes a container
PATTERN_THRESHOLD = 0.3
CONTAINER_CONFIDENCE = 0.5
UNREADABLE_CONFIDENCE = 0.1

BUTTON_NAME = re.compile(r'button|btn|cta|submit|action')
INPUT_NAME = re.compile(r'input|field|textfield|search|email|password')
PLACEHOLDER_TEXT = re.compile(r'placeholder|enter|type|search')
CARD_NAME = re.compile(r'card|tile|item|post')
CLICKABLE_CARD_NAME = re.compile(r'clickable|tap|press|card')
LIST_ITEM_NAME = re.compile(r'item|row|cell|entry')
LIST_PARENT_NAME = re.compile(r'list|feed|scroll')
HEADER_NAME = re.compile(r'header|navbar|title|appbar')
HEADER_NAV_CHILD = re.compile(r'back|menu|search|profile|settings')
IMAGE_NAME = re.compile(r'image|img|photo|picture|avatar|icon')
NAVIGATION_NAME = re.compile(r'nav|menu|tab|bottom.*bar|navigation')

BUTTON_WIDTH_RANGE = (60, 300)
BUTTON_HEIGHT_RANGE = (32, 60)
CARD_MIN_RADIUS = 4
HEADER_MAX_Y = 100
HEADER_MIN_WIDTH = 300
ICON_MAX_SIZE = 48
ICON_MAX_SKEW = 8
NAV_WIDTH_TOLERANCE = 20
LIST_PARENT_MIN_CHILDREN = 3


@dataclass
class ComponentPattern:
    type: str
    confidence: float = 0.0
    interaction_type: str = 'static'
    is_interactive: bool = False
    has_text: bool = False
    has_image: bool = False
    properties: Dict[str, Any] = field(default_factory=dict)


@dataclass
class _Subject:
    """One node as seen by the scorers, read once."""
    node: Mapping
    props: NodeProperties
    children: List[Mapping]
    child_props: List[NodeProperties]
    parent: Optional[Mapping] = None

    @property
    def name(self) -> str:
        return self.props.lowered_name


def _weights(pattern_type: str) -> Dict[str, float]:
    return PATTERN_WEIGHTS[pattern_type]


def _clamp(value: float) -> float:
    return max(0.0, min(value, 1.0))


# ---------------------------------------------------------------------------
# Tree signals
# ---------------------------------------------------------------------------

def _field(node: Mapping, key: str) -> Any:
    """Raw field read that treats an unreadable node as empty."""
    try:
        return node.get(key)
    except Exception:
        return None


def has_text_descendant(node: Mapping) -> bool:
    for child in iter_children(node):
        if _field(child, 'type') == 'TEXT' or has_text_descendant(child):
            return True
    return False


def _has_image_fill(node: Mapping) -> bool:
    fills = _field(node, 'fills')
    if not isinstance(fills, list):
        return False
    return any(isinstance(f, Mapping) and f.get('type') == 'IMAGE' for f in fills)


def has_image_descendant(node: Mapping) -> bool:
    for child in iter_children(node):
        if _has_image_fill(child) or has_image_descendant(child):
            return True
    return False


def text_content(node: Mapping) -> str:
    """Characters of every text node under `node` (inclusive), space-joined."""
    if _field(node, 'type') == 'TEXT':
        characters = _field(node, 'characters')
        if isinstance(characters, str) and characters:
            return characters
        name = _field(node, 'name')
        return name if isinstance(name, str) else ''
    parts = [text_content(child) for child in iter_children(node)]
    return ' '.join(p for p in parts if p)


def first_text_node(node: Mapping) -> Optional[Mapping]:
    """The first TEXT node under `node` (inclusive) in depth-first order."""
    if _field(node, 'type') == 'TEXT':
        return node
    for child in iter_children(node):
        found = first_text_node(child)
        if found is not None:
            return found
    return None


def first_text(node: Mapping) -> str:
    found = first_text_node(node)
    return text_content(found) if found is not None else ''


def _has_visible_drop_shadow(props: NodeProperties) -> bool:
    return any(e.type == 'DROP_SHADOW' for e in props.visible_shadows())


def _is_horizontal_pair(child_props: List[NodeProperties]) -> bool:
    if len(child_props) < 2:
        return False
    first, second = child_props[0], child_props[1]
    if None in (first.x, first.y, second.x, second.y):
        return False
    return abs(first.x - second.x) > abs(first.y - second.y)


def _has_list_like_parent(subject: _Subject) -> bool:
    if subject.parent is None:
        return False
    parent_props = safe_extract(subject.parent)
    if parent_props is None:
        return False
    if LIST_PARENT_NAME.search(parent_props.lowered_name):
        return True

    siblings = child_properties(subject.parent)
    if len(siblings) < LIST_PARENT_MIN_CHILDREN:
        return False
    layout = analyze_layout(parent_props, siblings)
    return layout.layout_type == 'stack' or (
        layout.layout_type == 'flex' and layout.flex_direction == 'column'
    )


def _similar_item_count(children: List[Mapping]) -> int:
    """Children sharing the first child's type and, within tolerance, its width."""
    if len(children) < 2:
        return 0
    items = [safe_extract(child) for child in children]
    first = items[0]
    if first is None or first.width is None:
        return 0
    count = 0
    for props in items:
        if props is None or props.type != first.type or props.width is None:
            continue
        if abs(props.width - first.width) < NAV_WIDTH_TOLERANCE:
            count += 1
    return count


# ---------------------------------------------------------------------------
# Scorers
# ---------------------------------------------------------------------------

def _score_button(subject: _Subject) -> ComponentPattern:
    w = _weights('button')
    props = subject.props
    has_fill = bool(props.fills)
    rounded = props.corner_radius is not None and props.corner_radius > 0
    has_text = has_text_descendant(subject.node)

    confidence = 0.0
    if BUTTON_NAME.search(subject.name):
        confidence += w['name']
    if has_fill:
        confidence += w['fill']
    if rounded:
        confidence += w['rounded']
    if has_text:
        confidence += w['text']
    if props.width is not None and props.height is not None:
        if (BUTTON_WIDTH_RANGE[0] <= props.width <= BUTTON_WIDTH_RANGE[1]
                and BUTTON_HEIGHT_RANGE[0] <= props.height <= BUTTON_HEIGHT_RANGE[1]):
            confidence += w['size']

    return ComponentPattern(
        type='button',
        confidence=_clamp(confidence),
        interaction_type='touchable',
        is_interactive=True,
        has_text=has_text,
        properties={
            'has_background': has_fill,
            'has_rounded_corners': rounded,
            'text_content': text_content(subject.node),
        },
    )


def _input_type(name: str, text: str) -> str:
    haystack = name + text
    if 'password' in haystack:
        return 'password'
    if 'email' in haystack:
        return 'email'
    if re.search(r'phone|tel', haystack):
        return 'phone'
    if 'number' in haystack:
        return 'numeric'
    return 'default'


def _score_input(subject: _Subject) -> ComponentPattern:
    w = _weights('input')
    props = subject.props
    text = text_content(subject.node)

    confidence = 0.0
    if INPUT_NAME.search(subject.name):
        confidence += w['name']
    if props.strokes or props.fills:
        confidence += w['paint']
    if PLACEHOLDER_TEXT.search(text.lower()):
        confidence += w['placeholder']

    return ComponentPattern(
        type='input',
        confidence=_clamp(confidence),
        interaction_type='touchable',
        is_interactive=True,
        has_text=has_text_descendant(subject.node),
        properties={
            'placeholder': text or 'Enter text',
            'input_type': _input_type(subject.name, text.lower()),
        },
    )


def _score_card(subject: _Subject) -> ComponentPattern:
    w = _weights('card')
    props = subject.props
    has_shadow = _has_visible_drop_shadow(props)
    has_border = bool(props.strokes)

    confidence = 0.0
    if CARD_NAME.search(subject.name):
        confidence += w['name']
    if has_shadow:
        confidence += w['shadow']
    if has_border:
        confidence += w['stroke']
    if props.corner_radius is not None and props.corner_radius > CARD_MIN_RADIUS:
        confidence += w['rounded']
    if len(subject.children) >= 2:
        confidence += w['children']

    clickable = bool(CLICKABLE_CARD_NAME.search(subject.name))
    return ComponentPattern(
        type='card',
        confidence=_clamp(confidence),
        interaction_type='touchable' if clickable else 'static',
        is_interactive=clickable,
        has_text=has_text_descendant(subject.node),
        has_image=has_image_descendant(subject.node),
        properties={
            'has_elevation': has_shadow,
            'has_border': has_border,
            'children_count': len(subject.children),
        },
    )


def _score_list_item(subject: _Subject) -> ComponentPattern:
    w = _weights('list-item')
    horizontal = _is_horizontal_pair(subject.child_props)

    confidence = 0.0
    if LIST_ITEM_NAME.search(subject.name):
        confidence += w['name']
    if _has_list_like_parent(subject):
        confidence += w['list_parent']
    if horizontal:
        confidence += w['horizontal']

    return ComponentPattern(
        type='list-item',
        confidence=_clamp(confidence),
        interaction_type='touchable',
        is_interactive=True,
        has_text=has_text_descendant(subject.node),
        has_image=has_image_descendant(subject.node),
        properties={'layout': 'horizontal' if horizontal else 'vertical'},
    )


def _score_header(subject: _Subject) -> ComponentPattern:
    w = _weights('header')
    props = subject.props
    has_navigation = any(
        HEADER_NAV_CHILD.search(c.lowered_name) for c in subject.child_props
    )

    confidence = 0.0
    if HEADER_NAME.search(subject.name):
        confidence += w['name']
    if props.y is not None and props.y < HEADER_MAX_Y:
        confidence += w['top']
    if props.width is not None and props.width > HEADER_MIN_WIDTH:
        confidence += w['wide']

    return ComponentPattern(
        type='header',
        confidence=_clamp(confidence),
        interaction_type='static',
        is_interactive=has_navigation,
        has_text=has_text_descendant(subject.node),
        properties={'position': 'top', 'has_navigation': has_navigation},
    )


def _score_image(subject: _Subject) -> ComponentPattern:
    w = _weights('image')
    props = subject.props

    confidence = 0.0
    if props.type in ('RECTANGLE', 'ELLIPSE') and _has_image_fill(subject.node):
        confidence = w['image_fill']
    if IMAGE_NAME.search(subject.name):
        confidence += w['name']

    aspect_ratio = None
    if props.width is not None and props.height:
        aspect_ratio = props.width / props.height
    width, height = props.width or 0, props.height or 0
    is_icon = width <= ICON_MAX_SIZE and height <= ICON_MAX_SIZE and abs(width - height) <= ICON_MAX_SKEW

    return ComponentPattern(
        type='image',
        confidence=_clamp(confidence),
        has_image=True,
        properties={
            'aspect_ratio': aspect_ratio,
            'is_circular': props.type == 'ELLIPSE',
            'is_icon': is_icon,
        },
    )


def _text_type(font_size: Optional[float]) -> str:
    size = font_size or 16
    if size >= 24:
        return 'heading'
    if size >= 18:
        return 'subheading'
    if size >= 16:
        return 'body'
    if size >= 14:
        return 'caption'
    return 'small'


def _score_text(subject: _Subject) -> ComponentPattern:
    if subject.props.type != 'TEXT':
        return ComponentPattern(type='text')
    return ComponentPattern(
        type='text',
        confidence=_weights('text')['text_node'],
        has_text=True,
        properties={'text_type': _text_type(subject.props.font_size)},
    )


def _navigation_type(name: str, y: Optional[float]) -> str:
    if re.search(r'bottom|tab', name):
        return 'bottom-tabs'
    if re.search(r'top|header', name):
        return 'top-tabs'
    if y is not None and y < HEADER_MAX_Y:
        return 'top-navigation'
    return 'bottom-navigation'


def _score_navigation(subject: _Subject) -> ComponentPattern:
    w = _weights('navigation')

    confidence = 0.0
    if NAVIGATION_NAME.search(subject.name):
        confidence += w['name']
    if _similar_item_count(subject.children) >= 2:
        confidence += w['items']

    return ComponentPattern(
        type='navigation',
        confidence=_clamp(confidence),
        interaction_type='touchable',
        is_interactive=True,
        has_text=has_text_descendant(subject.node),
        properties={
            'navigation_type': _navigation_type(subject.name, subject.props.y),
            'item_count': len(subject.children),
        },
    )


# Order matters: on equal confidence the earlier scorer wins
SCORERS: List[Callable[[_Subject], ComponentPattern]] = [
    _score_button,
    _score_input,
    _score_card,
    _score_list_item,
    _score_header,
    _score_image,
    _score_text,
    _score_navigation,
]

_SCORER_TYPES = ('button', 'input', 'card', 'list-item', 'header', 'image', 'text', 'navigation')


def _run_scorer(scorer: Callable[[_Subject], ComponentPattern], pattern_type: str,
                subject: _Subject) -> ComponentPattern:
    try:
        return scorer(subject)
    except Exception as e:
        logger.warning("%s scorer failed on %s: %s", pattern_type, node_label(subject.node), e)
        return ComponentPattern(type=pattern_type)


def classify(node: Mapping, parent: Optional[Mapping] = None) -> ComponentPattern:
    """Guess the UI role of a node.

    Args:
        node: Raw design node.
        parent: The node's parent, when known. Only the list-item scorer uses it.

    Returns:
        The best scoring ComponentPattern, or a container when nothing clears
        PATTERN_THRESHOLD.
    """
    try:
        props = safe_extract(node)
        if props is None:
            raise ValueError('node could not be read')
        children = iter_children(node)
        subject = _Subject(
            node=node,
            props=props,
            children=children,
            child_props=child_properties(node),
            parent=parent,
        )
    except Exception as e:
        logger.warning("Cannot classify %s: %s", node_label(node), e)
        return ComponentPattern(type='container', confidence=UNREADABLE_CONFIDENCE)

    best = None
    for scorer, pattern_type in zip(SCORERS, _SCORER_TYPES):
        pattern = _run_scorer(scorer, pattern_type, subject)
        if best is None or pattern.confidence > best.confidence:
            best = pattern

    if best.confidence <= PATTERN_THRESHOLD:
        return ComponentPattern(
            type='container',
            confidence=CONTAINER_CONFIDENCE,
            has_text=has_text_descendant(node),
        )
    return best


def classify_root(node: Mapping) -> ComponentPattern:
    """classify() for a frame rendered as the top of a component.

    Root frames always sit at the top of the canvas, so only a header-like
    name keeps the header role.
    """
    pattern = classify(node)
    if pattern.type == 'header':
        props = safe_extract(node)
        if props is None or not HEADER_NAME.search(props.lowered_name):
            return ComponentPattern(
                type='container',
                confidence=CONTAINER_CONFIDENCE,
                has_text=pattern.has_text,
            )
    return pattern
