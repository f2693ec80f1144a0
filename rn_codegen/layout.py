"""
Layout inference for container nodes.

Auto-layout frames map straight onto flexbox. Manually positioned frames are
inspected for a grid (two or more quantized rows and columns) or an evenly
spaced vertical stack; everything else is absolutely positioned.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Mapping, Optional

from rn_codegen.base import NodeProperties, child_properties, js_round, safe_extract

logger = logging.getLogger(__name__)

JUSTIFY_MAP = {
    'MIN': 'flex-start',
    'CENTER': 'center',
    'MAX': 'flex-end',
    'SPACE_BETWEEN': 'space-between',
}

ALIGN_MAP = {
    'MIN': 'flex-start',
    'CENTER': 'center',
    'MAX': 'flex-end',
    'STRETCH': 'stretch',
}

SCROLLABLE_NAME = re.compile(r'scroll|list|feed|content', re.IGNORECASE)
SCROLLABLE_MIN_HEIGHT = 800

GRID_MIN_CHILDREN = 4
GRID_QUANTUM = 10
STACK_MAX_VARIATION = 0.5


@dataclass
class EdgeInsets:
    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0

    @property
    def is_zero(self) -> bool:
        return not (self.top or self.right or self.bottom or self.left)


@dataclass
class LayoutAnalysis:
    layout_type: str = 'absolute'
    flex_direction: Optional[str] = None
    justify_content: Optional[str] = None
    align_items: Optional[str] = None
    spacing: Optional[float] = None
    gap: Optional[float] = None
    padding: Optional[EdgeInsets] = None
    is_scrollable: bool = False
    flex_wrap: Optional[str] = None


def is_scrollable(props: NodeProperties) -> bool:
    if SCROLLABLE_NAME.search(props.name or ''):
        return True
    return props.height is not None and props.height > SCROLLABLE_MIN_HEIGHT


def _auto_layout(props: NodeProperties) -> LayoutAnalysis:
    analysis = LayoutAnalysis(
        layout_type='flex',
        flex_direction='row' if props.layout_mode == 'HORIZONTAL' else 'column',
        justify_content=JUSTIFY_MAP.get(props.primary_axis_align, 'flex-start'),
        align_items=ALIGN_MAP.get(props.counter_axis_align, 'flex-start'),
        is_scrollable=is_scrollable(props),
    )

    if props.item_spacing is not None:
        analysis.spacing = props.item_spacing
        analysis.gap = props.item_spacing

    edges = (props.padding_top, props.padding_right, props.padding_bottom, props.padding_left)
    if any(edge is not None for edge in edges):
        analysis.padding = EdgeInsets(
            top=props.padding_top or 0,
            right=props.padding_right or 0,
            bottom=props.padding_bottom or 0,
            left=props.padding_left or 0,
        )

    return analysis


def is_grid(children: List[NodeProperties]) -> bool:
    """At least four positioned children spread over two or more rows and columns."""
    positions = [(c.x, c.y) for c in children if c.x is not None and c.y is not None]
    if len(positions) < GRID_MIN_CHILDREN:
        return False

    rows = {js_round(y / GRID_QUANTUM) * GRID_QUANTUM for _, y in positions}
    columns = {js_round(x / GRID_QUANTUM) * GRID_QUANTUM for x, _ in positions}
    return len(rows) >= 2 and len(columns) >= 2


def is_stack(children: List[NodeProperties]) -> bool:
    """Children laid out top to bottom with roughly even gaps."""
    ys = sorted(c.y for c in children if c.y is not None)
    if len(ys) < 2:
        return False

    gaps = [b - a for a, b in zip(ys, ys[1:])]
    mean_gap = sum(gaps) / len(gaps)
    return max(gaps) - min(gaps) < mean_gap * STACK_MAX_VARIATION


def analyze_layout(props: NodeProperties, children: List[NodeProperties]) -> LayoutAnalysis:
    """Infer how a container arranges its children.

    Args:
        props: The container's extracted properties.
        children: Extracted properties of its children, in document order.

    Returns:
        LayoutAnalysis; 'absolute' when anything goes wrong.
    """
    try:
        if props.has_auto_layout:
            return _auto_layout(props)

        scrollable = is_scrollable(props)
        if children:
            if is_grid(children):
                return LayoutAnalysis(
                    layout_type='grid',
                    flex_direction='row',
                    flex_wrap='wrap',
                    is_scrollable=scrollable,
                )
            if is_stack(children):
                return LayoutAnalysis(
                    layout_type='stack',
                    flex_direction='column',
                    is_scrollable=scrollable,
                )

        return LayoutAnalysis(layout_type='absolute', is_scrollable=scrollable)
    except Exception as e:
        logger.warning("Layout analysis failed for %r: %s", getattr(props, 'name', None), e)
        return LayoutAnalysis(layout_type='absolute')


def analyze_node_layout(node: Mapping) -> LayoutAnalysis:
    """analyze_layout() straight from a raw node."""
    props = safe_extract(node)
    if props is None:
        return LayoutAnalysis(layout_type='absolute')
    return analyze_layout(props, child_properties(node))
