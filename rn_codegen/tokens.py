"""
Design token aggregation.

One depth-first pass over a document tallies colors, typography tuples,
spacing values and drop shadows into FrequencyTables; the tables are then
reduced into ranked, named ThemeTokens. Tables are created per scan and
returned, never kept at module level, so repeated or concurrent scans do
not see each other's counts.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from rn_codegen.base import (
    extract, iter_children, js_round, node_label, map_font_weight, NodeProperties,
)

logger = logging.getLogger(__name__)

MAX_COLOR_TOKENS = 20
MAX_TYPOGRAPHY_TOKENS = 10
MAX_SPACING_TOKENS = 15
MAX_SHADOW_TOKENS = 5
MAX_SPACING_VALUE = 200

DEFAULT_FONT_FAMILY = 'Inter'
DEFAULT_FONT_SIZE = 16

PAGE_TYPES = ('CANVAS', 'PAGE')


# ============================================================================
# Token models
# ============================================================================

class ColorToken(BaseModel):
    """A named color ranked by usage."""
    model_config = ConfigDict(frozen=True)

    name: str
    value: str = Field(..., description="Uppercase #RRGGBB")
    usage: Literal['primary', 'secondary', 'accent', 'neutral', 'semantic']


class TypographyToken(BaseModel):
    """A named (family, size, weight) text style."""
    model_config = ConfigDict(frozen=True)

    name: str
    font_family: str
    font_size: int
    font_weight: str
    usage: Literal['heading', 'body', 'caption']


class SpacingToken(BaseModel):
    """A named spacing, padding or radius value."""
    model_config = ConfigDict(frozen=True)

    name: str
    value: float
    usage: Literal['gap', 'padding', 'margin', 'radius']


class ShadowToken(BaseModel):
    """A named drop shadow."""
    model_config = ConfigDict(frozen=True)

    name: str
    color: str
    offset_x: float
    offset_y: float
    radius: float
    opacity: float


class ThemeTokens(BaseModel):
    """Reduced token set handed to the generator; plain and serializable."""
    colors: List[ColorToken] = Field(default_factory=list)
    typography: List[TypographyToken] = Field(default_factory=list)
    spacing: List[SpacingToken] = Field(default_factory=list)
    shadows: List[ShadowToken] = Field(default_factory=list)

    def color_named(self, value: str) -> Optional[str]:
        """Token name for an exact hex value, if the theme has one."""
        wanted = value.upper()
        for token in self.colors:
            if token.value == wanted:
                return token.name
        return None

    def spacing_named(self, value: float) -> Optional[str]:
        for token in self.spacing:
            if token.value == value:
                return token.name
        return None


# ============================================================================
# Frequency tables
# ============================================================================

@dataclass
class FrequencyTables:
    """Usage counts for one scan. Counter keeps first-insertion order, which breaks ties."""
    colors: Counter = field(default_factory=Counter)
    typography: Counter = field(default_factory=Counter)
    spacing: Counter = field(default_factory=Counter)
    shadows: Counter = field(default_factory=Counter)

    def clear(self) -> None:
        self.colors.clear()
        self.typography.clear()
        self.spacing.clear()
        self.shadows.clear()


def _record_colors(props: NodeProperties, tables: FrequencyTables) -> None:
    for paint in (props.fills or []) + (props.strokes or []):
        if paint.is_visible_solid:
            tables.colors[paint.color.hex] += 1


def _record_typography(props: NodeProperties, tables: FrequencyTables) -> None:
    family = props.font_family or DEFAULT_FONT_FAMILY
    size = js_round(props.font_size) if props.font_size else DEFAULT_FONT_SIZE
    weight = props.font_weight or map_font_weight(props.font_style)
    tables.typography[(family, size, weight)] += 1


def _record_spacing(props: NodeProperties, tables: FrequencyTables) -> None:
    if props.has_auto_layout:
        for value in (props.item_spacing, props.padding_top, props.padding_right,
                      props.padding_bottom, props.padding_left):
            if value is not None and value > 0:
                tables.spacing[_normalize_number(value)] += 1

    if props.corner_radius is not None:
        tables.spacing[_normalize_number(props.corner_radius)] += 1


def _record_shadows(props: NodeProperties, tables: FrequencyTables) -> None:
    for effect in props.visible_shadows():
        if effect.type != 'DROP_SHADOW' or effect.color is None:
            continue
        key = (effect.color.hex, effect.offset_x, effect.offset_y, effect.radius,
               round(effect.color.a, 2))
        tables.shadows[key] += 1


def _normalize_number(value: float) -> float:
    return int(value) if float(value).is_integer() else value


def scan_node(node: Mapping, tables: FrequencyTables) -> None:
    """Accumulate one subtree into the given tables (depth-first, document order)."""
    try:
        props = extract(node)
    except Exception as e:
        logger.debug("Skipping token read for %s: %s", node_label(node), e)
        props = None

    if props is not None:
        for recorder in (_record_colors, _record_spacing, _record_shadows):
            try:
                recorder(props, tables)
            except Exception as e:
                logger.debug("%s failed on %s: %s", recorder.__name__, node_label(node), e)
        if props.type == 'TEXT':
            try:
                _record_typography(props, tables)
            except Exception as e:
                logger.debug("Typography read failed on %s: %s", node_label(node), e)

    for child in iter_children(node):
        scan_node(child, tables)


# ============================================================================
# Reduction
# ============================================================================

def _ranked(counter: Counter, limit: Optional[int] = None) -> List[Any]:
    # sorted() is stable, so equal counts stay in first-encounter order
    keys = sorted(counter, key=lambda k: -counter[k])
    return keys if limit is None else keys[:limit]


def _unique(name: str, index: int, used: set) -> str:
    if name in used:
        name = f'{name}_{index + 1}'
    used.add(name)
    return name


def _color_name(value: str, index: int) -> str:
    if index == 0:
        return 'primary'
    if index == 1:
        return 'secondary'
    if index == 2:
        return 'accent'
    r, g, b = (int(value[i:i + 2], 16) for i in (1, 3, 5))
    if r == g == b:
        return f'gray{js_round(r / 255 * 900)}'
    return f'color{index + 1}'


def _color_usage(value: str, index: int) -> str:
    if index == 0:
        return 'primary'
    if index == 1:
        return 'secondary'
    if index == 2:
        return 'accent'
    if value in ('#FFFFFF', '#000000'):
        return 'neutral'
    return 'semantic'


def _typography_name(size: int, index: int) -> str:
    if size >= 24:
        return f'heading{index + 1}'
    if size >= 16:
        return f'body{index + 1}'
    return f'caption{index + 1}'


def _typography_usage(size: int, weight: str) -> str:
    if size >= 24 or int(weight) >= 600:
        return 'heading'
    if size >= 16:
        return 'body'
    if size <= 12:
        return 'caption'
    return 'body'


def _spacing_usage(value: float) -> str:
    if value <= 4:
        return 'gap'
    if value <= 16:
        return 'padding'
    if value <= 32:
        return 'margin'
    return 'radius'


def reduce_tables(tables: FrequencyTables) -> ThemeTokens:
    """Rank, cap and name the counted values."""
    used: set = set()

    colors = []
    for i, value in enumerate(_ranked(tables.colors, MAX_COLOR_TOKENS)):
        colors.append(ColorToken(
            name=_unique(_color_name(value, i), i, used),
            value=value,
            usage=_color_usage(value, i),
        ))

    typography = []
    for i, (family, size, weight) in enumerate(_ranked(tables.typography, MAX_TYPOGRAPHY_TOKENS)):
        typography.append(TypographyToken(
            name=_unique(_typography_name(size, i), i, used),
            font_family=family,
            font_size=size,
            font_weight=weight,
            usage=_typography_usage(size, weight),
        ))

    spacing = []
    values = [v for v in _ranked(tables.spacing) if 0 < v <= MAX_SPACING_VALUE]
    for i, value in enumerate(values[:MAX_SPACING_TOKENS]):
        spacing.append(SpacingToken(
            name=_unique(f'spacing{js_round(value / 4)}x', i, used),
            value=value,
            usage=_spacing_usage(value),
        ))

    shadows = []
    for i, (color, dx, dy, radius, alpha) in enumerate(_ranked(tables.shadows, MAX_SHADOW_TOKENS)):
        shadows.append(ShadowToken(
            name=_unique(f'shadow{i + 1}', i, used),
            color=color,
            offset_x=dx,
            offset_y=dy,
            radius=radius,
            opacity=alpha,
        ))

    return ThemeTokens(colors=colors, typography=typography, spacing=spacing, shadows=shadows)


def _pages(document_root: Mapping) -> List[Mapping]:
    if document_root.get('type') == 'DOCUMENT':
        return [p for p in iter_children(document_root) if p.get('type') in PAGE_TYPES]
    return [document_root]


def scan(document_root: Mapping, tables: Optional[FrequencyTables] = None) -> ThemeTokens:
    """Scan every page of a document (or a single subtree) and return its ThemeTokens.

    Pass `tables` to inspect raw counts afterwards; they are cleared first.
    """
    if tables is None:
        tables = FrequencyTables()
    tables.clear()

    for page in _pages(document_root):
        if page.get('type') in PAGE_TYPES:
            for top_level in iter_children(page):
                scan_node(top_level, tables)
        else:
            scan_node(page, tables)

    tokens = reduce_tables(tables)
    logger.info(
        "Extracted %d colors, %d typography styles, %d spacing values",
        len(tokens.colors), len(tokens.typography), len(tokens.spacing),
    )
    return tokens


def tokens_summary(tokens: ThemeTokens) -> Dict[str, int]:
    return {
        'colors': len(tokens.colors),
        'typography': len(tokens.typography),
        'spacing': len(tokens.spacing),
        'shadows': len(tokens.shadows),
    }
