"""
Visual and text property analysis.

Turns extracted NodeProperties into the React Native-facing values the
style pass needs: background, border, shadow and typography.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from rn_codegen.base import NodeProperties, js_round, map_font_weight

logger = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = 'Inter'
DEFAULT_FONT_SIZE = 16
DEFAULT_TEXT_COLOR = '#000000'
DEFAULT_SHADOW_OPACITY = 0.25
DEFAULT_SHADOW_RADIUS = 4

TEXT_ALIGN_MAP = {
    'LEFT': 'left',
    'CENTER': 'center',
    'RIGHT': 'right',
}

BUTTON_TEXT_NAME = re.compile(r'button|btn|cta')


@dataclass
class ShadowProperties:
    shadow_color: str
    offset_width: float
    offset_height: float
    shadow_opacity: float
    shadow_radius: float
    elevation: int


@dataclass
class VisualProperties:
    background_color: Optional[str] = None
    border_radius: Optional[float] = None
    border_color: Optional[str] = None
    border_width: Optional[float] = None
    shadow: Optional[ShadowProperties] = None
    opacity: Optional[float] = None
    rotation: Optional[float] = None


@dataclass
class TextAnalysis:
    content: str
    font_size: float = DEFAULT_FONT_SIZE
    font_weight: str = '400'
    font_family: str = DEFAULT_FONT_FAMILY
    color: str = DEFAULT_TEXT_COLOR
    text_align: str = 'left'
    line_height: Optional[float] = None
    letter_spacing: Optional[float] = None
    is_heading: bool = False
    is_button: bool = False
    is_label: bool = False

    @property
    def weight_value(self) -> int:
        return int(self.font_weight)


def _shadow(props: NodeProperties) -> Optional[ShadowProperties]:
    shadows = props.visible_shadows()
    if not shadows or shadows[0].color is None:
        return None

    effect = shadows[0]
    radius = effect.radius or DEFAULT_SHADOW_RADIUS
    return ShadowProperties(
        shadow_color=effect.color.hex,
        offset_width=effect.offset_x,
        offset_height=effect.offset_y,
        shadow_opacity=effect.color.a or DEFAULT_SHADOW_OPACITY,
        shadow_radius=radius,
        elevation=js_round(radius / 2),
    )


def extract_visual_properties(props: NodeProperties) -> VisualProperties:
    """Collect background, border, shadow, opacity and rotation for one node."""
    visual = VisualProperties()
    try:
        fill = props.first_visible_solid_fill()
        if fill is not None:
            visual.background_color = fill.color.hex

        if props.corner_radius is not None and props.corner_radius >= 0:
            visual.border_radius = props.corner_radius

        strokes = props.strokes or []
        if strokes and strokes[0].type == 'SOLID' and strokes[0].color is not None:
            visual.border_color = strokes[0].color.hex
            visual.border_width = props.stroke_weight if props.stroke_weight is not None else 1

        visual.shadow = _shadow(props)
        visual.opacity = props.opacity
        visual.rotation = props.rotation
    except Exception as e:
        logger.warning("Visual property read failed for %r: %s", props.name, e)
        return VisualProperties()

    return visual


def analyze_text(node_type: Optional[str], props: NodeProperties,
                 name: Optional[str] = None) -> Optional[TextAnalysis]:
    """Typography of a TEXT node, or None for anything else."""
    if node_type != 'TEXT':
        return None

    try:
        fill = props.first_visible_solid_fill()
        analysis = TextAnalysis(
            content=props.characters or name or props.name or '',
            font_size=props.font_size if props.font_size and props.font_size > 0 else DEFAULT_FONT_SIZE,
            font_weight=props.font_weight or map_font_weight(props.font_style),
            font_family=props.font_family or DEFAULT_FONT_FAMILY,
            color=fill.color.hex if fill is not None else DEFAULT_TEXT_COLOR,
            text_align=TEXT_ALIGN_MAP.get(props.text_align_horizontal, 'left'),
            line_height=props.line_height,
            letter_spacing=props.letter_spacing,
        )
        weight = analysis.weight_value
        analysis.is_heading = analysis.font_size >= 20 or weight >= 600
        analysis.is_button = bool(BUTTON_TEXT_NAME.search((name or props.name or '').lower())) or weight >= 600
        analysis.is_label = analysis.font_size <= 14 and weight < 600
        return analysis
    except Exception as e:
        logger.warning("Text analysis failed for %r: %s", name or props.name, e)
        return None


def shadow_style(shadow: ShadowProperties) -> Dict[str, Any]:
    """React Native shadow keys for a ShadowProperties record."""
    return {
        'shadowColor': shadow.shadow_color,
        'shadowOffset': {'width': shadow.offset_width, 'height': shadow.offset_height},
        'shadowOpacity': shadow.shadow_opacity,
        'shadowRadius': shadow.shadow_radius,
        'elevation': shadow.elevation,
    }
