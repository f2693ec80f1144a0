"""
React Native code generator.

Two full walks over the design tree: the markup pass dispatches every node to
an emitter by its ComponentPattern and records imports, handlers and state on
the GenerationContext; the style pass fills the StyleSheet registry. Both
passes go through _resolve() and style_name(), so every styles.X the markup
references has an entry in the sheet.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from rn_codegen.base import (
    MAX_DEPTH, NodeProperties, iter_children, js_round, js_string, node_label, safe_extract,
)
from rn_codegen.devices import DeviceInfo
from rn_codegen.layout import LayoutAnalysis, analyze_layout
from rn_codegen.patterns import (
    ComponentPattern, classify, classify_root, first_text, first_text_node,
)
from rn_codegen.theme_generator import format_number
from rn_codegen.tokens import ThemeTokens
from rn_codegen.visual import (
    VisualProperties, analyze_text, extract_visual_properties, shadow_style,
)

logger = logging.getLogger(__name__)

INDENT = '  '
ROOT_DEPTH = 2
SCREEN_STYLE = 'scrollContainer'
PLACEHOLDER_TEXT_COLOR = '#999999'

RESPONSIVE_DEPENDENCY = 'react-native-responsive-screen'
NAVIGATION_DEPENDENCY = '@react-navigation/native'

# Patterns whose emitters render their children
NESTING_PATTERNS = ('card', 'header', 'navigation', 'container', 'list-item')

KEYBOARD_TYPES = {
    'email': 'email-address',
    'phone': 'phone-pad',
    'numeric': 'numeric',
}

JSX_ESCAPES = {
    '<': '&lt;',
    '>': '&gt;',
    '&': '&amp;',
    '"': '&quot;',
    "'": '&#39;',
    '{': '&#123;',
    '}': '&#125;',
}

BUTTON_BACKGROUND = '#007AFF'
BUTTON_TEXT_COLOR = '#FFFFFF'
INPUT_BORDER_COLOR = '#E0E0E0'
CARD_BACKGROUND = '#FFFFFF'
HEADER_TEXT_COLOR = '#000000'


class GenerationError(ValueError):
    """The caller asked for output it did not supply the inputs for."""


class GenerationOptions(BaseModel):
    """Switches for one generate() call."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    emit_static_types: bool = Field(
        default=True,
        description="Emit TypeScript annotations (React.FC, typed helpers)",
    )
    use_responsive_scaling: bool = Field(
        default=True,
        description="Wrap sizes in scale()/verticalScale()/moderateScale() based on the base device",
    )
    use_theme_token_references: bool = Field(
        default=False,
        description="Reference COLORS/SPACING from ./theme where a token has the literal value",
    )
    component_kind: Literal['screen', 'component', 'section'] = Field(
        default='screen',
        description="'screen' wraps the markup in a ScrollView",
    )
    include_navigation_shell: bool = Field(
        default=False,
        description="Take a navigation prop and navigate from navigation items",
    )
    output_layout: Literal['single-file', 'split-styles'] = Field(
        default='single-file',
        description="'split-styles' moves the StyleSheet into a separate module",
    )


@dataclass
class GenerationContext:
    """Per-call generation state. Registries are insertion ordered and cleared by reset()."""
    component_name: str
    options: GenerationOptions = field(default_factory=GenerationOptions)
    base_device: Optional[DeviceInfo] = None
    theme_tokens: Optional[ThemeTokens] = None
    imports: List[str] = field(default_factory=list)
    handlers: Dict[str, str] = field(default_factory=dict)
    state: Dict[str, str] = field(default_factory=dict)
    styles: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def reset(self) -> None:
        self.imports.clear()
        self.handlers.clear()
        self.state.clear()
        self.styles.clear()

    def use(self, *components: str) -> None:
        for component in components:
            if component not in self.imports:
                self.imports.append(component)

    def add_handler(self, name: str, body: str) -> str:
        """Register a press handler and return the name to call it by.

        Handlers with the same name and body are shared; a different body
        under a taken name gets a numbered name.
        """
        handler, n = name, 2
        while handler in self.handlers and self.handlers[handler] != body:
            handler = f'{name}{n}'
            n += 1
        self.handlers.setdefault(handler, body)
        return handler

    def add_state(self, value: str, setter: str) -> None:
        self.state.setdefault(value, f"const [{value}, {setter}] = useState('');")

    def add_style(self, name: str, style: Dict[str, Any]) -> None:
        # Same-named nodes share one key: the last one wins, the first position is kept
        self.styles[name] = style


@dataclass
class GeneratedComponent:
    code: str
    imports: List[str]
    dependencies: List[str]
    styles_code: Optional[str] = None


class Expr(str):
    """A JavaScript expression, rendered without quotes."""


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------

def to_pascal_case(text: Optional[str]) -> str:
    return ''.join(w[0].upper() + w[1:] for w in re.findall(r'[A-Za-z0-9]+', text or ''))


def to_camel_case(text: Optional[str]) -> str:
    pascal = to_pascal_case(text)
    return pascal[:1].lower() + pascal[1:]


def pattern_identifier(pattern_type: str) -> str:
    """'list-item' -> 'listItem'."""
    return to_camel_case(pattern_type)


def style_name(name: Optional[str], pattern_type: str) -> str:
    """StyleSheet key for a node: its lowercased alphanumerics, else the pattern."""
    base = re.sub(r'[^a-zA-Z0-9]', '', name or '').lower()
    prefix = pattern_identifier(pattern_type)
    if not base:
        return prefix
    if base[0].isdigit():
        return prefix + base
    return base


def component_identifier(name: Optional[str]) -> str:
    pascal = to_pascal_case(name)
    if not pascal:
        return 'GeneratedComponent'
    if pascal[0].isdigit():
        return 'Component' + pascal
    return pascal


def escape_jsx(text: str) -> str:
    return ''.join(JSX_ESCAPES.get(ch, ch) for ch in text)


def _comment_safe(text: str) -> str:
    return text.replace('*/', '* /')


# ---------------------------------------------------------------------------
# Node resolution (shared by both passes)
# ---------------------------------------------------------------------------

@dataclass
class _ResolvedNode:
    props: NodeProperties
    pattern: ComponentPattern
    style: str
    level: int


def _is_visible(node: Mapping) -> bool:
    try:
        return node.get('visible', True) is not False
    except Exception:
        # unreadable children still get a placeholder
        return True


def _visible_children(node: Mapping) -> List[Mapping]:
    return [child for child in iter_children(node) if _is_visible(child)]


def _resolve(node: Mapping, parent: Optional[Mapping], level: int) -> Optional[_ResolvedNode]:
    props = safe_extract(node)
    if props is None:
        return None
    pattern = classify_root(node) if level == 0 else classify(node, parent)
    return _ResolvedNode(
        props=props,
        pattern=pattern,
        style=style_name(props.name, pattern.type),
        level=level,
    )


def _layout(node: Mapping, props: NodeProperties) -> LayoutAnalysis:
    children = [p for p in map(safe_extract, _visible_children(node)) if p is not None]
    return analyze_layout(props, children)


def _node_name(node: Mapping) -> str:
    props = safe_extract(node)
    return (props.name or '') if props is not None else ''


# ---------------------------------------------------------------------------
# Markup pass
# ---------------------------------------------------------------------------

def _press_handler(name: str, fallback: str, context: GenerationContext,
                   navigate: bool = False) -> str:
    identifier = to_pascal_case(name) or to_pascal_case(fallback)
    handler = f'handle{identifier}Press'
    if navigate:
        body = f"    navigation.navigate('{identifier}');"
    else:
        body = f"    console.log('{js_string(name or fallback)} pressed');"
    return context.add_handler(handler, body)


def _render_children(node: Mapping, depth: int, level: int,
                     context: GenerationContext) -> List[str]:
    lines = []
    for child in _visible_children(node):
        markup = _render_node(child, node, depth, level, context)
        if markup:
            lines.append(markup)
    return lines


def _emit_button(node: Mapping, resolved: _ResolvedNode, depth: int, context: GenerationContext,
                 in_navigation: bool) -> str:
    context.use('TouchableOpacity')
    i = INDENT * depth
    name = resolved.props.name or ''
    navigate = in_navigation and context.options.include_navigation_shell
    handler = _press_handler(name, 'button', context, navigate=navigate)
    label = escape_jsx(first_text(node) or name or 'Button')
    return '\n'.join([
        f'{i}<TouchableOpacity',
        f'{i}  style={{styles.{resolved.style}}}',
        f'{i}  onPress={{{handler}}}',
        f'{i}  activeOpacity={{0.7}}',
        f'{i}>',
        f'{i}  <Text style={{styles.{resolved.style}Text}}>{label}</Text>',
        f'{i}</TouchableOpacity>',
    ])


def _emit_input(node: Mapping, resolved: _ResolvedNode, depth: int, context: GenerationContext,
                in_navigation: bool) -> str:
    context.use('TextInput')
    i = INDENT * depth
    base = to_pascal_case(resolved.props.name) or 'Input'
    if base[0].isdigit():
        base = 'Input' + base
    value = f'{base[0].lower()}{base[1:]}Value'
    setter = f'set{base}Value'
    context.add_state(value, setter)

    properties = resolved.pattern.properties
    placeholder = escape_jsx(properties.get('placeholder') or 'Enter text')
    lines = [
        f'{i}<TextInput',
        f'{i}  style={{styles.{resolved.style}}}',
        f'{i}  placeholder="{placeholder}"',
        f'{i}  value={{{value}}}',
        f'{i}  onChangeText={{{setter}}}',
        f'{i}  placeholderTextColor="{PLACEHOLDER_TEXT_COLOR}"',
    ]
    input_type = properties.get('input_type')
    if input_type == 'password':
        lines.append(f'{i}  secureTextEntry')
    elif input_type in KEYBOARD_TYPES:
        lines.append(f'{i}  keyboardType="{KEYBOARD_TYPES[input_type]}"')
    lines.append(f'{i}/>')
    return '\n'.join(lines)


def _emit_card(node: Mapping, resolved: _ResolvedNode, depth: int, context: GenerationContext,
               in_navigation: bool) -> str:
    i = INDENT * depth
    if resolved.pattern.is_interactive:
        context.use('TouchableOpacity')
        handler = _press_handler(resolved.props.name or '', 'card', context)
        opening = [
            f'{i}<TouchableOpacity',
            f'{i}  style={{styles.{resolved.style}}}',
            f'{i}  onPress={{{handler}}}',
            f'{i}  activeOpacity={{0.9}}',
            f'{i}>',
        ]
        closing = f'{i}</TouchableOpacity>'
    else:
        opening = [f'{i}<View style={{styles.{resolved.style}}}>']
        closing = f'{i}</View>'

    children = _render_children(node, depth + 1, resolved.level + 1, context)
    return '\n'.join(opening + children + [closing])


def _emit_text(node: Mapping, resolved: _ResolvedNode, depth: int, context: GenerationContext,
               in_navigation: bool) -> str:
    props = resolved.props
    analysis = analyze_text(props.type, props, props.name)
    content = analysis.content if analysis is not None else (props.characters or props.name)
    i = INDENT * depth
    return f'{i}<Text style={{styles.{resolved.style}}}>{escape_jsx(content or "Text")}</Text>'


def _emit_image(node: Mapping, resolved: _ResolvedNode, depth: int, context: GenerationContext,
                in_navigation: bool) -> str:
    context.use('Image')
    i = INDENT * depth
    width = js_round(resolved.props.width or 100)
    height = js_round(resolved.props.height or 100)
    return '\n'.join([
        f'{i}<Image',
        f"{i}  source={{{{ uri: 'https://via.placeholder.com/{width}x{height}' }}}}",
        f'{i}  style={{styles.{resolved.style}}}',
        f'{i}  resizeMode="cover"',
        f'{i}/>',
    ])


def _emit_header(node: Mapping, resolved: _ResolvedNode, depth: int, context: GenerationContext,
                 in_navigation: bool) -> str:
    i = INDENT * depth
    lines = [f'{i}<View style={{styles.{resolved.style}}}>']
    if _visible_children(node):
        lines.extend(_render_children(node, depth + 1, resolved.level + 1, context))
    else:
        title = escape_jsx(resolved.props.name or 'Header')
        lines.append(f'{i}  <Text style={{styles.{resolved.style}Text}}>{title}</Text>')
    lines.append(f'{i}</View>')
    return '\n'.join(lines)


def _render_navigation_item(child: Mapping, parent: Mapping, depth: int, level: int,
                            context: GenerationContext) -> str:
    if classify(child, parent).type == 'button':
        return _render_node(child, parent, depth, level, context, in_navigation=True)

    context.use('TouchableOpacity')
    handler = _press_handler(_node_name(child), 'tab', context, navigate=True)
    i = INDENT * depth
    inner = _render_node(child, parent, depth + 1, level, context)
    return '\n'.join([f'{i}<TouchableOpacity onPress={{{handler}}}>', inner, f'{i}</TouchableOpacity>'])


def _emit_navigation(node: Mapping, resolved: _ResolvedNode, depth: int, context: GenerationContext,
                     in_navigation: bool) -> str:
    i = INDENT * depth
    lines = [f'{i}<View style={{styles.{resolved.style}}}>']
    if context.options.include_navigation_shell:
        for child in _visible_children(node):
            lines.append(_render_navigation_item(child, node, depth + 1, resolved.level + 1, context))
    else:
        lines.extend(_render_children(node, depth + 1, resolved.level + 1, context))
    lines.append(f'{i}</View>')
    return '\n'.join(lines)


def _emit_container(node: Mapping, resolved: _ResolvedNode, depth: int, context: GenerationContext,
                    in_navigation: bool) -> str:
    i = INDENT * depth
    layout = _layout(node, resolved.props)
    tag = 'ScrollView' if layout.is_scrollable else 'View'
    context.use(tag)

    children = _render_children(node, depth + 1, resolved.level + 1, context)
    if not children:
        return f'{i}<{tag} style={{styles.{resolved.style}}} />'
    return '\n'.join([f'{i}<{tag} style={{styles.{resolved.style}}}>'] + children + [f'{i}</{tag}>'])


EMITTERS: Dict[str, Callable[..., str]] = {
    'button': _emit_button,
    'input': _emit_input,
    'card': _emit_card,
    'text': _emit_text,
    'image': _emit_image,
    'header': _emit_header,
    'navigation': _emit_navigation,
    'container': _emit_container,
    'list-item': _emit_container,
}


def _render_node(node: Mapping, parent: Optional[Mapping], depth: int, level: int,
                 context: GenerationContext, in_navigation: bool = False) -> str:
    if level > MAX_DEPTH:
        return ''
    try:
        resolved = _resolve(node, parent, level)
        if resolved is None:
            raise ValueError('node could not be read')
        emitter = EMITTERS.get(resolved.pattern.type, _emit_container)
        return emitter(node, resolved, depth, context, in_navigation)
    except Exception as e:
        logger.warning("Could not generate markup for %s: %s", node_label(node), e)
        return f'{INDENT * depth}{{/* {_comment_safe(node_label(node))} could not be generated */}}'


# ---------------------------------------------------------------------------
# Style pass
# ---------------------------------------------------------------------------

def _scaled(value: float, scaler: str, context: GenerationContext) -> Any:
    if context.options.use_responsive_scaling:
        return Expr(f'{scaler}({format_number(value)})')
    return value


def _spacing(value: float, scaler: str, context: GenerationContext) -> Any:
    token = None
    if context.options.use_theme_token_references and context.theme_tokens is not None:
        token = context.theme_tokens.spacing_named(value)
    inner = f'SPACING.{token}' if token else format_number(value)
    if context.options.use_responsive_scaling:
        return Expr(f'{scaler}({inner})')
    return Expr(inner) if token else value


def _color(value: str, context: GenerationContext) -> Any:
    if context.options.use_theme_token_references and context.theme_tokens is not None:
        token = context.theme_tokens.color_named(value)
        if token:
            return Expr(f'COLORS.{token}')
    return value


def _layout_style(layout: LayoutAnalysis, context: GenerationContext) -> Dict[str, Any]:
    style: Dict[str, Any] = {}
    if layout.layout_type == 'flex':
        style['flexDirection'] = layout.flex_direction or 'column'
        if layout.justify_content:
            style['justifyContent'] = layout.justify_content
        if layout.align_items:
            style['alignItems'] = layout.align_items
        if layout.gap:
            style['gap'] = _spacing(layout.gap, 'scale', context)
        if layout.padding is not None and not layout.padding.is_zero:
            style['paddingTop'] = _spacing(layout.padding.top, 'verticalScale', context)
            style['paddingRight'] = _spacing(layout.padding.right, 'scale', context)
            style['paddingBottom'] = _spacing(layout.padding.bottom, 'verticalScale', context)
            style['paddingLeft'] = _spacing(layout.padding.left, 'scale', context)
    elif layout.layout_type == 'grid':
        style['flexDirection'] = 'row'
        style['flexWrap'] = 'wrap'
    elif layout.layout_type == 'stack':
        style['flexDirection'] = 'column'
    return style


def _visual_style(visual: VisualProperties, context: GenerationContext) -> Dict[str, Any]:
    style: Dict[str, Any] = {}
    if visual.background_color:
        style['backgroundColor'] = _color(visual.background_color, context)
    if visual.border_radius:
        style['borderRadius'] = _scaled(visual.border_radius, 'moderateScale', context)
    if visual.border_color:
        style['borderWidth'] = visual.border_width
        style['borderColor'] = _color(visual.border_color, context)
    if visual.shadow is not None:
        shadow = shadow_style(visual.shadow)
        shadow['shadowColor'] = _color(shadow['shadowColor'], context)
        style.update(shadow)
    if visual.opacity is not None and visual.opacity < 1:
        style['opacity'] = visual.opacity
    if visual.rotation:
        style['transform'] = [{'rotate': f'{format_number(-visual.rotation)}deg'}]
    return style


def _text_style(props: NodeProperties, context: GenerationContext) -> Dict[str, Any]:
    analysis = analyze_text(props.type, props, props.name)
    if analysis is None:
        return {}
    style: Dict[str, Any] = {
        'fontSize': _scaled(analysis.font_size, 'moderateScale', context),
        'fontWeight': analysis.font_weight,
        'fontFamily': analysis.font_family,
        'color': _color(analysis.color, context),
        'textAlign': analysis.text_align,
    }
    if analysis.line_height:
        style['lineHeight'] = analysis.line_height
    if analysis.letter_spacing:
        style['letterSpacing'] = analysis.letter_spacing
    return style


def _apply_button_profile(style: Dict[str, Any], visual: VisualProperties, resolved: _ResolvedNode,
                          context: GenerationContext) -> None:
    if not visual.background_color:
        style['backgroundColor'] = _color(BUTTON_BACKGROUND, context)
    style['paddingVertical'] = _scaled(12, 'verticalScale', context)
    style['paddingHorizontal'] = _scaled(24, 'scale', context)
    if not visual.border_radius:
        style['borderRadius'] = _scaled(8, 'moderateScale', context)
    style['alignItems'] = 'center'
    style['justifyContent'] = 'center'


def _apply_input_profile(style: Dict[str, Any], visual: VisualProperties, resolved: _ResolvedNode,
                         context: GenerationContext) -> None:
    if not visual.border_color:
        style['borderWidth'] = 1
        style['borderColor'] = _color(INPUT_BORDER_COLOR, context)
    if not visual.border_radius:
        style['borderRadius'] = _scaled(8, 'moderateScale', context)
    style['paddingHorizontal'] = _scaled(16, 'scale', context)
    style['paddingVertical'] = _scaled(12, 'verticalScale', context)
    style['fontSize'] = _scaled(16, 'moderateScale', context)


def _apply_card_profile(style: Dict[str, Any], visual: VisualProperties, resolved: _ResolvedNode,
                        context: GenerationContext) -> None:
    if not visual.background_color:
        style['backgroundColor'] = _color(CARD_BACKGROUND, context)
    if not visual.border_radius:
        style['borderRadius'] = _scaled(12, 'moderateScale', context)
    style['padding'] = _scaled(16, 'scale', context)


def _apply_text_profile(style: Dict[str, Any], visual: VisualProperties, resolved: _ResolvedNode,
                        context: GenerationContext) -> None:
    # Text fills are the glyph color, not a background
    style.pop('backgroundColor', None)
    style.update(_text_style(resolved.props, context))


ROLE_PROFILES = {
    'button': _apply_button_profile,
    'input': _apply_input_profile,
    'card': _apply_card_profile,
    'text': _apply_text_profile,
}


def _node_style(node: Mapping, resolved: _ResolvedNode, context: GenerationContext) -> Dict[str, Any]:
    props = resolved.props
    style: Dict[str, Any] = {}
    if props.width:
        style['width'] = _scaled(props.width, 'scale', context)
    if props.height:
        style['height'] = _scaled(props.height, 'verticalScale', context)

    if resolved.pattern.type in NESTING_PATTERNS:
        style.update(_layout_style(_layout(node, props), context))

    visual = extract_visual_properties(props)
    style.update(_visual_style(visual, context))

    profile = ROLE_PROFILES.get(resolved.pattern.type)
    if profile is not None:
        profile(style, visual, resolved, context)
    return style


def _button_text_style(node: Mapping, context: GenerationContext) -> Dict[str, Any]:
    text_node = first_text_node(node)
    props = safe_extract(text_node) if text_node is not None else None
    analysis = analyze_text(props.type, props, props.name) if props is not None else None
    if analysis is None:
        return {
            'color': _color(BUTTON_TEXT_COLOR, context),
            'fontSize': _scaled(16, 'moderateScale', context),
            'fontWeight': '600',
        }
    return {
        'color': _color(analysis.color, context),
        'fontSize': _scaled(analysis.font_size, 'moderateScale', context),
        'fontWeight': analysis.font_weight,
    }


def _header_text_style(node: Mapping, context: GenerationContext) -> Dict[str, Any]:
    return {
        'fontSize': _scaled(18, 'moderateScale', context),
        'fontWeight': '600',
        'color': _color(HEADER_TEXT_COLOR, context),
    }


def _guarded(builder: Callable[..., Dict[str, Any]], node: Mapping, *args) -> Dict[str, Any]:
    try:
        return builder(node, *args)
    except Exception as e:
        logger.warning("Style for %s left empty: %s", node_label(node), e)
        return {}


def _collect_styles(node: Mapping, parent: Optional[Mapping], level: int,
                    context: GenerationContext) -> None:
    if level > MAX_DEPTH:
        return
    try:
        resolved = _resolve(node, parent, level)
    except Exception as e:
        logger.warning("Skipping style for %s: %s", node_label(node), e)
        return
    if resolved is None:
        return

    pattern_type = resolved.pattern.type
    context.add_style(resolved.style, _guarded(_node_style, node, resolved, context))

    if pattern_type == 'button':
        context.add_style(f'{resolved.style}Text', _guarded(_button_text_style, node, context))
    elif pattern_type == 'header' and not _visible_children(node):
        context.add_style(f'{resolved.style}Text', _guarded(_header_text_style, node, context))

    if pattern_type in NESTING_PATTERNS:
        for child in _visible_children(node):
            _collect_styles(child, node, level + 1, context)


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------

def _render_value(value: Any) -> str:
    if isinstance(value, Expr):
        return str(value)
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, str):
        return f"'{js_string(value)}'"
    if isinstance(value, dict):
        return '{ ' + ', '.join(f'{k}: {_render_value(v)}' for k, v in value.items()) + ' }'
    if isinstance(value, list):
        return '[' + ', '.join(_render_value(v) for v in value) + ']'
    raise TypeError(f"Cannot render style value {value!r}")


def render_style_sheet(styles: Dict[str, Dict[str, Any]], export: bool = False) -> str:
    lines = [f"{'export ' if export else ''}const styles = StyleSheet.create({{"]
    for name, style in styles.items():
        if not style:
            lines.append(f'  {name}: {{}},')
            continue
        lines.append(f'  {name}: {{')
        for key, value in style.items():
            lines.append(f'    {key}: {_render_value(value)},')
        lines.append('  },')
    lines.append('});')
    return '\n'.join(lines)


def responsive_helpers(base_device: DeviceInfo, typed: bool = True) -> str:
    size = 'size: number' if typed else 'size'
    factor = 'factor: number = 0.5' if typed else 'factor = 0.5'
    return '\n'.join([
        "const { width: SCREEN_WIDTH, height: SCREEN_HEIGHT } = Dimensions.get('window');",
        '',
        f'const scale = ({size}) => (SCREEN_WIDTH / {base_device.width}) * size;',
        f'const verticalScale = ({size}) => (SCREEN_HEIGHT / {base_device.height}) * size;',
        f'const moderateScale = ({size}, {factor}) => size + (scale(size) - size) * factor;',
    ])


def _native_import(components: List[str]) -> str:
    body = ''.join(f'  {c},\n' for c in components)
    return f"import {{\n{body}}} from 'react-native';"


def _component_signature(name: str, options: GenerationOptions) -> str:
    if options.include_navigation_shell:
        if options.emit_static_types:
            return f'const {name}: React.FC<{{ navigation: any }}> = ({{ navigation }}) => {{'
        return f'const {name} = ({{ navigation }}) => {{'
    if options.emit_static_types:
        return f'const {name}: React.FC = () => {{'
    return f'const {name} = () => {{'


def _component_body(name: str, markup: str, context: GenerationContext) -> str:
    lines = [_component_signature(name, context.options)]
    for declaration in context.state.values():
        lines.append(f'  {declaration}')
    if context.state:
        lines.append('')
    for handler, body in context.handlers.items():
        lines.append(f'  const {handler} = () => {{\n{body}\n  }};')
        lines.append('')

    lines.append('  return (')
    if context.options.component_kind == 'screen':
        lines.append(
            f'    <ScrollView style={{styles.{SCREEN_STYLE}}} showsVerticalScrollIndicator={{false}}>'
        )
        lines.append(markup)
        lines.append('    </ScrollView>')
    else:
        lines.append(markup)
    lines.append('  );')
    lines.append('};')
    return '\n'.join(lines)


def _styles_preamble(context: GenerationContext) -> List[str]:
    """Theme import and helpers that the StyleSheet literal depends on."""
    sections = []
    if context.options.use_theme_token_references:
        sections.append("import { COLORS, SPACING } from './theme';")
    if context.options.use_responsive_scaling:
        sections.append(responsive_helpers(context.base_device, context.options.emit_static_types))
    return sections


def _dependencies(options: GenerationOptions) -> List[str]:
    dependencies = []
    if options.use_responsive_scaling:
        dependencies.append(RESPONSIVE_DEPENDENCY)
    if options.include_navigation_shell:
        dependencies.append(NAVIGATION_DEPENDENCY)
    return dependencies


def _assemble(name: str, markup: str, context: GenerationContext) -> GeneratedComponent:
    react_import = "import React, { useState } from 'react';" if context.state else "import React from 'react';"
    body = _component_body(name, markup, context)

    if context.options.output_layout == 'split-styles':
        style_primitives = [c for c in ('Dimensions', 'StyleSheet') if c in context.imports]
        component_imports = [c for c in context.imports if c not in style_primitives]
        code = '\n\n'.join([
            '\n'.join([react_import, _native_import(component_imports),
                       f"import {{ styles }} from './{name}.styles';"]),
            body,
            f'export default {name};',
        ]) + '\n'
        styles_code = '\n\n'.join(
            [_native_import(style_primitives)]
            + _styles_preamble(context)
            + [render_style_sheet(context.styles, export=True)]
        ) + '\n'
        return GeneratedComponent(
            code=code,
            imports=component_imports,
            dependencies=_dependencies(context.options),
            styles_code=styles_code,
        )

    header = [react_import, _native_import(context.imports)]
    sections = ['\n'.join(header)] + _styles_preamble(context)
    sections += [body, render_style_sheet(context.styles), f'export default {name};']
    return GeneratedComponent(
        code='\n\n'.join(sections) + '\n',
        imports=list(context.imports),
        dependencies=_dependencies(context.options),
    )


def generate(root_node: Mapping, context: GenerationContext) -> GeneratedComponent:
    """Generate a React Native component for a design subtree.

    Args:
        root_node: Raw design node to render; it becomes the component's root.
        context: Generation state and options. Its registries are reset first.

    Returns:
        GeneratedComponent with the source text, the react-native primitives
        it imports and the npm packages it assumes.

    Raises:
        GenerationError: Theme references requested without theme tokens, or
            responsive scaling requested without a base device.
    """
    options = context.options
    if options.use_theme_token_references and context.theme_tokens is None:
        raise GenerationError(
            "Theme token references need theme tokens. Extract design tokens first."
        )
    if options.use_responsive_scaling and context.base_device is None:
        raise GenerationError(
            "Responsive scaling needs a base device. Detect devices first or disable responsive scaling."
        )

    context.reset()
    name = component_identifier(context.component_name)

    context.use('View', 'Text', 'StyleSheet')
    if options.use_responsive_scaling:
        context.use('Dimensions')
    if options.component_kind == 'screen':
        context.use('ScrollView')

    root_depth = ROOT_DEPTH + 1 if options.component_kind == 'screen' else ROOT_DEPTH
    markup = _render_node(root_node, None, root_depth, 0, context)

    if options.component_kind == 'screen':
        context.add_style(SCREEN_STYLE, {'flex': 1})
    _collect_styles(root_node, None, 0, context)

    component = _assemble(name, markup, context)
    logger.info(
        "Generated %s: %d styles, %d handlers, %d state variables",
        name, len(context.styles), len(context.handlers), len(context.state),
    )
    return component
