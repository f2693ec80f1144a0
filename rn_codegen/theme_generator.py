"""
theme.ts generator.

Renders ThemeTokens as a TypeScript module that generated components import
their COLORS / SPACING references from, together with the responsive scaling
helpers parameterized by the base device.
"""

from typing import List

from rn_codegen.base import js_round, js_string
from rn_codegen.devices import DeviceInfo
from rn_codegen.tokens import ThemeTokens


def format_number(value: float) -> str:
    """JS number literal: integral floats lose their '.0'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


def _section(title: str) -> str:
    rule = '// ' + '=' * 76
    return f'{rule}\n// {title}\n{rule}'


def _colors_object(tokens: ThemeTokens) -> str:
    lines = [f"  {c.name}: '{js_string(c.value)}'," for c in tokens.colors]
    return 'export const COLORS = {\n' + '\n'.join(lines) + ('\n' if lines else '') + '};'


def _spacing_object(tokens: ThemeTokens) -> str:
    lines = [f'  {s.name}: {format_number(s.value)},' for s in tokens.spacing]
    return 'export const SPACING = {\n' + '\n'.join(lines) + ('\n' if lines else '') + '};'


def _typography_object(tokens: ThemeTokens) -> str:
    lines: List[str] = []
    for t in tokens.typography:
        lines.append(f'  {t.name}: {{')
        lines.append(f"    fontFamily: '{js_string(t.font_family)}',")
        lines.append(f'    fontSize: normalize({t.font_size}),')
        lines.append(f"    fontWeight: '{js_string(t.font_weight)}' as const,")
        lines.append('  },')
    return 'export const TYPOGRAPHY = {\n' + '\n'.join(lines) + ('\n' if lines else '') + '};'


def _shadows_object(tokens: ThemeTokens) -> str:
    lines: List[str] = []
    for s in tokens.shadows:
        lines.append(f'  {s.name}: {{')
        lines.append(f"    shadowColor: '{js_string(s.color)}',")
        lines.append(
            f'    shadowOffset: {{ width: {format_number(s.offset_x)}, '
            f'height: {format_number(s.offset_y)} }},'
        )
        lines.append(f'    shadowOpacity: {format_number(s.opacity)},')
        lines.append(f'    shadowRadius: {format_number(s.radius)},')
        lines.append(f'    elevation: {js_round(s.radius / 2)},')
        lines.append('  },')
    return 'export const SHADOWS = {\n' + '\n'.join(lines) + ('\n' if lines else '') + '};'


def _responsive_helpers(base_device: DeviceInfo) -> str:
    return f'''// Base dimensions ({base_device.name} - design reference)
const BASE_WIDTH = {base_device.width};
const BASE_HEIGHT = {base_device.height};

export const scale = (size: number): number => (SCREEN_WIDTH / BASE_WIDTH) * size;
export const verticalScale = (size: number): number => (SCREEN_HEIGHT / BASE_HEIGHT) * size;
export const moderateScale = (size: number, factor: number = 0.5): number =>
  size + (scale(size) - size) * factor;

export const getDeviceType = (): 'small_phone' | 'normal_phone' | 'large_phone' | 'tablet' => {{
  const minDimension = Math.min(SCREEN_WIDTH, SCREEN_HEIGHT);
  if (minDimension >= 768) return 'tablet';
  if (minDimension >= 414) return 'large_phone';
  if (minDimension >= 375) return 'normal_phone';
  return 'small_phone';
}};

export const normalize = (size: number): number =>
  Math.round(PixelRatio.roundToNearestPixel(moderateScale(size)));'''


def generate_theme_file(tokens: ThemeTokens, base_device: DeviceInfo) -> str:
    """Render a theme.ts module for the given tokens and base device."""
    return f'''// Generated from the Figma design system
import {{ Dimensions, PixelRatio }} from 'react-native';

const {{ width: SCREEN_WIDTH, height: SCREEN_HEIGHT }} = Dimensions.get('window');

{_responsive_helpers(base_device)}

{_section('COLORS')}
{_colors_object(tokens)}

{_section('TYPOGRAPHY')}
{_typography_object(tokens)}

{_section('SPACING')}
{_spacing_object(tokens)}

{_section('SHADOWS')}
{_shadows_object(tokens)}
'''
