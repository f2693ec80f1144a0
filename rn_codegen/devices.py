"""
Device profile detection.

Matches screen frames against a table of common phone, tablet and desktop
sizes and picks the base device that responsive scaling is computed from.
"""

import logging
import re
from typing import Dict, Iterator, List, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from rn_codegen.base import iter_children, js_round, node_label, safe_extract

logger = logging.getLogger(__name__)

DEVICE_PRESETS: Dict[str, List[tuple]] = {
    'mobile': [
        ('iPhone SE', 375, 667),
        ('iPhone 8', 375, 667),
        ('iPhone X/11/12/13 Mini', 375, 812),
        ('iPhone 14/15', 393, 852),
        ('iPhone Pro', 414, 896),
        ('iPhone Pro Max', 428, 926),
        ('Android Small', 360, 640),
        ('Android Medium', 412, 892),
        ('Pixel', 411, 731),
    ],
    'tablet': [
        ('iPad', 768, 1024),
        ('iPad Pro 11"', 834, 1194),
        ('iPad Pro 12.9"', 1024, 1366),
        ('Android Tablet', 800, 1280),
    ],
    'desktop': [
        ('Desktop Small', 1024, 768),
        ('Desktop Medium', 1440, 900),
        ('Desktop Large', 1920, 1080),
    ],
}

MATCH_TOLERANCE = 5
BASE_WIDTH = 375
BASE_HEIGHT = 667

SCREEN_NAME = re.compile(r'screen|page|view|layout|mobile|tablet|desktop|iphone|ipad|android')
TYPE_ORDER = {'mobile': 0, 'tablet': 1, 'desktop': 2}

DeviceType = Literal['mobile', 'tablet', 'desktop']
DeviceCategory = Literal['small_phone', 'normal_phone', 'large_phone', 'tablet', 'desktop']


class DeviceInfo(BaseModel):
    """A screen size a design was drawn for."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    aspect_ratio: float
    orientation: Literal['portrait', 'landscape']
    type: DeviceType
    category: DeviceCategory
    is_base_device: bool = False


class MobileBreakpoints(BaseModel):
    small: int
    normal: int
    large: int


class ResponsiveBreakpoints(BaseModel):
    mobile: MobileBreakpoints
    tablet: int
    desktop: int


DEFAULT_BASE_DEVICE = DeviceInfo(
    id='default',
    name='iPhone 8 (Default)',
    width=BASE_WIDTH,
    height=BASE_HEIGHT,
    aspect_ratio=BASE_WIDTH / BASE_HEIGHT,
    orientation='portrait',
    type='mobile',
    category='normal_phone',
    is_base_device=True,
)


def match_known_device(width: float, height: float) -> Optional[str]:
    """Name of the first preset within tolerance, in either orientation."""
    for presets in DEVICE_PRESETS.values():
        for name, preset_w, preset_h in presets:
            if abs(preset_w - width) <= MATCH_TOLERANCE and abs(preset_h - height) <= MATCH_TOLERANCE:
                return name
            if abs(preset_h - width) <= MATCH_TOLERANCE and abs(preset_w - height) <= MATCH_TOLERANCE:
                return name
    return None


def device_type(width: float, height: float) -> str:
    smallest = min(width, height)
    if smallest >= 1024:
        return 'desktop'
    if smallest >= 768:
        return 'tablet'
    return 'mobile'


def device_category(width: float, height: float) -> str:
    smallest = min(width, height)
    if smallest >= 768:
        return 'tablet'
    if smallest >= 414:
        return 'large_phone'
    if smallest >= 375:
        return 'normal_phone'
    return 'small_phone'


def detect(frame: Mapping) -> DeviceInfo:
    """Describe the device a frame was sized for.

    Raises:
        ValueError: If the frame has no usable width and height.
    """
    props = safe_extract(frame)
    if props is None or not props.width or not props.height:
        raise ValueError(f"Frame {node_label(frame)!r} has no size")

    width, height = js_round(props.width), js_round(props.height)
    return DeviceInfo(
        id=props.id or '',
        name=match_known_device(width, height) or props.name or 'Unnamed frame',
        width=width,
        height=height,
        aspect_ratio=width / height,
        orientation='landscape' if width > height else 'portrait',
        type=device_type(width, height),
        category=device_category(width, height),
    )


def is_screen_frame(frame: Mapping) -> bool:
    """Whether a top-level frame looks like a whole screen rather than a component."""
    props = safe_extract(frame)
    if props is None or props.width is None or props.height is None:
        return False

    smallest, largest = min(props.width, props.height), max(props.width, props.height)
    sized_like_device = match_known_device(props.width, props.height) is not None
    reasonable_size = smallest >= 300 and largest >= 600 and largest <= 2000
    screen_name = bool(SCREEN_NAME.search(props.lowered_name))
    complex_layout = len(iter_children(frame)) >= 2

    return (sized_like_device or reasonable_size) and (screen_name or complex_layout)


def screen_frames(document: Mapping) -> Iterator[Tuple[Mapping, Mapping]]:
    """(page, frame) for every screen-like top-level frame, in document order."""
    pages = iter_children(document) if document.get('type') == 'DOCUMENT' else [document]
    for page in pages:
        for frame in iter_children(page):
            if frame.get('type') == 'FRAME' and is_screen_frame(frame):
                yield page, frame


def scan_document(document: Mapping) -> List[DeviceInfo]:
    """Devices of every screen-like top-level frame, one per distinct size.

    Sorted mobile, tablet, desktop, then by width.
    """
    devices: List[DeviceInfo] = []
    seen = []

    for _, frame in screen_frames(document):
        try:
            device = detect(frame)
        except ValueError as e:
            logger.warning("Skipping frame: %s", e)
            continue
        key = (device.width, device.height)
        if key not in seen:
            seen.append(key)
            devices.append(device)

    return sorted(devices, key=lambda d: (TYPE_ORDER[d.type], d.width))


def select_base(devices: List[DeviceInfo]) -> DeviceInfo:
    """Pick the reference device for responsive scaling.

    An iPhone 8 sized phone wins, then the phone closest to 375 wide, then
    the first device. With no devices at all the default iPhone 8 is used.
    """
    for device in devices:
        if device.width == BASE_WIDTH and device.height == BASE_HEIGHT and device.type == 'mobile':
            return device.model_copy(update={'is_base_device': True})

    phones = [d for d in devices if d.type == 'mobile']
    if phones:
        closest = min(phones, key=lambda d: abs(d.width - BASE_WIDTH))
        return closest.model_copy(update={'is_base_device': True})

    if devices:
        return devices[0].model_copy(update={'is_base_device': True})

    return DEFAULT_BASE_DEVICE


def generate_breakpoints(devices: List[DeviceInfo]) -> ResponsiveBreakpoints:
    phones = sorted(d.width for d in devices if d.type == 'mobile')
    tablets = sorted(d.width for d in devices if d.type == 'tablet')
    desktops = sorted(d.width for d in devices if d.type == 'desktop')

    return ResponsiveBreakpoints(
        mobile=MobileBreakpoints(
            small=phones[0] if phones else 360,
            normal=phones[len(phones) // 2] if phones else 375,
            large=phones[-1] if phones else 428,
        ),
        tablet=tablets[0] if tablets else 768,
        desktop=desktops[0] if desktops else 1024,
    )


def get_scaling_factor(current: DeviceInfo, base: DeviceInfo) -> Dict[str, float]:
    """Width, height and font scale of `current` relative to `base`."""
    width_scale = current.width / base.width
    height_scale = current.height / base.height
    return {
        'width': width_scale,
        'height': height_scale,
        'font': min(width_scale, height_scale),
    }
