#!/usr/bin/env python3
"""
Figma React Native MCP Server - Model Context Protocol server that turns Figma
designs into React Native code.

This server provides tools to:
- Extract ranked design tokens (colors, typography, spacing, shadows)
- Detect the device sizes a file was designed for
- List the screen frames that can be generated
- Generate a theme.ts module from the extracted tokens
- Generate React Native components (JSX + StyleSheet) from Figma nodes

All analysis and generation happens in the rn_codegen package on a fully
fetched file snapshot; this module only talks to the Figma REST API.
"""

import os
import re
import sys
import json
import logging
from typing import Optional, Dict, Any, Literal
from enum import Enum

import httpx
from pydantic import BaseModel, Field, field_validator, ConfigDict
from mcp.server.fastmcp import FastMCP

from rn_codegen.devices import detect, scan_document, screen_frames, select_base, generate_breakpoints
from rn_codegen.patterns import classify
from rn_codegen.react_native_generator import (
    GenerationContext, GenerationOptions, generate, component_identifier,
)
from rn_codegen.theme_generator import generate_theme_file
from rn_codegen.tokens import scan, tokens_summary

# ============================================================================
# Constants
# ============================================================================

FIGMA_API_BASE = "https://api.figma.com/v1"
CHARACTER_LIMIT = 25000
DEFAULT_TIMEOUT = 30.0
LOG_LEVEL_ENV = "FIGMA_RN_LOG_LEVEL"

logger = logging.getLogger("figma_rn_mcp")

# ============================================================================
# Initialize MCP Server
# ============================================================================

mcp = FastMCP("figma_rn_mcp")

# ============================================================================
# Enums and Types
# ============================================================================

class ResponseFormat(str, Enum):
    """Output format for tool responses."""
    MARKDOWN = "markdown"
    JSON = "json"


def _extract_file_key(v: str) -> str:
    # Extract file key from URL if full URL provided
    if 'figma.com' in v:
        match = re.search(r'figma\.com/(?:design|file)/([a-zA-Z0-9]+)', v)
        if match:
            return match.group(1)
        raise ValueError("Could not extract file key from Figma URL")
    return v


# ============================================================================
# Pydantic Input Models
# ============================================================================

class FigmaDesignTokensInput(BaseModel):
    """Input model for design token extraction."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    file_key: str = Field(
        ...,
        description="Figma file key (from URL: figma.com/design/FILE_KEY/...)",
        min_length=10,
        max_length=50
    )
    node_id: Optional[str] = Field(
        default=None,
        description="Optional node ID to extract tokens from a single frame instead of the whole file"
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.JSON,
        description="Output format: 'markdown' or 'json'"
    )

    @field_validator('file_key')
    @classmethod
    def validate_file_key(cls, v: str) -> str:
        return _extract_file_key(v)

    @field_validator('node_id')
    @classmethod
    def normalize_node_id(cls, v: Optional[str]) -> Optional[str]:
        return v.replace('-', ':') if v else v


class FigmaDevicesInput(BaseModel):
    """Input model for device detection."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    file_key: str = Field(..., description="Figma file key", min_length=10, max_length=50)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' or 'json'"
    )

    @field_validator('file_key')
    @classmethod
    def validate_file_key(cls, v: str) -> str:
        return _extract_file_key(v)


class FigmaScreensInput(BaseModel):
    """Input model for listing screen frames."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    file_key: str = Field(..., description="Figma file key", min_length=10, max_length=50)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' or 'json'"
    )

    @field_validator('file_key')
    @classmethod
    def validate_file_key(cls, v: str) -> str:
        return _extract_file_key(v)


class FigmaThemeFileInput(BaseModel):
    """Input model for theme file generation."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    file_key: str = Field(..., description="Figma file key", min_length=10, max_length=50)

    @field_validator('file_key')
    @classmethod
    def validate_file_key(cls, v: str) -> str:
        return _extract_file_key(v)


class FigmaReactNativeInput(BaseModel):
    """Input model for React Native code generation."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    file_key: str = Field(..., description="Figma file key", min_length=10, max_length=50)
    node_id: str = Field(..., description="Node ID to generate code for (e.g., '1:2' or '1-2')", min_length=1)
    component_name: Optional[str] = Field(
        default=None,
        description="Component name (auto-generated from node name if not provided)"
    )
    emit_static_types: bool = Field(default=True, description="Emit TypeScript annotations")
    use_responsive_scaling: bool = Field(
        default=True,
        description="Scale sizes relative to the detected base device"
    )
    use_theme_token_references: bool = Field(
        default=False,
        description="Reference COLORS/SPACING from ./theme (tokens are extracted from the whole file)"
    )
    component_kind: Literal['screen', 'component', 'section'] = Field(
        default='screen',
        description="'screen' wraps the output in a ScrollView"
    )
    include_navigation_shell: bool = Field(
        default=False,
        description="Accept a navigation prop and wire navigation items to navigation.navigate()"
    )
    output_layout: Literal['single-file', 'split-styles'] = Field(
        default='single-file',
        description="'split-styles' emits the StyleSheet as a separate module"
    )

    @field_validator('file_key')
    @classmethod
    def validate_file_key(cls, v: str) -> str:
        return _extract_file_key(v)

    @field_validator('node_id')
    @classmethod
    def normalize_node_id(cls, v: str) -> str:
        return v.replace('-', ':')

    def generation_options(self) -> GenerationOptions:
        return GenerationOptions(
            emit_static_types=self.emit_static_types,
            use_responsive_scaling=self.use_responsive_scaling,
            use_theme_token_references=self.use_theme_token_references,
            component_kind=self.component_kind,
            include_navigation_shell=self.include_navigation_shell,
            output_layout=self.output_layout,
        )


# ============================================================================
# Helper Functions
# ============================================================================

def _get_figma_token() -> str:
    """Get Figma API token from environment."""
    token = os.environ.get("FIGMA_ACCESS_TOKEN") or os.environ.get("FIGMA_TOKEN")
    if not token:
        raise ValueError(
            "Figma API token not found. Set FIGMA_ACCESS_TOKEN or FIGMA_TOKEN environment variable. "
            "Get your token from: https://www.figma.com/developers/api#access-tokens"
        )
    return token


async def _make_figma_request(
    endpoint: str,
    method: str = "GET",
    params: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Make authenticated request to Figma API."""
    token = _get_figma_token()

    async with httpx.AsyncClient() as client:
        response = await client.request(
            method=method,
            url=f"{FIGMA_API_BASE}/{endpoint}",
            headers={"X-Figma-Token": token},
            params=params,
            timeout=DEFAULT_TIMEOUT
        )
        response.raise_for_status()
        return response.json()


def _handle_api_error(e: Exception) -> str:
    """Format API and generation errors for user-friendly messages."""
    if isinstance(e, httpx.HTTPStatusError):
        status = e.response.status_code
        if status == 401:
            return "Error: Invalid Figma API token. Check your FIGMA_ACCESS_TOKEN environment variable."
        elif status == 403:
            return "Error: Access denied. You don't have permission to view this file."
        elif status == 404:
            return "Error: File or node not found. Check the file key and node ID."
        elif status == 429:
            return "Error: Rate limit exceeded. Please wait before making more requests."
        return f"Error: Figma API returned status {status}"
    elif isinstance(e, httpx.TimeoutException):
        return "Error: Request timed out. The file might be too large."
    elif isinstance(e, ValueError):
        return f"Error: {str(e)}"
    logger.exception("Unexpected error")
    return f"Error: {type(e).__name__}: {str(e)}"


def _find_node(node: Dict[str, Any], target_id: str) -> Optional[Dict[str, Any]]:
    if node.get('id') == target_id:
        return node
    for child in node.get('children', []):
        result = _find_node(child, target_id)
        if result:
            return result
    return None


def _get_node_with_children(node_id: Optional[str], data: Dict[str, Any]) -> Dict[str, Any]:
    """Get node with all children from file data."""
    document = data.get('document', {})
    if node_id:
        return _find_node(document, node_id) or {}
    return document


def _truncate(text: str, hint: str) -> str:
    if len(text) <= CHARACTER_LIMIT:
        return text
    return text[:CHARACTER_LIMIT] + f"\n\n... truncated at {CHARACTER_LIMIT} characters. {hint}"


# ============================================================================
# Tool Definitions
# ============================================================================

@mcp.tool(
    name="figma_get_design_tokens",
    annotations={
        "title": "Extract Design Tokens",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_get_design_tokens(params: FigmaDesignTokensInput) -> str:
    """
    Extract ranked design tokens from a Figma file.

    Counts every visible solid color, text style, auto-layout spacing value,
    corner radius and drop shadow, then keeps the most frequent ones with
    deterministic names (primary, gray450, heading1, spacing4x, shadow1...).

    Args:
        params: FigmaDesignTokensInput containing:
            - file_key (str): Figma file key
            - node_id (Optional[str]): Restrict the scan to one node
            - response_format: 'json' or 'markdown'

    Returns:
        str: Design tokens as JSON or a markdown summary
    """
    try:
        data = await _make_figma_request(f"files/{params.file_key}")
        root = _get_node_with_children(params.node_id, data)
        if not root:
            return f"Error: Node '{params.node_id}' not found."

        tokens = scan(root)

        if params.response_format == ResponseFormat.JSON:
            result = json.dumps({
                'figmaFile': params.file_key,
                'summary': tokens_summary(tokens),
                'tokens': tokens.model_dump(),
            }, indent=2)
            if len(result) > CHARACTER_LIMIT:
                return json.dumps({
                    'truncated': True,
                    'message': f'Result exceeded {CHARACTER_LIMIT} characters. Try specifying a node_id to narrow scope.',
                    'summary': tokens_summary(tokens),
                }, indent=2)
            return result

        lines = [f"# Design Tokens: {data.get('name', params.file_key)}", "", "## Colors"]
        lines += [f"- **{c.name}**: `{c.value}` ({c.usage})" for c in tokens.colors] or ["_None_"]
        lines += ["", "## Typography"]
        lines += [
            f"- **{t.name}**: {t.font_family} {t.font_size}px / {t.font_weight} ({t.usage})"
            for t in tokens.typography
        ] or ["_None_"]
        lines += ["", "## Spacing"]
        lines += [f"- **{s.name}**: {s.value} ({s.usage})" for s in tokens.spacing] or ["_None_"]
        lines += ["", "## Shadows"]
        lines += [
            f"- **{s.name}**: `{s.color}` {s.offset_x}x{s.offset_y} blur {s.radius}"
            for s in tokens.shadows
        ] or ["_None_"]
        return _truncate("\n".join(lines), "Try specifying a node_id to narrow scope.")

    except Exception as e:
        return _handle_api_error(e)


@mcp.tool(
    name="figma_detect_devices",
    annotations={
        "title": "Detect Target Devices",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_detect_devices(params: FigmaDevicesInput) -> str:
    """
    Detect the device sizes a Figma file was designed for.

    Looks at screen-like top-level frames on every page, matches them against
    common phone, tablet and desktop sizes, and picks the base device used for
    responsive scaling.

    Args:
        params: FigmaDevicesInput containing:
            - file_key (str): Figma file key
            - response_format: 'markdown' or 'json'

    Returns:
        str: Detected devices, the selected base device and breakpoints
    """
    try:
        data = await _make_figma_request(f"files/{params.file_key}")
        devices = scan_document(data.get('document', {}))
        base = select_base(devices)
        breakpoints = generate_breakpoints(devices)

        if params.response_format == ResponseFormat.JSON:
            return json.dumps({
                'devices': [d.model_dump() for d in devices],
                'baseDevice': base.model_dump(),
                'breakpoints': breakpoints.model_dump(),
            }, indent=2)

        lines = [f"# Devices: {data.get('name', params.file_key)}", ""]
        if not devices:
            lines.append("_No screen-like frames found; using the default base device._")
        for d in devices:
            lines.append(f"- **{d.name}**: {d.width}x{d.height} {d.orientation} ({d.type}, {d.category})")
        lines += [
            "",
            f"**Base device:** {base.name} ({base.width}x{base.height})",
            f"**Breakpoints:** mobile {breakpoints.mobile.small}/{breakpoints.mobile.normal}/"
            f"{breakpoints.mobile.large}, tablet {breakpoints.tablet}, desktop {breakpoints.desktop}",
        ]
        return "\n".join(lines)

    except Exception as e:
        return _handle_api_error(e)


@mcp.tool(
    name="figma_list_screens",
    annotations={
        "title": "List Screen Frames",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_list_screens(params: FigmaScreensInput) -> str:
    """
    List the screen frames of a Figma file with their node IDs.

    Use the returned IDs as node_id for figma_generate_react_native.

    Args:
        params: FigmaScreensInput containing:
            - file_key (str): Figma file key
            - response_format: 'markdown' or 'json'

    Returns:
        str: One entry per screen with id, name, page, size, device and detected pattern
    """
    try:
        data = await _make_figma_request(f"files/{params.file_key}")
        screens = []
        for page, frame in screen_frames(data.get('document', {})):
            try:
                device = detect(frame)
            except ValueError as e:
                logger.warning("Skipping frame: %s", e)
                continue
            screens.append({
                'id': frame.get('id'),
                'name': frame.get('name'),
                'page': page.get('name'),
                'width': device.width,
                'height': device.height,
                'device': device.name,
                'pattern': classify(frame).type,
            })

        if params.response_format == ResponseFormat.JSON:
            return _truncate(json.dumps({'screens': screens}, indent=2), "The file has too many screens.")

        lines = [f"# Screens: {data.get('name', params.file_key)}", ""]
        if not screens:
            lines.append("_No screen-like frames found._")
        for s in screens:
            lines.append(
                f"- **{s['name']}** (`{s['id']}`): {s['width']}x{s['height']} {s['device']}, "
                f"page {s['page']}, {s['pattern']}"
            )
        return _truncate("\n".join(lines), "The file has too many screens.")

    except Exception as e:
        return _handle_api_error(e)


@mcp.tool(
    name="figma_generate_theme_file",
    annotations={
        "title": "Generate React Native Theme File",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_generate_theme_file(params: FigmaThemeFileInput) -> str:
    """
    Generate a theme.ts module from a Figma file's design tokens.

    The module exports COLORS, TYPOGRAPHY, SPACING and SHADOWS plus responsive
    scaling helpers based on the detected base device. Components generated
    with use_theme_token_references import from it.

    Args:
        params: FigmaThemeFileInput containing:
            - file_key (str): Figma file key

    Returns:
        str: theme.ts source in a markdown code block
    """
    try:
        data = await _make_figma_request(f"files/{params.file_key}")
        document = data.get('document', {})
        tokens = scan(document)
        base = select_base(scan_document(document))
        code = generate_theme_file(tokens, base)

        lines = [
            "# Generated Theme: theme.ts",
            f"**Base device:** {base.name} ({base.width}x{base.height})",
            "",
            "```ts",
            code,
            "```",
        ]
        return _truncate("\n".join(lines), "The token set is unusually large.")

    except Exception as e:
        return _handle_api_error(e)


@mcp.tool(
    name="figma_generate_react_native",
    annotations={
        "title": "Generate React Native Component",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_generate_react_native(params: FigmaReactNativeInput) -> str:
    """
    Generate a React Native component from a Figma node and all its children.

    Classifies every node (button, input, card, header, image, text,
    navigation, list item or container), infers flex/grid/stack layouts and
    emits JSX with a StyleSheet. Sizes can be scaled relative to the detected
    base device and colors/spacing can reference theme.ts tokens.

    Args:
        params: FigmaReactNativeInput containing:
            - file_key (str): Figma file key
            - node_id (str): Node ID to convert
            - component_name (Optional[str]): Custom component name
            - emit_static_types, use_responsive_scaling, use_theme_token_references,
              component_kind, include_navigation_shell, output_layout: generation switches

    Returns:
        str: Generated component source (and styles module) in markdown
    """
    try:
        data = await _make_figma_request(f"files/{params.file_key}")
        node = _get_node_with_children(params.node_id, data)

        if not node:
            return f"Error: Node '{params.node_id}' not found."

        document = data.get('document', {})
        options = params.generation_options()
        tokens = scan(document) if options.use_theme_token_references else None
        base = select_base(scan_document(document))

        component_name = component_identifier(params.component_name or node.get('name'))
        context = GenerationContext(
            component_name=component_name,
            options=options,
            base_device=base,
            theme_tokens=tokens,
        )
        result = generate(node, context)

        lines = [
            f"# Generated React Native: {component_name}",
            f"**Source Node:** `{params.node_id}`",
            f"**Base device:** {base.name} ({base.width}x{base.height})",
        ]
        if result.dependencies:
            lines.append(f"**Dependencies:** {', '.join(result.dependencies)}")
        lines += ["", f"## {component_name}.tsx", "```tsx", result.code, "```"]
        if result.styles_code is not None:
            lines += ["", f"## {component_name}.styles.ts", "```ts", result.styles_code, "```"]

        return _truncate("\n".join(lines), "Try generating a smaller node.")

    except Exception as e:
        return _handle_api_error(e)


# ============================================================================
# Entry Point
# ============================================================================

def _configure_logging() -> None:
    # stdout carries the MCP stdio transport
    logging.basicConfig(
        stream=sys.stderr,
        level=os.environ.get(LOG_LEVEL_ENV, "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    _configure_logging()
    mcp.run()
