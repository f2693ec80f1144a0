"""Shared test fixtures for the design pipeline tests."""
import pytest


BLUE = {'r': 0, 'g': 122 / 255, 'b': 1, 'a': 1}
WHITE = {'r': 1, 'g': 1, 'b': 1, 'a': 1}
BLACK = {'r': 0, 'g': 0, 'b': 0, 'a': 1}
GRAY = {'r': 0.5, 'g': 0.5, 'b': 0.5, 'a': 1}


def solid(color):
    return {'type': 'SOLID', 'visible': True, 'color': dict(color), 'opacity': 1}


def text_node(node_id, name, characters, x, y, font_size=16, style='Regular', color=BLACK,
              width=200, height=24):
    return {
        'id': node_id,
        'name': name,
        'type': 'TEXT',
        'characters': characters,
        'absoluteBoundingBox': {'x': x, 'y': y, 'width': width, 'height': height},
        'fills': [solid(color)],
        'strokes': [],
        'effects': [],
        'style': {'fontFamily': 'Inter', 'fontSize': font_size},
        'fontName': {'family': 'Inter', 'style': style},
    }


@pytest.fixture
def submit_button():
    """Rounded blue button with a white label."""
    return {
        'id': '1:20',
        'name': 'Submit Button',
        'type': 'FRAME',
        'absoluteBoundingBox': {'x': 16, 'y': 220, 'width': 200, 'height': 48},
        'cornerRadius': 8,
        'fills': [solid(BLUE)],
        'strokes': [],
        'effects': [],
        'children': [
            text_node('1:21', 'Label', 'Submit', 40, 232, style='Bold', color=WHITE, width=100),
        ],
    }


@pytest.fixture
def product_card():
    """Rounded card with a drop shadow and two text lines."""
    return {
        'id': '1:10',
        'name': 'Product Card',
        'type': 'FRAME',
        'absoluteBoundingBox': {'x': 16, 'y': 80, 'width': 343, 'height': 120},
        'cornerRadius': 12,
        'fills': [solid(WHITE)],
        'strokes': [],
        'effects': [{
            'type': 'DROP_SHADOW',
            'visible': True,
            'color': {'r': 0, 'g': 0, 'b': 0, 'a': 0.1},
            'offset': {'x': 0, 'y': 2},
            'radius': 8,
        }],
        'children': [
            text_node('1:11', 'Product Name', 'Wireless Headphones', 32, 96, font_size=18, style='SemiBold'),
            text_node('1:12', 'Price', '$99.00', 32, 124, color=GRAY),
        ],
    }


@pytest.fixture
def screen_tree(submit_button, product_card):
    """Vertical auto-layout screen holding a header, a card and a button."""
    return {
        'id': '1:1',
        'name': 'Home Screen',
        'type': 'FRAME',
        'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 375, 'height': 667},
        'fills': [solid(WHITE)],
        'strokes': [],
        'effects': [],
        'layoutMode': 'VERTICAL',
        'itemSpacing': 16,
        'paddingTop': 24,
        'paddingRight': 16,
        'paddingBottom': 24,
        'paddingLeft': 16,
        'primaryAxisAlignItems': 'MIN',
        'counterAxisAlignItems': 'CENTER',
        'children': [
            {
                'id': '1:2',
                'name': 'Header',
                'type': 'FRAME',
                'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 375, 'height': 56},
                'fills': [solid(WHITE)],
                'strokes': [],
                'effects': [],
                'children': [],
            },
            product_card,
            submit_button,
        ],
    }


@pytest.fixture
def email_input():
    """Outlined text field with placeholder copy."""
    return {
        'id': '2:1',
        'name': 'Email Input',
        'type': 'FRAME',
        'absoluteBoundingBox': {'x': 16, 'y': 300, 'width': 300, 'height': 48},
        'fills': [],
        'strokes': [solid(GRAY)],
        'strokeWeight': 1,
        'effects': [],
        'children': [
            text_node('2:2', 'Placeholder', 'Enter your email', 28, 312, color=GRAY),
        ],
    }


@pytest.fixture
def tab_bar():
    """Bottom tab bar with three equally sized tabs."""
    tabs = []
    for i, label in enumerate(['Home', 'Explore', 'Profile']):
        x = i * 125
        tabs.append({
            'id': f'3:{i + 2}',
            'name': label,
            'type': 'FRAME',
            'absoluteBoundingBox': {'x': x, 'y': 611, 'width': 100, 'height': 56},
            'fills': [],
            'strokes': [],
            'effects': [],
            'children': [text_node(f'3:{i + 10}', f'{label} Label', label, x + 20, 630, font_size=12, width=60)],
        })
    return {
        'id': '3:1',
        'name': 'Tab Bar',
        'type': 'FRAME',
        'absoluteBoundingBox': {'x': 0, 'y': 611, 'width': 375, 'height': 56},
        'fills': [],
        'strokes': [],
        'effects': [],
        'layoutMode': 'HORIZONTAL',
        'itemSpacing': 25,
        'children': tabs,
    }


@pytest.fixture
def contact_row():
    """Avatar and name side by side, the shape of a list row."""
    return {
        'id': '4:1',
        'name': 'Contact Row',
        'type': 'FRAME',
        'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 280, 'height': 60},
        'fills': [],
        'strokes': [],
        'effects': [],
        'children': [
            {
                'id': '4:2',
                'name': 'Avatar',
                'type': 'ELLIPSE',
                'absoluteBoundingBox': {'x': 0, 'y': 10, 'width': 40, 'height': 40},
                'fills': [{'type': 'IMAGE', 'visible': True, 'imageRef': 'abc'}],
                'strokes': [],
                'effects': [],
            },
            text_node('4:3', 'Contact Name', 'Ada Lovelace', 60, 10),
        ],
    }


@pytest.fixture
def token_document():
    """Document with one page whose own background must not become a token."""
    return {
        'id': '0:0',
        'name': 'Document',
        'type': 'DOCUMENT',
        'children': [{
            'id': '0:1',
            'name': 'Page 1',
            'type': 'CANVAS',
            'fills': [solid({'r': 1, 'g': 0, 'b': 0, 'a': 1})],
            'children': [{
                'id': '5:1',
                'name': 'Home Screen',
                'type': 'FRAME',
                'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 375, 'height': 667},
                'fills': [solid(BLUE)],
                'strokes': [],
                'effects': [],
                'layoutMode': 'VERTICAL',
                'itemSpacing': 16,
                'paddingTop': 24,
                'paddingRight': 16,
                'paddingBottom': 24,
                'paddingLeft': 16,
                'children': [
                    text_node('5:2', 'Heading', 'Welcome', 16, 24, font_size=28, style='Bold'),
                    text_node('5:3', 'Body', 'Lorem ipsum', 16, 70, color=GRAY),
                    text_node('5:4', 'Body 2', 'Dolor sit amet', 16, 100, color=GRAY),
                    {
                        'id': '5:5',
                        'name': 'Button Background',
                        'type': 'RECTANGLE',
                        'absoluteBoundingBox': {'x': 16, 'y': 140, 'width': 200, 'height': 48},
                        'cornerRadius': 8,
                        'fills': [solid(BLUE)],
                        'strokes': [],
                        'effects': [{
                            'type': 'DROP_SHADOW',
                            'visible': True,
                            'color': {'r': 0, 'g': 0, 'b': 0, 'a': 0.2},
                            'offset': {'x': 0, 'y': 4},
                            'radius': 8,
                        }],
                    },
                    {
                        'id': '5:6',
                        'name': 'Chip',
                        'type': 'RECTANGLE',
                        'absoluteBoundingBox': {'x': 16, 'y': 200, 'width': 80, 'height': 32},
                        'fills': [solid(BLUE)],
                        'strokes': [solid(WHITE)],
                        'effects': [],
                    },
                ],
            }],
        }],
    }
