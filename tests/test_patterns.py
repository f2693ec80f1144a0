"""Tests for UI role classification."""
import pytest

from rn_codegen import patterns
from rn_codegen.patterns import (
    CONTAINER_CONFIDENCE, PATTERN_TYPES, classify, classify_root, first_text, text_content,
)


class TestClassification:
    """Scorers pick the expected role for typical nodes."""

    def test_submit_button(self, submit_button):
        pattern = classify(submit_button)
        assert pattern.type == 'button'
        assert pattern.confidence == 1.0
        assert pattern.is_interactive
        assert pattern.properties['text_content'] == 'Submit'

    def test_email_input(self, email_input):
        pattern = classify(email_input)
        assert pattern.type == 'input'
        assert pattern.properties['input_type'] == 'email'
        assert pattern.properties['placeholder'] == 'Enter your email'

    def test_card(self, product_card):
        pattern = classify(product_card)
        assert pattern.type == 'card'
        assert pattern.properties['has_elevation'] is True
        assert pattern.is_interactive

    def test_text(self, product_card):
        pattern = classify(product_card['children'][1], product_card)
        assert pattern.type == 'text'
        assert pattern.confidence == pytest.approx(0.9)

    def test_header(self, screen_tree):
        header = screen_tree['children'][0]
        assert classify(header, screen_tree).type == 'header'

    def test_navigation(self, tab_bar):
        pattern = classify(tab_bar)
        assert pattern.type == 'navigation'
        assert pattern.properties['navigation_type'] == 'bottom-tabs'
        assert pattern.properties['item_count'] == 3

    def test_image_fill(self, contact_row):
        avatar = contact_row['children'][0]
        pattern = classify(avatar, contact_row)
        assert pattern.type == 'image'
        assert pattern.properties['is_circular'] is True
        assert pattern.properties['is_icon'] is True

    def test_bare_rectangle_is_a_container(self):
        node = {'type': 'RECTANGLE', 'absoluteBoundingBox': {'x': 0, 'y': 200, 'width': 50, 'height': 50}}
        pattern = classify(node)
        assert pattern.type == 'container'
        assert pattern.confidence == CONTAINER_CONFIDENCE

    def test_confidence_is_bounded(self, screen_tree):
        nodes = [screen_tree] + screen_tree['children']
        for node in nodes:
            pattern = classify(node, screen_tree)
            assert 0.0 <= pattern.confidence <= 1.0
            assert pattern.type in PATTERN_TYPES


class TestListItemParent:
    """The list-parent signal needs the parent to be passed in."""

    def test_without_parent(self, contact_row):
        pattern = classify(contact_row)
        assert pattern.type == 'list-item'
        assert pattern.confidence == pytest.approx(0.6)

    def test_with_list_parent(self, contact_row):
        parent = {'name': 'Contacts List', 'type': 'FRAME', 'children': [contact_row]}
        pattern = classify(contact_row, parent)
        assert pattern.type == 'list-item'
        assert pattern.confidence == pytest.approx(1.0)
        assert pattern.properties['layout'] == 'horizontal'


class TestRootClassification:
    """Top-level frames sit at y=0 without being headers."""

    def test_screen_is_a_container(self, screen_tree):
        assert classify(screen_tree).type == 'header'
        pattern = classify_root(screen_tree)
        assert pattern.type == 'container'
        assert pattern.confidence == CONTAINER_CONFIDENCE

    def test_header_name_keeps_the_role(self, screen_tree):
        screen_tree['name'] = 'App Header'
        assert classify_root(screen_tree).type == 'header'

    def test_other_roles_are_untouched(self, submit_button):
        assert classify_root(submit_button).type == 'button'


class TestScorerIsolation:
    """A failing scorer only loses its own vote."""

    def test_failing_scorer(self, monkeypatch, submit_button):
        def boom(subject):
            raise RuntimeError('scorer bug')

        monkeypatch.setattr(patterns, 'SCORERS', [boom] + patterns.SCORERS[1:])
        pattern = classify(submit_button)
        assert pattern.type != 'button'

    def test_unreadable_node(self):
        class Broken(dict):
            def get(self, key, default=None):
                raise RuntimeError('detached')

        pattern = classify(Broken())
        assert pattern.type == 'container'
        assert pattern.confidence == pytest.approx(0.1)


class TestTextHelpers:
    """Text lookups used by the emitters."""

    def test_text_content_joins_descendants(self, product_card):
        assert text_content(product_card) == 'Wireless Headphones $99.00'

    def test_first_text(self, submit_button):
        assert first_text(submit_button) == 'Submit'

    def test_first_text_without_text(self):
        assert first_text({'type': 'FRAME', 'children': []}) == ''
