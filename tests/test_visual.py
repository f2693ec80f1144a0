"""Tests for visual and text analysis."""
from rn_codegen.base import extract
from rn_codegen.visual import analyze_text, extract_visual_properties, shadow_style


class TestVisualProperties:

    def test_card_visuals(self, product_card):
        visual = extract_visual_properties(extract(product_card))
        assert visual.background_color == '#FFFFFF'
        assert visual.border_radius == 12
        assert visual.shadow.shadow_color == '#000000'
        assert visual.shadow.shadow_opacity == 0.1
        assert visual.shadow.shadow_radius == 8
        assert visual.shadow.elevation == 4

    def test_shadow_defaults(self):
        props = extract({'effects': [{
            'type': 'DROP_SHADOW',
            'visible': True,
            'color': {'r': 0, 'g': 0, 'b': 0, 'a': 0},
            'offset': {'x': 0, 'y': 1},
        }]})
        shadow = extract_visual_properties(props).shadow
        assert shadow.shadow_opacity == 0.25
        assert shadow.shadow_radius == 4
        assert shadow.elevation == 2

    def test_hidden_shadow_is_ignored(self):
        props = extract({'effects': [{'type': 'DROP_SHADOW', 'visible': False, 'color': {'r': 0, 'g': 0, 'b': 0}}]})
        assert extract_visual_properties(props).shadow is None

    def test_border_weight_defaults_to_one(self, email_input):
        node = dict(email_input)
        del node['strokeWeight']
        visual = extract_visual_properties(extract(node))
        assert visual.border_color == '#808080'
        assert visual.border_width == 1

    def test_no_paint(self):
        visual = extract_visual_properties(extract({'type': 'FRAME'}))
        assert visual.background_color is None
        assert visual.border_color is None
        assert visual.shadow is None

    def test_shadow_style_keys(self, product_card):
        style = shadow_style(extract_visual_properties(extract(product_card)).shadow)
        assert list(style) == ['shadowColor', 'shadowOffset', 'shadowOpacity', 'shadowRadius', 'elevation']
        assert style['shadowOffset'] == {'width': 0, 'height': 2}


class TestTextAnalysis:

    def test_non_text_node(self, product_card):
        props = extract(product_card)
        assert analyze_text(props.type, props, props.name) is None

    def test_text_defaults(self):
        props = extract({'type': 'TEXT', 'name': 'Caption'})
        analysis = analyze_text('TEXT', props)
        assert analysis.content == 'Caption'
        assert analysis.font_size == 16
        assert analysis.font_weight == '400'
        assert analysis.font_family == 'Inter'
        assert analysis.color == '#000000'
        assert analysis.text_align == 'left'

    def test_heading_flags(self, product_card):
        props = extract(product_card['children'][0])
        analysis = analyze_text(props.type, props, props.name)
        assert analysis.content == 'Wireless Headphones'
        assert analysis.font_weight == '600'
        assert analysis.is_heading
        assert analysis.is_button
        assert not analysis.is_label

    def test_label_flags(self):
        props = extract({'type': 'TEXT', 'characters': 'Terms', 'fontSize': 12, 'textAlignHorizontal': 'CENTER'})
        analysis = analyze_text('TEXT', props)
        assert analysis.is_label
        assert not analysis.is_heading
        assert analysis.text_align == 'center'

    def test_button_by_name(self):
        props = extract({'type': 'TEXT', 'name': 'CTA label', 'characters': 'Go'})
        assert analyze_text('TEXT', props, props.name).is_button
