"""Tests for the React Native code generator."""
import re

import pytest
from pydantic import ValidationError

from rn_codegen.devices import DEFAULT_BASE_DEVICE
from rn_codegen.react_native_generator import (
    GenerationContext, GenerationError, GenerationOptions, component_identifier, escape_jsx,
    generate, style_name,
)
from rn_codegen.tokens import ColorToken, SpacingToken, ThemeTokens


class BrokenNode(dict):
    """A node whose fields cannot be read, apart from its id and name."""

    def get(self, key, default=None):
        if key in ('id', 'name'):
            return dict.get(self, key, default)
        raise RuntimeError(f'cannot read {key}')


def _context(name='Home Screen', **options):
    return GenerationContext(
        component_name=name,
        options=GenerationOptions(**options),
        base_device=DEFAULT_BASE_DEVICE,
    )


def _referenced_styles(code):
    return set(re.findall(r'styles\.(\w+)', code))


def _defined_styles(code):
    return set(re.findall(r'^  (\w+): \{', code, re.MULTILINE))


class TestScreenGeneration:
    """A screen with a header, a card and a button."""

    def test_component_shell(self, screen_tree):
        result = generate(screen_tree, _context())
        assert "import React from 'react';" in result.code
        assert 'const HomeScreen: React.FC = () => {' in result.code
        assert '<ScrollView style={styles.scrollContainer} showsVerticalScrollIndicator={false}>' in result.code
        assert result.code.rstrip().endswith('export default HomeScreen;')

    def test_imports_are_ordered(self, screen_tree):
        result = generate(screen_tree, _context())
        assert result.imports == ['View', 'Text', 'StyleSheet', 'Dimensions', 'ScrollView', 'TouchableOpacity']

    def test_header_card_and_button(self, screen_tree):
        code = generate(screen_tree, _context()).code
        assert '<Text style={styles.headerText}>Header</Text>' in code
        assert 'onPress={handleProductCardPress}' in code
        assert 'Wireless Headphones' in code
        assert '$99.00' in code
        assert '<Text style={styles.submitbuttonText}>Submit</Text>' in code
        assert "console.log('Submit Button pressed');" in code

    def test_card_shadow_style(self, screen_tree):
        code = generate(screen_tree, _context()).code
        card = code[code.index('  productcard: {'):]
        card = card[:card.index('  },')]
        assert "shadowColor: '#000000'," in card
        assert 'shadowOffset: { width: 0, height: 2 },' in card
        assert 'shadowOpacity: 0.1,' in card
        assert 'shadowRadius: 8,' in card
        assert 'elevation: 4,' in card
        assert 'borderRadius: moderateScale(12),' in card

    def test_layout_style(self, screen_tree):
        code = generate(screen_tree, _context()).code
        root = code[code.index('  homescreen: {'):]
        root = root[:root.index('  },')]
        assert "flexDirection: 'column'," in root
        assert "alignItems: 'center'," in root
        assert 'gap: scale(16),' in root
        assert 'paddingTop: verticalScale(24),' in root

    def test_every_referenced_style_is_defined(self, screen_tree):
        code = generate(screen_tree, _context()).code
        assert _referenced_styles(code) <= _defined_styles(code)

    def test_responsive_helpers_use_base_device(self, screen_tree):
        code = generate(screen_tree, _context()).code
        assert 'const scale = (size: number) => (SCREEN_WIDTH / 375) * size;' in code
        assert 'const verticalScale = (size: number) => (SCREEN_HEIGHT / 667) * size;' in code
        assert 'width: scale(343),' in code

    def test_without_responsive_scaling(self, screen_tree):
        context = GenerationContext(
            component_name='Home Screen',
            options=GenerationOptions(use_responsive_scaling=False),
        )
        result = generate(screen_tree, context)
        assert 'Dimensions' not in result.code
        assert 'width: 343,' in result.code
        assert result.dependencies == []

    def test_without_static_types(self, screen_tree):
        code = generate(screen_tree, _context(emit_static_types=False)).code
        assert 'const HomeScreen = () => {' in code
        assert 'const scale = (size) =>' in code
        assert 'React.FC' not in code

    def test_component_kind(self, screen_tree):
        result = generate(screen_tree, _context(component_kind='component'))
        assert 'ScrollView' not in result.code
        assert 'scrollContainer' not in result.code

    def test_hidden_children_are_skipped(self, screen_tree):
        screen_tree['children'].append({
            'id': '1:99', 'name': 'Hidden Badge', 'type': 'RECTANGLE', 'visible': False,
        })
        code = generate(screen_tree, _context()).code
        assert 'hiddenbadge' not in code


class TestDeterminism:

    def test_identical_output(self, screen_tree):
        first = generate(screen_tree, _context()).code
        second = generate(screen_tree, _context()).code
        assert first == second

    def test_context_reuse(self, screen_tree):
        context = _context()
        first = generate(screen_tree, context).code
        second = generate(screen_tree, context).code
        assert first == second


class TestResilience:
    """Bad nodes degrade locally."""

    def test_broken_child_becomes_placeholder(self, screen_tree):
        screen_tree['children'].insert(1, BrokenNode(id='1:50', name='Broken Layer'))
        code = generate(screen_tree, _context()).code
        assert '{/* Broken Layer could not be generated */}' in code
        assert 'Wireless Headphones' in code
        assert '<Text style={styles.submitbuttonText}>Submit</Text>' in code
        assert _referenced_styles(code) <= _defined_styles(code)

    def test_deep_tree_is_cut_off(self):
        node = {'id': 'leaf', 'name': 'Level 50', 'type': 'FRAME', 'children': []}
        for level in range(49, -1, -1):
            node = {'id': str(level), 'name': f'Level {level}', 'type': 'FRAME', 'children': [node]}
        code = generate(node, _context(component_kind='component')).code
        assert 'styles.level40' in code
        assert 'level41' not in code
        assert _referenced_styles(code) <= _defined_styles(code)

    def test_text_is_escaped(self):
        node = {'id': '7:1', 'name': 'Warning', 'type': 'TEXT', 'characters': '<b>Tom & Jerry</b>'}
        code = generate(node, _context(component_kind='component')).code
        assert '&lt;b&gt;Tom &amp; Jerry&lt;/b&gt;' in code


class TestPreconditions:

    def test_theme_references_need_tokens(self, screen_tree):
        with pytest.raises(GenerationError):
            generate(screen_tree, _context(use_theme_token_references=True))

    def test_responsive_scaling_needs_base_device(self, screen_tree):
        context = GenerationContext(component_name='Home', options=GenerationOptions())
        with pytest.raises(ValueError, match='base device'):
            generate(screen_tree, context)

    def test_unknown_option(self):
        with pytest.raises(ValidationError):
            GenerationOptions(use_tailwind=True)


class TestThemeReferences:

    def test_colors_and_spacing_reference_theme(self, screen_tree):
        context = _context(use_theme_token_references=True)
        context.theme_tokens = ThemeTokens(
            colors=[ColorToken(name='primary', value='#007AFF', usage='primary')],
            spacing=[SpacingToken(name='spacing4x', value=16, usage='padding')],
        )
        code = generate(screen_tree, context).code
        assert "import { COLORS, SPACING } from './theme';" in code
        assert 'backgroundColor: COLORS.primary,' in code
        assert 'gap: scale(SPACING.spacing4x),' in code
        assert "backgroundColor: '#FFFFFF'," in code


class TestInputs:

    def test_email_input(self, email_input):
        result = generate(email_input, _context('Email Form', component_kind='component'))
        assert "import React, { useState } from 'react';" in result.code
        assert "const [emailInputValue, setEmailInputValue] = useState('');" in result.code
        assert 'onChangeText={setEmailInputValue}' in result.code
        assert 'placeholder="Enter your email"' in result.code
        assert 'keyboardType="email-address"' in result.code
        assert 'TextInput' in result.imports


class TestNavigationShell:

    def test_navigation_items_navigate(self, tab_bar):
        context = _context('Tabs', component_kind='component', include_navigation_shell=True)
        result = generate(tab_bar, context)
        assert 'const Tabs: React.FC<{ navigation: any }> = ({ navigation }) => {' in result.code
        assert "navigation.navigate('Home');" in result.code
        assert "navigation.navigate('Explore');" in result.code
        assert result.dependencies == ['react-native-responsive-screen', '@react-navigation/native']

    def test_same_name_different_action(self, tab_bar):
        home_button = {
            'id': '3:50',
            'name': 'Home',
            'type': 'FRAME',
            'absoluteBoundingBox': {'x': 16, 'y': 300, 'width': 200, 'height': 48},
            'cornerRadius': 8,
            'fills': [{'type': 'SOLID', 'visible': True, 'color': {'r': 0, 'g': 0.48, 'b': 1, 'a': 1}}],
            'children': [{
                'id': '3:51', 'name': 'Label', 'type': 'TEXT', 'characters': 'Go home',
                'absoluteBoundingBox': {'x': 40, 'y': 312, 'width': 100, 'height': 24},
            }],
        }
        shell = {
            'id': '3:0', 'name': 'Shell', 'type': 'FRAME',
            'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 375, 'height': 667},
            'children': [tab_bar, home_button],
        }
        context = _context('Shell', component_kind='component', include_navigation_shell=True)
        code = generate(shell, context).code
        assert "const handleHomePress = () => {\n    navigation.navigate('Home');\n  };" in code
        assert "const handleHomePress2 = () => {\n    console.log('Home pressed');\n  };" in code
        assert 'onPress={handleHomePress2}' in code

    def test_without_shell(self, tab_bar):
        result = generate(tab_bar, _context('Tabs', component_kind='component'))
        assert 'navigation.navigate' not in result.code
        assert "console.log('Home pressed');" in result.code


class TestSplitStyles:

    def test_styles_module(self, screen_tree):
        result = generate(screen_tree, _context(output_layout='split-styles'))
        assert "import { styles } from './HomeScreen.styles';" in result.code
        assert 'StyleSheet' not in result.code
        assert 'const scale' not in result.code
        assert 'export const styles = StyleSheet.create({' in result.styles_code
        assert 'const scale = ' in result.styles_code
        assert _referenced_styles(result.code) <= _defined_styles(result.styles_code)

    def test_single_file_has_no_styles_module(self, screen_tree):
        assert generate(screen_tree, _context()).styles_code is None


class TestHandlers:

    def test_identical_handlers_are_shared(self):
        context = _context()
        body = "    console.log('Save pressed');"
        assert context.add_handler('handleSavePress', body) == 'handleSavePress'
        assert context.add_handler('handleSavePress', body) == 'handleSavePress'
        assert list(context.handlers) == ['handleSavePress']

    def test_conflicting_bodies_get_numbered(self):
        context = _context()
        context.add_handler('handleSavePress', "    console.log('Save pressed');")
        assert context.add_handler('handleSavePress', "    navigation.navigate('Save');") == 'handleSavePress2'
        assert context.add_handler('handleSavePress', "    navigation.navigate('Save');") == 'handleSavePress2'


class TestNames:

    def test_style_name(self):
        assert style_name('Submit Button', 'button') == 'submitbutton'
        assert style_name('', 'list-item') == 'listItem'
        assert style_name('🚀', 'card') == 'card'
        assert style_name('2nd Row', 'list-item') == 'listItem2ndrow'

    def test_component_identifier(self):
        assert component_identifier('home screen') == 'HomeScreen'
        assert component_identifier('404 page') == 'Component404Page'
        assert component_identifier(None) == 'GeneratedComponent'

    def test_escape_jsx(self):
        assert escape_jsx('{a}') == '&#123;a&#125;'
