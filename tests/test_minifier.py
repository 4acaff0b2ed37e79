"""Tests for minification."""

import pytest
import os

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from renatic.minifier import MinificationLevel, minify_string

HTML = """<!DOCTYPE html>
<html>
  <head>
    <title>Page</title>
  </head>
  <body>
    <p>
      Hello    world
    </p>
  </body>
</html>
"""

CSS = """/*! keep me */
body {
    color: red;
    margin: 0px;
}
"""

JS = """/*! keep me */
function add(first, second) {
    // sum
    return first + second;
}
"""


class TestMinificationLevel:
    """Test cases for MinificationLevel."""

    @pytest.mark.parametrize('name, level', [
        ('disabled', MinificationLevel.DISABLED),
        ('spec-compliant', MinificationLevel.SPEC_COMPLIANT),
        ('maximal', MinificationLevel.MAXIMAL),
    ])
    def test_from_name(self, name, level):
        assert MinificationLevel.from_name(name) is level

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown minification level"):
            MinificationLevel.from_name('extreme')


class TestMinifyString:
    """Test cases for minify_string."""

    @pytest.mark.parametrize('ext, text', [('html', HTML), ('css', CSS), ('js', JS), ('txt', 'a  b\n')])
    def test_disabled_is_identity(self, ext, text):
        assert minify_string(text, MinificationLevel.DISABLED, ext) == text

    def test_html(self):
        result = minify_string(HTML, MinificationLevel.SPEC_COMPLIANT, 'html')

        assert len(result) < len(HTML)
        assert 'Hello' in result
        assert '</p>' in result

    def test_html_maximal_is_smaller(self):
        compliant = minify_string(HTML, MinificationLevel.SPEC_COMPLIANT, 'html')
        maximal = minify_string(HTML, MinificationLevel.MAXIMAL, 'html')

        assert len(maximal) <= len(compliant)

    def test_css(self):
        result = minify_string(CSS, MinificationLevel.SPEC_COMPLIANT, 'css')

        assert 'color:red' in result
        assert '\n    ' not in result

    def test_css_maximal_drops_bang_comment(self):
        result = minify_string(CSS, MinificationLevel.MAXIMAL, 'css')

        assert 'keep me' not in result

    def test_js(self):
        result = minify_string(JS, MinificationLevel.SPEC_COMPLIANT, 'js')

        assert '// sum' not in result
        assert 'keep me' in result
        assert len(result) < len(JS)

    def test_extension_with_dot(self):
        assert 'color:red' in minify_string(CSS, MinificationLevel.MAXIMAL, '.CSS')

    def test_unknown_extension_unchanged(self):
        assert minify_string('a  b\n', MinificationLevel.MAXIMAL, 'txt') == 'a  b\n'
