"""
Tests for the first-attribute lookup used on Bugcrowd program pages.
"""

from findtarget.html_scrape import find_attribute

ATTR = 'data-api-endpoints'


def test_finds_attribute_without_container():
    html = '<html><body><div id="app" data-api-endpoints=\'{"a": 1}\'></div></body></html>'
    assert find_attribute(html, 'div', ATTR) == '{"a": 1}'


def test_returns_none_when_missing():
    assert find_attribute('<html><body><div id="app"></div></body></html>', 'div', ATTR) is None


def test_only_first_match_is_returned():
    html = (
        '<div data-api-endpoints="first"></div>'
        '<div data-api-endpoints="second"></div>'
    )
    assert find_attribute(html, 'div', ATTR) == 'first'


def test_other_tags_are_ignored():
    html = '<span data-api-endpoints="span"></span><div data-api-endpoints="div"></div>'
    assert find_attribute(html, 'div', ATTR) == 'div'


def test_entities_in_attribute_are_decoded():
    html = '<div data-api-endpoints="{&quot;key&quot;: &quot;value&quot;}"></div>'
    assert find_attribute(html, 'div', ATTR) == '{"key": "value"}'


class TestContainerGate:
    def test_attribute_outside_container_is_skipped(self):
        html = (
            '<div data-api-endpoints="outside"></div>'
            '<section class="brief react-component">'
            '  <div><div data-api-endpoints="inside"></div></div>'
            '</section>'
        )
        assert find_attribute(html, 'div', ATTR, 'react-component') == 'inside'

    def test_element_carrying_the_class_counts(self):
        html = '<div class="react-component" data-api-endpoints="self"></div>'
        assert find_attribute(html, 'div', ATTR, 'react-component') == 'self'

    def test_closed_container_no_longer_applies(self):
        html = (
            '<div class="react-component"><p>brief</p></div>'
            '<div data-api-endpoints="after"></div>'
        )
        assert find_attribute(html, 'div', ATTR, 'react-component') is None

    def test_void_elements_do_not_break_nesting(self):
        html = (
            '<div class="react-component"><img src="x.png"><br>'
            '<div data-api-endpoints="nested"></div></div>'
        )
        assert find_attribute(html, 'div', ATTR, 'react-component') == 'nested'

    def test_class_must_match_whole_token(self):
        html = '<div class="react-component-x"><div data-api-endpoints="x"></div></div>'
        assert find_attribute(html, 'div', ATTR, 'react-component') is None
