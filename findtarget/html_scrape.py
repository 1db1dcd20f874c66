#!/usr/bin/env python3
"""
Attribute lookup over an HTML document.

Finds the value of the first element attribute with a given name, optionally
only inside a container element carrying a given class.

Author: findtarget Team
License: MIT
"""

import logging
from html.parser import HTMLParser
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

# Elements that never get an end tag and must not be pushed on the stack
VOID_ELEMENTS = {
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input',
    'link', 'meta', 'param', 'source', 'track', 'wbr',
}


class AttributeFinder(HTMLParser):
    """Stops recording after the first matching attribute"""

    def __init__(self, tag: str, attribute: str, container_class: Optional[str] = None):
        super().__init__(convert_charrefs=True)
        self.tag = tag
        self.attribute = attribute
        self.container_class = container_class
        self.value = None
        # Open elements as (tag, carries container_class)
        self.stack: List[Tuple[str, bool]] = []

    @property
    def found(self) -> bool:
        return self.value is not None

    def _inside_container(self) -> bool:
        return any(is_container for _, is_container in self.stack)

    def _has_container_class(self, attrs_dict: dict) -> bool:
        if not self.container_class:
            return False
        classes = (attrs_dict.get('class') or '').split()
        return self.container_class in classes

    def _check(self, tag, attrs_dict):
        if self.found or tag != self.tag or self.attribute not in attrs_dict:
            return
        if self.container_class and not (
                self._inside_container() or self._has_container_class(attrs_dict)):
            logger.debug(f'Ignoring {self.attribute} outside .{self.container_class}')
            return
        self.value = attrs_dict[self.attribute] or ''

    def handle_starttag(self, tag, attrs):
        attrs_dict = dict(attrs)
        self._check(tag, attrs_dict)
        if tag not in VOID_ELEMENTS:
            self.stack.append((tag, self._has_container_class(attrs_dict)))

    def handle_startendtag(self, tag, attrs):
        self._check(tag, dict(attrs))

    def handle_endtag(self, tag):
        # Unmatched end tags are ignored; matched ones close anything left open inside
        for index in range(len(self.stack) - 1, -1, -1):
            if self.stack[index][0] == tag:
                del self.stack[index:]
                return


def find_attribute(html_content: str, tag: str, attribute: str,
                   container_class: Optional[str] = None) -> Optional[str]:
    """
    Return the value of the first `attribute` on a `tag` element.

    Args:
        html_content: Document to scan
        tag: Element name, e.g. 'div'
        attribute: Attribute name, e.g. 'data-api-endpoints'
        container_class: When set, the element itself or one of its open
            ancestors must carry this class

    Returns:
        The attribute value, or None when no element matched
    """
    finder = AttributeFinder(tag, attribute, container_class)
    finder.feed(html_content)
    finder.close()
    return finder.value
