"""
Pattern-based extraction and rewriting of the calculator page templates

The templates come from our own site and follow fixed conventions, so
regular expressions are enough here. Everything that touches markup goes
through this module.
"""

import re
from typing import List, Optional

STYLE_BLOCK = re.compile(r'<style[^>]*>([\s\S]*?)</style>', re.IGNORECASE)
INLINE_SCRIPT = re.compile(r'<script>([\s\S]*?)</script>', re.IGNORECASE)
BODY = re.compile(r'<body[^>]*>([\s\S]*)</body>', re.IGNORECASE)

EXTERNAL_SCRIPT = re.compile(r'<script[^>]*src="[^"]*"[^>]*></script>', re.IGNORECASE)
EXTERNAL_LINKS = [
    re.compile(r'<link[^>]*href="[^"]*fonts[^"]*"[^>]*>', re.IGNORECASE),
    re.compile(r'<link[^>]*href="[^"]*flatpickr[^"]*"[^>]*>', re.IGNORECASE),
    re.compile(r'<link[^>]*href="[^"]*font-awesome[^"]*"[^>]*>', re.IGNORECASE),
    re.compile(r'<link[^>]*rel="preconnect"[^>]*>', re.IGNORECASE),
]

# The switcher sits in its own wrapper; the wrapper's closing tag is kept
LANGUAGE_SWITCHER = re.compile(r'<div class="language-switcher">[\s\S]*?</div>\s*</div>', re.IGNORECASE)
TOOL_NAV = re.compile(r'<nav class="tool-nav">[\s\S]*?</nav>', re.IGNORECASE)
LANGUAGE_LINK = re.compile(r'href="\.\./(?:de|fr)/')

FAVICON_SRC = 'src="../favicon.svg"'
FAVICON_DATA_URI = (
    'src="data:image/svg+xml,%3Csvg xmlns=\'http://www.w3.org/2000/svg\' viewBox=\'0 0 100 100\'%3E'
    '%3Ctext y=\'.9em\' font-size=\'90\'%3E%25%3C/text%3E%3C/svg%3E"'
)

CONTAINER_OPEN = '<div class="container">'

# Marks JSON-LD structured data, which is metadata rather than behaviour
STRUCTURED_DATA_MARKER = '@context'


def extract_styles(html: str) -> List[str]:
    """Contents of every <style> block, in document order"""
    return STYLE_BLOCK.findall(html)


def extract_scripts(html: str) -> List[str]:
    """Contents of attribute-less <script> blocks, minus empty and structured-data ones"""
    return [
        content for content in INLINE_SCRIPT.findall(html)
        if content.strip() and STRUCTURED_DATA_MARKER not in content
    ]


def extract_body(html: str) -> Optional[str]:
    match = BODY.search(html)
    return match.group(1) if match else None


def strip_scripts(body: str) -> str:
    """Drop external and inline scripts; their code is re-injected in one block"""
    body = EXTERNAL_SCRIPT.sub('', body)
    return INLINE_SCRIPT.sub('', body)


def strip_external_links(body: str) -> str:
    for pattern in EXTERNAL_LINKS:
        body = pattern.sub('', body)
    return body


def strip_navigation(body: str) -> str:
    """Remove the language switcher and the cross-tool navigation"""
    body = LANGUAGE_SWITCHER.sub('</div>', body)
    return TOOL_NAV.sub('', body)


def rewrite_language_links(body: str) -> str:
    return LANGUAGE_LINK.sub('href="#', body)


def inline_favicon(body: str) -> str:
    return body.replace(FAVICON_SRC, FAVICON_DATA_URI)


def rewrite_body(body: str) -> str:
    """Make a template body self-contained"""
    body = strip_scripts(body)
    body = strip_external_links(body)
    body = strip_navigation(body)
    body = rewrite_language_links(body)
    return inline_favicon(body)


def inject_banner(body: str, banner_html: str) -> str:
    """Place the banner first inside the main container, or at the top"""
    if CONTAINER_OPEN in body:
        return body.replace(CONTAINER_OPEN, CONTAINER_OPEN + banner_html, 1)
    return banner_html + body
