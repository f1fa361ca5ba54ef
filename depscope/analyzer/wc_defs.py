"""Known web-component packages: tag prefixes, CDN layouts and React wrappers."""
import re
from typing import Iterable, Optional, Tuple
from urllib.parse import urlparse

from .models import ImportRecord

CARBON_WC = '@carbon/web-components'
CARBON_DOT_COM_WC = '@carbon/ibmdotcom-web-components'
CARBON_PRODUCTS_WC = '@carbon/ibm-products-web-components'

ES_CUSTOM_FOLDER = 'es-custom'

# Checked in order; the first pattern matching a module path wins
WC_PREFIX_MAP = [
    (re.compile('^' + re.escape(f'{CARBON_WC}/{ES_CUSTOM_FOLDER}')), 'cds-custom'),
    (re.compile('^' + re.escape(CARBON_WC)), 'cds'),
    (re.compile('^' + re.escape(CARBON_DOT_COM_WC)), 'c4d'),
    (re.compile('^' + re.escape(CARBON_PRODUCTS_WC)), 'c4p'),
]

WC_PACKAGE_REACT_WRAPPERS = {
    CARBON_WC: 'react',
    CARBON_DOT_COM_WC: 'components-react',
}

DEFAULT_CDN_DOMAINS = ('1.www.s81c.com',)
CDN_ENDING = '.min.js'

CDN_PACKAGES = {
    CARBON_WC: '/carbon/web-components/',
    CARBON_DOT_COM_WC: '/carbon-for-ibm-dotcom/',
}

CDN_TAGS = ('latest', 'next')
LATEST_VERSION = 'latest'

_SEMVER_SEGMENT = re.compile(r'^v?(\d+\.\d+\.\d+(?:[-+][0-9A-Za-z.-]+)?)$')
_EXTENSION = re.compile(r'\.[^/.]+$')


def get_wc_prefix(module_path: str) -> Optional[str]:
    """Custom-element tag prefix for a module path, e.g. 'cds' for @carbon/web-components/..."""
    for pattern, prefix in WC_PREFIX_MAP:
        if pattern.search(module_path):
            return prefix
    return None


def component_name(module_path: str) -> str:
    """Last path segment without its extension: 'es/components/button/button.js' -> 'button'."""
    last = module_path.rstrip('/').split('/')[-1]
    if last.endswith(CDN_ENDING):
        return last[:-len(CDN_ENDING)]
    return _EXTENSION.sub('', last)


def is_cdn_link(script_source: str, cdn_domains: Iterable[str] = DEFAULT_CDN_DOMAINS) -> bool:
    """True if the script URL is served from one of the known CDN hosts."""
    host = urlparse(script_source).netloc.lower()
    if not host:
        return False
    return any(host == domain.lower() for domain in cdn_domains)


def _package_info(script_source: str) -> Tuple[Optional[str], Optional[str]]:
    for package_name, package_path in CDN_PACKAGES.items():
        if package_path not in script_source:
            continue
        details = script_source.split(package_path, 1)[1]
        segments = [segment for segment in details.split('/') if segment]
        if 'version' in segments:
            position = segments.index('version')
            if position + 1 < len(segments):
                return package_name, segments[position + 1].lstrip('v')
        for segment in segments[:-1]:
            match = _SEMVER_SEGMENT.match(segment)
            if match:
                return package_name, match.group(1)
        if 'tag' in segments and any(tag in segments for tag in CDN_TAGS):
            return package_name, LATEST_VERSION
        return package_name, None
    return None, None


def parse_cdn_import(script_source: str,
                     cdn_domains: Iterable[str] = DEFAULT_CDN_DOMAINS) -> Optional[ImportRecord]:
    """Build a CDN import record from a `<script src>` URL.

    Returns None when the URL is not on a known CDN host or does not belong
    to a known web-component package.
    """
    if not is_cdn_link(script_source, cdn_domains):
        return None

    package_name, version = _package_info(urlparse(script_source).path)
    if package_name is None:
        return None

    return ImportRecord(
        name=component_name(urlparse(script_source).path),
        path=script_source,
        prefix=get_wc_prefix(package_name),
        package=package_name,
        version=version,
    )


def react_wrapper_for(record: ImportRecord, package_name: str) -> Optional[str]:
    """Return 'react' when `record` imports a React wrapper of a web-component package."""
    wrapper_folder = WC_PACKAGE_REACT_WRAPPERS.get(package_name)
    if wrapper_folder is None or not record.path.startswith(package_name):
        return None
    sub_path = record.path[len(package_name):]
    if wrapper_folder in sub_path.split('/'):
        return 'react'
    return None
