# coding: utf-8
"""Utility functions for iserver: option merging, JSON conversion and URL
   handling shared by parameter, response and service classes."""

import json
import re
from urllib.parse import urlencode, urlsplit, urlunsplit, parse_qsl

__all__ = ['extend', 'copyAttributes', 'reset', 'release', 'jsonStruct',
           'toJSON', 'isInTheSameDomain', 'appendQuery', 'stripJsonp']

numeric = (int, float)
sequence = (list, tuple)

_default_ports = {'http': 80, 'https': 443}
_jsonp_pattern = re.compile(r'^\s*[\w$.]+\s*\((.*)\)\s*;?\s*$', re.S)

def extend(destination, source):
    """Copy every key/value of source (a mapping or an object with public
       attributes) onto destination as attributes. A None source does
       nothing."""
    if source is None:
        return destination
    if not isinstance(source, dict):
        source = dict((k, v) for k, v in vars(source).items()
                      if not k.startswith('_'))
    for key, value in source.items():
        setattr(destination, key, value)
    return destination

def _public_attributes(obj):
    names = set(name for name in dir(type(obj)) if not name.startswith('_'))
    names.update(name for name in vars(obj) if not name.startswith('_'))
    for name in sorted(names):
        value = getattr(obj, name, None)
        if callable(value) and not isinstance(value, type):
            continue
        if isinstance(getattr(type(obj), name, None), property):
            continue
        yield name, value

def copyAttributes(destination, source):
    """Copy the public, non-callable attribute values of source (class
       defaults included) into the destination dict."""
    if destination is None:
        destination = {}
    if source is None:
        return destination
    for name, value in _public_attributes(source):
        if isinstance(value, type):
            continue
        destination[name] = value
    return destination

def reset(obj):
    "Null out every public instance attribute of obj."
    for name in list(vars(obj)):
        if not name.startswith('_'):
            setattr(obj, name, None)

def release(*values):
    """Call destroy() on every value which has one. Lists and tuples are
       released item by item; raw structs are left alone."""
    for value in values:
        if isinstance(value, sequence):
            release(*value)
        elif hasattr(value, 'destroy'):
            value.destroy()

def jsonStruct(value):
    """Convert value into plain JSON-ready structures, calling
       toServerJSONObject() on objects which define it."""
    if value is None or isinstance(value, (bool, str) + numeric):
        return value
    if hasattr(value, 'toServerJSONObject'):
        return jsonStruct(value.toServerJSONObject())
    if isinstance(value, dict):
        return dict((str(k), jsonStruct(v)) for k, v in value.items())
    if isinstance(value, (list, tuple, set)):
        return [jsonStruct(v) for v in value]
    if hasattr(value, '__dict__'):
        return jsonStruct(copyAttributes({}, value))
    raise ValueError("Cannot convert %r to JSON" % (value,))

def toJSON(value):
    "Serialize value (see jsonStruct) to a JSON string."
    return json.dumps(jsonStruct(value))

def _origin(url):
    scheme, netloc = urlsplit(url)[:2]
    if not netloc:
        return None
    scheme = scheme.lower()
    host, _, port = netloc.rpartition('@')[2].partition(':')
    port = int(port) if port else _default_ports.get(scheme)
    return (scheme, host.lower(), port)

def isInTheSameDomain(url, origin=None):
    """Whether url is served from the same origin (scheme, host and port)
       as origin. Without an origin there is no page to be cross-origin to,
       so every URL counts as same-domain; so does a relative URL."""
    if not url or origin is None:
        return True
    target = _origin(url)
    if target is None:
        return True
    return target == _origin(origin)

def appendQuery(url, params):
    """Return url with params added to its query string. Booleans are
       lowercased and None values are dropped."""
    urllist = list(urlsplit(url))
    query = parse_qsl(urllist[3], keep_blank_values=True)
    for key, val in params.items():
        if val is None:
            continue
        if isinstance(val, bool):
            val = str(val).lower()
        query.append((key, str(val)))
    urllist[3] = urlencode(query)
    return urlunsplit(urllist)

def stripJsonp(text):
    "Unwrap a callback({...}) JSONP payload; other text is returned as is."
    stripped = text.strip()
    if stripped[:1] in ('{', '[', '"') or not stripped:
        return stripped
    match = _jsonp_pattern.match(stripped)
    if match:
        return match.group(1)
    return stripped
