# coding: utf-8
"""This module implements the JSON geometry objects as sent to and returned
   by the iServer REST API. The server describes every geometry with the
   same "server geometry" structure: a type (POINT, LINE or REGION), a flat
   list of points and a list of part sizes which splits the points into
   paths or rings. Query extents are sent as bounds."""

import json

__all__ = ['Geometry', 'Point', 'LineString', 'Polygon', 'Bounds']

def pointlist(points):
    """Convert a list of the form [[x, y] ...] or [{'x': x, 'y': y} ...] to a
       list of Point instances."""
    return [Point.fromJson(coord) if isinstance(coord, dict)
            else coord if isinstance(coord, Point)
            else Point(coord[0], coord[1])
            for coord in points]

def splitparts(points, parts):
    """Split a flat point list into sublists with the sizes in parts. No
       parts means a single part holding every point."""
    if not parts:
        return [points] if points else []
    out, start = [], 0
    for size in parts:
        out.append(points[start:start + size])
        start += size
    return out

def nestparts(items):
    """Normalize a single path (a list of points) or a list of paths into
       a list of paths."""
    if not items:
        return []
    first = items[0]
    if isinstance(first, (Point, dict)):
        return [items]
    if first and not isinstance(first[0], (list, tuple, dict, Point)):
        return [items]
    return items

class Geometry(object):
    """Represents an abstract base for json-represented geometries on
       the iServer REST API. Please refer to Point, LineString and Polygon
       in this module. Calling str() on any geometry returns its server
       JSON."""
    __geometry_type__ = None
    id = 0
    style = None
    def __init__(self):
        raise NotImplementedError("Cannot instantiate abstract geometry type")
    def __len__(self):
        raise NotImplementedError("Length not implemented for %r" %
                                   self.__class__.__name__)
    @property
    def __geo_interface__(self):
        raise NotImplementedError("Unimplemented conversion to GeoJSON")
    @property
    def _parts(self):
        raise NotImplementedError("Unimplemented conversion to JSON")
    def toServerJSONObject(self):
        parts = self._parts
        style = self.style
        if style is not None and hasattr(style, 'toServerJSONObject'):
            style = style.toServerJSONObject()
        return {'id': self.id,
                'type': self.__geometry_type__,
                'parts': [len(part) for part in parts],
                'points': [pt._json_point for part in parts for pt in part],
                'style': style}
    def __str__(self):
        return json.dumps(self.toServerJSONObject())
    def __eq__(self, other):
        if not isinstance(other, Geometry):
            return NotImplemented
        return (self.__geometry_type__ == other.__geometry_type__ and
                self._parts == other._parts)
    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result
    __hash__ = None
    @classmethod
    def fromJson(cls, struct):
        raise NotImplementedError("Unimplemented convert from JSON")
    @classmethod
    def _stamp(cls, instance, struct):
        instance.id = struct.get('id', 0)
        if struct.get('style') is not None:
            from .styles import ServerStyle
            instance.style = ServerStyle.fromJson(struct['style'])
        return instance

class Point(Geometry):
    """A point contains x and y fields."""
    __geometry_type__ = "POINT"
    def __init__(self, x, y):
        """
        @param x: The X coordinate of the Point
        @param y: The Y coordinate of the Point

                >>> iserver.geometry.Point(10, 10)
                POINT(10.00000 10.00000)
        """
        self.x, self.y = float(x), float(y)
    def __repr__(self):
        return "POINT(%0.5f %0.5f)" % (self.x, self.y)
    def __len__(self):
        return 2
    def __iter__(self):
        yield self.x
        yield self.y
    def __getitem__(self, index):
        return [self.x, self.y][index]
    def __eq__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return (self.x, self.y) == (other.x, other.y)
    @property
    def __geo_interface__(self):
        return {'type': 'Point', 'coordinates': [self.x, self.y]}
    @property
    def _json_point(self):
        return {'x': self.x, 'y': self.y}
    @property
    def _parts(self):
        return [[self]]
    @classmethod
    def fromJson(cls, struct):
        if 'points' in struct:
            if not struct['points']:
                raise ValueError("Point geometry without coordinates")
            return cls._stamp(cls.fromJson(struct['points'][0]), struct)
        return cls(struct['x'], struct['y'])

class LineString(Geometry):
    """A line contains one or more paths, each a list of points. The server
       calls this geometry type LINE."""
    __geometry_type__ = "LINE"
    def __init__(self, paths=None):
        """Create a line from a list of paths, where every path is a list of
           Point instances or [x, y] pairs. A single flat list of points is
           taken as one path."""
        self.paths = [pointlist(path) for path in nestparts(paths)]
    def __repr__(self):
        return "LINESTRING(%s)" % ",".join(
            "(%s)" % ",".join("%0.5f %0.5f" % (pt.x, pt.y) for pt in path)
            for path in self.paths)
    def __len__(self):
        return len(self.paths)
    @property
    def __geo_interface__(self):
        if len(self.paths) == 1:
            return {'type': 'LineString',
                    'coordinates': [list(pt) for pt in self.paths[0]]}
        return {'type': 'MultiLineString',
                'coordinates': [[list(pt) for pt in path]
                                for path in self.paths]}
    @property
    def _parts(self):
        return self.paths
    @classmethod
    def fromJson(cls, struct):
        points = pointlist(struct.get('points') or [])
        return cls._stamp(cls(splitparts(points, struct.get('parts'))),
                          struct)

class Polygon(Geometry):
    """A polygon contains one or more rings. The server calls this geometry
       type REGION."""
    __geometry_type__ = "REGION"
    def __init__(self, rings=None):
        """Create a polygon from a list of rings, where every ring is a list
           of Point instances or [x, y] pairs. Rings are closed on output if
           the caller left them open."""
        self.rings = [pointlist(ring) for ring in nestparts(rings)]
    def __repr__(self):
        return "POLYGON(%s)" % ",".join(
            "(%s)" % ",".join("%0.5f %0.5f" % (pt.x, pt.y) for pt in ring)
            for ring in self._parts)
    def __len__(self):
        return len(self.rings)
    def __contains__(self, pt):
        if isinstance(pt, Point):
            x, y = pt.x, pt.y
        else:
            x, y = pt[:2]
        inside = False
        # Even-odd rule over all rings
        for ring in self._parts:
            for a, b in zip(ring, ring[1:]):
                if (a.y > y) != (b.y > y):
                    cross = (b.x - a.x) * (y - a.y) / (b.y - a.y) + a.x
                    if x < cross:
                        inside = not inside
        return inside
    @property
    def __geo_interface__(self):
        return {'type': 'Polygon',
                'coordinates': [[list(pt) for pt in ring]
                                for ring in self._parts]}
    @property
    def _parts(self):
        def fixring(ring):
            if ring and list(ring[0]) != list(ring[-1]):
                return ring + [ring[0]]
            return ring
        return [fixring(ring) for ring in self.rings]
    @classmethod
    def fromJson(cls, struct):
        points = pointlist(struct.get('points') or [])
        return cls._stamp(cls(splitparts(points, struct.get('parts'))),
                          struct)

class Bounds(object):
    """A rectangular extent given by its left, bottom, right and top
       coordinates. Used as the spatial filter of bounds queries and as the
       extent of layers and analysis results."""
    def __init__(self, left, bottom, right, top):
        self.left, self.bottom, self.right, self.top = \
            float(left), float(bottom), float(right), float(top)
    def __repr__(self):
        return "<Bounds %r>" % self.bbox
    def __eq__(self, other):
        if not isinstance(other, Bounds):
            return NotImplemented
        return self.bbox == other.bbox
    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result
    __hash__ = None
    def __contains__(self, pt):
        if isinstance(pt, Point):
            x, y = pt.x, pt.y
        else:
            x, y = pt[:2]
        return (self.right >= x >= self.left) and (self.top >= y >= self.bottom)
    @property
    def __geo_interface__(self):
        return {'type': 'Polygon',
                'coordinates': [[[self.left, self.bottom],
                                 [self.right, self.bottom],
                                 [self.right, self.top],
                                 [self.left, self.top],
                                 [self.left, self.bottom]]]}
    @property
    def leftBottom(self):
        return Point(self.left, self.bottom)
    @property
    def rightTop(self):
        return Point(self.right, self.top)
    @property
    def bbox(self):
        "Return the bounds as a left,bottom,right,top string"
        return ",".join(repr(attr) for attr in
                            (self.left, self.bottom, self.right, self.top))
    def toServerJSONObject(self):
        return {'left': self.left,
                'bottom': self.bottom,
                'right': self.right,
                'top': self.top,
                'leftBottom': self.leftBottom._json_point,
                'rightTop': self.rightTop._json_point}
    def toPolygon(self):
        "The bounds as a REGION geometry"
        return Polygon([[[self.left, self.bottom], [self.right, self.bottom],
                         [self.right, self.top], [self.left, self.top]]])
    @classmethod
    def fromJson(cls, struct):
        if struct is None:
            return None
        if isinstance(struct, Bounds):
            return struct
        if isinstance(struct, (list, tuple)):
            return cls(*struct)
        if 'leftBottom' in struct and 'rightTop' in struct:
            lb, rt = struct['leftBottom'], struct['rightTop']
            return cls(lb['x'], lb['y'], rt['x'], rt['y'])
        return cls(struct['left'], struct['bottom'],
                   struct['right'], struct['top'])

_geometry_types = {
    'POINT': Point,
    'POINT3D': Point,
    'LINE': LineString,
    'LINEM': LineString,
    'LINE3D': LineString,
    'REGION': Polygon,
    'REGION3D': Polygon,
}

def fromJson(struct):
    """Convert a server JSON struct to a Geometry or Bounds based on its shape.
       Typed geometries with no client class (TEXT, the EPS types, ...) are
       returned as the struct itself."""
    if struct is None:
        return None
    if isinstance(struct, str):
        struct = json.loads(struct)
    if isinstance(struct, (Geometry, Bounds)):
        return struct
    if isinstance(struct, dict):
        geometry_type = struct.get('type')
        if geometry_type in _geometry_types:
            return _geometry_types[geometry_type].fromJson(struct)
        if 'leftBottom' in struct or 'left' in struct:
            return Bounds.fromJson(struct)
        if 'x' in struct and 'y' in struct:
            return Point.fromJson(struct)
        if geometry_type is not None:
            return struct
    raise ValueError("Unconvertible to geometry")
