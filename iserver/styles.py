# coding: utf-8
"""Style objects. ServerStyle and ServerColor are the rendering styles the
   server understands (used by themes and layers); ThemeStyle is the
   client-side style of a thematic feature and can be converted into a
   ServerStyle before being sent."""

from . import utils

__all__ = ['ServerColor', 'ServerStyle', 'ThemeStyle']

class ServerColor(object):
    """An RGB color as the server encodes it. Defaults to red."""
    def __init__(self, red=255, green=0, blue=0):
        self.red, self.green, self.blue = red, green, blue
    def __repr__(self):
        return "<ServerColor (%r, %r, %r)>" % (self.red, self.green, self.blue)
    def __eq__(self, other):
        if not isinstance(other, ServerColor):
            return NotImplemented
        return ((self.red, self.green, self.blue) ==
                (other.red, other.green, other.blue))
    @property
    def hex(self):
        return "#%02x%02x%02x" % (self.red, self.green, self.blue)
    def toServerJSONObject(self):
        return {'red': self.red, 'green': self.green, 'blue': self.blue}
    @classmethod
    def fromHex(cls, value):
        "Parse #rrggbb or #rgb"
        value = value.lstrip('#')
        if len(value) == 3:
            value = ''.join(c * 2 for c in value)
        if len(value) != 6:
            raise ValueError("Not a hexadecimal color: %r" % value)
        return cls(*(int(value[i:i + 2], 16) for i in (0, 2, 4)))
    @classmethod
    def fromJson(cls, struct):
        if struct is None:
            return None
        if isinstance(struct, ServerColor):
            return struct
        if isinstance(struct, str):
            return cls.fromHex(struct)
        return cls(struct.get('red', 255),
                   struct.get('green', 0),
                   struct.get('blue', 0))

class ServerStyle(object):
    """The style of points, lines and fills as rendered by the server."""
    fillBackOpaque = False
    fillGradientMode = None
    fillGradientAngle = 0
    fillGradientOffsetRatioX = 0
    fillGradientOffsetRatioY = 0
    #: Fill opacity in percent, 100 is fully opaque
    fillOpaqueRate = 100
    fillSymbolID = 0
    lineSymbolID = 0
    #: Line width in millimeters
    lineWidth = 1
    markerAngle = 0
    #: Marker size in millimeters
    markerSize = 1
    markerSymbolID = -1
    _colors = ('fillBackColor', 'fillForeColor', 'lineColor')
    def __init__(self, options=None):
        self.fillBackColor = ServerColor(255, 255, 255)
        self.fillForeColor = ServerColor(255, 0, 0)
        self.lineColor = ServerColor(0, 0, 0)
        utils.extend(self, options)
    def __repr__(self):
        return "<ServerStyle fill=%s line=%s>" % (
            getattr(self.fillForeColor, 'hex', None),
            getattr(self.lineColor, 'hex', None))
    def __eq__(self, other):
        if not isinstance(other, ServerStyle):
            return NotImplemented
        return self.toServerJSONObject() == other.toServerJSONObject()
    def destroy(self):
        utils.reset(self)
    def toServerJSONObject(self):
        struct = utils.copyAttributes({}, self)
        for name in self._colors:
            if struct.get(name) is not None:
                struct[name] = ServerColor.fromJson(
                                    struct[name]).toServerJSONObject()
        return struct
    @classmethod
    def fromJson(cls, struct):
        if struct is None:
            return None
        if isinstance(struct, ServerStyle):
            return struct
        style = cls(struct)
        for name in cls._colors:
            if name in struct:
                setattr(style, name, ServerColor.fromJson(struct[name]))
        return style

class ThemeStyle(object):
    """Client-side style of a thematic feature: fill, stroke, point, shadow
       and label settings. fill and stroke should not both be False."""
    fill = True
    fillColor = "#000000"
    fillOpacity = 1
    stroke = False
    strokeColor = "#000000"
    strokeOpacity = 1
    strokeWidth = 1
    #: butt, round or square
    strokeLinecap = "butt"
    #: miter, round or bevel
    strokeLineJoin = "miter"
    #: dot, dash, dashdot, longdash, longdashdot, solid, dashed or dotted
    strokeDashstyle = "solid"
    pointRadius = 6
    shadowBlur = 0
    shadowColor = "#000000"
    shadowOffsetX = 0
    shadowOffsetY = 0
    label = ""
    fontColor = ""
    fontSize = 12
    fontStyle = "normal"
    fontVariant = "normal"
    fontWeight = "normal"
    fontFamily = "arial,sans-serif"
    #: inside, left, right, top or bottom
    labelPosition = "top"
    labelAlign = "center"
    labelBaseline = "middle"
    labelXOffset = 0
    labelYOffset = 0
    def __init__(self, options=None):
        utils.extend(self, options)
    def __repr__(self):
        return "<ThemeStyle fill=%r stroke=%r>" % (self.fillColor,
                                                   self.strokeColor)
    def toServerJSONObject(self):
        return utils.copyAttributes({}, self)
    def toServerStyle(self):
        """Map the fill, stroke and point settings onto the closest
           ServerStyle. Opacity becomes a percentage."""
        style = ServerStyle()
        if self.fill:
            style.fillForeColor = ServerColor.fromHex(self.fillColor)
            style.fillOpaqueRate = int(round(self.fillOpacity * 100))
        else:
            style.fillOpaqueRate = 0
        if self.stroke:
            style.lineColor = ServerColor.fromHex(self.strokeColor)
            style.lineWidth = self.strokeWidth
        else:
            style.lineWidth = 0
        style.markerSize = self.pointRadius
        return style
