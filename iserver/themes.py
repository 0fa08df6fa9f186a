# coding: utf-8
"""This module provides the thematic map definitions the server renders:
   graduated symbol, unique value and range themes, with the flow, offset
   and style settings they own. Themes are sent to the server as part of a
   temporary layer set (see iserver.server.ThemeService) and come back
   inside ServerTheme layers."""

import re

from . import utils
from .styles import ServerStyle

__all__ = ['GraduatedMode', 'ThemeType', 'RangeMode', 'ColorGradientType',
           'ThemeMemoryData', 'Theme', 'ThemeFlow', 'ThemeOffset',
           'ThemeGraduatedSymbolStyle', 'ThemeGraduatedSymbol',
           'ThemeUniqueItem', 'ThemeUnique', 'ThemeRangeItem', 'ThemeRange']

# A 'source':"target" pair of the memory data string; quotes inside a value
# are backslash escaped
_memory_pair = re.compile(r'''(['"])((?:\\.|(?!\1).)*)\1\s*:\s*'''
                          r'''(['"])((?:\\.|(?!\3).)*)\3''', re.S)
_escaped = re.compile(r'\\(.)', re.S)

def _quote(value, quote):
    value = str(value).replace('\\', '\\\\').replace(quote, '\\' + quote)
    return quote + value + quote

class GraduatedMode(object):
    """How values are scaled before sizing graduated symbols"""
    CONSTANT = "CONSTANT"
    LOGARITHM = "LOGARITHM"
    SQUAREROOT = "SQUAREROOT"

class ThemeType(object):
    UNIQUE = "UNIQUE"
    RANGE = "RANGE"
    GRAPH = "GRAPH"
    GRADUATEDSYMBOL = "GRADUATEDSYMBOL"
    DOTDENSITY = "DOTDENSITY"
    LABEL = "LABEL"

class RangeMode(object):
    CUSTOMINTERVAL = "CUSTOMINTERVAL"
    EQUALINTERVAL = "EQUALINTERVAL"
    LOGARITHM = "LOGARITHM"
    QUANTILE = "QUANTILE"
    SQUAREROOT = "SQUAREROOT"
    STDDEVIATION = "STDDEVIATION"

class ColorGradientType(object):
    BLACK_WHITE = "BLACKWHITE"
    BLUE_BLACK = "BLUEBLACK"
    BLUE_RED = "BLUERED"
    BLUE_WHITE = "BLUEWHITE"
    CYAN_BLACK = "CYANBLACK"
    GREEN_BLACK = "GREENBLACK"
    GREEN_BLUE = "GREENBLUE"
    GREEN_RED = "GREENRED"
    RED_BLACK = "REDBLACK"
    RED_WHITE = "REDWHITE"
    SPECTRUM = "SPECTRUM"
    TERRAIN = "TERRAIN"
    YELLOW_BLUE = "YELLOWBLUE"
    YELLOW_GREEN = "YELLOWGREEN"
    YELLOW_RED = "YELLOWRED"

class ThemeMemoryData(object):
    """Replaces source values of the thematic field with target values
       before the server classifies them. srcData and targetData are
       parallel lists."""
    def __init__(self, srcData, targetData):
        self.srcData = srcData
        self.targetData = targetData
    def __repr__(self):
        return "<ThemeMemoryData %s>" % self.toServerJSONObject()
    def destroy(self):
        self.srcData = None
        self.targetData = None
    def toServerJSONObject(self):
        """The server takes memory data as a string in the form
           {'src1':"target1",'src2':"target2"}"""
        if not self.srcData or not self.targetData:
            return None
        pairs = zip(self.srcData, self.targetData)
        return "{%s}" % ",".join("%s:%s" % (_quote(src, "'"),
                                            _quote(target, '"'))
                                 for src, target in pairs)
    @classmethod
    def fromJson(cls, struct):
        if struct is None or isinstance(struct, ThemeMemoryData):
            return struct
        if isinstance(struct, dict):
            return cls(list(struct.keys()), list(struct.values()))
        if isinstance(struct, str):
            pairs = _memory_pair.findall(struct)
            return cls([_escaped.sub(r'\1', src) for _, src, _, _ in pairs],
                       [_escaped.sub(r'\1', tgt) for _, _, _, tgt in pairs])
        raise ValueError("Cannot read memory data from %r" % (struct,))

class Theme(object):
    """Base type for themes. Subclasses register themselves by their server
       type name so fromJson can pick the right class."""
    #: Mapping from server theme type to class
    _theme_type_mapping = {}
    __theme_type__ = None
    memoryData = None
    def __init__(self, type=None, options=None):
        self.type = type or self.__theme_type__
        utils.extend(self, options)
    def __repr__(self):
        return "<%s %r>" % (self.__class__.__name__, self.type)
    def __str__(self):
        return self.toJSON()
    @classmethod
    def _register_type(cls, newcls):
        cls._theme_type_mapping[newcls.__theme_type__] = newcls
        return newcls
    def destroy(self):
        utils.release(self.memoryData)
        self.memoryData = None
        self.type = None
    def _memory_data_struct(self):
        if self.memoryData is None:
            return None
        return ThemeMemoryData.fromJson(self.memoryData).toServerJSONObject()
    def toServerJSONObject(self):
        return {'type': self.type, 'memoryData': self._memory_data_struct()}
    def toJSON(self):
        return utils.toJSON(self.toServerJSONObject())

class ThemeFlow(object):
    """Controls whether graduated symbols or labels float away from their
       features and how leader lines are drawn to them."""
    flowEnabled = False
    leaderLineDisplayed = False
    def __init__(self, options=None):
        self.leaderLineStyle = ServerStyle()
        utils.extend(self, options)
    def destroy(self):
        utils.release(self.leaderLineStyle)
        utils.reset(self)
    @classmethod
    def fromJson(cls, struct):
        if struct is None:
            return None
        return cls({'flowEnabled': struct.get('flowEnabled', False),
                    'leaderLineDisplayed':
                        struct.get('leaderLineDisplayed', False),
                    'leaderLineStyle':
                        ServerStyle.fromJson(struct.get('leaderLineStyle'))})

class ThemeOffset(object):
    """Offset of a thematic element from the interior point of its
       feature. offsetX and offsetY are numbers or field expressions."""
    offsetFixed = False
    offsetX = "0.0"
    offsetY = "0.0"
    def __init__(self, options=None):
        utils.extend(self, options)
    def destroy(self):
        utils.reset(self)
    @classmethod
    def fromJson(cls, struct):
        if struct is None:
            return None
        return cls({'offsetFixed': struct.get('offsetFixed', False),
                    'offsetX': struct.get('offsetX', "0.0"),
                    'offsetY': struct.get('offsetY', "0.0")})

class ThemeGraduatedSymbolStyle(object):
    """Styles of positive, negative and zero values of a graduated symbol
       theme. Negative and zero values are hidden unless enabled."""
    negativeDisplayed = False
    zeroDisplayed = False
    def __init__(self, options=None):
        self.negativeStyle = ServerStyle()
        self.positiveStyle = ServerStyle()
        self.zeroStyle = ServerStyle()
        utils.extend(self, options)
    def destroy(self):
        utils.release(self.negativeStyle, self.positiveStyle, self.zeroStyle)
        utils.reset(self)
    @classmethod
    def fromJson(cls, struct):
        if struct is None:
            return None
        return cls({'negativeDisplayed': struct.get('negativeDisplayed',
                                                    False),
                    'negativeStyle':
                        ServerStyle.fromJson(struct.get('negativeStyle')),
                    'positiveStyle':
                        ServerStyle.fromJson(struct.get('positiveStyle')),
                    'zeroDisplayed': struct.get('zeroDisplayed', False),
                    'zeroStyle':
                        ServerStyle.fromJson(struct.get('zeroStyle'))})

@Theme._register_type
class ThemeGraduatedSymbol(Theme):
    """Graduated symbol theme: symbols whose size reflects the value of a
       numeric field or field expression, drawn independently of the
       feature's own geometry.

       Each symbol is drawn at style.positiveStyle (or zero/negative style)
       markerSize * value / baseValue, where value is the expression value
       after graduatedMode scaling."""
    __theme_type__ = ThemeType.GRADUATEDSYMBOL
    baseValue = 0
    expression = None
    graduatedMode = GraduatedMode.CONSTANT
    def __init__(self, options=None):
        self.flow = ThemeFlow()
        self.offset = ThemeOffset()
        self.style = ThemeGraduatedSymbolStyle()
        super(ThemeGraduatedSymbol, self).__init__(self.__theme_type__,
                                                   options)
    def destroy(self):
        super(ThemeGraduatedSymbol, self).destroy()
        utils.release(self.flow, self.offset, self.style)
        self.expression = None
        self.flow = None
        self.graduatedMode = GraduatedMode.CONSTANT
        self.offset = None
        self.style = None
    def toServerJSONObject(self):
        obj = super(ThemeGraduatedSymbol, self).toServerJSONObject()
        obj['baseValue'] = self.baseValue
        obj['expression'] = self.expression
        obj['graduatedMode'] = self.graduatedMode
        if self.flow is not None:
            obj['flowEnabled'] = self.flow.flowEnabled
            obj['leaderLineDisplayed'] = self.flow.leaderLineDisplayed
            obj['leaderLineStyle'] = self.flow.leaderLineStyle
        if self.offset is not None:
            obj['offsetFixed'] = self.offset.offsetFixed
            obj['offsetX'] = self.offset.offsetX
            obj['offsetY'] = self.offset.offsetY
        if self.style is not None:
            obj['negativeStyle'] = self.style.negativeStyle
            obj['negativeDisplayed'] = self.style.negativeDisplayed
            obj['positiveStyle'] = self.style.positiveStyle
            obj['zeroDisplayed'] = self.style.zeroDisplayed
            obj['zeroStyle'] = self.style.zeroStyle
        return utils.jsonStruct(obj)
    @classmethod
    def fromJson(cls, struct):
        if not struct:
            return None
        res = cls({'baseValue': struct.get('baseValue', 0),
                   'expression': struct.get('expression'),
                   'graduatedMode': struct.get('graduatedMode',
                                               GraduatedMode.CONSTANT),
                   'memoryData':
                       ThemeMemoryData.fromJson(struct.get('memoryData'))})
        res.flow = ThemeFlow.fromJson(struct)
        res.offset = ThemeOffset.fromJson(struct)
        res.style = ThemeGraduatedSymbolStyle.fromJson(struct)
        return res

class ThemeUniqueItem(object):
    """One unique value of a unique value theme and its style"""
    caption = None
    unique = None
    visible = True
    def __init__(self, options=None):
        self.style = ServerStyle()
        utils.extend(self, options)
    def destroy(self):
        utils.release(self.style)
        utils.reset(self)
    def toServerJSONObject(self):
        return {'caption': self.caption,
                'unique': self.unique,
                'visible': self.visible,
                'style': utils.jsonStruct(self.style)}
    @classmethod
    def fromJson(cls, struct):
        if struct is None:
            return None
        return cls({'caption': struct.get('caption'),
                    'unique': struct.get('unique'),
                    'visible': struct.get('visible', True),
                    'style': ServerStyle.fromJson(struct.get('style'))})

@Theme._register_type
class ThemeUnique(Theme):
    """Unique value theme: features sharing a value of uniqueExpression
       share a style; unmatched values use defaultStyle."""
    __theme_type__ = ThemeType.UNIQUE
    uniqueExpression = None
    colorGradientType = ColorGradientType.YELLOW_RED
    def __init__(self, options=None):
        self.defaultStyle = ServerStyle()
        self.items = []
        super(ThemeUnique, self).__init__(self.__theme_type__, options)
    def destroy(self):
        super(ThemeUnique, self).destroy()
        self.uniqueExpression = None
        utils.release(self.defaultStyle, self.items)
        self.defaultStyle = None
        self.items = None
    def toServerJSONObject(self):
        obj = super(ThemeUnique, self).toServerJSONObject()
        obj['uniqueExpression'] = self.uniqueExpression
        obj['colorGradientType'] = self.colorGradientType
        obj['defaultStyle'] = utils.jsonStruct(self.defaultStyle)
        obj['items'] = [utils.jsonStruct(item) for item in self.items or []]
        return obj
    @classmethod
    def fromJson(cls, struct):
        if not struct:
            return None
        return cls({'uniqueExpression': struct.get('uniqueExpression'),
                    'colorGradientType':
                        struct.get('colorGradientType',
                                   ColorGradientType.YELLOW_RED),
                    'defaultStyle':
                        ServerStyle.fromJson(struct.get('defaultStyle')),
                    'items': [ThemeUniqueItem.fromJson(item)
                              for item in struct.get('items') or []],
                    'memoryData':
                        ThemeMemoryData.fromJson(struct.get('memoryData'))})

class ThemeRangeItem(object):
    """One [start, end) segment of a range theme and its style"""
    caption = None
    start = 0
    end = 0
    visible = True
    def __init__(self, options=None):
        self.style = ServerStyle()
        utils.extend(self, options)
    def destroy(self):
        utils.release(self.style)
        utils.reset(self)
    def toServerJSONObject(self):
        return {'caption': self.caption,
                'start': self.start,
                'end': self.end,
                'visible': self.visible,
                'style': utils.jsonStruct(self.style)}
    @classmethod
    def fromJson(cls, struct):
        if struct is None:
            return None
        return cls({'caption': struct.get('caption'),
                    'start': struct.get('start', 0),
                    'end': struct.get('end', 0),
                    'visible': struct.get('visible', True),
                    'style': ServerStyle.fromJson(struct.get('style'))})

@Theme._register_type
class ThemeRange(Theme):
    """Range theme: rangeExpression values are split into segments by
       rangeMode and every segment gets its own style."""
    __theme_type__ = ThemeType.RANGE
    precision = "1.0E-10"
    rangeExpression = None
    rangeMode = RangeMode.EQUALINTERVAL
    rangeParameter = 0
    colorGradientType = ColorGradientType.YELLOW_RED
    def __init__(self, options=None):
        self.items = []
        super(ThemeRange, self).__init__(self.__theme_type__, options)
    def destroy(self):
        super(ThemeRange, self).destroy()
        self.rangeExpression = None
        self.rangeMode = RangeMode.EQUALINTERVAL
        utils.release(self.items)
        self.items = None
    def toServerJSONObject(self):
        obj = super(ThemeRange, self).toServerJSONObject()
        obj['precision'] = self.precision
        obj['rangeExpression'] = self.rangeExpression
        obj['rangeMode'] = self.rangeMode
        obj['rangeParameter'] = self.rangeParameter
        obj['colorGradientType'] = self.colorGradientType
        obj['items'] = [utils.jsonStruct(item) for item in self.items or []]
        return obj
    @classmethod
    def fromJson(cls, struct):
        if not struct:
            return None
        return cls({'precision': struct.get('precision', "1.0E-10"),
                    'rangeExpression': struct.get('rangeExpression'),
                    'rangeMode': struct.get('rangeMode',
                                            RangeMode.EQUALINTERVAL),
                    'rangeParameter': struct.get('rangeParameter', 0),
                    'colorGradientType':
                        struct.get('colorGradientType',
                                   ColorGradientType.YELLOW_RED),
                    'items': [ThemeRangeItem.fromJson(item)
                              for item in struct.get('items') or []],
                    'memoryData':
                        ThemeMemoryData.fromJson(struct.get('memoryData'))})

def fromJson(struct):
    """Convert a server theme struct to the Theme subclass registered for
       its type. Unknown types raise KeyError."""
    if not struct:
        return None
    if isinstance(struct, Theme):
        return struct
    theme_type = struct.get('type')
    if theme_type not in Theme._theme_type_mapping:
        raise KeyError("No theme type %r registered" % theme_type)
    return Theme._theme_type_mapping[theme_type].fromJson(struct)
