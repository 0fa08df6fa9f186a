# coding: utf-8
"""Layer metadata of an iServer map service as returned by the layers
   resource. A map is a UGC layer whose subLayers are the dataset-backed
   layers (vector, theme, grid and image layers) of the map."""

from . import geometry, themes, utils
from .styles import ServerStyle

__all__ = ['LayerType', 'UGCLayerType', 'JoinType', 'DatasetInfo',
           'JoinItem', 'UGCLayer', 'UGCMapLayer', 'UGCSubLayer',
           'UGCVectorLayer', 'ServerTheme']

class LayerType(object):
    UGC = "UGC"
    WMS = "WMS"
    WFS = "WFS"
    CUSTOM = "CUSTOM"

class UGCLayerType(object):
    THEME = "THEME"
    VECTOR = "VECTOR"
    GRID = "GRID"
    IMAGE = "IMAGE"

class JoinType(object):
    INNERJOIN = "INNERJOIN"
    LEFTJOIN = "LEFTJOIN"

class DatasetInfo(object):
    """Dataset a layer draws from: dataset name, datasource and type"""
    bounds = None
    dataSourceName = None
    name = None
    type = None
    def __init__(self, options=None):
        utils.extend(self, options)
        if self.bounds is not None:
            self.bounds = geometry.Bounds.fromJson(self.bounds)
    def __repr__(self):
        return "<DatasetInfo %s@%s>" % (self.name, self.dataSourceName)
    def destroy(self):
        utils.reset(self)
    def toServerJSONObject(self):
        return utils.jsonStruct(utils.copyAttributes({}, self))

class JoinItem(object):
    """Joins an external table to the layer's dataset. joinFilter is the
       join condition, for example "World.CountryName = Capital.Country"."""
    foreignTableName = None
    joinFilter = None
    joinType = None
    def __init__(self, options=None):
        utils.extend(self, options)
    def __repr__(self):
        return "<JoinItem %s %s>" % (self.joinType, self.foreignTableName)
    def destroy(self):
        utils.reset(self)
    def toServerJSONObject(self):
        return utils.copyAttributes({}, self)
    @classmethod
    def fromJson(cls, struct):
        if struct is None or isinstance(struct, JoinItem):
            return struct
        return cls(struct)

class UGCLayer(object):
    """Base layer type. Subclasses register themselves by ugcLayerType so
       fromJson can rebuild a typed layer from any layer struct."""
    #: Conversion table from ugcLayerType to class
    _layer_type_mapping = {}
    __ugc_layer_type__ = None
    bounds = None
    caption = None
    description = None
    name = None
    queryable = None
    subLayers = None
    type = None
    visible = None
    def __init__(self, options=None):
        utils.extend(self, options)
    def __repr__(self):
        return "<%s %r>" % (self.__class__.__name__, self.name)
    @classmethod
    def _register_layer_type(cls, subclass):
        cls._layer_type_mapping[subclass.__ugc_layer_type__] = subclass
        return subclass
    @property
    def layers(self):
        "Typed sub layers, or an empty list"
        return list(self.subLayers or [])
    def _fromJson(self, struct):
        utils.extend(self, struct)
        if self.bounds is not None:
            self.bounds = geometry.Bounds.fromJson(self.bounds)
        sublayers = self.subLayers
        if isinstance(sublayers, dict):
            sublayers = sublayers.get('layers')
        if sublayers is not None:
            self.subLayers = [fromJson(layer) for layer in sublayers]
    @classmethod
    def fromJson(cls, struct):
        if struct is None:
            return None
        layer = cls()
        layer._fromJson(struct)
        return layer
    def destroy(self):
        utils.release(self.subLayers)
        utils.reset(self)
    def toServerJSONObject(self):
        struct = utils.copyAttributes({}, self)
        if struct.get('subLayers') is not None:
            struct['subLayers'] = {'layers': [utils.jsonStruct(layer) for
                                              layer in struct['subLayers']]}
        return utils.jsonStruct(struct)

class UGCMapLayer(UGCLayer):
    """A layer of a map with its display settings"""
    completeLineSymbolDisplayed = None
    maxScale = None
    minScale = None
    minVisibleGeometrySize = None
    opaqueRate = None
    selectable = None
    symbolScalable = None
    symbolScale = None

class UGCSubLayer(UGCMapLayer):
    """A dataset-backed layer of a map: image, theme, grid and vector layers
       all derive from this."""
    datasetInfo = None
    displayFilter = None
    joinItems = None
    representationField = None
    ugcLayerType = None
    def _fromJson(self, struct):
        super(UGCSubLayer, self)._fromJson(struct)
        if self.datasetInfo is not None:
            self.datasetInfo = DatasetInfo(self.datasetInfo)
        if self.joinItems:
            self.joinItems = [JoinItem.fromJson(item)
                              for item in self.joinItems]
    def destroy(self):
        utils.release(self.datasetInfo, self.joinItems)
        super(UGCSubLayer, self).destroy()

@UGCLayer._register_layer_type
class UGCVectorLayer(UGCSubLayer):
    """Vector layer, drawn with a single ServerStyle"""
    __ugc_layer_type__ = UGCLayerType.VECTOR
    style = None
    def _fromJson(self, struct):
        super(UGCVectorLayer, self)._fromJson(struct)
        if self.style is not None:
            self.style = ServerStyle.fromJson(self.style)

@UGCLayer._register_layer_type
class ServerTheme(UGCSubLayer):
    """Theme layer: a dataset layer drawn through a theme"""
    __ugc_layer_type__ = UGCLayerType.THEME
    theme = None
    themeElementPosition = None
    def _fromJson(self, struct):
        super(ServerTheme, self)._fromJson(struct)
        # Theme types without a client class stay as raw structs
        if (isinstance(self.theme, dict) and
                self.theme.get('type') in themes.Theme._theme_type_mapping):
            self.theme = themes.fromJson(self.theme)
        if self.themeElementPosition is not None:
            self.themeElementPosition = geometry.Point.fromJson(
                                                self.themeElementPosition)
    def destroy(self):
        utils.release(self.theme)
        super(ServerTheme, self).destroy()
    def toServerJSONObject(self):
        struct = super(ServerTheme, self).toServerJSONObject()
        if self.themeElementPosition is not None:
            struct['themeElementPosition'] = \
                self.themeElementPosition._json_point
        return struct

def fromJson(struct):
    """Convert a layer struct to a typed layer: dataset layers by their
       ugcLayerType, anything else (such as a map's root layer) to a
       UGCMapLayer."""
    if struct is None:
        return None
    if isinstance(struct, UGCLayer):
        return struct
    if 'ugcLayerType' in struct or 'datasetInfo' in struct:
        layertype = UGCLayer._layer_type_mapping.get(
                                struct.get('ugcLayerType'), UGCSubLayer)
        return layertype.fromJson(struct)
    return UGCMapLayer.fromJson(struct)
