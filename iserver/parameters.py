# coding: utf-8
"""Request parameter objects. Each is built from an options mapping merged
   onto the class defaults and knows how to turn itself into the structure
   the server expects in a request body."""

from . import geometry, layers, utils

__all__ = ['QueryOption', 'GeometryType', 'SpatialQueryMode',
           'toServerGeometry', 'FilterParameter', 'QueryParameters',
           'QueryByBoundsParameters', 'QueryBySQLParameters',
           'QueryByDistanceParameters', 'QueryByGeometryParameters',
           'MathExpressionAnalysisParameters', 'ThemeParameters']

class QueryOption(object):
    """What a query returns"""
    ATTRIBUTE = "ATTRIBUTE"
    ATTRIBUTEANDGEOMETRY = "ATTRIBUTEANDGEOMETRY"
    GEOMETRY = "GEOMETRY"

class GeometryType(object):
    LINE = "LINE"
    LINEM = "LINEM"
    POINT = "POINT"
    REGION = "REGION"

class SpatialQueryMode(object):
    CONTAIN = "CONTAIN"
    CROSS = "CROSS"
    DISJOINT = "DISJOINT"
    IDENTITY = "IDENTITY"
    INTERSECT = "INTERSECT"
    NONE = "NONE"
    OVERLAP = "OVERLAP"
    TOUCH = "TOUCH"
    WITHIN = "WITHIN"

def toServerGeometry(value):
    """Server geometry struct for a Geometry, a Bounds (sent as a region)
       or a geometry struct"""
    if value is None:
        return None
    if isinstance(value, geometry.Bounds):
        value = value.toPolygon()
    elif isinstance(value, dict):
        value = geometry.fromJson(value)
        if isinstance(value, dict):
            return value
        if isinstance(value, geometry.Bounds):
            value = value.toPolygon()
    return value.toServerJSONObject()

class FilterParameter(object):
    """Filter applied to one layer of a query: the layer name plus an
       attribute filter (SQL WHERE clause) and optional joins, ids,
       ordering, grouping and returned fields."""
    attributeFilter = None
    name = None
    joinItems = None
    linkItems = None
    ids = None
    orderBy = None
    groupBy = None
    fields = None
    def __init__(self, options=None):
        utils.extend(self, options)
    def __repr__(self):
        return "<FilterParameter %r: %r>" % (self.name, self.attributeFilter)
    def destroy(self):
        utils.release(self.joinItems)
        utils.reset(self)
    def toServerJSONObject(self):
        struct = utils.copyAttributes({}, self)
        if self.joinItems:
            struct['joinItems'] = [
                layers.JoinItem.fromJson(item).toServerJSONObject()
                for item in self.joinItems]
        return utils.jsonStruct(struct)

class QueryParameters(object):
    """Fields shared by every query. queryParams holds one FilterParameter
       per queried layer."""
    customParams = None
    #: Dynamic projection of the results, for example {"epsgCode": 3857}
    prjCoordSys = None
    expectCount = 100000
    networkType = GeometryType.LINE
    queryOption = QueryOption.ATTRIBUTEANDGEOMETRY
    startRecord = 0
    #: Minutes the server keeps the result resource
    holdTime = 10
    returnCustomResult = False
    returnFeatureWithFieldCaption = False
    #: Return the result itself (True) or only the URI of the result resource
    returnContent = True
    _server_fields = ('customParams', 'prjCoordSys', 'expectCount',
                      'networkType', 'queryOption', 'queryParams',
                      'startRecord', 'holdTime', 'returnCustomResult',
                      'returnFeatureWithFieldCaption')
    def __init__(self, options=None):
        self.queryParams = []
        utils.extend(self, options)
    def __repr__(self):
        return "<%s %r>" % (self.__class__.__name__,
                            [getattr(f, 'name', f)
                             for f in self.queryParams or []])
    def destroy(self):
        utils.release(self.queryParams)
        self.queryParams = None
        self.customParams = None
        self.prjCoordSys = None
        self.expectCount = None
        self.networkType = None
        self.queryOption = None
        self.startRecord = None
        self.holdTime = None
        self.returnCustomResult = None
        self.returnFeatureWithFieldCaption = None
    def toServerJSONObject(self):
        """The queryParameters member of a query request body"""
        struct = dict((name, getattr(self, name))
                      for name in self._server_fields)
        struct['queryParams'] = [
            (param if isinstance(param, FilterParameter)
                   else FilterParameter(param)).toServerJSONObject()
            for param in self.queryParams or []]
        return utils.jsonStruct(struct)

class QueryByBoundsParameters(QueryParameters):
    """Query the features inside a rectangular extent"""
    bounds = None
    def __init__(self, options=None):
        super(QueryByBoundsParameters, self).__init__(options)
        if self.bounds is not None:
            self.bounds = geometry.Bounds.fromJson(self.bounds)
    def destroy(self):
        super(QueryByBoundsParameters, self).destroy()
        self.returnContent = None
        if self.bounds is not None:
            self.bounds = None

class QueryBySQLParameters(QueryParameters):
    """Query by attribute filters only"""
    def destroy(self):
        super(QueryBySQLParameters, self).destroy()
        self.returnContent = None

class QueryByDistanceParameters(QueryParameters):
    """Query the features within distance of a geometry, or the nearest
       ones when isNearest is set."""
    distance = 0
    geometry = None
    isNearest = False
    def destroy(self):
        super(QueryByDistanceParameters, self).destroy()
        self.returnContent = None
        self.distance = None
        self.geometry = None
        self.isNearest = None

class QueryByGeometryParameters(QueryParameters):
    """Query the features standing in spatialQueryMode relation to a
       geometry"""
    geometry = None
    spatialQueryMode = SpatialQueryMode.INTERSECT
    def destroy(self):
        super(QueryByGeometryParameters, self).destroy()
        self.returnContent = None
        self.geometry = None
        self.spatialQueryMode = None

class MathExpressionAnalysisParameters(object):
    """Raster algebra: evaluates expression (for example "[DatasourceAlias.
       Raster1] + [DatasourceAlias.Raster2]") over the grid dataset and
       stores the result grid as resultGridName in targetDatasource.
       extractRegion optionally clips the operation to a region."""
    dataset = None
    bounds = None
    expression = None
    extractRegion = None
    isZip = False
    ignoreNoValue = False
    targetDatasource = None
    resultGridName = None
    deleteExistResultDataset = False
    def __init__(self, options=None):
        utils.extend(self, options)
    def __repr__(self):
        return "<MathExpressionAnalysisParameters %r: %r>" % (self.dataset,
                                                              self.expression)
    def destroy(self):
        utils.reset(self)
    def toServerJSONObject(self):
        """Every field except dataset, which is part of the URL"""
        struct = utils.copyAttributes({}, self)
        del struct['dataset']
        struct['extractRegion'] = toServerGeometry(self.extractRegion)
        return utils.jsonStruct(struct)

def _nth(values, index):
    if values and index < len(values):
        return values[index]
    return None

class ThemeParameters(object):
    """Themes to apply to datasets. themes, datasetNames and dataSourceNames
       are parallel lists; displayFilters and joinItems optionally give a
       filter or a list of joins per theme."""
    displayFilters = None
    joinItems = None
    def __init__(self, options=None):
        self.datasetNames = []
        self.dataSourceNames = []
        self.themes = []
        utils.extend(self, options)
    def __repr__(self):
        return "<ThemeParameters %r>" % self.datasetNames
    def destroy(self):
        utils.release(self.themes)
        utils.reset(self)
    def toServerJSONObject(self):
        """The temporary layer set: one map layer whose sub layers are a
           theme layer per theme"""
        sublayers = []
        for i, theme in enumerate(self.themes or []):
            dataset = _nth(self.datasetNames, i)
            datasource = _nth(self.dataSourceNames, i)
            name = "@".join(part for part in (dataset, datasource) if part)
            layer = {'theme': utils.jsonStruct(theme),
                     'type': layers.LayerType.UGC,
                     'ugcLayerType': layers.UGCLayerType.THEME,
                     'name': name or None,
                     'datasetInfo': {'name': dataset,
                                     'dataSourceName': datasource}}
            displayFilter = _nth(self.displayFilters, i)
            if displayFilter:
                layer['displayFilter'] = displayFilter
            items = _nth(self.joinItems, i)
            if items:
                if not isinstance(items, (list, tuple)):
                    items = [items]
                layer['joinItems'] = [
                    layers.JoinItem.fromJson(item).toServerJSONObject()
                    for item in items]
            sublayers.append(layer)
        return [{'type': layers.LayerType.UGC,
                 'subLayers': {'layers': sublayers},
                 'name': 'map'}]
