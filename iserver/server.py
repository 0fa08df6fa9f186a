# coding: utf-8
"""The iServer REST API exposes every map, data and spatial analysis
   service as a hierarchy of resources below a service URL. Operations are
   performed by POSTing a JSON parameter object to an operation resource
   (queryResults, tempLayersSet, datasets/<name>/mathanalyst, ...) and
   reading the JSON representation the server answers with.

   Every service class below derives from CommonServiceBase, which builds
   the final resource URL, sends the request and hands the decoded answer
   to exactly one of two callbacks: processCompleted with a typed result
   object, or processFailed with a ServerError."""

import json
import logging
import urllib.error
import urllib.request
from http.cookiejar import CookieJar
from urllib.parse import quote, urlsplit, urlunsplit

from . import geometry, layers, parameters, utils

__all__ = ['USER_AGENT', 'ServerError', 'CommonServiceBase',
           'Feature', 'Recordset', 'QueryResult', 'ResourceInfo',
           'SpatialAnalystResult', 'GetLayersInfoResult',
           'SpatialAnalystBase', 'MathExpressionAnalysisService',
           'QueryService', 'QueryByBoundsService', 'QueryBySQLService',
           'QueryByDistanceService', 'QueryByGeometryService',
           'GetLayersInfoService', 'ThemeService']

log = logging.getLogger(__name__)

#: User agent to report when making requests
USER_AGENT = "Mozilla/4.0 (iserver)"

class ServerError(Exception):
    """A failed request: transport errors, undecodable answers and answers
       in which the server reports failure. code is the HTTP or server error
       code when one is known."""
    def __init__(self, message, code=None, url=None):
        super(ServerError, self).__init__(message)
        self.message = message
        self.code = code
        self.url = url
    def __str__(self):
        if self.code is not None:
            return "ERROR %r: %s <%s>" % (self.code, self.message, self.url)
        return "ERROR: %s <%s>" % (self.message, self.url)

def _error_from_struct(struct, url, code=None):
    error = struct.get('error') or {}
    if not isinstance(error, dict):
        error = {'errorMsg': str(error)}
    return ServerError(error.get('errorMsg') or
                           error.get('message') or
                           'Unspecified',
                       error.get('code', code),
                       url)

# Result types: plain wrappers around the decoded JSON answers, built
# through their fromJson class methods.

class Feature(object):
    """A feature of a query result: id, geometry and a dict of attribute
       values keyed by field name."""
    def __init__(self, id, geometry=None, attributes=None):
        self.id = id
        self.geometry = geometry
        self.attributes = attributes or {}
    def __repr__(self):
        return "<Feature %r %r>" % (self.id, self.geometry)
    def __getitem__(self, key):
        return self.attributes[key]
    @property
    def __geo_interface__(self):
        return {'type': 'Feature',
                'id': self.id,
                'geometry': getattr(self.geometry, '__geo_interface__', None),
                'properties': dict(self.attributes)}
    def toServerJSONObject(self):
        return {'ID': self.id,
                'fieldNames': list(self.attributes.keys()),
                'fieldValues': list(self.attributes.values()),
                'geometry': utils.jsonStruct(self.geometry)}
    @classmethod
    def fromJson(cls, struct):
        names = struct.get('fieldNames') or []
        values = struct.get('fieldValues') or []
        return cls(struct.get('ID'),
                   geometry.fromJson(struct.get('geometry')),
                   dict(zip(names, values)))

class Recordset(object):
    """The features found in one dataset, along with its field metadata"""
    def __init__(self, datasetName=None, features=None, fields=None,
                 fieldCaptions=None, fieldTypes=None):
        self.datasetName = datasetName
        self.features = features or []
        self.fields = fields or []
        self.fieldCaptions = fieldCaptions or []
        self.fieldTypes = fieldTypes or []
    def __repr__(self):
        return "<Recordset %r (%i features)>" % (self.datasetName,
                                                 len(self.features))
    def __iter__(self):
        return iter(self.features)
    def __len__(self):
        return len(self.features)
    @property
    def __geo_interface__(self):
        return {'type': 'FeatureCollection',
                'features': [f.__geo_interface__ for f in self.features]}
    def toServerJSONObject(self):
        return {'datasetName': self.datasetName,
                'fields': self.fields,
                'fieldCaptions': self.fieldCaptions,
                'fieldTypes': self.fieldTypes,
                'features': [f.toServerJSONObject() for f in self.features]}
    @classmethod
    def fromJson(cls, struct):
        if struct is None:
            return None
        return cls(struct.get('datasetName'),
                   [Feature.fromJson(f) for f in struct.get('features') or []],
                   struct.get('fields'),
                   struct.get('fieldCaptions'),
                   struct.get('fieldTypes'))

class ResourceInfo(object):
    """Answer of a POST which created a resource on the server without
       returning its content"""
    succeed = None
    newResourceID = None
    newResourceLocation = None
    postResultType = None
    def __init__(self, options=None):
        utils.extend(self, options)
    def __repr__(self):
        return "<ResourceInfo %r>" % self.newResourceLocation
    def toServerJSONObject(self):
        return utils.copyAttributes({}, self)
    @classmethod
    def fromJson(cls, struct):
        if struct is None:
            return None
        return cls(dict((key, struct.get(key)) for key in
                        ('succeed', 'newResourceID', 'newResourceLocation',
                         'postResultType')))

class QueryResult(object):
    """Result of a query: the matching recordsets, or only resourceInfo
       when the query was sent with returnContent switched off."""
    def __init__(self, recordsets=None, currentCount=None, totalCount=None,
                 customResponse=None, resourceInfo=None):
        self.recordsets = recordsets or []
        self.currentCount = currentCount
        self.totalCount = totalCount
        self.customResponse = customResponse
        self.resourceInfo = resourceInfo
    def __repr__(self):
        return "<QueryResult %r/%r>" % (self.currentCount, self.totalCount)
    @property
    def features(self):
        "All features of all recordsets"
        return [f for recordset in self.recordsets for f in recordset]
    def toServerJSONObject(self):
        if self.resourceInfo is not None:
            return self.resourceInfo.toServerJSONObject()
        return {'currentCount': self.currentCount,
                'totalCount': self.totalCount,
                'customResponse': self.customResponse,
                'recordsets': [r.toServerJSONObject()
                               for r in self.recordsets]}
    @classmethod
    def fromJson(cls, struct):
        if struct is None:
            return None
        if 'recordsets' not in struct and 'newResourceID' in struct:
            return cls(resourceInfo=ResourceInfo.fromJson(struct))
        return cls([Recordset.fromJson(r)
                    for r in struct.get('recordsets') or []],
                   struct.get('currentCount'),
                   struct.get('totalCount'),
                   struct.get('customResponse'))

class SpatialAnalystResult(object):
    """Result of a spatial analysis operation. dataset names the result
       dataset stored on the server (as name@datasource); recordset holds
       the result features when they were asked for."""
    def __init__(self, succeed=None, dataset=None, recordset=None,
                 message=None):
        self.succeed = succeed
        self.dataset = dataset
        self.recordset = recordset
        self.message = message
    def __repr__(self):
        return "<SpatialAnalystResult %r>" % self.dataset
    def toServerJSONObject(self):
        return {'succeed': self.succeed,
                'dataset': self.dataset,
                'recordset': utils.jsonStruct(self.recordset),
                'message': self.message}
    @classmethod
    def fromJson(cls, struct):
        if struct is None:
            return None
        return cls(struct.get('succeed'),
                   struct.get('dataset'),
                   Recordset.fromJson(struct.get('recordset')),
                   struct.get('message'))

class GetLayersInfoResult(object):
    """Layer metadata of a map: the map's own layer and its typed sub
       layers"""
    def __init__(self, map=None):
        self.map = map
    def __repr__(self):
        return "<GetLayersInfoResult %r>" % self.subLayers
    @property
    def subLayers(self):
        if self.map is None:
            return []
        return self.map.layers
    def toServerJSONObject(self):
        return [utils.jsonStruct(self.map)] if self.map is not None else []
    @classmethod
    def fromJson(cls, struct):
        if isinstance(struct, list):
            struct = struct[0] if struct else None
        return cls(layers.fromJson(struct))

class CommonServiceBase(object):
    """Base of all services. Owns the service URL and the request/response
       cycle.

       Allowed options:
         - eventListeners: {'processCompleted': fn, 'processFailed': fn}
         - isInTheSameDomain: ask for .json (True) or .jsonp (False); by
           default worked out from origin
         - origin: URL of the page the requests are made on behalf of
         - proxy: prefix for the URL-quoted request URL
         - token: iServer access token, sent as the token query parameter
         - username, password: HTTP basic/digest credentials"""
    #: Names of the events a listener can register for
    EVENT_TYPES = ('processCompleted', 'processFailed')
    #: Type built from a successful answer
    __result_type__ = None
    isInTheSameDomain = None
    origin = None
    proxy = None
    token = None

    _pwdmgr = urllib.request.HTTPPasswordMgrWithDefaultRealm()
    _cookiejar = CookieJar()
    _basic_handler = urllib.request.HTTPBasicAuthHandler(_pwdmgr)
    _digest_handler = urllib.request.HTTPDigestAuthHandler(_pwdmgr)
    _cookie_handler = urllib.request.HTTPCookieProcessor(_cookiejar)
    _opener = urllib.request.build_opener(_basic_handler,
                                          _digest_handler,
                                          _cookie_handler)

    def __init__(self, url, options=None):
        options = dict(options or {})
        listeners = options.pop('eventListeners', None) or {}
        username = options.pop('username', None)
        password = options.pop('password', None)
        self.url = url
        self.eventListeners = dict((event, []) for event in self.EVENT_TYPES)
        utils.extend(self, options)
        if self.isInTheSameDomain is None:
            self.isInTheSameDomain = utils.isInTheSameDomain(url, self.origin)
        if username is not None and password is not None:
            self._pwdmgr.add_password(None, url, username, password)
        for event, callback in listeners.items():
            self.on(event, callback)
    def __repr__(self):
        url = self.url or ''
        if len(url) > 100:
            url = url[:97] + "..."
        return "<%s(%r)>" % (self.__class__.__name__, url)
    def on(self, event, callback):
        "Register callback for processCompleted or processFailed"
        if event not in self.EVENT_TYPES:
            raise ValueError("Unknown event %r, expected one of %s" %
                             (event, ", ".join(self.EVENT_TYPES)))
        self.eventListeners[event].append(callback)
        return self
    def _fire(self, event, payload):
        for callback in list(self.eventListeners.get(event) or []):
            callback(payload)
    def _resource_url(self, path, query=None):
        """Service URL with path and the content suffix appended to its path
           component, plus any query parameters."""
        urllist = list(urlsplit(self.url))
        if not urllist[2].endswith('/'):
            urllist[2] += '/'
        urllist[2] += path + ('.json' if self.isInTheSameDomain
                              else '.jsonp')
        return utils.appendQuery(urlunsplit(urllist), query or {})
    def _parse(self, payload, url):
        """Decode an answer, raising ServerError if it can't be read or the
           server says it failed."""
        if isinstance(payload, bytes):
            payload = payload.decode('utf-8')
        try:
            struct = json.loads(utils.stripJsonp(payload) or '{}')
        except ValueError:
            raise ServerError("Invalid JSON response: %r" % payload[:100],
                              url=url)
        if isinstance(struct, dict) and (struct.get('succeed') is False or
                                         'error' in struct):
            raise _error_from_struct(struct, url)
        return struct
    def _http_error(self, err, url):
        try:
            struct = json.loads(err.read().decode('utf-8') or '{}')
        except ValueError:
            struct = None
        if isinstance(struct, dict) and 'error' in struct:
            return _error_from_struct(struct, url, err.code)
        return ServerError(str(err.reason), err.code, url)
    def request(self, method, url, data=None, success=None, failure=None):
        """Send a single request and pass the answer, converted to the
           service's result type, to success, or a ServerError to failure
           (by default serviceProcessCompleted and serviceProcessFailed).
           Returns what the callback returns."""
        success = success or self.serviceProcessCompleted
        failure = failure or self.serviceProcessFailed
        if self.token is not None:
            url = utils.appendQuery(url, {'token': self.token})
        if self.proxy:
            url = self.proxy + quote(url, safe='')
        headers = {'User-Agent': USER_AGENT}
        if data is not None:
            if not isinstance(data, str):
                data = utils.toJSON(data)
            data = data.encode('utf-8')
            headers['Content-Type'] = 'application/json;charset=UTF-8'
        log.debug("%s %s", method, url)
        request = urllib.request.Request(url, data, headers, method=method)
        try:
            handle = self._opener.open(request)
            try:
                struct = self._parse(handle.read(), url)
            finally:
                handle.close()
        except urllib.error.HTTPError as err:
            return failure(self._http_error(err, url))
        except urllib.error.URLError as err:
            return failure(ServerError(str(err.reason), url=url))
        except ServerError as err:
            return failure(err)
        try:
            result = self._result(struct)
        except (KeyError, TypeError, ValueError) as err:
            return failure(ServerError("Unreadable response: %s: %s" %
                                       (type(err).__name__, err), url=url))
        return success(result)
    def _result(self, struct):
        if self.__result_type__ is None:
            return struct
        return self.__result_type__.fromJson(struct)
    def serviceProcessCompleted(self, result):
        self._fire('processCompleted', result)
        return result
    def serviceProcessFailed(self, error):
        """Report error to the processFailed listeners. Without any
           listener the error is raised instead."""
        log.warning("Request failed: %s", error)
        if not self.eventListeners.get('processFailed'):
            raise error
        self._fire('processFailed', error)
        return None
    def destroy(self):
        self.url = None
        self.eventListeners = None
        self.isInTheSameDomain = None
        self.origin = None
        self.proxy = None
        self.token = None

class SpatialAnalystBase(CommonServiceBase):
    """Base of the spatial analysis services, rooted at a spatialanalyst
       service URL such as
       http://localhost:8090/iserver/services/spatialanalyst-changchun/restjsr/spatialanalyst"""
    __result_type__ = SpatialAnalystResult

class MathExpressionAnalysisService(SpatialAnalystBase):
    """Raster algebra service.

           >>> service = iserver.MathExpressionAnalysisService(url,
           ...     {'eventListeners': {'processCompleted': done}})
           >>> service.processAsync(iserver.MathExpressionAnalysisParameters(
           ...     {'dataset': 'JingjinTerrain@Jingjin',
           ...      'expression': '[Jingjin.JingjinTerrain] + 600',
           ...      'targetDatasource': 'Jingjin',
           ...      'resultGridName': 'MathExpression',
           ...      'deleteExistResultDataset': True}))
           <SpatialAnalystResult 'MathExpression@Jingjin'>
    """
    def processAsync(self, parameter):
        if not isinstance(parameter,
                          parameters.MathExpressionAnalysisParameters):
            raise TypeError("Expected MathExpressionAnalysisParameters, "
                            "got %r" % type(parameter))
        url = self._resource_url('datasets/%s/mathanalyst' %
                                     quote(parameter.dataset or '', safe='@'),
                                 {'returnContent': True})
        return self.request('POST', url, utils.toJSON(parameter))

class QueryService(CommonServiceBase):
    """Base of the map query services, rooted at a map URL such as
       http://localhost:8090/iserver/services/map-world/rest/maps/World"""
    __result_type__ = QueryResult
    __parameter_type__ = parameters.QueryParameters
    __query_mode__ = None
    def getJsonParameters(self, params):
        return {'queryMode': self.__query_mode__,
                'queryParameters': params.toServerJSONObject()}
    def processAsync(self, params):
        if not isinstance(params, self.__parameter_type__):
            raise TypeError("Expected %s, got %r" %
                            (self.__parameter_type__.__name__, type(params)))
        if params.returnContent:
            query = {'returnContent': True}
        else:
            query = {'returnCustomResult': bool(params.returnCustomResult)}
        url = self._resource_url('queryResults', query)
        return self.request('POST', url,
                            utils.toJSON(self.getJsonParameters(params)))

class QueryByBoundsService(QueryService):
    __parameter_type__ = parameters.QueryByBoundsParameters
    __query_mode__ = "BoundsQuery"
    def getJsonParameters(self, params):
        struct = super(QueryByBoundsService, self).getJsonParameters(params)
        bounds = geometry.Bounds.fromJson(params.bounds)
        struct['bounds'] = (bounds.toServerJSONObject()
                            if bounds is not None else None)
        return struct

class QueryBySQLService(QueryService):
    __parameter_type__ = parameters.QueryBySQLParameters
    __query_mode__ = "SqlQuery"

class QueryByDistanceService(QueryService):
    __parameter_type__ = parameters.QueryByDistanceParameters
    __query_mode__ = "DistanceQuery"
    def getJsonParameters(self, params):
        struct = super(QueryByDistanceService, self).getJsonParameters(params)
        if params.isNearest:
            struct['queryMode'] = "FindNearest"
        struct['geometry'] = parameters.toServerGeometry(params.geometry)
        struct['distance'] = params.distance
        return struct

class QueryByGeometryService(QueryService):
    __parameter_type__ = parameters.QueryByGeometryParameters
    __query_mode__ = "SpatialQuery"
    def getJsonParameters(self, params):
        struct = super(QueryByGeometryService, self).getJsonParameters(params)
        struct['geometry'] = parameters.toServerGeometry(params.geometry)
        struct['spatialQueryMode'] = params.spatialQueryMode
        return struct

class GetLayersInfoService(CommonServiceBase):
    """Reads the layers of a map, or of a temporary layer set when
       resourceID is given (for example the newResourceID of a
       ThemeService result)."""
    __result_type__ = GetLayersInfoResult
    resourceID = None
    def processAsync(self):
        if self.resourceID:
            path = 'tempLayersSet/%s' % quote(str(self.resourceID))
        else:
            path = 'layers'
        return self.request('GET', self._resource_url(path))

class ThemeService(CommonServiceBase):
    """Creates a temporary layer set on a map, drawing datasets through
       themes. The answer names the new resource, whose layers can be read
       with GetLayersInfoService and which can be used as the layersID of
       map images."""
    __result_type__ = ResourceInfo
    def processAsync(self, params):
        if not isinstance(params, parameters.ThemeParameters):
            raise TypeError("Expected ThemeParameters, got %r" % type(params))
        return self.request('POST', self._resource_url('tempLayersSet'),
                            utils.toJSON(params))
