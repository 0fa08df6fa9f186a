import io
import iserver
import iserver.server
import json
import unittest
import urllib.error
from unittest import mock
from urllib.parse import quote

MAP_URL = "http://localhost:8090/iserver/services/map-world/rest/maps/World"
ANALYST_URL = ("http://localhost:8090/iserver/services/"
               "spatialanalyst-changchun/restjsr/spatialanalyst")

QUERY_ANSWER = {
    'currentCount': 1, 'totalCount': 1, 'customResponse': None,
    'recordsets': [{
        'datasetName': 'Capitals@World',
        'fields': ['SMID', 'CAPITAL'],
        'fieldCaptions': ['SmID', 'Capital'],
        'fieldTypes': ['INT32', 'TEXT'],
        'features': [{'ID': 1,
                      'fieldNames': ['SMID', 'CAPITAL'],
                      'fieldValues': ['1', 'Beijing'],
                      'geometry': {'id': 1, 'type': 'POINT', 'parts': [1],
                                   'points': [{'x': 116.4, 'y': 39.9}]}}]}]}

class ServiceTestCase(unittest.TestCase):
    """Replaces the shared opener so that requests are recorded and answered
       from self.answer."""
    def setUp(self):
        patcher = mock.patch.object(iserver.server.CommonServiceBase,
                                    '_opener')
        self.opener = patcher.start()
        self.addCleanup(patcher.stop)
        self.opener.open.side_effect = self.respond
    def answer(self, struct):
        self.payload = (struct if isinstance(struct, bytes)
                        else json.dumps(struct).encode('utf-8'))
    def respond(self, request):
        return io.BytesIO(self.payload)
    @property
    def sent(self):
        return self.opener.open.call_args[0][0]
    @property
    def sentJson(self):
        return json.loads(self.sent.data.decode('utf-8'))

class QueryServiceTests(ServiceTestCase):
    def testSQLQuery(self):
        self.answer(QUERY_ANSWER)
        completed = []
        service = iserver.QueryBySQLService(MAP_URL,
            {'eventListeners': {'processCompleted': completed.append}})
        params = iserver.QueryBySQLParameters({
            'queryParams': [iserver.FilterParameter(
                                {'name': 'Capitals@World',
                                 'attributeFilter': "CAPITAL = 'Beijing'"})]})
        result = service.processAsync(params)
        self.assertEqual(self.sent.full_url,
                         MAP_URL + "/queryResults.json?returnContent=true")
        self.assertEqual(self.sent.get_method(), 'POST')
        self.assertEqual(self.sent.get_header('User-agent'),
                         iserver.USER_AGENT)
        body = self.sentJson
        self.assertEqual(body['queryMode'], 'SqlQuery')
        self.assertEqual(body['queryParameters']['queryParams'][0]['name'],
                         'Capitals@World')
        self.assertTrue(isinstance(result, iserver.QueryResult))
        self.assertEqual(completed, [result])
        self.assertEqual((result.currentCount, result.totalCount), (1, 1))
        recordset = result.recordsets[0]
        self.assertEqual(recordset.datasetName, 'Capitals@World')
        feature = recordset.features[0]
        self.assertEqual(feature['CAPITAL'], 'Beijing')
        self.assertEqual(feature.geometry, iserver.Point(116.4, 39.9))
        self.assertEqual(result.features, [feature])
    def testResourceOnly(self):
        self.answer({'succeed': True, 'newResourceID': 'abc',
                     'newResourceLocation': MAP_URL + '/queryResults/abc.json',
                     'postResultType': 'CreateChild'})
        params = iserver.QueryBySQLParameters({'returnContent': False})
        result = iserver.QueryBySQLService(MAP_URL).processAsync(params)
        self.assertEqual(self.sent.full_url,
                         MAP_URL + "/queryResults.json?returnCustomResult=false")
        self.assertEqual(result.recordsets, [])
        self.assertEqual(result.resourceInfo.newResourceID, 'abc')
    def testCrossDomainJsonp(self):
        self.answer(b'callback({"currentCount": 0, "totalCount": 0,'
                    b' "recordsets": []});')
        service = iserver.QueryBySQLService(MAP_URL,
                                            {'origin': 'http://example.com'})
        self.assertFalse(service.isInTheSameDomain)
        result = service.processAsync(iserver.QueryBySQLParameters())
        self.assertEqual(self.sent.full_url,
                         MAP_URL + "/queryResults.jsonp?returnContent=true")
        self.assertEqual(result.totalCount, 0)
    def testBoundsQuery(self):
        self.answer(QUERY_ANSWER)
        params = iserver.QueryByBoundsParameters({
            'queryParams': [{'name': 'Capitals@World'}],
            'bounds': iserver.Bounds(0, 0, 120, 60)})
        iserver.QueryByBoundsService(MAP_URL).processAsync(params)
        body = self.sentJson
        self.assertEqual(body['queryMode'], 'BoundsQuery')
        self.assertEqual(body['bounds']['leftBottom'], {'x': 0.0, 'y': 0.0})
        self.assertEqual(body['bounds']['rightTop'], {'x': 120.0, 'y': 60.0})
    def testDistanceQuery(self):
        self.answer(QUERY_ANSWER)
        params = iserver.QueryByDistanceParameters({
            'queryParams': [{'name': 'Capitals@World'}],
            'geometry': iserver.Point(116, 40), 'distance': 10})
        service = iserver.QueryByDistanceService(MAP_URL)
        service.processAsync(params)
        body = self.sentJson
        self.assertEqual(body['queryMode'], 'DistanceQuery')
        self.assertEqual(body['distance'], 10)
        self.assertEqual(body['geometry']['type'], 'POINT')
        params.isNearest = True
        service.processAsync(params)
        self.assertEqual(self.sentJson['queryMode'], 'FindNearest')
    def testGeometryQuery(self):
        self.answer(QUERY_ANSWER)
        params = iserver.QueryByGeometryParameters({
            'queryParams': [{'name': 'Countries@World'}],
            'geometry': iserver.Polygon([[0, 0], [0, 50], [50, 50]]),
            'spatialQueryMode': iserver.SpatialQueryMode.CONTAIN})
        iserver.QueryByGeometryService(MAP_URL).processAsync(params)
        body = self.sentJson
        self.assertEqual(body['queryMode'], 'SpatialQuery')
        self.assertEqual(body['spatialQueryMode'], 'CONTAIN')
        self.assertEqual(body['geometry']['parts'], [4])
    def testWrongParameterType(self):
        service = iserver.QueryByBoundsService(MAP_URL)
        self.assertRaises(TypeError, service.processAsync,
                          iserver.QueryBySQLParameters())
        self.assertFalse(self.opener.open.called)

class FailureTests(ServiceTestCase):
    def testServerReportsFailure(self):
        self.answer({'succeed': False,
                     'error': {'code': 400, 'errorMsg': 'bad expression'}})
        completed, failed = [], []
        service = iserver.QueryBySQLService(MAP_URL,
            {'eventListeners': {'processCompleted': completed.append,
                                'processFailed': failed.append}})
        with self.assertLogs('iserver.server', 'WARNING'):
            result = service.processAsync(iserver.QueryBySQLParameters())
        self.assertEqual(result, None)
        self.assertEqual(completed, [])
        error, = failed
        self.assertTrue(isinstance(error, iserver.ServerError))
        self.assertEqual((error.code, error.message), (400, 'bad expression'))
    def testRaisesWithoutListener(self):
        self.answer({'succeed': False,
                     'error': {'code': 500, 'errorMsg': 'boom'}})
        service = iserver.QueryBySQLService(MAP_URL)
        with self.assertRaises(iserver.ServerError) as ctx:
            service.processAsync(iserver.QueryBySQLParameters())
        self.assertEqual(ctx.exception.code, 500)
        self.assertTrue(ctx.exception.url.startswith(MAP_URL))
    def testHttpError(self):
        self.opener.open.side_effect = urllib.error.HTTPError(
            MAP_URL, 404, 'Not Found', None,
            io.BytesIO(b'{"error": {"code": 404, "errorMsg": "no map"}}'))
        failed = []
        service = iserver.GetLayersInfoService(MAP_URL)
        service.on('processFailed', failed.append)
        service.processAsync()
        self.assertEqual((failed[0].code, failed[0].message), (404, 'no map'))
    def testHttpErrorWithoutJson(self):
        self.opener.open.side_effect = urllib.error.HTTPError(
            MAP_URL, 502, 'Bad Gateway', None, io.BytesIO(b'<html></html>'))
        service = iserver.GetLayersInfoService(MAP_URL)
        with self.assertRaises(iserver.ServerError) as ctx:
            service.processAsync()
        self.assertEqual((ctx.exception.code, ctx.exception.message),
                         (502, 'Bad Gateway'))
    def testConnectionError(self):
        self.opener.open.side_effect = urllib.error.URLError(
                                                        'connection refused')
        with self.assertRaises(iserver.ServerError) as ctx:
            iserver.GetLayersInfoService(MAP_URL).processAsync()
        self.assertEqual(ctx.exception.code, None)
        self.assertTrue('connection refused' in ctx.exception.message)
    def testInvalidJson(self):
        self.answer(b'<html>Service unavailable</html>')
        with self.assertRaises(iserver.ServerError):
            iserver.GetLayersInfoService(MAP_URL).processAsync()
    def testOtherGeometryTypesInAnswer(self):
        answer = json.loads(json.dumps(QUERY_ANSWER))
        features = answer['recordsets'][0]['features']
        features[0]['geometry'] = {'id': 1, 'type': 'LINEM', 'parts': [2],
                                   'points': [{'x': 0, 'y': 0, 'm': 0},
                                              {'x': 1, 'y': 1, 'm': 2}]}
        features.append({'ID': 2, 'fieldNames': ['SMID'], 'fieldValues': ['2'],
                         'geometry': {'id': 2, 'type': 'TEXT', 'parts': [1],
                                      'points': [{'x': 1, 'y': 1}],
                                      'texts': ['Beijing']}})
        self.answer(answer)
        completed, failed = [], []
        service = iserver.QueryBySQLService(MAP_URL,
            {'eventListeners': {'processCompleted': completed.append,
                                'processFailed': failed.append}})
        result = service.processAsync(iserver.QueryBySQLParameters())
        self.assertEqual((completed, failed), ([result], []))
        line, text = [f.geometry for f in result.features]
        self.assertTrue(isinstance(line, iserver.LineString))
        self.assertEqual(text['texts'], ['Beijing'])
        self.assertEqual(result.features[1].__geo_interface__['geometry'],
                         None)
    def testUnreadableAnswer(self):
        answer = json.loads(json.dumps(QUERY_ANSWER))
        answer['recordsets'][0]['features'][0]['geometry'] = {
            'type': 'POINT', 'points': []}
        self.answer(answer)
        completed, failed = [], []
        service = iserver.QueryBySQLService(MAP_URL,
            {'eventListeners': {'processCompleted': completed.append,
                                'processFailed': failed.append}})
        with self.assertLogs('iserver.server', 'WARNING'):
            result = service.processAsync(iserver.QueryBySQLParameters())
        self.assertEqual((result, completed), (None, []))
        error, = failed
        self.assertTrue(isinstance(error, iserver.ServerError))
        self.assertTrue(error.message.startswith("Unreadable response"))
        self.assertTrue(error.url.startswith(MAP_URL))
        #without a listener the error is raised
        with self.assertRaises(iserver.ServerError):
            iserver.QueryBySQLService(MAP_URL).processAsync(
                iserver.QueryBySQLParameters())
    def testUnknownEvent(self):
        service = iserver.GetLayersInfoService(MAP_URL)
        self.assertRaises(ValueError, service.on, 'processStarted', print)

class ServiceOptionTests(ServiceTestCase):
    def testTokenAndProxy(self):
        self.answer([])
        service = iserver.GetLayersInfoService(MAP_URL,
                                               {'token': 'secret',
                                                'proxy': 'http://proxy/?url='})
        service.processAsync()
        target = MAP_URL + "/layers.json?token=secret"
        self.assertEqual(self.sent.full_url,
                         'http://proxy/?url=' + quote(target, safe=''))
    def testCredentials(self):
        url = "http://secured:8090/iserver/services/map-world/rest/maps/World"
        iserver.GetLayersInfoService(url, {'username': 'admin',
                                           'password': 'iserver'})
        self.assertEqual(iserver.server.CommonServiceBase._pwdmgr
                             .find_user_password(None, url),
                         ('admin', 'iserver'))
    def testDestroy(self):
        service = iserver.ThemeService(MAP_URL, {'token': 'secret'})
        service.destroy()
        self.assertEqual((service.url, service.eventListeners, service.token),
                         (None, None, None))

class LayerServiceTests(ServiceTestCase):
    def testGetLayers(self):
        self.answer([{'name': 'World', 'type': 'UGC',
                      'subLayers': {'layers': [
                          {'name': 'Capitals@World', 'ugcLayerType': 'VECTOR',
                           'datasetInfo': {'name': 'Capitals',
                                           'dataSourceName': 'World'},
                           'style': {'markerSize': 2}}]}}])
        result = iserver.GetLayersInfoService(MAP_URL).processAsync()
        self.assertEqual(self.sent.full_url, MAP_URL + "/layers.json")
        self.assertEqual(self.sent.get_method(), 'GET')
        self.assertEqual(self.sent.data, None)
        self.assertTrue(isinstance(result, iserver.GetLayersInfoResult))
        self.assertEqual(result.map.name, 'World')
        layer, = result.subLayers
        self.assertTrue(isinstance(layer, iserver.UGCVectorLayer))
        self.assertEqual(layer.style.markerSize, 2)
    def testGetTempLayers(self):
        self.answer([])
        result = iserver.GetLayersInfoService(
                    MAP_URL, {'resourceID': 'abc123'}).processAsync()
        self.assertEqual(self.sent.full_url,
                         MAP_URL + "/tempLayersSet/abc123.json")
        self.assertEqual((result.map, result.subLayers), (None, []))
    def testThemeService(self):
        self.answer({'succeed': True, 'newResourceID': 'abc123',
                     'newResourceLocation': MAP_URL + '/tempLayersSet/abc123',
                     'postResultType': 'CreateChild'})
        theme = iserver.ThemeGraduatedSymbol({'expression': 'POP_1994',
                                              'baseValue': 3000000})
        params = iserver.ThemeParameters({'themes': [theme],
                                          'datasetNames': ['Countries'],
                                          'dataSourceNames': ['World']})
        result = iserver.ThemeService(MAP_URL).processAsync(params)
        self.assertEqual(self.sent.full_url, MAP_URL + "/tempLayersSet.json")
        self.assertEqual(self.sent.get_header('Content-type'),
                         'application/json;charset=UTF-8')
        body = self.sentJson
        layer = body[0]['subLayers']['layers'][0]
        self.assertEqual(layer['theme']['type'], 'GRADUATEDSYMBOL')
        self.assertTrue(isinstance(result, iserver.ResourceInfo))
        self.assertEqual(result.newResourceID, 'abc123')
        self.assertRaises(TypeError, iserver.ThemeService(MAP_URL).processAsync,
                          [theme])

class AnalystServiceTests(ServiceTestCase):
    def testMathExpression(self):
        self.answer({'succeed': True, 'dataset': 'MathExpression@Jingjin'})
        params = iserver.MathExpressionAnalysisParameters({
            'dataset': 'JingjinTerrain@Jingjin',
            'expression': '[Jingjin.JingjinTerrain] + 600',
            'targetDatasource': 'Jingjin',
            'resultGridName': 'MathExpression',
            'deleteExistResultDataset': True})
        result = iserver.MathExpressionAnalysisService(ANALYST_URL) \
                        .processAsync(params)
        self.assertEqual(self.sent.full_url,
                         ANALYST_URL + "/datasets/JingjinTerrain@Jingjin/"
                                       "mathanalyst.json?returnContent=true")
        body = self.sentJson
        self.assertFalse('dataset' in body)
        self.assertEqual(body['resultGridName'], 'MathExpression')
        self.assertTrue(body['deleteExistResultDataset'])
        self.assertTrue(isinstance(result, iserver.SpatialAnalystResult))
        self.assertEqual((result.succeed, result.dataset),
                         (True, 'MathExpression@Jingjin'))
        self.assertEqual(result.recordset, None)
    def testWrongParameterType(self):
        service = iserver.MathExpressionAnalysisService(ANALYST_URL)
        self.assertRaises(TypeError, service.processAsync,
                          {'dataset': 'JingjinTerrain@Jingjin'})

if __name__ == '__main__':
    unittest.main()
