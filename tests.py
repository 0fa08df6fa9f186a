import iserver
import iserver.geometry
import iserver.layers
import iserver.themes
import iserver.utils
import json
import unittest

class UtilsTests(unittest.TestCase):
    def testExtend(self):
        class Target(object):
            a = 1
        target = iserver.utils.extend(Target(), {'a': 2, 'b': 3})
        self.assertEqual((target.a, target.b), (2, 3))
        #None sources leave the target alone
        self.assertEqual(iserver.utils.extend(target, None).a, 2)
    def testCopyAttributes(self):
        class Source(object):
            default = 1
            _private = 2
            def method(self):
                pass
        source = Source()
        source.extra = 'x'
        self.assertEqual(iserver.utils.copyAttributes({}, source),
                         {'default': 1, 'extra': 'x'})
    def testAppendQuery(self):
        self.assertEqual(iserver.utils.appendQuery('http://h/a.json?x=1',
                                                   {'returnContent': True,
                                                    'skipped': None}),
                         'http://h/a.json?x=1&returnContent=true')
    def testSameDomain(self):
        same = iserver.utils.isInTheSameDomain
        self.assertTrue(same('http://a:80/rest', 'http://A/page'))
        self.assertFalse(same('http://a:8090/rest', 'http://a/page'))
        self.assertFalse(same('https://a/rest', 'http://a/page'))
        self.assertTrue(same('http://a:8090/rest'))
        self.assertTrue(same('/iserver/rest', 'http://a/page'))
    def testStripJsonp(self):
        strip = iserver.utils.stripJsonp
        self.assertEqual(strip('cb({"a": 1});'), '{"a": 1}')
        self.assertEqual(strip(' {"a": 1} '), '{"a": 1}')
        self.assertEqual(strip('[1, 2]'), '[1, 2]')
    def testJsonStruct(self):
        struct = iserver.utils.jsonStruct({'pt': iserver.Point(1, 2),
                                           'values': (1, 'a', None)})
        self.assertEqual(struct['values'], [1, 'a', None])
        self.assertEqual(struct['pt']['points'], [{'x': 1.0, 'y': 2.0}])
        self.assertRaises(ValueError, iserver.utils.jsonStruct, object())
    def testRelease(self):
        style, raw = iserver.ServerStyle(), {'lineWidth': 2}
        iserver.utils.release(style, [raw, None, (style,)], "text", None)
        self.assertEqual(style.lineColor, None)
        self.assertEqual(raw, {'lineWidth': 2})

class GeometryTests(unittest.TestCase):
    def testCreatePoint(self):
        pt = iserver.geometry.Point(5.1, 5.5)
        self.assertEqual((pt.x, pt.y), (5.1, 5.5), "Bad point values")
        #create a point with strings
        pt = iserver.geometry.Point('10', '45.33')
        self.assertEqual((pt.x, pt.y), (10., 45.33), "Bad point values")
        self.assertEqual(pt.toServerJSONObject(),
                         {'id': 0, 'type': 'POINT', 'parts': [1],
                          'points': [{'x': 10.0, 'y': 45.33}],
                          'style': None})
    def testCreateLineString(self):
        line = iserver.geometry.LineString([[0, 0], [1, 1], [2, 0]])
        self.assertEqual(len(line), 1, "Flat point list not taken as a path")
        self.assertTrue(all(isinstance(pt, iserver.geometry.Point)
                            for pt in line.paths[0]))
        line = iserver.geometry.LineString([[[0, 0], [1, 1]],
                                            [iserver.Point(5, 5),
                                             iserver.Point(6, 6),
                                             iserver.Point(7, 5)]])
        struct = line.toServerJSONObject()
        self.assertEqual(struct['type'], 'LINE')
        self.assertEqual(struct['parts'], [2, 3])
        self.assertEqual(len(struct['points']), 5)
        self.assertEqual(line.__geo_interface__['type'], 'MultiLineString')
    def testCreatePolygon(self):
        poly = iserver.geometry.Polygon([[[0, 0], [10, 0], [10, 10], [0, 10]]])
        struct = poly.toServerJSONObject()
        self.assertEqual(struct['type'], 'REGION')
        self.assertEqual(struct['parts'], [5], "Ring not closed")
        self.assertEqual(struct['points'][0], struct['points'][-1])
        self.assertTrue((5, 5) in poly)
        self.assertFalse(iserver.Point(15, 5) in poly)
    def testPolygonWithHole(self):
        struct = {'id': 7, 'type': 'REGION', 'parts': [4, 4],
                  'points': [{'x': 0, 'y': 0}, {'x': 10, 'y': 0},
                             {'x': 10, 'y': 10}, {'x': 0, 'y': 0},
                             {'x': 2, 'y': 1}, {'x': 8, 'y': 1},
                             {'x': 8, 'y': 6}, {'x': 2, 'y': 1}]}
        poly = iserver.geometry.fromJson(struct)
        self.assertTrue(isinstance(poly, iserver.geometry.Polygon))
        self.assertEqual(len(poly.rings), 2)
        self.assertEqual(poly.id, 7)
        self.assertFalse((6, 3) in poly, "Point in hole reported inside")
        self.assertTrue((9, 5) in poly)
        self.assertEqual(poly.toServerJSONObject()['parts'], [4, 4])
    def testFromJson(self):
        pt = iserver.geometry.fromJson({'x': 1, 'y': 2})
        self.assertEqual(pt, iserver.Point(1, 2))
        pt = iserver.geometry.fromJson(
            '{"id": 3, "type": "POINT", "parts": [1],'
            ' "points": [{"x": 1, "y": 2}],'
            ' "style": {"markerSize": 4}}')
        self.assertEqual((pt.x, pt.y, pt.id), (1.0, 2.0, 3))
        self.assertEqual(pt.style.markerSize, 4)
        line = iserver.geometry.fromJson({'type': 'LINE',
                                          'points': [{'x': 0, 'y': 0},
                                                     {'x': 1, 'y': 1}]})
        self.assertEqual(len(line.paths), 1, "Missing parts not one path")
        self.assertRaises(ValueError, iserver.geometry.fromJson, {'z': 1})
        self.assertRaises(ValueError, iserver.geometry.fromJson,
                          {'type': 'POINT', 'points': []})
    def testOtherGeometryTypes(self):
        points = [{'x': 0, 'y': 0, 'm': 0}, {'x': 3, 'y': 4, 'm': 5}]
        line = iserver.geometry.fromJson({'type': 'LINEM', 'parts': [2],
                                          'points': points})
        self.assertTrue(isinstance(line, iserver.geometry.LineString))
        self.assertEqual(line.paths[0][1], iserver.Point(3, 4))
        poly = iserver.geometry.fromJson({'type': 'REGION3D', 'parts': [3],
                                          'points': points + [points[0]]})
        self.assertTrue(isinstance(poly, iserver.geometry.Polygon))
        pt = iserver.geometry.fromJson({'type': 'POINT3D',
                                        'points': [{'x': 1, 'y': 2, 'z': 3}]})
        self.assertEqual(pt, iserver.Point(1, 2))
        #types without a class come back as they are
        text = {'type': 'TEXT', 'parts': [1], 'points': points[:1],
                'texts': ['Beijing']}
        self.assertTrue(iserver.geometry.fromJson(text) is text)
        self.assertEqual(iserver.toServerGeometry(text), text)
    def testBounds(self):
        bounds = iserver.geometry.Bounds(0, 0, 60, 39)
        self.assertEqual(bounds.bbox, "0.0,0.0,60.0,39.0")
        struct = bounds.toServerJSONObject()
        self.assertEqual(struct['leftBottom'], {'x': 0.0, 'y': 0.0})
        self.assertEqual(struct['rightTop'], {'x': 60.0, 'y': 39.0})
        self.assertEqual(struct['top'], 39.0)
        self.assertEqual(iserver.geometry.Bounds.fromJson(
                            {'leftBottom': {'x': 0, 'y': 0},
                             'rightTop': {'x': 60, 'y': 39}}), bounds)
        self.assertEqual(iserver.geometry.Bounds.fromJson(
                            {'left': 0, 'bottom': 0,
                             'right': 60, 'top': 39}), bounds)
        self.assertEqual(iserver.geometry.Bounds.fromJson([0, 0, 60, 39]),
                         bounds)
        self.assertTrue((30, 20) in bounds)
        self.assertEqual(bounds.toPolygon().toServerJSONObject()['parts'],
                         [5])

class StyleTests(unittest.TestCase):
    def testServerColor(self):
        self.assertEqual(iserver.ServerColor.fromHex('#f00'),
                         iserver.ServerColor(255, 0, 0))
        self.assertEqual(iserver.ServerColor(0, 128, 255).hex, '#0080ff')
        self.assertRaises(ValueError, iserver.ServerColor.fromHex, '#12345')
    def testServerStyleDefaults(self):
        struct = iserver.ServerStyle().toServerJSONObject()
        self.assertEqual(struct['fillForeColor'],
                         {'red': 255, 'green': 0, 'blue': 0})
        self.assertEqual(struct['fillBackColor'],
                         {'red': 255, 'green': 255, 'blue': 255})
        self.assertEqual(struct['lineColor'], {'red': 0, 'green': 0, 'blue': 0})
        self.assertEqual((struct['fillOpaqueRate'], struct['markerSymbolID'],
                          struct['lineWidth']), (100, -1, 1))
        #instances don't share colors
        style1, style2 = iserver.ServerStyle(), iserver.ServerStyle()
        style1.lineColor.red = 10
        self.assertEqual(style2.lineColor.red, 0)
    def testServerStyleFromJson(self):
        style = iserver.ServerStyle.fromJson(
                    {'lineWidth': 2,
                     'lineColor': {'red': 1, 'green': 2, 'blue': 3}})
        self.assertEqual(style.lineWidth, 2)
        self.assertEqual(style.lineColor, iserver.ServerColor(1, 2, 3))
        self.assertEqual(style.fillForeColor, iserver.ServerColor(255, 0, 0))
        self.assertEqual(iserver.ServerStyle.fromJson(None), None)
    def testThemeStyle(self):
        style = iserver.ThemeStyle()
        self.assertEqual((style.labelXOffset, style.pointRadius,
                          style.strokeLineJoin), (0, 6, "miter"))
        server_style = iserver.ThemeStyle({'fillColor': '#00ff00',
                                           'fillOpacity': 0.5,
                                           'stroke': True,
                                           'strokeColor': '#0000ff',
                                           'strokeWidth': 3}).toServerStyle()
        self.assertEqual(server_style.fillForeColor,
                         iserver.ServerColor(0, 255, 0))
        self.assertEqual(server_style.fillOpaqueRate, 50)
        self.assertEqual(server_style.lineColor,
                         iserver.ServerColor(0, 0, 255))
        self.assertEqual((server_style.lineWidth, server_style.markerSize),
                         (3, 6))
        no_stroke = iserver.ThemeStyle().toServerStyle()
        self.assertEqual(no_stroke.lineWidth, 0)

class ThemeTests(unittest.TestCase):
    graduated_keys = set(['type', 'memoryData', 'baseValue', 'expression',
                          'graduatedMode', 'flowEnabled',
                          'leaderLineDisplayed', 'leaderLineStyle',
                          'offsetFixed', 'offsetX', 'offsetY',
                          'negativeStyle', 'negativeDisplayed',
                          'positiveStyle', 'zeroDisplayed', 'zeroStyle'])
    def testGraduatedSymbolDefaults(self):
        theme = iserver.ThemeGraduatedSymbol()
        self.assertEqual(theme.type, iserver.ThemeType.GRADUATEDSYMBOL)
        self.assertEqual(theme.graduatedMode, iserver.GraduatedMode.CONSTANT)
        self.assertEqual((theme.offset.offsetX, theme.offset.offsetY),
                         ("0.0", "0.0"))
        self.assertFalse(theme.flow.flowEnabled)
        self.assertFalse(theme.style.negativeDisplayed)
    def testGraduatedSymbolToServer(self):
        theme = iserver.ThemeGraduatedSymbol({'expression': 'POP_1994',
                                              'baseValue': 3000000})
        theme.flow.flowEnabled = True
        theme.offset.offsetX = "SmX"
        theme.style.positiveStyle.markerSize = 50
        struct = theme.toServerJSONObject()
        self.assertEqual(set(struct.keys()), self.graduated_keys,
                         "Sub objects not flattened")
        self.assertEqual(struct['type'], 'GRADUATEDSYMBOL')
        self.assertEqual(struct['memoryData'], None)
        self.assertEqual((struct['expression'], struct['baseValue']),
                         ('POP_1994', 3000000))
        self.assertEqual(struct['flowEnabled'], True)
        self.assertEqual(struct['offsetX'], 'SmX')
        self.assertEqual(struct['positiveStyle']['markerSize'], 50)
        self.assertEqual(struct['leaderLineStyle']['lineColor'],
                         {'red': 0, 'green': 0, 'blue': 0})
        #the string form is the JSON text of the server struct
        self.assertEqual(json.loads(str(theme)), struct)
    def testMemoryData(self):
        data = iserver.ThemeMemoryData(['1', '2'], ['one', 'two'])
        self.assertEqual(data.toServerJSONObject(),
                         "{'1':\"one\",'2':\"two\"}")
        parsed = iserver.ThemeMemoryData.fromJson("{'1':\"one\",'2':\"two\"}")
        self.assertEqual((parsed.srcData, parsed.targetData),
                         (['1', '2'], ['one', 'two']))
        theme = iserver.ThemeGraduatedSymbol({'memoryData': data})
        self.assertEqual(theme.toServerJSONObject()['memoryData'],
                         "{'1':\"one\",'2':\"two\"}")
        self.assertEqual(iserver.ThemeMemoryData([], []).toServerJSONObject(),
                         None)
    def testMemoryDataSeparators(self):
        data = iserver.ThemeMemoryData(['a,b', "it's", 'c:\\d'],
                                       ['x:y', 'say "hi"', '1,2'])
        parsed = iserver.ThemeMemoryData.fromJson(data.toServerJSONObject())
        self.assertEqual(parsed.srcData, ['a,b', "it's", 'c:\\d'])
        self.assertEqual(parsed.targetData, ['x:y', 'say "hi"', '1,2'])
        parsed = iserver.ThemeMemoryData.fromJson('{"1": "one", \'2\':"two"}')
        self.assertEqual((parsed.srcData, parsed.targetData),
                         (['1', '2'], ['one', 'two']))
    def testGraduatedSymbolFromJson(self):
        theme = iserver.themes.fromJson({
            'type': 'GRADUATEDSYMBOL',
            'expression': 'SmArea',
            'baseValue': 12,
            'graduatedMode': 'SQUAREROOT',
            'flowEnabled': True,
            'offsetX': '5',
            'negativeDisplayed': True,
            'positiveStyle': {'markerSize': 3,
                              'fillForeColor': {'red': 0, 'green': 0,
                                                'blue': 255}},
            'memoryData': "{'1':\"2\"}"})
        self.assertTrue(isinstance(theme, iserver.ThemeGraduatedSymbol))
        self.assertEqual((theme.expression, theme.baseValue,
                          theme.graduatedMode), ('SmArea', 12, 'SQUAREROOT'))
        self.assertTrue(theme.flow.flowEnabled)
        self.assertFalse(theme.flow.leaderLineDisplayed)
        self.assertEqual((theme.offset.offsetX, theme.offset.offsetY),
                         ('5', '0.0'))
        self.assertTrue(theme.style.negativeDisplayed)
        self.assertEqual(theme.style.positiveStyle.markerSize, 3)
        self.assertEqual(theme.style.positiveStyle.fillForeColor,
                         iserver.ServerColor(0, 0, 255))
        self.assertEqual(theme.memoryData.srcData, ['1'])
    def testGraduatedSymbolDestroy(self):
        theme = iserver.ThemeGraduatedSymbol({'expression': 'POP',
                                              'graduatedMode': 'LOGARITHM'})
        flow = theme.flow
        theme.destroy()
        self.assertEqual((theme.flow, theme.offset, theme.style),
                         (None, None, None))
        self.assertEqual(theme.expression, None)
        self.assertEqual(theme.graduatedMode, iserver.GraduatedMode.CONSTANT)
        self.assertEqual(flow.leaderLineStyle, None)
    def testDestroyFromOptions(self):
        theme = iserver.ThemeUnique({'items': [{'unique': 'a'}],
                                     'defaultStyle': {'lineWidth': 2}})
        theme.destroy()
        self.assertEqual((theme.items, theme.defaultStyle), (None, None))
        theme = iserver.ThemeRange({'items': [{'start': 0, 'end': 1}]})
        theme.destroy()
        self.assertEqual(theme.items, None)
        theme = iserver.ThemeGraduatedSymbol({'memoryData': "{'a':\"b\"}",
                                              'flow': {'flowEnabled': True}})
        theme.destroy()
        self.assertEqual((theme.memoryData, theme.flow), (None, None))
    def testUniqueTheme(self):
        theme = iserver.ThemeUnique({'uniqueExpression': 'SmID',
                                     'items': [iserver.ThemeUniqueItem(
                                                  {'unique': '1',
                                                   'caption': 'first'})]})
        struct = theme.toServerJSONObject()
        self.assertEqual(struct['type'], 'UNIQUE')
        self.assertEqual(struct['items'][0]['unique'], '1')
        self.assertEqual(struct['items'][0]['style']['fillOpaqueRate'], 100)
        parsed = iserver.themes.fromJson(struct)
        self.assertTrue(isinstance(parsed, iserver.ThemeUnique))
        self.assertEqual(parsed.items[0].caption, 'first')
    def testRangeTheme(self):
        parsed = iserver.themes.fromJson({
            'type': 'RANGE', 'rangeExpression': 'POP',
            'rangeMode': 'QUANTILE',
            'items': [{'start': 0, 'end': 10}, {'start': 10, 'end': 20,
                                                'visible': False}]})
        self.assertTrue(isinstance(parsed, iserver.ThemeRange))
        self.assertEqual(parsed.rangeMode, iserver.RangeMode.QUANTILE)
        self.assertEqual([(item.start, item.end, item.visible)
                          for item in parsed.items],
                         [(0, 10, True), (10, 20, False)])
    def testUnknownTheme(self):
        self.assertRaises(KeyError, iserver.themes.fromJson,
                          {'type': 'LABEL'})
        self.assertEqual(iserver.themes.fromJson(None), None)

class LayerTests(unittest.TestCase):
    def makeMap(self):
        return {
            'name': 'World', 'type': 'UGC', 'visible': True,
            'bounds': {'left': -180, 'bottom': -90,
                       'right': 180, 'top': 90},
            'subLayers': {'layers': [
                {'name': 'Capitals@World', 'type': 'UGC',
                 'ugcLayerType': 'VECTOR',
                 'datasetInfo': {'name': 'Capitals',
                                 'dataSourceName': 'World',
                                 'type': 'POINT'},
                 'style': {'markerSize': 2.4}},
                {'name': 'Countries@World#1', 'type': 'UGC',
                 'ugcLayerType': 'THEME',
                 'datasetInfo': {'name': 'Countries',
                                 'dataSourceName': 'World',
                                 'type': 'REGION'},
                 'joinItems': [{'foreignTableName': 'Capitals',
                                'joinFilter': 'Countries.Name = '
                                              'Capitals.Country',
                                'joinType': 'LEFTJOIN'}],
                 'themeElementPosition': {'x': 1, 'y': 2},
                 'theme': {'type': 'GRADUATEDSYMBOL',
                           'expression': 'POP_1994', 'baseValue': 10}},
                {'name': 'Labels@World', 'type': 'UGC',
                 'ugcLayerType': 'THEME',
                 'theme': {'type': 'LABEL', 'labelExpression': 'NAME'}},
                {'name': 'Elevation@World', 'type': 'UGC',
                 'ugcLayerType': 'GRID',
                 'datasetInfo': {'name': 'Elevation',
                                 'dataSourceName': 'World',
                                 'type': 'GRID'}}]}}
    def testFromJson(self):
        world = iserver.layers.fromJson(self.makeMap())
        self.assertTrue(isinstance(world, iserver.UGCMapLayer))
        self.assertEqual(world.bounds, iserver.Bounds(-180, -90, 180, 90))
        vector, theme, labels, grid = world.layers
        self.assertTrue(isinstance(vector, iserver.UGCVectorLayer))
        self.assertEqual(vector.style.markerSize, 2.4)
        self.assertEqual(vector.datasetInfo.dataSourceName, 'World')
        self.assertTrue(isinstance(theme, iserver.ServerTheme))
        self.assertTrue(isinstance(theme.theme, iserver.ThemeGraduatedSymbol))
        self.assertEqual(theme.theme.expression, 'POP_1994')
        self.assertEqual(theme.themeElementPosition, iserver.Point(1, 2))
        self.assertEqual(theme.joinItems[0].joinType, iserver.JoinType.LEFTJOIN)
        #themes without a client class are kept as they came
        self.assertEqual(labels.theme['type'], 'LABEL')
        self.assertEqual(type(grid), iserver.UGCSubLayer)
    def testMissingOptionalFields(self):
        layer = iserver.layers.fromJson({'name': 'Image@World',
                                         'ugcLayerType': 'IMAGE'})
        self.assertEqual((layer.datasetInfo, layer.joinItems,
                          layer.subLayers, layer.bounds),
                         (None, None, None, None))
        self.assertEqual(layer.layers, [])
        self.assertEqual(iserver.layers.fromJson(None), None)
    def testToServerJSONObject(self):
        struct = iserver.layers.fromJson(self.makeMap()).toServerJSONObject()
        self.assertEqual(struct['name'], 'World')
        self.assertEqual(struct['bounds']['leftBottom'],
                         {'x': -180.0, 'y': -90.0})
        vector, theme = struct['subLayers']['layers'][:2]
        self.assertEqual(vector['style']['markerSize'], 2.4)
        self.assertEqual(vector['datasetInfo']['name'], 'Capitals')
        self.assertEqual(theme['theme']['type'], 'GRADUATEDSYMBOL')
        self.assertEqual(theme['themeElementPosition'], {'x': 1.0, 'y': 2.0})
        self.assertEqual(theme['joinItems'][0]['foreignTableName'],
                         'Capitals')
        #the whole struct is plain JSON
        json.dumps(struct)
    def testDestroy(self):
        world = iserver.layers.fromJson(self.makeMap())
        theme_layer = world.layers[1]
        theme = theme_layer.theme
        world.destroy()
        self.assertEqual(world.subLayers, None)
        self.assertEqual(theme_layer.datasetInfo, None)
        self.assertEqual(theme.flow, None)
    def testDestroyFromOptions(self):
        layer = iserver.UGCSubLayer({
            'datasetInfo': {'name': 'Countries', 'dataSourceName': 'World'},
            'joinItems': [{'foreignTableName': 'Capitals'}],
            'subLayers': [{'name': 'raw'}]})
        layer.destroy()
        self.assertEqual((layer.datasetInfo, layer.joinItems,
                          layer.subLayers), (None, None, None))
        layer = iserver.ServerTheme({'theme': {'type': 'LABEL'}})
        layer.destroy()
        self.assertEqual(layer.theme, None)

class ParameterTests(unittest.TestCase):
    def testQueryDefaults(self):
        params = iserver.QueryBySQLParameters()
        self.assertEqual((params.expectCount, params.networkType,
                          params.queryOption, params.startRecord,
                          params.holdTime, params.returnContent),
                         (100000, 'LINE', 'ATTRIBUTEANDGEOMETRY', 0, 10, True))
        self.assertEqual(params.queryParams, [])
        #defaults are per instance
        params.queryParams.append(iserver.FilterParameter())
        self.assertEqual(iserver.QueryBySQLParameters().queryParams, [])
    def testQueryParameters(self):
        params = iserver.QueryBySQLParameters({
            'queryParams': [iserver.FilterParameter(
                                {'name': 'Countries@World',
                                 'attributeFilter': 'SmID < 10'}),
                            {'name': 'Capitals@World'}],
            'expectCount': 5,
            'prjCoordSys': {'epsgCode': 3857}})
        struct = params.toServerJSONObject()
        self.assertEqual(struct['expectCount'], 5)
        self.assertEqual(struct['prjCoordSys'], {'epsgCode': 3857})
        self.assertEqual([(f['name'], f['attributeFilter'])
                          for f in struct['queryParams']],
                         [('Countries@World', 'SmID < 10'),
                          ('Capitals@World', None)])
        self.assertFalse('returnContent' in struct)
    def testFilterJoinItems(self):
        param = iserver.FilterParameter({
            'name': 'Countries@World',
            'joinItems': [{'foreignTableName': 'Capitals',
                           'joinFilter': 'Countries.Name = Capitals.Country',
                           'joinType': iserver.JoinType.INNERJOIN}]})
        struct = param.toServerJSONObject()
        self.assertEqual(struct['joinItems'][0]['joinType'], 'INNERJOIN')
    def testBoundsParameters(self):
        params = iserver.QueryByBoundsParameters({'bounds': [0, 0, 10, 10]})
        self.assertEqual(params.bounds, iserver.Bounds(0, 0, 10, 10))
        params.destroy()
        self.assertEqual((params.bounds, params.returnContent,
                          params.queryParams), (None, None, None))
    def testGeometryParametersDestroy(self):
        params = iserver.QueryByGeometryParameters(
                    {'geometry': iserver.Point(1, 1)})
        self.assertEqual(params.spatialQueryMode,
                         iserver.SpatialQueryMode.INTERSECT)
        params.destroy()
        self.assertEqual((params.geometry, params.spatialQueryMode,
                          params.returnContent), (None, None, None))
        params = iserver.QueryByDistanceParameters(
                    {'geometry': iserver.Point(1, 1), 'distance': 5})
        params.destroy()
        self.assertEqual((params.geometry, params.distance,
                          params.isNearest), (None, None, None))
    def testToServerGeometry(self):
        struct = iserver.toServerGeometry(iserver.Bounds(0, 0, 1, 1))
        self.assertEqual((struct['type'], struct['parts']), ('REGION', [5]))
        struct = iserver.toServerGeometry({'x': 1, 'y': 2})
        self.assertEqual(struct['points'], [{'x': 1.0, 'y': 2.0}])
        self.assertEqual(iserver.toServerGeometry(None), None)
    def testMathExpressionParameters(self):
        params = iserver.MathExpressionAnalysisParameters({
            'dataset': 'JingjinTerrain@Jingjin',
            'expression': '[Jingjin.JingjinTerrain] + 600',
            'targetDatasource': 'Jingjin',
            'resultGridName': 'MathExpression',
            'extractRegion': iserver.Polygon([[0, 0], [0, 5], [5, 5]])})
        struct = params.toServerJSONObject()
        self.assertFalse('dataset' in struct, "dataset belongs in the URL")
        self.assertEqual(struct['expression'], '[Jingjin.JingjinTerrain] + 600')
        self.assertEqual((struct['isZip'], struct['ignoreNoValue'],
                          struct['deleteExistResultDataset']),
                         (False, False, False))
        self.assertEqual(struct['extractRegion']['type'], 'REGION')
        self.assertEqual(struct['extractRegion']['parts'], [4])
        self.assertEqual(struct['bounds'], None)
    def testThemeParameters(self):
        theme = iserver.ThemeGraduatedSymbol({'expression': 'POP_1994'})
        params = iserver.ThemeParameters({
            'themes': [theme],
            'datasetNames': ['Countries'],
            'dataSourceNames': ['World'],
            'displayFilters': ['SmID > 10'],
            'joinItems': [{'foreignTableName': 'Capitals',
                           'joinFilter': 'Countries.Name = Capitals.Country',
                           'joinType': 'INNERJOIN'}]})
        struct = params.toServerJSONObject()
        self.assertEqual(len(struct), 1)
        self.assertEqual((struct[0]['type'], struct[0]['name']),
                         ('UGC', 'map'))
        layer, = struct[0]['subLayers']['layers']
        self.assertEqual(layer['name'], 'Countries@World')
        self.assertEqual((layer['type'], layer['ugcLayerType']),
                         ('UGC', 'THEME'))
        self.assertEqual(layer['datasetInfo'],
                         {'name': 'Countries', 'dataSourceName': 'World'})
        self.assertEqual(layer['theme']['expression'], 'POP_1994')
        self.assertEqual(layer['displayFilter'], 'SmID > 10')
        self.assertEqual(layer['joinItems'][0]['foreignTableName'],
                         'Capitals')
        #no filters or joins unless given
        params = iserver.ThemeParameters({'themes': [theme],
                                          'datasetNames': ['Countries'],
                                          'dataSourceNames': ['World']})
        layer, = params.toServerJSONObject()[0]['subLayers']['layers']
        self.assertFalse('displayFilter' in layer or 'joinItems' in layer)
    def testThemeParametersShortLists(self):
        theme = iserver.ThemeGraduatedSymbol({'expression': 'POP_1994'})
        params = iserver.ThemeParameters({'themes': [theme]})
        layer, = params.toServerJSONObject()[0]['subLayers']['layers']
        self.assertEqual(layer['name'], None)
        self.assertEqual(layer['datasetInfo'],
                         {'name': None, 'dataSourceName': None})
        self.assertEqual(layer['theme']['expression'], 'POP_1994')
        params = iserver.ThemeParameters({'themes': [theme, theme],
                                          'datasetNames': ['Countries'],
                                          'dataSourceNames': ['World'],
                                          'displayFilters': []})
        first, second = params.toServerJSONObject()[0]['subLayers']['layers']
        self.assertEqual(first['name'], 'Countries@World')
        self.assertEqual(second['name'], None)
        self.assertFalse('displayFilter' in second)

if __name__ == '__main__':
    unittest.main()
