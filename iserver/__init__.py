# coding: utf-8
"""iserver is a Python binding to the SuperMap iServer REST API. Parameter
   objects are built from option mappings and serialized to the JSON the
   server expects; answers are turned back into typed result objects.

   Getting Started with iserver
   ============================

   Querying a map by bounds:

      >>> import iserver
      >>> url = "http://localhost:8090/iserver/services/map-world/rest/maps/World"
      >>> params = iserver.QueryByBoundsParameters({
      ...     'queryParams': [iserver.FilterParameter({'name': 'Capitals@World'})],
      ...     'bounds': iserver.Bounds(0, 0, 60, 39)})
      >>> result = iserver.QueryByBoundsService(url).processAsync(params)
      >>> result.recordsets[0].features[0].attributes['CAPITAL']
      'Beijing'

   Listening for the outcome instead of reading the return value:

      >>> def completed(result):
      ...     print(result.totalCount)
      >>> def failed(error):
      ...     print(error.code, error.message)
      >>> service = iserver.QueryBySQLService(url, {'eventListeners': {
      ...     'processCompleted': completed, 'processFailed': failed}})

   Sending a graduated symbol theme:

      >>> theme = iserver.ThemeGraduatedSymbol({'expression': 'POP_1994',
      ...                                       'baseValue': 3000000})
      >>> theme.flow.flowEnabled = True
      >>> info = iserver.ThemeService(url).processAsync(
      ...     iserver.ThemeParameters({'themes': [theme],
      ...                              'datasetNames': ['Countries'],
      ...                              'dataSourceNames': ['World']}))
      >>> layers = iserver.GetLayersInfoService(
      ...     url, {'resourceID': info.newResourceID}).processAsync()
   """

import logging

from iserver.geometry import *
from iserver.styles import *
from iserver.themes import *
from iserver.layers import *
from iserver.parameters import *
from iserver.server import *

logging.getLogger(__name__).addHandler(logging.NullHandler())
