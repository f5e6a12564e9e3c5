# -*- coding: utf-8 -*-
from .carriers import CarriersHandler, ValidateTrackingNumberHandler
