# -*- coding: utf-8 -*-
from . import carriers, healthcheck, packages, settings
