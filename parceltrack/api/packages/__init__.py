# -*- coding: utf-8 -*-
from .packages import PackageHandler, PackageRefreshHandler, PackagesHandler, PackagesRefreshHandler
