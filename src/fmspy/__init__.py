from datetime import datetime
__NAME__ = "fmspy"
__DESCRIPTION__ = "Flight plan, lateral geometry and vertical profile guidance core"
__LICENSE__ = "MIT"
__LICENSEURL__ = "https://mit-license.org/"
__COPYRIGHT__ = f"© 2022-{datetime.now().strftime('%Y')} fmspy developers"
__version__ = "0.4.2"
__version_info__ = tuple(map(int, __version__.split(".")))
__version_name__ = "Cirrus"
__author__ = "fmspy developers"
