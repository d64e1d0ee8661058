import os
import sys

# Make `weather_report` importable when pytest runs from a checkout that has
# not been pip-installed.
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
