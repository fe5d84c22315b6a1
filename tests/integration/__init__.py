"""tests.integration package

Integration suites exercise the service through its HTTP endpoints.  They are
marked ``integration`` so a fast unit-only run is ``pytest -m "not
integration"``.
"""
