"""MenoWell — menopause wellness tracking analytics."""

__version__ = "0.1.0"
