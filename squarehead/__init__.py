# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Squarehead Service
==================
Square-dance club duty scheduling: member directory, squarehead rotation,
reminder selection and reminder e-mail dispatch.
"""

__version__ = "1.0.0"
