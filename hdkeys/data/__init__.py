"""
Methods for representing extended keys as text
"""
# data/__init__.py
from hdkeys.data.codec import *
