"""
Contains the core elements that are used within hdkeys

Core:
    -Provides the reference formats and constants for extended keys
    -Provides custom exceptions for the key derivation engine
    -Provides byte stream readers and bounded byte buffers
"""
# core/__init__.py
from hdkeys.core.byte_buffer import *
from hdkeys.core.byte_stream import *
from hdkeys.core.exceptions import *
from hdkeys.core.formats import *
from hdkeys.core.logging import *
