"""
   doxml2man
   =========

   Converts doxygen XML output of C headers into troff man pages.

   :license: BSD.
"""
from .builder import parse_doxml
from .formatter import PageConfig, format_man_page
from .resolver import resolve_structures

__version__ = '1.0.0'
