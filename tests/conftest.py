import io
import os

import pytest

from doxml2man.builder import parse_doxml
from doxml2man.events import EventReader, open_events

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data')


@pytest.fixture
def xml_dir():
    return DATA_DIR


@pytest.fixture
def make_reader():
    def _make(xml):
        return EventReader(io.BytesIO(xml.encode('utf-8')), '<test>')
    return _make


@pytest.fixture
def qbfoo():
    """(headerfile, functions, structures) of the sample header."""
    with open_events(os.path.join(DATA_DIR, 'qbfoo_8h.xml')) as reader:
        return parse_doxml(reader)
